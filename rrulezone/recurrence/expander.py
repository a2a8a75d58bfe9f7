"""Expansion entry points: rule text or parsed rule in, projected strings out."""

import logging
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from ..timezone import TimezoneError, get_zone, parse_wall_clock
from .exceptions import RecurrenceError
from .generator import iter_occurrences
from .models import RecurrenceRule
from .parser import parse
from .projector import pin, render

if TYPE_CHECKING:
    from ..config.settings import RRuleZoneSettings

logger = logging.getLogger(__name__)


def expand(
    rule: RecurrenceRule,
    target_zone: str,
    reference_local_time: str,
    limit: Optional[int] = None,
    until: Optional[datetime] = None,
    settings: Optional["RRuleZoneSettings"] = None,
) -> list[str]:
    """Expand a parsed rule into strings in ``target_zone``.

    The reference time is parsed once and pinned on every occurrence.

    Raises:
        TimezoneError: If the zone is unknown or the reference time unparsable
        ExpansionError: If the rule has no start instant
    """
    wall_clock = parse_wall_clock(reference_local_time)
    get_zone(target_zone)

    return [
        render(pin(occurrence.instant, target_zone, wall_clock))
        for occurrence in iter_occurrences(rule, limit=limit, until=until, settings=settings)
    ]


def generate(
    text: str,
    target_zone: str,
    reference_local_time: str,
    settings: Optional["RRuleZoneSettings"] = None,
) -> list[str]:
    """Parse zoned rule text and expand it into ``target_zone``.

    Empty or malformed rule text, an unknown zone and an unparsable reference
    time all yield an empty list.

    Example:
        >>> generate(
        ...     "DTSTART;TZID=America/New_York:20240929T044500\\n"
        ...     "RRULE:FREQ=DAILY;INTERVAL=1;COUNT=2",
        ...     "Europe/London",
        ...     "2024-09-29T04:45:00",
        ... )
        ['2024-09-29T04:45:00.000+01:00', '2024-09-30T04:45:00.000+01:00']
    """
    rule = parse(text, reference_local_time)
    if rule is None:
        return []

    try:
        return expand(rule, target_zone, reference_local_time, settings=settings)
    except (TimezoneError, RecurrenceError) as e:
        logger.warning(f"Cannot expand rule into {target_zone!r}: {e.message}")
        return []
