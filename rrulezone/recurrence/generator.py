"""Occurrence generation for parsed recurrence rules.

A single cursor starts at ``rule.start`` and moves forward per frequency.
The loop stops once the occurrence limit is reached or the cursor passes the
until bound (``current > until``, checked before emitting). All arithmetic
happens in the rule's native UTC zone; projection into a target zone is the
projector's job.
"""

import logging
from collections.abc import Iterator
from datetime import datetime
from typing import TYPE_CHECKING, Optional

from dateutil.relativedelta import FR, MO, SA, SU, TH, TU, WE, relativedelta

from ..timezone import shift
from .exceptions import ExpansionError
from .models import Frequency, Occurrence, RecurrenceRule, Weekday

if TYPE_CHECKING:
    from ..config.settings import RRuleZoneSettings

logger = logging.getLogger(__name__)

_FREQUENCY_UNITS = {
    Frequency.DAILY: "days",
    Frequency.WEEKLY: "weeks",
    Frequency.MONTHLY: "months",
    Frequency.YEARLY: "years",
}

# dateutil weekday helpers indexed by Weekday value (Sunday first)
_RELATIVE_WEEKDAYS = (SU, MO, TU, WE, TH, FR, SA)


def _settings(settings: Optional["RRuleZoneSettings"]) -> "RRuleZoneSettings":
    if settings is not None:
        return settings
    from ..config.settings import get_settings  # noqa: PLC0415

    return get_settings()


def advance(rule: RecurrenceRule, current: datetime) -> datetime:
    """Move the cursor one step.

    WEEKLY rules with BYDAY walk day by day so every weekday can be tested;
    every other mode jumps ``interval`` units of the rule's frequency.
    """
    if rule.frequency is Frequency.WEEKLY and rule.by_weekday:
        return shift(current, "days", 1)
    return shift(current, _FREQUENCY_UNITS[rule.frequency], rule.effective_interval)


def nth_weekday_of_month(current: datetime, weekday: Weekday, position: int) -> Optional[datetime]:
    """Pick the Nth (1-based) or last (-1) ``weekday`` in ``current``'s month.

    Candidates fall at midnight of their day in ``current``'s zone. Returns
    None when the month has no such position.
    """
    month_start = current.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    relative_day = _RELATIVE_WEEKDAYS[weekday]

    if position == -1:
        candidate = month_start + relativedelta(day=31, weekday=relative_day(-1))
    elif position > 0:
        candidate = month_start + relativedelta(weekday=relative_day(+position))
    else:
        return None

    if (candidate.year, candidate.month) != (month_start.year, month_start.month):
        return None
    return candidate


def _candidate(rule: RecurrenceRule, current: datetime) -> Optional[datetime]:
    """The occurrence the cursor yields in its current period, if any."""
    if rule.frequency is Frequency.WEEKLY and rule.by_weekday:
        return current if Weekday.of(current) in rule.by_weekday else None

    if rule.uses_nth_weekday:
        # uses_nth_weekday guarantees both tuples are non-empty
        return nth_weekday_of_month(current, rule.by_weekday[0], rule.by_set_position[0])  # type: ignore[index]

    return current


def iter_occurrences(
    rule: RecurrenceRule,
    limit: Optional[int] = None,
    until: Optional[datetime] = None,
    settings: Optional["RRuleZoneSettings"] = None,
) -> Iterator[Occurrence]:
    """Yield occurrences of ``rule`` in ascending order.

    Args:
        rule: Parsed rule with a start instant
        limit: Override for the occurrence limit; 0 yields nothing (defaults
            to ``rule.count``, then the configured default occurrence limit)
        until: Override for the until bound (defaults to ``rule.until``)
        settings: Settings supplying the default limit and cursor step cap

    Yields:
        Occurrence instances in the rule's native UTC zone

    Raises:
        ExpansionError: If the rule has no start instant
    """
    if rule.start is None:
        raise ExpansionError("Rule has no start instant; parse it with a DTSTART declaration")

    config = _settings(settings)
    if limit is not None:
        effective_limit = limit
    else:
        effective_limit = rule.count or config.default_occurrence_limit
    effective_until = until or rule.until
    max_steps = config.max_cursor_steps

    logger.debug(
        "Expanding rule: freq=%s interval=%d start=%s until=%s limit=%d",
        rule.frequency.value,
        rule.effective_interval,
        rule.start.isoformat(),
        effective_until.isoformat() if effective_until else "<none>",
        effective_limit,
    )

    current = rule.start
    emitted = 0
    steps = 0

    while emitted < effective_limit:
        if effective_until is not None and current > effective_until:
            break

        candidate = _candidate(rule, current)
        if candidate is not None:
            yield Occurrence(instant=candidate, is_all_day=rule.is_all_day)
            emitted += 1

        current = advance(rule, current)
        steps += 1
        if steps >= max_steps and emitted < effective_limit:
            logger.warning(
                f"Stopping expansion after {steps} cursor steps with {emitted} of "
                f"{effective_limit} occurrences"
            )
            break

    logger.debug("Expansion produced %d occurrences in %d steps", emitted, steps)


def get_occurrences(
    rule: RecurrenceRule,
    limit: Optional[int] = None,
    until: Optional[datetime] = None,
    settings: Optional["RRuleZoneSettings"] = None,
) -> list[Occurrence]:
    """Materialize :func:`iter_occurrences` into a list."""
    return list(iter_occurrences(rule, limit=limit, until=until, settings=settings))
