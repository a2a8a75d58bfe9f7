"""Zone projection with wall-clock pinning.

Each occurrence is converted to the target zone to obtain the target-zone
calendar date, then its hour/minute/second are overwritten with the caller's
reference time of day. The displayed time therefore stays constant across the
whole sequence while the date follows the target zone.
"""

import logging
from datetime import datetime, time
from typing import Union

from ..timezone import parse_wall_clock, set_wall_clock, to_zone

logger = logging.getLogger(__name__)


def render(dt: datetime) -> str:
    """Render a zoned datetime as ISO-8601 with milliseconds and offset."""
    return dt.isoformat(timespec="milliseconds")


def pin(instant: datetime, target_zone: str, wall_clock: time) -> datetime:
    """Convert ``instant`` to ``target_zone`` and pin its time of day."""
    return set_wall_clock(to_zone(instant, target_zone), wall_clock)


def project(instant: datetime, target_zone: str, wall_clock: Union[time, str]) -> str:
    """Project an occurrence into ``target_zone`` at a fixed wall-clock time.

    Args:
        instant: Occurrence instant (naive values are taken as UTC)
        target_zone: IANA zone identifier
        wall_clock: Time of day to pin, or an ISO datetime/time literal to take it from

    Returns:
        ISO-8601 string such as ``2024-09-29T04:45:00.000+01:00``

    Raises:
        TimezoneError: If the zone is unknown or the wall clock is unparsable
    """
    if isinstance(wall_clock, str):
        wall_clock = parse_wall_clock(wall_clock)
    return render(pin(instant, target_zone, wall_clock))
