"""
Timezone package for rrulezone.

Provides the date-time capability the recurrence core relies on: zone
lookup (zoneinfo + pytz fallback), instant conversion, calendar-safe
arithmetic and wall-clock pinning.

Example usage:
    >>> from datetime import datetime, time, timezone
    >>> from rrulezone.timezone import set_wall_clock, to_zone
    >>>
    >>> instant = datetime(2024, 9, 29, 4, 45, tzinfo=timezone.utc)
    >>> london = to_zone(instant, "Europe/London")
    >>> set_wall_clock(london, time(9, 0)).isoformat()
    '2024-09-29T09:00:00+01:00'
"""

from .service import (
    UTC,
    TimezoneError,
    TimezoneService,
    get_timezone_service,
    get_zone,
    parse_compact_civil,
    parse_instant,
    parse_wall_clock,
    set_wall_clock,
    shift,
    to_zone,
)

__all__ = [
    "UTC",
    "TimezoneError",
    "TimezoneService",
    "get_timezone_service",
    "get_zone",
    "parse_compact_civil",
    "parse_instant",
    "parse_wall_clock",
    "set_wall_clock",
    "shift",
    "to_zone",
]
