"""Date-time capability for rrulezone.

Provides zone lookup with a zoneinfo + pytz fallback strategy, instant
conversion between zones, calendar-safe field arithmetic and wall-clock
overwrite. The recurrence core goes through this service for every zone or
calendar operation.
"""

import logging
import re
from datetime import datetime, time, timezone as dt_timezone
from typing import Any, Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import pytz
from dateutil.parser import isoparse, isoparser
from dateutil.relativedelta import relativedelta

logger = logging.getLogger(__name__)

UTC = dt_timezone.utc

# Compact civil literal used by DTSTART/UNTIL: YYYYMMDD[THHMMSS]
_CIVIL_PATTERN = re.compile(r"^(\d{4})(\d{2})(\d{2})(?:T(\d{2})?(\d{2})?(\d{2})?)?")

_CALENDAR_UNITS = frozenset({"days", "weeks", "months", "years"})


class TimezoneError(Exception):
    """Raised when timezone or civil date/time operations fail."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class TimezoneService:
    """Centralized date-time service for rrulezone.

    Zones are resolved with zoneinfo first and pytz when the zoneinfo
    database does not know the key. Resolved zones are cached per instance.
    """

    def __init__(self) -> None:
        """Initialize timezone service."""
        self._zones: dict[str, Any] = {}

    def get_zone(self, zone_name: str) -> Any:
        """Resolve an IANA zone identifier to a tzinfo object.

        Args:
            zone_name: IANA identifier such as "Europe/London" or "UTC".

        Returns:
            A tzinfo usable with ``datetime.astimezone``.

        Raises:
            TimezoneError: If neither zoneinfo nor pytz knows the zone.
        """
        if not isinstance(zone_name, str) or not zone_name.strip():
            raise TimezoneError(f"Invalid time zone identifier: {zone_name!r}")

        cached = self._zones.get(zone_name)
        if cached is not None:
            return cached

        zone: Any = None
        try:
            zone = ZoneInfo(zone_name)
        except (ZoneInfoNotFoundError, ValueError, OSError):
            # OSError covers keys naming tzdata directories such as "America"
            logger.debug(f"zoneinfo has no zone {zone_name!r}, trying pytz")

        if zone is None:
            try:
                zone = pytz.timezone(zone_name)
            except pytz.UnknownTimeZoneError as e:
                raise TimezoneError(f"Unknown time zone: {zone_name}") from e

        self._zones[zone_name] = zone
        logger.debug(f"Resolved time zone {zone_name!r} -> {zone!r}")
        return zone

    def to_zone(self, instant: datetime, zone_name: str) -> datetime:
        """Express an absolute instant in another zone's civil representation."""
        if not isinstance(instant, datetime):
            raise TypeError(f"Expected datetime object, got {type(instant)}")
        if instant.tzinfo is None:
            instant = instant.replace(tzinfo=UTC)

        zone = self.get_zone(zone_name)
        converted = instant.astimezone(zone)
        if hasattr(zone, "normalize"):
            converted = zone.normalize(converted)
        return converted

    def set_wall_clock(self, local: datetime, wall_clock: time) -> datetime:
        """Overwrite hour/minute/second of a zoned datetime, keeping its date and zone.

        The UTC offset is re-derived for the new civil time, so pinning across a
        DST boundary yields the offset in force at the pinned time.
        """
        naive = local.replace(
            hour=wall_clock.hour,
            minute=wall_clock.minute,
            second=wall_clock.second,
            microsecond=0,
            tzinfo=None,
        )
        zone = local.tzinfo
        if zone is None:
            return naive
        if hasattr(zone, "localize"):
            # pytz tzinfo carries a fixed offset; re-localize from the named zone
            base_zone = pytz.timezone(zone.zone)
            return base_zone.normalize(base_zone.localize(naive))
        return naive.replace(tzinfo=zone)

    def shift(self, dt: datetime, unit: str, amount: int) -> datetime:
        """Calendar-safe field arithmetic.

        Month and year steps clamp the day-of-month to the target month's
        length (Jan 31 + 1 month -> Feb 28/29).
        """
        if unit not in _CALENDAR_UNITS:
            raise ValueError(f"Unsupported calendar unit: {unit}")
        return dt + relativedelta(**{unit: amount})

    def parse_compact_civil(
        self, value: str, default_time: Optional[tuple[int, int, int]] = None
    ) -> datetime:
        """Parse a ``YYYYMMDD[THHMMSS]`` literal and interpret it as UTC.

        Args:
            value: Compact civil literal, optionally followed by ``Z``.
            default_time: Per-field replacements (hour, minute, second) used
                when the corresponding field is absent or zero.

        Returns:
            UTC-aware datetime.

        Raises:
            TimezoneError: If the literal does not hold a valid calendar date.
        """
        match = _CIVIL_PATTERN.match(value or "")
        if not match:
            raise TimezoneError(f"Unable to parse civil date/time: {value!r}")

        year, month, day = (int(match.group(i)) for i in range(1, 4))
        fields = [int(match.group(i) or 0) for i in range(4, 7)]
        if default_time is not None:
            fields = [field or fallback for field, fallback in zip(fields, default_time)]

        try:
            return datetime(year, month, day, *fields, tzinfo=UTC)
        except ValueError as e:
            raise TimezoneError(f"Invalid civil date/time {value!r}: {e}") from e

    def parse_instant(self, value: str) -> datetime:
        """Parse a full ISO-8601 instant; naive values are taken as UTC."""
        try:
            dt = isoparse(value)
        except (ValueError, OverflowError) as e:
            raise TimezoneError(f"Failed to parse ISO datetime '{value}': {e}") from e
        if dt.tzinfo is None:
            return dt.replace(tzinfo=UTC)
        return dt.astimezone(UTC)

    def parse_wall_clock(self, value: str) -> time:
        """Extract the civil time of day from an ISO datetime or time literal.

        Any UTC offset in the literal is ignored: the hour/minute/second are
        taken exactly as written.
        """
        if not isinstance(value, str) or not value.strip():
            raise TimezoneError(f"Invalid reference time: {value!r}")

        text = value.strip()
        try:
            if "T" in text or "-" in text[:8]:
                parsed_time = isoparse(text).time()
            else:
                parsed_time = isoparser().parse_isotime(text)
        except (ValueError, OverflowError) as e:
            raise TimezoneError(f"Failed to parse reference time '{value}': {e}") from e
        return time(parsed_time.hour, parsed_time.minute, parsed_time.second)


# Global service instance
_timezone_service: Optional[TimezoneService] = None


def get_timezone_service() -> TimezoneService:
    """Get global timezone service instance.

    Returns:
        Singleton TimezoneService instance.
    """
    if globals()["_timezone_service"] is None:
        globals()["_timezone_service"] = TimezoneService()
    return globals()["_timezone_service"]


# Convenience functions for direct use
def get_zone(zone_name: str) -> Any:
    """Resolve a zone identifier."""
    return get_timezone_service().get_zone(zone_name)


def to_zone(instant: datetime, zone_name: str) -> datetime:
    """Convert an instant to a zone's civil representation."""
    return get_timezone_service().to_zone(instant, zone_name)


def set_wall_clock(local: datetime, wall_clock: time) -> datetime:
    """Overwrite the civil time of day of a zoned datetime."""
    return get_timezone_service().set_wall_clock(local, wall_clock)


def shift(dt: datetime, unit: str, amount: int) -> datetime:
    """Add calendar units to a datetime."""
    return get_timezone_service().shift(dt, unit, amount)


def parse_compact_civil(
    value: str, default_time: Optional[tuple[int, int, int]] = None
) -> datetime:
    """Parse a compact civil literal as UTC."""
    return get_timezone_service().parse_compact_civil(value, default_time)


def parse_instant(value: str) -> datetime:
    """Parse an ISO-8601 instant."""
    return get_timezone_service().parse_instant(value)


def parse_wall_clock(value: str) -> time:
    """Parse a reference time-of-day literal."""
    return get_timezone_service().parse_wall_clock(value)
