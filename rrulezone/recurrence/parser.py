"""Rule parsing for zoned rule text and plain RRULE grammar.

Two entry points with different failure idioms:

* :func:`parse` reads ``DTSTART;TZID=...`` + ``RRULE:...`` text and returns
  ``None`` for anything malformed.
* :func:`parse_rrule` reads a bare ``RRULE:...`` line and returns a
  :class:`ParseResult` that reports errors instead of raising.

Unknown keys are ignored and unrecognized FREQ/WKST/BYDAY tokens are ignored
or defaulted silently.
"""

import logging
import re
from datetime import datetime
from typing import Any, Optional

from ..timezone import TimezoneError, parse_compact_civil, parse_instant
from .exceptions import RuleParseError
from .models import Frequency, ParseResult, RecurrenceRule, Weekday

logger = logging.getLogger(__name__)

DTSTART_PATTERN = re.compile(r"DTSTART;TZID=([^:]+):(\d{8}T\d{6})")
RRULE_PATTERN = re.compile(r"RRULE:(.+)")
RRULE_PREFIX = "RRULE:"

# UNTIL hour/minute/second that are absent or zero fall back to end of day
UNTIL_DEFAULT_TIME = (23, 59, 59)

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def _parse_int(value: Optional[str]) -> Optional[int]:
    """Read the leading integer of a value ("2x" -> 2), or None."""
    if not value:
        return None
    match = _LEADING_INT.match(value)
    return int(match.group(1)) if match else None


def _split_pairs(rule_part: str) -> list[tuple[str, str]]:
    """Split ``K=V;K=V`` into pairs; segments without ``=`` keep an empty value."""
    pairs = []
    for part in rule_part.split(";"):
        key, _, value = part.partition("=")
        pairs.append((key.strip(), value.strip()))
    return pairs


def _interval(value: str) -> int:
    interval = _parse_int(value)
    if interval is None or interval < 1:
        logger.debug(f"Ignoring INTERVAL={value!r}, using 1")
        return 1
    return interval


def _count(value: str) -> Optional[int]:
    count = _parse_int(value)
    if count is None or count < 1:
        logger.debug(f"Ignoring COUNT={value!r}")
        return None
    return count


def _frequency(value: str, current: Optional[Frequency]) -> Optional[Frequency]:
    frequency = Frequency.from_token(value)
    if frequency is None:
        logger.debug(f"Ignoring unrecognized FREQ={value!r}")
        return current
    return frequency


def parse(text: str, reference_local_time: Optional[str] = None) -> Optional[RecurrenceRule]:
    """Parse zoned rule text into a :class:`RecurrenceRule`.

    The DTSTART civil fields are interpreted as UTC; the TZID is kept in
    ``declared_zone`` but not applied to the start instant.

    Args:
        text: Rule text holding a start declaration and a recurrence declaration
        reference_local_time: Accepted for symmetry with :func:`generate`; unused

    Returns:
        Parsed rule, or None when either declaration is missing or malformed
    """
    if not text or not isinstance(text, str):
        return None

    dtstart_match = DTSTART_PATTERN.search(text)
    if not dtstart_match:
        logger.debug("Rule text has no DTSTART;TZID declaration")
        return None

    rrule_match = RRULE_PATTERN.search(text)
    if not rrule_match:
        logger.debug("Rule text has no RRULE declaration")
        return None

    declared_zone, start_literal = dtstart_match.groups()
    try:
        start = parse_compact_civil(start_literal)
    except TimezoneError as e:
        logger.debug(f"Invalid DTSTART {start_literal!r}: {e.message}")
        return None

    fields: dict[str, Any] = {
        "frequency": Frequency.DAILY,
        "start": start,
        "declared_zone": declared_zone,
        "week_start": Weekday.MO,
    }

    for key, value in _split_pairs(rrule_match.group(1)):
        if key == "FREQ":
            fields["frequency"] = _frequency(value, fields["frequency"])
        elif key == "INTERVAL":
            fields["interval"] = _interval(value)
        elif key == "UNTIL":
            try:
                fields["until"] = parse_compact_civil(value, default_time=UNTIL_DEFAULT_TIME)
            except TimezoneError as e:
                logger.debug(f"Ignoring UNTIL={value!r}: {e.message}")
        elif key == "WKST":
            fields["week_start"] = Weekday.from_token(value, default=fields["week_start"])
        elif key == "BYDAY":
            fields["by_weekday"] = tuple(
                Weekday.from_token(token.strip(), default=Weekday.MO)
                for token in value.split(",")
            )
        elif key == "BYSETPOS":
            positions = tuple(
                position
                for position in (_parse_int(token) for token in value.split(","))
                if position is not None
            )
            fields["by_set_position"] = positions or None
        elif key == "COUNT":
            fields["count"] = _count(value)

    return RecurrenceRule(**fields)


def _parse_plain(text: str) -> RecurrenceRule:
    if not text.startswith(RRULE_PREFIX):
        raise RuleParseError("Invalid RRULE format", rule_text=text)

    frequency: Optional[Frequency] = None
    interval: Optional[int] = None
    count: Optional[int] = None
    until: Optional[datetime] = None

    for key, value in _split_pairs(text[len(RRULE_PREFIX) :]):
        if key == "FREQ":
            frequency = _frequency(value, frequency)
        elif key == "INTERVAL":
            interval = _interval(value)
        elif key == "COUNT":
            count = _count(value)
        elif key == "UNTIL":
            until = parse_instant(value)

    if frequency is None:
        raise RuleParseError("FREQ is required", rule_text=text)

    return RecurrenceRule(frequency=frequency, interval=interval, count=count, until=until)


def parse_rrule(text: str) -> ParseResult:
    """Parse plain ``RRULE:`` grammar (no start declaration).

    UNTIL accepts a full ISO-8601 instant. Failures are reported in the
    result; nothing is raised.

    Example:
        >>> parse_rrule("RRULE:FREQ=WEEKLY;COUNT=4").rule.count
        4
        >>> parse_rrule("RRULE:COUNT=4").error
        'FREQ is required'
    """
    try:
        return ParseResult(valid=True, rule=_parse_plain(text))
    except RuleParseError as e:
        return ParseResult(valid=False, error=e.message)
    except Exception as e:
        logger.debug(f"Unexpected failure parsing {text!r}", exc_info=True)
        return ParseResult(valid=False, error=f"Parse error: {e}")
