"""rrulezone - recurrence rule expansion with time zone re-projection.

Parses ``DTSTART;TZID=...`` + ``RRULE:...`` text, expands it into concrete
occurrences and renders each one in a target zone at a fixed wall-clock time.
"""

__version__ = "1.0.0"
__author__ = "rrulezone Team"

from .recurrence import (  # noqa: E402
    ExpansionError,
    Frequency,
    Occurrence,
    ParseResult,
    RecurrenceError,
    RecurrenceRule,
    RuleParseError,
    TimezoneError,
    Weekday,
    advance,
    expand,
    format_rule,
    generate,
    get_occurrences,
    iter_occurrences,
    parse,
    parse_rrule,
    project,
)

__all__ = [
    "ExpansionError",
    "Frequency",
    "Occurrence",
    "ParseResult",
    "RecurrenceError",
    "RecurrenceRule",
    "RuleParseError",
    "TimezoneError",
    "Weekday",
    "__version__",
    "advance",
    "expand",
    "format_rule",
    "generate",
    "get_occurrences",
    "iter_occurrences",
    "parse",
    "parse_rrule",
    "project",
]
