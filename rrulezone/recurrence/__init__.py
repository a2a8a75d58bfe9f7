"""Recurrence rule parsing, expansion, projection and formatting."""

from .exceptions import ExpansionError, RecurrenceError, RuleParseError, TimezoneError
from .expander import expand, generate
from .formatter import format_rule
from .generator import advance, get_occurrences, iter_occurrences, nth_weekday_of_month
from .models import Frequency, Occurrence, ParseResult, RecurrenceRule, Weekday
from .parser import parse, parse_rrule
from .projector import project

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
    "advance",
    "expand",
    "format_rule",
    "generate",
    "get_occurrences",
    "iter_occurrences",
    "nth_weekday_of_month",
    "parse",
    "parse_rrule",
    "project",
]
