"""Recurrence-specific exceptions for error handling."""

from typing import Optional

from ..timezone import TimezoneError


class RecurrenceError(Exception):
    """Base exception for recurrence-related errors."""

    def __init__(self, message: str, rule_text: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.rule_text = rule_text


class RuleParseError(RecurrenceError):
    """Exception raised when rule text cannot be parsed."""


class ExpansionError(RecurrenceError):
    """Exception raised when a rule cannot be expanded into occurrences."""


__all__ = [
    "ExpansionError",
    "RecurrenceError",
    "RuleParseError",
    "TimezoneError",
]
