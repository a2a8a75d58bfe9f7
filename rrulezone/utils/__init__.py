"""Utility functions and helpers package."""

from .logging import (
    VERBOSE,
    ConsoleFormatter,
    apply_command_line_overrides,
    get_log_level,
    setup_logging,
    stream_supports_color,
)

__all__ = [
    "VERBOSE",
    "ConsoleFormatter",
    "apply_command_line_overrides",
    "get_log_level",
    "setup_logging",
    "stream_supports_color",
]
