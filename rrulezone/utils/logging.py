"""Logging setup for the rrulezone command line.

Library modules only call ``logging.getLogger(__name__)``; handlers are
attached to the ``rrulezone`` logger by :func:`setup_logging`, which the CLI
runs once per invocation.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import TYPE_CHECKING, Any, Optional, TextIO

if TYPE_CHECKING:
    from ..config.settings import RRuleZoneSettings

# Custom log level between DEBUG and INFO
VERBOSE = 15
logging.addLevelName(VERBOSE, "VERBOSE")

THIRD_PARTY_LOGGERS = ("dateutil", "pytz")

CONSOLE_FORMAT = "%(levelname)s %(name)s: %(message)s"
FILE_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
FILE_FORMAT_WITH_FUNCTIONS = (
    "%(asctime)s %(levelname)s %(name)s %(funcName)s:%(lineno)d: %(message)s"
)


def get_log_level(level_name: str) -> int:
    """Convert a level name (including VERBOSE) to its numeric value."""
    level_name = (level_name or "").upper()
    if level_name == "VERBOSE":
        return VERBOSE
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


def stream_supports_color(stream: Any) -> bool:
    """True for terminals that have not opted out via NO_COLOR or TERM=dumb."""
    if "NO_COLOR" in os.environ or os.environ.get("TERM", "").lower() == "dumb":
        return False
    isatty = getattr(stream, "isatty", None)
    return bool(isatty and isatty())


class ConsoleFormatter(logging.Formatter):
    """Console formatter that tints whole lines by level."""

    LEVEL_COLORS = {
        logging.DEBUG: "\033[90m",
        VERBOSE: "\033[36m",
        logging.INFO: "\033[32m",
        logging.WARNING: "\033[33m",
        logging.ERROR: "\033[31m",
        logging.CRITICAL: "\033[1;31m",
    }
    RESET = "\033[0m"

    def __init__(self, fmt: str = CONSOLE_FORMAT, use_colors: bool = False) -> None:
        super().__init__(fmt)
        self.use_colors = use_colors

    def format(self, record: logging.LogRecord) -> str:
        formatted = super().format(record)
        color = self.LEVEL_COLORS.get(record.levelno) if self.use_colors else None
        return f"{color}{formatted}{self.RESET}" if color else formatted


def _file_handler(settings: "RRuleZoneSettings") -> RotatingFileHandler:
    log_settings = settings.logging
    log_dir = settings.log_dir
    log_dir.mkdir(parents=True, exist_ok=True)

    handler = RotatingFileHandler(
        log_dir / f"{log_settings.file_prefix}.log",
        maxBytes=log_settings.max_log_bytes,
        backupCount=log_settings.max_log_files,
        encoding="utf-8",
    )
    handler.setLevel(get_log_level(log_settings.file_level))
    file_format = (
        FILE_FORMAT_WITH_FUNCTIONS if log_settings.include_function_names else FILE_FORMAT
    )
    handler.setFormatter(logging.Formatter(file_format, datefmt="%Y-%m-%d %H:%M:%S"))
    return handler


def setup_logging(
    settings: "RRuleZoneSettings", stream: Optional[TextIO] = None
) -> logging.Logger:
    """Set up the ``rrulezone`` logger from settings.

    Handlers from a previous call are closed and replaced.

    Args:
        settings: Application settings holding a ``logging`` section
        stream: Console stream (defaults to stderr)

    Returns:
        Configured package logger
    """
    logger = logging.getLogger("rrulezone")
    logger.setLevel(logging.DEBUG)  # handlers filter
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    log_settings = settings.logging

    if log_settings.console_enabled:
        console_stream = stream if stream is not None else sys.stderr
        console_handler = logging.StreamHandler(console_stream)
        console_handler.setLevel(get_log_level(log_settings.console_level))
        console_handler.setFormatter(
            ConsoleFormatter(
                use_colors=log_settings.console_colors and stream_supports_color(console_stream)
            )
        )
        logger.addHandler(console_handler)

    if log_settings.file_enabled:
        file_handler = _file_handler(settings)
        logger.addHandler(file_handler)
        logger.debug(f"Logging to file: {file_handler.baseFilename}")

    third_party_level = get_log_level(log_settings.third_party_level)
    for lib in THIRD_PARTY_LOGGERS:
        logging.getLogger(lib).setLevel(third_party_level)

    return logger


def apply_command_line_overrides(
    settings: "RRuleZoneSettings", args: Any
) -> "RRuleZoneSettings":
    """Apply command-line argument overrides to logging settings.

    Priority: Command-line > Environment > YAML > Defaults. Modifies the
    settings object in place and returns it for convenience.
    """
    if getattr(args, "log_level", None):
        settings.logging.console_level = args.log_level
        settings.logging.file_level = args.log_level

    if getattr(args, "verbose", False):
        settings.logging.console_level = "VERBOSE"
        settings.logging.file_level = "VERBOSE"

    if getattr(args, "quiet", False):
        settings.logging.console_level = "ERROR"

    if getattr(args, "log_dir", None):
        settings.logging.file_enabled = True
        settings.logging.file_directory = args.log_dir

    if getattr(args, "no_log_colors", False):
        settings.logging.console_colors = False

    return settings
