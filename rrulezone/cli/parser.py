"""Command-line argument parsing for rrulezone.

This module sets up the argument parser with one subcommand per public
operation plus the shared logging/config options.
"""

import argparse
from pathlib import Path

from .. import __version__


def decode_rule_text(value: str) -> str:
    """Accept rule text with literal ``\\n`` separators as typed in a shell."""
    return value.replace("\\n", "\n")


def positive_int(value: str) -> int:
    """Argument type accepting integers of at least 1."""
    try:
        number = int(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}") from e
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def create_parser() -> argparse.ArgumentParser:
    """Create the command-line argument parser.

    Returns:
        Configured ArgumentParser instance
    """
    parser = argparse.ArgumentParser(
        prog="rrulezone",
        description="Expand recurrence rules into occurrences in any time zone",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  rrulezone expand --zone Europe/London --time 2024-09-29T04:45:00 \\
      'DTSTART;TZID=America/New_York:20240929T044500\\nRRULE:FREQ=DAILY;COUNT=3'
  rrulezone parse 'DTSTART;TZID=UTC:20240929T044500\\nRRULE:FREQ=WEEKLY;BYDAY=MO,FR'
  rrulezone validate 'RRULE:FREQ=MONTHLY;INTERVAL=2;UNTIL=2025-01-01T00:00:00Z'
        """,
    )

    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    parser.add_argument(
        "--config", type=Path, default=None, help="Path to a YAML configuration file"
    )

    logging_group = parser.add_argument_group("logging")
    logging_group.add_argument(
        "--log-level",
        choices=["DEBUG", "VERBOSE", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Console and file log level",
    )
    logging_group.add_argument(
        "--verbose", "-v", action="store_true", help="Enable VERBOSE logging"
    )
    logging_group.add_argument(
        "--quiet", "-q", action="store_true", help="Only log errors to the console"
    )
    logging_group.add_argument("--log-dir", help="Write timestamped log files to this directory")
    logging_group.add_argument(
        "--no-log-colors", action="store_true", help="Disable colored console logs"
    )

    subparsers = parser.add_subparsers(dest="command", metavar="COMMAND")
    subparsers.required = True

    expand_parser = subparsers.add_parser(
        "expand", help="Expand DTSTART + RRULE text into dated occurrences"
    )
    expand_parser.add_argument("rule", type=decode_rule_text, help="Zoned rule text")
    expand_parser.add_argument(
        "--zone", "-z", default=None, help="Target IANA time zone (default from settings)"
    )
    expand_parser.add_argument(
        "--time",
        "-t",
        required=True,
        help="Reference local time whose hour/minute/second every occurrence keeps",
    )
    expand_parser.add_argument(
        "--limit", type=positive_int, default=None, help="Override the occurrence limit"
    )

    parse_parser = subparsers.add_parser("parse", help="Parse zoned rule text and print JSON")
    parse_parser.add_argument("rule", type=decode_rule_text, help="Zoned rule text")

    validate_parser = subparsers.add_parser(
        "validate", help="Validate a plain RRULE line and print the result as JSON"
    )
    validate_parser.add_argument("rule", help="Plain RRULE text")

    format_parser = subparsers.add_parser(
        "format", help="Parse zoned rule text and print it back as an RRULE line"
    )
    format_parser.add_argument("rule", type=decode_rule_text, help="Zoned rule text")

    return parser
