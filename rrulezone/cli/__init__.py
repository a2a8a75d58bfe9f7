"""Command-line interface for rrulezone."""

import json
import logging
import sys
from typing import Optional

from ..config.settings import RRuleZoneSettings
from ..recurrence import (
    RecurrenceError,
    TimezoneError,
    expand,
    format_rule,
    parse,
    parse_rrule,
)
from ..utils.logging import apply_command_line_overrides, setup_logging
from .parser import create_parser

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_INVALID = 1
EXIT_ERROR = 2


def _print_json(payload: dict) -> None:
    print(json.dumps(payload, indent=2))


def run_expand(args, settings: RRuleZoneSettings) -> int:
    rule = parse(args.rule, args.time)
    if rule is None:
        logger.error("Rule text needs a DTSTART;TZID=... line and an RRULE: line")
        return EXIT_INVALID

    zone = args.zone or settings.default_target_zone
    try:
        dates = expand(rule, zone, args.time, limit=args.limit, settings=settings)
    except (TimezoneError, RecurrenceError) as e:
        logger.error(e.message)
        return EXIT_ERROR

    for date in dates:
        print(date)
    return EXIT_OK


def run_parse(args, settings: RRuleZoneSettings) -> int:
    rule = parse(args.rule)
    if rule is None:
        logger.error("Rule text needs a DTSTART;TZID=... line and an RRULE: line")
        return EXIT_INVALID

    _print_json(rule.model_dump(mode="json"))
    return EXIT_OK


def run_validate(args, settings: RRuleZoneSettings) -> int:
    result = parse_rrule(args.rule)
    _print_json(result.model_dump(mode="json", exclude_none=True))
    return EXIT_OK if result.valid else EXIT_INVALID


def run_format(args, settings: RRuleZoneSettings) -> int:
    rule = parse(args.rule)
    if rule is None:
        logger.error("Rule text needs a DTSTART;TZID=... line and an RRULE: line")
        return EXIT_INVALID

    print(format_rule(rule))
    return EXIT_OK


COMMANDS = {
    "expand": run_expand,
    "parse": run_parse,
    "validate": run_validate,
    "format": run_format,
}


def main(argv: Optional[list[str]] = None) -> int:
    """Parse arguments, configure logging and run the selected command.

    Returns:
        Process exit code: 0 on success, 1 for invalid rule text, 2 for
        zone or reference-time errors
    """
    parser = create_parser()
    args = parser.parse_args(argv)

    settings = RRuleZoneSettings(config_file=args.config)
    apply_command_line_overrides(settings, args)
    setup_logging(settings)

    logger.debug(f"Running command {args.command!r}")
    return COMMANDS[args.command](args, settings)


__all__ = ["create_parser", "main"]


if __name__ == "__main__":
    sys.exit(main())
