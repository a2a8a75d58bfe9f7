"""Serialize a RecurrenceRule back to RRULE text."""

from ..timezone import UTC
from .models import RecurrenceRule

UNTIL_FORMAT = "%Y%m%dT%H%M%SZ"


def format_rule(rule: RecurrenceRule) -> str:
    """Render ``RRULE:FREQ=..;INTERVAL=..;COUNT=..;UNTIL=..``.

    Only fields present on the rule are written, in that fixed order. BYDAY,
    BYSETPOS and WKST are not written, so the output does not round-trip those
    fields.
    """
    parts = [f"FREQ={rule.frequency.value}"]

    if rule.interval is not None:
        parts.append(f"INTERVAL={rule.interval}")

    if rule.count is not None:
        parts.append(f"COUNT={rule.count}")

    if rule.until is not None:
        until = rule.until if rule.until.tzinfo is not None else rule.until.replace(tzinfo=UTC)
        parts.append(f"UNTIL={until.astimezone(UTC).strftime(UNTIL_FORMAT)}")

    return f"RRULE:{';'.join(parts)}"
