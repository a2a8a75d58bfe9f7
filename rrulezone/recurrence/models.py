"""Data models for recurrence rules and their occurrences."""

from datetime import datetime
from enum import Enum, IntEnum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field, field_serializer


class Frequency(str, Enum):
    """Supported recurrence frequencies."""

    DAILY = "DAILY"
    WEEKLY = "WEEKLY"
    MONTHLY = "MONTHLY"
    YEARLY = "YEARLY"

    @classmethod
    def from_token(cls, token: str) -> Optional["Frequency"]:
        """Map a FREQ token to a member; tokens are case-sensitive."""
        try:
            return cls(token)
        except ValueError:
            return None


class Weekday(IntEnum):
    """Weekdays numbered Sunday=0 through Saturday=6.

    Member names double as the RRULE two-letter tokens.
    """

    SU = 0
    MO = 1
    TU = 2
    WE = 3
    TH = 4
    FR = 5
    SA = 6

    @classmethod
    def from_token(cls, token: str, default: Optional["Weekday"] = None) -> Optional["Weekday"]:
        """Map a two-letter token to a member, returning ``default`` when unknown."""
        member = cls.__members__.get(token)
        return member if member is not None else default

    @classmethod
    def of(cls, dt: datetime) -> "Weekday":
        """Weekday of a datetime's civil date (Python counts Monday=0)."""
        return cls((dt.weekday() + 1) % 7)

    @property
    def token(self) -> str:
        return self.name


class RecurrenceRule(BaseModel):
    """Structured recurrence description, immutable once parsed."""

    frequency: Frequency = Field(default=Frequency.DAILY, description="Recurrence frequency")
    interval: Optional[int] = Field(
        default=None, ge=1, description="INTERVAL as given; unset means 1"
    )

    start: Optional[datetime] = Field(
        default=None, description="First occurrence as a UTC instant"
    )
    declared_zone: Optional[str] = Field(
        default=None, description="TZID from the start declaration (not applied)"
    )

    until: Optional[datetime] = Field(default=None, description="Upper bound instant (UTC)")
    count: Optional[int] = Field(default=None, ge=1, description="Maximum occurrences")

    week_start: Optional[Weekday] = Field(default=None, description="WKST (informational)")
    by_weekday: Optional[tuple[Weekday, ...]] = Field(
        default=None, description="BYDAY weekdays in the order written"
    )
    by_set_position: Optional[tuple[int, ...]] = Field(
        default=None, description="BYSETPOS positions; only the first is used"
    )

    model_config = ConfigDict(frozen=True)

    @property
    def effective_interval(self) -> int:
        """Step count in units of frequency."""
        return self.interval or 1

    @property
    def is_all_day(self) -> bool:
        """DAILY rules carry no sub-day fields and are treated as all-day."""
        return self.frequency is Frequency.DAILY

    @property
    def uses_nth_weekday(self) -> bool:
        """True when MONTHLY expansion selects the Nth weekday of each month."""
        return (
            self.frequency is Frequency.MONTHLY
            and bool(self.by_weekday)
            and bool(self.by_set_position)
        )

    @field_serializer("start", "until", when_used="unless-none")
    def serialize_datetime(self, dt: datetime) -> str:
        """Serialize datetime fields to ISO format."""
        return dt.isoformat()

    @field_serializer("week_start", when_used="unless-none")
    def serialize_week_start(self, day: Weekday) -> str:
        return day.token

    @field_serializer("by_weekday", when_used="unless-none")
    def serialize_by_weekday(self, days: tuple[Weekday, ...]) -> list[str]:
        return [day.token for day in days]


class Occurrence(BaseModel):
    """A single generated occurrence in the rule's native (UTC) zone."""

    instant: datetime = Field(..., description="Occurrence instant")
    is_all_day: bool = Field(default=False, description="All-day occurrence flag")

    model_config = ConfigDict(frozen=True)


class ParseResult(BaseModel):
    """Result of parsing plain RRULE grammar text."""

    valid: bool
    rule: Optional[RecurrenceRule] = None
    error: Optional[str] = None
