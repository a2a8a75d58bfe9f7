"""Unit tests for occurrence generation."""

import logging
from datetime import datetime, timezone

import pytest

from rrulezone.config.settings import RRuleZoneSettings
from rrulezone.recurrence.exceptions import ExpansionError
from rrulezone.recurrence.generator import (
    advance,
    get_occurrences,
    iter_occurrences,
    nth_weekday_of_month,
)
from rrulezone.recurrence.models import Frequency, RecurrenceRule, Weekday
from rrulezone.recurrence.parser import parse, parse_rrule

UTC = timezone.utc


def _instants(occurrences):
    return [occurrence.instant for occurrence in occurrences]


@pytest.mark.unit
class TestFrequencyStepping:
    """Test plain per-frequency cursor movement."""

    @pytest.mark.critical_path
    def test_daily(self, make_rule, test_settings):
        """Test DAILY emits consecutive days at the start's time of day."""
        rule = parse(make_rule("FREQ=DAILY;INTERVAL=1;COUNT=3"))

        occurrences = get_occurrences(rule, settings=test_settings)

        assert _instants(occurrences) == [
            datetime(2024, 9, 29, 4, 45, tzinfo=UTC),
            datetime(2024, 9, 30, 4, 45, tzinfo=UTC),
            datetime(2024, 10, 1, 4, 45, tzinfo=UTC),
        ]
        assert all(occurrence.is_all_day for occurrence in occurrences)

    def test_daily_interval(self, make_rule, test_settings):
        """Test INTERVAL multiplies the daily step."""
        rule = parse(make_rule("FREQ=DAILY;INTERVAL=3;COUNT=3"))

        assert [dt.day for dt in _instants(get_occurrences(rule, settings=test_settings))] == [
            29,
            2,
            5,
        ]

    def test_weekly_without_weekdays(self, make_rule, test_settings):
        """Test WEEKLY without BYDAY jumps whole weeks."""
        rule = parse(make_rule("FREQ=WEEKLY;INTERVAL=2;COUNT=3"))

        occurrences = get_occurrences(rule, settings=test_settings)

        assert _instants(occurrences) == [
            datetime(2024, 9, 29, 4, 45, tzinfo=UTC),
            datetime(2024, 10, 13, 4, 45, tzinfo=UTC),
            datetime(2024, 10, 27, 4, 45, tzinfo=UTC),
        ]
        assert not any(occurrence.is_all_day for occurrence in occurrences)

    def test_monthly(self, make_rule, test_settings):
        """Test MONTHLY keeps the day-of-month."""
        rule = parse(make_rule("FREQ=MONTHLY;COUNT=2"))

        assert _instants(get_occurrences(rule, settings=test_settings)) == [
            datetime(2024, 9, 29, 4, 45, tzinfo=UTC),
            datetime(2024, 10, 29, 4, 45, tzinfo=UTC),
        ]

    def test_monthly_clamps_month_end(self, make_rule, test_settings):
        """Test a 31st start clamps into shorter months and keeps the clamped day."""
        rule = parse(make_rule("FREQ=MONTHLY;COUNT=3", start="20240131T100000"))

        assert [dt.date().isoformat() for dt in _instants(get_occurrences(rule, settings=test_settings))] == [
            "2024-01-31",
            "2024-02-29",
            "2024-03-29",
        ]

    def test_yearly_from_leap_day(self, make_rule, test_settings):
        """Test YEARLY from Feb 29 lands on Feb 28 in a common year."""
        rule = parse(make_rule("FREQ=YEARLY;COUNT=2", start="20240229T080000"))

        assert _instants(get_occurrences(rule, settings=test_settings)) == [
            datetime(2024, 2, 29, 8, 0, tzinfo=UTC),
            datetime(2025, 2, 28, 8, 0, tzinfo=UTC),
        ]


@pytest.mark.unit
class TestWeeklyByDay:
    """Test WEEKLY rules with BYDAY."""

    @pytest.mark.critical_path
    def test_matching_weekdays_only(self, make_rule, test_settings):
        """Test the day-by-day walk emits only the listed weekdays."""
        rule = parse(make_rule("FREQ=WEEKLY;BYDAY=MO,WE,FR;COUNT=3"))

        occurrences = get_occurrences(rule, settings=test_settings)

        assert _instants(occurrences) == [
            datetime(2024, 9, 30, 4, 45, tzinfo=UTC),
            datetime(2024, 10, 2, 4, 45, tzinfo=UTC),
            datetime(2024, 10, 4, 4, 45, tzinfo=UTC),
        ]

    def test_count_counts_emitted_occurrences(self, make_rule, test_settings):
        """Test COUNT bounds emitted occurrences, not cursor steps."""
        rule = parse(make_rule("FREQ=WEEKLY;BYDAY=TH;COUNT=4"))

        instants = _instants(get_occurrences(rule, settings=test_settings))

        assert len(instants) == 4
        assert all(Weekday.of(dt) is Weekday.TH for dt in instants)

    def test_start_on_matching_day_is_emitted(self, make_rule, test_settings):
        """Test a start that falls on a listed weekday is the first occurrence."""
        rule = parse(make_rule("FREQ=WEEKLY;BYDAY=SU;COUNT=2"))

        assert _instants(get_occurrences(rule, settings=test_settings)) == [
            datetime(2024, 9, 29, 4, 45, tzinfo=UTC),
            datetime(2024, 10, 6, 4, 45, tzinfo=UTC),
        ]


@pytest.mark.unit
class TestMonthlyNthWeekday:
    """Test MONTHLY rules with BYDAY + BYSETPOS."""

    @pytest.mark.critical_path
    def test_second_tuesday(self, make_rule, test_settings):
        """Test a positive position picks the Nth weekday each month at midnight UTC."""
        rule = parse(make_rule("FREQ=MONTHLY;BYDAY=TU;BYSETPOS=2;COUNT=3", start="20241001T090000"))

        assert _instants(get_occurrences(rule, settings=test_settings)) == [
            datetime(2024, 10, 8, 0, 0, tzinfo=UTC),
            datetime(2024, 11, 12, 0, 0, tzinfo=UTC),
            datetime(2024, 12, 10, 0, 0, tzinfo=UTC),
        ]

    def test_last_friday(self, make_rule, test_settings):
        """Test position -1 picks the last weekday of each month."""
        rule = parse(
            make_rule("FREQ=MONTHLY;BYDAY=FR;BYSETPOS=-1;COUNT=3", start="20240901T120000")
        )

        assert [dt.date().isoformat() for dt in _instants(get_occurrences(rule, settings=test_settings))] == [
            "2024-09-27",
            "2024-10-25",
            "2024-11-29",
        ]

    def test_months_without_position_are_skipped(self, make_rule, test_settings):
        """Test months lacking a fifth Monday emit nothing."""
        rule = parse(make_rule("FREQ=MONTHLY;BYDAY=MO;BYSETPOS=5;COUNT=2", start="20240901T080000"))

        assert [dt.date().isoformat() for dt in _instants(get_occurrences(rule, settings=test_settings))] == [
            "2024-09-30",
            "2024-12-30",
        ]

    def test_only_first_weekday_and_position_used(self, make_rule, test_settings):
        """Test extra BYDAY/BYSETPOS entries are ignored."""
        rule = parse(
            make_rule("FREQ=MONTHLY;BYDAY=TU,FR;BYSETPOS=2,-1;COUNT=1", start="20241001T090000")
        )

        assert _instants(get_occurrences(rule, settings=test_settings)) == [
            datetime(2024, 10, 8, 0, 0, tzinfo=UTC),
        ]

    def test_monthly_byday_without_position_steps_plainly(self, make_rule, test_settings):
        """Test MONTHLY with BYDAY but no BYSETPOS behaves like plain MONTHLY."""
        rule = parse(make_rule("FREQ=MONTHLY;BYDAY=TU;COUNT=2"))

        assert _instants(get_occurrences(rule, settings=test_settings)) == [
            datetime(2024, 9, 29, 4, 45, tzinfo=UTC),
            datetime(2024, 10, 29, 4, 45, tzinfo=UTC),
        ]

    @pytest.mark.parametrize(
        ("weekday", "position", "expected_day"),
        [
            (Weekday.TU, 1, 1),
            (Weekday.TU, 5, 29),
            (Weekday.TU, -1, 29),
            (Weekday.WE, 5, 30),
            (Weekday.WE, 6, None),
            (Weekday.WE, 0, None),
            (Weekday.WE, -2, None),
        ],
    )
    def test_nth_weekday_of_month(self, weekday, position, expected_day):
        """Test Nth weekday selection in October 2024."""
        current = datetime(2024, 10, 17, 6, 30, tzinfo=UTC)

        result = nth_weekday_of_month(current, weekday, position)

        if expected_day is None:
            assert result is None
        else:
            assert result == datetime(2024, 10, expected_day, 0, 0, tzinfo=UTC)

    def test_last_weekday_on_month_end(self):
        """Test the last weekday is found when it falls on the final day."""
        current = datetime(2024, 3, 10, 15, 0, tzinfo=UTC)

        assert nth_weekday_of_month(current, Weekday.SU, -1) == datetime(2024, 3, 31, tzinfo=UTC)
        assert nth_weekday_of_month(current, Weekday.FR, 1) == datetime(2024, 3, 1, tzinfo=UTC)

    def test_far_position_not_found(self):
        """Test positions past the month never wrap into a later month."""
        current = datetime(2024, 10, 1, tzinfo=UTC)

        assert nth_weekday_of_month(current, Weekday.TU, 57) is None


@pytest.mark.unit
class TestTermination:
    """Test limit, until and step guard handling."""

    @pytest.mark.critical_path
    def test_until_is_inclusive(self, make_rule, test_settings):
        """Test an occurrence equal to or before UNTIL is emitted."""
        rule = parse(make_rule("FREQ=DAILY;UNTIL=20241001T000000"))

        instants = _instants(get_occurrences(rule, settings=test_settings))

        assert rule.until == datetime(2024, 10, 1, 23, 59, 59, tzinfo=UTC)
        assert instants[-1] == datetime(2024, 10, 1, 4, 45, tzinfo=UTC)
        assert len(instants) == 3

    def test_until_equal_to_occurrence(self, make_rule, test_settings):
        """Test the bound comparison is strict: an exact match is emitted."""
        rule = parse(make_rule("FREQ=DAILY;UNTIL=20240930T044530", start="20240929T044530"))

        assert len(get_occurrences(rule, settings=test_settings)) == 2

    def test_until_before_start(self, make_rule, test_settings):
        """Test an UNTIL before the start yields nothing."""
        rule = parse(make_rule("FREQ=DAILY;UNTIL=20240901T000000"))

        assert get_occurrences(rule, settings=test_settings) == []

    def test_count_and_until_whichever_first(self, make_rule, test_settings):
        """Test COUNT stops expansion before a later UNTIL."""
        rule = parse(make_rule("FREQ=DAILY;COUNT=2;UNTIL=20241231T000000"))

        assert len(get_occurrences(rule, settings=test_settings)) == 2

    def test_default_limit_applies_without_count(self, make_rule):
        """Test rules without COUNT stop at the configured default limit."""
        rule = parse(make_rule("FREQ=DAILY"))
        settings = RRuleZoneSettings(default_occurrence_limit=7)

        assert len(get_occurrences(rule, settings=settings)) == 7

    def test_default_limit_is_one_thousand(self, make_rule, test_settings):
        """Test the stock default limit is 1000 occurrences."""
        rule = parse(make_rule("FREQ=DAILY"))

        assert len(get_occurrences(rule, settings=test_settings)) == 1000

    def test_limit_override(self, make_rule, test_settings):
        """Test an explicit limit wins over COUNT."""
        rule = parse(make_rule("FREQ=DAILY;COUNT=10"))

        assert len(get_occurrences(rule, limit=4, settings=test_settings)) == 4

    def test_zero_limit_yields_nothing(self, make_rule, test_settings):
        """Test an explicit limit of 0 is honoured rather than treated as unset."""
        rule = parse(make_rule("FREQ=DAILY"))

        assert get_occurrences(rule, limit=0, settings=test_settings) == []

    def test_until_override(self, make_rule, test_settings):
        """Test an explicit until bound wins over UNTIL."""
        rule = parse(make_rule("FREQ=DAILY;UNTIL=20241231T000000"))
        until = datetime(2024, 9, 30, 12, 0, tzinfo=UTC)

        assert len(get_occurrences(rule, until=until, settings=test_settings)) == 2

    def test_step_guard_stops_unproductive_rule(self, make_rule, caplog):
        """Test a rule that can never emit stops at the cursor step cap."""
        rule = parse(make_rule("FREQ=MONTHLY;BYDAY=MO;BYSETPOS=6;COUNT=1"))
        settings = RRuleZoneSettings(max_cursor_steps=50)

        with caplog.at_level(logging.WARNING, logger="rrulezone.recurrence.generator"):
            occurrences = get_occurrences(rule, settings=settings)

        assert occurrences == []
        assert "Stopping expansion after 50 cursor steps" in caplog.text

    def test_no_warning_when_limit_reached(self, make_rule, caplog):
        """Test reaching the limit exactly at the step cap is not reported."""
        rule = parse(make_rule("FREQ=DAILY;COUNT=5"))
        settings = RRuleZoneSettings(max_cursor_steps=5)

        with caplog.at_level(logging.WARNING, logger="rrulezone.recurrence.generator"):
            occurrences = get_occurrences(rule, settings=settings)

        assert len(occurrences) == 5
        assert "Stopping expansion" not in caplog.text

    def test_iterator_is_lazy(self, make_rule, test_settings):
        """Test iter_occurrences yields on demand."""
        rule = parse(make_rule("FREQ=DAILY"))

        iterator = iter_occurrences(rule, settings=test_settings)

        assert next(iterator).instant == datetime(2024, 9, 29, 4, 45, tzinfo=UTC)
        assert next(iterator).instant == datetime(2024, 9, 30, 4, 45, tzinfo=UTC)

    def test_rule_without_start_raises(self, test_settings):
        """Test plain-grammar rules cannot be expanded."""
        rule = parse_rrule("RRULE:FREQ=DAILY;COUNT=2").rule

        with pytest.raises(ExpansionError):
            get_occurrences(rule, settings=test_settings)

    def test_uses_global_settings_by_default(self, make_rule, monkeypatch):
        """Test expansion falls back to the process-wide settings."""
        monkeypatch.setenv("RRULEZONE_DEFAULT_OCCURRENCE_LIMIT", "3")
        rule = parse(make_rule("FREQ=DAILY"))

        assert len(get_occurrences(rule)) == 3


@pytest.mark.unit
class TestAdvance:
    """Test single cursor steps."""

    def test_weekly_byday_moves_one_day(self, utc_start):
        """Test WEEKLY with BYDAY moves a single day regardless of interval."""
        rule = RecurrenceRule(
            frequency=Frequency.WEEKLY, interval=3, start=utc_start, by_weekday=(Weekday.MO,)
        )

        assert advance(rule, utc_start) == datetime(2024, 9, 30, 4, 45, tzinfo=UTC)

    @pytest.mark.parametrize(
        ("frequency", "expected"),
        [
            (Frequency.DAILY, datetime(2024, 10, 1, 4, 45, tzinfo=UTC)),
            (Frequency.WEEKLY, datetime(2024, 10, 13, 4, 45, tzinfo=UTC)),
            (Frequency.MONTHLY, datetime(2024, 11, 29, 4, 45, tzinfo=UTC)),
            (Frequency.YEARLY, datetime(2026, 9, 29, 4, 45, tzinfo=UTC)),
        ],
    )
    def test_interval_steps(self, utc_start, frequency, expected):
        """Test each frequency jumps interval units."""
        rule = RecurrenceRule(frequency=frequency, interval=2, start=utc_start)

        assert advance(rule, utc_start) == expected
