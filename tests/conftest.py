"""Shared test configuration and fixtures for rrulezone."""

import logging
import os
from collections.abc import Iterator
from datetime import datetime, timezone
from typing import Any

import pytest

from rrulezone.config.settings import RRuleZoneSettings, reset_settings

UTC = timezone.utc

REFERENCE_TIME = "2024-09-29T04:45:00"


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Any) -> Iterator[None]:
    """Keep tests away from the developer's config files and RRULEZONE_* variables."""
    for key in list(os.environ):
        if key.upper().startswith("RRULEZONE_"):
            monkeypatch.delenv(key, raising=False)

    home = tmp_path / "home"
    home.mkdir()
    monkeypatch.setenv("HOME", str(home))
    monkeypatch.chdir(tmp_path)

    reset_settings()
    yield
    reset_settings()


@pytest.fixture
def test_settings() -> RRuleZoneSettings:
    """Settings with the stock expansion limits."""
    return RRuleZoneSettings(default_occurrence_limit=1000, max_cursor_steps=100_000)


@pytest.fixture
def utc_start() -> datetime:
    """Start instant used by most scenarios: 2024-09-29 04:45 UTC (a Sunday)."""
    return datetime(2024, 9, 29, 4, 45, tzinfo=UTC)


@pytest.fixture
def reference_time() -> str:
    """Reference local time whose wall clock every projected occurrence keeps."""
    return REFERENCE_TIME


@pytest.fixture
def make_rule() -> Any:
    """Factory building two-line DTSTART + RRULE text."""

    def _make_rule(
        rrule: str, start: str = "20240929T044500", zone: str = "America/New_York"
    ) -> str:
        return f"DTSTART;TZID={zone}:{start}\nRRULE:{rrule}"

    return _make_rule


@pytest.fixture
def package_logger() -> Iterator[logging.Logger]:
    """The rrulezone logger, with handlers added during the test removed afterwards."""
    logger = logging.getLogger("rrulezone")
    saved = list(logger.handlers)
    yield logger
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    for handler in saved:
        logger.addHandler(handler)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "critical_path: Core functionality tests")
