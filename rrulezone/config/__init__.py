"""Configuration management package."""

from .settings import LoggingSettings, RRuleZoneSettings, get_settings, reset_settings

__all__ = [
    "LoggingSettings",
    "RRuleZoneSettings",
    "get_settings",
    "reset_settings",
]
