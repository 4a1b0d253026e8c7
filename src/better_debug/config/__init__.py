"""Configuration module for better-debug."""

from better_debug.config.settings import (
    DEFAULT_REDACTION_MARKER,
    RenderSettings,
    SettingsManager,
    ValueStyle,
    get_config_file,
    get_settings,
)

__all__ = [
    "DEFAULT_REDACTION_MARKER",
    "RenderSettings",
    "SettingsManager",
    "ValueStyle",
    "get_config_file",
    "get_settings",
]
