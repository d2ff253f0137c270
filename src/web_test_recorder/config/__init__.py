"""
Settings for the recorder service.

``get_settings()`` returns the process-wide Settings, built on first use by
``load_config()``. Tests and the CLI's ``--config`` flag build their own.

Every field can be set from the environment with a double-underscore path:

    WEB_TEST_RECORDER__AI__ENDPOINT=https://api.openai.com/v1/chat/completions
    WEB_TEST_RECORDER__AI__API_KEY=sk-...
    WEB_TEST_RECORDER__RUNNER__SETTLE_DELAY_MS=500
    WEB_TEST_RECORDER__BROWSER__HEADLESS=true

WEB_TEST_RECORDER_CONFIG points at a YAML file to use instead of ./config.yaml.
"""

from web_test_recorder.config.settings import (
    Settings,
    BrowserSettings,
    RecorderSettings,
    RunnerSettings,
    AISettings,
    StorageSettings,
    LoggingSettings,
    ServerSettings,
)
from web_test_recorder.config.loader import ConfigLoader, load_config

_settings: Settings | None = None


def get_settings() -> Settings:
    """Return the shared Settings, loading them on the first call."""
    global _settings
    if _settings is None:
        _settings = load_config()
    return _settings


def reset_settings() -> None:
    """Drop the shared Settings so the next get_settings() reloads them."""
    global _settings
    _settings = None


__all__ = [
    "Settings",
    "BrowserSettings",
    "RecorderSettings",
    "RunnerSettings",
    "AISettings",
    "StorageSettings",
    "LoggingSettings",
    "ServerSettings",
    "ConfigLoader",
    "load_config",
    "get_settings",
    "reset_settings",
]
