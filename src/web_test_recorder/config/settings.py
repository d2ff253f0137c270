"""
Settings - Pydantic models for type-safe configuration.

This module defines all configuration settings as Pydantic models,
providing validation, type hints, and automatic environment variable loading.

Example:
    >>> from web_test_recorder.config import Settings, load_config
    >>> settings = load_config()  # Loads from env, yaml, and defaults
    >>> print(settings.ai.max_retries)
    2
"""

from typing import List, Literal, Optional
from pydantic import BaseModel, Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict


class BrowserSettings(BaseModel):
    """
    Browser automation settings used for replay.

    Attributes:
        headless: Run browser in headless mode
        browser_type: Playwright browser engine
        slow_mo: Slow down operations by this amount (ms)
        storage_state_path: Optional auth state (cookies) file
        inject_auth_on_replay: Load storage_state_path into replay contexts
    """
    headless: bool = False
    browser_type: Literal["chromium", "firefox", "webkit"] = "chromium"
    slow_mo: int = Field(default=0, ge=0, le=5000)
    storage_state_path: Optional[str] = None
    inject_auth_on_replay: bool = False


class RecorderSettings(BaseModel):
    """
    Recording subprocess settings.

    Attributes:
        command: Executable and leading arguments of the recording tool
        target: Language target passed to codegen
        artifact_dir: Directory for per-session artifact files (temp dir if unset)
        finished_ttl_seconds: How long a self-exited session stays queryable
        kill_grace_seconds: Time to wait for a killed process to be reaped
        startup_check_seconds: Window in which an immediate exit counts as a spawn failure
    """
    command: List[str] = Field(default_factory=lambda: ["playwright", "codegen"])
    target: str = "playwright-test"
    artifact_dir: Optional[str] = None
    finished_ttl_seconds: float = Field(default=600.0, ge=0)
    kill_grace_seconds: float = Field(default=2.0, ge=0)
    startup_check_seconds: float = Field(default=0.5, ge=0)


class RunnerSettings(BaseModel):
    """
    Step runner settings.

    Attributes:
        settle_delay_ms: Grace period after the last step before closing the browser
    """
    settle_delay_ms: int = Field(default=2000, ge=0)


class AISettings(BaseModel):
    """
    AI gateway settings.

    Attributes:
        endpoint: Full URL of the AI endpoint
        api_key: Bearer token sent with every request
        model: Default model name for chat-completion endpoints
        timeout_ms: Per-attempt request timeout
        max_retries: Total number of attempts per call
    """
    endpoint: Optional[str] = None
    api_key: Optional[SecretStr] = None
    model: str = "gpt-4o-mini"
    timeout_ms: int = Field(default=10000, ge=100, le=300000)
    max_retries: int = Field(default=2, ge=1, le=10)


class StorageSettings(BaseModel):
    """Test case storage settings."""
    path: str = "test-cases.json"


class LoggingSettings(BaseModel):
    """
    Logging configuration.

    Attributes:
        level: Log level
        file: Log file path (None for console only)
        json_format: Use JSON format for file logs
    """
    level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = "INFO"
    file: Optional[str] = None
    json_format: bool = False


class ServerSettings(BaseModel):
    """HTTP server settings."""
    host: str = "127.0.0.1"
    port: int = Field(default=3000, ge=1, le=65535)
    cors_origins: List[str] = Field(default_factory=lambda: ["*"])
    static_dir: str = "public"


class Settings(BaseSettings):
    """
    Root settings container - single source of truth for all configuration.

    Settings are loaded in this priority order (highest to lowest):
    1. Explicit values passed to constructor
    2. Environment variables (prefixed with WEB_TEST_RECORDER__)
    3. Config file (YAML)
    4. Default values

    Example:
        >>> settings = Settings()  # Load from env vars
        >>> settings = Settings(ai=AISettings(endpoint="https://api.openai.com/v1/chat/completions"))
    """

    model_config = SettingsConfigDict(
        env_prefix="WEB_TEST_RECORDER__",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    recorder: RecorderSettings = Field(default_factory=RecorderSettings)
    runner: RunnerSettings = Field(default_factory=RunnerSettings)
    ai: AISettings = Field(default_factory=AISettings)
    storage: StorageSettings = Field(default_factory=StorageSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    server: ServerSettings = Field(default_factory=ServerSettings)

    debug: bool = False

    def merge_with(self, overrides: dict) -> "Settings":
        """
        Create a new Settings instance with overrides applied.

        Args:
            overrides: Dictionary of values to override

        Returns:
            New Settings instance with overrides applied
        """
        current = self.model_dump()

        def deep_merge(base: dict, updates: dict) -> dict:
            for key, value in updates.items():
                if key in base and isinstance(base[key], dict) and isinstance(value, dict):
                    deep_merge(base[key], value)
                else:
                    base[key] = value
            return base

        merged = deep_merge(current, overrides)
        return Settings(**merged)
