"""
Sitechat Configuration Module
=============================

Centralized runtime settings from environment variables.
A .env file at the project root is read first; real environment variables win.

Environment Variables:
    CONTEXT_MAX_ITEMS: Max training materials per context block (default: 7)
    CONTEXT_MIN_RELEVANCE: Relevance floor, selection stops below it (default: 0.1)
    CONTEXT_RAW_CONTENT_CHARS: Raw content fallback length (default: 1000)

    LOG_LEVEL: Root log level (default: INFO)
    LOG_JSON: Emit JSON log lines (default: false)
    LOG_FILE: Optional log file path (rotated)

    ENVIRONMENT: development / production (default: development)
"""

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Callable, Optional, TypeVar

from dotenv import load_dotenv


# .env never overrides variables already set in the process
env_path = Path(__file__).parent.parent.parent / ".env"
if env_path.exists():
    load_dotenv(env_path)


TRUE_VALUES = frozenset({"true", "1", "yes", "on"})
FALSE_VALUES = frozenset({"false", "0", "no", "off"})

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

T = TypeVar("T")


def get_env(key: str, default: Optional[str] = None, required: bool = False) -> Optional[str]:
    """
    Raw environment value; blank values count as unset.

    Raises:
        ValueError: If required=True and the variable is missing
    """
    value = os.getenv(key)
    if value is None or not value.strip():
        value = default
    if required and value is None:
        raise ValueError(f"Required environment variable '{key}' is not set")
    return value


def _get_env_typed(key: str, default: T, cast: Callable[[str], T], kind: str) -> T:
    raw = get_env(key)
    if raw is None:
        return default
    try:
        return cast(raw.strip())
    except ValueError:
        raise ValueError(f"Environment variable '{key}' must be {kind}, got: {raw!r}") from None


def get_env_int(key: str, default: int) -> int:
    return _get_env_typed(key, default, int, "an integer")


def get_env_float(key: str, default: float) -> float:
    return _get_env_typed(key, default, float, "a number")


def _parse_bool(value: str) -> bool:
    lowered = value.lower()
    if lowered in TRUE_VALUES:
        return True
    if lowered in FALSE_VALUES:
        return False
    raise ValueError(value)


def get_env_bool(key: str, default: bool) -> bool:
    """true/1/yes/on or false/0/no/off, case-insensitive."""
    return _get_env_typed(key, default, _parse_bool, "a boolean")


@dataclass
class ContextConfig:
    """Context selection settings."""

    max_items: int = field(default_factory=lambda: get_env_int("CONTEXT_MAX_ITEMS", 7))
    min_relevance: float = field(default_factory=lambda: get_env_float("CONTEXT_MIN_RELEVANCE", 0.1))
    raw_content_chars: int = field(default_factory=lambda: get_env_int("CONTEXT_RAW_CONTENT_CHARS", 1000))

    def __post_init__(self):
        """Reject limits the selector cannot honor."""
        if self.max_items <= 0:
            raise ValueError("CONTEXT_MAX_ITEMS must be positive")
        if self.min_relevance < 0:
            raise ValueError("CONTEXT_MIN_RELEVANCE cannot be negative")
        if self.raw_content_chars <= 0:
            raise ValueError("CONTEXT_RAW_CONTENT_CHARS must be positive")


@dataclass
class LoggingConfig:
    """Log level, output format and optional file."""

    level: str = field(default_factory=lambda: get_env("LOG_LEVEL", "INFO"))
    log_file: Optional[str] = field(default_factory=lambda: get_env("LOG_FILE"))

    # Structured logging
    json_logs: bool = field(default_factory=lambda: get_env_bool("LOG_JSON", False))

    def __post_init__(self):
        self.level = self.level.upper()
        if self.level not in LOG_LEVELS:
            raise ValueError(f"LOG_LEVEL must be one of {', '.join(LOG_LEVELS)}, got: {self.level}")


@dataclass
class Settings:
    """Everything the context core reads from the environment."""

    context: ContextConfig = field(default_factory=ContextConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    environment: str = field(default_factory=lambda: get_env("ENVIRONMENT", "development"))

    def is_production(self) -> bool:
        """True for ENVIRONMENT=production or prod."""
        return self.environment.lower() in ("production", "prod")


def load_settings() -> Settings:
    """
    Build a fresh Settings from the current environment.

    Raises:
        ValueError: If configuration is invalid
    """
    return Settings()


# built on first get_settings() call
_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide Settings, loaded once."""
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings


def reset_settings() -> None:
    """Drop the cached settings so the next get_settings() re-reads the environment."""
    global _settings
    _settings = None
