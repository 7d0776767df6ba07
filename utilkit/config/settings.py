"""
Configuration settings for utilkit.

**Conceptual**: This module provides strongly-typed configuration objects that
load from environment variables (via .env files). All settings are validated
when constructed, so a bad UTILKIT_FETCH_TIMEOUT_MS fails immediately with a
clear message rather than deep inside a fetch call.

**Why centralized config?**
  - Single source of truth for fetch defaults (timeout, throttle delay).
  - Easy to test (construct settings directly instead of reading environment).
  - Fail-fast validation of malformed values.

This module uses python-dotenv to load .env files and dataclasses for type safety.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

from dotenv import load_dotenv

# Load .env from project root (no-op when the file does not exist)
env_path = Path(__file__).parent.parent.parent / ".env"
load_dotenv(dotenv_path=env_path)


def _int_from_env(name: str, default: str) -> int:
    raw = os.getenv(name, default)
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got: {raw}")


@dataclass(frozen=True)
class FetchSettings:
    """
    Defaults for the fetch wrapper.

    **Conceptual**: handle_fetch() waits `delay_ms` before every request to
    throttle bursts, then aborts the request if it has not completed within
    `timeout_ms`. Both values are in milliseconds to match the options the
    fetch wrapper accepts per call.

    Attributes:
        timeout_ms: Overall request deadline in milliseconds (default 8000).
        delay_ms: Throttle delay before each request in milliseconds (default 100).
        user_agent: User-Agent header sent with every request.
    """
    timeout_ms: int = 8000
    delay_ms: int = 100
    user_agent: str = "utilkit/1.0"

    def __post_init__(self):
        """Validate settings after initialization."""
        if self.timeout_ms <= 0:
            raise ValueError(
                f"timeout_ms must be positive, got: {self.timeout_ms}"
            )
        if self.delay_ms < 0:
            raise ValueError(
                f"delay_ms must be non-negative, got: {self.delay_ms}"
            )

    @classmethod
    def from_env(cls) -> "FetchSettings":
        """
        Load fetch settings from environment variables.

        **Environment variables**:
          - UTILKIT_FETCH_TIMEOUT_MS (optional): defaults to 8000.
          - UTILKIT_FETCH_DELAY_MS (optional): defaults to 100.
          - UTILKIT_USER_AGENT (optional): defaults to "utilkit/1.0".

        Returns:
            FetchSettings object with values loaded from environment.

        Raises:
            ValueError: If a numeric variable is not an integer or out of range.
        """
        return cls(
            timeout_ms=_int_from_env("UTILKIT_FETCH_TIMEOUT_MS", "8000"),
            delay_ms=_int_from_env("UTILKIT_FETCH_DELAY_MS", "100"),
            user_agent=os.getenv("UTILKIT_USER_AGENT", "utilkit/1.0"),
        )


@dataclass(frozen=True)
class LoggingSettings:
    """
    Logging level for the utilkit package logger.

    Attributes:
        level: Standard level name (DEBUG, INFO, WARNING, ERROR, CRITICAL).
    """
    level: str = "WARNING"

    def __post_init__(self):
        """Validate settings after initialization."""
        if not isinstance(logging.getLevelName(self.level), int):
            raise ValueError(
                f"UTILKIT_LOG_LEVEL must be a standard logging level name, got: {self.level}"
            )

    @classmethod
    def from_env(cls) -> "LoggingSettings":
        """Load logging settings from UTILKIT_LOG_LEVEL (default WARNING)."""
        return cls(level=os.getenv("UTILKIT_LOG_LEVEL", "WARNING").upper())


@dataclass(frozen=True)
class Settings:
    """
    Top-level settings aggregating every subsystem.

    **Usage pattern**:
      ```python
      from utilkit.config.settings import get_settings

      settings = get_settings()
      timeout = settings.fetch.timeout_ms
      ```

    Attributes:
        fetch: Fetch wrapper defaults.
        logging: Package logging configuration.
    """
    fetch: FetchSettings = field(default_factory=FetchSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    @classmethod
    def from_env(cls) -> "Settings":
        """Load all subsystem settings from environment variables."""
        return cls(
            fetch=FetchSettings.from_env(),
            logging=LoggingSettings.from_env(),
        )


# Global settings singleton (lazy-loaded)
_default_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """
    Get the global settings singleton, loading it from the environment on first use.

    Returns:
        Global Settings singleton.

    Raises:
        ValueError: If any environment variable is malformed.
    """
    global _default_settings

    if _default_settings is None:
        _default_settings = Settings.from_env()

    return _default_settings


def reset_settings():
    """
    Reset the global settings singleton (for testing).

    Forces the next get_settings() call to re-read the environment.
    """
    global _default_settings
    _default_settings = None
