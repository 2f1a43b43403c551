"""Package settings loaded from environment variables.

Uses Pydantic Settings v2 for validated, type-safe configuration.  Every
variable is prefixed with ``GATEWAY_COLLECTORS_``; never call ``os.getenv``
directly elsewhere in the codebase.

Usage::

    from gateway_collectors.config.settings import get_settings

    settings = get_settings()
    configure_logging(settings.log_level)
"""

from __future__ import annotations

from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Process-wide configuration backed by environment variables and an optional .env file.

    None of the fields is required.  Collector options passed in code always
    take precedence over the defaults defined here.
    """

    model_config = SettingsConfigDict(
        env_prefix="GATEWAY_COLLECTORS_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    # ------------------------------------------------------------------
    # Logging
    # ------------------------------------------------------------------

    log_level: str = "INFO"
    """Logging verbosity.  One of: DEBUG, INFO, WARNING, ERROR, CRITICAL."""

    log_collected_items: bool = False
    """Emit a DEBUG record for every accepted item.  Noisy on busy guilds."""

    # ------------------------------------------------------------------
    # Contextual collector defaults
    # ------------------------------------------------------------------

    default_timeout_ms: Optional[float] = Field(default=None, ge=0)
    """Absolute timeout applied by the ``create_*_collector`` methods installed
    on channel and message types when the caller passes no ``timeout``."""

    default_idle_timeout_ms: Optional[float] = Field(default=None, ge=0)
    """Idle timeout applied by the installed methods when the caller passes no
    ``idle_timeout``."""


@lru_cache
def get_settings() -> Settings:
    """Return the cached :class:`Settings` instance.

    Tests that patch the environment must call ``get_settings.cache_clear()``
    afterwards.
    """
    return Settings()
