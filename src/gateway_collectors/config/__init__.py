"""Configuration package for gateway-collectors.

Re-exports the settings symbols so that callers can write::

    from gateway_collectors.config import get_settings
"""

from __future__ import annotations

from gateway_collectors.config.settings import Settings, get_settings

__all__ = [
    "Settings",
    "get_settings",
]
