"""Agregador de settings base.

Re-exporta todas as settings base para uso externo.
"""

from __future__ import annotations

from config.settings.base.core import (
    BaseSettings,
    Environment,
    get_base_settings,
)
from config.settings.base.server import (
    DEFAULT_PORT,
    ServerSettings,
    get_server_settings,
)
from config.settings.base.session import (
    DEFAULT_LOGGED_OUT_CODE,
    DEFAULT_TRANSIENT_CODES,
    SessionSettings,
    get_session_settings,
)

__all__ = [
    "DEFAULT_LOGGED_OUT_CODE",
    "DEFAULT_PORT",
    "DEFAULT_TRANSIENT_CODES",
    # Core
    "BaseSettings",
    # Types
    "Environment",
    # Server
    "ServerSettings",
    # Session
    "SessionSettings",
    "get_base_settings",
    "get_server_settings",
    "get_session_settings",
]
