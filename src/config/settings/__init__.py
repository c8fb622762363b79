"""Agregador de settings do gateway multi-sessão.

Re-exporta todas as settings e funções de cada módulo.
Organização por domínio para isolamento de mudanças.
"""

from __future__ import annotations

# Base settings
from config.settings.base import (
    DEFAULT_LOGGED_OUT_CODE,
    DEFAULT_PORT,
    DEFAULT_TRANSIENT_CODES,
    BaseSettings,
    Environment,
    ServerSettings,
    SessionSettings,
    get_base_settings,
    get_server_settings,
    get_session_settings,
)

# Transport settings
from config.settings.whatsapp import (
    DEFAULT_BROWSER,
    JID_USER_SUFFIX,
    WhatsAppSettings,
    get_whatsapp_settings,
)

__all__ = [
    # Constants
    "DEFAULT_BROWSER",
    "DEFAULT_LOGGED_OUT_CODE",
    "DEFAULT_PORT",
    "DEFAULT_TRANSIENT_CODES",
    "JID_USER_SUFFIX",
    # Base
    "BaseSettings",
    "Environment",
    "ServerSettings",
    "SessionSettings",
    # Transport
    "WhatsAppSettings",
    "get_base_settings",
    "get_server_settings",
    "get_session_settings",
    "get_whatsapp_settings",
]
