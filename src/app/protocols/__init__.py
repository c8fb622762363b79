"""Protocolos e contratos do core da aplicação."""

from .auth_store import AuthState, AuthStateStoreProtocol
from .code_renderer import CodeRendererProtocol
from .transport import (
    AuthenticatedUser,
    ConnectionOptions,
    ConnectionProtocol,
    ContactRecord,
    EventListener,
    TransportEvent,
    TransportEventType,
    TransportProviderProtocol,
    Unsubscribe,
)

__all__ = [
    "AuthState",
    "AuthStateStoreProtocol",
    "AuthenticatedUser",
    "CodeRendererProtocol",
    "ConnectionOptions",
    "ConnectionProtocol",
    "ContactRecord",
    "EventListener",
    "TransportEvent",
    "TransportEventType",
    "TransportProviderProtocol",
    "Unsubscribe",
]
