"""Exceções utilitárias compartilhadas."""

from .exceptions import (
    CredentialStoreError,
    GatewayError,
    NotReadyReason,
    SessionHandleMissingError,
    SessionNotFoundError,
    SessionNotReadyError,
    TransportError,
    ValidationError,
)

__all__ = [
    "CredentialStoreError",
    "GatewayError",
    "NotReadyReason",
    "SessionHandleMissingError",
    "SessionNotFoundError",
    "SessionNotReadyError",
    "TransportError",
    "ValidationError",
]
