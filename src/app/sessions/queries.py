"""Consultas de estado das sessões.

Helpers somente-leitura usados pelas rotas e pelos casos de uso.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from app.sessions.session_entity import DEFAULT_MAX_RECONNECT_ATTEMPTS
from utils.errors import SessionHandleMissingError, SessionNotFoundError, SessionNotReadyError

if TYPE_CHECKING:
    from app.sessions.connection_handle import ConnectionHandle
    from app.sessions.registry import SessionRegistry
    from app.sessions.session_entity import Session


@dataclass(frozen=True, slots=True)
class SessionStatus:
    """Snapshot de estado de uma sessão (existente ou não)."""

    exists: bool
    connected: bool
    awaiting_code: bool
    identity: str | None
    reconnect_attempts: int
    max_reconnect_attempts: int


@dataclass(frozen=True, slots=True)
class SessionSummary:
    """Resumo de uma sessão para listagem."""

    name: str
    connected: bool
    identity: str | None
    has_code: bool


def verify_ready(registry: SessionRegistry, name: str) -> tuple[Session, ConnectionHandle]:
    """Retorna sessão e handle se a sessão estiver apta a enviar.

    Raises:
        SessionNotFoundError: Sessão inexistente
        SessionNotReadyError: Sessão não conectada
        SessionHandleMissingError: Sessão conectada sem conexão ativa
    """
    session = registry.get(name)
    if session is None:
        raise SessionNotFoundError(name)
    if not session.is_ready:
        raise SessionNotReadyError(name)
    if session.handle is None:
        raise SessionHandleMissingError(name)
    return session, session.handle


def describe_status(
    registry: SessionRegistry,
    name: str,
    default_max_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS,
) -> SessionStatus:
    """Status da sessão; nomes desconhecidos retornam exists=False."""
    session = registry.get(name)
    if session is None:
        return SessionStatus(
            exists=False,
            connected=False,
            awaiting_code=False,
            identity=None,
            reconnect_attempts=0,
            max_reconnect_attempts=default_max_attempts,
        )
    return SessionStatus(
        exists=True,
        connected=session.is_ready,
        awaiting_code=session.awaiting_code,
        identity=session.identity if session.is_ready else None,
        reconnect_attempts=session.reconnect_attempts,
        max_reconnect_attempts=session.max_reconnect_attempts,
    )


def list_summaries(registry: SessionRegistry) -> list[SessionSummary]:
    """Resumo de todas as sessões em ordem de criação."""
    return [
        SessionSummary(
            name=session.name,
            connected=session.is_ready,
            identity=session.identity if session.is_ready else None,
            has_code=session.code_payload is not None,
        )
        for session in registry.sessions()
    ]
