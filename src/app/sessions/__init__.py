"""Módulo de sessões do gateway.

Exporta a entidade, o registro, o gerenciador de ciclo de vida e as
consultas de estado.
"""

from app.sessions.connection_handle import ConnectionHandle
from app.sessions.manager import SessionLifecycleManager, wait_for_pending_events
from app.sessions.manager_recovery import RecoveryReport, recover_sessions
from app.sessions.queries import (
    SessionStatus,
    SessionSummary,
    describe_status,
    list_summaries,
    verify_ready,
)
from app.sessions.registry import SessionRegistry
from app.sessions.session_entity import DEFAULT_MAX_RECONNECT_ATTEMPTS, Session

__all__ = [
    "DEFAULT_MAX_RECONNECT_ATTEMPTS",
    "ConnectionHandle",
    "RecoveryReport",
    "Session",
    "SessionLifecycleManager",
    "SessionRegistry",
    "SessionStatus",
    "SessionSummary",
    "describe_status",
    "list_summaries",
    "recover_sessions",
    "verify_ready",
    "wait_for_pending_events",
]
