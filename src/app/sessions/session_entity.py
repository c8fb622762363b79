"""Entidade de sessão do gateway (uma conta WhatsApp vinculada)."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

from app.observability import record_session_transition
from fsm.manager import ConnectionStateMachine, create_fsm
from fsm.states import ConnectionState

if TYPE_CHECKING:
    from app.sessions.connection_handle import ConnectionHandle

logger = logging.getLogger(__name__)

DEFAULT_MAX_RECONNECT_ATTEMPTS = 3


@dataclass(slots=True, eq=False)
class Session:
    """Sessão nomeada e seu estado de conexão.

    O código de pareamento (`code_payload`) e a identidade autenticada
    nunca coexistem: conectar descarta o código e o código só é aceito
    enquanto a sessão não está conectada.
    """

    name: str
    max_reconnect_attempts: int = DEFAULT_MAX_RECONNECT_ATTEMPTS
    code_payload: str | None = None
    identity: str | None = None
    reconnect_attempts: int = 0
    handle: ConnectionHandle | None = None
    machine: ConnectionStateMachine = field(init=False)
    created_at: datetime = field(default_factory=lambda: datetime.now(UTC))
    updated_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        self.machine = create_fsm(self.name)

    @property
    def state(self) -> ConnectionState:
        """Estado atual de conexão."""
        return self.machine.current_state

    @property
    def is_ready(self) -> bool:
        """Sessão conectada e apta a enviar mensagens."""
        return self.state == ConnectionState.CONNECTED

    @property
    def awaiting_code(self) -> bool:
        """Há código de pareamento disponível e a sessão não está conectada."""
        return self.code_payload is not None and not self.is_ready

    def _apply(
        self,
        target: ConnectionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> bool:
        previous = self.state
        result = self.machine.transition(target, trigger, metadata)
        if not result.success:
            logger.debug(
                "session_transition_rejected",
                extra={
                    "session_name": self.name,
                    "from_state": previous.name,
                    "to_state": target.name,
                    "trigger": trigger,
                    "reason": result.error_reason,
                },
            )
            return False
        self.updated_at = datetime.now(UTC)
        if previous != target:
            record_session_transition(self.name, previous.name, target.name, trigger)
        return True

    def mark_initializing(self, trigger: str = "open") -> bool:
        """Nova conexão em abertura; código anterior deixa de valer."""
        if not self._apply(ConnectionState.INITIALIZING, trigger):
            return False
        self.code_payload = None
        return True

    def mark_awaiting_code(self, payload: str) -> bool:
        """Registra novo código de pareamento (substitui o anterior)."""
        if not self._apply(ConnectionState.AWAITING_CODE, "qr_issued"):
            return False
        self.code_payload = payload
        return True

    def mark_connected(self, identity: str | None, trigger: str = "connection_opened") -> bool:
        """Conexão aberta: zera tentativas e descarta o código."""
        if not self._apply(ConnectionState.CONNECTED, trigger):
            return False
        self.identity = identity
        self.code_payload = None
        self.reconnect_attempts = 0
        return True

    def mark_disconnected(self, reason_code: int | None, trigger: str = "connection_closed") -> bool:
        """Conexão fechada. O código atual é mantido."""
        if not self._apply(
            ConnectionState.DISCONNECTED,
            trigger,
            {"reason_code": reason_code},
        ):
            return False
        self.identity = None
        return True

    def mark_logged_out(self, trigger: str = "logged_out") -> bool:
        """Estado terminal: sessão desvinculada."""
        if not self._apply(ConnectionState.LOGGED_OUT, trigger):
            return False
        self.identity = None
        self.code_payload = None
        return True

    def to_log_dict(self) -> dict[str, Any]:
        """Resumo seguro para logs (sem código de pareamento)."""
        return {
            "session_name": self.name,
            "state": self.state.name,
            "has_code": self.code_payload is not None,
            "reconnect_attempts": self.reconnect_attempts,
            "max_reconnect_attempts": self.max_reconnect_attempts,
        }
