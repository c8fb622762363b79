"""
Máquina de estados (ConnectionStateMachine) de cada sessão.

Controla as transições de estado de conexão e mantém um histórico
recente rastreável para auditoria.
"""

from collections import deque
from typing import Any

from fsm.rules.guards import GuardResult, evaluate_guards
from fsm.states.connection import (
    DEFAULT_INITIAL_STATE,
    ConnectionState,
    is_terminal,
)
from fsm.transitions.rules import get_valid_targets, is_transition_valid
from fsm.types.transition import StateTransition, TransitionResult

# Sessões vivem por dias e o QR é renovado a cada minuto enquanto
# aguarda leitura; o histórico guarda só as transições mais recentes.
DEFAULT_HISTORY_LIMIT = 50


class ConnectionStateMachine:
    """
    Máquina de estados de conexão de uma sessão.

    Attributes:
        current_state: Estado atual da máquina
        history: Transições mais recentes (limitadas a history_limit)
    """

    __slots__ = ("_current_state", "_history", "_session_name")

    def __init__(
        self,
        initial_state: ConnectionState | None = None,
        session_name: str = "",
        history_limit: int = DEFAULT_HISTORY_LIMIT,
    ) -> None:
        self._current_state = initial_state or DEFAULT_INITIAL_STATE
        self._history: deque[StateTransition] = deque(maxlen=history_limit)
        self._session_name = session_name

    @property
    def current_state(self) -> ConnectionState:
        """Estado atual da máquina."""
        return self._current_state

    @property
    def history(self) -> list[StateTransition]:
        """Histórico de transições (cópia para evitar mutação externa)."""
        return list(self._history)

    @property
    def session_name(self) -> str:
        """Nome da sessão dona da máquina."""
        return self._session_name

    @property
    def is_terminal(self) -> bool:
        """Verifica se está em estado terminal."""
        return is_terminal(self._current_state)

    def can_transition_to(self, target: ConnectionState) -> bool:
        """Verifica se pode transitar para o estado alvo."""
        if not is_transition_valid(self._current_state, target):
            return False
        return evaluate_guards(self._current_state, target).allowed

    def get_valid_targets(self) -> frozenset[ConnectionState]:
        """Retorna estados de destino válidos a partir do estado atual."""
        return get_valid_targets(self._current_state)

    def transition(
        self,
        target: ConnectionState,
        trigger: str,
        metadata: dict[str, Any] | None = None,
    ) -> TransitionResult:
        """
        Tenta realizar uma transição de estado.

        Args:
            target: Estado de destino
            trigger: Identificador do gatilho (ex: 'qr_issued', 'connection_opened')
            metadata: Dados adicionais para auditoria (nunca credenciais)

        Returns:
            TransitionResult com sucesso/falha e dados da transição
        """
        if not is_transition_valid(self._current_state, target):
            return TransitionResult(
                success=False,
                error_reason=(
                    f"Transição inválida: {self._current_state.name} → {target.name}"
                ),
            )

        guard_result: GuardResult = evaluate_guards(self._current_state, target)
        if not guard_result.allowed:
            return TransitionResult(
                success=False,
                error_reason=guard_result.reason,
            )

        transition = StateTransition(
            from_state=self._current_state,
            to_state=target,
            trigger=trigger,
            metadata=metadata or {},
        )

        self._current_state = target
        self._history.append(transition)

        return TransitionResult(success=True, transition=transition)

    def get_state_summary(self) -> dict[str, Any]:
        """Retorna resumo do estado atual para observability."""
        return {
            "session_name": self._session_name,
            "current_state": self._current_state.name,
            "is_terminal": self.is_terminal,
            "transition_count": len(self._history),
            "valid_targets": sorted(s.name for s in self.get_valid_targets()),
        }

    def get_history_summary(self) -> list[dict[str, Any]]:
        """Retorna histórico em formato seguro para logs."""
        return [t.to_log_dict() for t in self._history]


def create_fsm(
    session_name: str,
    initial_state: ConnectionState | None = None,
) -> ConnectionStateMachine:
    """Factory function para criar a máquina de uma sessão."""
    return ConnectionStateMachine(
        initial_state=initial_state,
        session_name=session_name,
    )


INITIAL_STATES = frozenset({DEFAULT_INITIAL_STATE})
