"""
Tipos e estruturas de dados para transições de estado.

Registros imutáveis usados para auditar a sequência de transições
de cada sessão.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from fsm.states.connection import ConnectionState


@dataclass(frozen=True, slots=True)
class StateTransition:
    """
    Representa uma transição de estado na FSM.

    Attributes:
        from_state: Estado de origem da transição
        to_state: Estado de destino da transição
        trigger: Identificador do gatilho (ex: 'qr_issued', 'connection_closed')
        metadata: Dados adicionais para auditoria (nunca credenciais)
        timestamp: Momento da transição (UTC)
    """

    from_state: ConnectionState
    to_state: ConnectionState
    trigger: str
    metadata: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(
        default_factory=lambda: datetime.now(UTC)
    )

    def __post_init__(self) -> None:
        """Valida invariantes do objeto após inicialização."""
        if not self.trigger or not self.trigger.strip():
            raise ValueError("trigger não pode ser vazio")

    def to_log_dict(self) -> dict[str, Any]:
        """Retorna representação segura para logs."""
        return {
            "from_state": self.from_state.name,
            "to_state": self.to_state.name,
            "trigger": self.trigger,
            "timestamp": self.timestamp.isoformat(),
            "metadata": self.metadata,
        }


@dataclass(frozen=True, slots=True)
class TransitionResult:
    """
    Resultado de uma tentativa de transição.

    Attributes:
        success: Se a transição foi bem-sucedida
        transition: Dados da transição (se success=True)
        error_reason: Motivo da falha (se success=False)
    """

    success: bool
    transition: StateTransition | None = None
    error_reason: str | None = None

    def __post_init__(self) -> None:
        """Valida consistência do resultado."""
        if self.success and self.transition is None:
            raise ValueError("Transição bem-sucedida deve incluir transition")
        if not self.success and self.error_reason is None:
            raise ValueError("Transição falha deve incluir error_reason")
