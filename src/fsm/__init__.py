"""
Módulo FSM: Máquina de estados de conexão das sessões.

Implementa a FSM determinística que governa o ciclo de vida de cada
sessão: carregamento de credenciais, QR code, conexão, queda e logout.

Estrutura:
    - states/: Definições dos estados (ConnectionState enum)
    - transitions/: Regras de transição (VALID_TRANSITIONS)
    - rules/: Guards e invariantes
    - manager/: Máquina de estados (ConnectionStateMachine)
    - types/: Tipos de dados (StateTransition, TransitionResult)
"""

from fsm.manager import (
    INITIAL_STATES,
    ConnectionStateMachine,
    create_fsm,
)
from fsm.rules import (
    GuardResult,
    evaluate_guards,
)
from fsm.states import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    ConnectionState,
    is_ready,
    is_terminal,
    is_valid_state,
)
from fsm.transitions import (
    VALID_TRANSITIONS,
    get_valid_targets,
    is_transition_valid,
    validate_transition_map,
)
from fsm.types import (
    StateTransition,
    TransitionResult,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "INITIAL_STATES",
    "TERMINAL_STATES",
    "VALID_TRANSITIONS",
    "ConnectionState",
    "ConnectionStateMachine",
    "GuardResult",
    "StateTransition",
    "TransitionResult",
    "create_fsm",
    "evaluate_guards",
    "get_valid_targets",
    "is_ready",
    "is_terminal",
    "is_transition_valid",
    "is_valid_state",
    "validate_transition_map",
]
