"""
Exports públicos do módulo fsm/manager.

Máquina de estados de conexão das sessões.
"""

from fsm.manager.machine import (
    DEFAULT_HISTORY_LIMIT,
    INITIAL_STATES,
    ConnectionStateMachine,
    create_fsm,
)

__all__ = [
    "DEFAULT_HISTORY_LIMIT",
    "INITIAL_STATES",
    "ConnectionStateMachine",
    "create_fsm",
]
