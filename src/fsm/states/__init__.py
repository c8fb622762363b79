"""
Exports públicos do módulo fsm/states.

Estados canônicos de conexão das sessões.
"""

from fsm.states.connection import (
    DEFAULT_INITIAL_STATE,
    TERMINAL_STATES,
    ConnectionState,
    is_ready,
    is_terminal,
    is_valid_state,
)

__all__ = [
    "DEFAULT_INITIAL_STATE",
    "TERMINAL_STATES",
    "ConnectionState",
    "is_ready",
    "is_terminal",
    "is_valid_state",
]
