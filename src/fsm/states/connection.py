"""
Estados canônicos de conexão de uma sessão.

Este módulo define os estados que uma sessão pode assumir durante
seu ciclo de vida: do carregamento de credenciais até o logout.
"""

from enum import StrEnum


class ConnectionState(StrEnum):
    """
    Estados canônicos da conexão de uma sessão.

    Estados não-terminais:
        - INITIALIZING: Credenciais carregando e tentativa de conexão iniciada
        - AWAITING_CODE: QR code emitido, aguardando leitura no aparelho
        - CONNECTED: Conexão autenticada, pronta para mensagens
        - DISCONNECTED: Transporte fechado sem logout (pode haver nova tentativa)

    Estados terminais:
        - LOGGED_OUT: Logout explícito ou motivo irrecuperável; sessão destruída
    """

    INITIALIZING = "INITIALIZING"
    AWAITING_CODE = "AWAITING_CODE"
    CONNECTED = "CONNECTED"
    DISCONNECTED = "DISCONNECTED"
    LOGGED_OUT = "LOGGED_OUT"

    def __str__(self) -> str:
        return self.value


# Uma vez em estado terminal, a sessão é removida do registry
TERMINAL_STATES: frozenset[ConnectionState] = frozenset({
    ConnectionState.LOGGED_OUT,
})

# Estado inicial de toda sessão recém-criada ou reaberta
DEFAULT_INITIAL_STATE: ConnectionState = ConnectionState.INITIALIZING


def is_terminal(state: ConnectionState) -> bool:
    """
    Verifica se o estado é terminal (sessão encerrada).

    Args:
        state: Estado a ser verificado

    Returns:
        True se o estado é terminal, False caso contrário
    """
    return state in TERMINAL_STATES


def is_ready(state: ConnectionState) -> bool:
    """Verifica se o estado permite envio de mensagens."""
    return state == ConnectionState.CONNECTED


def is_valid_state(state: ConnectionState) -> bool:
    """Verifica se o valor é um estado válido do enum."""
    return isinstance(state, ConnectionState)
