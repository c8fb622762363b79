"""
Regras de transição válidas entre estados de conexão.

Este módulo define o grafo de transições da máquina de estados
de cada sessão.
"""

from fsm.states.connection import TERMINAL_STATES, ConnectionState

# Tipagem explícita do mapa de transições
TransitionMap = dict[ConnectionState, frozenset[ConnectionState]]

# Chave: estado de origem
# Valor: conjunto de estados de destino permitidos
VALID_TRANSITIONS: TransitionMap = {
    # INITIALIZING: QR emitido, credenciais válidas retomadas, falha ou reabertura
    ConnectionState.INITIALIZING: frozenset({
        ConnectionState.INITIALIZING,
        ConnectionState.AWAITING_CODE,
        ConnectionState.CONNECTED,
        ConnectionState.DISCONNECTED,
        ConnectionState.LOGGED_OUT,
    }),

    # AWAITING_CODE: QR renovado, lido, expirado ou conexão reaberta
    ConnectionState.AWAITING_CODE: frozenset({
        ConnectionState.AWAITING_CODE,
        ConnectionState.INITIALIZING,
        ConnectionState.CONNECTED,
        ConnectionState.DISCONNECTED,
        ConnectionState.LOGGED_OUT,
    }),

    # CONNECTED: só sai por fechamento do transporte ou logout
    ConnectionState.CONNECTED: frozenset({
        ConnectionState.DISCONNECTED,
        ConnectionState.LOGGED_OUT,
    }),

    # DISCONNECTED: nova tentativa (automática ou manual) ou logout
    ConnectionState.DISCONNECTED: frozenset({
        ConnectionState.INITIALIZING,
        ConnectionState.LOGGED_OUT,
    }),

    ConnectionState.LOGGED_OUT: frozenset(),
}


def get_valid_targets(state: ConnectionState) -> frozenset[ConnectionState]:
    """
    Retorna os estados de destino válidos para um estado de origem.

    Args:
        state: Estado de origem

    Returns:
        Conjunto de estados de destino permitidos (vazio se terminal)
    """
    return VALID_TRANSITIONS.get(state, frozenset())


def is_transition_valid(from_state: ConnectionState, to_state: ConnectionState) -> bool:
    """
    Verifica se uma transição é válida segundo as regras definidas.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino

    Returns:
        True se a transição é permitida, False caso contrário
    """
    if from_state in TERMINAL_STATES:
        return False

    return to_state in get_valid_targets(from_state)


def validate_transition_map() -> list[str]:
    """
    Valida a integridade do mapa de transições.

    Verifica:
    - Todos os estados do enum estão no mapa
    - Estados terminais têm conjunto vazio
    - Nenhuma transição aponta para estado inexistente

    Returns:
        Lista de erros encontrados (vazia se válido)
    """
    errors: list[str] = []

    for state in ConnectionState:
        if state not in VALID_TRANSITIONS:
            errors.append(f"Estado {state.name} ausente em VALID_TRANSITIONS")

    for state in TERMINAL_STATES:
        targets = VALID_TRANSITIONS.get(state, frozenset())
        if targets:
            errors.append(
                f"Estado terminal {state.name} não deveria ter transições: {targets}"
            )

    for from_state, targets in VALID_TRANSITIONS.items():
        for target in targets:
            if not isinstance(target, ConnectionState):
                errors.append(
                    f"Transição {from_state.name} → {target}: destino inválido"
                )

    return errors
