"""
Guards e invariantes para transições de estado de conexão.

Guards são regras adicionais avaliadas depois do mapa de transições
e podem bloquear uma transição estruturalmente válida.
"""

from collections.abc import Callable

from fsm.states.connection import TERMINAL_STATES, ConnectionState

# Estados que aceitam transição reflexiva:
# - AWAITING_CODE: renovação do QR code pelo servidor
# - INITIALIZING: reabertura da conexão antes do primeiro evento
REFLEXIVE_STATES: frozenset[ConnectionState] = frozenset({
    ConnectionState.AWAITING_CODE,
    ConnectionState.INITIALIZING,
})


class GuardResult:
    """
    Resultado da avaliação de um guard.

    Attributes:
        allowed: Se a transição é permitida
        reason: Motivo do bloqueio (se allowed=False)
    """

    __slots__ = ("allowed", "reason")

    def __init__(self, allowed: bool, reason: str | None = None) -> None:
        self.allowed = allowed
        self.reason = reason

    @classmethod
    def allow(cls) -> "GuardResult":
        """Cria resultado permitindo a transição."""
        return cls(allowed=True)

    @classmethod
    def deny(cls, reason: str) -> "GuardResult":
        """Cria resultado negando a transição."""
        return cls(allowed=False, reason=reason)


Guard = Callable[[ConnectionState, ConnectionState], GuardResult]


def guard_terminal_state(
    from_state: ConnectionState,
    to_state: ConnectionState,
) -> GuardResult:
    """Guard: Estados terminais não permitem saída."""
    if from_state in TERMINAL_STATES:
        return GuardResult.deny(
            f"Estado {from_state.name} é terminal, não permite transição"
        )
    return GuardResult.allow()


def guard_same_state(
    from_state: ConnectionState,
    to_state: ConnectionState,
) -> GuardResult:
    """
    Guard: Previne transição para o mesmo estado.

    Exceção: estados em REFLEXIVE_STATES (QR renovado, reabertura).
    """
    if from_state == to_state and from_state not in REFLEXIVE_STATES:
        return GuardResult.deny(
            f"Transição reflexiva não permitida: {from_state.name} → {to_state.name}"
        )
    return GuardResult.allow()


def guard_valid_state(
    from_state: ConnectionState,
    to_state: ConnectionState,
) -> GuardResult:
    """Guard: Verifica se ambos os estados são válidos."""
    if not isinstance(from_state, ConnectionState):
        return GuardResult.deny(f"Estado de origem inválido: {from_state}")

    if not isinstance(to_state, ConnectionState):
        return GuardResult.deny(f"Estado de destino inválido: {to_state}")

    return GuardResult.allow()


# Aplicados em ordem; todos devem retornar allow() para a transição prosseguir
DEFAULT_GUARDS: list[Guard] = [
    guard_valid_state,
    guard_terminal_state,
    guard_same_state,
]


def evaluate_guards(
    from_state: ConnectionState,
    to_state: ConnectionState,
    guards: list[Guard] | None = None,
) -> GuardResult:
    """
    Avalia todos os guards para uma transição.

    Args:
        from_state: Estado de origem
        to_state: Estado de destino
        guards: Lista de guards a aplicar (usa DEFAULT_GUARDS se None)

    Returns:
        GuardResult do primeiro guard que negar, ou allow() se todos passarem
    """
    guards_to_apply = guards if guards is not None else DEFAULT_GUARDS

    for guard in guards_to_apply:
        result = guard(from_state, to_state)
        if not result.allowed:
            return result

    return GuardResult.allow()
