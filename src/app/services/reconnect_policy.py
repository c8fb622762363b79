"""Política de reconexão após fechamento de conexão.

Função pura: recebe o código de desconexão e o contador de tentativas e
decide entre encerrar a sessão, agendar nova tentativa ou desistir.
Não toca em estado, relógio ou I/O.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import StrEnum

from config.settings import DEFAULT_LOGGED_OUT_CODE, DEFAULT_TRANSIENT_CODES, SessionSettings


class DisconnectKind(StrEnum):
    """Classificação do motivo de desconexão."""

    LOGGED_OUT = "logged_out"
    TRANSIENT = "transient"
    UNRECOVERABLE = "unrecoverable"


class ReconnectAction(StrEnum):
    """Ação decidida pela política."""

    TERMINATE = "terminate"
    RETRY = "retry"
    GIVE_UP = "give_up"


@dataclass(frozen=True, slots=True)
class ReconnectPolicy:
    """Parâmetros da política de reconexão.

    Attributes:
        logged_out_code: Código que indica logout do aparelho
        transient_codes: Códigos elegíveis para nova tentativa
        base_delay_seconds: Base do backoff linear (tentativa n espera base*n)
    """

    logged_out_code: int = DEFAULT_LOGGED_OUT_CODE
    transient_codes: frozenset[int] = DEFAULT_TRANSIENT_CODES
    base_delay_seconds: float = 5.0

    @classmethod
    def from_settings(cls, settings: SessionSettings) -> ReconnectPolicy:
        return cls(
            logged_out_code=settings.logged_out_code,
            transient_codes=settings.transient_codes,
            base_delay_seconds=settings.reconnect_base_delay_seconds,
        )


@dataclass(frozen=True, slots=True)
class ReconnectDecision:
    """Resultado da política.

    Attributes:
        action: Ação a executar
        kind: Classificação do motivo de desconexão
        reason_code: Código reportado pelo provider
        attempt: Número da tentativa agendada (RETRY) ou 0
        delay_seconds: Atraso até a tentativa (RETRY) ou 0
    """

    action: ReconnectAction
    kind: DisconnectKind
    reason_code: int | None
    attempt: int = 0
    delay_seconds: float = 0.0


DEFAULT_POLICY = ReconnectPolicy()


def classify_disconnect(
    reason_code: int | None,
    policy: ReconnectPolicy = DEFAULT_POLICY,
) -> DisconnectKind:
    """Classifica o código de desconexão.

    Códigos ausentes ou desconhecidos são tratados como irrecuperáveis.
    """
    if reason_code is None:
        return DisconnectKind.UNRECOVERABLE
    if reason_code == policy.logged_out_code:
        return DisconnectKind.LOGGED_OUT
    if reason_code in policy.transient_codes:
        return DisconnectKind.TRANSIENT
    return DisconnectKind.UNRECOVERABLE


def retry_delay(attempt: int, base_delay_seconds: float) -> float:
    """Backoff linear: a tentativa n espera base * n segundos."""
    return base_delay_seconds * attempt


def decide_reconnect(
    reason_code: int | None,
    attempts: int,
    max_attempts: int,
    policy: ReconnectPolicy = DEFAULT_POLICY,
) -> ReconnectDecision:
    """Decide o que fazer após o fechamento de uma conexão.

    Args:
        reason_code: Código de desconexão reportado
        attempts: Tentativas já realizadas no episódio atual
        max_attempts: Limite de tentativas da sessão
        policy: Parâmetros da política

    Returns:
        TERMINATE em logout, RETRY enquanto houver tentativas para códigos
        transitórios e GIVE_UP nos demais casos.
    """
    kind = classify_disconnect(reason_code, policy)

    if kind == DisconnectKind.LOGGED_OUT:
        return ReconnectDecision(
            action=ReconnectAction.TERMINATE,
            kind=kind,
            reason_code=reason_code,
        )

    if kind == DisconnectKind.TRANSIENT and attempts < max_attempts:
        attempt = attempts + 1
        return ReconnectDecision(
            action=ReconnectAction.RETRY,
            kind=kind,
            reason_code=reason_code,
            attempt=attempt,
            delay_seconds=retry_delay(attempt, policy.base_delay_seconds),
        )

    return ReconnectDecision(
        action=ReconnectAction.GIVE_UP,
        kind=kind,
        reason_code=reason_code,
    )
