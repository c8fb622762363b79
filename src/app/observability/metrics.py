"""Registro de métricas via structured logging.

As métricas são registradas como logs estruturados e podem ser agregadas
posteriormente (BigQuery, CloudWatch Insights, Loki etc.).

Métricas suportadas:
- Latência: tempo de execução por componente/operação
- Transição: mudança de estado de conexão de uma sessão
- Reconexão: decisão tomada após um fechamento de conexão
- Recuperação: resultado da restauração de sessões no startup

Uso:
    from app.observability import record_latency, record_session_transition

    start = time.perf_counter()
    # ... operação ...
    record_latency("messenger", "send_text", (time.perf_counter() - start) * 1000)
"""

from __future__ import annotations

import logging

from app.observability.correlation import get_correlation_id

logger = logging.getLogger(__name__)


def record_latency(
    component: str,
    operation: str,
    latency_ms: float,
    correlation_id: str | None = None,
) -> None:
    """Registra latência de operação.

    Args:
        component: Nome do componente (ex: "messenger", "lifecycle")
        operation: Nome da operação (ex: "send_text", "open_connection")
        latency_ms: Latência em milissegundos
        correlation_id: ID de correlação (padrão: o do contexto atual)
    """
    logger.info(
        "metric_latency",
        extra={
            "metric_type": "latency",
            "component": component,
            "operation": operation,
            "latency_ms": round(latency_ms, 2),
            "correlation_id": correlation_id or get_correlation_id(),
        },
    )


def record_session_transition(
    session_name: str,
    from_state: str,
    to_state: str,
    trigger: str,
) -> None:
    """Registra transição de estado de conexão."""
    logger.info(
        "metric_session_transition",
        extra={
            "metric_type": "session_transition",
            "component": "lifecycle",
            "session_name": session_name,
            "from_state": from_state,
            "to_state": to_state,
            "trigger": trigger,
        },
    )


def record_reconnect(
    session_name: str,
    action: str,
    reason_code: int | None,
    attempt: int = 0,
    delay_seconds: float = 0.0,
) -> None:
    """Registra decisão de reconexão.

    Args:
        session_name: Sessão afetada
        action: "terminate", "retry" ou "give_up"
        reason_code: Código de desconexão reportado pelo provider
        attempt: Número da tentativa agendada (apenas retry)
        delay_seconds: Atraso até a tentativa (apenas retry)
    """
    logger.info(
        "metric_reconnect",
        extra={
            "metric_type": "reconnect",
            "component": "reconnect",
            "session_name": session_name,
            "action": action,
            "reason_code": reason_code,
            "attempt": attempt,
            "delay_seconds": delay_seconds,
        },
    )


def record_recovery(
    recovered: int,
    failed: int,
    metadata: dict[str, str | float | int] | None = None,
) -> None:
    """Registra resultado da recuperação de sessões no startup."""
    extra: dict[str, str | float | int] = {
        "metric_type": "recovery",
        "component": "recovery",
        "recovered": recovered,
        "failed": failed,
    }
    if metadata:
        extra.update(metadata)

    logger.info("metric_recovery", extra=extra)
