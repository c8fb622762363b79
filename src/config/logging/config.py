"""Configuração centralizada de logging.

Logs saem em JSON numa única stream, com correlation_id e service
injetados e campos sensíveis mascarados antes da formatação.

Uso:
    from config.logging import configure_logging, get_logger

    # Na inicialização do serviço (app/bootstrap/)
    configure_logging(level="INFO", service_name="wa_session_gateway")

    # Em qualquer módulo
    logger = get_logger(__name__)
    logger.info("session_created", extra={"session_name": "loja-01"})
"""

from __future__ import annotations

import logging
from typing import IO, TYPE_CHECKING

from config.logging.filters import CorrelationIdFilter, SensitiveFieldFilter
from config.logging.formatters import create_json_formatter

if TYPE_CHECKING:
    from collections.abc import Callable

VALID_LOG_LEVELS = frozenset({"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"})

DEFAULT_SERVICE_NAME = "wa_session_gateway"

# Bibliotecas que poluem a saída em INFO (acesso HTTP, cliente de testes, Pillow)
NOISY_LOGGERS = ("uvicorn.access", "httpx", "PIL")


def configure_logging(
    level: str = "INFO",
    service_name: str = DEFAULT_SERVICE_NAME,
    correlation_id_getter: Callable[[], str] | None = None,
    stream: IO[str] | None = None,
) -> None:
    """Configura o root logger com um único handler JSON.

    Chamadas repetidas substituem o handler anterior.

    Args:
        level: Nível de log (DEBUG, INFO, WARNING, ERROR, CRITICAL).
        service_name: Nome do serviço para identificação nos logs.
        correlation_id_getter: Retorna o correlation_id do contexto atual.
        stream: Destino dos logs (padrão: stderr).

    Raises:
        ValueError: Se o nível de log for inválido.
    """
    level_upper = level.upper()
    if level_upper not in VALID_LOG_LEVELS:
        raise ValueError(
            f"Nível de log inválido: {level}. "
            f"Válidos: {', '.join(sorted(VALID_LOG_LEVELS))}"
        )

    handler = logging.StreamHandler(stream)
    handler.setLevel(level_upper)
    handler.setFormatter(create_json_formatter())
    handler.addFilter(CorrelationIdFilter(service_name, correlation_id_getter))
    handler.addFilter(SensitiveFieldFilter())

    root = logging.getLogger()
    root.setLevel(level_upper)
    root.handlers = [handler]

    noisy_level = logging.DEBUG if level_upper == "DEBUG" else logging.WARNING
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(noisy_level)


def get_logger(name: str) -> logging.Logger:
    """Retorna logger para o módulo (geralmente `__name__`)."""
    return logging.getLogger(name)
