"""Filters de logging: contexto e redação.

- CorrelationIdFilter injeta `correlation_id` (ID da requisição ou nome da
  sessão cujo evento está sendo processado) e `service`.
- SensitiveFieldFilter mascara campos que nunca podem sair nos logs:
  credenciais, QR code e conteúdo de mensagens.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Callable, Iterable

REDACTED = "[redacted]"

# Nomes de atributos (via `extra`) que carregam dados sensíveis
SENSITIVE_FIELDS: frozenset[str] = frozenset({
    "creds",
    "code_payload",
    "qr",
    "challenge",
    "text",
    "mensagem",
    "legenda",
})


class CorrelationIdFilter(logging.Filter):
    """Injeta correlation_id e service em cada record de log.

    Se correlation_id já foi passado via `extra`, o valor é preservado.
    Sem getter, usa string vazia.
    """

    def __init__(
        self,
        service_name: str,
        correlation_id_getter: Callable[[], str] | None = None,
    ) -> None:
        super().__init__()
        self._service_name = service_name
        self._get_correlation_id = correlation_id_getter or (lambda: "")

    def filter(self, record: logging.LogRecord) -> bool:
        existing = getattr(record, "correlation_id", None)
        record.correlation_id = existing if existing else self._get_correlation_id()
        record.service = self._service_name
        return True


class SensitiveFieldFilter(logging.Filter):
    """Substitui por REDACTED os atributos sensíveis presentes no record.

    Não descarta records; apenas mascara valores não vazios.
    """

    def __init__(self, fields: Iterable[str] = SENSITIVE_FIELDS) -> None:
        super().__init__()
        self._fields = frozenset(fields)

    def filter(self, record: logging.LogRecord) -> bool:
        for name in self._fields:
            if getattr(record, name, None):
                setattr(record, name, REDACTED)
        return True
