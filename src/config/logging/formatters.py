"""Formatter JSON (python-json-logger) com campos padronizados."""

from __future__ import annotations

from pythonjsonlogger.json import JsonFormatter

# Presentes em todo log; extras (`session_name`, `reason_code`...) são anexados
REQUIRED_LOG_FIELDS = (
    "asctime",
    "levelname",
    "name",
    "message",
    "correlation_id",
    "service",
)

FIELD_RENAME_MAP = {
    "levelname": "level",
    "name": "logger",
}


def create_json_formatter() -> JsonFormatter:
    """Cria o formatter JSON.

    Exemplo de saída:
        {"asctime": "2026-02-02 10:30:00,120", "level": "INFO",
         "logger": "app.sessions.manager", "message": "session_connected",
         "correlation_id": "loja-01", "service": "wa_session_gateway",
         "session_name": "loja-01"}
    """
    return JsonFormatter(
        " ".join(f"%({field})s" for field in REQUIRED_LOG_FIELDS),
        rename_fields=FIELD_RENAME_MAP,
    )
