"""Logging estruturado JSON do gateway.

    from config.logging import configure_logging, get_logger

    configure_logging(level="INFO", service_name="wa_session_gateway")
    logger = get_logger(__name__)
    logger.info("session_connected", extra={"session_name": "loja-01"})

Todo log carrega correlation_id e service. Credenciais, QR code e texto
de mensagens são mascarados pelo SensitiveFieldFilter.
"""

from config.logging.config import configure_logging, get_logger
from config.logging.filters import REDACTED, CorrelationIdFilter, SensitiveFieldFilter
from config.logging.formatters import (
    FIELD_RENAME_MAP,
    REQUIRED_LOG_FIELDS,
    create_json_formatter,
)

__all__ = [
    "FIELD_RENAME_MAP",
    "REDACTED",
    "REQUIRED_LOG_FIELDS",
    "CorrelationIdFilter",
    "SensitiveFieldFilter",
    "configure_logging",
    "create_json_formatter",
    "get_logger",
]
