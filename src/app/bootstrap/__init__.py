"""Bootstrap da aplicação: inicialização e wiring.

Este módulo é o composition root: configura logging, valida settings e
conecta implementações concretas aos protocolos.

Uso:
    from app.bootstrap import initialize_app, create_session_manager

    # Na inicialização do serviço
    initialize_app()
    validate_runtime_settings()
    manager = create_session_manager()
"""

from __future__ import annotations

import logging

from app.bootstrap.dependencies import (
    create_auth_state_store,
    create_code_renderer,
    create_messenger,
    create_session_manager,
    create_transport_provider,
)
from app.observability import get_correlation_id
from config.logging import configure_logging
from config.settings import (
    get_base_settings,
    get_server_settings,
    get_session_settings,
    get_whatsapp_settings,
)

# Nome do serviço para logs e métricas
SERVICE_NAME = "wa_session_gateway"


logger = logging.getLogger(__name__)


def initialize_app() -> None:
    """Inicializa a aplicação (logging estruturado JSON com correlation_id).

    Deve ser chamada uma vez no início do serviço.
    """
    configure_logging(
        level=get_server_settings().log_level,
        service_name=SERVICE_NAME,
        correlation_id_getter=get_correlation_id,
    )


def initialize_test_app() -> None:
    """Inicializa a aplicação para testes (logging em DEBUG)."""
    configure_logging(
        level="DEBUG",
        service_name=f"{SERVICE_NAME}_test",
        correlation_id_getter=get_correlation_id,
    )


def validate_runtime_settings() -> None:
    """Valida settings obrigatórias no startup.

    Em `staging`/`production` falha rápido para impedir boot inválido.
    Em `development` mantém alerta sem bloquear execução local.
    """
    base = get_base_settings()
    environment = base.environment
    strict_mode = base.strict_validation
    errors: list[str] = []

    errors.extend(f"base: {error}" for error in base.validate())
    errors.extend(f"server: {error}" for error in get_server_settings().validate())
    errors.extend(f"session: {error}" for error in get_session_settings().validate())
    errors.extend(f"whatsapp: {error}" for error in get_whatsapp_settings().validate())

    if not errors:
        logger.info(
            "settings_validated",
            extra={"component": "bootstrap", "result": "ok", "environment": environment},
        )
        return

    logger.warning(
        "settings_validation_failed",
        extra={
            "component": "bootstrap",
            "result": "failed",
            "environment": environment,
            "error_count": len(errors),
            "errors": errors,
        },
    )
    if strict_mode:
        details = "\n".join(f"- {error}" for error in errors)
        raise RuntimeError(f"Configuração inválida para {environment}:\n{details}")


__all__ = [
    "SERVICE_NAME",
    "create_auth_state_store",
    "create_code_renderer",
    "create_messenger",
    "create_session_manager",
    "create_transport_provider",
    "initialize_app",
    "initialize_test_app",
    "validate_runtime_settings",
]
