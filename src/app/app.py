"""Entrypoint do gateway multi-sessão WhatsApp.

Inicializa o bootstrap e expõe a aplicação ASGI (FastAPI).

Uso (produção):
    uvicorn app.app:app --host 0.0.0.0 --port 9000

Uso (desenvolvimento):
    python -m app.app
"""

from __future__ import annotations

from contextlib import asynccontextmanager
from typing import TYPE_CHECKING

from fastapi import FastAPI, Request

from api.routes import create_api_router
from app.bootstrap import (
    create_messenger,
    create_session_manager,
    initialize_app,
    validate_runtime_settings,
)
from app.observability import get_correlation_id, reset_correlation_id, set_correlation_id
from config.logging import get_logger
from config.settings import get_server_settings

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable, Callable

    from fastapi import Response

    from app.sessions import SessionLifecycleManager
    from app.use_cases.sessions import SessionMessenger

# Inicializar logging ANTES de qualquer import que use logger
initialize_app()

logger = get_logger(__name__)

CORRELATION_HEADER = "x-correlation-id"


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Gerencia ciclo de vida da aplicação.

    Startup:
    - Valida configurações
    - Monta o gerenciador de sessões (se não injetado)
    - Recupera sessões com credenciais em disco

    Shutdown:
    - Cancela reconexões pendentes e encerra conexões
    """
    logger.info("app_starting", extra={"service": "wa-session-gateway"})
    if app.state.session_manager is None:
        validate_runtime_settings()
        app.state.session_manager = create_session_manager()
        app.state.messenger = create_messenger(app.state.session_manager)

    manager: SessionLifecycleManager = app.state.session_manager
    report = await manager.startup_recovery()
    logger.info(
        "app_started",
        extra={"recovered": len(report.recovered), "failed": len(report.failed)},
    )

    yield

    logger.info("app_shutting_down", extra={"service": "wa-session-gateway"})
    await manager.shutdown()


async def correlation_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Propaga x-correlation-id (ou gera um) e o devolve na resposta."""
    token = set_correlation_id(request.headers.get(CORRELATION_HEADER))
    correlation_id = get_correlation_id()
    try:
        response = await call_next(request)
    finally:
        reset_correlation_id(token)
    response.headers[CORRELATION_HEADER] = correlation_id
    return response


def create_app(
    session_manager: SessionLifecycleManager | None = None,
    messenger: SessionMessenger | None = None,
) -> FastAPI:
    """Cria e configura a aplicação FastAPI.

    Args:
        session_manager: Gerenciador já montado (testes); se omitido, é
            criado no startup a partir das settings
        messenger: Use case de mensagens; derivado do gerenciador se omitido

    Returns:
        Aplicação FastAPI configurada.
    """
    fastapi_app = FastAPI(
        title="WA Session Gateway",
        description="Gateway HTTP multi-sessão para contas WhatsApp",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
    )

    fastapi_app.state.session_manager = session_manager
    fastapi_app.state.messenger = messenger
    if session_manager is not None and messenger is None:
        fastapi_app.state.messenger = create_messenger(session_manager)

    fastapi_app.middleware("http")(correlation_middleware)

    # Registra todas as rotas
    fastapi_app.include_router(create_api_router())

    logger.info("app_configured", extra={"service": "wa-session-gateway"})

    return fastapi_app


# Aplicação ASGI exposta para uvicorn
app = create_app()


def main() -> None:
    """Entrypoint para execução direta."""
    import uvicorn

    settings = get_server_settings()
    logger.info("app_main", extra={"host": settings.host, "port": settings.port})
    uvicorn.run(
        "app.app:app",
        host=settings.host,
        port=settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
