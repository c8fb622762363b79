"""Factories de dependências: criação de implementações concretas.

Centraliza a criação de store de credenciais, renderizador, transport
provider e gerenciador de sessões a partir das settings de ambiente.
"""

from __future__ import annotations

import logging
import os
from typing import TYPE_CHECKING

from app.infra.qr import QrCodeRenderer
from app.infra.stores import FileAuthStateStore, MemoryAuthStateStore
from app.infra.transport import load_transport_provider
from app.sessions import SessionLifecycleManager
from app.use_cases.sessions import SessionMessenger
from config.settings import get_session_settings, get_whatsapp_settings

if TYPE_CHECKING:
    from app.protocols.auth_store import AuthStateStoreProtocol
    from app.protocols.code_renderer import CodeRendererProtocol
    from app.protocols.transport import TransportProviderProtocol

logger = logging.getLogger(__name__)


def create_auth_state_store() -> AuthStateStoreProtocol:
    """Cria store de credenciais baseado na configuração.

    Lê AUTH_STORE_BACKEND da env:
    - "file": FileAuthStateStore sob AUTH_ROOT_DIR (padrão)
    - "memory": MemoryAuthStateStore (dev only)
    """
    backend = os.getenv("AUTH_STORE_BACKEND", "file").lower()
    settings = get_session_settings()

    if backend == "memory":
        logger.warning(
            "auth_store_memory_backend",
            extra={"component": "bootstrap", "hint": "credenciais não sobrevivem a reinícios"},
        )
        return MemoryAuthStateStore()

    if backend != "file":
        raise ValueError(f"AUTH_STORE_BACKEND desconhecido: {backend}")

    logger.info(
        "auth_store_configured",
        extra={"backend": "file", "root": str(settings.auth_root_dir)},
    )
    return FileAuthStateStore(settings.auth_root_dir)


def create_code_renderer() -> CodeRendererProtocol:
    """Cria renderizador de QR code (PNG em data URL)."""
    return QrCodeRenderer()


def create_transport_provider() -> TransportProviderProtocol:
    """Resolve o provider configurado em WA_TRANSPORT_FACTORY."""
    return load_transport_provider(get_whatsapp_settings())


def create_session_manager(
    *,
    transport: TransportProviderProtocol | None = None,
    auth_store: AuthStateStoreProtocol | None = None,
    renderer: CodeRendererProtocol | None = None,
) -> SessionLifecycleManager:
    """Monta o gerenciador de sessões com as dependências concretas."""
    return SessionLifecycleManager(
        transport=transport or create_transport_provider(),
        auth_store=auth_store or create_auth_state_store(),
        renderer=renderer or create_code_renderer(),
        settings=get_session_settings(),
        wa_settings=get_whatsapp_settings(),
    )


def create_messenger(manager: SessionLifecycleManager) -> SessionMessenger:
    """Cria o use case de mensagens sobre o registro do gerenciador."""
    return SessionMessenger(
        manager.registry,
        jid_suffix=get_whatsapp_settings().jid_suffix,
    )
