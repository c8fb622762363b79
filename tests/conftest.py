"""Configuração do pytest para o gateway multi-sessão."""

import sys
from pathlib import Path

import pytest

# Adiciona src/ ao PYTHONPATH para permitir imports absolutos
src_path = Path(__file__).parent.parent / "src"
if str(src_path) not in sys.path:
    sys.path.insert(0, str(src_path))

from app.infra.stores import MemoryAuthStateStore  # noqa: E402
from app.services.reconnect_scheduler import ReconnectScheduler  # noqa: E402
from app.sessions import SessionLifecycleManager  # noqa: E402
from config.settings import SessionSettings, WhatsAppSettings  # noqa: E402
from tests.fakes.fake_transport import (  # noqa: E402
    FakeCodeRenderer,
    FakeTransportProvider,
    ManualSleep,
)


@pytest.fixture
def fake_transport() -> FakeTransportProvider:
    return FakeTransportProvider()


@pytest.fixture
def auth_store() -> MemoryAuthStateStore:
    return MemoryAuthStateStore()


@pytest.fixture
def renderer() -> FakeCodeRenderer:
    return FakeCodeRenderer()


@pytest.fixture
def manual_sleep() -> ManualSleep:
    return ManualSleep()


@pytest.fixture
def session_settings() -> SessionSettings:
    """Settings padrão com janela de restauração curta para testes."""
    return SessionSettings(restore_grace_seconds=0.05)


@pytest.fixture
def manager(
    fake_transport: FakeTransportProvider,
    auth_store: MemoryAuthStateStore,
    renderer: FakeCodeRenderer,
    manual_sleep: ManualSleep,
    session_settings: SessionSettings,
) -> SessionLifecycleManager:
    """Gerenciador com provider fake e reconexões controladas pelo teste."""
    return SessionLifecycleManager(
        transport=fake_transport,
        auth_store=auth_store,
        renderer=renderer,
        scheduler=ReconnectScheduler(sleep=manual_sleep),
        settings=session_settings,
        wa_settings=WhatsAppSettings(transport_factory="tests.fakes.fake_transport:build"),
    )
