"""Testes da recuperação de sessões no startup."""

from __future__ import annotations

import pytest

from app.sessions import SessionLifecycleManager
from tests.fakes.fake_transport import FakeConnection, FakeTransportProvider


class TestStartupRecovery:
    """Testes de startup_recovery."""

    @pytest.mark.asyncio
    async def test_missing_root_is_created_and_nothing_recovered(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        report = await manager.startup_recovery()

        assert report.root_created is True
        assert report.total == 0
        assert fake_transport.connections == []

    @pytest.mark.asyncio
    async def test_each_credentials_dir_is_recovered(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        auth_store,
    ) -> None:
        auth_store.seed("loja-a")
        auth_store.seed("loja-b")

        report = await manager.startup_recovery()

        assert report.root_created is False
        assert sorted(report.recovered) == ["loja-a", "loja-b"]
        assert report.failed == []
        assert len(fake_transport.connections) == 2
        assert sorted(manager.registry.names()) == ["loja-a", "loja-b"]

    @pytest.mark.asyncio
    async def test_failure_in_one_session_does_not_stop_others(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        auth_store,
    ) -> None:
        auth_store.seed("loja-a")
        auth_store.seed("loja-b")

        def fail_for_a(connection: FakeConnection) -> None:
            if connection.auth_state.session_name == "loja-a":
                raise RuntimeError("handshake falhou")

        fake_transport.on_connect = fail_for_a

        report = await manager.startup_recovery()

        assert report.failed == ["loja-a"]
        assert report.recovered == ["loja-b"]
        assert manager.get("loja-a") is None
        assert manager.get("loja-b") is not None

    @pytest.mark.asyncio
    async def test_empty_root_recovers_nothing(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        auth_store,
    ) -> None:
        await auth_store.ensure_root()

        report = await manager.startup_recovery()

        assert report.root_created is False
        assert report.total == 0
        assert fake_transport.connections == []
