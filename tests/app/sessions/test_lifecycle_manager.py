"""Testes do SessionLifecycleManager com provider fake.

Testa:
    - Criação e reaproveitamento de sessão
    - Eventos de QR, abertura, fechamento e credenciais
    - Política de reconexão com backoff linear
    - Logout, desconexão manual e reconexão forçada
    - Concorrência no mesmo nome e shutdown
"""

from __future__ import annotations

import asyncio

import pytest

from app.protocols.transport import TransportEvent
from app.sessions import SessionLifecycleManager
from fsm.states import ConnectionState
from tests.fakes.async_helpers import wait_until
from tests.fakes.fake_transport import FakeTransportProvider, ManualSleep
from utils.errors import SessionNotFoundError, TransportError

USER_ID = "5511999990000:1@s.whatsapp.net"


async def _settle(session) -> None:
    """Aguarda o processamento dos eventos já emitidos para a sessão."""
    assert session.handle is not None
    await session.handle.join()


async def _wait_reopened(session, transport: FakeTransportProvider, count: int) -> None:
    await wait_until(
        lambda: len(transport.connections) == count
        and session.handle is not None
        and session.handle.connection is transport.last
    )


# ──────────────────────────────────────────────────────────────────────────────
# Criação
# ──────────────────────────────────────────────────────────────────────────────


class TestCreateOrGet:
    """Testes de create_or_get."""

    @pytest.mark.asyncio
    async def test_creates_session_in_initializing(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        """Nome novo cria sessão, conexão e registra listener."""
        session = await manager.create_or_get("loja")

        assert session.state == ConnectionState.INITIALIZING
        assert manager.get("loja") is session
        assert len(fake_transport.connections) == 1
        assert fake_transport.last.listener_count == 1
        assert fake_transport.last.version == fake_transport.version
        assert fake_transport.last.options.browser == ("WhatsApp API", "Chrome", "1.0.0")
        assert fake_transport.last.options.mark_online_on_connect is False

    @pytest.mark.asyncio
    async def test_returns_connected_session_without_new_connection(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        """Sessão conectada é devolvida sem reabrir conexão."""
        session = await manager.create_or_get("loja")
        fake_transport.last.emit_open(USER_ID)
        await _settle(session)

        again = await manager.create_or_get("loja")

        assert again is session
        assert len(fake_transport.connections) == 1

    @pytest.mark.asyncio
    async def test_reopens_non_ready_session_and_detaches_previous(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        """Sessão não conectada recebe conexão nova; a anterior é encerrada."""
        session = await manager.create_or_get("loja")
        first = fake_transport.last
        session.reconnect_attempts = 2

        again = await manager.create_or_get("loja")

        assert again is session
        assert len(fake_transport.connections) == 2
        assert first.listener_count == 0
        assert first.terminate_calls == 1
        assert fake_transport.last.listener_count == 1
        assert session.reconnect_attempts == 2

    @pytest.mark.asyncio
    async def test_connect_failure_raises_transport_error(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        """Falha do provider não registra sessão nova."""
        fake_transport.connect_error = RuntimeError("boom")

        with pytest.raises(TransportError):
            await manager.create_or_get("loja")

        assert manager.get("loja") is None

    @pytest.mark.asyncio
    async def test_concurrent_calls_leave_single_live_handle(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        """Chamadas concorrentes no mesmo nome resultam em um único handle vivo."""
        first, second = await asyncio.gather(
            manager.create_or_get("loja"),
            manager.create_or_get("loja"),
        )

        assert first is second
        live = [conn for conn in fake_transport.connections if conn.listener_count > 0]
        assert len(live) == 1
        assert first.handle is not None
        assert first.handle.connection is live[0]


# ──────────────────────────────────────────────────────────────────────────────
# Eventos de conexão
# ──────────────────────────────────────────────────────────────────────────────


class TestConnectionEvents:
    """Testes de processamento de eventos."""

    @pytest.mark.asyncio
    async def test_qr_event_stores_rendered_code(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        renderer,
    ) -> None:
        """QR emitido vira data URL e sessão passa a aguardar leitura."""
        session = await manager.create_or_get("loja")
        fake_transport.last.emit_qr("2@abc")
        await _settle(session)

        assert session.state == ConnectionState.AWAITING_CODE
        assert session.code_payload == "data:image/png;base64,2@abc"
        assert session.awaiting_code is True
        assert renderer.rendered == ["2@abc"]

    @pytest.mark.asyncio
    async def test_new_qr_replaces_previous(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        """QR renovado substitui o anterior."""
        session = await manager.create_or_get("loja")
        fake_transport.last.emit_qr("2@first")
        fake_transport.last.emit_qr("2@second")
        await _settle(session)

        assert session.code_payload == "data:image/png;base64,2@second"

    @pytest.mark.asyncio
    async def test_open_clears_code_and_sets_identity(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        """Abertura conecta, guarda identidade e descarta QR."""
        session = await manager.create_or_get("loja")
        fake_transport.last.emit_qr("2@abc")
        fake_transport.last.emit_open(USER_ID)
        await _settle(session)

        assert session.is_ready is True
        assert session.identity == USER_ID
        assert session.code_payload is None
        assert session.awaiting_code is False

    @pytest.mark.asyncio
    async def test_qr_after_connected_is_ignored(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        """QR não coexiste com identidade autenticada."""
        session = await manager.create_or_get("loja")
        fake_transport.last.emit_open(USER_ID)
        fake_transport.last.emit_qr("2@late")
        await _settle(session)

        assert session.is_ready is True
        assert session.code_payload is None

    @pytest.mark.asyncio
    async def test_creds_update_is_persisted(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        auth_store,
    ) -> None:
        """Atualização de credenciais é gravada no store."""
        session = await manager.create_or_get("loja")
        fake_transport.last.emit_creds({"registered": True, "me": {"id": USER_ID}})
        await _settle(session)

        assert auth_store.creds_of("loja") == {"registered": True, "me": {"id": USER_ID}}
        assert session.handle is not None
        assert session.handle.auth_state.registered is True

    @pytest.mark.asyncio
    async def test_events_from_detached_handle_are_ignored(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
    ) -> None:
        """Eventos de conexão substituída nunca alteram a sessão."""
        session = await manager.create_or_get("loja")
        old_handle = session.handle
        old_connection = fake_transport.last
        await manager.create_or_get("loja")

        old_connection.emit_qr("2@stale")
        assert old_handle is not None
        old_handle.inject(TransportEvent.opened(USER_ID))
        await _settle(session)

        assert session.state == ConnectionState.INITIALIZING
        assert session.code_payload is None
        assert old_handle.is_detached is True

    @pytest.mark.asyncio
    async def test_registered_creds_restore_without_open_event(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        auth_store,
    ) -> None:
        """Credenciais pareadas conectam quando o provider reporta a identidade."""
        auth_store.seed("loja", {"registered": True})
        fake_transport.on_connect = lambda conn: conn.authenticate(USER_ID)

        session = await manager.create_or_get("loja")
        await wait_until(lambda: session.is_ready)

        assert session.identity == USER_ID
        assert session.machine.history[-1].trigger == "restored"

    @pytest.mark.asyncio
    async def test_registered_creds_without_identity_stay_initializing(
        self,
        manager: SessionLifecycleManager,
        auth_store,
    ) -> None:
        """Sem identidade dentro da janela, a sessão segue aguardando eventos."""
        auth_store.seed("loja", {"registered": True})

        session = await manager.create_or_get("loja")
        await asyncio.sleep(0.1)

        assert session.state == ConnectionState.INITIALIZING


# ──────────────────────────────────────────────────────────────────────────────
# Reconexão
# ──────────────────────────────────────────────────────────────────────────────


class TestReconnect:
    """Testes da política de reconexão aplicada pelo gerenciador."""

    @pytest.mark.asyncio
    async def test_transient_close_retries_with_linear_backoff(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        manual_sleep: ManualSleep,
    ) -> None:
        """Fechamentos transitórios reagendam com atrasos 5, 10 e 15 segundos."""
        session = await manager.create_or_get("loja")

        for attempt in (1, 2, 3):
            fake_transport.last.emit_close(515)
            await _settle(session)
            assert session.state == ConnectionState.DISCONNECTED
            assert session.reconnect_attempts == attempt
            await wait_until(lambda: manual_sleep.pending == 1)
            manual_sleep.release()
            await _wait_reopened(session, fake_transport, attempt + 1)

        assert manual_sleep.delays == [5.0, 10.0, 15.0]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        manual_sleep: ManualSleep,
    ) -> None:
        """Esgotadas as tentativas, a sessão fica desconectada e sem QR."""
        session = await manager.create_or_get("loja")
        session.reconnect_attempts = session.max_reconnect_attempts
        fake_transport.last.emit_qr("2@abc")
        fake_transport.last.emit_close(428)
        await _settle(session)

        assert session.state == ConnectionState.DISCONNECTED
        assert session.code_payload is None
        assert manager.get("loja") is session
        assert manager.scheduler.has_pending("loja") is False
        assert manual_sleep.delays == []

    @pytest.mark.asyncio
    async def test_unknown_code_gives_up_immediately(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        manual_sleep: ManualSleep,
    ) -> None:
        """Códigos fora do conjunto transitório não geram nova tentativa."""
        session = await manager.create_or_get("loja")
        fake_transport.last.emit_close(408)
        await _settle(session)

        assert session.state == ConnectionState.DISCONNECTED
        assert session.reconnect_attempts == 0
        assert manager.scheduler.has_pending("loja") is False

    @pytest.mark.asyncio
    async def test_connected_resets_attempts(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        manual_sleep: ManualSleep,
    ) -> None:
        """Conectar após tentativas zera o contador."""
        session = await manager.create_or_get("loja")
        fake_transport.last.emit_close(503)
        await _settle(session)
        await wait_until(lambda: manual_sleep.pending == 1)
        manual_sleep.release()
        await _wait_reopened(session, fake_transport, 2)

        fake_transport.last.emit_open(USER_ID)
        await _settle(session)

        assert session.is_ready is True
        assert session.reconnect_attempts == 0

    @pytest.mark.asyncio
    async def test_logged_out_close_terminates_session(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        auth_store,
    ) -> None:
        """Código de logout remove a sessão e apaga as credenciais."""
        session = await manager.create_or_get("loja")
        handle = session.handle
        fake_transport.last.emit_open(USER_ID)
        fake_transport.last.emit_close(401)
        assert handle is not None
        await handle.join()

        assert manager.get("loja") is None
        assert session.state == ConnectionState.LOGGED_OUT
        assert session.identity is None
        assert await auth_store.exists("loja") is False
        assert handle.is_detached is True

    @pytest.mark.asyncio
    async def test_retry_skipped_when_session_removed(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        manual_sleep: ManualSleep,
    ) -> None:
        """Desconexão manual cancela a tentativa pendente."""
        session = await manager.create_or_get("loja")
        fake_transport.last.emit_close(500)
        await _settle(session)
        await wait_until(lambda: manual_sleep.pending == 1)

        await manager.disconnect("loja")
        manual_sleep.release()
        await asyncio.sleep(0.01)

        assert len(fake_transport.connections) == 1
        assert manager.scheduler.has_pending("loja") is False

    @pytest.mark.asyncio
    async def test_retry_in_flight_does_not_revive_disconnected_session(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        manual_sleep: ManualSleep,
        auth_store,
    ) -> None:
        """Tentativa que saiu da espera durante o logout não recria a sessão."""
        session = await manager.create_or_get("loja")
        connection = fake_transport.last
        connection.emit_open(USER_ID)
        connection.emit_close(503)
        await _settle(session)
        await wait_until(lambda: manual_sleep.pending == 1)

        connection.logout_gate = asyncio.Event()
        disconnecting = asyncio.create_task(manager.disconnect("loja"))
        await wait_until(lambda: connection.logout_calls == 1)

        manual_sleep.release()
        await wait_until(lambda: not manager.scheduler.has_pending("loja"))
        connection.logout_gate.set()
        await disconnecting
        await asyncio.sleep(0.01)

        assert manager.get("loja") is None
        assert len(fake_transport.connections) == 1
        assert await auth_store.exists("loja") is False
        assert manager.registry.has_lock("loja") is False

    @pytest.mark.asyncio
    async def test_retry_in_flight_keeps_force_reconnected_session(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        manual_sleep: ManualSleep,
    ) -> None:
        """Tentativa atrasada não substitui a sessão recriada à força."""
        session = await manager.create_or_get("loja")
        old_connection = fake_transport.last
        old_connection.emit_close(515)
        await _settle(session)
        await wait_until(lambda: manual_sleep.pending == 1)

        async with manager.registry.lock("loja"):
            reconnecting = asyncio.create_task(manager.force_reconnect("loja"))
            await asyncio.sleep(0.01)
            manual_sleep.release()
            await wait_until(lambda: not manager.scheduler.has_pending("loja"))
        fresh = await reconnecting
        await asyncio.sleep(0.01)

        assert manager.get("loja") is fresh
        assert len(fake_transport.connections) == 2
        assert fresh.handle is not None
        assert fresh.handle.connection is fake_transport.last
        assert fresh.handle.is_detached is False
        assert fresh.state == ConnectionState.INITIALIZING


# ──────────────────────────────────────────────────────────────────────────────
# Desconexão e reconexão forçada
# ──────────────────────────────────────────────────────────────────────────────


class TestDisconnect:
    """Testes de disconnect."""

    @pytest.mark.asyncio
    async def test_disconnect_logs_out_and_purges(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        auth_store,
    ) -> None:
        """Logout explícito remove sessão e credenciais."""
        session = await manager.create_or_get("loja")
        connection = fake_transport.last
        connection.emit_open(USER_ID)
        await _settle(session)
        connection.emit_close_on_logout = 401

        await manager.disconnect("loja")

        assert connection.logout_calls == 1
        assert manager.get("loja") is None
        assert await auth_store.exists("loja") is False
        assert session.state == ConnectionState.LOGGED_OUT

    @pytest.mark.asyncio
    async def test_disconnect_unknown_session(self, manager: SessionLifecycleManager) -> None:
        """Nome desconhecido gera SessionNotFoundError."""
        with pytest.raises(SessionNotFoundError):
            await manager.disconnect("inexistente")

    @pytest.mark.asyncio
    async def test_disconnect_logout_failure_keeps_session(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        auth_store,
    ) -> None:
        """Falha do provider no logout não remove a sessão."""
        session = await manager.create_or_get("loja")
        fake_transport.last.logout_error = RuntimeError("socket closed")

        with pytest.raises(TransportError) as exc_info:
            await manager.disconnect("loja")

        assert exc_info.value.detail == "socket closed"
        assert manager.get("loja") is session
        assert await auth_store.exists("loja") is True


class TestForceReconnect:
    """Testes de force_reconnect."""

    @pytest.mark.asyncio
    async def test_force_reconnect_starts_fresh_session(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        manual_sleep: ManualSleep,
    ) -> None:
        """Reconexão forçada zera tentativas e cancela retry pendente."""
        session = await manager.create_or_get("loja")
        old_connection = fake_transport.last
        old_connection.emit_close(515)
        await _settle(session)
        await wait_until(lambda: manual_sleep.pending == 1)

        fresh = await manager.force_reconnect("loja")

        assert fresh is not session
        assert fresh.reconnect_attempts == 0
        assert fresh.state == ConnectionState.INITIALIZING
        assert manager.get("loja") is fresh
        assert manager.scheduler.has_pending("loja") is False
        assert old_connection.terminate_calls == 1
        assert old_connection.listener_count == 0


# ──────────────────────────────────────────────────────────────────────────────
# Shutdown
# ──────────────────────────────────────────────────────────────────────────────


class TestShutdown:
    """Testes de shutdown."""

    @pytest.mark.asyncio
    async def test_shutdown_cancels_retries_and_closes_connections(
        self,
        manager: SessionLifecycleManager,
        fake_transport: FakeTransportProvider,
        manual_sleep: ManualSleep,
    ) -> None:
        """Shutdown encerra conexões e tentativas pendentes."""
        first = await manager.create_or_get("loja-a")
        await manager.create_or_get("loja-b")
        fake_transport.connections[0].emit_close(515)
        await _settle(first)
        await wait_until(lambda: manual_sleep.pending == 1)

        await manager.shutdown()

        assert manager.scheduler.pending_names() == []
        assert all(conn.terminate_calls == 1 for conn in fake_transport.connections)
        assert all(conn.listener_count == 0 for conn in fake_transport.connections)
