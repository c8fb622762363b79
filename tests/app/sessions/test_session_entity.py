"""Testes da entidade Session e do SessionRegistry."""

from __future__ import annotations

import asyncio

import pytest

from app.sessions import Session, SessionRegistry
from fsm.states import ConnectionState


class TestSession:
    """Testes de transições da entidade."""

    def test_new_session_defaults(self) -> None:
        session = Session(name="loja")

        assert session.state == ConnectionState.INITIALIZING
        assert session.code_payload is None
        assert session.identity is None
        assert session.reconnect_attempts == 0
        assert session.max_reconnect_attempts == 3
        assert session.machine.session_name == "loja"

    def test_code_and_identity_never_coexist(self) -> None:
        """Conectar descarta o código; código após conexão é rejeitado."""
        session = Session(name="loja")
        assert session.mark_awaiting_code("data:qr") is True

        assert session.mark_connected("5511@s.whatsapp.net") is True
        assert session.code_payload is None
        assert session.mark_awaiting_code("data:late") is False
        assert session.code_payload is None

    def test_disconnect_keeps_code_and_clears_identity(self) -> None:
        session = Session(name="loja")
        session.mark_awaiting_code("data:qr")
        session.mark_disconnected(515)

        assert session.state == ConnectionState.DISCONNECTED
        assert session.code_payload == "data:qr"
        assert session.awaiting_code is True

    def test_reopen_clears_code(self) -> None:
        session = Session(name="loja")
        session.mark_awaiting_code("data:qr")
        session.mark_disconnected(515)

        assert session.mark_initializing("reopen") is True
        assert session.code_payload is None

    def test_logged_out_is_terminal(self) -> None:
        session = Session(name="loja")
        session.mark_connected("5511@s.whatsapp.net")
        session.mark_logged_out()

        assert session.state == ConnectionState.LOGGED_OUT
        assert session.mark_initializing() is False
        assert session.mark_connected("x") is False

    def test_connected_resets_attempts(self) -> None:
        session = Session(name="loja", reconnect_attempts=2)
        session.mark_connected("5511@s.whatsapp.net")

        assert session.reconnect_attempts == 0

    def test_log_dict_hides_code(self) -> None:
        session = Session(name="loja")
        session.mark_awaiting_code("data:secret")

        summary = session.to_log_dict()

        assert summary["has_code"] is True
        assert "data:secret" not in str(summary)


class TestSessionRegistry:
    """Testes do registro."""

    def test_put_get_remove(self) -> None:
        registry = SessionRegistry()
        session = Session(name="loja")
        registry.put(session)

        assert registry.get("loja") is session
        assert "loja" in registry
        assert len(registry) == 1
        assert registry.remove("loja") is session
        assert registry.get("loja") is None

    def test_remove_with_expected_instance(self) -> None:
        """Remoção condicional não apaga entrada substituída."""
        registry = SessionRegistry()
        old = Session(name="loja")
        new = Session(name="loja")
        registry.put(new)

        assert registry.remove("loja", expected=old) is None
        assert registry.get("loja") is new

    def test_sessions_preserve_insertion_order(self) -> None:
        registry = SessionRegistry()
        for name in ("b", "a", "c"):
            registry.put(Session(name=name))

        assert [s.name for s in registry.sessions()] == ["b", "a", "c"]
        assert registry.names() == ["b", "a", "c"]

    @pytest.mark.asyncio
    async def test_lock_is_per_name(self) -> None:
        registry = SessionRegistry()

        assert registry.lock("a") is registry.lock("a")
        assert registry.lock("a") is not registry.lock("b")

        async with registry.lock("a"):
            assert registry.lock("a").locked()
            assert not registry.lock("b").locked()
            await asyncio.sleep(0)

    @pytest.mark.asyncio
    async def test_locked_drops_lock_of_unregistered_name(self) -> None:
        """Lock de nome fora do registro não sobrevive ao último uso."""
        registry = SessionRegistry()

        async with registry.locked("a"):
            assert registry.lock("a").locked()

        assert registry.has_lock("a") is False

    @pytest.mark.asyncio
    async def test_locked_keeps_lock_of_registered_name(self) -> None:
        registry = SessionRegistry()
        registry.put(Session(name="a"))

        async with registry.locked("a"):
            pass

        assert registry.has_lock("a") is True

    @pytest.mark.asyncio
    async def test_locked_keeps_lock_while_others_wait(self) -> None:
        """Remoção com outro usuário esperando não troca o lock."""
        registry = SessionRegistry()
        registry.put(Session(name="a"))
        order: list[str] = []

        async def waiter() -> None:
            async with registry.locked("a"):
                order.append("waiter")

        async with registry.locked("a"):
            lock = registry.lock("a")
            task = asyncio.create_task(waiter())
            await asyncio.sleep(0)
            registry.remove("a")
            order.append("holder")

        assert registry.has_lock("a") is True
        assert registry.lock("a") is lock
        await task
        assert order == ["holder", "waiter"]
        assert registry.has_lock("a") is False
