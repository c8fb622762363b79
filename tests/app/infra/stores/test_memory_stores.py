"""Testes do store de credenciais em memória."""

from __future__ import annotations

import pytest

from app.infra.stores.memory_stores import MemoryAuthStateStore
from utils.errors import ValidationError


class TestMemoryAuthStateStore:
    """Testes do MemoryAuthStateStore."""

    @pytest.mark.asyncio
    async def test_ensure_root_reports_creation_once(self) -> None:
        """Primeira chamada cria a raiz; as seguintes não."""
        store = MemoryAuthStateStore()

        assert await store.ensure_root() is True
        assert await store.ensure_root() is False

    @pytest.mark.asyncio
    async def test_seed_marks_root_and_lists_session(self) -> None:
        store = MemoryAuthStateStore()
        store.seed("loja", {"registered": True})

        assert await store.ensure_root() is False
        assert await store.list_sessions() == ["loja"]
        assert await store.exists("loja") is True

    @pytest.mark.asyncio
    async def test_load_creates_empty_credentials(self) -> None:
        """Deve inicializar credenciais vazias para sessão nova."""
        store = MemoryAuthStateStore()

        state = await store.load("nova")

        assert state.session_name == "nova"
        assert state.creds == {}
        assert state.registered is False
        assert await store.exists("nova") is True

    @pytest.mark.asyncio
    async def test_save_creds_updates_state_and_store(self) -> None:
        store = MemoryAuthStateStore()
        state = await store.load("loja")

        await store.save_creds(state, {"registered": True, "me": "x"})

        assert state.registered is True
        assert store.creds_of("loja") == {"registered": True, "me": "x"}

    @pytest.mark.asyncio
    async def test_loaded_state_is_isolated_copy(self) -> None:
        """Mutação do estado carregado não altera o store."""
        store = MemoryAuthStateStore()
        store.seed("loja", {"keys": {"a": 1}})

        state = await store.load("loja")
        state.creds["keys"]["a"] = 2

        assert store.creds_of("loja") == {"keys": {"a": 1}}

    @pytest.mark.asyncio
    async def test_purge_is_idempotent(self) -> None:
        store = MemoryAuthStateStore()
        store.seed("loja")

        await store.purge("loja")
        await store.purge("loja")

        assert await store.exists("loja") is False
        assert store.creds_of("loja") is None

    @pytest.mark.asyncio
    async def test_invalid_name_rejected(self) -> None:
        store = MemoryAuthStateStore()

        with pytest.raises(ValidationError):
            await store.load("../fora")
