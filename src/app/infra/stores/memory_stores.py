"""Stores em memória: apenas para desenvolvimento e testes.

ATENÇÃO: Não usar em staging/production. Sem persistência entre reinícios.
"""

from __future__ import annotations

import copy
from pathlib import Path
from typing import Any

from app.domain.address import ensure_session_name
from app.protocols.auth_store import AuthState, AuthStateStoreProtocol


class MemoryAuthStateStore(AuthStateStoreProtocol):
    """Store de credenciais em memória: apenas para dev/test."""

    def __init__(self, root: Path | str = "memory://auth") -> None:
        self._root = Path(str(root))
        self._root_exists = False
        self._creds: dict[str, dict[str, Any]] = {}

    def seed(self, session_name: str, creds: dict[str, Any] | None = None) -> None:
        """Cria credenciais como se já existissem em disco."""
        self._root_exists = True
        self._creds[ensure_session_name(session_name)] = dict(creds or {})

    def creds_of(self, session_name: str) -> dict[str, Any] | None:
        stored = self._creds.get(session_name)
        return copy.deepcopy(stored) if stored is not None else None

    async def ensure_root(self) -> bool:
        if self._root_exists:
            return False
        self._root_exists = True
        return True

    async def list_sessions(self) -> list[str]:
        return sorted(self._creds)

    async def exists(self, session_name: str) -> bool:
        return session_name in self._creds

    async def load(self, session_name: str) -> AuthState:
        name = ensure_session_name(session_name)
        self._root_exists = True
        creds = self._creds.setdefault(name, {})
        return AuthState(
            session_name=name,
            folder=self._root / name,
            creds=copy.deepcopy(creds),
        )

    async def save_creds(self, state: AuthState, creds: dict[str, Any]) -> None:
        self._creds[state.session_name] = copy.deepcopy(creds)
        state.creds = dict(creds)

    async def purge(self, session_name: str) -> None:
        self._creds.pop(session_name, None)
