"""Registro em memória das sessões ativas.

Mapeia nome de sessão para `Session` e fornece um lock por nome. Toda
mutação de uma sessão (criação, reconexão forçada, desconexão e
processamento de eventos) acontece dentro de `locked(name)`, o que
serializa as operações concorrentes sobre a mesma sessão.
"""

from __future__ import annotations

import asyncio
import contextlib
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import AsyncIterator

    from app.sessions.session_entity import Session


class SessionRegistry:
    """Mapa nome → sessão com lock assíncrono por nome.

    O lock de um nome fora do registro é descartado quando o último
    usuário de `locked()` sai.
    """

    __slots__ = ("_lock_users", "_locks", "_sessions")

    def __init__(self) -> None:
        self._sessions: dict[str, Session] = {}
        self._locks: dict[str, asyncio.Lock] = {}
        self._lock_users: dict[str, int] = {}

    def lock(self, name: str) -> asyncio.Lock:
        """Retorna o lock do nome (criado sob demanda)."""
        lock = self._locks.get(name)
        if lock is None:
            lock = asyncio.Lock()
            self._locks[name] = lock
        return lock

    @contextlib.asynccontextmanager
    async def locked(self, name: str) -> AsyncIterator[None]:
        """Adquire o lock do nome, contando quem espera ou segura."""
        lock = self.lock(name)
        self._lock_users[name] = self._lock_users.get(name, 0) + 1
        try:
            async with lock:
                yield
        finally:
            remaining = self._lock_users[name] - 1
            if remaining:
                self._lock_users[name] = remaining
            else:
                del self._lock_users[name]
                if name not in self._sessions:
                    self._locks.pop(name, None)

    def has_lock(self, name: str) -> bool:
        return name in self._locks

    def get(self, name: str) -> Session | None:
        return self._sessions.get(name)

    def put(self, session: Session) -> None:
        self._sessions[session.name] = session

    def remove(self, name: str, expected: Session | None = None) -> Session | None:
        """Remove sessão do registro.

        Com `expected`, só remove se a entrada atual for aquela instância.
        """
        current = self._sessions.get(name)
        if current is None:
            return None
        if expected is not None and current is not expected:
            return None
        del self._sessions[name]
        return current

    def names(self) -> list[str]:
        return list(self._sessions)

    def sessions(self) -> list[Session]:
        """Snapshot das sessões em ordem de inserção."""
        return list(self._sessions.values())

    def __contains__(self, name: object) -> bool:
        return name in self._sessions

    def __len__(self) -> int:
        return len(self._sessions)
