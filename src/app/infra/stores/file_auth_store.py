"""Store de credenciais em sistema de arquivos (um diretório por sessão).

Layout:
    <root>/<nome_da_sessao>/creds.json   credenciais principais
    <root>/<nome_da_sessao>/*.json       chaves gravadas pelo provider

A existência do diretório é o sinal usado na recuperação do startup.
I/O é executado via asyncio.to_thread para não bloquear o event loop.
"""

from __future__ import annotations

import asyncio
import json
import logging
import os
import shutil
from pathlib import Path
from typing import Any

from app.domain.address import ensure_session_name
from app.protocols.auth_store import AuthState, AuthStateStoreProtocol
from utils.errors import CredentialStoreError

logger = logging.getLogger(__name__)

CREDS_FILE_NAME = "creds.json"


class FileAuthStateStore(AuthStateStoreProtocol):
    """Credenciais multi-arquivo sob um diretório raiz."""

    __slots__ = ("_root",)

    def __init__(self, root: Path | str) -> None:
        self._root = Path(root)

    @property
    def root(self) -> Path:
        return self._root

    def folder_for(self, session_name: str) -> Path:
        """Diretório de credenciais da sessão (nome validado)."""
        return self._root / ensure_session_name(session_name)

    # Implementações síncronas (executadas em thread)

    def _ensure_root_sync(self) -> bool:
        if self._root.is_dir():
            return False
        self._root.mkdir(parents=True, exist_ok=True)
        return True

    def _list_sessions_sync(self) -> list[str]:
        if not self._root.is_dir():
            return []
        return sorted(entry.name for entry in self._root.iterdir() if entry.is_dir())

    def _load_sync(self, session_name: str) -> AuthState:
        folder = self.folder_for(session_name)
        folder.mkdir(parents=True, exist_ok=True)
        creds_path = folder / CREDS_FILE_NAME
        creds: dict[str, Any] = {}
        if creds_path.is_file():
            try:
                creds = json.loads(creds_path.read_text(encoding="utf-8"))
            except json.JSONDecodeError as exc:
                raise CredentialStoreError(
                    f"Credenciais corrompidas para sessão {session_name}: {exc}"
                ) from exc
        return AuthState(session_name=session_name, folder=folder, creds=creds)

    def _save_creds_sync(self, state: AuthState, creds: dict[str, Any]) -> None:
        state.folder.mkdir(parents=True, exist_ok=True)
        target = state.folder / CREDS_FILE_NAME
        tmp = target.with_suffix(".json.tmp")
        tmp.write_text(json.dumps(creds, ensure_ascii=False), encoding="utf-8")
        os.replace(tmp, target)

    def _purge_sync(self, session_name: str) -> None:
        folder = self.folder_for(session_name)
        if folder.exists():
            shutil.rmtree(folder)

    # API assíncrona (AuthStateStoreProtocol)

    async def ensure_root(self) -> bool:
        try:
            return await asyncio.to_thread(self._ensure_root_sync)
        except OSError as exc:
            raise CredentialStoreError(f"Falha ao criar {self._root}: {exc}") from exc

    async def list_sessions(self) -> list[str]:
        try:
            return await asyncio.to_thread(self._list_sessions_sync)
        except OSError as exc:
            raise CredentialStoreError(f"Falha ao listar {self._root}: {exc}") from exc

    async def exists(self, session_name: str) -> bool:
        folder = self.folder_for(session_name)
        return await asyncio.to_thread(folder.is_dir)

    async def load(self, session_name: str) -> AuthState:
        try:
            state = await asyncio.to_thread(self._load_sync, session_name)
        except OSError as exc:
            raise CredentialStoreError(
                f"Falha ao carregar credenciais de {session_name}: {exc}"
            ) from exc
        logger.debug(
            "auth_state_loaded",
            extra={"session_name": session_name, "registered": state.registered},
        )
        return state

    async def save_creds(self, state: AuthState, creds: dict[str, Any]) -> None:
        try:
            await asyncio.to_thread(self._save_creds_sync, state, creds)
        except OSError as exc:
            raise CredentialStoreError(
                f"Falha ao salvar credenciais de {state.session_name}: {exc}"
            ) from exc
        state.creds = dict(creds)

    async def purge(self, session_name: str) -> None:
        try:
            await asyncio.to_thread(self._purge_sync, session_name)
        except OSError as exc:
            raise CredentialStoreError(
                f"Falha ao remover credenciais de {session_name}: {exc}"
            ) from exc
        logger.info("auth_state_purged", extra={"session_name": session_name})
