"""Stores: implementações concretas de persistência.

Módulos disponíveis:
    - file_auth_store: Credenciais por sessão em sistema de arquivos
    - memory_stores: Stores em memória para desenvolvimento/testes
"""

from __future__ import annotations

from app.infra.stores.file_auth_store import CREDS_FILE_NAME, FileAuthStateStore
from app.infra.stores.memory_stores import MemoryAuthStateStore

__all__ = [
    "CREDS_FILE_NAME",
    "FileAuthStateStore",
    "MemoryAuthStateStore",
]
