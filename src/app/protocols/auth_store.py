"""Protocolo para armazenamento de credenciais de sessão.

Cada sessão possui um diretório próprio sob a raiz configurada. A presença
desse diretório é o sinal de recuperação no startup.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any


@dataclass(slots=True)
class AuthState:
    """Credenciais carregadas de uma sessão.

    Attributes:
        session_name: Nome da sessão dona das credenciais
        folder: Diretório das credenciais (o provider pode gravar chaves nele)
        creds: Credenciais principais no formato do provider
    """

    session_name: str
    folder: Path
    creds: dict[str, Any] = field(default_factory=dict)

    @property
    def registered(self) -> bool:
        """Indica se as credenciais já foram pareadas com um aparelho."""
        return bool(self.creds.get("registered"))


class AuthStateStoreProtocol(ABC):
    """Contrato para persistência de credenciais por sessão."""

    @abstractmethod
    async def ensure_root(self) -> bool:
        """Garante a existência da raiz. Retorna True se ela foi criada agora."""
        ...

    @abstractmethod
    async def list_sessions(self) -> list[str]:
        """Lista nomes de sessões com diretório de credenciais."""
        ...

    @abstractmethod
    async def exists(self, session_name: str) -> bool:
        """Indica se existe diretório de credenciais para a sessão."""
        ...

    @abstractmethod
    async def load(self, session_name: str) -> AuthState:
        """Carrega (ou inicializa) as credenciais da sessão."""
        ...

    @abstractmethod
    async def save_creds(self, state: AuthState, creds: dict[str, Any]) -> None:
        """Persiste credenciais atualizadas pelo provider."""
        ...

    @abstractmethod
    async def purge(self, session_name: str) -> None:
        """Remove o diretório de credenciais da sessão (idempotente)."""
        ...
