"""Protocolos do Transport Provider (cliente do protocolo WhatsApp).

O gateway não fala o protocolo diretamente: abre conexões através de um
provider injetável e consome os eventos que cada conexão emite. Aqui ficam
o contrato do provider, o contrato da conexão e os tipos de evento.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import StrEnum
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from app.protocols.auth_store import AuthState


class TransportEventType(StrEnum):
    """Tipos de evento emitidos por uma conexão."""

    QR_ISSUED = "qr_issued"
    CONNECTION_OPENED = "connection_opened"
    CONNECTION_CLOSED = "connection_closed"
    CREDS_UPDATED = "creds_updated"


@dataclass(frozen=True, slots=True)
class TransportEvent:
    """Evento de conexão entregue ao gateway.

    Apenas os campos pertinentes ao tipo são preenchidos:
    `challenge` para QR, `identity` para abertura, `reason_code` para
    fechamento e `creds` para atualização de credenciais.
    """

    type: TransportEventType
    challenge: str | None = None
    identity: str | None = None
    reason_code: int | None = None
    creds: dict[str, Any] | None = None
    restored: bool = False

    @classmethod
    def qr_issued(cls, challenge: str) -> TransportEvent:
        return cls(type=TransportEventType.QR_ISSUED, challenge=challenge)

    @classmethod
    def opened(cls, identity: str | None, *, restored: bool = False) -> TransportEvent:
        return cls(
            type=TransportEventType.CONNECTION_OPENED,
            identity=identity,
            restored=restored,
        )

    @classmethod
    def closed(cls, reason_code: int | None) -> TransportEvent:
        return cls(type=TransportEventType.CONNECTION_CLOSED, reason_code=reason_code)

    @classmethod
    def creds_updated(cls, creds: dict[str, Any]) -> TransportEvent:
        return cls(type=TransportEventType.CREDS_UPDATED, creds=creds)


@dataclass(frozen=True, slots=True)
class AuthenticatedUser:
    """Identidade autenticada reportada pelo provider."""

    id: str
    name: str | None = None


@dataclass(frozen=True, slots=True)
class ContactRecord:
    """Contato conhecido pela conexão, como o provider o reporta."""

    id: str
    name: str | None = None
    notify: str | None = None


@dataclass(frozen=True, slots=True)
class ConnectionOptions:
    """Opções repassadas ao provider na abertura da conexão."""

    browser: tuple[str, str, str]
    connect_timeout_ms: int = 60_000
    query_timeout_ms: int = 60_000
    qr_timeout_ms: int = 60_000
    max_msg_retry_count: int = 3
    retry_request_delay_ms: int = 250
    mark_online_on_connect: bool = False
    sync_full_history: bool = False
    print_qr_in_terminal: bool = False


EventListener = Callable[[TransportEvent], None]
Unsubscribe = Callable[[], None]


class ConnectionProtocol(Protocol):
    """Conexão viva com o servidor WhatsApp para uma sessão.

    A conexão é construída de forma não bloqueante: o estabelecimento
    acontece em background e o progresso chega via eventos.
    """

    @property
    def user(self) -> AuthenticatedUser | None:
        """Identidade autenticada, quando houver."""
        ...

    def on_event(self, listener: EventListener) -> Unsubscribe:
        """Registra listener de eventos e retorna função de remoção."""
        ...

    async def wait_authenticated(self, timeout: float) -> AuthenticatedUser | None:
        """Aguarda até `timeout` segundos pela identidade autenticada.

        Retorna None se o prazo expirar sem autenticação.
        """
        ...

    async def send_text(self, jid: str, text: str) -> str:
        """Envia texto e retorna o id da mensagem."""
        ...

    async def send_document(
        self,
        jid: str,
        document: bytes,
        *,
        file_name: str,
        mimetype: str,
    ) -> str:
        """Envia documento e retorna o id da mensagem."""
        ...

    async def fetch_contacts(self) -> list[ContactRecord]:
        """Retorna os contatos conhecidos pela conexão."""
        ...

    async def logout(self) -> None:
        """Desvincula o aparelho no servidor."""
        ...

    async def terminate(self) -> None:
        """Encerra o transporte sem desvincular o aparelho."""
        ...


class TransportProviderProtocol(Protocol):
    """Fábrica de conexões do protocolo WhatsApp."""

    async def fetch_latest_version(self) -> tuple[int, ...]:
        """Consulta a versão mais recente do protocolo."""
        ...

    async def connect(
        self,
        *,
        version: tuple[int, ...],
        auth_state: AuthState,
        options: ConnectionOptions,
    ) -> ConnectionProtocol:
        """Constrói uma conexão para as credenciais informadas."""
        ...
