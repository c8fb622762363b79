"""Use cases de envio e consulta sobre sessões conectadas.

Cada operação verifica a prontidão da sessão antes de qualquer chamada
ao provider: sessão não conectada nunca gera tráfego de transporte.
"""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import TYPE_CHECKING

from app.domain.address import normalize_jid
from app.domain.contact import ContactSummary, summarize_contacts
from app.observability import record_latency
from app.sessions.queries import verify_ready
from config.settings import JID_USER_SUFFIX
from utils.errors import TransportError, ValidationError

if TYPE_CHECKING:
    from collections.abc import Iterable

    from app.sessions.registry import SessionRegistry

logger = logging.getLogger(__name__)

DOCUMENT_MIMETYPE = "application/octet-stream"


@dataclass(frozen=True, slots=True)
class SentMessage:
    """Resultado do envio de texto."""

    jid: str
    text: str
    message_id: str


@dataclass(frozen=True, slots=True)
class SentFiles:
    """Resultado do envio de arquivos."""

    jid: str
    sent: list[str] = field(default_factory=list)
    skipped: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.sent)


def _read_document(path: str) -> bytes | None:
    try:
        return Path(path).read_bytes()
    except OSError:
        return None


class SessionMessenger:
    """Orquestra verificação de prontidão e chamadas ao provider."""

    __slots__ = ("_jid_suffix", "_registry")

    def __init__(self, registry: SessionRegistry, *, jid_suffix: str = JID_USER_SUFFIX) -> None:
        self._registry = registry
        self._jid_suffix = jid_suffix

    async def send_message(self, session_name: str, target: str | None, text: str | None) -> SentMessage:
        """Envia mensagem de texto.

        Raises:
            ValidationError: Destino ou texto ausentes
            SessionNotReadyError: Sessão inexistente ou não conectada
            TransportError: Falha do provider no envio
        """
        if not target or not text:
            raise ValidationError("Número e mensagem são obrigatórios")
        _, handle = verify_ready(self._registry, session_name)
        jid = normalize_jid(target, self._jid_suffix)

        start = time.perf_counter()
        try:
            message_id = await handle.connection.send_text(jid, text)
        except Exception as exc:
            logger.error(
                "message_send_failed",
                extra={"session_name": session_name, "error": str(exc)},
            )
            raise TransportError("send_text", str(exc)) from exc
        record_latency("messenger", "send_text", (time.perf_counter() - start) * 1000)

        logger.info(
            "message_sent",
            extra={"session_name": session_name, "message_id": message_id},
        )
        return SentMessage(jid=jid, text=text, message_id=message_id)

    async def send_files(
        self,
        session_name: str,
        target: str | None,
        paths: Iterable[str] | None,
        caption: str | None = None,
    ) -> SentFiles:
        """Envia cada arquivo legível como documento.

        Arquivos ilegíveis são ignorados; a primeira falha do provider
        interrompe o envio. A legenda, se houver, segue como texto ao final.

        Raises:
            ValidationError: Destino ausente
            SessionNotReadyError: Sessão inexistente ou não conectada
            TransportError: Falha do provider no envio
        """
        if not target:
            raise ValidationError("Número é obrigatório")
        _, handle = verify_ready(self._registry, session_name)
        jid = normalize_jid(target, self._jid_suffix)

        sent: list[str] = []
        skipped: list[str] = []
        for path in paths or []:
            content = await asyncio.to_thread(_read_document, path)
            if content is None:
                skipped.append(path)
                logger.info(
                    "document_skipped",
                    extra={"session_name": session_name, "reason": "unreadable"},
                )
                continue

            file_name = Path(path).name
            try:
                await handle.connection.send_document(
                    jid,
                    content,
                    file_name=file_name,
                    mimetype=DOCUMENT_MIMETYPE,
                )
            except Exception as exc:
                logger.error(
                    "document_send_failed",
                    extra={
                        "session_name": session_name,
                        "sent_before_failure": len(sent),
                        "error": str(exc),
                    },
                )
                raise TransportError("send_document", str(exc)) from exc
            sent.append(file_name)

        if caption:
            try:
                await handle.connection.send_text(jid, caption)
            except Exception as exc:
                raise TransportError("send_text", str(exc)) from exc

        logger.info(
            "documents_sent",
            extra={"session_name": session_name, "sent": len(sent), "skipped": len(skipped)},
        )
        return SentFiles(jid=jid, sent=sent, skipped=skipped)

    async def fetch_contacts(self, session_name: str) -> list[ContactSummary]:
        """Lista contatos conhecidos pela conexão da sessão.

        Raises:
            SessionNotReadyError: Sessão inexistente ou não conectada
            TransportError: Falha do provider na consulta
        """
        _, handle = verify_ready(self._registry, session_name)
        try:
            records = await handle.connection.fetch_contacts()
        except Exception as exc:
            raise TransportError("fetch_contacts", str(exc)) from exc
        return summarize_contacts(records)
