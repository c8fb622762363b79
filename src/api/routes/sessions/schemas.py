"""Modelos de request e montagem das respostas das rotas de sessão.

Os nomes de campos seguem o contrato público da API (em português).
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

if TYPE_CHECKING:
    from app.domain.contact import ContactSummary
    from app.sessions import Session, SessionStatus, SessionSummary
    from app.use_cases.sessions import SentFiles, SentMessage


def _number_as_text(value: Any) -> Any:
    # Clientes costumam enviar o número como inteiro JSON
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    return value


class MensagemRequest(BaseModel):
    """Body de POST /mensagem/{sessao}."""

    model_config = ConfigDict(extra="ignore")

    numero: str | None = Field(default=None, description="Número ou JID de destino.")
    mensagem: str | None = Field(default=None, description="Texto da mensagem.")

    @field_validator("numero", mode="before")
    @classmethod
    def _numero_as_text(cls, value: Any) -> Any:
        return _number_as_text(value)


class ArquivoRequest(BaseModel):
    """Body de POST /arquivo/{sessao}."""

    model_config = ConfigDict(extra="ignore")

    numero: str | None = Field(default=None, description="Número ou JID de destino.")
    arquivos: list[str] = Field(
        default_factory=list,
        description="Caminhos locais dos arquivos a enviar como documento.",
    )
    legenda: str | None = Field(default=None, description="Texto enviado após os arquivos.")

    @field_validator("numero", mode="before")
    @classmethod
    def _numero_as_text(cls, value: Any) -> Any:
        return _number_as_text(value)

    @field_validator("arquivos", mode="before")
    @classmethod
    def _none_as_empty(cls, value: Any) -> Any:
        return [] if value is None else value


def qrcode_payload(session: Session) -> tuple[int, dict[str, Any]]:
    """Resposta de GET /qrcode conforme o estado da sessão."""
    if session.is_ready and session.identity:
        return 200, {
            "status": "connected",
            "ready": True,
            "message": "Sessão conectada",
            "user": session.identity,
        }
    if session.code_payload:
        return 200, {
            "status": "qr_ready",
            "qr": session.code_payload,
            "ready": False,
        }
    return 202, {
        "status": "waiting",
        "ready": False,
        "message": "Aguardando QR Code",
    }


def status_payload(status: SessionStatus) -> dict[str, Any]:
    return {
        "existe": status.exists,
        "conectado": status.connected,
        "aguardandoQR": status.awaiting_code,
        "usuario": status.identity,
        "tentativasReconexao": status.reconnect_attempts,
        "maxTentativas": status.max_reconnect_attempts,
    }


def message_payload(result: SentMessage) -> dict[str, Any]:
    return {
        "status": "Mensagem enviada",
        "numero": result.jid,
        "mensagem": result.text,
        "messageId": result.message_id,
    }


def files_payload(result: SentFiles) -> dict[str, Any]:
    return {
        "status": "Arquivos enviados",
        "enviados": list(result.sent),
        "total": result.total,
    }


def sessions_payload(summaries: list[SessionSummary]) -> dict[str, Any]:
    sessoes = [
        {
            "nome": summary.name,
            "conectado": summary.connected,
            "usuario": summary.identity,
            "aguardandoQR": summary.has_code,
        }
        for summary in summaries
    ]
    return {"sessoes": sessoes, "total": len(sessoes)}


def contacts_payload(contacts: list[ContactSummary]) -> dict[str, Any]:
    return {
        "total": len(contacts),
        "contatos": [contact.model_dump() for contact in contacts],
    }
