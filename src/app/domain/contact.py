"""Modelo de domínio para contatos de uma sessão."""

from __future__ import annotations

from collections.abc import Iterable

from pydantic import BaseModel, ConfigDict, Field

from app.domain.address import user_part
from app.protocols.transport import ContactRecord


class ContactSummary(BaseModel):
    """Contato normalizado exposto pela API."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    id: str = Field(..., description="Endereço completo do contato.")
    nome: str | None = Field(
        default=None,
        description="Nome salvo ou, na falta dele, o nome público do contato.",
    )
    numerico: str = Field(..., description="Parte do endereço antes do '@'.")

    @classmethod
    def from_record(cls, record: ContactRecord) -> ContactSummary:
        return cls(
            id=record.id,
            nome=record.name or record.notify or None,
            numerico=user_part(record.id),
        )


def summarize_contacts(records: Iterable[ContactRecord]) -> list[ContactSummary]:
    """Normaliza contatos do provider preservando a ordem recebida."""
    return [ContactSummary.from_record(record) for record in records]
