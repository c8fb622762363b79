"""Exceções de domínio do gateway multi-sessão."""

from __future__ import annotations

from typing import Literal

NotReadyReason = Literal["not_found", "not_connected", "no_handle"]


class GatewayError(RuntimeError):
    """Base para falhas do gateway reportáveis ao chamador."""


class ValidationError(GatewayError):
    """Campos obrigatórios ausentes ou inválidos na requisição."""


class SessionNotReadyError(GatewayError):
    """Sessão indisponível para mensagens; o chamador deve tentar depois."""

    reason: NotReadyReason = "not_connected"

    def __init__(self, session_name: str, message: str | None = None) -> None:
        super().__init__(message or "Sessão não conectada")
        self.session_name = session_name


class SessionNotFoundError(SessionNotReadyError):
    """Nenhuma sessão registrada com o nome informado."""

    reason: NotReadyReason = "not_found"

    def __init__(self, session_name: str) -> None:
        super().__init__(session_name, "Sessão não encontrada")


class SessionHandleMissingError(SessionNotReadyError):
    """Sessão conectada sem conexão ativa associada."""

    reason: NotReadyReason = "no_handle"

    def __init__(self, session_name: str) -> None:
        super().__init__(session_name, "Socket não disponível")


class TransportError(GatewayError):
    """Falha do Transport Provider em envio, logout ou consulta."""

    def __init__(self, operation: str, detail: str) -> None:
        super().__init__(detail)
        self.operation = operation
        self.detail = detail


class CredentialStoreError(GatewayError):
    """Falha de I/O no armazenamento de credenciais."""
