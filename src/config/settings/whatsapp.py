"""Settings específicas do transporte WhatsApp.

Configurações repassadas ao Transport Provider na abertura de cada conexão.
O provider concreto é resolvido a partir de um caminho `modulo:callable`.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

# Sufixo canônico de endereços de usuário no protocolo
JID_USER_SUFFIX: str = "s.whatsapp.net"

# Identificação do cliente apresentada ao servidor (nome, navegador, versão)
DEFAULT_BROWSER: tuple[str, str, str] = ("WhatsApp API", "Chrome", "1.0.0")


@dataclass(frozen=True)
class WhatsAppSettings:
    """Configurações do transporte WhatsApp.

    Attributes:
        transport_factory: Caminho `modulo:callable` que constrói o provider
        jid_suffix: Sufixo de domínio anexado a identificadores sem `@`
        browser: Identificação do cliente (nome, navegador, versão)
        connect_timeout_ms: Timeout de conexão
        query_timeout_ms: Timeout padrão de queries
        qr_timeout_ms: Validade de cada QR code emitido
        max_msg_retry_count: Tentativas internas de reenvio do provider
        retry_request_delay_ms: Intervalo entre tentativas internas
        mark_online_on_connect: Marca presença online ao conectar
        sync_full_history: Solicita histórico completo ao conectar
    """

    transport_factory: str = ""
    jid_suffix: str = JID_USER_SUFFIX
    browser: tuple[str, str, str] = DEFAULT_BROWSER

    # Timeouts
    connect_timeout_ms: int = 60_000
    query_timeout_ms: int = 60_000
    qr_timeout_ms: int = 60_000

    # Retries internos delegados ao provider
    max_msg_retry_count: int = 3
    retry_request_delay_ms: int = 250

    # Comportamento da conexão
    mark_online_on_connect: bool = False
    sync_full_history: bool = False

    def validate(self) -> list[str]:
        """Valida configurações mínimas do transporte.

        Returns:
            Lista de erros de validação (vazia = tudo OK).
        """
        errors: list[str] = []

        if not self.transport_factory:
            errors.append("WA_TRANSPORT_FACTORY não configurado")
        elif ":" not in self.transport_factory:
            errors.append("WA_TRANSPORT_FACTORY deve ter formato 'modulo:callable'")

        if not self.jid_suffix:
            errors.append("WA_JID_SUFFIX não pode ser vazio")

        for name, value in (
            ("WA_CONNECT_TIMEOUT_MS", self.connect_timeout_ms),
            ("WA_QUERY_TIMEOUT_MS", self.query_timeout_ms),
            ("WA_QR_TIMEOUT_MS", self.qr_timeout_ms),
        ):
            if value <= 0:
                errors.append(f"{name} deve ser > 0")

        if self.max_msg_retry_count < 0:
            errors.append("WA_MAX_MSG_RETRY_COUNT deve ser >= 0")

        return errors


def _load_from_env() -> WhatsAppSettings:
    """Carrega WhatsAppSettings a partir de variáveis de ambiente."""
    return WhatsAppSettings(
        transport_factory=os.getenv("WA_TRANSPORT_FACTORY", ""),
        jid_suffix=os.getenv("WA_JID_SUFFIX", JID_USER_SUFFIX),
        connect_timeout_ms=int(os.getenv("WA_CONNECT_TIMEOUT_MS", "60000")),
        query_timeout_ms=int(os.getenv("WA_QUERY_TIMEOUT_MS", "60000")),
        qr_timeout_ms=int(os.getenv("WA_QR_TIMEOUT_MS", "60000")),
        max_msg_retry_count=int(os.getenv("WA_MAX_MSG_RETRY_COUNT", "3")),
        retry_request_delay_ms=int(os.getenv("WA_RETRY_REQUEST_DELAY_MS", "250")),
        mark_online_on_connect=os.getenv("WA_MARK_ONLINE_ON_CONNECT", "").lower()
        in ("true", "1"),
        sync_full_history=os.getenv("WA_SYNC_FULL_HISTORY", "").lower() in ("true", "1"),
    )


@lru_cache(maxsize=1)
def get_whatsapp_settings() -> WhatsAppSettings:
    """Retorna instância cacheada de WhatsAppSettings.

    A cache garante singleton para múltiplas injeções.
    """
    return _load_from_env()
