"""Settings de ciclo de vida das sessões.

Configurações de armazenamento de credenciais e da política de reconexão.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from functools import lru_cache
from pathlib import Path

# Códigos de desconexão que indicam falha temporária do servidor
# (restart requerido, conexão fechada, indisponível, bad gateway, erro interno)
DEFAULT_TRANSIENT_CODES: frozenset[int] = frozenset({515, 428, 503, 502, 500})

# Código emitido pelo protocolo quando o aparelho faz logout
DEFAULT_LOGGED_OUT_CODE = 401


@dataclass(frozen=True)
class SessionSettings:
    """Configurações de sessão.

    Attributes:
        auth_root_dir: Diretório raiz das credenciais (uma pasta por sessão)
        max_reconnect_attempts: Limite de reconexões automáticas por episódio
        reconnect_base_delay_seconds: Base do backoff linear entre tentativas
        restore_grace_seconds: Janela de espera pela identidade autenticada
            ao restaurar credenciais já registradas
        transient_codes: Códigos de desconexão elegíveis para nova tentativa
        logged_out_code: Código de desconexão que encerra a sessão
    """

    auth_root_dir: Path = Path("auth_info")
    max_reconnect_attempts: int = 3
    reconnect_base_delay_seconds: float = 5.0
    restore_grace_seconds: float = 2.0
    transient_codes: frozenset[int] = field(default=DEFAULT_TRANSIENT_CODES)
    logged_out_code: int = DEFAULT_LOGGED_OUT_CODE

    def validate(self) -> list[str]:
        """Valida configurações de sessão.

        Returns:
            Lista de erros de validação.
        """
        errors: list[str] = []

        if not str(self.auth_root_dir):
            errors.append("AUTH_ROOT_DIR não pode ser vazio")

        if self.max_reconnect_attempts < 0:
            errors.append("MAX_RECONNECT_ATTEMPTS deve ser >= 0")

        if self.reconnect_base_delay_seconds < 0:
            errors.append("RECONNECT_BASE_DELAY_SECONDS deve ser >= 0")

        if self.restore_grace_seconds <= 0:
            errors.append("RESTORE_GRACE_SECONDS deve ser > 0")

        if self.logged_out_code in self.transient_codes:
            errors.append("LOGGED_OUT_CODE não pode estar em TRANSIENT_DISCONNECT_CODES")

        return errors


def _parse_codes(raw: str) -> frozenset[int]:
    """Converte lista separada por vírgula em conjunto de códigos."""
    codes = {int(item) for item in raw.split(",") if item.strip()}
    return frozenset(codes)


def _load_session_from_env() -> SessionSettings:
    """Carrega SessionSettings de variáveis de ambiente."""
    raw_codes = os.getenv("TRANSIENT_DISCONNECT_CODES", "")
    return SessionSettings(
        auth_root_dir=Path(os.getenv("AUTH_ROOT_DIR", "auth_info")),
        max_reconnect_attempts=int(os.getenv("MAX_RECONNECT_ATTEMPTS", "3")),
        reconnect_base_delay_seconds=float(
            os.getenv("RECONNECT_BASE_DELAY_SECONDS", "5")
        ),
        restore_grace_seconds=float(os.getenv("RESTORE_GRACE_SECONDS", "2")),
        transient_codes=_parse_codes(raw_codes) if raw_codes else DEFAULT_TRANSIENT_CODES,
        logged_out_code=int(os.getenv("LOGGED_OUT_CODE", str(DEFAULT_LOGGED_OUT_CODE))),
    )


@lru_cache(maxsize=1)
def get_session_settings() -> SessionSettings:
    """Retorna instância cacheada de SessionSettings."""
    return _load_session_from_env()
