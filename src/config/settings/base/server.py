"""Settings do servidor HTTP."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

DEFAULT_PORT = 9000


@dataclass(frozen=True)
class ServerSettings:
    """Configurações do servidor HTTP.

    Attributes:
        host: Interface de escuta
        port: Porta de escuta
        log_level: Nível de log do serviço
    """

    host: str = "0.0.0.0"  # noqa: S104
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    def validate(self) -> list[str]:
        """Valida configurações do servidor."""
        errors: list[str] = []

        if not 0 < self.port < 65536:
            errors.append(f"PORT inválida: {self.port}")

        return errors


def _load_server_from_env() -> ServerSettings:
    """Carrega ServerSettings de variáveis de ambiente."""
    return ServerSettings(
        host=os.getenv("HOST", "0.0.0.0"),  # noqa: S104
        port=int(os.getenv("PORT", str(DEFAULT_PORT))),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


@lru_cache(maxsize=1)
def get_server_settings() -> ServerSettings:
    """Retorna instância cacheada de ServerSettings."""
    return _load_server_from_env()
