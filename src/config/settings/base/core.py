"""Settings de identificação do serviço (ambiente e nome)."""

from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Literal

Environment = Literal["development", "staging", "production"]

_ENVIRONMENT_ALIASES: dict[str, Environment] = {
    "production": "production",
    "prod": "production",
    "staging": "staging",
    "stage": "staging",
}


@dataclass(frozen=True)
class BaseSettings:
    """Ambiente de execução e nome do serviço.

    Fora de `development`, configuração inválida impede o boot.
    """

    environment: Environment = "development"
    service_name: str = "wa-session-gateway"

    @property
    def strict_validation(self) -> bool:
        return self.environment != "development"

    def validate(self) -> list[str]:
        errors: list[str] = []
        if self.environment not in ("development", "staging", "production"):
            errors.append(f"ENVIRONMENT inválido: {self.environment}")
        if not self.service_name:
            errors.append("SERVICE_NAME não pode ser vazio")
        return errors


def _parse_environment(raw: str) -> Environment:
    # Valor desconhecido cai em development
    return _ENVIRONMENT_ALIASES.get(raw.strip().lower(), "development")


@lru_cache(maxsize=1)
def get_base_settings() -> BaseSettings:
    """Lê ENVIRONMENT e SERVICE_NAME (cacheado)."""
    return BaseSettings(
        environment=_parse_environment(os.getenv("ENVIRONMENT", "development")),
        service_name=os.getenv("SERVICE_NAME", "wa-session-gateway"),
    )
