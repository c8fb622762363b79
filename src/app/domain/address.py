"""Normalização de endereços de destino e nomes de sessão.

Regras puras, sem I/O, compartilhadas entre rotas e casos de uso.
"""

from __future__ import annotations

import re

from config.settings import JID_USER_SUFFIX
from utils.errors import ValidationError

# Nome de sessão vira nome de diretório: apenas caracteres seguros
_SESSION_NAME_PATTERN = re.compile(r"^[A-Za-z0-9][A-Za-z0-9._-]{0,63}$")


def normalize_jid(target: str, suffix: str = JID_USER_SUFFIX) -> str:
    """Converte número/identificador em endereço canônico (JID).

    Identificadores que já contêm o sufixo de usuário são mantidos;
    os demais recebem `@<suffix>`.

    Raises:
        ValidationError: Se o destino estiver vazio
    """
    cleaned = (target or "").strip()
    if not cleaned:
        raise ValidationError("Número é obrigatório")
    if f"@{suffix}" in cleaned:
        return cleaned
    return f"{cleaned}@{suffix}"


def user_part(jid: str) -> str:
    """Retorna a parte do endereço antes do `@`."""
    return jid.split("@", 1)[0]


def is_valid_session_name(name: str | None) -> bool:
    """Indica se o nome pode identificar uma sessão (e seu diretório)."""
    if not name:
        return False
    return bool(_SESSION_NAME_PATTERN.match(name)) and name not in (".", "..")


def ensure_session_name(name: str | None) -> str:
    """Valida nome de sessão.

    Raises:
        ValidationError: Se o nome for vazio ou contiver caracteres inválidos
    """
    if not is_valid_session_name(name):
        raise ValidationError("Nome de sessão inválido")
    return name  # type: ignore[return-value]
