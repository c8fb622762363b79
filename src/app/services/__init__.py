"""Serviços de aplicação.

Unidades reutilizáveis de orquestração (sem IO direto).
Implementações concretas de IO ficam em app/infra/.
"""

from app.services.reconnect_policy import (
    DEFAULT_POLICY,
    DisconnectKind,
    ReconnectAction,
    ReconnectDecision,
    ReconnectPolicy,
    classify_disconnect,
    decide_reconnect,
)
from app.services.reconnect_scheduler import ReconnectScheduler

__all__ = [
    "DEFAULT_POLICY",
    "DisconnectKind",
    "ReconnectAction",
    "ReconnectDecision",
    "ReconnectPolicy",
    "ReconnectScheduler",
    "classify_disconnect",
    "decide_reconnect",
]
