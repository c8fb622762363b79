"""Recuperação de sessões no startup a partir das credenciais em disco."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from app.observability import record_recovery

if TYPE_CHECKING:
    from app.protocols.auth_store import AuthStateStoreProtocol
    from app.sessions.manager import SessionLifecycleManager

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RecoveryReport:
    """Resultado da recuperação."""

    root_created: bool = False
    recovered: list[str] = field(default_factory=list)
    failed: list[str] = field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.recovered) + len(self.failed)


async def recover_sessions(
    manager: SessionLifecycleManager,
    auth_store: AuthStateStoreProtocol,
) -> RecoveryReport:
    """Chama create_or_get para cada diretório de credenciais existente.

    Falha em uma sessão não interrompe a recuperação das demais.
    """
    report = RecoveryReport()

    if await auth_store.ensure_root():
        report.root_created = True
        logger.info("startup_recovery_root_created")
        return report

    names = await auth_store.list_sessions()
    if not names:
        logger.info("startup_recovery_empty")
        return report

    logger.info("startup_recovery_started", extra={"sessions": len(names)})
    for name in names:
        try:
            await manager.create_or_get(name)
        except Exception as exc:
            report.failed.append(name)
            logger.error(
                "startup_recovery_failed",
                extra={
                    "session_name": name,
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
            continue
        report.recovered.append(name)

    record_recovery(len(report.recovered), len(report.failed))
    return report
