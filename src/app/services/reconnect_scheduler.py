"""Agendamento das tentativas de reconexão.

Mantém no máximo uma tentativa pendente por sessão. Tentativas podem ser
canceladas individualmente (logout, desconexão manual, reconexão forçada)
ou todas de uma vez no shutdown.
"""

from __future__ import annotations

import asyncio
import contextlib
import logging
from collections.abc import Awaitable, Callable
from typing import Any

logger = logging.getLogger(__name__)

RetryCallback = Callable[[str], Awaitable[Any]]
SleepFunc = Callable[[float], Awaitable[Any]]


class ReconnectScheduler:
    """Tasks de reconexão pendentes, uma por nome de sessão."""

    __slots__ = ("_pending", "_running", "_sleep")

    def __init__(self, sleep: SleepFunc = asyncio.sleep) -> None:
        self._sleep = sleep
        self._pending: dict[str, asyncio.Task[None]] = {}
        self._running: set[asyncio.Task[None]] = set()

    def schedule(
        self,
        session_name: str,
        delay_seconds: float,
        callback: RetryCallback,
    ) -> asyncio.Task[None]:
        """Agenda `callback(session_name)` após `delay_seconds`.

        Uma tentativa ainda pendente para o mesmo nome é substituída.
        """
        self.cancel(session_name)
        task = asyncio.create_task(
            self._run(session_name, delay_seconds, callback),
            name=f"reconnect:{session_name}",
        )
        self._pending[session_name] = task
        self._running.add(task)
        task.add_done_callback(self._on_task_done)
        logger.info(
            "reconnect_scheduled",
            extra={"session_name": session_name, "delay_seconds": delay_seconds},
        )
        return task

    def cancel(self, session_name: str) -> bool:
        """Cancela tentativa pendente. Retorna True se havia uma."""
        task = self._pending.pop(session_name, None)
        if task is None:
            return False
        task.cancel()
        logger.info("reconnect_cancelled", extra={"session_name": session_name})
        return True

    def has_pending(self, session_name: str) -> bool:
        return session_name in self._pending

    def pending_names(self) -> list[str]:
        return list(self._pending)

    async def shutdown(self, timeout_seconds: float = 5.0) -> None:
        """Cancela pendentes e aguarda tentativas em andamento."""
        for name in list(self._pending):
            self.cancel(name)
        if not self._running:
            return
        running = list(self._running)
        _, still_running = await asyncio.wait(running, timeout=timeout_seconds)
        for task in still_running:
            task.cancel()
        await asyncio.gather(*running, return_exceptions=True)

    async def _run(
        self,
        session_name: str,
        delay_seconds: float,
        callback: RetryCallback,
    ) -> None:
        await self._sleep(delay_seconds)
        # Em execução a tentativa deixa de ser "pendente": um novo agendamento
        # para o mesmo nome não a cancela no meio da reabertura.
        current = asyncio.current_task()
        if self._pending.get(session_name) is current:
            del self._pending[session_name]
        await callback(session_name)

    def _on_task_done(self, task: asyncio.Task[None]) -> None:
        self._running.discard(task)
        for name, pending in list(self._pending.items()):
            if pending is task:
                del self._pending[name]
        with contextlib.suppress(asyncio.CancelledError):
            exc = task.exception()
            if exc is not None:
                logger.error(
                    "reconnect_attempt_failed",
                    extra={
                        "task_name": task.get_name(),
                        "error_type": type(exc).__name__,
                        "error": str(exc),
                    },
                )
