"""Posse de uma conexão do provider e da fila de eventos da sessão.

Os eventos emitidos pela conexão são enfileirados e consumidos por uma
única task (pump), que os entrega ao dispatcher na ordem de chegada.
Desanexar o handle remove o listener e encerra a task: eventos tardios
de uma conexão substituída nunca chegam ao dispatcher.
"""

from __future__ import annotations

import asyncio
import itertools
import logging
from collections.abc import Awaitable, Callable, Coroutine
from typing import TYPE_CHECKING, Any

from app.observability import correlation_scope

if TYPE_CHECKING:
    from app.protocols.auth_store import AuthState
    from app.protocols.transport import (
        ConnectionProtocol,
        TransportEvent,
        Unsubscribe,
    )

logger = logging.getLogger(__name__)

EventDispatcher = Callable[["ConnectionHandle", "TransportEvent"], Awaitable[None]]

_generation = itertools.count(1)


class ConnectionHandle:
    """Conexão viva de uma sessão, com fila de eventos própria."""

    __slots__ = (
        "_aux_tasks",
        "_detached",
        "_dispatcher",
        "_pump",
        "_queue",
        "_unsubscribe",
        "auth_state",
        "connection",
        "generation",
        "session_name",
    )

    def __init__(
        self,
        session_name: str,
        connection: ConnectionProtocol,
        auth_state: AuthState,
        dispatcher: EventDispatcher,
    ) -> None:
        self.session_name = session_name
        self.connection = connection
        self.auth_state = auth_state
        self.generation = next(_generation)
        self._dispatcher = dispatcher
        self._queue: asyncio.Queue[TransportEvent] = asyncio.Queue()
        self._unsubscribe: Unsubscribe | None = None
        self._pump: asyncio.Task[None] | None = None
        self._aux_tasks: set[asyncio.Task[Any]] = set()
        self._detached = False

    @property
    def is_attached(self) -> bool:
        return self._pump is not None and not self._detached

    @property
    def is_detached(self) -> bool:
        return self._detached

    def attach(self) -> None:
        """Assina os eventos da conexão e inicia o consumo da fila."""
        if self._pump is not None or self._detached:
            return
        self._unsubscribe = self.connection.on_event(self._enqueue)
        self._pump = asyncio.create_task(
            self._run(),
            name=f"session-events:{self.session_name}:{self.generation}",
        )

    def inject(self, event: TransportEvent) -> None:
        """Enfileira evento produzido pelo próprio gateway."""
        self._enqueue(event)

    def spawn(self, coro: Coroutine[Any, Any, Any], name: str) -> asyncio.Task[Any]:
        """Cria task auxiliar atrelada ao handle (cancelada ao desanexar)."""
        task = asyncio.create_task(coro, name=f"{name}:{self.session_name}:{self.generation}")
        self._aux_tasks.add(task)
        task.add_done_callback(self._on_aux_task_done)
        return task

    async def join(self) -> None:
        """Aguarda até que todos os eventos enfileirados sejam processados."""
        await self._queue.join()

    def detach(self) -> None:
        """Remove o listener e encerra pump e tasks auxiliares (idempotente).

        Chamado de dentro do próprio pump, o evento corrente termina de ser
        processado e o loop encerra em seguida.
        """
        if self._detached:
            return
        self._detached = True

        if self._unsubscribe is not None:
            try:
                self._unsubscribe()
            except Exception as exc:
                logger.warning(
                    "connection_unsubscribe_failed",
                    extra={"session_name": self.session_name, "error": str(exc)},
                )
            self._unsubscribe = None

        current = asyncio.current_task()
        if self._pump is not None and self._pump is not current:
            self._pump.cancel()
        for task in list(self._aux_tasks):
            if task is not current:
                task.cancel()

        self._drain()

        logger.debug(
            "connection_handle_detached",
            extra={"session_name": self.session_name, "generation": self.generation},
        )

    async def close(self) -> None:
        """Desanexa e encerra o transporte, ignorando falhas do provider."""
        self.detach()
        try:
            await self.connection.terminate()
        except Exception as exc:
            logger.warning(
                "connection_terminate_failed",
                extra={"session_name": self.session_name, "error": str(exc)},
            )

    def _enqueue(self, event: TransportEvent) -> None:
        if self._detached:
            return
        self._queue.put_nowait(event)

    async def _run(self) -> None:
        try:
            while not self._detached:
                event = await self._queue.get()
                try:
                    with correlation_scope(self.session_name):
                        await self._dispatcher(self, event)
                except asyncio.CancelledError:
                    raise
                except Exception:
                    logger.exception(
                        "session_event_failed",
                        extra={
                            "session_name": self.session_name,
                            "event_type": str(event.type),
                        },
                    )
                finally:
                    self._queue.task_done()
        finally:
            self._drain()

    def _drain(self) -> None:
        # Eventos descartados ainda contam para join()
        while True:
            try:
                self._queue.get_nowait()
            except asyncio.QueueEmpty:
                return
            self._queue.task_done()

    def _on_aux_task_done(self, task: asyncio.Task[Any]) -> None:
        self._aux_tasks.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.error(
                "session_aux_task_failed",
                extra={
                    "session_name": self.session_name,
                    "task_name": task.get_name(),
                    "error_type": type(exc).__name__,
                    "error": str(exc),
                },
            )
