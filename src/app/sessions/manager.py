"""Gerenciador do ciclo de vida das sessões.

Cria e reabre conexões, consome os eventos de cada conexão, aplica a
política de reconexão e executa reconexão forçada, desconexão e
shutdown. Todas as mutações de uma sessão acontecem com o lock do nome
adquirido no registro.
"""

from __future__ import annotations

import asyncio
import functools
import logging
import time
from typing import TYPE_CHECKING

from app.observability import record_latency, record_reconnect
from app.protocols.transport import (
    ConnectionOptions,
    TransportEvent,
    TransportEventType,
)
from app.services.reconnect_policy import ReconnectAction, ReconnectPolicy, decide_reconnect
from app.services.reconnect_scheduler import ReconnectScheduler
from app.sessions.connection_handle import ConnectionHandle
from app.sessions.manager_recovery import RecoveryReport, recover_sessions
from app.sessions.registry import SessionRegistry
from app.sessions.session_entity import Session
from config.settings import SessionSettings, WhatsAppSettings
from fsm.states import ConnectionState
from utils.errors import (
    CredentialStoreError,
    GatewayError,
    SessionNotFoundError,
    TransportError,
)

if TYPE_CHECKING:
    from app.protocols.auth_store import AuthStateStoreProtocol
    from app.protocols.code_renderer import CodeRendererProtocol
    from app.protocols.transport import TransportProviderProtocol

logger = logging.getLogger(__name__)


class SessionLifecycleManager:
    """Dono do registro de sessões e de suas conexões.

    Garante no máximo um handle vivo por nome: antes de instalar uma nova
    conexão o handle anterior é desanexado e encerrado.
    """

    __slots__ = (
        "_auth_store",
        "_policy",
        "_registry",
        "_renderer",
        "_scheduler",
        "_settings",
        "_transport",
        "_wa_settings",
    )

    def __init__(
        self,
        *,
        transport: TransportProviderProtocol,
        auth_store: AuthStateStoreProtocol,
        renderer: CodeRendererProtocol,
        registry: SessionRegistry | None = None,
        scheduler: ReconnectScheduler | None = None,
        settings: SessionSettings | None = None,
        wa_settings: WhatsAppSettings | None = None,
    ) -> None:
        """Inicializa gerenciador.

        Args:
            transport: Provider que constrói conexões
            auth_store: Store de credenciais por sessão
            renderer: Renderizador do código de pareamento
            registry: Registro de sessões (novo se omitido)
            scheduler: Agendador de reconexões (novo se omitido)
            settings: Settings de sessão (padrões se omitido)
            wa_settings: Settings do transporte (padrões se omitido)
        """
        self._transport = transport
        self._auth_store = auth_store
        self._renderer = renderer
        self._registry = registry or SessionRegistry()
        self._scheduler = scheduler or ReconnectScheduler()
        self._settings = settings or SessionSettings()
        self._wa_settings = wa_settings or WhatsAppSettings()
        self._policy = ReconnectPolicy.from_settings(self._settings)

    @property
    def registry(self) -> SessionRegistry:
        return self._registry

    @property
    def auth_store(self) -> AuthStateStoreProtocol:
        return self._auth_store

    @property
    def scheduler(self) -> ReconnectScheduler:
        return self._scheduler

    @property
    def settings(self) -> SessionSettings:
        return self._settings

    # ──────────────────────────────────────────────────────────────
    # Operações públicas
    # ──────────────────────────────────────────────────────────────

    async def create_or_get(self, name: str) -> Session:
        """Retorna a sessão se conectada; caso contrário abre nova conexão.

        Uma sessão existente não conectada é reaproveitada (mantendo o
        contador de tentativas) e recebe uma conexão nova.
        """
        async with self._registry.locked(name):
            return await self._create_or_get_locked(name)

    async def force_reconnect(self, name: str) -> Session:
        """Descarta a sessão atual e abre uma nova do zero (tentativas = 0)."""
        async with self._registry.locked(name):
            self._scheduler.cancel(name)
            previous = self._registry.remove(name)
            if previous is not None:
                logger.info("session_force_reconnect", extra=previous.to_log_dict())
                await self._discard_handle(previous)
            return await self._create_or_get_locked(name)

    async def disconnect(self, name: str) -> None:
        """Logout explícito: desvincula, remove a sessão e apaga credenciais.

        Raises:
            SessionNotFoundError: Se a sessão não estiver no registro
            TransportError: Se o provider falhar no logout
        """
        async with self._registry.locked(name):
            session = self._registry.get(name)
            if session is None:
                raise SessionNotFoundError(name)

            handle = session.handle
            if handle is not None:
                try:
                    await handle.connection.logout()
                except Exception as exc:
                    raise TransportError("logout", str(exc)) from exc

            await self._terminate(session, trigger="manual_logout")

    async def has_credentials(self, name: str) -> bool:
        """Indica se existe diretório de credenciais para a sessão."""
        return await self._auth_store.exists(name)

    def get(self, name: str) -> Session | None:
        return self._registry.get(name)

    def list_sessions(self) -> list[Session]:
        return self._registry.sessions()

    async def startup_recovery(self) -> RecoveryReport:
        """Recria as sessões cujas credenciais estão em disco."""
        return await recover_sessions(self, self._auth_store)

    async def shutdown(self) -> None:
        """Cancela reconexões pendentes e encerra todas as conexões."""
        await self._scheduler.shutdown()
        sessions = self._registry.sessions()
        for session in sessions:
            async with self._registry.locked(session.name):
                await self._discard_handle(session)
        logger.info("session_manager_shutdown", extra={"sessions": len(sessions)})

    # ──────────────────────────────────────────────────────────────
    # Abertura de conexão
    # ──────────────────────────────────────────────────────────────

    async def _create_or_get_locked(self, name: str) -> Session:
        session = self._registry.get(name)
        if session is not None and session.is_ready:
            return session

        if session is None:
            session = Session(
                name=name,
                max_reconnect_attempts=self._settings.max_reconnect_attempts,
            )
            logger.info("session_creating", extra={"session_name": name})
        else:
            logger.info("session_reopening", extra=session.to_log_dict())
            await self._discard_handle(session)
            session.mark_initializing("reopen")

        try:
            await self._open_connection(session)
        except Exception:
            if name in self._registry:
                session.mark_disconnected(None, trigger="connect_failed")
            raise
        return session

    async def _open_connection(self, session: Session) -> None:
        start = time.perf_counter()
        try:
            auth_state = await self._auth_store.load(session.name)
            version = await self._transport.fetch_latest_version()
            connection = await self._transport.connect(
                version=version,
                auth_state=auth_state,
                options=self._connection_options(),
            )
        except GatewayError:
            raise
        except Exception as exc:
            logger.error(
                "session_connect_failed",
                extra={"session_name": session.name, "error": str(exc)},
            )
            raise TransportError("connect", str(exc)) from exc

        handle = ConnectionHandle(session.name, connection, auth_state, self._dispatch)
        session.handle = handle
        self._registry.put(session)
        handle.attach()

        if auth_state.registered:
            handle.spawn(self._await_restored_identity(handle), name="restore-check")

        record_latency("lifecycle", "open_connection", (time.perf_counter() - start) * 1000)
        logger.info(
            "session_connection_opened",
            extra={
                "session_name": session.name,
                "generation": handle.generation,
                "registered": auth_state.registered,
                "version": ".".join(str(part) for part in version),
            },
        )

    def _connection_options(self) -> ConnectionOptions:
        wa = self._wa_settings
        return ConnectionOptions(
            browser=wa.browser,
            connect_timeout_ms=wa.connect_timeout_ms,
            query_timeout_ms=wa.query_timeout_ms,
            qr_timeout_ms=wa.qr_timeout_ms,
            max_msg_retry_count=wa.max_msg_retry_count,
            retry_request_delay_ms=wa.retry_request_delay_ms,
            mark_online_on_connect=wa.mark_online_on_connect,
            sync_full_history=wa.sync_full_history,
        )

    async def _await_restored_identity(self, handle: ConnectionHandle) -> None:
        """Aguarda a identidade de credenciais já pareadas.

        Se o provider autenticar sem emitir abertura explícita, a abertura
        é injetada na fila do handle para manter a ordem dos eventos.
        """
        user = await handle.connection.wait_authenticated(self._settings.restore_grace_seconds)
        if user is None:
            logger.info("session_restore_pending", extra={"session_name": handle.session_name})
            return
        handle.inject(TransportEvent.opened(user.id, restored=True))

    async def _discard_handle(self, session: Session) -> None:
        handle = session.handle
        if handle is None:
            return
        session.handle = None
        await handle.close()

    # ──────────────────────────────────────────────────────────────
    # Eventos de conexão
    # ──────────────────────────────────────────────────────────────

    async def _dispatch(self, handle: ConnectionHandle, event: TransportEvent) -> None:
        async with self._registry.locked(handle.session_name):
            session = self._registry.get(handle.session_name)
            if session is None or session.handle is not handle:
                logger.debug(
                    "session_event_stale",
                    extra={
                        "session_name": handle.session_name,
                        "generation": handle.generation,
                        "event_type": str(event.type),
                    },
                )
                return

            if event.type == TransportEventType.QR_ISSUED:
                await self._on_qr_issued(session, event)
            elif event.type == TransportEventType.CONNECTION_OPENED:
                self._on_connection_opened(session, handle, event)
            elif event.type == TransportEventType.CONNECTION_CLOSED:
                await self._on_connection_closed(session, event)
            elif event.type == TransportEventType.CREDS_UPDATED:
                await self._on_creds_updated(handle, event)

    async def _on_qr_issued(self, session: Session, event: TransportEvent) -> None:
        if session.is_ready:
            logger.info("session_qr_ignored", extra={"session_name": session.name})
            return
        payload = await self._renderer.render(event.challenge or "")
        if session.mark_awaiting_code(payload):
            logger.info("session_qr_ready", extra={"session_name": session.name})

    def _on_connection_opened(
        self,
        session: Session,
        handle: ConnectionHandle,
        event: TransportEvent,
    ) -> None:
        if session.is_ready:
            return
        identity = event.identity
        if identity is None and handle.connection.user is not None:
            identity = handle.connection.user.id
        trigger = "restored" if event.restored else "connection_opened"
        if session.mark_connected(identity, trigger=trigger):
            self._scheduler.cancel(session.name)
            logger.info(
                "session_connected",
                extra={"session_name": session.name, "restored": event.restored},
            )

    async def _on_connection_closed(self, session: Session, event: TransportEvent) -> None:
        session.mark_disconnected(event.reason_code)
        decision = decide_reconnect(
            event.reason_code,
            session.reconnect_attempts,
            session.max_reconnect_attempts,
            self._policy,
        )
        record_reconnect(
            session.name,
            decision.action.value,
            decision.reason_code,
            attempt=decision.attempt,
            delay_seconds=decision.delay_seconds,
        )

        if decision.action == ReconnectAction.TERMINATE:
            await self._terminate(session, trigger="logged_out")
        elif decision.action == ReconnectAction.RETRY:
            session.reconnect_attempts = decision.attempt
            self._scheduler.schedule(
                session.name,
                decision.delay_seconds,
                functools.partial(self._retry, expected=session),
            )
        else:
            session.code_payload = None
            logger.warning(
                "session_reconnect_given_up",
                extra={
                    "session_name": session.name,
                    "reason_code": decision.reason_code,
                    "disconnect_kind": decision.kind.value,
                    "reconnect_attempts": session.reconnect_attempts,
                },
            )

    async def _on_creds_updated(self, handle: ConnectionHandle, event: TransportEvent) -> None:
        if not event.creds:
            return
        try:
            await self._auth_store.save_creds(handle.auth_state, event.creds)
        except CredentialStoreError as exc:
            logger.error(
                "session_creds_save_failed",
                extra={"session_name": handle.session_name, "error": str(exc)},
            )

    async def _retry(self, name: str, *, expected: Session) -> None:
        """Reabre a sessão que agendou a tentativa.

        A verificação acontece com o lock adquirido: uma tentativa que já
        saiu da espera não reabre sessão encerrada, nem substitui a sessão
        recriada por reconexão forçada.
        """
        async with self._registry.locked(name):
            current = self._registry.get(name)
            if current is not expected or current.state != ConnectionState.DISCONNECTED:
                logger.info(
                    "reconnect_skipped",
                    extra={
                        "session_name": name,
                        "reason": "not_registered" if current is None else "superseded",
                    },
                )
                return
            await self._create_or_get_locked(name)

    async def _terminate(self, session: Session, trigger: str) -> None:
        """Remove a sessão de forma definitiva e apaga suas credenciais."""
        self._scheduler.cancel(session.name)
        self._registry.remove(session.name, expected=session)
        handle = session.handle
        session.handle = None
        if handle is not None:
            handle.detach()
        session.mark_logged_out(trigger)
        try:
            await self._auth_store.purge(session.name)
        except CredentialStoreError as exc:
            logger.error(
                "session_purge_failed",
                extra={"session_name": session.name, "error": str(exc)},
            )
        logger.info("session_terminated", extra={"session_name": session.name, "trigger": trigger})


async def wait_for_pending_events(manager: SessionLifecycleManager) -> None:
    """Aguarda o processamento dos eventos já enfileirados em todas as sessões."""
    handles = [s.handle for s in manager.list_sessions() if s.handle is not None]
    await asyncio.gather(*(handle.join() for handle in handles))
