"""Endpoints de gerenciamento de sessões WhatsApp.

Endpoints:
- GET  /qrcode/{sessao}: cria a sessão se preciso e retorna o QR code
- GET  /status/{sessao}: status da sessão
- POST /mensagem/{sessao}: envia texto
- POST /arquivo/{sessao}: envia arquivos como documento
- POST /reconectar/{sessao}: recria a sessão a partir das credenciais
- POST /desconectar/{sessao}: logout e remoção das credenciais
- GET  /sessoes: lista sessões
- GET  /contatos/{sessao}: contatos conhecidos da sessão

As rotas apenas traduzem HTTP para operações do gerenciador e dos use
cases; erros de domínio viram códigos HTTP aqui.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import pydantic
from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from api.routes.sessions.schemas import (
    ArquivoRequest,
    MensagemRequest,
    contacts_payload,
    files_payload,
    message_payload,
    qrcode_payload,
    sessions_payload,
    status_payload,
)
from app.domain.address import ensure_session_name
from app.sessions import SessionLifecycleManager, describe_status, list_summaries
from app.use_cases.sessions import SessionMessenger
from utils.errors import (
    GatewayError,
    SessionNotFoundError,
    SessionNotReadyError,
    TransportError,
    ValidationError,
)

logger = logging.getLogger(__name__)

router = APIRouter()


def get_session_manager(request: Request) -> SessionLifecycleManager:
    """Gerenciador de sessões registrado no estado da aplicação."""
    return request.app.state.session_manager


def get_messenger(request: Request) -> SessionMessenger:
    """Use case de mensagens registrado no estado da aplicação."""
    return request.app.state.messenger


def _error(status_code: int, message: str, detail: str | None = None) -> JSONResponse:
    content: dict[str, Any] = {"error": message}
    if detail is not None:
        content["detalhes"] = detail
    return JSONResponse(status_code=status_code, content=content)


async def _read_json(request: Request) -> dict[str, Any]:
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        return {}
    return data if isinstance(data, dict) else {}


@router.get("/qrcode/{sessao}")
async def get_qrcode(
    sessao: str,
    manager: SessionLifecycleManager = Depends(get_session_manager),
) -> JSONResponse:
    """Cria a sessão se ausente e retorna QR, conexão ou espera."""
    try:
        ensure_session_name(sessao)
    except ValidationError as exc:
        return _error(400, str(exc))

    session = manager.get(sessao)
    if session is None:
        try:
            session = await manager.create_or_get(sessao)
        except GatewayError as exc:
            logger.error(
                "qrcode_session_create_failed",
                extra={"session_name": sessao, "error_type": type(exc).__name__},
            )
            return _error(500, "Erro ao criar sessão", str(exc))

    status_code, payload = qrcode_payload(session)
    return JSONResponse(status_code=status_code, content=payload)


@router.get("/status/{sessao}")
async def get_status(
    sessao: str,
    manager: SessionLifecycleManager = Depends(get_session_manager),
) -> JSONResponse:
    """Status da sessão (nomes desconhecidos retornam existe=false)."""
    status = describe_status(
        manager.registry,
        sessao,
        default_max_attempts=manager.settings.max_reconnect_attempts,
    )
    return JSONResponse(content=status_payload(status))


@router.post("/mensagem/{sessao}")
async def post_mensagem(
    sessao: str,
    request: Request,
    messenger: SessionMessenger = Depends(get_messenger),
) -> JSONResponse:
    """Envia mensagem de texto pela sessão."""
    try:
        body = MensagemRequest.model_validate(await _read_json(request))
    except pydantic.ValidationError:
        return _error(400, "Número e mensagem são obrigatórios")

    try:
        result = await messenger.send_message(sessao, body.numero, body.mensagem)
    except ValidationError as exc:
        return _error(400, str(exc))
    except SessionNotReadyError as exc:
        return _error(503, str(exc))
    except TransportError as exc:
        return _error(500, "Erro ao enviar mensagem", exc.detail)

    return JSONResponse(content=message_payload(result))


@router.post("/arquivo/{sessao}")
async def post_arquivo(
    sessao: str,
    request: Request,
    messenger: SessionMessenger = Depends(get_messenger),
) -> JSONResponse:
    """Envia arquivos locais como documentos pela sessão."""
    try:
        body = ArquivoRequest.model_validate(await _read_json(request))
    except pydantic.ValidationError:
        return _error(400, "Número é obrigatório")

    try:
        result = await messenger.send_files(sessao, body.numero, body.arquivos, body.legenda)
    except ValidationError as exc:
        return _error(400, str(exc))
    except SessionNotReadyError as exc:
        return _error(503, str(exc))
    except TransportError as exc:
        return _error(500, "Erro ao enviar arquivos", exc.detail)

    return JSONResponse(content=files_payload(result))


@router.post("/reconectar/{sessao}")
async def post_reconectar(
    sessao: str,
    manager: SessionLifecycleManager = Depends(get_session_manager),
) -> JSONResponse:
    """Descarta a sessão atual e recria a partir das credenciais em disco."""
    try:
        ensure_session_name(sessao)
    except ValidationError as exc:
        return _error(400, str(exc))

    if not await manager.has_credentials(sessao):
        return _error(404, "Pasta de autenticação não encontrada")

    try:
        session = await manager.force_reconnect(sessao)
    except GatewayError as exc:
        return _error(500, "Erro ao reconectar", str(exc))

    return JSONResponse(
        content={
            "status": "Sessão sendo reconectada",
            "nome": sessao,
            "ready": session.is_ready,
        }
    )


@router.post("/desconectar/{sessao}")
async def post_desconectar(
    sessao: str,
    manager: SessionLifecycleManager = Depends(get_session_manager),
) -> JSONResponse:
    """Logout da sessão, remoção do registro e das credenciais."""
    try:
        await manager.disconnect(sessao)
    except SessionNotFoundError as exc:
        return _error(404, str(exc))
    except GatewayError as exc:
        return _error(500, "Erro ao desconectar", str(exc))

    return JSONResponse(content={"status": "Sessão desconectada e removida"})


@router.get("/sessoes")
async def get_sessoes(
    manager: SessionLifecycleManager = Depends(get_session_manager),
) -> JSONResponse:
    """Lista todas as sessões registradas."""
    return JSONResponse(content=sessions_payload(list_summaries(manager.registry)))


@router.get("/contatos/{sessao}")
async def get_contatos(
    sessao: str,
    messenger: SessionMessenger = Depends(get_messenger),
) -> JSONResponse:
    """Contatos conhecidos pela conexão da sessão."""
    try:
        contacts = await messenger.fetch_contacts(sessao)
    except SessionNotReadyError as exc:
        return _error(503, str(exc))
    except TransportError as exc:
        return _error(500, "Erro ao buscar contatos", exc.detail)

    return JSONResponse(content=contacts_payload(contacts))
