"""Testes dos endpoints de health e readiness."""

from __future__ import annotations

import json
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest
from starlette.requests import Request

from api.routes.health.router import health_check, readiness_check
from app.sessions import SessionLifecycleManager
from tests.fakes.fake_transport import FakeTransportProvider


def _build_request_with_state(state: SimpleNamespace) -> Request:
    scope = {
        "type": "http",
        "asgi": {"version": "3.0"},
        "http_version": "1.1",
        "method": "GET",
        "path": "/ready",
        "raw_path": b"/ready",
        "query_string": b"",
        "headers": [],
        "app": SimpleNamespace(state=state),
    }

    async def _receive() -> dict[str, object]:
        return {"type": "http.request", "body": b"", "more_body": False}

    return Request(scope, _receive)


@pytest.mark.asyncio
async def test_health_reports_service() -> None:
    response = await health_check()

    assert response.status == "healthy"
    assert response.service == "wa-session-gateway"


@pytest.mark.asyncio
async def test_readiness_returns_not_ready_without_manager() -> None:
    request = _build_request_with_state(SimpleNamespace(session_manager=None))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["status"] == "not_ready"
    assert payload["checks"]["sessions"]["status"] == "failed"
    assert payload["checks"]["auth_store"]["status"] == "failed"


@pytest.mark.asyncio
async def test_readiness_returns_ready_with_manager(
    manager: SessionLifecycleManager,
    fake_transport: FakeTransportProvider,
) -> None:
    await manager.create_or_get("loja")
    fake_transport.last.emit_open("5511@s.whatsapp.net")
    await manager.get("loja").handle.join()

    request = _build_request_with_state(SimpleNamespace(session_manager=manager))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 200
    assert payload["status"] == "ready"
    assert payload["checks"]["sessions"]["details"] == {"total": 1, "connected": 1}
    assert payload["checks"]["auth_store"]["status"] == "ok"


@pytest.mark.asyncio
async def test_readiness_fails_when_auth_store_errors() -> None:
    auth_store = MagicMock()
    auth_store.list_sessions = AsyncMock(side_effect=OSError("disco indisponível"))
    manager = SimpleNamespace(auth_store=auth_store, list_sessions=lambda: [])

    request = _build_request_with_state(SimpleNamespace(session_manager=manager))

    response = await readiness_check(request)
    payload = json.loads(response.body.decode("utf-8"))

    assert response.status_code == 503
    assert payload["checks"]["sessions"]["status"] == "ok"
    assert payload["checks"]["auth_store"]["error"] == "OSError"
