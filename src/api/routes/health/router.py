"""Endpoints de health check e readiness."""

from __future__ import annotations

import asyncio
import logging
import time
from dataclasses import dataclass
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any, Literal

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

if TYPE_CHECKING:
    from app.sessions import SessionLifecycleManager

logger = logging.getLogger(__name__)

router = APIRouter()

SERVICE_NAME = "wa-session-gateway"


class HealthResponse(BaseModel):
    """Resposta do health check."""

    status: str
    service: str
    timestamp: str
    version: str = "1.0.0"


@dataclass(frozen=True, slots=True)
class DependencyCheck:
    """Resultado de checagem de dependência."""

    status: Literal["ok", "degraded", "failed"]
    latency_ms: float | None = None
    error: str | None = None
    details: dict[str, Any] | None = None

    def as_dict(self) -> dict[str, Any]:
        payload: dict[str, Any] = {
            "status": self.status,
            "latency_ms": self.latency_ms,
            "error": self.error,
        }
        if self.details is not None:
            payload["details"] = self.details
        return payload


@router.get("/health", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Liveness probe: verifica se o serviço está rodando."""
    return HealthResponse(
        status="healthy",
        service=SERVICE_NAME,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready")
async def readiness_check(request: Request) -> JSONResponse:
    """Readiness probe: gerenciador de sessões e store de credenciais."""
    manager = getattr(request.app.state, "session_manager", None)
    sessions_check = _check_sessions(manager)
    auth_check = await _check_auth_store(manager)

    ready = sessions_check.status == "ok" and auth_check.status == "ok"
    payload = {
        "status": "ready" if ready else "not_ready",
        "checks": {
            "sessions": sessions_check.as_dict(),
            "auth_store": auth_check.as_dict(),
        },
        "timestamp": datetime.now(UTC).isoformat(),
    }
    return JSONResponse(content=payload, status_code=200 if ready else 503)


def _check_sessions(manager: SessionLifecycleManager | None) -> DependencyCheck:
    if manager is None:
        return DependencyCheck(status="failed", error="not_configured")
    sessions = manager.list_sessions()
    connected = sum(1 for session in sessions if session.is_ready)
    return DependencyCheck(
        status="ok",
        details={"total": len(sessions), "connected": connected},
    )


async def _check_auth_store(manager: SessionLifecycleManager | None) -> DependencyCheck:
    if manager is None:
        return DependencyCheck(status="failed", error="not_configured")
    started_at = time.perf_counter()
    try:
        await asyncio.wait_for(manager.auth_store.list_sessions(), timeout=2.0)
    except TimeoutError:
        return DependencyCheck(status="failed", error="timeout")
    except Exception as exc:
        logger.warning("readiness_auth_store_failed", extra={"error_type": type(exc).__name__})
        return DependencyCheck(status="failed", error=type(exc).__name__)
    latency_ms = (time.perf_counter() - started_at) * 1000
    return DependencyCheck(status="ok", latency_ms=round(latency_ms, 2))
