"""
Health Check Routes — Liveness / Readiness checks

Compatible with Kubernetes and Docker HEALTHCHECK.
"""

from fastapi import APIRouter, Request
from pydantic import BaseModel
from typing import Dict

from ...core.config import settings

router = APIRouter()


class HealthResponse(BaseModel):
    status: str
    version: str
    components: Dict[str, str]


@router.get("/health")
async def health_check():
    """Basic health check — used by Docker HEALTHCHECK."""
    return {"status": "healthy"}


@router.get("/ready", response_model=HealthResponse)
async def readiness_check(request: Request):
    """
    Readiness check: verifies the document session is usable.

    Checks:
    - configured document file exists
    - a session was opened and is not closed
    """
    components: Dict[str, str] = {}

    document_path = settings.document_path_absolute
    if document_path.is_file():
        components["document"] = "healthy"
    else:
        components["document"] = f"unhealthy: {document_path} not found"

    session = getattr(request.app.state, "session", None)
    if session is None:
        components["session"] = "unhealthy: not opened"
    elif session.closed:
        components["session"] = "degraded: closed"
    else:
        components["session"] = "healthy"

    all_healthy = all(v == "healthy" for v in components.values())

    return HealthResponse(
        status="ready" if all_healthy else "degraded",
        version="1.0.0",
        components=components,
    )


@router.get("/live")
async def liveness_check():
    """Liveness check."""
    return {"status": "alive"}
