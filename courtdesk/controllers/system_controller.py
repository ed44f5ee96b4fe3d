# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints - health, readiness, metrics.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest
from starlette.responses import Response

from courtdesk.core.config import settings
from courtdesk.core.dependencies import get_session_repo, get_team_repo

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    """Liveness check."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "team_members": get_team_repo().count(),
        "active_sessions": get_session_repo().count(),
    }


@router.get("/health/ready")
def readiness_check():
    """Readiness check - reports whether the eCourts provider can be reached at all."""
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "provider_configured": settings.ecourts_api_key() is not None,
        "remote_roster": bool(settings.TEAM_ROSTER_URL),
    }


@router.get("/metrics")
def prometheus_metrics():
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
