# type: ignore
# pyright: reportMissingImports=false, reportGeneralTypeErrors=false
"""
Controller: System endpoints — health, readiness, metrics.
Pure HTTP layer — no business logic.
"""

from datetime import datetime, timezone

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST
from starlette.responses import Response

from app.core.config import settings
from app.core.dependencies import get_member_store, get_session_manager
from app.core.errors import StoreError

router = APIRouter(tags=["System"])


@router.get("/health")
def health_check():
    """Liveness probe for Docker and orchestration."""
    return {
        "status": "ok",
        "service": settings.SERVICE_NAME,
        "version": settings.SERVICE_VERSION,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "store_backend": get_member_store().backend,
        "active_sessions": get_session_manager().count(),
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness probe — verifies the record store answers."""
    store = get_member_store()
    try:
        await store.verify_connection()
        members = await store.count()
    except StoreError as exc:
        return JSONResponse(
            status_code=503,
            content={
                "status": "degraded",
                "service": settings.SERVICE_NAME,
                "store_backend": store.backend,
                "error": str(exc),
            },
        )
    return {
        "status": "ready",
        "service": settings.SERVICE_NAME,
        "store_backend": store.backend,
        "members_in_store": members,
    }


@router.get("/metrics")
def prometheus_metrics():
    """Expose Prometheus metrics in OpenMetrics format."""
    return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
