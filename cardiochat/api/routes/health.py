"""
Health Check Routes

FastAPI endpoints for service health and readiness checks.
"""

from datetime import UTC, datetime

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from cardiochat import __version__
from cardiochat.models.api import HealthResponse

router = APIRouter()


@router.get("/health", response_model=HealthResponse, status_code=status.HTTP_200_OK)
async def health() -> HealthResponse:
    """
    Basic liveness check.

    Returns 200 OK if the service is running.
    """
    return HealthResponse(
        status="healthy",
        version=__version__,
        timestamp=datetime.now(UTC).isoformat(),
    )


@router.get("/ready", status_code=status.HTTP_200_OK)
async def readiness() -> JSONResponse:
    """
    Readiness check.

    Returns:
        200 OK once the orchestrator has loaded the session state
        503 Service Unavailable otherwise
    """
    from cardiochat.api.main import app_state

    ready = app_state.get("orchestrator") is not None
    return JSONResponse(
        status_code=status.HTTP_200_OK if ready else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "ready" if ready else "not_ready",
            "version": __version__,
            "checks": {"orchestrator": ready},
        },
    )
