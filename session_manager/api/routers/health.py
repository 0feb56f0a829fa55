"""
Health check API endpoints.

Routes: GET /health, GET /health/db

Dependencies: session_manager.application.services
System role: Health check HTTP API
"""

from borneo import NoSQLException
from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel

from session_manager.api.deps import get_session_service
from session_manager.application.services.session_service import SessionService
from session_manager.core.exceptions import SessionManagerException


class HealthResponse(BaseModel):
    """Health check response model."""

    status: str
    message: str


router = APIRouter(prefix="/health", tags=["health"])


@router.get("", response_model=HealthResponse)
async def health_check() -> HealthResponse:
    """Basic health check."""
    return HealthResponse(status="healthy", message="Server Healthy")


@router.get("/db", response_model=HealthResponse)
async def health_check_db(
    session_service: SessionService = Depends(get_session_service),
) -> HealthResponse:
    """Session table health check."""
    try:
        await session_service.get_table_limits()
    except SessionManagerException as e:
        raise HTTPException(status_code=503, detail=f"Session table unavailable: {e.message}")
    except NoSQLException as e:
        raise HTTPException(status_code=503, detail=f"Session table unavailable: {e}")
    return HealthResponse(status="healthy", message="Session table reachable")
