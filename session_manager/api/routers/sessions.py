"""
Session manager API endpoints.

Routes:
- GET  /sessionmanager/getsession/{accountNum}/{userID} - Get session document
- GET  /sessionmanager/getusers/{accountNum} - List users in an account
- POST /sessionmanager/create/{accountNum}/{userName} - Create session
- POST /sessionmanager/update/{accountNum}/{userID} - Apply JSON merge patch
- POST /sessionmanager/updatetablelimits - Change table capacity
- GET  /sessionmanager/tablelimits - Read table capacity

Dependencies: session_manager.application.services, session_manager.models
System role: Session management HTTP API
"""

import logging
from typing import Any

from fastapi import APIRouter, Depends, Query, Request, Response, status

from session_manager.api.deps import get_session_service
from session_manager.api.routers.session_error_handling import handle_session_errors
from session_manager.application.services.session_service import SessionService
from session_manager.models.session import (
    CreateSessionResponse,
    TableLimitsResponse,
    UserSummary,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/sessionmanager", tags=["sessions"])


@router.get("/getsession/{accountNum}/{userID}")
@handle_session_errors
async def get_session_for_user(
    accountNum: int,
    userID: int,
    session_service: SessionService = Depends(get_session_service),
) -> Any:
    """
    Retrieve the session document for one user in one account.

    Raises:
        HTTPException(404): Session not found
    """
    return await session_service.get_session(accountNum, userID)


@router.get("/getusers/{accountNum}", response_model=list[UserSummary])
@handle_session_errors
async def get_users_in_account(
    accountNum: int,
    session_service: SessionService = Depends(get_session_service),
) -> list[UserSummary]:
    """List the user name and id of every session in an account."""
    users = await session_service.list_users(accountNum)
    return [UserSummary(**user) for user in users]


@router.post("/create/{accountNum}/{userName}", response_model=CreateSessionResponse)
@handle_session_errors
async def create_session(
    accountNum: int,
    userName: str,
    session_service: SessionService = Depends(get_session_service),
) -> CreateSessionResponse:
    """Create a session for a user; returns the generated user id."""
    user_id = await session_service.create_session(accountNum, userName)
    return CreateSessionResponse(userID=str(user_id))


@router.post("/update/{accountNum}/{userID}")
@handle_session_errors
async def update_session(
    accountNum: int,
    userID: int,
    request: Request,
    session_service: SessionService = Depends(get_session_service),
) -> Any:
    """
    Apply an RFC 7386 JSON merge patch to a session.

    Raises:
        HTTPException(400): Body is not valid JSON
        HTTPException(404): Session not found
        HTTPException(409): Lost to concurrent updates
    """
    patch = await request.body()
    return await session_service.update_session(accountNum, userID, patch)


@router.post("/updatetablelimits", status_code=status.HTTP_204_NO_CONTENT)
@handle_session_errors
async def update_table_limits(
    readUnits: int | None = Query(default=None, gt=0),
    writeUnits: int | None = Query(default=None, gt=0),
    storageGB: int | None = Query(default=None, gt=0),
    session_service: SessionService = Depends(get_session_service),
) -> Response:
    """
    Update provisioned throughput or storage; omitted values are kept.

    Raises:
        HTTPException(504): Change did not complete within its wait budget
    """
    limits = await session_service.update_table_limits(readUnits, writeUnits, storageGB)
    logger.info("Table limits updated", extra={"limits": limits})
    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.get("/tablelimits", response_model=TableLimitsResponse)
@handle_session_errors
async def get_table_limits(
    session_service: SessionService = Depends(get_session_service),
) -> TableLimitsResponse:
    """Read the session table's provisioned capacity."""
    limits = await session_service.get_table_limits()
    return TableLimitsResponse(
        readUnits=limits.read_units,
        writeUnits=limits.write_units,
        storageGB=limits.storage_gb,
    )
