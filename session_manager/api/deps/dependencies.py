"""
Dependency injection container.

Factory functions for FastAPI dependencies. The NoSQL handle is created
once by the application lifespan and kept on app.state; nothing here
opens connections.

Dependencies: session_manager.configs, session_manager.application
System role: DI container for service injection
"""

from functools import lru_cache

from borneo import NoSQLHandle
from fastapi import Depends, HTTPException, Request, status

from session_manager.application.services import SessionService
from session_manager.configs import Settings, get_settings


@lru_cache
def get_settings_dependency() -> Settings:
    """Get settings singleton."""
    return get_settings()


def get_nosql_handle(request: Request) -> NoSQLHandle:
    """
    Get the shared NoSQL handle created at startup.

    Raises:
        HTTPException(503): If the application has no live handle
    """
    handle = getattr(request.app.state, "nosql_handle", None)
    if handle is None:
        raise HTTPException(
            status_code=status.HTTP_503_SERVICE_UNAVAILABLE,
            detail="Document store connection is not initialized",
        )
    return handle


def get_session_service(
    handle: NoSQLHandle = Depends(get_nosql_handle),
    settings: Settings = Depends(get_settings_dependency),
) -> SessionService:
    """
    Get session service instance.

    Args:
        handle: Shared NoSQL handle (injected via Depends)
        settings: Application settings (injected via Depends)

    Returns:
        SessionService: Session service bound to the shared handle
    """
    return SessionService(handle=handle, settings=settings.nosql)
