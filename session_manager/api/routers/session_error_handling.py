"""
Session error handling utilities.

Provides a decorator that maps session manager exceptions onto HTTP
responses consistently across session endpoints.
"""

import functools
import logging
from typing import Any, Callable, TypeVar

from fastapi import HTTPException, status

from session_manager.core.exceptions import (
    ConcurrentUpdateError,
    InvalidPatchError,
    NotFoundError,
    ProvisioningTimeoutError,
    RequestTimeoutError,
    SessionManagerException,
)

logger = logging.getLogger(__name__)

# Type for the decorated function
F = TypeVar("F", bound=Callable[..., Any])


def handle_session_errors(func: F) -> F:
    """
    Decorator to handle session errors and transform them into HTTPExceptions.

    Failures are request-scoped: every error becomes a response, none
    escapes to the server.
    """
    @functools.wraps(func)
    async def wrapper(*args: Any, **kwargs: Any) -> Any:
        try:
            return await func(*args, **kwargs)

        except HTTPException:
            raise

        except NotFoundError as e:
            logger.warning("Session not found", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=e.message)

        except InvalidPatchError as e:
            logger.warning("Invalid merge patch", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=e.message)

        except ConcurrentUpdateError as e:
            logger.warning("Concurrent session update", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=e.message)

        except (RequestTimeoutError, ProvisioningTimeoutError) as e:
            logger.error("Store operation timed out", extra={"error": str(e)})
            raise HTTPException(status_code=status.HTTP_504_GATEWAY_TIMEOUT, detail=e.message)

        except SessionManagerException as e:
            logger.error("Session operation failed", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=e.message
            )

        except Exception as e:
            logger.exception("Unexpected failure in session operation", extra={"error": str(e)})
            raise HTTPException(
                status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
                detail=f"An internal error occurred during session operation: {str(e)}",
            )

    return wrapper  # type: ignore
