"""
Driver exception translation.

Maps borneo exceptions raised by store calls onto the session manager's
exception hierarchy so callers never handle driver types directly.

Dependencies: borneo
System role: Error boundary between the driver and the application
"""

from contextlib import contextmanager
from typing import Iterator

from borneo import InvalidAuthorizationException, RequestTimeoutException

from session_manager.core.exceptions import (
    AuthenticationSetupError,
    RequestTimeoutError,
)


@contextmanager
def translate_driver_errors(operation: str, **context) -> Iterator[None]:
    """
    Re-raise timeout and authorization failures as domain errors.

    Other driver exceptions propagate unchanged.

    Args:
        operation: Name of the store operation, recorded in error details
        **context: Extra detail fields (table name, key values)
    """
    try:
        yield
    except RequestTimeoutException as e:
        raise RequestTimeoutError(operation, {**context, "error": str(e)}) from e
    except InvalidAuthorizationException as e:
        raise AuthenticationSetupError(
            f"Request rejected during {operation}: {e}",
            {**context, "operation": operation},
        ) from e
