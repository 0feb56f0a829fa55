"""
Exception hierarchy for the session manager.

Provides layered exception structure for domain-specific errors.
All exceptions include context for observability and debugging.

Dependencies: None (pure domain layer)
System role: Centralized exception handling across the application
"""

from typing import Any


class SessionManagerException(Exception):
    """Base exception for all session manager errors."""

    def __init__(self, message: str, details: dict[str, Any] | None = None) -> None:
        """
        Initialize base exception with message and optional context.

        Args:
            message: Human-readable error message
            details: Optional dictionary of additional context for debugging
        """
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        """Return string representation including details."""
        if self.details:
            return f"{self.message} | Details: {self.details}"
        return self.message


class MissingParameterError(SessionManagerException):
    """Raised when a required connection parameter is absent."""

    def __init__(self, name: str, source: str = "configuration") -> None:
        """
        Initialize missing parameter error.

        Args:
            name: Logical name of the missing parameter
            source: Where the parameter was expected (configuration, credentials file)
        """
        self.name = name
        super().__init__(
            f"Expected to find {name} in {source}",
            {"parameter": name, "source": source},
        )


class CredentialFileNotFoundError(SessionManagerException):
    """Raised when the signing key file does not exist."""

    def __init__(self, path: str, parameter: str | None = None) -> None:
        self.path = path
        details: dict[str, Any] = {"path": path}
        if parameter:
            details["parameter"] = parameter
        super().__init__(f"Could not find file {path}", details)


class CredentialParseError(SessionManagerException):
    """Raised when a credentials file line is not of the form key=value."""

    def __init__(self, path: str, line_number: int) -> None:
        self.path = path
        self.line_number = line_number
        super().__init__(
            f"Malformed line {line_number} in credentials file {path}",
            {"path": path, "line_number": line_number},
        )


class AuthenticationSetupError(SessionManagerException):
    """Raised when the request signer cannot be built from the signing key."""


class ConnectivityError(SessionManagerException):
    """Raised when the document store endpoint cannot be reached."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        details: dict[str, Any] | None = None,
    ) -> None:
        details = details or {}
        if endpoint:
            details["endpoint"] = endpoint
        super().__init__(message, details)


class ProvisioningTimeoutError(SessionManagerException):
    """Raised when a table does not become active within its wait budget."""

    def __init__(self, table_name: str, state: str | None, waited_ms: int) -> None:
        self.table_name = table_name
        self.state = state
        super().__init__(
            f"Table {table_name} not active after {waited_ms} ms, current state = {state}",
            {"table_name": table_name, "state": state, "waited_ms": waited_ms},
        )


class NotFoundError(SessionManagerException):
    """Raised when no session exists for a primary key."""

    def __init__(self, account_number: int, user_id: int) -> None:
        self.account_number = account_number
        self.user_id = user_id
        super().__init__(
            f"Session not found: account {account_number}, user {user_id}",
            {"account_number": account_number, "user_id": user_id},
        )


class InvalidPatchError(SessionManagerException):
    """Raised when a merge patch document is not valid JSON."""


class RequestTimeoutError(SessionManagerException):
    """Raised when a store request exceeds the configured timeout."""

    def __init__(self, operation: str, details: dict[str, Any] | None = None) -> None:
        details = details or {}
        details["operation"] = operation
        super().__init__(f"Request timed out during {operation}", details)


class ConcurrentUpdateError(SessionManagerException):
    """Raised when a merge-patch update keeps losing the version race."""

    def __init__(self, account_number: int, user_id: int, attempts: int) -> None:
        super().__init__(
            f"Session for account {account_number}, user {user_id} changed concurrently",
            {"account_number": account_number, "user_id": user_id, "attempts": attempts},
        )
