"""API-specific dependencies."""

# Re-export common dependencies
from .dependencies import (
    get_nosql_handle,
    get_session_service,
    get_settings_dependency,
)

__all__ = [
    "get_nosql_handle",
    "get_session_service",
    "get_settings_dependency",
]
