"""
Observability module.

Provides logging configuration, correlation ID tracking, and request
logging middleware.
"""

from session_manager.observability.correlation import get_correlation_id, set_correlation_id
from session_manager.observability.logger import configure_logging, get_logger

__all__ = ["configure_logging", "get_logger", "get_correlation_id", "set_correlation_id"]
