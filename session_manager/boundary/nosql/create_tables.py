"""
Session table creation script.

Creates the session table with its initial limits using application
settings, waiting for it to become active.

Dependencies: session_manager.boundary.nosql, session_manager.configs
System role: Schema initialization outside the web process

Usage:
    python -m session_manager.boundary.nosql.create_tables
"""

import sys

from session_manager.boundary.nosql.connection import open_handle
from session_manager.boundary.nosql.provisioner import ensure_table
from session_manager.boundary.nosql.table_schema import descriptor_from_settings
from session_manager.configs import get_settings
from session_manager.observability.logger import configure_logging


def create_session_table() -> None:
    """
    Create the session table if absent.

    Idempotent: issues CREATE TABLE IF NOT EXISTS, so safe to run multiple
    times. An existing table keeps its data and limits.

    Raises:
        SessionManagerException: If credentials, connection, or provisioning fail
    """
    settings = get_settings()
    configure_logging(settings.log_level)
    nosql = settings.nosql

    handle = open_handle(nosql)
    try:
        result = ensure_table(
            handle,
            descriptor_from_settings(nosql),
            nosql.create_wait_ms,
            nosql.create_poll_ms,
        )
        print(f"Table {nosql.table_name} is {result.get_state()}.")
    finally:
        handle.close()


if __name__ == "__main__":
    create_session_table()
    sys.exit(0)
