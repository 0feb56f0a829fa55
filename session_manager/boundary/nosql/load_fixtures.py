"""
Session fixture loader.

Seeds the session table from a directory of JSON files, one table row per
file: {"account_number": 3, "user_id": 2001, "session_info": {...}}.
Rows without a user_id receive a generated one.

Dependencies: session_manager.boundary.nosql
System role: Test and demo data seeding

Usage:
    python -m session_manager.boundary.nosql.load_fixtures [directory]
"""

import json
import logging
import sys
from pathlib import Path

from session_manager.boundary.nosql.session_store import SessionStore
from session_manager.boundary.nosql.table_schema import (
    COL_ACCOUNT_NUMBER,
    COL_SESSION,
    COL_USER_ID,
)
from session_manager.core.exceptions import SessionManagerException

logger = logging.getLogger(__name__)


class FixtureLoadError(SessionManagerException):
    """Raised when a fixture file cannot be read or is not a table row."""

    def __init__(self, path: Path, reason: str) -> None:
        super().__init__(f"Unable to load fixture {path}: {reason}", {"path": str(path)})


def load_fixtures(store: SessionStore, directory: str | Path) -> list[tuple[int, int]]:
    """
    Write every file in a directory as one session row.

    Args:
        store: Session store to write through
        directory: Directory holding one JSON row per file

    Returns:
        list[tuple[int, int]]: (account_number, user_id) of each row written

    Raises:
        FileNotFoundError: If the directory does not exist
        FixtureLoadError: If a file is not valid JSON or lacks account_number
    """
    fixtures_dir = Path(directory)
    if not fixtures_dir.is_dir():
        raise FileNotFoundError(f"Fixture directory not found: {fixtures_dir}")

    written: list[tuple[int, int]] = []
    for path in sorted(p for p in fixtures_dir.iterdir() if p.is_file()):
        try:
            row = json.loads(path.read_text(encoding="utf-8"))
        except (OSError, UnicodeDecodeError, ValueError) as e:
            raise FixtureLoadError(path, str(e)) from e

        if not isinstance(row, dict) or COL_ACCOUNT_NUMBER not in row:
            raise FixtureLoadError(path, f"missing {COL_ACCOUNT_NUMBER}")

        account_number = int(row[COL_ACCOUNT_NUMBER])
        document = row.get(COL_SESSION, {})
        if row.get(COL_USER_ID) is not None:
            user_id = int(row[COL_USER_ID])
            store.put_by_key(account_number, user_id, document)
        else:
            user_id = store.insert(account_number, document)
        written.append((account_number, user_id))

    logger.info(f"{__name__}:load_fixtures - Loaded {len(written)} rows from {fixtures_dir}")
    return written


def main(argv: list[str] | None = None) -> int:
    """Provision the table and load fixtures using application settings."""
    from session_manager.boundary.nosql.connection import open_handle
    from session_manager.boundary.nosql.provisioner import ensure_table
    from session_manager.boundary.nosql.table_schema import descriptor_from_settings
    from session_manager.configs import get_settings
    from session_manager.observability.logger import configure_logging

    args = sys.argv[1:] if argv is None else argv
    settings = get_settings()
    configure_logging(settings.log_level)

    directory = args[0] if args else settings.nosql.fixtures_dir
    if not directory:
        logger.error("No fixture directory given and NOSQL_FIXTURES_DIR is not set")
        return 2

    nosql = settings.nosql
    handle = open_handle(nosql)
    try:
        ensure_table(
            handle,
            descriptor_from_settings(nosql),
            nosql.create_wait_ms,
            nosql.create_poll_ms,
        )
        store = SessionStore(handle, nosql.table_name, nosql.update_max_attempts)
        load_fixtures(store, directory)
    finally:
        handle.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
