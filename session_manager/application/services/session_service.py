"""
Session service orchestrator.

Coordinates session lifecycle operations and table administration for the
HTTP layer. Store calls block on network I/O, so each one runs in the
threadpool.

Dependencies: fastapi, session_manager.boundary.nosql
System role: Session use case orchestration
"""

import logging
from typing import Any

from borneo import NoSQLHandle
from fastapi.concurrency import run_in_threadpool

from session_manager.boundary.nosql import provisioner
from session_manager.boundary.nosql.session_store import SessionStore
from session_manager.boundary.nosql.table_schema import CapacityLimits
from session_manager.configs.nosql import NoSQLSettings

logger = logging.getLogger(__name__)


class SessionService:
    """Session service orchestrator."""

    def __init__(self, handle: NoSQLHandle, settings: NoSQLSettings) -> None:
        """
        Initialize session service with the shared handle.

        Args:
            handle: Shared NoSQL handle created at startup
            settings: NoSQL settings (table name, wait budgets, attempts)
        """
        self.handle = handle
        self.settings = settings
        self.store = SessionStore(
            handle,
            table_name=settings.table_name,
            update_max_attempts=settings.update_max_attempts,
        )

    async def create_session(self, account_number: int, user_name: str) -> int:
        """
        Create a session for a user in an account.

        Args:
            account_number: Owning account
            user_name: Name stored in the session

        Returns:
            int: Generated user id
        """
        return await run_in_threadpool(self.store.create, account_number, user_name)

    async def get_session(self, account_number: int, user_id: int) -> Any:
        """
        Get a session document.

        Raises:
            NotFoundError: If no session has this key
        """
        return await run_in_threadpool(self.store.get_by_key, account_number, user_id)

    async def list_users(self, account_number: int) -> list[dict[str, Any]]:
        """List {"userName", "userID"} for every session in an account."""
        return await run_in_threadpool(self.store.list_users_in_account, account_number)

    async def update_session(self, account_number: int, user_id: int, patch: Any) -> Any:
        """
        Merge a JSON merge patch into a session.

        Args:
            account_number: Owning account
            user_id: User id within the account
            patch: Merge patch, decoded or as raw JSON text

        Returns:
            Any: Merged document

        Raises:
            NotFoundError: If no session has this key
            InvalidPatchError: If the patch is not valid JSON
            ConcurrentUpdateError: If concurrent writers won every attempt
        """
        merged = await run_in_threadpool(self.store.update, account_number, user_id, patch)
        logger.info(
            f"{__name__}:update_session - Session updated",
            extra={"account_number": account_number, "user_id": user_id},
        )
        return merged

    async def update_table_limits(
        self,
        read_units: int | None = None,
        write_units: int | None = None,
        storage_gb: int | None = None,
    ) -> CapacityLimits:
        """
        Change the session table's provisioned capacity.

        Raises:
            ProvisioningTimeoutError: If the change does not complete in time
        """
        return await run_in_threadpool(
            provisioner.update_limits,
            self.handle,
            self.settings.table_name,
            read_units,
            write_units,
            storage_gb,
            self.settings.limits_wait_ms,
            self.settings.limits_poll_ms,
        )

    async def get_table_limits(self) -> CapacityLimits:
        """Read the session table's provisioned capacity."""
        return await run_in_threadpool(
            provisioner.get_limits, self.handle, self.settings.table_name
        )
