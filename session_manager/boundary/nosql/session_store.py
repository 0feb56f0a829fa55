"""
Session CRUD operations.

Point reads and writes by composite primary key (account number, user id),
account-scoped listing, and merge-patch updates against the session table.

Dependencies: borneo, session_manager.core.merge_patch
System role: Session persistence operations
"""

import logging
from typing import Any

from borneo import (
    Consistency,
    GetRequest,
    NoSQLHandle,
    PutOption,
    PutRequest,
    QueryRequest,
    Version,
)

from session_manager.boundary.nosql.errors import translate_driver_errors
from session_manager.boundary.nosql.table_schema import (
    COL_ACCOUNT_NUMBER,
    COL_SESSION,
    COL_USER_ID,
    JSON_ATTR_USER_NAME,
    TABLE_NAME,
)
from session_manager.core.exceptions import ConcurrentUpdateError, NotFoundError
from session_manager.core.merge_patch import apply_merge_patch, parse_patch

logger = logging.getLogger(__name__)

DEFAULT_UPDATE_MAX_ATTEMPTS = 3


class SessionStore:
    """
    CRUD operations for session documents.

    Holds no state besides the shared handle, so one instance can serve
    all concurrent requests.
    """

    def __init__(
        self,
        handle: NoSQLHandle,
        table_name: str = TABLE_NAME,
        update_max_attempts: int = DEFAULT_UPDATE_MAX_ATTEMPTS,
    ) -> None:
        """
        Initialize the store.

        Args:
            handle: Shared NoSQL handle
            table_name: Session table name
            update_max_attempts: Read-merge-write cycles before a conflict is reported
        """
        self.handle = handle
        self.table_name = table_name
        self.update_max_attempts = max(1, update_max_attempts)

    def create(self, account_number: int, user_name: str) -> int:
        """
        Create a session whose document is {"userName": user_name}.

        User names are not unique; the store assigns the user id.

        Args:
            account_number: Owning account
            user_name: Name stored in the new session

        Returns:
            int: Generated user id
        """
        return self.insert(account_number, {JSON_ATTR_USER_NAME: user_name})

    def insert(self, account_number: int, document: Any) -> int:
        """
        Write a new session document with a store-generated user id.

        Args:
            account_number: Owning account
            document: Session payload

        Returns:
            int: Generated user id
        """
        request = (
            PutRequest()
            .set_table_name(self.table_name)
            .set_value({COL_ACCOUNT_NUMBER: int(account_number), COL_SESSION: document})
        )
        with translate_driver_errors("insert", account_number=account_number):
            result = self.handle.put(request)

        user_id = int(result.get_generated_value())
        logger.info(
            f"{__name__}:insert - Created session",
            extra={"account_number": account_number, "user_id": user_id},
        )
        return user_id

    def get_by_key(self, account_number: int, user_id: int) -> Any:
        """
        Read a session document with eventual consistency.

        Args:
            account_number: Owning account
            user_id: User id within the account

        Returns:
            Any: Session document

        Raises:
            NotFoundError: If no session has this key
        """
        document, _ = self.read(account_number, user_id)
        return document

    def read(
        self,
        account_number: int,
        user_id: int,
        consistency: int = Consistency.EVENTUAL,
    ) -> tuple[Any, Version]:
        """
        Read a session document together with its row version.

        Args:
            account_number: Owning account
            user_id: User id within the account
            consistency: Consistency.EVENTUAL or Consistency.ABSOLUTE

        Returns:
            tuple: (document, version)

        Raises:
            NotFoundError: If no session has this key
        """
        request = (
            GetRequest()
            .set_table_name(self.table_name)
            .set_key({COL_ACCOUNT_NUMBER: int(account_number), COL_USER_ID: int(user_id)})
            .set_consistency(consistency)
        )
        with translate_driver_errors(
            "get", account_number=account_number, user_id=user_id
        ):
            result = self.handle.get(request)

        row = result.get_value()
        if row is None:
            raise NotFoundError(account_number, user_id)

        document = row.get(COL_SESSION)
        return ({} if document is None else document), result.get_version()

    def put_by_key(
        self,
        account_number: int,
        user_id: int,
        document: Any,
        match_version: Version | None = None,
    ) -> Version | None:
        """
        Write a session document under an explicit primary key.

        Args:
            account_number: Owning account
            user_id: User id within the account
            document: Session payload, replacing the stored one
            match_version: When given, write only if the row still has this version

        Returns:
            Version | None: New row version, or None if match_version no longer matched
        """
        request = (
            PutRequest()
            .set_table_name(self.table_name)
            .set_value(
                {
                    COL_ACCOUNT_NUMBER: int(account_number),
                    COL_USER_ID: int(user_id),
                    COL_SESSION: document,
                }
            )
        )
        if match_version is not None:
            request.set_option(PutOption.IF_VERSION).set_match_version(match_version)

        with translate_driver_errors(
            "put", account_number=account_number, user_id=user_id
        ):
            result = self.handle.put(request)
        return result.get_version()

    def list_users_in_account(self, account_number: int) -> list[dict[str, Any]]:
        """
        List the user name and id of every session in an account.

        Results are fully materialized; ordering is whatever the store returns.

        Args:
            account_number: Account to list

        Returns:
            list[dict]: Items of the form {"userName": ..., "userID": ...}
        """
        statement = (
            f"SELECT p.{COL_SESSION}.{JSON_ATTR_USER_NAME} AS userName, "
            f"p.{COL_USER_ID} AS userID "
            f"FROM {self.table_name} p "
            f"WHERE p.{COL_ACCOUNT_NUMBER} = {int(account_number)}"
        )
        request = (
            QueryRequest().set_statement(statement).set_consistency(Consistency.EVENTUAL)
        )

        users: list[dict[str, Any]] = []
        with translate_driver_errors("query", account_number=account_number):
            while True:
                result = self.handle.query(request)
                for row in result.get_results():
                    users.append(
                        {"userName": row.get("userName"), "userID": row.get("userID")}
                    )
                if request.is_done():
                    break
        return users

    def update(self, account_number: int, user_id: int, patch: Any) -> Any:
        """
        Apply a JSON merge patch to a stored session.

        Reads the document and its version, merges the patch, and writes the
        result back only if the version is unchanged. A lost race restarts
        the cycle with an absolute-consistency read.

        Args:
            account_number: Owning account
            user_id: User id within the account
            patch: Merge patch, decoded or as raw JSON text

        Returns:
            Any: Merged document as stored

        Raises:
            NotFoundError: If no session has this key
            InvalidPatchError: If a raw patch is not valid JSON
            ConcurrentUpdateError: If every attempt lost to a concurrent writer
        """
        if isinstance(patch, (str, bytes, bytearray)):
            patch = parse_patch(patch)

        consistency = Consistency.EVENTUAL
        for attempt in range(1, self.update_max_attempts + 1):
            current, version = self.read(account_number, user_id, consistency)
            merged = apply_merge_patch(current, patch)
            new_version = self.put_by_key(
                account_number, user_id, merged, match_version=version
            )
            if new_version is not None:
                return merged

            logger.warning(
                f"{__name__}:update - Version conflict, attempt {attempt}/{self.update_max_attempts}",
                extra={"account_number": account_number, "user_id": user_id},
            )
            consistency = Consistency.ABSOLUTE

        raise ConcurrentUpdateError(account_number, user_id, self.update_max_attempts)
