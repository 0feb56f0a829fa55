"""
Session table definition.

Describes the fixed schema of the session table and its provisioned
capacity. Column layout and primary key never change after creation;
capacity limits can be altered later.

Dependencies: dataclasses (stdlib)
System role: Table descriptor shared by provisioning and CRUD code
"""

import dataclasses
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from session_manager.configs.nosql import NoSQLSettings

TABLE_NAME = "persistent_session"
COL_ACCOUNT_NUMBER = "account_number"
COL_USER_ID = "user_id"
COL_SESSION = "session_info"

# Attribute inside the schema-less session document used by listings
JSON_ATTR_USER_NAME = "userName"

DEFAULT_READ_UNITS = 25
DEFAULT_WRITE_UNITS = 25
DEFAULT_STORAGE_GB = 5


@dataclasses.dataclass(frozen=True)
class CapacityLimits:
    """Provisioned throughput and storage for a table."""

    read_units: int = DEFAULT_READ_UNITS
    write_units: int = DEFAULT_WRITE_UNITS
    storage_gb: int = DEFAULT_STORAGE_GB

    def overlay(
        self,
        read_units: int | None = None,
        write_units: int | None = None,
        storage_gb: int | None = None,
    ) -> "CapacityLimits":
        """Return new limits where each supplied value replaces the current one."""
        return CapacityLimits(
            read_units=self.read_units if read_units is None else read_units,
            write_units=self.write_units if write_units is None else write_units,
            storage_gb=self.storage_gb if storage_gb is None else storage_gb,
        )


@dataclasses.dataclass(frozen=True)
class TableDescriptor:
    """
    Session table shape.

    The user id column is an identity column generated by the store. It is
    declared BY DEFAULT so the merge write-back can address an existing row
    by its full primary key.
    """

    name: str = TABLE_NAME
    limits: CapacityLimits = dataclasses.field(default_factory=CapacityLimits)

    @property
    def columns(self) -> tuple[tuple[str, str], ...]:
        return (
            (COL_ACCOUNT_NUMBER, "LONG"),
            (COL_USER_ID, "INTEGER GENERATED BY DEFAULT AS IDENTITY"),
            (COL_SESSION, "JSON"),
        )

    @property
    def primary_key(self) -> tuple[str, str]:
        return (COL_ACCOUNT_NUMBER, COL_USER_ID)

    def create_statement(self) -> str:
        """DDL that creates the table when absent."""
        column_defs = ", ".join(f"{name} {type_}" for name, type_ in self.columns)
        key = ", ".join(self.primary_key)
        return (
            f"CREATE TABLE IF NOT EXISTS {self.name}"
            f"({column_defs}, PRIMARY KEY({key}))"
        )


def descriptor_from_settings(settings: "NoSQLSettings") -> TableDescriptor:
    """Build the table descriptor from configured name and initial limits."""
    return TableDescriptor(
        name=settings.table_name,
        limits=CapacityLimits(
            read_units=settings.read_units,
            write_units=settings.write_units,
            storage_gb=settings.storage_gb,
        ),
    )
