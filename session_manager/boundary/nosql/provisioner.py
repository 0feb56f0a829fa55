"""
Session table provisioning.

Creates the session table when absent and alters its capacity limits,
polling the table state until it is ACTIVE or a wall-clock budget expires.

Dependencies: borneo, tenacity
System role: Startup schema initialization and capacity administration
"""

import logging

from borneo import (
    GetTableRequest,
    NoSQLHandle,
    State,
    TableLimits,
    TableRequest,
    TableResult,
)
from tenacity import Retrying, retry_if_result, stop_before_delay, wait_fixed

from session_manager.boundary.nosql.errors import translate_driver_errors
from session_manager.boundary.nosql.table_schema import CapacityLimits, TableDescriptor
from session_manager.core.exceptions import ProvisioningTimeoutError

logger = logging.getLogger(__name__)

CREATE_WAIT_MS = 30000
CREATE_POLL_MS = 500
LIMITS_WAIT_MS = 2000
LIMITS_POLL_MS = 300


def _is_not_active(result: TableResult) -> bool:
    return result.get_state() != State.ACTIVE


def wait_for_active(
    handle: NoSQLHandle,
    table_name: str,
    max_wait_ms: int,
    poll_interval_ms: int,
) -> TableResult:
    """
    Poll a table until it reports ACTIVE.

    The budget is measured in wall-clock time, so slow get-table calls
    consume it. No poll is started once the next sleep would cross it.

    Args:
        handle: Shared NoSQL handle
        table_name: Table to poll
        max_wait_ms: Total wait budget in milliseconds
        poll_interval_ms: Sleep between polls in milliseconds

    Returns:
        TableResult: Last table state observed (ACTIVE)

    Raises:
        ProvisioningTimeoutError: If the table is not ACTIVE within the budget
    """
    request = GetTableRequest().set_table_name(table_name)
    poller = Retrying(
        retry=retry_if_result(_is_not_active),
        stop=stop_before_delay(max_wait_ms / 1000),
        wait=wait_fixed(poll_interval_ms / 1000),
        retry_error_callback=lambda retry_state: retry_state.outcome.result(),
    )

    with translate_driver_errors("get_table", table_name=table_name):
        result = poller(handle.get_table, request)

    if _is_not_active(result):
        raise ProvisioningTimeoutError(table_name, result.get_state(), max_wait_ms)
    return result


def ensure_table(
    handle: NoSQLHandle,
    descriptor: TableDescriptor,
    max_wait_ms: int = CREATE_WAIT_MS,
    poll_interval_ms: int = CREATE_POLL_MS,
) -> TableResult:
    """
    Create the session table if it does not exist and wait for it.

    Idempotent: an existing table is left untouched, including its data
    and its current limits.

    Args:
        handle: Shared NoSQL handle (its default compartment hosts the table)
        descriptor: Table shape and initial limits
        max_wait_ms: Wait budget for the table to become ACTIVE
        poll_interval_ms: Poll interval while waiting

    Returns:
        TableResult: ACTIVE table state

    Raises:
        ProvisioningTimeoutError: If the table does not become ACTIVE in time
    """
    limits = descriptor.limits
    request = (
        TableRequest()
        .set_statement(descriptor.create_statement())
        .set_table_limits(
            TableLimits(limits.read_units, limits.write_units, limits.storage_gb)
        )
    )

    logger.info(f"{__name__}:ensure_table - Ensuring table {descriptor.name}")
    with translate_driver_errors("create_table", table_name=descriptor.name):
        result = handle.table_request(request)

    if not _is_not_active(result):
        logger.info(f"{__name__}:ensure_table - Table {descriptor.name} already active")
        return result

    result = wait_for_active(handle, descriptor.name, max_wait_ms, poll_interval_ms)
    logger.info(f"{__name__}:ensure_table - Table {descriptor.name} active")
    return result


def get_limits(handle: NoSQLHandle, table_name: str) -> CapacityLimits:
    """Read the table's current provisioned limits."""
    with translate_driver_errors("get_table", table_name=table_name):
        result = handle.get_table(GetTableRequest().set_table_name(table_name))
    limits = result.get_table_limits()
    return CapacityLimits(
        read_units=limits.get_read_units(),
        write_units=limits.get_write_units(),
        storage_gb=limits.get_storage_gb(),
    )


def update_limits(
    handle: NoSQLHandle,
    table_name: str,
    read_units: int | None = None,
    write_units: int | None = None,
    storage_gb: int | None = None,
    max_wait_ms: int = LIMITS_WAIT_MS,
    poll_interval_ms: int = LIMITS_POLL_MS,
) -> CapacityLimits:
    """
    Change any of the table's three capacity limits.

    Omitted values keep their current setting. When nothing changes no
    alteration request is sent.

    Args:
        handle: Shared NoSQL handle
        table_name: Table to alter
        read_units: New read units, or None to keep
        write_units: New write units, or None to keep
        storage_gb: New storage in GB, or None to keep
        max_wait_ms: Wait budget for the alteration to complete
        poll_interval_ms: Poll interval while waiting

    Returns:
        CapacityLimits: Limits in effect after the update

    Raises:
        ProvisioningTimeoutError: If the table is not ACTIVE again in time
    """
    current = get_limits(handle, table_name)
    desired = current.overlay(read_units, write_units, storage_gb)
    if desired == current:
        logger.info(f"{__name__}:update_limits - Limits unchanged for {table_name}")
        return current

    request = (
        TableRequest()
        .set_table_name(table_name)
        .set_table_limits(
            TableLimits(desired.read_units, desired.write_units, desired.storage_gb)
        )
    )
    with translate_driver_errors("alter_table_limits", table_name=table_name):
        handle.table_request(request)

    wait_for_active(handle, table_name, max_wait_ms, poll_interval_ms)
    logger.info(
        f"{__name__}:update_limits - Limits updated for {table_name}",
        extra={"from": current, "to": desired},
    )
    return desired
