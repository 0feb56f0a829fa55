"""
Oracle NoSQL boundary: credentials, connection, provisioning, and session CRUD.

Exports:
  - CredentialBundle, resolve_from_properties(), resolve_from_file(): Credential loading
  - connect(), open_handle(): Shared handle construction
  - ensure_table(), update_limits(), get_limits(): Table provisioning
  - SessionStore: Session CRUD and merge-patch updates
  - TableDescriptor, CapacityLimits: Table shape and capacity

Dependencies: borneo, tenacity, session_manager.configs
System role: Document store adapter for persistent sessions
"""

from session_manager.boundary.nosql.connection import connect, open_handle
from session_manager.boundary.nosql.credentials import (
    CredentialBundle,
    resolve_from_file,
    resolve_from_properties,
)
from session_manager.boundary.nosql.provisioner import (
    ensure_table,
    get_limits,
    update_limits,
    wait_for_active,
)
from session_manager.boundary.nosql.session_store import SessionStore
from session_manager.boundary.nosql.table_schema import (
    CapacityLimits,
    TableDescriptor,
    descriptor_from_settings,
)

__all__ = [
    # Credentials
    "CredentialBundle",
    "resolve_from_file",
    "resolve_from_properties",
    # Connection
    "connect",
    "open_handle",
    # Provisioning
    "ensure_table",
    "get_limits",
    "update_limits",
    "wait_for_active",
    # CRUD
    "SessionStore",
    # Table shape
    "CapacityLimits",
    "TableDescriptor",
    "descriptor_from_settings",
]
