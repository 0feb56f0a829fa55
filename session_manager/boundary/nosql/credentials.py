"""
Signing credential resolution.

Loads the seven connection parameters needed to sign requests to the
Oracle NoSQL cloud service, either from a key/value property map or from
a flat key=value credentials file, and validates that every one of them
is present before a bundle is produced.

Dependencies: session_manager.configs.nosql, session_manager.core.exceptions
System role: Startup credential bootstrap
"""

import dataclasses
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from session_manager.configs.nosql import (
    PROPERTY_COMPARTMENT,
    PROPERTY_FINGERPRINT,
    PROPERTY_REGION_URI,
    PROPERTY_SIGNING_KEY_PASSWORD,
    PROPERTY_SIGNING_KEY_PATH,
    PROPERTY_TENANT_OCID,
    PROPERTY_USER_OCID,
)
from session_manager.core.exceptions import (
    CredentialFileNotFoundError,
    CredentialParseError,
    MissingParameterError,
)

logger = logging.getLogger(__name__)

# Validation order for both resolver variants
REQUIRED_PROPERTIES = (
    PROPERTY_TENANT_OCID,
    PROPERTY_USER_OCID,
    PROPERTY_FINGERPRINT,
    PROPERTY_SIGNING_KEY_PATH,
    PROPERTY_SIGNING_KEY_PASSWORD,
    PROPERTY_REGION_URI,
    PROPERTY_COMPARTMENT,
)


@dataclasses.dataclass(frozen=True)
class CredentialBundle:
    """
    Fully validated signing credentials.

    Attributes:
        region_uri:       Regional service host, e.g. nosql.us-ashburn-1.oci.oraclecloud.com
        tenant_ocid:      Tenancy OCID
        user_ocid:        User OCID
        fingerprint:      Fingerprint of the uploaded public key
        signing_key_path: Path to the PEM private key
        passphrase:       Private key passphrase, held in a wipeable buffer
        compartment:      Default compartment for table operations
    """

    region_uri: str
    tenant_ocid: str
    user_ocid: str
    fingerprint: str
    signing_key_path: str
    passphrase: bytearray = dataclasses.field(repr=False, compare=False)
    compartment: str

    def wipe(self) -> None:
        """Zero the passphrase buffer in place."""
        for i in range(len(self.passphrase)):
            self.passphrase[i] = 0
        self.passphrase.clear()

    @property
    def is_wiped(self) -> bool:
        return not self.passphrase

    def describe(self) -> str:
        """Multi-line summary suitable for startup logs, passphrase redacted."""
        return (
            f"\t URI = {self.region_uri}\n"
            f"\t Tenant OCID = {self.tenant_ocid}\n"
            f"\t User OCID = {self.user_ocid}\n"
            f"\t Fingerprint = {self.fingerprint}\n"
            f"\t Path to PK Signing File = {self.signing_key_path}\n"
            f"\t PK Signing Password = ********\n"
            f"\t Compartment = {self.compartment}"
        )


def resolve_from_properties(source: Mapping[str, Any]) -> CredentialBundle:
    """
    Build a bundle from a property map.

    Keys are matched exactly (case-sensitive).

    Args:
        source: Property map, e.g. NoSQLSettings.as_properties()

    Returns:
        CredentialBundle: Validated credentials

    Raises:
        MissingParameterError: If a required property is absent or empty
        CredentialFileNotFoundError: If the signing key file does not exist
    """
    values = {name: source.get(name) for name in REQUIRED_PROPERTIES}
    return _build_bundle(values, source_label="configuration")


def resolve_from_file(path: str | Path) -> CredentialBundle:
    """
    Build a bundle from a key=value credentials file.

    Each line is split on its first '='. Keys are matched
    case-insensitively; unrecognized keys are ignored. Values are kept
    verbatim apart from the line ending. Blank lines and lines starting
    with '#' are skipped.

    Args:
        path: Path to the credentials file

    Returns:
        CredentialBundle: Validated credentials

    Raises:
        CredentialFileNotFoundError: If the credentials or signing key file does not exist
        CredentialParseError: If a line has no '=' separator
        MissingParameterError: If a required key is absent
    """
    credentials_path = Path(path)
    if not credentials_path.is_file():
        raise CredentialFileNotFoundError(str(credentials_path))

    known = {name.lower(): name for name in REQUIRED_PROPERTIES}
    values: dict[str, Any] = {}

    with credentials_path.open(encoding="utf-8") as handle:
        for line_number, raw_line in enumerate(handle, start=1):
            line = raw_line.rstrip("\r\n")
            if not line.strip() or line.lstrip().startswith("#"):
                continue
            key, sep, value = line.partition("=")
            if not sep:
                raise CredentialParseError(str(credentials_path), line_number)
            name = known.get(key.strip().lower())
            if name is not None:
                values[name] = value

    logger.debug(f"resolve_from_file - Parsed credentials file {credentials_path}")
    return _build_bundle(values, source_label="credentials file")


def _build_bundle(values: Mapping[str, Any], source_label: str) -> CredentialBundle:
    for name in REQUIRED_PROPERTIES:
        value = values.get(name)
        if value is None or (isinstance(value, str) and not value):
            raise MissingParameterError(name, source_label)

    key_path = str(values[PROPERTY_SIGNING_KEY_PATH])
    if not Path(key_path).is_file():
        raise CredentialFileNotFoundError(key_path, PROPERTY_SIGNING_KEY_PATH)

    secret = values[PROPERTY_SIGNING_KEY_PASSWORD]
    if isinstance(secret, (bytes, bytearray)):
        passphrase = bytearray(secret)
    else:
        passphrase = bytearray(str(secret).encode("utf-8"))

    return CredentialBundle(
        region_uri=str(values[PROPERTY_REGION_URI]),
        tenant_ocid=str(values[PROPERTY_TENANT_OCID]),
        user_ocid=str(values[PROPERTY_USER_OCID]),
        fingerprint=str(values[PROPERTY_FINGERPRINT]),
        signing_key_path=key_path,
        passphrase=passphrase,
        compartment=str(values[PROPERTY_COMPARTMENT]),
    )
