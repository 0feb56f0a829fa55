"""
Oracle NoSQL cloud service configuration settings.

Manages signing credentials, connection policy, and table provisioning
parameters for the session table.

Dependencies: pydantic, pydantic_settings
System role: Document store connection configuration
"""

from pydantic import Field, SecretStr
from pydantic_settings import SettingsConfigDict

from session_manager.configs.base import BaseSettings

# Logical property names understood by the credential resolver
PROPERTY_REGION_URI = "db-region-uri"
PROPERTY_TENANT_OCID = "db-creds-tenant-ocid"
PROPERTY_USER_OCID = "db-creds-user-ocid"
PROPERTY_FINGERPRINT = "db-creds-fingerprint"
PROPERTY_SIGNING_KEY_PATH = "db-creds-path-to-signing-key-file"
PROPERTY_SIGNING_KEY_PASSWORD = "db-creds-signing-key-password"
PROPERTY_COMPARTMENT = "db-table-compartment"
PROPERTY_MAX_CONCURRENCY = "max_concurrency"


class NoSQLSettings(BaseSettings):
    """Oracle NoSQL cloud service configuration."""

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        env_prefix="NOSQL_",
        case_sensitive=False,
        extra="ignore",
    )

    # Signing credentials
    region_uri: str | None = Field(default=None, description="Regional service host")
    tenant_ocid: str | None = Field(default=None, description="Tenancy OCID")
    user_ocid: str | None = Field(default=None, description="User OCID")
    fingerprint: str | None = Field(default=None, description="API signing key fingerprint")
    signing_key_path: str | None = Field(default=None, description="Path to PEM signing key")
    signing_key_password: SecretStr | None = Field(
        default=None, description="Passphrase for the signing key"
    )
    compartment: str | None = Field(default=None, description="Target compartment for tables")
    credentials_file: str | None = Field(
        default=None,
        description="Optional key=value credentials file; overrides the fields above",
    )

    # Connection policy
    max_concurrency: int = Field(default=10, description="Connection pool size")
    request_timeout_ms: int = Field(default=15000, description="Per-request timeout")
    retry_attempts: int = Field(default=1, description="Driver-level retries per request")

    # Table provisioning
    table_name: str = Field(default="persistent_session", description="Session table name")
    read_units: int = Field(default=25, description="Initial provisioned read units")
    write_units: int = Field(default=25, description="Initial provisioned write units")
    storage_gb: int = Field(default=5, description="Initial provisioned storage in GB")
    create_wait_ms: int = Field(default=30000, description="Table creation wait budget")
    create_poll_ms: int = Field(default=500, description="Table creation poll interval")
    limits_wait_ms: int = Field(default=2000, description="Limits update wait budget")
    limits_poll_ms: int = Field(default=300, description="Limits update poll interval")

    update_max_attempts: int = Field(
        default=3, description="Merge-patch attempts before reporting a write conflict"
    )
    fixtures_dir: str | None = Field(
        default=None, description="Directory of JSON session fixtures to seed"
    )

    def as_properties(self) -> dict[str, object]:
        """
        Render configured values under the logical property names.

        Unset credentials are omitted so the resolver reports them as missing.

        Returns:
            dict: Property map consumable by resolve_from_properties
        """
        password = (
            self.signing_key_password.get_secret_value()
            if self.signing_key_password is not None
            else None
        )
        candidates = {
            PROPERTY_REGION_URI: self.region_uri,
            PROPERTY_TENANT_OCID: self.tenant_ocid,
            PROPERTY_USER_OCID: self.user_ocid,
            PROPERTY_FINGERPRINT: self.fingerprint,
            PROPERTY_SIGNING_KEY_PATH: self.signing_key_path,
            PROPERTY_SIGNING_KEY_PASSWORD: password,
            PROPERTY_COMPARTMENT: self.compartment,
            PROPERTY_MAX_CONCURRENCY: self.max_concurrency,
        }
        return {key: value for key, value in candidates.items() if value is not None}
