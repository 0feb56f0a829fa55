"""
Document store connection management.

Turns a validated CredentialBundle into a single pooled NoSQLHandle that is
shared by every request handler for the lifetime of the process.

Dependencies: borneo, session_manager.boundary.nosql.credentials
System role: Connection lifecycle management
"""

import logging

from borneo import (
    InvalidAuthorizationException,
    ListTablesRequest,
    NoSQLException,
    NoSQLHandle,
    NoSQLHandleConfig,
    RequestTimeoutException,
)
from borneo.iam import SignatureProvider

from session_manager.boundary.nosql.credentials import (
    CredentialBundle,
    resolve_from_file,
    resolve_from_properties,
)
from session_manager.configs.nosql import NoSQLSettings
from session_manager.core.exceptions import AuthenticationSetupError, ConnectivityError

logger = logging.getLogger(__name__)

DEFAULT_MAX_CONCURRENCY = 10
DEFAULT_REQUEST_TIMEOUT_MS = 15000
DEFAULT_RETRY_ATTEMPTS = 1
# 0 selects the driver's bounded exponential backoff between attempts
DEFAULT_RETRY_DELAY_S = 0


def build_endpoint(region_uri: str) -> str:
    """
    Build the HTTPS service endpoint for a regional host.

    Args:
        region_uri: Regional host, optionally already carrying a scheme

    Returns:
        str: Endpoint URL on port 443
    """
    host = region_uri.strip().rstrip("/")
    if "://" in host:
        host = host.split("://", 1)[1]
    if ":" not in host:
        host = f"{host}:443"
    return f"https://{host}"


def build_signature_provider(bundle: CredentialBundle) -> SignatureProvider:
    """
    Create the request signer and wipe the passphrase buffer.

    The bundle's passphrase is zeroed whether or not the signer could be
    built, so a bundle can only be used for one signer.

    Raises:
        AuthenticationSetupError: If the key cannot be loaded or decrypted
    """
    try:
        return SignatureProvider(
            tenant_id=bundle.tenant_ocid,
            user_id=bundle.user_ocid,
            fingerprint=bundle.fingerprint,
            private_key=bundle.signing_key_path,
            pass_phrase=bundle.passphrase.decode("utf-8"),
        )
    except Exception as e:  # pylint: disable=broad-except
        raise AuthenticationSetupError(
            f"Unable to load signing key from {bundle.signing_key_path}",
            {"path": bundle.signing_key_path, "error": str(e)},
        ) from e
    finally:
        bundle.wipe()


def connect(
    bundle: CredentialBundle,
    concurrency: int | None = None,
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS,
    retry_attempts: int = DEFAULT_RETRY_ATTEMPTS,
    verify: bool = True,
) -> NoSQLHandle:
    """
    Open a pooled handle to the Oracle NoSQL cloud service.

    Configures pool size, request timeout, a bounded retry handler and the
    default compartment. Performs no table-level operation.

    Args:
        bundle: Validated credentials (its passphrase is wiped)
        concurrency: Connection pool size (default 10)
        request_timeout_ms: Timeout applied to every request
        retry_attempts: Driver-level retries per request
        verify: Issue a one-row list-tables call to confirm reachability

    Returns:
        NoSQLHandle: Shared handle, safe for concurrent use

    Raises:
        AuthenticationSetupError: If the signing key cannot be loaded
        ConnectivityError: If the endpoint cannot be reached
    """
    endpoint = build_endpoint(bundle.region_uri)
    pool_size = concurrency or DEFAULT_MAX_CONCURRENCY
    compartment = bundle.compartment

    provider = build_signature_provider(bundle)

    config = NoSQLHandleConfig(endpoint, provider)
    config.set_default_compartment(compartment)
    config.set_request_timeout(request_timeout_ms)
    config.set_pool_connections(pool_size)
    config.set_pool_maxsize(pool_size)
    config.configure_default_retry_handler(retry_attempts, DEFAULT_RETRY_DELAY_S)

    try:
        handle = NoSQLHandle(config)
    except (NoSQLException, OSError) as e:
        raise ConnectivityError(f"Unable to open handle: {e}", endpoint) from e

    if verify:
        _verify_handle(handle, endpoint)

    logger.info(
        f"{__name__}:connect - Connected to {endpoint}",
        extra={"pool_size": pool_size, "compartment": compartment},
    )
    return handle


def _verify_handle(handle: NoSQLHandle, endpoint: str) -> None:
    try:
        handle.list_tables(ListTablesRequest().set_limit(1))
    except InvalidAuthorizationException as e:
        handle.close()
        raise AuthenticationSetupError(
            f"Service rejected signing credentials: {e}", {"endpoint": endpoint}
        ) from e
    except (RequestTimeoutException, NoSQLException, OSError) as e:
        handle.close()
        raise ConnectivityError(f"Initial handshake failed: {e}", endpoint) from e


def resolve_credentials(settings: NoSQLSettings) -> CredentialBundle:
    """
    Resolve credentials from the credentials file when configured,
    otherwise from the settings' property map.
    """
    if settings.credentials_file:
        logger.info(f"{__name__}:resolve_credentials - Using {settings.credentials_file}")
        return resolve_from_file(settings.credentials_file)
    return resolve_from_properties(settings.as_properties())


def open_handle(settings: NoSQLSettings) -> NoSQLHandle:
    """
    Resolve credentials and connect using configured connection policy.

    Args:
        settings: NoSQL settings

    Returns:
        NoSQLHandle: Shared handle
    """
    bundle = resolve_credentials(settings)
    logger.info(f"{__name__}:open_handle - Credentials resolved\n{bundle.describe()}")
    return connect(
        bundle,
        concurrency=settings.max_concurrency,
        request_timeout_ms=settings.request_timeout_ms,
        retry_attempts=settings.retry_attempts,
    )
