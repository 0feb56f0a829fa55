"""
FastAPI application entry point.

Initializes FastAPI app, registers routers, adds middleware, and configures
lifespan. Startup resolves credentials, opens the shared NoSQL handle, and
provisions the session table; any failure there aborts startup.

Dependencies: fastapi, session_manager.api, session_manager.observability, session_manager.configs
System role: Application initialization and configuration
"""

from contextlib import asynccontextmanager
import logging
from fastapi import FastAPI
from fastapi.concurrency import run_in_threadpool

from session_manager.api import api_router
from session_manager.boundary.nosql.connection import open_handle
from session_manager.boundary.nosql.provisioner import ensure_table
from session_manager.boundary.nosql.table_schema import descriptor_from_settings
from session_manager.configs import get_settings
from session_manager.observability.logger import configure_logging
from session_manager.observability.middleware import (
    CorrelationMiddleware,
    RequestLoggingMiddleware,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan context manager.

    Creates the process-wide NoSQL handle once and closes it on shutdown.
    """
    # Startup
    settings = get_settings()
    configure_logging(settings.log_level)
    logger.info("Application startup: logging configured")

    nosql = settings.nosql
    handle = await run_in_threadpool(open_handle, nosql)
    try:
        await run_in_threadpool(
            ensure_table,
            handle,
            descriptor_from_settings(nosql),
            nosql.create_wait_ms,
            nosql.create_poll_ms,
        )
    except Exception:
        logger.exception("Failed to provision session table")
        handle.close()
        raise

    app.state.nosql_handle = handle
    logger.info("Application startup complete: session table ready")

    yield

    # Shutdown
    app.state.nosql_handle = None
    handle.close()
    logger.info("Application shutdown: NoSQL handle closed")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        FastAPI: Configured application instance
    """
    app = FastAPI(
        title="Persistent Session Manager",
        description="Per-user session documents stored in Oracle NoSQL",
        version="0.1.0",
        lifespan=lifespan,
    )

    # Add observability middleware (added first = last to execute)
    app.add_middleware(RequestLoggingMiddleware)
    app.add_middleware(CorrelationMiddleware)

    app.include_router(api_router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(
        "session_manager.main:app",
        host="0.0.0.0",
        port=8080,
    )
