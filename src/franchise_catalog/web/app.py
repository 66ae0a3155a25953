"""
FastAPI application factory for the Franchise Catalog API.
"""

from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI

from .. import __version__
from ..bootstrap import build_container
from ..core.config import Config
from ..core.logging import configure_logging, get_logger
from ..persistence.store import DocumentStore
from .catalog_api import branch_router, franchise_router, product_router
from .error_handling import EnvelopeMiddleware, register_exception_handlers
from .health_api import health_router
from .logging_middleware import LoggingMiddleware

logger = get_logger(__name__)


def create_app(
    config: Optional[Config] = None, store: Optional[DocumentStore] = None
) -> FastAPI:
    """Build the API application.

    Args:
        config: Application configuration; read from FC_* variables when omitted
        store: Document store to use instead of the configured backend

    Returns:
        Configured FastAPI application
    """
    config = config or Config.from_env()
    configure_logging(config.logging.level, config.logging.json_format)
    owns_store = store is None

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        container = build_container(config, store)
        if config.store.create_indexes_on_startup:
            await container.ensure_indexes()
        app.state.container = container
        logger.info(
            "Franchise Catalog API started",
            environment=config.environment.value,
            backend=config.store.backend.value,
        )
        try:
            yield
        finally:
            if owns_store:
                await container.close()
            logger.info("Franchise Catalog API stopped")

    app = FastAPI(
        title="Franchise Catalog API",
        version=__version__,
        debug=config.debug,
        lifespan=lifespan,
    )

    # Added last runs first: logging wraps the envelope
    if config.api.envelope_enabled:
        app.add_middleware(EnvelopeMiddleware)
    app.add_middleware(LoggingMiddleware)

    register_exception_handlers(app)

    app.include_router(franchise_router)
    app.include_router(branch_router)
    app.include_router(product_router)
    app.include_router(health_router)

    return app
