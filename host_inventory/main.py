"""Host Inventory API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery — ExMA anti-pattern)
    - /hosts routes run through guard chains built once at import
    - Database and document store initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - CORS handled by the allow_cors guard, not CORSMiddleware: origin is
      reflected per request, only on /hosts routes
    - Served by an ASGI server: uvicorn host_inventory.main:app
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from host_inventory.api.error_handlers import register_error_handlers
from host_inventory.api.routes import health, hosts
from host_inventory.config import get_settings
from host_inventory.infrastructure.database import init_db
from host_inventory.infrastructure.document_store import init_document_store
from host_inventory.infrastructure.observability import setup_logging

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    manager = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    init_document_store(manager, timeout_seconds=settings.store_timeout_seconds)
    logger.info("Host Inventory API started")
    yield
    logger.info("Host Inventory API shutting down")
    await manager.dispose()


app = FastAPI(
    title="Host Inventory API", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()

# Routes — explicit registration (ExMA: no convention-over-config)
app.include_router(health.router)
app.include_router(hosts.build_router(settings))

register_error_handlers(app)
