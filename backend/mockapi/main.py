"""Mock API Builder — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery); dynamic dispatch last
    - Global error handlers map MockApiError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - create_all on startup (database_auto_create) so a fresh SQLite file works
      without running migrations; alembic remains the path for Postgres upgrades
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mockapi.api.error_handlers import register_error_handlers
from mockapi.infrastructure.database import init_db
from mockapi.infrastructure.observability import setup_logging
from mockapi.config import get_settings
from mockapi.api.routes import health, endpoints, tables, dynamic_dispatch

import mockapi.models  # noqa: F401  (populate Base.metadata)

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
    if settings.database_auto_create:
        await manager.create_all()
    logger.info("Mock API started")
    yield
    await manager.dispose()
    logger.info("Mock API shutting down")


app = FastAPI(
    title="Mock API Builder", version="1.0.0", lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes: explicit registration; the catch-all must stay last
app.include_router(health.router)
app.include_router(endpoints.router)
app.include_router(tables.router)
app.include_router(dynamic_dispatch.router)

register_error_handlers(app)
