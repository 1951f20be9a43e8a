"""Arguably API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map ArguablyError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database initialized on startup via lifespan context manager

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Error handlers live in api/error_handlers.py to keep this module's imports small
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

import arguably.infrastructure.database as db_module
from arguably.infrastructure.database import init_db
from arguably.infrastructure.observability import setup_logging
from arguably.config import get_settings
from arguably.api.error_handlers import register_error_handlers
from arguably.api.routes import (
    debate_challenges,
    debates,
    evidence,
    group_discussions,
    health,
    notifications,
    posts,
    profiles,
    topics,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    logger.info("Arguably API started")
    yield
    if db_module.db_manager is not None:
        await db_module.db_manager.engine.dispose()
    logger.info("Arguably API shutting down")


app = FastAPI(
    title="Arguably API", version="1.0.0", lifespan=lifespan,
)

# CORS origins come from settings
settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routes
app.include_router(health.router)
app.include_router(profiles.router)
app.include_router(debates.router)
app.include_router(evidence.router)
app.include_router(debate_challenges.router)
app.include_router(group_discussions.router)
app.include_router(topics.router)
app.include_router(posts.router)
app.include_router(notifications.router)

register_error_handlers(app)
