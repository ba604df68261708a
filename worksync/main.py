"""WorkSync API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map WorkSyncError → structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and Domain Store built on startup via lifespan, kept on app.state

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - One DomainStore per process: the mirror belongs to the signed-in actor of
      this process (single-user desktop/edge deployment)
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from worksync.api.error_handlers import register_error_handlers
from worksync.api.routes import (
    health, milestones, notices, projects, session, snapshot, subtasks, tasks,
)
from worksync.config import get_settings
from worksync.infrastructure.database import init_db
from worksync.infrastructure.observability import setup_logging
from worksync.services.store_factory import build_store

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    db = init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.db = db
    app.state.store = build_store(db, settings)
    logger.info("WorkSync API started")
    yield
    logger.info("WorkSync API shutting down")
    await db.dispose()


app = FastAPI(title="WorkSync API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(session.router)
app.include_router(snapshot.router)
app.include_router(projects.router)
app.include_router(milestones.router)
app.include_router(tasks.router)
app.include_router(subtasks.router)
app.include_router(notices.router)

register_error_handlers(app)
