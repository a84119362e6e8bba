"""TaskHub API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers map TaskHubError -> structured JSON responses
    - CORS configured from settings (not hardcoded)
    - Database and summarizer strategy initialized on startup via lifespan

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - Summarizer chosen once per process and stored on app.state
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from taskhub.api.error_handlers import register_error_handlers
from taskhub.api.request_logging import RequestLoggingMiddleware
from taskhub.api.routes import auth, health, tasks, users
from taskhub.config import get_settings
from taskhub.infrastructure import database
from taskhub.infrastructure.observability import setup_logging
from taskhub.services.summarizers import build_summarizer

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    database.init_db(
        settings.database_url,
        pool_size=settings.database_pool_size,
        max_overflow=settings.database_max_overflow,
    )
    app.state.summarizer = build_summarizer(settings)
    logger.info("TaskHub API started")
    yield
    logger.info("TaskHub API shutting down")
    if database.db_manager is not None:
        await database.db_manager.dispose()


app = FastAPI(title="TaskHub API", version="1.0.0", lifespan=lifespan)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)
app.add_middleware(RequestLoggingMiddleware)

app.include_router(health.router)
app.include_router(auth.router)
app.include_router(tasks.router)
app.include_router(users.router)

register_error_handlers(app, include_debug=settings.is_development)
