"""FastAPI application factory.

- Validates inputs, reads/writes DB
- Returns payloads for UI
- Owns the engine, session factory and response cache (on app.state)

Run with: uvicorn --factory opensurvey.api.app:create_app
"""

from __future__ import annotations

import logging
from typing import Generator

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware

from opensurvey import __version__
from opensurvey.core.config import Settings, load_settings
from opensurvey.db.repo import DbSession
from opensurvey.db.session import create_db_engine, create_session_factory, init_db
from opensurvey.source.cache import ResponseCache

logger = logging.getLogger(__name__)


def get_db_session(request: Request) -> Generator[DbSession, None, None]:
    """Dependency to get database session.

    Yields:
        Database session that is automatically closed after request.
    """
    session = request.app.state.session_factory()
    try:
        yield session
    finally:
        session.close()


def get_response_cache(request: Request) -> ResponseCache:
    """Dependency returning the application's response cache."""
    return request.app.state.response_cache


def get_settings(request: Request) -> Settings:
    """Dependency returning the application's settings."""
    return request.app.state.settings


def create_app(settings: Settings | None = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        settings: Optional explicit settings (read from the environment
            when omitted).

    Returns:
        Configured FastAPI application.
    """
    settings = settings or load_settings()
    logging.getLogger("opensurvey").setLevel(settings.log_level)

    app = FastAPI(
        title="OpenSurvey API",
        description="Product career survey collection and analytics",
        version=__version__,
    )

    engine = create_db_engine(settings.database_url)
    init_db(engine)

    app.state.settings = settings
    app.state.engine = engine
    app.state.session_factory = create_session_factory(engine)
    app.state.response_cache = ResponseCache(ttl_seconds=settings.cache_ttl_seconds)

    # Add CORS middleware for UI access
    app.add_middleware(
        CORSMiddleware,
        allow_origins=list(settings.cors_origins),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Include routes
    from opensurvey.api.routes import analytics, export, responses, surveys

    app.include_router(responses.router, prefix="/api")
    app.include_router(analytics.router, prefix="/api")
    app.include_router(export.router, prefix="/api")
    app.include_router(surveys.router, prefix="/api")

    # Health check endpoint
    @app.get("/health")
    def health_check():
        """Health check endpoint."""
        return {"status": "ok"}

    logger.info(f"OpenSurvey API created (database={engine.url.render_as_string(hide_password=True)})")
    return app
