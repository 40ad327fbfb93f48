"""FastAPI application entry point."""

import logging
import uuid
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from rsvp_reader import __version__
from rsvp_reader.api.routes import documents, health, reading_state
from rsvp_reader.config import Settings, get_settings
from rsvp_reader.database import init_db

logger = logging.getLogger(__name__)


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s - %(message)s",
    )


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Create the tables on startup."""
    init_db()
    logger.info("Database initialized")
    yield


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application.

    Returns:
        Application with CORS, routers under ``/api`` and a fallback error handler.
    """
    settings = settings or get_settings()
    configure_logging(settings)

    app = FastAPI(
        title=settings.app_name,
        description="RSVP speed-reading engine: documents, tokens and reading positions",
        version=__version__,
        lifespan=lifespan,
        debug=settings.debug,
    )

    @app.exception_handler(Exception)
    async def unhandled_exception_handler(request: Request, exc: Exception):
        error_id = str(uuid.uuid4())[:8]
        logger.exception("Unhandled exception [%s] on %s: %s", error_id, request.url.path, exc)
        return JSONResponse(
            status_code=500,
            content={"error": "Internal Server Error", "error_id": error_id},
        )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    for module, tag in (
        (health, "health"),
        (documents, "documents"),
        (reading_state, "reading-state"),
    ):
        app.include_router(module.router, prefix="/api", tags=[tag])

    @app.get("/", tags=["root"])
    def root():
        """Service info and entry points."""
        return {
            "service": "RSVP Reader API",
            "version": __version__,
            "docs": "/docs" if settings.debug else None,
            "endpoints": {
                "health": "/api/health",
                "documents": "/api/documents",
            },
        }

    return app


# Default app instance for uvicorn
app = create_app()
