"""FastAPI app factory"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from ..core.assignment import ReviewerSelector
from ..core.config.settings import ReviewPoolConfig, get_config
from ..core.errors import ReviewPoolError
from ..core.logging import setup_logging
from ..core.schemas.errors import ErrorDetail, ErrorResponse
from ..core.storage.database import init_db

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan context manager.

    Handles startup and shutdown events for the FastAPI application.
    """
    # Startup
    config: ReviewPoolConfig = app.state.config
    setup_logging(config.log_level, config.log_file)
    db = init_db(config.get_database_url())
    await db.create_tables()

    app.state.db = db

    logger.info("reviewpool API started")

    yield

    # Shutdown
    await db.close()
    logger.info("reviewpool API stopped")


async def handle_domain_error(request: Request, exc: ReviewPoolError) -> JSONResponse:
    """Render a domain error as ``{"error": {"code", "message"}}``."""
    body = ErrorResponse(error=ErrorDetail(code=exc.code, message=exc.message))
    return JSONResponse(status_code=exc.status_code, content=body.model_dump())


def create_app(config: Optional[ReviewPoolConfig] = None) -> FastAPI:
    """Create FastAPI application.

    Args:
        config: Configuration to use; the global configuration if omitted

    Returns:
        Configured FastAPI application instance
    """
    config = config or get_config()

    app = FastAPI(
        title="reviewpool API",
        description="Pull request reviewer assignment service",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.state.config = config
    app.state.selector = ReviewerSelector(seed=config.selection_seed)

    app.add_exception_handler(ReviewPoolError, handle_domain_error)

    # Register routes
    from .routes import pull_requests, stats, teams, users

    app.include_router(teams.router, tags=["teams"])
    app.include_router(users.router, tags=["users"])
    app.include_router(pull_requests.router, tags=["pull requests"])
    app.include_router(stats.router, tags=["stats"])

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "healthy", "service": "reviewpool"}

    return app
