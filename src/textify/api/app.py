"""
FastAPI application for the text revision service.

Exposes the revision engine (clean, diff, regex, share) over HTTP. The
cleaning collaborator is created lazily on the first clean request, so the
service starts even when the configured model is not reachable yet.
"""

from contextlib import asynccontextmanager
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import structlog

from ..version import API_VERSION
from ..config import settings
from ..logging_config import setup_logging
from .routes import health, version, revision
from .middleware import setup_error_handlers, setup_request_context_middleware

# Setup logging on module import
setup_logging()
logger = structlog.get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info(
        "textify_api_starting",
        version=API_VERSION,
        llm_provider=settings.llm_provider,
        llm_model=settings.llm_model,
        max_text_length=settings.max_text_length,
    )
    yield
    revision.get_text_cleaner.cache_clear()
    logger.info("textify_api_stopped")


def create_app() -> FastAPI:
    """
    Create and configure FastAPI application.

    Returns:
        Configured FastAPI app instance
    """
    app = FastAPI(
        title="Textify - Text Revision Engine",
        description="LLM-backed text cleanup with character diffs, regex find/replace and share links",
        version=API_VERSION,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_allow_origins,
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "X-Process-Time"],
    )

    # Error handling sits inside the request context so its logs carry the request id
    setup_error_handlers(app)
    setup_request_context_middleware(app)

    app.include_router(health.router, tags=["Health"])
    app.include_router(version.router, prefix="/api/v1", tags=["Version"])
    app.include_router(revision.router, tags=["Revision"])

    return app


app = create_app()


def main() -> None:
    """Run the API server with uvicorn (development entry point)."""
    import uvicorn

    uvicorn.run(
        "textify.api.app:app",
        host=settings.api_host,
        port=settings.api_port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
