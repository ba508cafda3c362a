"""sheetsync server.

HTTP service that keeps a destination Google Sheets range in sync with an
origin range. Entry point: POST a sync request to / or /api/sync.
"""

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from slowapi.errors import RateLimitExceeded

from sheetsync import api
from sheetsync.backend import GoogleSheetsBackend, load_credentials
from sheetsync.config import get_settings
from sheetsync.logging import configure_logging
from sheetsync.models import SyncOutcome
from sheetsync.rate_limit import limiter, rate_limit_exceeded_handler


async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Global handler for unhandled exceptions."""
    logger.exception(
        "Unhandled exception",
        extra={"path": request.url.path, "error": str(exc)},
    )
    return PlainTextResponse(
        SyncOutcome.INTERNAL_ERROR.message,
        status_code=SyncOutcome.INTERNAL_ERROR.status_code,
    )


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    settings = get_settings()

    logger.info(f"Starting sheetsync server on port {settings.port}")

    # Backend lives in app.state for dependency injection
    backend = GoogleSheetsBackend(
        load_credentials(settings.google_application_credentials),
        timeout=settings.request_timeout,
    )
    app.state.backend = backend

    yield

    await backend.close()
    logger.info("Shutting down sheetsync server")


def create_app() -> FastAPI:
    """Create and configure the FastAPI application."""
    settings = get_settings()

    configure_logging(
        is_production=settings.is_production,
        log_level=settings.log_level,
    )

    app = FastAPI(
        title="sheetsync",
        description="Keeps a destination Google Sheets range in sync with an origin range",
        version="1.0.0",
        lifespan=lifespan,
        docs_url="/api/docs" if not settings.is_production else None,
        redoc_url="/api/redoc" if not settings.is_production else None,
        openapi_url="/api/openapi.json" if not settings.is_production else None,
    )

    app.add_exception_handler(Exception, unhandled_exception_handler)
    app.add_exception_handler(RateLimitExceeded, rate_limit_exceeded_handler)
    app.state.limiter = limiter

    app.include_router(api.router, prefix="/api")
    app.add_api_route(
        "/",
        api.sync_ranges,
        methods=["POST"],
        response_class=PlainTextResponse,
    )

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    settings = get_settings()
    uvicorn.run(
        "sheetsync.main:app",
        host="0.0.0.0",
        port=settings.port,
        reload=not settings.is_production,
    )
