"""HTTP endpoints.

Endpoints:
- POST /api/sync          - Sync a destination range with an origin range
- GET  /api/health        - Health check
- GET  /api/health/ready  - Readiness check

The sync endpoint is also mounted at POST / by main.py so existing callers of
the single-function deployment keep working. Responses are plain text; error
details are logged server-side and never returned to the caller.
"""

from fastapi import APIRouter, Depends, Request
from fastapi.responses import PlainTextResponse
from loguru import logger
from pydantic import ValidationError

from sheetsync.backend import SheetsBackend
from sheetsync.config import Settings, get_settings
from sheetsync.engine import SyncEngine
from sheetsync.models import SyncRequest
from sheetsync.rate_limit import limiter

INVALID_BODY_MESSAGE = "Bad Request: Invalid request body"

router = APIRouter()


def get_backend(request: Request) -> SheetsBackend:
    """FastAPI dependency returning the backend created during app lifespan."""
    return request.app.state.backend


def get_engine(
    backend: SheetsBackend = Depends(get_backend),
    settings: Settings = Depends(get_settings),
) -> SyncEngine:
    return SyncEngine(backend, row_write_concurrency=settings.row_write_concurrency)


# =============================================================================
# Health Endpoints
# =============================================================================


@router.get("/health")
async def health_check() -> dict:
    """Basic health check endpoint."""
    return {"status": "healthy", "service": "sheetsync"}


@router.get("/health/ready")
async def readiness_check(request: Request) -> dict:
    """Readiness check for Cloud Run."""
    settings = get_settings()
    return {
        "status": "ready" if getattr(request.app.state, "backend", None) else "starting",
        "service": "sheetsync",
        "environment": settings.environment,
    }


# =============================================================================
# Sync Endpoint
# =============================================================================


@router.post("/sync", response_class=PlainTextResponse)
@limiter.limit(lambda: get_settings().sync_rate_limit)
async def sync_ranges(
    request: Request,
    engine: SyncEngine = Depends(get_engine),
) -> PlainTextResponse:
    """Synchronize the destination range described in the JSON body."""
    body = await request.body()
    try:
        sync_request = SyncRequest.model_validate_json(body or b"{}")
    except ValidationError as e:
        logger.warning(
            "Invalid sync request body",
            extra={"errors": e.errors(include_url=False, include_input=False)},
        )
        return PlainTextResponse(INVALID_BODY_MESSAGE, status_code=400)

    logger.info(
        "Sync requested",
        extra={
            "origin_spreadsheet_id": sync_request.origin_spreadsheet_id,
            "origin_worksheet": sync_request.origin_worksheet_name,
            "destination_spreadsheet_id": sync_request.destination_spreadsheet_id,
            "destination_worksheet": sync_request.destination_worksheet_name,
        },
    )
    result = await engine.sync(sync_request)
    return PlainTextResponse(result.outcome.message, status_code=result.outcome.status_code)
