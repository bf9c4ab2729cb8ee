"""API routes for media resolution."""
import logging

from fastapi import APIRouter
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from media_resolver.errors import ErrorKind, is_not_found
from media_resolver.models import ResolutionFailure
from media_resolver.services.provider_client import supported_platforms
from media_resolver.services.resolver import MediaResolver

logger = logging.getLogger(__name__)

router = APIRouter()

_INPUT_ERRORS = {ErrorKind.NO_LINK.value, ErrorKind.UNSUPPORTED_PLATFORM.value, ErrorKind.INVALID_ID.value}


class ResolveRequest(BaseModel):
    text: str


def failure_status(failure: ResolutionFailure) -> int:
    """HTTP status for a failed resolution."""
    if failure.kind in _INPUT_ERRORS:
        return 400
    if failure.kind == ErrorKind.INTERNAL.value:
        return 500
    if is_not_found(failure.upstream_code):
        return 404
    return 502


def get_resolver() -> MediaResolver:
    return MediaResolver()


# ---------------------------------------------------------------------------
# Health / metadata
# ---------------------------------------------------------------------------


@router.get("/health")
def health():
    """Health check endpoint."""
    return {"ok": True}


@router.get("/platforms")
def list_platforms():
    """Platforms the resolver can fetch from the provider."""
    return {
        "platforms": [
            {"id": platform.value, "name": platform.display_name}
            for platform in supported_platforms()
        ]
    }


# ---------------------------------------------------------------------------
# Resolve
# ---------------------------------------------------------------------------


@router.post("/resolve")
async def resolve(payload: ResolveRequest):
    """Resolve shared text (a share message or link) into unified media."""
    outcome = await get_resolver().resolve(payload.text)

    if isinstance(outcome, ResolutionFailure):
        status = failure_status(outcome)
        logger.info(f"/resolve failed with {status}: {outcome.kind}")
        return JSONResponse(status_code=status, content=outcome.model_dump(mode="json"))

    response = outcome.model_dump(mode="json")
    response["time_display"] = outcome.time_display
    response["cost_display"] = outcome.cost_display
    response["performance_level"] = outcome.performance_level.value
    return JSONResponse(response)
