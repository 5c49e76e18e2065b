"""Administrative parse cache endpoints."""

from __future__ import annotations

from fastapi import APIRouter, Depends

from lumina.analysis.static.parse_cache import ParseCache
from lumina.api.dependencies import get_parse_cache
from lumina.api.schemas import APIResponse

router = APIRouter(prefix="/api/cache", tags=["cache"])


@router.post("/clear")
async def clear_cache(
    cache: ParseCache = Depends(get_parse_cache),
) -> APIResponse:
    """Drop every cached structure. Protected by the API key, if set."""
    return APIResponse(success=True, data={"cleared": cache.clear()})
