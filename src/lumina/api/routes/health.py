"""Health check endpoints."""

from datetime import UTC, datetime

from fastapi import APIRouter, Depends

from lumina import __version__
from lumina.analysis.static.ast_parser import grammar_available
from lumina.analysis.static.parse_cache import ParseCache
from lumina.api.dependencies import get_parse_cache

router = APIRouter(prefix="/api", tags=["health"])


@router.get("/health")
async def health() -> dict[str, str]:
    """Basic health check for load balancers."""
    return {
        "status": "healthy",
        "version": __version__,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/detailed")
async def health_detailed(
    cache: ParseCache = Depends(get_parse_cache),
) -> dict[str, object]:
    """Detailed health check with component-level status."""
    components: dict[str, dict[str, object]] = {
        "grammar": {
            "status": "available" if grammar_available() else "unavailable"
        },
        "parse_cache": {"status": "available", **cache.stats()},
    }

    all_healthy = all(
        c["status"] == "available" for c in components.values()
    )

    return {
        "status": "healthy" if all_healthy else "degraded",
        "version": __version__,
        "components": components,
        "timestamp": datetime.now(UTC).isoformat(),
    }
