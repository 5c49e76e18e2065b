"""Source visualization route."""

from __future__ import annotations

import asyncio
import logging
import uuid

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from lumina.analysis.static.parse_cache import ParseCache
from lumina.api.dependencies import (
    get_parse_cache,
    get_request_logger,
    get_settings,
)
from lumina.api.schemas import ErrorBody, VisualizeRequest, VisualizeResponse
from lumina.config import Settings
from lumina.logger import RequestLogger
from lumina.resilience.errors import (
    ErrorClass,
    classify_error,
    status_code_for,
)
from lumina.services.visualize_service import visualize_source

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["visualize"])


@router.post("/visualize", response_model=VisualizeResponse)
async def visualize(
    body: VisualizeRequest,
    settings: Settings = Depends(get_settings),
    cache: ParseCache = Depends(get_parse_cache),
    request_logger: RequestLogger = Depends(get_request_logger),
) -> VisualizeResponse | JSONResponse:
    """Parse the submitted code and return its graph and diagram.

    Syntax errors come back as a 200 with ``errors`` populated.
    Only rejected input (4xx) and analysis defects (500) are
    reported as error statuses.
    """
    request_id = uuid.uuid4().hex[:12]

    try:
        # tree-sitter parsing is CPU-bound; keep it off the event loop
        outcome = await asyncio.to_thread(
            visualize_source,
            body.code,
            language=body.language,
            cache=cache,
            max_entities=settings.diagram_max_entities,
            max_bytes=settings.max_source_bytes,
        )
    except Exception as exc:
        status = status_code_for(exc)
        if classify_error(exc) == ErrorClass.CLIENT:
            logger.info(
                "event=visualize_rejected request_id=%s status=%d",
                request_id,
                status,
            )
            return _error(status, "invalid_request", str(exc))

        logger.exception(
            "event=visualize_failed request_id=%s", request_id
        )
        request_logger.log_error(request_id, "visualize", str(exc))
        return _error(
            status,
            "analysis_failed",
            "Failed to analyze code",
        )

    response = outcome.response
    request_logger.log_request(
        request_id=request_id,
        digest=outcome.digest,
        language=body.language,
        cached=response.cached,
        duration_ms=response.parse_time_millis,
        node_count=len(response.nodes),
        edge_count=len(response.edges),
        error_count=len(response.errors),
    )
    return response


def _error(status_code: int, error: str, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content=ErrorBody(error=error, message=message).model_dump(),
    )
