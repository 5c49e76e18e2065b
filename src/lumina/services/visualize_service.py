"""Source text → VisualizeResponse, shared by the HTTP route and the CLI.

Runs the stages strictly in order (parse adapter, extractor,
visualization builder) and never hands a failed parse downstream.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

from lumina.analysis.static.analyzer import analyze_source
from lumina.analysis.static.parse_cache import ParseCache
from lumina.api.schemas import VisualizeResponse
from lumina.constants import (
    DIAGRAM_MAX_ENTITIES,
    DIGEST_LOG_CHARS,
    MAX_SOURCE_BYTES,
)
from lumina.diagrams.visualizer import generate_visualization
from lumina.resilience.errors import AnalysisDefectError, SourceRejectedError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class VisualizeOutcome:
    """Response plus the bookkeeping callers log."""

    response: VisualizeResponse
    digest: str


def validate_source(
    source: str, max_bytes: int = MAX_SOURCE_BYTES
) -> None:
    """Reject empty or oversized input before any parsing."""
    if not source:
        raise SourceRejectedError("Code is required", status_code=400)
    size = len(source.encode("utf-8", errors="surrogatepass"))
    if size > max_bytes:
        raise SourceRejectedError(
            f"Code is {size} bytes; the limit is {max_bytes}",
            status_code=413,
        )


def visualize_source(
    source: str,
    *,
    language: str = "javascript",
    cache: ParseCache | None = None,
    max_entities: int = DIAGRAM_MAX_ENTITIES,
    max_bytes: int = MAX_SOURCE_BYTES,
) -> VisualizeOutcome:
    """Analyze *source* and render it, timing the whole request.

    Raises :class:`SourceRejectedError` for unusable input and
    :class:`AnalysisDefectError` when a stage after parsing fails.
    Syntax errors are returned, not raised.
    """
    validate_source(source, max_bytes)
    started = time.monotonic()

    analysis = analyze_source(source, language=language, cache=cache)
    if analysis.structure is None:
        return VisualizeOutcome(
            response=VisualizeResponse(
                errors=list(analysis.errors),
                parse_time_millis=_elapsed_ms(started),
            ),
            digest=analysis.digest,
        )

    try:
        visualization = generate_visualization(
            analysis.structure, max_entities=max_entities
        )
    except Exception as exc:
        logger.error(
            "event=visualization_defect digest=%s",
            analysis.digest[:DIGEST_LOG_CHARS],
            exc_info=True,
        )
        raise AnalysisDefectError("visualization", exc) from exc

    return VisualizeOutcome(
        response=VisualizeResponse(
            nodes=visualization.nodes,
            edges=visualization.edges,
            diagram_text=visualization.diagram_text,
            parse_time_millis=_elapsed_ms(started),
            cached=analysis.cached,
            cycles=visualization.cycles,
        ),
        digest=analysis.digest,
    )


def _elapsed_ms(started: float) -> float:
    return round((time.monotonic() - started) * 1000, 3)
