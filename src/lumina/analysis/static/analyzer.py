"""Orchestrate digest → cache → parse → extract for one source text."""

from __future__ import annotations

import logging
from dataclasses import dataclass

from lumina.analysis.static.ast_parser import ParseFailure, parse_source
from lumina.analysis.static.extractor import extract_structure
from lumina.analysis.static.parse_cache import ParseCache, compute_digest
from lumina.analysis.static.schemas import CodeError, CodeStructure
from lumina.constants import DIGEST_LOG_CHARS
from lumina.resilience.errors import AnalysisDefectError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class AnalysisResult:
    """Structure or diagnostics for one source text, never both."""

    digest: str
    structure: CodeStructure | None
    errors: tuple[CodeError, ...] = ()
    cached: bool = False

    @property
    def success(self) -> bool:
        return self.structure is not None


def analyze_source(
    source: str,
    *,
    language: str = "javascript",
    cache: ParseCache | None = None,
) -> AnalysisResult:
    """Return the structure of *source*, served from *cache* when possible.

    Parse failures come back as diagnostics and are not cached.
    An extractor exception is a defect and is raised as
    :class:`AnalysisDefectError` rather than reported as a diagnostic.
    """
    digest = compute_digest(source)
    short = digest[:DIGEST_LOG_CHARS]

    if cache is not None:
        hit = cache.lookup(digest)
        if hit is not None:
            logger.debug("event=parse_cache_hit digest=%s", short)
            return AnalysisResult(digest=digest, structure=hit, cached=True)

    outcome = parse_source(source, language)
    if isinstance(outcome, ParseFailure):
        logger.info(
            "event=parse_failed digest=%s errors=%d",
            short,
            len(outcome.errors),
        )
        return AnalysisResult(
            digest=digest, structure=None, errors=outcome.errors
        )

    try:
        structure = extract_structure(outcome.root)
    except Exception as exc:
        logger.error(
            "event=extraction_defect digest=%s", short, exc_info=True
        )
        raise AnalysisDefectError("extraction", exc) from exc

    if cache is not None:
        cache.insert(digest, structure)
    logger.debug(
        "event=parsed digest=%s functions=%d variables=%d",
        short,
        len(structure.functions),
        len(structure.variables),
    )
    return AnalysisResult(digest=digest, structure=structure)
