"""Static analysis: deterministic structure extraction via tree-sitter."""

from lumina.analysis.static.analyzer import AnalysisResult, analyze_source
from lumina.analysis.static.ast_parser import (
    ParseFailure,
    ParseOutcome,
    ParseSuccess,
    parse_source,
    suggest_fix,
)
from lumina.analysis.static.extractor import extract_structure
from lumina.analysis.static.parse_cache import ParseCache, compute_digest
from lumina.analysis.static.schemas import (
    CodeError,
    CodeStructure,
    EntityNode,
    SourceLocation,
    SourcePosition,
)

__all__ = [
    "AnalysisResult",
    "CodeError",
    "CodeStructure",
    "EntityNode",
    "ParseCache",
    "ParseFailure",
    "ParseOutcome",
    "ParseSuccess",
    "SourceLocation",
    "SourcePosition",
    "analyze_source",
    "compute_digest",
    "extract_structure",
    "parse_source",
    "suggest_fix",
]
