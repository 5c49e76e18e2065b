"""Shared constants used across modules.

All magic strings and numbers that appear in 2+ files belong here.
StrEnum members are str-compatible, so downstream code (JSON
payloads, diagram text) works unchanged.
"""

from __future__ import annotations

from enum import StrEnum

# ── String Enums ─────────────────────────────────────────


class EntityKind(StrEnum):
    """Kinds of structural entities extracted from source."""

    FUNCTION = "function"
    VARIABLE = "variable"
    CLASS = "class"
    IMPORT = "import"


class RelationshipType(StrEnum):
    """Edge types in the rendered graph."""

    CALLS = "calls"


# ── Parse Cache ──────────────────────────────────────────

PARSE_CACHE_CAPACITY = 50

# ── Parser Adapter ───────────────────────────────────────

# Upper bound on diagnostics reported for one parse attempt
MAX_DIAGNOSTICS = 10
# Tokens quoted in diagnostic messages are cut to this length
DIAGNOSTIC_TOKEN_CHARS = 20

LANGUAGE_TAGS = ("javascript", "typescript", "python")

ANONYMOUS_NAME = "anonymous"

# ── Visualization ────────────────────────────────────────

DIAGRAM_MAX_ENTITIES = 50

TRUNCATION_NOTE_ID = "note"
CYCLE_NOTE_ID = "note2"
CYCLE_WARNING = "⚠️ Circular dependencies detected"


def truncation_warning(limit: int) -> str:
    """Text of the note shown when a diagram is cut at *limit* nodes."""
    return f"⚠️ Large file: Showing first {limit} nodes"


LAYOUT_ORIGIN_X = 100
LAYOUT_ORIGIN_Y = 100
LAYOUT_SPACING_X = 200
LAYOUT_SPACING_Y = 150
LAYOUT_NODES_PER_ROW = 4

# Fixed node presets: (background, border, border width)
NODE_STYLES: dict[str, tuple[str, str, int]] = {
    EntityKind.FUNCTION: ("#e3f2fd", "#2196f3", 2),
    EntityKind.VARIABLE: ("#f3e5f5", "#9c27b0", 1),
    EntityKind.CLASS: ("#fff3e0", "#ff9800", 2),
}

EDGE_TYPE = "smoothstep"
EDGE_STROKE = "#2196f3"
EDGE_STROKE_WIDTH = 2

# ── API ──────────────────────────────────────────────────

MAX_SOURCE_BYTES = 10 * 1024 * 1024

AUTH_EXEMPT_PATHS = frozenset({
    "/api/health",
    "/api/docs",
    "/api/redoc",
    "/api/openapi.json",
})

AUTH_EXEMPT_PREFIXES = ("/api/health",)

# Characters of exception text kept in structured logs
ERROR_TRUNCATION_CHARS = 500

# Digest prefix length used in log lines
DIGEST_LOG_CHARS = 12
