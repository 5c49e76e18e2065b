"""Parse source text with tree-sitter and turn failures into diagnostics.

tree-sitter always error-recovers, so a parse "fails" when the
recovered tree still contains ERROR or MISSING nodes. The partial
tree is discarded in that case; callers only ever see a clean tree
or a non-empty list of :class:`CodeError`.

Nothing raised by the grammar package, the parser, or text encoding
escapes :func:`parse_source`.
"""

from __future__ import annotations

import importlib
import logging
import threading
from dataclasses import dataclass

import tree_sitter

from lumina.analysis.static.schemas import CodeError
from lumina.analysis.static.syntax_tree import (
    SyntaxNode,
    TreeSitterNode,
    node_location,
)
from lumina.config import PARSER_GRAMMAR
from lumina.constants import (
    DIAGNOSTIC_TOKEN_CHARS,
    LANGUAGE_TAGS,
    MAX_DIAGNOSTICS,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ParseSuccess:
    """A tree with no ERROR or MISSING nodes."""

    root: SyntaxNode


@dataclass(frozen=True)
class ParseFailure:
    """Diagnostics for a parse that could not produce a clean tree."""

    errors: tuple[CodeError, ...]


ParseOutcome = ParseSuccess | ParseFailure

# Ordered (substring, hint) rules; first match wins
_SUGGESTION_RULES: tuple[tuple[str, str], ...] = (
    (
        "unexpected token",
        "Check for missing or extra brackets, parentheses, or semicolons",
    ),
    (
        "unexpected identifier",
        "You might have a typo or missing operator between expressions",
    ),
    (
        "unterminated",
        "Check for unclosed strings, comments, or brackets",
    ),
)
_DEFAULT_SUGGESTION = "Review the syntax at the indicated line"

_IDENTIFIER_TYPES = frozenset({
    "identifier",
    "property_identifier",
    "type_identifier",
    "shorthand_property_identifier",
})


def parse_source(
    source: str,
    language: str = "javascript",
) -> ParseOutcome:
    """Parse *source* into a tree or a list of diagnostics.

    *language* is informational: every tag goes through the same
    TSX grammar.
    """
    if language not in LANGUAGE_TAGS:
        logger.debug("event=unknown_language_tag language=%s", language)

    try:
        parser = _get_parser()
        tree = parser.parse(source.encode("utf-8"))
    except Exception as exc:  # noqa: BLE001
        # Grammar missing, parser crash, or unencodable text
        logger.warning("event=parser_fault error=%s", exc, exc_info=True)
        message = f"Parser failure: {exc}"
        return ParseFailure(
            errors=(CodeError(message=message, suggestion=suggest_fix(message)),)
        )

    root = tree.root_node
    if root.has_error:
        return ParseFailure(errors=_collect_diagnostics(root, source))
    return ParseSuccess(root=TreeSitterNode(root))


def suggest_fix(message: str) -> str:
    """Pick a learner-facing hint for a parser message."""
    lowered = message.lower()
    for needle, hint in _SUGGESTION_RULES:
        if needle in lowered:
            return hint
    return _DEFAULT_SUGGESTION


def _collect_diagnostics(
    root: tree_sitter.Node, source: str
) -> tuple[CodeError, ...]:
    """Walk error-bearing subtrees in document order."""
    # Rows end at \n only, matching tree-sitter's row count
    lines = [line.removesuffix("\r") for line in source.split("\n")]
    errors: list[CodeError] = []
    stack = [root]

    while stack and len(errors) < MAX_DIAGNOSTICS:
        node = stack.pop()
        if node.is_missing:
            message = f"Unexpected token, expected '{node.type}'"
            errors.append(_diagnostic(node, message, lines))
        elif node.type == "ERROR":
            # Inner errors repeat the same failure
            errors.append(_diagnostic(node, _describe_error(node), lines))
        elif node.has_error:
            stack.extend(reversed(node.children))

    if not errors:
        message = "Unexpected token"
        errors.append(_diagnostic(root, message, lines))
    return tuple(errors)


def _diagnostic(
    node: tree_sitter.Node, message: str, lines: list[str]
) -> CodeError:
    start = node_location(node).start
    line_text = lines[start.line - 1] if 0 < start.line <= len(lines) else ""
    return CodeError(
        message=message,
        line=start.line,
        column=start.column,
        offending_line_text=line_text,
        suggestion=suggest_fix(message),
    )


def _describe_error(node: tree_sitter.Node) -> str:
    """Babel-style message for an ERROR node, from its first token."""
    leaf = node
    while leaf.children:
        leaf = leaf.children[0]
    raw = leaf.text or b""
    token = raw.decode("utf-8", errors="replace")
    error_text = (node.text or b"").decode("utf-8", errors="replace")

    if token.startswith("/*") and "*/" not in error_text:
        return "Unterminated comment"
    if token in ("'", '"') and error_text.count(token) % 2 == 1:
        return "Unterminated string constant"
    if token == "`" and error_text.count("`") % 2 == 1:
        return "Unterminated template"

    shown = token[:DIAGNOSTIC_TOKEN_CHARS]
    if leaf.type in _IDENTIFIER_TYPES:
        return f"Unexpected identifier '{shown}'"
    return f"Unexpected token '{shown}'"


# ---------------------------------------------------------------------------
# Parser cache
# ---------------------------------------------------------------------------

_language: tree_sitter.Language | None = None
_language_lock = threading.Lock()
# tree_sitter.Parser is not safe to share between threads
_local = threading.local()


def _get_language() -> tree_sitter.Language:
    """Load the grammar once per process."""
    global _language  # noqa: PLW0603
    with _language_lock:
        if _language is None:
            module_name, factory = PARSER_GRAMMAR
            mod = importlib.import_module(module_name)
            capsule: object = getattr(mod, factory)()
            _language = tree_sitter.Language(capsule)
        return _language


def _get_parser() -> tree_sitter.Parser:
    """Get or create this thread's parser."""
    parser: tree_sitter.Parser | None = getattr(_local, "parser", None)
    if parser is None:
        parser = tree_sitter.Parser(_get_language())
        _local.parser = parser
    return parser


def grammar_available() -> bool:
    """True when the grammar package imports and loads."""
    try:
        _get_language()
    except (ImportError, AttributeError, TypeError, ValueError):
        return False
    return True
