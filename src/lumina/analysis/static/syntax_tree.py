"""Grammar-neutral view over parsed trees.

The extractor dispatches on :class:`NodeKind` and asks nodes for
neutral fields; every tree-sitter node type and field name lives in
this module, so another parser can be dropped in by implementing
:class:`SyntaxNode`.
"""

from __future__ import annotations

from collections.abc import Sequence
from enum import StrEnum
from typing import Protocol

import tree_sitter

from lumina.analysis.static.schemas import SourceLocation, SourcePosition


class NodeKind(StrEnum):
    """Node categories the extractor understands."""

    FUNCTION_DECLARATION = "function_declaration"
    FUNCTION_LITERAL = "function_literal"
    VARIABLE_DECLARATION = "variable_declaration"
    VARIABLE_DECLARATOR = "variable_declarator"
    LOOP_DECLARATION = "loop_declaration"
    CLASS_DECLARATION = "class_declaration"
    IMPORT_DECLARATION = "import_declaration"
    CALL = "call"
    IDENTIFIER = "identifier"
    STRING = "string"
    OTHER = "other"


class SyntaxNode(Protocol):
    """What the extractor may ask of a parsed node."""

    @property
    def kind(self) -> NodeKind: ...

    @property
    def text(self) -> str: ...

    @property
    def location(self) -> SourceLocation: ...

    @property
    def children(self) -> Sequence[SyntaxNode]: ...

    def field(self, name: str) -> SyntaxNode | None:
        """Child by neutral field: name, value, callee, source, target."""
        ...

    def parameters(self) -> list[SyntaxNode]:
        """Parameter targets of a function, unwrapped from defaults."""
        ...

    def keyword(self) -> str | None:
        """Declaration keyword (var/let/const) of a declaration."""
        ...


# tree-sitter node type → NodeKind (TSX / JavaScript grammars)
_KIND_BY_TYPE: dict[str, NodeKind] = {
    "function_declaration": NodeKind.FUNCTION_DECLARATION,
    "generator_function_declaration": NodeKind.FUNCTION_DECLARATION,
    "arrow_function": NodeKind.FUNCTION_LITERAL,
    "function_expression": NodeKind.FUNCTION_LITERAL,
    "function": NodeKind.FUNCTION_LITERAL,  # older grammar releases
    "generator_function": NodeKind.FUNCTION_LITERAL,
    "lexical_declaration": NodeKind.VARIABLE_DECLARATION,
    "variable_declaration": NodeKind.VARIABLE_DECLARATION,
    "variable_declarator": NodeKind.VARIABLE_DECLARATOR,
    # for (const x of xs), for (let k in obj)
    "for_in_statement": NodeKind.LOOP_DECLARATION,
    "class_declaration": NodeKind.CLASS_DECLARATION,
    "abstract_class_declaration": NodeKind.CLASS_DECLARATION,
    "import_statement": NodeKind.IMPORT_DECLARATION,
    "call_expression": NodeKind.CALL,
    "identifier": NodeKind.IDENTIFIER,
    "string": NodeKind.STRING,
}

# Neutral field name → tree-sitter field names, tried in order
_FIELD_NAMES: dict[str, tuple[str, ...]] = {
    "name": ("name",),
    "value": ("value",),
    "callee": ("function",),
    "source": ("source",),
    "target": ("left",),
}

_DECLARATION_KEYWORDS = frozenset({"var", "let", "const"})

# TypeScript wraps each parameter in one of these
_PARAMETER_WRAPPERS = frozenset({"required_parameter", "optional_parameter"})


class TreeSitterNode:
    """:class:`SyntaxNode` backed by a ``tree_sitter.Node``."""

    __slots__ = ("_node",)

    def __init__(self, node: tree_sitter.Node) -> None:
        self._node = node

    def __repr__(self) -> str:
        return f"TreeSitterNode({self._node.type!r})"

    @property
    def kind(self) -> NodeKind:
        # Keyword tokens share type names with real nodes ("function")
        if not self._node.is_named:
            return NodeKind.OTHER
        return _KIND_BY_TYPE.get(self._node.type, NodeKind.OTHER)

    @property
    def text(self) -> str:
        raw = self._node.text
        return raw.decode("utf-8", errors="replace") if raw else ""

    @property
    def location(self) -> SourceLocation:
        return node_location(self._node)

    @property
    def children(self) -> list[TreeSitterNode]:
        return [
            TreeSitterNode(_unwrap_parens(c)) for c in self._node.children
        ]

    def field(self, name: str) -> TreeSitterNode | None:
        for ts_name in _FIELD_NAMES.get(name, (name,)):
            child = self._node.child_by_field_name(ts_name)
            if child is not None:
                return TreeSitterNode(_unwrap_parens(child))
        return None

    def parameters(self) -> list[TreeSitterNode]:
        params = self._node.child_by_field_name("parameters")
        if params is None:
            # Unparenthesized arrow parameter: x => x
            single = self._node.child_by_field_name("parameter")
            return [TreeSitterNode(single)] if single is not None else []
        return [
            TreeSitterNode(_unwrap_parameter(p))
            for p in params.named_children
            if p.type != "comment"
        ]

    def keyword(self) -> str | None:
        for child in self._node.children:
            if child.type in _DECLARATION_KEYWORDS:
                return child.type
        return None


def node_location(node: tree_sitter.Node) -> SourceLocation:
    """Convert tree-sitter points (0-based rows) to a SourceLocation."""
    start_row, start_col = node.start_point
    end_row, end_col = node.end_point
    return SourceLocation(
        start=SourcePosition(line=start_row + 1, column=start_col),
        end=SourcePosition(line=end_row + 1, column=end_col),
    )


def _unwrap_parens(node: tree_sitter.Node) -> tree_sitter.Node:
    """See through grouping parentheses: ``(() => g())`` is the arrow."""
    while (
        node.type == "parenthesized_expression"
        and node.named_child_count == 1
    ):
        node = node.named_children[0]
    return node


def _unwrap_parameter(node: tree_sitter.Node) -> tree_sitter.Node:
    """Strip type wrappers and default values down to the binding target."""
    if node.type in _PARAMETER_WRAPPERS:
        pattern = node.child_by_field_name("pattern")
        if pattern is not None:
            node = pattern
    if node.type == "assignment_pattern":
        left = node.child_by_field_name("left")
        if left is not None:
            node = left
    return node
