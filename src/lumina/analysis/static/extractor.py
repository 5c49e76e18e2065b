"""Single-pass extraction of entities and the call graph.

One pre-order walk over a :class:`SyntaxNode` tree, driven by an
explicit frame stack. Each frame carries the enclosing function name,
the scope ordinal, and the declarator name offered to a function
literal, so no state outlives the call and deep trees never hit the
interpreter recursion limit.

Calls are recorded by name only: ``b()`` inside ``a`` appends ``"b"``
to ``call_graph["a"]`` whether or not ``b`` is defined anywhere.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from lumina.analysis.static.schemas import CodeStructure, EntityNode
from lumina.analysis.static.syntax_tree import NodeKind, SyntaxNode
from lumina.constants import ANONYMOUS_NAME, EntityKind


@dataclass(frozen=True)
class _Frame:
    node: SyntaxNode
    enclosing: str | None
    scope: int
    # Identifier of the declarator this node is the direct child of
    name_hint: str | None = None


@dataclass
class _StructureBuilder:
    """Accumulates entities for one extraction; never shared."""

    functions: list[EntityNode] = field(
        default_factory=lambda: list[EntityNode]()
    )
    variables: list[EntityNode] = field(
        default_factory=lambda: list[EntityNode]()
    )
    classes: list[EntityNode] = field(
        default_factory=lambda: list[EntityNode]()
    )
    imports: list[EntityNode] = field(
        default_factory=lambda: list[EntityNode]()
    )
    call_graph: dict[str, list[str]] = field(
        default_factory=lambda: dict[str, list[str]]()
    )
    _ordinal: int = 0
    _scopes: int = 0

    def open_scope(self) -> int:
        self._scopes += 1
        return self._scopes

    def entity(
        self,
        kind: EntityKind,
        name: str,
        node: SyntaxNode,
        scope: int,
        parameters: tuple[str, ...] = (),
        declaration_keyword: str | None = None,
    ) -> EntityNode:
        # The trailing ordinal keeps ids unique even for same-line twins
        location = node.location
        entity_id = f"{kind}_{name}_{location.start.line}_{self._ordinal}"
        self._ordinal += 1
        return EntityNode(
            id=entity_id,
            kind=kind,
            name=name,
            location=location,
            parameters=parameters,
            declaration_keyword=declaration_keyword,
            scope=scope,
        )

    def add_function(
        self, node: SyntaxNode, name: str, scope: int
    ) -> None:
        params = tuple(_parameter_label(p) for p in node.parameters())
        self.functions.append(
            self.entity(
                EntityKind.FUNCTION, name, node, scope, parameters=params
            )
        )

    def add_call(self, caller: str, callee: str) -> None:
        self.call_graph.setdefault(caller, []).append(callee)

    def build(self) -> CodeStructure:
        return CodeStructure(
            functions=tuple(self.functions),
            variables=tuple(self.variables),
            classes=tuple(self.classes),
            imports=tuple(self.imports),
            call_graph={
                caller: tuple(callees)
                for caller, callees in self.call_graph.items()
            },
        )


def extract_structure(root: SyntaxNode) -> CodeStructure:
    """Walk a successfully parsed tree once and collect its structure."""
    builder = _StructureBuilder()
    stack = [_Frame(node=root, enclosing=None, scope=0)]

    while stack:
        frame = stack.pop()
        node = frame.node
        kind = node.kind
        enclosing = frame.enclosing
        scope = frame.scope
        child_hint: str | None = None

        if kind is NodeKind.FUNCTION_DECLARATION:
            name_node = node.field("name")
            name = (
                name_node.text if name_node is not None else ANONYMOUS_NAME
            )
            builder.add_function(node, name, scope)
            enclosing = name
            scope = builder.open_scope()

        elif kind is NodeKind.FUNCTION_LITERAL:
            name = frame.name_hint or ANONYMOUS_NAME
            builder.add_function(node, name, scope)
            enclosing = name
            scope = builder.open_scope()

        elif kind is NodeKind.VARIABLE_DECLARATION:
            _add_variables(builder, node, scope)

        elif kind is NodeKind.LOOP_DECLARATION:
            _add_loop_variable(builder, node, scope)

        elif kind is NodeKind.VARIABLE_DECLARATOR:
            target = node.field("name")
            if target is not None and target.kind is NodeKind.IDENTIFIER:
                child_hint = target.text

        elif kind is NodeKind.CLASS_DECLARATION:
            name_node = node.field("name")
            name = (
                name_node.text if name_node is not None else ANONYMOUS_NAME
            )
            builder.classes.append(
                builder.entity(EntityKind.CLASS, name, node, scope)
            )
            scope = builder.open_scope()

        elif kind is NodeKind.IMPORT_DECLARATION:
            source = node.field("source")
            if source is not None and source.kind is NodeKind.STRING:
                module = source.text.strip("'\"`")
                builder.imports.append(
                    builder.entity(EntityKind.IMPORT, module, node, scope)
                )

        elif kind is NodeKind.CALL and enclosing is not None:
            callee = node.field("callee")
            if callee is not None and callee.kind is NodeKind.IDENTIFIER:
                builder.add_call(enclosing, callee.text)

        for child in reversed(node.children):
            stack.append(
                _Frame(
                    node=child,
                    enclosing=enclosing,
                    scope=scope,
                    name_hint=child_hint,
                )
            )

    return builder.build()


def _add_variables(
    builder: _StructureBuilder, node: SyntaxNode, scope: int
) -> None:
    """One variable per identifier declarator; patterns are skipped."""
    keyword = node.keyword()
    for child in node.children:
        if child.kind is not NodeKind.VARIABLE_DECLARATOR:
            continue
        target = child.field("name")
        if target is None or target.kind is not NodeKind.IDENTIFIER:
            continue
        builder.variables.append(
            builder.entity(
                EntityKind.VARIABLE,
                target.text,
                child,
                scope,
                declaration_keyword=keyword,
            )
        )


def _add_loop_variable(
    builder: _StructureBuilder, node: SyntaxNode, scope: int
) -> None:
    """One variable for ``for (const x of xs)``; a bare target declares none."""
    keyword = node.keyword()
    target = node.field("target")
    if keyword is None or target is None:
        return
    if target.kind is not NodeKind.IDENTIFIER:
        return
    builder.variables.append(
        builder.entity(
            EntityKind.VARIABLE,
            target.text,
            target,
            scope,
            declaration_keyword=keyword,
        )
    )


def _parameter_label(param: SyntaxNode) -> str:
    """Identifier name, ``...rest``, or collapsed pattern text."""
    return " ".join(param.text.split())
