"""Project a CodeStructure onto graph-canvas nodes and edges."""

from __future__ import annotations

from lumina.analysis.static.schemas import CodeStructure, EntityNode
from lumina.constants import (
    DIAGRAM_MAX_ENTITIES,
    EDGE_STROKE,
    EDGE_STROKE_WIDTH,
    EDGE_TYPE,
    NODE_STYLES,
    RelationshipType,
)
from lumina.diagrams.cycles import detect_cycles
from lumina.diagrams.layout import layout_nodes
from lumina.diagrams.mermaid import generate_structure_diagram
from lumina.diagrams.schemas import (
    EdgeStyle,
    NodeData,
    NodeStyle,
    VisualEdge,
    VisualizationData,
    VisualNode,
)


def generate_visualization(
    structure: CodeStructure,
    *,
    max_entities: int = DIAGRAM_MAX_ENTITIES,
) -> VisualizationData:
    """Build positioned nodes, call edges and the Mermaid diagram.

    Derived fresh on every call; nothing here is cached.
    """
    cycles = detect_cycles(structure.call_graph)
    return VisualizationData(
        nodes=layout_nodes(build_nodes(structure)),
        edges=build_edges(structure),
        diagram_text=generate_structure_diagram(
            structure, max_entities, cycles=cycles
        ),
        cycles=cycles,
    )


def build_nodes(structure: CodeStructure) -> list[VisualNode]:
    """Functions, then variables, then classes. Imports are not drawn."""
    nodes: list[VisualNode] = []

    for fn in structure.functions:
        nodes.append(
            _node(
                fn,
                label=f"{fn.name}({', '.join(fn.parameters)})",
                data=NodeData(
                    name=fn.name,
                    parameters=list(fn.parameters),
                    line_number=fn.line,
                ),
            )
        )

    for var in structure.variables:
        nodes.append(
            _node(
                var,
                label=f"{var.name}: {var.declaration_keyword or ''}",
                data=NodeData(
                    name=var.name,
                    scope=var.scope,
                    line_number=var.line,
                ),
            )
        )

    for cls in structure.classes:
        nodes.append(
            _node(
                cls,
                label=f"class {cls.name}",
                data=NodeData(name=cls.name, line_number=cls.line),
            )
        )

    return nodes


def build_edges(structure: CodeStructure) -> list[VisualEdge]:
    """One edge per call whose callee names an extracted function.

    Both ends resolve to the first function with the matching name.
    Calls to unknown names are dropped without comment.
    """
    first_by_name: dict[str, EntityNode] = {}
    for fn in structure.functions:
        first_by_name.setdefault(fn.name, fn)

    edges: list[VisualEdge] = []
    for caller, callees in structure.call_graph.items():
        caller_node = first_by_name.get(caller)
        if caller_node is None:
            continue
        for index, callee in enumerate(callees):
            callee_node = first_by_name.get(callee)
            if callee_node is None:
                continue
            edges.append(
                VisualEdge(
                    id=f"edge_{caller_node.id}_{callee_node.id}_{index}",
                    source=caller_node.id,
                    target=callee_node.id,
                    label=RelationshipType.CALLS.value,
                    type=EDGE_TYPE,
                    animated=True,
                    style=EdgeStyle(
                        stroke=EDGE_STROKE,
                        stroke_width=EDGE_STROKE_WIDTH,
                    ),
                )
            )
    return edges


def _node(entity: EntityNode, label: str, data: NodeData) -> VisualNode:
    background, border, width = NODE_STYLES[entity.kind]
    return VisualNode(
        id=entity.id,
        type=entity.kind.value,  # type: ignore[arg-type]
        label=label,
        data=data,
        style=NodeStyle(
            background_color=background,
            border_color=border,
            border_width=width,
        ),
    )
