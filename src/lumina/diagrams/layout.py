"""Deterministic grid placement for rendered nodes."""

from __future__ import annotations

from lumina.constants import (
    LAYOUT_NODES_PER_ROW,
    LAYOUT_ORIGIN_X,
    LAYOUT_ORIGIN_Y,
    LAYOUT_SPACING_X,
    LAYOUT_SPACING_Y,
)
from lumina.diagrams.schemas import Position, VisualNode


def layout_nodes(
    nodes: list[VisualNode],
    per_row: int = LAYOUT_NODES_PER_ROW,
) -> list[VisualNode]:
    """Place nodes left to right, wrapping every *per_row* nodes.

    Order in, order out; graph topology plays no part.
    """
    positioned: list[VisualNode] = []
    for index, node in enumerate(nodes):
        row, col = divmod(index, per_row)
        position = Position(
            x=LAYOUT_ORIGIN_X + col * LAYOUT_SPACING_X,
            y=LAYOUT_ORIGIN_Y + row * LAYOUT_SPACING_Y,
        )
        positioned.append(node.model_copy(update={"position": position}))
    return positioned
