"""Graph and diagram generation from extracted structure."""

from lumina.diagrams.cycles import detect_cycles, has_cycle
from lumina.diagrams.layout import layout_nodes
from lumina.diagrams.mermaid import generate_structure_diagram
from lumina.diagrams.visualizer import (
    build_edges,
    build_nodes,
    generate_visualization,
)

__all__ = [
    "build_edges",
    "build_nodes",
    "detect_cycles",
    "generate_structure_diagram",
    "generate_visualization",
    "has_cycle",
    "layout_nodes",
]
