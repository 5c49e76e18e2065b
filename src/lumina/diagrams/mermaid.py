"""Mermaid flowchart text from an extracted CodeStructure."""

from __future__ import annotations

import re

from lumina.analysis.static.schemas import CodeStructure, EntityNode
from lumina.constants import (
    CYCLE_NOTE_ID,
    CYCLE_WARNING,
    DIAGRAM_MAX_ENTITIES,
    TRUNCATION_NOTE_ID,
    truncation_warning,
)
from lumina.diagrams.cycles import detect_cycles

_UNSAFE_ID_CHARS = re.compile(r"[^a-zA-Z0-9_]")


def generate_structure_diagram(
    structure: CodeStructure,
    max_entities: int = DIAGRAM_MAX_ENTITIES,
    cycles: list[list[str]] | None = None,
) -> str:
    """Generate a Mermaid ``graph TD`` of functions, variables and calls.

    Functions take the node budget first; variables fill whatever
    remains. Call arrows connect rendered functions only. The cycle
    note reflects the whole call graph, rendered or not; pass *cycles*
    when they are already known.
    """
    lines = ["graph TD"]

    total = len(structure.functions) + len(structure.variables)
    if total > max_entities:
        lines.append(
            f'    {TRUNCATION_NOTE_ID}["{truncation_warning(max_entities)}"]'
        )

    functions = list(structure.functions[:max_entities])
    for fn in functions:
        label = f"{fn.name}({', '.join(fn.parameters)})"
        lines.append(f'    {_safe_id(fn.id)}["{_escape(label)}"]')

    remaining = max_entities - len(functions)
    for var in structure.variables[:remaining]:
        label = f"{var.name}: {var.declaration_keyword or ''}"
        lines.append(f'    {_safe_id(var.id)}[("{_escape(label)}")]')

    for caller, callees in structure.call_graph.items():
        caller_node = _first_named(functions, caller)
        if caller_node is None:
            continue
        for callee in callees:
            callee_node = _first_named(functions, callee)
            if callee_node is not None:
                lines.append(
                    f"    {_safe_id(caller_node.id)} --> "
                    f"{_safe_id(callee_node.id)}"
                )

    if cycles is None:
        cycles = detect_cycles(structure.call_graph)
    if cycles:
        lines.append(f'    {CYCLE_NOTE_ID}["{CYCLE_WARNING}"]')

    return "\n".join(lines)


def _safe_id(raw: str) -> str:
    """Make a valid Mermaid node ID."""
    return _UNSAFE_ID_CHARS.sub("_", raw)


def _escape(label: str) -> str:
    """Escape characters that would end a quoted Mermaid label."""
    return label.replace('"', "#quot;")


def _first_named(
    entities: list[EntityNode], name: str
) -> EntityNode | None:
    for entity in entities:
        if entity.name == name:
            return entity
    return None
