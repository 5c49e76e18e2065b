"""Pydantic models for rendered graph output.

Serialized with camelCase keys, the shape the graph canvas consumes.
"""

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _CamelModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Position(_CamelModel):
    x: int = 0
    y: int = 0


class NodeStyle(_CamelModel):
    background_color: str
    border_color: str
    border_width: int


class NodeData(_CamelModel):
    name: str
    parameters: list[str] | None = None
    scope: int | None = None
    line_number: int | None = None


class VisualNode(_CamelModel):
    """A positioned, styled projection of one entity."""

    id: str
    type: Literal["function", "variable", "class"]
    label: str
    data: NodeData
    position: Position = Field(default_factory=Position)
    style: NodeStyle


class EdgeStyle(_CamelModel):
    stroke: str
    stroke_width: int


class VisualEdge(_CamelModel):
    """A resolved call between two rendered functions."""

    id: str
    source: str
    target: str
    label: str
    type: str
    animated: bool = True
    style: EdgeStyle


class VisualizationData(_CamelModel):
    """Everything the builder derives from one CodeStructure."""

    nodes: list[VisualNode] = Field(default_factory=lambda: list[VisualNode]())
    edges: list[VisualEdge] = Field(default_factory=lambda: list[VisualEdge]())
    diagram_text: str = ""
    cycles: list[list[str]] = Field(default_factory=lambda: list[list[str]]())
