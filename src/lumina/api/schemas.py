"""Request/response schemas for the HTTP API."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

from lumina.analysis.static.schemas import CodeError
from lumina.diagrams.schemas import VisualEdge, VisualNode


class APIResponse(BaseModel):
    """Standard response envelope for administrative endpoints."""

    success: bool
    data: Any | None = None
    error: str | None = None
    metadata: dict[str, Any] = Field(default_factory=dict)


class VisualizeRequest(BaseModel):
    """Request body for POST /api/visualize."""

    code: str = ""
    language: Literal["javascript", "typescript", "python"] = "javascript"


class VisualizeResponse(BaseModel):
    """Graph, diagram and diagnostics for one source text.

    On a parse failure the graph fields are empty and ``errors`` is
    populated; the response itself is still a success.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    nodes: list[VisualNode] = Field(default_factory=lambda: list[VisualNode]())
    edges: list[VisualEdge] = Field(default_factory=lambda: list[VisualEdge]())
    diagram_text: str = ""
    errors: list[CodeError] = Field(default_factory=lambda: list[CodeError]())
    parse_time_millis: float = 0.0
    cached: bool = False
    cycles: list[list[str]] = Field(default_factory=lambda: list[list[str]]())


class ErrorBody(BaseModel):
    """Body of 4xx/5xx responses from the visualize route."""

    error: str
    message: str
