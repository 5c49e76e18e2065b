"""Pydantic models for static analysis output."""

from collections.abc import Mapping
from types import MappingProxyType
from typing import Literal

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    field_serializer,
    field_validator,
)
from pydantic.alias_generators import to_camel

from lumina.constants import EntityKind


class SourcePosition(BaseModel):
    """A point in source text (1-based line, 0-based column)."""

    model_config = ConfigDict(frozen=True)

    line: int
    column: int


class SourceLocation(BaseModel):
    """Start/end span of a syntax node."""

    model_config = ConfigDict(frozen=True)

    start: SourcePosition
    end: SourcePosition


class EntityNode(BaseModel):
    """A structural unit extracted from the tree."""

    model_config = ConfigDict(frozen=True)

    id: str
    kind: EntityKind
    name: str
    location: SourceLocation | None = None
    parameters: tuple[str, ...] = ()  # functions only
    declaration_keyword: str | None = None  # variables only: var, let, const
    scope: int = 0  # opaque ordinal, display only

    @property
    def line(self) -> int | None:
        return self.location.start.line if self.location else None


class CodeStructure(BaseModel):
    """Everything one successful parse yields. Immutable once built."""

    model_config = ConfigDict(frozen=True)

    functions: tuple[EntityNode, ...] = ()
    variables: tuple[EntityNode, ...] = ()
    classes: tuple[EntityNode, ...] = ()
    imports: tuple[EntityNode, ...] = ()
    # caller name -> callee names in call order, duplicates kept.
    # Read-only: one instance is shared by every cache hit.
    call_graph: Mapping[str, tuple[str, ...]] = Field(
        default_factory=lambda: MappingProxyType({})
    )

    @field_validator("call_graph", mode="after")
    @classmethod
    def _freeze_call_graph(
        cls, v: Mapping[str, tuple[str, ...]]
    ) -> Mapping[str, tuple[str, ...]]:
        return MappingProxyType(dict(v))

    @field_serializer("call_graph")
    def _serialize_call_graph(
        self, v: Mapping[str, tuple[str, ...]]
    ) -> dict[str, list[str]]:
        return {caller: list(callees) for caller, callees in v.items()}

    def find_function(self, name: str) -> EntityNode | None:
        """First function with *name*, in extraction order."""
        for fn in self.functions:
            if fn.name == name:
                return fn
        return None


class CodeError(BaseModel):
    """A parse diagnostic shown to the learner."""

    model_config = ConfigDict(
        frozen=True,
        alias_generator=to_camel,
        populate_by_name=True,
    )

    kind: Literal["syntax"] = "syntax"
    message: str
    line: int = 0
    column: int = 0
    offending_line_text: str = ""
    suggestion: str
