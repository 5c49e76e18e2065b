"""Shared test fixtures: fake syntax trees, app state for API tests."""

from __future__ import annotations

import dataclasses
import logging
from collections.abc import Sequence
from dataclasses import dataclass
from pathlib import Path

import pytest

from lumina.analysis.static.parse_cache import ParseCache
from lumina.analysis.static.schemas import (
    CodeStructure,
    EntityNode,
    SourceLocation,
    SourcePosition,
)
from lumina.analysis.static.syntax_tree import NodeKind
from lumina.api.app_state import AppState
from lumina.config import Settings
from lumina.constants import EntityKind
from lumina.logger import RequestLogger
from lumina.main import app


def setup_test_app(
    tmp_path: Path,
    *,
    api_key: str = "",
    parse_cache_capacity: int = 50,
    max_source_bytes: int = 10 * 1024 * 1024,
) -> AppState:
    """Common app-state setup for API test fixtures.

    ASGITransport does not run the lifespan, so the typed state it
    would install is set here directly.
    """
    logging.getLogger("lumina.requests").handlers.clear()
    state = AppState(
        settings=Settings(
            api_key=api_key,
            log_dir=tmp_path / "logs",
            parse_cache_capacity=parse_cache_capacity,
            max_source_bytes=max_source_bytes,
        ),
        parse_cache=ParseCache(parse_cache_capacity),
        logger=RequestLogger(log_dir=tmp_path / "logs", level="INFO"),
    )
    app.state.typed = state
    return state


# ── Fake syntax tree ─────────────────────────────────────────


@dataclass
class FakeNode:
    """Hand-built :class:`SyntaxNode` for parser-independent tests."""

    kind: NodeKind
    text: str = ""
    line: int = 1
    children: Sequence[FakeNode] = ()
    fields: dict[str, FakeNode] = dataclasses.field(default_factory=dict)
    params: list[FakeNode] = dataclasses.field(default_factory=list)
    decl_keyword: str | None = None

    @property
    def location(self) -> SourceLocation:
        return SourceLocation(
            start=SourcePosition(line=self.line, column=0),
            end=SourcePosition(line=self.line, column=len(self.text)),
        )

    def field(self, name: str) -> FakeNode | None:
        return self.fields.get(name)

    def parameters(self) -> list[FakeNode]:
        return self.params

    def keyword(self) -> str | None:
        return self.decl_keyword


def ident(name: str, line: int = 1) -> FakeNode:
    return FakeNode(kind=NodeKind.IDENTIFIER, text=name, line=line)


def call(callee: str, line: int = 1) -> FakeNode:
    target = ident(callee, line)
    return FakeNode(
        kind=NodeKind.CALL,
        text=f"{callee}()",
        line=line,
        children=[target],
        fields={"callee": target},
    )


def function_decl(
    name: str,
    body: Sequence[FakeNode] = (),
    params: Sequence[str] = (),
    line: int = 1,
) -> FakeNode:
    name_node = ident(name, line)
    return FakeNode(
        kind=NodeKind.FUNCTION_DECLARATION,
        text=f"function {name}() {{}}",
        line=line,
        children=[name_node, *body],
        fields={"name": name_node},
        params=[ident(p, line) for p in params],
    )


def program(*statements: FakeNode) -> FakeNode:
    return FakeNode(kind=NodeKind.OTHER, children=list(statements))


# ── Structures ───────────────────────────────────────────────


def make_function(name: str, line: int = 1, ordinal: int = 0) -> EntityNode:
    return EntityNode(
        id=f"function_{name}_{line}_{ordinal}",
        kind=EntityKind.FUNCTION,
        name=name,
        location=SourceLocation(
            start=SourcePosition(line=line, column=0),
            end=SourcePosition(line=line, column=10),
        ),
    )


def make_variable(
    name: str, keyword: str = "const", line: int = 1, ordinal: int = 0
) -> EntityNode:
    return EntityNode(
        id=f"variable_{name}_{line}_{ordinal}",
        kind=EntityKind.VARIABLE,
        name=name,
        declaration_keyword=keyword,
    )


@pytest.fixture
def two_function_structure() -> CodeStructure:
    """``a`` calls ``b`` and an undefined ``log``."""
    return CodeStructure(
        functions=(make_function("a", 1, 0), make_function("b", 2, 1)),
        call_graph={"a": ("b", "log")},
    )
