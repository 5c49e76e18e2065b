"""Tests for the tree-sitter parser adapter."""

from __future__ import annotations

import threading

import pytest

import lumina.analysis.static.ast_parser as ast_parser
from lumina.analysis.static.ast_parser import (
    ParseFailure,
    ParseSuccess,
    grammar_available,
    parse_source,
    suggest_fix,
)
from lumina.analysis.static.syntax_tree import NodeKind
from lumina.constants import MAX_DIAGNOSTICS


def test_grammar_is_available() -> None:
    assert grammar_available() is True


def test_valid_javascript_parses() -> None:
    result = parse_source("function a(b, c) { return b + c; }")
    assert isinstance(result, ParseSuccess)
    assert result.root.children


def test_typescript_and_jsx_parse() -> None:
    """One grammar serves every tag: typed params and JSX both parse."""
    ts = parse_source(
        "function f(x: number): number { return x; }", "typescript"
    )
    jsx = parse_source("const el = <div>hi</div>;")
    assert isinstance(ts, ParseSuccess)
    assert isinstance(jsx, ParseSuccess)


def test_language_tag_does_not_change_result() -> None:
    source = "const x = 1;"
    assert isinstance(parse_source(source, "python"), ParseSuccess)
    assert isinstance(parse_source(source, "cobol"), ParseSuccess)


def test_broken_function_reports_diagnostic() -> None:
    """``function( {`` fails with a located, hinted diagnostic."""
    result = parse_source("function( {")
    assert isinstance(result, ParseFailure)
    assert len(result.errors) >= 1
    for err in result.errors:
        assert err.kind == "syntax"
        assert err.line >= 0
        assert err.column >= 0
        assert err.suggestion


def test_messages_use_known_prefixes() -> None:
    result = parse_source("let s = 'abc\nfunction ( {")
    assert isinstance(result, ParseFailure)
    for err in result.errors:
        assert err.message.startswith(("Unexpected", "Unterminated"))


def test_diagnostic_carries_offending_line() -> None:
    result = parse_source("const ok = 1;\nconst = ;")
    assert isinstance(result, ParseFailure)
    on_line_two = [e for e in result.errors if e.line == 2]
    assert on_line_two
    assert on_line_two[0].offending_line_text == "const = ;"


def test_offending_line_counts_newlines_only() -> None:
    """Line separators inside strings do not shift the quoted line."""
    result = parse_source('const s = "x\u2028y";\nlet z = ;')
    assert isinstance(result, ParseFailure)
    on_line_two = [e for e in result.errors if e.line == 2]
    assert on_line_two
    assert on_line_two[0].offending_line_text == "let z = ;"


def test_offending_line_drops_carriage_return() -> None:
    result = parse_source("const ok = 1;\r\nconst = ;")
    assert isinstance(result, ParseFailure)
    on_line_two = [e for e in result.errors if e.line == 2]
    assert on_line_two
    assert on_line_two[0].offending_line_text == "const = ;"


def test_diagnostics_are_capped() -> None:
    source = "\n".join("function ( {" for _ in range(40))
    result = parse_source(source)
    assert isinstance(result, ParseFailure)
    assert 1 <= len(result.errors) <= MAX_DIAGNOSTICS


def test_parser_fault_becomes_diagnostic(
    monkeypatch: pytest.MonkeyPatch,
) -> None:
    """A crash inside the parser never escapes parse_source."""

    def _boom() -> object:
        raise RuntimeError("boom")

    monkeypatch.setattr(ast_parser, "_get_parser", _boom)
    result = parse_source("const x = 1;")

    assert isinstance(result, ParseFailure)
    assert len(result.errors) == 1
    err = result.errors[0]
    assert err.message == "Parser failure: boom"
    assert err.line == 0
    assert err.column == 0
    assert err.suggestion == "Review the syntax at the indicated line"


def test_error_serializes_camel_case() -> None:
    result = parse_source("function( {")
    assert isinstance(result, ParseFailure)
    payload = result.errors[0].model_dump(by_alias=True)
    assert "offendingLineText" in payload
    assert payload["kind"] == "syntax"


def test_parsing_from_threads() -> None:
    """Each worker thread gets its own parser."""
    outcomes: list[bool] = []
    lock = threading.Lock()

    def worker() -> None:
        for _ in range(20):
            ok = isinstance(parse_source("function a(){ b(); }"), ParseSuccess)
            with lock:
                outcomes.append(ok)

    threads = [threading.Thread(target=worker) for _ in range(4)]
    for t in threads:
        t.start()
    for t in threads:
        t.join()

    assert len(outcomes) == 80
    assert all(outcomes)


class TestSyntaxView:
    def test_kinds_and_fields(self) -> None:
        result = parse_source("function greet(name) { hello(name); }")
        assert isinstance(result, ParseSuccess)
        fn = result.root.children[0]
        assert fn.kind is NodeKind.FUNCTION_DECLARATION
        name = fn.field("name")
        assert name is not None
        assert name.text == "greet"
        assert [p.text for p in fn.parameters()] == ["name"]
        assert fn.location.start.line == 1
        assert fn.location.start.column == 0

    def test_keyword_of_declaration(self) -> None:
        result = parse_source("let x = 1;")
        assert isinstance(result, ParseSuccess)
        decl = result.root.children[0]
        assert decl.kind is NodeKind.VARIABLE_DECLARATION
        assert decl.keyword() == "let"

    def test_function_keyword_token_is_not_a_function(self) -> None:
        result = parse_source("const f = function () {};")
        assert isinstance(result, ParseSuccess)
        literal_kinds: list[NodeKind] = []
        stack = list(result.root.children)
        while stack:
            node = stack.pop()
            if node.kind is NodeKind.FUNCTION_LITERAL:
                literal_kinds.append(node.kind)
            stack.extend(node.children)
        assert len(literal_kinds) == 1


class TestSuggestFix:
    def test_unexpected_token(self) -> None:
        assert suggest_fix("Unexpected token '('") == (
            "Check for missing or extra brackets, parentheses, or semicolons"
        )

    def test_unexpected_identifier(self) -> None:
        assert suggest_fix("Unexpected identifier 'foo'") == (
            "You might have a typo or missing operator between expressions"
        )

    def test_unterminated(self) -> None:
        assert suggest_fix("Unterminated string constant") == (
            "Check for unclosed strings, comments, or brackets"
        )

    def test_first_rule_wins(self) -> None:
        assert suggest_fix(
            "unterminated thing; unexpected token"
        ).startswith("Check for missing or extra brackets")

    def test_case_insensitive(self) -> None:
        assert suggest_fix("UNEXPECTED TOKEN").startswith("Check for missing")

    def test_fallback(self) -> None:
        assert suggest_fix("Something odd") == (
            "Review the syntax at the indicated line"
        )
