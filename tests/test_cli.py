"""Tests for CLI argument parsing and the visualize command."""

from __future__ import annotations

import io
import json
from pathlib import Path

import pytest

from lumina.cli import _build_parser, main


class TestArgParser:
    def test_version_flag(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["--version"])
        assert args.version is True

    def test_visualize_defaults(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["visualize", "app.js"])
        assert args.command == "visualize"
        assert args.source == "app.js"
        assert args.language == "javascript"
        assert args.format == "summary"

    def test_serve_defaults_to_settings(self) -> None:
        parser = _build_parser()
        args = parser.parse_args(["serve"])
        assert args.host is None
        assert args.port is None

    def test_no_command_prints_help(self) -> None:
        parser = _build_parser()
        args = parser.parse_args([])
        assert args.command is None


class TestVisualizeCommand:
    def test_version_output(self, capsys: pytest.CaptureFixture[str]) -> None:
        main(["--version"])
        assert capsys.readouterr().out.startswith("lumina ")

    def test_summary(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "app.js"
        src.write_text("function a(){ b(); }\nfunction b(){ a(); }\n")
        main(["visualize", str(src)])

        out = capsys.readouterr().out
        assert "functions: 2" in out
        assert "calls:     2" in out
        assert "cycle: a -> b -> a" in out

    def test_mermaid(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "app.js"
        src.write_text("function a(){ b(); } function b(){}")
        main(["visualize", str(src), "--format", "mermaid"])

        out = capsys.readouterr().out
        assert out.startswith("graph TD\n")
        assert "-->" in out

    def test_json(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "app.ts"
        src.write_text("const total: number = 3;")
        main(["visualize", str(src), "-l", "typescript", "-f", "json"])

        body = json.loads(capsys.readouterr().out)
        assert body["nodes"][0]["label"] == "total: const"
        assert "diagramText" in body

    def test_stdin(
        self,
        monkeypatch: pytest.MonkeyPatch,
        capsys: pytest.CaptureFixture[str],
    ) -> None:
        monkeypatch.setattr("sys.stdin", io.StringIO("let x = 1;"))
        main(["visualize", "-"])
        assert "variables: 1" in capsys.readouterr().out

    def test_syntax_error_exits_1(
        self, tmp_path: Path, capsys: pytest.CaptureFixture[str]
    ) -> None:
        src = tmp_path / "bad.js"
        src.write_text("function( {")
        with pytest.raises(SystemExit) as exc_info:
            main(["visualize", str(src)])

        assert exc_info.value.code == 1
        err = capsys.readouterr().err
        assert f"{src}:" in err
        assert "hint:" in err

    def test_missing_file_exits_2(self, tmp_path: Path) -> None:
        with pytest.raises(SystemExit) as exc_info:
            main(["visualize", str(tmp_path / "nope.js")])
        assert exc_info.value.code == 2

    def test_empty_file_exits_2(self, tmp_path: Path) -> None:
        src = tmp_path / "empty.js"
        src.write_text("")
        with pytest.raises(SystemExit) as exc_info:
            main(["visualize", str(src)])
        assert exc_info.value.code == 2

    def test_defect_exits_3(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        def _explode(*args: object, **kwargs: object) -> object:
            raise RuntimeError("boom")

        monkeypatch.setattr(
            "lumina.services.visualize_service.generate_visualization",
            _explode,
        )
        src = tmp_path / "ok.js"
        src.write_text("function a(){}")
        with pytest.raises(SystemExit) as exc_info:
            main(["visualize", str(src)])
        assert exc_info.value.code == 3
