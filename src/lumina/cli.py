"""CLI entry point: ``lumina visualize`` and ``lumina serve``."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from lumina import __version__
from lumina.api.schemas import VisualizeResponse
from lumina.config import Settings
from lumina.logging_config import setup_logging
from lumina.resilience.errors import AnalysisDefectError, SourceRejectedError

EXIT_PARSE_FAILED = 1
EXIT_BAD_INPUT = 2
EXIT_DEFECT = 3


def main(argv: list[str] | None = None) -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    if args.version:
        print(f"lumina {__version__}")
        return

    if args.command == "visualize":
        _run_visualize(args)
    elif args.command == "serve":
        _run_serve(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="lumina",
        description=(
            "Code structure visualizer: "
            "turns source text into call graphs and diagrams."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    visualize = sub.add_parser(
        "visualize",
        help="Visualize one source file",
    )
    visualize.add_argument(
        "source",
        type=str,
        help="Path to a source file, or - for stdin",
    )
    visualize.add_argument(
        "--language",
        "-l",
        choices=["javascript", "typescript", "python"],
        default="javascript",
        help="Language tag (default: javascript)",
    )
    visualize.add_argument(
        "--format",
        "-f",
        choices=["json", "mermaid", "summary"],
        default="summary",
        help="Output format (default: summary)",
    )

    serve = sub.add_parser(
        "serve",
        help="Start the HTTP API",
    )
    serve.add_argument(
        "--host",
        default=None,
        help="Bind address (default: from settings)",
    )
    serve.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port (default: from settings)",
    )

    return parser


def _run_visualize(args: argparse.Namespace) -> None:
    """Execute the visualize command."""
    from lumina.analysis.static.parse_cache import ParseCache
    from lumina.services.visualize_service import visualize_source

    settings = Settings()
    setup_logging(settings.log_level)

    try:
        source = _read_source(args.source)
    except (OSError, UnicodeDecodeError) as exc:
        print(f"Error: cannot read {args.source}: {exc}", file=sys.stderr)
        sys.exit(EXIT_BAD_INPUT)

    try:
        outcome = visualize_source(
            source,
            language=args.language,
            cache=ParseCache(settings.parse_cache_capacity),
            max_entities=settings.diagram_max_entities,
            max_bytes=settings.max_source_bytes,
        )
    except SourceRejectedError as exc:
        print(f"Error: {exc}", file=sys.stderr)
        sys.exit(EXIT_BAD_INPUT)
    except AnalysisDefectError as exc:
        print(f"Internal error: {exc}", file=sys.stderr)
        sys.exit(EXIT_DEFECT)

    response = outcome.response
    if response.errors:
        for err in response.errors:
            print(
                f"{args.source}:{err.line}:{err.column}: "
                f"{err.message}",
                file=sys.stderr,
            )
            if err.offending_line_text:
                print(f"    {err.offending_line_text}", file=sys.stderr)
            print(f"    hint: {err.suggestion}", file=sys.stderr)
        sys.exit(EXIT_PARSE_FAILED)

    print(_format_response(response, args.format))


def _read_source(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    return Path(source).read_text(encoding="utf-8")


def _format_response(response: VisualizeResponse, fmt: str) -> str:
    """Render a successful response in the requested output format."""
    if fmt == "json":
        return response.model_dump_json(by_alias=True, indent=2)
    if fmt == "mermaid":
        return response.diagram_text

    counts: dict[str, int] = {}
    for node in response.nodes:
        counts[node.type] = counts.get(node.type, 0) + 1
    lines = [
        f"functions: {counts.get('function', 0)}",
        f"variables: {counts.get('variable', 0)}",
        f"classes:   {counts.get('class', 0)}",
        f"calls:     {len(response.edges)}",
    ]
    for cycle in response.cycles:
        lines.append(f"cycle: {' -> '.join([*cycle, cycle[0]])}")
    return "\n".join(lines)


def _run_serve(args: argparse.Namespace) -> None:
    """Run the API with uvicorn."""
    import uvicorn

    settings = Settings()
    uvicorn.run(
        "lumina.main:app",
        host=args.host or settings.host,
        port=args.port or settings.port,
        log_level=settings.log_level.lower(),
    )


if __name__ == "__main__":
    main()
