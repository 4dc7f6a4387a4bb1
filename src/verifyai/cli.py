"""CLI entry point: ``verifyai analyze`` and ``verifyai sample``."""

from __future__ import annotations

# Phase 1: singleton logging, before any transitive litellm imports
from verifyai.logging_config import setup_logging

setup_logging()

import argparse  # noqa: E402
import asyncio  # noqa: E402
import sys  # noqa: E402
from pathlib import Path  # noqa: E402

from verifyai import __version__  # noqa: E402
from verifyai.constants import AnalysisContext, ExportFormat  # noqa: E402
from verifyai.logging_config import (  # noqa: E402
    cleanup_third_party_handlers,
)

# Phase 2: Clear litellm's duplicate handlers after all imports
cleanup_third_party_handlers()


def main() -> None:
    """Main CLI entry point."""
    parser = _build_parser()
    args = parser.parse_args()

    if args.version:
        print(f"verifyai {__version__}")
        return

    if args.command == "analyze":
        _run_analyze(args)
    elif args.command == "sample":
        _run_sample(args)
    else:
        parser.print_help()


def _build_parser() -> argparse.ArgumentParser:
    """Build the argument parser."""
    parser = argparse.ArgumentParser(
        prog="verifyai",
        description=(
            "Forensic authorship analysis: "
            "estimates whether a text was written by a human or an AI."
        ),
    )
    parser.add_argument(
        "--version",
        action="store_true",
        help="Print version and exit",
    )

    sub = parser.add_subparsers(dest="command")

    analyze = sub.add_parser(
        "analyze",
        help="Analyze a text file ('-' reads stdin)",
    )
    analyze.add_argument(
        "input",
        type=str,
        help="Path to a UTF-8 text file, or '-' for stdin",
    )
    analyze.add_argument(
        "--context",
        "-c",
        choices=[c.value for c in AnalysisContext],
        default=AnalysisContext.GENERAL.value,
        help="Analysis context (default: GENERAL)",
    )
    _add_output_args(analyze)

    sample = sub.add_parser(
        "sample",
        help="Print the built-in sample report (no model call)",
    )
    _add_output_args(sample)

    return parser


def _add_output_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--format",
        "-f",
        choices=[f.value for f in ExportFormat],
        default=ExportFormat.MARKDOWN.value,
        help="Export format (default: markdown)",
    )
    parser.add_argument(
        "--output",
        "-o",
        default=None,
        help="Write to this file instead of stdout",
    )


def _read_input(source: str) -> str:
    if source == "-":
        return sys.stdin.read()
    path = Path(source)
    if not path.is_file():
        print(f"Error: {path} does not exist", file=sys.stderr)
        sys.exit(1)
    return path.read_text(encoding="utf-8")


def _run_analyze(args: argparse.Namespace) -> None:
    """Execute the analyze command."""
    from verifyai.analysis.generator import LiteLLMReportGenerator
    from verifyai.analysis.pipeline import analyze
    from verifyai.analysis.schemas import AnalysisRequest
    from verifyai.config import Settings
    from verifyai.export import export_report
    from verifyai.resilience.errors import (
        InputRejectedError,
        ModelCallError,
    )
    from verifyai.services.analysis_service import validate_text

    text = _read_input(args.input)
    try:
        validate_text(text)
    except InputRejectedError as exc:
        print(f"Error: {exc.user_message}", file=sys.stderr)
        sys.exit(1)

    generator = LiteLLMReportGenerator(Settings())
    request = AnalysisRequest(
        text=text, context=AnalysisContext(args.context)
    )
    try:
        resolved = asyncio.run(analyze(request, generator))
    except ModelCallError as exc:
        print(f"Error: {exc.user_message}", file=sys.stderr)
        sys.exit(2)

    if resolved.used_fallback:
        print(
            "Warning: the model response could not be parsed; "
            "showing a fallback report.",
            file=sys.stderr,
        )
    _write_output(
        export_report(resolved.report, text, args.format), args.output
    )


def _run_sample(args: argparse.Namespace) -> None:
    """Execute the sample command."""
    from verifyai.analysis.sample import SAMPLE_TEXT, sample_report
    from verifyai.export import export_report

    _write_output(
        export_report(sample_report(), SAMPLE_TEXT, args.format),
        args.output,
    )


def _write_output(content: str, output: str | None) -> None:
    """Write rendered content to a file, or stdout when unset."""
    if output is None:
        print(content)
        return
    path = Path(output)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    print(f"Output: {path}")
