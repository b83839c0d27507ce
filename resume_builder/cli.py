"""CLI - command line interface for Resume Builder."""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from pathlib import Path
from typing import List, Optional

from reportlab.pdfbase.ttfonts import TTFError
from rich.console import Console
from rich.logging import RichHandler
from rich.markdown import Markdown
from rich.markup import escape

from .ai_gateway import AIGateway
from .config import DEFAULT_CONFIG_PATH, AIConfig, load_raw_config
from .config_validator import Severity, has_errors, validate_config
from .contracts.runtime import AI_ACTIONS
from .domain.exporter import SUPPORTED_FORMATS, ExportError, export_resume, save_export
from .domain.resume import Resume
from .domain.resume_renderer import DEFAULT_FONTS, register_ttf_fonts
from .providers import create_provider

console = Console()


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="resume-builder",
        description="Resume Builder - export resumes and run AI resume actions",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        default=False,
        help="Verbose output (debug logging)",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    export_parser = subparsers.add_parser("export", help="Export a resume JSON file to pdf/txt/docx")
    export_parser.add_argument("resume_json", help="Path to a resume JSON file")
    export_parser.add_argument(
        "--format",
        "-f",
        dest="format",
        default="pdf",
        choices=SUPPORTED_FORMATS,
        help="Requested export format (default: pdf)",
    )
    export_parser.add_argument(
        "--output-dir",
        "-o",
        default=".",
        help="Directory to write the exported file into (default: current directory)",
    )
    export_parser.add_argument(
        "--font",
        default=None,
        help="TrueType font file for PDF text outside Latin-1 (e.g. DejaVuSans.ttf)",
    )
    export_parser.add_argument(
        "--bold-font",
        default=None,
        help="TrueType font file for PDF headings (default: same as --font)",
    )

    ai_parser = subparsers.add_parser("ai", help="Run one AI gateway action")
    ai_parser.add_argument("action", choices=AI_ACTIONS)
    ai_parser.add_argument("prompt", help="Prompt text, or a resume JSON file path for improve_resume")
    ai_parser.add_argument(
        "--config",
        "-c",
        default=DEFAULT_CONFIG_PATH,
        help="Path to configuration file",
    )

    serve_parser = subparsers.add_parser("serve", help="Run the web API server")
    serve_parser.add_argument("--host", default="127.0.0.1")
    serve_parser.add_argument("--port", type=int, default=8000)
    return parser


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=console, rich_tracebacks=verbose)],
    )


def run_export(args: argparse.Namespace) -> int:
    source = Path(args.resume_json)
    try:
        data = json.loads(source.read_text(encoding="utf-8"))
    except (OSError, ValueError) as exc:
        console.print(f"❌ Cannot read resume JSON {source}: {escape(str(exc))}", style="red")
        return 1

    try:
        fonts = register_ttf_fonts(args.font, args.bold_font) if args.font else DEFAULT_FONTS
    except (OSError, TTFError) as exc:
        console.print(f"❌ Cannot load font: {escape(str(exc))}", style="red")
        return 1

    try:
        result = export_resume(Resume.from_dict(data), args.format, fonts)
    except ExportError as exc:
        console.print(f"❌ Export failed: {escape(str(exc))}", style="red")
        return 1

    target = save_export(result, Path(args.output_dir))
    if result.downgraded:
        console.print(
            f"⚠️ Requested {result.requested_format}, produced {result.actual_format}",
            style="yellow",
        )
    console.print(f"✅ Wrote {result.actual_format} export to {target}", style="green")
    return 0


def _ai_prompt(action: str, prompt: str) -> str:
    """For improve_resume, a readable file path is replaced by its contents."""
    if action != "improve_resume":
        return prompt
    candidate = Path(prompt)
    if candidate.is_file():
        return candidate.read_text(encoding="utf-8")
    return prompt


def run_ai(args: argparse.Namespace) -> int:
    try:
        raw_config = load_raw_config(args.config)
    except FileNotFoundError:
        console.print(f"⚠️ Config file not found: {args.config}. Using the stub provider.", style="yellow")
        raw_config = {"provider": "stub"}

    issues = validate_config(raw_config)
    for issue in issues:
        icon = "❌" if issue.severity == Severity.ERROR else "⚠️"
        style = "red" if issue.severity == Severity.ERROR else "yellow"
        console.print(f"  {icon} {escape(f'[{issue.field}]')} {issue.message}", style=style)
    if has_errors(issues):
        console.print(
            "\n💡 Fix the errors above, then try again.\n"
            "   Copy config/config.yaml → config/config.local.yaml and set provider and api_key",
            style="dim",
        )
        return 1

    config = AIConfig.from_dict(raw_config)
    provider = create_provider(config.provider, api_key=config.api_key, model=config.model, api_base=config.api_base)
    gateway = AIGateway(provider, max_tokens=config.max_tokens, temperature=config.temperature)

    outcome = asyncio.run(gateway.invoke(prompt=_ai_prompt(args.action, args.prompt), action=args.action))
    if not outcome.success:
        console.print(f"❌ {escape(outcome.error or '')}", style="red")
        return 1
    if isinstance(outcome.result, str):
        console.print(Markdown(outcome.result))
    else:
        console.print_json(data=outcome.result)
    return 0


def run_serve(args: argparse.Namespace) -> int:
    from .web.app import main as serve

    serve(host=args.host, port=args.port)
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point."""
    from dotenv import load_dotenv

    # Load environment variables from .env file
    load_dotenv()

    args = build_parser().parse_args(argv)
    _configure_logging(args.verbose)

    handlers = {"export": run_export, "ai": run_ai, "serve": run_serve}
    return handlers[args.command](args)


if __name__ == "__main__":
    raise SystemExit(main())
