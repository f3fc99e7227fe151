import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Any, Dict

import structlog
from pydantic import ValidationError

from codedoc import __version__
from codedoc.config import Settings, load_settings
from codedoc.engine import HighlightEngine
from codedoc.errors import CodedocError
from codedoc.parser.extract import get_code_instances
from codedoc.requests import to_batch_update
from codedoc.runner import run
from codedoc.sinks import DocxEditSink, EditSink, JsonBatchSink
from codedoc.sources import get_source
from codedoc.style.languages import language_names
from codedoc.style.themes import theme_names


def configure_logging(level: str = "INFO"):
    """Console logging to stderr so stdout carries only command output."""
    numeric = logging.getLevelName(level.upper())
    if not isinstance(numeric, int):
        numeric = logging.INFO
    structlog.configure(
        processors=[
            structlog.processors.add_log_level,
            structlog.processors.TimeStamper(fmt="%H:%M:%S"),
            structlog.dev.ConsoleRenderer(colors=False),
        ],
        wrapper_class=structlog.make_filtering_bound_logger(numeric),
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
    )


def _load(args: argparse.Namespace) -> Settings:
    defaults: Dict[str, Any] = {k: v for k, v in {"language": args.language, "theme": args.theme}.items() if v}
    overrides: Dict[str, Any] = {"log_level": "DEBUG" if args.verbose else None}
    if defaults:
        overrides["defaults"] = defaults
    if getattr(args, "interval", None) is not None:
        overrides["interval_seconds"] = args.interval

    try:
        settings = load_settings(args.config, overrides)
    except (OSError, ValueError, ValidationError) as e:
        print(f"Error loading configuration: {e}", file=sys.stderr)
        sys.exit(2)
    configure_logging(settings.log_level)
    return settings


def _check_exists(path: Path):
    if not path.exists():
        print(f"Error: File not found: {path}", file=sys.stderr)
        sys.exit(1)


def handle_instances(args):
    settings = _load(args)
    _check_exists(args.input)
    try:
        document = get_source(args.input).fetch()
    except CodedocError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)

    instances = get_code_instances(document, settings.defaults)
    print(json.dumps([i.describe() for i in instances], indent=2, ensure_ascii=False))
    print(f"Found {len(instances)} code instances.", file=sys.stderr)


def handle_highlight(args):
    settings = _load(args)
    _check_exists(args.input)
    engine = HighlightEngine(settings)

    try:
        reqs = engine.process(get_source(args.input).fetch())
        if args.apply:
            if args.input.suffix.lower() != ".docx":
                print("Error: --apply needs a .docx input", file=sys.stderr)
                sys.exit(2)
            DocxEditSink(args.input, args.output).submit(reqs)
            print(f"✅ Applied {len(reqs)} requests to {args.output or args.input}", file=sys.stderr)
        elif args.output:
            JsonBatchSink(args.output).submit(reqs)
            print(f"✅ Saved {len(reqs)} requests to {args.output}", file=sys.stderr)
        else:
            print(json.dumps(to_batch_update(reqs), indent=2, ensure_ascii=False))
    except CodedocError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)


def handle_watch(args):
    settings = _load(args)
    _check_exists(args.input)

    sink: EditSink
    if args.output and args.output.suffix.lower() == ".json":
        sink = JsonBatchSink(args.output)
    elif args.input.suffix.lower() == ".docx":
        sink = DocxEditSink(args.input, args.output)
    else:
        print("Error: watching a JSON document needs -o <batch.json>", file=sys.stderr)
        sys.exit(2)

    print(f"👀 Watching {args.input} every {settings.interval_seconds}s (Ctrl+C to stop)", file=sys.stderr)
    try:
        run(get_source(args.input), sink, HighlightEngine(settings), settings.interval_seconds, args.iterations)
    except KeyboardInterrupt:
        print("Stopped.", file=sys.stderr)


def main(argv=None):
    parser = argparse.ArgumentParser(prog="codedoc", description="codedoc: syntax highlighting for code in documents")
    parser.add_argument("-v", "--version", action="version", version=f"%(prog)s {__version__}")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-c", "--config", type=Path, help="JSON config file (default: $CODEDOC_CONFIG)")
    common.add_argument(
        "--language",
        help=f"Default language for instances without #lang (one of: {', '.join(language_names())})",
    )
    common.add_argument(
        "--theme",
        help=f"Default theme for instances without #theme (one of: {', '.join(theme_names())})",
    )
    common.add_argument("--verbose", action="store_true", help="Debug logging on stderr")

    subparsers = parser.add_subparsers(dest="command", required=True, help="Subcommands")

    p_instances = subparsers.add_parser("instances", parents=[common], help="List the code instances of a document")
    p_instances.add_argument("input", type=Path, help="Input .docx or Google Docs JSON file")
    p_instances.set_defaults(func=handle_instances)

    p_highlight = subparsers.add_parser("highlight", parents=[common], help="Run one highlight pass")
    p_highlight.add_argument("input", type=Path, help="Input .docx or Google Docs JSON file")
    p_highlight.add_argument("-o", "--output", type=Path, help="Batch JSON path, or output .docx with --apply")
    p_highlight.add_argument("--apply", action="store_true", help="Apply the requests to the .docx input")
    p_highlight.set_defaults(func=handle_highlight)

    p_watch = subparsers.add_parser("watch", parents=[common], help="Highlight repeatedly until interrupted")
    p_watch.add_argument("input", type=Path, help="Input .docx or Google Docs JSON file")
    p_watch.add_argument("-o", "--output", type=Path, help="Batch JSON path, or output .docx")
    p_watch.add_argument("--interval", type=float, help="Seconds between passes")
    p_watch.add_argument("--iterations", type=int, help="Stop after this many passes")
    p_watch.set_defaults(func=handle_watch)

    args = parser.parse_args(argv)
    args.func(args)


if __name__ == "__main__":
    main()
