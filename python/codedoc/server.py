import json
import logging
import sys
from pathlib import Path
from typing import Optional

import structlog
from mcp.server.fastmcp import FastMCP

from codedoc.config import load_settings
from codedoc.engine import HighlightEngine
from codedoc.parser.extract import get_code_instances
from codedoc.sinks import DocxEditSink, JsonBatchSink
from codedoc.sources import get_source

# --- LOGGING CONFIGURATION ---
# MCP communicates over stdio.
# CRITICAL: All logs must go to stderr. Any print to stdout will break the JSON-RPC protocol.
logging.basicConfig(stream=sys.stderr, level=logging.INFO, force=True)

structlog.configure(
    processors=[
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.JSONRenderer(),
    ],
    logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
)

mcp = FastMCP("codedoc Highlighting Service")


def _check_file(path: str) -> Path:
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"File not found: {path}")
    return p


@mcp.tool()
def list_code_instances(file_path: str) -> str:
    """
    Lists the <code> instances of a document as JSON: body text, utf16 range,
    resolved language/theme/font settings and any rejected directives.

    Args:
        file_path: Path to a .docx file or a Google Docs `documents.get` JSON export.
    """
    try:
        settings = load_settings()
        document = get_source(_check_file(file_path)).fetch()
        instances = get_code_instances(document, settings.defaults)
        return json.dumps([i.describe() for i in instances], indent=2, ensure_ascii=False)
    except Exception as e:
        return f"Error reading document: {str(e)}"


@mcp.tool()
def highlight_document(file_path: str, output_path: Optional[str] = None, apply: bool = False) -> str:
    """
    Runs one highlight pass over a document.

    Args:
        file_path: Path to a .docx file or a Google Docs JSON export.
        output_path: Where to write the result. Without `apply` this is the batch JSON
                     (default: alongside the input as <name>.batch.json). With `apply`
                     this is the output .docx (default: overwrite the input).
        apply: If True, apply the requests to the .docx directly.
    """
    try:
        path = _check_file(file_path)
        engine = HighlightEngine(load_settings())
        reqs = engine.process(get_source(path).fetch())

        if apply:
            if path.suffix.lower() != ".docx":
                return "Error: apply=True needs a .docx input."
            DocxEditSink(path, output_path).submit(reqs)
            return f"Applied {len(reqs)} requests. Saved to {output_path or file_path}"

        target = output_path or str(path.with_name(f"{path.stem}.batch.json"))
        JsonBatchSink(target).submit(reqs)
        return f"Wrote {len(reqs)} requests to {target}"
    except Exception as e:
        return f"Error highlighting document: {str(e)}"


def main():
    mcp.run()


if __name__ == "__main__":
    main()
