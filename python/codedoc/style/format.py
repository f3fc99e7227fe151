import subprocess
from typing import Callable, Dict, List, Mapping, Optional, Sequence

import structlog

from codedoc.errors import FormatError

logger = structlog.get_logger(__name__)

# FormatFunc takes a program as text and returns the formatted program,
# raising FormatError if it could not be formatted (most likely invalid code).
FormatFunc = Callable[[str], str]

DEFAULT_FORMATTERS: Dict[str, List[str]] = {
    "go": ["gofmt"],
    "python": ["black", "--quiet", "-"],
    "javascript": ["prettier", "--stdin-filepath", "code.js"],
    "java": ["google-java-format", "-"],
}


def run_formatter(command: Sequence[str], text: str, timeout: float = 10.0) -> str:
    """
    Pipes `text` through an external formatter command and returns its STDOUT.
    A non-zero exit raises FormatError carrying the command's STDERR.
    """
    if not command:
        raise FormatError("Empty formatter command")
    try:
        proc = subprocess.run(
            list(command),
            input=text,
            capture_output=True,
            text=True,
            encoding="utf-8",
            timeout=timeout,
            check=False,
        )
    except (OSError, subprocess.TimeoutExpired) as e:
        raise FormatError(f"Failed to run `{command[0]}`: {e}") from e

    if proc.returncode != 0:
        raise FormatError(f"`{' '.join(command)}` exited with {proc.returncode} - {proc.stderr.strip()}")

    return proc.stdout


def get_formatter(language: str, commands: Optional[Mapping[str, Sequence[str]]] = None) -> Optional[FormatFunc]:
    """Returns a FormatFunc for the language, or None if no formatter is configured."""
    table = DEFAULT_FORMATTERS if commands is None else commands
    command = table.get(language.lower())
    if not command:
        logger.debug("No formatter configured", language=language)
        return None
    return lambda text: run_formatter(command, text)
