"""
Edit sinks receive the ordered batch of requests computed for one snapshot.
A batch is applied whole or not at all.
"""

import json
from pathlib import Path
from typing import List, Optional, Protocol, Union

import structlog
from docx import Document as load_docx

from codedoc.errors import SubmissionError
from codedoc.redline.editor import DocxEditor
from codedoc.requests import Request, to_batch_update

logger = structlog.get_logger(__name__)


class EditSink(Protocol):
    def submit(self, requests: List[Request]) -> None: ...


class JsonBatchSink:
    """Writes the batch as a `documents.batchUpdate` request body."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def submit(self, requests: List[Request]) -> None:
        tmp = self.path.with_name(self.path.name + ".tmp")
        try:
            with open(tmp, "w", encoding="utf-8") as f:
                json.dump(to_batch_update(requests), f, indent=2)
            tmp.replace(self.path)
        except OSError as e:
            raise SubmissionError(f"Could not write batch to {self.path}: {e}") from e
        logger.info("Wrote request batch", path=str(self.path), count=len(requests))


class DocxEditSink:
    """Applies the batch to a .docx file, saving only if every request applied."""

    def __init__(self, path: Union[str, Path], output_path: Optional[Union[str, Path]] = None):
        self.path = Path(path)
        self.output_path = Path(output_path) if output_path else self.path

    def submit(self, requests: List[Request]) -> None:
        try:
            doc = load_docx(str(self.path))
        except Exception as e:
            raise SubmissionError(f"Could not open docx {self.path}: {e}") from e

        editor = DocxEditor(doc)
        editor.apply(requests)

        try:
            with open(self.output_path, "wb") as f:
                f.write(editor.save_to_stream().getvalue())
        except OSError as e:
            raise SubmissionError(f"Could not save docx {self.output_path}: {e}") from e
        logger.info("Saved edited docx", path=str(self.output_path), count=len(requests))
