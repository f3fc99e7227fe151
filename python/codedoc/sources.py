"""
Document sources produce a fresh Document snapshot for each pass.
"""

import json
from pathlib import Path
from typing import List, Protocol, Union

import structlog
from docx import Document as load_docx
from pydantic import ValidationError

from codedoc.errors import FetchError
from codedoc.models import Body, Document, Paragraph, ParagraphElement, StructuralElement, TextRun, TextStyle
from codedoc.utils.docx import BODY_START_INDEX, build_span_map

logger = structlog.get_logger(__name__)


class DocumentSource(Protocol):
    def fetch(self) -> Document: ...


class JsonDocumentSource:
    """Reads a document resource as returned by the Google Docs `documents.get` call."""

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def fetch(self) -> Document:
        try:
            with open(self.path, "r", encoding="utf-8") as f:
                data = json.load(f)
            return Document.model_validate(data)
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise FetchError(f"Could not read document {self.path}: {e}") from e


class DocxDocumentSource:
    """
    Reads a local .docx file into the Document model. Offsets are synthesized
    the way Google Docs reports them: body text starts at index 1 and each
    paragraph's newline belongs to its last text run.
    """

    def __init__(self, path: Union[str, Path]):
        self.path = Path(path)

    def fetch(self) -> Document:
        try:
            doc = load_docx(str(self.path))
        except Exception as e:
            raise FetchError(f"Could not open docx {self.path}: {e}") from e
        return document_from_docx(doc, document_id=self.path.stem)


def document_from_docx(doc, document_id: str = "") -> Document:
    content: List[StructuralElement] = []
    elements: List[ParagraphElement] = []
    paragraph_start = BODY_START_INDEX

    for span in build_span_map(doc):
        if span.run is not None:
            style = TextStyle(bold=bool(span.run.bold), italic=bool(span.run.italic))
            elements.append(
                ParagraphElement(start_index=span.start, end_index=span.end, text_run=TextRun(content=span.text, text_style=style))
            )
            continue

        # paragraph newline: fold into the last run, or stand alone for an empty paragraph
        if elements:
            last = elements[-1]
            elements[-1] = last.model_copy(
                update={
                    "end_index": span.end,
                    "text_run": last.text_run.model_copy(update={"content": last.content + "\n"}),
                }
            )
        else:
            elements.append(ParagraphElement(start_index=span.start, end_index=span.end, text_run=TextRun(content="\n")))

        content.append(
            StructuralElement(start_index=paragraph_start, end_index=span.end, paragraph=Paragraph(elements=elements))
        )
        elements = []
        paragraph_start = span.end

    logger.debug("Loaded docx document", paragraphs=len(content))
    return Document(document_id=document_id, body=Body(content=content))


def get_source(path: Union[str, Path]) -> DocumentSource:
    path = Path(path)
    if path.suffix.lower() == ".docx":
        return DocxDocumentSource(path)
    return JsonDocumentSource(path)
