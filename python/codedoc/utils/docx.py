"""
Low-level utilities for reading and manipulating DOCX run structures.

Both the .docx document source and the .docx editor walk the body through
`build_span_map`, so the utf16 offsets one reports are the offsets the other
resolves.
"""

from copy import deepcopy
from dataclasses import dataclass
from typing import Iterator, List, Optional, Tuple

import structlog
from docx.document import Document as DocumentObject
from docx.oxml import OxmlElement
from docx.oxml.ns import qn
from docx.text.paragraph import Paragraph
from docx.text.run import Run

from codedoc.utils.utf16 import codepoint_index_from_utf16, text_width16

logger = structlog.get_logger(__name__)

# Google Docs numbers body content from 1; index 0 is the leading section break.
BODY_START_INDEX = 1

# Children of w:rPr that must follow w:shd, in schema order.
_SHD_SUCCESSORS = (
    "w:fitText",
    "w:vertAlign",
    "w:rtl",
    "w:cs",
    "w:em",
    "w:lang",
    "w:eastAsianLayout",
    "w:specVanish",
    "w:oMath",
)


@dataclass
class RunSpan:
    start: int  # utf16
    end: int  # utf16
    text: str
    run: Optional[Run]  # None for the paragraph's trailing newline
    paragraph: Paragraph


def create_element(name: str):
    return OxmlElement(name)


def create_attribute(element, name: str, value: str):
    element.set(qn(name), value)


def iter_body_paragraphs(doc: DocumentObject) -> Iterator[Paragraph]:
    """
    Yields the top-level body paragraphs in document order.
    Tables, headers and footers are not part of the addressable text.
    """
    for child in doc.element.body.iterchildren():
        if child.tag == qn("w:p"):
            yield Paragraph(child, doc)


def build_span_map(doc: DocumentObject, start_index: int = BODY_START_INDEX) -> List[RunSpan]:
    """
    Maps every non-empty run of the body, plus one virtual newline per
    paragraph, to its utf16 range.
    """
    spans: List[RunSpan] = []
    current = start_index

    for paragraph in iter_body_paragraphs(doc):
        for run in paragraph.runs:
            text = run.text
            if not text:
                continue
            size = text_width16(text)
            spans.append(RunSpan(current, current + size, text, run, paragraph))
            current += size

        spans.append(RunSpan(current, current + 1, "\n", None, paragraph))
        current += 1

    return spans


def split_run_at_index(run: Run, split_index: int) -> Tuple[Run, Run]:
    """
    Splits a run at a code-point index. The left part stays in place; the right
    part is a copy of the run (same formatting) inserted right after it.
    """
    text = run.text
    left_text = text[:split_index]
    right_text = text[split_index:]

    new_r_element = deepcopy(run._r)
    run.text = left_text
    run._r.addnext(new_r_element)

    new_run = Run(new_r_element, run._parent)
    new_run.text = right_text
    return run, new_run


def split_run_at_utf16(run: Run, units: int) -> Tuple[Run, Run]:
    return split_run_at_index(run, codepoint_index_from_utf16(run.text, units))


def make_run(text: str, paragraph: Paragraph, style_source: Optional[Run] = None) -> Run:
    """Creates a detached run, inheriting the formatting of `style_source`."""
    r = create_element("w:r")
    if style_source is not None and style_source._r.rPr is not None:
        r.append(deepcopy(style_source._r.rPr))
    run = Run(r, paragraph)
    run.text = text
    return run


def set_run_shading(run: Run, fill_hex: str):
    """Sets a solid background fill on a run (w:shd), replacing any previous one."""
    rPr = run._r.get_or_add_rPr()
    for old in rPr.findall(qn("w:shd")):
        rPr.remove(old)

    shd = create_element("w:shd")
    create_attribute(shd, "w:val", "clear")
    create_attribute(shd, "w:color", "auto")
    create_attribute(shd, "w:fill", fill_hex)

    successor = next((child for child in rPr if child.tag in {qn(t) for t in _SHD_SUCCESSORS}), None)
    if successor is not None:
        successor.addprevious(shd)
    else:
        rPr.append(shd)


def clear_run_shading(run: Run):
    rPr = run._r.rPr
    if rPr is None:
        return
    for old in rPr.findall(qn("w:shd")):
        rPr.remove(old)


def set_document_background(doc: DocumentObject, fill_hex: str):
    """Sets the page colour (w:background, first child of w:document)."""
    root = doc.element
    for old in root.findall(qn("w:background")):
        root.remove(old)
    background = create_element("w:background")
    create_attribute(background, "w:color", fill_hex)
    root.insert(0, background)


def insert_paragraph_after(paragraph: Paragraph) -> Paragraph:
    """Inserts an empty paragraph after `paragraph`, copying its paragraph properties."""
    new_p = create_element("w:p")
    if paragraph._p.pPr is not None:
        new_p.append(deepcopy(paragraph._p.pPr))
    paragraph._p.addnext(new_p)
    return Paragraph(new_p, paragraph._parent)
