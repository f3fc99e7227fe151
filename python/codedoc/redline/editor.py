from io import BytesIO
from typing import List, Optional, Tuple

import structlog
from docx.document import Document as DocumentObject
from docx.oxml.ns import qn
from docx.shared import Pt, RGBColor
from docx.text.paragraph import Paragraph
from docx.text.run import Run

from codedoc.errors import SubmissionError
from codedoc.requests import DeleteContentRange, InsertText, Request, UpdateDocumentStyle, UpdateTextStyle
from codedoc.utils.docx import (
    BODY_START_INDEX,
    RunSpan,
    build_span_map,
    clear_run_shading,
    insert_paragraph_after,
    make_run,
    set_document_background,
    set_run_shading,
    split_run_at_utf16,
)

logger = structlog.get_logger(__name__)


class DocxEditor:
    """
    Applies edit requests to a python-docx document, resolving utf16 offsets
    through the same span map the .docx document source reports them with.

    Requests are applied in order; the span map is rebuilt after every change
    to the XML so each request sees the offsets left by the previous one.
    """

    def __init__(self, doc: DocumentObject, start_index: int = BODY_START_INDEX):
        self.doc = doc
        self.start_index = start_index
        self.spans: List[RunSpan] = []
        self._build_map()

    def _build_map(self):
        self.spans = build_span_map(self.doc, self.start_index)

    @property
    def end_index(self) -> int:
        return self.spans[-1].end if self.spans else self.start_index

    @property
    def text(self) -> str:
        return "".join(s.text for s in self.spans)

    def apply(self, requests: List[Request]) -> int:
        """Applies every request, raising SubmissionError on the first that cannot be applied."""
        for i, req in enumerate(requests):
            try:
                if isinstance(req, DeleteContentRange):
                    self._delete(req.range.start_index, req.range.end_index)
                elif isinstance(req, InsertText):
                    self._insert(req.text, req.index)
                elif isinstance(req, UpdateTextStyle):
                    self._update_style(req)
                elif isinstance(req, UpdateDocumentStyle):
                    set_document_background(self.doc, req.background_color.to_hex())
                else:
                    raise SubmissionError(f"Unsupported request type: {type(req).__name__}")
            except (SubmissionError, ValueError, TypeError, OverflowError) as e:
                raise SubmissionError(f"Request {i} ({req.kind}) failed: {e}") from e
        logger.info("Applied requests to docx", count=len(requests))
        return len(requests)

    def save_to_stream(self) -> BytesIO:
        output = BytesIO()
        self.doc.save(output)
        output.seek(0)
        return output

    # --- Offset resolution ---

    def _check_range(self, start: int, end: int):
        if start < self.start_index or end > self.end_index or start > end:
            raise SubmissionError(f"Range [{start}, {end}) outside document [{self.start_index}, {self.end_index})")

    def _split_at(self, index: int):
        """Ensures no run straddles `index`."""
        for span in self.spans:
            if span.run is not None and span.start < index < span.end:
                split_run_at_utf16(span.run, index - span.start)
                self._build_map()
                return

    def _isolate(self, start: int, end: int) -> List[RunSpan]:
        self._split_at(start)
        self._split_at(end)
        return [s for s in self.spans if s.start >= start and s.end <= end]

    # --- Operations ---

    def _delete(self, start: int, end: int):
        self._check_range(start, end)
        if start == end:
            return
        affected = self._isolate(start, end)

        # Work backwards so that merged paragraphs have already lost their deleted runs.
        for span in reversed(affected):
            if span.run is not None:
                span.paragraph._p.remove(span.run._r)
            else:
                self._merge_with_next(span.paragraph)
        self._build_map()

    def _merge_with_next(self, paragraph: Paragraph):
        next_p = paragraph._p.getnext()
        if next_p is None or next_p.tag != qn("w:p"):
            raise SubmissionError("Cannot delete the last paragraph break before a non-paragraph block")
        for child in list(next_p):
            if child.tag == qn("w:pPr"):
                continue
            paragraph._p.append(child)
        next_p.getparent().remove(next_p)

    def _insertion_point(self, index: int) -> Tuple[Paragraph, Optional[object], Optional[Run]]:
        """
        Returns (paragraph, element to insert after, run to copy formatting from).
        An `after` of None means the start of the paragraph's content.
        """
        preceding = [s for s in self.spans if s.run is not None and s.end == index]
        if preceding:
            span = preceding[-1]
            return span.paragraph, span.run._r, span.run

        following = [s for s in self.spans if s.start == index]
        if following:
            span = following[0]
            if span.run is not None:
                return span.paragraph, span.run._r.getprevious(), span.run
            # empty paragraph: only its newline sits at `index`
            return span.paragraph, span.paragraph._p.pPr, None

        raise SubmissionError(f"No insertion point at index {index}")

    def _insert(self, text: str, index: int):
        self._check_range(index, index)
        if not text:
            return
        self._split_at(index)
        paragraph, after, style_source = self._insertion_point(index)

        lines = text.split("\n")
        after = self._place_run(lines[0], paragraph, after, style_source)

        if len(lines) > 1:
            # everything after the insertion point moves to the last new paragraph
            if after is None:
                tail = [c for c in paragraph._p if c.tag != qn("w:pPr")]
            else:
                tail = list(after.itersiblings())

            current = paragraph
            for line in lines[1:]:
                current = insert_paragraph_after(current)
                self._place_run(line, current, current._p.pPr, style_source)
            for child in tail:
                current._p.append(child)

        self._build_map()

    def _place_run(self, text: str, paragraph: Paragraph, after, style_source: Optional[Run]):
        """Inserts a run holding `text` after `after`. Returns the new insertion anchor."""
        if not text:
            return after
        run = make_run(text, paragraph, style_source)
        if after is None:
            paragraph._p.insert(0, run._r)
        else:
            after.addnext(run._r)
        return run._r

    def _update_style(self, req: UpdateTextStyle):
        start, end = req.range.start_index, req.range.end_index
        self._check_range(start, end)
        for span in self._isolate(start, end):
            if span.run is None:
                continue
            font = span.run.font
            if req.foreground_color is not None:
                font.color.rgb = RGBColor(*req.foreground_color.to_rgb())
            if req.background_color is not None:
                set_run_shading(span.run, req.background_color.to_hex())
            elif req.clear_background:
                clear_run_shading(span.run)
            if req.font_family is not None:
                font.name = req.font_family
            if req.font_size is not None:
                font.size = Pt(req.font_size)
            if req.bold is not None:
                span.run.bold = req.bold
