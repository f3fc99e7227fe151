from dataclasses import dataclass
from typing import Iterator, List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class _DocsModel(BaseModel):
    """Base for the subset of the Google Docs document resource we read."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


class TextStyle(_DocsModel):
    bold: bool = False
    italic: bool = False


class TextRun(_DocsModel):
    content: str = ""
    text_style: TextStyle = Field(default_factory=TextStyle)


class ParagraphElement(_DocsModel):
    # Google Docs omits zero-valued indices, hence the defaults.
    start_index: int = 0
    end_index: int = 0
    text_run: Optional[TextRun] = None

    @property
    def content(self) -> str:
        return self.text_run.content if self.text_run else ""

    @property
    def bold(self) -> bool:
        return bool(self.text_run and self.text_run.text_style.bold)

    @property
    def italic(self) -> bool:
        return bool(self.text_run and self.text_run.text_style.italic)


class Paragraph(_DocsModel):
    elements: List[ParagraphElement] = Field(default_factory=list)


class StructuralElement(_DocsModel):
    start_index: int = 0
    end_index: int = 0
    paragraph: Optional[Paragraph] = None


class Body(_DocsModel):
    content: List[StructuralElement] = Field(default_factory=list)


class Document(_DocsModel):
    document_id: str = ""
    title: str = ""
    body: Body = Field(default_factory=Body)

    def iter_text_elements(self) -> Iterator[ParagraphElement]:
        """Yields every paragraph element that carries a text run, in document order."""
        for elem in self.body.content:
            if elem.paragraph is None:
                continue
            for par in elem.paragraph.elements:
                if par.text_run is not None:
                    yield par


@dataclass(frozen=True)
class Char:
    index: int  # utf16 inclusive start index in the document
    size: int  # size in utf16 units
    content: str  # a single code point


@dataclass(frozen=True)
class Word:
    index: int
    size: int
    content: str

    @property
    def end(self) -> int:
        return self.index + self.size


class CommentDelimiter(BaseModel):
    """Start and end symbols of one comment syntax, e.g. ("/*", "*/")."""

    model_config = ConfigDict(frozen=True)

    start_symbol: str = Field(..., min_length=1)
    end_symbol: str = Field(..., min_length=1)


class FormatDirective(BaseModel):
    """
    Whether the code should be formatted (the directive was bolded), plus the
    utf16 span of the directive token so it can be un-bolded afterwards.
    """

    model_config = ConfigDict(frozen=True)

    bold: bool = False
    start_index: int = 0
    end_index: int = 0
