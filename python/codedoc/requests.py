"""
Edit descriptors handed to an edit sink.

The shapes follow the Google Docs `documents.batchUpdate` request resources so
that a batch can be submitted to the API unchanged. Requests are applied
sequentially: every offset is expressed in the coordinates left behind by the
requests before it.
"""

from typing import List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict

from codedoc.style.colors import Color


class Range(BaseModel):
    model_config = ConfigDict(frozen=True)

    start_index: int
    end_index: int
    segment_id: Optional[str] = None

    def to_api(self) -> dict:
        api = {"startIndex": self.start_index, "endIndex": self.end_index}
        if self.segment_id:
            api["segmentId"] = self.segment_id
        return api


class DeleteContentRange(BaseModel):
    kind: Literal["delete"] = "delete"
    range: Range

    def to_api(self) -> dict:
        return {"deleteContentRange": {"range": self.range.to_api()}}


class InsertText(BaseModel):
    kind: Literal["insert"] = "insert"
    text: str
    index: int
    segment_id: Optional[str] = None

    def to_api(self) -> dict:
        location = {"index": self.index}
        if self.segment_id:
            location["segmentId"] = self.segment_id
        return {"insertText": {"text": self.text, "location": location}}


class UpdateTextStyle(BaseModel):
    kind: Literal["style"] = "style"
    range: Range
    foreground_color: Optional[Color] = None
    background_color: Optional[Color] = None
    font_family: Optional[str] = None
    font_size: Optional[float] = None
    bold: Optional[bool] = None
    # an empty backgroundColor is transparent in the Docs API
    clear_background: bool = False

    def to_api(self) -> dict:
        style: dict = {}
        fields: List[str] = []
        if self.foreground_color is not None:
            style["foregroundColor"] = self.foreground_color.to_api()
            fields.append("foregroundColor")
        if self.background_color is not None:
            style["backgroundColor"] = self.background_color.to_api()
            fields.append("backgroundColor")
        elif self.clear_background:
            style["backgroundColor"] = {}
            fields.append("backgroundColor")
        if self.font_family is not None:
            style["weightedFontFamily"] = {"fontFamily": self.font_family}
            fields.append("weightedFontFamily")
        if self.font_size is not None:
            style["fontSize"] = {"magnitude": self.font_size, "unit": "PT"}
            fields.append("fontSize")
        if self.bold is not None:
            style["bold"] = self.bold
            fields.append("bold")
        return {
            "updateTextStyle": {
                "range": self.range.to_api(),
                "textStyle": style,
                "fields": ",".join(fields),
            }
        }


class UpdateDocumentStyle(BaseModel):
    kind: Literal["document"] = "document"
    background_color: Color

    def to_api(self) -> dict:
        return {
            "updateDocumentStyle": {
                "documentStyle": {"background": {"color": self.background_color.to_api()}},
                "fields": "background",
            }
        }


Request = Union[DeleteContentRange, InsertText, UpdateTextStyle, UpdateDocumentStyle]


def get_range(start_index: int, end_index: int, segment_id: Optional[str] = None) -> Range:
    return Range(start_index=start_index, end_index=end_index, segment_id=segment_id)


def delete(r: Range) -> DeleteContentRange:
    return DeleteContentRange(range=r)


def insert(text: str, index: int, segment_id: Optional[str] = None) -> InsertText:
    return InsertText(text=text, index=index, segment_id=segment_id)


def update_foreground_color(color: Color, r: Range) -> UpdateTextStyle:
    return UpdateTextStyle(range=r, foreground_color=color)


def update_background_color(color: Color, r: Range) -> UpdateTextStyle:
    return UpdateTextStyle(range=r, background_color=color)


def clear_background_color(r: Range) -> UpdateTextStyle:
    return UpdateTextStyle(range=r, clear_background=True)


def update_document_background(color: Color) -> UpdateDocumentStyle:
    return UpdateDocumentStyle(background_color=color)


def update_font(font: str, size: float, r: Range) -> UpdateTextStyle:
    return UpdateTextStyle(range=r, font_family=font, font_size=size)


def update_bold(bold: bool, r: Range) -> UpdateTextStyle:
    return UpdateTextStyle(range=r, bold=bold)


def to_batch_update(requests: List[Request]) -> dict:
    """Serializes requests into a `documents.batchUpdate` request body."""
    return {"requests": [r.to_api() for r in requests]}
