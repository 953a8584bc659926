from typing import Annotated, List, Literal, Union
from pydantic import BaseModel, Field

from ..domain.text import Blank, Bold, Code, Heading, InlineSpan, ListItem, Paragraph, TextBlock

class RenderIn(BaseModel):
    text: str = ""

class SpanOut(BaseModel):
    type: Literal["text", "bold", "code"]
    text: str

class HeadingOut(BaseModel):
    type: Literal["heading"] = "heading"
    text: str

class ListItemOut(BaseModel):
    type: Literal["list_item"] = "list_item"
    spans: List[SpanOut]

class ParagraphOut(BaseModel):
    type: Literal["paragraph"] = "paragraph"
    spans: List[SpanOut]

class BlankOut(BaseModel):
    type: Literal["blank"] = "blank"

BlockOut = Annotated[
    Union[HeadingOut, ListItemOut, ParagraphOut, BlankOut],
    Field(discriminator="type"),
]

class RenderOut(BaseModel):
    blocks: List[BlockOut]


def span_out(span: InlineSpan) -> SpanOut:
    if isinstance(span, Bold):
        return SpanOut(type="bold", text=span.text)
    if isinstance(span, Code):
        return SpanOut(type="code", text=span.text)
    return SpanOut(type="text", text=span.text)

def block_out(block: TextBlock) -> Union[HeadingOut, ListItemOut, ParagraphOut, BlankOut]:
    if isinstance(block, Heading):
        return HeadingOut(text=block.text)
    if isinstance(block, ListItem):
        return ListItemOut(spans=[span_out(s) for s in block.spans])
    if isinstance(block, Paragraph):
        return ParagraphOut(spans=[span_out(s) for s in block.spans])
    if isinstance(block, Blank):
        return BlankOut()
    raise TypeError(f"Unknown text block: {block!r}")
