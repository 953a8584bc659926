from dataclasses import dataclass
from typing import Union


@dataclass(frozen=True)
class PlainText:
    text: str


@dataclass(frozen=True)
class Bold:
    text: str


@dataclass(frozen=True)
class Code:
    text: str


InlineSpan = Union[PlainText, Bold, Code]


@dataclass(frozen=True)
class Heading:
    text: str


@dataclass(frozen=True)
class ListItem:
    spans: tuple[InlineSpan, ...]


@dataclass(frozen=True)
class Paragraph:
    spans: tuple[InlineSpan, ...]


@dataclass(frozen=True)
class Blank:
    pass


TextBlock = Union[Heading, ListItem, Paragraph, Blank]
