"""
Markdown-subset renderer for AI-generated study text.

Only a handful of constructs are recognised: ``#`` headings, ``*``/``-``
bullets, ``**bold**`` runs, whole-fragment `code` and blank lines. Anything
else degrades to a paragraph of plain text, so ``render`` never raises.
"""
import re
from typing import List

from ..domain.text import (
    Blank,
    Bold,
    Code,
    Heading,
    InlineSpan,
    ListItem,
    Paragraph,
    PlainText,
    TextBlock,
)

_BOLD_RUN = re.compile(r"(\*\*.*?\*\*)")
_HEADING_PREFIX = re.compile(r"^#+\s*")
_BULLET_PREFIX = re.compile(r"^[*\-]\s*")


def split_lines(text: str) -> List[str]:
    """Splits on ``\\n``; a trailing newline ends the last line instead of opening a new one."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def parse_inline(content: str) -> tuple[InlineSpan, ...]:
    spans: list[InlineSpan] = []
    for part in _BOLD_RUN.split(content):
        if not part:
            continue
        if len(part) > 4 and part.startswith("**") and part.endswith("**"):
            spans.append(Bold(part[2:-2]))
        elif len(part) >= 2 and part.startswith("`") and part.endswith("`"):
            spans.append(Code(part[1:-1]))
        else:
            spans.append(PlainText(part))
    return tuple(spans)


def render_line(line: str) -> TextBlock:
    stripped = line.strip()
    if line.lstrip(" ").startswith("#"):
        heading = _HEADING_PREFIX.sub("", line.lstrip(" "))
        return Heading(heading.replace("**", ""))
    if stripped.startswith("* ") or stripped.startswith("- "):
        return ListItem(parse_inline(_BULLET_PREFIX.sub("", stripped)))
    if not stripped:
        return Blank()
    return Paragraph(parse_inline(line))


def render(text: str) -> List[TextBlock]:
    return [render_line(line) for line in split_lines(text)]
