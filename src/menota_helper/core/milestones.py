"""
Milestone lookup: the latest <pb>/<lb> in a document and its successor value.
"""

from __future__ import annotations

from enum import Enum
from typing import Optional

from lxml import etree
from pydantic import BaseModel

from .document_model import TEIDocument, iter_elements
from .numbering import next_value
from .tags import DEFAULT_TAGS, TagSettings
from .tokenizer import decode_character_references


class MilestoneKind(str, Enum):
    """Milestone elements whose numbering is tracked."""
    PAGE_BREAK = "pb"
    LINE_BREAK = "lb"

    @property
    def label(self) -> str:
        return "Page Break" if self is MilestoneKind.PAGE_BREAK else "Line Break"

    def tag(self, settings: TagSettings = DEFAULT_TAGS) -> str:
        """Configured tag name for this kind."""
        if self is MilestoneKind.PAGE_BREAK:
            return settings.page_break
        return settings.line_break


class MilestoneInfo(BaseModel):
    """Current and next numbering value of the latest milestone of a kind."""

    kind: MilestoneKind
    current_value: str
    next_value: str


class MilestonePreview(BaseModel):
    """Latest page and line break of a document, when present."""

    page_break: Optional[MilestoneInfo] = None
    line_break: Optional[MilestoneInfo] = None

    def get(self, kind: MilestoneKind) -> Optional[MilestoneInfo]:
        if kind is MilestoneKind.PAGE_BREAK:
            return self.page_break
        return self.line_break

    def next_value_for(self, kind: MilestoneKind) -> str:
        """Next value for kind, starting at "1" when the document has none."""
        info = self.get(kind)
        return info.next_value if info else "1"


def find_latest(root: etree._Element, tag: str) -> Optional[etree._Element]:
    """Return the last element named tag in document order, or None."""
    latest = None
    for latest in iter_elements(root, tag):
        pass
    return latest


def milestone_info(
    kind: MilestoneKind,
    element: etree._Element,
    settings: TagSettings = DEFAULT_TAGS,
) -> MilestoneInfo:
    """Build the info record for a found milestone, decoding character references in its value."""
    current = decode_character_references(element.get(settings.number_attribute) or "")
    return MilestoneInfo(kind=kind, current_value=current, next_value=next_value(current))


def latest_milestone(document: TEIDocument, kind: MilestoneKind) -> Optional[MilestoneInfo]:
    """Info for the latest milestone of kind, or None if there is none."""
    element = find_latest(document.root, kind.tag(document.settings))
    if element is None:
        return None
    return milestone_info(kind, element, document.settings)


def preview(document: TEIDocument) -> MilestonePreview:
    """Latest page and line break of a document."""
    return MilestonePreview(
        page_break=latest_milestone(document, MilestoneKind.PAGE_BREAK),
        line_break=latest_milestone(document, MilestoneKind.LINE_BREAK),
    )


def find_latest_in_context(
    document: TEIDocument,
    text: str,
    tag: str,
    cursor_offset: int,
) -> Optional[etree._Element]:
    """
    Find the latest tag element inside the paragraph holding the cursor.

    The paragraph is the last <p> of the first <body> whose start tag begins
    at or before cursor_offset in text, or the body's last paragraph when
    none does.
    """
    body = document.body()
    if body is None:
        return None

    paragraphs = [
        (paragraph, offset)
        for paragraph, offset in document.start_offsets(text, document.settings.paragraph)
        if any(ancestor is body for ancestor in paragraph.iterancestors())
    ]
    if not paragraphs:
        return None

    current = None
    for paragraph, offset in paragraphs:
        if offset <= cursor_offset:
            current = paragraph
    if current is None:
        current = paragraphs[-1][0]

    return find_latest(current, tag)
