"""
Text-in, text-out entry points used by editor hosts.

Each call parses its own private copy of the document; nothing is cached
between calls.
"""

from __future__ import annotations

import logging
from typing import Optional, Union
from xml.sax.saxutils import quoteattr

from .converters.xml_bridge import XMLBridge
from .core.milestones import (
    MilestoneKind,
    MilestonePreview,
    find_latest,
    find_latest_in_context,
    milestone_info,
    preview,
)
from .core.numbering import next_value
from .core.rewriter import TreeRewriter
from .core.tags import DEFAULT_TAGS, TagSettings
from .errors import StructuralError

logger = logging.getLogger(__name__)


def compute_next_value(current_value: Optional[str]) -> str:
    """Successor of a milestone numbering value."""
    return next_value(current_value)


def compute_milestone_preview(document_text: str, settings: TagSettings = DEFAULT_TAGS) -> MilestonePreview:
    """
    Report the latest page and line break of a document and their successors.

    Raises:
        DocumentParseError: if the text is not well-formed.
    """
    document = XMLBridge(settings).parse(document_text)
    return preview(document)


def find_next_value(
    document_text: str,
    kind: Union[MilestoneKind, str],
    cursor_offset: Optional[int] = None,
    settings: TagSettings = DEFAULT_TAGS,
) -> str:
    """
    Next numbering value for one milestone kind, "1" when there is none yet.

    With a cursor offset, line breaks are looked up in the paragraph holding
    the cursor only.
    """
    kind = MilestoneKind(kind)
    document = XMLBridge(settings).parse(document_text)
    tag = kind.tag(settings)

    if cursor_offset is not None and kind is MilestoneKind.LINE_BREAK:
        element = find_latest_in_context(document, document_text, tag, cursor_offset)
    else:
        element = find_latest(document.root, tag)

    if element is None:
        return "1"
    return milestone_info(kind, element, settings).next_value


def milestone_markup(tag: str, value: str, attribute: str = DEFAULT_TAGS.number_attribute) -> str:
    """Markup for an empty milestone element, e.g. <pb n="1v"/>."""
    return f"<{tag} {attribute}={quoteattr(value)}/>"


def wrap_words_and_punctuation(document_text: str, settings: TagSettings = DEFAULT_TAGS) -> str:
    """
    Wrap every word of the document's paragraphs in <w> and punctuation in <pc>.

    Only the paragraphs of the first <body> are processed.

    Raises:
        DocumentParseError: if the text is not well-formed.
        StructuralError: if there is no <body>, or no paragraph inside it.
    """
    bridge = XMLBridge(settings)
    document = bridge.parse(document_text)

    if document.body() is None:
        raise StructuralError(f"No <{settings.body}> element found in document")
    paragraphs = document.paragraphs()
    if not paragraphs:
        raise StructuralError(f"No <{settings.paragraph}> elements found in <{settings.body}> element")

    rewriter = TreeRewriter(settings)
    for paragraph in paragraphs:
        rewriter.rewrite(paragraph)

    stats = rewriter.stats
    logger.info(
        f"Wrapped {stats.words} words, {stats.punctuation} punctuation runs and "
        f"{stats.wrapped_inline} inline elements in {len(paragraphs)} paragraphs"
    )
    return bridge.serialize(document)
