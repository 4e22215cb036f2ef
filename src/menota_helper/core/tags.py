"""
Tag classification for the word-wrapping walk.

Every element the rewriter meets falls into exactly one TagCategory, so the
walk branches on a closed set instead of scattered string lookups.
"""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple

from lxml import etree


class TagCategory(Enum):
    """How the rewriter treats an element."""
    SKIP = "skip"
    EXCLUDED = "excluded"
    INLINE = "inline"
    CONTAINER = "container"


@dataclass(frozen=True)
class TagSettings:
    """Tag names used by the locator and the rewriter."""

    body: str = "body"
    paragraph: str = "p"
    note: str = "note"
    word: str = "w"
    punctuation: str = "pc"
    page_break: str = "pb"
    line_break: str = "lb"
    number_attribute: str = "n"

    # Self-closing milestones, void-like tags and already produced wrappers
    skip_tags: Tuple[str, ...] = ("pb", "lb", "br", "hr", "img", "input", "meta", "link", "w", "pc")

    # Editorial inline elements wrapped in <w> as a whole
    inline_tags: Tuple[str, ...] = (
        "unclear", "add", "del", "supplied", "abbr", "expan", "hi", "emph", "foreign",
    )

    @property
    def wrapper_tags(self) -> Tuple[str, str]:
        return (self.word.lower(), self.punctuation.lower())


DEFAULT_TAGS = TagSettings()


def local_name(node: Any) -> Optional[str]:
    """
    Return the lower-cased local name of an element.

    Comments, processing instructions and entities have no tag identity and
    yield None.
    """
    tag = getattr(node, "tag", None)
    if not isinstance(tag, str):
        return None
    return etree.QName(tag).localname.lower()


def classify(tag: str, settings: TagSettings = DEFAULT_TAGS) -> TagCategory:
    """Map a tag name to its category."""
    name = tag.lower()
    if name == settings.note.lower():
        return TagCategory.EXCLUDED
    if name in settings.wrapper_tags or name in {t.lower() for t in settings.skip_tags}:
        return TagCategory.SKIP
    if name in {t.lower() for t in settings.inline_tags}:
        return TagCategory.INLINE
    return TagCategory.CONTAINER
