"""
Document model for TEI transcriptions.

A TEIDocument keeps the parsed root element together with the verbatim text
that surrounds it (XML declaration, DOCTYPE, comments), so the document can be
written back without disturbing anything outside the root.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Optional, Tuple

from lxml import etree

from .tags import DEFAULT_TAGS, TagSettings, local_name

# Markup that may contain a literal "<" without opening an element
OPAQUE_MARKUP = r"<!--.*?-->|<!\[CDATA\[.*?\]\]>|<\?.*?\?>"


def iter_elements(root: etree._Element, tag: Optional[str] = None) -> Iterator[etree._Element]:
    """Iterate elements in document order, optionally filtered by local name."""
    wanted = tag.lower() if tag else None
    for element in root.iter(etree.Element):
        if wanted is None or local_name(element) == wanted:
            yield element


@dataclass
class TEIDocument:
    """A parsed transcription and the raw text around its root element."""

    root: etree._Element
    prolog: str = ""
    epilog: str = ""
    source_path: Optional[Path] = None
    settings: TagSettings = field(default=DEFAULT_TAGS)

    def body(self) -> Optional[etree._Element]:
        """Return the first body element, if any."""
        return next(iter_elements(self.root, self.settings.body), None)

    def paragraphs(self) -> List[etree._Element]:
        """Return the paragraphs of the first body, or [] without a body."""
        scope = self.body()
        if scope is None:
            return []
        return list(iter_elements(scope, self.settings.paragraph))

    def start_offsets(self, text: str, tag: str) -> List[Tuple[etree._Element, int]]:
        """
        Pair every element named tag with the offset of its start tag in text.

        text must be the source the document was parsed from. Outside
        comments, CDATA sections and processing instructions a well-formed
        document only holds "<" where a tag opens, so the n-th matching start
        tag in the source is the n-th matching element in document order.
        """
        pattern = re.compile(
            rf"{OPAQUE_MARKUP}|<(?:[\w.-]+:)?{re.escape(tag)}(?=[\s/>])",
            re.DOTALL | re.IGNORECASE,
        )
        offsets = [
            match.start()
            for match in pattern.finditer(text, len(self.prolog))
            if not match.group(0).startswith(("<!", "<?"))
        ]
        return list(zip(iter_elements(self.root, tag), offsets))
