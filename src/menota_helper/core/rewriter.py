"""
Tree rewriter wrapping words in <w> and punctuation in <pc>.

The rewriter mutates an lxml subtree in place. Text is split with the
entity-aware tokenizer. Editorial inline elements (<unclear>, <add>, ...) that
hold word content are wrapped in <w> as a whole; the others are walked like
any container. <note> subtrees are never touched. Decisions
are driven purely by the structure of the tree, so running the rewriter
twice gives the same result as running it once.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional

from lxml import etree

from .tags import DEFAULT_TAGS, TagCategory, TagSettings, classify, local_name
from .tokenizer import Token, TokenKind, contains_word_content, tokenize

logger = logging.getLogger(__name__)


def is_excluded(node: Any, settings: TagSettings = DEFAULT_TAGS) -> bool:
    """
    Check whether node lies inside an annotation region.

    Walks the ancestors of node (not node itself) up to the root and reports
    whether any of them is a <note>.
    """
    note = settings.note.lower()
    current = node.getparent()
    while current is not None:
        if local_name(current) == note:
            return True
        current = current.getparent()
    return False


@dataclass
class RewriteStats:
    """Counts of the nodes created by one rewrite."""

    words: int = 0
    punctuation: int = 0
    wrapped_inline: int = 0

    @property
    def changed(self) -> bool:
        return bool(self.words or self.punctuation or self.wrapped_inline)


class TreeRewriter:
    """
    Rewrites the prose content of an element subtree.

    Each element is processed by snapshotting its children and visiting them
    in reverse document order, so insertions never shift a node that is still
    to be visited. Nested containers are handled from an explicit work stack
    rather than by recursion.
    """

    def __init__(self, settings: TagSettings = DEFAULT_TAGS):
        self.settings = settings
        self.stats = RewriteStats()

    def rewrite(self, root: etree._Element) -> None:
        """Wrap words and punctuation below root, in place."""
        if classify(local_name(root) or "", self.settings) in (TagCategory.SKIP, TagCategory.EXCLUDED):
            return

        pending: List[etree._Element] = [root]
        while pending:
            element = pending.pop()
            if is_excluded(element, self.settings):
                continue
            pending.extend(self._rewrite_children(element))

    def _rewrite_children(self, element: etree._Element) -> List[etree._Element]:
        """Rewrite the direct content of element; return containers to descend into."""
        containers: List[etree._Element] = []

        for child in reversed(list(element)):
            if child.tail and child.tail.strip():
                self._replace_tail(child)

            name = local_name(child)
            if name is None:
                # Comments and processing instructions
                continue

            category = classify(name, self.settings)
            if category in (TagCategory.SKIP, TagCategory.EXCLUDED):
                continue
            if is_excluded(child, self.settings):
                continue

            if (
                category == TagCategory.INLINE
                and self._has_word_content(child)
                and not self._is_wrapped(child)
            ):
                self._wrap_element(child)
            else:
                containers.append(child)

        if element.text and element.text.strip():
            self._replace_text(element)

        return containers

    def _has_word_content(self, element: etree._Element) -> bool:
        text = etree.tostring(element, method="text", encoding="unicode", with_tail=False)
        return contains_word_content(text)

    def _is_wrapped(self, element: etree._Element) -> bool:
        parent = element.getparent()
        return parent is not None and local_name(parent) in self.settings.wrapper_tags

    def _new_element(self, parent: etree._Element, name: str) -> etree._Element:
        """Create a detached element in the namespace of parent."""
        namespace = etree.QName(parent).namespace
        tag = f"{{{namespace}}}{name}" if namespace else name
        return parent.makeelement(tag)

    def _build_nodes(self, parent: etree._Element, tokens: List[Token]):
        """
        Turn tokens into (leading_text, elements).

        Whitespace before the first wrapper is returned as leading text; later
        whitespace becomes the tail of the preceding wrapper.
        """
        leading = ""
        nodes: List[etree._Element] = []

        for token in tokens:
            if token.kind == TokenKind.WHITESPACE:
                if nodes:
                    nodes[-1].tail = (nodes[-1].tail or "") + token.text
                else:
                    leading += token.text
                continue

            if token.kind == TokenKind.WORD:
                node = self._new_element(parent, self.settings.word)
                self.stats.words += 1
            else:
                node = self._new_element(parent, self.settings.punctuation)
                self.stats.punctuation += 1
            node.text = token.text
            nodes.append(node)

        return leading, nodes

    def _replace_text(self, element: etree._Element) -> None:
        """Replace the text before the first child of element."""
        leading, nodes = self._build_nodes(element, tokenize(element.text))
        element.text = leading or None
        for offset, node in enumerate(nodes):
            element.insert(offset, node)

    def _replace_tail(self, child: etree._Element) -> None:
        """Replace the text following child inside its parent."""
        parent = child.getparent()
        leading, nodes = self._build_nodes(parent, tokenize(child.tail))
        child.tail = leading or None
        position = parent.index(child) + 1
        for offset, node in enumerate(nodes):
            parent.insert(position + offset, node)

    def _wrap_element(self, element: etree._Element) -> None:
        """Move element into a new <w> at its position; its tail stays outside."""
        parent = element.getparent()
        tail = element.tail
        element.tail = None

        wrapper = self._new_element(parent, self.settings.word)
        element.addprevious(wrapper)
        wrapper.append(element)
        wrapper.tail = tail
        self.stats.wrapped_inline += 1


def rewrite(root: etree._Element, settings: Optional[TagSettings] = None) -> None:
    """Wrap words and punctuation in root's subtree, in place."""
    TreeRewriter(settings or DEFAULT_TAGS).rewrite(root)
