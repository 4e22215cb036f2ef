"""
XML bridge between document text and the lxml tree.

Handles the two places where generic XML tooling would corrupt a
transcription: references to entities the parser does not know, and the
re-escaping of those references on the way out. Every character or entity
reference in the body is protected before parsing (its ampersand escaped),
so the tree carries references as literal text; after serialization the
doubled ampersands are collapsed again.
"""

from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional, Tuple

from lxml import etree

from ..core.document_model import TEIDocument
from ..core.tags import DEFAULT_TAGS, TagSettings
from ..core.tokenizer import ENTITY_PATTERN
from ..errors import DocumentParseError

logger = logging.getLogger(__name__)

# Markup allowed before the root element: XML declaration, processing
# instructions, comments and a DOCTYPE with an optional internal subset.
PROLOG_PATTERN = re.compile(
    r"""\A\ufeff?(?:
        \s
      | <\?(?:(?!\?>).)*\?>
      | <!--(?:(?!-->).)*-->
      | <!DOCTYPE(?:[^\[>"']|"[^"]*"|'[^']*'|\[(?:<!--(?:(?!-->).)*-->|"[^"]*"|'[^']*'|[^\]"'])*\])*>
    )*""",
    re.DOTALL | re.VERBOSE,
)

# Markup allowed after the root element.
EPILOG_PATTERN = re.compile(
    r"""(?:
        \s
      | <\?(?:(?!\?>).)*\?>
      | <!--(?:(?!-->).)*-->
    )*\Z""",
    re.DOTALL | re.VERBOSE,
)

ESCAPED_ENTITY_PATTERN = re.compile(r"&amp;([a-zA-Z][a-zA-Z0-9]*;|#(?:x[0-9a-fA-F]+|\d+);)", re.ASCII)


class XMLBridge:
    """
    Parses transcription text into a TEIDocument and serializes it back.

    The bridge is stateless apart from its tag settings; a fresh parser is
    created for every document.
    """

    def __init__(self, settings: TagSettings = DEFAULT_TAGS):
        self.settings = settings

    def _make_parser(self) -> etree.XMLParser:
        return etree.XMLParser(
            resolve_entities=False,
            strip_cdata=False,
            remove_blank_text=False,
            no_network=True,
            huge_tree=True,
        )

    @staticmethod
    def protect_entities(text: str) -> str:
        """Escape the ampersand of every reference so it parses as text."""
        return ENTITY_PATTERN.sub(lambda match: "&amp;" + match.group(0)[1:], text)

    @staticmethod
    def restore_entities(xml_string: str) -> str:
        """
        Restore references whose ampersand was escaped during serialization.

        &amp;aelig; becomes &aelig; and &amp;#230; becomes &#230;.
        """
        return ESCAPED_ENTITY_PATTERN.sub(r"&\1", xml_string)

    def split(self, text: str) -> Tuple[str, str, str]:
        """Split text into (prolog, body, epilog)."""
        prolog = PROLOG_PATTERN.match(text).group(0)
        rest = text[len(prolog):]
        epilog_match = EPILOG_PATTERN.search(rest)
        epilog = epilog_match.group(0) if epilog_match else ""
        body = rest[: len(rest) - len(epilog)]
        return prolog, body, epilog

    def parse(self, text: str, source_path: Optional[Path] = None) -> TEIDocument:
        """
        Parse document text.

        Raises:
            DocumentParseError: if the text is not well-formed.
        """
        prolog, body, epilog = self.split(text)
        prolog_lines = prolog.count("\n")
        if not body:
            raise DocumentParseError("XML parsing error: document has no root element")

        try:
            root = etree.fromstring(self.protect_entities(body), self._make_parser())
        except etree.XMLSyntaxError as e:
            line = e.lineno + prolog_lines if e.lineno else None
            column = e.offset if e.offset else None
            location = f" (line {line}, column {column})" if line else ""
            raise DocumentParseError(f"XML parsing error{location}: {e.msg}", line, column) from e

        logger.debug(f"Parsed document root <{root.tag}> ({len(prolog)} prolog chars, {len(epilog)} epilog chars)")
        return TEIDocument(
            root=root,
            prolog=prolog,
            epilog=epilog,
            source_path=source_path,
            settings=self.settings,
        )

    def serialize(self, document: TEIDocument) -> str:
        """Serialize a document back to text, restoring references."""
        xml_string = etree.tostring(document.root, encoding="unicode", with_tail=False)
        return document.prolog + self.restore_entities(xml_string) + document.epilog
