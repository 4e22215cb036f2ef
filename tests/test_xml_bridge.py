"""
Tests for menota_helper.converters.xml_bridge
"""

from __future__ import annotations

import pytest

from menota_helper.converters.xml_bridge import XMLBridge
from menota_helper.core.tags import local_name
from menota_helper.errors import DocumentParseError


class TestEntityProtection:

    def test_protect(self):
        assert XMLBridge.protect_entities("a &aelig; &#230; &#xE6; &amp; b") == (
            "a &amp;aelig; &amp;#230; &amp;#xE6; &amp;amp; b"
        )

    def test_protect_leaves_bare_ampersand(self):
        assert XMLBridge.protect_entities("a & b &c") == "a & b &c"

    def test_restore(self):
        assert XMLBridge.restore_entities("&amp;aelig; &amp;#xE6; &amp;#230; &amp;amp; &amp;") == (
            "&aelig; &#xE6; &#230; &amp; &amp;"
        )

    def test_restore_only_unescapes_leading_ampersand(self):
        assert XMLBridge.restore_entities("&amp;amp;aelig;") == "&amp;aelig;"


class TestSplit:

    def test_prolog_and_epilog(self, sample_tei):
        prolog, body, epilog = XMLBridge().split(sample_tei)
        assert prolog.startswith('<?xml version="1.0"')
        assert "<!ENTITY aelig" in prolog
        assert prolog.endswith("<!-- Menota transcription -->\n")
        assert body.startswith("<TEI ")
        assert body.endswith("</TEI>")
        assert epilog == "\n<!-- end -->\n"
        assert prolog + body + epilog == sample_tei

    def test_bare_document(self):
        assert XMLBridge().split("<p>x</p>") == ("", "<p>x</p>", "")


class TestParse:

    def test_references_are_literal_text(self, sample_tei):
        document = XMLBridge().parse(sample_tei)
        paragraph = document.paragraphs()[0]
        assert "&aelig;tt, &amp; mikit." in paragraph[0].tail

    def test_root_and_prolog(self, sample_tei):
        document = XMLBridge().parse(sample_tei)
        assert local_name(document.root) == "tei"
        assert document.prolog.count("\n") == 5

    def test_unchanged_document_round_trips(self, sample_tei):
        bridge = XMLBridge()
        assert bridge.serialize(bridge.parse(sample_tei)) == sample_tei

    def test_attribute_references_round_trip(self):
        text = '<p><pb n="&#49;&aelig;"/>x</p>'
        bridge = XMLBridge()
        document = bridge.parse(text)
        assert document.root[0].get("n") == "&#49;&aelig;"
        assert bridge.serialize(document) == text

    def test_undefined_entity_is_not_an_error(self):
        document = XMLBridge().parse("<p>&thorn;ing</p>")
        assert document.root.text == "&thorn;ing"

    @pytest.mark.parametrize("text", [
        "",
        "<p>unclosed</body>",
        "<p>a & b</p>",
        "just text",
    ])
    def test_malformed_input_raises(self, text):
        with pytest.raises(DocumentParseError):
            XMLBridge().parse(text)

    def test_error_line_accounts_for_prolog(self):
        text = '<?xml version="1.0"?>\n<!-- c -->\n<TEI>\n<p>x</q>\n</TEI>'
        with pytest.raises(DocumentParseError) as excinfo:
            XMLBridge().parse(text)
        assert excinfo.value.line == 4
        assert "line 4" in str(excinfo.value)
