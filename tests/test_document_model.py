"""
Tests for menota_helper.core.document_model
"""

from __future__ import annotations

from menota_helper.converters.xml_bridge import XMLBridge


def offsets(text, tag="p"):
    document = XMLBridge().parse(text)
    return [(element.text, offset) for element, offset in document.start_offsets(text, tag)]


class TestStartOffsets:

    def test_single_line(self):
        text = "<body><p>a</p><p>b</p></body>"
        assert offsets(text) == [("a", 6), ("b", 14)]

    def test_prolog_and_comments_skipped(self):
        text = "<?xml version='1.0'?>\n<!-- <p>no</p> -->\n<body><![CDATA[<p>]]><p>a</p></body>"
        assert offsets(text) == [("a", text.index("<p>a"))]

    def test_similar_tag_names_ignored(self):
        text = '<body><pb n="1"/><post/><P class="x">a</P><tei:p xmlns:tei="urn:x">b</tei:p></body>'
        assert offsets(text) == [("a", text.index("<P ")), ("b", text.index("<tei:p"))]

    def test_start_tag_across_lines(self):
        text = '<body>\n<p\n  rend="x">a</p></body>'
        assert offsets(text) == [("a", 7)]


class TestScope:

    def test_paragraphs_of_first_body(self, sample_tei):
        document = XMLBridge().parse(sample_tei)
        assert len(document.paragraphs()) == 2

    def test_no_body_has_no_paragraphs(self):
        document = XMLBridge().parse("<TEI><p>x</p></TEI>")
        assert document.body() is None
        assert document.paragraphs() == []
