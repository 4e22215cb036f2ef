"""
Tests for menota_helper.editor.commands
"""

from __future__ import annotations

import pytest

from menota_helper.core.milestones import MilestoneKind
from menota_helper.editor.buffer import TextBuffer
from menota_helper.editor.commands import (
    CommandCategory,
    CommandContext,
    CommandRegistry,
    InsertNextCommand,
    ShowStatusCommand,
    format_status,
)
from menota_helper.api import compute_milestone_preview

DOC = '<TEI><body><pb n="1r"/><p><lb n="1"/>a\n<lb n="2"/>b</p>\n<p><lb n="1"/>c</p></body></TEI>'


@pytest.fixture
def registry():
    return CommandRegistry()


class TestRegistry:

    def test_default_commands(self, registry):
        assert registry.list_commands() == [
            "insert_element",
            "insert_next_pb",
            "insert_next_lb",
            "insert_with_preview",
            "show_status",
            "insert_custom_element",
            "wrap_words",
        ]

    def test_commands_by_category(self, registry):
        assert registry.list_commands(CommandCategory.READING) == ["show_status"]
        assert registry.list_commands(CommandCategory.TRANSFORM) == ["wrap_words"]
        assert "insert_custom_element" in registry.list_commands(CommandCategory.INSERTION)

    def test_unknown_command(self, registry):
        result = registry.run("nope", TextBuffer(DOC))
        assert not result.success
        assert result.error == "Unknown command: nope"


class TestInsertCommands:

    def test_insert_next_page_break(self, registry):
        buffer = TextBuffer(DOC, cursor=len(DOC))
        result = registry.run("insert_next_pb", buffer)
        assert result.success
        assert result.document_modified
        assert buffer.get_document_text() == DOC + '\n<pb n="1v"/>'
        assert result.data == {"kind": "pb", "value": "1v"}

    def test_insert_next_line_break_document_wide(self, registry):
        buffer = TextBuffer(DOC, cursor=DOC.index("a\n"))
        registry.run("insert_next_lb", buffer)
        assert '<lb n="1"/>\n<lb n="2"/>a' in buffer.get_document_text()

    def test_insert_next_line_break_paragraph_scoped(self, registry):
        buffer = TextBuffer(DOC, cursor=DOC.index("b</p>"))
        context = CommandContext(paragraph_scoped_line_breaks=True)
        result = registry.run("insert_next_lb", buffer, context=context)
        assert result.data["value"] == "3"

    def test_insert_element_explicit_value(self, registry):
        buffer = TextBuffer("<p></p>", cursor=3)
        result = registry.run("insert_element", buffer, {"kind": "lb", "value": "7"})
        assert result.success
        assert buffer.get_document_text() == '<p>\n<lb n="7"/></p>'

    def test_insert_element_computed_value(self, registry):
        buffer = TextBuffer(DOC)
        result = registry.run("insert_element", buffer, {"kind": "pb"})
        assert result.data["value"] == "1v"

    def test_insert_element_bad_kind(self, registry):
        buffer = TextBuffer(DOC)
        result = registry.run("insert_element", buffer, {"kind": "cb"})
        assert not result.success
        assert result.data["exception_type"] == "ValueError"
        assert buffer.get_document_text() == DOC

    def test_malformed_document_leaves_buffer(self, registry):
        buffer = TextBuffer("<p><lb n='1'></p>")
        result = registry.run("insert_next_lb", buffer)
        assert not result.success
        assert result.data["exception_type"] == "DocumentParseError"
        assert not buffer.is_modified

    def test_preview_options(self, registry):
        buffer = TextBuffer(DOC)
        result = registry.run("insert_with_preview", buffer)
        assert not buffer.is_modified
        options = result.data["options"]
        assert options[0]["label"] == "Page Break: 1v"
        assert options[0]["description"] == 'Current: n="1r" → Next: n="1v"'
        assert options[1]["label"] == "Line Break: 2"

    def test_preview_insert(self, registry):
        buffer = TextBuffer("<p>x</p>", cursor=3)
        result = registry.run("insert_with_preview", buffer, {"kind": "pb"})
        assert result.data["value"] == "1"
        assert result.data["options"][0]["description"].startswith("No existing <pb> elements found")
        assert buffer.get_document_text() == '<p>\n<pb n="1"/>x</p>'

    def test_custom_element(self, registry):
        buffer = TextBuffer("<p></p>", cursor=3)
        result = registry.run("insert_custom_element", buffer, {"element": "cb", "value": "2"})
        assert result.success
        assert buffer.get_document_text() == '<p><cb n="2"/></p>'

    @pytest.mark.parametrize("element", ["", "1cb", "c b", "<cb>"])
    def test_custom_element_invalid_name(self, registry, element):
        buffer = TextBuffer("<p></p>")
        result = registry.run("insert_custom_element", buffer, {"element": element})
        assert not result.success
        assert not buffer.is_modified

    def test_insert_next_names(self):
        assert InsertNextCommand(MilestoneKind.LINE_BREAK).name == "insert_next_lb"


class TestStatus:

    def test_status_message(self):
        result = ShowStatusCommand().run(TextBuffer(DOC))
        assert result.message == (
            'TEI Status:\nLatest PB: n="1r" (next: "1v")\nLatest LB: n="1" (next: "2")'
        )
        assert result.data["page_break"]["next_value"] == "1v"
        assert result.data["line_break"]["kind"] == "lb"

    def test_status_without_milestones(self):
        assert format_status(compute_milestone_preview("<p/>")) == (
            "TEI Status:\nNo PB elements found\nNo LB elements found"
        )


class TestWrapWords:

    def test_wraps_in_one_edit(self, registry):
        buffer = TextBuffer("<TEI><body><p>Hello, world.</p></body></TEI>", cursor=0)
        result = registry.run("wrap_words", buffer)
        assert result.success
        assert result.document_modified
        assert buffer.get_document_text() == (
            "<TEI><body><p><w>Hello</w><pc>,</pc> <w>world</w><pc>.</pc></p></body></TEI>"
        )
        assert buffer.get_cursor_offset() == 0

    def test_already_wrapped(self, registry):
        buffer = TextBuffer("<TEI><body><p><w>x</w></p></body></TEI>")
        result = registry.run("wrap_words", buffer)
        assert result.success
        assert not result.document_modified
        assert not buffer.is_modified

    def test_document_without_body(self, registry):
        buffer = TextBuffer("<TEI><p>x</p></TEI>")
        result = registry.run("wrap_words", buffer)
        assert not result.success
        assert result.error == "No <body> element found in document"
        assert not buffer.is_modified

    def test_structural_error(self, registry):
        buffer = TextBuffer("<TEI><body/></TEI>")
        result = registry.run("wrap_words", buffer)
        assert not result.success
        assert result.error == "No <p> elements found in <body> element"
        assert result.data["exception_type"] == "StructuralError"
