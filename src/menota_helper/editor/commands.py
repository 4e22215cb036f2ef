"""
Editor commands.

Each command reads the host buffer, computes an edit with the engine and
applies it as a single buffer operation. Engine errors are reported in the
CommandResult and leave the buffer untouched.
"""

from __future__ import annotations

import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, List, Optional

from .. import api
from ..core.milestones import MilestoneKind, MilestonePreview
from ..core.tags import DEFAULT_TAGS, TagSettings
from ..errors import MenotaHelperError
from .buffer import EditorBuffer

logger = logging.getLogger(__name__)

ELEMENT_NAME_PATTERN = re.compile(r"[A-Za-z_][\w.-]*(?::[A-Za-z_][\w.-]*)?")


class CommandCategory(Enum):
    """Categories of available commands."""
    INSERTION = "insertion"
    READING = "reading"
    TRANSFORM = "transform"


@dataclass
class CommandContext:
    """Settings a command runs with."""

    settings: TagSettings = DEFAULT_TAGS
    paragraph_scoped_line_breaks: bool = False


@dataclass
class CommandResult:
    """Result of a command execution."""
    success: bool
    message: str = ""
    error: Optional[str] = None
    data: Optional[Dict[str, Any]] = None
    document_modified: bool = False


class EditorCommand(ABC):
    """Base class for all editor commands."""

    name: str
    description: str
    category: CommandCategory

    def run(
        self,
        buffer: EditorBuffer,
        parameters: Optional[Dict[str, Any]] = None,
        context: Optional[CommandContext] = None,
    ) -> CommandResult:
        """Execute the command, turning engine errors into a failed result."""
        try:
            return self.execute(buffer, parameters or {}, context or CommandContext())
        except (MenotaHelperError, ValueError) as e:
            logger.warning(f"Command {self.name} failed: {e}")
            return CommandResult(success=False, error=str(e), data={"exception_type": type(e).__name__})

    @abstractmethod
    def execute(self, buffer: EditorBuffer, parameters: Dict[str, Any], context: CommandContext) -> CommandResult:
        """Execute the command with given parameters."""


def insert_milestone(buffer: EditorBuffer, tag: str, value: str, attribute: str) -> str:
    """Insert an empty milestone on a new line at the cursor; return its markup."""
    markup = api.milestone_markup(tag, value, attribute)
    buffer.insert_at_cursor(f"\n{markup}")
    return markup


def _next_value(buffer: EditorBuffer, kind: MilestoneKind, context: CommandContext) -> str:
    cursor = None
    if context.paragraph_scoped_line_breaks and kind is MilestoneKind.LINE_BREAK:
        cursor = buffer.get_cursor_offset()
    return api.find_next_value(buffer.get_document_text(), kind, cursor, context.settings)


class InsertElementCommand(EditorCommand):
    """Insert a page or line break, numbered with the given or the computed value."""

    name = "insert_element"
    description = "Insert a <pb> or <lb> element at the cursor"
    category = CommandCategory.INSERTION

    def execute(self, buffer: EditorBuffer, parameters: Dict[str, Any], context: CommandContext) -> CommandResult:
        kind = MilestoneKind(parameters.get("kind", ""))
        value = parameters.get("value")
        if value is None:
            value = _next_value(buffer, kind, context)

        markup = insert_milestone(buffer, kind.tag(context.settings), value, context.settings.number_attribute)
        return CommandResult(
            success=True,
            message=f"Inserted {markup}",
            data={"kind": kind.value, "value": value},
            document_modified=True,
        )


class InsertNextCommand(EditorCommand):
    """Insert the next milestone of a fixed kind."""

    category = CommandCategory.INSERTION

    def __init__(self, kind: MilestoneKind):
        self.kind = kind
        self.name = f"insert_next_{kind.value}"
        self.description = f"Insert the next <{kind.value}> element at the cursor"

    def execute(self, buffer: EditorBuffer, parameters: Dict[str, Any], context: CommandContext) -> CommandResult:
        value = _next_value(buffer, self.kind, context)
        markup = insert_milestone(buffer, self.kind.tag(context.settings), value, context.settings.number_attribute)
        return CommandResult(
            success=True,
            message=f"Inserted {markup}",
            data={"kind": self.kind.value, "value": value},
            document_modified=True,
        )


def describe_option(kind: MilestoneKind, preview: MilestonePreview) -> Dict[str, str]:
    """Label and description of a pick-list entry, as shown before insertion."""
    info = preview.get(kind)
    if info is None:
        return {
            "label": f"{kind.label}: 1",
            "description": f"No existing <{kind.value}> elements found → Start with n=\"1\"",
            "value": kind.value,
            "next_value": "1",
        }
    return {
        "label": f"{kind.label}: {info.next_value}",
        "description": f"Current: n=\"{info.current_value}\" → Next: n=\"{info.next_value}\"",
        "value": kind.value,
        "next_value": info.next_value,
    }


class InsertWithPreviewCommand(EditorCommand):
    """
    Compute both previews and insert the selected kind.

    Without a "kind" parameter nothing is inserted and the options are
    returned, so the host can offer them to the user.
    """

    name = "insert_with_preview"
    description = "Preview the next page and line break values, insert the chosen one"
    category = CommandCategory.INSERTION

    def execute(self, buffer: EditorBuffer, parameters: Dict[str, Any], context: CommandContext) -> CommandResult:
        preview = api.compute_milestone_preview(buffer.get_document_text(), context.settings)
        options = [describe_option(kind, preview) for kind in MilestoneKind]

        if not parameters.get("kind"):
            return CommandResult(success=True, message="Select element to insert", data={"options": options})

        kind = MilestoneKind(parameters["kind"])
        value = preview.next_value_for(kind)
        markup = insert_milestone(buffer, kind.tag(context.settings), value, context.settings.number_attribute)
        return CommandResult(
            success=True,
            message=f"Inserted {markup}",
            data={"kind": kind.value, "value": value, "options": options},
            document_modified=True,
        )


def format_status(preview: MilestonePreview) -> str:
    """Status text listing the latest page and line break."""
    lines = ["TEI Status:"]
    for kind, short in ((MilestoneKind.PAGE_BREAK, "PB"), (MilestoneKind.LINE_BREAK, "LB")):
        info = preview.get(kind)
        if info:
            lines.append(f"Latest {short}: n=\"{info.current_value}\" (next: \"{info.next_value}\")")
        else:
            lines.append(f"No {short} elements found")
    return "\n".join(lines)


class ShowStatusCommand(EditorCommand):
    """Report the latest page and line break."""

    name = "show_status"
    description = "Show the latest <pb> and <lb> values and their successors"
    category = CommandCategory.READING

    def execute(self, buffer: EditorBuffer, parameters: Dict[str, Any], context: CommandContext) -> CommandResult:
        preview = api.compute_milestone_preview(buffer.get_document_text(), context.settings)
        return CommandResult(success=True, message=format_status(preview), data=preview.model_dump(mode="json"))


class InsertCustomElementCommand(EditorCommand):
    """Insert an arbitrary empty element carrying a numbering attribute."""

    name = "insert_custom_element"
    description = "Insert a custom element such as <cb n=\"1\"/> at the cursor"
    category = CommandCategory.INSERTION

    def execute(self, buffer: EditorBuffer, parameters: Dict[str, Any], context: CommandContext) -> CommandResult:
        element = str(parameters.get("element", "")).strip()
        if not ELEMENT_NAME_PATTERN.fullmatch(element):
            return CommandResult(success=False, error=f"Invalid element name: {element!r}")

        value = str(parameters.get("value", ""))
        markup = api.milestone_markup(element, value, context.settings.number_attribute)
        buffer.insert_at_cursor(markup)
        return CommandResult(
            success=True,
            message=f"Inserted {markup}",
            data={"element": element, "value": value},
            document_modified=True,
        )


class WrapWordsCommand(EditorCommand):
    """Wrap words in <w> and punctuation in <pc> across the whole document."""

    name = "wrap_words"
    description = "Wrap words in <w> and punctuation in <pc> within paragraphs"
    category = CommandCategory.TRANSFORM

    def execute(self, buffer: EditorBuffer, parameters: Dict[str, Any], context: CommandContext) -> CommandResult:
        text = buffer.get_document_text()
        wrapped = api.wrap_words_and_punctuation(text, context.settings)

        if wrapped == text:
            return CommandResult(success=True, message="Document already wrapped, nothing to do")

        buffer.replace_range(0, len(text), wrapped)
        return CommandResult(
            success=True,
            message="Words wrapped in <w> and <pc> tags successfully!",
            document_modified=True,
        )


class CommandRegistry:
    """Registry of available editor commands."""

    def __init__(self):
        self.commands: Dict[str, EditorCommand] = {}
        self._register_default_commands()

    def _register_default_commands(self) -> None:
        for command in (
            InsertElementCommand(),
            InsertNextCommand(MilestoneKind.PAGE_BREAK),
            InsertNextCommand(MilestoneKind.LINE_BREAK),
            InsertWithPreviewCommand(),
            ShowStatusCommand(),
            InsertCustomElementCommand(),
            WrapWordsCommand(),
        ):
            self.register_command(command)

    def register_command(self, command: EditorCommand) -> None:
        self.commands[command.name] = command

    def get_command(self, name: str) -> Optional[EditorCommand]:
        return self.commands.get(name)

    def list_commands(self, category: Optional[CommandCategory] = None) -> List[str]:
        """Command names, optionally only those of one category."""
        return [
            name for name, command in self.commands.items()
            if category is None or command.category is category
        ]

    def run(
        self,
        name: str,
        buffer: EditorBuffer,
        parameters: Optional[Dict[str, Any]] = None,
        context: Optional[CommandContext] = None,
    ) -> CommandResult:
        """Run a command by name."""
        command = self.get_command(name)
        if command is None:
            return CommandResult(success=False, error=f"Unknown command: {name}")
        logger.info(f"Running command {name} with parameters: {parameters or {}}")
        return command.run(buffer, parameters, context)
