"""
Editor-facing layer: buffer contracts and commands.
"""

from .buffer import EditorBuffer, TextBuffer
from .commands import CommandCategory, CommandContext, CommandRegistry, CommandResult, EditorCommand

__all__ = [
    "EditorBuffer",
    "TextBuffer",
    "CommandCategory",
    "CommandContext",
    "CommandRegistry",
    "CommandResult",
    "EditorCommand",
]
