"""
Editor buffer contracts.

Commands talk to the host editor only through EditorBuffer. TextBuffer is an
in-memory implementation used by the command line and the tests.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional, Protocol, runtime_checkable

logger = logging.getLogger(__name__)


@runtime_checkable
class EditorBuffer(Protocol):
    """What the engine needs from a host editor."""

    def get_document_text(self) -> str:
        ...

    def get_cursor_offset(self) -> int:
        ...

    def replace_range(self, start: int, end: int, new_text: str) -> None:
        ...

    def insert_at_cursor(self, text: str) -> None:
        ...


class TextBuffer:
    """A document held in memory with a single cursor."""

    def __init__(self, text: str = "", cursor: Optional[int] = None, path: Optional[Path] = None):
        self.text = text
        self.cursor = len(text) if cursor is None else cursor
        self.path = path
        self.is_modified = False
        self._check_offset(self.cursor)

    @classmethod
    def from_file(cls, path: Path, cursor: Optional[int] = None) -> TextBuffer:
        """Load a buffer from a UTF-8 file."""
        return cls(path.read_text(encoding="utf-8"), cursor=cursor, path=path)

    def save(self, path: Optional[Path] = None) -> Path:
        """Write the buffer to path, or back to the file it came from."""
        target = path or self.path
        if target is None:
            raise ValueError("No path to save the buffer to")
        target.write_text(self.text, encoding="utf-8")
        self.is_modified = False
        logger.debug(f"Saved {len(self.text)} characters to {target}")
        return target

    def _check_offset(self, offset: int) -> None:
        if not 0 <= offset <= len(self.text):
            raise ValueError(f"Offset {offset} outside document of length {len(self.text)}")

    def get_document_text(self) -> str:
        return self.text

    def get_cursor_offset(self) -> int:
        return self.cursor

    def set_cursor_offset(self, offset: int) -> None:
        self._check_offset(offset)
        self.cursor = offset

    def replace_range(self, start: int, end: int, new_text: str) -> None:
        """Replace text[start:end]; a cursor after the range shifts with it."""
        self._check_offset(start)
        self._check_offset(end)
        if start > end:
            raise ValueError(f"Range start {start} is after end {end}")

        self.text = self.text[:start] + new_text + self.text[end:]
        if self.cursor >= end:
            self.cursor += len(new_text) - (end - start)
        elif self.cursor > start:
            self.cursor = start + len(new_text)
        self.is_modified = True

    def insert_at_cursor(self, text: str) -> None:
        """Insert text at the cursor and move the cursor past it."""
        position = self.cursor
        self.text = self.text[:position] + text + self.text[position:]
        self.cursor = position + len(text)
        self.is_modified = True
