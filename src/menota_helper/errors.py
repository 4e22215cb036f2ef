"""
Exception types raised by the menota-helper engine.
"""

from __future__ import annotations

from typing import Optional


class MenotaHelperError(Exception):
    """Base class for all engine errors."""


class DocumentParseError(MenotaHelperError):
    """The document text is not well-formed XML."""

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        super().__init__(message)
        self.line = line
        self.column = column


class StructuralError(MenotaHelperError):
    """The document lacks an element the requested operation needs."""
