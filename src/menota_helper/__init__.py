"""
menota-helper: numbering and word-wrapping helpers for TEI manuscript transcriptions.
"""

from .api import (
    compute_milestone_preview,
    compute_next_value,
    find_next_value,
    milestone_markup,
    wrap_words_and_punctuation,
)
from .errors import DocumentParseError, MenotaHelperError, StructuralError

__version__ = "0.1.0"

__all__ = [
    "compute_milestone_preview",
    "compute_next_value",
    "find_next_value",
    "milestone_markup",
    "wrap_words_and_punctuation",
    "DocumentParseError",
    "MenotaHelperError",
    "StructuralError",
]
