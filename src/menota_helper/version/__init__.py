"""
Change previews between versions of a document.
"""

from .diff_engine import ChangeSummary, DiffEngine

__all__ = ["ChangeSummary", "DiffEngine"]
