"""
Core transformation engine: numbering, tokenizing and tree rewriting.
"""

from .document_model import TEIDocument
from .milestones import MilestoneInfo, MilestoneKind, MilestonePreview, find_latest
from .numbering import next_value
from .rewriter import TreeRewriter, is_excluded, rewrite
from .tags import DEFAULT_TAGS, TagCategory, TagSettings, classify
from .tokenizer import Token, TokenKind, tokenize

__all__ = [
    "TEIDocument",
    "MilestoneInfo",
    "MilestoneKind",
    "MilestonePreview",
    "find_latest",
    "next_value",
    "TreeRewriter",
    "is_excluded",
    "rewrite",
    "DEFAULT_TAGS",
    "TagCategory",
    "TagSettings",
    "classify",
    "Token",
    "TokenKind",
    "tokenize",
]
