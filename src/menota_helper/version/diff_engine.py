"""
Diff engine for previewing a transformation before it is applied.

Compares the document text before and after an edit and summarises how many
wrapper elements the edit introduced.
"""

from __future__ import annotations

import difflib
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List

from ..core.tags import DEFAULT_TAGS, TagSettings


@dataclass
class ChangeSummary:
    """Summary of the difference between two versions of a document."""

    words_added: int = 0
    punctuation_added: int = 0
    lines_changed: int = 0
    hunks: List[str] = field(default_factory=list)

    @property
    def has_changes(self) -> bool:
        return bool(self.hunks)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization."""
        return {
            "words_added": self.words_added,
            "punctuation_added": self.punctuation_added,
            "lines_changed": self.lines_changed,
            "has_changes": self.has_changes,
        }


class DiffEngine:
    """Computes text diffs between document versions."""

    def __init__(self, settings: TagSettings = DEFAULT_TAGS, context_lines: int = 3):
        self.settings = settings
        self.context_lines = context_lines

    def _count_tags(self, text: str, name: str) -> int:
        pattern = re.compile(rf"<(?:[\w.-]+:)?{re.escape(name)}[\s/>]")
        return len(pattern.findall(text))

    def generate_text_diff(self, old_text: str, new_text: str, filename: str = "document.xml") -> str:
        """Generate a unified diff between two versions."""
        diff = difflib.unified_diff(
            old_text.splitlines(keepends=True),
            new_text.splitlines(keepends=True),
            fromfile=f"a/{filename}",
            tofile=f"b/{filename}",
            n=self.context_lines,
        )
        return "".join(diff)

    def summarize(self, old_text: str, new_text: str) -> ChangeSummary:
        """Summarise what an edit added."""
        summary = ChangeSummary(
            words_added=self._count_tags(new_text, self.settings.word) - self._count_tags(old_text, self.settings.word),
            punctuation_added=(
                self._count_tags(new_text, self.settings.punctuation)
                - self._count_tags(old_text, self.settings.punctuation)
            ),
        )

        matcher = difflib.SequenceMatcher(None, old_text.splitlines(), new_text.splitlines(), autojunk=False)
        for tag, i1, i2, j1, j2 in matcher.get_opcodes():
            if tag == "equal":
                continue
            summary.lines_changed += max(i2 - i1, j2 - j1)
            summary.hunks.append(f"{tag} lines {i1 + 1}-{i2} -> {j1 + 1}-{j2}")

        return summary
