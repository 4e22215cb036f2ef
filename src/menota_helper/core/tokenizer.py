"""
Entity-aware tokenizer for transcription text.

Splits a text run into word, punctuation and whitespace tokens. Character
and entity references (&aelig;, &#230;, &#xE6;) count as single word
characters, so a reference inside a word never splits it and a reference on
its own is always a word.
"""

from __future__ import annotations

import re
import unicodedata
from dataclasses import dataclass
from enum import Enum
from typing import List

ENTITY_PATTERN = re.compile(r"&[a-zA-Z][a-zA-Z0-9]*;|&#(?:x[0-9a-fA-F]+|\d+);", re.ASCII)

WORD_PUNCTUATION = frozenset("_()")

CHARACTER_REFERENCE_PATTERN = re.compile(r"&#(x[0-9a-fA-F]+|\d+);|&(amp|lt|gt|quot|apos);", re.ASCII)

PREDEFINED_ENTITIES = {"amp": "&", "lt": "<", "gt": ">", "quot": '"', "apos": "'"}


class TokenKind(Enum):
    """Token classes produced by the tokenizer."""
    WORD = "word"
    PUNCTUATION = "punctuation"
    WHITESPACE = "whitespace"


@dataclass(frozen=True)
class Token:
    """A classified slice of text."""

    kind: TokenKind
    text: str

    def __str__(self) -> str:
        return f"{self.kind.value}({self.text!r})"


def is_word_char(char: str) -> bool:
    """Letters, combining marks, decimal digits, underscore and parentheses."""
    if char in WORD_PUNCTUATION:
        return True
    category = unicodedata.category(char)
    return category[0] in ("L", "M") or category == "Nd"


def contains_word_content(text: str) -> bool:
    """Check whether text holds at least one word character or reference."""
    if ENTITY_PATTERN.search(text):
        return True
    return any(is_word_char(char) for char in text)


def _scan_word(text: str, pos: int) -> int:
    """Return the end of the word run starting at pos."""
    length = len(text)
    while pos < length:
        entity = ENTITY_PATTERN.match(text, pos)
        if entity:
            pos = entity.end()
        elif is_word_char(text[pos]):
            pos += 1
        else:
            break
    return pos


def tokenize(text: str) -> List[Token]:
    """
    Tokenize text into words, punctuation and whitespace.

    The token texts concatenate back to the input exactly.
    """
    tokens: List[Token] = []
    length = len(text)
    pos = 0

    while pos < length:
        char = text[pos]

        if char.isspace():
            end = pos + 1
            while end < length and text[end].isspace():
                end += 1
            tokens.append(Token(TokenKind.WHITESPACE, text[pos:end]))
            pos = end
            continue

        if is_word_char(char) or ENTITY_PATTERN.match(text, pos):
            end = _scan_word(text, pos)
            tokens.append(Token(TokenKind.WORD, text[pos:end]))
            pos = end
            continue

        end = pos + 1
        while (
            end < length
            and not text[end].isspace()
            and not is_word_char(text[end])
            and not ENTITY_PATTERN.match(text, end)
        ):
            end += 1
        tokens.append(Token(TokenKind.PUNCTUATION, text[pos:end]))
        pos = end

    return tokens


def decode_character_references(value: str) -> str:
    """
    Decode numeric character references and the five predefined entities.

    Other entity references are left as they are, since their replacement
    text is not known.
    """
    def replace(match: re.Match) -> str:
        if match.group(2):
            return PREDEFINED_ENTITIES[match.group(2)]
        number = match.group(1)
        code_point = int(number[1:], 16) if number.startswith("x") else int(number)
        try:
            return chr(code_point)
        except (ValueError, OverflowError):
            return match.group(0)

    return CHARACTER_REFERENCE_PATTERN.sub(replace, value)
