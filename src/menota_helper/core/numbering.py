"""
Successor computation for milestone numbering values.

Manuscript transcriptions number page and line breaks with a handful of
conventions that never overlap on the surface: plain cardinals ("12"),
foliation with recto/verso sides ("12r", "12v") and small roman numerals
("iv", "IX"). next_value tries each in turn and always returns a string.
"""

from __future__ import annotations

import re
from typing import Dict, List, Optional, Tuple

ROMAN_PATTERN = re.compile(r"[IVXLCDMivxlcdm]+")
RECTO_VERSO_PATTERN = re.compile(r"(\d+)([rv])")
NUMERIC_PATTERN = re.compile(r"(\d+)")

# Only numerals for 1 through 10 are recognised.
ROMAN_TO_DECIMAL: Dict[str, int] = {
    "i": 1, "ii": 2, "iii": 3, "iv": 4, "v": 5,
    "vi": 6, "vii": 7, "viii": 8, "ix": 9, "x": 10,
    "I": 1, "II": 2, "III": 3, "IV": 4, "V": 5,
    "VI": 6, "VII": 7, "VIII": 8, "IX": 9, "X": 10,
}

ROMAN_SYMBOLS: List[Tuple[int, str]] = [
    (10, "X"),
    (9, "IX"),
    (5, "V"),
    (4, "IV"),
    (1, "I"),
]


def is_roman_numeral(value: str) -> bool:
    """Check whether value consists only of roman numeral letters."""
    return bool(ROMAN_PATTERN.fullmatch(value))


def to_roman(number: int, upper: bool = True) -> str:
    """Encode a positive integer with the subtractive symbol set."""
    result = ""
    for amount, symbol in ROMAN_SYMBOLS:
        while number >= amount:
            result += symbol
            number -= amount
    return result if upper else result.lower()


def increment_roman(roman: str) -> Optional[str]:
    """
    Increment a roman numeral in the 1-10 lookup.

    The case of the whole token decides the case of the result. Returns None
    for numerals outside the lookup so the caller can fall back.
    """
    decimal = ROMAN_TO_DECIMAL.get(roman)
    if decimal is None:
        return None
    return to_roman(decimal + 1, upper=roman == roman.upper())


def next_value(current: Optional[str]) -> str:
    """
    Calculate the value following current.

    Handles roman numerals, recto/verso foliation and plain integers, and
    appends "1" to anything else.
    """
    if not current:
        return "1"

    if is_roman_numeral(current):
        incremented = increment_roman(current)
        if incremented is not None:
            return incremented
        return f"{current}1"

    recto_verso = RECTO_VERSO_PATTERN.fullmatch(current)
    if recto_verso:
        page_number = int(recto_verso.group(1))
        if recto_verso.group(2) == "r":
            return f"{page_number}v"
        return f"{page_number + 1}r"

    numeric = NUMERIC_PATTERN.fullmatch(current)
    if numeric:
        return str(int(numeric.group(1)) + 1)

    return f"{current}1"
