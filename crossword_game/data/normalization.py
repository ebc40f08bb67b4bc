"""Shared helpers for answer and entry normalization."""

from __future__ import annotations

from typing import FrozenSet, Optional

from ..core.constants import WILDCARD_CHAR

SEPARATORS = frozenset({"-", "_", " "})


def normalize_answer(text: str) -> str:
    """Return the uppercase grid form of ``text``.

    Letters are upper-cased; hyphens, underscores and spaces collapse to
    :data:`WILDCARD_CHAR` so multi-word answers keep one cell per character.
    Anything else (digits, punctuation) is dropped.
    """

    if not text:
        return ""
    transformed = []
    for char in text.strip():
        if char in SEPARATORS:
            transformed.append(WILDCARD_CHAR)
        elif char.isalpha():
            transformed.append(char.upper())
    return "".join(transformed)


def normalize_entry(text: Optional[str]) -> str:
    """Return the comparable form of a single entered cell value."""

    if not text:
        return ""
    # Host inputs append to the previous value; the last character wins.
    char = text[-1]
    if char in SEPARATORS:
        return WILDCARD_CHAR
    return char.upper() if char.isalpha() else ""


def distinct_letters(text: str) -> FrozenSet[str]:
    """Distinct letters of ``text`` ignoring the wildcard class."""

    return frozenset(ch for ch in normalize_answer(text) if ch != WILDCARD_CHAR)


__all__ = ["normalize_answer", "normalize_entry", "distinct_letters", "SEPARATORS"]
