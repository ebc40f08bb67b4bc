"""Shared constants and enumerations for the crossword game engine."""

from __future__ import annotations

from enum import Enum
from typing import Dict


class Orientation(str, Enum):
    """Orientation of a word in the layout."""

    ACROSS = "across"
    DOWN = "down"
    NONE = "none"


BLANK_CELL = "-"
WILDCARD_CHAR = "_"

# Difficulty mapping: level -> number of words in the puzzle.
LEVEL_WORD_COUNTS: Dict[int, int] = {1: 3, 2: 6, 3: 10}
MAX_WORD_COUNT = 10

MAX_LEVEL = 3
