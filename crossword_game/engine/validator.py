"""Grading of fully entered words."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import List, Mapping, Optional

from ..core.models import CellKey, PlacedWord
from ..data.normalization import normalize_entry
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)


class CheckResult(str, Enum):
    """Outcome of grading one word."""

    INDETERMINATE = "indeterminate"
    CORRECT = "correct"
    INCORRECT = "incorrect"


@dataclass
class WordCheck:
    result: CheckResult
    mismatches: List[CellKey]


class AnswerValidator:
    """Compares the entries of a word's cells with its answer."""

    def check(self, word: PlacedWord, cell_values: Mapping[CellKey, Optional[str]]) -> CheckResult:
        return self.inspect(word, cell_values).result

    def inspect(self, word: PlacedWord, cell_values: Mapping[CellKey, Optional[str]]) -> WordCheck:
        cells = word.cells
        if not cells:
            return WordCheck(CheckResult.INDETERMINATE, [])

        entries = [normalize_entry(cell_values.get(key)) for key in cells]
        if not all(entries):
            return WordCheck(CheckResult.INDETERMINATE, [])

        mismatches = [
            key for key, entry, expected in zip(cells, entries, word.letters) if entry != expected
        ]
        result = CheckResult.INCORRECT if mismatches else CheckResult.CORRECT
        LOGGER.debug("Checked %s #%s: %s", word.orientation.value, word.position, result.value)
        return WordCheck(result, mismatches)
