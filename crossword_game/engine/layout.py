"""Deterministic crossword layout generation.

Words are placed one at a time onto an unbounded sparse grid. The first
word is anchored across at the origin; every later word must cross at
least one already placed word on a shared letter. Words that never find a
legal crossing are reported with :attr:`Orientation.NONE` and left out of
the table. The sparse grid is finally cropped to its bounding box and the
word starts are numbered in reading order.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set, Tuple

from ..core.constants import BLANK_CELL, WILDCARD_CHAR, Orientation
from ..core.exceptions import LayoutError
from ..core.models import Layout, PlacedWord, Word
from ..data.normalization import normalize_answer
from ..utils.logger import get_logger


LOGGER = get_logger(__name__)

STEPS: Dict[Orientation, Tuple[int, int]] = {
    Orientation.ACROSS: (0, 1),
    Orientation.DOWN: (1, 0),
}


@dataclass
class LayoutConfig:
    """Optional size limits for the generated grid."""

    max_rows: Optional[int] = None
    max_columns: Optional[int] = None

    def __post_init__(self) -> None:
        for name in ("max_rows", "max_columns"):
            limit = getattr(self, name)
            if limit is not None and limit < 1:
                raise LayoutError(f"{name} must be positive, got {limit}")


@dataclass
class _Placement:
    index: int
    word: Word
    letters: str
    row: int
    col: int
    orientation: Orientation


@dataclass
class _SparseGrid:
    letters: Dict[Tuple[int, int], str] = field(default_factory=dict)
    owners: Dict[Tuple[int, int], Set[Orientation]] = field(default_factory=dict)
    min_row: int = 0
    max_row: int = -1
    min_col: int = 0
    max_col: int = -1

    def is_empty(self) -> bool:
        return not self.letters

    def extent_with(self, row: int, col: int, orientation: Orientation, length: int) -> Tuple[int, int]:
        dr, dc = STEPS[orientation]
        end_row, end_col = row + dr * (length - 1), col + dc * (length - 1)
        if self.is_empty():
            return end_row - row + 1, end_col - col + 1
        height = max(self.max_row, end_row) - min(self.min_row, row) + 1
        width = max(self.max_col, end_col) - min(self.min_col, col) + 1
        return height, width

    def write(self, placement: _Placement) -> None:
        dr, dc = STEPS[placement.orientation]
        if self.is_empty():
            self.min_row = self.max_row = placement.row
            self.min_col = self.max_col = placement.col
        for i, char in enumerate(placement.letters):
            cell = (placement.row + dr * i, placement.col + dc * i)
            self.letters[cell] = char
            self.owners.setdefault(cell, set()).add(placement.orientation)
            self.min_row = min(self.min_row, cell[0])
            self.max_row = max(self.max_row, cell[0])
            self.min_col = min(self.min_col, cell[1])
            self.max_col = max(self.max_col, cell[1])


class LayoutGenerator:
    """Builds a :class:`Layout` from an ordered word list."""

    def __init__(self, config: Optional[LayoutConfig] = None) -> None:
        self.config = config or LayoutConfig()

    # ------------------------------------------------------------------
    # Public entrypoint
    # ------------------------------------------------------------------
    def generate(self, words: Sequence[Word]) -> Layout:
        if not words:
            return Layout(rows=0, columns=0, table=[], result=[])

        letters = [normalize_answer(word.answer) for word in words]
        grid = _SparseGrid()
        placements: Dict[int, _Placement] = {}

        seen: Set[str] = set()
        pending: List[int] = []
        # Longest first; sorted() is stable so input order breaks ties.
        for index in sorted(range(len(words)), key=lambda i: -len(letters[i])):
            if not letters[index]:
                LOGGER.warning("Word %r has no letters; leaving it unplaced", words[index].answer)
                continue
            if letters[index] in seen:
                LOGGER.warning("Duplicate answer %r; leaving it unplaced", words[index].answer)
                continue
            seen.add(letters[index])
            pending.append(index)

        while pending:
            remaining: List[int] = []
            for index in pending:
                placement = self._find_placement(grid, index, words[index], letters[index])
                if placement is None:
                    remaining.append(index)
                    continue
                grid.write(placement)
                placements[index] = placement
                LOGGER.debug(
                    "Placed %s %s at (%s,%s)",
                    placement.letters,
                    placement.orientation.value,
                    placement.row,
                    placement.col,
                )
            if len(remaining) == len(pending):
                break
            pending = remaining

        unplaced = [i for i in range(len(words)) if i not in placements]
        if unplaced:
            LOGGER.info(
                "Layout left %d of %d words unplaced: %s",
                len(unplaced),
                len(words),
                ", ".join(words[i].answer for i in unplaced),
            )
        return self._build_layout(grid, words, placements, unplaced)

    # ------------------------------------------------------------------
    # Placement search
    # ------------------------------------------------------------------
    def _find_placement(
        self, grid: _SparseGrid, index: int, word: Word, letters: str
    ) -> Optional[_Placement]:
        if grid.is_empty():
            if not self._fits(grid, 0, 0, Orientation.ACROSS, len(letters)):
                return None
            return _Placement(index, word, letters, 0, 0, Orientation.ACROSS)

        best: Optional[_Placement] = None
        best_score: Optional[Tuple[int, int]] = None
        for offset, char in enumerate(letters):
            if char == WILDCARD_CHAR:
                continue
            for cell, existing in grid.letters.items():
                if existing != char:
                    continue
                for orientation, (dr, dc) in STEPS.items():
                    if orientation in grid.owners[cell]:
                        continue
                    row, col = cell[0] - dr * offset, cell[1] - dc * offset
                    crossings = self._crossings(grid, letters, row, col, orientation)
                    if not crossings:
                        continue
                    height, width = grid.extent_with(row, col, orientation, len(letters))
                    score = (crossings, -(height * width))
                    if best_score is None or score > best_score:
                        best_score = score
                        best = _Placement(index, word, letters, row, col, orientation)
        return best

    def _fits(self, grid: _SparseGrid, row: int, col: int, orientation: Orientation, length: int) -> bool:
        height, width = grid.extent_with(row, col, orientation, length)
        if self.config.max_rows is not None and height > self.config.max_rows:
            return False
        if self.config.max_columns is not None and width > self.config.max_columns:
            return False
        return True

    def _crossings(
        self, grid: _SparseGrid, letters: str, row: int, col: int, orientation: Orientation
    ) -> int:
        """Number of crossings for a legal placement, 0 when illegal."""

        dr, dc = STEPS[orientation]
        length = len(letters)
        if not self._fits(grid, row, col, orientation, length):
            return 0
        if (row - dr, col - dc) in grid.letters:
            return 0
        if (row + dr * length, col + dc * length) in grid.letters:
            return 0

        crossings = 0
        for i, char in enumerate(letters):
            cell = (row + dr * i, col + dc * i)
            existing = grid.letters.get(cell)
            if existing is not None:
                if existing != char or existing == WILDCARD_CHAR:
                    return 0
                if orientation in grid.owners[cell]:
                    return 0
                crossings += 1
                continue
            # Newly written cells must not touch letters on either side.
            side_a = (cell[0] + dc, cell[1] + dr)
            side_b = (cell[0] - dc, cell[1] - dr)
            if side_a in grid.letters or side_b in grid.letters:
                return 0
        # A word made only of crossings would have no editable cell of its own.
        if crossings == length:
            return 0
        return crossings

    # ------------------------------------------------------------------
    # Output
    # ------------------------------------------------------------------
    @staticmethod
    def _build_layout(
        grid: _SparseGrid,
        words: Sequence[Word],
        placements: Dict[int, _Placement],
        unplaced: List[int],
    ) -> Layout:
        if grid.is_empty():
            rows = columns = 0
        else:
            rows = grid.max_row - grid.min_row + 1
            columns = grid.max_col - grid.min_col + 1
        table = [[BLANK_CELL for _ in range(columns)] for _ in range(rows)]
        for (row, col), char in grid.letters.items():
            table[row - grid.min_row][col - grid.min_col] = char

        starts = sorted({(p.row, p.col) for p in placements.values()})
        numbers = {start: number for number, start in enumerate(starts, start=1)}

        placed_words = [
            PlacedWord(
                clue=p.word.clue,
                answer=p.word.answer,
                start_x=p.col - grid.min_col + 1,
                start_y=p.row - grid.min_row + 1,
                position=numbers[(p.row, p.col)],
                orientation=p.orientation,
            )
            for p in placements.values()
        ]
        placed_words.sort(key=lambda w: (w.position, w.orientation != Orientation.ACROSS))

        unplaced_words = [
            PlacedWord(
                clue=words[i].clue,
                answer=words[i].answer,
                start_x=0,
                start_y=0,
                position=0,
                orientation=Orientation.NONE,
            )
            for i in unplaced
        ]
        return Layout(rows=rows, columns=columns, table=table, result=placed_words + unplaced_words)


__all__ = ["LayoutGenerator", "LayoutConfig"]
