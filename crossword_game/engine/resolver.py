"""Tap-to-word disambiguation and the fill cursor."""

from __future__ import annotations

from typing import FrozenSet, List, Optional, Sequence

from ..core.models import CellKey, PlacedWord
from ..utils.logger import get_logger
from .index import PositionIndex


LOGGER = get_logger(__name__)


class CellCursor:
    """Cyclic cursor over the ordered cells of one word."""

    def __init__(self, cells: Sequence[CellKey], index: int = 0) -> None:
        if not cells:
            raise ValueError("CellCursor needs at least one cell")
        self.cells: List[CellKey] = list(cells)
        self.index = index % len(self.cells)

    def __len__(self) -> int:
        return len(self.cells)

    @property
    def current(self) -> CellKey:
        return self.cells[self.index]

    def peek(self, offset: int = 1) -> CellKey:
        return self.cells[(self.index + offset) % len(self.cells)]

    def step(self, offset: int = 1) -> CellKey:
        self.index = (self.index + offset) % len(self.cells)
        return self.current

    def index_of(self, key: CellKey) -> int:
        return self.cells.index(key)

    def move_to(self, key: CellKey) -> None:
        self.index = self.index_of(key)

    def is_first(self) -> bool:
        return self.index == 0

    def is_last(self) -> bool:
        return self.index == len(self.cells) - 1


class WordSelectionResolver:
    """Tracks which placed word is being filled.

    A primary tap (``tap_count=1``) inside the active word keeps it; outside
    it selects the first word covering the cell. A secondary tap
    (``tap_count=2``) on a crossing cycles between the two words there.
    """

    def __init__(self, index: PositionIndex) -> None:
        self.index = index
        self.current_word: Optional[PlacedWord] = None
        self.cursor: Optional[CellCursor] = None

    @property
    def highlighted_cells(self) -> FrozenSet[CellKey]:
        if self.current_word is None:
            return frozenset()
        return frozenset(self.current_word.cells)

    def clear(self) -> None:
        self.current_word = None
        self.cursor = None

    def resolve(self, tap_count: int, key: CellKey) -> Optional[PlacedWord]:
        if tap_count not in (1, 2):
            raise ValueError(f"Unsupported tap count: {tap_count}")

        occupants = self.index.occupants(key)
        if not occupants:
            LOGGER.debug("Ignoring tap on empty cell %s", key)
            return self.current_word

        current = self.current_word
        if tap_count == 1:
            if current is None or key not in current.cells:
                current = occupants[0]
        elif len(occupants) == 2:
            if current in occupants:
                current = occupants[1] if current == occupants[0] else occupants[0]
            else:
                current = occupants[0]
        else:
            # Nothing to cycle to on a single-word cell.
            return self.current_word

        self.current_word = current
        self.cursor = CellCursor(current.cells, current.cells.index(key))
        return current
