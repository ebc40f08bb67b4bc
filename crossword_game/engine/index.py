"""Read-only lookup structures derived from a layout."""

from __future__ import annotations

from typing import Dict, List, Optional

from ..core.constants import Orientation
from ..core.models import CellKey, Layout, PlacedWord


class PositionIndex:
    """Per-layout cell lookups.

    * ``occupants``: cell -> placed words covering it (across first)
    * ``answer_at``: cell -> expected uppercase letter
    * ``numbers_at``: word start cell -> word numbers anchored there

    Unplaced words never appear in any of the maps.
    """

    def __init__(self, layout: Layout) -> None:
        self.layout = layout
        self._occupants: Dict[CellKey, List[PlacedWord]] = {}
        self._answers: Dict[CellKey, str] = {}
        self._numbers: Dict[CellKey, List[int]] = {}
        self._build()

    def _build(self) -> None:
        for word in self.layout.placed_words:
            for key, char in zip(word.cells, word.letters):
                self._occupants.setdefault(key, []).append(word)
                self._answers[key] = char
            numbers = self._numbers.setdefault(word.start_key, [])
            if word.position not in numbers:
                numbers.append(word.position)
        for occupants in self._occupants.values():
            occupants.sort(key=lambda w: w.orientation != Orientation.ACROSS)
        for numbers in self._numbers.values():
            numbers.sort()

    @property
    def words(self) -> List[PlacedWord]:
        return self.layout.placed_words

    def contains(self, key: CellKey) -> bool:
        return key in self._occupants

    def occupants(self, key: CellKey) -> List[PlacedWord]:
        return list(self._occupants.get(key, ()))

    def answer_at(self, key: CellKey) -> Optional[str]:
        return self._answers.get(key)

    def numbers_at(self, key: CellKey) -> List[int]:
        return list(self._numbers.get(key, ()))

    def cells(self) -> List[CellKey]:
        return sorted(self._occupants, key=lambda k: (k.y, k.x))

    def by_orientation(self) -> Dict[Orientation, List[PlacedWord]]:
        groups: Dict[Orientation, List[PlacedWord]] = {
            Orientation.ACROSS: [],
            Orientation.DOWN: [],
        }
        for word in self.words:
            groups[word.orientation].append(word)
        for group in groups.values():
            group.sort(key=lambda w: w.position)
        return groups

    def word_by_position(self, position: int, orientation: Orientation) -> Optional[PlacedWord]:
        for word in self.words:
            if word.position == position and word.orientation == orientation:
                return word
        return None
