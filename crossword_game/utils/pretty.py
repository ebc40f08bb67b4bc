"""Pretty-print helpers for layouts and game progress."""

from __future__ import annotations

import sys
from typing import TYPE_CHECKING, AbstractSet, Mapping, Optional

from ..core.constants import BLANK_CELL, Orientation
from ..core.models import CellKey

if TYPE_CHECKING:
    from ..core.models import GameState, Layout
    from ..engine.index import PositionIndex


def format_layout(
    layout: Layout,
    *,
    values: Optional[Mapping[CellKey, str]] = None,
    solved: AbstractSet[CellKey] = frozenset(),
) -> str:
    """Render the grid; with ``values`` the entries replace the answers.

    Blank cells show as ``#``, empty playable cells as ``.``, solved cells
    are upper-case and open entries lower-case.
    """

    header_cells = [f"{x:>2}" for x in range(1, layout.columns + 1)]
    lines = ["    " + " ".join(header_cells)]
    lines.append("    " + "-" * max(0, 3 * layout.columns - 1))
    for y in range(1, layout.rows + 1):
        symbols = []
        for x in range(1, layout.columns + 1):
            key = CellKey(x, y)
            answer = layout.cell(key)
            if answer == BLANK_CELL:
                symbols.append("#")
            elif values is None:
                symbols.append(answer)
            elif key in solved:
                symbols.append(values.get(key, answer).upper())
            else:
                symbols.append(values.get(key, "").lower() or ".")
        lines.append(f"{y:>2} | " + " ".join(f"{symbol:>2}" for symbol in symbols))
    return "\n".join(lines)


def format_clues(index: PositionIndex) -> str:
    lines = []
    for orientation, words in index.by_orientation().items():
        if not words:
            continue
        lines.append(orientation.value.capitalize())
        lines.extend(f"  {word.position}. {word.clue}" for word in words)
    return "\n".join(lines)


def print_game_stats(state: GameState, *, stream=None) -> None:
    """Print the progress summary shown at the end of a game."""

    stream = stream or sys.stdout
    print(f"Level:     {state.level}", file=stream)
    print(f"Solved:    {len(state.correct_words)}/{state.placeable_count}", file=stream)
    print(f"Attempts:  {state.attempts}", file=stream)
    print(f"Mistakes:  {state.mistakes_count}", file=stream)
    if state.elapsed_seconds is not None:
        print(f"Time:      {state.elapsed_seconds}s", file=stream)
    unplaced = [w.answer for w in state.guessing_words if w.orientation == Orientation.NONE]
    if unplaced:
        print(f"Unplaced:  {', '.join(unplaced)}", file=stream)
