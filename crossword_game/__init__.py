"""Puzzle construction and solve-state engine for an interactive crossword game.

This package exposes the public API surface via:

- ``crossword_game.data.catalog.WordCatalog``: the clue/answer dictionary.
- ``crossword_game.data.selector.WordSelector``: picks word sets per level.
- ``crossword_game.engine.layout.LayoutGenerator``: places words on a grid.
- ``crossword_game.engine.session.GameSession``: taps, entries, grading and saves.
- ``crossword_game.engine.state_store.GameStateStore``: progress persistence.
"""

from .core.constants import Orientation
from .core.models import CellKey, GameState, Layout, PlacedWord, Word
from .data.catalog import WordCatalog
from .data.selector import WordSelector, pick_words, words_for_level
from .engine.index import PositionIndex
from .engine.layout import LayoutConfig, LayoutGenerator
from .engine.resolver import WordSelectionResolver
from .engine.session import GameConfig, GameSession
from .engine.state_store import FileBackend, GameStateStore, MemoryBackend
from .engine.validator import AnswerValidator, CheckResult

__all__ = [
    "AnswerValidator",
    "CellKey",
    "CheckResult",
    "FileBackend",
    "GameConfig",
    "GameSession",
    "GameState",
    "GameStateStore",
    "Layout",
    "LayoutConfig",
    "LayoutGenerator",
    "MemoryBackend",
    "Orientation",
    "PlacedWord",
    "PositionIndex",
    "Word",
    "WordCatalog",
    "WordSelectionResolver",
    "WordSelector",
    "pick_words",
    "words_for_level",
]

__version__ = "0.1.0"
