"""Game session orchestration.

A :class:`GameSession` owns the solve state of one playthrough: it turns
host events (cell taps, letter entries, lifecycle requests) into calls on
the resolver, the validator and the state store, and exposes the cell sets
the host needs for rendering. Saves are batched by a :class:`SaveCoalescer`
so the store sees at most one write per interval.
"""

from __future__ import annotations

import copy
import os
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Callable, Dict, FrozenSet, List, Optional, Sequence, Set, Tuple

from ..core.constants import MAX_LEVEL, Orientation
from ..core.exceptions import GameStateError, StateStoreError
from ..core.models import CellKey, CorrectWord, GameState, Layout, PlacedWord, Word, now_ms
from ..data.normalization import normalize_entry
from ..data.selector import WordSelector, pick_words
from ..utils.logger import get_logger
from .index import PositionIndex
from .layout import LayoutConfig, LayoutGenerator
from .resolver import WordSelectionResolver
from .state_store import GameStateStore
from .validator import AnswerValidator, CheckResult


LOGGER = get_logger(__name__)


@dataclass
class GameConfig:
    level_ceiling: int = MAX_LEVEL
    save_interval_seconds: float = 0.5
    connected_retries: int = 5
    max_rows: Optional[int] = None
    max_columns: Optional[int] = None

    @classmethod
    def from_env(cls) -> "GameConfig":
        config = cls()
        interval = os.environ.get("CROSSWORD_SAVE_INTERVAL")
        if interval:
            config.save_interval_seconds = float(interval)
        ceiling = os.environ.get("CROSSWORD_LEVEL_CEILING")
        if ceiling:
            config.level_ceiling = int(ceiling)
        return config

    def to_layout_config(self) -> LayoutConfig:
        return LayoutConfig(max_rows=self.max_rows, max_columns=self.max_columns)


class SaveCoalescer:
    """Trailing-edge batching of state saves.

    ``request`` records the newest snapshot; ``flush_due`` writes it once
    ``interval_seconds`` passed without a newer request. Store failures are
    logged and the in-memory state stays authoritative.
    """

    def __init__(
        self,
        store: GameStateStore,
        interval_seconds: float = 0.5,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self.store = store
        self.interval_seconds = interval_seconds
        self.clock = clock
        self._pending: Optional[GameState] = None
        self._requested_at = 0.0

    @property
    def has_pending(self) -> bool:
        return self._pending is not None

    def request(self, state: GameState) -> None:
        self._pending = copy.deepcopy(state)
        self._requested_at = self.clock()

    def discard(self) -> None:
        self._pending = None

    def flush_due(self) -> bool:
        if self._pending is None:
            return False
        if self.clock() - self._requested_at < self.interval_seconds:
            return False
        return self.flush()

    def flush(self) -> bool:
        if self._pending is None:
            return False
        state, self._pending = self._pending, None
        try:
            self.store.save(state)
        except StateStoreError as exc:
            LOGGER.warning("Saving game state %s failed: %s", state.id, exc)
            return False
        return True


@dataclass
class EntryOutcome:
    """What a letter entry changed, for the host to render."""

    accepted: bool
    result: Optional[CheckResult] = None
    word: Optional[PlacedWord] = None
    error_cells: FrozenSet[CellKey] = frozenset()
    solved_cells: FrozenSet[CellKey] = frozenset()
    next_cell: Optional[CellKey] = None
    finished: bool = False


def _word_id(word: PlacedWord) -> Tuple[CellKey, Orientation]:
    return word.start_key, word.orientation


class GameSession:
    """Solve-state owner for one playthrough."""

    def __init__(
        self,
        catalog: Sequence[Word],
        store: GameStateStore,
        config: Optional[GameConfig] = None,
        selector: Optional[WordSelector] = None,
        clock_ms: Callable[[], int] = now_ms,
        monotonic: Callable[[], float] = time.monotonic,
    ) -> None:
        self.catalog = catalog
        self.store = store
        self.config = config or GameConfig()
        self.selector = selector or WordSelector()
        self.clock_ms = clock_ms
        self.layout_generator = LayoutGenerator(self.config.to_layout_config())
        self.validator = AnswerValidator()
        self.saver = SaveCoalescer(store, self.config.save_interval_seconds, monotonic)

        self.state: Optional[GameState] = None
        self.layout: Optional[Layout] = None
        self.index: Optional[PositionIndex] = None
        self.resolver: Optional[WordSelectionResolver] = None
        self._cell_values: Dict[CellKey, str] = {}
        self._solved_cells: Set[CellKey] = set()
        self._solved_words: Set[Tuple[CellKey, Orientation]] = set()
        self._error_cells: FrozenSet[CellKey] = frozenset()

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def previous_state(self) -> Optional[GameState]:
        try:
            return self.store.load()
        except StateStoreError as exc:
            LOGGER.warning("Loading previous game state failed: %s", exc)
            return None

    def requires_confirmation(self) -> bool:
        """Whether starting a new game would discard unfinished progress."""

        previous = self.previous_state()
        return previous is not None and not previous.is_finished

    def resume(self) -> GameState:
        previous = self.previous_state()
        if previous is None:
            raise GameStateError("No saved game to resume")
        self._hydrate(previous)
        LOGGER.info("Resumed game %s at level %d", previous.id, previous.level)
        return previous

    def new_game(self, confirm_discard: bool = False) -> GameState:
        previous = self.previous_state()
        if previous is not None and not previous.is_finished and not confirm_discard:
            raise GameStateError("Starting a new game discards unfinished progress")
        level = previous.level if previous is not None else 1
        return self._start(level)

    def advance_level(self) -> GameState:
        state = self.state or self.previous_state()
        if state is None or not state.is_finished:
            raise GameStateError("Only a finished game can advance to the next level")
        return self._start(state.level + 1)

    def reset(self) -> None:
        self.saver.discard()
        self.store.clear()
        self.state = None
        self.layout = None
        self.index = None
        self.resolver = None
        self._cell_values.clear()
        self._solved_cells.clear()
        self._solved_words.clear()
        self._error_cells = frozenset()
        LOGGER.info("Game progress reset")

    def flush(self) -> bool:
        return self.saver.flush()

    def tick(self) -> bool:
        return self.saver.flush_due()

    def _start(self, level: int) -> GameState:
        level = max(1, min(level, self.config.level_ceiling))
        words = pick_words(
            self.catalog, level, self.selector, retries=self.config.connected_retries
        )
        state = GameState.new(level, [Word(w.clue, w.answer) for w in words], self.clock_ms())
        self._hydrate(state)
        self.saver.request(state)
        self.saver.flush()
        LOGGER.info("Started game %s at level %d with %d words", state.id, level, len(words))
        return state

    def _hydrate(self, state: GameState) -> None:
        """Rebuild layout and solve state from a snapshot (once per session start)."""

        layout = self.layout_generator.generate(state.guessing_words)
        self._annotate_orientations(state.guessing_words, layout)

        self.state = state
        self.layout = layout
        self.index = PositionIndex(layout)
        self.resolver = WordSelectionResolver(self.index)
        self._error_cells = frozenset()
        self._cell_values = {}
        self._solved_cells = set()
        self._solved_words = set()

        for raw_key, value in state.cells_value.items():
            try:
                key = CellKey.parse(raw_key)
            except ValueError:
                LOGGER.warning("Dropping malformed cell key %r from saved state", raw_key)
                continue
            entry = normalize_entry(value)
            if entry and self.index.contains(key):
                self._cell_values[key] = entry

        for solved in state.correct_words:
            keys = [CellKey.parse(raw) for raw in solved.cells]
            self._solved_cells.update(keys)
            for key in keys:
                expected = self.index.answer_at(key)
                if expected:
                    self._cell_values[key] = expected
            for word in (self.index.occupants(keys[0]) if keys else ()):
                if list(word.cells) == keys:
                    self._solved_words.add(_word_id(word))

    @staticmethod
    def _annotate_orientations(words: List[Word], layout: Layout) -> None:
        remaining = list(layout.result)
        for word in words:
            for candidate in remaining:
                if candidate.answer == word.answer and candidate.clue == word.clue:
                    word.orientation = candidate.orientation
                    remaining.remove(candidate)
                    break

    # ------------------------------------------------------------------
    # Events
    # ------------------------------------------------------------------
    def tap(self, key: CellKey, tap_count: int = 1) -> FrozenSet[CellKey]:
        resolver = self._require_resolver()
        resolver.resolve(tap_count, key)
        return resolver.highlighted_cells

    def enter_letter(self, key: CellKey, text: str) -> EntryOutcome:
        resolver = self._require_resolver()
        state = self._require_state()
        word = resolver.current_word
        if word is None or key not in word.cells or key in self._solved_cells:
            return EntryOutcome(accepted=False)
        entry = normalize_entry(text)
        if text and not entry:
            return EntryOutcome(accepted=False)
        if resolver.cursor is not None:
            resolver.cursor.move_to(key)

        if entry:
            self._cell_values[key] = entry
        else:
            self._cell_values.pop(key, None)
        state.cells_value[str(key)] = entry
        self._error_cells = frozenset()

        outcome = EntryOutcome(accepted=True, word=word)
        if entry and _word_id(word) not in self._solved_words:
            outcome.result = self.validator.check(word, self._cell_values)
            self._apply_result(word, outcome)
            outcome.next_cell = self._advance_cursor()
        elif resolver.cursor is not None:
            outcome.next_cell = resolver.cursor.current

        outcome.finished = self._touch(state)
        return outcome

    def erase(self, key: CellKey) -> EntryOutcome:
        """Clear ``key`` or, when already empty, step the cursor back."""

        resolver = self._require_resolver()
        if self._cell_values.get(key):
            return self.enter_letter(key, "")
        word = resolver.current_word
        if word is None or resolver.cursor is None or key not in word.cells:
            return EntryOutcome(accepted=False)
        resolver.cursor.move_to(key)
        return EntryOutcome(accepted=True, word=word, next_cell=self._retreat_cursor())

    def _apply_result(self, word: PlacedWord, outcome: EntryOutcome) -> None:
        state = self._require_state()
        cells = frozenset(word.cells)
        if outcome.result == CheckResult.CORRECT:
            state.correct_words.append(
                CorrectWord(word=word.answer, cells=[str(key) for key in word.cells])
            )
            self._solved_cells.update(cells)
            self._solved_words.add(_word_id(word))
            outcome.solved_cells = cells
            LOGGER.info("Solved %s #%d (%s)", word.orientation.value, word.position, word.answer)
        elif outcome.result == CheckResult.INCORRECT:
            state.attempts += 1
            state.mistakes_count += 1
            self._error_cells = cells
            outcome.error_cells = cells

    def _advance_cursor(self) -> Optional[CellKey]:
        cursor = self._require_resolver().cursor
        if cursor is None:
            return None
        for index in range(cursor.index + 1, len(cursor)):
            if cursor.cells[index] not in self._solved_cells:
                cursor.index = index
                break
        return cursor.current

    def _retreat_cursor(self) -> Optional[CellKey]:
        cursor = self._require_resolver().cursor
        if cursor is None:
            return None
        for index in range(cursor.index - 1, -1, -1):
            if cursor.cells[index] not in self._solved_cells:
                cursor.index = index
                break
        return cursor.current

    def _touch(self, state: GameState) -> bool:
        finished = state.is_finished
        if finished and state.time_end is None:
            state.time_end = self.clock_ms()
            LOGGER.info(
                "Game %s finished in %ss with %d mistakes",
                state.id,
                state.elapsed_seconds,
                state.mistakes_count,
            )
        state.last_date_modified = datetime.now(timezone.utc)
        self.saver.request(state)
        return finished

    def _require_resolver(self) -> WordSelectionResolver:
        if self.resolver is None or self.state is None:
            raise GameStateError("No active game; start or resume one first")
        return self.resolver

    def _require_state(self) -> GameState:
        if self.state is None:
            raise GameStateError("No active game; start or resume one first")
        return self.state

    # ------------------------------------------------------------------
    # Outputs
    # ------------------------------------------------------------------
    @property
    def current_word(self) -> Optional[PlacedWord]:
        return self.resolver.current_word if self.resolver else None

    @property
    def cursor_cell(self) -> Optional[CellKey]:
        if self.resolver is None or self.resolver.cursor is None:
            return None
        return self.resolver.cursor.current

    @property
    def highlighted_cells(self) -> FrozenSet[CellKey]:
        return self.resolver.highlighted_cells if self.resolver else frozenset()

    @property
    def solved_cells(self) -> FrozenSet[CellKey]:
        return frozenset(self._solved_cells)

    @property
    def error_cells(self) -> FrozenSet[CellKey]:
        return self._error_cells

    @property
    def is_finished(self) -> bool:
        return self.state is not None and self.state.is_finished

    @property
    def can_advance(self) -> bool:
        return self.is_finished and self.state is not None and (
            self.state.level < self.config.level_ceiling
        )

    def cell_value(self, key: CellKey) -> str:
        return self._cell_values.get(key, "")

    def is_editable(self, key: CellKey) -> bool:
        return self.index is not None and self.index.contains(key) and key not in self._solved_cells
