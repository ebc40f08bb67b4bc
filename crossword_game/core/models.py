"""Data models shared by the layout, solve-state and persistence layers."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from .constants import BLANK_CELL, Orientation
from ..data.normalization import normalize_answer


@dataclass(frozen=True, order=True)
class CellKey:
    """Canonical identifier of one grid cell (1-based column ``x``, row ``y``)."""

    x: int
    y: int

    def __str__(self) -> str:
        return f"{self.x}-{self.y}"

    @classmethod
    def parse(cls, text: str) -> "CellKey":
        parts = str(text).split("-")
        if len(parts) != 2:
            raise ValueError(f"Malformed cell key: {text!r}")
        try:
            return cls(int(parts[0]), int(parts[1]))
        except ValueError as exc:
            raise ValueError(f"Malformed cell key: {text!r}") from exc

    def shifted(self, orientation: Orientation, offset: int) -> "CellKey":
        if orientation == Orientation.ACROSS:
            return CellKey(self.x + offset, self.y)
        return CellKey(self.x, self.y + offset)


@dataclass
class Word:
    """A catalog entry; ``orientation`` is set once a layout placed it."""

    clue: str
    answer: str
    orientation: Optional[Orientation] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {"clue": self.clue, "answer": self.answer}
        if self.orientation is not None:
            data["orientation"] = self.orientation.value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Word":
        orientation = data.get("orientation")
        return cls(
            clue=str(data.get("clue", "")),
            answer=str(data.get("answer", "")),
            orientation=Orientation(orientation) if orientation else None,
        )


@dataclass(frozen=True)
class PlacedWord:
    """A word after layout placement."""

    clue: str
    answer: str
    start_x: int
    start_y: int
    position: int
    orientation: Orientation

    @property
    def letters(self) -> str:
        return normalize_answer(self.answer)

    @property
    def length(self) -> int:
        return len(self.letters)

    @property
    def is_placed(self) -> bool:
        return self.orientation != Orientation.NONE

    @property
    def start_key(self) -> CellKey:
        return CellKey(self.start_x, self.start_y)

    @property
    def cells(self) -> Tuple[CellKey, ...]:
        if not self.is_placed:
            return ()
        start = self.start_key
        return tuple(start.shifted(self.orientation, i) for i in range(self.length))

    def to_dict(self) -> Dict[str, Any]:
        return {
            "clue": self.clue,
            "answer": self.answer,
            "startx": self.start_x,
            "starty": self.start_y,
            "position": self.position,
            "orientation": self.orientation.value,
        }


@dataclass
class Layout:
    """Generated crossword layout."""

    rows: int
    columns: int
    table: List[List[str]]
    result: List[PlacedWord]

    @property
    def placed_words(self) -> List[PlacedWord]:
        return [word for word in self.result if word.is_placed]

    @property
    def unplaced_words(self) -> List[PlacedWord]:
        return [word for word in self.result if not word.is_placed]

    def contains(self, key: CellKey) -> bool:
        return 1 <= key.x <= self.columns and 1 <= key.y <= self.rows

    def cell(self, key: CellKey) -> str:
        if not self.contains(key):
            return BLANK_CELL
        return self.table[key.y - 1][key.x - 1]

    def is_blank(self, key: CellKey) -> bool:
        return self.cell(key) == BLANK_CELL

    def to_jsonable(self) -> Dict[str, Any]:
        return {
            "rows": self.rows,
            "columns": self.columns,
            "table": [list(row) for row in self.table],
            "result": [word.to_dict() for word in self.result],
        }


@dataclass
class CorrectWord:
    """A solved word and the cells it covers (string cell keys)."""

    word: str
    cells: List[str] = field(default_factory=list)

    def to_dict(self) -> Dict[str, Any]:
        return {"word": self.word, "cells": list(self.cells)}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "CorrectWord":
        return cls(word=str(data["word"]), cells=[str(c) for c in data.get("cells", [])])


def now_ms() -> int:
    return int(datetime.now(timezone.utc).timestamp() * 1000)


@dataclass
class GameState:
    """Persisted progress snapshot of one playthrough."""

    id: int
    level: int
    time_start: int
    time_end: Optional[int] = None
    guessing_words: List[Word] = field(default_factory=list)
    mistakes_count: int = 0
    attempts: int = 0
    correct_words: List[CorrectWord] = field(default_factory=list)
    cells_value: Dict[str, str] = field(default_factory=dict)
    last_date_modified: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @classmethod
    def new(cls, level: int, words: List[Word], timestamp_ms: Optional[int] = None) -> "GameState":
        stamp = timestamp_ms if timestamp_ms is not None else now_ms()
        return cls(
            id=stamp,
            level=level,
            time_start=stamp,
            guessing_words=list(words),
            last_date_modified=datetime.fromtimestamp(stamp / 1000, tz=timezone.utc),
        )

    @property
    def placeable_count(self) -> int:
        return sum(
            1 for word in self.guessing_words if word.orientation != Orientation.NONE
        )

    @property
    def is_finished(self) -> bool:
        return bool(self.guessing_words) and len(self.correct_words) == self.placeable_count

    @property
    def elapsed_seconds(self) -> Optional[int]:
        if self.time_end is None:
            return None
        return (self.time_end - self.time_start) // 1000

    def solved_cells(self) -> List[str]:
        cells: List[str] = []
        for entry in self.correct_words:
            cells.extend(entry.cells)
        return cells

    def to_dict(self) -> Dict[str, Any]:
        return {
            "id": self.id,
            "level": self.level,
            "timeStart": self.time_start,
            "timeEnd": self.time_end,
            "guessingWords": [word.to_dict() for word in self.guessing_words],
            "mistakesCount": self.mistakes_count,
            "attempts": self.attempts,
            "correctWords": [entry.to_dict() for entry in self.correct_words],
            "cellsValue": dict(self.cells_value),
            "lastDateModified": self.last_date_modified.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GameState":
        modified = data.get("lastDateModified")
        if modified:
            last_modified = datetime.fromisoformat(str(modified).replace("Z", "+00:00"))
        else:
            last_modified = datetime.now(timezone.utc)
        time_end = data.get("timeEnd")
        return cls(
            id=int(data["id"]),
            level=int(data.get("level", 1)),
            time_start=int(data.get("timeStart", data["id"])),
            time_end=int(time_end) if time_end is not None else None,
            guessing_words=[Word.from_dict(w) for w in data.get("guessingWords", [])],
            mistakes_count=int(data.get("mistakesCount", 0)),
            attempts=int(data.get("attempts", 0)),
            correct_words=[CorrectWord.from_dict(c) for c in data.get("correctWords", [])],
            cells_value={str(k): str(v) for k, v in (data.get("cellsValue") or {}).items()},
            last_date_modified=last_modified,
        )
