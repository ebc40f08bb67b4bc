"""Word catalog loading and dictionary browsing."""

from __future__ import annotations

import json
from collections import defaultdict
from pathlib import Path
from typing import Any, Dict, Iterable, Iterator, List, Optional

import requests

from ..core.exceptions import CatalogLoadError
from ..core.models import Word
from ..utils.logger import get_logger
from .normalization import normalize_answer


LOGGER = get_logger(__name__)

BUNDLED_CATALOG = Path(__file__).with_name("words.json")


class WordCatalog:
    """Read-only collection of ``{clue, answer}`` entries."""

    def __init__(self, entries: Iterable[Word]) -> None:
        self._entries: List[Word] = []
        for entry in entries:
            if not normalize_answer(entry.answer):
                LOGGER.warning("Skipping catalog entry without answer: %r", entry)
                continue
            self._entries.append(entry)
        self._by_answer: Dict[str, Word] = {}
        for entry in self._entries:
            self._by_answer.setdefault(normalize_answer(entry.answer), entry)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[Word]:
        return iter(self._entries)

    def __getitem__(self, index: int) -> Word:
        return self._entries[index]

    @property
    def entries(self) -> List[Word]:
        return list(self._entries)

    # ------------------------------------------------------------------
    # Loading
    # ------------------------------------------------------------------
    @classmethod
    def from_payload(cls, payload: Any) -> "WordCatalog":
        """Build a catalog from a flat list or a letter-grouped mapping."""

        if isinstance(payload, dict):
            records: List[Any] = []
            for letter in sorted(payload):
                group = payload[letter]
                if not isinstance(group, list):
                    raise CatalogLoadError(f"Catalog group {letter!r} is not a list")
                records.extend(group)
        elif isinstance(payload, list):
            records = payload
        else:
            raise CatalogLoadError("Catalog payload must be a list or a mapping")

        entries: List[Word] = []
        for record in records:
            if not isinstance(record, dict):
                LOGGER.warning("Skipping malformed catalog record: %r", record)
                continue
            answer = str(record.get("answer") or "")
            if not normalize_answer(answer):
                LOGGER.warning("Skipping catalog record without answer: %r", record)
                continue
            entries.append(Word(clue=str(record.get("clue") or ""), answer=answer))
        return cls(entries)

    @classmethod
    def from_json(cls, path: Path | str) -> "WordCatalog":
        source = Path(path)
        if not source.exists():
            raise CatalogLoadError(f"Missing catalog file: {source}")
        try:
            payload = json.loads(source.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise CatalogLoadError(f"Cannot read catalog {source}: {exc}") from exc
        catalog = cls.from_payload(payload)
        LOGGER.info("Loaded %d catalog entries from %s", len(catalog), source)
        return catalog

    @classmethod
    def from_url(cls, url: str, timeout_seconds: float = 30.0) -> "WordCatalog":
        try:
            response = requests.get(url, timeout=timeout_seconds)
            response.raise_for_status()
            payload = response.json()
        except requests.RequestException as exc:
            raise CatalogLoadError(f"Catalog request failed: {exc}") from exc
        except ValueError as exc:
            raise CatalogLoadError(f"Catalog response is not JSON: {exc}") from exc
        catalog = cls.from_payload(payload)
        LOGGER.info("Loaded %d catalog entries from %s", len(catalog), url)
        return catalog

    @classmethod
    def bundled(cls) -> "WordCatalog":
        return cls.from_json(BUNDLED_CATALOG)

    # ------------------------------------------------------------------
    # Browsing
    # ------------------------------------------------------------------
    def get(self, answer: str) -> Optional[Word]:
        return self._by_answer.get(normalize_answer(answer))

    def grouped_by_letter(self) -> Dict[str, List[Word]]:
        groups: Dict[str, List[Word]] = defaultdict(list)
        for entry in self._entries:
            groups[normalize_answer(entry.answer)[0]].append(entry)
        return {letter: groups[letter] for letter in sorted(groups)}

    def search(self, text: str) -> Dict[str, List[Word]]:
        """Letter groups filtered to answers containing ``text``; empty groups dropped."""

        needle = text.strip().lower()
        filtered: Dict[str, List[Word]] = {}
        for letter, group in self.grouped_by_letter().items():
            matches = [entry for entry in group if needle in entry.answer.lower()]
            if matches:
                filtered[letter] = matches
        return filtered
