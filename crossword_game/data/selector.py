"""Word-set selection for a target difficulty."""

from __future__ import annotations

import random
from collections import defaultdict
from typing import Dict, FrozenSet, List, Optional, Sequence, Set

from ..core.constants import LEVEL_WORD_COUNTS, MAX_WORD_COUNT
from ..core.exceptions import SelectionError
from ..core.models import Word
from ..utils.logger import get_logger
from .normalization import distinct_letters


LOGGER = get_logger(__name__)


def words_for_level(level: int) -> int:
    """Number of puzzle words for ``level``."""

    return LEVEL_WORD_COUNTS.get(level, MAX_WORD_COUNT)


class WordSelector:
    """Picks catalog subsets, either uniformly or as a letter-connected set."""

    def __init__(self, rng: Optional[random.Random] = None) -> None:
        self.rng = rng or random.Random()

    def select_random(self, catalog: Sequence[Word], n: int) -> List[Word]:
        if n <= 0:
            return []
        shuffled = list(catalog)
        for i in range(len(shuffled) - 1, 0, -1):
            j = self.rng.randint(0, i)
            shuffled[i], shuffled[j] = shuffled[j], shuffled[i]
        return shuffled[:n]

    def select_connected(self, catalog: Sequence[Word], n: int) -> List[Word]:
        """Greedy walk over the letter graph.

        Returns exactly ``n`` words in which every word shares at least one
        letter with an earlier pick, or ``[]`` when the walk runs out of
        connected candidates before reaching ``n``.
        """

        entries = list(catalog)
        if n <= 0 or n > len(entries):
            return []

        letters: List[FrozenSet[str]] = [distinct_letters(entry.answer) for entry in entries]
        by_letter: Dict[str, Set[int]] = defaultdict(set)
        for index, word_letters in enumerate(letters):
            for letter in word_letters:
                by_letter[letter].add(index)

        chosen: List[int] = [self.rng.randrange(len(entries))]
        chosen_set: Set[int] = set(chosen)
        while len(chosen) < n:
            frontier: Set[int] = set()
            for index in chosen:
                for letter in letters[index]:
                    frontier.update(by_letter[letter])
            frontier -= chosen_set
            if not frontier:
                LOGGER.debug(
                    "Connected selection stalled at %d/%d words", len(chosen), n
                )
                return []
            pick = self.rng.choice(sorted(frontier))
            chosen.append(pick)
            chosen_set.add(pick)

        return [entries[index] for index in chosen]


def pick_words(
    catalog: Sequence[Word],
    level: int,
    selector: Optional[WordSelector] = None,
    retries: int = 5,
) -> List[Word]:
    """Select the word set for ``level``.

    Connected selection is retried ``retries`` times; after that the uniform
    selector is used. A short result is never returned.
    """

    selector = selector or WordSelector()
    count = words_for_level(level)
    for attempt in range(1, max(1, retries) + 1):
        words = selector.select_connected(catalog, count)
        if words:
            LOGGER.info(
                "Selected %d connected words for level %d (attempt %d)", count, level, attempt
            )
            return words

    LOGGER.warning(
        "Connected selection of %d words failed after %d attempts; falling back to random",
        count,
        retries,
    )
    words = selector.select_random(catalog, count)
    if len(words) < count:
        raise SelectionError(
            f"Catalog holds {len(words)} words, level {level} needs {count}"
        )
    return words


__all__ = ["WordSelector", "words_for_level", "pick_words"]
