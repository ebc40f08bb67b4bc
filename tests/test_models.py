import unittest
from datetime import datetime, timezone

from crossword_game.core.constants import Orientation
from crossword_game.core.models import CellKey, CorrectWord, GameState, PlacedWord, Word
from crossword_game.data.normalization import distinct_letters, normalize_answer, normalize_entry


class CellKeyTests(unittest.TestCase):
    def test_string_form_round_trips(self) -> None:
        key = CellKey(3, 7)
        self.assertEqual(str(key), "3-7")
        self.assertEqual(CellKey.parse("3-7"), key)

    def test_parse_rejects_malformed_keys(self) -> None:
        for raw in ("3", "a-b", "1-2-3", ""):
            with self.assertRaises(ValueError):
                CellKey.parse(raw)

    def test_keys_are_hashable_values(self) -> None:
        self.assertEqual(len({CellKey(1, 2), CellKey(1, 2), CellKey(2, 1)}), 2)


class NormalizationTests(unittest.TestCase):
    def test_answer_separators_collapse_to_wildcard(self) -> None:
        self.assertEqual(normalize_answer("ice cream"), "ICE_CREAM")
        self.assertEqual(normalize_answer("t-shirt"), "T_SHIRT")
        self.assertEqual(normalize_answer("rock_n_roll"), "ROCK_N_ROLL")

    def test_entry_keeps_last_character(self) -> None:
        self.assertEqual(normalize_entry("ab"), "B")
        self.assertEqual(normalize_entry("-"), "_")
        self.assertEqual(normalize_entry(""), "")
        self.assertEqual(normalize_entry("7"), "")

    def test_distinct_letters_skip_wildcard(self) -> None:
        self.assertEqual(distinct_letters("a-ab"), frozenset({"A", "B"}))


class PlacedWordTests(unittest.TestCase):
    def test_across_and_down_cells(self) -> None:
        across = PlacedWord("fruit", "apple", 2, 3, 1, Orientation.ACROSS)
        down = PlacedWord("color", "amber", 2, 3, 1, Orientation.DOWN)
        self.assertEqual(across.cells[-1], CellKey(6, 3))
        self.assertEqual(down.cells[-1], CellKey(2, 7))
        self.assertEqual(across.cells[0], down.cells[0])

    def test_unplaced_word_has_no_cells(self) -> None:
        word = PlacedWord("x", "xyz", 0, 0, 0, Orientation.NONE)
        self.assertFalse(word.is_placed)
        self.assertEqual(word.cells, ())


class GameStateTests(unittest.TestCase):
    def _state(self) -> GameState:
        return GameState(
            id=1700000000000,
            level=2,
            time_start=1700000000000,
            time_end=1700000042000,
            guessing_words=[
                Word("fruit", "apple", Orientation.ACROSS),
                Word("color", "amber", Orientation.DOWN),
                Word("none", "xyz", Orientation.NONE),
            ],
            mistakes_count=1,
            attempts=1,
            correct_words=[CorrectWord("apple", ["1-1", "2-1", "3-1", "4-1", "5-1"])],
            cells_value={"1-1": "A", "1-2": ""},
            last_date_modified=datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc),
        )

    def test_dict_round_trip_is_lossless(self) -> None:
        state = self._state()
        self.assertEqual(GameState.from_dict(state.to_dict()), state)

    def test_wire_format_uses_host_keys(self) -> None:
        data = self._state().to_dict()
        self.assertIn("guessingWords", data)
        self.assertIn("cellsValue", data)
        self.assertEqual(data["guessingWords"][2]["orientation"], "none")

    def test_finished_counts_only_placeable_words(self) -> None:
        state = self._state()
        self.assertEqual(state.placeable_count, 2)
        self.assertFalse(state.is_finished)
        state.correct_words.append(CorrectWord("amber", ["1-1", "1-2", "1-3", "1-4", "1-5"]))
        self.assertTrue(state.is_finished)
        self.assertEqual(state.elapsed_seconds, 42)

    def test_new_state_uses_timestamp_as_identity(self) -> None:
        state = GameState.new(1, [Word("fruit", "apple")], timestamp_ms=1234)
        self.assertEqual(state.id, 1234)
        self.assertEqual(state.time_start, 1234)
        self.assertIsNone(state.time_end)
        self.assertFalse(state.is_finished)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
