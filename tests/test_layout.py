import io
import random
import unittest

from crossword_game.core.constants import BLANK_CELL, Orientation
from crossword_game.core.exceptions import LayoutError
from crossword_game.core.models import CellKey, CorrectWord, GameState, Word
from crossword_game.data.catalog import WordCatalog
from crossword_game.data.selector import WordSelector
from crossword_game.engine.index import PositionIndex
from crossword_game.engine.layout import LayoutConfig, LayoutGenerator
from crossword_game.utils.pretty import format_clues, format_layout, print_game_stats


class LayoutGeneratorTests(unittest.TestCase):
    def test_apple_and_amber_cross_on_shared_a(self) -> None:
        layout = LayoutGenerator().generate([Word("fruit", "apple"), Word("color", "amber")])
        apple, amber = layout.result
        self.assertEqual((apple.answer, apple.orientation), ("apple", Orientation.ACROSS))
        self.assertEqual((amber.answer, amber.orientation), ("amber", Orientation.DOWN))
        shared = set(apple.cells) & set(amber.cells)
        self.assertEqual(len(shared), 1)
        self.assertEqual(layout.cell(shared.pop()), "A")
        self.assertEqual((layout.rows, layout.columns), (5, 5))

    def test_shared_start_cell_gets_one_number(self) -> None:
        layout = LayoutGenerator().generate([Word("fruit", "apple"), Word("color", "amber")])
        self.assertEqual([w.position for w in layout.result], [1, 1])
        self.assertEqual(PositionIndex(layout).numbers_at(CellKey(1, 1)), [1])

    def test_unplaceable_word_is_marked_none(self) -> None:
        layout = LayoutGenerator().generate([Word("fruit", "apple"), Word("odd", "xyz")])
        self.assertEqual(len(layout.placed_words), 1)
        (unplaced,) = layout.unplaced_words
        self.assertEqual(unplaced.answer, "xyz")
        self.assertEqual(unplaced.cells, ())
        self.assertNotIn("X", "".join("".join(row) for row in layout.table))

    def test_duplicate_answer_is_not_placed_twice(self) -> None:
        layout = LayoutGenerator().generate([Word("a", "note"), Word("b", "NOTE")])
        self.assertEqual(len(layout.placed_words), 1)
        self.assertEqual(layout.unplaced_words[0].clue, "b")

    def test_empty_input(self) -> None:
        layout = LayoutGenerator().generate([])
        self.assertEqual((layout.rows, layout.columns, layout.table, layout.result), (0, 0, [], []))

    def test_longest_word_is_the_anchor(self) -> None:
        layout = LayoutGenerator().generate([Word("a", "ant"), Word("b", "planet")])
        anchor = next(w for w in layout.result if w.answer == "planet")
        self.assertEqual(anchor.orientation, Orientation.ACROSS)

    def test_generation_is_deterministic(self) -> None:
        words = WordSelector(random.Random(5)).select_connected(WordCatalog.bundled(), 10)
        first = LayoutGenerator().generate(words)
        second = LayoutGenerator().generate(list(words))
        self.assertEqual(first, second)

    def test_numbering_follows_reading_order(self) -> None:
        words = WordSelector(random.Random(9)).select_connected(WordCatalog.bundled(), 10)
        layout = LayoutGenerator().generate(words)
        starts = sorted({(w.start_y, w.start_x, w.position) for w in layout.placed_words})
        numbers = [number for _, _, number in starts]
        self.assertEqual(numbers, sorted(numbers))
        self.assertEqual(sorted(set(numbers)), list(range(1, len(set(numbers)) + 1)))

    def test_size_limit_leaves_long_words_unplaced(self) -> None:
        config = LayoutConfig(max_columns=5, max_rows=5)
        layout = LayoutGenerator(config).generate(
            [Word("a", "apple"), Word("b", "amber"), Word("c", "breakfast")]
        )
        self.assertEqual([w.answer for w in layout.unplaced_words], ["breakfast"])
        self.assertLessEqual(layout.columns, 5)
        self.assertLessEqual(layout.rows, 5)

    def test_hyphenated_answer_keeps_its_separator_cell(self) -> None:
        layout = LayoutGenerator().generate([Word("dessert", "ice-cream"), Word("animal", "cat")])
        ice_cream, cat = layout.result
        self.assertEqual((ice_cream.answer, ice_cream.orientation), ("ice-cream", Orientation.ACROSS))
        self.assertEqual(ice_cream.letters, "ICE_CREAM")
        self.assertEqual(layout.cell(CellKey(4, 1)), "_")
        self.assertEqual((cat.start_x, cat.start_y, cat.orientation), (2, 1, Orientation.DOWN))

    def test_words_never_cross_on_a_separator(self) -> None:
        words = [Word("dessert", "ice-cream"), Word("dinosaur", "t-rex"), Word("mood", "up-beat")]
        layout = LayoutGenerator().generate(words)
        index = PositionIndex(layout)
        for key in index.cells():
            if index.answer_at(key) == "_":
                self.assertEqual(len(index.occupants(key)), 1, str(key))

    def test_single_letter_inside_another_word_is_left_unplaced(self) -> None:
        layout = LayoutGenerator().generate(
            [Word("dessert", "ice cream"), Word("animal", "cat"), Word("article", "a")]
        )
        self.assertEqual([w.answer for w in layout.unplaced_words], ["a"])
        index = PositionIndex(layout)
        for word in layout.placed_words:
            own_cells = [key for key in word.cells if len(index.occupants(key)) == 1]
            self.assertTrue(own_cells, word.answer)

    def test_non_positive_size_limit_is_rejected(self) -> None:
        with self.assertRaises(LayoutError):
            LayoutConfig(max_rows=0)
        with self.assertRaises(LayoutError):
            LayoutConfig(max_columns=-2)

    def test_every_letter_cell_is_covered_by_one_or_two_words(self) -> None:
        catalog = WordCatalog.bundled()
        for seed in range(25):
            words = WordSelector(random.Random(seed)).select_connected(catalog, 10)
            layout = LayoutGenerator().generate(words)
            index = PositionIndex(layout)
            starts = set()
            for word in layout.placed_words:
                self.assertNotIn((word.start_key, word.orientation), starts)
                starts.add((word.start_key, word.orientation))
                for key in word.cells:
                    self.assertTrue(layout.contains(key))
            for y in range(1, layout.rows + 1):
                for x in range(1, layout.columns + 1):
                    key = CellKey(x, y)
                    occupants = index.occupants(key)
                    if layout.cell(key) == BLANK_CELL:
                        self.assertEqual(occupants, [])
                        continue
                    self.assertIn(len(occupants), (1, 2))
                    if len(occupants) == 2:
                        self.assertEqual(
                            [w.orientation for w in occupants],
                            [Orientation.ACROSS, Orientation.DOWN],
                        )
                    self.assertEqual(index.answer_at(key), layout.cell(key))


class PrettyTests(unittest.TestCase):
    def test_format_layout_marks_blanks(self) -> None:
        layout = LayoutGenerator().generate([Word("fruit", "apple"), Word("color", "amber")])
        rendered = format_layout(layout)
        self.assertIn(" 1 |  A  P  P  L  E", rendered)
        self.assertIn(" 2 |  M  #  #  #  #", rendered)

    def test_format_layout_with_entries(self) -> None:
        layout = LayoutGenerator().generate([Word("fruit", "apple"), Word("color", "amber")])
        rendered = format_layout(
            layout,
            values={CellKey(1, 1): "A", CellKey(2, 1): "x"},
            solved={CellKey(1, 1)},
        )
        self.assertIn(" 1 |  A  x  .  .  .", rendered)

    def test_format_clues_groups_by_orientation(self) -> None:
        layout = LayoutGenerator().generate([Word("fruit", "apple"), Word("color", "amber")])
        text = format_clues(PositionIndex(layout))
        self.assertEqual(text, "Across\n  1. fruit\nDown\n  1. color")

    def test_print_game_stats(self) -> None:
        state = GameState.new(
            2,
            [
                Word("fruit", "apple", Orientation.ACROSS),
                Word("color", "amber", Orientation.DOWN),
                Word("odd", "xyz", Orientation.NONE),
            ],
            timestamp_ms=1000,
        )
        state.correct_words.append(CorrectWord("apple", ["1-1", "2-1", "3-1", "4-1", "5-1"]))
        state.mistakes_count = state.attempts = 1
        state.time_end = 43_000
        stream = io.StringIO()
        print_game_stats(state, stream=stream)
        output = stream.getvalue()
        self.assertIn("Solved:    1/2", output)
        self.assertIn("Mistakes:  1", output)
        self.assertIn("Time:      42s", output)
        self.assertIn("Unplaced:  xyz", output)


if __name__ == "__main__":  # pragma: no cover
    unittest.main()
