import unittest

from game import (
    EMPTY,
    OutOfBoundsError,
    GridRefilled,
    PiecePopped,
    PieceSpawned,
    PiecesFell,
    SPECIAL_BLAST,
    SPECIAL_COLOUR,
    get_config,
    Match3,
)
from helpers import COLUMN, DRAGON, ROW, SNAKE, SPIDER, Recorder, checker_rows, make_game


class TestBoardSetup(unittest.TestCase):
    def test_given_mode_when_setting_up_then_common_and_special_types_registered(self):
        match3 = Match3(get_config(mode='hard', seed=1))
        match3.setup()
        board = match3.board
        self.assertEqual(board.common_types, [1, 2, 3, 4, 5, 6])
        self.assertEqual(board.special_types, [7, 8, 9, 10])
        self.assertEqual(board.type_by_name(SPECIAL_BLAST), 7)
        self.assertEqual(board.type_by_name(SPECIAL_COLOUR), 10)
        self.assertTrue(board.is_common(3))
        self.assertFalse(board.is_common(7))
        self.assertTrue(board.is_special(8))
        self.assertEqual(len(match3.special.handlers), 4)
        with self.assertRaises(KeyError):
            board.type_by_name('piece-unicorn')

    def test_given_default_config_when_setting_up_then_settled_grid_of_commons(self):
        match3 = Match3(get_config(seed=11))
        match3.setup()
        board = match3.board
        self.assertEqual((board.rows, board.columns), (9, 7))
        self.assertEqual((board.get_width(), board.get_height()), (350, 450))
        self.assertEqual(board.find_matches(), [])
        seen = []
        board.for_each(lambda position, t: seen.append(t))
        self.assertEqual(len(seen), 63)
        self.assertTrue(all(board.is_common(t) for t in seen))

    def test_given_setup_twice_when_resetting_then_handlers_not_duplicated(self):
        match3 = Match3(get_config(seed=2))
        match3.setup()
        match3.setup()
        self.assertEqual(len(match3.special.handlers), 4)
        self.assertEqual(len(match3.board.special_types), 4)


class TestBoardMutation(unittest.IsolatedAsyncioTestCase):
    async def test_given_piece_when_popping_then_cell_emptied_and_event_published(self):
        match3 = make_game(checker_rows(5, 5))
        rec = Recorder(match3)
        popped = await match3.board.pop_piece((1, 1))
        self.assertEqual(popped, SNAKE)
        self.assertEqual(match3.board.get_type((1, 1)), EMPTY)
        events = rec.of(PiecePopped)
        self.assertEqual(len(events), 1)
        self.assertEqual(events[0].position, (1, 1))
        self.assertEqual(events[0].piece_type, SNAKE)
        self.assertFalse(events[0].is_special)
        self.assertFalse(events[0].caused_by_special)
        # Popping a hole is a no-op
        self.assertIsNone(await match3.board.pop_piece((1, 1)))
        self.assertEqual(len(rec.of(PiecePopped)), 1)

    async def test_given_bad_position_when_popping_then_out_of_bounds(self):
        match3 = make_game(checker_rows(5, 5))
        with self.assertRaises(OutOfBoundsError):
            await match3.board.pop_piece((5, 0))
        with self.assertRaises(OutOfBoundsError):
            await match3.board.pop_pieces([(0, 0), (0, -1)])
        # Nothing was popped before failing
        self.assertEqual(match3.board.get_type((0, 0)), SNAKE)

    async def test_given_positions_with_duplicates_when_popping_then_each_popped_once(self):
        match3 = make_game(checker_rows(5, 5))
        rec = Recorder(match3)
        popped = await match3.board.pop_pieces([(0, 0), (0, 1), (0, 0)])
        self.assertEqual(popped, [((0, 0), SNAKE), ((0, 1), SPIDER)])
        self.assertEqual(len(rec.of(PiecePopped)), 2)

    async def test_given_special_piece_when_popping_then_trigger_fires(self):
        match3 = make_game(checker_rows(5, 5, {(2, 2): ROW}))
        rec = Recorder(match3)
        await match3.board.pop_piece((2, 2))
        self.assertEqual([match3.board.get_type((2, c)) for c in range(5)], [EMPTY] * 5)
        popped = rec.of(PiecePopped)
        self.assertEqual(len(popped), 5)
        self.assertTrue(popped[0].is_special)
        self.assertTrue(all(e.caused_by_special for e in popped[1:]))

    async def test_given_special_piece_when_popping_with_bypass_then_no_trigger(self):
        match3 = make_game(checker_rows(5, 5, {(2, 2): ROW}))
        rec = Recorder(match3)
        await match3.board.pop_pieces([(2, 2)], bypass_special_trigger=True)
        self.assertEqual(match3.board.get_type((2, 2)), EMPTY)
        self.assertEqual(match3.board.get_type((2, 1)), SPIDER)
        self.assertEqual(len(rec.of(PiecePopped)), 1)

    async def test_given_position_when_spawning_then_type_replaced_and_event_published(self):
        match3 = make_game(checker_rows(5, 5))
        rec = Recorder(match3)
        await match3.board.spawn_piece((3, 3), COLUMN)
        self.assertEqual(match3.board.get_type((3, 3)), COLUMN)
        spawned = rec.of(PieceSpawned)
        self.assertEqual([(e.position, e.piece_type) for e in spawned], [((3, 3), COLUMN)])
        self.assertEqual(spawned[0].duration, match3.config.spawn_duration)

    async def test_given_holes_when_settling_then_gravity_then_refill_leaves_full_grid(self):
        match3 = make_game(checker_rows(5, 5, {(0, 0): DRAGON}))
        rec = Recorder(match3)
        await match3.board.pop_pieces([(4, 0), (2, 3), (3, 3)])
        changes = await match3.board.apply_gravity()
        self.assertIn(((0, 0), (1, 0)), changes)
        self.assertEqual(match3.board.get_type((1, 0)), DRAGON)
        self.assertEqual(match3.board.get_type((0, 0)), EMPTY)
        self.assertEqual(sorted(match3.board.grid.empty_positions()), [(0, 0), (0, 3), (1, 3)])
        filled = await match3.board.refill()
        self.assertEqual(sorted(filled), [(0, 0), (0, 3), (1, 3)])
        self.assertEqual(match3.board.grid.empty_positions(), [])
        self.assertTrue(all(match3.board.is_common(match3.board.get_type(p)) for p in filled))
        self.assertEqual(len(rec.of(PiecesFell)), 1)
        self.assertEqual(len(rec.of(GridRefilled)), 1)


if __name__ == '__main__':
    unittest.main()
