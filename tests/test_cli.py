import io
import unittest
from contextlib import redirect_stdout
from unittest import mock

from game import new_game
from match3_core import cli


class TestParseCommand(unittest.TestCase):
    def test_given_four_numbers_when_parsing_then_move(self):
        self.assertEqual(cli.parse_command('1 2 1 3'), ('move', (1, 2), (1, 3)))
        self.assertEqual(cli.parse_command(' 1,2  1,3 '), ('move', (1, 2), (1, 3)))

    def test_given_tap_when_parsing_then_tap(self):
        self.assertEqual(cli.parse_command('tap 4 0'), ('tap', (4, 0)))
        self.assertEqual(cli.parse_command('TAP 4,0'), ('tap', (4, 0)))

    def test_given_quit_words_when_parsing_then_quit(self):
        for text in ('q', 'quit', 'EXIT'):
            self.assertEqual(cli.parse_command(text), ('quit',))

    def test_given_garbage_when_parsing_then_none(self):
        for text in ('', 'hello', '1 2 3', 'tap 1', '1 2 x 3'):
            self.assertIsNone(cli.parse_command(text))


class TestRender(unittest.TestCase):
    def test_given_game_when_rendering_then_one_line_per_row_and_legend(self):
        match3 = new_game(rows=4, columns=3, seed=5)
        lines = cli.render(match3).splitlines()
        self.assertEqual(len(lines), 1 + 4 + 1)
        self.assertIn('1=piece-dragon', lines[-1])
        self.assertIn('9=special-colour', lines[-1])


class TestMain(unittest.TestCase):
    def test_given_quit_when_running_then_prints_board_and_score(self):
        out = io.StringIO()
        with mock.patch('builtins.input', side_effect=['q']), redirect_stdout(out):
            cli.main(['--rows', '5', '--columns', '5', '--seed', '2'])
        text = out.getvalue()
        self.assertIn('Score: 0', text)
        self.assertIn('grade:', text)

    def test_given_end_of_input_when_running_then_quits_cleanly(self):
        out = io.StringIO()
        with mock.patch('builtins.input', side_effect=EOFError), redirect_stdout(out):
            cli.main(['--rows', '5', '--columns', '5', '--seed', '2'])
        self.assertIn('Score: 0', out.getvalue())

    def test_given_bad_input_then_quit_when_running_then_asks_again(self):
        out = io.StringIO()
        with mock.patch('builtins.input', side_effect=['what', '0 0 3 3', 'q']), redirect_stdout(out):
            cli.main(['--rows', '5', '--columns', '5', '--seed', '2'])
        text = out.getvalue()
        self.assertIn('Could not parse', text)
        self.assertIn('Invalid move', text)


if __name__ == '__main__':
    unittest.main()
