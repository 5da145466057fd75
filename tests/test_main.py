import unittest
import sys
import os
from unittest import mock

# Add project root to path
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from errors import InvalidSeat, TileNotFound
from main import handle_command
from session import AssistantSession


class TestHandleCommand(unittest.TestCase):
    def setUp(self):
        self.session = AssistantSession(rule=16, strict=False)

    def test_retract_bad_seat_before_prompt(self):
        with mock.patch('builtins.input', side_effect=AssertionError("prompted")):
            for line in ("r 7 1", "r -1 1"):
                with self.assertRaises(InvalidSeat):
                    handle_command(self.session, line)
        self.assertFalse(self.session.can_undo)

    def test_retract_confirmed(self):
        self.session.record_discard(2, "3p")
        with mock.patch('builtins.input', return_value='y'):
            self.assertTrue(handle_command(self.session, "r 2 1"))
        self.assertEqual(self.session.state.rivers[2], [])

    def test_retract_missing_index(self):
        with mock.patch('builtins.input', return_value='y'):
            with self.assertRaises(TileNotFound):
                handle_command(self.session, "r 1 1")

    def test_tile_and_batch_input(self):
        handle_command(self.session, "東")
        handle_command(self.session, "s 3")
        handle_command(self.session, "91m")
        self.assertEqual(self.session.state.hand, [27])
        self.assertEqual(self.session.state.rivers[3], [8, 0])
        self.assertFalse(handle_command(self.session, "q"))


if __name__ == '__main__':
    unittest.main()
