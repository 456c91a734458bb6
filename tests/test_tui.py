import io
import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from rich.console import Console

from diagramwalk.diagrams import load_catalog
from diagramwalk.tui import DecisionTreeTUI, WalkthroughTUI

SAMPLE = ROOT / "samples" / "indexing.json"


def make_console():
    return Console(file=io.StringIO(), width=100, height=40, color_system=None)


class TestWalkthroughTUI(unittest.TestCase):
    def setUp(self):
        catalog = load_catalog(SAMPLE)
        self.tui = WalkthroughTUI(catalog.get("subsquid-processor"), console=make_console())

    def test_keys_drive_stepper(self):
        self.tui.handle_key("\x1b[C")
        self.tui.handle_key("l")
        self.assertEqual(self.tui.stepper.current(), 2)
        self.tui.handle_key("1")
        self.assertEqual(self.tui.stepper.current(), 0)
        self.tui.handle_key("\x1b[D")
        self.assertEqual(self.tui.stepper.current(), 2)
        self.tui.handle_key("G")
        self.assertEqual(self.tui.stepper.current(), 5)
        self.tui.handle_key("r")
        self.assertEqual(self.tui.stepper.history, (0,))

    def test_digit_beyond_steps_ignored(self):
        self.tui.handle_key("9")
        self.assertEqual(self.tui.stepper.current(), 0)

    def test_non_ascii_digits_ignored(self):
        for key in ("\u00b2", "\u0663", "0"):
            self.tui.handle_key(key)
        self.assertEqual(self.tui.stepper.history, (0,))

    def test_boundary_messages(self):
        self.tui.handle_key("h")
        self.assertEqual(self.tui.status_message, "No earlier steps in history")
        self.tui.handle_key("G")
        self.tui.handle_key("l")
        self.assertEqual(self.tui.status_message, "Last step")
        self.assertEqual(self.tui.stepper.current(), 5)

    def test_help_overlay_blocks_navigation(self):
        self.tui.handle_key("?")
        self.assertEqual(self.tui.overlay_title, "Help")
        self.tui.handle_key("l")
        self.assertEqual(self.tui.stepper.current(), 0)
        self.tui.handle_key("\x1b")
        self.assertIsNone(self.tui.overlay_title)

    def test_render_layout(self):
        console = self.tui.console
        console.print(self.tui.render())
        self.assertIn("POLL", console.file.getvalue())


class TestDecisionTreeTUI(unittest.TestCase):
    def setUp(self):
        catalog = load_catalog(SAMPLE)
        self.tui = DecisionTreeTUI(catalog.get("indexer-choice"), console=make_console())

    def test_choose_and_back(self):
        self.tui.handle_key("1")
        self.tui.handle_key("2")
        self.assertEqual(self.tui.navigator.current().id, "language")
        self.tui.handle_key("\x7f")
        self.assertEqual(self.tui.navigator.current().id, "decentralized")
        self.tui.handle_key("r")
        self.assertEqual(self.tui.navigator.path, ("root",))

    def test_invalid_option_keys_ignored(self):
        self.tui.handle_key("5")
        self.assertEqual(self.tui.navigator.path, ("root",))
        self.tui.handle_key("1")
        self.tui.handle_key("1")
        self.assertTrue(self.tui.navigator.is_terminal)
        self.tui.handle_key("1")
        self.assertEqual(self.tui.status_message, "Result reached: go back or reset")
        self.assertEqual(self.tui.navigator.current().id, "the-graph")

    def test_non_ascii_digits_ignored(self):
        self.tui.handle_key("\u00b2")
        self.tui.handle_key("\u0661")
        self.assertEqual(self.tui.navigator.path, ("root",))

    def test_back_at_root_message(self):
        self.tui.handle_key("h")
        self.assertEqual(self.tui.status_message, "Already at root")


if __name__ == "__main__":
    unittest.main()
