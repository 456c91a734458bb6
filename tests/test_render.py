import io
import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from rich.console import Console

from diagramwalk.diagrams import load_catalog
from diagramwalk.render import (
    lexer_name_for,
    position_label,
    render_catalog_table,
    render_progress,
    render_step_badges,
    render_step_panel,
    render_tree_breadcrumb,
    render_tree_outline,
    render_tree_panel,
    tree_to_markdown,
    truncate_label,
    walkthrough_to_markdown,
)

SAMPLE = ROOT / "samples" / "indexing.json"


def render_text(renderable, width=100):
    console = Console(file=io.StringIO(), width=width, record=True, color_system=None)
    console.print(renderable)
    return console.export_text()


class TestRender(unittest.TestCase):
    def setUp(self):
        self.catalog = load_catalog(SAMPLE)
        self.walkthrough = self.catalog.get("subsquid-processor")
        self.tree = self.catalog.get("indexer-choice")

    def test_lexer_lookup(self):
        self.assertEqual(lexer_name_for("python"), "python")
        self.assertEqual(lexer_name_for("typescript"), "typescript")
        self.assertEqual(lexer_name_for("no-such-language"), "text")
        self.assertEqual(lexer_name_for(None), "text")

    def test_truncate_label(self):
        self.assertEqual(truncate_label("short"), "short")
        self.assertEqual(truncate_label("x" * 30), "x" * 25 + "...")

    def test_step_panel_shows_current_step(self):
        stepper = self.walkthrough.stepper()
        stepper.advance()
        output = render_text(render_step_panel(self.walkthrough, stepper))
        self.assertIn("2. FILTER", output)
        self.assertIn("Step 2/6", output)
        self.assertIn("Transfer", output)
        self.assertEqual(position_label(stepper), "Step 2/6")

    def test_badges_and_progress(self):
        stepper = self.walkthrough.stepper()
        stepper.jump_to(3)
        badges = render_step_badges(self.walkthrough, stepper)
        self.assertIn("4. TRANSFORM", badges.plain)
        self.assertIn("Step 4/6", render_progress(self.walkthrough, stepper).plain)

    def test_tree_panel_lists_options(self):
        navigator = self.tree.navigator()
        navigator.choose(0)
        output = render_text(render_tree_panel(self.tree, navigator))
        self.assertIn("Do you need decentralization?", output)
        self.assertIn("[1] Yes", output)
        self.assertIn("[2] No", output)

    def test_tree_panel_shows_result(self):
        navigator = self.tree.navigator()
        navigator.choose(0)
        navigator.choose(0)
        output = render_text(render_tree_panel(self.tree, navigator))
        self.assertIn("Result:", output)
        self.assertIn("The Graph (GRT staking", output)

    def test_breadcrumb_truncates_labels(self):
        navigator = self.tree.navigator()
        navigator.choose(0)
        text = render_tree_breadcrumb(self.tree, navigator).plain
        self.assertIn("Which indexer should you ...", text)
        self.assertIn(" -> ", text)

    def test_outline_and_catalog(self):
        outline = render_text(render_tree_outline(self.tree), width=120)
        self.assertIn("Subsquid (SQD Network", outline)
        table = render_text(render_catalog_table(self.catalog), width=120)
        self.assertIn("subsquid-processor", table)
        self.assertIn("10 nodes", table)

    def test_markdown_export(self):
        markdown = walkthrough_to_markdown(self.walkthrough)
        for step in self.walkthrough.steps:
            self.assertIn(step.title, markdown)
        self.assertIn("```typescript", markdown)

        tree_markdown = tree_to_markdown(self.tree)
        for node_id in self.tree.tree.terminal_ids():
            self.assertIn(str(self.tree.tree.node(node_id).result), tree_markdown)


if __name__ == "__main__":
    unittest.main()
