import sys
from pathlib import Path
import unittest

ROOT = Path(__file__).resolve().parents[1]
sys.path.insert(0, str(ROOT))

from diagramwalk.navigation import MissingContentError, StepContentResolver


class TestStepContentResolver(unittest.TestCase):
    def test_resolve_by_index_and_node_id(self):
        steps = StepContentResolver.from_sequence(["poll", "filter"])
        self.assertEqual(steps.resolve(1), "filter")
        nodes = StepContentResolver({"root": {"question": "Which indexer?"}})
        self.assertEqual(nodes.resolve("root"), {"question": "Which indexer?"})

    def test_missing_position_is_a_hard_failure(self):
        resolver = StepContentResolver({0: "poll"})
        with self.assertRaises(MissingContentError) as ctx:
            resolver.resolve(3)
        self.assertEqual(ctx.exception.position, 3)
        with self.assertRaises(LookupError):
            resolver.resolve("3")

    def test_unhashable_position_reported_as_missing(self):
        resolver = StepContentResolver({0: "poll"})
        with self.assertRaises(MissingContentError):
            resolver.resolve([0])
        self.assertNotIn([0], resolver)

    def test_require_lists_every_missing_position(self):
        resolver = StepContentResolver({0: "a", 2: "c"})
        resolver.require([0, 2])
        with self.assertRaises(MissingContentError) as ctx:
            resolver.require(range(5))
        self.assertEqual(ctx.exception.positions, (1, 3, 4))
        self.assertIn("1, 3, 4", str(ctx.exception))

    def test_table_is_copied(self):
        table = {0: "a"}
        resolver = StepContentResolver(table)
        table[1] = "b"
        self.assertNotIn(1, resolver)
        self.assertEqual(len(resolver), 1)
        self.assertEqual(resolver.positions(), [0])


if __name__ == "__main__":
    unittest.main()
