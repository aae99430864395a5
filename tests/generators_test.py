"""
Tests for generator gating and op chaining.
"""

import unittest

from record_schema import MISSING, SchemaError
from record_schema.generators import run_generator


class TestRunGenerator(unittest.TestCase):
    """Test cases for run_generator."""

    def test_plain_function_takes_no_arguments(self):
        self.assertEqual(run_generator(lambda: "ab", MISSING, present=False, run_once=False), "ab")
        self.assertEqual(run_generator(lambda: "ab", "old", present=True, run_once=False), "ab")

    def test_ops_chain(self):
        config = {"ops": [
            lambda v: (v or "") + "a",
            {"fn": lambda v, suffix: v + suffix, "args": ["b"]},
            {"fn": lambda v, n: v * n, "args": 2},
        ]}
        self.assertEqual(run_generator(config, MISSING, present=False, run_once=False), "abab")
        self.assertEqual(run_generator(config, "x", present=True, run_once=False), "xabxab")

    def test_first_op_receives_none_for_absent_value(self):
        seen = []
        run_generator({"ops": [lambda v: seen.append(v)]}, MISSING, present=False, run_once=False)
        self.assertEqual(seen, [None])

    def test_single_op(self):
        self.assertEqual(run_generator({"ops": lambda v: 1}, MISSING, present=False, run_once=False), 1)
        self.assertEqual(
            run_generator({"ops": {"fn": lambda v, n: n, "args": [3]}}, MISSING, present=False, run_once=False), 3
        )

    def test_no_ops_leaves_value(self):
        self.assertEqual(run_generator({"preserve": True}, "x", present=True, run_once=False), "x")
        self.assertIs(run_generator({}, MISSING, present=False, run_once=False), MISSING)

    def test_preserve(self):
        config = {"ops": [lambda v: "new"], "preserve": True}
        self.assertEqual(run_generator(config, "old", present=True, run_once=False), "old")
        self.assertEqual(run_generator(config, "", present=True, run_once=False), "new")
        self.assertEqual(run_generator(config, MISSING, present=False, run_once=False), "new")

    def test_require(self):
        config = {"ops": [lambda v: "new"], "require": True}
        self.assertIs(run_generator(config, MISSING, present=False, run_once=False), MISSING)
        self.assertEqual(run_generator(config, None, present=True, run_once=False), "new")

    def test_once(self):
        config = {"ops": [lambda v: "new"], "once": True}
        self.assertEqual(run_generator(config, "old", present=True, run_once=False), "old")
        self.assertEqual(run_generator(config, "old", present=True, run_once=True), "new")

    def test_invalid_ops(self):
        with self.assertRaises(SchemaError):
            run_generator({"ops": ["nope"]}, MISSING, present=False, run_once=False)
        with self.assertRaises(SchemaError):
            run_generator("nope", MISSING, present=False, run_once=False)

    def test_op_exceptions_propagate(self):
        def broken(value):
            raise ValueError("generator failed")

        with self.assertRaises(ValueError):
            run_generator({"ops": [broken]}, MISSING, present=False, run_once=False)


if __name__ == "__main__":
    unittest.main()
