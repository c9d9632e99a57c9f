import unittest
from decimal import Decimal

from schema_tree import utils


class JsonTypeTests(unittest.TestCase):
    def test_json_type(self):
        self.assertEqual(utils.json_type(None), "null")
        self.assertEqual(utils.json_type(True), "boolean")
        self.assertEqual(utils.json_type(1), "number")
        self.assertEqual(utils.json_type(Decimal("1.5")), "number")
        self.assertEqual(utils.json_type("x"), "string")
        self.assertEqual(utils.json_type([]), "array")
        self.assertEqual(utils.json_type({}), "object")

    def test_booleans_are_not_numbers(self):
        self.assertFalse(utils.is_number(True))
        self.assertFalse(utils.is_integer(False))

    def test_integral_decimals_are_integers(self):
        self.assertTrue(utils.is_integer(Decimal("2.0")))
        self.assertTrue(utils.is_integer(3.0))
        self.assertFalse(utils.is_integer(Decimal("2.5")))


class NumberTests(unittest.TestCase):
    def test_exact_number(self):
        self.assertEqual(utils.exact_number(0.1), Decimal("0.1"))
        self.assertIsInstance(utils.exact_number(7), int)
        with self.assertRaises(TypeError):
            utils.exact_number(True)

    def test_json_equal(self):
        self.assertTrue(utils.json_equal(1, 1.0))
        self.assertTrue(utils.json_equal(Decimal("1.50"), 1.5))
        self.assertFalse(utils.json_equal(1, True))
        self.assertFalse(utils.json_equal(0, False))
        self.assertFalse(utils.json_equal(None, 0))
        self.assertTrue(utils.json_equal({"a": [1, {"b": 2}]}, {"a": [1.0, {"b": 2}]}))
        self.assertFalse(utils.json_equal({"a": 1}, {"a": 1, "b": 2}))
        self.assertFalse(utils.json_equal([1, 2], [2, 1]))


class DisplayTests(unittest.TestCase):
    def test_scalars(self):
        self.assertEqual(utils.error_display(None), "null")
        self.assertEqual(utils.error_display(True), "true")
        self.assertEqual(utils.error_display(12), "12")
        self.assertEqual(utils.error_display(Decimal("1.25")), "1.25")
        self.assertEqual(utils.error_display("abc"), '"abc"')
        self.assertEqual(utils.error_display({"a": 1}), "object")
        self.assertEqual(utils.error_display([1]), "array")

    def test_long_strings_are_truncated(self):
        text = utils.error_display("a" * 50)
        self.assertEqual(text, '"' + "a" * 15 + " ... " + "a" * 15 + '"')


class UriTests(unittest.TestCase):
    def test_resolve_uri(self):
        self.assertEqual(utils.resolve_uri("http://x/a/b.json", "c.json"), "http://x/a/c.json")
        self.assertEqual(utils.resolve_uri("http://x/a/b.json", "#/x"), "http://x/a/b.json#/x")
        self.assertEqual(utils.resolve_uri(None, "#/x"), "#/x")

    def test_fragments(self):
        self.assertEqual(utils.drop_fragment("http://x/a#frag"), "http://x/a")
        self.assertEqual(utils.split_fragment("http://x/a#/b"), ("http://x/a", "/b"))
        self.assertEqual(utils.split_fragment("http://x/a"), ("http://x/a", None))


if __name__ == "__main__":
    unittest.main()
