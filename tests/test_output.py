import json
import unittest

from schema_tree.output import BasicErrorEntry, BasicOutput, DetailedOutput


class OutputTests(unittest.TestCase):
    def test_basic_true_output(self):
        self.assertTrue(BasicOutput.TRUE.valid)
        self.assertEqual(BasicOutput.TRUE.to_dict(), {"valid": True})

    def test_basic_entry_omits_missing_absolute_location(self):
        entry = BasicErrorEntry("#/type", None, "#", "Incorrect type, expected string")
        self.assertEqual(
            entry.to_dict(),
            {"keywordLocation": "#/type", "instanceLocation": "#", "error": "Incorrect type, expected string"},
        )

    def test_basic_failure_shape(self):
        out = BasicOutput.failure([BasicErrorEntry("#", "http://x/s#", "#", "A subschema had errors")])
        data = json.loads(out.to_json())
        self.assertFalse(data["valid"])
        self.assertEqual(data["errors"][0]["absoluteKeywordLocation"], "http://x/s#")

    def test_detailed_factories_drop_empty_lists(self):
        out = DetailedOutput.create_annotation("#", None, "#", "Validation successful", errors=[], annotations=[])
        self.assertIsNone(out.errors)
        self.assertIsNone(out.annotations)
        self.assertEqual(
            out.to_dict(),
            {"valid": True, "keywordLocation": "#", "instanceLocation": "#", "annotation": "Validation successful"},
        )

    def test_detailed_nesting(self):
        inner = DetailedOutput.create_error("#/type", "http://x/s#/type", "#/a", "Incorrect type, expected string")
        outer = DetailedOutput.create_error("#", "http://x/s#", "#", "A subschema had errors", [inner])
        data = outer.to_dict()
        self.assertEqual(data["errors"][0]["keywordLocation"], "#/type")
        self.assertNotIn("annotations", data)


if __name__ == "__main__":
    unittest.main()
