import unittest

from schema_tree import Parser, ParserOptions
from tests._util import EXAMPLES_J, parse, tmp_json, tmp_text


class ExamplesTests(unittest.TestCase):
    def test_examples_checked(self):
        parser = Parser(options=ParserOptions(validate_examples=True))
        parser.parse_file(EXAMPLES_J)
        errors = parser.examples_validation_errors
        self.assertEqual(len(errors), 5)

        self.assertEqual(errors[0].keyword_location, "#/properties/aaa")
        self.assertEqual(errors[0].instance_location, "#/properties/aaa/examples/2")
        self.assertEqual(errors[1].error, "Number fails check: minimum 0, was -3")
        self.assertEqual(errors[1].keyword_location, "#/properties/aaa/minimum")
        self.assertEqual(errors[1].absolute_keyword_location, "http://pwall.net/test-examples#/properties/aaa/minimum")

        self.assertEqual(errors[2].keyword_location, "#")
        self.assertEqual(errors[2].instance_location, "#/examples/1")
        self.assertEqual(errors[4].error, "Incorrect type, expected integer")
        self.assertEqual(errors[4].instance_location, "#/examples/1/aaa")
        self.assertEqual(parser.default_validation_errors, [])

    def test_default_checked(self):
        parser = Parser(options=ParserOptions(validate_default=True))
        parser.parse_file(EXAMPLES_J)
        errors = parser.default_validation_errors
        self.assertEqual([e.error for e in errors],
                         ["A subschema had errors", "Number fails check: minimum 0, was -1"])
        self.assertEqual(errors[1].instance_location, "#/properties/aaa/default")
        self.assertEqual(parser.examples_validation_errors, [])

    def test_single_example_keyword(self):
        parser = Parser(options=ParserOptions(validate_examples=True))
        parser.parse_json({"type": "string", "example": 5})
        self.assertEqual([e.instance_location for e in parser.examples_validation_errors], ["#/example", "#/example"])

    def test_checks_off_by_default(self):
        parser = Parser()
        parser.parse_file(EXAMPLES_J)
        self.assertEqual(parser.examples_validation_errors, [])
        self.assertEqual(parser.default_validation_errors, [])

    def test_diagnostics_do_not_fail_parsing(self):
        group = parse({"minimum": 1, "default": 0, "examples": [0]},
                      options=ParserOptions(validate_examples=True, validate_default=True))
        self.assertEqual(len(group.children), 2)


class OptionsTests(unittest.TestCase):
    def test_from_mapping(self):
        options = ParserOptions.from_mapping({"validate_examples": True})
        self.assertTrue(options.validate_examples)
        self.assertFalse(options.validate_default)

    def test_rejects_unknown_and_non_boolean(self):
        with self.assertRaisesRegex(ValueError, "Unknown parser option"):
            ParserOptions.from_mapping({"strict": True})
        with self.assertRaisesRegex(ValueError, "must be a boolean"):
            ParserOptions.from_mapping({"validate_default": "yes"})

    def test_load(self):
        p = tmp_json({"allow_description_ref": True})
        bad = tmp_text("[1]")
        try:
            self.assertTrue(ParserOptions.load(p).allow_description_ref)
            with self.assertRaisesRegex(ValueError, "must contain a JSON object"):
                ParserOptions.load(bad)
            with self.assertRaisesRegex(FileNotFoundError, "Options file not found"):
                ParserOptions.load("missing-options.json")
        finally:
            p.unlink(missing_ok=True)
            bad.unlink(missing_ok=True)


if __name__ == "__main__":
    unittest.main()
