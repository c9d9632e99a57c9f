import unittest
from decimal import Decimal

from schema_tree import Parser, ParserOptions, SchemaError, SchemaLoader
from schema_tree.evaluator import validate
from schema_tree.loader import Resource, decode_document
from tests._util import REF_DIR, TEST_SCHEMA, tmp_dir, tmp_text


class DecodeTests(unittest.TestCase):
    def test_json_keeps_decimals(self):
        self.assertEqual(decode_document('{"a": 0.1, "b": 2}'), {"a": Decimal("0.1"), "b": 2})

    def test_yaml_by_suffix_and_content_type(self):
        text = "a: 0.1\nb: [1, two]\nwhen: 2020-01-01\n"
        expected = {"a": Decimal("0.1"), "b": [1, "two"], "when": "2020-01-01"}
        self.assertEqual(decode_document(text, "file:///s.yaml"), expected)
        self.assertEqual(decode_document(text, "http://x/s", "application/yaml"), expected)

    def test_crisp_errors(self):
        with self.assertRaisesRegex(ValueError, "Invalid JSON in http://x/s.json"):
            decode_document("{", "http://x/s.json")
        with self.assertRaisesRegex(ValueError, "Invalid YAML in s.yml"):
            decode_document("a: [1", "s.yml")

    def test_non_finite_literals_rejected(self):
        for text in ("NaN", '{"a": Infinity}', "[-Infinity]"):
            with self.assertRaisesRegex(ValueError, "Invalid JSON in document: non-finite number"):
                decode_document(text)


class LoaderTests(unittest.TestCase):
    def test_load_file(self):
        uri, value = SchemaLoader().load_file(TEST_SCHEMA)
        self.assertTrue(uri.startswith("file://"))
        self.assertEqual(value["title"], "Product")

    def test_load_missing_file(self):
        with self.assertRaisesRegex(FileNotFoundError, "Schema not found"):
            SchemaLoader().load_file("does-not-exist.json")

    def test_load_invalid_json(self):
        p = tmp_text("{oops")
        try:
            with self.assertRaisesRegex(ValueError, "Invalid JSON"):
                SchemaLoader().load_file(p)
        finally:
            p.unlink(missing_ok=True)

    def test_fetch_uses_resolver_once(self):
        calls = []

        def resolver(uri):
            calls.append(uri)
            return '{"type": "string"}'

        loader = SchemaLoader(resolver)
        self.assertEqual(loader.fetch("http://x/s.json#/frag"), {"type": "string"})
        self.assertEqual(loader.fetch("http://x/s.json"), {"type": "string"})
        self.assertEqual(calls, ["http://x/s.json"])
        self.assertIn("http://x/s.json#anything", loader)

    def test_fetch_extended_reports_content_type(self):
        loader = SchemaLoader(lambda uri: Resource("type: string\n", "application/x-yaml"))
        self.assertEqual(loader.fetch_extended("http://x/s"), ({"type": "string"}, "application/x-yaml"))

    def test_fetch_missing(self):
        with self.assertRaisesRegex(FileNotFoundError, "Schema not found: http://x/none"):
            SchemaLoader(lambda uri: None).fetch("http://x/none")

    def test_documents_cached_under_id(self):
        loader = SchemaLoader(lambda uri: None)
        loader.load_file(TEST_SCHEMA)
        self.assertEqual(loader.fetch("http://pwall.net/test")["title"], "Product")

    def test_read_text(self):
        text = SchemaLoader().read_text((REF_DIR / "description.md").resolve().as_uri())
        self.assertIn("Long description", text)


class PreLoadTests(unittest.TestCase):
    def test_directory_skips_hidden_and_other_suffixes(self):
        loader = SchemaLoader(lambda uri: None)
        loaded = loader.pre_load(REF_DIR)
        self.assertEqual([u.rsplit("/", 1)[-1] for u in loaded], ["address.json", "main.json"])
        self.assertIn("http://example.com/schemas/address.json", loader)

    def test_single_file(self):
        loader = SchemaLoader()
        self.assertEqual(len(loader.pre_load(TEST_SCHEMA)), 1)

    def test_missing_path(self):
        with self.assertRaises(FileNotFoundError):
            SchemaLoader().pre_load("no-such-dir")

    def test_preloaded_refs_resolve_by_id(self):
        parser = Parser(SchemaLoader(lambda uri: None))
        parser.pre_load(REF_DIR)
        group = parser.parse_uri("http://example.com/schemas/main.json")
        self.assertTrue(validate(group, {"address": {"street": "x", "zip": "12345"}, "zip": "54321"}))
        self.assertFalse(validate(group, {"address": {"street": "x", "zip": "1234"}}))
        self.assertFalse(validate(group, {"address": {}}))
        self.assertFalse(validate(group, {"zip": "abc"}))

        (_, address), (_, zip_code) = group.children[1].properties
        address_target = address.children[0].target
        nested_zip = address_target.children[1].properties[1][1].children[0].target
        self.assertIs(zip_code.children[0].target, nested_zip)


class YamlSchemaTests(unittest.TestCase):
    def test_yaml_schema_file(self):
        with tmp_dir() as d:
            p = d / "schema.yaml"
            p.write_text(
                "type: object\n"
                "properties:\n"
                "  n:\n"
                "    multipleOf: 0.1\n"
                "  d:\n"
                "    const: 2020-01-01\n",
                encoding="utf-8",
            )
            group = Parser().parse_file(p)
            self.assertTrue(validate(group, {"n": Decimal("0.3"), "d": "2020-01-01"}))
            self.assertFalse(validate(group, {"n": Decimal("0.35")}))


class DescriptionRefTests(unittest.TestCase):
    SCHEMA = {"description": {"$ref": "description.md"}}

    def test_description_ref_inlined(self):
        parser = Parser(options=ParserOptions(allow_description_ref=True))
        group = parser.parse_json(self.SCHEMA, (REF_DIR / "x.json").resolve().as_uri())
        self.assertEqual(group.description, "Long description held outside the schema.")

    def test_description_ref_disabled(self):
        with self.assertRaisesRegex(SchemaError, "description must be a string"):
            Parser().parse_json(self.SCHEMA, (REF_DIR / "x.json").resolve().as_uri())


if __name__ == "__main__":
    unittest.main()
