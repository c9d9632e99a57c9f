import contextlib
import io
import json
import unittest

from schema_tree.cli import build_arg_parser, main
from tests._util import REF_DIR, TEST_SCHEMA, tmp_json, tmp_text

GOOD = '{"id": 1, "name": "x", "price": 2}'
BAD = '{"id": 1, "price": -2}'


def run(*argv):
    out, err = io.StringIO(), io.StringIO()
    with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
        code = main(list(argv))
    return code, out.getvalue(), err.getvalue()


class ArgParserTests(unittest.TestCase):
    def test_defaults(self):
        ns = build_arg_parser().parse_args(["schema.json"])
        self.assertEqual(ns.output, "basic")
        self.assertEqual(ns.instances, [])
        self.assertEqual(ns.preload, [])
        self.assertFalse(ns.validate_examples)

    def test_rejects_unknown_output(self):
        with contextlib.redirect_stderr(io.StringIO()):
            with self.assertRaises(SystemExit):
                build_arg_parser().parse_args(["schema.json", "--output", "verbose"])


class MainTests(unittest.TestCase):
    def test_valid_instance(self):
        code, out, _ = run(str(TEST_SCHEMA), GOOD)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), {"valid": True})

    def test_invalid_instance(self):
        code, out, _ = run(str(TEST_SCHEMA), BAD, "--output", "detailed")
        self.assertEqual(code, 1)
        self.assertFalse(json.loads(out)["valid"])

    def test_flag_output_and_instance_file(self):
        p = tmp_json({"id": 1, "name": "x", "price": 2})
        try:
            code, out, _ = run(str(TEST_SCHEMA), str(p), "--output", "flag")
        finally:
            p.unlink(missing_ok=True)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), {"valid": True})

    def test_schema_error(self):
        p = tmp_json({"minLength": -1})
        try:
            code, _, err = run(str(p), "1")
        finally:
            p.unlink(missing_ok=True)
        self.assertEqual(code, 2)
        self.assertIn("Schema error: minLength must be a non-negative integer", err)

    def test_instance_error(self):
        code, _, err = run(str(TEST_SCHEMA), "{broken")
        self.assertEqual(code, 2)
        self.assertIn("Instance error", err)

    def test_non_finite_instance_error(self):
        code, _, err = run(str(TEST_SCHEMA), "NaN")
        self.assertEqual(code, 2)
        self.assertIn("Instance error: Invalid JSON in document: non-finite number NaN", err)

    def test_csv(self):
        p = tmp_text("id,name,price\n1,a,2\n2,b,-1\n", suffix=".csv")
        try:
            code, out, _ = run(str(TEST_SCHEMA), "--csv", str(p))
        finally:
            p.unlink(missing_ok=True)
        self.assertEqual(code, 1)
        rows = json.loads(out)
        self.assertEqual([r["valid"] for r in rows], [True, False])
        self.assertEqual(rows[1]["row"], 1)

    def test_preload_and_config(self):
        config = tmp_json({"validate_examples": True})
        try:
            code, out, _ = run("http://example.com/schemas/main.json", '{"zip": "12345"}',
                               "--preload", str(REF_DIR), "--config", str(config))
        finally:
            config.unlink(missing_ok=True)
        self.assertEqual(code, 0)
        self.assertEqual(json.loads(out), {"valid": True})


if __name__ == "__main__":
    unittest.main()
