import unittest
from decimal import Decimal

import pandas as pd

from schema_tree import Schema
from schema_tree.frame import frame_records, validate_frame, validate_records

PEOPLE = {
    "type": "object",
    "properties": {
        "name": {"type": "string"},
        "age": {"type": "integer", "minimum": 0},
    },
    "required": ["name"],
}


class FrameTests(unittest.TestCase):
    def setUp(self):
        self.schema = Schema.load(PEOPLE)
        self.frame = pd.DataFrame({"name": ["ann", None], "age": [31, -2]}, index=["r1", "r2"])

    def test_records_are_json_values(self):
        records = frame_records(pd.DataFrame({"x": [1.5, float("nan")], "n": [1, 2]}))
        self.assertEqual(records, [{"x": Decimal("1.5"), "n": 1}, {"x": None, "n": 2}])

    def test_timestamps_become_strings(self):
        records = frame_records(pd.DataFrame({"t": pd.to_datetime(["2020-01-01"])}))
        self.assertTrue(records[0]["t"].startswith("2020-01-01T00:00:00"))

    def test_validate_frame(self):
        report = validate_frame(self.schema, self.frame)
        self.assertEqual(list(report.index), ["r1", "r2"])
        self.assertEqual(list(report["valid"]), [True, False])
        self.assertEqual(report.loc["r1", "errors"], [])
        locations = [e["keywordLocation"] for e in report.loc["r2", "errors"]]
        self.assertIn("#/properties/name/type", locations)
        self.assertIn("#/properties/age/minimum", locations)

    def test_validate_frame_with_node(self):
        report = validate_frame(self.schema.root, self.frame)
        self.assertFalse(report["valid"].all())

    def test_validate_records(self):
        outputs = validate_records(self.schema.root, [{"name": "x"}, {}])
        self.assertEqual([o.valid for o in outputs], [True, False])


if __name__ == "__main__":
    unittest.main()
