import unittest

from schema_tree import nodes as n
from schema_tree.formats import (
    DelegatingFormatChecker,
    FormatRegistry,
    STANDARD_FORMATS,
    StringFormatChecker,
    lookup_standard,
)
from schema_tree.pointer import Pointer

CASES = {
    "date-time": (["2020-01-01T12:00:00Z", "2020-01-01t12:00:00.5+05:30"],
                  ["2020-01-01 12:00:00Z", "2020-02-30T00:00:00Z", "2020-01-01T12:00:00"]),
    "date": (["2020-02-29"], ["2021-02-29", "2020-1-1", "2020-13-01"]),
    "time": (["23:59:60Z", "08:30:00-02:00"], ["24:00:00Z", "12:00:00", "12:00:00+24:00"]),
    "duration": (["P1Y2M3DT4H5M6S", "P2W", "PT1M"], ["P", "PT", "1Y", "P1H"]),
    "email": (["user@example.com", "a.b+c@[127.0.0.1]"], ["user@", "no-at-sign", "a..b@example.com"]),
    "idn-email": (["用户@例子.广告"], ["no-at-sign", "a b@example.com"]),
    "hostname": (["example.com", "a-b.example.com."], ["-bad.com", "a" * 64 + ".com", "under_score.com"]),
    "idn-hostname": (["bücher.de"], [""]),
    "ipv4": (["192.168.0.1"], ["256.1.1.1", "1.2.3"]),
    "ipv6": (["::1", "2001:db8::8a2e:370:7334"], ["12345::", "fe80::1%eth0"]),
    "uri": (["http://example.com/path?q=1#top"], ["/relative", "http://exa mple.com"]),
    "uri-reference": (["/relative", "#frag"], ["a b", "a#b#c"]),
    "iri": (["http://ƒoo.com/"], ["/relative"]),
    "iri-reference": (["ƒoo/bar"], ["a b"]),
    "uuid": (["123e4567-e89b-12d3-a456-426614174000"], ["123e4567-e89b-12d3-a456"]),
    "uri-template": (["http://example.com/{id}"], ["http://example.com/{id"]),
    "json-pointer": (["", "/a/b~0"], ["a/b", "/a~2"]),
    "relative-json-pointer": (["1/a", "0#", "0"], ["-1", "/a"]),
    "regex": (["^[a-z]+$"], ["["]),
}


class StandardFormatTests(unittest.TestCase):
    def test_samples(self):
        for name, (good, bad) in CASES.items():
            checker = lookup_standard(name)
            for value in good:
                with self.subTest(format=name, value=value):
                    self.assertTrue(checker.check(value))
            for value in bad:
                with self.subTest(format=name, value=value):
                    self.assertFalse(checker.check(value))

    def test_every_standard_format_is_covered(self):
        self.assertEqual(set(STANDARD_FORMATS) - set(CASES), {"int32", "int64"})

    def test_string_formats_ignore_other_kinds(self):
        for name in CASES:
            for value in (1, None, True, [], {}):
                self.assertTrue(lookup_standard(name).check(value), name)

    def test_integer_ranges(self):
        int32 = lookup_standard("int32")
        self.assertTrue(int32.check(2 ** 31 - 1))
        self.assertTrue(int32.check(-(2 ** 31)))
        self.assertFalse(int32.check(2 ** 31))
        self.assertFalse(int32.check(1.5))
        self.assertTrue(int32.check("x"))
        self.assertTrue(lookup_standard("int64").check(2 ** 40))

    def test_unknown(self):
        self.assertIsNone(lookup_standard("non-standard"))


class CustomFormatTests(unittest.TestCase):
    def test_delegating_checker(self):
        checker = DelegatingFormatChecker(
            "short",
            n.StringLengthConstraint(None, Pointer.ROOT, "minLength", 1),
            n.StringLengthConstraint(None, Pointer.ROOT, "maxLength", 3),
        )
        self.assertTrue(checker.check("abc"))
        self.assertFalse(checker.check(""))
        self.assertFalse(checker.check("abcd"))

    def test_nonstandard_handler_wins(self):
        override = StringFormatChecker("date", lambda s: s == "today")
        registry = FormatRegistry(lambda name: override if name == "date" else None)
        self.assertIs(registry.lookup("date"), override)
        self.assertIs(registry.lookup("time"), lookup_standard("time"))
        self.assertIsNone(registry.lookup("other"))
        self.assertIsNone(FormatRegistry().lookup_nonstandard("date"))


if __name__ == "__main__":
    unittest.main()
