"""
Unit tests for the format checker registry and the built-in checkers.
"""

import unittest

import pytest

from json_schema_graph.validation.formats import (
    FormatCheckerRegistry,
    check_date,
    check_date_time,
    check_duration,
    check_guid,
    check_hostname,
    check_ipv4,
    check_time_span,
    default_format_checkers,
)


class TestBuiltinCheckers(unittest.TestCase):
    """Test the default format checkers"""

    def test_guid(self):
        self.assertTrue(check_guid("3f2504e0-4f89-11d3-9a0c-0305e82c3301"))
        self.assertFalse(check_guid("3f2504e0-4f89"))

    def test_guid_requires_canonical_form(self):
        self.assertTrue(check_guid("3F2504E0-4F89-11D3-9A0C-0305E82C3301"))
        self.assertFalse(check_guid("{3f2504e0-4f89-11d3-9a0c-0305e82c3301}"))
        self.assertFalse(check_guid("urn:uuid:3f2504e0-4f89-11d3-9a0c-0305e82c3301"))
        self.assertFalse(check_guid("3f2504e04f8911d39a0c0305e82c3301"))
        self.assertFalse(check_guid("3f2504e0-4f89-11d3-9a0c-0305e82c3301\n"))

    def test_date_time(self):
        self.assertTrue(check_date_time("2024-01-31T10:20:30Z"))
        self.assertTrue(check_date_time("2024-01-31t10:20:30.500+02:00"))
        self.assertFalse(check_date_time("2024-13-01T10:20:30Z"))
        self.assertFalse(check_date_time("2024-01-31"))

    def test_date(self):
        self.assertTrue(check_date("2024-02-29"))
        self.assertFalse(check_date("2024-02-30"))
        self.assertFalse(check_date("20240229"))

    def test_ipv4(self):
        self.assertTrue(check_ipv4("192.168.0.1"))
        self.assertFalse(check_ipv4("256.1.1.1"))

    def test_hostname(self):
        self.assertTrue(check_hostname("example.com"))
        self.assertTrue(check_hostname("example.com."))
        self.assertFalse(check_hostname("-bad.com"))
        self.assertFalse(check_hostname(""))

    def test_integer_formats(self):
        checkers = default_format_checkers()
        self.assertTrue(checkers.check("int32", "2147483647"))
        self.assertFalse(checkers.check("int32", "2147483648"))
        self.assertTrue(checkers.check("int64", "2147483648"))
        self.assertFalse(checkers.check("int64", "1.5"))

    def test_double(self):
        checkers = default_format_checkers()
        self.assertTrue(checkers.check("double", "1e5"))
        self.assertFalse(checkers.check("double", "abc"))

    def test_duration(self):
        self.assertTrue(check_duration("P1DT2H"))
        self.assertTrue(check_duration("PT0.5S"))
        self.assertFalse(check_duration("P"))
        self.assertFalse(check_duration("PT"))

    def test_time_span(self):
        self.assertTrue(check_time_span("1.02:03:04"))
        self.assertTrue(check_time_span("02:03"))
        self.assertFalse(check_time_span("2 hours"))


class TestFormatCheckerRegistry(unittest.TestCase):
    def test_unknown_format_returns_none(self):
        self.assertIsNone(default_format_checkers().check("no-such-format", "x"))

    def test_register_and_unregister(self):
        registry = FormatCheckerRegistry()
        registry.register("upper", str.isupper)
        self.assertIn("upper", registry)
        self.assertTrue(registry.check("upper", "ABC"))
        self.assertFalse(registry.check("upper", "abc"))
        registry.unregister("upper")
        self.assertIsNone(registry.check("upper", "ABC"))
        # Unknown names are ignored
        registry.unregister("upper")

    def test_override_builtin(self):
        registry = default_format_checkers()
        registry.register("guid", lambda value: True)
        self.assertTrue(registry.check("guid", "not a guid"))

    def test_copy_is_independent(self):
        registry = default_format_checkers()
        copy = registry.copy()
        copy.unregister("guid")
        self.assertIn("guid", registry)
        self.assertNotIn("guid", copy)

    def test_default_registries_are_fresh(self):
        first = default_format_checkers()
        first.unregister("email")
        self.assertIn("email", default_format_checkers())
        self.assertEqual(len(default_format_checkers()), len(default_format_checkers().names()))


if __name__ == "__main__":
    pytest.main([__file__])
