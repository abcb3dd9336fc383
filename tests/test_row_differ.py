from __future__ import annotations

import unittest
from types import MappingProxyType

from cursorkit import changed_fields, field_differs


class RowDifferTests(unittest.TestCase):
    def test_changed_and_null_fields_are_reported(self) -> None:
        original = MappingProxyType({"a": 1, "b": "x", "c": None})
        updated = {"a": 1, "b": "y", "c": "z"}
        self.assertEqual(changed_fields(updated, original), ["b", "c"])

    def test_identical_rows_have_no_changes(self) -> None:
        original = {"a": 1, "b": "x", "c": None}
        self.assertEqual(changed_fields(dict(original), original), [])

    def test_field_missing_from_snapshot_always_differs(self) -> None:
        self.assertTrue(field_differs("extra", None, {"a": 1}))
        self.assertEqual(changed_fields({"a": 1, "extra": 2}, {"a": 1}), ["extra"])

    def test_null_handling(self) -> None:
        self.assertFalse(field_differs("a", None, {"a": None}))
        self.assertTrue(field_differs("a", None, {"a": 0}))
        self.assertTrue(field_differs("a", 0, {"a": None}))

    def test_value_equality_not_identity(self) -> None:
        self.assertFalse(field_differs("a", 1.0, {"a": 1}))
        self.assertFalse(field_differs("b", bytes(b"ab"), {"b": bytearray(b"ab")}))
        self.assertTrue(field_differs("b", b"ab", {"b": b"ac"}))

    def test_blank_names_never_differ(self) -> None:
        self.assertFalse(field_differs("", "new", {}))
        self.assertFalse(field_differs("   ", "new", {"   ": "old"}))

    def test_removed_fields_are_ignored(self) -> None:
        self.assertEqual(changed_fields({"a": 1}, {"a": 1, "b": 2}), [])


if __name__ == "__main__":
    unittest.main()
