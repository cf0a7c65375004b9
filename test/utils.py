"""
Tests for the internal helpers.

This module verifies:
- Unset singleton identity, falsy semantics and finality.
- coalesce() preserving falsey values other than Unset.
- rename() in both function and decorator forms.
- mirror() handing out copies of mutable containers but tuples as-is.
- ordinal() wording.
"""
import unittest
from unittest import TestCase

from cmdapp.utils import *


class TestUnset(TestCase):
    """Test suite for the Unset sentinel."""

    def testSingleton(self) -> None:
        self.assertIs(UnsetType(), Unset)

    def testFalsy(self) -> None:
        self.assertFalse(Unset)
        self.assertIsNot(Unset, None)

    def testRepr(self) -> None:
        self.assertEqual(repr(Unset), "Unset")

    def testFinal(self) -> None:
        with self.assertRaises(TypeError):
            type("Subclass", (UnsetType,), {})

    def testUnionInIsinstance(self) -> None:
        self.assertTrue(isinstance(Unset, str | Unset))
        self.assertTrue(isinstance("x", str | Unset))


class TestHelpers(TestCase):
    """Test suite for coalesce, rename, mirror and ordinal."""

    def testCoalesce(self) -> None:
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertIsNone(coalesce(None, "fallback"))
        self.assertEqual(coalesce(0, 1), 0)
        self.assertIsNone(coalesce(Unset))

    def testRenameFunctionForm(self) -> None:
        def function():
            pass
        rename(function, "renamed")
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameDecoratorForm(self) -> None:
        @rename("renamed")
        def function():
            pass
        self.assertEqual(function.__name__, "renamed")

    def testRenameArity(self) -> None:
        with self.assertRaises(TypeError):
            rename()

    def testMirrorCopiesLists(self) -> None:
        class Holder:
            items = mirror("items")
            pair = mirror("pair")

            def __init__(self):
                self._items = [1, 2]
                self._pair = (1, [2])

        holder = Holder()
        holder.items.append(3)
        self.assertEqual(holder.items, [1, 2])
        self.assertIs(holder.pair, holder._pair)

    def testOrdinal(self) -> None:
        self.assertEqual(ordinal(1), "first")
        self.assertEqual(ordinal(10), "tenth")
        self.assertEqual(ordinal(11), "11th")
        self.assertEqual(ordinal(12), "12th")
        self.assertEqual(ordinal(21), "21st")
        self.assertEqual(ordinal(22), "22nd")
        self.assertEqual(ordinal(23), "23rd")
        self.assertEqual(ordinal(113), "113th")


if __name__ == "__main__":
    unittest.main()
