"""
Dispatcher tests.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from cmdapp import (
    Option,
    ValuedOption,
    BareOption,
    Positional,
    dispatch,
    DelegatedCallbackError,
    FaultCode,
)


class TestDispatch(TestCase):
    """Replay of results into callbacks."""

    def setUp(self):
        self.file = Option("f", "file", ".")
        self.dry = Option(None, "dry-run")
        self.help = Option("h", "help", "<")
        self.version = Option(None, "version", "<")
        self.calls = []

    def onOption(self, short, name, argument, context):
        self.calls.append(("option", short, name, argument, context))

    def onArgument(self, argument, context):
        self.calls.append(("argument", argument, context))

    def testScanOrder(self):
        dispatch(
            (Positional("a"), ValuedOption(self.file, "x"), BareOption(self.dry), Positional("b")),
            "ctx",
            on_option=self.onOption,
            on_argument=self.onArgument,
        )
        self.assertEqual(self.calls, [
            ("argument", "a", "ctx"),
            ("option", "f", "file", "x", "ctx"),
            ("option", None, "dry-run", None, "ctx"),
            ("argument", "b", "ctx"),
        ])

    def testMissingCallbacksAreSkipped(self):
        dispatch((Positional("a"), BareOption(self.dry)), on_argument=self.onArgument)
        self.assertEqual(self.calls, [("argument", "a", None)])
        dispatch((Positional("a"),))

    def testBuiltinsHandledInternally(self):
        rendered = []
        dispatch(
            (BareOption(self.help), BareOption(self.version), BareOption(self.dry)),
            on_option=self.onOption,
            helper=lambda: rendered.append("help"),
            versioner=lambda: rendered.append("version"),
        )
        self.assertEqual(rendered, ["help", "version"])
        self.assertEqual(self.calls, [("option", None, "dry-run", None, None)])

    def testBuiltinsForwardedWithoutRenderer(self):
        dispatch((BareOption(self.help),), on_option=self.onOption)
        self.assertEqual(self.calls, [("option", "h", "help", None, None)])

    def testCallbackErrorDelegated(self):
        def failing(argument, context):
            raise ValueError("bad " + argument)

        with self.assertRaises(DelegatedCallbackError) as context:
            dispatch((Positional("a"), Positional("b")), on_argument=failing)
        self.assertIsInstance(context.exception.__cause__, ValueError)
        self.assertIs(context.exception.options["code"], FaultCode.DELEGATED_ERROR)
        self.assertIn("bad a", context.exception.message)

    def testRejectsForeignItems(self):
        with self.assertRaises(TypeError):
            dispatch(("a",))


if __name__ == "__main__":
    unittest.main()
