"""
Fault tests (codes, replacement, surfacing and rendering).

Conventions
- Test method names follow CamelCase per project convention.
- Rendering is checked with colors off, against a redirected stream.
"""

from __future__ import annotations

import contextlib
import io
import unittest
import warnings
from unittest import TestCase

from cmdapp import (
    CommandException,
    CommandWarning,
    ArgumentError,
    MissingArgumentError,
    UnexpectedArgumentError,
    BundlingError,
    ShadowedOptionWarning,
    GrammarError,
    FaultCode,
    trigger,
    getdoc,
)


class TestFaultCodes(TestCase):
    """Stable identifiers."""

    def testValues(self):
        self.assertEqual(FaultCode.MALFORMED_BEHAVIOR, 11001)
        self.assertEqual(FaultCode.UNKNOWN_SHORT_OPTION, 11111)
        self.assertEqual(FaultCode.DELEGATED_ERROR, 11131)
        self.assertEqual(FaultCode.SHADOWED_SHORT_OPTION, 12111)

    def testNormalizeDefaultsToNumber(self):
        self.assertEqual(FaultCode.MISSING_ARGUMENT.normalize(), "11113")

    def testGetdocWithoutHostDocs(self):
        self.assertIsNone(getdoc(FaultCode.MISSING_ARGUMENT))
        with self.assertRaises(TypeError):
            getdoc(11113)

    def testHierarchy(self):
        for kind in (MissingArgumentError, UnexpectedArgumentError, BundlingError):
            with self.subTest(kind=kind.__name__):
                self.assertTrue(issubclass(kind, ArgumentError))
        self.assertTrue(issubclass(ArgumentError, CommandException))
        self.assertTrue(issubclass(ShadowedOptionWarning, CommandWarning))


class TestTrigger(TestCase):
    """Surfacing policy of trigger()."""

    def fault(self):
        return GrammarError(
            "behavior '?' is malformed",
            title="malformed behavior",
            code=FaultCode.MALFORMED_BEHAVIOR,
            hint="start with '.'",
        )

    def testReplaceMergesOptions(self):
        fault = self.fault().__replace__(shell=True)
        self.assertIsInstance(fault, GrammarError)
        self.assertTrue(fault.options["shell"])
        self.assertEqual(fault.options["title"], "malformed behavior")
        self.assertEqual(str(fault), "behavior '?' is malformed")

    def testNonShellRaises(self):
        with self.assertRaises(GrammarError):
            trigger(self.fault(), shell=False)

    def testShellPrintsOneLineAndExits(self):
        stream = io.StringIO()
        with contextlib.redirect_stderr(stream):
            with self.assertRaises(SystemExit) as context:
                trigger(self.fault(), shell=True, colorful=False, fancy=False)
        self.assertEqual(context.exception.code, 1)
        output = stream.getvalue().strip()
        self.assertEqual(len(output.splitlines()), 1)
        self.assertIn("11001 | Malformed Behavior ]", output)
        self.assertTrue(output.endswith("behavior '?' is malformed"))

    def testFancyIncludesHint(self):
        stream = io.StringIO()
        with contextlib.redirect_stderr(stream):
            with self.assertRaises(SystemExit):
                trigger(self.fault(), shell=True, colorful=False, fancy=True)
        self.assertIn("start with '.'", stream.getvalue())

    def testWarningNonShellWarns(self):
        with self.assertWarns(ShadowedOptionWarning):
            trigger(ShadowedOptionWarning("shadowed", code=FaultCode.SHADOWED_SHORT_OPTION), shell=False)

    def testWarningShellPrints(self):
        stream = io.StringIO()
        with contextlib.redirect_stderr(stream):
            with warnings.catch_warnings():
                warnings.simplefilter("error")
                trigger(ShadowedOptionWarning("shadowed", code=FaultCode.SHADOWED_SHORT_OPTION), shell=True)
        self.assertIn("shadowed", stream.getvalue())

    def testTriggerRejectsPlainObjects(self):
        with self.assertRaises(TypeError):
            trigger(ValueError("plain"))

    def testCauseSurvivesReplace(self):
        original = ValueError("original")
        fault = self.fault()
        fault.__cause__ = original
        with self.assertRaises(GrammarError) as context:
            trigger(fault)
        self.assertIs(context.exception.__cause__, original)


if __name__ == "__main__":
    unittest.main()
