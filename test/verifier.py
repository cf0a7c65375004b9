"""
Constraint verifier tests.

Scope
- ALL/ANY/ONLY verdicts, plain and negated, including empty reference lists.
- Global-counter semantics of ONLY.
- Configuration errors for unknown and self references.
- Constraint phrases used in messages and help.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from cmdapp import (
    Option,
    Registry,
    scan,
    verify,
    check,
    describe,
    ConfigError,
    ConstraintViolationError,
    FaultCode,
)


class VerifierCase(TestCase):
    def build(self, *declarations):
        self.registry = Registry()
        for short, name, behavior in declarations:
            self.registry.register(Option(short, name, behavior))

    def attempt(self, *tokens):
        scan(self.registry, ["prog", *tokens])
        verify(self.registry)


class TestQuantifiers(VerifierCase):
    """Verdicts of the three quantifiers."""

    def setUp(self):
        self.build(
            ("a", "aa", ""),
            ("b", "bb", ""),
            ("c", "cc", ""),
            ("d", "dd", ""),
            ("O", "oo", "&ad"),
            ("N", "nn", "!@bc"),
            ("Y", "yy", "@bc"),
            ("X", "xx", "!&ab"),
        )

    def testAllRequiresEveryRef(self):
        with self.assertRaises(ConstraintViolationError) as context:
            self.attempt("-a", "-O")
        self.assertIs(context.exception.options["code"], FaultCode.ALL_VIOLATED)
        self.attempt("-a", "-d", "-O")

    def testNegatedAny(self):
        self.attempt("-N")
        self.attempt("-a", "-N")
        with self.assertRaises(ConstraintViolationError) as context:
            self.attempt("-N", "-b")
        self.assertIs(context.exception.options["code"], FaultCode.ANY_VIOLATED)

    def testAny(self):
        self.attempt("-Y", "-c")
        with self.assertRaises(ConstraintViolationError):
            self.attempt("-Y")

    def testNegatedAll(self):
        self.attempt("-X", "-a")
        with self.assertRaises(ConstraintViolationError):
            self.attempt("-X", "-a", "-b")

    def testEmptyReferenceLists(self):
        self.build(
            ("a", "aa", ""),
            ("y", "yy", "@"),
            ("x", "xx", "&"),
            ("n", "nn", "!@"),
            ("m", "mm", "!&"),
        )
        self.attempt("-x")
        self.attempt("-x", "-a")
        self.attempt("-n")
        with self.assertRaises(ConstraintViolationError) as context:
            self.attempt("-y")
        self.assertIs(context.exception.options["code"], FaultCode.ANY_VIOLATED)
        with self.assertRaises(ConstraintViolationError) as context:
            self.attempt("-m")
        self.assertIs(context.exception.options["code"], FaultCode.ALL_VIOLATED)

    def testOptionsWithoutQuantifierAlwaysPass(self):
        self.attempt("-a", "-b", "-c", "-d")


class TestOnly(VerifierCase):
    """ONLY is evaluated against the global occurrence counter."""

    def setUp(self):
        self.build(
            ("a", "aa", "."),
            ("b", "bb", ""),
            ("O", "oo", "&a"),
            ("d", "dd", "<aO"),
            ("h", "help", "<"),
        )

    def testAlone(self):
        self.attempt("-d")
        self.attempt("-h")

    def testWithRefs(self):
        self.attempt("-ax", "-O", "-d")

    def testWithOtherOption(self):
        with self.assertRaises(ConstraintViolationError) as context:
            self.attempt("-d", "-b")
        self.assertIs(context.exception.options["code"], FaultCode.ONLY_VIOLATED)
        self.assertIn("can only be used with -a or -O", context.exception.message)

    def testEmptyRefsMeansAlone(self):
        with self.assertRaises(ConstraintViolationError):
            self.attempt("-h", "-b")

    def testRepeatedOwnOccurrencesAllowed(self):
        self.attempt("-h", "-h")

    def testRepeatedRefCountsAgainstOnly(self):
        # -a twice is two occurrences but only one passed reference
        with self.assertRaises(ConstraintViolationError):
            self.attempt("-a", "1", "-a", "2", "-d")

    def testPositionalsDoNotCount(self):
        self.attempt("-d", "file")

    def testNegatedOnly(self):
        self.build(("a", "aa", ""), ("b", "bb", ""), ("n", "nn", "!<a"))
        self.attempt("-n", "-b")
        with self.assertRaises(ConstraintViolationError):
            self.attempt("-n", "-a")
        with self.assertRaises(ConstraintViolationError):
            self.attempt("-n")


class TestConfiguration(VerifierCase):
    """Unresolvable references surface as configuration errors."""

    def testUnknownRef(self):
        self.build(("a", "aa", "&z"))
        with self.assertRaises(ConfigError) as context:
            self.attempt("-a")
        self.assertIs(context.exception.options["code"], FaultCode.UNRESOLVED_REFERENCE)

    def testSelfRef(self):
        self.build(("a", "aa", "@a"))
        with self.assertRaises(ConfigError) as context:
            self.attempt("-a")
        self.assertIs(context.exception.options["code"], FaultCode.SELF_REFERENCE)

    def testUnpassedOptionNotChecked(self):
        self.build(("a", "aa", "&z"), ("b", "bb", ""))
        self.attempt("-b")

    def testVerifyRejectsNonRegistry(self):
        with self.assertRaises(TypeError):
            verify([])


class TestDescribe(TestCase):
    """Human phrases for constraint clauses."""

    def testPhrases(self):
        table = {
            "": "",
            "&ad": "requires -a and -d",
            "&abc": "requires -a, -b and -c",
            "!&ad": "cannot be used together with -a and -d",
            "@bc": "requires -b or -c",
            "!@bc": "cannot be used with -b or -c",
            "<aO": "can only be used with -a or -O",
            "<": "must be used alone",
            "!<a": "requires an option other than -a",
            "!@": "",
        }
        for behavior, phrase in table.items():
            with self.subTest(behavior=behavior):
                self.assertEqual(describe(Option("x", "xx", behavior)), phrase)

    def testCheckWithoutQuantifier(self):
        registry = Registry()
        registry.register(option := Option("x", "xx"))
        self.assertTrue(check(registry, option))


if __name__ == "__main__":
    unittest.main()
