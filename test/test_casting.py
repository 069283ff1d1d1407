"""
Casting module behavioral tests (lenient defaults and strict mode).

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from docket.casting import cast
from docket.metadata import ParameterType


class TestLenientCast(TestCase):
    """Casts never raise; malformed input yields a default."""

    def testIntParses(self):
        self.assertEqual(cast("42", ParameterType.INT), 42)
        self.assertEqual(cast("-7", ParameterType.INT), -7)

    def testIntNonNumericIsZero(self):
        self.assertEqual(cast("abc", ParameterType.INT), 0)
        self.assertEqual(cast("", ParameterType.INT), 0)

    def testIntUsesLeadingDigits(self):
        self.assertEqual(cast("12abc", ParameterType.INT), 12)

    def testBoolEmptyIsFalse(self):
        self.assertIs(cast("", ParameterType.BOOL), False)

    def testBoolFalseyWords(self):
        for word in ("0", "false", "No", "OFF"):
            self.assertIs(cast(word, ParameterType.BOOL), False, word)

    def testBoolOtherTextIsTrue(self):
        self.assertIs(cast("yes", ParameterType.BOOL), True)
        self.assertIs(cast("anything", ParameterType.BOOL), True)

    def testListLiteral(self):
        self.assertEqual(cast("[3,4]", ParameterType.LIST), [3, 4])

    def testListMalformedIsNone(self):
        self.assertIsNone(cast("[3,", ParameterType.LIST))
        self.assertIsNone(cast("5", ParameterType.LIST))

    def testListFromRepeatedKeys(self):
        self.assertEqual(cast(["3", "4", "x"], ParameterType.LIST), [3, 4, "x"])

    def testScalarFromRepeatedKeysUsesLast(self):
        self.assertEqual(cast(["1", "2"], ParameterType.INT), 2)

    def testStringPassesThrough(self):
        self.assertEqual(cast(" as is ", ParameterType.STRING), " as is ")

    def testTypeNamesAccepted(self):
        self.assertEqual(cast("9", "int"), 9)
        self.assertEqual(cast("[1]", "array"), [1])

    def testListTooDeeplyNestedIsNone(self):
        self.assertIsNone(cast("[" * 100000, ParameterType.LIST))

    def testDeeplyNestedItemKeptAsText(self):
        self.assertEqual(cast(["[" * 100000, "2"], ParameterType.LIST), ["[" * 100000, 2])

    def testIntTooLongIsZero(self):
        self.assertEqual(cast("9" * 5000, ParameterType.INT), 0)


class TestStrictCast(TestCase):
    """Strict casts raise ValueError where lenient ones substitute."""

    def testStrictIntRejectsText(self):
        with self.assertRaises(ValueError):
            cast("12abc", ParameterType.INT, strict=True)

    def testStrictIntAcceptsNumber(self):
        self.assertEqual(cast(" 12 ", ParameterType.INT, strict=True), 12)

    def testStrictBoolRejectsUnknownWord(self):
        with self.assertRaises(ValueError):
            cast("maybe", ParameterType.BOOL, strict=True)

    def testStrictBoolAcceptsKnownWords(self):
        self.assertIs(cast("on", ParameterType.BOOL, strict=True), True)
        self.assertIs(cast("off", ParameterType.BOOL, strict=True), False)

    def testStrictListRejectsMalformed(self):
        with self.assertRaises(ValueError):
            cast("[3,", ParameterType.LIST, strict=True)

    def testStrictScalarRejectsList(self):
        with self.assertRaises(ValueError):
            cast(["1", "2"], ParameterType.INT, strict=True)

    def testStrictListRejectsDeepNesting(self):
        with self.assertRaises(ValueError):
            cast("[" * 100000, ParameterType.LIST, strict=True)

    def testStrictIntRejectsTooManyDigits(self):
        with self.assertRaises(ValueError):
            cast("9" * 5000, ParameterType.INT, strict=True)


if __name__ == "__main__":
    unittest.main()
