"""
Option descriptor and registry behavioral tests.

Scope
- Validate OptionSpec construction: forms, kinds, placeholders, destinations, descriptions.
- Validate the Required → Optional toggle and its warning.
- Validate OptionRegistry ordering, uniqueness and lookups.

Conventions
- Test method names follow CamelCase per project convention.
- Specs are built through Parser helpers unless the constructor itself is under test.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from optscan import (
    AssignString,
    Cell,
    Help,
    IgnoredOptionalArgumentWarning,
    OptionRegistry,
    OptionSpec,
    ParseDouble,
    ParseInt,
    ParseUnsigned,
    Parser,
    Requirement,
    SetConstant,
)


class TestOptionSpec(TestCase):
    """Behavioral tests for OptionSpec construction."""

    def testFlagKindsTakeNoArgument(self):
        self.assertIs(OptionSpec("h", "help", Help()).requirement, Requirement.NONE)
        self.assertIs(OptionSpec("v", None, SetConstant(1), Cell(0)).requirement, Requirement.NONE)

    def testValueKindsRequireArgument(self):
        for kind in (ParseInt(0), ParseUnsigned(10), ParseDouble(), AssignString()):
            spec = OptionSpec("x", "x", kind, Cell(), metavar="X")
            self.assertIs(spec.requirement, Requirement.REQUIRED)
            self.assertTrue(spec.takes_argument)

    def testAtLeastOneFormRequired(self):
        with self.assertRaises(TypeError):
            OptionSpec(None, None, Help())

    def testShortFormMustBeSingleCharacter(self):
        with self.assertRaises(ValueError):
            OptionSpec("ab", None, Help())
        with self.assertRaises(ValueError):
            OptionSpec("-", None, Help())
        with self.assertRaises(ValueError):
            OptionSpec(" ", None, Help())

    def testShortFormMustBeString(self):
        with self.assertRaises(TypeError):
            OptionSpec(1, None, Help())

    def testLongFormRejectsEqualsWhitespaceAndDash(self):
        for long in ("", "a=b", "two words", "-lead"):
            with self.assertRaises(ValueError):
                OptionSpec(None, long, Help())

    def testUnknownKindRejected(self):
        with self.assertRaises(TypeError):
            OptionSpec("x", None, int, Cell())

    def testBaseRange(self):
        OptionSpec("x", None, ParseInt(36), Cell(), metavar="N")
        OptionSpec("x", None, ParseUnsigned(2), Cell(), metavar="N")
        with self.assertRaises(ValueError):
            OptionSpec("x", None, ParseInt(1), Cell(), metavar="N")
        with self.assertRaises(ValueError):
            OptionSpec("x", None, ParseUnsigned(37), Cell(), metavar="N")
        with self.assertRaises(TypeError):
            OptionSpec("x", None, ParseInt("10"), Cell(), metavar="N")

    def testConstantMustBeInteger(self):
        with self.assertRaises(TypeError):
            OptionSpec("x", None, SetConstant("1"), Cell())

    def testFlagRejectsMetavar(self):
        with self.assertRaises(TypeError):
            OptionSpec("v", None, SetConstant(1), Cell(), metavar="V")

    def testEmptyMetavarRejected(self):
        with self.assertRaises(ValueError):
            OptionSpec("s", None, AssignString(), Cell(), metavar="  ")

    def testDestinationRequiredForValueKinds(self):
        with self.assertRaises(TypeError):
            OptionSpec("s", None, AssignString(), metavar="S")
        with self.assertRaises(TypeError):
            OptionSpec("s", None, AssignString(), object(), metavar="S")

    def testHelpTakesNoDestination(self):
        with self.assertRaises(TypeError):
            OptionSpec("h", None, Help(), Cell())

    def testDescrDefaultsToNone(self):
        self.assertIsNone(OptionSpec("h", None, Help()).descr)

    def testDescrIsTrimmedAndNonEmpty(self):
        self.assertEqual(OptionSpec("h", None, Help(), descr="  show help ").descr, "show help")
        with self.assertRaises(ValueError):
            OptionSpec("h", None, Help(), descr="   ")
        with self.assertRaises(TypeError):
            OptionSpec("h", None, Help(), descr=None)

    def testFieldsAreReadOnly(self):
        spec = OptionSpec("h", "help", Help())
        with self.assertRaises(AttributeError):
            spec.short = "x"
        self.assertEqual(spec.kind, Help())

    def testReprListsFields(self):
        text = repr(OptionSpec("n", "num", ParseInt(16), Cell(3), metavar="NUM"))
        self.assertTrue(text.startswith("option-spec("))
        self.assertIn("short='n'", text)
        self.assertIn("kind=ParseInt(base=16)", text)
        self.assertIn("dest=Cell(3)", text)


class TestOptionalArgument(TestCase):
    """Behavioral tests for the Required → Optional toggle."""

    def testOptionalReturnsSameSpec(self):
        parser = Parser("tool")
        spec = parser.add_string(None, "ostring", Cell())
        self.assertIs(spec.optional(), spec)
        self.assertIs(spec.requirement, Requirement.OPTIONAL)

    def testOptionalWithShortFormWarns(self):
        parser = Parser("tool")
        spec = parser.add_string("o", "ostring", Cell())
        with self.assertWarns(IgnoredOptionalArgumentWarning):
            spec.optional()
        self.assertIs(spec.requirement, Requirement.OPTIONAL)

    def testOptionalRejectedForFlags(self):
        parser = Parser("tool")
        with self.assertRaises(TypeError):
            parser.add_set("v", "verbose", 1, Cell(0)).optional()

    def testOptionalRejectedForNumbers(self):
        parser = Parser("tool")
        with self.assertRaises(TypeError):
            parser.add_int(None, "num", Cell(0)).optional()


class TestOptionRegistry(TestCase):
    """Behavioral tests for OptionRegistry."""

    def setUp(self):
        self.registry = OptionRegistry()
        self.help = self.registry.register(OptionSpec("h", "help", Help()))
        self.n = self.registry.register(OptionSpec("n", "n", SetConstant(1), Cell(0)))
        self.num = self.registry.register(OptionSpec(None, "num", ParseInt(0), Cell(0), metavar="NUM"))

    def testInsertionOrderPreserved(self):
        self.assertEqual(list(self.registry), [self.help, self.n, self.num])
        self.assertEqual(len(self.registry), 3)
        self.assertIs(self.registry[2], self.num)

    def testRegisterReturnsHandle(self):
        spec = OptionSpec("q", None, SetConstant(0), Cell())
        self.assertIs(self.registry.register(spec), spec)

    def testDuplicateShortRejected(self):
        with self.assertRaises(ValueError):
            self.registry.register(OptionSpec("h", None, SetConstant(1), Cell()))

    def testDuplicateLongRejected(self):
        with self.assertRaises(ValueError):
            self.registry.register(OptionSpec(None, "num", SetConstant(1), Cell()))

    def testRegisterRejectsNonSpecs(self):
        with self.assertRaises(TypeError):
            self.registry.register("--help")

    def testFindByShort(self):
        self.assertIs(self.registry.find_by_short("h"), self.help)
        self.assertIsNone(self.registry.find_by_short("z"))

    def testFindByLongExact(self):
        self.assertEqual(self.registry.find_by_long_prefix("num"), (self.num, ""))
        self.assertEqual(self.registry.find_by_long_prefix("n"), (self.n, ""))

    def testFindByLongWithValue(self):
        self.assertEqual(self.registry.find_by_long_prefix("num=0x10"), (self.num, "=0x10"))
        self.assertEqual(self.registry.find_by_long_prefix("num="), (self.num, "="))

    def testFindByLongRejectsAbbreviationsAndExtensions(self):
        self.assertIsNone(self.registry.find_by_long_prefix("he"))
        self.assertIsNone(self.registry.find_by_long_prefix("helpme"))
        self.assertIsNone(self.registry.find_by_long_prefix("nu"))


if __name__ == "__main__":
    unittest.main()
