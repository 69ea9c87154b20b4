# python
"""
Utils module behavioral tests.

Scope
- Validate the Unset sentinel (singleton, falsey, sealed, copy-stable).
- Validate coalesce(), listify(), freeze() and the human joins used by every message.
- Validate prefix() matching: exact entries, unique prefixes, ambiguity and exact mode.

Conventions
- Test method names follow CamelCase per project convention.
- Messages are compared verbatim; they are part of the public contract.
"""

from __future__ import annotations

import copy
import unittest
from unittest import TestCase

from argot import Unset, UnsetType, coalesce, conjoin, disjoin, freeze, listify, prefix, rename


class TestUnset(TestCase):
    """Behavioral tests for the Unset sentinel."""

    def testUnsetIsSingleton(self):
        self.assertIs(UnsetType(), Unset)

    def testUnsetIsFalsey(self):
        self.assertFalse(Unset)

    def testUnsetRepr(self):
        self.assertEqual(repr(Unset), "Unset")

    def testUnsetSurvivesCopies(self):
        self.assertIs(copy.copy(Unset), Unset)
        self.assertIs(copy.deepcopy([Unset])[0], Unset)

    def testUnsetCannotBeSubclassed(self):
        with self.assertRaises(TypeError):
            type("Other", (UnsetType,), {})

    def testCoalesceOnlyReplacesUnset(self):
        self.assertEqual(coalesce(Unset, "fallback"), "fallback")
        self.assertEqual(coalesce(0, "fallback"), 0)
        self.assertIsNone(coalesce(None, "fallback"))


class TestHelpers(TestCase):
    """Behavioral tests for rename(), listify() and freeze()."""

    def testRenameSetsNames(self):
        def function():
            pass

        rename(function, "renamed")
        self.assertEqual(function.__name__, "renamed")
        self.assertEqual(function.__qualname__, "renamed")

    def testRenameRejectsNonCallable(self):
        with self.assertRaises(TypeError):
            rename(1, "name")

    def testListifySplitsStringsLikeAShell(self):
        self.assertEqual(listify("a 'b c' d"), ["a", "b c", "d"])

    def testListifyMaterializesIterables(self):
        self.assertEqual(listify(("a", 1)), ["a", 1])

    def testListifyRejectsScalars(self):
        with self.assertRaises(TypeError):
            listify(5)

    def testFreezeTagsLeavesWithTheirType(self):
        self.assertEqual(len({freeze(value) for value in (True, 1, 1.0, "1")}), 4)

    def testFreezeTagsContainersWithTheirShape(self):
        self.assertNotEqual(freeze({"a": "b"}), freeze(["mapping", [["a", "b"]]]))
        self.assertEqual(freeze(["a", ("b",)]), freeze(("a", ["b"])))
        self.assertEqual(freeze({"b": 1, "a": 2}), freeze({"a": 2, "b": 1}))


class TestJoins(TestCase):
    """Behavioral tests for conjoin() and disjoin()."""

    def testConjoinCounts(self):
        self.assertEqual(conjoin([]), "")
        self.assertEqual(conjoin(["a"]), "a")
        self.assertEqual(conjoin(["a", "b"]), "a and b")
        self.assertEqual(conjoin(["a", "b", "c"]), "a, b, and c")

    def testConjoinWithoutSerialComma(self):
        self.assertEqual(conjoin(["a", "b", "c"], serial=False), "a, b and c")

    def testDisjoin(self):
        self.assertEqual(disjoin(["x", "y"]), "x or y")
        self.assertEqual(disjoin(["x", "y", "z"]), "x, y, or z")


class TestPrefix(TestCase):
    """Behavioral tests for prefix()."""

    table = ("verbose", "version", "quiet")

    def testExactEntryWins(self):
        self.assertEqual(prefix("quiet", self.table), "quiet")

    def testUniquePrefix(self):
        self.assertEqual(prefix("verb", self.table), "verbose")

    def testAmbiguousPrefix(self):
        with self.assertRaises(LookupError) as context:
            prefix("ver", self.table)
        self.assertEqual(str(context.exception.args[0]), 'ambiguous option "ver": must be verbose, version, or quiet')

    def testUnknownWord(self):
        with self.assertRaises(LookupError) as context:
            prefix("x", self.table)
        self.assertEqual(context.exception.args[0], 'bad option "x": must be verbose, version, or quiet')

    def testExactModeRejectsPrefixes(self):
        with self.assertRaises(LookupError) as context:
            prefix("verb", self.table, exact=True)
        self.assertEqual(context.exception.args[0], 'bad option "verb": must be verbose, version, or quiet')

    def testLabelIsUsed(self):
        with self.assertRaises(LookupError) as context:
            prefix("x", ("a", "b"), label="-mode value")
        self.assertEqual(context.exception.args[0], 'bad -mode value "x": must be a or b')

    def testNonStringWordNeverMatches(self):
        with self.assertRaises(LookupError):
            prefix(1, ("1",))


if __name__ == "__main__":
    unittest.main()
