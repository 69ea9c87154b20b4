# python
"""
Scope behavioral tests.

Scope
- Validate DictScope storage, parents and level resolution (relative and "#N").
- Validate FrameScope writes through live function locals (PEP 667 proxies).
- Validate Link reads and writes through to the linked variable.

Conventions
- Test method names follow CamelCase per project convention.
"""

from __future__ import annotations

import sys
import unittest
from unittest import TestCase

from argot import DictScope, FrameScope, Link, Unset
from argot.faults import BadLevelError


class TestDictScope(TestCase):
    """Behavioral tests for DictScope."""

    def setUp(self):
        self.root = DictScope({"x": 1})
        self.child = DictScope(parent=self.root)

    def testGetSetUnset(self):
        self.child.set("a", 1)
        self.assertEqual(self.child.get("a"), 1)
        self.assertIn("a", self.child)
        self.child.unset("a")
        self.assertIs(self.child.get("a"), Unset)
        self.child.unset("a")

    def testRelativeLevels(self):
        self.assertIs(self.child.up(0), self.child)
        self.assertIs(self.child.up(1), self.root)
        self.assertIs(self.child.up("1"), self.root)

    def testAbsoluteLevels(self):
        self.assertIs(self.child.up("#0"), self.root)
        self.assertIs(self.child.up("#1"), self.child)

    def testBadLevels(self):
        for level in (2, "#2", "bogus", -1):
            with self.assertRaises(BadLevelError) as context:
                self.child.up(level)
            self.assertEqual(str(context.exception), 'bad level "%s"' % level)

    def testLink(self):
        link = self.child.link("v", self.root, "x")
        self.assertEqual(self.child.get("v"), Link(self.root, "x"))
        self.assertEqual(link.value, 1)
        link.set(5)
        self.assertEqual(self.root.get("x"), 5)
        link.unset()
        self.assertNotIn("x", self.root)


class TestFrameScope(TestCase):
    """Behavioral tests for FrameScope."""

    def testWritesThroughLocals(self):
        value = 1
        FrameScope(sys._getframe()).set("value", 2)
        self.assertEqual(value, 2)

    def testReadsLocals(self):
        value = "local"
        self.assertEqual(FrameScope(sys._getframe()).get("value"), "local")
        self.assertIs(FrameScope(sys._getframe()).get("missing"), Unset)

    def testUnsetRebindsFastLocals(self):
        value = 1
        FrameScope(sys._getframe()).unset("value")
        self.assertIs(value, Unset)

    def testParentIsCallingFrame(self):
        def inner():
            return FrameScope(sys._getframe()).up(1)

        self.assertEqual(inner(), FrameScope(sys._getframe()))


if __name__ == "__main__":
    unittest.main()
