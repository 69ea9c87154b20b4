# python
"""
Validation and constraint behavioral tests.

Scope
- Validate -enum prefix matching (canonical values, exact mode, ambiguity).
- Validate -validate predicates (argument binding, failures, custom messages).
- Validate the -type vocabulary with strict (non-empty) semantics.
- Validate the require/forbid/allow sweep and its message wording.

Conventions
- Test method names follow CamelCase per project convention.
- Elements are built directly; the compiler is covered elsewhere.
"""

from __future__ import annotations

import unittest
from unittest import TestCase

from argot import TYPECHECKS, Element, GlobalOptions, Kind
from argot.validation import constrain, typecheck, validate
from argot.faults import (
    BadEnumValueError,
    ConflictError,
    DisallowedElementError,
    FailedValidationError,
    TypeMismatchError,
    UnmetRequirementError,
)


class TestEnum(TestCase):
    """Behavioral tests for -enum."""

    level = Element("level", kind=Kind.SWITCH, argument=True, enum=["debug", "info", "warning"])

    def testExactValue(self):
        self.assertEqual(validate(self.level, "info", GlobalOptions(), label="-level"), "info")

    def testPrefixIsCanonicalized(self):
        self.assertEqual(validate(self.level, "deb", GlobalOptions(), label="-level"), "debug")

    def testManyValues(self):
        self.assertEqual(
            validate(self.level, ["d", "w"], GlobalOptions(), label="-level", many=True),
            ["debug", "warning"],
        )

    def testBadValue(self):
        with self.assertRaises(BadEnumValueError) as context:
            validate(self.level, "x", GlobalOptions(), label="-level")
        self.assertEqual(str(context.exception), 'bad -level value "x": must be debug, info, or warning')

    def testExactModeRejectsPrefixes(self):
        with self.assertRaises(BadEnumValueError) as context:
            validate(self.level, "deb", GlobalOptions({"-exact": True}), label="-level")
        self.assertEqual(str(context.exception), 'bad -level value "deb": must be debug, info, or warning')

    def testAmbiguousValue(self):
        element = Element("mode", kind=Kind.PARAMETER, enum=["info", "input"])
        with self.assertRaises(BadEnumValueError) as context:
            validate(element, "in", GlobalOptions(), label="mode")
        self.assertEqual(str(context.exception), 'ambiguous mode value "in": must be info or input')


class TestPredicate(TestCase):
    """Behavioral tests for -validate."""

    def testPassingPredicate(self):
        element = Element("port", kind=Kind.PARAMETER, validate=str.isdigit, validatemsg="validation: isdigit")
        self.assertEqual(validate(element, "80", GlobalOptions(), label="port"), "80")

    def testGenericMessage(self):
        element = Element("port", kind=Kind.PARAMETER, validate=lambda arg: arg.isdigit(), validatemsg="validation: <lambda>")
        with self.assertRaises(FailedValidationError) as context:
            validate(element, "http", GlobalOptions(), label="port")
        self.assertEqual(str(context.exception), 'port value "http" fails validation: <lambda>')

    def testCustomMessage(self):
        element = Element(
            "port",
            kind=Kind.SWITCH,
            argument=True,
            validate=lambda arg: arg.isdigit(),
            errormsg="$name expects a number, got $arg",
        )
        with self.assertRaises(FailedValidationError) as context:
            validate(element, "http", GlobalOptions(), label="-port")
        self.assertEqual(str(context.exception), "-port expects a number, got http")

    def testRaisingPredicateFails(self):
        element = Element("n", kind=Kind.PARAMETER, validate=lambda arg: int(arg) > 0)
        with self.assertRaises(FailedValidationError) as context:
            validate(element, "x", GlobalOptions(), label="n")
        self.assertEqual(str(context.exception), 'n value "x" fails validation')

    def testCustomMessageSeesElement(self):
        seen = {}

        def predicate(opt, arg):
            seen["opt"] = opt
            return arg.isdigit()

        element = Element("port", kind=Kind.SWITCH, argument=True, validate=predicate, errormsg="$opt rejects $arg")
        with self.assertRaises(FailedValidationError) as context:
            validate(element, "http", GlobalOptions(), label="-port")
        self.assertEqual(str(context.exception), "port rejects http")
        self.assertIs(seen["opt"], element)

    def testPredicateReceivesNamedBindings(self):
        seen = {}

        def predicate(name, opt, arg):
            seen.update(name=name, opt=opt.name, arg=arg)
            return True

        element = Element("n", kind=Kind.PARAMETER, validate=predicate)
        validate(element, "1", GlobalOptions(), label="n")
        self.assertEqual(seen, {"name": "n", "opt": "n", "arg": "1"})


class TestTypes(TestCase):
    """Behavioral tests for -type."""

    def testIntegerLiterals(self):
        for text in ("10", "-3", "+7", "0x1F", "0o17", "0b101", " 42 "):
            self.assertTrue(TYPECHECKS["integer"](text), text)
        for text in ("", "1.5", "abc", "0x"):
            self.assertFalse(TYPECHECKS["integer"](text), text)

    def testDouble(self):
        self.assertTrue(TYPECHECKS["double"]("1e3"))
        self.assertTrue(TYPECHECKS["double"]("0x10"))
        self.assertFalse(TYPECHECKS["double"]("abc"))

    def testBoolean(self):
        self.assertTrue(TYPECHECKS["boolean"]("y"))
        self.assertTrue(TYPECHECKS["boolean"]("FALSE"))
        self.assertTrue(TYPECHECKS["boolean"]("1"))
        self.assertFalse(TYPECHECKS["boolean"]("o"))
        self.assertFalse(TYPECHECKS["boolean"](""))

    def testCharacterClassesAreStrict(self):
        self.assertTrue(TYPECHECKS["alpha"]("abc"))
        self.assertFalse(TYPECHECKS["alpha"](""))
        self.assertTrue(TYPECHECKS["digit"]("5abc"))
        self.assertTrue(TYPECHECKS["xdigit"]("beef"))
        self.assertFalse(TYPECHECKS["upper"]("Abc"))

    def testListAndDict(self):
        self.assertTrue(TYPECHECKS["list"]("a 'b c'"))
        self.assertFalse(TYPECHECKS["list"]("a 'b"))
        self.assertTrue(TYPECHECKS["dict"]("a 1 b 2"))
        self.assertFalse(TYPECHECKS["dict"]("a 1 b"))

    def testTypecheckMessage(self):
        element = Element("n", kind=Kind.PARAMETER, type="integer")
        with self.assertRaises(TypeMismatchError) as context:
            typecheck(element, "1.5", label="n")
        self.assertEqual(str(context.exception), 'n value "1.5" is not of the type integer')

    def testTypecheckReportsFirstFailingItem(self):
        element = Element("n", kind=Kind.PARAMETER, type="integer", catchall=True)
        with self.assertRaises(TypeMismatchError) as context:
            typecheck(element, ["1", "x", "y"], label="n", many=True)
        self.assertEqual(str(context.exception), 'n value "x" is not of the type integer')

    def testUntypedElementPasses(self):
        element = Element("n", kind=Kind.PARAMETER)
        self.assertEqual(typecheck(element, "anything", label="n"), "anything")


class TestConstraints(TestCase):
    """Behavioral tests for constrain()."""

    def testRequire(self):
        elements = {
            "a": Element("a", kind=Kind.SWITCH, require=["b"]),
            "b": Element("b", kind=Kind.SWITCH),
        }
        constrain(elements, {"a", "b"})
        with self.assertRaises(UnmetRequirementError) as context:
            constrain(elements, {"a"})
        self.assertEqual(str(context.exception), "-a requires -b")

    def testForbid(self):
        elements = {
            "a": Element("a", kind=Kind.SWITCH, forbid=["file"]),
            "file": Element("file", kind=Kind.PARAMETER),
        }
        constrain(elements, {"a"})
        with self.assertRaises(ConflictError) as context:
            constrain(elements, {"a", "file"})
        self.assertEqual(str(context.exception), "-a conflicts with file")

    def testAllow(self):
        elements = {
            "a": Element("a", kind=Kind.SWITCH, allow=["b"]),
            "b": Element("b", kind=Kind.SWITCH),
            "c": Element("c", kind=Kind.SWITCH),
        }
        constrain(elements, {"a", "b"})
        with self.assertRaises(DisallowedElementError) as context:
            constrain(elements, {"a", "c"})
        self.assertEqual(str(context.exception), "a doesn't allow c")

    def testRequireIsCheckedBeforeAllow(self):
        elements = {
            "a": Element("a", kind=Kind.SWITCH, allow=["b"]),
            "b": Element("b", kind=Kind.SWITCH, require=["c"]),
            "c": Element("c", kind=Kind.SWITCH),
        }
        with self.assertRaises(UnmetRequirementError):
            constrain(elements, {"a", "b"})


if __name__ == "__main__":
    unittest.main()
