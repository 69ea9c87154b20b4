"""
Argot faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every diagnostic the
  parser can produce. Codes are grouped by pipeline stage so logs and searches
  stay predictable.
- ArgparseError: base type that carries the one-line message plus options and
  knows how to render itself (rich) and how to surface itself (trigger).
- Category bases mirror the pipeline: SchemaError, InvocationError,
  MatchError, ValidationError and ConstraintError.
- HelpReturn: the early-return control exit used by the help switch.
- trigger(): central entry point to surface any fault.
- getdoc(): optional description lookup for a code from the host application.

Message contract
- str(fault) is exactly the single-line message produced by the engine
  (e.g. 'missing required switch: -name'); rendering only adds a header with
  the program name, code and title, and a lowercase hint.

Integration
- The engine raises faults directly. The Parser context catches them and calls
  trigger(fault, shell=..., fancy=..., colorful=...): outside shell mode the
  fault is re-raised, in shell mode it is printed to stderr and the process
  exits with status 1.
"""
import copy
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by pipeline stage)
    - schema (21xxx): element syntax, switch combinations, collisions, references.
    - invocation (22xxx): top-level arity, global options, argument list shape, levels.
    - match (23xxx): switch recognition, arguments, missing elements, excess tokens.
    - validation (24xxx): enum, validate predicates, types.
    - constraint (25xxx): require/forbid/allow.

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- schema errors (21xxx) ---
    MALFORMED_ELEMENT           = 21101
    UNKNOWN_ELEMENT_SWITCH      = 21102
    MISSING_SWITCH_VALUE        = 21103
    NAME_COLLISION              = 21111
    ALIAS_COLLISION             = 21112
    UPVAR_COLLISION             = 21113
    SWITCH_CONFLICT             = 21121
    MISSING_COMPANION           = 21122
    DISALLOWED_COMBINATION      = 21123
    MULTIPLE_CATCHALLS          = 21124
    UNDEFINED_REFERENCE         = 21131
    SHARED_KEY                  = 21132
    UNKNOWN_TYPE                = 21141
    UNKNOWN_VALIDATOR           = 21142

    # --- invocation errors (22xxx) ---
    MISSING_DEFINITION          = 22101
    MISSING_ARGS                = 22102
    EXTRA_INVOCATION_ARGUMENTS  = 22103
    MISSING_OPTION_VALUE        = 22111
    OPTION_CONFLICT             = 22112
    BAD_DEFINITION              = 22121
    BAD_ARGUMENT_LIST           = 22122
    BAD_LEVEL                   = 22131

    # --- match errors (23xxx) ---
    BAD_SWITCH                  = 23101
    UNEXPECTED_ARGUMENT         = 23102
    MISSING_ARGUMENT            = 23103
    MISSING_SWITCHES            = 23111
    MISSING_PARAMETERS          = 23112
    TOO_MANY_ARGUMENTS          = 23113

    # --- validation errors (24xxx) ---
    BAD_ENUM_VALUE              = 24101
    FAILED_VALIDATION           = 24102
    TYPE_MISMATCH               = 24103

    # --- constraint errors (25xxx) ---
    UNMET_REQUIREMENT           = 25101
    CONFLICT                    = 25102
    DISALLOWED_ELEMENT          = 25103

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgparseError(Exception):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        if isinstance(code := options.get("code"), FaultCode) and "docs" not in options:
            options["docs"] = getdoc(code)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return "" if self.message is Unset else self.message

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        } | getattr(main, "__styles__", {}))

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        code = self.options.get("code")
        header = Text.assemble(
            "[ ",
            text(getattr(main, "__prog__", "argparse"), styler("prog-name")),
            " — ",
            text(code.normalize() if isinstance(code, FaultCode) else "?", styler("code")),
            " | ",
            text(self.options.get("title", "error").title(), styler("error-title")),
            " ]"
        )
        message = text(str(self), styler("error-message"))
        renderables = [message]
        if hint := self.options.get("hint"):
            renderables.append(Text.assemble(text(" → ", styler("hint-arrow")), text(hint, styler("hint"))))

        if fancy:
            try:
                width = int((console.width - 4) * self.options["ratio"])
            except KeyError:
                width = None
            return Panel(Group(*renderables), title=header, title_align="left", width=width)

        return Group(header, *renderables)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class SchemaError(ArgparseError): ...
class InvocationError(ArgparseError): ...
class MatchError(ArgparseError): ...
class ValidationError(ArgparseError): ...
class ConstraintError(ArgparseError): ...


class MalformedElementError(SchemaError): ...
class UnknownElementSwitchError(SchemaError): ...
class MissingSwitchValueError(SchemaError): ...
class NameCollisionError(SchemaError): ...
class AliasCollisionError(SchemaError): ...
class UpvarCollisionError(SchemaError): ...
class SwitchConflictError(SchemaError): ...
class MissingCompanionError(SchemaError): ...
class DisallowedCombinationError(SchemaError): ...
class MultipleCatchallsError(SchemaError): ...
class UndefinedReferenceError(SchemaError): ...
class SharedKeyError(SchemaError): ...
class UnknownTypeError(SchemaError): ...
class UnknownValidatorError(SchemaError): ...

class MissingDefinitionError(InvocationError): ...
class MissingArgsError(InvocationError): ...
class ExtraInvocationArgumentsError(InvocationError): ...
class MissingOptionValueError(InvocationError): ...
class OptionConflictError(InvocationError): ...
class BadDefinitionError(InvocationError): ...
class BadArgumentListError(InvocationError): ...
class BadLevelError(InvocationError): ...

class BadSwitchError(MatchError): ...
class UnexpectedArgumentError(MatchError): ...
class MissingArgumentError(MatchError): ...
class MissingSwitchesError(MatchError): ...
class MissingParametersError(MatchError): ...
class TooManyArgumentsError(MatchError): ...

class BadEnumValueError(ValidationError): ...
class FailedValidationError(ValidationError): ...
class TypeMismatchError(ValidationError): ...

class UnmetRequirementError(ConstraintError): ...
class ConflictError(ConstraintError): ...
class DisallowedElementError(ConstraintError): ...


class HelpReturn(SystemExit):
    """
    early return raised when the help switch is honoured.

    carries the help result ("" when the text was already printed) and the
    number of procedure boundaries it still has to cross. the procedure()
    decorator consumes one level per boundary; left uncaught it behaves like
    a successful sys.exit(0).
    """

    def __init__(self, result="", /, *, level=1):
        super().__init__(0)
        self.result = result
        self.level = level

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(overrides.get("result", self.result), level=overrides.get("level", self.level))


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgparseError).
    - options are merged into the fault via copy.replace before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings. when
    not found, returns None (renderers treat docs as optional).
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ArgparseError",
    "SchemaError",
    "InvocationError",
    "MatchError",
    "ValidationError",
    "ConstraintError",
    "MalformedElementError",
    "UnknownElementSwitchError",
    "MissingSwitchValueError",
    "NameCollisionError",
    "AliasCollisionError",
    "UpvarCollisionError",
    "SwitchConflictError",
    "MissingCompanionError",
    "DisallowedCombinationError",
    "MultipleCatchallsError",
    "UndefinedReferenceError",
    "SharedKeyError",
    "UnknownTypeError",
    "UnknownValidatorError",
    "MissingDefinitionError",
    "MissingArgsError",
    "ExtraInvocationArgumentsError",
    "MissingOptionValueError",
    "OptionConflictError",
    "BadDefinitionError",
    "BadArgumentListError",
    "BadLevelError",
    "BadSwitchError",
    "UnexpectedArgumentError",
    "MissingArgumentError",
    "MissingSwitchesError",
    "MissingParametersError",
    "TooManyArgumentsError",
    "BadEnumValueError",
    "FailedValidationError",
    "TypeMismatchError",
    "UnmetRequirementError",
    "ConflictError",
    "DisallowedElementError",
    "HelpReturn",
    "trigger",
    "getdoc",
)
