"""
Argot validation and constraints.

Per-value checks
- validate(): -enum (prefix matching to the canonical entry) or -validate
  (a predicate) on one value, or on every item of a catchall list.
- typecheck(): the -type vocabulary in strict mode: the empty string never
  passes a character class.

Post-match sweep
- constrain(): -require and -forbid for every present element in definition
  order, then -allow.

Labels
- Messages name switches as "-name" and parameters as "name"; the caller
  passes the label it wants to see in messages.

Bindings
- Predicates and -errormsg templates see the same three names: name (the
  label), arg (the value) and opt (the Element). A template renders $opt as
  the element name.
"""
import inspect
import re
import shlex
import string
import unicodedata

from .faults import (
    FaultCode,
    BadEnumValueError,
    ConflictError,
    DisallowedElementError,
    FailedValidationError,
    TypeMismatchError,
    UnmetRequirementError,
)
from .utils import Unset, prefix

INTEGER = re.compile(r"\s*[+-]?(?:0[xX][0-9a-fA-F]+|0[oO][0-7]+|0[bB][01]+|[0-9]+)\s*")
BOOLEANS = ("true", "false", "yes", "no", "on", "off")


def _integer(text):
    return INTEGER.fullmatch(text) is not None


def _double(text):
    if _integer(text):
        return True
    if "_" in text:
        return False
    try:
        float(text)
    except ValueError:
        return False
    return True


def _boolean(text):
    if _double(text):
        return True
    word = text.lower()
    return bool(word) and sum(candidate.startswith(word) for candidate in BOOLEANS) == 1


def _list(text):
    try:
        shlex.split(text)
    except ValueError:
        return False
    return True


def _dict(text):
    try:
        return len(shlex.split(text)) % 2 == 0
    except ValueError:
        return False


def _each(predicate):
    return lambda text: bool(text) and all(map(predicate, text))


TYPECHECKS = {
    "alnum": _each(str.isalnum),
    "alpha": _each(str.isalpha),
    "ascii": _each(lambda char: ord(char) < 128),
    "boolean": _boolean,
    "control": _each(lambda char: unicodedata.category(char) in ("Cc", "Cf")),
    "dict": _dict,
    "digit": lambda text: text[:1].isdigit() and text[:1].isascii(),
    "double": _double,
    "graph": _each(lambda char: char.isprintable() and not char.isspace()),
    "integer": _integer,
    "list": _list,
    "lower": _each(str.islower),
    "print": _each(str.isprintable),
    "punct": _each(lambda char: unicodedata.category(char).startswith("P")),
    "space": _each(str.isspace),
    "upper": _each(str.isupper),
    "wideinteger": _integer,
    "wordchar": lambda text: re.fullmatch(r"\w+", text) is not None,
    "xdigit": _each(lambda char: char in string.hexdigits),
}


def _predicate(element, label, value):
    """Call the -validate predicate with whichever of name/opt/arg it accepts."""
    predicate = element.validate
    bindings = {"name": label, "opt": element, "arg": value}
    try:
        parameters = inspect.signature(predicate).parameters
    except (TypeError, ValueError):
        return predicate(value)
    if any(parameter.kind is parameter.VAR_KEYWORD for parameter in parameters.values()):
        return predicate(**bindings)
    accepted = {name: object for name, object in bindings.items() if name in parameters}
    if not accepted:
        return predicate(value)
    return predicate(**accepted)


def _check(element, value, options, label):
    if element.enum:
        try:
            return prefix(value, element.enum, exact=options.exact, label="%s value" % label)
        except LookupError as error:
            raise BadEnumValueError(
                error.args[0],
                title="bad value",
                code=FaultCode.BAD_ENUM_VALUE,
                hint="use one of the listed values",
            ) from None
    if element.validate is not Unset:
        try:
            passed = _predicate(element, label, value)
        except Exception:
            passed = False
        if not passed:
            if element.errormsg is not Unset:
                message = string.Template(str(element.errormsg)).safe_substitute(
                    name=label, arg=value, opt=element
                )
            else:
                message = '%s value "%s" fails %s' % (label, value, element.validatemsg or "validation")
            raise FailedValidationError(
                message,
                title="validation failed",
                code=FaultCode.FAILED_VALIDATION,
                hint="check the value given to %s" % label,
            )
    return value


def validate(element, value, options, /, *, label, many=False):
    """
    Run -enum/-validate on value (or on every item when many is true) and
    return the canonical value(s). Elements without either return value as is.
    """
    if many:
        return [_check(element, item, options, label) for item in value]
    return _check(element, value, options, label)


def typecheck(element, value, /, *, label, many=False):
    """Fail on the first value that is not of the element's -type."""
    if element.type is Unset:
        return value
    check = TYPECHECKS[element.type]
    for item in (value if many else [value]):
        if not check(str(item)):
            raise TypeMismatchError(
                '%s value "%s" is not of the type %s' % (label, item, element.type),
                title="type mismatch",
                code=FaultCode.TYPE_MISMATCH,
                hint="%s expects a value of type %s" % (label, element.type),
            )
    return value


def constrain(elements, present, /):
    """
    Enforce -require/-forbid, then -allow, over the present elements.

    elements is the name -> Element mapping in definition order; present is
    the set of names that were matched or allocated.
    """
    def dash(name):
        element = elements.get(name)
        return element.label if element is not None else name

    for name, element in elements.items():
        if name not in present:
            continue
        for other in element.require:
            if other not in present:
                raise UnmetRequirementError(
                    "%s requires %s" % (dash(name), dash(other)),
                    title="unmet requirement",
                    code=FaultCode.UNMET_REQUIREMENT,
                    hint="add %s or drop %s" % (dash(other), dash(name)),
                )
        for other in element.forbid:
            if other in present:
                raise ConflictError(
                    "%s conflicts with %s" % (dash(name), dash(other)),
                    title="conflicting arguments",
                    code=FaultCode.CONFLICT,
                    hint="use either %s or %s" % (dash(name), dash(other)),
                )

    ordered = [name for name in elements if name in present]
    for name, element in elements.items():
        if name not in present or not element.allow:
            continue
        for other in ordered:
            if other != name and other not in element.allow:
                raise DisallowedElementError(
                    "%s doesn't allow %s" % (name, other),
                    title="disallowed combination",
                    code=FaultCode.DISALLOWED_ELEMENT,
                    hint="%s may only be combined with %s" % (name, ", ".join(element.allow)),
                )


__all__ = (
    "TYPECHECKS",
)
