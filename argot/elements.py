r"""
Argot element specifications.

Overview
- Element: one compiled entry of a definition, either a switch ("-name") or a
  positional parameter ("name"). Elements are immutable; the matcher derives
  per-invocation variants through copy.replace().
- Kind: SWITCH | PARAMETER, plus PASSTHROUGH for the "" element that
  receives unrecognized switches under global -pass.
- parse(): turn one definition entry into a metadata dict (the element
  switches that were given, plus the shorthand flags).
- derive(): the per-element derivation and validation rules that do not need
  to see the rest of the schema.
- resolve(): named enum/validate lookups and the -type check.

Definition entries
- Explicit: "name -switch -argument -default 5" (or the same as a tuple).
- Shorthand: the first word carries kind, aliases and flags:
    -a|all|verbose=      switch "verbose" with aliases "a" and "all", takes an argument
    name?                optional parameter
    files*               catchall parameter
  Flags: "=" argument, "?" optional, "!" required, "*" catchall, "^" upvar.

Metadata (sanitized on derive)
- Flags are booleans; valued switches keep the raw value until resolve().
- List-valued switches (alias, enum, forbid, imply, require, allow) accept a
  whitespace separated string or any iterable.
"""
import enum
import functools
import operator
import re

from .faults import (
    FaultCode,
    DisallowedCombinationError,
    MalformedElementError,
    MissingCompanionError,
    MissingSwitchValueError,
    SwitchConflictError,
    UnknownElementSwitchError,
    UnknownTypeError,
    UnknownValidatorError,
)
from .utils import Unset, coalesce, conjoin, listify, mirror, prefix, rename

# Element switches in table order (prefix resolution and error listings follow it).
SWITCHES = (
    "-alias",
    "-argument",
    "-boolean",
    "-catchall",
    "-default",
    "-enum",
    "-forbid",
    "-ignore",
    "-imply",
    "-keep",
    "-key",
    "-level",
    "-optional",
    "-parameter",
    "-pass",
    "-reciprocal",
    "-require",
    "-required",
    "-standalone",
    "-switch",
    "-upvar",
    "-validate",
    "-value",
    "-type",
    "-allow",
    "-help",
    "-errormsg",
    "-hsuppress",
)

VALUED = frozenset({
    "alias",
    "default",
    "enum",
    "forbid",
    "imply",
    "key",
    "level",
    "pass",
    "require",
    "validate",
    "value",
    "type",
    "allow",
    "help",
    "errormsg",
})

LISTS = ("alias", "enum", "forbid", "imply", "require", "allow")

SHORTHAND = re.compile(r"^(?:(-)(?:(.*)\|)?)?(\w[\w-]*)([=?!*^]*)$")
NAME = re.compile(r"^\w[\w-]*$")

FLAGS = {
    "=": "argument",
    "?": "optional",
    "!": "required",
    "*": "catchall",
    "^": "upvar",
}

# On switches these imply -argument.
IMPLY_ARGUMENT = ("optional", "required", "catchall", "upvar", "type")

REQUIRED_PAIRS = (
    ("reciprocal", "require"),
    ("level", "upvar"),
    ("errormsg", "validate"),
)

CONFLICTS = (
    ("parameter", ("alias", "boolean", "value", "argument", "imply")),
    ("ignore", ("key", "pass")),
    ("required", ("boolean", "default")),
    ("argument", ("boolean", "value")),
    ("upvar", ("boolean", "catchall")),
    ("boolean", ("default", "value")),
    ("enum", ("validate",)),
    ("type", ("upvar", "boolean", "enum")),
    ("allow", ("forbid",)),
)

DISALLOWED = (
    ("switch", "optional", "catchall"),
    ("switch", "optional", "upvar"),
    ("switch", "optional", "default"),
    ("switch", "optional", "boolean"),
    ("switch", "optional", "type"),
    ("parameter", "optional", "required"),
)

TYPES = (
    "alnum",
    "alpha",
    "ascii",
    "boolean",
    "control",
    "dict",
    "digit",
    "double",
    "graph",
    "integer",
    "list",
    "lower",
    "print",
    "punct",
    "space",
    "upper",
    "wideinteger",
    "wordchar",
    "xdigit",
)


class Kind(enum.Enum):
    SWITCH = "switch"
    PARAMETER = "parameter"
    PASSTHROUGH = "pass-through"


class SpecType(type):
    """
    Metaclass for compiled, introspectable structures (elements and schemas).

    Responsibilities
    - Expose every name listed in __introspectable__ as a read-only property
      mirroring the private "_{name}" field (containers are handed out as copies).
    - Provide stable __repr__/__rich_repr__ implementations; __rich_repr__
      skips fields still at their empty value so pretty output stays short.

    Conventions
    - __typename__ is derived from the class name (camel-case split with hyphens).
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return f"{type(self).__typename__}({
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
            })"
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                object = getattr(self, "_" + name)
                if object is Unset or object is False or object == ():
                    continue
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


class Element(metaclass=SpecType):
    """
    One compiled definition entry.

    Properties mirror the sanitized metadata: flags are booleans, list-valued
    attributes are tuples (handed out as lists), and any other valued
    attribute is Unset when it was not given. The pass-through key is exposed
    as 'pass_'.
    """

    __introspectable__ = (
        "name",
        "kind",
        "alias",
        "argument",
        "boolean",
        "catchall",
        "default",
        "enum",
        "forbid",
        "ignore",
        "imply",
        "keep",
        "key",
        "level",
        "optional",
        "pass_",
        "reciprocal",
        "require",
        "required",
        "standalone",
        "upvar",
        "validate",
        "value",
        "type",
        "allow",
        "help",
        "errormsg",
        "hsuppress",
        "validatemsg",
    )

    def __init__(self, name, /, kind, **metadata):
        if not isinstance(kind, Kind):
            raise TypeError("element 'kind' must be a Kind")
        metadata = {("pass_" if key == "pass" else key): value for key, value in metadata.items()}
        if unknown := set(metadata) - set(type(self).__introspectable__):
            raise TypeError("unknown element attributes: %s" % ", ".join(sorted(unknown)))
        self._name = name
        self._kind = kind
        for field in type(self).__introspectable__[2:]:
            object = metadata.get(field, Unset)
            if field in LISTS:
                object = () if object is Unset else tuple(object)
            elif field not in VALUED | {"pass_", "validatemsg"}:
                object = bool(coalesce(object, False))
            setattr(self, "_" + field, object)

    def __replace__(self, /, **changes):
        metadata = {field: getattr(self, "_" + field) for field in type(self).__introspectable__}
        return type(self)(metadata.pop("name"), **(metadata | changes))

    def __eq__(self, other):
        if not isinstance(other, Element):
            return NotImplemented
        return all(
            getattr(self, "_" + field) == getattr(other, "_" + field)
            for field in type(self).__introspectable__
        )

    __hash__ = None

    @property
    def switch(self):
        return self._kind is Kind.SWITCH

    @property
    def parameter(self):
        return self._kind is Kind.PARAMETER

    def __str__(self):
        return self._name

    @property
    def label(self):
        """Name as used in messages: "-name" for switches, "name" for parameters."""
        return "-" + self._name if self.switch else self._name

    @property
    def display(self):
        """Switch spelling listing its aliases first: "-a|all|name"."""
        return "-" + "|".join((*self._alias, self._name))


def tokenize(entry, /):
    """Words of one definition entry: a string (split like a prompt) or an iterable of tokens."""
    try:
        return listify(entry)
    except TypeError:
        raise MalformedElementError(
            "bad element definition: %s" % (entry,),
            title="bad element definition",
            code=FaultCode.MALFORMED_ELEMENT,
            hint="write the entry as a string or a list of words",
        ) from None


def _listed(name, value):
    try:
        return listify(value)
    except TypeError:
        raise MalformedElementError(
            "-%s value must be a list" % name,
            title="bad element switch value",
            code=FaultCode.MALFORMED_ELEMENT,
            hint="give -%s a whitespace separated string or a list" % name,
        ) from None


def parse(entry, options, /):
    """
    Split one definition entry into its name and the element switches given.

    Returns a metadata dict holding "name", "switch" or "parameter", the
    flags given (True) and the raw values of value-taking switches.
    """
    words = tokenize(entry)
    if not words:
        raise MalformedElementError(
            "element definition cannot be empty",
            title="empty element",
            code=FaultCode.MALFORMED_ELEMENT,
            hint="remove the empty entry or give it a name",
        )

    metadata = {}
    index = 1
    while index < len(words):
        word = words[index]
        try:
            switch = prefix(word, SWITCHES)[1:]
        except LookupError as error:
            raise UnknownElementSwitchError(
                error.args[0],
                title="unknown element switch",
                code=FaultCode.UNKNOWN_ELEMENT_SWITCH,
                hint="element switches are -alias, -argument, -default, -type, ... (see the element vocabulary)",
            ) from None
        if switch in VALUED:
            if index == len(words) - 1:
                raise MissingSwitchValueError(
                    "-%s requires an argument" % switch,
                    title="missing element switch value",
                    code=FaultCode.MISSING_SWITCH_VALUE,
                    hint="give -%s a value" % switch,
                )
            metadata[switch] = words[index + 1]
            index += 2
        else:
            metadata[switch] = True
            index += 1

    head = words[0]
    if metadata.get("switch") and metadata.get("parameter"):
        raise SwitchConflictError(
            "-switch and -parameter conflict",
            title="conflicting element switches",
            code=FaultCode.SWITCH_CONFLICT,
            hint="an element is either a switch or a parameter",
        )
    elif options.inline and metadata.get("keep"):
        raise SwitchConflictError(
            "-inline and -keep conflict",
            title="conflicting element switches",
            code=FaultCode.SWITCH_CONFLICT,
            hint="-keep only makes sense when binding into a scope",
        )
    elif not metadata.get("switch") and not metadata.get("parameter"):
        if not isinstance(head, str) or not (match := SHORTHAND.match(head)):
            raise MalformedElementError(
                "bad element shorthand: %s" % head,
                title="bad element shorthand",
                code=FaultCode.MALFORMED_ELEMENT,
                hint="use [-][aliases|]name[=?!*^], e.g. '-v|verbose' or 'files*'",
            )
        minus, aliases, name, flags = match.groups()
        metadata["switch" if minus else "parameter"] = True
        if aliases:
            metadata["alias"] = aliases.split("|")
        for flag in flags:
            metadata[FLAGS[flag]] = True
    elif not isinstance(head, str) or not NAME.match(head):
        raise MalformedElementError(
            "bad element name: %s" % head,
            title="bad element name",
            code=FaultCode.MALFORMED_ELEMENT,
            hint="names start with a word character and contain word characters or '-'",
        )
    else:
        name = head

    metadata["name"] = name
    return metadata


def _template(template, name):
    def replace(match):
        return {"\\\\": "\\", "\\%": "%"}.get(match[0], name)
    return re.sub(r"\\\\|\\%|%", replace, template)


def derive(metadata, options, /):
    """
    Apply the per-element derivation rules in place, in their fixed order:
    implied -argument/-required/-optional, required pairs, the conflict table,
    disallowed combinations, boolean rewrite, default -level and output key.
    """
    if metadata.get("switch"):
        if any(metadata.get(name) for name in IMPLY_ARGUMENT):
            metadata["argument"] = True
    elif (metadata.get("catchall") or metadata.get("optional")) and not metadata.get("required"):
        metadata["optional"] = True
    else:
        metadata["required"] = True

    for name, other in REQUIRED_PAIRS:
        if name in metadata and other not in metadata:
            raise MissingCompanionError(
                "-%s requires -%s" % (name, other),
                title="incomplete element",
                code=FaultCode.MISSING_COMPANION,
                hint="add -%s to %s or drop -%s" % (other, metadata["name"], name),
            )

    for name, others in CONFLICTS:
        if name in metadata:
            for other in others:
                if other in metadata:
                    raise SwitchConflictError(
                        "-%s and -%s conflict" % (name, other),
                        title="conflicting element switches",
                        code=FaultCode.SWITCH_CONFLICT,
                        hint="drop either -%s or -%s from %s" % (name, other, metadata["name"]),
                    )

    if options.inline and metadata.get("upvar"):
        raise SwitchConflictError(
            "-upvar and -inline conflict",
            title="conflicting element switches",
            code=FaultCode.SWITCH_CONFLICT,
            hint="-upvar links caller variables, which -inline never sets",
        )

    for combination in DISALLOWED:
        if all(name in metadata for name in combination):
            raise DisallowedCombinationError(
                "%s is a disallowed combination" % " ".join("-" + name for name in combination),
                title="disallowed combination",
                code=FaultCode.DISALLOWED_COMBINATION,
                hint="drop one of %s" % conjoin(("-" + name for name in combination), "or"),
            )

    if metadata.get("boolean") or (
        options.boolean
        and metadata.get("switch")
        and not any(name in metadata for name in ("argument", "upvar", "default", "value", "required"))
    ):
        metadata["default"] = 0
        metadata["value"] = 1

    if metadata.get("upvar") and "level" not in metadata:
        metadata["level"] = coalesce(options.get("-level", Unset), 1)

    if not any(name in metadata for name in ("ignore", "key", "pass")):
        if (template := options.template) is not None:
            metadata["key"] = _template(str(template), metadata["name"])
        else:
            metadata["key"] = metadata["name"]

    for name in LISTS:
        if name in metadata and name != "enum":
            metadata[name] = _listed(name, metadata[name])
    return metadata


def resolve(metadata, options, /):
    """
    Named lookups and type check.

    - "-enum NAME" is replaced by the list registered under NAME in the
      global -enum mapping; any other value is a list of allowed values.
    - "-validate NAME" must name a predicate of the global -validate mapping;
      a callable is used as is. The failure wording is recorded as
      'validatemsg'.
    - "-type" must be one of TYPES.
    """
    if "enum" in metadata:
        values = metadata["enum"]
        if isinstance(values, str) and values in (enums := options.enum or {}):
            values = enums[values]
        metadata["enum"] = _listed("enum", values)
    elif "validate" in metadata:
        validate = metadata["validate"]
        if isinstance(validate, str):
            if validate not in (options.validate or {}):
                raise UnknownValidatorError(
                    "unknown validator: %s" % validate,
                    title="unknown validator",
                    code=FaultCode.UNKNOWN_VALIDATOR,
                    hint="register %r in the -validate mapping or pass a callable" % validate,
                )
            metadata["validate"] = options.validate[validate]
            metadata["validatemsg"] = "%s validation" % validate
        elif callable(validate):
            metadata["validatemsg"] = "validation: %s" % (getattr(validate, "__name__", None) or repr(validate))
        else:
            raise UnknownValidatorError(
                "unknown validator: %r" % (validate,),
                title="unknown validator",
                code=FaultCode.UNKNOWN_VALIDATOR,
                hint="-validate takes a callable or the name of a registered predicate",
            )

    if "type" in metadata and metadata["type"] not in TYPES:
        raise UnknownTypeError(
            "type %s is not in the list of allowed types, must be %s" % (
                metadata["type"], conjoin(TYPES, "or", serial=False)
            ),
            title="unknown type",
            code=FaultCode.UNKNOWN_TYPE,
            hint="pick one of the listed types",
        )
    return metadata


def build(metadata, /):
    """Materialize sanitized metadata as an Element."""
    metadata = dict(metadata)
    name = metadata.pop("name")
    kind = Kind.SWITCH if metadata.pop("switch", False) else Kind.PARAMETER
    metadata.pop("parameter", None)
    return Element(name, kind=kind, **metadata)


__all__ = (
    "SWITCHES",
    "TYPES",
    "Kind",
    "Element",
    "tokenize",
    "parse",
    "derive",
    "resolve",
    "build",
)
