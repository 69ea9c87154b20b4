"""
Argot schema compiler.

compile(definition, options) turns a definition (an iterable of entries, see
argot.elements) into a Schema: the elements in definition order plus the
lookup tables the matcher needs.

Pipeline
1. Comment filter: an entry that is exactly "#" hides the entry after it
   (done by the caller before the cache lookup, see strip_comments()).
2. Per entry: parse, name collision, derive, order/catchall, aliases,
   upvar collisions, named lookups and -type (in that order, so the first
   error reported for an entry is stable).
3. Whole-schema passes over the elements in definition order: constraint
   references, reciprocal -require injection, shared output keys.
4. With global -pass, a pass-through element named "" is appended; with
   -pfirst, required parameters move to the front of the parameter order.

A Schema is never mutated once compiled; the matcher works on a deep copy.
"""
import copy
import re

from .elements import Element, Kind, SpecType, build, derive, parse, resolve, tokenize
from .faults import (
    FaultCode,
    AliasCollisionError,
    MalformedElementError,
    MultipleCatchallsError,
    NameCollisionError,
    SharedKeyError,
    UndefinedReferenceError,
    UpvarCollisionError,
)
from .utils import Unset

ALIAS = re.compile(r"^\w[\w-]*$")


def strip_comments(definition, /):
    """Drop every "#" entry together with the entry that follows it."""
    entries = []
    skip = False
    for entry in definition:
        if skip:
            skip = False
            continue
        if (words := tokenize(entry)) == ["#"]:
            skip = True
            continue
        entries.append(entry if isinstance(entry, str) else words)
    return entries


class Schema(metaclass=SpecType):
    """
    Compiled definition.

    Properties
    - elements: name -> Element, in definition order ("" is the pass-through element).
    - aliases: alias -> element name.
    - order: parameter names in allocation order.
    - switches: switch displays ("-name" or "-a|b|name") in definition order.
    - upvars: output key -> name of the -upvar element bound to it.
    - catchall: name of the catchall parameter, or Unset.
    """

    __introspectable__ = (
        "elements",
        "aliases",
        "order",
        "switches",
        "upvars",
        "catchall",
    )

    def __init__(self, elements, aliases, order, switches, upvars, catchall=Unset):
        self._elements = dict(elements)
        self._aliases = dict(aliases)
        self._order = list(order)
        self._switches = list(switches)
        self._upvars = dict(upvars)
        self._catchall = catchall

    def __getitem__(self, name):
        return self._elements[name]

    def __contains__(self, name):
        return name in self._elements

    def __iter__(self):
        return iter(self._elements.values())

    def __len__(self):
        return len(self._elements)

    def __eq__(self, other):
        if not isinstance(other, Schema):
            return NotImplemented
        return all(
            getattr(self, "_" + field) == getattr(other, "_" + field)
            for field in type(self).__introspectable__
        )

    __hash__ = None

    def omitted(self):
        """Names of every element, in definition order; matching removes the ones it sees."""
        return list(self._elements)


def _links(elements, options):
    """Constraint references, reciprocal requirements and shared keys, in place."""
    for name in list(elements):
        element = elements[name]
        for constraint in ("require", "forbid", "allow"):
            for other in getattr(element, constraint):
                if other not in elements:
                    raise UndefinedReferenceError(
                        "%s -%s references undefined element: %s" % (name, constraint, other),
                        title="undefined reference",
                        code=FaultCode.UNDEFINED_REFERENCE,
                        hint="define %s or remove it from -%s" % (other, constraint),
                    )

        if (options.reciprocal or element.reciprocal) and element.require:
            for other in element.require:
                elements[other] = copy.replace(elements[other], require=(*elements[other].require, name))

        if (key := elements[name].key) is Unset:
            continue
        for other in list(elements):
            peer = elements[other]
            if other == name or peer.key is Unset or peer.key != key:
                continue
            element = elements[name]
            if element.parameter:
                reason = "%s cannot be a parameter because it shares a key with %s" % (name, other)
            elif element.argument:
                reason = "%s cannot use -argument because it shares a key with %s" % (name, other)
            elif element.catchall:
                reason = "%s cannot use -catchall because it shares a key with %s" % (name, other)
            elif element.default is not Unset and peer.default is not Unset:
                reason = "%s and %s cannot both use -default because they share a key" % (name, other)
            else:
                reason = None
            if reason:
                raise SharedKeyError(
                    reason,
                    title="shared key",
                    code=FaultCode.SHARED_KEY,
                    hint="give %s or %s its own -key" % (name, other),
                )
            if name not in peer.forbid:
                elements[other] = copy.replace(peer, forbid=(*peer.forbid, name))
            if element.value is Unset:
                elements[name] = copy.replace(element, value=name)


def compile(definition, options, /):
    """
    Compile a comment-free definition under the given GlobalOptions.

    Returns a Schema; raises a SchemaError subclass on the first violation.
    """
    elements = {}
    aliases = {}
    order = []
    switches = []
    upvars = {}
    catchall = Unset

    for entry in definition:
        metadata = parse(entry, options)
        name = metadata["name"]
        if name in elements:
            raise NameCollisionError(
                "element name collision: %s" % name,
                title="name collision",
                code=FaultCode.NAME_COLLISION,
                hint="every element needs a unique name",
            )
        derive(metadata, options)

        if metadata.get("parameter"):
            order.append(name)
            if metadata.get("catchall"):
                if catchall is not Unset:
                    raise MultipleCatchallsError(
                        "multiple catchall parameters: %s and %s" % (catchall, name),
                        title="multiple catchalls",
                        code=FaultCode.MULTIPLE_CATCHALLS,
                        hint="only one parameter may collect the remaining arguments",
                    )
                catchall = name
        elif "alias" not in metadata:
            switches.append("-" + name)
        else:
            names = metadata["alias"]
            if not names or not all(isinstance(alias, str) and ALIAS.match(alias) for alias in names):
                raise MalformedElementError(
                    "bad alias: %s" % " ".join(map(str, names)),
                    title="bad alias",
                    code=FaultCode.MALFORMED_ELEMENT,
                    hint="aliases start with a word character and contain word characters or '-'",
                )
            if len(set(names)) != len(names) or any(alias in aliases for alias in names):
                raise AliasCollisionError(
                    "element alias collision: %s" % " ".join(names),
                    title="alias collision",
                    code=FaultCode.ALIAS_COLLISION,
                    hint="every alias must be unique across the definition",
                )
            for alias in names:
                if alias in elements:
                    raise AliasCollisionError(
                        "collision of switch -%s alias with the -%s switch" % (name, alias),
                        title="alias collision",
                        code=FaultCode.ALIAS_COLLISION,
                        hint="rename the -%s switch or drop the alias" % alias,
                    )
            for alias in names:
                aliases[alias] = name
            switches.append("-" + "|".join((*names, name)))

        if name in aliases:
            raise AliasCollisionError(
                "collision of switch -%s alias with the -%s switch" % (aliases[name], name),
                title="alias collision",
                code=FaultCode.ALIAS_COLLISION,
                hint="rename the -%s switch or drop the alias" % name,
            )

        if metadata.get("upvar") and "key" in metadata:
            if (key := metadata["key"]) in upvars:
                raise UpvarCollisionError(
                    "multiple upvars to the same variable: %s %s" % (upvars[key], name),
                    title="upvar collision",
                    code=FaultCode.UPVAR_COLLISION,
                    hint="link each caller variable from a single element",
                )
            upvars[key] = name

        resolve(metadata, options)
        elements[name] = build(metadata)

    _links(elements, options)

    if (key := options.pass_) is not None:
        elements[""] = Element("", kind=Kind.PASSTHROUGH, **{"pass": key})

    if options.pfirst:
        order = [name for name in order if elements[name].required] + \
                [name for name in order if not elements[name].required]

    return Schema(elements, aliases, order, switches, upvars, catchall)


__all__ = (
    "Schema",
    "strip_comments",
)
