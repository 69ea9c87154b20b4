"""
Argot utilities (internal helpers, carefully exposed)

Scope
- Small building blocks shared by the compiler, the matcher and the help
  generator so every layer speaks the same vocabulary.

Overview
- UnsetType / Unset
  • Singleton sentinel to represent "value not provided" without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

- rename(callable, name) / @rename("name")
  • Assign stable __name__/__qualname__ to generated wrappers for clean tracebacks.

- mirror("attr")
  • Read-only property factory exposing a private backing field (self._attr) with deep copies
    for containers.

- listify(value)
  • Turn a whitespace separated string (shell quoting honoured) or any iterable into a list.

- freeze(object)
  • Hashable, type-tagged rendering of nested definitions for cache keys: True, 1 and 1.0 stay apart.

- conjoin(words, conjunction) / disjoin(words)
  • Human joins used in messages: "a", "a and b", "a, b, and c".

- prefix(word, table)
  • Unique-prefix lookup with the wording used by every "bad ..."/"ambiguous ..." message.

Quick examples
    >>> conjoin(["-a", "-b", "-c"])
    '-a, -b, and -c'
    >>> disjoin(["x", "y"])
    'x or y'
    >>> prefix("ver", ["verbose", "version"])
    Traceback (most recent call last):
    ...
    LookupError: ambiguous option "ver": must be verbose or version
"""
import builtins
import functools
import shlex
from collections.abc import Iterable, Mapping, Sequence, Set
from typing import final


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    Element attributes such as 'default' or 'value' may legitimately hold
    None, "" or 0, so absence is spelled with the single instance Unset.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable: this type is sealed; do not subclass.
    - Singleton per process: UnsetType() always yields the same instance.
    """

    def __or__(self, other, /):
        """
        Support PEP 604 unions in annotations and isinstance checks (e.g., str | Unset).
        """
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    def __ror__(self, other, /):
        try:
            return other | type(self)
        except TypeError:
            return NotImplemented

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __copy__(self):
        return self

    def __deepcopy__(self, memo, /):
        return self

    def __reduce__(self):
        return UnsetType, ()

    def __init_subclass__(cls, **options):
        raise TypeError("type 'UnsetType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve the Unset sentinel to a concrete default.

    Falsey values like None, 0, "" or [] are preserved as-is; only Unset is
    replaced.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None
    """
    return object if object is not Unset else default


def rename(*parameters):
    """
    Set a stable __name__/__qualname__ on a callable, or return a decorator
    that will do so later.

    Forms
    - rename(callable, name) -> callable
    - rename(name) -> decorator
    """
    match len(parameters):
        case 2:
            callable, name = parameters
            if not builtins.callable(callable):
                raise TypeError("rename() first argument must be callable")
            if not isinstance(name, str):
                raise TypeError("rename() second argument must be a string")
            try:
                callable.__qualname__ = name
                callable.__name__ = name
            except (AttributeError, TypeError):
                raise TypeError("rename() first argument must be a updatable callable") from None
            return callable
        case 1:
            name, = parameters
            if not isinstance(name, str):
                raise TypeError("@rename() argument must be a string")

            def wrapper(callable):
                if not builtins.callable(callable):
                    raise TypeError("@rename() must be applied to a callable")
                return rename(callable, name)

            return rename(wrapper, "rename")
        case _:
            raise TypeError("rename takes 1 to 2 arguments but %d were given" % len(parameters))


def _immortalize(object):
    """
    Recursively copy container values.

    Sequences (strings excluded) become lists, mappings become dicts and
    sets become sets; anything else is returned unchanged.
    """
    if isinstance(object, Sequence) and not isinstance(object, str):
        return list(map(_immortalize, object))
    elif isinstance(object, Mapping):
        return dict(zip(object.keys(), map(_immortalize, object.values())))
    elif isinstance(object, Set):
        return set(map(_immortalize, object))
    else:
        return object


def mirror(name, /):
    """
    Define a read-only property that mirrors a private backing attribute.

    The generated property reads "_{name}" from the instance and hands out a
    copy for container types, so callers cannot mutate compiled state.

    Example
    - Given self._require, declare require = mirror("require").
    """
    if not isinstance(name, str):
        raise TypeError("mirror() argument must be a string")

    @rename(name)
    def getter(self):
        return _immortalize(getattr(self, "_" + name))

    return property(getter)


def listify(value, /):
    """
    Normalize a list-valued attribute.

    A string is split the way a prompt is split (shlex, so quoting groups
    words); any other iterable is materialized as a list of its items.
    """
    if isinstance(value, str):
        return shlex.split(value)
    if isinstance(value, Iterable) and not isinstance(value, bytes | bytearray | Mapping):
        return list(value)
    raise TypeError("expected a string or an iterable, got %s" % type(value).__name__)


def freeze(object, /):
    """
    Canonical, hashable rendering of a nested value.

    Strings are kept as is; every other leaf is paired with its type, so
    values that compare equal across types (True, 1, 1.0) never collide.
    Containers are tagged by shape: mappings become sorted item tuples,
    sets frozensets and other iterables tuples.
    """
    if isinstance(object, str):
        return object
    if isinstance(object, Mapping):
        items = ((str(key), freeze(value)) for key, value in object.items())
        return "mapping", tuple(sorted(items, key=lambda item: item[0]))
    if isinstance(object, Set):
        return "set", frozenset(map(freeze, object))
    if isinstance(object, Iterable) and not isinstance(object, bytes | bytearray):
        return "list", tuple(map(freeze, object))
    return type(object), object


def conjoin(words, conjunction="and", /, *, serial=True):
    """
    Join words for humans.

    - serial=True:  "a", "a and b", "a, b, and c"
    - serial=False: "a", "a and b", "a, b and c"
    """
    words = list(map(str, words))
    match len(words):
        case 0:
            return ""
        case 1:
            return words[0]
        case 2:
            return "%s %s %s" % (words[0], conjunction, words[1])
        case _:
            return "%s%s %s %s" % (", ".join(words[:-1]), "," * serial, conjunction, words[-1])


def disjoin(words, /, *, serial=True):
    """Like conjoin(), with "or"."""
    return conjoin(words, "or", serial=serial)


def prefix(word, table, /, *, exact=False, label="option"):
    """
    Resolve word against table: an exact entry wins, otherwise a unique prefix.

    The empty word never abbreviates anything. On failure a LookupError is
    raised whose only argument is the complete human message, e.g.
    'bad option "x": must be a, b, or c'.
    """
    table = list(table)
    if isinstance(word, str) and word in table:
        return word
    candidates = [] if exact or not word or not isinstance(word, str) else [entry for entry in table if entry.startswith(word)]
    if len(candidates) == 1:
        return candidates[0]
    ambiguous = not exact and (len(candidates) > 1 or (not word and len(table) > 1))
    raise LookupError('%s %s "%s": %s' % (
        "ambiguous" if ambiguous else "bad",
        label,
        word,
        "must be %s" % disjoin(table) if table else "no valid options",
    ))


__all__ = (
    # Functions
    "coalesce",
    "rename",
    "mirror",
    "listify",
    "freeze",
    "conjoin",
    "disjoin",
    "prefix",

    # Types
    "UnsetType",

    # Constants
    "Unset",
)

Unset = UnsetType()
