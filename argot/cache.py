"""
Argot schema cache.

A SchemaCache maps the canonical signature of (definition, global options) to
the compiled Schema. Compilation happens at most once per signature; callers
always receive a deep copy, so the published schema is never mutated.

Failed compilations are not cached: the same definition fails again, with the
same message, on every call.
"""
import copy
import threading

from .schema import compile
from .utils import freeze


def signature(definition, options, /):
    """Canonical, hashable rendering of a definition together with its global options."""
    return freeze(definition), options.signature()


class SchemaCache:
    """
    At-most-once schema compilation, shared by every call of one Parser.

    Signatures that cannot be hashed (a predicate object that is not
    hashable, for instance) are compiled on every call.

    Callables take part in the signature by identity. A predicate created
    anew on every call (a lambda written inside the procedure body) makes a
    new signature each time, and every one of them stays cached with the
    predicate it holds; define predicates once, or register them by name
    with the global -validate mapping.
    """

    def __init__(self):
        self._schemas = {}
        self._lock = threading.Lock()

    def __len__(self):
        return len(self._schemas)

    def __contains__(self, key):
        return key in self._schemas

    def get(self, definition, options, /):
        key = signature(definition, options)
        try:
            hash(key)
        except TypeError:
            return compile(definition, options)
        with self._lock:
            if (schema := self._schemas.get(key)) is None:
                schema = self._schemas[key] = compile(definition, options)
        return copy.deepcopy(schema)

    def clear(self):
        with self._lock:
            self._schemas.clear()


__all__ = (
    "signature",
    "SchemaCache",
)
