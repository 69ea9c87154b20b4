"""
Argot variable scopes.

Outside inline mode the parse result is bound into a Scope: a chain of
variable tables where level 0 is the scope itself, level 1 its parent, and
"#0" the outermost (global) one.

- DictScope: a mapping with an optional parent; the natural choice for tests,
  templates and embedding.
- FrameScope: a live Python frame, written through frame.f_locals (PEP 667
  proxies on 3.13+). Its parent is the calling frame.
- Link: the value bound for an -upvar element; reads and writes the variable
  it names in another scope.
"""
import re
from abc import ABC, abstractmethod

from .faults import FaultCode, BadLevelError
from .utils import Unset


def _bad(level):
    return BadLevelError(
        'bad level "%s"' % (level,),
        title="bad level",
        code=FaultCode.BAD_LEVEL,
        hint="use a level count like 1 or an absolute level like #0",
    )


class Scope(ABC):
    @property
    @abstractmethod
    def parent(self):
        """The enclosing scope, or None for the outermost one."""

    @abstractmethod
    def get(self, name, default=Unset, /): ...

    @abstractmethod
    def set(self, name, value, /): ...

    @abstractmethod
    def unset(self, name, /): ...

    def __contains__(self, name):
        return self.get(name) is not Unset

    def link(self, name, target, other, /):
        """Bind name to a Link pointing at variable 'other' of the target scope."""
        self.set(name, link := Link(target, other))
        return link

    def up(self, level, /):
        """
        Resolve a level relative to this scope.

        - 0, 1, 2 ... or "0", "1", ...: that many parents up.
        - "#0", "#1", ...: absolute, counted from the outermost scope.
        """
        if isinstance(level, str) and re.fullmatch(r"\d+", level):
            level = int(level)
        if isinstance(level, int) and not isinstance(level, bool) and level >= 0:
            scope = self
            for _ in range(level):
                if (scope := scope.parent) is None:
                    raise _bad(level)
            return scope
        if isinstance(level, str) and (match := re.fullmatch(r"#(\d+)", level)):
            chain = [self]
            while (parent := chain[-1].parent) is not None:
                chain.append(parent)
            chain.reverse()
            if (index := int(match[1])) < len(chain):
                return chain[index]
        raise _bad(level)


class DictScope(Scope):
    def __init__(self, mapping=None, /, parent=None):
        self.variables = {} if mapping is None else mapping
        self._parent = parent

    @property
    def parent(self):
        return self._parent

    def get(self, name, default=Unset, /):
        return self.variables.get(name, default)

    def set(self, name, value, /):
        self.variables[name] = value

    def unset(self, name, /):
        self.variables.pop(name, None)

    def __repr__(self):
        return "DictScope(%r)" % (self.variables,)


class FrameScope(Scope):
    """
    Scope over a live frame.

    Fast locals of a function cannot be deleted through the frame proxy, so
    unset() rebinds them to Unset instead.
    """

    def __init__(self, frame, /):
        self.frame = frame

    @property
    def parent(self):
        return FrameScope(self.frame.f_back) if self.frame.f_back is not None else None

    def get(self, name, default=Unset, /):
        return self.frame.f_locals.get(name, default)

    def set(self, name, value, /):
        self.frame.f_locals[name] = value

    def unset(self, name, /):
        variables = self.frame.f_locals
        if name not in variables:
            return
        try:
            del variables[name]
        except (KeyError, ValueError, TypeError):
            variables[name] = Unset

    def __eq__(self, other):
        if not isinstance(other, FrameScope):
            return NotImplemented
        return self.frame is other.frame

    def __hash__(self):
        return id(self.frame)

    def __repr__(self):
        return "FrameScope(%s)" % self.frame.f_code.co_qualname


class Link:
    """A reference to variable 'name' of another scope."""

    def __init__(self, scope, name, /):
        self.scope = scope
        self.name = name

    def get(self, default=Unset, /):
        return self.scope.get(self.name, default)

    def set(self, value, /):
        self.scope.set(self.name, value)

    def unset(self):
        self.scope.unset(self.name)

    @property
    def value(self):
        return self.get()

    def __eq__(self, other):
        if not isinstance(other, Link):
            return NotImplemented
        return self.scope == other.scope and self.name == other.name

    __hash__ = None

    def __repr__(self):
        return "Link(%r, %r)" % (self.scope, self.name)


__all__ = (
    "Scope",
    "DictScope",
    "FrameScope",
    "Link",
)
