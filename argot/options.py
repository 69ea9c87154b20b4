"""
Argot global options.

The fixed table of parser-wide behaviour flags that may precede the element
definition in an argparse() call. Options are recognized by unique prefix
("-norm" is "-normalize"); the first argument that names no option ends the
option block, and a literal "--" ends it explicitly.

Each option is either a bare flag or takes exactly one value. GlobalOptions is
immutable: parse() builds one, and signature() renders it canonically so that
it can take part in the schema cache key.
"""
import functools
from types import MappingProxyType

from .faults import FaultCode, MissingOptionValueError, OptionConflictError
from .utils import freeze, prefix

# Dispatch order; a prefix shared by several options is ambiguous and ends the block.
OPTIONS = (
    "-boolean",
    "-enum",
    "-equalarg",
    "-exact",
    "-inline",
    "-keep",
    "-level",
    "-long",
    "-mixed",
    "-normalize",
    "-pass",
    "-reciprocal",
    "-template",
    "-validate",
    "-help",
    "-helplevel",
    "-pfirst",
    "-helpret",
)

VALUED = frozenset({
    "-enum",
    "-level",
    "-pass",
    "-template",
    "-validate",
    "-help",
    "-helplevel",
})

EXCLUSIVE = (
    ("-inline", "-keep"),
    ("-mixed", "-pfirst"),
)


class GlobalOptions:
    """
    Parsed global options.

    Flags are exposed as booleans and values as attributes holding the raw
    value, or None when the option was not given:

        >>> options, rest = GlobalOptions.parse(["-inline", "-pass", "extra", [...]])
        >>> options.inline, options.pass_, rest
        (True, 'extra', [[...]])
    """

    def __init__(self, values=None, /):
        values = dict(values or {})
        for name in values:
            if name not in OPTIONS:
                raise ValueError("unknown global option %r" % name)
        self._values = MappingProxyType(values)

    @classmethod
    def parse(cls, arguments, /):
        """
        Consume leading global options from arguments.

        Returns (options, remaining). The "--" terminator, when present right
        after the block, is dropped from remaining. Mutually exclusive options
        are not checked here; see check().
        """
        values = {}
        index = 0
        while index < len(arguments):
            if not isinstance(token := arguments[index], str):
                break
            try:
                option = prefix(token, OPTIONS)
            except LookupError:
                break
            if option in VALUED:
                if index + 1 >= len(arguments):
                    raise MissingOptionValueError(
                        "Missing argument for %s" % option,
                        title="missing option value",
                        code=FaultCode.MISSING_OPTION_VALUE,
                        hint="give %s a value, or end the options with '--'" % option,
                    )
                values[option] = arguments[index + 1]
                index += 2
            else:
                values[option] = True
                index += 1
        if index < len(arguments) and arguments[index] == "--":
            index += 1
        return cls(values), list(arguments[index:])

    def check(self):
        for left, right in EXCLUSIVE:
            if left in self._values and right in self._values:
                raise OptionConflictError(
                    "%s and %s conflict" % (left, right),
                    title="conflicting options",
                    code=FaultCode.OPTION_CONFLICT,
                    hint="drop either %s or %s" % (left, right),
                )
        return self

    def __contains__(self, option):
        return option in self._values

    def __getitem__(self, option):
        return self._values[option]

    def get(self, option, default=None, /):
        return self._values.get(option, default)

    def __getattr__(self, name):
        option = "-" + name.rstrip("_")
        if option not in OPTIONS:
            raise AttributeError(name)
        if option in VALUED:
            return self._values.get(option)
        return option in self._values

    @functools.cached_property
    def bitmask(self):
        return sum(1 << index for index, option in enumerate(OPTIONS) if option in self._values)

    def signature(self):
        """
        Canonical rendering: the flag bitmask followed by the value of every
        value-bearing option in table order. Mappings are frozen to sorted
        item tuples and every other value is tagged with its type; callables
        compare by identity.
        """
        return (self.bitmask, *(
            freeze(self._values[option]) for option in OPTIONS if option in VALUED and option in self._values
        ))

    def __eq__(self, other):
        if not isinstance(other, GlobalOptions):
            return NotImplemented
        return self.signature() == other.signature()

    def __hash__(self):
        return hash(self.signature())

    def __repr__(self):
        return "GlobalOptions(%s)" % ", ".join(
            option if value is True else "%s=%r" % (option, value) for option, value in self._values.items()
        )

    def __rich_repr__(self):
        for option, value in self._values.items():
            yield option, value


__all__ = (
    "OPTIONS",
    "VALUED",
    "GlobalOptions",
)
