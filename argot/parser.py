"""
Argot entry point.

What this module provides
- Parser: the owning context of a schema cache plus the runtime switches that
  decide how faults surface (shell, fancy, colorful).
- argparse(*arguments, scope=Unset): parse through the process-wide default
  Parser, binding into the caller's frame unless a scope is given.
- procedure: decorator marking a function as a procedure boundary for the
  help early return.

Quick start
    from argot import Unset, argparse, procedure

    @procedure
    def copy(*args):
        force = mode = source = target = Unset
        argparse("-help", "Copy files", ["-f|force", "-mode=", "source", "target"])
        ...

    copy("-f", "a.txt", "b.txt")

    Variables bound into a function frame must already be locals of that
    function; assign them before calling argparse().

Invocation flow
1. Global options, arity, definition and argument list shape.
2. Comment filter, option conflicts, cached compilation.
3. Help check (global -help and the help token in the argument list).
4. Matching, constraints, defaults.
5. Inline result, or binding into the scope (unset omitted, link upvars).
"""
import copy
import functools
import shlex
import sys
from collections.abc import Iterable

from rich.console import Console
from rich.panel import Panel
from rich.text import Text

from .cache import SchemaCache
from .faults import (
    FaultCode,
    ArgparseError,
    BadArgumentListError,
    BadDefinitionError,
    BadLevelError,
    ExtraInvocationArgumentsError,
    HelpReturn,
    MissingArgsError,
    MissingDefinitionError,
    trigger,
)
from .helptext import render
from .matcher import match
from .options import GlobalOptions
from .schema import strip_comments
from .scopes import FrameScope
from .utils import Unset


def _arguments(argv):
    if isinstance(argv, str):
        return shlex.split(argv)
    if isinstance(argv, bytes | bytearray) or not isinstance(argv, Iterable):
        raise BadArgumentListError(
            "argument list must be a string or an iterable",
            title="bad argument list",
            code=FaultCode.BAD_ARGUMENT_LIST,
            hint="pass a list of tokens or a shell-like string",
        )
    return list(argv)


def _level(level):
    try:
        return int(level)
    except (TypeError, ValueError):
        raise BadLevelError(
            'bad level "%s"' % (level,),
            title="bad level",
            code=FaultCode.BAD_LEVEL,
            hint="-helplevel takes a number of levels",
        ) from None


class Parser:
    """
    Parsing context.

    Owns the schema cache shared by all of its calls. Runtime switches:
    - shell: print faults to stderr and exit with status 1 instead of raising.
    - fancy: render faults and help inside rich panels.
    - colorful: style fault rendering.
    """

    def __init__(self, *, shell=False, fancy=False, colorful=True):
        self.shell = shell
        self.fancy = fancy
        self.colorful = colorful
        self.cache = SchemaCache()

    def __repr__(self):
        return "Parser(shell=%r, fancy=%r, colorful=%r)" % (self.shell, self.fancy, self.colorful)

    def __call__(self, *arguments, scope=Unset):
        if scope is Unset:
            scope = FrameScope(sys._getframe(1))
        try:
            return self._parse(list(arguments), scope)
        except ArgparseError as fault:
            self.trigger(fault)

    def trigger(self, fault, /, **options):
        trigger(fault, **options, shell=self.shell, fancy=self.fancy, colorful=self.colorful)

    def _help(self, text):
        console = Console(soft_wrap=True)
        renderable = Text(text)
        if self.fancy:
            renderable = Panel(renderable, title=Text.assemble("[ ", "HELP", " ]"), title_align="left")
        console.print(renderable)

    def _parse(self, arguments, scope):
        options, rest = GlobalOptions.parse(arguments)
        match len(rest):
            case 0:
                raise MissingDefinitionError(
                    "missing required parameter: definition",
                    title="missing definition",
                    code=FaultCode.MISSING_DEFINITION,
                    hint="pass the element definition after the global options",
                )
            case 1:
                definition, = rest
                if (argv := scope.get("args")) is Unset:
                    raise MissingArgsError(
                        "Variable 'args' not found",
                        title="missing arguments",
                        code=FaultCode.MISSING_ARGS,
                        hint="pass the argument list explicitly or define 'args' in the caller",
                    )
            case 2:
                definition, argv = rest
            case _:
                raise ExtraInvocationArgumentsError(
                    "too many arguments",
                    title="too many arguments",
                    code=FaultCode.EXTRA_INVOCATION_ARGUMENTS,
                    hint="expected the definition and at most one argument list",
                )

        if isinstance(definition, str | bytes | bytearray) or not isinstance(definition, Iterable):
            raise BadDefinitionError(
                "definition must be a list of element entries",
                title="bad definition",
                code=FaultCode.BAD_DEFINITION,
                hint="pass a list such as ['-verbose', 'file']",
            )
        argv = _arguments(argv)
        definition = strip_comments(definition)
        options.check()
        schema = self.cache.get(definition, options)

        if options.help is not None and ("--help" if options.long else "-help") in argv:
            level = _level(options.get("-helplevel", 2)) - 1
            text = render(schema, options)
            if not options.helpret:
                self._help(text)
                text = ""
            if level <= 0:
                return text
            raise HelpReturn(text, level=level)

        state = match(schema, argv, options)
        if options.inline:
            return state.result

        targets = {
            key: scope.up(state.elements[name].level)
            for key, name in schema.upvars.items()
            if key in state.result
        }
        if not options.keep:
            for name in state.omitted:
                element = state.elements[name]
                if element.key is not Unset and not element.keep and element.key not in state.result:
                    scope.unset(element.key)
        for key, value in state.result.items():
            if key in targets:
                scope.link(key, targets[key], value)
            else:
                scope.set(key, value)
        return None


@functools.cache
def default():
    """The process-wide Parser used by argparse()."""
    return Parser()


def argparse(*arguments, scope=Unset):
    """
    Parse with the default Parser.

    Without an explicit scope the result is bound into the caller's frame,
    and the argument list defaults to the caller's 'args' variable.
    """
    if scope is Unset:
        scope = FrameScope(sys._getframe(1))
    return default()(*arguments, scope=scope)


def procedure(callable):
    """
    Mark callable as a procedure boundary for the help early return.

    A HelpReturn crossing the boundary loses one level; the procedure whose
    boundary brings it to zero returns the help result instead of raising.
    """
    @functools.wraps(callable)
    def wrapper(*args, **kwargs):
        try:
            return callable(*args, **kwargs)
        except HelpReturn as exit:
            if exit.level <= 1:
                return exit.result
            raise copy.replace(exit, level=exit.level - 1) from None

    return wrapper


__all__ = (
    "Parser",
    "argparse",
    "procedure",
)
