"""
Argot matcher and allocator.

match(schema, argv, options) walks one argument list against a compiled
schema and returns the MatchState holding the result mapping.

Phases
1. Reserve: without -mixed, the tokens owed to required parameters are set
   aside before switch scanning (the last ones, or the first ones with -pfirst).
2. Switch phase: recognize switches (aliases, exact names, unique prefixes,
   then the "" pass-through element), consume their arguments and run the
   per-value checks. Skipped when the schema defines no switches.
3. Allocation: one token per required parameter, one per optional
   parameter while tokens remain, the excess to the catchall (or the
   pass-through element).
4. Constraints, parameter values, defaults.

The first failure aborts the whole match; nothing partial is returned.
"""
import copy
import re
from collections import deque

from .faults import (
    FaultCode,
    BadSwitchError,
    MissingArgumentError,
    MissingParametersError,
    MissingSwitchesError,
    TooManyArgumentsError,
    UnexpectedArgumentError,
)
from .utils import Unset, coalesce, conjoin, disjoin, prefix
from .validation import constrain, typecheck, validate


def _pattern(options):
    return re.compile(r"^-%s(?P<name>\w[\w-]*)%s$" % (
        "-?" if options.long else "",
        r"(?:(?P<equal>=)(?P<value>.*))?" if options.equalarg else "",
    ), re.DOTALL)


class MatchState:
    """
    Per-invocation matching state.

    - elements: name -> Element; a private copy, switches like -standalone
      and -imply rewrite entries of it.
    - queue: the arguments still to be scanned.
    - result: output key -> value, pass-through key -> list of tokens.
    - present: names of the elements that were matched or allocated.
    - omitted: names of the elements that were not, in definition order.
    """

    def __init__(self, schema, argv, /):
        self.elements = {element.name: element for element in schema}
        self.aliases = schema.aliases
        self.order = schema.order
        self.switches = schema.switches
        self.catchall = schema.catchall
        self.queue = deque(argv)
        self.result = {}
        self.present = set()
        self.omitted = schema.omitted()

    def see(self, name, /):
        self.present.add(name)
        if name in self.omitted:
            self.omitted.remove(name)

    def passthrough(self, key, *tokens, guard=False):
        """Append tokens to a pass-through list; guard puts "--" first when the first token looks like a switch."""
        if guard and key not in self.result and tokens and str(tokens[0]).startswith("-"):
            self.result[key] = ["--"]
        self.result.setdefault(key, []).extend(tokens)

    def standalone(self):
        """Drop every requirement: a standalone switch fired."""
        for name, element in self.elements.items():
            self.elements[name] = copy.replace(
                element,
                required=False,
                require=(),
                forbid=(),
                allow=(),
                optional=element.optional or element.parameter,
            )


def _reserve(state, options):
    if options.mixed:
        return []
    count = sum(1 for name in state.order if state.elements[name].required)
    tokens = list(state.queue)
    if options.pfirst:
        force, rest = tokens[:count], tokens[count:]
    else:
        split = max(0, len(tokens) - count)
        force, rest = tokens[split:], tokens[:split]
    state.queue = deque(rest)
    return force


def _switches(state, options):
    """Run the switch phase; returns the tokens left for the parameters."""
    names = [name for name, element in state.elements.items() if element.switch]
    if not names:
        params = list(state.queue)
        state.queue.clear()
        return params

    pattern = _pattern(options)
    params = []
    while state.queue:
        token = state.queue.popleft()
        if not isinstance(token, str) or not (match := pattern.match(token)):
            if token == "--":
                params.extend(state.queue)
                state.queue.clear()
                break
            if options.mixed or options.pfirst:
                params.append(token)
                continue
            params.extend((token, *state.queue))
            state.queue.clear()
            break

        name = match["name"]
        equal = match.groupdict().get("equal")
        name = state.aliases.get(name, name)
        normal = "-" + name
        try:
            name = prefix(name, names, exact=options.exact)
            normal = "-" + name
        except LookupError:
            if "" not in state.elements:
                raise BadSwitchError(
                    'bad switch "%s": must be %s' % (token, disjoin(sorted(state.switches))),
                    title="bad switch",
                    code=FaultCode.BAD_SWITCH,
                    hint="check the spelling, or end the switches with '--'",
                ) from None
            name = ""

        if state.elements[name].standalone:
            state.standalone()
        element = state.elements[name]
        state.see(name)
        if equal:
            state.queue.appendleft(match["value"])
        key, passed = element.key, element.pass_

        if element.catchall:
            values = list(state.queue)
            state.queue.clear()
            values = validate(element, values, options, label=normal, many=True)
            typecheck(element, values, label=normal, many=True)
            if key is not Unset:
                state.result[key] = values
            if passed is not Unset:
                state.passthrough(passed, normal if options.normalize else token, *values)
            break

        if not element.argument:
            if equal:
                raise UnexpectedArgumentError(
                    "%s doesn't allow an argument" % normal,
                    title="unexpected argument",
                    code=FaultCode.UNEXPECTED_ARGUMENT,
                    hint="write %s on its own" % normal,
                )
            if key is not Unset:
                state.result[key] = coalesce(element.value, "")
            if passed is not Unset:
                state.passthrough(passed, normal if options.normalize else token)
        elif state.queue:
            raw = state.queue[0]
            value = validate(element, raw, options, label=normal)
            typecheck(element, value, label=normal)
            if key is not Unset:
                state.result[key] = ["", value] if element.optional else value
            if passed is not Unset:
                if options.normalize:
                    state.passthrough(passed, normal, value)
                elif equal:
                    state.passthrough(passed, token)
                else:
                    state.passthrough(passed, token, raw)
            state.queue.popleft()
        elif not element.optional:
            raise MissingArgumentError(
                "%s requires an argument" % normal,
                title="missing argument",
                code=FaultCode.MISSING_ARGUMENT,
                hint="give %s a value" % normal,
            )
        else:
            if key is not Unset:
                state.result[key] = ""
            if passed is not Unset:
                state.passthrough(passed, normal if options.normalize else token)

        if element.imply:
            state.queue.extendleft(reversed(element.imply))
            state.elements[name] = copy.replace(element, imply=())

    params.extend(state.queue)
    state.queue.clear()

    missing = sorted(
        element.display
        for name, element in state.elements.items()
        if element.switch and element.required and name not in state.present
    )
    if missing:
        raise MissingSwitchesError(
            "missing required switch%s: %s" % ("es" if len(missing) > 1 else "", conjoin(missing)),
            title="missing switches",
            code=FaultCode.MISSING_SWITCHES,
            hint="add %s" % conjoin(missing),
        )
    return params


def _allocate(state, params):
    """Decide how many tokens each parameter receives, in parameter order."""
    elements = state.elements
    allocation = {}
    count = len(params)

    missing = []
    for name in state.order:
        if elements[name].required:
            if count:
                allocation[name] = 1
                count -= 1
                state.see(name)
            else:
                missing.append(name)
    if missing:
        raise MissingParametersError(
            "missing required parameter%s: %s" % ("s" if len(missing) > 1 else "", conjoin(missing)),
            title="missing parameters",
            code=FaultCode.MISSING_PARAMETERS,
            hint="give a value for %s" % conjoin(missing),
        )

    for name in state.order:
        if count and not elements[name].required and not elements[name].catchall:
            allocation[name] = 1
            count -= 1
            state.see(name)

    if count:
        if state.catchall is not Unset:
            allocation[state.catchall] = allocation.get(state.catchall, 0) + count
            state.see(state.catchall)
        elif "" in elements:
            allocation[""] = count
            state.order = [*state.order, ""]
        else:
            raise TooManyArgumentsError(
                "too many arguments",
                title="too many arguments",
                code=FaultCode.TOO_MANY_ARGUMENTS,
                hint="remove the extra arguments or quote the ones that belong together",
            )
    return allocation


def _parameters(state, params, allocation, options):
    index = 0
    for name in state.order:
        element = state.elements[name]
        key, passed = element.key, element.pass_
        if count := allocation.get(name, 0):
            if name and not element.catchall:
                value = validate(element, params[index], options, label=name)
                typecheck(element, value, label=name)
                if passed is not Unset:
                    state.passthrough(passed, value, guard=True)
            else:
                value = params[index:index + count]
                if name:
                    value = validate(element, value, options, label=name, many=True)
                    typecheck(element, value, label=name, many=True)
                if passed is not Unset:
                    state.passthrough(passed, *value, guard=True)
            if key is not Unset:
                state.result[key] = value
            index += count
        elif options.normalize and element.default is not Unset and passed is not Unset:
            state.passthrough(passed, element.default, guard=True)


def match(schema, argv, options, /):
    """
    Match argv against schema under the given GlobalOptions.

    Returns the MatchState whose result maps output keys to values. Raises
    a MatchError, ValidationError or ConstraintError subclass on the first
    failure.
    """
    state = MatchState(schema, argv)
    force = _reserve(state, options)
    params = _switches(state, options)
    params = [*force, *params] if options.pfirst else [*params, *force]
    allocation = _allocate(state, params)

    constrain(state.elements, state.present)

    if options.normalize:
        for name in state.omitted:
            element = state.elements[name]
            if (
                element.switch
                and element.pass_ is not Unset
                and element.argument
                and element.default is not Unset
            ):
                state.passthrough(element.pass_, element.label, element.default)

    _parameters(state, params, allocation, options)

    for element in state.elements.values():
        if element.key is not Unset and element.key not in state.result:
            if element.default is not Unset:
                state.result[element.key] = element.default
            elif element.catchall:
                state.result[element.key] = []
        if element.pass_ is not Unset and element.pass_ not in state.result:
            state.result[element.pass_] = []
    return state


__all__ = (
    "MatchState",
)
