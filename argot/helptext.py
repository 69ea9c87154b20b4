"""
Argot help generator.

render(schema, options) builds the plain-text help message printed (or
returned) when the help switch is given:

    <description, wrapped to 80 columns>
        Switches:
            -name - Expects argument. Text. Default value is 1.
            -help - Help switch, when provided, forces ignoring all other ...
        Parameters:
            file - Text.

Element lines are wrapped to 72 columns; continuation lines are indented
four more spaces than the first. Elements marked -hsuppress are left out.
"""
import textwrap

from .utils import Unset, disjoin


def _fill(text, width):
    return textwrap.wrap(text, width, break_long_words=False, break_on_hyphens=False) or [""]


def _choices(values):
    return disjoin(values, serial=False)


def _indent(lines):
    return "\n".join((" " * 8 if index == 0 else " " * 12) + line for index, line in enumerate(lines))


def describe(element, /):
    """Sentences describing one element, in display order."""
    words = []
    if element.switch:
        if element.required:
            words.append("required,")
        elif element.boolean:
            words.append("boolean,")
        if element.argument:
            words.extend(("expects", "optional", "argument") if element.optional else ("expects", "argument"))
    elif element.optional:
        words.append("optional")

    sentences = []
    if words:
        words[-1] += "."
        summary = " ".join(words)
        sentences.append(summary[:1].upper() + summary[1:3].lower() + summary[3:])
    if element.help is not Unset:
        sentences.append("%s." % element.help)
    if element.require:
        sentences.append("Requires %s." % _choices(element.require))
    elif element.allow:
        sentences.append("Allows %s." % _choices(element.allow))
    if element.forbid:
        sentences.append("Forbids %s." % _choices(element.forbid))
    if element.default is not Unset and element.argument:
        sentences.append("Default value is %s." % element.default)
    if element.alias:
        if len(element.alias) > 1:
            sentences.append("Aliases are %s." % _choices(element.alias))
        else:
            sentences.append("Alias is %s." % element.alias[0])
    if element.catchall:
        sentences.append("Collects unassigned arguments.")
    if element.upvar:
        sentences.append("Links caller variable.")
    if element.type is not Unset:
        sentences.append("Type %s." % element.type)
    if element.enum:
        sentences.append("Value must be one of: %s." % _choices(element.enum))
    if element.imply:
        sentences.append("Expects two arguments.")
    return sentences


def render(schema, options, /):
    """Full help message for schema under the given GlobalOptions."""
    description = []
    if options.help:
        description.append("%s." % options.help)
    if options.exact:
        description.append("Doesn't accept prefixes instead of switches names.")
    else:
        description.append("Can accepts unambiguous prefixes instead of switches names.")
    if options.mixed:
        description.append("Allows switches to appear after parameters.")
    elif not options.pfirst:
        description.append("Accepts switches only before parameters.")
    if options.pfirst:
        description.append("Required parameters must appear before switches.")
    if options.long:
        description.append("Recognizes --switch long option alternative syntax.")
    if options.equalarg:
        description.append("Recognizes -switch=arg inline argument alternative syntax.")

    switches = []
    parameters = []
    for element in schema:
        if element.hsuppress or not (element.switch or element.parameter):
            continue
        sentences = describe(element)
        line = element.label + (" - " + " ".join(sentences) if sentences else "")
        (switches if element.switch else parameters).append(_indent(_fill(line, 72)))

    level = options.helplevel if options.helplevel is not None else 2
    switches.append(_indent(_fill(
        "-help - Help switch, when provided, forces ignoring all other switches and parameters, prints "
        "the help message to stdout, and returns up to %s levels above the current level." % level,
        72,
    )))

    lines = ["\n".join(_fill(" ".join(description), 80)), "    Switches:", *switches]
    if parameters:
        lines.extend(("    Parameters:", *parameters))
    text = "\n".join(lines).replace(",;", ";").replace(",.", ".")
    return text[:1].upper() + text[1:2].lower() + text[2:]


__all__ = (
    "describe",
    "render",
)
