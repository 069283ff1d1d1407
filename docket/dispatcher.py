"""
Docket dispatch layer: turn a documented class into a CLI.

What this module provides
- Command: base class for concrete command classes. Every typing.final method
  documented with ':param <type> <name>: ...' fields becomes a subcommand.
- Outcome: the rendered result of one dispatch (text + error flag + exit code).
- parse_options(tokens): the query-string option map used by the dispatcher.
- invoke(command, argv): convenience runner that prints the outcome and
  returns a process exit code.

Invocation shape
    <program> <method> -<param1>=<value1> -<param2>=<value2> ...

- Tokens after the program name are joined with '&' and parsed as a URL query
  string, so values must be percent-decodable text and array options can be
  spelled either as a JSON literal (-divisors=[3,4]) or repeated
  (-divisors[]=3 -divisors[]=4).
- No arguments, '--help' or '?' render the help text.

Quick start
    from typing import final
    from docket import Command, invoke

    class Tool(Command):
        '''
        :title: Tool
        :version: v1.0
        :usage: tool <method> [options...]
        '''

        @final
        def greet(self, name, shout=False):
            '''
            Say hello

            :param str name: Who to greet
            :param bool shout: Use capitals
            '''
            return ("hello %s" % name).upper() if shout else "hello %s" % name

    if __name__ == "__main__":
        raise SystemExit(invoke(Tool))

Design notes
- Dispatch is pure: Command.dispatch() returns an Outcome and never writes.
  Only __invoke__ touches standard output.
- Recoverable faults (missing parameter, unknown method, strict cast failure,
  errors raised by the method) render as a bold red "Error! ..." line followed
  by help. Defects (bad argv, malformed command class) propagate.
"""
import difflib
import functools
import logging
import os
import sys
from collections.abc import Sequence
from typing import NamedTuple
from urllib.parse import parse_qsl

from rich.console import Console
from rich.text import Text

from .casting import cast
from .colors import Color, colorize
from .faults import *
from .metadata import extract
from .utils import Unset, coalesce

logger = logging.getLogger(__name__)

console = Console(highlight=False)


class Outcome(NamedTuple):
    """
    Rendered result of one dispatch.

    - text: the full output, already colored, ending with a newline.
    - error: True when a recoverable fault was reported.
    """
    text: str
    error: bool = False

    @property
    def code(self):
        """Process exit code: 0 for success or help, 1 for a reported fault."""
        return int(self.error)


def parse_options(tokens, /):
    """
    Parse CLI tokens into an option map using query-string syntax.

    Behavior
    - Tokens are joined with '&' and split into key=value pairs (percent-decoded,
      '+' read as a space). A token without '=' maps to ''.
    - 'key[]=value' appends to a list stored under 'key'.
    - Otherwise, when a key repeats, the last value wins.

    Examples
    - ["power", "-x=2", "-y=10"]          -> {"power": "", "-x": "2", "-y": "10"}
    - ["-d[]=3", "-d[]=4"]                -> {"-d": ["3", "4"]}
    """
    options = {}
    for key, value in parse_qsl("&".join(tokens), keep_blank_values=True):
        if key.endswith("[]"):
            options.setdefault(key[:-2], [])
            if not isinstance(options[key[:-2]], list):
                options[key[:-2]] = [options[key[:-2]]]
            options[key[:-2]].append(value)
        else:
            options[key] = value
    return options


class Command:
    """
    Base class for documented command classes.

    Responsibilities
    - Introspection: self.metadata describes the program banner and the exposed
      methods (lazy, cached for the instance's lifetime).
    - Dispatch: dispatch(argv) resolves the method, binds and casts its
      parameters, calls it and renders the result or the fault.
    - Rendering: _helper() builds the help text; subclasses may extend it.

    Runtime flags
    - colorful: emit ANSI colors (defaults to True unless NO_COLOR is set).
    - strict: report uncastable values instead of coercing them to defaults.
    """

    def __init__(self, *, colorful=Unset, strict=Unset):
        self.colorful = bool(coalesce(colorful, "NO_COLOR" not in os.environ))
        self.strict = bool(coalesce(strict, False))

    @functools.cached_property
    def metadata(self):
        """CommandMetadata for this command's class (see docket.metadata.extract)."""
        return extract(type(self))

    def _colorize(self, text, color=Color.SUCCESS, bold=False):
        return colorize(text, color, bold, colorful=self.colorful)

    def _helper(self):
        """
        Render the full help text.

        Layout
        - "<title> <version>" in bold success color
        - "Usage: <usage>"
        - "Methods :" then, for every exposed method, its name and description
          followed by one line per parameter: "-name: (type) description".
          Optional parameters end with " (optional)".
        """
        program = self.metadata.program
        lines = [
            self._colorize(f"{program.title} {program.version}".strip(), Color.SUCCESS, True),
            f"Usage: {program.usage}",
            "Methods :",
        ]
        for name, method in self.metadata.methods.items():
            lines.append(f" * {name}: {method.description}".rstrip().replace("\n", "\n   "))
            lines.append("    Options:")
            for parameter in method.parameters:
                lines.append(
                    f"     -{parameter.name}: ({parameter.type}) {parameter.description}"
                    + (" (optional)" if parameter.optional else "")
                )
            lines.append("")
        return "\n".join(lines) + "\n"

    def _fail(self, fault):
        """Render a recoverable fault: error line, optional hint, then help."""
        logger.info("[%s] %s", fault.code.normalize() if fault.code else "-", fault)
        lines = [self._colorize(f"Error! {fault}", Color.FAILURE, True)]
        if hint := fault.options.get("hint"):
            lines.append(self._colorize(hint, Color.WARNING))
        return Outcome("\n".join(lines) + "\n" + self._helper(), True)

    def _bind(self, method, options):
        """
        Bind option values to a method's parameters, in declared order.

        - Required and missing: MissingParameterError.
        - Present: cast to the declared type (strict casts may fail).
        - Optional and missing: not passed, so the method's default applies.
        """
        arguments = {}
        for parameter in method.parameters:
            try:
                value = options[key := f"-{parameter.name}"]
            except KeyError:
                if parameter.optional:
                    continue
                raise MissingParameterError(
                    f"Missing parameter '{key}' for method {method.name} ({parameter.description})",
                    title="missing parameter",
                    code=FaultCode.MISSING_PARAMETER,
                    method=method.name,
                    parameter=parameter.name,
                ) from None
            try:
                value = cast(value, parameter.type, strict=self.strict)
            except ValueError as exception:
                raise UncastableParameterError(
                    f"Invalid value for parameter '{key}' of method {method.name}: {exception}",
                    title="uncastable parameter",
                    code=FaultCode.UNCASTABLE_PARAMETER,
                    method=method.name,
                    parameter=parameter.name,
                ) from exception
            if value is None and parameter.optional:
                continue
            arguments[parameter.name] = value
        return arguments

    def _call(self, method, arguments):
        """
        Call an exposed method and render its result as text (None -> '').

        Anything raised while calling or rendering becomes a delegated fault.
        """
        try:
            result = getattr(self, method.name)(**arguments)
            return "" if result is None else str(result)
        except CommandException:
            raise
        except Exception as exception:
            raise DelegatedCommandError(
                str(exception) or type(exception).__name__,
                title="delegated error",
                code=FaultCode.DELEGATED_ERROR,
                method=method.name,
                exception=exception,
            ) from exception

    def _unknown(self, options):
        candidates = [key for key in options if not key.startswith("-")]
        suggestions = []
        if candidates:
            suggestions = difflib.get_close_matches(candidates[0], self.metadata.methods.keys(), 1)
        return UnknownMethodError(
            "Invalid Method specified",
            title="unknown method",
            code=FaultCode.UNKNOWN_METHOD,
            input=candidates[0] if candidates else None,
            hint="did you mean %r?" % suggestions[0] if suggestions else None,
        )

    def dispatch(self, argv, /):
        """
        Run one invocation and return its rendered Outcome.

        Parameters
        - argv: Sequence[str]
          Full argument vector; the first item is the program name and is ignored.

        Phases
        - preflight: argv must be a non-string sequence of strings.
        - help: no options, '--help' or '?' -> help text (not an error).
        - resolution: the first exposed method, in declaration order, whose name
          is present in the option map is selected.
        - binding and invocation: see _bind() and _call().

        Raises
        - ConfigurationError for a malformed argv.
        - MetadataError when the command class is malformed.
        """
        if (
            isinstance(argv, str | bytes) or
            not isinstance(argv, Sequence) or
            not all(isinstance(token, str) for token in argv)
        ):
            raise ConfigurationError(
                "dispatch() argument must be a sequence of strings",
                title="malformed arguments",
                code=FaultCode.MALFORMED_ARGUMENTS,
            )

        metadata = self.metadata
        options = parse_options(argv[1:])
        logger.debug("option map: %r", options)

        if not options or "--help" in options or "?" in options:
            return Outcome(self._helper())

        try:
            for name, method in metadata.methods.items():
                if name in options:
                    logger.debug("resolved method %s", name)
                    text = self._call(method, self._bind(method, options))
                    return Outcome(self._colorize(f"{name}: {text}") + "\n")
            raise self._unknown(options)
        except CommandException as fault:
            return self._fail(fault)

    def __invoke__(self, argv=Unset, /):
        """
        Dispatch argv (sys.argv when omitted), print the outcome and return the exit code.

        Raises
        - ConfigurationError when there is no standard output to write to.
        """
        if sys.stdout is None:
            raise ConfigurationError(
                "please run the script from a terminal or a batch context",
                title="unsupported context",
                code=FaultCode.UNSUPPORTED_CONTEXT,
            )
        outcome = self.dispatch(coalesce(argv, sys.argv))
        # from_ansi() drops the final newline; print() puts it back.
        console.print(Text.from_ansi(outcome.text), soft_wrap=True)
        return outcome.code


def invoke(command, argv=Unset, /):
    """
    Convenience runner for command classes and instances.

    Parameters
    - command: Command subclass or instance.
    - argv: Sequence[str] | Unset
      Full argument vector including the program name; sys.argv when omitted.

    Returns
    - int: 0 for success or help, 1 when a fault was reported.
    """
    if isinstance(command, type) and issubclass(command, Command):
        command = command()
    if not isinstance(command, Command):
        raise TypeError("invoke() first argument must be a command class or instance")
    return command.__invoke__(argv)


__all__ = (
    "Command",
    "Outcome",
    "parse_options",
    "invoke",
)
