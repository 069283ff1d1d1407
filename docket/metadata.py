"""
Docket metadata layer: discover commands from docstrings and signatures.

What this module provides
- extract(cls): inspect a command class and describe its program banner and
  every exposed method, with typed, ordered parameters.
- Descriptors: ProgramDescriptor, ParameterDescriptor, MethodDescriptor and
  CommandMetadata (immutable, structurally comparable).
- ParameterType: the closed set of parameter kinds the dispatcher can cast.

Conventions read by extract()
- The class's own docstring carries reST fields for the program banner:

      class Calculator(Command):
          '''
          :title: Docket Calculator
          :version: v1.01
          :usage: calculate <method> [options...]
          '''

- Methods decorated with typing.final are exposed; every other method is
  invisible to the dispatcher.
- An exposed method's docstring starts with a free-text description, followed
  by one field per call parameter:

          @final
          def power(self, x, y):
              '''
              The power of x to index y

              :param int x: The base to use
              :param int y: The exponent
              '''

- Optionality comes from the signature: a parameter with a default is optional.

Ordering
- Methods are listed in declaration order (base classes first) and parameters
  in call-signature order. Help rendering and method resolution rely on both.
"""
import functools
import inspect
import logging
import re
from enum import StrEnum
from inspect import Parameter
from types import MappingProxyType
from typing import NamedTuple

from .faults import FaultCode, MetadataError

logger = logging.getLogger(__name__)


class ParameterType(StrEnum):
    """Primitive kinds a documented parameter can declare."""
    STRING = "str"
    INT = "int"
    BOOL = "bool"
    LIST = "list"

    @classmethod
    def _missing_(cls, value):
        # Case-insensitive, plus the long spellings used by other docstring dialects.
        return {
            "str": cls.STRING,
            "int": cls.INT,
            "bool": cls.BOOL,
            "list": cls.LIST,
            "string": cls.STRING,
            "integer": cls.INT,
            "boolean": cls.BOOL,
            "array": cls.LIST,
        }.get(str(value).lower())


class ProgramDescriptor(NamedTuple):
    title: str
    version: str
    usage: str


class ParameterDescriptor(NamedTuple):
    name: str
    type: ParameterType
    optional: bool
    description: str


class MethodDescriptor(NamedTuple):
    name: str
    description: str
    parameters: tuple[ParameterDescriptor, ...]


class CommandMetadata(NamedTuple):
    program: ProgramDescriptor
    methods: MappingProxyType


_FIELD = re.compile(r"^:(?P<field>\w+)")
_PARAM = re.compile(r"^:param\s+(?P<type>\S+)\s+(?P<name>\w+)\s*:[ \t]*(?P<description>.*)$", re.MULTILINE)


def _program_field(field, docstring):
    """Return the text of a class-level field, or '' when the field is absent."""
    match = re.search(r"^:%s:[ \t]*(.*)$" % re.escape(field), docstring, re.MULTILINE)
    return match[1].strip() if match else ""


def _exposed(cls):
    """
    Yield (name, function) for every typing.final function, base classes first.

    A name redefined further down the hierarchy keeps its original position but
    resolves to the most derived definition.
    """
    functions = {}
    for klass in reversed(cls.__mro__):
        for name, object in vars(klass).items():
            if inspect.isfunction(object) and getattr(object, "__final__", False):
                functions[name] = object
            elif name in functions:
                # Overridden without the marker: no longer exposed.
                del functions[name]
    return functions.items()


def _describe(cls, name, function):
    """
    Build the MethodDescriptor for one exposed function.

    Raises MetadataError when a parameter cannot be bound by keyword, has no
    ':param' field, or declares a type outside ParameterType.
    """
    docstring = inspect.cleandoc(function.__doc__ or "")
    lines = docstring.splitlines()
    head = next((index for index, line in enumerate(lines) if _FIELD.match(line)), len(lines))
    description = "\n".join(lines[:head]).strip()

    fields = {match["name"]: match for match in _PARAM.finditer("\n".join(lines[head:]))}

    parameters = []
    for parameter in list(inspect.signature(function).parameters.values())[1:]:
        if parameter.kind not in (Parameter.POSITIONAL_OR_KEYWORD, Parameter.KEYWORD_ONLY):
            raise MetadataError(
                f"{cls.__name__}.{name}() parameter {parameter.name!r} must be standard or keyword-only",
                title="unsupported parameter kind",
                code=FaultCode.UNSUPPORTED_KIND,
                method=name,
                parameter=parameter.name,
            )
        try:
            field = fields[parameter.name]
        except KeyError:
            raise MetadataError(
                f"{cls.__name__}.{name}() parameter {parameter.name!r} is not documented "
                f"(expected ':param <type> {parameter.name}: <description>')",
                title="undocumented parameter",
                code=FaultCode.UNDOCUMENTED_PARAMETER,
                method=name,
                parameter=parameter.name,
            ) from None
        try:
            type = ParameterType(field["type"])
        except ValueError:
            raise MetadataError(
                f"{cls.__name__}.{name}() parameter {parameter.name!r} declares unsupported type "
                f"{field['type']!r} (expected one of {', '.join(ParameterType)})",
                title="unsupported parameter type",
                code=FaultCode.UNSUPPORTED_TYPE,
                method=name,
                parameter=parameter.name,
            ) from None
        parameters.append(ParameterDescriptor(
            parameter.name,
            type,
            parameter.default is not Parameter.empty,
            field["description"].strip(),
        ))

    return MethodDescriptor(name, description, tuple(parameters))


@functools.cache
def extract(cls, /):
    """
    Describe the program banner and the exposed methods of a command class.

    Behavior
    - Reads ':title:', ':version:' and ':usage:' from the class's own docstring;
      each missing field degrades to '' independently.
    - Describes every typing.final method, in declaration order.
    - Memoized per class: repeated calls return the same (immutable) object, and
      a fresh computation yields a structurally equal one.

    Raises
    - TypeError when cls is not a class.
    - MetadataError when an exposed method is malformed (see _describe).
    """
    if not isinstance(cls, type):
        raise TypeError("extract() argument must be a class")

    docstring = inspect.cleandoc(vars(cls).get("__doc__") or "")
    program = ProgramDescriptor(
        _program_field("title", docstring),
        _program_field("version", docstring),
        _program_field("usage", docstring),
    )

    methods = {}
    for name, function in _exposed(cls):
        methods[name] = _describe(cls, name, function)
        logger.debug("discovered %s.%s(%s)", cls.__name__, name, ", ".join(
            parameter.name for parameter in methods[name].parameters
        ))

    return CommandMetadata(program, MappingProxyType(methods))


__all__ = (
    "ParameterType",
    "ProgramDescriptor",
    "ParameterDescriptor",
    "MethodDescriptor",
    "CommandMetadata",
    "extract",
)
