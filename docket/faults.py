"""
Docket faults (defects and recoverable errors).

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the
  dispatcher can report. Codes are grouped by domain to keep logs and
  searches predictable.
- CommandDefect: fatal problems with the program itself (how it was run, or
  how the command class was written). These propagate to the caller.
- CommandException: recoverable, user-facing problems with a single
  invocation. The dispatcher renders them as an error line followed by help;
  they never escape Command.dispatch().

Integration
- Faults carry a message plus read-only options (title, code, and any context
  the reporter wants to keep, e.g. method/parameter/exception).
- copy.replace(fault, **overrides) yields an equivalent fault with merged options.
"""
import copy
from enum import IntEnum
from types import MappingProxyType

from .utils import Unset, hostattr


class FaultCode(IntEnum):
    """
    canonical fault codes used across docket (stable identifiers).

    grouping (by high-level domain)
    - environment (1010x)
      • MALFORMED_ARGUMENTS, UNSUPPORTED_CONTEXT
    - metadata (1011x)
      • UNDOCUMENTED_PARAMETER, UNSUPPORTED_TYPE, UNSUPPORTED_KIND
    - routing (1110x)
      • UNKNOWN_METHOD
    - parameters (1111x/1112x)
      • MISSING_PARAMETER, UNCASTABLE_PARAMETER
    - delegated errors (1113x)
      • DELEGATED_ERROR
    """
    # --- environment defects (10xxx) ---
    MALFORMED_ARGUMENTS         = 10101
    UNSUPPORTED_CONTEXT         = 10102

    # --- metadata defects (10xxx) ---
    UNDOCUMENTED_PARAMETER      = 10111
    UNSUPPORTED_TYPE            = 10112
    UNSUPPORTED_KIND            = 10113

    # --- routing errors (11xxx) ---
    UNKNOWN_METHOD              = 11101

    # --- parameter errors (11xxx) ---
    MISSING_PARAMETER           = 11117
    UNCASTABLE_PARAMETER        = 11124

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11131

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(hostattr("__codes__", {}).get(self, self.value))


class _Fault:
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message if message is not Unset else "")
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return self.message if self.message is not Unset else ""

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class CommandDefect(_Fault, Exception):
    """
    Fatal fault: the program cannot dispatch at all.

    Raised before any output is produced and never converted into help text.
    """


class ConfigurationError(CommandDefect): ...
class MetadataError(CommandDefect, TypeError): ...


class CommandException(_Fault, Exception):
    """
    Recoverable fault: this dispatch attempt stops, an error line and the help
    text are rendered, and the process carries on to a clean exit.
    """


class MissingParameterError(CommandException): ...
class UnknownMethodError(CommandException): ...
class UncastableParameterError(CommandException): ...
class DelegatedCommandError(CommandException): ...


__all__ = (
    "FaultCode",
    "CommandDefect",
    "ConfigurationError",
    "MetadataError",
    "CommandException",
    "MissingParameterError",
    "UnknownMethodError",
    "UncastableParameterError",
    "DelegatedCommandError",
)
