"""
Lenient casting of raw option values into declared parameter types.

Every cast is total: malformed input is replaced by a default (0 for int,
False for bool, None for list) instead of failing. This is the soft-validation
boundary of the dispatcher; each substitution is logged at DEBUG level. Pass
strict=True to turn substitutions into ValueError instead.
"""
import json
import logging
import re

from .metadata import ParameterType

logger = logging.getLogger(__name__)

_INTEGER = re.compile(r"\s*[+-]?\d+")

FALSEY = frozenset({"", "0", "false", "no", "off"})
TRUTHY = frozenset({"1", "true", "yes", "on"})


def _substitute(value, type, default, strict):
    if strict:
        raise ValueError("%r is not a valid %s" % (value, type))
    logger.debug("coerced %r to %r for type %s", value, default, type)
    return default


def _to_int(value, strict):
    if strict:
        try:
            return int(value.strip())
        except ValueError:
            return _substitute(value, ParameterType.INT, 0, strict)
    # Leading integer prefix, like most shells and C's atoi: "12abc" -> 12.
    if match := _INTEGER.match(value):
        try:
            return int(match.group())
        except ValueError:
            # Past sys.get_int_max_str_digits().
            pass
    return _substitute(value, ParameterType.INT, 0, strict)


def _to_bool(value, strict):
    word = value.strip().lower()
    if word in FALSEY:
        return False
    if strict and word not in TRUTHY:
        return _substitute(value, ParameterType.BOOL, False, strict)
    return True


def _to_list(value, strict):
    try:
        object = json.loads(value)
    except (ValueError, RecursionError):
        return _substitute(value, ParameterType.LIST, None, strict)
    if not isinstance(object, list):
        return _substitute(value, ParameterType.LIST, None, strict)
    return object


def _scalar(item):
    try:
        object = json.loads(item)
    except (ValueError, RecursionError):
        return item
    return item if isinstance(object, list | dict) else object


def cast(value, type, /, *, strict=False):
    """
    Convert a raw option value into the declared parameter type.

    Parameters
    - value: str | list[str]
      The raw value from the option map. A list comes from the 'name[]=' form.
    - type: ParameterType | str
      Declared parameter type.
    - strict: bool (keyword-only)
      Raise ValueError instead of substituting a default.

    Rules
    - int:  leading integer prefix ("12abc" -> 12); no digits or too many -> 0.
    - bool: "", "0", "false", "no", "off" (any case) -> False; anything else -> True.
    - list: JSON array literal ("[3,4]" -> [3, 4]); malformed or non-array -> None.
            A list value keeps its items, decoding JSON scalars ("3" -> 3).
    - str:  unchanged.
    - A list value given to a scalar type uses its last item.
    """
    type = ParameterType(type)

    if isinstance(value, list):
        if type is ParameterType.LIST:
            return [_scalar(item) for item in value]
        if strict:
            raise ValueError("%r is not a valid %s" % (value, type))
        value = value[-1] if value else ""

    match type:
        case ParameterType.INT:
            return _to_int(value, strict)
        case ParameterType.BOOL:
            return _to_bool(value, strict)
        case ParameterType.LIST:
            return _to_list(value, strict)
        case _:
            return value


__all__ = (
    "FALSEY",
    "TRUTHY",
    "cast",
)
