"""
Text to value conversion for option values.

A closed set of strict parsers, one per supported target type. Every parser
either accepts the whole text or rejects it; nothing is partially parsed
("12abc" is not 12, " 12" is not 12).

convert() returns a Conversion outcome instead of raising, so callers decide
how to surface a failure. Asking for a type outside the supported set is an
API misuse and raises TypeError.
"""
import re
from typing import NamedTuple


class Conversion(NamedTuple):
    ok: bool
    value: object

    def __bool__(self):
        return self.ok


_INTEGER = re.compile(r"[+-]?[0-9]+")
_FLOAT = re.compile(r"[+-]?(?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:[eE][+-]?[0-9]+)?|[+-]?(?:inf|infinity|nan)", re.IGNORECASE)

_TRUTHS = frozenset({"true", "yes", "on", "1"})
_FALSEHOODS = frozenset({"false", "no", "off", "0"})


def _to_str(text):
    return Conversion(True, text)


def _to_int(text):
    if not _INTEGER.fullmatch(text):
        return Conversion(False, 0)
    return Conversion(True, int(text))


def _to_float(text):
    if not _FLOAT.fullmatch(text):
        return Conversion(False, 0.0)
    return Conversion(True, float(text))


def _to_bool(text):
    if (lowered := text.lower()) in _TRUTHS:
        return Conversion(True, True)
    if lowered in _FALSEHOODS:
        return Conversion(True, False)
    return Conversion(False, False)


_CONVERTERS = {
    str: _to_str,
    int: _to_int,
    float: _to_float,
    bool: _to_bool,
}


def supported(type, /):
    """
    Return True when values can be converted to type.
    """
    return type in _CONVERTERS


def zero(type, /):
    """
    Return the empty-equivalent value of a supported type (0, 0.0, False, "").
    """
    if not supported(type):
        raise TypeError("unsupported conversion target %r" % (type,))
    return type()


def convert(text, type=str, /):
    """
    Convert text to a value of the given type.

    Returns
    - Conversion(True, value) on success.
    - Conversion(False, zero(type)) on malformed text.

    Raises
    - TypeError when type is not one of str, int, float and bool, or when text
      is not a string.
    """
    try:
        converter = _CONVERTERS[type]
    except (KeyError, TypeError):
        raise TypeError("unsupported conversion target %r" % (type,)) from None
    if not isinstance(text, str):
        raise TypeError("convert() first argument must be a string")
    return converter(text)


__all__ = (
    "Conversion",
    "convert",
    "supported",
    "zero",
)
