"""
Raw data handed over by the external parsing engine.

The parsing engine produces one untyped datum per parameter key. Before a
parameter accepts it, the datum is sorted into a small closed set of shapes:

    ABSENT    None (or Unset): the key was missing or had no value
    BOOLEAN   True / False
    NUMBER    int or float, never bool
    STRING    str
    SEQUENCE  a list/tuple whose items are all str (copied into a tuple)
    UNKNOWN   anything else, carried unchanged for error reporting

Parameters pattern-match on the resulting RawValue, so the shape checks live
here and nowhere else.
"""
from collections import namedtuple
from collections.abc import Sequence
from enum import IntEnum

from .utils import Unset


class RawKind(IntEnum):
    ABSENT   = 0
    BOOLEAN  = 1
    NUMBER   = 2
    STRING   = 3
    SEQUENCE = 4
    UNKNOWN  = 5


RawValue = namedtuple("RawValue", ("kind", "value"))
RawValue.__doc__ = "A raw datum tagged with its RawKind."


def classify(data, /):
    """
    Tag a raw datum with its RawKind.

    Notes
    - bool is tested before numbers since it subclasses int.
    - str and bytes are sequences in Python but never count as SEQUENCE.
    - a sequence holding anything other than str is UNKNOWN, and keeps the
      whole original sequence so it can be reported as-is.
    """
    if data is None or data is Unset:
        return RawValue(RawKind.ABSENT, None)
    if isinstance(data, bool):
        return RawValue(RawKind.BOOLEAN, data)
    if isinstance(data, int | float):
        return RawValue(RawKind.NUMBER, data)
    if isinstance(data, str):
        return RawValue(RawKind.STRING, data)
    if isinstance(data, Sequence) and not isinstance(data, bytes | bytearray):
        if all(isinstance(item, str) for item in data):
            return RawValue(RawKind.SEQUENCE, tuple(data))
    return RawValue(RawKind.UNKNOWN, data)


__all__ = (
    "RawKind",
    "RawValue",
    "classify",
)
