"""
Definition records consumed by parameter constructors.

A definition is the immutable description of one parameter as authored by the
embedding application, before any validation. Every record shares the base
fields:

- parameter_long_name: "--do-a-thing" style name (required).
- parameter_short_name: "-d" style name, or None.
- description: help text.

Argument-bearing kinds (integer, string, string list) add `argument_name`
("URL_2" style, None for the default name). Choices add `alternatives` and
an optional `default_value`.

    >>> ChoiceDefinition("--color", alternatives=("auto", "never"), default_value="auto")
"""
from collections import namedtuple

_BASE = ("parameter_long_name", "parameter_short_name", "description")

FlagDefinition = namedtuple(
    "FlagDefinition",
    _BASE,
    defaults=(None, ""),
)

IntegerDefinition = namedtuple(
    "IntegerDefinition",
    _BASE + ("argument_name",),
    defaults=(None, "", None),
)

StringDefinition = namedtuple(
    "StringDefinition",
    _BASE + ("argument_name",),
    defaults=(None, "", None),
)

StringListDefinition = namedtuple(
    "StringListDefinition",
    _BASE + ("argument_name",),
    defaults=(None, "", None),
)

ChoiceDefinition = namedtuple(
    "ChoiceDefinition",
    _BASE + ("alternatives", "default_value"),
    defaults=(None, "", (), None),
)

__all__ = (
    "FlagDefinition",
    "IntegerDefinition",
    "StringDefinition",
    "StringListDefinition",
    "ChoiceDefinition",
)
