r"""
Sextant parameter declarations and value binding.

Overview
- Kinds
  • ChoiceParameter: one value picked among fixed alternatives ("--color auto").
  • FlagParameter: presence-only switch ("--verbose").
  • IntegerParameter: numeric argument ("--max-count 123").
  • StringParameter: free text argument ("--title TEXT").
  • StringListParameter: repeatable text argument ("--tag a --tag b").

- Bases
  • Parameter: identity (long name, short name, description), the `kind`
    discriminant and the intake contract shared by every kind.
  • ParameterWithArgument: adds the `argument_name` shown for the token that
    follows the parameter on the command line.

- Factories
  • choice(...), flag(...), integer(...), string(...), string_list(...):
    build the definition record and the parameter in one call.

Lifecycle
- Construction validates the definition once and freezes the identity.
  Any violation is a DefinitionError: a defect in the CLI definition, raised
  before parsing ever starts.
- The external parsing engine produces one raw datum per parameter. `_coerce`
  classifies the datum (see sextant.raw) and returns the typed value or raises
  UnexpectedDataError; `_set_value` stores what `_coerce` returns. The registry
  coerces every datum of a cycle before storing any of them.
- Each parse cycle calls `_set_value` again and overwrites the previous value.
- Application code reads `value` (or `values` for string lists).

Validation highlights
- Long names must match r"-(-[a-z0-9]+)+" (e.g. "--do-a-thing").
- Short names, when given, must match r"-[A-Za-z]" (e.g. "-d").
- Argument names, when given, must be non-empty, upper case and only use
  r"[A-Z0-9_]" (e.g. "URL_2").
- Choices need at least two distinct alternatives; a default must be one of them.

Quick example:
    >>> from sextant.parameters import choice, string_list
    >>> color = choice("--color", alternatives=("auto", "never"), default_value="auto")
    >>> color._set_value("never")
    >>> color.value
    'never'
    >>> tags = string_list("--tag", "-t", argument_name="TAG")
    >>> tags._set_value(None)
    >>> tags.values
    ()

Public API
- Enum: ParameterKind
- Classes: Parameter, ParameterWithArgument, ChoiceParameter, FlagParameter,
  IntegerParameter, StringParameter, StringListParameter
- Factories: choice, flag, integer, string, string_list
"""
import functools
import json
import operator
import re
from abc import ABCMeta, abstractmethod
from collections.abc import Sequence
from enum import IntEnum

from .definitions import *
from .faults import *
from .raw import RawKind, RawValue, classify
from .utils import *

# Example: "--do-something"
_LONG_NAME = re.compile(r"-(-[a-z0-9]+)+")
# Example: "-d"
_SHORT_NAME = re.compile(r"-[A-Za-z]")
# First character that cannot appear in an argument name such as "URL_2"
_INVALID_ARGUMENT_CHARACTER = re.compile(r"[^A-Z_0-9]")


class ParameterKind(IntEnum):
    """
    Identifies the kind of a parameter.
    """
    CHOICE      = 0
    FLAG        = 1
    INTEGER     = 2
    STRING      = 3
    STRING_LIST = 4


class ParameterType(ABCMeta):
    """
    Metaclass of every parameter class.

    Responsibilities
    - Derive __typename__ from the class name ("StringListParameter" →
      "string-list") for messages and representations.
    - Publish read-only properties for the names declared in
      __introspectable__, backed by "_{name}" attributes (see mirror()).
    - Collect the introspectable names along the MRO into __fields__.
    - Record the ParameterKind given with `kind=`.
    - Seal classes declared with `sealed=True` against subclassing.
    """

    def __new__(cls, name, bases, namespace, /, kind=Unset, sealed=False, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name.removesuffix("Parameter")).lower() or "parameter",
            } | {
                field: mirror(field) for field in namespace.get("__introspectable__", ())
            },
            **options,
        )

        self.__fields__ = tuple(dict.fromkeys(
            field
            for klass in reversed(self.__mro__)
            for field in vars(klass).get("__introspectable__", ())
        ))

        if kind is not Unset:
            self.__kind__ = ParameterKind(kind)

        if sealed:
            @rename("__init_subclass__")
            def __init_subclass__(cls, **options):  # NOQA: F-841
                """
                Disallow subclassing of concrete parameter kinds.
                """
                raise TypeError(f"type {self.__name__!r} is not an acceptable base type")
            self.__init_subclass__ = classmethod(__init_subclass__)

        return self


def _require(cls, definition, /, *fields):
    """
    Internal: ensure the definition record carries the fields the kind reads.
    """
    for field in fields:
        if not hasattr(definition, field):
            raise TypeError(f"{cls.__typename__} parameter definition must provide {field}")


def _validate_names(cls, definition, /):
    """
    Internal: validate the identity fields shared by every parameter.

    Raises
    - TypeError: when a name or the description is not a string.
    - InvalidLongNameError / InvalidShortNameError: when a name is malformed.
    """
    _require(cls, definition, "parameter_long_name", "parameter_short_name", "description")
    if not isinstance(long_name := definition.parameter_long_name, str):
        raise TypeError(f"{cls.__typename__} parameter long name must be a string")
    if not _LONG_NAME.fullmatch(long_name):
        raise InvalidLongNameError(
            f'Invalid name: "{long_name}". The parameter long name must be'
            f' lower-case and use dash delimiters (e.g. "--do-a-thing")',
            parameter=long_name,
        )

    if not isinstance(short_name := coalesce(definition.parameter_short_name), str | None):
        raise TypeError(f"{cls.__typename__} parameter short name must be a string")
    if short_name and not _SHORT_NAME.fullmatch(short_name):
        raise InvalidShortNameError(
            f'Invalid name: "{short_name}". The parameter short name must be'
            f' a dash followed by a single upper-case or lower-case letter (e.g. "-a")',
            parameter=long_name,
        )

    if not isinstance(coalesce(definition.description, ""), str):
        raise TypeError(f"{cls.__typename__} parameter description must be a string")


def _validate_argument_name(cls, definition, /):
    """
    Internal: validate the optional argument name of argument-bearing kinds.

    Checks run in order: non-empty, upper case, then a scan for the first
    character outside [A-Z0-9_], which is quoted in the error.
    """
    _require(cls, definition, "argument_name")
    if (argument_name := coalesce(definition.argument_name)) is None:
        return
    if not isinstance(argument_name, str):
        raise TypeError(f"{cls.__typename__} parameter argument name must be a string")
    if not argument_name:
        raise EmptyArgumentNameError(
            "The argument name cannot be an empty string. (For the default name, leave it unset.)",
            parameter=definition.parameter_long_name,
        )
    if argument_name.upper() != argument_name:
        raise LowercaseArgumentNameError(
            f'Invalid name: "{argument_name}". The argument name must be all upper case.',
            parameter=definition.parameter_long_name,
        )
    if match := _INVALID_ARGUMENT_CHARACTER.search(argument_name):
        raise InvalidArgumentNameError(
            f'The argument name "{argument_name}" contains an invalid character "{match[0]}".'
            f" Only upper-case letters, numbers, and underscores are allowed.",
            parameter=definition.parameter_long_name,
            character=match[0],
        )


def _validate_alternatives(cls, definition, /):
    """
    Internal: validate the alternatives and default of a choice.

    Returns the alternatives as a tuple, in declaration order.
    """
    _require(cls, definition, "alternatives", "default_value")
    alternatives = coalesce(definition.alternatives, ())
    # Sets have no declaration order.
    if isinstance(alternatives, str) or not isinstance(alternatives, Sequence):
        raise TypeError(f"{cls.__typename__} parameter alternatives must be an ordered sequence of strings")
    alternatives = tuple(alternatives)
    if not all(isinstance(alternative, str) for alternative in alternatives):
        raise TypeError(f"{cls.__typename__} parameter alternatives must be strings")

    if len(alternatives) < 2:
        raise TooFewAlternativesError(
            "When defining a choice parameter, the alternatives list must contain at least two values.",
            parameter=definition.parameter_long_name,
        )
    for index, alternative in enumerate(alternatives):
        if alternative in alternatives[:index]:
            raise DuplicateAlternativeError(
                f'The alternative "{alternative}" is listed more than once.',
                parameter=definition.parameter_long_name,
            )

    default_value = coalesce(definition.default_value)
    if default_value is not None and default_value not in alternatives:
        raise InvalidDefaultValueError(
            f'The specified default value "{default_value}"'
            f" is not one of the available options: {", ".join(alternatives)}",
            parameter=definition.parameter_long_name,
        )
    return alternatives


class Parameter(metaclass=ParameterType):
    """
    The base class for the various command-line parameter kinds.

    A parameter is created from a definition record while the CLI surface is
    declared, then receives one raw datum per parse cycle through _set_value.

    Properties
    - long_name, short_name, description: frozen identity.
    - kind: the ParameterKind of the concrete class.
    """

    __introspectable__ = (
        "long_name",
        "short_name",
        "description",
    )

    def __init__(self, definition, /):
        _validate_names(type(self), definition)
        self._long_name = definition.parameter_long_name
        self._short_name = coalesce(definition.parameter_short_name) or None
        self._description = coalesce(definition.description, "")

    @property
    def kind(self):
        """
        Indicates the kind of parameter.
        """
        return type(self).__kind__

    @abstractmethod
    def _coerce(self, data, /):
        """
        Return the typed value for a raw datum without storing it (internal).

        Raises UnexpectedDataError when the datum does not fit the kind.
        """

    @abstractmethod
    def _set_value(self, data, /):
        """
        Accept the raw datum parsed for this parameter (internal).

        Called by the registry once parsing completes, with None when the
        parser produced nothing for this parameter. The previous value is
        kept when the datum is rejected.
        """

    def _report_invalid_data(self, data, /):
        """
        Raise UnexpectedDataError for a datum the parsing engine should never produce.
        """
        try:
            dump = json.dumps(data, default=repr)
        except (TypeError, ValueError):
            dump = repr(data)
        raise UnexpectedDataError(
            f'Unexpected data object for parameter "{self.long_name}": {dump}',
            parameter=self.long_name,
            data=data,
        )

    def __rich_repr__(self):
        for field in type(self).__fields__:
            yield field, getattr(self, field)

    def __repr__(self):
        return f"{type(self).__typename__}({
            ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__()))
        })"


class ParameterWithArgument(Parameter):
    """
    The common base class for parameter kinds that receive an argument.

    An argument is the command-line token accompanying the parameter, such as
    "123" in "--max-count 123". `argument_name` is the label shown for it,
    None when the default label applies.
    """

    __introspectable__ = (
        "argument_name",
    )

    def __init__(self, definition, /):
        super().__init__(definition)
        _validate_argument_name(type(self), definition)
        self._argument_name = coalesce(definition.argument_name)


class ChoiceParameter(Parameter, kind=ParameterKind.CHOICE, sealed=True):
    """
    A parameter whose value is one of a fixed list of alternatives.

    `value` is None until parsed, or when the parameter was omitted and the
    parsing engine resolved no default.
    """

    __introspectable__ = (
        "alternatives",
        "default_value",
        "value",
    )

    def __init__(self, definition, /):
        super().__init__(definition)
        self._alternatives = _validate_alternatives(type(self), definition)
        self._default_value = coalesce(definition.default_value)
        self._value = None

    def _coerce(self, data, /):
        match classify(data):
            case RawValue(RawKind.ABSENT):
                return None
            case RawValue(RawKind.STRING, value):
                return value
            case _:
                self._report_invalid_data(data)

    def _set_value(self, data, /):
        self._value = self._coerce(data)


class FlagParameter(Parameter, kind=ParameterKind.FLAG, sealed=True):
    """
    A presence-only parameter.

    `value` is False until parsed, or when the flag was not used.
    """

    __introspectable__ = (
        "value",
    )

    def __init__(self, definition, /):
        super().__init__(definition)
        self._value = False

    def _coerce(self, data, /):
        match classify(data):
            case RawValue(RawKind.ABSENT):
                return False
            case RawValue(RawKind.BOOLEAN, value):
                return value
            case _:
                self._report_invalid_data(data)

    def _set_value(self, data, /):
        self._value = self._coerce(data)


class IntegerParameter(ParameterWithArgument, kind=ParameterKind.INTEGER, sealed=True):
    """
    A parameter taking a numeric argument.

    Numbers are stored as received; strings such as "5" are rejected rather
    than converted. `value` is None until parsed or when omitted.
    """

    __introspectable__ = (
        "value",
    )

    def __init__(self, definition, /):
        super().__init__(definition)
        self._value = None

    def _coerce(self, data, /):
        match classify(data):
            case RawValue(RawKind.ABSENT):
                return None
            case RawValue(RawKind.NUMBER, value):
                return value
            case _:
                self._report_invalid_data(data)

    def _set_value(self, data, /):
        self._value = self._coerce(data)


class StringParameter(ParameterWithArgument, kind=ParameterKind.STRING, sealed=True):
    """
    A parameter taking a text argument. `value` is None until parsed or when omitted.
    """

    __introspectable__ = (
        "value",
    )

    def __init__(self, definition, /):
        super().__init__(definition)
        self._value = None

    def _coerce(self, data, /):
        match classify(data):
            case RawValue(RawKind.ABSENT):
                return None
            case RawValue(RawKind.STRING, value):
                return value
            case _:
                self._report_invalid_data(data)

    def _set_value(self, data, /):
        self._value = self._coerce(data)


class StringListParameter(ParameterWithArgument, kind=ParameterKind.STRING_LIST, sealed=True):
    """
    A parameter that may be given several times, each with a text argument.

    `values` is an ordered tuple, empty until parsed or when omitted.
    """

    __introspectable__ = (
        "values",
    )

    def __init__(self, definition, /):
        super().__init__(definition)
        self._values = ()

    def _coerce(self, data, /):
        match classify(data):
            case RawValue(RawKind.ABSENT):
                return ()
            case RawValue(RawKind.SEQUENCE, values):
                return values
            case _:
                # Report the whole sequence, not just the offending item.
                self._report_invalid_data(data)

    def _set_value(self, data, /):
        self._values = self._coerce(data)


def choice(long_name, short_name=None, /, *, description="", alternatives=(), default_value=None):
    """
    Build a ChoiceParameter.

        >>> choice("--color", "-c", alternatives=("auto", "always", "never"), default_value="auto")
    """
    return ChoiceParameter(ChoiceDefinition(long_name, short_name, description, alternatives, default_value))


def flag(long_name, short_name=None, /, *, description=""):
    """
    Build a FlagParameter.

        >>> flag("--verbose", "-v", description="Print more details")
    """
    return FlagParameter(FlagDefinition(long_name, short_name, description))


def integer(long_name, short_name=None, /, *, description="", argument_name=None):
    """
    Build an IntegerParameter.
    """
    return IntegerParameter(IntegerDefinition(long_name, short_name, description, argument_name))


def string(long_name, short_name=None, /, *, description="", argument_name=None):
    """
    Build a StringParameter.
    """
    return StringParameter(StringDefinition(long_name, short_name, description, argument_name))


def string_list(long_name, short_name=None, /, *, description="", argument_name=None):
    """
    Build a StringListParameter.
    """
    return StringListParameter(StringListDefinition(long_name, short_name, description, argument_name))


__all__ = (
    # Enum
    "ParameterKind",

    # Classes
    "Parameter",
    "ParameterWithArgument",
    "ChoiceParameter",
    "FlagParameter",
    "IntegerParameter",
    "StringParameter",
    "StringListParameter",

    # Factories
    "choice",
    "flag",
    "integer",
    "string",
    "string_list",
)

# The metaclass is an implementation detail; keep it out of star-imports and docs.
del ParameterType
