"""
Registration of parameters and delivery of parsed data.

The external parsing engine stores the raw value of every parameter under an
opaque lookup key. The Registry owns the parameter → key mapping, so a
parameter never carries a key stamped onto it by someone else.

Typical flow
    >>> registry = Registry()
    >>> verbose = registry.register(flag("--verbose", "-v"))
    >>> key = registry.key(verbose)                    # e.g. "key_0"
    >>> registry.process({key: True})                  # once parsing completes
    >>> verbose.value
    True

Keys come from a process-wide counter so that registries of nested
subcommands sharing one parser namespace never collide.

Faults raised while processing go through faults.trigger() with the registry
options: they are raised by default, and rendered with rich followed by exit
status 1 when `shell` is True.
"""
import itertools

from .faults import *
from .parameters import Parameter, ParameterKind

_keys = itertools.count()


class Registry:
    """
    Ordered collection of parameters with their lookup keys.

    Options
    - shell: render faults with rich and exit instead of raising.
    - fancy: render faults inside a panel.
    - colorful: use colors when rendering faults.
    """

    def __init__(self, *, shell=False, fancy=False, colorful=True):
        self.shell = bool(shell)
        self.fancy = bool(fancy)
        self.colorful = bool(colorful)
        self._keys = {}
        self._long_names = {}
        self._short_names = {}

    def _trigger(self, fault, /):
        options = dict(shell=self.shell, fancy=self.fancy, colorful=self.colorful)
        if isinstance(fault.code, FaultCode) and (docs := getdoc(fault.code)) is not None:
            options["docs"] = docs
        trigger(fault, **options)

    def register(self, parameter, /):
        """
        Assign a lookup key to `parameter` and return the parameter.

        Raises
        - TypeError: when `parameter` is not a Parameter.
        - DuplicateParameterError: when the instance, its long name or its
          short name is already registered.
        """
        if not isinstance(parameter, Parameter):
            raise TypeError("register() argument must be a parameter")
        if parameter in self._keys:
            self._trigger(DuplicateParameterError(
                f'The parameter "{parameter.long_name}" is already registered.',
                parameter=parameter.long_name,
            ))
        if parameter.long_name in self._long_names:
            self._trigger(DuplicateParameterError(
                f'A parameter with the long name "{parameter.long_name}" was already defined.',
                parameter=parameter.long_name,
            ))
        if parameter.short_name and parameter.short_name in self._short_names:
            self._trigger(DuplicateParameterError(
                f'A parameter with the short name "{parameter.short_name}" was already defined'
                f' by "{self._short_names[parameter.short_name].long_name}".',
                parameter=parameter.long_name,
            ))

        self._keys[parameter] = "key_" + str(next(_keys))
        self._long_names[parameter.long_name] = parameter
        if parameter.short_name:
            self._short_names[parameter.short_name] = parameter
        return parameter

    def key(self, parameter, /):
        """
        Return the lookup key assigned to `parameter`.
        """
        try:
            return self._keys[parameter]
        except (KeyError, TypeError):
            self._trigger(UnknownParameterError(
                f"The parameter {parameter!r} is not registered.",
            ))

    def get(self, long_name, /, kind=None):
        """
        Return the registered parameter called `long_name`.

        When `kind` is given, the parameter must be of that ParameterKind.
        """
        try:
            parameter = self._long_names[long_name]
        except KeyError:
            self._trigger(UnknownParameterError(
                f'The parameter "{long_name}" is not defined.',
                parameter=long_name,
            ))
        if kind is not None and parameter.kind is not ParameterKind(kind):
            self._trigger(ParameterKindError(
                f'The parameter "{long_name}" is of kind {parameter.kind.name},'
                f" expected {ParameterKind(kind).name}.",
                parameter=long_name,
            ))
        return parameter

    def get_choice(self, long_name, /):
        return self.get(long_name, ParameterKind.CHOICE)

    def get_flag(self, long_name, /):
        return self.get(long_name, ParameterKind.FLAG)

    def get_integer(self, long_name, /):
        return self.get(long_name, ParameterKind.INTEGER)

    def get_string(self, long_name, /):
        return self.get(long_name, ParameterKind.STRING)

    def get_string_list(self, long_name, /):
        return self.get(long_name, ParameterKind.STRING_LIST)

    def process(self, parsed, /):
        """
        Feed the parse result of one cycle to every registered parameter.

        `parsed` maps lookup keys to raw data; a missing key is delivered as
        None. Each call overwrites the values of the previous cycle.

        Every datum is checked before any value is stored: when one is
        rejected, all parameters keep the values of the previous cycle.
        """
        for parameter, key in self._keys.items():
            try:
                parameter._coerce(parsed.get(key))
            except UnexpectedDataError as fault:
                self._trigger(fault)

        for parameter, key in self._keys.items():
            parameter._set_value(parsed.get(key))

    def __contains__(self, parameter, /):
        try:
            return parameter in self._keys
        except TypeError:
            return False

    def __iter__(self):
        return iter(self._keys)

    def __len__(self):
        return len(self._keys)

    def __rich_repr__(self):
        for parameter, key in self._keys.items():
            yield key, parameter

    def __repr__(self):
        return f"registry({", ".join(f"{key}={parameter!r}" for parameter, key in self._keys.items())})"


__all__ = (
    "Registry",
)
