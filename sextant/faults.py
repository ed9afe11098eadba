"""
Sextant faults (configuration and intake errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every fault raised by
  the package. Codes are grouped by domain so logs and searches stay predictable.
- ParameterException: base type that carries message + options and knows how
  to render itself with rich.
- trigger(): central entry point to surface any fault (raise, or print and exit
  in shell mode).
- getdoc(): optional description lookup for a code from the host application.

Two families matter to callers
- DefinitionError (a ValueError): the CLI definition itself is wrong. These are
  raised while parameters are constructed, before any parsing happens.
- UnexpectedDataError (a TypeError): the external parser handed a raw datum
  whose shape does not fit the parameter kind. This is an integration defect,
  never a user-input error.

Host hooks (read from __main__ when present)
- __prog__: program name shown in rendered headers.
- __styles__: mapping of style overrides.
- __codes__: mapping of FaultCode → label used by FaultCode.normalize().
- __docs__: mapping of FaultCode → documentation string used by getdoc(); the
  registry passes it to faults as the `docs` option, rendered below the hint.
"""
import copy
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - definitions (21xxx): names, argument names, alternatives and defaults
      rejected while a parameter is constructed.
    - intake (22xxx): raw data from the parsing engine with an unexpected shape.
    - registry (23xxx): registration and lookup of parameters.
    """
    # --- definition errors (21xxx) ---
    INVALID_LONG_NAME       = 21101
    INVALID_SHORT_NAME      = 21102
    EMPTY_ARGUMENT_NAME     = 21111
    LOWERCASE_ARGUMENT_NAME = 21112
    INVALID_ARGUMENT_NAME   = 21113
    TOO_FEW_ALTERNATIVES    = 21121
    DUPLICATE_ALTERNATIVE   = 21122
    INVALID_DEFAULT_VALUE   = 21123

    # --- intake errors (22xxx) ---
    UNEXPECTED_DATA         = 22101

    # --- registry errors (23xxx) ---
    DUPLICATE_PARAMETER     = 23101
    UNKNOWN_PARAMETER       = 23102
    PARAMETER_KIND          = 23103

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ParameterException(Exception):
    """
    Base class of every fault raised by sextant.

    Subclasses declare their defaults in the class statement:

        class InvalidLongNameError(DefinitionError, code=..., title=..., hint=...): ...

    Those defaults are merged under the options given at construction time, so
    an explicit option always wins.
    """
    __defaults__ = MappingProxyType({})

    def __init_subclass__(cls, /, **defaults):
        super().__init_subclass__()
        cls.__defaults__ = MappingProxyType({**cls.__defaults__, **defaults})

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType({**type(self).__defaults__, **options})

    def __str__(self):
        return self.message if self.message is not Unset else ""

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        main = __import__("__main__")

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",
            "code": "bold #00E5FF",
            "error-title": "bold #FF4DA6",

            # body
            "error-message": "#C8C8D0",
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",

            # footer
            "docs": "underline #00E5FF dim",
        } | getattr(main, "__styles__", {}))

        colorful = self.options.get("colorful", True)
        fancy = self.options.get("fancy", False)

        def styler(style):
            return styles[style] if colorful else ""

        def text(fragment, style=""):
            if not fragment:
                return Text("")
            if not colorful:
                return Text(str(fragment))
            if isinstance(fragment, Text):
                return fragment
            return Text(str(fragment), style)

        prog = self.options.get("prog") or getattr(main, "__prog__", os.path.basename(sys.argv[0]) or "sextant")
        code = self.code.normalize() if isinstance(self.code, FaultCode) else "?"

        header = Text.assemble(
            "[ ",
            text(prog, styler("prog-name")),
            " — ",
            text(code, styler("code")),
            " | ",
            text(str(self.options.get("title", "error")).title(), styler("error-title")),
            " ]"
        )
        message = text(self.message, styler("error-message"))
        renders = [message]
        if self.options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(self.options["hint"], styler("hint"))))
        if self.options.get("docs"):
            renders.append(text(self.options["docs"], styler("docs")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from None
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


# --- configuration errors, raised at construction time ---

class DefinitionError(ParameterException, ValueError, title="invalid definition"): ...


class InvalidLongNameError(
        DefinitionError,
        code=FaultCode.INVALID_LONG_NAME,
        title="invalid long name",
        hint='use lower-case words joined by dashes, e.g. "--do-a-thing"',
): ...


class InvalidShortNameError(
        DefinitionError,
        code=FaultCode.INVALID_SHORT_NAME,
        title="invalid short name",
        hint='use a dash followed by a single letter, e.g. "-a"',
): ...


class EmptyArgumentNameError(
        DefinitionError,
        code=FaultCode.EMPTY_ARGUMENT_NAME,
        title="empty argument name",
        hint="omit the argument name to get the default one",
): ...


class LowercaseArgumentNameError(
        DefinitionError,
        code=FaultCode.LOWERCASE_ARGUMENT_NAME,
        title="argument name not upper case",
        hint='write argument names in upper case, e.g. "URL"',
): ...


class InvalidArgumentNameError(
        DefinitionError,
        code=FaultCode.INVALID_ARGUMENT_NAME,
        title="invalid argument name",
        hint="only upper-case letters, numbers and underscores are allowed",
): ...


class TooFewAlternativesError(
        DefinitionError,
        code=FaultCode.TOO_FEW_ALTERNATIVES,
        title="too few alternatives",
        hint="a choice needs at least two alternatives; use a flag for a single one",
): ...


class DuplicateAlternativeError(
        DefinitionError,
        code=FaultCode.DUPLICATE_ALTERNATIVE,
        title="duplicate alternative",
): ...


class InvalidDefaultValueError(
        DefinitionError,
        code=FaultCode.INVALID_DEFAULT_VALUE,
        title="invalid default value",
        hint="pick the default among the alternatives",
): ...


# --- intake contract violations, raised at parse time ---

class UnexpectedDataError(
        ParameterException,
        TypeError,
        code=FaultCode.UNEXPECTED_DATA,
        title="unexpected data",
        hint="the parsing engine returned a value that does not fit the parameter kind",
): ...


# --- registry errors ---

class RegistryError(ParameterException, LookupError, title="registry error"): ...


class DuplicateParameterError(
        RegistryError,
        code=FaultCode.DUPLICATE_PARAMETER,
        title="duplicate parameter",
): ...


class UnknownParameterError(
        RegistryError,
        code=FaultCode.UNKNOWN_PARAMETER,
        title="unknown parameter",
): ...


class ParameterKindError(
        RegistryError,
        code=FaultCode.PARAMETER_KIND,
        title="wrong parameter kind",
): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ParameterException).
    - options are merged into the fault via copy.replace() before triggering.
    - in shell mode the fault is rendered with rich and the process exits;
      otherwise the fault is raised.

    typical options
    - shell, fancy, colorful, prog, and context such as parameter or data.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code from __main__.__docs__.

    returns None when the host application does not document the code.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "FaultCode",
    "ParameterException",
    "DefinitionError",
    "InvalidLongNameError",
    "InvalidShortNameError",
    "EmptyArgumentNameError",
    "LowercaseArgumentNameError",
    "InvalidArgumentNameError",
    "TooFewAlternativesError",
    "DuplicateAlternativeError",
    "InvalidDefaultValueError",
    "UnexpectedDataError",
    "RegistryError",
    "DuplicateParameterError",
    "UnknownParameterError",
    "ParameterKindError",
    "trigger",
    "getdoc",
)
