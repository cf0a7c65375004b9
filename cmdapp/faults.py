"""
cmdapp faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for all user-facing issues
  (errors and warnings). Codes are grouped by stage so that messages stay
  consistent and logs/searches predictable.
- CommandException / CommandWarning: base types that carry message + options and
  know how to render themselves through rich.
- trigger(): central entry point to surface any fault (respecting shell/fancy/colorful).
- getdoc(): optional description lookup for a code from the host application.

Stages
- registration: GrammarError (malformed behavior string), ShadowedOptionWarning.
- scanning: UnknownOptionError and the ArgumentError family.
- verification: ConfigError (bad quantifier reference), ConstraintViolationError.
- dispatching: DelegatedCallbackError (a user callback raised).

Integration
- The scanner/verifier/dispatcher raise faults; the application catches them and
  calls trigger(fault, **ctx). In non-shell mode, exceptions are raised again; in
  shell mode, they are rendered via rich on stderr and the process exits.
"""
import inspect
import os
import sys
import warnings
from abc import ABC
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
    canonical fault codes used across the library (stable identifiers).

    grouping (by stage)
    - registration (1100x)
      • MALFORMED_BEHAVIOR
    - configuration (1101x)
      • UNRESOLVED_REFERENCE, SELF_REFERENCE
    - scanning (1111x)
      • UNKNOWN_SHORT_OPTION, UNKNOWN_LONG_OPTION, MISSING_ARGUMENT,
        UNEXPECTED_ARGUMENT, INVALID_BUNDLE
    - verification (1112x)
      • ALL_VIOLATED, ANY_VIOLATED, ONLY_VIOLATED
    - delegated errors (11131)
      • DELEGATED_ERROR
    - warnings (12xxx)
      • SHADOWED_SHORT_OPTION

    normalize() allows host remapping to custom labels while keeping code-stability.
    """
    # --- registration errors (11xxx) ---
    MALFORMED_BEHAVIOR          = 11001

    # --- configuration errors (11xxx) ---
    UNRESOLVED_REFERENCE        = 11011
    SELF_REFERENCE              = 11012

    # --- scanning errors (11xxx) ---
    UNKNOWN_SHORT_OPTION        = 11111
    UNKNOWN_LONG_OPTION         = 11112
    MISSING_ARGUMENT            = 11113
    UNEXPECTED_ARGUMENT         = 11114
    INVALID_BUNDLE              = 11115

    # --- verification errors (11xxx) ---
    ALL_VIOLATED                = 11121
    ANY_VIOLATED                = 11122
    ONLY_VIOLATED               = 11123

    # --- delegated errors (11xxx) ---
    DELEGATED_ERROR             = 11131

    # --- warnings (12xxx) ---
    SHADOWED_SHORT_OPTION       = 12111

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _render(fault, palette, title):
    main = __import__("__main__")
    options = fault.options
    colorful = options.get("colorful", False)
    fancy = options.get("fancy", False)

    styles = defaultdict(str, palette | getattr(main, "__styles__", {}))

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

    try:
        prog = getattr(main, "__prog__")
    except AttributeError:
        prog = options["app"].program if "app" in options else os.path.basename(sys.argv[0])

    header = Text.assemble(
        "[ ",
        text(prog, styler("prog-name")),
        " — ",
        text(options["code"].normalize() if "code" in options else "", styler("code")),
        " | ",
        text(options.get("title", type(fault).__name__).title(), styler(title)),
        " ]"
    )
    message = text(fault.message, styler(title.replace("title", "message")))

    if fancy:
        renders = [message]
        if options.get("hint"):
            renders.append(Text.assemble(text(" → ", styler("hint-arrow")), text(options["hint"], styler("hint"))))
        return Panel(Group(*renders), title=header, title_align="left")

    # Non-fancy diagnostics are a single line: header then message.
    return Text.assemble(header, " ", message)


class CommandException(Exception):
    """
    Base error: a message plus an immutable bag of rendering/context options.

    Well-known options: code (FaultCode), title, hint, docs, app, shell, fancy,
    colorful; any other key (token, index, option, ...) is free-form context.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "error-title": "bold #FF4DA6",  # friendly pinky title
            "error-message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",
            "hint": "italic #9CE19C",
        }, "error-title")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self)
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class GrammarError(CommandException): ...
class ConfigError(CommandException): ...
class UnknownOptionError(CommandException): ...
class ArgumentError(CommandException): ...
class MissingArgumentError(ArgumentError): ...
class UnexpectedArgumentError(ArgumentError): ...
class BundlingError(ArgumentError): ...
class ConstraintViolationError(CommandException): ...
class DelegatedCallbackError(CommandException): ...


class CommandWarning(ABC, Warning):
    """
    Base warning: same message + options contract as CommandException.
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",
            "code": "bold #FFB400",  # amber fault code for warnings
            "warning-title": "bold #FFC2E0",
            "warning-message": "#D6D6DE",
            "hint-arrow": "#B8EFAF dim",
            "hint": "italic #B8EFAF",
        }, "warning-title")

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            return warnings.warn(self, stacklevel=len(inspect.stack()))
        console.print(self)

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ShadowedOptionWarning(CommandWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode, rendering happens via rich console; otherwise, exceptions are
      raised and warnings go through the warnings module.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()


def getdoc(code, /):
    """
    optional documentation fetch for a fault code.

    the host application may expose a __docs__ mapping in __main__ where keys
    are FaultCode instances and values are short documentation strings.
    when not found, returns None.
    """
    if not isinstance(code, FaultCode):
        raise TypeError("getdoc() argument must be a fault-code")
    try:
        return getattr(__import__("__main__"), "__docs__", {})[code]
    except KeyError:
        return None


__all__ = (
    "CommandException",
    "GrammarError",
    "ConfigError",
    "UnknownOptionError",
    "ArgumentError",
    "MissingArgumentError",
    "UnexpectedArgumentError",
    "BundlingError",
    "ConstraintViolationError",
    "DelegatedCallbackError",
    "CommandWarning",
    "ShadowedOptionWarning",
    "FaultCode",
    "trigger",
    "getdoc",
)
