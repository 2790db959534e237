"""
fluentflag faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every issue the package
  can surface. Codes are grouped by domain so logs and searches stay predictable.
- FlagException: base type that carries message + options and knows how to
  render itself through rich.
- trigger(): central entry point to surface a fault (raise it, or print it in
  shell mode).

Two families
- ParseError: recoverable, user-input driven faults raised while a flag set
  parses its arguments (malformed values, unknown flags, missing values).
  Embedding applications catch these, print usage and stop.
- DeclarationError: programmer faults raised while flags are declared or
  bound (redefinition, unbuilt flag, unsupported type). They must not be
  caught and continued: the flag set would be left half configured. Let them
  propagate to process exit.

Integration
- The codec raises MalformedValueError / UnsupportedTypeError.
- FlagSet wraps value errors with the flag and position, then either raises,
  prints, or exits according to its on_error mode.
- FlagBuilder raises UnbuiltFlagError / FlagAlreadyBuiltError directly.
"""
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes (stable identifiers).

    grouping
    - parse faults (211xx)
      • MALFORMED_TOKEN, UNKNOWN_FLAG, MISSING_VALUE, MALFORMED_VALUE, HELP_REQUESTED
    - declaration faults (212xx)
      • FLAG_REDEFINED, UNBUILT_FLAG, FLAG_ALREADY_BUILT, UNSUPPORTED_TYPE
    """
    # --- parse faults (211xx) ---
    MALFORMED_TOKEN    = 21101
    UNKNOWN_FLAG       = 21102
    MISSING_VALUE      = 21103
    MALFORMED_VALUE    = 21104
    HELP_REQUESTED     = 21105

    # --- declaration faults (212xx) ---
    FLAG_REDEFINED     = 21201
    UNBUILT_FLAG       = 21202
    FLAG_ALREADY_BUILT = 21203
    UNSUPPORTED_TYPE   = 21204

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


def _program():
    return getattr(__import__("__main__"), "__prog__", os.path.basename(sys.argv[0]) if sys.argv else "")


def _render(fault, palette):
    styles = defaultdict(str, palette | getattr(__import__("__main__"), "__styles__", {}))
    colorful = fault.options.get("colorful", True)

    def text(fragment, style=""):
        if not fragment:
            return Text("")
        return Text(str(fragment), styles[style] if colorful else "")

    header = Text.assemble(
        "[ ",
        text(fault.options.get("prog") or _program(), "prog-name"),
        " — ",
        text(fault.code.normalize() if fault.code is not None else "", "code"),
        " | ",
        text(fault.options.get("title", type(fault).__name__).title(), "title"),
        " ]"
    )
    renders = [header, text(fault.message, "message")]
    if hint := fault.options.get("hint"):
        renders.append(Text.assemble(text(" → ", "hint-arrow"), text(hint, "hint")))
    return Group(*renders)


class FlagException(Exception):
    """
    base type of every fluentflag error.

    options
    - title, code, hint: presentation (see __rich__).
    - shell: when true, trigger() prints instead of raising.
    - deferred: with shell, print and return instead of exiting.
    - status: exit status used in shell mode (default 2).
    - any other context the reporter wants to keep (flag, raw, index, …).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(*(() if message is Unset else (message,)))
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        return _render(self, {
            "prog-name": "bold #E6E6F0",  # near-white program name
            "code": "bold #00E5FF",  # neon cyan fault code
            "title": "bold #FF4DA6",  # friendly pinky title
            "message": "#C8C8D0",  # soft light gray message
            "hint-arrow": "#9CE19C dim",  # gentle green arrow
            "hint": "italic #9CE19C",  # gentle green hint text
        })

    def __trigger__(self):
        if not self.options.get("shell", False):
            raise self
        self.options.get("console", console).print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(self.options.get("status", 2))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        fault = type(self)(self.message, **{**self.options, **overrides})
        fault.__cause__ = self.__cause__
        return fault


class ParseError(FlagException): ...
class MalformedTokenError(ParseError): ...
class UnknownFlagError(ParseError): ...
class MissingValueError(ParseError): ...
class MalformedValueError(ParseError, ValueError): ...
class HelpRequested(ParseError): ...


class DeclarationError(FlagException): ...
class FlagRedefinedError(DeclarationError): ...
class UnbuiltFlagError(DeclarationError): ...
class FlagAlreadyBuiltError(DeclarationError): ...
class UnsupportedTypeError(DeclarationError, TypeError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see FlagException).
    - options are merged into the fault via __replace__(**options) before triggering.
    - in shell mode the fault is rendered on stderr via rich; otherwise it is raised.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    fault.__replace__(**options).__trigger__()

__all__ = (
    "FaultCode",
    "FlagException",
    "ParseError",
    "MalformedTokenError",
    "UnknownFlagError",
    "MissingValueError",
    "MalformedValueError",
    "HelpRequested",
    "DeclarationError",
    "FlagRedefinedError",
    "UnbuiltFlagError",
    "FlagAlreadyBuiltError",
    "UnsupportedTypeError",
    "trigger",
)
