"""
optscan faults (errors and warnings) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
- ScanException: base type carrying message + options, able to render itself
  as a one-line diagnostic ("<program>: <message>") plus an optional hint.
- ParseError family: user errors found while scanning (the scan stops on the first).
- ExitRequested: terminal success that asks the caller to stop (e.g., after help).
- ScanWarning: non-fatal issues raised at registration time through `warnings`.
- trigger(): central entry point to surface any fault with runtime context.

Integration
- The parser builds a fault at the point of detection, then calls
  trigger(fault, program=..., stream=...). The fault prints its diagnostic on
  the error stream and raises itself; nothing here terminates the process.
"""
import inspect
import warnings
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.text import Text

from .utils import Unset


class FaultCode(IntEnum):
    """
    canonical fault codes used across the scanner (stable identifiers).

    grouping
    - option resolution (2110x): INVALID_OPTION, MISSING_ARGUMENT, UNEXPECTED_ARGUMENT
    - conversion (2120x): INVALID_NUMBER
    - control (2130x): EXIT_REQUESTED
    - warnings (2210x): IGNORED_OPTIONAL_ARGUMENT
    """
    # --- option resolution errors ---
    INVALID_OPTION              = 21101
    MISSING_ARGUMENT            = 21102
    UNEXPECTED_ARGUMENT         = 21103

    # --- conversion errors ---
    INVALID_NUMBER              = 21201

    # --- control ---
    EXIT_REQUESTED              = 21301

    # --- warnings ---
    IGNORED_OPTIONAL_ARGUMENT   = 22101


def _console(options):
    """
    build a plain console over the fault's stream (stderr when none was given).
    """
    stream = options.get("stream", Unset)
    return Console(
        file=stream if stream is not Unset else None,
        stderr=stream is Unset,
        highlight=False,
        markup=False,
        emoji=False,
        soft_wrap=True,
        color_system="auto" if options.get("colorful", False) else None,
    )


class ScanException(Exception):
    """
    base class of every fault raised by a scan.

    attributes
    - message: short, lowercased, human-readable description.
    - options: read-only mapping of context (code, program, hint, token, index, ...).
    """

    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __rich__(self):
        styles = defaultdict(str, {
            "diagnostic-program": "bold #FF4D94",
            "diagnostic-message": "#C8C8D0",
            "hint": "italic #9CE19C",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.options.get("colorful", False) else ""

        program = self.options.get("program", "unknown")
        lines = [Text.assemble(
            (program, styler("diagnostic-program")),
            ": ",
            (str(self), styler("diagnostic-message")),
        )]
        if hint := self.options.get("hint"):
            lines.append(Text(hint, styler("hint")))
        return Group(*lines)

    def __trigger__(self) -> None:
        _console(self.options).print(self)
        raise self from None

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class ParseError(ScanException): ...
class InvalidOptionError(ParseError): ...
class MissingArgumentError(ParseError): ...
class UnexpectedArgumentError(ParseError): ...
class InvalidNumberError(ParseError): ...


class ExitRequested(ScanException):
    """
    terminal, non-error outcome: the scan finished an action (such as printing
    help) and asks the caller to stop with `code` as the exit status.
    """

    @property
    def status(self):
        return self.options.get("status", 0)

    def __trigger__(self) -> None:
        raise self from None


class ScanWarning(Warning):
    def __init__(self, message=Unset, /, **options):
        assert isinstance(message, str | Unset)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    def __str__(self):
        return str(self.message) if self.message is not Unset else ""

    def __trigger__(self) -> None:
        warnings.warn(self, stacklevel=len(inspect.stack()))

    def __replace__(self, *unused, **overrides):
        assert not unused, "positional arguments are not allowed"
        return type(self)(self.message, **{**self.options, **overrides})


class IgnoredOptionalArgumentWarning(ScanWarning): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see base classes).
    - options are merged into a copy of the fault via __replace__(**options)
      before triggering.
    - exceptions print their diagnostic (if any) and are raised; warnings go
      through the warnings module.

    typical options
    - code, program, hint, token, index, stream, colorful.
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
    "ScanException",
    "ParseError",
    "InvalidOptionError",
    "MissingArgumentError",
    "UnexpectedArgumentError",
    "InvalidNumberError",
    "ExitRequested",
    "ScanWarning",
    "IgnoredOptionalArgumentWarning",
    "trigger",
)
