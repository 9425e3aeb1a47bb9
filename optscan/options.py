r"""
optscan option descriptors.

Overview
- Requirement: whether an option takes no argument, requires one, or accepts
  one optionally (optional arguments are only honored through the long form).
- Kinds (tagged variants selecting the converter, payload type-checked with it)
  • Help()                 → render help and request exit
  • SetConstant(value)     → write a constant integer
  • ParseInt(base)         → signed 32-bit integer
  • ParseUnsigned(base)    → unsigned 32-bit integer
  • ParseDouble()          → floating point
  • AssignString()         → the raw argument text (or None when omitted)
- Cell: minimal caller-owned destination box with a writable `value`.
- OptionSpec: immutable-after-construction descriptor of one recognized option.

Metadata (sanitized on construction)
- short: None | single character, neither whitespace, "-" nor "=".
- long: None | non-empty string without whitespace or "=", not starting with "-".
  At least one of short/long is required.
- metavar: placeholder shown in help; only for argument-taking kinds.
- descr: Unset | non-empty string (short help line).
- dest: object with a writable `value` attribute; Help takes none.

Quick example:
    >>> from optscan import Parser, Cell
    >>> count = Cell(0)
    >>> parser = Parser("tool")
    >>> spec = parser.add_int("n", "num", count, descr="how many")
    >>> spec.requirement
    <Requirement.REQUIRED: 'required'>
"""
import functools
import operator
import re
from enum import Enum
from typing import NamedTuple

from .faults import FaultCode, IgnoredOptionalArgumentWarning, trigger
from .utils import *


class Requirement(Enum):
    NONE = "none"
    REQUIRED = "required"
    OPTIONAL = "optional"


class Help(NamedTuple):
    pass


class SetConstant(NamedTuple):
    value: int


class ParseInt(NamedTuple):
    base: int = 0


class ParseUnsigned(NamedTuple):
    base: int = 0


class ParseDouble(NamedTuple):
    pass


class AssignString(NamedTuple):
    pass


KINDS = (Help, SetConstant, ParseInt, ParseUnsigned, ParseDouble, AssignString)

# kinds that never consume an argument
_FLAGS = (Help, SetConstant)


class Cell:
    """
    Caller-owned destination for a converted value.

    The scanner only ever assigns `cell.value`; any other object exposing a
    writable `value` attribute can be used in its place.
    """
    __slots__ = ("value",)

    def __init__(self, value=None, /):
        self.value = value

    def __repr__(self):
        return "Cell(%r)" % (self.value,)


class SpecType(type):
    """
    Metaclass exposing __introspectable__ fields as read-only properties and
    giving specs a stable __repr__/__rich_repr__.
    """

    def __new__(cls, name, bases, namespace, **options):
        self = super().__new__(
            cls,
            name,
            bases,
            namespace | {
                "__typename__": re.sub(r"(?<!^)(?=[A-Z])", r"-", name).lower(),
            } | {
                name: mirror(name) for name in namespace.get("__introspectable__", ())
            },
        )

        @rename("__repr__")
        def __repr__(self):
            return "%s(%s)" % (
                type(self).__typename__,
                ", ".join(map(functools.partial(operator.mod, "%s=%r"), self.__rich_repr__())),
            )
        self.__repr__ = __repr__

        @rename("__rich_repr__")
        def __rich_repr__(self):
            for name in type(self).__introspectable__:
                yield name, getattr(self, name)
        self.__rich_repr__ = __rich_repr__

        return self


def _sanitize_forms(cls, metadata, /):
    """
    Internal: validate the short and long forms of a spec.

    Raises
    - TypeError: when a form has the wrong type or both forms are absent.
    - ValueError: when a form cannot be typed as a command-line token.
    """
    short, long = metadata["short"], metadata["long"]

    if short is not None:
        if not isinstance(short, str):
            raise TypeError(f"{cls.__typename__} short form must be a string")
        elif len(short) != 1 or short.isspace() or short in "-=":
            raise ValueError(f"{cls.__typename__} short form must be a single character other than '-' and '='")

    if long is not None:
        if not isinstance(long, str):
            raise TypeError(f"{cls.__typename__} long form must be a string")
        elif not re.fullmatch(r"[^\s=-][^\s=]*", long):
            raise ValueError(f"{cls.__typename__} long form must be a non-empty word without whitespace, '=' or leading '-'")

    if short is None and long is None:
        raise TypeError(f"{cls.__typename__} must specify at least a short or a long form")


def _sanitize_kind(cls, metadata, /):
    """
    Internal: validate the kind payload, placeholder and destination together.

    Rules
    - kind must be one of the variants listed in KINDS.
    - numeric bases are 0 (auto-detect) or 2..36.
    - SetConstant carries an int.
    - flags (Help/SetConstant) take no metavar; argument-taking kinds default
      to "NUM" (numbers) or "STRING" (text).
    - every kind but Help needs a destination with a writable `value`.
    """
    kind = metadata["kind"]
    if not isinstance(kind, KINDS):
        raise TypeError(f"{cls.__typename__} kind must be one of %s" % ", ".join(x.__name__ for x in KINDS))

    match kind:
        case ParseInt(base) | ParseUnsigned(base):
            if not isinstance(base, int) or isinstance(base, bool):
                raise TypeError(f"{cls.__typename__} base must be an integer")
            elif base != 0 and not 2 <= base <= 36:
                raise ValueError(f"{cls.__typename__} base must be 0 or between 2 and 36")
        case SetConstant(value):
            if not isinstance(value, int):
                raise TypeError(f"{cls.__typename__} constant must be an integer")

    if not isinstance(metavar := metadata["metavar"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'metavar' must be a string")
    elif isinstance(metavar, str) and not (metavar := metavar.strip()):
        raise ValueError(f"{cls.__typename__} 'metavar' cannot be empty")

    if isinstance(kind, _FLAGS):
        if metavar is not Unset:
            raise TypeError(f"{cls.__typename__} {type(kind).__name__} does not take an argument placeholder")
        metadata["requirement"] = Requirement.NONE
    else:
        metadata["requirement"] = Requirement.REQUIRED
        metavar = coalesce(metavar, "STRING" if isinstance(kind, AssignString) else "NUM")
    metadata["metavar"] = coalesce(metavar)

    dest = metadata["dest"]
    if isinstance(kind, Help):
        if dest is not Unset:
            raise TypeError(f"{cls.__typename__} Help does not write a destination")
    elif dest is Unset or not hasattr(dest, "value"):
        raise TypeError(f"{cls.__typename__} destination must expose a writable 'value' attribute")
    metadata["dest"] = coalesce(dest)


def _sanitize_descr(cls, metadata, /):
    if not isinstance(descr := metadata["descr"], str | Unset):
        raise TypeError(f"{cls.__typename__} 'descr' must be a string")
    elif isinstance(descr, str) and not (descr := descr.strip()):
        raise ValueError(f"{cls.__typename__} 'descr' cannot be empty")
    metadata["descr"] = coalesce(descr)


class OptionSpec(metaclass=SpecType):
    """
    Descriptor of one recognized option.

    Specs are created through the registration helpers of a Parser, which
    append them to its registry and hand them back as handles. The only
    mutation allowed afterwards is optional(), which relaxes a required
    argument into an optional one.

    Properties (read-only)
    - short, long, requirement, metavar, descr, kind, dest
    """

    __introspectable__ = (
        "short",
        "long",
        "requirement",
        "metavar",
        "descr",
        "kind",
        "dest",
    )

    def __init__(self, short=None, long=None, /, kind=Unset, dest=Unset, *, metavar=Unset, descr=Unset):
        metadata = {
            "short": short,
            "long": long,
            "kind": kind,
            "dest": dest,
            "metavar": metavar,
            "descr": descr,
        }
        _sanitize_forms(type(self), metadata)
        _sanitize_kind(type(self), metadata)
        _sanitize_descr(type(self), metadata)

        for name, object in metadata.items():
            setattr(self, "_" + name, object)

    @property
    def takes_argument(self):
        return self._requirement is not Requirement.NONE

    def optional(self):
        """
        Make the argument optional when the option is given in its long form.

        `--name` then reaches the converter without an argument (the string
        destination is set to None), while `--name=value` still assigns the value.
        The short form keeps requiring its argument; a warning says so when the
        spec has one.

        Returns the same spec, so calls can be chained after registration.

        Raises
        - TypeError: when the option does not take a string argument.
        """
        if not isinstance(self._kind, AssignString):
            raise TypeError(f"{type(self).__typename__} only string arguments can be optional")
        self._requirement = Requirement.OPTIONAL
        if self._short is not None:
            trigger(IgnoredOptionalArgumentWarning(
                "the argument of -%s stays required; only --%s accepts an omitted argument" % (
                    self._short, self._long
                ) if self._long is not None else
                "the argument of -%s stays required; optional arguments need a long form" % self._short,
                code=FaultCode.IGNORED_OPTIONAL_ARGUMENT,
            ))
        return self


__all__ = (
    "Requirement",
    "Help",
    "SetConstant",
    "ParseInt",
    "ParseUnsigned",
    "ParseDouble",
    "AssignString",
    "KINDS",
    "Cell",
    "OptionSpec",
)
