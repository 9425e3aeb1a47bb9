"""
Per-kind converters: turn a raw argument (or its absence) into a typed write.

Contract
- convert(spec, raw, *, parser) dispatches on spec.kind and, on success,
  assigns spec.dest.value. Failures raise InvalidNumberError (without program
  context; the parser adds it when surfacing the fault). Help renders through
  the parser and raises ExitRequested.

Numeric semantics follow the C library scanners that command-line tools have
always used:
- integers: optional leading whitespace and sign; base 0 detects the radix
  from the prefix ("0x" → 16, "0" → 8, else 10); base 16 also accepts "0x".
- floats: decimal with optional exponent, hexadecimal ("0x1.8p3"), "inf",
  "infinity" and "nan".
- anything left after the number is an error; text without any number
  converts to 0 only when it is empty.
- signed values must fit 32 bits; unsigned values must fit 32 bits and only
  "-0" is accepted as a negative spelling.
"""
import re

from .faults import ExitRequested, FaultCode, InvalidNumberError
from .options import AssignString, Help, ParseDouble, ParseInt, ParseUnsigned, SetConstant

INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1
UINT_MAX = 2 ** 32 - 1

_DIGITS = "0123456789abcdefghijklmnopqrstuvwxyz"
_SPACES = " \t\n\v\f\r"

_FLOAT = re.compile(r"""
    [ \t\n\v\f\r]*
    (?P<number>
        [+-]?
        (?:
            0x(?:[0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)(?:p[+-]?[0-9]+)?
          | (?:[0-9]+\.?[0-9]*|\.[0-9]+)(?:e[+-]?[0-9]+)?
          | inf(?:inity)?
          | nan(?:\([0-9a-z_]*\))?
        )
    )
""", re.VERBOSE | re.IGNORECASE)


def _digit(char, /):
    return _DIGITS.find(char.lower()) if char.isascii() else -1


def scan_integer(text, base=0, /):
    """
    Scan an integer prefix of `text` the way strtol(3) does.

    Returns (value, rest) where `rest` is the unparsed tail. When no digit
    could be read, value is 0 and `rest` is the whole text.
    """
    index = len(text) - len(text.lstrip(_SPACES))
    negative = False
    if text[index:index + 1] in ("+", "-"):
        negative = text[index] == "-"
        index += 1

    if (
        base in (0, 16) and
        text[index:index + 2].lower() == "0x" and
        0 <= _digit(text[index + 2:index + 3] or "!") < 16
    ):
        base = 16
        index += 2
    elif base == 0:
        base = 8 if text[index:index + 1] == "0" else 10

    start = index
    while index < len(text) and 0 <= _digit(text[index]) < base:
        index += 1

    if index == start:
        return 0, text

    value = int(text[start:index], base)
    return -value if negative else value, text[index:]


def scan_float(text, /):
    """
    Scan a floating point prefix of `text` the way strtod(3) does.

    Returns (value, rest); see scan_integer() for the no-number case.
    """
    match = _FLOAT.match(text)
    if not match:
        return 0.0, text

    number = match["number"]
    unsigned = number.lstrip("+-").lower()
    if unsigned.startswith("0x"):
        value = float.fromhex(number)
    elif unsigned.startswith("nan"):
        value = float(number[:number.lower().index("nan") + 3])
    else:
        value = float(number)
    return value, text[match.end():]


def _invalid(raw, /):
    return InvalidNumberError(
        "invalid number \"%s\"" % raw,
        code=FaultCode.INVALID_NUMBER,
        token=raw,
    )


def parse_int(raw, base=0, /):
    value, rest = scan_integer(raw, base)
    if rest or not INT_MIN <= value <= INT_MAX:
        raise _invalid(raw)
    return value


def parse_unsigned(raw, base=0, /):
    value, rest = scan_integer(raw, base)
    if rest or not 0 <= value <= UINT_MAX:
        raise _invalid(raw)
    return value


def parse_double(raw, /):
    value, rest = scan_float(raw)
    if rest:
        raise _invalid(raw)
    return value


def convert(spec, raw=None, /, *, parser):
    """
    Run the converter selected by spec.kind.

    parameters
    - spec: OptionSpec that matched the current token.
    - raw: str | None
      argument text; None only for flags and for omitted optional arguments.
    - parser: Parser
      needed by Help to render the usage text on its output stream.

    raises
    - InvalidNumberError on conversion failures (destination untouched).
    - ExitRequested after Help has been rendered.
    """
    match spec.kind:
        case Help():
            parser.help()
            raise ExitRequested("help requested", code=FaultCode.EXIT_REQUESTED, status=0)
        case SetConstant(value):
            spec.dest.value = value
        case ParseInt(base):
            spec.dest.value = parse_int(raw, base)
        case ParseUnsigned(base):
            spec.dest.value = parse_unsigned(raw, base)
        case ParseDouble():
            spec.dest.value = parse_double(raw)
        case AssignString():
            spec.dest.value = raw
        case _:
            raise TypeError("convert() unknown option kind %r" % (spec.kind,))


__all__ = (
    "INT_MIN",
    "INT_MAX",
    "UINT_MAX",
    "scan_integer",
    "scan_float",
    "parse_int",
    "parse_unsigned",
    "parse_double",
    "convert",
)
