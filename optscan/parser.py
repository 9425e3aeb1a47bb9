"""
optscan parser layer: register options, scan an argument vector, dispatch converters.

What this module provides
- Parser: owns the option registry and implements the scanning state machine.
  • Registration helpers (add_help/add_set/add_int/add_unsigned/add_double/
    add_string/add) append a spec and return it as a handle.
  • parse(argv) scans options until the first positional and returns its index.
  • help(stream) renders the usage text.
- invoke(parser, argv): process-level runner that turns the scan outcome into
  an exit status (0 after help, 1 on user errors).

Syntax recognized
- "--name" / "--name=value"  long form ("=" required for arguments, forbidden for flags)
- "-c" / "-c value"          short form (argument always in the next token)
- "--"                       ends option scanning and is consumed
- "-"                        ends option scanning and is the first positional
- anything else              ends option scanning and is the first positional

Outcome
- success: index of the first positional (parser.remaining holds the tokens).
- ParseError (InvalidOptionError, MissingArgumentError, UnexpectedArgumentError,
  InvalidNumberError): a diagnostic was printed on the error stream; scanning
  stopped at the offending token.
- ExitRequested: an option (help) completed the run; the caller should exit
  with its status.

Quick start
    from optscan import Parser, Cell, invoke

    num = Cell(0)
    parser = Parser("tool", "FILES...")
    parser.add_help()
    parser.add_int("n", "num", num, descr="integer argument")

    if __name__ == "__main__":
        files = invoke(parser)          # sys.argv[1:]
        print(num.value, files)

Concurrency
- scan state (vector, cursor, state) lives on the instance and is reset by
  every parse(); a Parser must not be scanned from several threads at once.
"""
import os.path
import shlex
import sys
from collections.abc import Iterable
from enum import Enum

from .converters import convert
from .faults import *
from .help import HelpFormatter
from .options import *
from .registry import OptionRegistry
from .utils import *


class State(Enum):
    SCANNING = "scanning"
    EXPECTING_SHORT_ARG = "expecting-short-arg"
    POSITIONAL = "positional"
    FAILED = "failed"
    EXIT_REQUESTED = "exit-requested"


_TERMINALS = (State.POSITIONAL, State.FAILED, State.EXIT_REQUESTED)


def _program_name():
    """
    Default program name: __main__.__prog__, then the basename of sys.argv[0].
    """
    main = __import__("__main__")
    if isinstance(prog := getattr(main, "__prog__", None), str) and prog:
        return prog
    if sys.argv and sys.argv[0]:
        return os.path.basename(sys.argv[0])
    return "unknown"


def _tokenize(prompt):
    """
    Normalize a prompt into a list of tokens.

    - Unset: sys.argv[1:]
    - str: shell-like string, split with shlex.split
    - Iterable[str]: used as-is (tokens are not trimmed; "" is a positional)
    """
    if prompt is Unset:
        return list(sys.argv[1:])
    elif isinstance(prompt, str):
        return shlex.split(prompt)
    elif isinstance(prompt, Iterable):
        tokens = list(prompt)
        for token in tokens:
            if not isinstance(token, str):
                raise TypeError("parse() argument must be a string or an iterable of strings")
        return tokens
    raise TypeError("parse() argument must be a string or an iterable of strings")


class Parser:
    """
    Option registry plus the scanner that consumes an argument vector.

    Configuration
    - program_name: Unset | str
      Name used in diagnostics and usage; defaults to __main__.__prog__ or the
      basename of sys.argv[0] ("unknown" when neither exists).
    - positional_summary: Unset | str
      Appended to the usage line (e.g., "FILES...").
    - stdout / stderr: Unset | file-like
      Streams for help and diagnostics; Unset resolves to the process streams
      at render time.
    - colorful: Unset | bool
      Style help and diagnostics when they reach a terminal (default True).
    """

    def __init__(self, program_name=Unset, positional_summary=Unset, *, stdout=Unset, stderr=Unset, colorful=Unset):
        if not isinstance(program_name, str | Unset):
            raise TypeError("parser 'program_name' must be a string")
        elif isinstance(program_name, str) and not (program_name := program_name.strip()):
            raise ValueError("parser 'program_name' cannot be empty")
        if not isinstance(positional_summary, str | Unset):
            raise TypeError("parser 'positional_summary' must be a string")
        elif isinstance(positional_summary, str) and not (positional_summary := positional_summary.strip()):
            raise ValueError("parser 'positional_summary' cannot be empty")

        self.program_name = coalesce(program_name) or _program_name()
        self.positional_summary = coalesce(positional_summary)
        self.stdout = stdout
        self.stderr = stderr
        self.colorful = bool(coalesce(colorful, True))
        self.registry = OptionRegistry()

        self._argv = ()
        self._index = 0
        self._state = State.SCANNING
        self._pending = None
        self._result = None

    @property
    def state(self):
        return self._state

    @property
    def remaining(self):
        """
        Positional tokens of the last successful scan, in original order.
        """
        if self._result is None:
            return ()
        return tuple(self._argv[self._result:])

    def __repr__(self):
        return "Parser(program_name=%r, positional_summary=%r, options=%d)" % (
            self.program_name, self.positional_summary, len(self.registry)
        )

    # ── registration ─────────────────────────────────────────────────────────

    def add(self, short=None, long=None, /, kind=Unset, dest=Unset, *, metavar=Unset, descr=Unset):
        return self.registry.register(OptionSpec(short, long, kind, dest, metavar=metavar, descr=descr))

    def add_help(self, short="h", long="help", /, *, descr="display this help and exit"):
        return self.add(short, long, Help(), descr=descr)

    def add_set(self, short, long, value, dest, /, *, descr=Unset):
        return self.add(short, long, SetConstant(value), dest, descr=descr)

    def add_int(self, short, long, dest, /, *, base=0, metavar="NUM", descr=Unset):
        return self.add(short, long, ParseInt(base), dest, metavar=metavar, descr=descr)

    def add_unsigned(self, short, long, dest, /, *, base=0, metavar="NUM", descr=Unset):
        return self.add(short, long, ParseUnsigned(base), dest, metavar=metavar, descr=descr)

    def add_double(self, short, long, dest, /, *, metavar="NUM", descr=Unset):
        return self.add(short, long, ParseDouble(), dest, metavar=metavar, descr=descr)

    def add_string(self, short, long, dest, /, *, metavar="STRING", descr=Unset):
        return self.add(short, long, AssignString(), dest, metavar=metavar, descr=descr)

    # ── help ─────────────────────────────────────────────────────────────────

    def formatter(self):
        return HelpFormatter(self.program_name, self.positional_summary, self.registry, colorful=self.colorful)

    def help(self, stream=Unset):
        self.formatter().render(coalesce(stream, self.stdout))

    # ── faults ───────────────────────────────────────────────────────────────

    def trigger(self, fault, /, **options):
        """
        Stop the scan and surface `fault` with this parser's context.

        Exceptions print their diagnostic on the error stream and propagate to
        the caller of parse(); the state records which terminal was reached.
        """
        self._state = State.EXIT_REQUESTED if isinstance(fault, ExitRequested) else State.FAILED
        self._result = None
        trigger(fault, **options, program=self.program_name, stream=self.stderr, colorful=self.colorful)

    def _invalid_option(self, token):
        self.trigger(InvalidOptionError(
            "invalid option \"%s\"" % token,
            code=FaultCode.INVALID_OPTION,
            token=token,
            index=self._index - 1,
            hint="Try \"%s --help\" for more information." % self.program_name,
        ))

    def _missing_argument(self, token):
        self.trigger(MissingArgumentError(
            "\"%s\" requires an argument" % token,
            code=FaultCode.MISSING_ARGUMENT,
            token=token,
            index=self._index - 1,
        ))

    def _unexpected_argument(self, token):
        self.trigger(UnexpectedArgumentError(
            "\"%s\" does not take an argument" % token,
            code=FaultCode.UNEXPECTED_ARGUMENT,
            token=token,
            index=self._index - 1,
        ))

    # ── scanning ─────────────────────────────────────────────────────────────

    def _dispatch(self, spec, raw=None):
        try:
            convert(spec, raw, parser=self)
        except ScanException as fault:
            self.trigger(fault, index=self._index - 1)

    def _scan_long(self, token):
        if not (match := self.registry.find_by_long_prefix(token[2:])):
            return self._invalid_option(token)

        spec, remainder = match
        if not remainder:
            if spec.requirement is Requirement.REQUIRED:
                return self._missing_argument(token)
            return self._dispatch(spec)

        if spec.requirement is Requirement.NONE:
            return self._unexpected_argument(token)
        return self._dispatch(spec, remainder[1:])

    def _scan_short(self, token):
        if len(token) != 2 or not (spec := self.registry.find_by_short(token[1])):
            return self._invalid_option(token)

        if spec.requirement is Requirement.NONE:
            return self._dispatch(spec)

        self._pending = spec
        self._state = State.EXPECTING_SHORT_ARG

    def _step(self):
        """
        Consume one token according to the current (non-terminal) state.
        """
        if self._state is State.EXPECTING_SHORT_ARG:
            spec, self._pending = self._pending, None
            if self._index >= len(self._argv):
                return self._missing_argument("-" + spec.short)
            raw = self._argv[self._index]
            self._index += 1
            self._state = State.SCANNING
            return self._dispatch(spec, raw)

        if self._index >= len(self._argv):
            self._state = State.POSITIONAL
            return

        token = self._argv[self._index]
        self._index += 1

        if token == "--":
            self._state = State.POSITIONAL
        elif token.startswith("--"):
            self._scan_long(token)
        elif token == "-":
            self._index -= 1
            self._state = State.POSITIONAL
        elif token.startswith("-"):
            self._scan_short(token)
        else:
            self._index -= 1
            self._state = State.POSITIONAL

    def parse(self, argv=Unset, /):
        """
        Scan `argv` and run the converter of every recognized option.

        Parameters
        - argv: Unset | str | Iterable[str]
          Unset reads sys.argv[1:]; a str is split with shlex.split.

        Returns
        - int: index (into the tokenized argv) of the first positional argument.

        Raises
        - ParseError subclasses on the first user error (after printing it).
        - ExitRequested when an option finished the run (e.g., --help).
        - TypeError when argv is not a string or an iterable of strings.
        """
        self._argv = tuple(_tokenize(argv))
        self._index = 0
        self._state = State.SCANNING
        self._pending = None
        self._result = None

        while self._state not in _TERMINALS:
            self._step()

        self._result = self._index
        return self._index


def invoke(parser, argv=Unset, /):
    """
    Run `parser` the way a command-line program would.

    Returns
    - tuple[str, ...]: the positional arguments on success.

    Exits
    - with the requested status (0) when an option asks to stop (help).
    - with status 1 after a parse error (the diagnostic is already printed).
    """
    if not isinstance(parser, Parser):
        raise TypeError("invoke() first argument must be a parser")
    try:
        parser.parse(argv)
    except ExitRequested as request:
        sys.exit(request.status)
    except ParseError:
        sys.exit(1)
    return parser.remaining


__all__ = (
    "State",
    "Parser",
    "invoke",
)
