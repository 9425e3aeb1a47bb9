"""
Usage text for a Parser.

Layout
    Usage: PROG [OPTIONS...] SUMMARY
    <blank line>
      -h, --help                display this help and exit
      -n, --num=NUM             integer argument
      -t T                      short-only option with argument
          --ostring=OPT         long-only option

Every option line starts with two spaces, then the short form (or four blanks
when there is none), then the long form. Help text is aligned on a fixed
column; when the forms already reach it, the help text moves to the next line
(still aligned). Help text itself is never reflowed.
"""
from collections import defaultdict

from rich.console import Console
from rich.text import Text

from .utils import Unset, coalesce

COLUMN = 28


class HelpFormatter:
    """
    Render the usage line and the option table of a parser.

    Palette keys (override through a __styles__ mapping in __main__)
    - usage-label, program-name, usage-section
    - short-name, long-name, metavar, description
    """

    def __init__(self, program_name, positional_summary=None, registry=(), *, colorful=False):
        self.program_name = program_name
        self.positional_summary = positional_summary
        self.registry = registry
        self.colorful = colorful

    def _styler(self):
        styles = defaultdict(str, {
            "usage-label": "bold #00E6FF",
            "program-name": "bold #FF4D94",
            "usage-section": "bold #36C5F0",
            "short-name": "bold #22C55E",
            "long-name": "bold #00E6FF",
            "metavar": "bold #FFD600",
            "description": "#9CA3AF",
        } | getattr(__import__("__main__"), "__styles__", {}))

        def styler(style):
            return styles[style] if self.colorful else ""

        return styler

    def usage(self):
        styler = self._styler()
        line = Text.assemble(
            ("Usage: ", styler("usage-label")),
            (self.program_name, styler("program-name")),
            " ",
            ("[OPTIONS...]", styler("usage-section")),
        )
        if self.positional_summary:
            line.append(" ")
            line.append(self.positional_summary, styler("usage-section"))
        return line

    def entry(self, spec):
        """
        Build the help line(s) of one spec as a single Text (may contain a newline).
        """
        styler = self._styler()
        line = Text("  ")

        if spec.short is not None:
            line.append("-" + spec.short, styler("short-name"))
            if spec.long is not None:
                line.append(", ")
            elif spec.takes_argument:
                line.append(" ")
                line.append(spec.metavar, styler("metavar"))
            else:
                line.append("  ")
        else:
            line.append("    ")

        if spec.long is not None:
            line.append("--" + spec.long, styler("long-name"))
            if spec.takes_argument:
                line.append("=")
                line.append(spec.metavar, styler("metavar"))

        if spec.descr is not None:
            if line.cell_len >= COLUMN:
                line.append("\n")
                padding = COLUMN
            else:
                padding = COLUMN - line.cell_len
            line.append(" " * padding)
            line.append(spec.descr, styler("description"))

        return line

    def lines(self):
        yield self.usage()
        yield Text("")
        for spec in self.registry:
            yield self.entry(spec)

    def render(self, stream=Unset):
        """
        Print the help text on `stream` (stdout when not given).
        """
        console = Console(
            file=coalesce(stream),
            highlight=False,
            markup=False,
            emoji=False,
            soft_wrap=True,
            color_system="auto" if self.colorful else None,
        )
        for line in self.lines():
            console.print(line)

    def format(self):
        """
        Return the help text as a plain string.
        """
        return "".join(line.plain + "\n" for line in self.lines())


__all__ = (
    "COLUMN",
    "HelpFormatter",
)
