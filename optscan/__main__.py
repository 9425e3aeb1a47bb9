"""
Demonstration program for optscan.

Try, for example:

    python -m optscan -z
    python -m optscan --help
    python -m optscan -1 -u 0xc -f 1.23 -s xyzzy foo bar
"""
from rich.console import Console

from optscan import Cell, Parser, invoke
from optscan.utils import Unset


def build(program_name="optscan"):
    """
    Build the sample option set and return (parser, cells).
    """
    cells = {
        "int": Cell(0),
        "unsigned": Cell(0),
        "double": Cell(0.0),
        "string": Cell(None),
    }

    parser = Parser(program_name, "ARGS...")
    parser.add_help()

    # integer presets, meant for boolean or multiple choice options
    parser.add_set("1", "1", 1, cells["int"], descr="set 1")
    parser.add_set("2", "2", 2, cells["int"], descr="set 2")
    parser.add_set("3", "3", 3, cells["int"], descr="set 3")

    parser.add_int("i", "int", cells["int"], descr="integer argument")
    parser.add_unsigned("u", "unsigned", cells["unsigned"], descr="unsigned argument")
    parser.add_unsigned("d", "decimal", cells["unsigned"], base=10, descr="unsigned decimal argument")
    parser.add_unsigned("x", "hex", cells["unsigned"], base=16, descr="unsigned hexadecimal argument")
    parser.add_double("f", "float", cells["double"], descr="floating point argument")

    parser.add_string("s", "string", cells["string"], descr="string argument")
    parser.add_string("t", None, cells["string"], metavar="T", descr="short string argument")

    # only the long form can omit the argument (the string becomes None)
    parser.add_string(None, "ostring", cells["string"], metavar="OPT", descr="optional string argument").optional()

    return parser, cells


def main(argv=Unset):
    parser, cells = build()
    remaining = invoke(parser, argv)

    console = Console(highlight=False, markup=False, emoji=False, soft_wrap=True)
    console.print("int:            %d" % cells["int"].value)
    console.print("unsigned:       %d" % cells["unsigned"].value)
    console.print("double:         %f" % cells["double"].value)
    console.print("string:         %s" % cells["string"].value)
    console.print("remaining args:" + "".join(" " + arg for arg in remaining))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
