import sys

from rich.pretty import pprint

from cmdapp import *


def build(**options):
    app = App(
        authors=("Ethan Uppal", "Eric Yachbes"),
        year=2024,
        version=(1, 0, 0),
        versioning="All rights reserved.",
        synopses=("subcommand [OPTION]...", "[OPTION]... FILE"),
        **options,
    )

    app.opt("a", "aa", ".", descr="takes a required argument")
    app.opt("b", "bb", "*", descr="can be bundled with -c")
    app.opt("c", "cc", "*", descr="can be bundled with -b")
    app.opt("d", "dd", "<aO", descr="restricted companion of -a and -O")
    app.opt("O", "oo", "&a", descr="depends on -a")
    app.opt("A", "aaa", ".?", descr="takes an optional argument")

    @app.on_option
    def option(short, name, argument, context):
        context.append((short, name, argument))

    @app.on_argument
    def argument(argument, context):
        context.append(argument)

    return app


if __name__ == '__main__':
    seen = []
    pprint(build(shell=True).parse(sys.argv, seen))
    pprint(seen)
