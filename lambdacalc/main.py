"""Uses implementation of the lambdacalc language to interpret .lc files, single expressions, or run in command-line
mode. Also uses error handling context manager. Called from the lambdacalc console script.
"""

import argparse
import sys

from lambdacalc.lang.error import ErrorHandler
from lambdacalc.lang.session import Session
from lambdacalc.lang.shell import Shell
from lambdacalc.log import configure_logging


def build_parser():
    parser = argparse.ArgumentParser(prog="lambdacalc", description="Lambda calculus interpreter")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("-e", "--expr", help="program to run instead of a file", nargs="+")
    parser.add_argument("-v", "--verbose", help="print every reduction step", action="store_true")
    parser.add_argument("-t", "--typecheck", help="type check programs before running them", action="store_true")
    parser.add_argument("--no-color", help="disable colored output", action="store_true")
    parser.add_argument("--debug", help="log interpreter internals to stderr", action="store_true")
    return parser


def main(argv=None):
    """Runs lambdacalc interpreter. Called from lambdacalc console script."""
    args = build_parser().parse_args(argv)
    configure_logging(args.debug)

    with ErrorHandler() as error_handler:
        sess = Session(error_handler, verbose=args.verbose, typecheck=args.typecheck, color=not args.no_color)

        if args.expr:
            sess.output(sess.run(" ".join(args.expr)))

        elif args.file is not None:
            sess.output(sess.load(args.file))

        else:
            Shell(sess).cmdloop()

    return 0


if __name__ == "__main__":
    sys.exit(main())
