"""Runs skcalc programs from files or in command-line mode, inside the error handling context manager. Called from the
skcalc console script.
"""

import argparse

from skcalc import bench
from skcalc.lang.error import RECURSION_LIMIT, ErrorHandler
from skcalc.lang.session import Session
from skcalc.lang.shell import Shell


def build_parser():
    parser = argparse.ArgumentParser(prog="skcalc", description="lambda calculus evaluated through SK combinators")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--strategy", choices=sorted(Session.STRATEGIES), default="sk",
                        help="evaluate by SK translation (default) or directly in lambda calculus")
    parser.add_argument("--trace", action="store_true", help="print the SK translation of every statement")
    parser.add_argument("--recursion-limit", type=int, default=RECURSION_LIMIT,
                        help="interpreter recursion limit used while translating and reducing")
    parser.add_argument("--bench", type=int, metavar="N", help="benchmark the strategies with N iterations and exit")
    return parser


def main(argv=None):
    """Runs skcalc interpreter. Called from skcalc console script."""
    with ErrorHandler() as error_handler:
        args = build_parser().parse_args(argv)
        error_handler.trace = args.trace

        if args.bench is not None:
            bench.run(args.bench)

        elif args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False, strategy=args.strategy,
                           recursion_limit=args.recursion_limit)
            sess.run()

            while sess.results:
                print(sess.pop())

        else:
            sess = Session(error_handler, Session.SH_FILE, cmd_line=True, strategy=args.strategy,
                           recursion_limit=args.recursion_limit)
            Shell(sess).cmdloop()


if __name__ == "__main__":
    main()
