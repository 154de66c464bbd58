"""Runs numscript files, or the interactive shell. Called from the numscript console script.

Python version must be >=3.7, because tokens and locations are dataclasses.
"""

import argparse
import sys

from numscript.lang.error import ErrorHandler
from numscript.lang.session import Session
from numscript.lang.shell import Shell


def dump(sess, tokens, ast):
    """Prints the tokens and/or syntax trees of sess instead of running it."""
    if tokens:
        for token in sess.tokens:
            print(f"{token.loc}: {token!r}")
    if ast:
        for stmt in sess.to_exec:
            print(stmt.display())


def main(argv=None):
    """Runs numscript interpreter."""
    assert sys.version_info >= (3, 7), "numscript cannot be run with python < 3.7"

    parser = argparse.ArgumentParser(prog="numscript")
    parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
    parser.add_argument("--trace", help="print function substitutions and loop iterations", action="store_true")
    parser.add_argument("--tokens", help="print the token stream instead of running", action="store_true")
    parser.add_argument("--ast", help="print the syntax trees instead of running", action="store_true")
    args = parser.parse_args(argv)

    with ErrorHandler(trace=args.trace) as error_handler:
        if args.file is not None:
            sess = Session(error_handler, args.file)
            if args.tokens or args.ast:
                dump(sess, args.tokens, args.ast)
            else:
                sess.run()

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True, output=None)).cmdloop()


if __name__ == "__main__":
    main()
