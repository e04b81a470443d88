"""Runs lox source files, or starts command-line mode when no file is given. Called from the lox executable script.

Exit codes: 0 on success, 65 if the file had scan/parse errors, 70 if a runtime error occurred.
"""

import argparse
import sys

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


def main(argv=None):
    """Runs lox interpreter. Called from lox executable script."""
    with ErrorHandler() as error_handler:
        parser = argparse.ArgumentParser(prog="lox")
        parser.add_argument("file", help="file to interpret and run (if empty, goes to command-line mode)", nargs="?")
        parser.add_argument("--ast", action="store_true", help="print the parsed program instead of running it")
        args = parser.parse_args(argv)

        if args.ast and args.file is None:
            parser.error("--ast requires a file")

        if args.file is not None:
            sess = Session(error_handler, args.file, cmd_line=False)

            if args.ast:
                tree = sess.dump()
                if tree is not None:
                    print(tree)
            elif sess.add():
                sess.run()

            if error_handler.exit_code():
                sys.exit(error_handler.exit_code())

        else:
            Shell(Session(error_handler, Session.SH_FILE, cmd_line=True)).cmdloop()


if __name__ == "__main__":
    main()
