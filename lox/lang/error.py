"""Error handling for the lox language. Only GenericExceptions should be encountered while running a program: if
another type of error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Scan and parse errors are "static": they are collected, reported together and stop the program from being run.
Runtime errors halt execution at the point they are raised.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a lox error. Each '{}' in msg is filled with the
    corresponding entry of exprs, bolded when printed to a terminal.
    """
    kind = "error"

    def __init__(self, msg, exprs=None, line=None, lexeme=None, at_end=False, internal=False, column=None):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        if exprs:
            self.text = msg.format(*exprs)
            self.msg = msg.format(*(colored(expr, attrs=["bold"]) for expr in exprs))  # color expr snippets
        else:
            self.text = self.msg = msg  # messages such as "Expect '}' after block." are not templates

        self.line = line
        self.lexeme = lexeme  # offending source snippet, used for diagnosis
        self.column = column  # where lexeme starts on its line, if known
        self.at_end = at_end
        self.internal = internal

        super().__init__(self.text)

    @property
    def where(self):
        """Location of the error relative to its lexeme, in the form used by diagnostics."""
        if self.at_end:
            return " at end"
        if self.lexeme:
            return f" at '{self.lexeme}'"
        return ""

    def __str__(self):
        return self.text


class ScanError(GenericException):
    """Unterminated string or unrecognized character."""


class ParseError(GenericException):
    """Unexpected token for the grammar rule being parsed."""

    def __init__(self, token, msg):
        super().__init__(msg, line=token.line, lexeme=token.lexeme, at_end=token.is_eof, column=token.column)
        self.token = token


class LoxRuntimeError(GenericException):
    """Raised while evaluating a program. token is the operator, name or paren closest to the failure."""
    kind = "runtime error"

    def __init__(self, token, msg, exprs=None):
        super().__init__(msg, exprs, line=token.line, lexeme=token.lexeme, column=token.column)
        self.token = token


class ErrorHandler:
    """Context manager that will silently suppress Python errors and report lox errors instead."""
    ERROR = "red"
    WARNING = "magenta"

    STATIC_EXIT = 65   # scan/parse errors
    RUNTIME_EXIT = 70  # runtime errors

    def __init__(self, fatal=True, stream=None):
        self.fatal = fatal
        self.stream = stream
        self.sources = {}  # path: source lines, used to display the offending line

        self.path = None
        self.had_error = False
        self.had_runtime_error = False

    def register_file(self, path, source=""):
        """Registers path and its source. Subsequent errors are attributed to path."""
        self.path = path
        self.sources[path] = source.splitlines()

    def reset(self):
        """Clears error flags, so that an interactive session can keep going after an error."""
        self.had_error = False
        self.had_runtime_error = False

    def _print(self, text):
        print(text, file=self.stream if self.stream is not None else sys.stderr)

    def _source_line(self, line):
        lines = self.sources.get(self.path, [])
        if line is None or not 0 < line <= len(lines):
            return None
        return lines[line - 1]

    def diagnose(self, error, warning=False):
        """Returns the source line of error with its lexeme highlighted and underlined, or None if unavailable."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        line = self._source_line(error.line)
        if line is None or not error.lexeme or error.lexeme not in line:
            return None

        start = error.column
        if start is None or line[start:start + len(error.lexeme)] != error.lexeme:
            start = line.index(error.lexeme)
        end = start + len(error.lexeme)

        diagnosis = "  " + line[:start]
        diagnosis += colored(line[start:end], color, attrs=["bold"])
        diagnosis += line[end:] + "\n"

        diagnosis += "  " + " " * start
        diagnosis += colored("^" + "~" * (end - start - 1), color, attrs=["bold"])

        return diagnosis

    def format(self, error, warning=False):
        """Returns the full diagnostic message for error."""
        color = ErrorHandler.WARNING if warning else ErrorHandler.ERROR

        location = self.path if self.path else "<unknown>"
        if error.line is not None:
            location += f":{error.line}"

        error_msg = colored(f"{location}: ", attrs=["bold"])
        if error.internal:
            error_msg += colored("[internal] ", color, attrs=["bold"])

        kind = "warning" if warning else error.kind
        error_msg += colored(f"{kind}{error.where}: ", color, attrs=["bold"]) + error.msg

        diagnosis = None if error.internal else self.diagnose(error, warning)
        if diagnosis:
            error_msg += "\n" + diagnosis
        return error_msg

    def warn(self, *args, **kwargs):
        """Generates and prints a warning message based on args."""
        self._print(self.format(GenericException(*args, **kwargs), warning=True))

    def report(self, error):
        """Prints a static error without stopping, so that every scan/parse error is surfaced in one pass."""
        self.had_error = True
        self._print(self.format(error))

    def throw(self, error):
        """Prints error and, if fatal, exits with the exit code matching the kind of error."""
        if isinstance(error, LoxRuntimeError):
            self.had_runtime_error = True
        else:
            self.had_error = True

        self._print(self.format(error))

        if self.fatal:
            sys.exit(self.exit_code())

    def exit_code(self):
        """Process exit code for the errors seen so far."""
        if self.had_runtime_error:
            return ErrorHandler.RUNTIME_EXIT
        if self.had_error:
            return ErrorHandler.STATIC_EXIT
        return 0

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.had_runtime_error = True
            self.throw(GenericException("stack overflow: maximum recursion depth exceeded"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: '{}: {}'", (exc_type.__name__, str(exc_val)), internal=True))
            do_exit = True

        return not do_exit
