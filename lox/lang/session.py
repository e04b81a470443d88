"""Session control for the lox language: drives source text through the scanner, parser and interpreter, either for
a whole file or line by line in command-line mode.
"""

from lox.lang.error import GenericException, LoxRuntimeError
from lox.runtime.interpreter import Interpreter
from lox.syntax.parser import Parser
from lox.syntax.printer import AstPrinter
from lox.syntax.scanner import Scanner


class Session:
    """Governs a lox session. One Interpreter is kept for the whole session, so globals defined by earlier input stay
    visible to later input.
    """
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line=False, out=None, source=None):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode

        self.interpreter = Interpreter(out)
        self.to_exec = []  # parsed programs waiting to be run

        if self.cmd_line:
            self.error_handler.fatal = False

        if source is None and path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    source = file.read()
            except OSError:
                raise GenericException("'{}' could not be opened", path)
        elif source is None and not cmd_line:
            raise GenericException("'{}' is a reserved filename", Session.SH_FILE)

        self.error_handler.register_file(path, source or "")
        self.source = source

    @property
    def had_error(self):
        return self.error_handler.had_error

    @property
    def had_runtime_error(self):
        return self.error_handler.had_runtime_error

    @staticmethod
    def parse(source):
        """Scans and parses source. Returns (statements, errors). If scanning failed, the scan errors are returned
        alone and nothing is parsed. Otherwise errors are the parse errors in line order. statements must not be run
        if errors is non-empty.
        """
        scanner = Scanner(source)
        tokens = scanner.scan_tokens()
        if scanner.errors:
            return [], scanner.errors

        parser = Parser(tokens)
        statements = parser.parse()
        return statements, sorted(parser.errors, key=lambda error: error.line)

    def add(self, source=None):
        """Parses source (the session's file if None) and queues it to be run. Every scan/parse error is reported and
        the program is not queued if there was any. Returns whether or not source was queued.
        """
        if source is None:
            source = self.source
        elif self.cmd_line:
            self.error_handler.register_file(self.path, source)  # line numbers restart with each input

        statements, errors = Session.parse(source)
        for error in errors:
            self.error_handler.report(error)

        if errors:
            return False

        self.to_exec.append(statements)
        return True

    def run(self):
        """Runs queued programs in order. A runtime error stops the current program and is thrown to the handler."""
        while self.to_exec:
            statements = self.to_exec.pop(0)
            try:
                self.interpreter.interpret(statements)
            except LoxRuntimeError as error:
                self.to_exec.clear()
                self.error_handler.throw(error)

    def dump(self, source=None):
        """Returns the parsed program of source as printed AST, or None if it had errors (which are reported)."""
        statements, errors = Session.parse(self.source if source is None else source)
        for error in errors:
            self.error_handler.report(error)
        if errors:
            return None
        return AstPrinter().print_program(statements)
