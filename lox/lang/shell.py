"""Handles interactive/command-line mode for the lox interpreter. Uses cmd as backend."""

import cmd

from lox.syntax.scanner import Scanner
from lox.syntax.tokens import TokenType


class Shell(cmd.Cmd):
    """Lox interpreter shell."""
    intro = "lox interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    @staticmethod
    def is_open(source):
        """Whether or not source has unclosed braces or parentheses, meaning the input continues on the next line.
        Brackets inside strings and comments do not count.
        """
        types = [token.type for token in Scanner(source)]
        return (types.count(TokenType.LEFT_BRACE) > types.count(TokenType.RIGHT_BRACE)
                or types.count(TokenType.LEFT_PAREN) > types.count(TokenType.RIGHT_PAREN))

    def default(self, line):
        """Executes arbitrary lox source."""
        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            source = self._tmp_line + line + "\n"

            if Shell.is_open(source):
                self._tmp_line = source
                self.prompt = self.secondary_prompt
                return

            self._tmp_line = ""
            self.prompt = self._tmp_prompt

            self.sess.error_handler.reset()
            if self.sess.add(source):
                self.sess.run()

    def do_help(self, arg):
        """Prints a short introduction to the language instead of command docs."""
        print("Welcome to the lox interpreter!\n\n"
              "Lox is a small dynamically-typed scripting language with C-like syntax, lexical \n"
              "scoping and first-class functions. Definitions persist for the whole session.\n\n"
              "Try it out by typing 'fun add(a, b) { return a + b; }'. Next, try typing \n"
              "'print add(1, 2);'. This will print '3'.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:
            self.sess.error_handler.warn("'exit' takes no arguments, ignoring '{}'", arg)
        return True
