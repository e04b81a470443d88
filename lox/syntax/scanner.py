"""Lexical analysis for the lox language. Converts source text into a lazy stream of tokens.

Lexical grammar, loosely:

```
NUMBER      ::= DIGIT+ ( "." DIGIT+ )?       ; no exponents, no leading "."
STRING      ::= "\"" <any char except ">* "\""  ; may span lines, no escapes
IDENTIFIER  ::= ALPHA ( ALPHA | DIGIT )*      ; keywords take precedence
ALPHA       ::= "a" ... "z" | "A" ... "Z" | "_"
DIGIT       ::= "0" ... "9"

<comment>   ::= "//" <char>* "\n"
```

Errors never abort scanning: each one is recorded in Scanner.errors and the scanner moves on, so that a single pass
surfaces every lexical problem in the file.
"""

from lox.lang.error import ScanError
from lox.syntax.tokens import KEYWORDS, Token, TokenType


class Scanner:
    """Iterable over the tokens of source. The last token yielded is always a single EOF."""
    SINGLE = {
        "(": TokenType.LEFT_PAREN,
        ")": TokenType.RIGHT_PAREN,
        "{": TokenType.LEFT_BRACE,
        "}": TokenType.RIGHT_BRACE,
        ",": TokenType.COMMA,
        ".": TokenType.DOT,
        "-": TokenType.MINUS,
        "+": TokenType.PLUS,
        ";": TokenType.SEMICOLON,
        "*": TokenType.STAR,
    }
    # char: (type if followed by "=", type otherwise)
    DOUBLE = {
        "!": (TokenType.BANG_EQUAL, TokenType.BANG),
        "=": (TokenType.EQUAL_EQUAL, TokenType.EQUAL),
        "<": (TokenType.LESS_EQUAL, TokenType.LESS),
        ">": (TokenType.GREATER_EQUAL, TokenType.GREATER),
    }
    WHITESPACE = " \r\t"

    def __init__(self, source):
        self.source = source
        self.errors = []

        self.start = 0
        self.current = 0
        self.line = 1
        self.line_start = 0  # offset of the first character of the current line
        self.column = 0

    def __iter__(self):
        while not self.is_at_end():
            self.start = self.current
            self.column = self.start - self.line_start
            token = self.scan_token()
            if token is not None:
                yield token

        yield Token(TokenType.EOF, "", None, self.line, self.current - self.line_start)

    def scan_tokens(self):
        """Scans all of source at once. Convenience wrapper around iteration."""
        return list(self)

    def scan_token(self):
        """Scans a single lexeme starting at self.start. Returns None for lexemes that produce no token."""
        char = self.advance()

        if char in Scanner.SINGLE:
            return self.make_token(Scanner.SINGLE[char])

        if char in Scanner.DOUBLE:
            matched, single = Scanner.DOUBLE[char]
            return self.make_token(matched if self.match("=") else single)

        if char == "/":
            if self.match("/"):
                while self.peek() != "\n" and not self.is_at_end():
                    self.advance()
                return None
            return self.make_token(TokenType.SLASH)

        if char in Scanner.WHITESPACE:
            return None

        if char == "\n":
            self.new_line()
            return None

        if char == "\"":
            return self.string()

        if Scanner.is_digit(char):
            return self.number()

        if Scanner.is_alpha(char):
            return self.identifier()

        self.errors.append(ScanError("Unexpected character.", line=self.line, lexeme=char, column=self.column))
        return None

    def string(self):
        start_line = self.line
        while self.peek() != "\"" and not self.is_at_end():
            self.advance()
            if self.source[self.current - 1] == "\n":
                self.new_line()

        if self.is_at_end():
            lexeme = self.source[self.start:self.current].split("\n", 1)[0]
            self.errors.append(ScanError("Unterminated string.", line=start_line, lexeme=lexeme, column=self.column))
            return None

        self.advance()  # closing "
        return self.make_token(TokenType.STRING, self.source[self.start + 1:self.current - 1], line=start_line)

    def number(self):
        while Scanner.is_digit(self.peek()):
            self.advance()

        if self.peek() == "." and Scanner.is_digit(self.peek_next()):
            self.advance()
            while Scanner.is_digit(self.peek()):
                self.advance()

        return self.make_token(TokenType.NUMBER, float(self.source[self.start:self.current]))

    def identifier(self):
        while Scanner.is_alpha(self.peek()) or Scanner.is_digit(self.peek()):
            self.advance()

        text = self.source[self.start:self.current]
        return self.make_token(KEYWORDS.get(text, TokenType.IDENTIFIER))

    def make_token(self, token_type, literal=None, line=None):
        text = self.source[self.start:self.current]
        return Token(token_type, text, literal, self.line if line is None else line, self.column)

    def new_line(self):
        self.line += 1
        self.line_start = self.current

    def is_at_end(self):
        return self.current >= len(self.source)

    def advance(self):
        char = self.source[self.current]
        self.current += 1
        return char

    def match(self, expected):
        if self.is_at_end() or self.source[self.current] != expected:
            return False
        self.current += 1
        return True

    def peek(self):
        return "\0" if self.is_at_end() else self.source[self.current]

    def peek_next(self):
        if self.current + 1 >= len(self.source):
            return "\0"
        return self.source[self.current + 1]

    @staticmethod
    def is_digit(char):
        return "0" <= char <= "9"

    @staticmethod
    def is_alpha(char):
        return "a" <= char <= "z" or "A" <= char <= "Z" or char == "_"
