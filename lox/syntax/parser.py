"""Recursive-descent parser for the lox language. One method per grammar rule, from lowest to highest precedence:

```
program     ::= <declaration>* EOF
<declaration> ::= <fun_decl> | <var_decl> | <statement>
<fun_decl>  ::= "fun" IDENTIFIER "(" <parameters>? ")" <block>
<var_decl>  ::= "var" IDENTIFIER ( "=" <expression> )? ";"
<statement> ::= <expr_stmt> | <for_stmt> | <if_stmt> | <print_stmt> | <return_stmt> | <while_stmt> | <block>
<for_stmt>  ::= "for" "(" ( <var_decl> | <expr_stmt> | ";" ) <expression>? ";" <expression>? ")" <statement>
                                        ; desugared here into <block>/<while_stmt>
<block>     ::= "{" <declaration>* "}"

<assignment> ::= IDENTIFIER "=" <assignment> | <logic_or>
<logic_or>  ::= <logic_and> ( "or" <logic_and> )*
<logic_and> ::= <equality> ( "and" <equality> )*
<equality>  ::= <comparison> ( ( "!=" | "==" ) <comparison> )*
<comparison> ::= <term> ( ( ">" | ">=" | "<" | "<=" ) <term> )*
<term>      ::= <factor> ( ( "-" | "+" ) <factor> )*
<factor>    ::= <unary> ( ( "/" | "*" ) <unary> )*
<unary>     ::= ( "!" | "-" ) <unary> | <call>
<call>      ::= <primary> ( "(" <arguments>? ")" )*
<primary>   ::= NUMBER | STRING | "true" | "false" | "nil" | "(" <expression> ")" | IDENTIFIER
```

Syntax errors are recorded rather than raised to the caller: the parser skips ahead to the next statement boundary and
keeps going, so that one pass reports every malformed statement. A program with errors must not be run.
"""

from lox.lang.error import ParseError
from lox.syntax import nodes
from lox.syntax.tokens import Token, TokenType


class Parser:
    """Consumes any iterable of tokens (one token of lookahead) and produces the program's declarations."""
    MAX_ARGS = 255

    # tokens that begin a new declaration/statement, used for resynchronization
    BOUNDARIES = {
        TokenType.CLASS, TokenType.FUN, TokenType.VAR, TokenType.FOR,
        TokenType.IF, TokenType.WHILE, TokenType.PRINT, TokenType.RETURN,
    }

    def __init__(self, tokens):
        self.tokens = iter(tokens)
        self.errors = []

        self.previous = None
        self.current = self._next_token()

    def parse(self):
        """Returns the list of top-level declarations. Check self.errors before using the result."""
        statements = []
        while not self.is_at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)
        return statements

    # declarations and statements

    def declaration(self):
        try:
            if self.match(TokenType.FUN):
                return self.function("function")
            if self.match(TokenType.VAR):
                return self.var_declaration()
            return self.statement()
        except ParseError as error:
            self.errors.append(error)
            self.synchronize()
            return None

    def function(self, kind):
        name = self.consume(TokenType.IDENTIFIER, f"Expect {kind} name.")
        self.consume(TokenType.LEFT_PAREN, f"Expect '(' after {kind} name.")

        params = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(params) >= Parser.MAX_ARGS:
                    self.errors.append(self.error(self.current, f"Can't have more than {Parser.MAX_ARGS} parameters."))
                params.append(self.consume(TokenType.IDENTIFIER, "Expect parameter name."))
                if not self.match(TokenType.COMMA):
                    break
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after parameters.")

        self.consume(TokenType.LEFT_BRACE, f"Expect '{{' before {kind} body.")
        return nodes.Function(name, tuple(params), tuple(self.block()))

    def var_declaration(self):
        name = self.consume(TokenType.IDENTIFIER, "Expect variable name.")

        initializer = None
        if self.match(TokenType.EQUAL):
            initializer = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after variable declaration.")
        return nodes.Var(name, initializer)

    def statement(self):
        if self.match(TokenType.FOR):
            return self.for_statement()
        if self.match(TokenType.IF):
            return self.if_statement()
        if self.match(TokenType.PRINT):
            return self.print_statement()
        if self.match(TokenType.RETURN):
            return self.return_statement()
        if self.match(TokenType.WHILE):
            return self.while_statement()
        if self.match(TokenType.LEFT_BRACE):
            return nodes.Block(tuple(self.block()))
        return self.expression_statement()

    def for_statement(self):
        """Desugars a for loop into { initializer; while (condition) { body; increment; } }. The loop variable lives
        in the outer block, so every iteration shares it.
        """
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'for'.")

        if self.match(TokenType.SEMICOLON):
            initializer = None
        elif self.match(TokenType.VAR):
            initializer = self.var_declaration()
        else:
            initializer = self.expression_statement()

        condition = None
        if not self.check(TokenType.SEMICOLON):
            condition = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after loop condition.")

        increment = None
        if not self.check(TokenType.RIGHT_PAREN):
            increment = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after for clauses.")

        body = self.statement()

        if increment is not None:
            body = nodes.Block((body, nodes.Expression(increment)))
        if condition is None:
            condition = nodes.Literal(True)
        loop = nodes.While(condition, body)

        if initializer is not None:
            return nodes.Block((initializer, loop))
        return loop

    def if_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'if'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after if condition.")

        then_branch = self.statement()
        else_branch = None
        if self.match(TokenType.ELSE):
            else_branch = self.statement()  # binds to the nearest if

        return nodes.If(condition, then_branch, else_branch)

    def print_statement(self):
        value = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after value.")
        return nodes.Print(value)

    def return_statement(self):
        keyword = self.previous
        value = None
        if not self.check(TokenType.SEMICOLON):
            value = self.expression()

        self.consume(TokenType.SEMICOLON, "Expect ';' after return value.")
        return nodes.Return(keyword, value)

    def while_statement(self):
        self.consume(TokenType.LEFT_PAREN, "Expect '(' after 'while'.")
        condition = self.expression()
        self.consume(TokenType.RIGHT_PAREN, "Expect ')' after condition.")
        return nodes.While(condition, self.statement())

    def block(self):
        statements = []
        while not self.check(TokenType.RIGHT_BRACE) and not self.is_at_end():
            statement = self.declaration()
            if statement is not None:
                statements.append(statement)

        self.consume(TokenType.RIGHT_BRACE, "Expect '}' after block.")
        return statements

    def expression_statement(self):
        expr = self.expression()
        self.consume(TokenType.SEMICOLON, "Expect ';' after expression.")
        return nodes.Expression(expr)

    # expressions

    def expression(self):
        return self.assignment()

    def assignment(self):
        expr = self.logic_or()

        if self.match(TokenType.EQUAL):
            equals = self.previous
            value = self.assignment()  # right-associative

            if isinstance(expr, nodes.Variable):
                return nodes.Assign(expr.name, value)

            # reported, but the parser is not confused, so there is no need to synchronize
            self.errors.append(self.error(equals, "Invalid assignment target."))

        return expr

    def logic_or(self):
        expr = self.logic_and()
        while self.match(TokenType.OR):
            operator = self.previous
            expr = nodes.Logical(expr, operator, self.logic_and())
        return expr

    def logic_and(self):
        expr = self.equality()
        while self.match(TokenType.AND):
            operator = self.previous
            expr = nodes.Logical(expr, operator, self.equality())
        return expr

    def equality(self):
        return self._binary(self.comparison, TokenType.BANG_EQUAL, TokenType.EQUAL_EQUAL)

    def comparison(self):
        return self._binary(self.term, TokenType.GREATER, TokenType.GREATER_EQUAL, TokenType.LESS, TokenType.LESS_EQUAL)

    def term(self):
        return self._binary(self.factor, TokenType.MINUS, TokenType.PLUS)

    def factor(self):
        return self._binary(self.unary, TokenType.SLASH, TokenType.STAR)

    def _binary(self, operand, *operators):
        """Parses a left-associative binary level: operand ( operator operand )*, folding left."""
        expr = operand()
        while self.match(*operators):
            operator = self.previous
            expr = nodes.Binary(expr, operator, operand())
        return expr

    def unary(self):
        if self.match(TokenType.BANG, TokenType.MINUS):
            operator = self.previous
            return nodes.Unary(operator, self.unary())
        return self.call()

    def call(self):
        expr = self.primary()
        while self.match(TokenType.LEFT_PAREN):
            expr = self.finish_call(expr)
        return expr

    def finish_call(self, callee):
        arguments = []
        if not self.check(TokenType.RIGHT_PAREN):
            while True:
                if len(arguments) >= Parser.MAX_ARGS:
                    self.errors.append(self.error(self.current, f"Can't have more than {Parser.MAX_ARGS} arguments."))
                arguments.append(self.expression())
                if not self.match(TokenType.COMMA):
                    break

        paren = self.consume(TokenType.RIGHT_PAREN, "Expect ')' after arguments.")
        return nodes.Call(callee, paren, tuple(arguments))

    def primary(self):
        if self.match(TokenType.FALSE):
            return nodes.Literal(False)
        if self.match(TokenType.TRUE):
            return nodes.Literal(True)
        if self.match(TokenType.NIL):
            return nodes.Literal(None)

        if self.match(TokenType.NUMBER, TokenType.STRING):
            return nodes.Literal(self.previous.literal)

        if self.match(TokenType.IDENTIFIER):
            return nodes.Variable(self.previous)

        if self.match(TokenType.LEFT_PAREN):
            expr = self.expression()
            self.consume(TokenType.RIGHT_PAREN, "Expect ')' after expression.")
            return nodes.Grouping(expr)

        raise self.error(self.current, "Expect expression.")

    # token stream helpers

    def _next_token(self):
        token = next(self.tokens, None)
        if token is None:  # stream ended without EOF; synthesize one so the parser always terminates
            line = self.previous.line if self.previous is not None else 1
            return Token(TokenType.EOF, "", None, line)
        return token

    def match(self, *types):
        if self.check(*types):
            self.advance()
            return True
        return False

    def check(self, *types):
        return self.current.type in types

    def advance(self):
        if not self.is_at_end():
            self.previous = self.current
            self.current = self._next_token()
        return self.previous

    def is_at_end(self):
        return self.current.is_eof

    def consume(self, token_type, message):
        if self.check(token_type):
            return self.advance()
        raise self.error(self.current, message)

    @staticmethod
    def error(token, message):
        return ParseError(token, message)

    def synchronize(self):
        """Discards tokens until just after a ';' or just before a token that begins a new declaration."""
        self.advance()

        while not self.is_at_end():
            if self.previous.type is TokenType.SEMICOLON:
                return
            if self.current.type in Parser.BOUNDARIES:
                return
            self.advance()
