"""Renders AST nodes as parenthesized prefix text. Used by `lox --ast` and in tests to check tree shapes.

Format:
```
2 + 3 * 4           ->  (+ 2 (* 3 4))
var a = (1);        ->  (var a (group 1))
fun f(a) { ... }    ->  (fun f (a) ...)
```
"""

from lox.runtime.values import stringify
from lox.syntax.nodes import Visitor


class AstPrinter(Visitor):

    def print(self, node):
        return node.accept(self)

    def print_program(self, statements):
        return "\n".join(self.print(statement) for statement in statements)

    def parenthesize(self, name, *parts):
        result = "(" + name
        for part in parts:
            result += " " + (part if isinstance(part, str) else part.accept(self))
        return result + ")"

    # statements

    def visit_expression(self, stmt):
        return self.parenthesize(";", stmt.expression)

    def visit_print(self, stmt):
        return self.parenthesize("print", stmt.expression)

    def visit_var(self, stmt):
        if stmt.initializer is None:
            return self.parenthesize("var", stmt.name.lexeme)
        return self.parenthesize("var", stmt.name.lexeme, stmt.initializer)

    def visit_block(self, stmt):
        return self.parenthesize("block", *stmt.statements)

    def visit_if(self, stmt):
        if stmt.else_branch is None:
            return self.parenthesize("if", stmt.condition, stmt.then_branch)
        return self.parenthesize("if", stmt.condition, stmt.then_branch, stmt.else_branch)

    def visit_while(self, stmt):
        return self.parenthesize("while", stmt.condition, stmt.body)

    def visit_function(self, stmt):
        params = "(" + " ".join(param.lexeme for param in stmt.params) + ")"
        return self.parenthesize("fun", stmt.name.lexeme, params, *stmt.body)

    def visit_return(self, stmt):
        if stmt.value is None:
            return "(return)"
        return self.parenthesize("return", stmt.value)

    # expressions

    def visit_literal(self, expr):
        if isinstance(expr.value, str):
            return f"\"{expr.value}\""
        return stringify(expr.value)

    def visit_grouping(self, expr):
        return self.parenthesize("group", expr.expression)

    def visit_variable(self, expr):
        return expr.name.lexeme

    def visit_assign(self, expr):
        return self.parenthesize("=", expr.name.lexeme, expr.value)

    def visit_logical(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_binary(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.left, expr.right)

    def visit_unary(self, expr):
        return self.parenthesize(expr.operator.lexeme, expr.right)

    def visit_call(self, expr):
        return self.parenthesize("call", expr.callee, *expr.arguments)
