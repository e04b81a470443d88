"""Tree-walking evaluator for the lox language.

Expressions evaluate to values. Statements execute for effect and report how they completed: None when they ran to
the end, or a ReturnSignal when a `return` was executed somewhere inside them. Blocks, ifs and loops hand a signal
upward untouched; the function call that owns it (see LoxFunction.call) turns it into the call's result. No exception
is used for `return`: exceptions are reserved for LoxRuntimeErrors, which stop the run.
"""

import math
import sys
from dataclasses import dataclass
from typing import Any

from lox.lang.error import GenericException, LoxRuntimeError
from lox.runtime.callable import LoxCallable, LoxFunction
from lox.runtime.environment import Environment
from lox.runtime.values import is_equal, is_number, is_string, is_truthy, stringify
from lox.syntax.nodes import Visitor
from lox.syntax.tokens import TokenType


@dataclass(frozen=True)
class ReturnSignal:
    """Early exit of the current call, carrying the returned value."""
    value: Any
    keyword: Any  # the return token, for errors


def divide(left, right):
    """Floating-point division: dividing by zero gives a signed infinity, or nan for 0/0."""
    try:
        return left / right
    except ZeroDivisionError:
        if left == 0 or math.isnan(left):
            return math.nan
        return math.copysign(math.inf, left) * math.copysign(1.0, right)


class Interpreter(Visitor):
    """Evaluates programs against its own global environment. Separate instances never share state, while calling
    interpret repeatedly on one instance (as the interactive prompt does) keeps earlier definitions.
    """

    def __init__(self, out=None):
        self.out = out if out is not None else sys.stdout
        self.globals = Environment()
        self.environment = self.globals

    def interpret(self, statements):
        """Executes statements in order. Raises LoxRuntimeError at the first runtime failure."""
        for statement in statements:
            signal = self.execute(statement)
            if signal is not None:
                raise LoxRuntimeError(signal.keyword, "Can't return from top-level code.")

    def execute(self, stmt):
        return stmt.accept(self)

    def evaluate(self, expr):
        return expr.accept(self)

    def execute_block(self, statements, environment):
        """Executes statements in environment, restoring the current environment afterwards (even on error)."""
        previous = self.environment
        self.environment = environment
        try:
            for statement in statements:
                signal = self.execute(statement)
                if signal is not None:
                    return signal
            return None
        finally:
            self.environment = previous

    # statements

    def visit_expression(self, stmt):
        self.evaluate(stmt.expression)

    def visit_print(self, stmt):
        value = self.evaluate(stmt.expression)
        print(stringify(value), file=self.out)

    def visit_var(self, stmt):
        value = None
        if stmt.initializer is not None:
            value = self.evaluate(stmt.initializer)
        self.environment.define(stmt.name.lexeme, value)

    def visit_block(self, stmt):
        return self.execute_block(stmt.statements, Environment(self.environment))

    def visit_if(self, stmt):
        if is_truthy(self.evaluate(stmt.condition)):
            return self.execute(stmt.then_branch)
        if stmt.else_branch is not None:
            return self.execute(stmt.else_branch)
        return None

    def visit_while(self, stmt):
        while is_truthy(self.evaluate(stmt.condition)):
            signal = self.execute(stmt.body)
            if signal is not None:
                return signal
        return None

    def visit_function(self, stmt):
        # bound before the body ever runs, so the function can call itself
        self.environment.define(stmt.name.lexeme, LoxFunction(stmt, self.environment))

    def visit_return(self, stmt):
        value = None
        if stmt.value is not None:
            value = self.evaluate(stmt.value)
        return ReturnSignal(value, stmt.keyword)

    # expressions

    def visit_literal(self, expr):
        return expr.value

    def visit_grouping(self, expr):
        return self.evaluate(expr.expression)

    def visit_variable(self, expr):
        return self.environment.get(expr.name)

    def visit_assign(self, expr):
        value = self.evaluate(expr.value)
        self.environment.assign(expr.name, value)
        return value

    def visit_logical(self, expr):
        left = self.evaluate(expr.left)

        if expr.operator.type is TokenType.OR:
            if is_truthy(left):
                return left
        elif not is_truthy(left):
            return left

        return self.evaluate(expr.right)

    def visit_unary(self, expr):
        right = self.evaluate(expr.right)

        if expr.operator.type is TokenType.MINUS:
            self.check_number_operand(expr.operator, right)
            return -right
        if expr.operator.type is TokenType.BANG:
            return not is_truthy(right)

        operator = expr.operator
        raise GenericException("unknown unary operator '{}'", operator.lexeme, line=operator.line, internal=True)

    def visit_binary(self, expr):
        left = self.evaluate(expr.left)
        right = self.evaluate(expr.right)
        operator = expr.operator

        if operator.type is TokenType.EQUAL_EQUAL:
            return is_equal(left, right)
        if operator.type is TokenType.BANG_EQUAL:
            return not is_equal(left, right)

        if operator.type is TokenType.PLUS:
            if is_number(left) and is_number(right):
                return left + right
            if is_string(left) and is_string(right):
                return left + right
            raise LoxRuntimeError(operator, "Operands must be two numbers or two strings.")

        self.check_number_operands(operator, left, right)

        if operator.type is TokenType.MINUS:
            return left - right
        if operator.type is TokenType.STAR:
            return left * right
        if operator.type is TokenType.SLASH:
            return divide(left, right)
        if operator.type is TokenType.GREATER:
            return left > right
        if operator.type is TokenType.GREATER_EQUAL:
            return left >= right
        if operator.type is TokenType.LESS:
            return left < right
        if operator.type is TokenType.LESS_EQUAL:
            return left <= right

        raise GenericException("unknown binary operator '{}'", operator.lexeme, line=operator.line, internal=True)

    def visit_call(self, expr):
        callee = self.evaluate(expr.callee)
        arguments = [self.evaluate(argument) for argument in expr.arguments]  # left to right

        if not isinstance(callee, LoxCallable):
            raise LoxRuntimeError(expr.paren, "Can only call functions.")

        if len(arguments) != callee.arity():
            msg = "Expected {} arguments but got {}."
            raise LoxRuntimeError(expr.paren, msg, (str(callee.arity()), str(len(arguments))))

        return callee.call(self, arguments)

    @staticmethod
    def check_number_operand(operator, operand):
        if not is_number(operand):
            raise LoxRuntimeError(operator, "Operand must be a number.")

    @staticmethod
    def check_number_operands(operator, left, right):
        if not (is_number(left) and is_number(right)):
            raise LoxRuntimeError(operator, "Operands must be numbers.")
