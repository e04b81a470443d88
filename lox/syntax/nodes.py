"""Abstract syntax tree for the lox language: the expression and statement nodes produced by the parser and walked by
the interpreter and the AST printer.

Nodes are frozen and hold tuples rather than lists, so a parsed program can never be mutated by evaluation.
"""

import re
from abc import ABC
from dataclasses import dataclass
from typing import Optional, Tuple, Union

from lox.lang.error import GenericException
from lox.syntax.tokens import Token


class Node(ABC):
    """Superclass of every AST node. Subclasses are dispatched to visit_<snake_case_name> on a Visitor."""
    visit_name = "visit_node"

    def __init_subclass__(cls, **kwargs):
        super().__init_subclass__(**kwargs)
        cls.visit_name = "visit_" + re.sub(r"(?<!^)(?=[A-Z])", "_", cls.__name__).lower()

    def accept(self, visitor):
        return getattr(visitor, self.visit_name, visitor.visit_node)(self)


class Visitor(ABC):
    """Walks nodes by dispatching on their class. Subclasses define a visit_* method per node they handle."""

    def visit_node(self, node):
        raise GenericException("{} cannot visit {}", (type(self).__name__, type(node).__name__), internal=True)


class Expr(Node):
    """Expression node."""


class Stmt(Node):
    """Statement node."""


# expressions

@dataclass(frozen=True)
class Literal(Expr):
    value: Union[float, str, bool, None]


@dataclass(frozen=True)
class Variable(Expr):
    name: Token


@dataclass(frozen=True)
class Assign(Expr):
    name: Token
    value: Expr


@dataclass(frozen=True)
class Logical(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Binary(Expr):
    left: Expr
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Unary(Expr):
    operator: Token
    right: Expr


@dataclass(frozen=True)
class Call(Expr):
    callee: Expr
    paren: Token  # closing paren, used to locate runtime errors
    arguments: Tuple[Expr, ...]


@dataclass(frozen=True)
class Grouping(Expr):
    expression: Expr


# statements

@dataclass(frozen=True)
class Expression(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Print(Stmt):
    expression: Expr


@dataclass(frozen=True)
class Var(Stmt):
    name: Token
    initializer: Optional[Expr]


@dataclass(frozen=True)
class Block(Stmt):
    statements: Tuple[Stmt, ...]


@dataclass(frozen=True)
class If(Stmt):
    condition: Expr
    then_branch: Stmt
    else_branch: Optional[Stmt]


@dataclass(frozen=True)
class While(Stmt):
    condition: Expr
    body: Stmt


@dataclass(frozen=True)
class Function(Stmt):
    name: Token
    params: Tuple[Token, ...]
    body: Tuple[Stmt, ...]


@dataclass(frozen=True)
class Return(Stmt):
    keyword: Token
    value: Optional[Expr]
