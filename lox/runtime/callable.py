"""Callable values: anything a lox call expression can invoke."""

from abc import ABC, abstractmethod

from lox.runtime.environment import Environment


class LoxCallable(ABC):
    """Superclass of every callable lox value."""

    @abstractmethod
    def arity(self):
        """Number of arguments this callable must be called with."""

    @abstractmethod
    def call(self, interpreter, arguments):
        """Invokes this callable with already-evaluated arguments and returns its result."""


class LoxFunction(LoxCallable):
    """User-defined function: its declaration plus the environment that was active where it was declared."""

    def __init__(self, declaration, closure):
        self.declaration = declaration
        self.closure = closure

    @property
    def name(self):
        return self.declaration.name.lexeme

    def arity(self):
        return len(self.declaration.params)

    def call(self, interpreter, arguments):
        # the parent is the declaring scope, never the caller's
        environment = Environment(self.closure)
        for param, argument in zip(self.declaration.params, arguments):
            environment.define(param.lexeme, argument)

        signal = interpreter.execute_block(self.declaration.body, environment)
        if signal is not None:
            return signal.value
        return None

    def __repr__(self):
        return f"<fn {self.name}>"

    def __str__(self):
        return self.__repr__()
