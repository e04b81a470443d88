"""Scopes of a lox program. Each Environment maps names to values and links to the scope that encloses it; blocks,
function calls and closures all share this one structure. An Environment stays alive for as long as a running call
or a closure holds a reference to it.
"""

from lox.lang.error import LoxRuntimeError


class Environment:
    """A single scope, linked to its enclosing scope (None for the global scope)."""

    def __init__(self, enclosing=None):
        self.enclosing = enclosing
        self.values = {}

    def define(self, name, value):
        """Binds name in this scope. Redefining a name in the same scope simply rebinds it."""
        self.values[name] = value

    def get(self, name):
        """Value bound to token name in the nearest scope that defines it."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                return environment.values[name.lexeme]
            environment = environment.enclosing

        raise LoxRuntimeError(name, "Undefined variable '{}'.", name.lexeme)

    def assign(self, name, value):
        """Rebinds token name in the nearest scope that defines it. Never declares a new binding."""
        environment = self
        while environment is not None:
            if name.lexeme in environment.values:
                environment.values[name.lexeme] = value
                return
            environment = environment.enclosing

        raise LoxRuntimeError(name, "Undefined variable '{}'.", name.lexeme)

    def __contains__(self, name):
        return name in self.values

    def __repr__(self):
        return f"Environment(values={self.values!r}, enclosing={self.enclosing!r})"
