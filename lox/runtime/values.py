"""Runtime values of the lox language and the rules defined over them.

Values map onto Python objects directly:

```
Number   -> float
String   -> str
Boolean  -> bool
Nil      -> None
Callable -> LoxCallable
```

Because bool is a subclass of int in Python, kinds are always compared with `type(...) is`, never with isinstance or
plain ==, so that `true == 1` stays false.
"""

import math

from lox.runtime.callable import LoxCallable


def is_number(value):
    return type(value) is float


def is_string(value):
    return type(value) is str


def is_truthy(value):
    """nil and false are falsy, everything else (0 and "" included) is truthy."""
    return value is not None and value is not False


def is_equal(left, right):
    """Values of different kinds are never equal. Callables are equal only to themselves."""
    if type(left) is not type(right):
        return False
    if isinstance(left, LoxCallable):
        return left is right
    return left == right


def stringify(value):
    """Textual representation of value, as shown by print."""
    if value is None:
        return "nil"
    if value is True:
        return "true"
    if value is False:
        return "false"
    if is_number(value):
        if math.isfinite(value) and value.is_integer():
            return str(int(value))
        return str(value)
    return str(value)

