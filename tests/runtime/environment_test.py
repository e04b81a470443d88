import unittest

from lox.lang.error import LoxRuntimeError
from lox.runtime.environment import Environment
from lox.syntax.tokens import Token, TokenType


def name(lexeme):
    return Token(TokenType.IDENTIFIER, lexeme, None, 1)


class EnvironmentTestCase(unittest.TestCase):

    def test_define_and_get(self):
        env = Environment()
        env.define("a", 1.0)
        self.assertEqual(1.0, env.get(name("a")))

        env.define("a", "again")  # redeclaring rebinds
        self.assertEqual("again", env.get(name("a")))

    def test_nil_binding_is_defined(self):
        env = Environment()
        env.define("a", None)
        self.assertIsNone(env.get(name("a")))
        self.assertIn("a", env)

    def test_lookup_walks_outward(self):
        outer = Environment()
        outer.define("a", 1.0)
        inner = Environment(Environment(outer))
        self.assertEqual(1.0, inner.get(name("a")))

    def test_shadowing(self):
        outer = Environment()
        outer.define("a", 1.0)
        inner = Environment(outer)
        inner.define("a", 2.0)

        self.assertEqual(2.0, inner.get(name("a")))
        self.assertEqual(1.0, outer.get(name("a")))

    def test_assign_nearest_scope(self):
        outer = Environment()
        outer.define("a", 1.0)
        middle = Environment(outer)
        middle.define("a", 2.0)
        inner = Environment(middle)

        inner.assign(name("a"), 3.0)
        self.assertEqual(3.0, middle.get(name("a")))
        self.assertEqual(1.0, outer.get(name("a")))
        self.assertNotIn("a", inner)

    def test_undefined(self):
        env = Environment(Environment())
        with self.assertRaises(LoxRuntimeError) as context:
            env.get(name("missing"))
        self.assertEqual("Undefined variable 'missing'.", str(context.exception))

        with self.assertRaises(LoxRuntimeError):
            env.assign(name("missing"), 1.0)
        self.assertNotIn("missing", env)  # assignment never declares


if __name__ == '__main__':
    unittest.main()
