import io
import math
import unittest

from lox.lang.error import GenericException, LoxRuntimeError
from lox.lang.session import Session
from lox.runtime.interpreter import Interpreter, divide
from lox.syntax import nodes
from lox.syntax.tokens import Token, TokenType


def run(source, interpreter=None):
    """Runs source and returns the printed lines."""
    out = io.StringIO()
    if interpreter is None:
        interpreter = Interpreter(out)
    else:
        interpreter.out = out

    statements, errors = Session.parse(source)
    assert not errors, [str(error) for error in errors]

    interpreter.interpret(statements)
    return out.getvalue().splitlines()


class ExpressionTestCase(unittest.TestCase):

    def test_arithmetic(self):
        cases = {
            "print 2 + 3 * 4;": ["14"],
            "print (2 + 3) * 4;": ["20"],
            "print 10 - 4 - 3;": ["3"],
            "print 7 / 2;": ["3.5"],
            "print -3 * -2;": ["6"],
            "print 0.1 + 0.2;": ["0.30000000000000004"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_strings(self):
        self.assertEqual(["ab"], run("print \"a\" + \"b\";"))
        self.assertEqual(["true"], run("print \"a\" + \"b\" == \"ab\";"))

    def test_comparison(self):
        cases = {
            "print 1 < 2;": ["true"],
            "print 2 <= 2;": ["true"],
            "print 1 > 2;": ["false"],
            "print 3 >= 4;": ["false"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_equality(self):
        cases = {
            "print nil == nil;": ["true"],
            "print nil == false;": ["false"],
            "print 1 == 1;": ["true"],
            "print 1 == \"1\";": ["false"],
            "print true == 1;": ["false"],
            "print \"a\" != \"b\";": ["true"],
            "fun f() {} print f == f;": ["true"],
            "fun f() {} fun g() {} print f == g;": ["false"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_unary(self):
        self.assertEqual(["-3", "false", "true", "false", "false"],
                         run("print -3; print !true; print !nil; print !0; print !\"\";"))

    def test_logical_short_circuit(self):
        cases = {
            "print nil or \"yes\";": ["yes"],
            "print \"first\" or \"second\";": ["first"],
            "print nil and \"unreached\";": ["nil"],
            "print 1 and 2;": ["2"],
            "print false or false;": ["false"],
            "print false and (1/0);": ["false"],
            "print false and undefined;": ["false"],
            "print true or undefined();": ["true"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_type_errors(self):
        cases = {
            "print \"a\" + 1;": "Operands must be two numbers or two strings.",
            "print nil + nil;": "Operands must be two numbers or two strings.",
            "print \"a\" * 2;": "Operands must be numbers.",
            "print 1 < \"2\";": "Operands must be numbers.",
            "print -\"a\";": "Operand must be a number.",
            "print true - 1;": "Operands must be numbers.",
        }
        for case, expected in cases.items():
            with self.assertRaises(LoxRuntimeError, msg=case) as context:
                run(case)
            self.assertEqual(expected, str(context.exception), case)

    def test_error_token(self):
        with self.assertRaises(LoxRuntimeError) as context:
            run("print 1;\n\nprint 1 - \"x\";")
        self.assertEqual(3, context.exception.line)
        self.assertEqual("-", context.exception.lexeme)

    def test_unknown_operator_is_internal(self):
        comma = Token(TokenType.COMMA, ",", None, 1)
        cases = [
            nodes.Unary(comma, nodes.Literal(1.0)),
            nodes.Binary(nodes.Literal(1.0), comma, nodes.Literal(2.0)),
        ]
        for case in cases:
            with self.assertRaises(GenericException, msg=case) as context:
                Interpreter(io.StringIO()).evaluate(case)
            self.assertTrue(context.exception.internal)
            self.assertNotIsInstance(context.exception, LoxRuntimeError)


class DivisionTestCase(unittest.TestCase):
    """Division follows IEEE floating point: dividing by zero never raises."""

    def test_ordinary(self):
        self.assertEqual(["2.5", "-4"], run("print 5 / 2; print 8 / -2;"))

    def test_by_zero(self):
        self.assertEqual(["inf", "-inf", "nan", "-inf"], run("print 1 / 0; print -1 / 0; print 0 / 0; print 1 / -0;"))

    def test_divide(self):
        self.assertEqual(math.inf, divide(3.0, 0.0))
        self.assertEqual(-math.inf, divide(-3.0, 0.0))
        self.assertEqual(-math.inf, divide(3.0, -0.0))
        self.assertTrue(math.isnan(divide(0.0, 0.0)))
        self.assertTrue(math.isnan(divide(math.nan, 0.0)))

    def test_overflow(self):
        big = "1" + "0" * 308  # 1e308, written out since numbers have no exponent syntax
        self.assertEqual(["inf", "-inf"], run(f"print {big} * 10; print -{big} * 10;"))


class StatementTestCase(unittest.TestCase):

    def test_var(self):
        self.assertEqual(["nil", "1", "2"], run("var a; print a; var b = 1; print b; var b = 2; print b;"))

    def test_block_scope(self):
        source = """
        var a = 1;
        { var a = 2; print a; }
        print a;
        """
        self.assertEqual(["2", "1"], run(source))

    def test_nested_shadowing(self):
        source = """
        var a = "global a";
        var b = "global b";
        {
          var a = "outer a";
          {
            var a = "inner a";
            print a;
            print b;
          }
          print a;
        }
        print a;
        """
        self.assertEqual(["inner a", "global b", "outer a", "global a"], run(source))

    def test_assignment_nearest_scope(self):
        source = """
        var a = "global";
        {
          var a = "local";
          a = "assigned";
          print a;
        }
        print a;
        { a = "from block"; }
        print a;
        """
        self.assertEqual(["assigned", "global", "from block"], run(source))

    def test_assignment_value(self):
        self.assertEqual(["2", "2"], run("var a; var b; a = b = 2; print a; print b;"))

    def test_undefined(self):
        cases = ["print missing;", "missing = 1;", "{ var a = 1; } print a;"]
        for case in cases:
            with self.assertRaises(LoxRuntimeError, msg=case) as context:
                run(case)
            self.assertIn("Undefined variable", str(context.exception))

    def test_if(self):
        cases = {
            "if (true) print 1; else print 2;": ["1"],
            "if (nil) print 1; else print 2;": ["2"],
            "if (0) print \"zero is truthy\";": ["zero is truthy"],
            "if (false) print 1;": [],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_while(self):
        self.assertEqual(["0", "1", "2"], run("var i = 0; while (i < 3) { print i; i = i + 1; }"))

    def test_for(self):
        self.assertEqual(["0", "1", "2"], run("for (var i = 0; i < 3; i = i + 1) print i;"))
        self.assertEqual(["1", "1", "2", "3", "5", "8"], run("""
        var a = 0;
        var temp;
        for (var b = 1; a < 6; b = temp + b) {
          print b;
          temp = a;
          a = b;
        }
        """))

    def test_for_variable_scoped_to_loop(self):
        with self.assertRaises(LoxRuntimeError):
            run("for (var i = 0; i < 1; i = i + 1) {} print i;")

    def test_output_before_error_is_kept(self):
        out = io.StringIO()
        interpreter = Interpreter(out)
        statements, __ = Session.parse("print 1; print nope; print 2;")
        with self.assertRaises(LoxRuntimeError):
            interpreter.interpret(statements)
        self.assertEqual("1\n", out.getvalue())

    def test_isolated_runs(self):
        run("var shared = 1;")
        with self.assertRaises(LoxRuntimeError):
            run("print shared;")

    def test_persistent_interpreter(self):
        interpreter = Interpreter()
        run("var a = 1; fun f() { return a + 1; }", interpreter)
        self.assertEqual(["2"], run("print f();", interpreter))

    def test_environment_restored_after_error(self):
        interpreter = Interpreter()
        with self.assertRaises(LoxRuntimeError):
            run("{ var inner = 1; print nope; }", interpreter)
        self.assertIs(interpreter.globals, interpreter.environment)


class FunctionTestCase(unittest.TestCase):

    def test_call(self):
        source = """
        fun add(a, b, c) { print a + b + c; }
        add(1, 2, 3);
        """
        self.assertEqual(["6"], run(source))

    def test_return(self):
        self.assertEqual(["3", "nil", "nil"], run("""
        fun add(a, b) { return a + b; }
        fun nothing() { return; }
        fun fall_off() { var x = 1; }
        print add(1, 2);
        print nothing();
        print fall_off();
        """))

    def test_return_unwinds_nested_statements(self):
        source = """
        fun find(limit) {
          var i = 0;
          while (true) {
            if (i == limit) {
              { return i; }
            }
            i = i + 1;
          }
          print "unreachable";
        }
        print find(4);
        for (var i = 0; i < 2; i = i + 1) print find(i);
        """
        self.assertEqual(["4", "0", "1"], run(source))

    def test_return_stops_at_call_boundary(self):
        source = """
        fun inner() { return "inner"; }
        fun outer() { var value = inner(); print "after inner"; return value + " outer"; }
        print outer();
        """
        self.assertEqual(["after inner", "inner outer"], run(source))

    def test_top_level_return(self):
        for case in ["return 1;", "{ return; }", "if (true) return;"]:
            with self.assertRaises(LoxRuntimeError, msg=case) as context:
                run(case)
            self.assertEqual("Can't return from top-level code.", str(context.exception))

    def test_recursion(self):
        source = """
        fun fib(n) {
          if (n < 2) return n;
          return fib(n - 2) + fib(n - 1);
        }
        print fib(10);
        """
        self.assertEqual(["55"], run(source))

    def test_mutual_recursion(self):
        source = """
        fun is_even(n) { if (n == 0) return true; return is_odd(n - 1); }
        fun is_odd(n) { if (n == 0) return false; return is_even(n - 1); }
        print is_even(10);
        print is_odd(7);
        """
        self.assertEqual(["true", "true"], run(source))

    def test_functions_are_values(self):
        source = """
        fun twice(f, x) { return f(f(x)); }
        fun inc(x) { return x + 1; }
        var g = inc;
        print twice(g, 1);
        print inc;
        """
        self.assertEqual(["3", "<fn inc>"], run(source))

    def test_chained_calls(self):
        source = """
        fun outer() { fun inner() { return "inner"; } return inner; }
        print outer()();
        """
        self.assertEqual(["inner"], run(source))

    def test_argument_order(self):
        source = """
        fun show(a, b) { print a; print b; }
        fun log(x) { print "arg " + x; return x; }
        show(log("1"), log("2"));
        """
        self.assertEqual(["arg 1", "arg 2", "1", "2"], run(source))

    def test_arity(self):
        cases = {
            "fun f(a, b) {} f(1);": "Expected 2 arguments but got 1.",
            "fun f() {} f(1, 2);": "Expected 0 arguments but got 2.",
        }
        for case, expected in cases.items():
            with self.assertRaises(LoxRuntimeError, msg=case) as context:
                run(case)
            self.assertEqual(expected, str(context.exception), case)

    def test_call_non_callable(self):
        for case in ["\"text\"();", "var a = 1; a();", "nil();"]:
            with self.assertRaises(LoxRuntimeError, msg=case) as context:
                run(case)
            self.assertEqual("Can only call functions.", str(context.exception), case)

    def test_parameters_are_local(self):
        source = """
        var a = "global";
        fun f(a) { a = "changed"; print a; }
        f("param");
        print a;
        """
        self.assertEqual(["changed", "global"], run(source))

    def test_stack_overflow(self):
        with self.assertRaises(RecursionError):
            run("fun forever(n) { return forever(n + 1); } forever(0);")


if __name__ == '__main__':
    unittest.main()
