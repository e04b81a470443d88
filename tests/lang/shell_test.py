import io
import unittest

from lox.lang.error import ErrorHandler
from lox.lang.session import Session
from lox.lang.shell import Shell


class ShellTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.err = io.StringIO()
        sess = Session(ErrorHandler(stream=self.err), Session.SH_FILE, cmd_line=True, out=self.out)
        self.shell = Shell(sess, stdout=io.StringIO())

    def feed(self, *lines):
        for line in lines:
            self.shell.onecmd(line)

    def test_statements(self):
        self.feed("var a = 20;", "print a + 1;")
        self.assertEqual("21\n", self.out.getvalue())

    def test_not_fatal(self):
        self.assertFalse(self.shell.sess.error_handler.fatal)
        self.feed("print missing;", "print 1 +;", "print \"still running\";")
        self.assertEqual("still running\n", self.out.getvalue())
        self.assertIn("Undefined variable", self.err.getvalue())

    def test_continuation(self):
        self.feed("fun add(a, b) {")
        self.assertEqual(Shell.secondary_prompt, self.shell.prompt)

        self.feed("  return a + b;", "}")
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)

        self.feed("print add(1, 2);")
        self.assertEqual("3\n", self.out.getvalue())

    def test_is_open(self):
        self.assertTrue(Shell.is_open("fun f() {"))
        self.assertTrue(Shell.is_open("print (1 +"))
        self.assertFalse(Shell.is_open("{ print 1; }"))
        self.assertFalse(Shell.is_open("print \"(\";"))
        self.assertFalse(Shell.is_open("print 1; // {"))
        self.assertTrue(Shell.is_open("if (a) { print \"}\";"))

    def test_bracket_in_string(self):
        self.feed("print \"(\";", "print 1; // {")
        self.assertEqual(Shell._tmp_prompt, self.shell.prompt)
        self.assertEqual("(\n1\n", self.out.getvalue())

    def test_exit(self):
        self.assertTrue(self.shell.onecmd("exit"))
        self.assertTrue(self.shell.onecmd("exit now"))
        self.assertIn("warning", self.err.getvalue())


if __name__ == '__main__':
    unittest.main()
