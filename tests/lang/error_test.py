import io
import unittest
from contextlib import redirect_stdout

from numscript.lang.error import (
    ErrorHandler, ExpectedGot, GenericException, InvalidArguments, InvalidListLength, UndefinedVariable
)
from numscript.lang.lexical import Location


class GenericExceptionTestCase(unittest.TestCase):

    def test_messages(self):
        cases = [
            (UndefinedVariable("y"), "undefined variable 'y'"),
            (ExpectedGot("to", "from"), "expected 'to', got 'from'"),
            (InvalidArguments("f", 2, 1), "function 'f' takes 2 argument(s), got 1"),
            (InvalidListLength(3, 2), "lists must be the same length, got 3 and 2"),
            (GenericException("plain"), "plain"),
        ]
        for error, expected in cases:
            self.assertEqual(expected, str(error))

    def test_loc(self):
        loc = Location("prog.ns", 5, 1)
        self.assertIs(loc, UndefinedVariable("y", loc).loc)
        self.assertIsNone(UndefinedVariable("y").loc)


class ErrorHandlerTestCase(unittest.TestCase):

    def capture(self, error_handler, error):
        out = io.StringIO()
        with redirect_stdout(out):
            with error_handler:
                raise error
        return out.getvalue()

    def test_throw_with_location(self):
        error_handler = ErrorHandler(fatal=False)
        error_handler.register_source("prog.ns", "x = 1\nx = y")
        out = self.capture(error_handler, UndefinedVariable("y", Location("prog.ns", 5, 2)))

        self.assertIn("prog.ns:2:5: ", out)
        self.assertIn("error: ", out)
        self.assertIn("undefined variable", out)
        self.assertIn("  x = y\n", out)
        self.assertIn("\n      ", out)  # caret under column 5

    def test_throw_without_location(self):
        out = self.capture(ErrorHandler(fatal=False), GenericException("{} could not be opened", "missing.ns"))
        self.assertIn("error: ", out)
        self.assertIn("could not be opened", out)

    def test_fatal(self):
        with self.assertRaises(SystemExit) as context:
            self.capture(ErrorHandler(), UndefinedVariable("y"))
        self.assertEqual(1, context.exception.code)

    def test_recursion(self):
        out = self.capture(ErrorHandler(fatal=False), RecursionError())
        self.assertIn("maximum recursion depth exceeded", out)

    def test_internal(self):
        out = io.StringIO()
        with redirect_stdout(out), self.assertRaises(ZeroDivisionError):
            with ErrorHandler(fatal=False):
                raise ZeroDivisionError("oops")
        self.assertIn("[internal] ", out.getvalue())
        self.assertIn("ZeroDivisionError: oops", out.getvalue())

    def test_steps(self):
        out = io.StringIO()
        with redirect_stdout(out):
            ErrorHandler(trace=False).register_step("σ", "f(1) => 1.0")
        self.assertEqual("", out.getvalue())

        with redirect_stdout(out):
            ErrorHandler(trace=True).register_step("σ", "f(1) => 1.0")
        self.assertIn("f(1) => 1.0", out.getvalue())


if __name__ == '__main__':
    unittest.main()
