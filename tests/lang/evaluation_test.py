import math
import unittest

from numscript import run
from numscript.lang.error import (
    EmptyList, ExpectedIdentifier, ExpectedList, ExpectedScalar, InvalidArguments, InvalidListLength, Redeclaration,
    UndefinedFunction, UndefinedVariable
)
from numscript.lang.evaluation import Function, Interpreter
from numscript.lang.lexical import tokenize
from numscript.lang.parser import parse
from numscript.lang.syntax import Identifier


def statements(text):
    return parse(tokenize(text))


class ExpressionTestCase(unittest.TestCase):

    def test_arithmetic(self):
        cases = {
            "2 + 3 * 4": "14.0",
            "2 ^ 3 ^ 2": "64.0",
            "(2 + 3) * 4": "20.0",
            "1 - 2 - 3": "-4.0",
            "print -1.5 * 2": "-3.0",
            "7 / 2": "3.5",
            "1 / 0": "inf",
            "print -1 / 0": "-inf",
            "0 / 0": "nan",
            "(-8) ^ (1 / 3)": "nan",
            "2 ^ -1": "0.5",
            "5_000 + .5": "5000.5",
        }
        for case, expected in cases.items():
            self.assertEqual([expected], run(case), case)

    def test_constants(self):
        cases = {
            "PI": repr(math.pi),
            "TAU": repr(math.tau),
            "GLR": "1.618033988749894",
            "TAU / PI": "2.0",
        }
        for case, expected in cases.items():
            self.assertEqual([expected], run(case), case)

    def test_lists(self):
        cases = {
            "[]": "[]",
            "[1, 2 + 3, [4]]": "[1.0, 5.0, [4.0]]",
            "[1, 2, 3] + 1": "[2.0, 3.0, 4.0]",
            "2 * [1, [2, 3]]": "[2.0, [4.0, 6.0]]",
            "[1, 2] * [3, 4]": "[3.0, 8.0]",
            "[[1, 2], [3, 4]] + [10, 20]": "[[11.0, 12.0], [23.0, 24.0]]",
            "[1, 2] ^ 2": "[1.0, 4.0]",
        }
        for case, expected in cases.items():
            self.assertEqual([expected], run(case), case)

        should_raise = ["[1, 2, 3] + [1, 2]", "[[1, 2]] * [[1]]", "[] - [1]"]
        for case in should_raise:
            self.assertRaises(InvalidListLength, run, case)

    def test_list_element_failure(self):
        self.assertRaises(UndefinedVariable, run, "[1, missing, 3]")

    def test_trig(self):
        cases = {
            "sin(0)": "0.0",
            "cos(0)": "1.0",
            "tan(0)": "0.0",
            "cos([0, [0, 0]])": "[1.0, [1.0, 1.0]]",
            "sin(PI / 2)": "1.0",
        }
        for case, expected in cases.items():
            self.assertEqual([expected], run(case), case)

        should_raise = ["sin(1, 2)", "cos()", "tan(1, 2, 3)"]
        for case in should_raise:
            self.assertRaises(InvalidArguments, run, case)

    def test_undefined(self):
        self.assertRaises(UndefinedVariable, run, "x")
        self.assertRaises(UndefinedVariable, run, "f(x) = x\nf")
        self.assertRaises(UndefinedFunction, run, "g(1)")
        self.assertRaises(UndefinedFunction, run, "x = 1\nx(1)")

        with self.assertRaises(UndefinedVariable) as context:
            run("y = 1\nx + y", "prog.ns")
        self.assertEqual("x", context.exception.name)
        self.assertEqual("prog.ns:2:1", str(context.exception.loc))


class FunctionTestCase(unittest.TestCase):

    def test_substitution(self):
        cases = {
            "f(x) = x + x\ny = 3.0\nf(y)": "6.0",
            "area(r) = PI * r ^ 2\narea(2.0)": repr(math.pi * 4.0),
            "f(x) = x * x\ng(y) = f(y + 1)\ng(2)": "9.0",
            "f(x, y) = x - y\ny = 10\nf(y, 1)": "9.0",
            "f(x, y) = x - y\nf(1, 2)": "-1.0",
            "one() = 1\none() + one()": "2.0",
            "f(v) = sin(v) + cos(v)\nf([0, 0])": "[1.0, 1.0]",
            "f(x) = x * 2\nf([1, 2])": "[2.0, 4.0]",
            "scale = 3\nf(x) = x * scale\nf(2)": "6.0",
        }
        for case, expected in cases.items():
            self.assertEqual([expected], run(case), case)

    def test_substitute_copies_arguments(self):
        body = statements("f(x) = x + x")[0].body
        function = Function("f", ["x"], body)
        arg = Identifier("y")

        substituted = function.substitute([arg])
        self.assertEqual("(y + y)", substituted.expr)
        self.assertIsNot(substituted.left, substituted.right)
        self.assertEqual("(x + x)", function.body.expr)  # the body itself is untouched

    def test_invalid_calls(self):
        self.assertRaises(InvalidArguments, run, "f(x) = x\nf(1, 2)")
        self.assertRaises(InvalidArguments, run, "f(x, y) = x\nf(1)")
        self.assertRaises(UndefinedVariable, run, "f(x) = x + z\nf(1)")
        self.assertRaises(UndefinedVariable, run, "f(x) = x\nf(z)")

    def test_redeclaration(self):
        should_raise = [
            "f(x) = 1\nf(x) = 2",
            "sin(x) = x",
            "x = 1\nx(y) = y",
            "PI(x) = x",
            "f(x) = x\nf = 1",
        ]
        for case in should_raise:
            self.assertRaises(Redeclaration, run, case)

    def test_print_as_a_name(self):
        cases = {
            "print(x) = x * 10\nprint(2)": ["20.0"],
            "print = 2\nprint + 1": ["3.0"],
            "print = 2\nprint print": ["2.0"],
            "print = [1, 2]\nprint": ["[1.0, 2.0]"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_multiline_arguments(self):
        self.assertEqual(["3.0"], run("f(x, y) = x + y\nf(1,\n  2)"))
        self.assertEqual(["[1.0, 2.0]", "3.0"], run("[1,\n 2]\n3"))

    def test_runaway_recursion(self):
        self.assertRaises(RecursionError, run, "f(x) = f(x)\nf(1)")


class ScopeTestCase(unittest.TestCase):

    def test_redeclaration(self):
        should_raise = ["x = 1.0\nx = 2.0", "PI = 3", "TAU = 1", "GLR = 1", "{ x = 1\n x = 2 }", "x = 1\n{ x = 2 }"]
        for case in should_raise:
            self.assertRaises(Redeclaration, run, case)

    def test_redeclare_after_block(self):
        self.assertEqual(["1.0", "2.0"], run("{ x = 1\n x }\nx = 2\nx"))
        self.assertEqual(["1.0", "2.0"], run("{ x = 1\n x }\n{ x = 2\n x }"))

    def test_block_cleanup(self):
        output = []
        interpreter = Interpreter(output.append)
        with self.assertRaises(UndefinedVariable):
            interpreter.interpret(statements("{\n  x = 1\n  x\n}\nx"))
        self.assertEqual(["1.0"], output)

        self.assertRaises(UndefinedFunction, run, "{ f(x) = x }\nf(1)")
        self.assertEqual(["3.0"], run("x = 1\n{ y = 2\n { z = x + y\n z } }"))

    def test_top_level_cleanup(self):
        interpreter = Interpreter(lambda text: None)
        interpreter.interpret(statements("x = 1\nf(y) = y\n{ z = 2 }"))
        self.assertEqual({}, interpreter.namespace)
        self.assertEqual([], interpreter.frames)

    def test_persistent_top_level(self):
        output = []
        interpreter = Interpreter(output.append)
        interpreter.run(statements("x = 1"))
        interpreter.run(statements("x + 1"))
        self.assertEqual(["2.0"], output)
        self.assertEqual(1.0, interpreter.namespace["x"])


class LoopTestCase(unittest.TestCase):

    def test_range_loop(self):
        cases = {
            "from 0.0 to 3.0 as i with step 1.5 { print i }": ["0.0", "1.5", "3.0"],
            "from 1 to 3 as i { i }": ["1.0", "2.0", "3.0"],
            "from 3 to 1 as i { i }": [],
            "from 1 to 1 as i { i }": ["1.0"],
            "from 1 to 2 as i { from 1 to 2 as j { i * j } }": ["1.0", "2.0", "2.0", "4.0"],
            "from 1 to 2 as i { y = i * 2\n y }": ["2.0", "4.0"],
            "n = 2\nfrom n - 1 to n * 2 as i with step n { i }": ["1.0", "3.0"],
            "from 0 to 1 as i with step 0.5 { [i, i] }": ["[0.0, 0.0]", "[0.5, 0.5]", "[1.0, 1.0]"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_range_loop_accumulates(self):
        # 0.1 + 0.1 + 0.1 > 0.3, so the last step is skipped
        self.assertEqual(["0.0", "0.1", "0.2"], run("from 0 to 0.3 as i with step 0.1 { i }"))

    def test_range_loop_variable_lifetime(self):
        output = []
        interpreter = Interpreter(output.append)
        with self.assertRaises(UndefinedVariable):
            interpreter.interpret(statements("from 0.0 to 3.0 as i with step 1.5 { print i }\ni"))
        self.assertEqual(["0.0", "1.5", "3.0"], output)

        self.assertEqual(["1.0", "1.0"], run("from 1 to 1 as i { i }\nfrom 1 to 1 as i { i }"))

    def test_range_loop_errors(self):
        should_raise = [
            "from [1] to 2 as i { }",
            "from 1 to [2] as i { }",
            "from 1 to 2 as i with step [1] { }",
        ]
        for case in should_raise:
            self.assertRaises(ExpectedScalar, run, case)

        self.assertRaises(Redeclaration, run, "i = 1\nfrom 1 to 2 as i { }")
        self.assertRaises(Redeclaration, run, "from 1 to 2 as PI { }")
        self.assertRaises(Redeclaration, run, "from 1 to 2 as i { i = 3 }")

    def test_for_loop(self):
        # the variable is seeded with the first element and the body runs once per remaining element
        cases = {
            "for v in [1, 2, 3] { v }": ["1.0", "2.0"],
            "for v in [5] { v }": [],
            "for v in [[1, 2], [3, 4], [5, 6]] { v * 2 }": ["[2.0, 4.0]", "[6.0, 8.0]"],
            "xs = [1, 2, 3]\nfor v in xs + 1 { w = v\n w }": ["2.0", "3.0"],
        }
        for case, expected in cases.items():
            self.assertEqual(expected, run(case), case)

    def test_for_loop_errors(self):
        self.assertRaises(EmptyList, run, "for v in [] { v }")
        self.assertRaises(ExpectedList, run, "for v in 1 { v }")
        self.assertRaises(Redeclaration, run, "v = 1\nfor v in [1, 2] { v }")
        self.assertRaises(UndefinedVariable, run, "for v in [1, 2] { v }\nv")


class DestructuringTestCase(unittest.TestCase):

    def test_destructuring(self):
        self.assertEqual(["1.0", "5.0"], run("[a, b] = [1.0, 2.0 + 3.0]\na\nb"))
        self.assertEqual(["[1.0, 2.0]"], run("[a] = [[1, 2]]\na"))
        self.assertEqual([], run("[] = []"))

    def test_destructuring_errors(self):
        cases = {
            "[a, 1] = [1, 2]": ExpectedIdentifier,
            "[a, b] = [1]": InvalidListLength,
            "a = 1\n[a] = [2]": Redeclaration,
            "[PI] = [2]": Redeclaration,
            "[a] = 5": ExpectedList,
            "[a] = [1] + [2]": ExpectedList,
        }
        for case, error in cases.items():
            self.assertRaises(error, run, case)

    def test_partial_destructuring(self):
        interpreter = Interpreter(lambda text: None)
        with self.assertRaises(UndefinedVariable):
            interpreter.run(statements("[a, b, c] = [1, 2, missing]"))
        self.assertEqual({"a": 1.0, "b": 2.0}, interpreter.namespace)

    def test_destructured_names_are_scoped(self):
        self.assertRaises(UndefinedVariable, run, "{ [a] = [1] }\na")


if __name__ == '__main__':
    unittest.main()
