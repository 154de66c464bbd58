"""Error handling for numscript. Only GenericExceptions should be encountered during running: if another type of
error is raised and makes it all the way to ErrorHandler, it is assumed to be an internal issue.

Every stage (lexer, parser, interpreter) fails fast by raising one of the subclasses below. None of them print
anything: turning an error into text and an exit code is the job of ErrorHandler.
"""

import sys

from termcolor import colored


class GenericException(Exception):
    """Templates an error message so that it can be used to throw a numscript error. msg is a str.format template
    whose placeholders are filled by exprs, the offending snippets. loc is the lexical.Location of the error, if known.
    """

    def __init__(self, msg, exprs=None, loc=None, internal=False):
        if exprs is None:
            exprs = []
        if isinstance(exprs, str):
            exprs = [exprs]

        self.template = msg
        self.exprs = [str(expr) for expr in exprs]
        self.loc = loc
        self.internal = internal

        super().__init__(self.template.format(*(f"'{expr}'" for expr in self.exprs)))

    @property
    def msg(self):
        """Message with expr snippets bolded."""
        return self.template.format(*(colored(f"'{expr}'", attrs=["bold"]) for expr in self.exprs))


class LexError(GenericException):
    """Raised while converting source text to tokens."""


class MultipleDecimalPoints(LexError):

    def __init__(self, literal, loc=None):
        super().__init__("multiple decimal points in numeral {}", literal, loc)


class UnexpectedEndOfInput(LexError):

    def __init__(self, loc=None):
        super().__init__("unexpected end of input", loc=loc)


class ParseError(GenericException):
    """Raised while building statements from tokens."""


class EndOfTokens(ParseError):

    def __init__(self, loc=None):
        super().__init__("unexpected end of tokens", loc=loc)


class MissingLiteral(ParseError):

    def __init__(self, loc=None):
        super().__init__("expected a number after unary '-'", loc=loc)


class UnexpectedToken(ParseError):

    def __init__(self, token, loc=None):
        self.token = token
        super().__init__("unexpected token {}", token, loc)


class UnexpectedKeyword(ParseError):

    def __init__(self, keyword, loc=None):
        self.keyword = keyword
        super().__init__("unexpected keyword {}", keyword, loc)


class Expected(ParseError):

    def __init__(self, what, loc=None):
        self.what = what
        super().__init__("expected {}", what, loc)


class ExpectedGot(ParseError):

    def __init__(self, expected, got, loc=None):
        self.expected = expected
        self.got = got
        super().__init__("expected {}, got {}", (expected, got), loc)


class EvaluationError(GenericException):
    """Raised while executing statements."""


class UndefinedVariable(EvaluationError):

    def __init__(self, name, loc=None):
        self.name = name
        super().__init__("undefined variable {}", name, loc)


class UndefinedFunction(EvaluationError):

    def __init__(self, name, loc=None):
        self.name = name
        super().__init__("undefined function {}", name, loc)


class InvalidArguments(EvaluationError):

    def __init__(self, name, expected, got, loc=None):
        self.name = name
        self.expected = expected
        self.got = got
        super().__init__(f"function {{}} takes {expected} argument(s), got {got}", name, loc)


class InvalidListLength(EvaluationError):

    def __init__(self, left, right, loc=None):
        self.lengths = (left, right)
        super().__init__(f"lists must be the same length, got {left} and {right}", loc=loc)


class Redeclaration(EvaluationError):

    def __init__(self, name, loc=None):
        self.name = name
        super().__init__("re-declaration of {}", name, loc)


class ExpectedList(EvaluationError):

    def __init__(self, context, loc=None):
        super().__init__("{} must be a list", context, loc)


class ExpectedScalar(EvaluationError):

    def __init__(self, context, loc=None):
        super().__init__("{} cannot be a list", context, loc)


class ExpectedIdentifier(EvaluationError):

    def __init__(self, got, loc=None):
        super().__init__("only identifiers can be destructured into, got {}", got, loc)


class EmptyList(EvaluationError):

    def __init__(self, loc=None):
        super().__init__("empty list in for-loop", loc=loc)


class ErrorHandler:
    """Context manager that will silently suppress Python errors and print numscript errors."""
    ERROR = "red"
    STEP = "cyan"

    def __init__(self, fatal=True, trace=False):
        self.fatal = fatal
        self.trace = trace
        self.sources = {}  # dict of path: source text, used for diagnoses

    def register_source(self, path, text):
        """Registers the source text of path so errors located in it can be diagnosed."""
        self.sources[path] = text

    def register_step(self, kind, expr):
        """Prints an evaluation step if tracing is enabled."""
        if self.trace:
            print(colored(f"{kind} ", ErrorHandler.STEP, attrs=["bold"]) + colored(str(expr), attrs=["dark"]))

    def diagnose(self, error):
        """Returns the source line error.loc points to, with a caret under the offending column. Returns None if the
        line is unknown.
        """
        if error.loc is None or error.loc.path not in self.sources:
            return None

        lines = self.sources[error.loc.path].split("\n")
        if not 0 < error.loc.row <= len(lines):
            return None

        line = lines[error.loc.row - 1]
        col = max(error.loc.column - 1, 0)

        diagnosis = "  " + line + "\n"
        diagnosis += "  " + " " * col + colored("^", ErrorHandler.ERROR, attrs=["bold"])
        return diagnosis

    @staticmethod
    def prefix(error):
        """'<file>:<row>:<column>: ' for error, or '' if it has no location."""
        if error.loc is None:
            return ""
        return colored(f"{error.loc}: ", attrs=["bold"])

    def throw(self, error):
        """Prints error, a GenericException, and exits if fatal."""
        error_msg = ErrorHandler.prefix(error)
        if error.internal:
            error_msg += colored("[internal] ", ErrorHandler.ERROR, attrs=["bold"])

        error_msg += colored("error: ", ErrorHandler.ERROR, attrs=["bold"]) + error.msg
        print(error_msg)

        diagnosis = None if error.internal else self.diagnose(error)
        if diagnosis:
            print(diagnosis)

        if self.fatal:
            sys.exit(1)

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        do_exit = False
        if exc_type is KeyboardInterrupt:
            self.throw(GenericException("keyboard interrupt"))
        elif exc_type is SystemExit:
            do_exit = True
        elif exc_type is RecursionError:
            self.throw(GenericException("maximum recursion depth exceeded, is a function calling itself?"))
        elif exc_type is not None and issubclass(exc_type, GenericException):
            self.throw(exc_val)
        elif exc_type is not None:
            self.throw(GenericException("unknown error: {}", f"{exc_type.__name__}: {exc_val}", internal=True))
            do_exit = True

        return not do_exit
