"""numscript: an interpreter for a small numeric scripting language.

Values are floats and arbitrarily nested lists of floats; arithmetic between them broadcasts elementwise. Basic
program flow:
    1. Lexer (lang/lexical.py): source text -> located tokens
    2. Parser (lang/parser.py): tokens -> statement trees (lang/syntax.py), by recursive descent and precedence
       climbing
    3. Interpreter (lang/evaluation.py): walks the trees, keeping one flat namespace and a stack of scope frames
"""

from numscript.lang.evaluation import Interpreter, interpret
from numscript.lang.lexical import Lexer, tokenize
from numscript.lang.parser import Parser, parse


def run(text, path=Lexer.STDIN):
    """Runs the program text and returns the lines it printed. Raises the first error encountered."""
    lines = []
    interpret(parse(tokenize(text, path)), lines.append)
    return lines


__all__ = ["Interpreter", "Lexer", "Parser", "interpret", "parse", "run", "tokenize"]
