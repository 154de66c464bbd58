"""Lexical analysis for numscript: converts source text to a list of located tokens.

The lexer is deliberately permissive. Characters it does not recognize become UNKNOWN tokens (rejecting them is the
parser's job), and comments produce a single COMMENT token without their content being scanned: the parser skips
everything up to the next newline. The only failure on a finite string is a numeral with two decimal points.

Numerals are emitted in canonical dotted form, with '_' digit-group separators dropped:

```
.5     -> 0.5
5.     -> 5.0
5_000  -> 5000.0
```
"""

from dataclasses import dataclass, field
from enum import Enum

from numscript.lang.error import MultipleDecimalPoints, UnexpectedEndOfInput


KEYWORDS = ("from", "to", "as", "with", "step", "for", "in")
DIGITS = "0123456789"


class TokenType(Enum):
    IDENT = "identifier"
    FLOAT = "number"
    KEYWORD = "keyword"
    COMMENT = "#"
    NEWLINE = "newline"
    EQUALS = "="
    LEFT_PAREN = "("
    RIGHT_PAREN = ")"
    LEFT_BRACE = "{"
    RIGHT_BRACE = "}"
    LEFT_BRACKET = "["
    RIGHT_BRACKET = "]"
    COMMA = ","
    PLUS = "+"
    MINUS = "-"
    MULTI = "*"
    DIV = "/"
    POW = "^"
    UNKNOWN = "unknown"


SYMBOLS = {
    "#": TokenType.COMMENT,
    "=": TokenType.EQUALS,
    "(": TokenType.LEFT_PAREN,
    ")": TokenType.RIGHT_PAREN,
    "{": TokenType.LEFT_BRACE,
    "}": TokenType.RIGHT_BRACE,
    "[": TokenType.LEFT_BRACKET,
    "]": TokenType.RIGHT_BRACKET,
    ",": TokenType.COMMA,
    "+": TokenType.PLUS,
    "-": TokenType.MINUS,
    "*": TokenType.MULTI,
    "/": TokenType.DIV,
    "^": TokenType.POW,
}


@dataclass(frozen=True)
class Location:
    """Position of a token in its source. Only used for diagnostics."""
    path: str
    column: int
    row: int

    def __str__(self):
        return f"{self.path}:{self.row}:{self.column}"


@dataclass(frozen=True)
class Token:
    type: TokenType
    value: str = None
    loc: Location = field(default=None, compare=False)

    @property
    def text(self):
        """Source-like rendering of this token, used in error messages."""
        if self.value is not None:
            return self.value
        if self.type is TokenType.NEWLINE:
            return "\\n"
        return self.type.value

    def __repr__(self):
        if self.value is not None:
            return f"{self.type.name}({self.value!r})"
        return self.type.name


class Lexer:
    """Scans text character by character. path labels the text's origin in token locations."""
    STDIN = "<in>"

    def __init__(self, text, path=STDIN):
        self.text = text
        self.path = path

        self.index = 0
        self.row = 1
        self.column = 0  # characters consumed on the current row

        self.tokens = []

    def peek(self, offset=0):
        """Character offset places ahead, or None past the end of text."""
        if self.index + offset < len(self.text):
            return self.text[self.index + offset]
        return None

    def consume(self):
        """Returns the current character and moves past it."""
        if self.index >= len(self.text):
            raise UnexpectedEndOfInput(self.loc)

        char = self.text[self.index]
        self.index += 1
        self.column += 1
        return char

    @property
    def loc(self):
        """Location of the next character to be consumed."""
        return Location(self.path, self.column + 1, self.row)

    def emit(self, token_type, value=None, loc=None):
        self.tokens.append(Token(token_type, value, loc if loc else self.loc))

    def scan_text(self):
        """Scans an identifier or keyword."""
        loc = self.loc
        buf = self.consume()

        while self.peek() is not None and (self.peek().isalnum() or self.peek() == "_"):
            buf += self.consume()

        if buf in KEYWORDS:
            self.emit(TokenType.KEYWORD, buf, loc)
        else:
            self.emit(TokenType.IDENT, buf, loc)

    def scan_float(self):
        """Scans a numeral and emits it in canonical dotted form."""
        loc = self.loc
        buf = ""
        period = False

        first = self.consume()
        if first == ".":
            period = True
            buf += "0."
        else:
            buf += first

        while self.peek() is not None and (self.peek() in DIGITS or self.peek() in "._"):
            char = self.consume()
            if char == "_":
                continue
            if char == ".":
                if period:
                    raise MultipleDecimalPoints(buf + char, loc)
                period = True
            buf += char

        if not period:
            buf += ".0"
        elif buf.endswith("."):
            buf += "0"

        self.emit(TokenType.FLOAT, buf, loc)

    def tokenize(self):
        """Returns the list of Tokens in self.text."""
        while self.peek() is not None:
            char = self.peek()

            if char == "\n":
                self.emit(TokenType.NEWLINE)
                self.consume()
                self.row += 1
                self.column = 0
            elif char.isspace():
                self.consume()
            elif char.isalpha() or char == "_":
                self.scan_text()
            elif char in DIGITS or char == ".":
                self.scan_float()
            elif char in SYMBOLS:
                self.emit(SYMBOLS[char])
                self.consume()
            else:
                self.emit(TokenType.UNKNOWN, char)
                self.consume()

        return list(self.tokens)


def tokenize(text, path=Lexer.STDIN):
    """Shorthand for Lexer(text, path).tokenize()."""
    return Lexer(text, path).tokenize()
