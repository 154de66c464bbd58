"""Recursive-descent parser for numscript. See syntax.py for the grammar.

Binary operators are parsed by precedence climbing. The right operand of every operator is parsed at a strictly
higher minimum precedence than the operator's own, so every operator, '^' included, associates to the left:
2 ^ 3 ^ 2 = (2 ^ 3) ^ 2.
"""

from numscript.lang.error import (
    EndOfTokens, Expected, ExpectedGot, MissingLiteral, UnexpectedKeyword, UnexpectedToken
)
from numscript.lang.lexical import TokenType
from numscript.lang.syntax import (
    BinaryExpr, Block, Declaration, Destructuring, FloatLiteral, ForLoop, FunctionCall, FunctionDeclaration,
    Identifier, ListLiteral, NegFloatLiteral, PrintExpr, RangeLoop
)


PRECEDENCE = {
    TokenType.PLUS: 1,
    TokenType.MINUS: 1,
    TokenType.MULTI: 2,
    TokenType.DIV: 2,
    TokenType.POW: 3,
}
LOWEST = 1

PRINT = "print"  # soft prefix of print expressions, not a keyword
PRINTABLE = (TokenType.IDENT, TokenType.FLOAT, TokenType.LEFT_BRACKET, TokenType.MINUS)  # may follow PRINT


class Parser:
    """Consumes a list of Tokens and builds a list of Statements."""

    def __init__(self, tokens):
        self.tokens = tokens
        self.index = 0
        self.depth = 0  # number of open brackets and parentheses in the current expression

    def peek(self, offset=0):
        """Token offset places ahead, or None past the end of tokens."""
        if self.index + offset < len(self.tokens):
            return self.tokens[self.index + offset]
        return None

    def peek_is(self, token_type, offset=0):
        token = self.peek(offset)
        return token is not None and token.type is token_type

    def consume(self):
        """Returns the current token and moves past it."""
        if self.index >= len(self.tokens):
            raise EndOfTokens(self._last_loc())
        token = self.tokens[self.index]
        self.index += 1
        return token

    def expect(self, token_type):
        """Consumes a token of token_type, or raises ExpectedGot naming what was there instead."""
        token = self.peek()
        if token is None:
            raise EndOfTokens(self._last_loc())
        if token.type is not token_type:
            raise ExpectedGot(token_type.value, token.text, token.loc)
        return self.consume()

    def expect_keyword(self, keyword):
        token = self.peek()
        if token is None:
            raise Expected(keyword, self._last_loc())
        if token.type is not TokenType.KEYWORD or token.value != keyword:
            raise ExpectedGot(keyword, token.text, token.loc)
        return self.consume()

    def _last_loc(self):
        return self.tokens[-1].loc if self.tokens else None

    def skip_newlines(self):
        """Skips newlines inside brackets and parentheses, where they do not end a statement."""
        while self.depth and self.peek_is(TokenType.NEWLINE):
            self.consume()

    def line_contains_equals(self):
        """Whether or not an '=' appears between the current token and the next newline."""
        offset = 0
        while self.peek(offset) is not None:
            token = self.peek(offset)
            if token.type is TokenType.NEWLINE:
                return False
            elif token.type is TokenType.EQUALS:
                return True
            offset += 1
        return False

    # ---------- statements ----------

    def parse_statement(self):
        """Parses the statement at the current token. Returns None for comments and blank lines."""
        token = self.peek()

        if token.type is TokenType.IDENT:
            if self.peek_is(TokenType.EQUALS, 1):
                return self.parse_declaration()
            elif self.peek_is(TokenType.LEFT_PAREN, 1) and self.line_contains_equals():
                return self.parse_function_declaration()
            elif token.value == PRINT and self.peek(1) is not None and self.peek(1).type in PRINTABLE:
                self.consume()
                return PrintExpr(self.parse_expr(), token.loc)
            return self.parse_print()

        elif token.type in (TokenType.FLOAT, TokenType.LEFT_PAREN):
            return self.parse_print()

        elif token.type is TokenType.KEYWORD:
            if token.value == "from":
                return self.parse_range_loop()
            elif token.value == "for":
                return self.parse_for_loop()
            raise UnexpectedKeyword(token.value, token.loc)

        elif token.type is TokenType.LEFT_BRACE:
            self.consume()
            return Block(self.parse_body(), token.loc)

        elif token.type is TokenType.LEFT_BRACKET:
            if self.line_contains_equals():
                return self.parse_destructuring()
            return self.parse_print()

        elif token.type is TokenType.COMMENT:
            while self.peek() is not None and not self.peek_is(TokenType.NEWLINE):
                self.consume()
            return None

        elif token.type is TokenType.NEWLINE:
            self.consume()
            return None

        raise UnexpectedToken(token.text, token.loc)

    def parse_body(self):
        """Parses statements up to and including the closing '}' of a block. Assumes '{' has been consumed."""
        body = []
        while not self.peek_is(TokenType.RIGHT_BRACE):
            if self.peek() is None:
                raise EndOfTokens(self._last_loc())
            stmt = self.parse_statement()
            if stmt is not None:
                body.append(stmt)
        self.consume()
        return body

    def parse_declaration(self):
        name = self.consume()
        self.consume()  # =
        return Declaration(name, self.parse_expr())

    def parse_function_declaration(self):
        name = self.consume()
        self.consume()  # (

        params = []
        while not self.peek_is(TokenType.RIGHT_PAREN):
            if params:
                self.expect(TokenType.COMMA)
            token = self.peek()
            if token is None:
                raise EndOfTokens(self._last_loc())
            if token.type is not TokenType.IDENT:
                raise ExpectedGot("parameter name", token.text, token.loc)
            params.append(self.consume())
        self.consume()  # )

        self.expect(TokenType.EQUALS)
        return FunctionDeclaration(name, params, self.parse_expr())

    def parse_print(self):
        return PrintExpr(self.parse_expr())

    def parse_range_loop(self):
        loc = self.consume().loc  # from
        start = self.parse_expr()
        self.expect_keyword("to")
        stop = self.parse_expr()
        self.expect_keyword("as")
        var = self.parse_loop_var()

        if self.peek_is(TokenType.KEYWORD) and self.peek().value == "with":
            self.consume()
            self.expect_keyword("step")
            step = self.parse_expr()
        else:
            step = FloatLiteral("1.0", var.loc)

        self.expect(TokenType.LEFT_BRACE)
        return RangeLoop(start, stop, var, step, self.parse_body(), loc)

    def parse_for_loop(self):
        loc = self.consume().loc  # for
        var = self.parse_loop_var()
        self.expect_keyword("in")
        subject = self.parse_expr()

        self.expect(TokenType.LEFT_BRACE)
        return ForLoop(var, subject, self.parse_body(), loc)

    def parse_loop_var(self):
        token = self.peek()
        if token is None:
            raise Expected("loop variable", self._last_loc())
        if token.type is not TokenType.IDENT:
            raise ExpectedGot("loop variable", token.text, token.loc)
        self.consume()
        return Identifier(token.value, token.loc)

    def parse_destructuring(self):
        loc = self.peek().loc
        targets = self.parse_list()
        self.expect(TokenType.EQUALS)
        return Destructuring(targets, self.parse_expr(), loc)

    # ---------- expressions ----------

    def parse_expr(self, min_prec=LOWEST):
        """Parses an expression whose binary operators all have precedence >= min_prec."""
        left = self.parse_primary()

        while True:
            self.skip_newlines()
            if self.peek() is None or self.peek().type not in PRECEDENCE:
                break

            prec = PRECEDENCE[self.peek().type]
            if prec < min_prec:
                break

            op = self.consume()
            right = self.parse_expr(prec + 1)
            left = BinaryExpr(left, op.type.value, right, left.loc)

        return left

    def parse_primary(self):
        self.skip_newlines()
        token = self.peek()
        if token is None:
            raise EndOfTokens(self._last_loc())

        if token.type is TokenType.FLOAT:
            self.consume()
            return FloatLiteral(token.value, token.loc)

        elif token.type is TokenType.IDENT:
            self.consume()
            if self.peek_is(TokenType.LEFT_PAREN):
                self.consume()
                return FunctionCall(token.value, self.parse_sequence(TokenType.RIGHT_PAREN), token.loc)
            return Identifier(token.value, token.loc)

        elif token.type is TokenType.MINUS:
            self.consume()
            if not self.peek_is(TokenType.FLOAT):
                raise MissingLiteral(token.loc)
            return NegFloatLiteral(self.consume().value, token.loc)

        elif token.type is TokenType.LEFT_PAREN:
            self.consume()
            self.depth += 1
            expr = self.parse_expr(LOWEST)
            self.skip_newlines()
            self.depth -= 1
            self.expect(TokenType.RIGHT_PAREN)
            return expr

        elif token.type is TokenType.LEFT_BRACKET:
            return self.parse_list()

        elif token.type is TokenType.KEYWORD:
            raise UnexpectedKeyword(token.value, token.loc)

        raise UnexpectedToken(token.text, token.loc)

    def parse_list(self):
        loc = self.consume().loc  # [
        return ListLiteral(self.parse_sequence(TokenType.RIGHT_BRACKET), loc)

    def parse_sequence(self, closing):
        """Parses comma-separated expressions up to and including closing. A comma is only consumed right before the
        element that follows it.
        """
        self.depth += 1
        elements = []
        self.skip_newlines()
        while not self.peek_is(closing):
            if self.peek() is None:
                raise EndOfTokens(self._last_loc())
            if elements:
                self.expect(TokenType.COMMA)
            elements.append(self.parse_expr(LOWEST))
            self.skip_newlines()
        self.depth -= 1
        self.consume()
        return elements

    def parse(self):
        """Returns the list of Statements in self.tokens."""
        statements = []
        while self.peek() is not None:
            stmt = self.parse_statement()
            if stmt is not None:
                statements.append(stmt)
        return statements


def parse(tokens):
    """Shorthand for Parser(tokens).parse()."""
    return Parser(tokens).parse()
