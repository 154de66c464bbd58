"""Abstract syntax trees for numscript.

Formally, numscript can be defined as

```
<program>     ::= <statement>*
<statement>   ::= <ident> "=" <expr>                                        ; "declaration"
                | <ident> "(" [<ident> ("," <ident>)*] ")" "=" <expr>       ; "function declaration"
                | ["print"] <expr>                                          ; "print expression"
                | "from" <expr> "to" <expr> "as" <ident> ["with" "step" <expr>] "{" <statement>* "}"
                | "for" <ident> "in" <expr> "{" <statement>* "}"
                | "{" <statement>* "}"                                      ; "block"
                | <list> "=" <list>                                         ; "destructuring"
                | "#" <anything up to newline>                              ; "comment"
<expr>        ::= <expr> ("+" | "-" | "*" | "/" | "^") <expr>              ; all operators associate left
                | <float> | "-" <float> | <ident> | <ident> "(" [<expr> ("," <expr>)*] ")"
                | "(" <expr> ")" | <list>
<list>        ::= "[" [<expr> ("," <expr>)*] "]"
```

Expressions are immutable once parsed. Substitution (used to apply user functions) never mutates a tree; it returns
a structurally copied one.
"""

from abc import abstractmethod, ABC
from copy import deepcopy


class Node(ABC):
    """Superclass of every expression and statement. loc is the lexical.Location of the node's first token and is
    ignored by equality.
    """

    def __init__(self, loc=None):
        self.loc = loc
        self._cls = type(self).__name__

    @property
    @abstractmethod
    def expr(self):
        """Canonical source text of this node. Binary expressions are fully parenthesized."""

    @property
    def nodes(self):
        """Child nodes, in source order."""
        return []

    def display(self, indents=0):
        """Recursively displays a syntax tree with readable format.

        Format:
        <Node>(expr='<expr>', nodes=[
            <Node>(expr='<expr>', nodes=[
                ...
                <Node>(expr='<expr>')  # <-- if nodes is empty
            ])
        ])
        """
        result = f"{'    ' * indents}{self._cls}(expr='{self.expr}'"
        if self.nodes:
            result += ", nodes=["
            for node in self.nodes:
                result += "\n" + node.display(indents + 1) + ","
            result = result[:-1] + f"\n{'    ' * indents}]"
        return result + ")"

    def __repr__(self):
        return f"{self._cls}('{self.expr}')"

    def __str__(self):
        return self.expr

    def __eq__(self, other):
        return isinstance(other, type(self)) and self.expr == other.expr

    def __hash__(self):
        return hash(self.expr)


class Expression(Node):
    """Any numscript expression."""

    @abstractmethod
    def sub(self, bindings, check=None):
        """Returns a copy of this expression with every Identifier named in bindings (name: Expression) replaced by a
        copy of the bound expression. check is called with every other Identifier encountered and may raise.
        Replacement expressions are not themselves substituted into.
        """


class FloatLiteral(Expression):
    """Number in canonical dotted form, e.g. '5000.0'."""

    def __init__(self, text, loc=None):
        super().__init__(loc)
        self.text = text

    @property
    def expr(self):
        return self.text

    def sub(self, bindings, check=None):
        return self


class NegFloatLiteral(FloatLiteral):
    """Number directly preceded by unary '-'. There is no general negation operator."""

    @property
    def expr(self):
        return f"-{self.text}"


class Identifier(Expression):

    def __init__(self, name, loc=None):
        super().__init__(loc)
        self.name = name

    @property
    def expr(self):
        return self.name

    def sub(self, bindings, check=None):
        if self.name in bindings:
            return deepcopy(bindings[self.name])  # deepcopy so that every occurrence is its own tree
        if check is not None:
            check(self)
        return self


class FunctionCall(Expression):

    def __init__(self, name, args, loc=None):
        super().__init__(loc)
        self.name = name
        self.args = args

    @property
    def expr(self):
        return f"{self.name}({', '.join(arg.expr for arg in self.args)})"

    @property
    def nodes(self):
        return self.args

    def sub(self, bindings, check=None):
        return FunctionCall(self.name, [arg.sub(bindings, check) for arg in self.args], self.loc)


class BinaryExpr(Expression):
    OPERATORS = ("+", "-", "*", "/", "^")

    def __init__(self, left, op, right, loc=None):
        super().__init__(loc)
        self.left = left
        self.op = op
        self.right = right

    @property
    def expr(self):
        return f"({self.left.expr} {self.op} {self.right.expr})"

    @property
    def nodes(self):
        return [self.left, self.right]

    def sub(self, bindings, check=None):
        return BinaryExpr(self.left.sub(bindings, check), self.op, self.right.sub(bindings, check), self.loc)


class ListLiteral(Expression):

    def __init__(self, elements, loc=None):
        super().__init__(loc)
        self.elements = elements

    @property
    def expr(self):
        return f"[{', '.join(element.expr for element in self.elements)}]"

    @property
    def nodes(self):
        return self.elements

    def sub(self, bindings, check=None):
        return ListLiteral([element.sub(bindings, check) for element in self.elements], self.loc)


class Statement(Node):
    """Any numscript statement."""


def _body_expr(body):
    return "{ " + "; ".join(stmt.expr for stmt in body) + " }" if body else "{ }"


class Declaration(Statement):
    """<name> = <value>. name is the identifier Token."""

    def __init__(self, name, value):
        super().__init__(name.loc)
        self.name = name
        self.value = value

    @property
    def expr(self):
        return f"{self.name.value} = {self.value.expr}"

    @property
    def nodes(self):
        return [self.value]


class FunctionDeclaration(Statement):
    """<name>(<params>) = <body>. name and params are identifier Tokens, body is a single Expression."""

    def __init__(self, name, params, body):
        super().__init__(name.loc)
        self.name = name
        self.params = params
        self.body = body

    @property
    def param_names(self):
        return [param.value for param in self.params]

    @property
    def expr(self):
        return f"{self.name.value}({', '.join(self.param_names)}) = {self.body.expr}"

    @property
    def nodes(self):
        return [self.body]


class PrintExpr(Statement):

    def __init__(self, value, loc=None):
        super().__init__(loc if loc else value.loc)
        self.value = value

    @property
    def expr(self):
        return self.value.expr

    @property
    def nodes(self):
        return [self.value]


class RangeLoop(Statement):
    """from <start> to <stop> as <var> with step <step> { <body> }"""

    def __init__(self, start, stop, var, step, body, loc=None):
        super().__init__(loc)
        self.start = start
        self.stop = stop
        self.var = var
        self.step = step
        self.body = body

    @property
    def expr(self):
        header = f"from {self.start.expr} to {self.stop.expr} as {self.var.expr} with step {self.step.expr}"
        return f"{header} {_body_expr(self.body)}"

    @property
    def nodes(self):
        return [self.start, self.stop, self.var, self.step] + self.body


class ForLoop(Statement):
    """for <var> in <subject> { <body> }"""

    def __init__(self, var, subject, body, loc=None):
        super().__init__(loc)
        self.var = var
        self.subject = subject
        self.body = body

    @property
    def expr(self):
        return f"for {self.var.expr} in {self.subject.expr} {_body_expr(self.body)}"

    @property
    def nodes(self):
        return [self.var, self.subject] + self.body


class Block(Statement):

    def __init__(self, body, loc=None):
        super().__init__(loc)
        self.body = body

    @property
    def expr(self):
        return _body_expr(self.body)

    @property
    def nodes(self):
        return self.body


class Destructuring(Statement):
    """[<targets>] = [<values>]. Both sides are kept as parsed: checking them is left to the interpreter."""

    def __init__(self, targets, values, loc=None):
        super().__init__(loc)
        self.targets = targets
        self.values = values

    @property
    def expr(self):
        return f"{self.targets.expr} = {self.values.expr}"

    @property
    def nodes(self):
        return [self.targets, self.values]
