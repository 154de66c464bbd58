"""Tree-walking evaluation of numscript statements.

Variables and user functions share one flat namespace. Lexical scoping is emulated with a stack of Scope frames: every
block or loop body execution pushes a frame that records the names it declares, and popping the frame removes exactly
those names from the namespace. Since a name may never be declared while it is still visible, this gives the same
behavior as nested scopes without shadowing.

User functions are applied by substitution, not by binding their arguments to values: the body is copied with every
parameter replaced by the caller's (unevaluated) argument expression, and the resulting tree is evaluated in place of
the call.
"""

from numscript.lang.error import (
    EmptyList, ExpectedIdentifier, ExpectedList, ExpectedScalar, InvalidArguments, InvalidListLength, Redeclaration,
    UndefinedFunction, UndefinedVariable
)
from numscript.lang.numerical import CONSTANTS, FUNCTIONS, apply, apply_func, is_list, render
from numscript.lang.syntax import (
    BinaryExpr, Block, Declaration, Destructuring, FloatLiteral, ForLoop, FunctionCall, FunctionDeclaration,
    Identifier, ListLiteral, NegFloatLiteral, PrintExpr, RangeLoop
)


class Function:
    """User function: ordered parameter names and a single body expression."""

    def __init__(self, name, params, body):
        self.name = name
        self.params = params
        self.body = body

    def substitute(self, args, check=None):
        """Returns self.body with each parameter replaced by the corresponding argument expression."""
        return self.body.sub(dict(zip(self.params, args)), check)

    def __repr__(self):
        return f"Function('{self.name}({', '.join(self.params)}) = {self.body.expr}')"


class Scope:
    """Names introduced by one execution of a block or loop body."""

    def __init__(self):
        self.names = []

    def add(self, name):
        self.names.append(name)

    def __iter__(self):
        return iter(self.names)


class Interpreter:
    """Executes statements. output is called with the text of every print expression, and error_handler (if any)
    receives evaluation steps through register_step.
    """

    def __init__(self, output=print, error_handler=None):
        self.output = output
        self.error_handler = error_handler

        self.namespace = {}  # dict of name: value (float or list) or Function
        self.frames = []     # stack of Scopes, innermost last

    # ---------- namespace ----------

    def resolves(self, name):
        """Whether or not name is a constant or is declared (as a variable or a function)."""
        return name in CONSTANTS or name in self.namespace

    def lookup(self, name, loc=None):
        """Value of variable name."""
        if name in CONSTANTS:
            return CONSTANTS[name]
        value = self.namespace.get(name)
        if value is None or isinstance(value, Function):
            raise UndefinedVariable(name, loc)
        return value

    def declare(self, name, value, loc=None):
        """Binds name in the innermost frame. name must not be visible yet."""
        if self.resolves(name) or (isinstance(value, Function) and name in FUNCTIONS):
            raise Redeclaration(name, loc)
        self.namespace[name] = value
        self.frames[-1].add(name)

    def push(self):
        self.frames.append(Scope())

    def pop(self):
        """Pops the innermost frame and removes its names from the namespace."""
        for name in self.frames.pop():
            self.namespace.pop(name, None)

    def _step(self, kind, expr):
        if self.error_handler is not None:
            self.error_handler.register_step(kind, expr)

    # ---------- expressions ----------

    def evaluate(self, expr):
        """Returns the value of Expression expr."""
        if isinstance(expr, Identifier):
            return self.lookup(expr.name, expr.loc)

        elif isinstance(expr, NegFloatLiteral):
            return -float(expr.text)

        elif isinstance(expr, FloatLiteral):
            return float(expr.text)

        elif isinstance(expr, BinaryExpr):
            left = self.evaluate(expr.left)
            right = self.evaluate(expr.right)
            try:
                return apply(left, right, expr.op)
            except InvalidListLength as error:
                error.loc = expr.loc
                raise

        elif isinstance(expr, ListLiteral):
            return [self.evaluate(element) for element in expr.elements]

        elif isinstance(expr, FunctionCall):
            return self.call(expr)

        raise TypeError(f"cannot evaluate {expr!r}")

    def call(self, expr):
        """Evaluates FunctionCall expr, either to a builtin or by substitution into a user function."""
        if expr.name in FUNCTIONS:
            if len(expr.args) != 1:
                raise InvalidArguments(expr.name, 1, len(expr.args), expr.loc)
            return apply_func(self.evaluate(expr.args[0]), FUNCTIONS[expr.name])

        function = self.namespace.get(expr.name)
        if not isinstance(function, Function):
            raise UndefinedFunction(expr.name, expr.loc)

        if len(expr.args) != len(function.params):
            raise InvalidArguments(expr.name, len(function.params), len(expr.args), expr.loc)

        substituted = function.substitute(expr.args, self._check_free)
        self._step("σ", f"{expr.expr} => {substituted.expr}")
        return self.evaluate(substituted)

    def _check_free(self, identifier):
        """Called on every identifier of a function body that is not a parameter."""
        self.lookup(identifier.name, identifier.loc)

    # ---------- statements ----------

    def execute(self, stmt):
        """Executes a single Statement in the innermost frame."""
        if isinstance(stmt, Declaration):
            name = stmt.name.value
            if self.resolves(name):
                raise Redeclaration(name, stmt.name.loc)
            self.declare(name, self.evaluate(stmt.value), stmt.name.loc)

        elif isinstance(stmt, FunctionDeclaration):
            name = stmt.name.value
            self.declare(name, Function(name, stmt.param_names, stmt.body), stmt.name.loc)

        elif isinstance(stmt, PrintExpr):
            self.output(render(self.evaluate(stmt.value)))

        elif isinstance(stmt, Block):
            self.execute_block(stmt.body)

        elif isinstance(stmt, RangeLoop):
            self.execute_range_loop(stmt)

        elif isinstance(stmt, ForLoop):
            self.execute_for_loop(stmt)

        elif isinstance(stmt, Destructuring):
            self.execute_destructuring(stmt)

        else:
            raise TypeError(f"cannot execute {stmt!r}")

    def execute_block(self, statements):
        """Executes statements in a new frame, which is popped afterwards."""
        self.push()
        try:
            for stmt in statements:
                self.execute(stmt)
        finally:
            self.pop()

    def _scalar(self, expr, context):
        value = self.evaluate(expr)
        if is_list(value):
            raise ExpectedScalar(context, expr.loc)
        return value

    def _check_unbound(self, var):
        if self.resolves(var.name):
            raise Redeclaration(var.name, var.loc)

    def execute_range_loop(self, stmt):
        start = self._scalar(stmt.start, "from-loop start")
        stop = self._scalar(stmt.stop, "from-loop end")
        step = self._scalar(stmt.step, "from-loop step")

        name = stmt.var.name
        self._check_unbound(stmt.var)

        current = start
        self.namespace[name] = current
        try:
            while current <= stop:
                self._step("from", f"{name} = {render(current)}")
                self.execute_block(stmt.body)
                current += step
                self.namespace[name] = current
        finally:
            self.namespace.pop(name, None)

    def execute_for_loop(self, stmt):
        values = self.evaluate(stmt.subject)
        if not is_list(values):
            raise ExpectedList("for-loop subject", stmt.subject.loc)
        if not values:
            raise EmptyList(stmt.subject.loc)

        name = stmt.var.name
        self._check_unbound(stmt.var)

        self.namespace[name] = values[0]
        try:
            for value in values[1:]:
                self._step("for", f"{name} = {render(self.namespace[name])}")
                self.execute_block(stmt.body)
                self.namespace[name] = value
        finally:
            self.namespace.pop(name, None)

    def execute_destructuring(self, stmt):
        if not isinstance(stmt.targets, ListLiteral):
            raise ExpectedList("left side of destructuring", stmt.targets.loc)
        if not isinstance(stmt.values, ListLiteral):
            raise ExpectedList("right side of destructuring", stmt.values.loc)

        targets, values = stmt.targets.elements, stmt.values.elements
        if len(targets) != len(values):
            raise InvalidListLength(len(targets), len(values), stmt.loc)

        for target, value in zip(targets, values):
            if not isinstance(target, Identifier):
                raise ExpectedIdentifier(target.expr, target.loc)
            if self.resolves(target.name):
                raise Redeclaration(target.name, target.loc)
            self.declare(target.name, self.evaluate(value), target.loc)

    def interpret(self, statements):
        """Executes a whole program as one block."""
        self.execute_block(statements)

    def run(self, statements):
        """Executes statements in a persistent top-level frame, for use by the shell."""
        if not self.frames:
            self.push()
        for stmt in statements:
            self.execute(stmt)


def interpret(statements, output=print):
    """Shorthand for Interpreter(output).interpret(statements)."""
    Interpreter(output).interpret(statements)
