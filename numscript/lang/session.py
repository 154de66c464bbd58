"""Session control for numscript. Runs the interpreter pipeline (text -> tokens -> statements -> execution), either in
command line mode or file interpretation mode.
"""

from numscript.lang.error import GenericException
from numscript.lang.evaluation import Interpreter
from numscript.lang.lexical import Lexer
from numscript.lang.parser import Parser


class Session:
    """Governs a numscript session: one interpreter, and therefore one namespace, fed by a file or by the shell."""
    SH_FILE = Lexer.STDIN  # command-line interpreter filename

    def __init__(self, error_handler, path, cmd_line=False, output=print):
        self.error_handler = error_handler
        self.path = path          # used for error messages
        self.cmd_line = cmd_line  # whether or not in command-line mode
        self.output = output

        self.interpreter = Interpreter(self._print, error_handler)

        self.tokens = []   # tokens of the last added text
        self.to_exec = []  # statements not run yet
        self.results = []  # printed lines not yet popped, only kept when output is None

        if self.cmd_line:
            self.error_handler.fatal = False

        if path != Session.SH_FILE:
            try:
                with open(path, "r") as file:
                    text = file.read()
            except OSError:
                raise GenericException("{} could not be opened", path)
            self.add(text)

        elif not cmd_line:
            raise GenericException("{} is a reserved filename", path)

    @staticmethod
    def is_incomplete(text):
        """Whether or not text has unclosed brackets, so that the shell should keep reading."""
        return sum(text.count(char) for char in "({[") > sum(text.count(char) for char in ")}]")

    def add(self, text):
        """Lexes and parses text and queues its statements. Execution is delayed until run is called."""
        self.error_handler.register_source(self.path, text)  # in case error is raised

        self.tokens = Lexer(text, self.path).tokenize()
        self.to_exec.extend(Parser(self.tokens).parse())

    def run(self):
        """Runs this session's queued statements. In file mode, this is the whole program: it is executed as one block
        and cleaned up afterwards. In command-line mode, top-level names are kept until close is called.
        """
        statements, self.to_exec = self.to_exec, []
        if self.cmd_line:
            self.interpreter.run(statements)
        else:
            self.interpreter.interpret(statements)

    def close(self):
        """Cleans up the top-level names declared in command-line mode."""
        while self.interpreter.frames:
            self.interpreter.pop()

    def pop(self):
        """Removes and returns the oldest printed line."""
        return self.results.pop(0)

    def _print(self, text):
        if self.output is None:
            self.results.append(text)
        else:
            self.output(text)
