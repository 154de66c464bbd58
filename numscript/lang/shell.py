"""Handles interactive/command-line mode for numscript interpreter. Uses cmd as backend."""

import cmd


class Shell(cmd.Cmd):
    """numscript interpreter shell."""
    intro = "numscript interpreter :: Python backend\nType '?' or 'help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continuations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self._tmp_line = ""

    def default(self, line):
        """Executes arbitrary numscript input."""
        text = self._tmp_line + line + "\n"

        if self.sess.is_incomplete(text):
            self._tmp_line = text
            self.prompt = self.secondary_prompt
            return

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            self.sess.to_exec = []  # drop anything left queued by a failed input
            try:
                self.sess.add(text)
                self.sess.run()
            finally:
                while self.sess.results:
                    print(self.sess.pop())

    def do_help(self, arg):
        """Doesnt return docs, but rather a short intro."""
        if arg:  # e.g. 'help = 1', a declaration
            return self.default(f"help {arg}")
        print("Welcome to the numscript interpreter!\n\n"
              "Values are numbers and (nested) lists of numbers. Arithmetic on lists works \n"
              "elementwise: try '[1, 2, 3] * 2'. Declare variables with 'x = 1', functions \n"
              "with 'f(x) = x ^ 2', and loop with 'from 1 to 3 as i { print f(i) }' or \n"
              "'for v in [1, 2, 3] { print v }'. PI, TAU and GLR are built in, as are sin, \n"
              "cos and tan.")

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return ""

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return self.do_exit(arg)

    def do_exit(self, arg):
        """Exits interpreter."""
        if arg:  # e.g. 'exit = 1', a declaration
            return self.default(f"exit {arg}")
        self.sess.close()
        return True
