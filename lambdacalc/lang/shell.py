"""Handles interactive/command-line mode for lambdacalc interpreter. Uses cmd as backend.

Lines starting with ':' are shell commands (see do_help), everything else is run as a lambdacalc program.
"""

import cmd

from lambdacalc.lang.error import GenericException
from lambdacalc.lang.lexical import are_parens_balanced


class Shell(cmd.Cmd):
    """Lambda calculus interpreter shell."""
    intro = "Lambda calculus interpreter :: Python backend\nType ':help' for more information."
    prompt = "> "
    secondary_prompt = ". "  # used for line continutations
    _tmp_prompt = "> "       # also used for prompt swapping in line continuations

    def __init__(self, sess, *args, **kwargs):
        super().__init__(*args, **kwargs)

        self.sess = sess
        self.sess.error_handler.fatal = False

        self._tmp_line = ""

    def onecmd(self, line):
        """Dispatches ':'-prefixed commands to do_* methods, and everything else to default."""
        if line == "EOF":  # sent by cmdloop at end of input
            return self.do_EOF("")
        if self._tmp_line or not line.startswith(":"):
            return self.default(line)

        command, arg, line = self.parseline(line[1:])
        if not command or not hasattr(self, "do_" + command):
            with self.sess.error_handler:
                raise GenericException("unknown command '{}', try ':help'", ":" + (command or line), diagnosis=False)
            return False

        with self.sess.error_handler:  # needed because cmd.Cmd automatically exits on Exception
            return getattr(self, "do_" + command)(arg)
        return False

    def default(self, line):
        """Executes arbitrary lambdacalc program."""
        line = self._tmp_line + line

        if not are_parens_balanced(line):
            self._tmp_line = line + "\n"
            self.prompt = self.secondary_prompt
            return False

        self._tmp_line = ""
        self.prompt = self._tmp_prompt

        with self.sess.error_handler:
            self.sess.output(self.sess.run(line))
        return False

    def emptyline(self):
        """Do not repeat previous command on empty line."""
        return False

    def do_help(self, arg):
        """Lists shell commands."""
        self.sess.reporter("Commands:\n"
                           "  :q, :quit      Quit the interpreter\n"
                           "  :cls, :clear   Clear the screen\n"
                           "  :env           Print the current environment\n"
                           "  :env clear     Clear the current environment\n"
                           "  :ctx           Print the current typing context\n"
                           "  :ctx clear     Clear the current typing context\n"
                           "  :load <file>   Run a file in this session\n"
                           "  :std           Load the standard library\n"
                           "  :dbg <prog>    Step through the evaluation of a program\n"
                           "  :type <term>   Print the type of a λ-term\n"
                           "  :help          Print this help message\n\n"
                           "Try it out by typing 'I = λx. x'. This will bind the λ-term 'λx. x' to the name 'I'.\n"
                           "Next, try typing 'I y'. This will apply 'I' to 'y', giving 'y' as the result.")

    def do_env(self, arg):
        """Prints or clears the binding environment."""
        if arg.strip() == "clear":
            self.sess.clear_env()
            return
        for name, term in self.sess.env.items():
            self.sess.reporter(self.sess.printer.assign(name, term))

    def do_ctx(self, arg):
        """Prints or clears the typing context."""
        if arg.strip() == "clear":
            self.sess.clear_context()
            return
        for name, ty in self.sess.context.items():
            self.sess.reporter(f"{self.sess.printer.var(name)}: {self.sess.printer.type(ty)}")

    def do_load(self, arg):
        """Runs a file in this session."""
        if not arg.strip():
            raise GenericException("usage: ':load <file>'", diagnosis=False)
        self.sess.output(self.sess.load(arg.strip()))

    def do_std(self, arg):
        """Loads the standard library."""
        self.sess.load_std()

    def do_dbg(self, arg):
        """Steps through the evaluation of a program, waiting for Enter after every step."""
        def pause(rendered):
            self.sess.reporter(rendered)
            input("<Paused: Enter to step>")

        self.sess.run(arg, verbose=True, reporter=pause)

    def do_type(self, arg):
        """Prints the synthesized type of a λ-term."""
        self.sess.reporter(self.sess.printer.type(self.sess.type_of(arg)))

    def do_cls(self, arg):
        """Clears the screen."""
        print("\x1b[2J\x1b[1;1H", end="")

    do_clear = do_cls

    def do_EOF(self, arg):
        """Exits interpreter."""
        print()
        return True

    def do_quit(self, arg):
        """Exits interpreter."""
        return True

    do_q = do_quit
