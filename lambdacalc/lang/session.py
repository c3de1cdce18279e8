"""Session control for lambdacalc language. Runs programs against a binding environment (and, if type checking is
enabled, a typing context) that persist across runs, either in command line mode or file interpretation mode.
"""

import os

from loguru import logger

from lambdacalc.lang.environment import Environment
from lambdacalc.lang.error import GenericException
from lambdacalc.lang.lexical import parse_program, parse_term
from lambdacalc.lang.printer import Printer
from lambdacalc.pure.ast import Assignment, TermStatement, TypeDef
from lambdacalc.pure.lexical import inline_vars, reduce_to_normal_form
from lambdacalc.typed.checker import TypeChecker
from lambdacalc.typed.context import Context


STD_PATH = os.path.join(os.path.dirname(os.path.abspath(__file__)), "std.lc")


def eval_statement(stmt, env, verbose=False, reporter=None, printer=None):
    """Evaluates one statement and returns the resulting term: the unevaluated body for bindings, the normal form for
    bare terms and None for type aliases.

    Bindings are explicitly NOT reduced, so that recursive combinators are not evaluated until they are used.
    """
    if printer is None:
        printer = Printer(color=False)
    report = verbose and reporter is not None

    if isinstance(stmt, Assignment):
        if report:
            reporter(printer.assign(stmt.target, stmt.body, stmt.annotation))
        env.bind(stmt.target, stmt.body)
        return stmt.body

    elif isinstance(stmt, TermStatement):
        term = inline_vars(stmt.term, env)
        if report:
            reporter(printer.term(term))
        return reduce_to_normal_form(term, env, verbose, reporter, printer.term)

    elif isinstance(stmt, TypeDef):
        return None

    raise GenericException("'{}' is not a statement", repr(stmt), internal=True)


class Session:
    """Governs a lambdacalc session, with control over its binding environment and typing context."""
    SH_FILE = "<in>"  # command-line interpreter filename

    def __init__(self, error_handler, verbose=False, typecheck=False, color=True, reporter=print):
        self.error_handler = error_handler

        self.verbose = verbose      # whether or not to report every reduction step
        self.typecheck = typecheck  # whether or not to type check statements before running them
        self.printer = Printer(color)
        self.reporter = reporter    # called with rendered output

        self.env = Environment()
        self.context = Context()
        self.checker = TypeChecker(self.context)

    def run(self, source, path=SH_FILE, verbose=None, reporter=None, typecheck=None):
        """Parses and runs source. Returns a list of (statement, normal form) pairs, one per bare term. Raises a
        GenericException on the first parse or type error, in which case no statement of source is evaluated (the
        typing context keeps what was bound before the error).
        """
        verbose = self.verbose if verbose is None else verbose
        reporter = self.reporter if reporter is None else reporter
        typecheck = self.typecheck if typecheck is None else typecheck

        self.error_handler.register_file(path)
        program = parse_program(source.replace("\r", ""))
        logger.debug("parsed {} statements from {}", len(program), path)

        if typecheck:
            self.checker.check_program(program)

        results = []
        for stmt in program:
            if verbose and results and isinstance(stmt, TermStatement):
                reporter(self.printer.rule())  # separates the steps of consecutive terms

            source_line = stmt.position.source if stmt.position else ""
            line_num = stmt.position.line if stmt.position else 0
            self.error_handler.register_line(path, source_line, line_num)  # in case error is raised

            result = eval_statement(stmt, self.env, verbose, reporter, self.printer)
            if isinstance(stmt, TermStatement):
                results.append((stmt, result))

            self.error_handler.remove_line(path)  # error was not raised

        self.error_handler.remove_file(path)
        return results

    def load(self, path, typecheck=None):
        """Runs the file at path in this session."""
        try:
            with open(path, "r", encoding="utf-8") as file:
                source = file.read()
        except OSError:
            raise GenericException("'{}' could not be opened", path, diagnosis=False)
        return self.run(source, path, typecheck=typecheck)

    def load_std(self):
        """Runs the standard library (see std.lc) in this session."""
        return self.load(STD_PATH, typecheck=False)

    def type_of(self, source):
        """Synthesizes the type of a single λ-term against the session's typing context."""
        return self.checker.synthesize(parse_term(source))

    def clear_env(self):
        self.env.clear()

    def clear_context(self):
        self.context.clear()

    def output(self, results):
        """Reports the normal form of the last term of results. In verbose mode it has already been reported as a
        step.
        """
        if results and not self.verbose:
            __, last = results[-1]
            self.reporter(self.printer.term(last))
