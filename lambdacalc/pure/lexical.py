"""Substitution and normal-order beta reduction of lambda calculus syntax trees.

The `pure` directory contains everything needed to reduce pure lambda calculus terms- the lambdacalc language (bindings,
type aliases, sessions) is built on top of it in `lang`.

Reduction follows the normal (leftmost-outermost) order: a redex is fired as soon as the function position of an
application resolves to an abstraction, and arguments are only reduced once no outer redex remains. Names bound in the
session environment are resolved lazily, when they reach the function position of an application, or all at once by
inline_vars when no redex is left.

Sources: https://en.wikipedia.org/wiki/Lambda_calculus#Substitution,
         https://en.wikipedia.org/wiki/Lambda_calculus#Free_and_bound_variables,
         http://pages.cs.wisc.edu/~horwitz/CS704-NOTES/1.LAMBDA-CALCULUS.html#NOR

------------------------------------------------------------------------------------------------------------------------

Normal order reduction is not guaranteed to terminate: `(λx. (x x)) (λx. (x x))` has no normal form, and neither do
fixpoint combinators applied without a base case. NormalOrderReducer will loop for as long as the term keeps changing.
"""

from loguru import logger

from lambdacalc.lang.printer import Printer
from lambdacalc.pure.ast import Abstraction, Application, Variable


MARKER = "'"  # appended to a bound variable until it is fresh


def free_vars(term):
    """Returns the set of names that occur free in term."""
    if isinstance(term, Variable):
        return {term.name}
    elif isinstance(term, Abstraction):
        return free_vars(term.body) - {term.param}
    return free_vars(term.function) | free_vars(term.argument)


def all_vars(term):
    """Returns every name used in term, bound or free."""
    if isinstance(term, Variable):
        return {term.name}
    elif isinstance(term, Abstraction):
        return all_vars(term.body) | {term.param}
    return all_vars(term.function) | all_vars(term.argument)


def rename_var(term, old, new):
    """Renames every occurrence of old in term to new, abstraction parameters included."""
    if isinstance(term, Variable):
        if term.name == old:
            return Variable(new, term.annotation, term.position)
        return term

    elif isinstance(term, Abstraction):
        param = new if term.param == old else term.param
        return Abstraction(param, rename_var(term.body, old, new), term.annotation, term.position)

    return Application(rename_var(term.function, old, new), rename_var(term.argument, old, new), term.position)


def fresh_var(var, avoid):
    """Returns var with MARKER appended until it is not in avoid."""
    while var in avoid:
        var += MARKER
    return var


def substitute(term, var, value):
    """Capture-avoiding substitution term[var := value]. Used to fire redexes (λvar.term) value.

    If an abstraction in term binds a name that is free in value, its parameter is renamed first, so that
    (λy. x)[x := y] gives λy'. y and never λy. y. The new name is never var itself.
    """
    if isinstance(term, Variable):
        return value if term.name == var else term

    elif isinstance(term, Application):
        return Application(substitute(term.function, var, value), substitute(term.argument, var, value), term.position)

    if term.param == var:
        return term  # var is bound here, so it has no free occurrences in the body

    value_vars = free_vars(value)
    if term.param in value_vars:
        new_param = fresh_var(term.param, value_vars | all_vars(term.body) | {var})
        body = substitute(rename_var(term.body, term.param, new_param), var, value)
        return Abstraction(new_param, body, term.annotation, term.position)

    return Abstraction(term.param, substitute(term.body, var, value), term.annotation, term.position)


def beta_reduce(term, env, bound_vars=frozenset()):
    """Performs one round of normal-order beta reduction of term. bound_vars are the names bound by abstractions
    enclosing term: those are never looked up in env.
    """
    if isinstance(term, Variable):
        return term

    elif isinstance(term, Abstraction):
        return Abstraction(term.param, beta_reduce(term.body, env, bound_vars | {term.param}), term.annotation,
                           term.position)

    function = term.function
    if isinstance(function, Variable) and function.name not in bound_vars:
        function = env.resolve(function.name)

    if isinstance(function, Abstraction):
        return substitute(function.body, function.param, term.argument)  # redex: argument is not reduced first

    return Application(beta_reduce(function, env, bound_vars), beta_reduce(term.argument, env, bound_vars),
                       term.position)


def inline_vars(term, env, bound_vars=frozenset()):
    """Replaces every free variable in term that is bound in env with its (chain-resolved) binding. The inlined terms
    are not themselves inlined.
    """
    if isinstance(term, Variable):
        if term.name in env and term.name not in bound_vars:
            return env.resolve(term.name)
        return term

    elif isinstance(term, Abstraction):
        return Abstraction(term.param, inline_vars(term.body, env, bound_vars | {term.param}), term.annotation,
                           term.position)

    return Application(inline_vars(term.function, env, bound_vars), inline_vars(term.argument, env, bound_vars),
                       term.position)


class NormalOrderReducer:
    """Implements reduction of a syntax tree to beta normal form against a session environment.

    When verbose is set, reporter is called with a rendering of every intermediate term (render defaults to the plain
    printer). It is purely observational: whatever it returns is ignored.
    """

    def __init__(self, env, verbose=False, reporter=None, render=None):
        self.env = env
        self.verbose = verbose
        self.reporter = reporter
        self.render = render if render is not None else Printer(color=False).term
        self.steps = 0

    def step(self, term):
        """Performs one step of the fixpoint loop: a round of beta reduction or, if that makes no progress, a round of
        inlining. Returns the new term, which is equal to term if term is in normal form.
        """
        reduced = beta_reduce(term, self.env)
        if reduced == term:
            reduced = inline_vars(reduced, self.env)
        return reduced

    def reduce(self, term):
        """Reduces term until neither beta reduction nor inlining changes it. Does not return if term has no normal
        form.
        """
        self.steps = 0
        while True:
            reduced = self.step(term)
            if reduced == term:
                logger.debug("normal form reached after {} steps", self.steps)
                return term

            term = reduced
            self.steps += 1
            logger.opt(lazy=True).debug("step {}: {}", lambda: self.steps, lambda: self.render(term))

            if self.verbose and self.reporter is not None:
                self.reporter(self.render(term))


def reduce_to_normal_form(term, env, verbose=False, reporter=None, render=None):
    """Reduces term to beta normal form. See NormalOrderReducer."""
    return NormalOrderReducer(env, verbose, reporter, render).reduce(term)
