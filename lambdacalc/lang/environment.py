"""Binding environment for lambda calculus sessions."""

from loguru import logger

from lambdacalc.pure.ast import Variable


class Environment:
    """Mapping of names to the unevaluated terms most recently bound to them.

    Terms are never reduced when bound, which is what allows recursive definitions such as `A = λx. (A x)` to be stored
    without looping. Entries are only ever removed all at once, with clear.
    """

    def __init__(self, bindings=None):
        self._bindings = dict(bindings) if bindings else {}

    def bind(self, name, term):
        """Binds term to name. The last binding of a name wins."""
        self._bindings[name] = term
        logger.debug("bound {}", name)

    def lookup(self, name):
        """Returns the term bound to name as it was stored, or None if name is unbound."""
        return self._bindings.get(name)

    def resolve(self, name):
        """Returns the term bound to name, following bindings of one name to another (`x = y; y = z;` resolves x to z)
        until a non-variable term or an unbound name is reached. Returns Variable(name) if name is unbound.
        """
        term = self._bindings.get(name)
        if term is None:
            return Variable(name)

        seen = {name}
        while isinstance(term, Variable) and term.name in self._bindings and term.name not in seen:
            seen.add(term.name)
            term = self._bindings[term.name]
        return term

    def items(self):
        return self._bindings.items()

    def snapshot(self):
        """Shallow copy of the current bindings."""
        return dict(self._bindings)

    def clear(self):
        self._bindings.clear()

    def __contains__(self, name):
        return name in self._bindings

    def __iter__(self):
        return iter(self._bindings)

    def __len__(self):
        return len(self._bindings)

    def __repr__(self):
        return f"Environment({sorted(self._bindings)})"
