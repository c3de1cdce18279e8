"""Typing context for lambdacalc."""

from contextlib import contextmanager


class Context:
    """Typing context Γ: maps names to types.

    Term names and type alias names share one namespace: a TypeDef binds its alias here the same way a binding
    statement binds its target.
    """

    def __init__(self, bindings=None):
        self._bindings = dict(bindings) if bindings else {}

    def lookup(self, name):
        """Returns the type bound to name, or None if name is unbound."""
        return self._bindings.get(name)

    def bind(self, name, ty):
        self._bindings[name] = ty

    def unbind(self, name):
        self._bindings.pop(name, None)

    @contextmanager
    def scoped(self, name, ty):
        """Binds name to ty for the duration of a with block, then restores the previous binding of name (or its
        absence), even if the block raises.
        """
        missing = object()
        previous = self._bindings.get(name, missing)
        self._bindings[name] = ty
        try:
            yield self
        finally:
            if previous is missing:
                del self._bindings[name]
            else:
                self._bindings[name] = previous

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
        return f"Context({sorted(self._bindings)})"
