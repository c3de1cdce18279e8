"""Error types for the lambdacalc type checker. The first error raised aborts checking of the current statement."""

from lambdacalc.lang.error import GenericException
from lambdacalc.lang.printer import Printer


_plain = Printer(color=False)


class TypeCheckError(GenericException):
    """Base class for type errors."""


class UnboundError(TypeCheckError):
    """A variable or type name has no entry in the typing context."""

    def __init__(self, name, position=None):
        self.name = name
        super().__init__("'{}' is unbound", name, position=position)


class NotAFunctionError(TypeCheckError):
    """The function position of an application synthesized a non-function type."""

    def __init__(self, ty, position=None):
        self.type = ty
        super().__init__("expected a function, found type '{}'", _plain.type(ty), position=position)


class MismatchError(TypeCheckError):
    """A checked type disagreed with the expected type."""

    def __init__(self, expected, found, position=None):
        self.expected = expected
        self.found = found
        super().__init__("expected type '{}', found '{}'", (_plain.type(expected), _plain.type(found)),
                         position=position)
