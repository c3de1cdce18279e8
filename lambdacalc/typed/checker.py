"""Bidirectional type checker for lambdacalc.

Two judgments over the typing context Γ:
- synthesis, Γ ⊢ e ⇒ T: derive a type for e (TypeChecker.synthesize)
- checking, Γ ⊢ e ⇐ T: verify that e has type T (TypeChecker.check)

Types are never solved for: an unannotated abstraction parameter x simply gets the atomic type named x. The wildcard
type `*` compares equal to every type, which makes type equality deliberately non-transitive: `*` is a universal
match, not a supertype, and comparing against it never refines either side.

Source: https://davidchristiansen.dk/tutorials/bidirectional.pdf
"""

from loguru import logger

from lambdacalc.pure.ast import AnyType, Abstraction, Arrow, Assignment, TermStatement, TypeDef, TypeVariable, Variable
from lambdacalc.typed.context import Context
from lambdacalc.typed.errors import MismatchError, NotAFunctionError, UnboundError


def compare_types(a, b):
    """Structural type equality in which AnyType matches anything, in either position."""
    if isinstance(a, AnyType) or isinstance(b, AnyType):
        return True
    elif isinstance(a, TypeVariable) and isinstance(b, TypeVariable):
        return a.name == b.name
    elif isinstance(a, Arrow) and isinstance(b, Arrow):
        return compare_types(a.parameter, b.parameter) and compare_types(a.result, b.result)
    return False


class TypeChecker:
    """Checks terms and statements against a typing context, which binding statements and type aliases extend."""

    def __init__(self, context=None):
        self.context = context if context is not None else Context()

    # types

    def resolve_type(self, ty, seen=frozenset()):
        """Replaces every type name bound in the context with its binding. Chains of names are followed until a name
        repeats, including through arrows: in `type A = A -> B;`, A resolves to `A -> B` with the inner A left as is.
        """
        if isinstance(ty, AnyType):
            return ty
        elif isinstance(ty, Arrow):
            return Arrow(self.resolve_type(ty.parameter, seen), self.resolve_type(ty.result, seen))

        while isinstance(ty, TypeVariable) and ty.name in self.context and ty.name not in seen:
            seen = seen | {ty.name}
            ty = self.context.lookup(ty.name)

        if isinstance(ty, Arrow):
            return self.resolve_type(ty, seen)
        return ty

    def equal(self, a, b):
        """compare_types after resolving aliases on both sides."""
        return compare_types(self.resolve_type(a), self.resolve_type(b))

    # judgments

    def synthesize(self, term):
        """Γ ⊢ term ⇒ T. Returns T."""
        if isinstance(term, Variable):
            return self._synthesize_variable(term)

        elif isinstance(term, Abstraction):
            if term.annotation is not None:
                param_type = self.resolve_type(term.annotation)
            else:
                param_type = TypeVariable(term.param)

            with self.context.scoped(term.param, param_type):
                body_type = self.synthesize(term.body)
            return Arrow(param_type, body_type)

        function_type = self.resolve_type(self.synthesize(term.function))
        if not isinstance(function_type, Arrow):
            raise NotAFunctionError(function_type, term.position)

        self.check(term.argument, function_type.parameter, term.position)
        return function_type.result

    def _synthesize_variable(self, term):
        bound = self.context.lookup(term.name)

        if term.annotation is not None:
            declared = self.resolve_type(term.annotation)
            if bound is not None and not self.equal(declared, bound):
                raise MismatchError(declared, bound, term.position)

        if bound is None:
            raise UnboundError(term.name, term.position)
        return bound

    def check(self, term, expected, position=None):
        """Γ ⊢ term ⇐ expected. Raises a TypeCheckError if term does not have type expected. A mismatch found by
        falling back to synthesis is reported at position if given (the enclosing application), else at term's.
        """
        expected = self.resolve_type(expected)

        if isinstance(term, Abstraction) and isinstance(expected, Arrow):
            param_type = expected.parameter
            if term.annotation is not None:
                annotation = self.resolve_type(term.annotation)
                if not compare_types(annotation, param_type):
                    raise MismatchError(param_type, annotation, term.position)
                if isinstance(param_type, AnyType):
                    param_type = annotation

            with self.context.scoped(term.param, param_type):
                self.check(term.body, expected.result)
            return

        found = self.synthesize(term)
        if not self.equal(expected, found):
            raise MismatchError(expected, found, position if position is not None else term.position)

    # statements

    def check_bind(self, target, annotation, body, position=None):
        """Checks binding statement `target [: annotation] = body`, binding target in the context if it was unbound.
        Returns the type of target.

        If target is already bound, its stored type is kept (a compatible re-declaration does not replace it) and body
        is checked against it.
        """
        try:
            ty = self._synthesize_variable(Variable(target, annotation, position))
        except UnboundError:
            if annotation is not None:
                ty = self.resolve_type(annotation)
                self.context.bind(target, ty)  # bound first, so that body may refer to target
                self.check(body, ty)
                return ty

            ty = self.synthesize(body)
            self.context.bind(target, ty)
            return ty

        self.check(body, ty)
        return ty

    def check_statement(self, stmt):
        """Checks one statement, extending the context with bindings and aliases. Returns the statement's type, or
        None for type aliases.
        """
        logger.debug("checking {}", type(stmt).__name__)

        if isinstance(stmt, Assignment):
            return self.check_bind(stmt.target, stmt.annotation, stmt.body, stmt.position)
        elif isinstance(stmt, TypeDef):
            self.context.bind(stmt.name, stmt.type)
            return None
        elif isinstance(stmt, TermStatement):
            return self.synthesize(stmt.term)
        raise TypeError(f"not a statement: {stmt!r}")

    def check_program(self, program):
        """Checks every statement of program in order, then strips TypeDefs from program (in place): they have no
        meaning once checked. Raises on the first error, leaving program untouched.
        """
        for stmt in program:
            self.check_statement(stmt)
        program[:] = [stmt for stmt in program if not isinstance(stmt, TypeDef)]


def check_program(context, program):
    """Type checks program against context. See TypeChecker.check_program."""
    TypeChecker(context).check_program(program)


def check_term(context, term, expected=None):
    """Checks term against expected, or synthesizes its type if expected is None. Returns the type."""
    checker = TypeChecker(context)
    if expected is None:
        return checker.synthesize(term)
    checker.check(term, expected)
    return expected
