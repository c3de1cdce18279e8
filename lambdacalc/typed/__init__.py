from lambdacalc.typed.checker import TypeChecker, check_program, check_term, compare_types
from lambdacalc.typed.context import Context
from lambdacalc.typed.errors import MismatchError, NotAFunctionError, TypeCheckError, UnboundError
