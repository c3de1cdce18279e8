import unittest

from lambdacalc.lang.lexical import parse_program, parse_term, parse_type
from lambdacalc.pure.ast import AnyType, Arrow, TypeDef, TypeVariable
from lambdacalc.typed import (Context, MismatchError, NotAFunctionError, TypeChecker, UnboundError, check_program,
                              check_term, compare_types)


def context(**bindings):
    """Context binding every keyword to its parsed type."""
    return Context({name: parse_type(ty) for name, ty in bindings.items()})


class CompareTypesTestCase(unittest.TestCase):

    def test_compare(self):
        should_pass = [("A", "A"), ("*", "A"), ("A", "*"), ("A -> B", "A -> B"), ("A -> *", "A -> B"),
                       ("*", "A -> B"), ("(A -> B) -> C", "* -> C")]
        should_fail = [("A", "B"), ("A -> B", "A"), ("A -> B", "B -> A"), ("(A -> B) -> C", "A -> B -> C")]

        for a, b in should_pass:
            self.assertTrue(compare_types(parse_type(a), parse_type(b)), (a, b))
        for a, b in should_fail:
            self.assertFalse(compare_types(parse_type(a), parse_type(b)), (a, b))

    def test_not_transitive(self):
        a, b = TypeVariable("A"), TypeVariable("B")
        self.assertTrue(compare_types(a, AnyType()))
        self.assertTrue(compare_types(AnyType(), b))
        self.assertFalse(compare_types(a, b))


class SynthesizeTestCase(unittest.TestCase):

    def test_synthesize(self):
        checker = TypeChecker(context(true="Bool", succ="Nat -> Nat", zero="Nat"))
        cases = {
            "true": "Bool",
            "λx. x": "x -> x",
            "λx. λy. x": "x -> y -> x",
            "λx: Nat. x": "Nat -> Nat",
            "succ zero": "Nat",
            "succ (succ zero)": "Nat",
            "(λx: Bool. x) true": "Bool",
            "λf: Nat -> Nat. f zero": "(Nat -> Nat) -> Nat",
            "(true: Bool)": "Bool",
            "(true: *)": "Bool",
        }
        for case, expected in cases.items():
            self.assertEqual(parse_type(expected), checker.synthesize(parse_term(case)), case)

    def test_unbound(self):
        checker = TypeChecker()
        for case in ["x", "λx. y", "(λx. x) y"]:
            self.assertRaises(UnboundError, checker.synthesize, parse_term(case))

    def test_not_a_function(self):
        checker = TypeChecker(context(a="A"))
        with self.assertRaises(NotAFunctionError) as cm:
            checker.synthesize(parse_term("a a"))
        self.assertEqual(TypeVariable("A"), cm.exception.type)

    def test_mismatch_reported_at_application(self):
        checker = TypeChecker(context(true="Bool"))
        term = parse_term("(λx: Nat. x) true")

        with self.assertRaises(MismatchError) as cm:
            checker.synthesize(term)
        self.assertEqual(TypeVariable("Nat"), cm.exception.expected)
        self.assertEqual(TypeVariable("Bool"), cm.exception.found)
        self.assertEqual(term.position, cm.exception.position)

    def test_annotated_variable(self):
        checker = TypeChecker(context(true="Bool"))
        self.assertRaises(MismatchError, checker.synthesize, parse_term("(true: Nat)"))
        self.assertRaises(UnboundError, checker.synthesize, parse_term("(false: Bool)"))

    def test_scopes_restored(self):
        ctx = context(x="Bool")
        checker = TypeChecker(ctx)

        checker.synthesize(parse_term("λx. λy. x"))
        self.assertEqual({"x": TypeVariable("Bool")}, ctx.snapshot())

        self.assertRaises(UnboundError, checker.synthesize, parse_term("λy. z"))
        self.assertEqual({"x": TypeVariable("Bool")}, ctx.snapshot())


class CheckTestCase(unittest.TestCase):

    def test_check(self):
        checker = TypeChecker(context(zero="Nat", true="Bool"))
        should_pass = [("λx. x", "Nat -> Nat"), ("λx. zero", "Bool -> Nat"), ("λx: Nat. x", "Nat -> Nat"),
                       ("λx: Nat. x", "* -> Nat"), ("λx. x", "*"), ("zero", "*"), ("λx. λy. y", "A -> B -> B")]
        should_fail = [("λx. true", "Nat -> Nat"), ("λx: Bool. x", "Nat -> Nat"), ("zero", "Bool"),
                       ("λx. λy. x", "A -> B -> B")]

        for term, ty in should_pass:
            checker.check(parse_term(term), parse_type(ty))
        for term, ty in should_fail:
            self.assertRaises(MismatchError, checker.check, parse_term(term), parse_type(ty))

    def test_wildcard_parameter_refined_by_annotation(self):
        checker = TypeChecker()
        checker.check(parse_term("λx: Nat. (x: Nat)"), parse_type("* -> Nat"))
        self.assertRaises(MismatchError, checker.check, parse_term("λx: Nat. (x: Bool)"), parse_type("* -> *"))

    def test_scopes_restored_on_failure(self):
        ctx = Context()
        checker = TypeChecker(ctx)
        self.assertRaises(MismatchError, checker.check, parse_term("λx. λy. x"), parse_type("A -> B -> B"))
        self.assertEqual(0, len(ctx))

    def test_aliases(self):
        checker = TypeChecker(context(Nat="*", F="Nat -> Nat", G="F"))
        self.assertEqual(parse_type("* -> *"), checker.resolve_type(TypeVariable("G")))
        checker.check(parse_term("λx. x"), TypeVariable("G"))


class CheckProgramTestCase(unittest.TestCase):

    def test_type_defs_stripped(self):
        ctx = Context()
        program = parse_program("type F = Nat -> Nat; id: F = λx. x; id;")

        check_program(ctx, program)
        self.assertFalse(any(isinstance(stmt, TypeDef) for stmt in program))
        self.assertEqual(2, len(program))
        self.assertEqual(parse_type("Nat -> Nat"), ctx.lookup("id"))
        self.assertEqual(parse_type("Nat -> Nat"), ctx.lookup("F"))

    def test_failure_leaves_program(self):
        program = parse_program("type F = Nat -> Nat; x = y;")
        self.assertRaises(UnboundError, check_program, Context(), program)
        self.assertEqual(2, len(program))

    def test_recursive_bindings(self):
        self.assertRaises(UnboundError, check_program, Context(), parse_program("A = λx. (A x);"))

        ctx = Context()
        check_program(ctx, parse_program("A: * -> * = λx. (A x);"))
        self.assertEqual(parse_type("* -> *"), ctx.lookup("A"))

    def test_unannotated_binding(self):
        ctx = Context()
        check_program(ctx, parse_program("I = λx. x;"))
        self.assertEqual(parse_type("x -> x"), ctx.lookup("I"))

    def test_first_declaration_wins(self):
        ctx = context(Nat="*")
        check_program(ctx, parse_program("a: * = λx. x; a: Nat = λy. y;"))
        self.assertEqual(AnyType(), ctx.lookup("a"))

        ctx = context(b="Nat")
        self.assertRaises(MismatchError, check_program, ctx, parse_program("b: Bool = λx. x;"))
        self.assertEqual(TypeVariable("Nat"), ctx.lookup("b"))

    def test_wildcard_does_not_propagate(self):
        ctx = context(z="A")
        check_program(ctx, parse_program("a: A = z; b: * = a;"))
        self.assertEqual(AnyType(), ctx.lookup("b"))

        # b matches both A and B, but a does not match B
        check_program(ctx, parse_program("c: B = b;"))
        self.assertRaises(MismatchError, check_program, ctx, parse_program("d: B = a;"))

    def test_annotations_resolved_when_bound(self):
        ctx = context(z="Nat")
        check_program(ctx, parse_program("type N = Nat; n: N = z; type N = Bool;"))

        self.assertEqual(TypeVariable("Nat"), ctx.lookup("n"))
        check_program(ctx, parse_program("m: Nat = n;"))
        self.assertRaises(MismatchError, check_program, ctx, parse_program("b: N = n;"))

    def test_self_referential_alias(self):
        ctx = Context()
        checker = TypeChecker(ctx)
        checker.check_program(parse_program("type A = A -> B;"))

        self.assertEqual(parse_type("A -> B"), checker.resolve_type(TypeVariable("A")))
        checker.check_program(parse_program("self: A = λx. x x;"))
        self.assertRaises(MismatchError, checker.check_program, parse_program("f: A = λx. x;"))


class CheckTermTestCase(unittest.TestCase):

    def test_check_term(self):
        ctx = context(zero="Nat")
        self.assertEqual(TypeVariable("Nat"), check_term(ctx, parse_term("zero")))
        self.assertEqual(Arrow(TypeVariable("Nat"), AnyType()),
                         check_term(ctx, parse_term("λx. x"), parse_type("Nat -> *")))
        self.assertRaises(MismatchError, check_term, ctx, parse_term("zero"), parse_type("Bool"))


if __name__ == '__main__':
    unittest.main()
