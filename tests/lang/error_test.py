import io
import unittest

from lambdacalc.lang.error import ErrorHandler, GenericException, ParseError
from lambdacalc.pure.ast import Position


class GenericExceptionTestCase(unittest.TestCase):

    def test_message(self):
        error = GenericException("'{}' could not be opened", "missing.lc")
        self.assertEqual("'missing.lc' could not be opened", error.plain_msg)
        self.assertEqual("missing.lc", error.expr)
        self.assertEqual((0, len("missing.lc")), (error.start, error.end))

    def test_position(self):
        error = ParseError("unexpected '{}'", ")", position=Position(1, 5, 6, "x y ) z"))
        self.assertEqual("x y ) z", error.expr)
        self.assertEqual((4, 5), (error.start, error.end))

    def test_position_without_end(self):
        error = ParseError("unexpected '{}'", "x", position=Position(2, 3, 0, "a x"))
        self.assertEqual((2, 3), (error.start, error.end))


class ErrorHandlerTestCase(unittest.TestCase):

    def setUp(self):
        self.out = io.StringIO()
        self.handler = ErrorHandler(fatal=False, file=self.out)

    def test_suppresses_generic_exceptions(self):
        with self.handler:
            raise ParseError("unexpected '{}'", ")", position=Position(1, 5, 6, "x y ) z"))

        output = self.out.getvalue()
        self.assertIn("error", output)
        self.assertIn("unexpected", output)
        self.assertIn("^", output)
        self.assertEqual(1, self.handler.errors)

    def test_recursion_error(self):
        with self.handler:
            raise RecursionError()
        self.assertIn("maximum recursion depth exceeded", self.out.getvalue())

    def test_keyboard_interrupt(self):
        with self.handler:
            raise KeyboardInterrupt()
        self.assertIn("keyboard interrupt", self.out.getvalue())

    def test_internal_errors_propagate(self):
        with self.assertRaises(ValueError):
            with self.handler:
                raise ValueError("boom")
        self.assertIn("internal", self.out.getvalue())

    def test_fatal(self):
        handler = ErrorHandler(fatal=True, file=self.out)
        with self.assertRaises(SystemExit) as cm:
            with handler:
                raise GenericException("bad")
        self.assertEqual(1, cm.exception.code)

    def test_traceback(self):
        self.handler.register_file("main.lc")
        self.handler.register_line("main.lc", "x = y;", 1)
        self.handler.register_file("lib.lc")
        self.handler.register_line("lib.lc", "z", 3)

        with self.handler:
            raise GenericException("bad")

        output = self.out.getvalue()
        self.assertIn("Traceback", output)
        self.assertIn("File 'lib.lc', line 3", output)
        self.assertEqual({}, self.handler.traceback)

    def test_warn(self):
        self.handler.warn("'{}' shadows a binding", "x")
        self.assertIn("warning", self.out.getvalue())


if __name__ == '__main__':
    unittest.main()
