"""Pretty printing of lambdacalc terms, types and statements. Colors are applied with termcolor, which also honors the
NO_COLOR and FORCE_COLOR environment variables.

Plain (uncolored) output is valid lambdacalc syntax:

```
x            ; variable
(x: Nat)     ; annotated variable
λx. (x y)    ; abstraction
λx: Nat. x   ; abstraction with annotated parameter
(f x)        ; application
Nat -> *     ; function type
```
"""

from termcolor import colored

from lambdacalc.pure.ast import (AnyType, Abstraction, Application, Arrow, Assignment, TermStatement, TypeDef,
                                 TypeVariable, Variable)


class Printer:
    """Renders syntax trees as (optionally colored) strings."""
    LAMBDA = "yellow"
    PUNCTUATION = "dark_grey"
    BOOLEAN = "cyan"
    FUNCTION = "magenta"
    NUMBER = "green"
    TYPE = "blue"

    def __init__(self, color=True):
        self.color = color

    def _paint(self, text, color=None, attrs=None):
        if not self.color:
            return text
        return colored(text, color, attrs=attrs)

    def _punct(self, text):
        return self._paint(text, Printer.PUNCTUATION)

    def var(self, name):
        """Colors a name: booleans cyan, capitalized (function) names magenta, numbers green, others italic."""
        if name in ("true", "false"):
            return self._paint(name, Printer.BOOLEAN, ["italic"])
        elif name[0].isupper():
            return self._paint(name, Printer.FUNCTION)
        elif name.isdigit():
            return self._paint(name, Printer.NUMBER)
        return self._paint(name, attrs=["italic"])

    def type(self, ty):
        if isinstance(ty, AnyType):
            return self._paint("*", Printer.TYPE)
        elif isinstance(ty, TypeVariable):
            return self._paint(ty.name, Printer.TYPE)

        parameter = self.type(ty.parameter)
        if isinstance(ty.parameter, Arrow):
            parameter = f"{self._punct('(')}{parameter}{self._punct(')')}"
        return f"{parameter} {self._punct('->')} {self.type(ty.result)}"

    def term(self, term):
        if isinstance(term, Variable):
            if term.annotation is None:
                return self.var(term.name)
            return f"{self._punct('(')}{self.var(term.name)}{self._punct(':')} {self.type(term.annotation)}" \
                   f"{self._punct(')')}"

        elif isinstance(term, Abstraction):
            param = self.var(term.param)
            if term.annotation is not None:
                param += f"{self._punct(':')} {self.type(term.annotation)}"
            return f"{self._paint('λ', Printer.LAMBDA)}{param}{self._punct('.')} {self.term(term.body)}"

        function = self.term(term.function)
        if isinstance(term.function, Abstraction):
            function = f"{self._punct('(')}{function}{self._punct(')')}"  # otherwise the body would swallow argument
        return f"{self._punct('(')}{function} {self.term(term.argument)}{self._punct(')')}"

    def assign(self, name, term, annotation=None):
        target = self.var(name)
        if annotation is not None:
            target += f"{self._punct(':')} {self.type(annotation)}"
        return f"{target} = {self.term(term)}{self._punct(';')}"

    def statement(self, stmt):
        if isinstance(stmt, Assignment):
            return self.assign(stmt.target, stmt.body, stmt.annotation)
        elif isinstance(stmt, TypeDef):
            return f"{self._paint('type', Printer.LAMBDA)} {self.type(TypeVariable(stmt.name))} = " \
                   f"{self.type(stmt.type)}{self._punct(';')}"
        elif isinstance(stmt, TermStatement):
            return f"{self.term(stmt.term)}{self._punct(';')}"
        raise TypeError(f"not a statement: {stmt!r}")

    def rule(self, length=20):
        """Horizontal rule separating the steps of consecutive terms in verbose output."""
        return self._punct("-" * length)
