"""Abstract syntax for the lambda calculus: terms, types and top-level statements.

Formally, the extended lambda calculus can be defined as

```
<λ-term> ::= <name> [":" <type>]                   ; "variable", optionally annotated
           | "λ" <name> [":" <type>] "." <λ-term>   ; "abstraction"
           | <λ-term> <λ-term>                      ; "application", associating by left
<type>   ::= "*"                                    ; wildcard, matches every type
           | <name>                                 ; atomic type or alias
           | <type> "->" <type>                     ; function type
```

Every node is an immutable dataclass, so subtrees can be shared between terms without copying. Source positions are
carried for diagnostics and never take part in equality.

Source: https://en.wikipedia.org/wiki/Lambda_calculus#Definition
"""

from dataclasses import dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Position:
    """1-based line and column of the first token of a node, the column just past its last token (on the same line,
    else 0), and the text of the source line.
    """
    line: int
    column: int
    end: int = 0
    source: str = ""

    def __str__(self):
        return f"{self.line}:{self.column}"


# types

class Type:
    """Superclass of every type in the type grammar."""


@dataclass(frozen=True)
class AnyType(Type):
    """Wildcard type `*`: compares equal to any other type."""


@dataclass(frozen=True)
class TypeVariable(Type):
    """Atomic type name, or the name of an alias introduced by a TypeDef."""
    name: str


@dataclass(frozen=True)
class Arrow(Type):
    """Function type: parameter -> result."""
    parameter: Type
    result: Type


# terms

class Term:
    """Superclass of every λ-term: Variable, Abstraction or Application."""
    position: Optional[Position]


@dataclass(frozen=True)
class Variable(Term):
    name: str
    annotation: Optional[Type] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Abstraction(Term):
    param: str
    body: Term
    annotation: Optional[Type] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class Application(Term):
    function: Term
    argument: Term
    position: Optional[Position] = field(default=None, compare=False, repr=False)


# statements

class Statement:
    """Superclass of top-level statements. A program is an ordered list of statements."""
    position: Optional[Position]


@dataclass(frozen=True)
class Assignment(Statement):
    """<name> [":" <type>] "=" <λ-term>: binds the unevaluated body to target."""
    target: str
    body: Term
    annotation: Optional[Type] = None
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TypeDef(Statement):
    """"type" <name> "=" <type>: introduces a type alias. Only meaningful to the type checker."""
    name: str
    type: Type
    position: Optional[Position] = field(default=None, compare=False, repr=False)


@dataclass(frozen=True)
class TermStatement(Statement):
    """A bare λ-term, reduced to normal form and reported when run."""
    term: Term
    position: Optional[Position] = field(default=None, compare=False, repr=False)
