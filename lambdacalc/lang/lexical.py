"""Lexical analysis and parsing for lambdacalc language, a thin layer of syntax around the lambda calculus in `pure`.

All grammar can be loosely defined as follows:

```
<program>   ::= (<statement> ";")* <statement>?
<statement> ::= "type" <name> "=" <type>             ; type alias, only used when type checking
              | <name> [":" <type>] "=" <λ-term>     ; binding, only reduced if used later on
              | <λ-term>                             ; will be reduced and outputted when run

<λ-term>    ::= "λ" <name> [":" <type>] "." <λ-term> ; "\" may be used instead of "λ"; bodies are greedy
              | <atom>+ [<abstraction>]              ; application, associating by left: a b c = ((a b) c)
<atom>      ::= <name> | "(" <λ-term> ")" | "(" <name> ":" <type> ")"

<type>      ::= <type-atom> ["->" <type>]            ; associating by right: A -> B -> C = A -> (B -> C)
<type-atom> ::= "*" | <name> | "(" <type> ")"

<comment>   ::= "#" <char>*
```

Names may contain letters, digits and underscores, followed by any number of primes (').
"""

from dataclasses import dataclass

from lambdacalc.lang.error import ParseError
from lambdacalc.pure.ast import (AnyType, Abstraction, Application, Arrow, Assignment, Position, TermStatement,
                                 TypeDef, TypeVariable, Variable)


LAMBDAS = ("λ", "\\")
SYMBOLS = {".": "DOT", "(": "LPAREN", ")": "RPAREN", ":": "COLON", "=": "EQUALS", ";": "SEMI", "*": "STAR"}


@dataclass(frozen=True)
class Token:
    kind: str
    text: str
    line: int
    column: int
    source: str

    @property
    def end(self):
        return self.column + len(self.text)


def is_name_char(char):
    return (char.isalnum() or char == "_") and char not in LAMBDAS


def tokenize(source):
    """Splits source into a list of Tokens, ending with an EOF token. Raises ParseError on unknown characters."""
    tokens = []
    lines = source.split("\n")

    for line_num, line in enumerate(lines, start=1):
        idx = 0
        while idx < len(line):
            char = line[idx]
            column = idx + 1

            if char.isspace():
                idx += 1
            elif char == "#":
                break  # rest of line is a comment
            elif char in LAMBDAS:
                tokens.append(Token("LAMBDA", char, line_num, column, line))
                idx += 1
            elif line.startswith("->", idx):
                tokens.append(Token("ARROW", "->", line_num, column, line))
                idx += 2
            elif char in SYMBOLS:
                tokens.append(Token(SYMBOLS[char], char, line_num, column, line))
                idx += 1
            elif is_name_char(char):
                end = idx
                while end < len(line) and is_name_char(line[end]):
                    end += 1
                while end < len(line) and line[end] == "'":
                    end += 1
                tokens.append(Token("NAME", line[idx:end], line_num, column, line))
                idx = end
            else:
                raise ParseError("unexpected character '{}'", char, position=Position(line_num, column, column + 1,
                                                                                      line))

    last = lines[-1] if lines else ""
    tokens.append(Token("EOF", "", len(lines), len(last) + 1, last))
    return tokens


def are_parens_balanced(source):
    """Whether or not every parenthesis in source (ignoring comments) is closed. Used for line continuations."""
    balance = 0
    for line in source.split("\n"):
        if "#" in line:
            line = line[:line.index("#")]
        balance += line.count("(") - line.count(")")
    return balance <= 0


class Parser:
    """Recursive descent parser producing the syntax trees of `pure.ast` from lambdacalc source."""

    def __init__(self, source):
        self.source = source
        self.tokens = tokenize(source)
        self.idx = 0

    # token helpers

    def peek(self, offset=0):
        idx = min(self.idx + offset, len(self.tokens) - 1)
        return self.tokens[idx]

    def at(self, kind, offset=0):
        return self.peek(offset).kind == kind

    def advance(self):
        token = self.peek()
        if token.kind != "EOF":
            self.idx += 1
        return token

    def previous(self):
        return self.tokens[self.idx - 1]

    def expect(self, kind, what):
        if not self.at(kind):
            self.error(f"expected {what}, found '{{}}'")
        return self.advance()

    def error(self, msg):
        token = self.peek()
        text = token.text if token.kind != "EOF" else "end of input"
        raise ParseError(msg, text, position=Position(token.line, token.column, token.end, token.source))

    def position(self, start):
        """Position spanning from token start to the last consumed token."""
        end = self.previous()
        return Position(start.line, start.column, end.end if end.line == start.line else 0, start.source)

    # statements

    def parse_program(self):
        """Parses the whole source into a list of statements."""
        program = []
        while not self.at("EOF"):
            if self.at("SEMI"):
                self.advance()  # empty statement
                continue

            program.append(self.parse_statement())
            if not self.at("EOF"):
                self.expect("SEMI", "';'")
        return program

    def parse_statement(self):
        start = self.peek()

        if start.text == "type" and self.at("NAME", 1) and self.at("EQUALS", 2):
            self.advance()
            name = self.advance().text
            self.advance()
            return TypeDef(name, self.parse_type(), self.position(start))

        elif self.at("NAME") and (self.at("EQUALS", 1) or self.at("COLON", 1)):
            target = self.advance().text
            annotation = None
            if self.at("COLON"):
                self.advance()
                annotation = self.parse_type()
            self.expect("EQUALS", "'='")
            body = self.parse_term()
            return Assignment(target, body, annotation, self.position(start))

        term = self.parse_term()
        return TermStatement(term, self.position(start))

    # terms

    def parse_term(self):
        if self.at("LAMBDA"):
            return self.parse_abstraction()

        start = self.peek()
        term = self.parse_atom()
        while self.at("NAME") or self.at("LPAREN") or self.at("LAMBDA"):
            if self.at("LAMBDA"):
                argument = self.parse_abstraction()  # greedy, so it is always the last argument
                return Application(term, argument, self.position(start))
            argument = self.parse_atom()
            term = Application(term, argument, self.position(start))
        return term

    def parse_abstraction(self):
        start = self.expect("LAMBDA", "'λ'")
        param = self.expect("NAME", "a parameter name").text

        annotation = None
        if self.at("COLON"):
            self.advance()
            annotation = self.parse_type()

        self.expect("DOT", "'.'")
        body = self.parse_term()
        return Abstraction(param, body, annotation, self.position(start))

    def parse_atom(self):
        start = self.peek()

        if self.at("NAME"):
            self.advance()
            return Variable(start.text, position=self.position(start))

        elif self.at("LPAREN"):
            self.advance()
            if self.at("NAME") and self.at("COLON", 1):
                name = self.advance().text
                self.advance()
                annotation = self.parse_type()
                self.expect("RPAREN", "')'")
                return Variable(name, annotation, self.position(start))

            term = self.parse_term()
            self.expect("RPAREN", "')'")
            return term

        self.error("expected a λ-term, found '{}'")

    # types

    def parse_type(self):
        parameter = self.parse_type_atom()
        if self.at("ARROW"):
            self.advance()
            return Arrow(parameter, self.parse_type())
        return parameter

    def parse_type_atom(self):
        if self.at("STAR"):
            self.advance()
            return AnyType()

        elif self.at("NAME"):
            return TypeVariable(self.advance().text)

        elif self.at("LPAREN"):
            self.advance()
            ty = self.parse_type()
            self.expect("RPAREN", "')'")
            return ty

        self.error("expected a type, found '{}'")


def parse_program(source):
    """Parses lambdacalc source into a program (list of statements). Raises ParseError on invalid source."""
    return Parser(source).parse_program()


def parse_term(source):
    """Parses a single λ-term, which must make up all of source."""
    parser = Parser(source)
    term = parser.parse_term()
    if not parser.at("EOF"):
        parser.error("unexpected '{}' after λ-term")
    return term


def parse_type(source):
    """Parses a single type, which must make up all of source."""
    parser = Parser(source)
    ty = parser.parse_type()
    if not parser.at("EOF"):
        parser.error("unexpected '{}' after type")
    return ty
