"""Arithmetic for /calc and the inline ``calc`` keyword.

Input is first stripped down to digits, the four operators, parentheses
and the decimal point, then evaluated by a small recursive-descent
parser. Nothing outside arithmetic can ever run.
"""

from __future__ import annotations

import math
import re

_DISALLOWED = re.compile(r"[^0-9+\-*/().]")
_TOKEN = re.compile(r"\d+(?:\.\d*)?|\.\d+|[+\-*/()]")

# deepest chain of parentheses and unary signs accepted
MAX_DEPTH = 100


class CalcError(ValueError):
    """Raised for empty, malformed or non-finite expressions."""


def sanitize(expr: str) -> str:
    return _DISALLOWED.sub("", expr or "")


def _tokenize(expr: str) -> list[str]:
    tokens = []
    pos = 0
    while pos < len(expr):
        m = _TOKEN.match(expr, pos)
        if not m:
            raise CalcError(f"unexpected character at {pos}")
        tokens.append(m.group())
        pos = m.end()
    return tokens


class _Parser:
    def __init__(self, tokens: list[str]):
        self.tokens = tokens
        self.pos = 0
        self.depth = 0

    def peek(self) -> str | None:
        return self.tokens[self.pos] if self.pos < len(self.tokens) else None

    def take(self) -> str:
        tok = self.peek()
        if tok is None:
            raise CalcError("unexpected end of expression")
        self.pos += 1
        return tok

    def expr(self) -> float:
        value = self.term()
        while self.peek() in ("+", "-"):
            if self.take() == "+":
                value += self.term()
            else:
                value -= self.term()
        return value

    def term(self) -> float:
        value = self.factor()
        while self.peek() in ("*", "/"):
            op = self.take()
            rhs = self.factor()
            if op == "*":
                value *= rhs
            elif rhs == 0:
                raise CalcError("division by zero")
            else:
                value /= rhs
        return value

    def factor(self) -> float:
        tok = self.take()
        if tok in ("+", "-", "("):
            self.depth += 1
            if self.depth > MAX_DEPTH:
                raise CalcError("expression is nested too deeply")
            try:
                return self.nested(tok)
            finally:
                self.depth -= 1
        if tok in ("*", "/", ")"):
            raise CalcError(f"unexpected {tok!r}")
        return float(tok)

    def nested(self, tok: str) -> float:
        if tok == "+":
            return self.factor()
        if tok == "-":
            return -self.factor()
        value = self.expr()
        if self.take() != ")":
            raise CalcError("missing closing parenthesis")
        return value


def evaluate(expr: str) -> float:
    """Sanitize ``expr`` and return its value."""
    tokens = _tokenize(sanitize(expr))
    if not tokens:
        raise CalcError("empty expression")
    parser = _Parser(tokens)
    value = parser.expr()
    if parser.peek() is not None:
        raise CalcError(f"unexpected {parser.peek()!r}")
    if not math.isfinite(value):
        raise CalcError("result is not finite")
    return value


def format_number(value: float) -> str:
    if value == int(value) and abs(value) < 1e15:
        return str(int(value))
    return repr(value)
