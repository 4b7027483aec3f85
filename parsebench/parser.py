"""Prefix-notation expression parser — the code under benchmark.

Grammar (lookahead-1, no backtracking):

    expression := '(' WS expression WS ')'
                | digit+
                | operation expression expression
    operation  := '+' | '-' | '*' | '/'

The parser evaluates while it descends; no syntax tree is built. Two parsers
implement the same grammar and differ only in how a failure travels back up
the call stack:

    ExceptionParser — rules return ints and raise ParseError
    ResultParser    — rules return ParseResult and every caller checks it

Both collapse any failure to 0 at execute(). evaluate() keeps the error kind.

Each nesting level costs one or two Python frames. Entry points that parse
user programs call raise_recursion_limit() first; nesting that still exceeds
the limit is reported as ErrorKind.NESTING_TOO_DEEP.
"""

from __future__ import annotations

import sys
from dataclasses import dataclass
from enum import Enum
from typing import Generic, Optional, TypeVar

from parsebench.models import Strategy

T = TypeVar("T")

INT64_MIN = -(1 << 63)
INT64_MAX = (1 << 63) - 1
_INT64_SPAN = 1 << 64

_DIGITS = "0123456789"

# Interpreter recursion limit used by the CLI and the benchmark harness.
# Roughly RECURSION_CEILING // 2 operator levels parse before NESTING_TOO_DEEP.
RECURSION_CEILING = 10_000


class Op(str, Enum):
    """Binary operators, keyed by their source character."""

    ADD = "+"
    SUB = "-"
    MUL = "*"
    DIV = "/"


class ErrorKind(str, Enum):
    """Why a parse failed. Carries no position or context."""

    INVALID_OPERATOR = "invalid-operator"
    INVALID_CHARACTER = "invalid-character"
    UNEXPECTED_EOF = "unexpected-eof"
    DIVISION_BY_ZERO = "division-by-zero"
    NESTING_TOO_DEEP = "nesting-too-deep"


class ParseError(Exception):
    """Raised by ExceptionParser rules; aborts the whole parse."""

    def __init__(self, kind: ErrorKind) -> None:
        super().__init__(kind.value)
        self.kind = kind


@dataclass(frozen=True)
class ParseResult(Generic[T]):
    """Either a value or an error kind, never both."""

    value: Optional[T] = None
    error: Optional[ErrorKind] = None

    @property
    def is_error(self) -> bool:
        return self.error is not None

    @classmethod
    def ok(cls, value: T) -> ParseResult[T]:
        return cls(value=value)

    @classmethod
    def fail(cls, kind: ErrorKind) -> ParseResult[T]:
        return cls(error=kind)


# ---------------------------------------------------------------------------
# 64-bit arithmetic
# ---------------------------------------------------------------------------

def wrap_int64(value: int) -> int:
    """Wrap an unbounded int into the signed 64-bit range (two's complement)."""
    return ((value - INT64_MIN) % _INT64_SPAN) + INT64_MIN


def apply_op(op: Op, left: int, right: int) -> int:
    """Combine two operands the way signed 64-bit hardware arithmetic would.

    Division truncates toward zero. A zero divisor raises ZeroDivisionError;
    callers turn it into ErrorKind.DIVISION_BY_ZERO.
    """
    if op is Op.ADD:
        return wrap_int64(left + right)
    if op is Op.SUB:
        return wrap_int64(left - right)
    if op is Op.MUL:
        return wrap_int64(left * right)
    if right == 0:
        raise ZeroDivisionError("integer division by zero")
    quotient = abs(left) // abs(right)
    if (left < 0) != (right < 0):
        quotient = -quotient
    # INT64_MIN / -1 overflows to INT64_MIN
    return wrap_int64(quotient)


# ---------------------------------------------------------------------------
# Cursor
# ---------------------------------------------------------------------------

class Cursor:
    """Forward-only position in an immutable source string.

    peek() returns "" at end of input instead of failing; only consuming a
    character can run into end of input.
    """

    __slots__ = ("source", "pos", "end")

    def __init__(self, source: str) -> None:
        self.source = source
        self.pos = 0
        self.end = len(source)

    @property
    def at_end(self) -> bool:
        return self.pos >= self.end

    def peek(self) -> str:
        if self.pos >= self.end:
            return ""
        return self.source[self.pos]

    def advance(self) -> str:
        """Consume and return the next character. Caller checks at_end first."""
        c = self.source[self.pos]
        self.pos += 1
        return c

    def skip_whitespace(self) -> None:
        source, pos, end = self.source, self.pos, self.end
        while pos < end and source[pos].isspace():
            pos += 1
        self.pos = pos


# ---------------------------------------------------------------------------
# Parsers
# ---------------------------------------------------------------------------

class Parser:
    """Common interface of both parsers."""

    strategy: Strategy

    def parse(self, program: str) -> ParseResult[int]:
        """Parse and evaluate program, reporting failure as a ParseResult."""
        raise NotImplementedError

    def execute(self, program: str) -> int:
        """Parse and evaluate program. Any failure yields 0."""
        raise NotImplementedError


class _ExceptionRules:
    """Grammar rules for one parse, signalling failure with ParseError."""

    __slots__ = ("cursor",)

    def __init__(self, program: str) -> None:
        self.cursor = Cursor(program)

    def expression(self) -> int:
        cursor = self.cursor
        cursor.skip_whitespace()
        c = cursor.peek()
        if c == "(":
            cursor.advance()
            cursor.skip_whitespace()
            value = self.expression()
            cursor.skip_whitespace()
            self.expect_char(")")
            return value
        if c and c in _DIGITS:
            return self.number()
        return self.inner_expression()

    def inner_expression(self) -> int:
        op = self.operation()
        left = self.expression()
        right = self.expression()
        try:
            return apply_op(op, left, right)
        except ZeroDivisionError:
            raise ParseError(ErrorKind.DIVISION_BY_ZERO) from None

    def operation(self) -> Op:
        c = self.get_char()
        try:
            return Op(c)
        except ValueError:
            raise ParseError(ErrorKind.INVALID_OPERATOR) from None

    def number(self) -> int:
        cursor = self.cursor
        result = 0
        while True:
            c = cursor.peek()
            if not c or c not in _DIGITS:
                return result
            cursor.advance()
            result = wrap_int64(result * 10 + (ord(c) - 48))

    def expect_char(self, expected: str) -> None:
        if self.get_char() != expected:
            raise ParseError(ErrorKind.INVALID_CHARACTER)

    def get_char(self) -> str:
        if self.cursor.at_end:
            raise ParseError(ErrorKind.UNEXPECTED_EOF)
        return self.cursor.advance()


class ExceptionParser(Parser):
    """Parser whose grammar rules raise ParseError on the first failure."""

    strategy = Strategy.EXCEPTIONS

    def parse(self, program: str) -> ParseResult[int]:
        try:
            return ParseResult.ok(_ExceptionRules(program).expression())
        except ParseError as err:
            return ParseResult.fail(err.kind)
        except RecursionError:
            return ParseResult.fail(ErrorKind.NESTING_TOO_DEEP)

    def execute(self, program: str) -> int:
        try:
            return _ExceptionRules(program).expression()
        except (ParseError, RecursionError):
            return 0


class _ResultRules:
    """Grammar rules for one parse, returning ParseResult from every rule."""

    __slots__ = ("cursor",)

    def __init__(self, program: str) -> None:
        self.cursor = Cursor(program)

    def expression(self) -> ParseResult[int]:
        cursor = self.cursor
        cursor.skip_whitespace()
        c = cursor.peek()
        if c == "(":
            cursor.advance()
            cursor.skip_whitespace()
            value = self.expression()
            if value.is_error:
                return value
            cursor.skip_whitespace()
            closing = self.expect_char(")")
            if closing.is_error:
                return ParseResult.fail(closing.error)
            return value
        if c and c in _DIGITS:
            return self.number()
        return self.inner_expression()

    def inner_expression(self) -> ParseResult[int]:
        op = self.operation()
        if op.is_error:
            return ParseResult.fail(op.error)
        left = self.expression()
        if left.is_error:
            return left
        right = self.expression()
        if right.is_error:
            return right
        if op.value is Op.DIV and right.value == 0:
            return ParseResult.fail(ErrorKind.DIVISION_BY_ZERO)
        return ParseResult.ok(apply_op(op.value, left.value, right.value))

    def operation(self) -> ParseResult[Op]:
        c = self.get_char()
        if c.is_error:
            return ParseResult.fail(c.error)
        if c.value == "+":
            return ParseResult.ok(Op.ADD)
        if c.value == "-":
            return ParseResult.ok(Op.SUB)
        if c.value == "*":
            return ParseResult.ok(Op.MUL)
        if c.value == "/":
            return ParseResult.ok(Op.DIV)
        return ParseResult.fail(ErrorKind.INVALID_OPERATOR)

    def number(self) -> ParseResult[int]:
        cursor = self.cursor
        result = 0
        while True:
            c = cursor.peek()
            if not c or c not in _DIGITS:
                return ParseResult.ok(result)
            got = self.get_char()
            if got.is_error:
                return ParseResult.fail(got.error)
            result = wrap_int64(result * 10 + (ord(got.value) - 48))

    def expect_char(self, expected: str) -> ParseResult[str]:
        got = self.get_char()
        if got.is_error:
            return got
        if got.value != expected:
            return ParseResult.fail(ErrorKind.INVALID_CHARACTER)
        return got

    def get_char(self) -> ParseResult[str]:
        if self.cursor.at_end:
            return ParseResult.fail(ErrorKind.UNEXPECTED_EOF)
        return ParseResult.ok(self.cursor.advance())


class ResultParser(Parser):
    """Parser whose grammar rules return ParseResult values."""

    strategy = Strategy.RESULTS

    def parse(self, program: str) -> ParseResult[int]:
        try:
            return _ResultRules(program).expression()
        except RecursionError:
            return ParseResult.fail(ErrorKind.NESTING_TOO_DEEP)

    def execute(self, program: str) -> int:
        result = self.parse(program)
        if result.is_error:
            return 0
        return result.value


_PARSERS: dict[Strategy, type[Parser]] = {
    Strategy.EXCEPTIONS: ExceptionParser,
    Strategy.RESULTS: ResultParser,
}


def make_parser(strategy: Strategy = Strategy.RESULTS) -> Parser:
    """Build a parser for the given error-signalling strategy."""
    return _PARSERS[Strategy(strategy)]()


def execute(program: str, strategy: Strategy = Strategy.RESULTS) -> int:
    """Evaluate a prefix expression. Malformed input yields 0."""
    return make_parser(strategy).execute(program)


def evaluate(program: str, strategy: Strategy = Strategy.RESULTS) -> ParseResult[int]:
    """Evaluate a prefix expression, keeping the error kind on failure."""
    return make_parser(strategy).parse(program)


def raise_recursion_limit(ceiling: int = RECURSION_CEILING) -> int:
    """Lift the interpreter recursion limit to at least ceiling.

    Never lowers an already higher limit. Returns the previous limit so
    callers can restore it.
    """
    previous = sys.getrecursionlimit()
    if previous < ceiling:
        sys.setrecursionlimit(ceiling)
    return previous
