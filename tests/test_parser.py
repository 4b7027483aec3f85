"""Tests for the prefix-notation parser.

Every test taking the `parser` fixture runs against both the exception-based
and the result-based implementation.
"""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor

import pytest

from parsebench.models import Strategy
from parsebench.parser import (
    INT64_MAX,
    INT64_MIN,
    Cursor,
    ErrorKind,
    ExceptionParser,
    Op,
    RECURSION_CEILING,
    ResultParser,
    apply_op,
    evaluate,
    execute,
    make_parser,
    wrap_int64,
)


# --- Worked examples ---

@pytest.mark.parametrize(
    "program, expected",
    [
        ("5", 5),
        ("+ 2 3", 5),
        ("- 10 4", 6),
        ("* 3 (+ 2 2)", 12),
        ("/ 7 2", 3),
        ("0", 0),
        ("007", 7),
        ("1234567890", 1234567890),
    ],
)
def test_worked_examples(parser, program, expected):
    assert parser.execute(program) == expected


def test_nested_depth_first(parser):
    """(1 + 2) * (5 - 3) = 6"""
    assert parser.execute("* + 1 2 - 5 3") == 6


def test_left_operand_before_right(parser):
    assert parser.execute("- 10 - 4 1") == 7
    assert parser.execute("/ / 100 5 2") == 10


# --- Grouping and whitespace ---

def test_parentheses_are_optional(parser):
    assert parser.execute("+ 1 2") == parser.execute("(+ 1 2)") == 3


def test_parentheses_nested(parser):
    assert parser.execute("((( * (+ 1 1) (3) )))") == 6


def test_whitespace_insensitive(parser):
    assert parser.execute("+ 1 2") == parser.execute("  +   1    2  ")
    assert parser.execute("\t*\n( + 1 2 )\r\n 4") == 12


def test_operator_needs_no_space(parser):
    assert parser.execute("+1 2") == 3
    assert parser.execute("*(+1 1)(3)") == 6


def test_unicode_whitespace_is_skipped(parser):
    assert parser.execute("\u2003+\u00a01 2") == 3


def test_trailing_input_is_ignored(parser):
    assert parser.execute("5 junk") == 5
    assert parser.execute("+ 1 2 3") == 3


# --- Division and 64-bit arithmetic ---

def test_division_truncates_toward_zero(parser):
    assert parser.execute("/ - 0 7 2") == -3
    assert parser.execute("/ 7 - 0 2") == -3
    assert parser.execute("/ - 0 7 - 0 2") == 3


def test_addition_wraps_at_64_bits(parser):
    assert parser.execute("+ 9223372036854775807 1") == INT64_MIN


def test_multiplication_wraps_at_64_bits(parser):
    assert parser.execute("* 4294967296 4294967296") == 0


def test_literal_wraps_at_64_bits(parser):
    assert parser.execute("9223372036854775808") == INT64_MIN
    assert parser.execute("18446744073709551617") == 1


def test_min_divided_by_minus_one_wraps(parser):
    assert parser.execute("/ - 0 9223372036854775808 - 0 1") == INT64_MIN


# --- Malformed input ---

@pytest.mark.parametrize(
    "program, kind",
    [
        ("", ErrorKind.UNEXPECTED_EOF),
        ("   ", ErrorKind.UNEXPECTED_EOF),
        ("+", ErrorKind.UNEXPECTED_EOF),
        ("+ 1", ErrorKind.UNEXPECTED_EOF),
        ("% 1 2", ErrorKind.INVALID_OPERATOR),
        ("+ 1 a", ErrorKind.INVALID_OPERATOR),
        ("\u0663", ErrorKind.INVALID_OPERATOR),
        ("(+ 1 2", ErrorKind.UNEXPECTED_EOF),
        ("(+ 1 2 3)", ErrorKind.INVALID_CHARACTER),
        ("(5]", ErrorKind.INVALID_CHARACTER),
        (")", ErrorKind.INVALID_OPERATOR),
        ("/ 1 0", ErrorKind.DIVISION_BY_ZERO),
        ("/ 1 - 2 2", ErrorKind.DIVISION_BY_ZERO),
    ],
)
def test_malformed_input(strategy, program, kind):
    parser = make_parser(strategy)
    assert parser.execute(program) == 0
    result = parser.parse(program)
    assert result.is_error
    assert result.error is kind
    assert result.value is None


def test_first_error_wins(parser):
    """The operator error is hit before the missing paren."""
    assert parser.parse("(% 1 2").error is ErrorKind.INVALID_OPERATOR


def test_zero_result_is_not_an_error(parser):
    result = parser.parse("- 3 3")
    assert not result.is_error
    assert result.value == 0


def test_nesting_beyond_ceiling_is_reported(parser, deep_recursion):
    depth = RECURSION_CEILING + 100
    program = "(" * depth + "1" + ")" * depth
    assert parser.execute(program) == 0
    assert parser.parse(program).error is ErrorKind.NESTING_TOO_DEEP


def test_moderate_nesting_parses(parser):
    assert parser.execute("(" * 100 + "7" + ")" * 100) == 7


def test_long_operator_chain_parses(parser, deep_recursion):
    program = "+ 1 " * 1000 + "1"
    assert parser.execute(program) == 1001
    assert parser.parse(program).value == 1001


def test_deeply_parenthesized_chain_parses(parser, deep_recursion):
    program = "(+ 1 " * 1000 + "1" + ")" * 1000
    assert parser.execute(program) == 1001


# --- Purity ---

def test_repeated_calls_are_identical(parser):
    program = "* + 1 2 - 5 3"
    assert [parser.execute(program) for _ in range(5)] == [6] * 5


def test_concurrent_calls_match_serial(parser):
    programs = [f"+ {i} * {i} (- {i} 1)" for i in range(200)] + ["% 1 2", "(+ 1"] * 50
    expected = [parser.execute(p) for p in programs]
    with ThreadPoolExecutor(max_workers=8) as pool:
        got = list(pool.map(parser.execute, programs))
    assert got == expected


# --- Module-level helpers ---

def test_make_parser_by_strategy():
    assert isinstance(make_parser(Strategy.EXCEPTIONS), ExceptionParser)
    assert isinstance(make_parser(Strategy.RESULTS), ResultParser)
    assert isinstance(make_parser("exceptions"), ExceptionParser)


def test_execute_and_evaluate_helpers():
    assert execute("* 3 (+ 2 2)") == 12
    assert execute("* 3 (+ 2 2)", Strategy.EXCEPTIONS) == 12
    assert execute("% 1 2") == 0
    assert evaluate("/ 7 2").value == 3
    assert evaluate("(+ 1 2", Strategy.EXCEPTIONS).error is ErrorKind.UNEXPECTED_EOF


# --- Arithmetic helpers ---

def test_wrap_int64_bounds():
    assert wrap_int64(INT64_MAX) == INT64_MAX
    assert wrap_int64(INT64_MAX + 1) == INT64_MIN
    assert wrap_int64(INT64_MIN - 1) == INT64_MAX
    assert wrap_int64(-5) == -5


def test_apply_op():
    assert apply_op(Op.ADD, 2, 3) == 5
    assert apply_op(Op.SUB, 2, 3) == -1
    assert apply_op(Op.MUL, -4, 3) == -12
    assert apply_op(Op.DIV, -9, 4) == -2
    with pytest.raises(ZeroDivisionError):
        apply_op(Op.DIV, 1, 0)


# --- Cursor ---

def test_cursor_peek_and_advance():
    cursor = Cursor("ab")
    assert cursor.peek() == "a"
    assert cursor.advance() == "a"
    assert cursor.peek() == "b"
    cursor.advance()
    assert cursor.at_end
    assert cursor.peek() == ""


def test_cursor_skip_whitespace_stops_at_token():
    cursor = Cursor(" \t\n 12")
    cursor.skip_whitespace()
    assert cursor.pos == 4
    cursor.skip_whitespace()
    assert cursor.pos == 4


def test_cursor_skip_whitespace_to_end():
    cursor = Cursor("   ")
    cursor.skip_whitespace()
    assert cursor.at_end
