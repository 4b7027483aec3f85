"""Random input programs for the benchmark matrix.

generate_program() builds a well-formed prefix expression together with its
value; corrupt_program() breaks one so that every parse of it fails.
"""

from __future__ import annotations

import random
import re
from pathlib import Path
from typing import Optional

from parsebench.benchmarks import ERR_INPUT, OK_INPUT
from parsebench.parser import Op, apply_op

_OPS = [Op.ADD, Op.SUB, Op.MUL, Op.DIV]
_SEPARATORS = [" ", " ", " ", "  ", "\t", "\n"]
_LITERAL_RE = re.compile(r"\d+")
_LEAF_CHANCE = 0.2
_PAREN_CHANCE = 0.25


def _sep(rng: random.Random) -> str:
    return rng.choice(_SEPARATORS)


def _build(rng: random.Random, depth: int, top: bool) -> tuple[str, int]:
    if depth <= 0 or (not top and rng.random() < _LEAF_CHANCE):
        n = rng.randint(0, 999)
        return str(n), n

    op = rng.choice(_OPS)
    left_text, left = _build(rng, depth - 1, top=False)
    right_text, right = _build(rng, depth - 1, top=False)
    if op is Op.DIV and right == 0:
        op = Op.ADD
    value = apply_op(op, left, right)
    text = f"{op.value}{_sep(rng)}{left_text}{_sep(rng)}{right_text}"

    if rng.random() < _PAREN_CHANCE:
        inner_pad = "" if rng.random() < 0.5 else " "
        text = f"({inner_pad}{text}{inner_pad})"
    return text, value


def generate_program(depth: int = 12, seed: Optional[int] = None) -> tuple[str, int]:
    """Build a random well-formed program.

    Args:
        depth: Maximum operator nesting. 0 yields a single literal.
        seed: Seed for reproducible output.

    Returns:
        (program_text, value) where value is what the parser computes.
    """
    if depth < 0:
        raise ValueError(f"depth must be >= 0, got {depth}")
    rng = random.Random(seed)
    return _build(rng, depth, top=True)


def corrupt_program(text: str, seed: Optional[int] = None) -> str:
    """Return a malformed variant of a well-formed program.

    One of: an operator swapped for '%', a closing paren dropped, or the
    last literal cut off together with everything after it.
    """
    rng = random.Random(seed)
    operators = [i for i, c in enumerate(text) if c in "+-*/"]
    closers = [i for i, c in enumerate(text) if c == ")"]

    choices = ["truncate"]
    if operators:
        choices.append("operator")
    if closers:
        choices.append("paren")
    how = rng.choice(choices)

    if how == "operator":
        i = rng.choice(operators)
        return text[:i] + "%" + text[i + 1:]
    if how == "paren":
        i = rng.choice(closers)
        return text[:i] + text[i + 1:]

    literals = list(_LITERAL_RE.finditer(text))
    if not literals:
        return ""
    return text[:literals[-1].start()]


def write_inputs(output_dir: Path, depth: int = 12, seed: Optional[int] = None) -> tuple[Path, Path]:
    """Write input.ok and input.err into output_dir.

    Returns (ok_path, err_path).
    """
    output_dir.mkdir(parents=True, exist_ok=True)
    program, _ = generate_program(depth, seed)
    broken = corrupt_program(program, seed)

    ok_path = output_dir / OK_INPUT
    err_path = output_dir / ERR_INPUT
    ok_path.write_text(program + "\n", encoding="utf-8")
    err_path.write_text(broken + "\n", encoding="utf-8")
    return ok_path, err_path
