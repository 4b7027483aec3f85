"""Benchmark registry and program loading for parsebench.

Each benchmark pairs a parser strategy with an input program:

    input.ok   — a well-formed program; every call succeeds
    input.err  — a malformed program; every call fails and returns 0

The default matrix times both strategies against both inputs.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from parsebench.models import Strategy

OK_INPUT = "input.ok"
ERR_INPUT = "input.err"


class BenchmarkError(Exception):
    """A benchmark could not be set up or recorded."""


@dataclass(frozen=True)
class BenchmarkSpec:
    """Metadata about one benchmark in the matrix."""

    name: str
    description: str
    strategy: Strategy
    input_name: str

    def input_path(self, input_dir: Path) -> Path:
        return input_dir / self.input_name


def _spec(strategy: Strategy, input_name: str) -> BenchmarkSpec:
    suffix = "with-errors" if input_name == ERR_INPUT else "no-errors"
    kind = "malformed" if input_name == ERR_INPUT else "well-formed"
    return BenchmarkSpec(
        name=f"parser-{strategy.value}-{suffix}",
        description=f"{strategy.value} parser on a {kind} program",
        strategy=strategy,
        input_name=input_name,
    )


# Run order matches the historical results log.
_BENCHMARKS = [
    _spec(Strategy.EXCEPTIONS, OK_INPUT),
    _spec(Strategy.RESULTS, OK_INPUT),
    _spec(Strategy.EXCEPTIONS, ERR_INPUT),
    _spec(Strategy.RESULTS, ERR_INPUT),
]


def list_benchmarks() -> list[BenchmarkSpec]:
    """All benchmarks in run order."""
    return list(_BENCHMARKS)


def load_benchmark(name: str) -> Optional[BenchmarkSpec]:
    """Look up a benchmark by name.

    Args:
        name: Benchmark name (e.g., 'parser-results-no-errors').

    Returns:
        BenchmarkSpec if the name is known, None otherwise.
    """
    for spec in _BENCHMARKS:
        if spec.name == name:
            return spec
    return None


def load_program(path: Path) -> str:
    """Read a whole input program into memory.

    Raises:
        BenchmarkError: if the file is missing or unreadable.
    """
    try:
        return path.read_text(encoding="utf-8")
    except FileNotFoundError:
        raise BenchmarkError(f"Input program not found: {path}") from None
    except (OSError, UnicodeDecodeError) as e:
        raise BenchmarkError(f"Cannot read input program {path}: {e}") from e
