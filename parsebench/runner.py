"""Parsebench runner — orchestrates load → timed loop → results log.

Data flow per benchmark:
1. Load the input program into memory (outside the timed region)
2. Build the parser for the benchmark's strategy
3. Read process CPU time (before)
4. Call parser.execute(program) `iterations` times, folding results into a checksum
5. Read process CPU time (after)
6. Print `label  benchmark  µs` and append `label;benchmark;µs` to the results log
"""

from __future__ import annotations

import time
from pathlib import Path
from typing import Callable, Iterable, Optional

from rich.console import Console
from rich.markup import escape

from parsebench import environment
from parsebench.benchmarks import BenchmarkError, BenchmarkSpec, list_benchmarks, load_benchmark, load_program
from parsebench.models import CSV_DELIMITER, CSV_HEADER, BenchmarkResult
from parsebench.parser import make_parser, raise_recursion_limit

_UINT64_MASK = (1 << 64) - 1


def _process_time_us() -> int:
    """CPU time consumed by this process, in microseconds."""
    return time.process_time_ns() // 1000


def _time_us(func: Callable[[], None]) -> int:
    """CPU microseconds spent inside func()."""
    before = _process_time_us()
    func()
    after = _process_time_us()
    return after - before


def _append_record(results: Path, record: BenchmarkResult) -> None:
    """Append one record to the results log, writing the header for a new log."""
    try:
        results.parent.mkdir(parents=True, exist_ok=True)
        fresh = not results.exists() or results.stat().st_size == 0
        with open(results, "a", encoding="utf-8") as f:
            if fresh:
                f.write(CSV_HEADER + "\n")
            f.write(record.to_csv_row() + "\n")
    except OSError as e:
        raise BenchmarkError(f"Cannot write results log {results}: {e}") from e


def run_benchmark(
    spec: BenchmarkSpec,
    program: str,
    iterations: int,
    console: Console,
    label: Optional[str] = None,
    results: Optional[Path] = None,
) -> BenchmarkResult:
    """Time `iterations` execute() calls of the benchmark's parser on program.

    Args:
        spec: Which benchmark (strategy + input) this is.
        program: Input program text, already loaded.
        iterations: Number of execute() calls; must be positive.
        console: Rich Console for the result line.
        label: First results column. Defaults to environment.default_label().
        results: Results log path. Defaults to environment.results_path().

    Returns:
        BenchmarkResult with timing, iterations and checksum populated.
    """
    if iterations < 1:
        raise BenchmarkError(f"Iterations must be a positive integer, got {iterations}")
    label = label or environment.default_label()
    if CSV_DELIMITER in label or "\n" in label or "\r" in label:
        raise BenchmarkError(f"Label must not contain '{CSV_DELIMITER}' or line breaks: {label!r}")
    results = results or environment.results_path()

    parser = make_parser(spec.strategy)
    execute = parser.execute
    state = 0

    def loop() -> None:
        nonlocal state
        for _ in range(iterations):
            state = (state + execute(program)) & _UINT64_MASK

    us = _time_us(loop)

    record = BenchmarkResult(
        label=label,
        benchmark=spec.name,
        microseconds=us,
        iterations=iterations,
        checksum=state,
    )
    console.print(f"{escape(label):>20}  {spec.name:<50}  {us:>10}µs", soft_wrap=True)
    _append_record(results, record)
    return record


def run_all(
    iterations: int,
    console: Console,
    label: Optional[str] = None,
    input_dir: Optional[Path] = None,
    results: Optional[Path] = None,
    only: Optional[Iterable[str]] = None,
) -> list[BenchmarkResult]:
    """Run the benchmark matrix (or the named subset) in order.

    Every input program is loaded before the first timed loop starts.

    Raises:
        BenchmarkError: for unknown benchmark names, unreadable inputs or an
            unwritable results log.
    """
    raise_recursion_limit()
    input_dir = input_dir or environment.input_dir()

    if only:
        specs = []
        for name in only:
            spec = load_benchmark(name)
            if spec is None:
                raise BenchmarkError(f"Unknown benchmark: {name}")
            specs.append(spec)
    else:
        specs = list_benchmarks()

    programs: dict[str, str] = {}
    for spec in specs:
        if spec.input_name not in programs:
            programs[spec.input_name] = load_program(spec.input_path(input_dir))

    console.print(f"[dim]{iterations} iterations per benchmark, inputs from {escape(str(input_dir))}[/dim]", soft_wrap=True)

    return [
        run_benchmark(
            spec, programs[spec.input_name], iterations, console,
            label=label, results=results,
        )
        for spec in specs
    ]
