"""Data models for the parsebench harness.

Strategy enum, BenchmarkResult, ScoreCard — the typed structures that flow
through runner → scorer → CLI.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Optional

CSV_HEADER = "compiler;benchmark;µs"
CSV_DELIMITER = ";"


class Strategy(str, Enum):
    """How the parser signals a failure back up the call stack."""

    EXCEPTIONS = "exceptions"
    RESULTS = "results"


@dataclass
class BenchmarkResult:
    """One timed benchmark run, as recorded in the results log.

    Only label, benchmark and microseconds are persisted; iterations and
    checksum are known to the run that produced the record.
    """

    label: str
    benchmark: str
    microseconds: int
    iterations: int = 0
    checksum: int = 0

    def to_csv_row(self) -> str:
        """Serialize to a `label;benchmark;microseconds` record."""
        return CSV_DELIMITER.join((self.label, self.benchmark, str(self.microseconds)))

    @classmethod
    def from_csv_row(cls, line: str) -> Optional[BenchmarkResult]:
        """Parse a results-log record. Returns None for headers and junk."""
        parts = line.strip().split(CSV_DELIMITER)
        if len(parts) != 3:
            return None
        label, benchmark, us = (p.strip() for p in parts)
        if not label or not benchmark:
            return None
        try:
            microseconds = int(us)
        except ValueError:
            return None
        return cls(label=label, benchmark=benchmark, microseconds=microseconds)


@dataclass
class ScoreCard:
    """Latest timing per benchmark, for each run label."""

    results: dict[str, dict[str, BenchmarkResult]] = field(default_factory=dict)

    def add(self, result: BenchmarkResult) -> None:
        """Record a result; a later record for the same label/benchmark wins."""
        self.results.setdefault(result.label, {})[result.benchmark] = result

    @property
    def labels(self) -> list[str]:
        return list(self.results)

    @property
    def benchmarks(self) -> list[str]:
        """Benchmark names in first-seen order across all labels."""
        seen: dict[str, None] = {}
        for by_benchmark in self.results.values():
            for name in by_benchmark:
                seen.setdefault(name, None)
        return list(seen)

    def get(self, label: str, benchmark: str) -> Optional[BenchmarkResult]:
        return self.results.get(label, {}).get(benchmark)
