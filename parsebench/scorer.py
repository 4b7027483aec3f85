"""Parsebench scorer — loads the results log, renders Rich tables, writes reports.

Finds the latest timing for each label/benchmark pair and shows a
side-by-side comparison table, plus the exceptions-vs-results ratio for
each input.

Also generates a persistent RESULTS.md with the full run history.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path
from typing import Optional

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from parsebench.benchmarks import ERR_INPUT, OK_INPUT, list_benchmarks, load_benchmark
from parsebench.models import BenchmarkResult, ScoreCard, Strategy

_LABEL_STYLES = ["green", "cyan", "yellow", "magenta", "blue"]


def load_results(path: Path) -> list[BenchmarkResult]:
    """Read every record of the results log, in file order.

    The header line and malformed lines are skipped. A missing log yields
    an empty list. Bytes that are not UTF-8 are replaced, so a damaged line
    is dropped as junk instead of aborting the read.
    """
    if not path.exists():
        return []
    records: list[BenchmarkResult] = []
    for line in path.read_bytes().decode("utf-8", errors="replace").splitlines():
        record = BenchmarkResult.from_csv_row(line)
        if record:
            records.append(record)
    return records


def load_scorecard(path: Path) -> ScoreCard:
    """Latest record for each label/benchmark pair in the results log."""
    card = ScoreCard()
    for record in load_results(path):
        card.add(record)
    return card


def _ordered_benchmarks(card: ScoreCard) -> list[str]:
    """Known benchmarks in run order, then any others alphabetically."""
    present = set(card.benchmarks)
    known = [spec.name for spec in list_benchmarks() if spec.name in present]
    extras = sorted(name for name in present if name not in known)
    return known + extras


def _fmt_us(us: Optional[int]) -> str:
    """Format a microsecond count with a thousands separator."""
    if us is None:
        return "--"
    return f"{us:,}µs"


def _fmt_ratio(ratio: Optional[float]) -> str:
    if ratio is None:
        return "--"
    return f"{ratio:.2f}x"


def strategy_ratio(card: ScoreCard, label: str, input_name: str) -> Optional[float]:
    """Exceptions time divided by results time for one label and input.

    Above 1.0 means the exception-based parser was slower. None when either
    timing is missing or the results timing is zero.
    """
    timings: dict[Strategy, int] = {}
    for name, record in card.results.get(label, {}).items():
        spec = load_benchmark(name)
        if spec and spec.input_name == input_name:
            timings[spec.strategy] = record.microseconds
    exc = timings.get(Strategy.EXCEPTIONS)
    res = timings.get(Strategy.RESULTS)
    if exc is None or not res:
        return None
    return exc / res


def render_scorecard(card: ScoreCard, console: Console) -> None:
    """Render a Rich comparison table: one row per benchmark, one column per label."""
    if not card.results:
        console.print("[yellow]No results found. Run a benchmark first.[/yellow]")
        return

    table = Table(title="Parser benchmarks", show_header=True, header_style="bold")
    table.add_column("Benchmark", style="dim", min_width=28)

    labels = card.labels
    for i, label in enumerate(labels):
        table.add_column(
            escape(label),
            style=_LABEL_STYLES[i % len(_LABEL_STYLES)],
            justify="right",
            min_width=12,
        )

    for name in _ordered_benchmarks(card):
        row = []
        for label in labels:
            record = card.get(label, name)
            row.append(_fmt_us(record.microseconds if record else None))
        table.add_row(name, *row)

    # exceptions / results, per input
    table.add_section()
    for input_name, title in ((OK_INPUT, "exc/res (no errors)"), (ERR_INPUT, "exc/res (with errors)")):
        table.add_row(
            title,
            *[_fmt_ratio(strategy_ratio(card, label, input_name)) for label in labels],
        )

    console.print()
    console.print(table)
    console.print()


def list_all_results(path: Path, console: Console) -> None:
    """List every record in the results log, oldest first."""
    records = load_results(path)
    if not records:
        console.print("[yellow]No results yet. Run a benchmark first.[/yellow]")
        return

    console.print(f"\n[bold]{escape(str(path))}[/bold]")
    for record in records:
        console.print(
            f"  {escape(record.label):20s} {record.benchmark:32s} {record.microseconds:>12,}µs",
            soft_wrap=True,
        )


# ---------------------------------------------------------------------------
# Markdown report generation
# ---------------------------------------------------------------------------

def generate_report(results: Path, output: Path) -> Path:
    """Write a Markdown report with the full history and the latest ratios.

    Returns the path of the generated file.
    """
    records = load_results(results)
    output.parent.mkdir(parents=True, exist_ok=True)

    lines: list[str] = []
    lines.append("# Parser Benchmark Results")
    lines.append("")
    lines.append(f"*Generated {datetime.now(timezone.utc).strftime('%Y-%m-%d %H:%M UTC')}*")
    lines.append("")

    if not records:
        lines.append("No results yet.")
        output.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return output

    lines.append("## History")
    lines.append("")
    lines.append("| # | Label | Benchmark | CPU time |")
    lines.append("|---|-------|-----------|----------|")
    for i, r in enumerate(records, 1):
        lines.append(f"| {i} | {r.label} | {r.benchmark} | {_fmt_us(r.microseconds)} |")
    lines.append("")

    card = ScoreCard()
    for r in records:
        card.add(r)
    labels = card.labels

    lines.append("## Latest by Label")
    lines.append("")
    lines.append("| Benchmark | " + " | ".join(labels) + " |")
    lines.append("|-----------| " + " | ".join("---" for _ in labels) + " |")
    for name in _ordered_benchmarks(card):
        vals = []
        for label in labels:
            record = card.get(label, name)
            vals.append(_fmt_us(record.microseconds if record else None))
        lines.append(f"| {name} | " + " | ".join(vals) + " |")
    lines.append(
        "| **exc/res (no errors)** | "
        + " | ".join(_fmt_ratio(strategy_ratio(card, label, OK_INPUT)) for label in labels)
        + " |"
    )
    lines.append(
        "| **exc/res (with errors)** | "
        + " | ".join(_fmt_ratio(strategy_ratio(card, label, ERR_INPUT)) for label in labels)
        + " |"
    )
    lines.append("")

    output.write_text("\n".join(lines) + "\n", encoding="utf-8")
    return output
