"""CLI for the parsebench harness.

Usage:
    python -m parsebench run 100000                  # Time the whole matrix
    python -m parsebench run 1000 --only parser-results-no-errors
    python -m parsebench eval "* + 1 2 - 5 3"        # Evaluate one expression
    python -m parsebench list                        # Show the benchmark matrix
    python -m parsebench generate --depth 14         # Write input.ok / input.err
    python -m parsebench results                     # List recorded runs
    python -m parsebench score                       # Compare latest timings
    python -m parsebench report                      # Write RESULTS.md
"""

from __future__ import annotations

from pathlib import Path
from typing import List, Optional

import typer
from rich.console import Console
from rich.markup import escape
from rich.table import Table

from parsebench import environment
from parsebench.benchmarks import BenchmarkError, list_benchmarks
from parsebench.generator import write_inputs
from parsebench.models import Strategy
from parsebench.parser import evaluate, raise_recursion_limit
from parsebench.runner import run_all
from parsebench.scorer import generate_report, list_all_results, load_scorecard, render_scorecard

app = typer.Typer(
    name="parsebench",
    help="Exceptions versus results: prefix-expression parser benchmarks",
    no_args_is_help=True,
)
console = Console(stderr=True)


@app.command("run")
def cmd_run(
    iterations: int = typer.Argument(..., min=1, help="Number of parser calls per benchmark"),
    label: Optional[str] = typer.Option(None, "--label", "-l", help="Label for the first results column"),
    input_dir: Optional[Path] = typer.Option(None, "--input-dir", "-i", help="Directory with input.ok / input.err"),
    results: Optional[Path] = typer.Option(None, "--results", "-r", help="Results log (semicolon-delimited)"),
    only: Optional[List[str]] = typer.Option(None, "--only", help="Run only the named benchmark (repeatable)"),
) -> None:
    """Time repeated parser calls and append the timings to the results log."""
    try:
        run_all(
            iterations, console,
            label=label, input_dir=input_dir, results=results, only=only,
        )
    except BenchmarkError as e:
        console.print(f"[red]Error:[/red] {escape(str(e))}")
        raise typer.Exit(1)


@app.command("eval")
def cmd_eval(
    expression: str = typer.Argument(help="Prefix expression, e.g. '* 3 (+ 2 2)'"),
    strategy: Strategy = typer.Option(Strategy.RESULTS, "--strategy", "-s", help="Parser strategy"),
) -> None:
    """Evaluate a single expression and print its value."""
    raise_recursion_limit()
    result = evaluate(expression, strategy)
    if result.is_error:
        console.print(f"[red]Parse error:[/red] {result.error.value}")
        raise typer.Exit(1)
    typer.echo(result.value)


@app.command("list")
def cmd_list() -> None:
    """Show the benchmark matrix."""
    table = Table(title="Benchmarks", show_header=True, header_style="bold")
    table.add_column("Name", style="green", min_width=28)
    table.add_column("Strategy")
    table.add_column("Input")
    table.add_column("Description", min_width=30)

    for spec in list_benchmarks():
        table.add_row(spec.name, spec.strategy.value, spec.input_name, spec.description)

    console.print()
    console.print(table)
    console.print()


@app.command("generate")
def cmd_generate(
    depth: int = typer.Option(12, "--depth", "-d", min=0, max=24, help="Maximum operator nesting"),
    seed: Optional[int] = typer.Option(None, "--seed", help="Random seed for reproducible programs"),
    output_dir: Optional[Path] = typer.Option(None, "--output-dir", "-o", help="Where to write the inputs"),
) -> None:
    """Write a well-formed input.ok and a malformed input.err."""
    target = output_dir or environment.input_dir()
    try:
        ok_path, err_path = write_inputs(target, depth=depth, seed=seed)
    except OSError as e:
        console.print(f"[red]Error:[/red] cannot write inputs: {escape(str(e))}")
        raise typer.Exit(1)
    console.print(f"Wrote {escape(str(ok_path))} and {escape(str(err_path))}")


@app.command("results")
def cmd_results(
    results: Optional[Path] = typer.Option(None, "--results", "-r", help="Results log"),
) -> None:
    """List all recorded runs."""
    list_all_results(results or environment.results_path(), console)


@app.command("score")
def cmd_score(
    results: Optional[Path] = typer.Option(None, "--results", "-r", help="Results log"),
) -> None:
    """Compare the latest timings across labels."""
    card = load_scorecard(results or environment.results_path())
    render_scorecard(card, console)


@app.command("report")
def cmd_report(
    results: Optional[Path] = typer.Option(None, "--results", "-r", help="Results log"),
    output: Path = typer.Option(Path("RESULTS.md"), "--output", "-o", help="Report path"),
) -> None:
    """Generate RESULTS.md with the full history and strategy ratios."""
    path = generate_report(results or environment.results_path(), output)
    console.print(f"Report written to {escape(str(path))}")


if __name__ == "__main__":
    app()
