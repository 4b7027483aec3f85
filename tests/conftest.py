"""Shared fixtures for the parsebench test suite."""

from __future__ import annotations

import io
import sys
from pathlib import Path

import pytest
from rich.console import Console

from parsebench.generator import write_inputs
from parsebench.models import Strategy
from parsebench.parser import Parser, make_parser, raise_recursion_limit


@pytest.fixture(params=list(Strategy), ids=lambda s: s.value)
def strategy(request) -> Strategy:
    """Run the test once per error-signalling strategy."""
    return request.param


@pytest.fixture
def parser(strategy: Strategy) -> Parser:
    return make_parser(strategy)


@pytest.fixture
def console() -> Console:
    """A Rich console writing into a buffer; read it back via console.file.getvalue()."""
    return Console(file=io.StringIO(), width=200, color_system=None)


@pytest.fixture
def inputs_dir(tmp_path: Path) -> Path:
    """Directory holding a generated input.ok / input.err pair."""
    target = tmp_path / "inputs"
    write_inputs(target, depth=6, seed=1234)
    return target


@pytest.fixture
def deep_recursion():
    """Lift the recursion limit the way the CLI and harness do, then restore it."""
    previous = raise_recursion_limit()
    yield
    sys.setrecursionlimit(previous)
