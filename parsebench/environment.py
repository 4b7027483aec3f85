"""Run settings resolved from the process environment.

CLI options take precedence; these are the fallbacks.

    PARSEBENCH_LABEL      — label written in the first results column
    PARSEBENCH_RESULTS    — path of the append-only results log
    PARSEBENCH_INPUT_DIR  — directory holding input.ok / input.err
"""

from __future__ import annotations

import os
import platform
from pathlib import Path
from typing import Mapping, Optional

DEFAULT_RESULTS = "results.csv"


def _env(env: Optional[Mapping[str, str]]) -> Mapping[str, str]:
    return os.environ if env is None else env


def default_label(env: Optional[Mapping[str, str]] = None) -> str:
    """Label for this interpreter, e.g. 'cpython-3.12'.

    Plays the role the compiler name plays for native builds.
    """
    label = _env(env).get("PARSEBENCH_LABEL", "").strip()
    if label:
        return label
    major, minor, _ = platform.python_version_tuple()
    return f"{platform.python_implementation().lower()}-{major}.{minor}"


def results_path(env: Optional[Mapping[str, str]] = None) -> Path:
    """Path of the results log (relative paths resolve against the cwd)."""
    return Path(_env(env).get("PARSEBENCH_RESULTS") or DEFAULT_RESULTS)


def input_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """Directory the input programs are read from. Defaults to the cwd."""
    return Path(_env(env).get("PARSEBENCH_INPUT_DIR") or ".")
