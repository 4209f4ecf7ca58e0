"""Shared helpers for runner tests."""

import subprocess
import sys
import tempfile
import textwrap
from pathlib import Path


def make_temp_dir() -> str:
    """Create a temporary directory. Caller must clean up."""
    return tempfile.mkdtemp(prefix="runner_test_")


def write_script(directory, name: str, body: str) -> Path:
    path = Path(directory) / name
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(textwrap.dedent(body), encoding="utf-8")
    return path


def run_wrapper(source: str, cwd=None) -> subprocess.CompletedProcess:
    """Execute generated wrapper source with the current interpreter."""
    return subprocess.run(
        [sys.executable, "-c", source],
        capture_output=True, text=True, cwd=cwd, timeout=60,
    )
