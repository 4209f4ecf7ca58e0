"""Runner registry: pick a runner for a script and run it in a work directory."""

from pathlib import Path

from aer.core.logging import get_logger
from .powershell import PowershellRunner
from .protocol import RunnerError, RunResult, ScriptRunner
from .python import PythonRunner

RUNNERS: list[ScriptRunner] = [PythonRunner(), PowershellRunner()]


def find_runner(script_path, runners: list[ScriptRunner] | None = None) -> ScriptRunner | None:
    for runner in RUNNERS if runners is None else runners:
        if runner.can_run(Path(script_path)):
            return runner
    return None


def prepare_work_dir(work_dir) -> Path:
    """Create the work directory if needed and return it as an absolute path."""
    path = Path(work_dir)
    if not path.exists():
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            msg = f"Failed to create work directory: '{e}'"
            get_logger().error(msg)
            raise RunnerError(msg) from None

    path = path.resolve()
    if not path.is_dir():
        raise RunnerError(f"The specified directory '{path}' is not a directory!")
    return path


def run_script(work_dir, script_path, data,
               runners: list[ScriptRunner] | None = None) -> RunResult:
    """Run `script_path` from `work_dir`, updating `data` with what the script returns.

    `data` is a dict (replaced in place) or a RunnerCombiner.
    Raises RunnerError on any failure.
    """
    work = prepare_work_dir(work_dir)
    runner = find_runner(script_path, runners)
    if runner is None:
        raise RunnerError(f"No supported runner was found for '{script_path}'")
    return runner.run(work, script_path, data)
