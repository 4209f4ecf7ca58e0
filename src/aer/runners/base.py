# Copyright 2026. Shared subprocess behaviour for script runners.

import os
import subprocess
import tempfile
from pathlib import Path

from aer.core import config
from aer.core.logging import get_logger
from .data import merge_runner_data, to_runner_data
from .markers import is_warning, parse_payload, scan_output
from .protocol import RunnerError, RunResult

EXIT_TIMEOUT = 124
EXIT_NOT_EXECUTABLE = 126
EXIT_NOT_FOUND = 127


def resolve_script(script_path) -> Path:
    path = Path(script_path)
    if not path.exists():
        raise RunnerError(f"The script '{path}' does not exist!")
    if path.is_dir():
        raise RunnerError(f"The script '{path}' is a directory, not a file!")
    return path.resolve()


class SubprocessRunner:
    """Base for runners that wrap a script and launch it through an interpreter.

    Subclasses provide `name`, `extensions`, `executable()` and
    `build_command(script, params, scratch_dir)`, and may extend `child_env()`.
    `scratch_dir` is a temporary directory that lives for the length of the
    run. `run()` does the rest: spawn, log output, detect failure, decode the
    marker block and merge it back into the caller's data.
    """

    name = ""
    extensions: tuple[str, ...] = ()

    def __init__(self, timeout_s: int | None = None):
        self.timeout_s = timeout_s

    def can_run(self, script_path) -> bool:
        return str(script_path).lower().endswith(self.extensions)

    def child_env(self) -> dict[str, str]:
        return os.environ.copy()

    def run(self, work_dir, script_path, data) -> RunResult:
        log = get_logger()
        script = resolve_script(script_path)
        params = to_runner_data(data)
        timeout = self.timeout_s or config.timeout_s()

        log.trace(f"Data before running: {params!r}")
        log.info(f"Running script: {script}")

        with tempfile.TemporaryDirectory(prefix="aer-") as scratch_dir:
            cmd = self.build_command(script, params, scratch_dir)
            proc = self._spawn(cmd, work_dir, timeout, script)
        return self._finish(proc, data)

    def _spawn(self, cmd: list[str], work_dir, timeout: int, script: Path):
        log = get_logger()
        try:
            return subprocess.run(
                cmd,
                cwd=str(work_dir),
                env=self.child_env(),
                capture_output=True,
                text=True,
                encoding="utf-8",
                errors="replace",
                timeout=timeout,
            )
        except FileNotFoundError:
            log.error(f"'{cmd[0]}' not found")
            raise RunnerError(f"The {self.name} interpreter '{cmd[0]}' was not found!",
                              exit_code=EXIT_NOT_FOUND) from None
        except subprocess.TimeoutExpired:
            log.error(f"Script timed out after {timeout}s: {script}")
            raise RunnerError(f"The script '{script}' timed out after {timeout}s",
                              exit_code=EXIT_TIMEOUT) from None
        except OSError as e:
            log.error(f"Could not start '{cmd[0]}': {e}")
            raise RunnerError(f"The {self.name} interpreter '{cmd[0]}' could not be started: {e}",
                              exit_code=EXIT_NOT_EXECUTABLE) from None

    def _finish(self, proc, data) -> RunResult:
        log = get_logger()

        result = RunResult(exit_code=proc.returncode, stdout=proc.stdout or "",
                           stderr=proc.stderr or "")
        if result.exit_code != 0:
            log.error(f"{self.name} script runner returned {result.exit_code} error code!")

        out = scan_output(result.stdout)
        log.debug("AER-SCRIPT-RUNNER STDOUT:")
        for line in out.lines:
            log.debug(line)
        for line in out.warnings:
            log.warn(line)
        result.warnings = list(out.warnings)

        failed = result.exit_code != 0
        stderr_lines = [line for line in result.stderr.splitlines() if line.strip()]
        if stderr_lines:
            log.debug("AER-SCRIPT-RUNNER STDERR:")
        for line in stderr_lines:
            if is_warning(line):
                log.warn(line.strip())
                result.warnings.append(line.strip())
            else:
                log.error(line)
                failed = True

        if failed:
            raise RunnerError(
                f"An exception occurred when running the script!\n{result.stderr}",
                exit_code=result.exit_code or 1,
                result=result,
            )

        if not out.found:
            raise RunnerError(
                "Deserializing script runner data failed with: "
                "no runner data block in script output",
                result=result,
            )
        try:
            result.data = parse_payload(out.payload)
        except RunnerError as e:
            log.error(str(e))
            e.result = result
            raise

        try:
            merge_runner_data(data, result.data)
        except (TypeError, ValueError) as e:
            log.error(f"Script returned invalid data: {e}")
            raise RunnerError(f"The script returned invalid data: {e}", result=result) from None
        log.trace(f"Data after running: {data!r}")
        return result
