# Copyright 2026. Script runner protocol: one runner per script type.

from dataclasses import dataclass, field
from pathlib import Path
from typing import Protocol


@dataclass
class RunResult:
    exit_code: int
    stdout: str
    stderr: str
    data: dict | None = None
    warnings: list[str] = field(default_factory=list)


class RunnerError(RuntimeError):
    """A script could not be run, failed, or returned unreadable data."""

    def __init__(self, message: str, exit_code: int = 1, result: RunResult | None = None):
        super().__init__(message)
        self.exit_code = exit_code
        self.result = result


class ScriptRunner(Protocol):
    name: str
    extensions: tuple[str, ...]

    def executable(self) -> str | None: ...

    def build_command(self, script: Path, params: dict, scratch_dir) -> list[str]: ...

    def can_run(self, script_path: Path) -> bool: ...

    def run(self, work_dir: Path, script_path: Path, data) -> RunResult: ...
