# Copyright 2026. PowerShell script runner.

import os
import sys
from pathlib import Path

from aer.core import config
from aer.core.logging import get_logger
from .base import SubprocessRunner
from .protocol import RunnerError
from .templates import render_powershell_wrapper

POWERSHELL_NAMES = ("pwsh", "pwsh.exe", "powershell.exe")


def _env_paths() -> list[str]:
    return [p for p in os.environ.get("PATH", "").split(os.pathsep) if p]


def find_powershell() -> str | None:
    """Return the PowerShell executable to use, or None if there is none."""
    override = config.powershell_override()
    if override:
        return override if os.path.isfile(override) else None
    for name in POWERSHELL_NAMES:
        for directory in _env_paths():
            candidate = os.path.join(directory, name)
            if os.path.isfile(candidate):
                return os.path.realpath(candidate)
    return None


class PowershellRunner(SubprocessRunner):
    name = "powershell"
    extensions = (".ps1",)

    def executable(self) -> str | None:
        return find_powershell()

    def build_command(self, script: Path, params: dict, scratch_dir=None) -> list[str]:
        path = self.executable()
        if not path:
            get_logger().error("No powershell executable was found!")
            raise RunnerError("No powershell executable was found!")
        wrapper = render_powershell_wrapper(params, str(script), windows=sys.platform == "win32")
        return [path, "-NoProfile", "-NonInteractive", "-Command", wrapper]

    def child_env(self) -> dict[str, str]:
        env = super().child_env()
        env["POWERSHELL_TELEMETRY_OPTOUT"] = "1"
        return env
