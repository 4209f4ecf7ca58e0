# Copyright 2026. Python script runner.

from pathlib import Path

from aer.core import config
from .base import SubprocessRunner
from .templates import render_python_wrapper

WRAPPER_NAME = "aer_wrapper.py"


class PythonRunner(SubprocessRunner):
    """Runs `.py` scripts in-process inside a generated wrapper.

    The script sees the runner data as the global `data` and may modify it
    in place; `sys.exit(n)` sets the exit code. The wrapper is written to
    the scratch directory rather than passed with `-c`, so large runner data
    does not hit the OS argument length limit.
    """

    name = "python"
    extensions = (".py",)

    def executable(self) -> str:
        return config.python_executable()

    def build_command(self, script: Path, params: dict, scratch_dir) -> list[str]:
        wrapper = Path(scratch_dir) / WRAPPER_NAME
        wrapper.write_text(render_python_wrapper(params, str(script)), encoding="utf-8")
        return [self.executable(), str(wrapper)]

    def child_env(self) -> dict[str, str]:
        env = super().child_env()
        env["PYTHONUNBUFFERED"] = "1"
        env["PYTHONIOENCODING"] = "utf-8"
        return env
