# Copyright 2026. Environment-driven settings for the script runners.

import os
import sys

DEFAULT_LOG_PATH = "./aer.log"
DEFAULT_LOG_LEVEL = "info"
DEFAULT_TIMEOUT_S = 600


def log_path(default: str = "") -> str:
    return os.environ.get("AER_LOG_PATH", default)


def log_level() -> str:
    return os.environ.get("AER_LOG_LEVEL", DEFAULT_LOG_LEVEL)


def python_executable() -> str:
    """Interpreter used for `.py` scripts: $AER_PYTHON, else the running one."""
    return os.environ.get("AER_PYTHON") or sys.executable


def powershell_override() -> str:
    return os.environ.get("AER_POWERSHELL", "")


def timeout_s() -> int:
    raw = os.environ.get("AER_TIMEOUT", "")
    if not raw:
        return DEFAULT_TIMEOUT_S
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"AER_TIMEOUT must be an integer number of seconds, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"AER_TIMEOUT must be positive, got {value}")
    return value
