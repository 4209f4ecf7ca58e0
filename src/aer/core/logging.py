# Copyright 2026. Leveled activity logging for script runs.

import sys
from datetime import datetime, timezone

LEVELS = ("trace", "debug", "info", "warn", "error")
_LEVEL_RANK = {name: rank for rank, name in enumerate(LEVELS)}


def utc_timestamp() -> str:
    return datetime.now(timezone.utc).strftime("%H:%M:%S")


def log_activity(log_path: str, source: str, message: str) -> None:
    if not log_path:
        return
    ts = utc_timestamp()
    line = f"[{ts}] {source}  {message}\n" if source else f"[{ts}] {message}\n"
    try:
        with open(log_path, "a", encoding="utf-8") as f:
            f.write(line)
    except OSError:
        pass


def level_rank(level: str) -> int:
    try:
        return _LEVEL_RANK[level.lower()]
    except KeyError:
        raise ValueError(
            f"Unknown log level: {level!r} (expected one of {', '.join(LEVELS)})"
        ) from None


class Logger:
    """Writes every message to the log file, and echoes to stderr from `level` up."""

    def __init__(self, log_path: str = "", level: str = "info", stream=None):
        self.log_path = log_path
        self.level = level.lower()
        self._threshold = level_rank(level)
        self._stream = stream

    def log(self, level: str, message: str) -> None:
        log_activity(self.log_path, level.upper(), message)
        if level_rank(level) < self._threshold:
            return
        stream = self._stream or sys.stderr
        print(f"{level.upper():5} {message}", file=stream)

    def trace(self, message: str) -> None:
        self.log("trace", message)

    def debug(self, message: str) -> None:
        self.log("debug", message)

    def info(self, message: str) -> None:
        self.log("info", message)

    def warn(self, message: str) -> None:
        self.log("warn", message)

    def error(self, message: str) -> None:
        self.log("error", message)


_logger = Logger()


def configure_logging(log_path: str = "", level: str = "info") -> Logger:
    global _logger
    _logger = Logger(log_path=log_path, level=level)
    return _logger


def get_logger() -> Logger:
    return _logger
