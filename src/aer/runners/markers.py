"""Marker block written by the wrapper scripts, and the parser for it.

A wrapper echoes its (possibly modified) runner data between two fixed
lines so the caller can pick it out of whatever else the script printed:

    ## AER-SCRIPT-RUNNER:START ##
    {"id": "example", ...}
    ## AER-SCRIPT-RUNNER:END ##
"""

import json
from dataclasses import dataclass, field

from .protocol import RunnerError

MARKER_START = "## AER-SCRIPT-RUNNER:START ##"
MARKER_END = "## AER-SCRIPT-RUNNER:END ##"


@dataclass
class ScriptOutput:
    found: bool = False
    payload: str = ""
    lines: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)


def format_marker_block(data: dict) -> str:
    return f"{MARKER_START}\n{json.dumps(data)}\n{MARKER_END}\n"


def is_warning(line: str) -> bool:
    return line.strip().startswith("WARNING:")


def scan_output(stdout: str) -> ScriptOutput:
    out = ScriptOutput()
    payload: list[str] = []
    in_data = False

    for raw in stdout.splitlines():
        line = raw.strip()
        if line == MARKER_START:
            # A later block replaces an earlier one.
            in_data = True
            out.found = True
            payload = []
        elif line == MARKER_END:
            in_data = False
        elif in_data:
            payload.append(line)
        elif not line:
            continue
        elif is_warning(line):
            out.warnings.append(line)
        else:
            out.lines.append(line)

    out.payload = "\n".join(payload)
    return out


def parse_payload(payload: str) -> dict:
    try:
        data = json.loads(payload)
    except json.JSONDecodeError as e:
        raise RunnerError(f"Deserializing script runner data failed with: {e}") from None
    if not isinstance(data, dict):
        raise RunnerError(
            "Deserializing script runner data failed with: "
            f"expected a JSON object, got {type(data).__name__}"
        )
    return data


def extract_runner_data(stdout: str) -> dict:
    out = scan_output(stdout)
    if not out.found:
        raise RunnerError(
            "Deserializing script runner data failed with: no runner data block in script output"
        )
    return parse_payload(out.payload)
