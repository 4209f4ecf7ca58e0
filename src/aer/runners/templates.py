"""Wrapper script templates and safe {{var}} substitution."""

import json
import re

from .markers import MARKER_END, MARKER_START

_VAR_RE = re.compile(r"\{\{(\w+)\}\}")

# PowerShell treats the typographic single quotes as quote characters too.
_PS_QUOTES = ("'", "‘", "’", "‚", "‛")


def render(template: str, variables: dict[str, str]) -> str:
    def replacer(m: re.Match) -> str:
        key = m.group(1)
        return variables.get(key, m.group(0))

    return _VAR_RE.sub(replacer, template)


PYTHON_WRAPPER = """\
import json
import os
import runpy
import sys
import traceback

script = {{SCRIPT_PATH}}
data = json.loads({{PARAMS_JSON}})
exit_code = 0
sys.path.insert(0, os.path.dirname(script))
try:
    runpy.run_path(script, init_globals={"data": data}, run_name="__main__")
except SystemExit as exc:
    if exc.code is None:
        exit_code = 0
    elif isinstance(exc.code, int):
        exit_code = exc.code
    else:
        print(exc.code, file=sys.stderr)
        exit_code = 1
except Exception:
    traceback.print_exc()
    exit_code = 1
sys.stderr.flush()
print()
print({{MARKER_START}})
print(json.dumps(data, default=str))
print({{MARKER_END}})
sys.stdout.flush()
if exit_code != 0:
    print("Non-Zero exit code: %d" % exit_code, file=sys.stderr)
    # Exit statuses are one byte; keep failures non-zero after truncation.
    if not 0 < exit_code < 256:
        exit_code = exit_code % 256 or 1
    sys.exit(exit_code)
"""

POWERSHELL_WRAPPER = (
    "$ErrorActionPreference = 'Stop'; $InformationPreference = 'Continue'; "
    "$VerbosePreference = 'Continue'; $DebugPreference = 'Continue'; "
    "{{EXECUTION_POLICY}}"
    "$data = ({{PARAMS_JSON}} | ConvertFrom-Json -AsHashtable); "
    "[int]$exitCode = 0; $global:LASTEXITCODE = 0; "
    "try { & {{SCRIPT_PATH}} $data; [int]$exitCode = [int]$LASTEXITCODE; } "
    "catch { Write-Error -ErrorRecord $_ -ErrorAction Continue; "
    "if ([int]$LASTEXITCODE -eq 0) { [int]$exitCode = 1; } else { [int]$exitCode = [int]$LASTEXITCODE; } }; "
    "Write-Host ''; Write-Host {{MARKER_START}}; "
    "Write-Host ($data | ConvertTo-Json -Depth 20 -Compress); "
    "Write-Host {{MARKER_END}}; "
    "if ($exitCode -ne 0) { [Console]::Error.WriteLine(\"Non-Zero exit code: $exitCode\"); exit $exitCode; }"
)

POWERSHELL_EXECUTION_POLICY = "Set-ExecutionPolicy Bypass -Scope Process; "


def encode_params(params: dict) -> str:
    if not isinstance(params, dict):
        raise TypeError(f"Runner data must be a JSON object, got {type(params).__name__}")
    return json.dumps(params)


def python_literal(value: str) -> str:
    return repr(value)


def powershell_literal(value: str) -> str:
    for quote in _PS_QUOTES:
        value = value.replace(quote, quote * 2)
    return f"'{value}'"


def render_python_wrapper(params: dict, script_path: str) -> str:
    return render(PYTHON_WRAPPER, {
        "PARAMS_JSON": python_literal(encode_params(params)),
        "SCRIPT_PATH": python_literal(str(script_path)),
        "MARKER_START": python_literal(MARKER_START),
        "MARKER_END": python_literal(MARKER_END),
    })


def render_powershell_wrapper(params: dict, script_path: str, windows: bool = False) -> str:
    return render(POWERSHELL_WRAPPER, {
        "EXECUTION_POLICY": POWERSHELL_EXECUTION_POLICY if windows else "",
        "PARAMS_JSON": powershell_literal(encode_params(params)),
        "SCRIPT_PATH": powershell_literal(str(script_path)),
        "MARKER_START": powershell_literal(MARKER_START),
        "MARKER_END": powershell_literal(MARKER_END),
    })
