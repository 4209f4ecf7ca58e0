# Copyright 2026. Command line entry point for the aer script runners.

import argparse
import json
import sys
from pathlib import Path

from aer.core import config
from aer.core.logging import LEVELS, configure_logging


def _load_data(args) -> dict:
    if args.data_file:
        raw = Path(args.data_file).read_text(encoding="utf-8")
    elif args.data:
        raw = args.data
    else:
        return {}
    data = json.loads(raw)
    if not isinstance(data, dict):
        raise ValueError(f"Runner data must be a JSON object, got {type(data).__name__}")
    return data


def _add_data_args(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("script", help="Script to run (.py or .ps1)")
    group = parser.add_mutually_exclusive_group()
    group.add_argument("--data", help="Runner data as a JSON object")
    group.add_argument("--data-file", help="File holding the runner data as a JSON object")


def cmd_run(args) -> int:
    from aer.runners.protocol import RunnerError
    from aer.runners.registry import run_script

    data = args.loaded_data
    runners = None
    if args.timeout:
        from aer.runners.powershell import PowershellRunner
        from aer.runners.python import PythonRunner
        runners = [PythonRunner(timeout_s=args.timeout), PowershellRunner(timeout_s=args.timeout)]
    try:
        run_script(args.work_dir, args.script, data, runners=runners)
    except RunnerError as e:
        print(f"Script failed: {e}", file=sys.stderr)
        return e.exit_code or 1
    except ValueError as e:
        print(f"Invalid configuration: {e}", file=sys.stderr)
        return 2
    print(json.dumps(data, indent=2))
    return 0


def cmd_render(args) -> int:
    from aer.runners.registry import find_runner
    from aer.runners.templates import render_powershell_wrapper, render_python_wrapper

    runner = find_runner(args.script)
    if runner is None:
        print(f"No supported runner was found for '{args.script}'", file=sys.stderr)
        return 1
    script = str(Path(args.script).resolve())
    if runner.name == "powershell":
        print(render_powershell_wrapper(args.loaded_data, script, windows=args.windows))
    else:
        print(render_python_wrapper(args.loaded_data, script), end="")
    return 0


def cmd_runners(args) -> int:
    from aer.runners.registry import RUNNERS

    for runner in RUNNERS:
        exe = runner.executable() or "(not found)"
        print(f"{runner.name:<12} {', '.join(runner.extensions):<8} {exe}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(
        prog="aer",
        description="Run update scripts with JSON data passed in and read back.",
    )
    parser.add_argument("--log", default=None,
                        help="Path to where verbose logs should be written (env: AER_LOG_PATH)")
    parser.add_argument("-L", "--log-level", choices=LEVELS, default=None,
                        help="Console log level (env: AER_LOG_LEVEL)")
    subparsers = parser.add_subparsers(dest="command")

    run_parser = subparsers.add_parser("run", help="Run a script and print the data it returns")
    _add_data_args(run_parser)
    run_parser.add_argument("--work-dir", default=".", help="Directory to run the script in")
    run_parser.add_argument("--timeout", type=int, default=None, help="Timeout in seconds")

    render_parser = subparsers.add_parser("render", help="Print the wrapper generated for a script")
    _add_data_args(render_parser)
    render_parser.add_argument("--windows", action="store_true",
                               help="Render the Windows variant of the PowerShell wrapper")

    subparsers.add_parser("runners", help="List script runners and their interpreters")

    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        return 1

    try:
        configure_logging(
            log_path=args.log if args.log is not None else config.log_path(config.DEFAULT_LOG_PATH),
            level=args.log_level or config.log_level(),
        )
    except ValueError as e:
        print(f"Invalid logging configuration: {e}", file=sys.stderr)
        return 2

    if args.command in ("run", "render"):
        try:
            args.loaded_data = _load_data(args)
        except (ValueError, OSError) as e:
            print(f"Invalid runner data: {e}", file=sys.stderr)
            return 2

    if args.command == "run":
        return cmd_run(args)
    if args.command == "render":
        return cmd_render(args)
    return cmd_runners(args)


if __name__ == "__main__":
    sys.exit(main())
