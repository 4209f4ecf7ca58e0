"""Tests for PythonRunner: real script runs through the wrapper."""

import os
import shutil
import stat
import sys
import unittest
from pathlib import Path
from unittest.mock import patch

from aer.runners.data import License, PackageMetadata
from aer.runners.markers import MARKER_START
from aer.runners.protocol import RunnerError
from aer.runners.python import WRAPPER_NAME, PythonRunner
from tests.runners.helpers import make_temp_dir, write_script


class TestCanRun(unittest.TestCase):
    def test_python_scripts(self):
        self.assertTrue(PythonRunner().can_run(Path("./update.py")))
        self.assertTrue(PythonRunner().can_run(Path("./UPDATE.PY")))

    def test_other_scripts(self):
        for name in ("my-test.cmd", "test-file.bat", "no.sh", "binary.exe", "update.ps1"):
            self.assertFalse(PythonRunner().can_run(Path(name)), name)


class TestCommand(unittest.TestCase):
    def setUp(self):
        self.tmp = make_temp_dir()

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def test_uses_current_interpreter_by_default(self):
        with patch.dict("os.environ", {}, clear=False) as env:
            env.pop("AER_PYTHON", None)
            cmd = PythonRunner().build_command(Path("/s/update.py"), {}, self.tmp)
        self.assertEqual(cmd[0], sys.executable)

    def test_interpreter_override(self):
        with patch.dict("os.environ", {"AER_PYTHON": "/opt/python3"}):
            cmd = PythonRunner().build_command(Path("/s/update.py"), {}, self.tmp)
        self.assertEqual(cmd[0], "/opt/python3")

    def test_wrapper_written_to_scratch_dir(self):
        cmd = PythonRunner().build_command(Path("/s/update.py"), {"a": 1}, self.tmp)
        wrapper = Path(self.tmp) / WRAPPER_NAME
        self.assertEqual(cmd[1:], [str(wrapper)])
        source = wrapper.read_text(encoding="utf-8")
        self.assertIn(repr("/s/update.py"), source)
        self.assertIn(repr(MARKER_START), source)

    def test_child_env(self):
        env = PythonRunner().child_env()
        self.assertEqual(env["PYTHONUNBUFFERED"], "1")
        self.assertEqual(env["PYTHONIOENCODING"], "utf-8")


class TestRun(unittest.TestCase):
    def setUp(self):
        self.tmp = make_temp_dir()
        self.runner = PythonRunner()

    def tearDown(self):
        shutil.rmtree(self.tmp)

    def _script(self, body: str, name: str = "update.py") -> Path:
        return write_script(self.tmp, name, body)

    def test_empty_script(self):
        data = {"a": 1, "b": "x"}
        result = self.runner.run(self.tmp, self._script(""), data)
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(result.data, {"a": 1, "b": "x"})
        self.assertEqual(data, {"a": 1, "b": "x"})

    def test_changes_come_back_into_dict(self):
        data = {"version": "1.0"}
        self.runner.run(self.tmp, self._script('data["version"] = "2.0"\n'), data)
        self.assertEqual(data, {"version": "2.0"})

    def test_runs_in_work_dir(self):
        script = self._script("import os\ndata['cwd'] = os.getcwd()\n")
        work = Path(self.tmp) / "work"
        work.mkdir()
        data = {}
        self.runner.run(work, script, data)
        self.assertEqual(Path(data["cwd"]).resolve(), work.resolve())

    def test_id_not_changed_by_script(self):
        meta = PackageMetadata("test")
        self.runner.run(self.tmp, self._script('data["id"] = "other"\n'), meta)
        self.assertEqual(meta.id, "test")

    def test_summary_changed_by_script(self):
        meta = PackageMetadata("test")
        body = 'data["summary"] = "The summary was changed to something else"\n'
        self.runner.run(self.tmp, self._script(body), meta)
        self.assertEqual(meta.summary, "The summary was changed to something else")

    def test_license_changed_by_script(self):
        meta = PackageMetadata("codecov")
        body = """\
            data["license"] = {
                "expr": "Apache-2.0",
                "url": "https://github.com/AdmiringWorm/chocolatey-packages/blob/master/LICENSE.txt",
            }
        """
        self.runner.run(self.tmp, self._script(body), meta)
        self.assertEqual(meta.license, License(
            expression="Apache-2.0",
            url="https://github.com/AdmiringWorm/chocolatey-packages/blob/master/LICENSE.txt",
        ))

    def test_warnings_collected(self):
        result = self.runner.run(self.tmp, self._script("print('WARNING: old format')\n"), {})
        self.assertEqual(result.warnings, ["WARNING: old format"])

    def test_exception_fails(self):
        with self.assertRaises(RunnerError) as ctx:
            self.runner.run(self.tmp, self._script("raise ValueError('nope')\n"), {})
        self.assertIn("An exception occurred when running the script!", str(ctx.exception))
        self.assertEqual(ctx.exception.exit_code, 1)
        self.assertIn("ValueError: nope", ctx.exception.result.stderr)

    def test_non_zero_exit_code_fails_with_that_code(self):
        with self.assertRaises(RunnerError) as ctx:
            self.runner.run(self.tmp, self._script("import sys\nsys.exit(5)\n"), {})
        self.assertEqual(ctx.exception.exit_code, 5)

    def test_invalid_script_fails(self):
        with self.assertRaises(RunnerError) as ctx:
            self.runner.run(self.tmp, self._script("def broken(:\n"), {})
        self.assertIn("SyntaxError", ctx.exception.result.stderr)

    def test_data_not_changed_on_failure(self):
        data = {"a": 1}
        with self.assertRaises(RunnerError):
            self.runner.run(self.tmp, self._script("data['a'] = 2\nraise SystemExit(2)\n"), data)
        self.assertEqual(data, {"a": 1})

    def test_directory_instead_of_script(self):
        with self.assertRaises(RunnerError) as ctx:
            self.runner.run(self.tmp, self.tmp, {})
        self.assertIn("is a directory", str(ctx.exception))

    def test_missing_script(self):
        with self.assertRaises(RunnerError) as ctx:
            self.runner.run(self.tmp, Path(self.tmp) / "missing.py", {})
        self.assertIn("does not exist", str(ctx.exception))

    def test_missing_interpreter(self):
        with patch.dict("os.environ", {"AER_PYTHON": "/nonexistent/python"}):
            with self.assertRaises(RunnerError) as ctx:
                self.runner.run(self.tmp, self._script(""), {})
        self.assertEqual(ctx.exception.exit_code, 127)

    def test_timeout(self):
        runner = PythonRunner(timeout_s=1)
        with self.assertRaises(RunnerError) as ctx:
            runner.run(self.tmp, self._script("import time\ntime.sleep(10)\n"), {})
        self.assertEqual(ctx.exception.exit_code, 124)

    def test_output_without_trailing_newline(self):
        data = {"a": 1}
        body = "import sys\nsys.stdout.write('progress')\ndata['a'] = 2\n"
        result = self.runner.run(self.tmp, self._script(body), data)
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(data, {"a": 2})

    def test_exit_code_above_byte_range_still_fails(self):
        with self.assertRaises(RunnerError) as ctx:
            self.runner.run(self.tmp, self._script("import sys\nsys.exit(256)\n"), {})
        self.assertEqual(ctx.exception.exit_code, 1)

    def test_invalid_url_from_script_leaves_metadata_unchanged(self):
        meta = PackageMetadata("test", summary="old")
        body = """\
            data["summary"] = "new"
            data["url"] = "not a url"
        """
        with self.assertRaises(RunnerError) as ctx:
            self.runner.run(self.tmp, self._script(body), meta)
        self.assertIn("Invalid URL", str(ctx.exception))
        self.assertIsNotNone(ctx.exception.result)
        self.assertEqual(meta.summary, "old")
        self.assertEqual(meta.project_url, "")

    def test_large_runner_data(self):
        data = {"blob": "x" * 200_000}
        result = self.runner.run(self.tmp, self._script("data['size'] = len(data['blob'])\n"), data)
        self.assertEqual(result.exit_code, 0)
        self.assertEqual(data["size"], 200_000)

    @unittest.skipIf(os.name == "nt", "exec permission bits are POSIX only")
    def test_interpreter_not_executable(self):
        fake = write_script(self.tmp, "fake-python", "")
        os.chmod(fake, stat.S_IRUSR | stat.S_IWUSR)
        with patch.dict("os.environ", {"AER_PYTHON": str(fake)}):
            with self.assertRaises(RunnerError) as ctx:
                self.runner.run(self.tmp, self._script(""), {})
        self.assertEqual(ctx.exception.exit_code, 126)
        self.assertIn("could not be started", str(ctx.exception))

    def test_spawn_os_error(self):
        err = OSError(7, "Argument list too long")
        with patch("aer.runners.base.subprocess.run", side_effect=err):
            with self.assertRaises(RunnerError) as ctx:
                self.runner.run(self.tmp, self._script(""), {})
        self.assertEqual(ctx.exception.exit_code, 126)
        self.assertIn("Argument list too long", str(ctx.exception))


if __name__ == "__main__":
    unittest.main()
