import subprocess
import unittest
from unittest.mock import patch

from nlc.shell import CommandResult, run_command


class TestRunCommand(unittest.TestCase):
    def setUp(self):
        patcher = patch("nlc.shell.logger")
        self.mock_logger = patcher.start()
        self.addCleanup(patcher.stop)

    @patch("subprocess.run")
    def test_success_prints_stdout(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess("ls -la", 0, stdout="a\nb\n", stderr="")

        result = run_command("ls -la", cwd="/tmp")

        mock_run.assert_called_once_with(
            "ls -la", shell=True, cwd="/tmp", capture_output=True, text=True, check=False
        )
        self.assertTrue(result.ok)
        self.assertEqual(result.stdout, "a\nb\n")
        self.mock_logger.console.print.assert_any_call("a\nb", markup=False, highlight=False)
        self.mock_logger.error.assert_not_called()

    @patch("os.getcwd", return_value="/fake/cwd")
    @patch("subprocess.run")
    def test_defaults_to_current_directory(self, mock_run, mock_getcwd):
        mock_run.return_value = subprocess.CompletedProcess("pwd", 0, stdout="", stderr="")

        run_command("pwd")

        self.assertEqual(mock_run.call_args.kwargs["cwd"], "/fake/cwd")

    @patch("subprocess.run")
    def test_failure_is_reported_not_raised(self, mock_run):
        mock_run.return_value = subprocess.CompletedProcess("false", 2, stdout="", stderr="bad things\n")

        result = run_command("false", cwd="/tmp")

        self.assertFalse(result.ok)
        self.assertEqual(result.returncode, 2)
        self.mock_logger.error.assert_called_once_with("Command exited with code 2")
        self.mock_logger.err_console.print.assert_called_once_with(
            "bad things", markup=False, highlight=False
        )

    @patch("subprocess.run", side_effect=FileNotFoundError("no such directory"))
    def test_launch_error_is_reported_not_raised(self, mock_run):
        result = run_command("ls", cwd="/does/not/exist")

        self.assertIsInstance(result, CommandResult)
        self.assertIsNone(result.returncode)
        self.assertIn("no such directory", result.launch_error)
        self.assertFalse(result.ok)
        self.mock_logger.error.assert_called_once()

    def test_runs_a_real_shell(self):
        result = run_command("printf 'hello'; printf 'oops' >&2; exit 3")

        self.assertEqual(result.stdout, "hello")
        self.assertEqual(result.stderr, "oops")
        self.assertEqual(result.returncode, 3)
