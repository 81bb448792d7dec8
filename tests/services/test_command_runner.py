import sys

import pytest

from nvidiaupdater.errors import CommandTimeoutError, InvocationError, NonZeroExitError
from nvidiaupdater.models import ExitOutcome
from nvidiaupdater.services.command_runner import CommandRunner


class DummyLogger:
    def debug(self, *_args, **_kwargs):
        return None

    def warning(self, *_args, **_kwargs):
        return None


def test_command_runner_raises_with_stderr():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(NonZeroExitError, match="boom") as error:
        runner.run(
            [sys.executable, "-c", "import sys; sys.stderr.write('boom'); sys.exit(3)"],
            check=True,
            capture_output=True,
        )

    assert error.value.code == 3


def test_command_runner_returns_when_check_disabled():
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run(
        [sys.executable, "-c", "import sys; sys.exit(1)"],
        check=False,
        capture_output=True,
    )

    assert result.returncode == 1


def test_command_runner_captures_bytes_when_text_disabled():
    runner = CommandRunner(logger=DummyLogger())

    result = runner.run(
        [sys.executable, "-c", "import sys; sys.stdout.buffer.write(b'\\xff')"],
        capture_output=True,
        text=False,
    )

    assert result.stdout == b"\xff"


def test_command_runner_missing_binary_raises_invocation_error(tmp_path):
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(InvocationError, match="Required command not found"):
        runner.run([str(tmp_path / "no-such-command")])


def test_command_runner_timeout_raises_error():
    runner = CommandRunner(logger=DummyLogger())

    with pytest.raises(CommandTimeoutError, match="timed out"):
        runner.run(
            [sys.executable, "-c", "import time; time.sleep(2)"],
            check=True,
            capture_output=True,
            timeout=0.1,
        )


def test_execute_reports_success_and_failure_codes():
    runner = CommandRunner(logger=DummyLogger())

    assert runner.execute(sys.executable, ["-c", "pass"]) == ExitOutcome(success=True, code=0)
    assert runner.execute(sys.executable, ["-c", "import sys; sys.exit(7)"]) == ExitOutcome(
        success=False, code=7
    )


@pytest.mark.skipif(sys.platform == "win32", reason="POSIX signals only")
def test_execute_reports_signal_termination_without_code():
    runner = CommandRunner(logger=DummyLogger())

    outcome = runner.execute(
        sys.executable,
        ["-c", "import os, signal; os.kill(os.getpid(), signal.SIGKILL)"],
    )

    assert outcome == ExitOutcome(success=False, code=None)
