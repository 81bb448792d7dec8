"""Subprocess execution service for nvidiaupdater."""

import subprocess
from typing import List, Optional, Sequence

from nvidiaupdater.errors import CommandTimeoutError, InvocationError, NonZeroExitError
from nvidiaupdater.models import ExitOutcome


class CommandRunner:
    """Runs external commands with consistent error handling.

    Standard streams are inherited unless output is captured, so apt progress
    output reaches the journal unmodified. Commands are never retried.
    """

    def __init__(self, logger, default_timeout: Optional[float] = None):
        self.logger = logger
        self.default_timeout = default_timeout

    def execute(self, path: str, args: Sequence[str] = ()) -> ExitOutcome:
        """Run ``path`` with ``args`` and report how it exited without raising on failure."""
        result = self.run([path, *args], check=False)
        if result.returncode == 0:
            return ExitOutcome(success=True, code=0)
        return ExitOutcome(success=False, code=self._exit_code(result.returncode))

    def run(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        text: bool = True,
        timeout: Optional[float] = None,
    ) -> subprocess.CompletedProcess:
        cmd_str = " ".join(cmd)
        self.logger.debug("Executing: %s", cmd_str)

        effective_timeout = timeout if timeout is not None else self.default_timeout

        try:
            result = subprocess.run(
                cmd,
                text=text,
                capture_output=capture_output,
                timeout=effective_timeout,
            )
        except FileNotFoundError as exc:
            raise InvocationError(
                f"Required command not found: {cmd[0]}. Please install it and try again."
            ) from exc
        except PermissionError as exc:
            raise InvocationError(f"Permission denied running command: {cmd[0]}") from exc
        except subprocess.TimeoutExpired as exc:
            raise CommandTimeoutError(
                f"Command timed out after {effective_timeout}s: {cmd_str}"
            ) from exc
        except OSError as exc:
            raise InvocationError(f"Failed to execute command: {cmd_str}. {exc}") from exc

        if result.returncode == 0:
            return result

        stderr = ""
        if capture_output and result.stderr:
            stderr = result.stderr if text else result.stderr.decode("utf-8", "replace")
            stderr = stderr.strip()

        error = NonZeroExitError(cmd, self._exit_code(result.returncode), stderr)
        if check:
            raise error

        self.logger.warning(str(error))
        return result

    @staticmethod
    def _exit_code(returncode: int) -> Optional[int]:
        # subprocess reports death by signal N as -N
        return returncode if returncode >= 0 else None
