"""Domain errors for nvidiaupdater."""

from typing import Iterable, List, Optional, Sequence


class UpdaterError(RuntimeError):
    """Raised when the update cycle cannot continue safely."""


class ConfigError(UpdaterError):
    """Raised when the configuration file is unreadable or invalid."""


class InvocationError(UpdaterError):
    """Raised when the OS cannot start an external command at all."""


class NonZeroExitError(UpdaterError):
    """Raised when an external command ran and reported failure."""

    def __init__(self, cmd: Sequence[str], code: Optional[int], detail: str = ""):
        self.cmd = list(cmd)
        self.code = code
        if code is None:
            message = f"Command terminated by signal: {' '.join(self.cmd)}"
        else:
            message = f"Command failed ({code}): {' '.join(self.cmd)}"
        if detail:
            message = f"{message}\n{detail}"
        super().__init__(message)


class CommandTimeoutError(UpdaterError):
    """Raised when the optional outer command timeout expires."""


class QueryError(UpdaterError):
    """Raised when the package inventory could not be queried."""


class QueryParseError(QueryError):
    """Raised when the package inventory output could not be decoded."""


class PinError(UpdaterError):
    """Raised when packages could not be un-held before the upgrade."""


class ReleaseFailure(RuntimeError):
    """Raised when held packages could not be re-held.

    Deliberately not an ``UpdaterError``: a missed re-hold leaves driver packages
    free to float on the next unrelated upgrade, so nothing in the program recovers
    from it.
    """

    def __init__(self, names: Iterable[str], reason: str):
        self.names: List[str] = sorted(names)
        self.reason = reason
        super().__init__(
            f"Failed to re-mark packages as held: {' '.join(self.names) or '<none>'} ({reason})"
        )
