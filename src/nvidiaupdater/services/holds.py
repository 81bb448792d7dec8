"""APT hold management and the scoped guard that keeps driver packages held."""

from typing import Callable, Iterable, List, Set

from nvidiaupdater.errors import PinError, ReleaseFailure, UpdaterError


class PackageHoldService:
    """Wraps ``apt-mark hold`` / ``apt-mark unhold``."""

    def __init__(self, apt_mark_path: str, run_cmd: Callable, logger, verbose: bool = False):
        self.apt_mark_path = apt_mark_path
        self.run_cmd = run_cmd
        self.logger = logger
        self.verbose = verbose

    def hold(self, names: Iterable[str]):
        self._mark("hold", names)

    def unhold(self, names: Iterable[str]):
        self._mark("unhold", names)

    def _mark(self, action: str, names: Iterable[str]):
        names = list(names)
        if not names:
            # apt-mark rejects an empty package list
            self.logger.debug("Nothing to %s.", action)
            return

        cmd = [self.apt_mark_path, action]
        if not self.verbose:
            cmd.append("-qq")
        self.run_cmd(cmd + names, check=True)


class PinGuard:
    """Keeps a set of packages un-held for the lifetime of a ``with`` block.

    Packages are un-held by :meth:`acquire` and re-held exactly once when the block
    exits, however it exits. The release set can grow through :meth:`extend` but
    never shrinks.
    """

    def __init__(self, hold_service: PackageHoldService, names: Iterable[str], logger):
        self.hold_service = hold_service
        self.logger = logger
        self._names: Set[str] = set(names)
        self._released = False

    @classmethod
    def acquire(cls, hold_service: PackageHoldService, names: Iterable[str], logger) -> "PinGuard":
        names = sorted(set(names))
        logger.info("Un-holding: %s", " ".join(names) or "<none>")
        try:
            hold_service.unhold(names)
        except UpdaterError as exc:
            raise PinError(f"Could not un-hold packages {' '.join(names)}: {exc}") from exc
        return cls(hold_service, names, logger)

    @property
    def names(self) -> List[str]:
        return sorted(self._names)

    @property
    def released(self) -> bool:
        return self._released

    def extend(self, names: Iterable[str]):
        self._names.update(names)

    def release(self):
        if self._released:
            return
        self._released = True

        names = self.names
        self.logger.info("Re-holding: %s", " ".join(names) or "<none>")
        try:
            self.hold_service.hold(names)
        except UpdaterError as exc:
            self.logger.critical(
                "Failed to re-hold packages. They will be upgraded by the next unrelated "
                "upgrade until held again: %s",
                " ".join(names),
            )
            raise ReleaseFailure(names, str(exc)) from exc

    def __enter__(self) -> "PinGuard":
        return self

    def __exit__(self, exc_type, exc, tb):
        self.release()
        return False
