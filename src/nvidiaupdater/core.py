import logging
import subprocess
from typing import List, Optional

from rich.console import Console

from .errors import (
    InvocationError,
    PinError,
    QueryError,
    ReleaseFailure,
    UpdaterError,
)
from .errors_catalog import actionable_error
from .models import ExitOutcome, PackageInventory, UpdaterSettings
from .services.command_runner import CommandRunner
from .services.freshness import IndexFreshnessService
from .services.holds import PackageHoldService, PinGuard
from .services.inventory import InventoryService
from .services.recovery import RecoveryService

console = Console(stderr=True)
logger = logging.getLogger("nvidiaupdater")


class NvidiaUpdater:
    """Updates held nVidia driver packages and brings the kernel module in line.

    Packages matching the configured pattern are only un-held for the duration of
    one upgrade cycle and are re-held on every exit path.
    """

    def __init__(
        self,
        settings: Optional[UpdaterSettings] = None,
        mark_only: bool = False,
        verbose: bool = False,
        config_path: Optional[str] = None,
    ):
        self.settings = settings or UpdaterSettings()
        self.mark_only = mark_only
        self.verbose = verbose
        self.config_path = config_path
        self.current_step_name: Optional[str] = None

        self.command_runner = CommandRunner(
            logger=logger,
            default_timeout=self.settings.command_timeout,
        )
        self.freshness_service = IndexFreshnessService(logger=logger)
        self.inventory_service = InventoryService(
            dpkg_query_path=self.settings.dpkg_query_path,
            run_cmd=self._run_cmd,
            logger=logger,
        )
        self.hold_service = PackageHoldService(
            apt_mark_path=self.settings.apt_mark_path,
            run_cmd=self._run_cmd,
            logger=logger,
            verbose=verbose,
        )
        self.recovery_service = RecoveryService(
            kernel_module=self.settings.kernel_module,
            rmmod_path=self.settings.rmmod_path,
            modprobe_path=self.settings.modprobe_path,
            reboot_path=self.settings.reboot_path,
            run_cmd=self._run_cmd,
            execute=self._execute,
            logger=logger,
            console=console,
        )

    def _run_cmd(
        self,
        cmd: List[str],
        check: bool = True,
        capture_output: bool = False,
        text: bool = True,
    ) -> subprocess.CompletedProcess:
        return self.command_runner.run(cmd, check=check, capture_output=capture_output, text=text)

    def _execute(self, path: str, args: List[str]) -> ExitOutcome:
        return self.command_runner.execute(path, args)

    def _run_step(self, name: str, callback, *args, **kwargs):
        logger.debug("Starting step: %s", name)
        self.current_step_name = name
        result = callback(*args, **kwargs)
        self.current_step_name = None
        return result

    def _apt_get(self, action: str):
        cmd = [self.settings.apt_get_path, action]
        if action == "dist-upgrade":
            cmd.append("-y")
        if not self.verbose:
            cmd.append("-q")
        self._run_cmd(cmd, check=True)

    def refresh_index(self):
        """Runs ``apt-get update`` only when the package index is stale."""
        stale = self.freshness_service.is_stale(
            self.settings.index_marker_path,
            self.settings.index_max_age_seconds,
        )
        if not stale:
            logger.info("Package index is recent. Skipping refresh.")
            return

        console.print("[blue]Updating package list...[/blue]")
        self._apt_get("update")

    def snapshot(self) -> PackageInventory:
        logger.info("Getting list of eligible packages")
        return self.inventory_service.list_matching(self.settings.package_pattern)

    def dist_upgrade(self):
        console.print("[blue]Upgrading all packages...[/blue]")
        self._apt_get("dist-upgrade")

    def report_changes(self, before: PackageInventory, after: PackageInventory):
        changes = before.diff(after)
        if not changes:
            logger.info("No driver package changed.")
            return
        for change in changes:
            logger.info("Driver package %s", change.describe())

    def do_update(self) -> bool:
        """Un-hold matching packages, upgrade, and re-hold them.

        Returns whether the matching package set changed, in which case the kernel
        module has to be reloaded. In mark-only mode nothing is upgraded and the
        current matching packages are simply re-held.
        """
        if not self.mark_only:
            self._run_step("refresh_index", self.refresh_index)

        before = self._run_step("snapshot_before", self.snapshot)

        with PinGuard.acquire(self.hold_service, before.names(), logger) as guard:
            if self.mark_only:
                return False

            self._run_step("dist_upgrade", self.dist_upgrade)

            after = self._run_step("snapshot_after", self.snapshot)
            guard.extend(after.names())

        self.report_changes(before, after)
        return before != after

    def reload_driver(self) -> str:
        return self.recovery_service.attempt_reload()

    def _describe_error(self, exc: UpdaterError) -> str:
        if isinstance(exc, InvocationError):
            return actionable_error("command_not_found", config=self.config_path or "the configuration")
        if isinstance(exc, PinError):
            return actionable_error("unhold_failed")
        if isinstance(exc, QueryError):
            return actionable_error("query_failed", pattern=self.settings.package_pattern)
        if self.current_step_name == "refresh_index":
            return actionable_error("refresh_failed")
        if self.current_step_name == "reload_driver":
            return actionable_error("reload_failed", module=self.settings.kernel_module)
        return actionable_error("upgrade_failed")

    def run(self) -> int:
        try:
            logger.info("Starting nvidiaupdater%s...", " (mark only)" if self.mark_only else "")

            reload_needed = self.do_update()
            if reload_needed:
                self._run_step("reload_driver", self.reload_driver)
            elif not self.mark_only:
                console.print("[green]Driver packages are up to date.[/green]")
            else:
                console.print("[green]Driver packages re-held.[/green]")
            return 0

        except KeyboardInterrupt:
            console.print("[bold red]Operation cancelled by user.[/bold red]")
            logger.info("Operation cancelled by user")
            return 1
        except UpdaterError as exc:
            console.print(f"[bold red]Error:[/bold red] {exc}")
            console.print(self._describe_error(exc))
            logger.error(str(exc))
            return 1
        except ReleaseFailure as exc:
            console.print(f"[bold red]FATAL:[/bold red] {exc}")
            console.print(actionable_error("release_failed", names=" ".join(exc.names)))
            raise
        except Exception:
            console.print("[bold red]Unexpected error.[/bold red]")
            logger.exception("Unexpected error")
            return 1
