"""Kernel module reload with reboot fallback."""

from typing import Callable

from nvidiaupdater.errors import InvocationError
from nvidiaupdater.models import ExitOutcome


class RecoveryService:
    """Brings the running kernel back in line with freshly upgraded driver packages."""

    RELOADED = "reloaded"
    REBOOTING = "rebooting"

    def __init__(
        self,
        kernel_module: str,
        rmmod_path: str,
        modprobe_path: str,
        reboot_path: str,
        run_cmd: Callable,
        execute: Callable,
        logger,
        console,
    ):
        self.kernel_module = kernel_module
        self.rmmod_path = rmmod_path
        self.modprobe_path = modprobe_path
        self.reboot_path = reboot_path
        self.run_cmd = run_cmd
        self.execute = execute
        self.logger = logger
        self.console = console

    def _unload(self) -> ExitOutcome:
        try:
            return self.execute(self.rmmod_path, [self.kernel_module])
        except InvocationError as exc:
            self.logger.warning("Could not start %s: %s", self.rmmod_path, exc)
            return ExitOutcome(success=False)

    def attempt_reload(self) -> str:
        """Reload the kernel module, or reboot when it cannot be unloaded.

        A failing ``modprobe`` after a successful unload and a ``reboot`` that cannot
        be issued both propagate to the caller.
        """
        self.console.print(f"[blue]Attempting {self.kernel_module} kernel module reload...[/blue]")
        self.logger.info("Unloading kernel module %s", self.kernel_module)

        outcome = self._unload()
        if not outcome.success:
            self.logger.warning("Module unload failed (exit code %s).", outcome.code)
            self.console.print("[yellow]Module reload failed. Triggering reboot...[/yellow]")
            self.run_cmd([self.reboot_path], check=True)
            return self.REBOOTING

        self.logger.info("Loading kernel module %s", self.kernel_module)
        self.run_cmd([self.modprobe_path, self.kernel_module], check=True)
        self.console.print(f"[green]Kernel module {self.kernel_module} reloaded.[/green]")
        return self.RELOADED
