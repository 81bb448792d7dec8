"""Installed package inventory queries backed by dpkg-query."""

from typing import Callable, Dict

from nvidiaupdater.constants import INSTALLED_STATUS_CODES
from nvidiaupdater.errors import NonZeroExitError, QueryError, QueryParseError
from nvidiaupdater.models import PackageInventory


class InventoryService:
    """Snapshots installed packages whose names match a dpkg glob."""

    def __init__(self, dpkg_query_path: str, run_cmd: Callable, logger):
        self.dpkg_query_path = dpkg_query_path
        self.run_cmd = run_cmd
        self.logger = logger

    def list_matching(self, pattern: str) -> PackageInventory:
        cmd = [self.dpkg_query_path, "--list", pattern]
        try:
            result = self.run_cmd(cmd, check=True, capture_output=True, text=False)
        except NonZeroExitError as exc:
            raise QueryError(f"Could not list installed packages matching {pattern!r}: {exc}") from exc

        try:
            output = (result.stdout or b"").decode("utf-8")
        except UnicodeDecodeError as exc:
            raise QueryParseError(f"dpkg-query output is not valid UTF-8: {exc}") from exc

        inventory = PackageInventory.from_mapping(self.parse_listing(output))
        self.logger.debug(
            "Found %s installed package(s) matching %s: %s",
            len(inventory),
            pattern,
            " ".join(inventory.names()) or "<none>",
        )
        return inventory

    @staticmethod
    def parse_listing(output: str) -> Dict[str, str]:
        """Map name to version for every fully installed entry of a ``dpkg-query --list`` listing.

        Header rows, removed or half-installed entries and lines with fewer than three
        fields are skipped.
        """
        packages: Dict[str, str] = {}
        for line in output.splitlines():
            fields = line.split()
            if len(fields) < 3 or fields[0] not in INSTALLED_STATUS_CODES:
                continue
            packages[fields[1]] = fields[2]
        return packages
