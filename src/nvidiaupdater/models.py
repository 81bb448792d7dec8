"""Shared domain models for nvidiaupdater."""

from dataclasses import dataclass
from typing import Dict, List, Mapping, Optional, Tuple

from . import constants


@dataclass(frozen=True)
class UpdaterSettings:
    """Paths and tunables threaded into every service at construction."""

    apt_get_path: str = constants.APT_GET_PATH
    apt_mark_path: str = constants.APT_MARK_PATH
    dpkg_query_path: str = constants.DPKG_QUERY_PATH
    rmmod_path: str = constants.RMMOD_PATH
    modprobe_path: str = constants.MODPROBE_PATH
    reboot_path: str = constants.REBOOT_PATH
    package_pattern: str = constants.PACKAGE_PATTERN
    kernel_module: str = constants.KERNEL_MODULE
    index_marker_path: str = constants.INDEX_MARKER_PATH
    index_max_age_seconds: float = constants.INDEX_MAX_AGE_SECONDS
    command_timeout: Optional[float] = None


@dataclass(frozen=True)
class ExitOutcome:
    """Result of a command that was started successfully."""

    success: bool
    code: Optional[int] = None


@dataclass(frozen=True)
class PackageChange:
    name: str
    before: Optional[str]
    after: Optional[str]

    @property
    def kind(self) -> str:
        if self.before is None:
            return "added"
        if self.after is None:
            return "removed"
        return "changed"

    def describe(self) -> str:
        if self.kind == "added":
            return f"{self.name}: (new) -> {self.after}"
        if self.kind == "removed":
            return f"{self.name}: {self.before} -> (removed)"
        return f"{self.name}: {self.before} -> {self.after}"


@dataclass(frozen=True)
class PackageInventory:
    """Immutable snapshot of installed package names and versions, sorted by name."""

    packages: Tuple[Tuple[str, str], ...] = ()

    @classmethod
    def from_mapping(cls, mapping: Mapping[str, str]) -> "PackageInventory":
        return cls(tuple(sorted(mapping.items())))

    def names(self) -> List[str]:
        return [name for name, _ in self.packages]

    def as_dict(self) -> Dict[str, str]:
        return dict(self.packages)

    def diff(self, other: "PackageInventory") -> List[PackageChange]:
        """Per-package deltas from ``self`` to ``other``, sorted by name."""
        before = self.as_dict()
        after = other.as_dict()
        changes = []
        for name in sorted(set(before) | set(after)):
            if before.get(name) != after.get(name):
                changes.append(PackageChange(name, before.get(name), after.get(name)))
        return changes

    def __len__(self) -> int:
        return len(self.packages)
