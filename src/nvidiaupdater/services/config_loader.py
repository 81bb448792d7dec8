"""Configuration loader for nvidiaupdater."""

from dataclasses import replace
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from nvidiaupdater.errors import ConfigError
from nvidiaupdater.models import UpdaterSettings


class ConfigLoader:
    """Loads YAML configuration files for CLI defaults."""

    SUPPORTED_KEYS = {
        "verbose",
        "mark_only",
        "log_file",
        "apt_get_path",
        "apt_mark_path",
        "dpkg_query_path",
        "rmmod_path",
        "modprobe_path",
        "reboot_path",
        "package_pattern",
        "kernel_module",
        "index_marker_path",
        "index_max_age_hours",
        "command_timeout",
    }
    BOOL_KEYS = ("verbose", "mark_only")
    PATH_KEYS = (
        "apt_get_path",
        "apt_mark_path",
        "dpkg_query_path",
        "rmmod_path",
        "modprobe_path",
        "reboot_path",
    )

    def load(self, config_path: Optional[str]) -> Dict[str, Any]:
        if not config_path:
            return {}

        path = Path(config_path)
        if not path.exists():
            raise ConfigError(f"Config file not found: {config_path}")

        try:
            parsed = yaml.safe_load(path.read_text(encoding="utf-8"))
        except (yaml.YAMLError, OSError) as exc:
            raise ConfigError(f"Invalid config file '{config_path}': {exc}") from exc

        if parsed is None:
            return {}
        if not isinstance(parsed, dict):
            raise ConfigError("Config file must contain a YAML mapping at the root.")

        unknown = sorted(set(parsed.keys()) - self.SUPPORTED_KEYS)
        if unknown:
            unknown_list = ", ".join(unknown)
            raise ConfigError(f"Unknown configuration keys: {unknown_list}")

        not_bool = [key for key in self.BOOL_KEYS if key in parsed and not isinstance(parsed[key], bool)]
        if not_bool:
            raise ConfigError(f"Configuration values must be true or false: {', '.join(not_bool)}")

        relative = [key for key in self.PATH_KEYS if key in parsed and not Path(str(parsed[key])).is_absolute()]
        if relative:
            raise ConfigError(f"Command paths must be absolute: {', '.join(relative)}")

        return parsed

    def build_settings(self, values: Dict[str, Any]) -> UpdaterSettings:
        """Overlay configured values on the default :class:`UpdaterSettings`."""
        overrides: Dict[str, Any] = {}
        for key in self.PATH_KEYS + ("package_pattern", "kernel_module", "index_marker_path"):
            if values.get(key) is not None:
                overrides[key] = str(values[key])

        try:
            if values.get("index_max_age_hours") is not None:
                overrides["index_max_age_seconds"] = float(values["index_max_age_hours"]) * 3600
            if values.get("command_timeout") is not None:
                overrides["command_timeout"] = float(values["command_timeout"])
        except (TypeError, ValueError) as exc:
            raise ConfigError(f"Invalid numeric configuration value: {exc}") from exc

        return replace(UpdaterSettings(), **overrides)
