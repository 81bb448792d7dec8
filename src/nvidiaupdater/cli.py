import logging
import os

import click
from rich.logging import RichHandler

from .constants import DEFAULT_CONFIG_PATH, DEPENDENCIES
from .core import NvidiaUpdater
from .errors import UpdaterError
from .services.config_loader import ConfigLoader


def _resolve_option(cli_value, config, key, default=None):
    if cli_value is not None:
        return cli_value
    if key in config:
        return config[key]
    return default


def _dependencies_epilog() -> str:
    lines = ["\b", "Required commands (paths can be overridden in the config file):"]
    lines.extend(f"  {name:<12}{path}" for name, path in DEPENDENCIES)
    lines.append("")
    lines.append(
        "rmmod and modprobe are only used after driver packages changed, "
        "reboot only when the module cannot be unloaded."
    )
    return "\n".join(lines)


logging.basicConfig(
    level="INFO",
    format="%(message)s",
    datefmt="[%X]",
    handlers=[RichHandler(rich_tracebacks=True, show_level=False, show_path=False)],
)


@click.command(
    context_settings={"help_option_names": ["-h", "--help"]},
    epilog=_dependencies_epilog(),
)
@click.option(
    "--mark-only",
    is_flag=True,
    default=None,
    help="Don't actually update packages. Just re-hold packages.",
)
@click.option("-v", "--verbose", is_flag=True, default=None, help="Show diagnostic output")
@click.option(
    "--config",
    required=False,
    type=click.Path(),
    help=f"Path to a YAML configuration file. Defaults to {DEFAULT_CONFIG_PATH} if present.",
)
@click.option("--log-file", type=click.Path(), help="Path to log file")
def main(mark_only, verbose, config, log_file):
    """Update nVidia driver packages only when the ABI break can be resolved right away.

    Meant to run once during startup: held driver packages are briefly un-held,
    upgraded together with the rest of the system and re-held, then the kernel
    module is reloaded (or the machine rebooted) if anything changed.
    """
    logger = logging.getLogger("nvidiaupdater")

    config_loader = ConfigLoader()
    resolved_config = config
    if resolved_config is None and os.path.exists(DEFAULT_CONFIG_PATH):
        resolved_config = DEFAULT_CONFIG_PATH

    try:
        config_values = config_loader.load(resolved_config)
        settings = config_loader.build_settings(config_values)
    except UpdaterError as exc:
        raise click.ClickException(str(exc)) from exc

    mark_only = bool(_resolve_option(mark_only, config_values, "mark_only", default=False))
    verbose = bool(_resolve_option(verbose, config_values, "verbose", default=False))
    log_file = _resolve_option(log_file, config_values, "log_file")

    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logger.setLevel(logging.DEBUG)
    else:
        logger.setLevel(logging.INFO)

    if log_file:
        file_handler = logging.FileHandler(log_file)
        file_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
        file_handler.setFormatter(logging.Formatter("%(asctime)s [%(levelname)s] %(message)s"))
        logger.addHandler(file_handler)

    updater = NvidiaUpdater(
        settings=settings,
        mark_only=mark_only,
        verbose=verbose,
        config_path=resolved_config,
    )

    raise SystemExit(updater.run())


if __name__ == "__main__":
    main()
