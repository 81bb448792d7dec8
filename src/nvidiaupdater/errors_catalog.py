"""Actionable error catalog for nvidiaupdater."""

from typing import Dict

_ERROR_MESSAGES: Dict[str, Dict[str, str]] = {
    "command_not_found": {
        "what": "A required command could not be started.",
        "next": "Check the command paths in `{config}` and that the tool runs as root.",
    },
    "unhold_failed": {
        "what": "Driver packages could not be un-held. Nothing was upgraded.",
        "next": "Run `apt-mark showhold` to inspect the current holds and retry.",
    },
    "query_failed": {
        "what": "Installed packages matching `{pattern}` could not be listed.",
        "next": "Run `dpkg-query --list '{pattern}'` manually and fix the reported problem.",
    },
    "refresh_failed": {
        "what": "The package index could not be refreshed. No package was un-held.",
        "next": "Check network access and `apt-get update` output, then rerun.",
    },
    "upgrade_failed": {
        "what": "The update cycle failed. Driver packages were re-held.",
        "next": "Inspect the apt output above, fix the cause and rerun before the next boot.",
    },
    "reload_failed": {
        "what": "The `{module}` kernel module could not be reloaded.",
        "next": "Reboot the machine to load the upgraded driver.",
    },
    "release_failed": {
        "what": "Packages could not be re-held: {names}",
        "next": "Run `apt-mark hold {names}` before any other upgrade.",
    },
}


def actionable_error(code: str, **kwargs: str) -> str:
    if code not in _ERROR_MESSAGES:
        raise KeyError(f"Unknown error catalog key: {code}")

    template = _ERROR_MESSAGES[code]
    what = template["what"].format(**kwargs)
    next_step = template["next"].format(**kwargs)
    return f"{what} Suggested action: {next_step}"
