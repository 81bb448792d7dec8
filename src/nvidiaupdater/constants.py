"""Default paths and tunables for nvidiaupdater.

Command paths are absolute so that a tool running as ``root`` never resolves
them through ``PATH``.
"""

APT_GET_PATH = "/usr/bin/apt-get"
APT_MARK_PATH = "/usr/bin/apt-mark"
DPKG_QUERY_PATH = "/usr/bin/dpkg-query"
REBOOT_PATH = "/sbin/reboot"
RMMOD_PATH = "/sbin/rmmod"
MODPROBE_PATH = "/sbin/modprobe"

PACKAGE_PATTERN = "*nvidia*"
KERNEL_MODULE = "nvidia"

# Rewritten by every successful `apt-get update`.
INDEX_MARKER_PATH = "/var/cache/apt/pkgcache.bin"
INDEX_MAX_AGE_SECONDS = 48 * 60 * 60

# dpkg status codes: installed, installed and held.
INSTALLED_STATUS_CODES = ("ii", "hi")

DEFAULT_CONFIG_PATH = "/etc/update-nvidia.yml"

DEPENDENCIES = (
    ("apt-get", APT_GET_PATH),
    ("apt-mark", APT_MARK_PATH),
    ("dpkg-query", DPKG_QUERY_PATH),
    ("rmmod", RMMOD_PATH),
    ("modprobe", MODPROBE_PATH),
    ("reboot", REBOOT_PATH),
)
