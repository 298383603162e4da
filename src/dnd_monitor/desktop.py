"""Desktop environment detection for Linux sessions."""

import os
from collections.abc import Mapping

UNKNOWN_DESKTOP = "unknown"

# ORIGINAL_XDG_CURRENT_DESKTOP is set by launchers (Electron, snap wrappers)
# that overwrite XDG_CURRENT_DESKTOP for the child process.
_DESKTOP_ENV_VARS = ("ORIGINAL_XDG_CURRENT_DESKTOP", "XDG_CURRENT_DESKTOP")


def resolve_desktop_environment(environ: Mapping[str, str] | None = None) -> str:
    """Return the desktop environment identifier for this session.

    The value is returned as found (e.g. "GNOME:KDE", "ubuntu:GNOME");
    callers lowercase it when matching.

    Args:
        environ: Environment mapping to inspect (default: os.environ)

    Returns:
        The first non-empty candidate variable, or "unknown".
    """
    if environ is None:
        environ = os.environ

    for name in _DESKTOP_ENV_VARS:
        value = environ.get(name)
        if value:
            return value

    return UNKNOWN_DESKTOP
