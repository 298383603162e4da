"""Per-platform Do Not Disturb probes."""

import logging
import sys

from dnd_monitor.probes.base import DEFAULT_QUERY_TIMEOUT, DndProbe, NullProbe

logger = logging.getLogger(__name__)


def create_probe(
    platform: str | None = None,
    query_timeout: float = DEFAULT_QUERY_TIMEOUT,
) -> DndProbe:
    """Create the appropriate probe for the current platform.

    Args:
        platform: sys.platform style identifier (default: this interpreter's)
        query_timeout: Seconds allowed per native query
    """
    platform = platform or sys.platform

    if platform == "win32":
        from dnd_monitor.probes.windows import WindowsProbe

        return WindowsProbe(query_timeout=query_timeout)
    if platform == "darwin":
        from dnd_monitor.probes.macos import MacProbe

        return MacProbe(query_timeout=query_timeout)
    if platform.startswith("linux"):
        from dnd_monitor.probes.linux import LinuxProbe

        return LinuxProbe(query_timeout=query_timeout)

    logger.warning(f"DND detection not available on {platform}")
    return NullProbe(query_timeout=query_timeout)


__all__ = ["DEFAULT_QUERY_TIMEOUT", "DndProbe", "NullProbe", "create_probe"]
