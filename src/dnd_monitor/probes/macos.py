"""macOS Focus mode detection via the Control Center preferences."""

from dnd_monitor.probes.base import DndProbe, normalize_output, run_command

FOCUS_MODES_DOMAIN = "com.apple.controlcenter"
FOCUS_MODES_KEY = "NSStatusItem Visible FocusModes"


class MacProbe(DndProbe):
    """Reports DND while the Focus menu bar item is visible."""

    async def _query(self) -> bool:
        stdout = await run_command(
            "defaults", "read", FOCUS_MODES_DOMAIN, FOCUS_MODES_KEY,
            timeout=self.query_timeout,
        )
        return normalize_output(stdout) == "1"
