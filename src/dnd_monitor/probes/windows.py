"""Windows DND detection from Focus Assist and quiet hours."""

import asyncio

from dnd_monitor.focus_assist import (
    FocusAssistProfile,
    get_focus_assist_profile,
    is_quiet_hours,
)
from dnd_monitor.probes.base import DndProbe


def _read_profile() -> FocusAssistProfile:
    try:
        return get_focus_assist_profile()
    except Exception:
        # Also covers FocusAssistUnavailable off Windows
        return FocusAssistProfile.UNSUPPORTED


def _read_quiet_hours() -> bool:
    try:
        return is_quiet_hours()
    except Exception:
        return False


class WindowsProbe(DndProbe):
    """Reports DND during quiet hours or while any Focus Assist profile is on."""

    async def _query(self) -> bool:
        if await asyncio.to_thread(_read_quiet_hours):
            return True

        profile = await asyncio.to_thread(_read_profile)
        return profile not in (FocusAssistProfile.UNSUPPORTED, FocusAssistProfile.OFF)
