"""Focus Assist / quiet hours detection for Windows.

Two independent signals are exposed:
- Focus Assist profile, read from the CloudStore registry blob
- Quiet hours, from the shell's user notification state

Both readers are synchronous and only work on Windows.
"""

import logging
import sys
from enum import Enum

logger = logging.getLogger(__name__)

# Focus Assist settings are stored in this registry path
FOCUS_ASSIST_KEY_PATH = (
    r"SOFTWARE\Microsoft\Windows\CurrentVersion\CloudStore\Store"
    r"\DefaultAccount\Current\default$windows.immersive.quiethours\Data"
)

# Byte in the Data blob holding the profile
_PROFILE_OFFSET = 15

# QUERY_USER_NOTIFICATION_STATE value reported while quiet hours are on
QUNS_QUIET_TIME = 6


class FocusAssistUnavailable(OSError):
    """Focus Assist cannot be queried on this platform."""


class FocusAssistProfile(Enum):
    """Windows Focus Assist profiles."""

    UNSUPPORTED = -1  # Could not determine the profile
    OFF = 0  # All notifications shown normally
    PRIORITY_ONLY = 1  # Only priority notifications
    ALARMS_ONLY = 2  # Only alarms (most restrictive)


def get_focus_assist_profile() -> FocusAssistProfile:
    """Get the current Focus Assist profile from the registry.

    Returns:
        The active profile. A missing registry key means OFF; an
        unrecognised blob gives UNSUPPORTED.

    Raises:
        FocusAssistUnavailable: Not running on Windows.
    """
    try:
        import winreg  # type: ignore[import-not-found]
    except ImportError as e:
        raise FocusAssistUnavailable("winreg not available (non-Windows platform)") from e

    try:
        key = winreg.OpenKey(  # type: ignore[attr-defined]
            winreg.HKEY_CURRENT_USER,  # type: ignore[attr-defined]
            FOCUS_ASSIST_KEY_PATH,
            0,
            winreg.KEY_READ,  # type: ignore[attr-defined]
        )
    except FileNotFoundError:
        # Key doesn't exist, Focus Assist was never turned on
        return FocusAssistProfile.OFF

    try:
        value, _ = winreg.QueryValueEx(key, "Data")  # type: ignore[attr-defined]
    finally:
        winreg.CloseKey(key)  # type: ignore[attr-defined]

    if len(value) > _PROFILE_OFFSET:
        try:
            return FocusAssistProfile(value[_PROFILE_OFFSET])
        except ValueError:
            logger.debug(f"Unknown Focus Assist profile byte: {value[_PROFILE_OFFSET]}")

    return FocusAssistProfile.UNSUPPORTED


def is_quiet_hours() -> bool:
    """Check whether Windows reports quiet hours for the current user.

    Returns:
        True if SHQueryUserNotificationState reports QUNS_QUIET_TIME.

    Raises:
        FocusAssistUnavailable: Not running on Windows.
        OSError: The shell query failed.
    """
    if sys.platform != "win32":
        raise FocusAssistUnavailable("SHQueryUserNotificationState requires Windows")

    import ctypes
    import ctypes.wintypes

    state = ctypes.wintypes.INT()
    hresult = ctypes.windll.shell32.SHQueryUserNotificationState(ctypes.byref(state))
    if hresult != 0:
        raise OSError(f"SHQueryUserNotificationState failed: HRESULT {hresult & 0xFFFFFFFF:#010x}")

    return state.value == QUNS_QUIET_TIME
