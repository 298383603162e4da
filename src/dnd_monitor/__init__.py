"""Cross-platform Do Not Disturb / Focus mode detection."""

from dnd_monitor.config import MonitorSettings
from dnd_monitor.monitor import DndEvent, DndMonitor
from dnd_monitor.probes import DndProbe, create_probe

__version__ = "0.1.0"

__all__ = [
    "DndEvent",
    "DndMonitor",
    "DndProbe",
    "MonitorSettings",
    "create_probe",
]
