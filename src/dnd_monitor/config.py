"""Monitor settings management."""

import logging
from pathlib import Path
from typing import Any

import yaml

logger = logging.getLogger(__name__)

DEFAULTS: dict[str, Any] = {
    "monitorDnd": True,
    "queryTimeout": 5.0,
}


class MonitorSettings:
    """Settings consumed by the DND monitor.

    Exposes ``get(key)`` so an application's own settings store can be
    passed to the monitor in its place.
    """

    def __init__(self, values: dict[str, Any] | None = None):
        self._values = dict(DEFAULTS)
        if values:
            self._values.update(values)

    def get(self, key: str, default: Any = None) -> Any:
        return self._values.get(key, default)

    def set(self, key: str, value: Any) -> None:
        self._values[key] = value

    @classmethod
    def load(cls, config_path: Path | None = None) -> "MonitorSettings":
        """Load settings from file or use defaults."""
        if config_path is None:
            config_path = cls.get_default_config_path()

        if config_path.exists():
            try:
                with open(config_path, encoding="utf-8") as f:
                    data = yaml.safe_load(f) or {}
                if not isinstance(data, dict):
                    raise ValueError(f"expected a mapping, got {type(data).__name__}")
                logger.info(f"Loaded settings from {config_path}")
                return cls(data)
            except Exception as e:
                logger.warning(f"Failed to load settings from {config_path}: {e}")

        logger.info("Using default settings (no settings file found)")
        return cls()

    @staticmethod
    def get_default_config_path() -> Path:
        """Get default settings file path for the platform."""
        import platform

        if platform.system() == "Windows":
            # Windows: %USERPROFILE%\.dnd-monitor\settings.yaml
            return Path.home() / ".dnd-monitor" / "settings.yaml"
        else:
            # Linux/Mac: ~/.config/dnd-monitor/settings.yaml
            from os import environ

            config_dir = Path(environ.get("XDG_CONFIG_HOME") or Path.home() / ".config")
            return config_dir / "dnd-monitor" / "settings.yaml"

    def save(self, config_path: Path | None = None) -> None:
        """Save settings to file."""
        if config_path is None:
            config_path = self.get_default_config_path()

        config_path.parent.mkdir(parents=True, exist_ok=True)

        with open(config_path, "w", encoding="utf-8") as f:
            yaml.safe_dump(self._values, f)

        logger.info(f"Saved settings to {config_path}")
