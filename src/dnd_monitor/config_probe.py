"""Boolean flag lookup in simple key=value dotfiles."""

import asyncio
from pathlib import Path


def _read_text(path: Path) -> str:
    return path.read_text(encoding="utf-8")


async def read_bool_flag(path: Path | str, key: str) -> bool:
    """Read a boolean flag from a ``key=value`` config file.

    The first line whose key matches decides the result. Section headers and
    other lines without a matching key are ignored.

    Args:
        path: Config file path; ``~`` is expanded
        key: Key to look up

    Returns:
        True only if the key is present and its value is "true"
        (case-insensitive). Missing or unreadable files give False.
    """
    try:
        data = await asyncio.to_thread(_read_text, Path(path).expanduser())
    except (OSError, UnicodeDecodeError):
        return False

    for line in data.splitlines():
        config_key, _, value = line.partition("=")
        if config_key.strip() == key:
            return value.strip().lower() == "true"

    return False
