"""Common probe interface and helpers for native DND queries."""

import asyncio
import logging
import re
import subprocess

logger = logging.getLogger(__name__)

# Default upper bound for a single native query, in seconds
DEFAULT_QUERY_TIMEOUT = 5.0

_NON_ALNUM = re.compile(r"[^0-9a-zA-Z]")


class DndProbe:
    """Answers "is Do Not Disturb active right now?" for one platform.

    Subclasses implement ``_query``. Any exception it raises is treated as
    "not active", so callers of ``is_dnd_active`` only ever see a bool.
    """

    def __init__(self, query_timeout: float = DEFAULT_QUERY_TIMEOUT):
        self.query_timeout = query_timeout

    async def is_dnd_active(self) -> bool:
        """Query the platform and return whether DND is active."""
        try:
            return bool(await self._query())
        except Exception:
            return False

    async def _query(self) -> bool:
        raise NotImplementedError

    async def close(self) -> None:
        """Release any resources held by the probe."""


class NullProbe(DndProbe):
    """Probe for platforms without DND detection."""

    async def _query(self) -> bool:
        return False


def normalize_output(output: str) -> str:
    """Strip everything but ASCII letters and digits (quotes, newlines)."""
    return _NON_ALNUM.sub("", output)


async def run_command(*args: str, timeout: float = DEFAULT_QUERY_TIMEOUT) -> str:
    """Run a command and return its stdout.

    Args:
        *args: Program and arguments (no shell)
        timeout: Seconds to wait before killing the process

    Returns:
        Decoded stdout.

    Raises:
        subprocess.CalledProcessError: Non-zero exit status
        asyncio.TimeoutError: The command did not finish in time
        OSError: The program could not be started
    """
    proc = await asyncio.create_subprocess_exec(
        *args,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
    )
    try:
        stdout, stderr = await asyncio.wait_for(proc.communicate(), timeout=timeout)
    except asyncio.TimeoutError:
        proc.kill()
        await proc.wait()
        raise

    if proc.returncode != 0:
        raise subprocess.CalledProcessError(proc.returncode, args, stdout, stderr)

    return stdout.decode("utf-8", errors="replace")
