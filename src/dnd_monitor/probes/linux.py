"""Linux DND detection, one strategy per desktop environment.

Each desktop keeps its own notification-suppression switch:
- KDE Plasma and XFCE expose it on the session bus
- GNOME, Unity, Cinnamon and MATE keep it in GSettings
- LXQt only writes it to a dotfile
"""

import asyncio
import logging
from typing import Any, Awaitable, Callable

from dbus_next import BusType, Message, MessageType
from dbus_next.aio import MessageBus
from dbus_next.errors import DBusError

from dnd_monitor.config_probe import read_bool_flag
from dnd_monitor.desktop import resolve_desktop_environment
from dnd_monitor.probes.base import (
    DEFAULT_QUERY_TIMEOUT,
    DndProbe,
    normalize_output,
    run_command,
)

logger = logging.getLogger(__name__)

LXQT_NOTIFICATIONS_CONF = "~/.config/lxqt/notifications.conf"

BusFactory = Callable[[], Awaitable[Any]]


async def connect_session_bus() -> MessageBus:
    """Connect to the user's session bus."""
    return await MessageBus(bus_type=BusType.SESSION).connect()


class LinuxProbe(DndProbe):
    """Detects DND on the current desktop environment.

    The strategy is chosen once at construction from the desktop
    identifier; the first matching entry in ``_STRATEGIES`` wins.
    """

    # (substrings, method name), in precedence order
    _STRATEGIES: tuple[tuple[tuple[str, ...], str], ...] = (
        (("kde",), "_query_kde"),
        (("xfce",), "_query_xfce"),
        (("gnome", "unity"), "_query_gnome"),
        (("cinnamon",), "_query_cinnamon"),
        (("mate",), "_query_mate"),
        (("lxqt",), "_query_lxqt"),
    )

    def __init__(
        self,
        desktop: str | None = None,
        bus_factory: BusFactory | None = None,
        query_timeout: float = DEFAULT_QUERY_TIMEOUT,
    ):
        """Initialize the probe.

        Args:
            desktop: Desktop identifier (default: resolved from the environment)
            bus_factory: Coroutine function returning a connected session bus
            query_timeout: Seconds allowed per native query
        """
        super().__init__(query_timeout=query_timeout)
        self.desktop = desktop or resolve_desktop_environment()
        self._bus_factory = bus_factory or connect_session_bus
        self._bus: Any = None
        self._unsupported_logged = False
        self._strategy: Callable[[], Awaitable[bool]] = self._select_strategy()

    def _select_strategy(self) -> Callable[[], Awaitable[bool]]:
        de = self.desktop.lower()
        for substrings, method_name in self._STRATEGIES:
            if any(s in de for s in substrings):
                return getattr(self, method_name)
        return self._query_unsupported

    async def _query(self) -> bool:
        return await self._strategy()

    # Session bus strategies

    async def _query_kde(self) -> bool:
        inhibited = await self._bus_call(
            destination="org.freedesktop.Notifications",
            path="/org/freedesktop/Notifications",
            interface="org.freedesktop.DBus.Properties",
            member="Get",
            signature="ss",
            body=["org.freedesktop.Notifications", "Inhibited"],
        )
        return inhibited is True

    async def _query_xfce(self) -> bool:
        dnd = await self._bus_call(
            destination="org.xfce.Xfconf",
            path="/org/xfce/Xfconf",
            interface="org.xfce.Xfconf",
            member="GetProperty",
            signature="ss",
            body=["xfce4-notifyd", "/do-not-disturb"],
        )
        return dnd is True

    # GSettings strategies

    async def _query_gnome(self) -> bool:
        # Banners hidden means DND
        value = await self._gsettings_get("org.gnome.desktop.notifications", "show-banners")
        return value == "false"

    async def _query_cinnamon(self) -> bool:
        value = await self._gsettings_get(
            "org.cinnamon.desktop.notifications", "display-notifications"
        )
        return value == "false"

    async def _query_mate(self) -> bool:
        value = await self._gsettings_get("org.mate.NotificationDaemon", "do-not-disturb")
        return value == "true"

    # Dotfile strategy

    async def _query_lxqt(self) -> bool:
        return await read_bool_flag(LXQT_NOTIFICATIONS_CONF, "doNotDisturb")

    async def _query_unsupported(self) -> bool:
        if not self._unsupported_logged:
            logger.info(f"{self.desktop} not supported for DND detection, yet.")
            self._unsupported_logged = True
        return False

    async def _gsettings_get(self, schema: str, key: str) -> str:
        stdout = await run_command("gsettings", "get", schema, key, timeout=self.query_timeout)
        return normalize_output(stdout)

    async def _bus_call(
        self,
        destination: str,
        path: str,
        interface: str,
        member: str,
        signature: str,
        body: list[Any],
    ) -> Any:
        """Call a session bus method and return the unwrapped first reply value."""
        try:
            if self._bus is None:
                self._bus = await asyncio.wait_for(self._bus_factory(), timeout=self.query_timeout)

            reply = await asyncio.wait_for(
                self._bus.call(
                    Message(
                        destination=destination,
                        path=path,
                        interface=interface,
                        member=member,
                        signature=signature,
                        body=body,
                    )
                ),
                timeout=self.query_timeout,
            )
        except Exception:
            # Reconnect on the next tick
            self._drop_bus()
            raise

        if reply.message_type == MessageType.ERROR:
            text = reply.body[0] if reply.body else ""
            raise DBusError(reply.error_name, text, reply)

        result = reply.body[0]
        # Properties.Get and Xfconf.GetProperty both return a variant
        return getattr(result, "value", result)

    def _drop_bus(self) -> None:
        if self._bus is not None:
            try:
                self._bus.disconnect()
            except Exception:
                pass
            self._bus = None

    async def close(self) -> None:
        self._drop_bus()
