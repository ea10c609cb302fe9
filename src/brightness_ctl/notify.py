from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass

from dbus_next import Variant
from dbus_next.aio import MessageBus

from brightness_ctl.config import DEFAULT_ICON

BUS = "org.freedesktop.Notifications"
OBJ = "/org/freedesktop/Notifications"

# Fixed id so each invocation replaces the previous popup instead of stacking.
NOTIFICATION_ID = 0x49ADFF09

log = logging.getLogger(__name__)

Notify = Callable[[float], bool]


def summary(percentage: float) -> str:
    return f"Screen brightness: {percentage:.0f}%"


def hints(percentage: float) -> dict[str, Variant]:
    # "value" is the progress bar hint understood by most notification daemons.
    return {"value": Variant("i", int(round(percentage)))}


@dataclass(frozen=True)
class DesktopNotifier:
    """Show the brightness on the session bus notification service."""

    icon: str = DEFAULT_ICON
    timeout_ms: int = -1
    app_name: str = "brightness-ctl"
    connect_timeout: float = 5.0

    def __call__(self, percentage: float) -> bool:
        try:
            asyncio.run(asyncio.wait_for(self._send(percentage), self.connect_timeout))
        except Exception as e:
            # Bus, introspection and daemon errors alike.
            log.error("Failed to show notification: %s", e)
            return False
        return True

    async def _send(self, percentage: float) -> None:
        bus = await MessageBus().connect()
        try:
            introspection = await bus.introspect(BUS, OBJ)
            obj = bus.get_proxy_object(BUS, OBJ, introspection)
            iface = obj.get_interface(BUS)
            await iface.call_notify(
                self.app_name,
                NOTIFICATION_ID,
                self.icon,
                summary(percentage),
                "",
                [],
                hints(percentage),
                self.timeout_ms,
            )
        finally:
            bus.disconnect()


def disabled(percentage: float) -> bool:
    log.debug("Notifications disabled, not showing %.0f%%", percentage)
    return True
