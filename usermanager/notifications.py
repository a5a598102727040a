"""Single-slot notification holder with a self-clearing timer."""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

from .models import Notification

logger = logging.getLogger("usermanager.notifications")


class NotificationSlot:
    """Holds at most one :class:`Notification` and expires it after ``lifetime``.

    The expiry callback is bound to the notification it was scheduled for,
    so a timer belonging to a replaced notification can never clear the
    newer one.
    """

    def __init__(self, *, lifetime: float = 1.0) -> None:
        if lifetime <= 0:
            raise ValueError("Notification lifetime must be positive")
        self._lifetime = lifetime
        self._current: Optional[Notification] = None
        self._timer: Optional[asyncio.TimerHandle] = None

    @property
    def lifetime(self) -> float:
        return self._lifetime

    @property
    def current(self) -> Optional[Notification]:
        return self._current

    def show(self, notification: Notification) -> None:
        self._cancel_timer()
        self._current = notification
        try:
            loop = asyncio.get_running_loop()
        except RuntimeError:
            logger.debug("No running event loop; notification will not auto-clear")
            return
        self._timer = loop.call_later(self._lifetime, self._expire, notification)

    def dismiss(self) -> None:
        self._cancel_timer()
        self._current = None

    def close(self) -> None:
        self.dismiss()

    def _expire(self, notification: Notification) -> None:
        if self._current is notification:
            self._current = None
            self._timer = None

    def _cancel_timer(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None


__all__ = ["NotificationSlot"]
