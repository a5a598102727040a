from __future__ import annotations

import asyncio

import pytest

from usermanager.models import Notification, NotificationKind
from usermanager.notifications import NotificationSlot


def test_replacement_cancels_previous_timer() -> None:
    async def scenario():
        slot = NotificationSlot(lifetime=0.2)
        slot.show(Notification.success("first"))
        await asyncio.sleep(0.12)
        second = Notification.error("second")
        slot.show(second)
        await asyncio.sleep(0.12)
        after_first_deadline = slot.current
        await asyncio.sleep(0.2)
        return second, after_first_deadline, slot.current

    second, after_first_deadline, final = asyncio.run(scenario())

    assert after_first_deadline is second
    assert final is None


def test_stale_expiry_does_not_clear_newer_notification() -> None:
    slot = NotificationSlot(lifetime=1.0)
    first = Notification.success("Saved")
    second = Notification.success("Saved")
    slot.show(first)
    slot.show(second)

    slot._expire(first)

    assert slot.current is second
    assert first == second
    assert first.token != second.token


def test_close_cancels_pending_timer() -> None:
    async def scenario():
        slot = NotificationSlot(lifetime=0.05)
        slot.show(Notification.error("boom"))
        timer = slot._timer
        slot.close()
        return timer, slot.current

    timer, current = asyncio.run(scenario())

    assert timer is not None and timer.cancelled()
    assert current is None


def test_show_without_running_loop_keeps_notification() -> None:
    slot = NotificationSlot()
    notification = Notification.success("done")
    slot.show(notification)

    assert slot.current is notification
    assert notification.to_dict() == {"message": "done", "kind": NotificationKind.SUCCESS.value}


def test_lifetime_must_be_positive() -> None:
    with pytest.raises(ValueError):
        NotificationSlot(lifetime=0)
