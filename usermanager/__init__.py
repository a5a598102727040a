"""Single-page user management form backed by a remote REST resource."""

from __future__ import annotations

from typing import Any

from .controller import UserListController, UserListState
from .models import FormDraft, Notification, NotificationKind, UserRecord
from .remote import RemoteAPIError, RemoteUserAPI


def create_app(*args: Any, **kwargs: Any):
    """Factory function that returns the FastAPI application."""

    from .service import create_app as _create_app

    return _create_app(*args, **kwargs)


__all__ = [
    "FormDraft",
    "Notification",
    "NotificationKind",
    "RemoteAPIError",
    "RemoteUserAPI",
    "UserListController",
    "UserListState",
    "UserRecord",
    "create_app",
]
