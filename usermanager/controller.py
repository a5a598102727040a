"""View-state controller reconciling the local user list with the remote API."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .models import FormDraft, Notification, UserRecord
from .notifications import NotificationSlot
from .remote import RemoteAPIError, RemoteUserAPI

logger = logging.getLogger("usermanager.controller")

DEFAULT_PLACEHOLDER_BIRTHDATE = "2001-01-01"

FETCH_FAILED = "Failed to fetch users. Please try again."
SAVE_FAILED = "Failed to save user. Please try again."
DELETE_FAILED = "Failed to delete user. Please try again."
USER_ADDED = "User added successfully (simulated)"
USER_UPDATED = "User updated successfully (simulated)"
USER_DELETED = "User deleted successfully (simulated)"


@dataclass
class UserListState:
    """Everything the form and table render from."""

    users: List[UserRecord] = field(default_factory=list)
    draft: FormDraft = field(default_factory=FormDraft)
    editing: Optional[UserRecord] = None

    @property
    def is_editing(self) -> bool:
        return self.editing is not None

    def find(self, user_id: int) -> Optional[UserRecord]:
        for user in self.users:
            if user.id == user_id:
                return user
        return None


class UserListController:
    """Own the user list, form draft, editing target and notification slot.

    Lists are only mutated after the remote API acknowledges a request.
    Failures are logged and reported through a single error notification.
    """

    def __init__(
        self,
        api: RemoteUserAPI,
        *,
        placeholder_birthdate: str = DEFAULT_PLACEHOLDER_BIRTHDATE,
        notification_lifetime: float = 1.0,
    ) -> None:
        self._api = api
        self._placeholder_birthdate = placeholder_birthdate
        self._notifications = NotificationSlot(lifetime=notification_lifetime)
        self.state = UserListState()

    @property
    def users(self) -> List[UserRecord]:
        return list(self.state.users)

    @property
    def draft(self) -> FormDraft:
        return self.state.draft

    @property
    def editing(self) -> Optional[UserRecord]:
        return self.state.editing

    @property
    def notification(self) -> Optional[Notification]:
        return self._notifications.current

    async def initialize(self) -> None:
        try:
            payload = await self._api.list_users()
            users = [
                UserRecord.from_api(item, date_of_birth=self._placeholder_birthdate)
                for item in payload
            ]
        except (RemoteAPIError, ValueError) as exc:
            logger.error("Error fetching users: %s", exc)
            self._notify(Notification.error(FETCH_FAILED))
            return

        self.state.users = users
        logger.info("Loaded %d user(s) from %s", len(users), self._api.base_url)

    def update_draft(
        self,
        *,
        name: Optional[str] = None,
        email: Optional[str] = None,
        date_of_birth: Optional[str] = None,
    ) -> FormDraft:
        draft = self.state.draft
        if name is not None:
            draft.name = name
        if email is not None:
            draft.email = email
        if date_of_birth is not None:
            draft.date_of_birth = date_of_birth
        return draft

    async def submit(self) -> bool:
        """Create or update depending on whether a record is being edited."""
        target = self.state.editing
        draft = FormDraft(
            name=self.state.draft.name,
            email=self.state.draft.email,
            date_of_birth=self.state.draft.date_of_birth,
        )
        try:
            if target is not None:
                await self._update(target, draft)
            else:
                await self._create(draft)
        except (RemoteAPIError, ValueError) as exc:
            logger.error("Error saving user: %s", exc)
            self._notify(Notification.error(SAVE_FAILED))
            return False

        self.state.draft = FormDraft()
        self.state.editing = None
        return True

    async def _create(self, draft: FormDraft) -> None:
        response = await self._api.create_user(draft.to_payload())
        record = UserRecord.from_api(response, date_of_birth=draft.date_of_birth)
        if self.state.find(record.id) is not None:
            replacement = max(user.id for user in self.state.users) + 1
            logger.warning(
                "User API assigned id %s which is already listed; using %s instead",
                record.id,
                replacement,
            )
            record = record.with_id(replacement)
        self.state.users = [*self.state.users, record]
        logger.info("Added user %s (%s)", record.id, record.email)
        self._notify(Notification.success(USER_ADDED))

    async def _update(self, target: UserRecord, draft: FormDraft) -> None:
        response = await self._api.update_user(target.id, draft.to_payload())
        record = UserRecord.from_api(
            response, date_of_birth=draft.date_of_birth, id_override=target.id
        )
        self.state.users = [
            record if user.id == target.id else user for user in self.state.users
        ]
        logger.info("Updated user %s", target.id)
        self._notify(Notification.success(USER_UPDATED))

    def request_edit(self, user_id: int) -> UserRecord:
        record = self.state.find(user_id)
        if record is None:
            raise KeyError(f"Unknown user id {user_id}")
        self.state.editing = record
        self.state.draft = FormDraft.from_record(record)
        return record

    def cancel_edit(self) -> None:
        self.state.editing = None
        self.state.draft = FormDraft()

    async def delete(self, user_id: int) -> bool:
        try:
            await self._api.delete_user(user_id)
        except RemoteAPIError as exc:
            logger.error("Error deleting user %s: %s", user_id, exc)
            self._notify(Notification.error(DELETE_FAILED))
            return False

        self.state.users = [user for user in self.state.users if user.id != user_id]
        editing = self.state.editing
        if editing is not None and editing.id == user_id:
            self.cancel_edit()
        logger.info("Deleted user %s", user_id)
        self._notify(Notification.success(USER_DELETED))
        return True

    def dismiss_notification(self) -> None:
        self._notifications.dismiss()

    async def close(self) -> None:
        self._notifications.close()
        await self._api.aclose()

    def _notify(self, notification: Notification) -> None:
        self._notifications.show(notification)


__all__ = [
    "DEFAULT_PLACEHOLDER_BIRTHDATE",
    "DELETE_FAILED",
    "FETCH_FAILED",
    "SAVE_FAILED",
    "USER_ADDED",
    "USER_DELETED",
    "USER_UPDATED",
    "UserListController",
    "UserListState",
]
