"""Domain models for the user management form."""

from __future__ import annotations

import itertools
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Mapping, Optional

_CORE_FIELDS = {"id", "name", "email", "dateOfBirth"}

_notification_ids = itertools.count(1)


@dataclass(frozen=True)
class UserRecord:
    """A user row held in the local list.

    ``date_of_birth`` never comes back from the remote API for existing
    records, so it is always supplied locally. Any other fields returned by
    the API are kept in ``extra`` and re-emitted by :meth:`to_dict`.
    """

    id: int
    name: str
    email: str
    date_of_birth: str = ""
    extra: Dict[str, object] = field(default_factory=dict, compare=False)

    @staticmethod
    def from_api(
        data: Mapping[str, object],
        *,
        date_of_birth: str,
        id_override: Optional[int] = None,
    ) -> "UserRecord":
        """Build a record from a remote payload, stamping the local birthdate."""
        raw_id = id_override if id_override is not None else data.get("id")
        if raw_id is None:
            raise ValueError("User payload is missing an 'id' field")
        try:
            user_id = int(raw_id)  # type: ignore[arg-type]
        except (TypeError, ValueError) as exc:
            raise ValueError(f"Invalid user id {raw_id!r}") from exc

        extra = {key: value for key, value in data.items() if key not in _CORE_FIELDS}
        return UserRecord(
            id=user_id,
            name=str(data.get("name") or ""),
            email=str(data.get("email") or ""),
            date_of_birth=date_of_birth,
            extra=extra,
        )

    def with_id(self, user_id: int) -> "UserRecord":
        return replace(self, id=user_id)

    def to_dict(self) -> Dict[str, object]:
        payload: Dict[str, object] = dict(self.extra)
        payload.update(
            {
                "id": self.id,
                "name": self.name,
                "email": self.email,
                "dateOfBirth": self.date_of_birth,
            }
        )
        return payload


@dataclass
class FormDraft:
    """Field values bound to the form inputs before submission."""

    name: str = ""
    email: str = ""
    date_of_birth: str = ""

    @staticmethod
    def from_record(record: UserRecord) -> "FormDraft":
        return FormDraft(
            name=record.name,
            email=record.email,
            date_of_birth=record.date_of_birth or "",
        )

    def is_empty(self) -> bool:
        return not (self.name or self.email or self.date_of_birth)

    def to_payload(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "email": self.email,
            "dateOfBirth": self.date_of_birth,
        }


class NotificationKind(str, Enum):
    """Visual category of a notification banner."""

    SUCCESS = "success"
    ERROR = "error"


@dataclass(frozen=True)
class Notification:
    """A transient banner message.

    Every instance receives its own ``token`` so two notifications with the
    same text remain distinguishable.
    """

    message: str
    kind: NotificationKind
    token: int = field(default_factory=lambda: next(_notification_ids), compare=False)

    @classmethod
    def success(cls, message: str) -> "Notification":
        return cls(message=message, kind=NotificationKind.SUCCESS)

    @classmethod
    def error(cls, message: str) -> "Notification":
        return cls(message=message, kind=NotificationKind.ERROR)

    def to_dict(self) -> Dict[str, str]:
        return {"message": self.message, "kind": self.kind.value}


__all__ = ["FormDraft", "Notification", "NotificationKind", "UserRecord"]
