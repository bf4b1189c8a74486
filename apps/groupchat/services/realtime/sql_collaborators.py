"""Database-backed store and directory for the message broadcaster.

Each call opens its own short-lived session; calls run on threadpool workers
and sessions are not shared between threads.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from sqlmodel import Session

from groupchat.core.utils import as_utc, utcnow
from groupchat.schemas.message import Identifier
from groupchat.services.message_service import MessageService
from groupchat.services.realtime.broadcaster import MessageReceipt
from groupchat.services.user_service import UserService

SessionFactory = Callable[[], Session]


def _as_int(value: Identifier, *, field: str) -> int:
    try:
        return int(value)
    except (TypeError, ValueError) as exc:
        raise ValueError(f"{field} must be an integer id, got {value!r}") from exc


@dataclass
class SqlMessageStore:
    session_factory: SessionFactory

    def insert_message(
        self,
        *,
        content: str,
        user_id: Identifier,
        group_id: Identifier,
        is_anonymous: bool,
    ) -> MessageReceipt:
        with self.session_factory() as session:
            row = MessageService(session).insert_message(
                content=content,
                user_id=_as_int(user_id, field="userId"),
                group_id=_as_int(group_id, field="groupId"),
                is_anonymous=is_anonymous,
            )
            timestamp = as_utc(row.created_at) if row.created_at else utcnow()
            return MessageReceipt(id=row.id or 0, timestamp=timestamp)


@dataclass
class SqlUserDirectory:
    session_factory: SessionFactory

    def find_username_by_id(self, user_id: Identifier) -> str | None:
        try:
            key = _as_int(user_id, field="userId")
        except ValueError:
            return None
        with self.session_factory() as session:
            return UserService(session).find_username_by_id(key)


__all__ = ["SqlMessageStore", "SqlUserDirectory"]
