"""Append-only message storage and group history."""

from __future__ import annotations

from dataclasses import dataclass

from sqlmodel import Session, select

from groupchat.core.exceptions import NotFoundError
from groupchat.models.group import Group
from groupchat.models.message import Message
from groupchat.models.user import User


@dataclass
class MessageService:
    session: Session

    def insert_message(
        self,
        *,
        content: str,
        user_id: int,
        group_id: int,
        is_anonymous: bool,
    ) -> Message:
        """Persist a message; the store assigns `id` and `created_at`."""

        if self.session.get(Group, group_id) is None:
            raise NotFoundError("Group not found")

        message = Message(
            content=content,
            user_id=user_id,
            group_id=group_id,
            is_anonymous=bool(is_anonymous),
        )
        self.session.add(message)
        self.session.commit()
        self.session.refresh(message)
        return message

    def list_messages(self, *, group_id: int) -> list[tuple[Message, User]]:
        """Return a group's history oldest first, joined with each author."""

        stmt = (
            select(Message, User)
            .join(User, User.id == Message.user_id)
            .where(Message.group_id == group_id)
            .order_by(Message.created_at, Message.id)
        )
        return list(self.session.exec(stmt))


__all__ = ["MessageService"]
