"""Persisted chat messages."""

from __future__ import annotations

from sqlalchemy import Boolean, Column, ForeignKey, Index, Integer, Text
from sqlmodel import Field

from groupchat.models.base import Model


class Message(Model, table=True):
    """Append-only chat message; `id` and `created_at` give the authoritative order.

    `user_id` carries no foreign key: a message from an unknown sender is still
    stored (and then never broadcast) on every backend, whether or not it
    enforces foreign keys.
    """

    __tablename__ = "messages"
    __table_args__ = (
        Index("ix_messages_group_created", "group_id", "created_at"),
        Index("ix_messages_user_id", "user_id"),
    )

    content: str = Field(sa_column=Column(Text, nullable=False))
    user_id: int = Field(sa_column=Column(Integer, nullable=False))
    group_id: int = Field(sa_column=Column(Integer, ForeignKey("groups.id"), nullable=False))
    is_anonymous: bool = Field(default=False, sa_column=Column(Boolean, nullable=False))


__all__ = ["Message"]
