"""User accounts."""

from __future__ import annotations

import sqlalchemy as sa
from sqlmodel import Field

from groupchat.models.base import Model


class User(Model, table=True):
    """Registered chat user."""

    __tablename__ = "users"
    __table_args__ = (sa.Index("ix_users_username", "username", unique=True),)

    username: str = Field(sa_column=sa.Column(sa.String(length=255), nullable=False))
    password_hash: str = Field(sa_column=sa.Column(sa.String(length=255), nullable=False))
    profile_picture_url: str | None = Field(
        default=None, sa_column=sa.Column(sa.String(length=512), nullable=True)
    )


__all__ = ["User"]
