"""SQLModel base classes and mixins for ORM models."""

from __future__ import annotations

from datetime import datetime

from sqlalchemy import DateTime
from sqlmodel import Field, SQLModel

from groupchat.core.utils import utcnow


class TimestampMixin(SQLModel):
    """Adds created/updated timestamps (app-managed, timezone-aware UTC)."""

    created_at: datetime | None = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))
    updated_at: datetime | None = Field(default_factory=utcnow, sa_type=DateTime(timezone=True))


class Model(TimestampMixin, SQLModel):
    """Opinionated base with `id`/timestamps for SQLModel tables.

    Inherit this along with `table=True` on concrete models.
    """

    id: int | None = Field(default=None, primary_key=True)
