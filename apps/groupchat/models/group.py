"""Chat groups and their approval-gated membership list."""

from __future__ import annotations

from enum import Enum

from sqlalchemy import Column, ForeignKey, Index, Integer, String
from sqlmodel import Field

from groupchat.models.base import Model


class MembershipStatus(str, Enum):
    pending = "pending"
    approved = "approved"


class Group(Model, table=True):
    """A named chat room owned by its creator."""

    __tablename__ = "groups"
    __table_args__ = (Index("ix_groups_creator_id", "creator_id"),)

    name: str = Field(sa_column=Column(String(255), nullable=False))
    creator_id: int = Field(sa_column=Column(Integer, ForeignKey("users.id"), nullable=False))


class GroupMember(Model, table=True):
    """Persisted membership of a user in a group (distinct from live association)."""

    __tablename__ = "group_members"
    __table_args__ = (
        Index("ix_group_members_group_user", "group_id", "user_id", unique=True),
        Index("ix_group_members_status", "group_id", "status"),
    )

    group_id: int = Field(sa_column=Column(Integer, ForeignKey("groups.id"), nullable=False))
    user_id: int = Field(sa_column=Column(Integer, ForeignKey("users.id"), nullable=False))
    status: str = Field(
        default=MembershipStatus.pending.value,
        sa_column=Column(String(16), nullable=False),
    )


__all__ = ["Group", "GroupMember", "MembershipStatus"]
