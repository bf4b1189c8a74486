"""Convenient exports for the ORM models (SQLModel)."""

from groupchat.models.base import Model, TimestampMixin
from groupchat.models.group import Group, GroupMember, MembershipStatus
from groupchat.models.message import Message
from groupchat.models.user import User

__all__ = [
    "Group",
    "GroupMember",
    "MembershipStatus",
    "Message",
    "Model",
    "TimestampMixin",
    "User",
]
