"""Groups and approval-gated membership.

Creating a group makes the creator an approved member; everyone else joins
through a pending request that is later approved.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from sqlmodel import Session, select

from groupchat.core.exceptions import ConflictError, NotFoundError
from groupchat.core.utils import utcnow
from groupchat.models.group import Group, GroupMember, MembershipStatus
from groupchat.models.user import User

logger = logging.getLogger(__name__)


@dataclass
class GroupService:
    """Encapsulates group CRUD, join requests and approvals."""

    session: Session

    # Groups
    def create_group(self, *, name: str, creator_id: int) -> Group:
        if self.session.get(User, creator_id) is None:
            raise NotFoundError("Creator not found")

        group = Group(name=name.strip(), creator_id=creator_id)
        self.session.add(group)
        self.session.flush()
        self.session.add(
            GroupMember(
                group_id=group.id or 0,
                user_id=creator_id,
                status=MembershipStatus.approved.value,
            )
        )
        self.session.commit()
        self.session.refresh(group)
        logger.info("Created group id=%s by user id=%s", group.id, creator_id)
        return group

    def get_group(self, group_id: int) -> Group | None:
        return self.session.get(Group, group_id)

    def list_groups(self) -> list[Group]:
        return list(self.session.exec(select(Group).order_by(Group.id)))

    def list_memberships(self) -> list[GroupMember]:
        return list(self.session.exec(select(GroupMember).order_by(GroupMember.id)))

    # Membership
    def get_membership(self, *, group_id: int, user_id: int) -> GroupMember | None:
        return self.session.exec(
            select(GroupMember).where(
                GroupMember.group_id == group_id,
                GroupMember.user_id == user_id,
            )
        ).first()

    def request_join(self, *, group_id: int, user_id: int) -> GroupMember:
        """Record a pending join request for `user_id`."""

        if self.get_group(group_id) is None:
            raise NotFoundError("Group not found")
        if self.session.get(User, user_id) is None:
            raise NotFoundError("User not found")
        existing = self.get_membership(group_id=group_id, user_id=user_id)
        if existing is not None:
            raise ConflictError(
                "Join request already exists",
                code="membership_exists",
                details={"status": existing.status},
            )

        membership = GroupMember(
            group_id=group_id,
            user_id=user_id,
            status=MembershipStatus.pending.value,
        )
        self.session.add(membership)
        self.session.commit()
        self.session.refresh(membership)
        return membership

    def pending_requests(self, *, group_id: int) -> list[tuple[GroupMember, User]]:
        stmt = (
            select(GroupMember, User)
            .join(User, User.id == GroupMember.user_id)
            .where(
                GroupMember.group_id == group_id,
                GroupMember.status == MembershipStatus.pending.value,
            )
            .order_by(GroupMember.created_at, GroupMember.id)
        )
        return list(self.session.exec(stmt))

    def approve(self, *, group_id: int, user_id: int) -> GroupMember:
        """Promote a pending request to an approved membership."""

        membership = self.get_membership(group_id=group_id, user_id=user_id)
        if membership is None:
            raise NotFoundError("Join request not found")
        if membership.status != MembershipStatus.approved.value:
            membership.status = MembershipStatus.approved.value
            membership.updated_at = utcnow()
            self.session.add(membership)
            self.session.commit()
            self.session.refresh(membership)
        return membership


__all__ = ["GroupService"]
