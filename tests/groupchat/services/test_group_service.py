from __future__ import annotations

from datetime import timedelta

import pytest
from groupchat.core.exceptions import ConflictError, NotFoundError
from groupchat.core.utils import as_utc
from groupchat.models.group import MembershipStatus
from groupchat.services.group_service import GroupService
from groupchat.services.user_service import UserService


def _users(session, *names: str) -> list[int]:  # noqa: ANN001
    service = UserService(session, iterations=1000)
    return [service.register(username=name, password="pw").id or 0 for name in names]


def test_creator_is_approved_member(session) -> None:  # noqa: ANN001
    (owner,) = _users(session, "owner")
    service = GroupService(session)

    group = service.create_group(name=" Book Club ", creator_id=owner)

    assert group.name == "Book Club"
    membership = service.get_membership(group_id=group.id or 0, user_id=owner)
    assert membership is not None
    assert membership.status == MembershipStatus.approved.value
    assert [g.id for g in service.list_groups()] == [group.id]


def test_create_group_requires_existing_creator(session) -> None:  # noqa: ANN001
    with pytest.raises(NotFoundError):
        GroupService(session).create_group(name="Ghosts", creator_id=404)


def test_join_request_then_approve(session) -> None:  # noqa: ANN001
    owner, guest = _users(session, "owner", "guest")
    service = GroupService(session)
    group = service.create_group(name="Chess", creator_id=owner)

    pending = service.request_join(group_id=group.id or 0, user_id=guest)
    assert pending.status == MembershipStatus.pending.value
    requests = service.pending_requests(group_id=group.id or 0)
    assert [user.username for _, user in requests] == ["guest"]

    approved = service.approve(group_id=group.id or 0, user_id=guest)
    assert approved.status == MembershipStatus.approved.value
    assert service.pending_requests(group_id=group.id or 0) == []
    assert {(m.user_id, m.status) for m in service.list_memberships()} == {
        (owner, "approved"),
        (guest, "approved"),
    }


def test_duplicate_join_request_conflicts(session) -> None:  # noqa: ANN001
    owner, guest = _users(session, "owner", "guest")
    service = GroupService(session)
    group = service.create_group(name="Chess", creator_id=owner)
    service.request_join(group_id=group.id or 0, user_id=guest)

    with pytest.raises(ConflictError):
        service.request_join(group_id=group.id or 0, user_id=guest)
    with pytest.raises(ConflictError):
        service.request_join(group_id=group.id or 0, user_id=owner)


def test_join_unknown_group_or_user(session) -> None:  # noqa: ANN001
    (owner,) = _users(session, "owner")
    service = GroupService(session)
    group = service.create_group(name="Chess", creator_id=owner)

    with pytest.raises(NotFoundError):
        service.request_join(group_id=999, user_id=owner)
    with pytest.raises(NotFoundError):
        service.request_join(group_id=group.id or 0, user_id=999)


def test_approve_without_request_is_not_found(session) -> None:  # noqa: ANN001
    owner, guest = _users(session, "owner", "guest")
    service = GroupService(session)
    group = service.create_group(name="Chess", creator_id=owner)

    with pytest.raises(NotFoundError):
        service.approve(group_id=group.id or 0, user_id=guest)


def test_approve_stamps_update_time_in_utc(session) -> None:  # noqa: ANN001
    owner, guest = _users(session, "owner", "guest")
    service = GroupService(session)
    group = service.create_group(name="Chess", creator_id=owner)
    pending = service.request_join(group_id=group.id or 0, user_id=guest)
    requested_at = as_utc(pending.created_at)

    approved = service.approve(group_id=group.id or 0, user_id=guest)

    assert approved.updated_at is not None
    assert as_utc(approved.updated_at) >= requested_at
    assert as_utc(approved.updated_at).utcoffset() == timedelta(0)
