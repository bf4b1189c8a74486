from __future__ import annotations

from fastapi import APIRouter, Depends, HTTPException, status
from sqlmodel import Session

from groupchat.api.dependencies import get_db_session
from groupchat.core.utils import as_utc, utcnow
from groupchat.schemas.group import (
    GroupCreate,
    GroupCreated,
    GroupListResponse,
    GroupOut,
    JoinRequestOut,
    MembershipOut,
    MembershipRequest,
    StatusMessage,
)
from groupchat.schemas.message import MessageHistoryItem
from groupchat.services.group_service import GroupService
from groupchat.services.message_service import MessageService

router = APIRouter(prefix="/api/groups", tags=["groups"])


@router.get("", response_model=GroupListResponse)
def list_groups(session: Session = Depends(get_db_session)) -> GroupListResponse:
    service = GroupService(session)
    return GroupListResponse(
        groups=[GroupOut.model_validate(group) for group in service.list_groups()],
        memberships=[MembershipOut.model_validate(item) for item in service.list_memberships()],
    )


@router.post("", response_model=GroupCreated, status_code=status.HTTP_201_CREATED)
def create_group(payload: GroupCreate, session: Session = Depends(get_db_session)) -> GroupCreated:
    group = GroupService(session).create_group(name=payload.name, creator_id=payload.creator_id)
    return GroupCreated(message="Group created successfully", group_id=group.id or 0)


@router.post("/{group_id}/join", response_model=StatusMessage)
def request_join(
    group_id: int,
    payload: MembershipRequest,
    session: Session = Depends(get_db_session),
) -> StatusMessage:
    GroupService(session).request_join(group_id=group_id, user_id=payload.user_id)
    return StatusMessage(message="Join request sent")


@router.get("/{group_id}/requests", response_model=list[JoinRequestOut])
def list_join_requests(group_id: int, session: Session = Depends(get_db_session)) -> list[JoinRequestOut]:
    service = GroupService(session)
    if not service.get_group(group_id):
        raise HTTPException(status_code=404, detail="Group not found")
    return [
        JoinRequestOut(
            user_id=user.id or 0,
            username=user.username,
            profile_picture_url=user.profile_picture_url,
        )
        for _membership, user in service.pending_requests(group_id=group_id)
    ]


@router.post("/{group_id}/approve", response_model=StatusMessage)
def approve_join(
    group_id: int,
    payload: MembershipRequest,
    session: Session = Depends(get_db_session),
) -> StatusMessage:
    GroupService(session).approve(group_id=group_id, user_id=payload.user_id)
    return StatusMessage(message="User approved")


@router.get("/{group_id}/messages", response_model=list[MessageHistoryItem])
def list_messages(group_id: int, session: Session = Depends(get_db_session)) -> list[MessageHistoryItem]:
    if not GroupService(session).get_group(group_id):
        raise HTTPException(status_code=404, detail="Group not found")
    rows = MessageService(session).list_messages(group_id=group_id)
    return [
        MessageHistoryItem(
            id=message.id or 0,
            content=message.content,
            timestamp=as_utc(message.created_at or utcnow()),
            is_anonymous=message.is_anonymous,
            user_id=user.id or 0,
            username=user.username,
            profile_picture_url=user.profile_picture_url,
        )
        for message, user in rows
    ]
