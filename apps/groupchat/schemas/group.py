from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field


class GroupCreate(BaseModel):
    name: str = Field(min_length=1, max_length=255)
    creator_id: int = Field(alias="creatorId")

    model_config = ConfigDict(populate_by_name=True)


class GroupCreated(BaseModel):
    message: str
    group_id: int = Field(alias="groupId")

    model_config = ConfigDict(populate_by_name=True)


class GroupOut(BaseModel):
    id: int
    name: str
    creator_id: int
    created_at: datetime | None = None

    model_config = ConfigDict(from_attributes=True)


class MembershipOut(BaseModel):
    group_id: int
    user_id: int
    status: str

    model_config = ConfigDict(from_attributes=True)


class GroupListResponse(BaseModel):
    groups: list[GroupOut]
    memberships: list[MembershipOut]


class MembershipRequest(BaseModel):
    user_id: int = Field(alias="userId")

    model_config = ConfigDict(populate_by_name=True)


class JoinRequestOut(BaseModel):
    user_id: int
    username: str
    profile_picture_url: str | None = None


class StatusMessage(BaseModel):
    message: str
