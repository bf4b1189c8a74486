"""Wire and history schemas for chat messages.

Inbound and outbound realtime payloads use the camelCase keys the browser
client speaks; field names stay snake_case on the Python side.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictInt, StrictStr

CHAT_MESSAGE_TYPE = "message"

# Ids arrive as JSON numbers from the bundled client but other clients send strings.
Identifier = Union[StrictInt, StrictStr]


class InboundChatMessage(BaseModel):
    """A chat submission received over a realtime connection."""

    type: Literal["message"] = CHAT_MESSAGE_TYPE
    content: str = Field(min_length=1)
    user_id: Identifier = Field(alias="userId")
    group_id: Identifier = Field(alias="groupId")
    is_anonymous: StrictBool = Field(alias="isAnonymous")

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class OutboundChatMessage(BaseModel):
    """Enriched message fanned out to every connection viewing the group.

    `username` is always the real sender name; clients hide it when
    `isAnonymous` is set.
    """

    type: Literal["message"] = CHAT_MESSAGE_TYPE
    id: int
    content: str
    user_id: Identifier = Field(alias="userId")
    group_id: Identifier = Field(alias="groupId")
    is_anonymous: StrictBool = Field(alias="isAnonymous")
    username: str
    timestamp: datetime

    model_config = ConfigDict(populate_by_name=True)

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


class MessageHistoryItem(BaseModel):
    id: int
    content: str
    timestamp: datetime
    is_anonymous: bool
    user_id: int = Field(alias="userId")
    username: str
    profile_picture_url: str | None = None

    model_config = ConfigDict(populate_by_name=True)


__all__ = [
    "CHAT_MESSAGE_TYPE",
    "Identifier",
    "InboundChatMessage",
    "MessageHistoryItem",
    "OutboundChatMessage",
]
