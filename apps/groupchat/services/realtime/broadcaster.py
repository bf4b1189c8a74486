"""Turns inbound chat submissions into persisted records and live fan-out.

Handling one inbound message runs: persist -> resolve sender username ->
associate the connection with the message's group -> send to every open
connection in that group. Any failure is terminal for that one message only;
it is logged and nothing is sent back to the sender.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Protocol

from fastapi import WebSocket
from fastapi.concurrency import run_in_threadpool
from pydantic import ValidationError
from starlette.websockets import WebSocketState

from groupchat.schemas.message import (
    CHAT_MESSAGE_TYPE,
    Identifier,
    InboundChatMessage,
    OutboundChatMessage,
)
from groupchat.services.realtime.registry import ConnectionRegistry

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MessageReceipt:
    """What the store assigns on insert."""

    id: int
    timestamp: datetime


class MessageStore(Protocol):
    def insert_message(
        self,
        *,
        content: str,
        user_id: Identifier,
        group_id: Identifier,
        is_anonymous: bool,
    ) -> MessageReceipt:
        ...


class UserDirectory(Protocol):
    def find_username_by_id(self, user_id: Identifier) -> str | None:
        ...


def is_open(connection: WebSocket | Any) -> bool:
    return (
        getattr(connection, "client_state", None) == WebSocketState.CONNECTED
        and getattr(connection, "application_state", None) == WebSocketState.CONNECTED
    )


def parse_inbound(payload: str | bytes | Mapping[str, Any]) -> InboundChatMessage | None:
    """Decode and validate a raw payload; returns None for anything not broadcastable."""

    data: Any = payload
    if isinstance(payload, (str, bytes, bytearray)):
        try:
            data = json.loads(payload)
        except (ValueError, RecursionError) as exc:
            logger.warning("Dropping unparsable realtime payload: %s", exc)
            return None

    if not isinstance(data, Mapping):
        logger.warning("Dropping realtime payload that is not a JSON object")
        return None

    if data.get("type") != CHAT_MESSAGE_TYPE:
        logger.debug("Ignoring realtime payload with type=%r", data.get("type"))
        return None

    try:
        return InboundChatMessage.model_validate(data)
    except ValidationError as exc:
        logger.warning(
            "Dropping malformed chat message: %s",
            [(".".join(str(p) for p in err["loc"]), err["msg"]) for err in exc.errors()],
        )
        return None


class MessageBroadcaster:
    """Persists chat messages and fans them out to the connections viewing a group."""

    def __init__(
        self,
        *,
        registry: ConnectionRegistry,
        store: MessageStore,
        directory: UserDirectory,
    ) -> None:
        self.registry = registry
        self.store = store
        self.directory = directory

    async def handle_inbound(
        self,
        connection: WebSocket | Any,
        payload: str | bytes | Mapping[str, Any],
    ) -> OutboundChatMessage | None:
        """Handle one inbound payload; returns the broadcast message, or None if dropped."""

        inbound = parse_inbound(payload)
        if inbound is None:
            return None

        try:
            receipt = await run_in_threadpool(
                self.store.insert_message,
                content=inbound.content,
                user_id=inbound.user_id,
                group_id=inbound.group_id,
                is_anonymous=inbound.is_anonymous,
            )
        except Exception:
            logger.exception(
                "Failed to persist message from user %s to group %s",
                inbound.user_id,
                inbound.group_id,
            )
            return None

        try:
            username = await run_in_threadpool(self.directory.find_username_by_id, inbound.user_id)
        except Exception:
            logger.exception("Failed to resolve sender %s for message %s", inbound.user_id, receipt.id)
            return None
        if username is None:
            logger.warning(
                "Unknown sender %s; message %s persisted but not broadcast",
                inbound.user_id,
                receipt.id,
            )
            return None

        message = OutboundChatMessage(
            id=receipt.id,
            content=inbound.content,
            user_id=inbound.user_id,
            group_id=inbound.group_id,
            is_anonymous=inbound.is_anonymous,
            username=username,
            timestamp=receipt.timestamp,
        )

        # Association piggybacks on sending; there is no separate join message.
        self.registry.associate(connection, inbound.group_id)
        await self.broadcast(inbound.group_id, message)
        return message

    async def broadcast(self, group_id: Identifier, message: OutboundChatMessage) -> int:
        """Send `message` to every open member of `group_id`; returns the delivery count."""

        payload = message.to_wire()
        delivered = 0
        for connection in self.registry.members_of(group_id):
            if not is_open(connection):
                continue
            try:
                await connection.send_json(payload)
            except Exception as exc:
                logger.warning(
                    "Failed to deliver message %s to a member of group %s: %s",
                    message.id,
                    group_id,
                    exc,
                )
                continue
            delivered += 1
        logger.debug("Message %s delivered to %d connection(s) in group %s", message.id, delivered, group_id)
        return delivered

    def disconnect(self, connection: WebSocket | Any) -> None:
        group_id = self.registry.disassociate(connection)
        if group_id is not None:
            logger.debug("Connection left group %s on disconnect", group_id)


__all__ = [
    "MessageBroadcaster",
    "MessageReceipt",
    "MessageStore",
    "UserDirectory",
    "is_open",
    "parse_inbound",
]
