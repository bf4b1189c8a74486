from __future__ import annotations

import logging

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect

from groupchat.core.dependencies import get_message_broadcaster
from groupchat.core.settings import settings
from groupchat.services.realtime.broadcaster import MessageBroadcaster

logger = logging.getLogger(__name__)

router = APIRouter(tags=["realtime"])


@router.websocket(settings.ws_path)
async def chat_ws(
    websocket: WebSocket,
    broadcaster: MessageBroadcaster = Depends(get_message_broadcaster),
) -> None:
    await websocket.accept()
    logger.info("Client connected")
    try:
        while True:
            # Handled one at a time so a connection's messages keep their order.
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                raise WebSocketDisconnect(message.get("code", 1000))
            payload = message.get("text")
            if payload is None:
                payload = message.get("bytes") or b""
            await broadcaster.handle_inbound(websocket, payload)
    except WebSocketDisconnect:
        logger.info("Client disconnected")
    finally:
        broadcaster.disconnect(websocket)
