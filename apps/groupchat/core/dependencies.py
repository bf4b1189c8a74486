"""Central dependency providers.

The connection registry and broadcaster are process-scoped: one fan-out index
per server process, reset on restart. Tests clear the caches or use
`app.dependency_overrides` to get a fresh instance.
"""

from __future__ import annotations

from functools import lru_cache
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from groupchat.services.realtime.broadcaster import MessageBroadcaster
    from groupchat.services.realtime.registry import ConnectionRegistry


@lru_cache(maxsize=1)
def get_connection_registry() -> ConnectionRegistry:
    from groupchat.services.realtime.registry import ConnectionRegistry

    return ConnectionRegistry()


@lru_cache(maxsize=1)
def get_message_broadcaster() -> MessageBroadcaster:
    from groupchat.core.database import SessionLocal
    from groupchat.services.realtime.broadcaster import MessageBroadcaster
    from groupchat.services.realtime.sql_collaborators import SqlMessageStore, SqlUserDirectory

    return MessageBroadcaster(
        registry=get_connection_registry(),
        store=SqlMessageStore(SessionLocal),
        directory=SqlUserDirectory(SessionLocal),
    )


__all__ = ["get_connection_registry", "get_message_broadcaster"]
