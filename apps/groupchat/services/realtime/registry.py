"""Live connection to group association index.

Tracks which single group each live WebSocket is currently viewing and keeps
the reverse index (group -> connections) used for fan-out. State lives only
for the process lifetime.
"""

from __future__ import annotations

import threading
from collections.abc import Hashable
from typing import Any

from fastapi import WebSocket

GroupKey = Hashable


class ConnectionRegistry:
    """Tracks WebSocket connections per group; each connection is in at most one group."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._connections: dict[GroupKey, set[WebSocket]] = {}
        self._group_by_connection: dict[WebSocket, GroupKey] = {}

    def associate(self, connection: WebSocket | Any, group_id: GroupKey) -> None:
        """Move `connection` into `group_id`, leaving its previous group if any."""
        with self._lock:
            current = self._group_by_connection.get(connection)
            if current == group_id:
                return
            if current is not None:
                self._discard(connection, current)
            self._connections.setdefault(group_id, set()).add(connection)
            self._group_by_connection[connection] = group_id

    def disassociate(self, connection: WebSocket | Any) -> GroupKey | None:
        """Drop `connection` from whatever group it claims; returns that group."""
        with self._lock:
            current = self._group_by_connection.pop(connection, None)
            if current is not None:
                self._discard(connection, current)
            return current

    def members_of(self, group_id: GroupKey) -> set[WebSocket]:
        with self._lock:
            return set(self._connections.get(group_id, ()))

    def group_of(self, connection: WebSocket | Any) -> GroupKey | None:
        with self._lock:
            return self._group_by_connection.get(connection)

    def groups(self) -> set[GroupKey]:
        with self._lock:
            return set(self._connections)

    def __len__(self) -> int:
        with self._lock:
            return len(self._group_by_connection)

    def _discard(self, connection: WebSocket | Any, group_id: GroupKey) -> None:
        # Caller holds the lock. Empty groups are pruned immediately.
        members = self._connections.get(group_id)
        if members is None:
            return
        members.discard(connection)
        if not members:
            self._connections.pop(group_id, None)


__all__ = ["ConnectionRegistry"]
