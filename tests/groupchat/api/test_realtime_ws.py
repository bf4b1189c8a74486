from __future__ import annotations

from typing import Any


def _setup(client) -> tuple[int, int, int]:  # noqa: ANN001
    alice = client.post("/api/register", json={"username": "alice", "password": "pw"}).json()["user"]["id"]
    bob = client.post("/api/register", json={"username": "bob", "password": "pw"}).json()["user"]["id"]
    group = client.post("/api/groups", json={"name": "General", "creatorId": alice}).json()["groupId"]
    return alice, bob, group


def _chat(content: str, user_id: Any, group_id: Any, *, anonymous: bool = False) -> dict[str, Any]:
    return {
        "type": "message",
        "content": content,
        "userId": user_id,
        "groupId": group_id,
        "isAnonymous": anonymous,
    }


def test_sender_receives_own_broadcast(client):
    alice, _bob, group = _setup(client)

    with client.websocket_connect("/ws") as ws:
        ws.send_json(_chat("hi", alice, group))
        data = ws.receive_json()

    assert data["type"] == "message"
    assert data["content"] == "hi"
    assert data["userId"] == alice
    assert data["groupId"] == group
    assert data["username"] == "alice"
    assert data["isAnonymous"] is False
    assert isinstance(data["id"], int)
    assert data["timestamp"]


def test_fan_out_reaches_every_associated_connection(client, broadcaster):  # noqa: ANN001
    alice, bob, group = _setup(client)

    with client.websocket_connect("/ws") as ws_a, client.websocket_connect("/ws") as ws_b:
        ws_a.send_json(_chat("from alice", alice, group))
        assert ws_a.receive_json()["content"] == "from alice"

        ws_b.send_json(_chat("from bob", bob, group, anonymous=True))
        got_b = ws_b.receive_json()
        got_a = ws_a.receive_json()

        assert got_a == got_b
        assert got_a["username"] == "bob"
        assert got_a["isAnonymous"] is True
        assert len(broadcaster.registry.members_of(group)) == 2

    # Both sockets closed: the group entry is pruned.
    assert group not in broadcaster.registry.groups()


def test_invalid_payloads_are_dropped_and_connection_stays_usable(client):
    alice, _bob, group = _setup(client)

    with client.websocket_connect("/ws") as ws:
        ws.send_text("{broken")
        ws.send_json({"type": "typing", "userId": alice, "groupId": group})
        ws.send_json({"type": "message", "content": "", "userId": alice, "groupId": group, "isAnonymous": False})
        ws.send_json(_chat("ghost", 999, group))
        ws.send_json(_chat("after the noise", alice, group))
        data = ws.receive_json()

    assert data["content"] == "after the noise"


def test_messages_are_visible_in_history_after_broadcast(client):
    alice, _bob, group = _setup(client)

    with client.websocket_connect("/ws") as ws:
        ws.send_json(_chat("one", alice, group))
        first = ws.receive_json()
        ws.send_json(_chat("two", alice, group))
        second = ws.receive_json()

    assert second["id"] > first["id"]
    history = client.get(f"/api/groups/{group}/messages").json()
    assert [item["id"] for item in history] == [first["id"], second["id"]]
