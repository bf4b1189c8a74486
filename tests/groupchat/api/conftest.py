from __future__ import annotations

from collections.abc import Iterator

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from groupchat.api import register_routes
from groupchat.api.dependencies import get_db_session
from groupchat.core.dependencies import get_message_broadcaster
from groupchat.core.exceptions import register_exception_handlers
from groupchat.services.realtime.broadcaster import MessageBroadcaster
from groupchat.services.realtime.registry import ConnectionRegistry
from groupchat.services.realtime.sql_collaborators import SqlMessageStore, SqlUserDirectory


@pytest.fixture()
def broadcaster(session_factory) -> MessageBroadcaster:  # noqa: ANN001
    return MessageBroadcaster(
        registry=ConnectionRegistry(),
        store=SqlMessageStore(session_factory),
        directory=SqlUserDirectory(session_factory),
    )


@pytest.fixture()
def app(session_factory, broadcaster: MessageBroadcaster) -> FastAPI:  # noqa: ANN001
    app = FastAPI()
    register_exception_handlers(app)
    register_routes(app)

    def _session():  # noqa: ANN202
        with session_factory() as db:
            yield db

    app.dependency_overrides[get_db_session] = _session
    app.dependency_overrides[get_message_broadcaster] = lambda: broadcaster
    return app


@pytest.fixture()
def client(app: FastAPI) -> Iterator[TestClient]:
    # One portal for every WebSocket session so fan-out runs on a single event loop.
    with TestClient(app) as test_client:
        yield test_client
