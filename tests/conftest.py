"""Shared fixtures and fakes for relay tests."""

import asyncio
import json
import time

import pytest
from fastapi.testclient import TestClient

from app import create_app
from backend import RoomRegistry


class FakeConnection:
    """Stands in for connection.Connection in registry and dispatcher tests."""

    def __init__(self, peer_id: str):
        self.id = peer_id
        self.sent = []

    def send(self, text: str) -> bool:
        self.sent.append(text)
        return True


class BrokenConnection(FakeConnection):
    """A peer whose transport has already failed."""

    def send(self, text: str) -> bool:
        raise RuntimeError("transport closed")


class FakeWebSocket:
    """Minimal async WebSocket double for connection.Connection."""

    def __init__(self, fail_sends: bool = False):
        self.accepted = False
        self.sent = []
        self.closed_with = None
        self.fail_sends = fail_sends

    async def accept(self):
        self.accepted = True

    async def send_text(self, text: str):
        if self.fail_sends:
            raise RuntimeError("socket is gone")
        self.sent.append(text)

    async def close(self, code: int = 1000):
        self.closed_with = code


class HangingWebSocket(FakeWebSocket):
    """A peer that stopped reading: every write blocks forever."""

    async def send_text(self, text: str):
        await asyncio.Event().wait()


def envelope(code, message_type="SDP", content=None) -> str:
    if content is None:
        content = {"type": "offer", "sdp": "v=0\r\n"}
    return json.dumps({"message_type": message_type, "content": content, "code": code})


def wait_for_members(client: TestClient, code: str, count: int, timeout: float = 2.0):
    """Poll the diagnostics endpoint until a room has `count` members (0 = gone)."""
    deadline = time.monotonic() + timeout
    while True:
        response = client.get(f"/rooms/{code}")
        current = response.json()["member_count"] if response.status_code == 200 else 0
        if current == count:
            return
        if time.monotonic() > deadline:
            raise AssertionError(f"room {code!r} has {current} members, expected {count}")
        time.sleep(0.01)


@pytest.fixture
def registry():
    return RoomRegistry()


@pytest.fixture
def app(registry):
    return create_app(registry=registry)


@pytest.fixture
def client(app):
    with TestClient(app) as c:
        yield c
