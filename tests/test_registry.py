"""RoomRegistry membership tests."""

import pytest

from backend import RoomRegistry
from conftest import FakeConnection


@pytest.mark.asyncio
async def test_join_creates_room_lazily(registry):
    assert "room123" not in registry

    await registry.join("room123", "a", FakeConnection("a"))

    assert "room123" in registry
    assert registry.members("room123") == ["a"]
    assert registry.room_of("a") == "room123"


@pytest.mark.asyncio
async def test_join_twice_keeps_one_entry(registry):
    conn = FakeConnection("a")
    await registry.join("room123", "a", conn)
    await registry.join("room123", "a", conn)
    await registry.join("room123", "b", FakeConnection("b"))

    assert registry.members("room123") == ["a", "b"]
    siblings = await registry.siblings("room123", "b")
    assert [peer.id for peer in siblings] == ["a"]


@pytest.mark.asyncio
async def test_join_other_code_moves_peer(registry):
    await registry.join("one", "a", FakeConnection("a"))
    await registry.join("one", "b", FakeConnection("b"))

    await registry.join("two", "a", FakeConnection("a"))

    assert registry.room_of("a") == "two"
    assert registry.members("one") == ["b"]
    assert registry.members("two") == ["a"]
    assert await registry.siblings("one", "b") == []


@pytest.mark.asyncio
async def test_move_out_of_single_member_room_deletes_it(registry):
    await registry.join("one", "a", FakeConnection("a"))
    await registry.join("two", "a", FakeConnection("a"))

    assert "one" not in registry
    assert registry.room_count() == 1


@pytest.mark.asyncio
async def test_siblings_excludes_requester(registry):
    for peer_id in ("a", "b", "c"):
        await registry.join("room", peer_id, FakeConnection(peer_id))

    siblings = await registry.siblings("room", "b")

    assert [peer.id for peer in siblings] == ["a", "c"]
    assert all(peer.connection.id == peer.id for peer in siblings)


@pytest.mark.asyncio
async def test_siblings_of_unknown_room_is_empty(registry):
    assert await registry.siblings("nowhere", "a") == []


@pytest.mark.asyncio
async def test_siblings_of_non_member_is_whole_room(registry):
    await registry.join("room", "a", FakeConnection("a"))

    siblings = await registry.siblings("room", "stranger")

    assert [peer.id for peer in siblings] == ["a"]


@pytest.mark.asyncio
async def test_leave_last_member_deletes_room(registry):
    await registry.join("room123", "a", FakeConnection("a"))
    await registry.join("room123", "b", FakeConnection("b"))

    await registry.leave("b")
    assert registry.members("room123") == ["a"]
    assert registry.room_of("b") is None

    await registry.leave("a")
    assert "room123" not in registry
    assert registry.room_count() == 0
    assert registry.peer_count() == 0


@pytest.mark.asyncio
async def test_rejoin_after_room_deleted_starts_fresh(registry):
    await registry.join("room123", "a", FakeConnection("a"))
    await registry.leave("a")

    await registry.join("room123", "b", FakeConnection("b"))

    assert registry.members("room123") == ["b"]


@pytest.mark.asyncio
async def test_leave_unknown_peer_is_noop(registry):
    await registry.join("room", "a", FakeConnection("a"))

    await registry.leave("ghost")
    await registry.leave("ghost")

    assert registry.members("room") == ["a"]


@pytest.mark.asyncio
async def test_empty_code_is_still_a_room_key():
    registry = RoomRegistry()
    await registry.join("", "a", FakeConnection("a"))

    assert "" in registry
    assert registry.members("") == ["a"]


def test_separate_registries_share_nothing():
    first, second = RoomRegistry(), RoomRegistry()

    assert first.rooms is not second.rooms
    assert first.peer_rooms is not second.peer_rooms
