import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional
from connection import Connection
from logging_config import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Peer:
    id: str
    connection: Connection


class RoomRegistry:
    """In-memory room membership for one relay instance.

    rooms:        code -> {peer_id: Peer}, insertion ordered
    peer_rooms:   peer_id -> code, so leave() never scans rooms

    A room only exists while it has members. A peer is in at most one room;
    joining another code moves it.
    """

    def __init__(self):
        self.rooms: Dict[str, Dict[str, Peer]] = {}
        self.peer_rooms: Dict[str, str] = {}
        self._lock = asyncio.Lock()

    async def join(self, code: str, peer_id: str, connection: Connection) -> None:
        async with self._lock:
            current = self.peer_rooms.get(peer_id)
            if current == code:
                return
            if current is not None:
                self._remove(peer_id, current)
                logger.info(f"Peer {peer_id} moved from room {current!r} to room {code!r}")

            members = self.rooms.get(code)
            if members is None:
                members = self.rooms[code] = {}
                logger.info(f"Room {code!r} created")
            members[peer_id] = Peer(id=peer_id, connection=connection)
            self.peer_rooms[peer_id] = code
            logger.info(f"Peer {peer_id} joined room {code!r} ({len(members)} members)")

    async def leave(self, peer_id: str) -> None:
        async with self._lock:
            code = self.peer_rooms.get(peer_id)
            if code is None:
                logger.debug(f"Peer {peer_id} left without joining a room")
                return
            self._remove(peer_id, code)
            logger.info(f"Peer {peer_id} left room {code!r}")

    async def siblings(self, code: str, excluding_peer_id: str) -> List[Peer]:
        async with self._lock:
            members = self.rooms.get(code)
            if not members:
                return []
            return [peer for peer_id, peer in members.items() if peer_id != excluding_peer_id]

    def _remove(self, peer_id: str, code: str):
        # caller holds the lock
        self.peer_rooms.pop(peer_id, None)
        members = self.rooms.get(code)
        if members is None:
            return
        members.pop(peer_id, None)
        if not members:
            del self.rooms[code]
            logger.info(f"Room {code!r} is empty, deleted")

    def room_of(self, peer_id: str) -> Optional[str]:
        return self.peer_rooms.get(peer_id)

    def members(self, code: str) -> List[str]:
        """Peer ids in a room, in join order. Empty for an unknown code."""
        return list(self.rooms.get(code, {}))

    def room_count(self) -> int:
        return len(self.rooms)

    def peer_count(self) -> int:
        return len(self.peer_rooms)

    def __contains__(self, code) -> bool:
        return code in self.rooms
