import asyncio
import uuid
from enum import Enum
from typing import Optional
from fastapi import WebSocket
from logging_config import get_logger

logger = get_logger(__name__)


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    OPEN = "open"
    CLOSING = "closing"  # writer failed, waiting for the receive loop to finish
    CLOSED = "closed"


def generate_connection_id() -> str:
    return uuid.uuid4().hex


class Connection:
    """One WebSocket peer and its outbound frame queue.

    Outbound frames are queued and written by a dedicated writer task so a
    slow or dead peer never blocks whoever is broadcasting to it.
    """

    def __init__(self, websocket: WebSocket, queue_size: int = 64, send_timeout: float = 5.0):
        self.id = generate_connection_id()
        self.websocket = websocket
        self.state = ConnectionState.CONNECTING
        self.send_timeout = send_timeout
        self._outbound: asyncio.Queue = asyncio.Queue(maxsize=queue_size)
        self._writer: Optional[asyncio.Task] = None

    @property
    def is_open(self) -> bool:
        return self.state == ConnectionState.OPEN

    async def accept(self):
        await self.websocket.accept()
        self.state = ConnectionState.OPEN
        self._writer = asyncio.create_task(self._write_loop())
        logger.info(f"Connection {self.id} opened")

    def send(self, text: str) -> bool:
        """Queue a text frame for delivery. Returns False if it was dropped."""
        if not self.is_open:
            logger.debug(f"Not sending to connection {self.id}: state is {self.state.value}")
            return False
        try:
            self._outbound.put_nowait(text)
        except asyncio.QueueFull:
            logger.warning(f"Outbound queue full for connection {self.id}, dropping frame")
            return False
        return True

    async def _write_loop(self):
        while True:
            text = await self._outbound.get()
            try:
                await asyncio.wait_for(self.websocket.send_text(text), timeout=self.send_timeout)
            except asyncio.CancelledError:
                raise
            except Exception as e:
                logger.warning(f"Delivery to connection {self.id} failed: {e!r}, closing it")
                if self.state == ConnectionState.OPEN:
                    self.state = ConnectionState.CLOSING
                await self._close_transport(code=1011)
                return

    def mark_closed(self) -> bool:
        """Move to CLOSED. Returns True only for the first call."""
        if self.state == ConnectionState.CLOSED:
            return False
        self.state = ConnectionState.CLOSED
        return True

    async def close(self, code: int = 1000):
        """Stop the writer and close the transport. Safe to call more than once."""
        self.mark_closed()
        writer, self._writer = self._writer, None
        if writer is not None and writer is not asyncio.current_task():
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass
        await self._close_transport(code=code)

    async def _close_transport(self, code: int = 1000):
        try:
            await asyncio.wait_for(self.websocket.close(code=code), timeout=self.send_timeout)
        except Exception as e:
            # Already closed by the remote side or the server
            logger.debug(f"Error closing WebSocket for connection {self.id}: {e!r}")

    def __repr__(self):
        return f"Connection(id={self.id!r}, state={self.state.value!r})"
