from backend import RoomRegistry
from connection import Connection
from schemas.signal import parse_envelope
from logging_config import get_logger

logger = get_logger(__name__)


class RelayDispatcher:
    """Routes each inbound frame to the other members of the sender's room.

    The frame is forwarded as received; the relay never rewrites the payload.
    """

    def __init__(self, registry: RoomRegistry):
        self.registry = registry

    async def dispatch(self, connection: Connection, raw: str) -> int:
        """Handle one inbound text frame. Returns the number of peers it was queued for."""
        envelope = parse_envelope(raw)
        if envelope is None:
            logger.debug(f"Dropped malformed frame from connection {connection.id}")
            return 0

        code = envelope.code
        # Membership is (re)asserted by every frame the peer sends
        await self.registry.join(code, connection.id, connection)

        siblings = await self.registry.siblings(code, connection.id)
        delivered = 0
        for peer in siblings:
            try:
                if peer.connection.send(raw):
                    delivered += 1
            except Exception as e:
                logger.warning(f"Error relaying to peer {peer.id} in room {code!r}: {e!r}")

        logger.debug(
            f"Relayed {envelope.message_type!r} frame from {connection.id} "
            f"in room {code!r} to {delivered}/{len(siblings)} peers"
        )
        return delivered
