from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware
from routers.rooms import rooms_router
from backend import RoomRegistry
from connection import Connection
from constants import LOG_FILE, LOG_LEVEL, RelaySettings
from dispatcher import RelayDispatcher
from schemas.rooms import HealthResponse
from typing import Optional
import asyncio
from logging_config import get_logger, setup_logging

logger = get_logger(__name__)


async def signaling_endpoint(websocket: WebSocket):
    """Relay WebSocket endpoint.

    Every text frame is a JSON envelope carrying a room `code`. The sender is
    (re)joined to that room and the frame is forwarded verbatim to every other
    member. Nothing is ever sent back to the sender by the relay itself.
    """
    state = websocket.app.state
    registry: RoomRegistry = state.registry
    dispatcher: RelayDispatcher = state.dispatcher
    settings: RelaySettings = state.settings

    connection = Connection(websocket, queue_size=settings.send_queue_size, send_timeout=settings.send_timeout)
    client = websocket.client.host if websocket.client else "unknown"
    logger.info(f"WebSocket connection attempt from {client}, assigned id {connection.id}")

    try:
        await connection.accept()
    except Exception as e:
        logger.error(f"Failed to accept WebSocket from {client}: {e}", exc_info=True)
        connection.mark_closed()
        return

    message_count = 0
    try:
        while True:
            try:
                if settings.idle_timeout > 0:
                    message = await asyncio.wait_for(websocket.receive(), timeout=settings.idle_timeout)
                else:
                    message = await websocket.receive()
            except asyncio.TimeoutError:
                logger.info(f"Connection {connection.id} idle for {settings.idle_timeout}s, evicting")
                break

            if message["type"] == "websocket.disconnect":
                logger.info(f"WebSocket disconnected for connection {connection.id} (code {message.get('code')})")
                break

            text = message.get("text")
            if text is None:
                logger.debug(f"Ignoring binary frame from connection {connection.id}")
                continue

            message_count += 1
            try:
                await dispatcher.dispatch(connection, text)
            except Exception as e:
                logger.error(f"Error relaying message #{message_count} from connection {connection.id}: {e}", exc_info=True)
    except Exception as e:
        logger.error(f"WebSocket error for connection {connection.id}: {e}", exc_info=True)
    finally:
        if connection.mark_closed():
            await registry.leave(connection.id)
        await connection.close()
        logger.info(f"Connection {connection.id} closed after {message_count} messages")


def create_app(registry: Optional[RoomRegistry] = None, settings: Optional[RelaySettings] = None) -> FastAPI:
    """Build a relay application with its own room registry."""
    app = FastAPI(title="Signaling Relay")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.state.registry = registry if registry is not None else RoomRegistry()
    app.state.settings = settings if settings is not None else RelaySettings()
    app.state.dispatcher = RelayDispatcher(app.state.registry)

    app.include_router(rooms_router)

    # The browser client connects to the bare host
    app.add_api_websocket_route("/", signaling_endpoint)
    app.add_api_websocket_route("/ws", signaling_endpoint)

    @app.get("/health", response_model=HealthResponse)
    async def health():
        registry = app.state.registry
        return HealthResponse(status="ok", rooms=registry.room_count(), peers=registry.peer_count())

    logger.info("Signaling relay application initialized")
    return app


setup_logging(log_level=LOG_LEVEL, log_file=LOG_FILE)
app = create_app()
