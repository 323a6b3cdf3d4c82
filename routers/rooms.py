from fastapi import APIRouter, HTTPException, Request
from schemas.rooms import RoomDetailsResponse
from logging_config import get_logger

logger = get_logger(__name__)

rooms_router = APIRouter(prefix="/rooms", tags=["rooms"])


@rooms_router.get("/{code}", response_model=RoomDetailsResponse)
async def get_room_details(code: str, request: Request):
    """
    Read-only view of one room, for diagnostics.

    Returns:
    - code: The room code
    - member_count: Number of peers currently in the room
    - members: Peer ids in join order
    """
    client_host = request.client.host if request.client else 'unknown'
    logger.info(f"Room details request for {code!r} from {client_host}")

    registry = request.app.state.registry
    if code not in registry:
        logger.debug(f"Room details failed: Room {code!r} not found")
        raise HTTPException(status_code=404, detail="Room not found")

    members = registry.members(code)
    return RoomDetailsResponse(code=code, member_count=len(members), members=members)
