from pydantic import BaseModel


class RoomDetailsResponse(BaseModel):
    code: str
    member_count: int
    members: list[str]


class HealthResponse(BaseModel):
    status: str
    rooms: int
    peers: int
