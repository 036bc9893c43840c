from pydantic import BaseModel


class StatsResponse(BaseModel):
    connected_peers: int
    queue_length: int
    active_rooms: int


class HealthResponse(BaseModel):
    status: str
    timestamp: str
    uptime: float
