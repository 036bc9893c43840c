from dataclasses import dataclass
from typing import Dict, Optional

from logging_config import get_logger
from signaling.peers import generate_id

logger = get_logger(__name__)


class RoomConflictError(RuntimeError):
    pass


@dataclass(frozen=True)
class Room:
    """Two peers in arrival order: first was waiting, second arrived."""

    id: str
    first: str
    second: str

    def partner_of(self, peer_id: str) -> Optional[str]:
        if peer_id == self.first:
            return self.second
        if peer_id == self.second:
            return self.first
        return None


class RoomTable:
    """Rooms indexed from both member ids."""

    def __init__(self):
        self._by_peer: Dict[str, Room] = {}

    def form_room(self, first_id: str, second_id: str) -> Room:
        if first_id == second_id:
            raise ValueError(f"Cannot pair peer {first_id} with itself")
        for peer_id in (first_id, second_id):
            if peer_id in self._by_peer:
                raise RoomConflictError(f"Peer {peer_id} is already in room {self._by_peer[peer_id].id}")
        room = Room(id=generate_id(), first=first_id, second=second_id)
        self._by_peer[first_id] = room
        self._by_peer[second_id] = room
        logger.debug(f"Formed room {room.id}: {first_id} <-> {second_id}")
        return room

    def room_of(self, peer_id: str) -> Optional[Room]:
        return self._by_peer.get(peer_id)

    def partner_of(self, peer_id: str) -> Optional[str]:
        room = self._by_peer.get(peer_id)
        return room.partner_of(peer_id) if room else None

    def dissolve(self, peer_id: str) -> Optional[str]:
        """Remove the peer's room from both indexes, returning the partner id."""
        room = self._by_peer.get(peer_id)
        if room is None:
            return None
        del self._by_peer[room.first]
        del self._by_peer[room.second]
        logger.debug(f"Dissolved room {room.id}")
        return room.partner_of(peer_id)

    def __contains__(self, peer_id: str) -> bool:
        return peer_id in self._by_peer

    def __len__(self) -> int:
        return len(self._by_peer) // 2
