import time
import uuid
from dataclasses import dataclass, field
from typing import Dict, Iterator, Optional

from logging_config import get_logger
from signaling.transport import Connection

logger = get_logger(__name__)


def generate_id() -> str:
    """128-bit random identifier for peers and rooms."""
    return uuid.uuid4().hex


@dataclass
class Peer:
    id: str
    connection: Connection
    joined_at: float = field(default_factory=time.time)


class PeerRegistry:
    """Every currently connected participant, keyed by peer id.

    The registry knows nothing about the waiting queue or rooms; whoever
    unregisters a peer is responsible for purging it from those.
    """

    def __init__(self):
        self._peers: Dict[str, Peer] = {}

    def register(self, connection: Connection) -> str:
        peer_id = generate_id()
        while peer_id in self._peers:
            peer_id = generate_id()
        self._peers[peer_id] = Peer(id=peer_id, connection=connection)
        logger.debug(f"Registered peer {peer_id} (connected peers: {len(self._peers)})")
        return peer_id

    def unregister(self, peer_id: str) -> Optional[Peer]:
        peer = self._peers.pop(peer_id, None)
        if peer:
            logger.debug(f"Unregistered peer {peer_id} (connected peers: {len(self._peers)})")
        return peer

    def lookup(self, peer_id: str) -> Optional[Peer]:
        return self._peers.get(peer_id)

    def __contains__(self, peer_id: str) -> bool:
        return peer_id in self._peers

    def __len__(self) -> int:
        return len(self._peers)

    def __iter__(self) -> Iterator[Peer]:
        return iter(list(self._peers.values()))
