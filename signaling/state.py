import threading

from logging_config import get_logger
from schemas.messages import ServerMessage
from schemas.stats import StatsResponse
from signaling.peers import PeerRegistry
from signaling.rooms import RoomTable
from signaling.waiting_queue import WaitingQueue

logger = get_logger(__name__)


class BrokerState:
    """All mutable broker state for one instance, behind a single lock.

    Callers take `lock` around every read-modify-write touching the registry,
    the queue or the room table. Delivery helpers never block: they hand the
    frame to the peer's connection and report whether it was accepted.
    """

    def __init__(self):
        self.peers = PeerRegistry()
        self.queue = WaitingQueue()
        self.rooms = RoomTable()
        self.lock = threading.RLock()

    def send_to(self, peer_id: str, data: str) -> bool:
        peer = self.peers.lookup(peer_id)
        if peer is None:
            logger.debug(f"Dropping frame for unknown peer {peer_id}")
            return False
        try:
            delivered = peer.connection.send(data)
        except Exception as e:
            logger.warning(f"Send to peer {peer_id} raised: {e}")
            return False
        if not delivered:
            logger.debug(f"Connection for peer {peer_id} did not accept frame")
        return delivered

    def notify(self, peer_id: str, message: ServerMessage) -> bool:
        return self.send_to(peer_id, message.to_json())

    def stats(self) -> StatsResponse:
        with self.lock:
            return StatsResponse(
                connected_peers=len(self.peers),
                queue_length=len(self.queue),
                active_rooms=len(self.rooms),
            )
