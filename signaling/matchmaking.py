from typing import Optional

from logging_config import get_logger
from schemas.messages import MatchedMessage, PeerLeftMessage, QueuedMessage
from signaling.rooms import Room
from signaling.state import BrokerState

logger = get_logger(__name__)


class MatchmakingEngine:
    """Pairs peers from the waiting queue into rooms.

    Methods assume the caller already holds `state.lock`.
    """

    def __init__(self, state: BrokerState):
        self.state = state

    def join(self, peer_id: str) -> Optional[Room]:
        """Queue the peer or pair it with the longest-waiting one.

        Returns the new room when a match happened, otherwise None.
        """
        state = self.state
        if peer_id not in state.peers:
            logger.debug(f"Ignoring join from unknown peer {peer_id}")
            return None

        if peer_id in state.rooms:
            logger.info(f"Peer {peer_id} re-joining while paired, leaving current room first")
            self.leave(peer_id)

        if peer_id in state.queue:
            logger.debug(f"Peer {peer_id} is already waiting")
            state.notify(peer_id, QueuedMessage())
            return None

        waiting_id = self._next_waiting()
        if waiting_id is None:
            state.queue.enqueue(peer_id)
            logger.info(f"Peer {peer_id} queued (waiting: {len(state.queue)})")
            state.notify(peer_id, QueuedMessage())
            return None

        room = state.rooms.form_room(waiting_id, peer_id)
        logger.info(f"Matched room {room.id}: {room.first} (answerer) <-> {room.second} (offerer)")
        # The peer that waited answers, the one that just arrived makes the offer
        state.notify(room.first, MatchedMessage(role="answerer", peer_id=room.second))
        state.notify(room.second, MatchedMessage(role="offerer", peer_id=room.first))
        return room

    def leave(self, peer_id: str) -> Optional[str]:
        """Dissolve the peer's room and drop it from the queue.

        Notifies the former partner once and returns its id, or None if the
        peer had no room. Safe to call repeatedly.
        """
        state = self.state
        partner_id = state.rooms.dissolve(peer_id)
        if partner_id is not None:
            logger.info(f"Peer {peer_id} left, notifying partner {partner_id}")
            state.notify(partner_id, PeerLeftMessage())
        if state.queue.remove(peer_id):
            logger.info(f"Peer {peer_id} removed from queue (waiting: {len(state.queue)})")
        return partner_id

    def _next_waiting(self) -> Optional[str]:
        state = self.state
        while True:
            waiting_id = state.queue.dequeue_oldest()
            if waiting_id is None or waiting_id in state.peers:
                return waiting_id
            logger.warning(f"Skipping stale queue entry for peer {waiting_id}")
