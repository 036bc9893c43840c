import asyncio
import time
from enum import Enum
from typing import List, Optional, Union, get_args

from logging_config import get_logger
from schemas.messages import (
    QUEUE_TIMEOUT,
    ErrorMessage,
    InvalidMessage,
    JoinMessage,
    LeaveMessage,
    NegotiationMessage,
    parse_client_message,
)
from schemas.stats import StatsResponse
from signaling.matchmaking import MatchmakingEngine
from signaling.relay import RelayRouter
from signaling.state import BrokerState
from signaling.transport import Connection

logger = get_logger(__name__)


class PeerState(str, Enum):
    CONNECTED_UNJOINED = "connected_unjoined"
    QUEUED = "queued"
    PAIRED = "paired"
    CLOSED = "closed"


class ConnectionLifecycleController:
    """Entry point for transport bindings.

    A binding calls on_open when a connection is accepted, on_message for
    every inbound frame, on_error for transport failures and on_close exactly
    when the connection is gone. Each call runs as one critical section over
    the broker state, so after it returns every peer is in at most one of
    the waiting queue or a room.
    """

    def __init__(self, state: Optional[BrokerState] = None, queue_timeout: Optional[float] = None):
        self.state = state or BrokerState()
        self.matchmaking = MatchmakingEngine(self.state)
        self.relay = RelayRouter(self.state)
        self.queue_timeout = queue_timeout or None

    def on_open(self, connection: Connection) -> str:
        with self.state.lock:
            peer_id = self.state.peers.register(connection)
        logger.info(f"Peer {peer_id} connected")
        return peer_id

    def on_message(self, peer_id: str, data: Union[str, bytes]):
        with self.state.lock:
            if peer_id not in self.state.peers:
                logger.debug(f"Ignoring message from closed peer {peer_id}")
                return

            try:
                message = parse_client_message(data)
            except InvalidMessage as e:
                logger.debug(f"Rejected frame from peer {peer_id}: {e.reason}")
                self.state.notify(peer_id, ErrorMessage(message=e.reason))
                return

            logger.debug(f"Peer {peer_id} sent {message.type}")
            if isinstance(message, JoinMessage):
                self.matchmaking.join(peer_id)
            elif isinstance(message, LeaveMessage):
                self.matchmaking.leave(peer_id)
            elif isinstance(message, get_args(NegotiationMessage)):
                if isinstance(data, (bytes, bytearray)):
                    data = data.decode("utf-8")
                self.relay.forward(peer_id, data)

    def on_close(self, peer_id: str):
        with self.state.lock:
            self.matchmaking.leave(peer_id)
            peer = self.state.peers.unregister(peer_id)
        if peer:
            logger.info(f"Peer {peer_id} disconnected after {time.time() - peer.joined_at:.1f}s")

    def on_error(self, peer_id: str, error: BaseException):
        # Cleanup happens on the close event that always follows
        logger.error(f"Transport error for peer {peer_id}: {error}", exc_info=error)

    def state_of(self, peer_id: str) -> PeerState:
        with self.state.lock:
            if peer_id in self.state.rooms:
                return PeerState.PAIRED
            if peer_id in self.state.queue:
                return PeerState.QUEUED
            if peer_id in self.state.peers:
                return PeerState.CONNECTED_UNJOINED
            return PeerState.CLOSED

    def expire_waiting(self, now: Optional[float] = None) -> List[str]:
        """Drop peers that have waited longer than queue_timeout, notifying each once."""
        if not self.queue_timeout:
            return []
        now = time.monotonic() if now is None else now
        with self.state.lock:
            expired = self.state.queue.queued_before(now - self.queue_timeout)
            for peer_id in expired:
                self.state.queue.remove(peer_id)
                self.state.notify(peer_id, ErrorMessage(message=QUEUE_TIMEOUT))
        if expired:
            logger.info(f"Expired {len(expired)} waiting peer(s) after {self.queue_timeout}s")
        return expired

    def stats(self) -> StatsResponse:
        return self.state.stats()


async def run_queue_sweeper(controller: ConnectionLifecycleController, interval: float):
    logger.info(f"Starting queue sweeper (timeout: {controller.queue_timeout}s, interval: {interval}s)")
    try:
        while True:
            await asyncio.sleep(interval)
            try:
                controller.expire_waiting()
            except Exception as e:
                logger.error(f"Queue sweep failed: {e}", exc_info=True)
    except asyncio.CancelledError:
        logger.info("Queue sweeper stopped")
        raise
