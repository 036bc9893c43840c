from logging_config import get_logger
from schemas.messages import NOT_PAIRED, ErrorMessage
from signaling.state import BrokerState

logger = get_logger(__name__)


class RelayRouter:
    """Forwards negotiation frames to the sender's room partner, verbatim."""

    def __init__(self, state: BrokerState):
        self.state = state

    def forward(self, peer_id: str, payload: str) -> bool:
        """Caller holds `state.lock`. Returns whether the partner's connection took the frame."""
        partner_id = self.state.rooms.partner_of(peer_id)
        if partner_id is None:
            logger.debug(f"Peer {peer_id} tried to relay while not paired")
            self.state.notify(peer_id, ErrorMessage(message=NOT_PAIRED))
            return False

        # A dead partner connection is not reported back; its close event cleans up
        delivered = self.state.send_to(partner_id, payload)
        logger.debug(f"Relayed frame {peer_id} -> {partner_id} (delivered: {delivered})")
        return delivered
