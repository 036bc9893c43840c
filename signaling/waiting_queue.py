import time
from collections import OrderedDict
from typing import List, Optional

from logging_config import get_logger

logger = get_logger(__name__)


class WaitingQueue:
    """Strict FIFO of peer ids waiting for a partner, without duplicates.

    Each entry remembers when it was queued, on the monotonic clock, so
    long-waiting peers can be expired.
    """

    def __init__(self):
        self._entries: "OrderedDict[str, float]" = OrderedDict()

    def enqueue(self, peer_id: str, now: Optional[float] = None) -> bool:
        """Append to the tail. Returns False if the peer was already queued."""
        if peer_id in self._entries:
            logger.debug(f"Peer {peer_id} already queued, keeping its position")
            return False
        self._entries[peer_id] = time.monotonic() if now is None else now
        return True

    def dequeue_oldest(self) -> Optional[str]:
        if not self._entries:
            return None
        peer_id, _ = self._entries.popitem(last=False)
        return peer_id

    def remove(self, peer_id: str) -> bool:
        return self._entries.pop(peer_id, None) is not None

    def queued_at(self, peer_id: str) -> Optional[float]:
        return self._entries.get(peer_id)

    def queued_before(self, cutoff: float) -> List[str]:
        """Ids queued strictly before cutoff, oldest first."""
        expired = []
        for peer_id, queued_at in self._entries.items():
            if queued_at >= cutoff:
                break
            expired.append(peer_id)
        return expired

    def __contains__(self, peer_id: str) -> bool:
        return peer_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self):
        return iter(list(self._entries))
