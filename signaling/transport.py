import asyncio
from typing import Awaitable, Callable, Protocol

from constants import SEND_BUFFER_SIZE
from logging_config import get_logger

logger = get_logger(__name__)


class Connection(Protocol):
    """Outbound half of a transport connection as seen by the broker."""

    def send(self, data: str) -> bool:
        ...


class OutboundChannel:
    """Bounded, non-blocking outbound buffer for one WebSocket.

    The broker calls send() while holding its lock, so it must never wait on
    the network. Frames are queued and written by pump() running as a
    separate task; a full buffer or a closed channel makes send() fail fast.
    """

    def __init__(self, label: str = "", max_pending: int = SEND_BUFFER_SIZE):
        self.label = label
        self._pending: asyncio.Queue = asyncio.Queue(maxsize=max_pending)
        self._closed = False

    @property
    def closed(self) -> bool:
        return self._closed

    def send(self, data: str) -> bool:
        if self._closed:
            return False
        try:
            self._pending.put_nowait(data)
        except asyncio.QueueFull:
            logger.warning(f"Outbound buffer full for connection {self.label}, dropping frame")
            return False
        return True

    def close(self):
        self._closed = True

    async def pump(self, send_text: Callable[[str], Awaitable[None]]):
        """Write queued frames until the channel closes or the socket fails."""
        while not self._closed:
            data: str = await self._pending.get()
            try:
                await send_text(data)
            except Exception as e:
                logger.debug(f"Write failed on connection {self.label}: {e}")
                self._closed = True
                break
