#!/usr/bin/env python3
"""
Standalone WebSocket signaling broker, without FastAPI.

Speaks the same protocol as the /ws endpoint of the FastAPI app and drives the
same ConnectionLifecycleController, so both deployments pair and relay peers
identically. Every path is accepted as the signaling socket.

Usage:
    python3 standalone_server.py --port 8765
"""

import argparse
import asyncio
from typing import Optional

import websockets
from websockets.exceptions import ConnectionClosed

from constants import HOST, LOG_FILE, LOG_LEVEL, QUEUE_SWEEP_INTERVAL_SECONDS, QUEUE_TIMEOUT_SECONDS, STANDALONE_PORT
from logging_config import get_logger, setup_logging
from signaling.lifecycle import ConnectionLifecycleController, run_queue_sweeper
from signaling.transport import OutboundChannel

logger = get_logger(__name__)


def make_handler(controller: ConnectionLifecycleController):
    async def handler(websocket):
        channel = OutboundChannel(label=str(websocket.remote_address))
        peer_id = controller.on_open(channel)
        channel.label = peer_id
        writer = asyncio.create_task(channel.pump(websocket.send))
        try:
            async for message in websocket:
                controller.on_message(peer_id, message)
        except ConnectionClosed as exc:
            logger.info(f"Connection closed for peer {peer_id}: {exc}")
        except Exception as e:
            controller.on_error(peer_id, e)
        finally:
            controller.on_close(peer_id)
            channel.close()
            writer.cancel()
            try:
                await writer
            except asyncio.CancelledError:
                pass

    return handler


async def serve(
    host: str,
    port: int,
    controller: Optional[ConnectionLifecycleController] = None,
    ready: Optional[asyncio.Future] = None,
):
    """Run the broker until cancelled. `ready` receives the bound port."""
    controller = controller or ConnectionLifecycleController(queue_timeout=QUEUE_TIMEOUT_SECONDS)
    sweeper = None
    if controller.queue_timeout:
        sweeper = asyncio.create_task(run_queue_sweeper(controller, QUEUE_SWEEP_INTERVAL_SECONDS))

    try:
        async with websockets.serve(make_handler(controller), host, port) as server:
            bound_port = list(server.sockets)[0].getsockname()[1]
            logger.info(f"Signaling broker running at ws://{host}:{bound_port}")
            if ready is not None and not ready.done():
                ready.set_result(bound_port)
            await asyncio.Future()  # Run forever
    finally:
        if sweeper:
            sweeper.cancel()
            try:
                await sweeper
            except asyncio.CancelledError:
                pass


def main():
    parser = argparse.ArgumentParser(description="Standalone pairing signaling broker")
    parser.add_argument("--host", default=HOST, help="Interface to listen on")
    parser.add_argument("--port", type=int, default=STANDALONE_PORT, help="Port to listen on")
    parser.add_argument("--log-level", default=LOG_LEVEL)
    args = parser.parse_args()

    setup_logging(log_level=args.log_level, log_file=LOG_FILE)
    try:
        asyncio.run(serve(args.host, args.port))
    except KeyboardInterrupt:
        logger.info("Server stopped via KeyboardInterrupt.")


if __name__ == "__main__":
    main()
