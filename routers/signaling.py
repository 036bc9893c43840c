import asyncio

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from logging_config import get_logger
from signaling.lifecycle import ConnectionLifecycleController
from signaling.transport import OutboundChannel

logger = get_logger(__name__)

signaling_router = APIRouter(tags=["signaling"])


@signaling_router.websocket("/ws")
async def signaling_endpoint(websocket: WebSocket):
    """WebSocket endpoint peers use to join, leave and exchange negotiation messages."""
    controller: ConnectionLifecycleController = websocket.app.state.controller
    client = f"{websocket.client.host}:{websocket.client.port}" if websocket.client else "unknown"

    await websocket.accept()
    channel = OutboundChannel(label=client)
    peer_id = controller.on_open(channel)
    channel.label = peer_id
    logger.debug(f"WebSocket from {client} registered as peer {peer_id}")
    writer = asyncio.create_task(channel.pump(websocket.send_text))

    try:
        while True:
            message = await websocket.receive()
            if message["type"] == "websocket.disconnect":
                logger.info(f"WebSocket disconnected for peer {peer_id} (code: {message.get('code')})")
                break
            if message.get("text") is not None:
                controller.on_message(peer_id, message["text"])
            elif message.get("bytes") is not None:
                controller.on_message(peer_id, message["bytes"])
    except WebSocketDisconnect:
        logger.info(f"WebSocket disconnected for peer {peer_id}")
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
