"""
WebSocket Router for Completion Notifications

Responsibility:
    Relay the envelopes published on a user's private channel to that
    user's WebSocket connection.

Architecture Notes:
    - Part of API Layer (Presentation)
    - Channel ownership checked with CompletionNotifier.authorize_channel
      before the handshake is accepted
    - One Redis subscription per connection, released on disconnect
    - Best-effort delivery: nothing is replayed after a reconnect

Close codes:
    - 4401: no valid user id (query parameter user_id or X-User-Id header)
    - 4403: channel belongs to another user
    - 1011: subscription failed
"""

import asyncio
import logging
from typing import Optional

from fastapi import APIRouter, Depends, Header, Query, WebSocket
from starlette.websockets import WebSocketDisconnect

from src.api.dependencies import get_notifier, get_subscriber_factory, parse_user_id
from src.application.services import CompletionNotifier

logger = logging.getLogger(__name__)

CLOSE_UNAUTHENTICATED = 4401
CLOSE_FORBIDDEN = 4403
CLOSE_INTERNAL_ERROR = 1011

router = APIRouter(tags=["notifications"])


async def _relay(websocket: WebSocket, subscriber) -> None:
    async with subscriber:
        async for envelope in subscriber:
            await websocket.send_json(envelope)


async def _wait_for_disconnect(websocket: WebSocket) -> None:
    while True:
        message = await websocket.receive()
        if message["type"] == "websocket.disconnect":
            return


@router.websocket("/ws/notifications")
async def notifications(
    websocket: WebSocket,
    user_id: Optional[str] = Query(default=None),
    channel: Optional[str] = Query(default=None),
    x_user_id: Optional[str] = Header(default=None, alias="X-User-Id"),
    notifier: CompletionNotifier = Depends(get_notifier),
    subscriber_factory=Depends(get_subscriber_factory),
):
    """
    Subscribe to the caller's channel.

    ``channel`` defaults to the caller's own channel ("user.<id>").
    """
    caller_id = parse_user_id(user_id if user_id is not None else x_user_id)
    if caller_id is None:
        logger.warning("WebSocket refused: missing user id")
        await websocket.close(code=CLOSE_UNAUTHENTICATED)
        return

    channel = channel or notifier.channel_for_user(caller_id)
    if not notifier.authorize_channel(channel, caller_id):
        logger.warning(f"WebSocket refused: user {caller_id} asked for {channel}")
        await websocket.close(code=CLOSE_FORBIDDEN)
        return

    await websocket.accept()
    logger.info(f"WebSocket connected: user {caller_id} on {channel}")

    relay = asyncio.create_task(_relay(websocket, subscriber_factory(channel)))
    watcher = asyncio.create_task(_wait_for_disconnect(websocket))
    done, pending = await asyncio.wait(
        {relay, watcher}, return_when=asyncio.FIRST_COMPLETED
    )
    for task in pending:
        task.cancel()
    await asyncio.gather(*pending, return_exceptions=True)

    if watcher in done:
        logger.info(f"WebSocket disconnected: user {caller_id} on {channel}")
        return

    error = relay.exception()
    if error is None:
        await websocket.close()
    elif isinstance(error, WebSocketDisconnect):
        logger.info(f"WebSocket disconnected during send: user {caller_id}")
    else:
        logger.error(f"Notification relay failed on {channel}: {error}", exc_info=error)
        await websocket.close(code=CLOSE_INTERNAL_ERROR)
