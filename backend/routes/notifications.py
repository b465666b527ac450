from __future__ import annotations

import asyncio

from fastapi import APIRouter, Depends, WebSocket, WebSocketDisconnect
from fastapi.websockets import WebSocketState

from backend.application import get_claim_service, get_user_service, notification_counts
from backend.core.errors import AuthenticationError, NotFoundError
from backend.core.schema import User
from backend.core.settings import get_settings
from backend.domain import NotificationCounts
from backend.routes.deps import get_current_user
from backend.workers.notifications import NotificationPoller

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("")
def get_counts(user: User = Depends(get_current_user)) -> dict:
    return notification_counts(user, get_claim_service(), get_user_service()).as_dict()


@router.websocket("/stream")
async def stream_counts(websocket: WebSocket, user_id: str) -> None:
    """Push counters every interval; any client message forces an immediate refresh."""

    try:
        user = await asyncio.to_thread(get_user_service().resolve, user_id)
    except (NotFoundError, AuthenticationError):
        await websocket.close(code=4401)
        return

    await websocket.accept()

    async def push(counts: NotificationCounts) -> None:
        if websocket.client_state is WebSocketState.CONNECTED:
            await websocket.send_json(counts.as_dict())

    stop = asyncio.Event()
    poller = NotificationPoller(
        lambda: notification_counts(user, get_claim_service(), get_user_service()),
        interval=get_settings().notification_interval,
        on_update=push,
        stop_event=stop,
    )
    poller.start()
    try:
        while True:
            await websocket.receive_text()
            await poller.refresh()
    except WebSocketDisconnect:
        pass
    finally:
        await poller.stop()
