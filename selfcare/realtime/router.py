"""
SelfCare Planner - Real-time Gateway
WebSocket endpoint relaying notifications between connected clients
"""

import json
from typing import Any, Dict, List, Optional, Tuple
from uuid import UUID

from fastapi import APIRouter, Depends, Query, WebSocket, WebSocketDisconnect, status

from selfcare.auth.dependencies import load_active_user
from selfcare.database import db_manager
from selfcare.repositories.groups import GroupRepository
from selfcare.utils.logger import get_logger

from .hub import EventType, NotificationHub, get_notification_hub, group_room, user_room

logger = get_logger(__name__)

router = APIRouter(tags=["realtime"])


async def _authenticate(token: Optional[str]) -> Optional[Tuple[UUID, List[UUID]]]:
    """Resolve the token to (user id, active group ids), or None"""
    if not token:
        return None
    async with db_manager.get_session() as db:
        user = await load_active_user(db, token)
        if user is None:
            return None
        return user.id, await GroupRepository(db).active_group_ids_for_user(user.id)


async def _is_group_member(user_id: UUID, group_id: UUID) -> bool:
    async with db_manager.get_session() as db:
        return group_id in await GroupRepository(db).active_group_ids_for_user(user_id)


def _parse_uuid(value: Any) -> Optional[UUID]:
    try:
        return UUID(str(value))
    except ValueError:
        return None


async def _send_error(websocket: WebSocket, message: str) -> None:
    await websocket.send_json({"event": "error", "data": {"message": message}})


class SocketSession:
    """Handles client frames for one authenticated socket"""

    def __init__(self, websocket: WebSocket, hub: NotificationHub, user_id: UUID):
        self.websocket = websocket
        self.hub = hub
        self.user_id = user_id

    async def handle(self, frame: Dict[str, Any]) -> None:
        event = frame.get("event")
        data = frame.get("data")
        handler = {
            "join-room": self.join_room,
            "join-group": self.join_group,
            "share-affirmation": self.share_affirmation,
            "challenge-update": self.challenge_update,
        }.get(event)
        if handler is None:
            await _send_error(self.websocket, f"Unknown event: {event}")
            return
        await handler(data)

    async def join_room(self, data: Any) -> None:
        # Clients may only (re)join their own user room
        if _parse_uuid(data) != self.user_id:
            await _send_error(self.websocket, "Cannot join another user's room")
            return
        self.hub.join(self.websocket, user_room(self.user_id))

    async def join_group(self, data: Any) -> None:
        group_id = _parse_uuid(data.get("group_id") if isinstance(data, dict) else data)
        if group_id is None or not await _is_group_member(self.user_id, group_id):
            await _send_error(self.websocket, "Not a member of this group")
            return
        self.hub.join(self.websocket, group_room(group_id))

    async def share_affirmation(self, data: Any) -> None:
        recipient_id = _parse_uuid(data.get("recipient_id")) if isinstance(data, dict) else None
        if recipient_id is None:
            await _send_error(self.websocket, "recipient_id is required")
            return
        await self.hub.emit(
            user_room(recipient_id),
            EventType.NEW_AFFIRMATION,
            {**data, "from_user_id": self.user_id},
            exclude=self.websocket,
        )

    async def challenge_update(self, data: Any) -> None:
        group_id = _parse_uuid(data.get("group_id")) if isinstance(data, dict) else None
        room = group_room(group_id) if group_id else None
        if room is None or room not in self.hub.rooms_of(self.websocket):
            await _send_error(self.websocket, "Join the group before sending challenge updates")
            return
        await self.hub.emit(
            room,
            EventType.CHALLENGE_PROGRESS,
            {**data, "user_id": self.user_id},
            exclude=self.websocket,
        )


@router.websocket("/ws")
async def notifications_socket(
    websocket: WebSocket,
    token: Optional[str] = Query(None),
    hub: NotificationHub = Depends(get_notification_hub),
):
    """
    Authenticated notification channel

    Frames in both directions are ``{"event": ..., "data": ...}``. On connect
    the socket joins the user's own room and the rooms of their active groups.
    """
    identity = await _authenticate(token)
    if identity is None:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    user_id, group_ids = identity
    await websocket.accept()
    hub.join(websocket, user_room(user_id))
    for group_id in group_ids:
        hub.join(websocket, group_room(group_id))
    logger.info(f"Socket connected for user {user_id} ({len(group_ids)} group rooms)")

    session = SocketSession(websocket, hub, user_id)
    try:
        while True:
            raw = await websocket.receive_text()
            try:
                frame = json.loads(raw)
            except json.JSONDecodeError:
                await _send_error(websocket, "Frames must be JSON objects")
                continue
            if not isinstance(frame, dict):
                await _send_error(websocket, "Frames must be JSON objects")
                continue
            await session.handle(frame)
    except WebSocketDisconnect:
        logger.info(f"Socket disconnected for user {user_id}")
    finally:
        hub.disconnect(websocket)
