"""In-process notification hub for real-time events.

Connected WebSocket clients join named rooms (``user-<id>``, ``group-<id>``);
server code emits named events to a room and every live socket in it gets a
``{"event": ..., "data": ...}`` JSON frame. Delivery is best-effort: sockets
that fail to receive are dropped from every room.
"""
from collections import defaultdict
from enum import Enum
from typing import Any, Dict, Optional, Protocol, Set
from uuid import UUID

from fastapi.encoders import jsonable_encoder

from selfcare.utils.logger import get_logger

logger = get_logger(__name__)


class EventType(str, Enum):
    """Server-pushed event names."""
    FRIEND_REQUEST = "friend-request"
    CHALLENGE_PROGRESS = "challenge-progress"
    ACTIVITY_LIKE = "activity-like"
    GROUP_INVITATION = "group-invitation"
    NEW_AFFIRMATION = "new-affirmation"


class Connection(Protocol):
    async def send_json(self, data: Any) -> None: ...


def user_room(user_id: UUID) -> str:
    return f"user-{user_id}"


def group_room(group_id: UUID) -> str:
    return f"group-{group_id}"


class NotificationHub:
    """Room membership plus fan-out of events to connected sockets."""

    def __init__(self):
        self._rooms: Dict[str, Set[Connection]] = defaultdict(set)
        self._stats = {"total_emitted": 0, "dropped_connections": 0}

    def join(self, connection: Connection, room: str) -> None:
        self._rooms[room].add(connection)

    def leave(self, connection: Connection, room: str) -> None:
        members = self._rooms.get(room)
        if members is None:
            return
        members.discard(connection)
        if not members:
            del self._rooms[room]

    def disconnect(self, connection: Connection) -> None:
        """Remove a socket from every room it joined."""
        for room in list(self._rooms):
            self.leave(connection, room)

    def room_size(self, room: str) -> int:
        return len(self._rooms.get(room, ()))

    def rooms_of(self, connection: Connection) -> Set[str]:
        return {room for room, members in self._rooms.items() if connection in members}

    async def emit(
        self,
        room: str,
        event: str,
        data: Any,
        exclude: Optional[Connection] = None,
    ) -> int:
        """Send an event to every socket in a room.

        Args:
            room: Target room name.
            event: Event name (see EventType).
            data: JSON-serialisable payload.
            exclude: Socket that should not receive its own event.

        Returns:
            Number of sockets the frame was delivered to.
        """
        event_name = event.value if isinstance(event, EventType) else event
        frame = {"event": event_name, "data": jsonable_encoder(data)}
        delivered = 0
        dead = []

        for connection in list(self._rooms.get(room, ())):
            if connection is exclude:
                continue
            try:
                await connection.send_json(frame)
                delivered += 1
            except Exception as e:
                logger.warning(f"Dropping dead socket in {room}: {e}")
                dead.append(connection)

        for connection in dead:
            self.disconnect(connection)
            self._stats["dropped_connections"] += 1

        self._stats["total_emitted"] += 1
        return delivered

    async def emit_to_user(self, user_id: UUID, event: str, data: Any) -> int:
        return await self.emit(user_room(user_id), event, data)

    async def emit_to_group(self, group_id: UUID, event: str, data: Any) -> int:
        return await self.emit(group_room(group_id), event, data)

    def get_stats(self) -> dict:
        return {
            **self._stats,
            "rooms": len(self._rooms),
            "connections": len({c for members in self._rooms.values() for c in members}),
        }


# Global singleton instance
notification_hub = NotificationHub()


def get_notification_hub() -> NotificationHub:
    """FastAPI dependency returning the process-wide hub"""
    return notification_hub
