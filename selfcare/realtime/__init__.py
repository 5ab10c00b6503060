"""Real-time notification relay."""

from .hub import (
    EventType,
    NotificationHub,
    get_notification_hub,
    group_room,
    notification_hub,
    user_room,
)

__all__ = [
    "EventType",
    "NotificationHub",
    "notification_hub",
    "get_notification_hub",
    "user_room",
    "group_room",
]
