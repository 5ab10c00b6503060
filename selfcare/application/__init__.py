"""
SelfCare Planner - Application Layer
Services orchestrating repositories, domain rules and notifications
"""

from .activities import ActivityService
from .analytics import AnalyticsService
from .content import ContentService
from .groups import GroupService
from .social import SocialService
from .users import UserService

__all__ = [
    "ActivityService",
    "AnalyticsService",
    "ContentService",
    "GroupService",
    "SocialService",
    "UserService",
]
