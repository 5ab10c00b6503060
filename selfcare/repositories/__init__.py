"""
SelfCare Planner - Repositories
Data access layer over the async SQLAlchemy session
"""

from .activities import ActivityRepository
from .base import BaseRepository
from .groups import GroupRepository
from .users import UserRepository

__all__ = [
    "BaseRepository",
    "UserRepository",
    "ActivityRepository",
    "GroupRepository",
]
