"""
SelfCare Planner - Activity Repository
Activities plus their likes, comments and shares
"""

from datetime import datetime
from typing import Any, Dict, List, Optional, Sequence, Tuple
from uuid import UUID

from sqlalchemy import distinct, func, select

from selfcare.models.database import ActivityCommentDB, ActivityDB, ActivityLikeDB, UserDB

from .base import BaseRepository

SORT_FIELDS = {
    "created_at": ActivityDB.created_at,
    "updated_at": ActivityDB.updated_at,
    "title": ActivityDB.title,
    "duration": ActivityDB.duration,
    "completed_at": ActivityDB.completed_at,
}


def _like_count():
    return (
        select(func.count(ActivityLikeDB.id))
        .where(ActivityLikeDB.activity_id == ActivityDB.id)
        .correlate(ActivityDB)
        .scalar_subquery()
    )


def _comment_count():
    return (
        select(func.count(ActivityCommentDB.id))
        .where(ActivityCommentDB.activity_id == ActivityDB.id)
        .correlate(ActivityDB)
        .scalar_subquery()
    )


def parse_sort(sort: str):
    """Translate ``-created_at`` style sort keys into an ORDER BY clause"""
    descending = sort.startswith("-")
    column = SORT_FIELDS.get(sort.lstrip("-"), ActivityDB.created_at)
    return column.desc() if descending else column.asc()


class ActivityRepository(BaseRepository):
    """Repository for wellness activities"""

    def create(self, activity: ActivityDB) -> ActivityDB:
        self.add(activity)
        return activity

    async def get_active(self, activity_id: UUID) -> Optional[ActivityDB]:
        result = await self.db.execute(
            select(ActivityDB).where(ActivityDB.id == activity_id, ActivityDB.is_active.is_(True))
        )
        return result.scalar_one_or_none()

    async def get_owned(self, activity_id: UUID, user_id: UUID) -> Optional[ActivityDB]:
        result = await self.db.execute(
            select(ActivityDB).where(
                ActivityDB.id == activity_id,
                ActivityDB.user_id == user_id,
                ActivityDB.is_active.is_(True),
            )
        )
        return result.scalar_one_or_none()

    async def list_for_user(
        self,
        user_id: UUID,
        filters: Dict[str, Any],
        sort: str = "-created_at",
        skip: int = 0,
        limit: int = 10,
    ) -> Tuple[List[ActivityDB], int]:
        """Page through a user's active activities; returns (page, total)"""
        conditions = [ActivityDB.user_id == user_id, ActivityDB.is_active.is_(True)]
        if filters.get("type"):
            conditions.append(ActivityDB.type == filters["type"])
        if filters.get("category"):
            conditions.append(ActivityDB.category == filters["category"])
        if filters.get("completed") is not None:
            conditions.append(ActivityDB.is_completed.is_(filters["completed"]))
        if filters.get("start_date"):
            conditions.append(ActivityDB.created_at >= filters["start_date"])
        if filters.get("end_date"):
            conditions.append(ActivityDB.created_at <= filters["end_date"])

        total = await self.db.scalar(select(func.count(ActivityDB.id)).where(*conditions))
        result = await self.db.execute(
            select(ActivityDB)
            .where(*conditions)
            .order_by(parse_sort(sort), ActivityDB.id)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars()), total or 0

    async def list_all_for_user(self, user_id: UUID) -> List[ActivityDB]:
        result = await self.db.execute(
            select(ActivityDB).where(ActivityDB.user_id == user_id).order_by(ActivityDB.created_at)
        )
        return list(result.scalars())

    async def created_since(self, user_id: UUID, since: datetime) -> List[ActivityDB]:
        result = await self.db.execute(
            select(ActivityDB)
            .where(
                ActivityDB.user_id == user_id,
                ActivityDB.is_active.is_(True),
                ActivityDB.created_at >= since,
            )
            .order_by(ActivityDB.created_at.desc())
        )
        return list(result.scalars())

    async def completed_since(self, user_id: UUID, since: datetime) -> List[ActivityDB]:
        result = await self.db.execute(
            select(ActivityDB)
            .where(
                ActivityDB.user_id == user_id,
                ActivityDB.is_completed.is_(True),
                ActivityDB.completed_at >= since,
            )
            .order_by(ActivityDB.completed_at.desc())
        )
        return list(result.scalars())

    async def find_created_since(
        self, user_id: UUID, activity_type: str, since: datetime
    ) -> Optional[ActivityDB]:
        """Most recent activity of a type created at or after ``since``"""
        result = await self.db.execute(
            select(ActivityDB)
            .where(
                ActivityDB.user_id == user_id,
                ActivityDB.type == activity_type,
                ActivityDB.is_active.is_(True),
                ActivityDB.created_at >= since,
            )
            .order_by(ActivityDB.created_at.desc())
            .limit(1)
        )
        return result.scalars().first()

    async def recent_shared_for_user(self, user_id: UUID, limit: int = 5) -> List[ActivityDB]:
        result = await self.db.execute(
            select(ActivityDB)
            .where(
                ActivityDB.user_id == user_id,
                ActivityDB.is_shared.is_(True),
                ActivityDB.is_active.is_(True),
            )
            .order_by(ActivityDB.created_at.desc())
            .limit(limit)
        )
        return list(result.scalars())

    async def completed_type_counts(self, user_id: UUID) -> Dict[str, int]:
        result = await self.db.execute(
            select(ActivityDB.type, func.count(ActivityDB.id))
            .where(ActivityDB.user_id == user_id, ActivityDB.is_completed.is_(True))
            .group_by(ActivityDB.type)
        )
        return {row[0]: row[1] for row in result}

    # ------------------------------------------------------------------ engagement

    async def trending(self, limit: int = 10) -> List[Tuple[ActivityDB, int, int]]:
        """
        Shared, active activities ranked by likes + 2 x comments, newest first on ties

        Returns:
            (activity, like_count, comment_count) tuples
        """
        likes = _like_count()
        comments = _comment_count()
        score = likes + 2 * comments
        result = await self.db.execute(
            select(ActivityDB, likes.label("like_count"), comments.label("comment_count"))
            .where(ActivityDB.is_shared.is_(True), ActivityDB.is_active.is_(True))
            .order_by(score.desc(), ActivityDB.created_at.desc())
            .limit(limit)
        )
        return [(row[0], row[1], row[2]) for row in result]

    async def shared_by_popularity(
        self,
        types: Optional[Sequence[str]] = None,
        category: Optional[str] = None,
        limit: int = 5,
    ) -> List[ActivityDB]:
        """Shared activities filtered by type or category, most liked first"""
        likes = _like_count()
        stmt = select(ActivityDB).where(
            ActivityDB.is_shared.is_(True), ActivityDB.is_active.is_(True)
        )
        if types is not None:
            stmt = stmt.where(ActivityDB.type.in_(list(types)))
        if category is not None:
            stmt = stmt.where(ActivityDB.category == category)
        result = await self.db.execute(
            stmt.order_by(likes.desc(), ActivityDB.created_at.desc()).limit(limit)
        )
        return list(result.scalars())

    async def feed(
        self, user_ids: Sequence[UUID], skip: int = 0, limit: int = 20
    ) -> Tuple[List[ActivityDB], int]:
        conditions = [
            ActivityDB.user_id.in_(list(user_ids)),
            ActivityDB.is_shared.is_(True),
            ActivityDB.is_active.is_(True),
        ]
        total = await self.db.scalar(select(func.count(ActivityDB.id)).where(*conditions))
        result = await self.db.execute(
            select(ActivityDB)
            .where(*conditions)
            .order_by(ActivityDB.created_at.desc(), ActivityDB.id)
            .offset(skip)
            .limit(limit)
        )
        return list(result.scalars()), total or 0

    async def social_leaders(
        self, since: Optional[datetime] = None, limit: int = 50
    ) -> List[Tuple[UUID, int, int]]:
        """
        Users ranked by likes received on their shared activities

        Returns:
            (user_id, total_likes, total_shared) tuples
        """
        total_likes = func.count(ActivityLikeDB.id)
        total_shared = func.count(distinct(ActivityDB.id))
        stmt = (
            select(ActivityDB.user_id, total_likes, total_shared)
            .join(UserDB, UserDB.id == ActivityDB.user_id)
            .outerjoin(ActivityLikeDB, ActivityLikeDB.activity_id == ActivityDB.id)
            .where(
                ActivityDB.is_shared.is_(True),
                ActivityDB.is_active.is_(True),
                UserDB.is_active.is_(True),
            )
        )
        if since is not None:
            stmt = stmt.where(ActivityDB.created_at >= since)
        stmt = (
            stmt.group_by(ActivityDB.user_id)
            .order_by(total_likes.desc(), total_shared.desc())
            .limit(limit)
        )
        result = await self.db.execute(stmt)
        return [(row[0], row[1], row[2]) for row in result]

    # ------------------------------------------------------------------ likes

    @staticmethod
    def find_like(activity: ActivityDB, user_id: UUID) -> Optional[ActivityLikeDB]:
        for like in activity.likes:
            if like.user_id == user_id:
                return like
        return None

    def add_like(self, activity: ActivityDB, user_id: UUID) -> bool:
        """Append a like unless the user already liked it; True when added"""
        if self.find_like(activity, user_id) is not None:
            return False
        activity.likes.append(ActivityLikeDB(user_id=user_id))
        return True

    def remove_like(self, activity: ActivityDB, user_id: UUID) -> bool:
        like = self.find_like(activity, user_id)
        if like is None:
            return False
        activity.likes.remove(like)
        return True
