"""
Activity Service
Activity CRUD, completion bookkeeping and social engagement on activities
"""

import math
from collections import Counter
from datetime import timedelta
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.models.activity import (
    ActivityComplete,
    ActivityCreate,
    ActivityResponse,
    ActivityShare,
    ActivityUpdate,
    CommentCreate,
    Pagination,
    TrendingActivity,
)
from selfcare.models.database import ActivityCommentDB, ActivityDB, ActivityShareDB, UserDB
from selfcare.models.user import AchievementResponse, StreakData, UserSummary
from selfcare.realtime.hub import EventType, NotificationHub, notification_hub
from selfcare.repositories.activities import ActivityRepository
from selfcare.repositories.users import UserRepository
from selfcare.utils.errors import ConflictError, NotFoundError, ValidationError
from selfcare.utils.logger import get_logger
from selfcare.utils.metrics import ACTIVITY_COMPLETIONS, metrics
from selfcare.utils.time import utcnow

from .achievements import auto_awards
from .serializers import activity_response, activity_user_ids, comment_response, trending_activity
from .streaks import update_streak

logger = get_logger(__name__)

ACTIVITY_NOT_FOUND = "Activity not found"


def paginate(page: int, limit: int, returned: int, total: int) -> Pagination:
    skip = (page - 1) * limit
    return Pagination(
        current=page,
        pages=math.ceil(total / limit) if limit else 0,
        total=total,
        has_next=skip + returned < total,
        has_prev=page > 1,
    )


class ActivityService:
    """Business logic for a user's wellness activities"""

    def __init__(self, db_session: AsyncSession, notifier: Optional[NotificationHub] = None):
        self.db = db_session
        self.activity_repo = ActivityRepository(db_session)
        self.user_repo = UserRepository(db_session)
        self.notifier = notifier or notification_hub

    async def render_many(self, activities: List[ActivityDB]) -> List[ActivityResponse]:
        users = await self.user_repo.get_many(activity_user_ids(activities))
        return [activity_response(a, users) for a in activities]

    async def render_one(self, activity: ActivityDB) -> ActivityResponse:
        return (await self.render_many([activity]))[0]

    async def _get_owned(self, user: UserDB, activity_id: UUID) -> ActivityDB:
        activity = await self.activity_repo.get_owned(activity_id, user.id)
        if activity is None:
            raise NotFoundError(ACTIVITY_NOT_FOUND)
        return activity

    async def _get_visible(self, activity_id: UUID) -> ActivityDB:
        activity = await self.activity_repo.get_active(activity_id)
        if activity is None:
            raise NotFoundError(ACTIVITY_NOT_FOUND)
        return activity

    # ========================================================================
    # CRUD
    # ========================================================================

    async def list_activities(
        self,
        user: UserDB,
        page: int = 1,
        limit: int = 10,
        filters: Optional[Dict[str, Any]] = None,
        sort: str = "-created_at",
    ) -> Dict[str, Any]:
        activities, total = await self.activity_repo.list_for_user(
            user.id, filters or {}, sort=sort, skip=(page - 1) * limit, limit=limit
        )
        return {
            "activities": await self.render_many(activities),
            "pagination": paginate(page, limit, len(activities), total),
        }

    async def get_activity(self, user: UserDB, activity_id: UUID) -> ActivityResponse:
        return await self.render_one(await self._get_owned(user, activity_id))

    async def create_activity(self, user: UserDB, data: ActivityCreate) -> ActivityResponse:
        activity = self.activity_repo.create(
            ActivityDB(
                user_id=user.id,
                **data.model_dump(mode="json", exclude={"scheduled_for"}),
                scheduled_for=data.scheduled_for,
                is_ai_generated=False,
                likes=[],
                comments=[],
                shares=[],
            )
        )
        await self.activity_repo.commit()
        logger.info(f"Activity {activity.id} created by user {user.id}")
        return await self.render_one(activity)

    async def update_activity(
        self, user: UserDB, activity_id: UUID, data: ActivityUpdate
    ) -> ActivityResponse:
        activity = await self._get_owned(user, activity_id)
        changes = data.model_dump(exclude_unset=True, mode="json", exclude={"scheduled_for"})
        for field, value in changes.items():
            if value is not None or field == "description":
                setattr(activity, field, value)
        if "scheduled_for" in data.model_fields_set:
            activity.scheduled_for = data.scheduled_for
        await self.activity_repo.commit()
        return await self.render_one(activity)

    async def delete_activity(self, user: UserDB, activity_id: UUID) -> None:
        """Soft delete"""
        activity = await self._get_owned(user, activity_id)
        activity.is_active = False
        await self.activity_repo.commit()
        logger.info(f"Activity {activity_id} deleted by user {user.id}")

    # ========================================================================
    # COMPLETION
    # ========================================================================

    async def complete_activity(
        self, user: UserDB, activity_id: UUID, data: ActivityComplete
    ) -> Dict[str, Any]:
        """
        Mark an activity completed and update the owner's streak in one transaction

        Raises:
            NotFoundError: Unknown or foreign activity
            ConflictError: Activity already completed
        """
        activity = await self._get_owned(user, activity_id)
        if activity.is_completed:
            raise ConflictError("Activity already completed")

        now = utcnow()
        activity.is_completed = True
        activity.completed_at = now
        for field, value in data.model_dump(mode="json").items():
            setattr(activity, field, value)

        update_streak(user, now)
        unlocked = auto_awards(user)
        await self.activity_repo.commit()

        ACTIVITY_COMPLETIONS.inc()
        metrics.log_event(
            "activity_completed",
            {"activity_id": str(activity.id), "type": activity.type, "streak": user.current_streak},
            user_id=str(user.id),
        )

        return {
            "message": "Activity completed successfully",
            "activity": await self.render_one(activity),
            "streak_data": StreakData.from_user(user),
            "achievements_unlocked": [AchievementResponse.model_validate(a) for a in unlocked],
        }

    # ========================================================================
    # SOCIAL
    # ========================================================================

    async def toggle_like(self, user: UserDB, activity_id: UUID) -> Dict[str, Any]:
        activity = await self._get_visible(activity_id)

        if self.activity_repo.find_like(activity, user.id) is not None:
            self.activity_repo.remove_like(activity, user.id)
            is_liked = False
        else:
            self.activity_repo.add_like(activity, user.id)
            is_liked = True
        await self.activity_repo.commit()

        like_count = len(activity.likes)
        if is_liked and activity.user_id != user.id:
            await self.notifier.emit_to_user(
                activity.user_id,
                EventType.ACTIVITY_LIKE,
                {
                    "activity_id": activity.id,
                    "user": UserSummary.from_user(user),
                    "like_count": like_count,
                },
            )

        return {
            "message": "Activity liked" if is_liked else "Activity unliked",
            "like_count": like_count,
            "is_liked": is_liked,
        }

    async def add_comment(self, user: UserDB, activity_id: UUID, data: CommentCreate) -> Dict[str, Any]:
        activity = await self._get_visible(activity_id)
        comment = ActivityCommentDB(user_id=user.id, content=data.content)
        activity.comments.append(comment)
        await self.activity_repo.commit()

        return {
            "message": "Comment added successfully",
            "comment": comment_response(comment, {user.id: user}),
            "comment_count": len(activity.comments),
        }

    async def share_activity(self, user: UserDB, activity_id: UUID, data: ActivityShare) -> Dict[str, Any]:
        """Make an activity public and/or share it with specific users (no duplicate shares)"""
        activity = await self._get_owned(user, activity_id)

        if data.make_public:
            activity.is_shared = True

        recipients = [uid for uid in dict.fromkeys(data.share_with) if uid != user.id]
        if recipients:
            known = await self.user_repo.get_many(recipients)
            missing = [str(uid) for uid in recipients if uid not in known]
            if missing:
                raise ValidationError("Cannot share with unknown users", details={"user_ids": missing})

            already = {share.user_id for share in activity.shares}
            for uid in recipients:
                if uid not in already:
                    activity.shares.append(ActivityShareDB(user_id=uid, shared_at=utcnow()))

        await self.activity_repo.commit()
        return {
            "message": "Activity shared successfully",
            "activity": await self.render_one(activity),
        }

    # ========================================================================
    # AGGREGATES
    # ========================================================================

    async def trending(self, limit: int = 10) -> List[TrendingActivity]:
        rows = await self.activity_repo.trending(limit)
        users = await self.user_repo.get_many(activity.user_id for activity, _, _ in rows)
        return [trending_activity(a, likes, comments, users) for a, likes, comments in rows]

    async def stats_summary(self, user: UserDB) -> Dict[str, Any]:
        activities = await self.activity_repo.list_all_for_user(user.id)
        completed = [a for a in activities if a.is_completed]
        ratings = [a.rating for a in activities if a.rating is not None]

        week_ago = utcnow() - timedelta(days=7)
        weekly = await self.activity_repo.created_since(user.id, week_ago)
        weekly_completed = sum(1 for a in weekly if a.is_completed)

        mood_trends = Counter(a.mood_after for a in completed if a.mood_after)

        return {
            "stats": {
                "total_activities": len(activities),
                "completed_activities": len(completed),
                "average_rating": round(sum(ratings) / len(ratings), 2) if ratings else 0,
                "activities_by_type": dict(Counter(a.type for a in activities)),
                "activities_by_category": dict(Counter(a.category for a in activities)),
                "weekly_progress": {
                    "total": len(weekly),
                    "completed": weekly_completed,
                    "completion_rate": (weekly_completed / len(weekly) * 100) if weekly else 0,
                },
                "mood_trends": [
                    {"mood": mood, "count": count} for mood, count in mood_trends.most_common()
                ],
            }
        }
