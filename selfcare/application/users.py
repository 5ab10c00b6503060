"""
User Service
Search, public profiles, leaderboards, suggestions, achievements and privacy
"""

from collections import Counter
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.models.analytics import FriendSuggestion, LeaderboardResponse
from selfcare.models.database import UserDB
from selfcare.models.enums import FriendStatus, ProfileVisibility
from selfcare.models.user import (
    AchievementResponse,
    AchievementUnlock,
    PrivacySettings,
    PrivacyUpdate,
    UserSummary,
)
from selfcare.repositories.activities import ActivityRepository
from selfcare.repositories.users import UserRepository
from selfcare.utils.errors import AuthorizationError, ConflictError, NotFoundError, ValidationError
from selfcare.utils.logger import get_logger
from selfcare.utils.time import utcnow

from .achievements import award
from .engagement import LEADERBOARD_TYPES, find_rank, period_start, rank_entries, suggest_friends

logger = get_logger(__name__)

MIN_SEARCH_LENGTH = 2
SUGGESTION_SCAN_LIMIT = 500


class UserService:
    """Business logic for user-facing account views"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.user_repo = UserRepository(db_session)
        self.activity_repo = ActivityRepository(db_session)

    async def search(self, user: UserDB, query: Optional[str], limit: int = 10) -> List[Dict[str, Any]]:
        needle = (query or "").strip()
        if len(needle) < MIN_SEARCH_LENGTH:
            raise ValidationError("Search query must be at least 2 characters")

        found = await self.user_repo.search(needle, exclude_id=user.id, limit=limit)
        return [
            {
                **UserSummary.from_user(u).model_dump(),
                "current_streak": u.current_streak or 0,
                "created_at": u.created_at,
            }
            for u in found
        ]

    async def get_profile(self, viewer: UserDB, user_id: UUID) -> Dict[str, Any]:
        """
        Public profile of another user, subject to their privacy settings

        Raises:
            NotFoundError: Unknown or deactivated user
            AuthorizationError: Private profile, or friends-only and not a friend
        """
        user = await self.user_repo.get_by_id(user_id)
        if user is None or not user.is_active:
            raise NotFoundError("User not found")

        is_own = user.id == viewer.id
        is_friend = user.id in self.user_repo.friend_ids(viewer, FriendStatus.ACCEPTED.value)

        if not is_own:
            if user.profile_visibility == ProfileVisibility.PRIVATE.value:
                raise AuthorizationError("Profile is private")
            if user.profile_visibility == ProfileVisibility.FRIENDS.value and not is_friend:
                raise AuthorizationError("Profile is only visible to friends")

        recent = []
        if user.share_progress or is_friend or is_own:
            recent = [
                {
                    "id": a.id,
                    "type": a.type,
                    "category": a.category,
                    "title": a.title,
                    "is_completed": a.is_completed,
                    "like_count": len(a.likes),
                    "created_at": a.created_at,
                }
                for a in await self.activity_repo.recent_shared_for_user(user.id)
            ]

        type_counts = Counter(await self.activity_repo.completed_type_counts(user.id))
        favorite = type_counts.most_common(1)[0][0] if type_counts else None

        return {
            "id": user.id,
            "username": user.username,
            "profile": {
                "first_name": user.first_name or "",
                "last_name": user.last_name or "",
                "avatar": user.avatar or "",
                "bio": user.bio,
            },
            "streak_data": {
                "current_streak": user.current_streak,
                "longest_streak": user.longest_streak,
                "total_activities_completed": user.total_activities_completed,
            },
            "achievements": [AchievementResponse.model_validate(a) for a in user.achievements],
            "stats": {
                "total_completed": sum(type_counts.values()),
                "favorite_activity_type": favorite,
                "member_since": user.created_at,
            },
            "recent_activities": recent,
            "relationship": {"is_friend": is_friend, "is_own_profile": is_own},
        }

    async def leaderboard(
        self, user: UserDB, board_type: str = "streak", period: str = "all", limit: int = 50
    ) -> LeaderboardResponse:
        if board_type not in LEADERBOARD_TYPES:
            raise ValidationError("Invalid leaderboard type")

        since = period_start(period, utcnow())

        if board_type == "streak":
            users = await self.user_repo.list_active(
                order_by=[UserDB.current_streak.desc(), UserDB.longest_streak.desc()],
                since=since,
                limit=limit,
            )
            rows = [(u, u.current_streak or 0) for u in users]
        elif board_type == "activities":
            users = await self.user_repo.list_active(
                order_by=[UserDB.total_activities_completed.desc()], since=since, limit=limit
            )
            rows = [(u, u.total_activities_completed or 0) for u in users]
        else:
            leaders = await self.activity_repo.social_leaders(since=since, limit=limit)
            users_by_id = await self.user_repo.get_many(uid for uid, _, _ in leaders)
            rows = [(users_by_id[uid], likes) for uid, likes, _ in leaders if uid in users_by_id]

        entries = rank_entries(board_type, rows)
        return LeaderboardResponse(
            leaderboard=entries,
            current_user_rank=find_rank(entries, user.id),
            type=board_type,
            period=period,
            total=len(entries),
        )

    async def suggestions(self, user: UserDB) -> List[FriendSuggestion]:
        related = set(self.user_repo.friend_ids(user)) | {user.id}
        candidates = await self.user_repo.list_suggestion_candidates(related, scan_limit=SUGGESTION_SCAN_LIMIT)
        return suggest_friends(user, candidates)

    async def unlock_achievement(self, user: UserDB, data: AchievementUnlock) -> AchievementResponse:
        achievement = award(user, data.type, data.description)
        if achievement is None:
            raise ConflictError("Achievement already unlocked")
        await self.user_repo.commit()
        logger.info(f"Achievement {data.type.value} unlocked for user {user.id}")
        return AchievementResponse.model_validate(achievement)

    async def update_privacy(self, user: UserDB, data: PrivacyUpdate) -> PrivacySettings:
        if data.profile_visibility is not None:
            user.profile_visibility = data.profile_visibility.value
        if data.share_progress is not None:
            user.share_progress = data.share_progress
        await self.user_repo.commit()
        return PrivacySettings(profile_visibility=user.profile_visibility, share_progress=user.share_progress)
