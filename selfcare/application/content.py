"""
Content Service
Personalised content: daily affirmation, generated activities, recommendations,
motivational messages and the daily dashboard
"""

from datetime import datetime, timedelta
from typing import Any, Dict, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.content import (
    ContentGenerationError,
    ContentGenerator,
    ContentKind,
    ContentProfile,
    GeneratedContent,
    get_content_generator,
)
from selfcare.content.generator import FALLBACK_ACTIVITY_TITLE
from selfcare.models.database import ActivityDB, UserDB
from selfcare.models.enums import ActivityType
from selfcare.models.user import Preferences, StreakData
from selfcare.repositories.activities import ActivityRepository
from selfcare.utils.errors import ServiceError
from selfcare.utils.logger import get_logger
from selfcare.utils.metrics import metrics
from selfcare.utils.time import start_of_day, utcnow

from .activities import ActivityService
from .insights import time_of_day_bucket

logger = get_logger(__name__)

MOOD_ACTIVITY_TYPES: Dict[str, List[str]] = {
    "stressed": ["breathing", "meditation", "stretching"],
    "anxious": ["breathing", "meditation", "journaling"],
    "sad": ["exercise", "music", "journaling"],
    "neutral": ["meditation", "reading", "stretching"],
    "happy": ["exercise", "music", "socializing"],
    "excited": ["exercise", "creative", "socializing"],
    "calm": ["reading", "meditation", "skincare"],
    "energetic": ["exercise", "dancing", "creative"],
}
DEFAULT_MOOD_ACTIVITY_TYPES = ["meditation", "breathing"]

TIME_OF_DAY_TYPES: Dict[str, List[str]] = {
    "morning": ["meditation", "stretching", "journaling"],
    "afternoon": ["breathing", "exercise", "reading"],
    "evening": ["stretching", "skincare", "music"],
    "night": ["meditation", "breathing", "reading"],
}

# Requested generate-activity type -> content kind; anything else is a full activity
REQUESTED_KINDS = {
    "journaling": ContentKind.JOURNALING_PROMPT,
    "wellness-tip": ContentKind.WELLNESS_TIP,
}

RECENT_TYPES_DAYS = 7
DASHBOARD_SUGGESTIONS = 3
DASHBOARD_RECENT = 5


def suggested_types(now: datetime, preferences: Preferences) -> List[str]:
    """Time-of-day activity types, narrowed to the user's preferred types when set"""
    types = TIME_OF_DAY_TYPES[time_of_day_bucket(now)]
    preferred = {t.value for t in preferences.content_preferences.preferred_activity_types}
    if preferred:
        types = [t for t in types if t in preferred]
    return types


class ContentService:
    """Language-model backed content stored as the user's activities"""

    def __init__(self, db_session: AsyncSession, generator: Optional[ContentGenerator] = None):
        self.db = db_session
        self.activity_repo = ActivityRepository(db_session)
        self.activities = ActivityService(db_session)
        self.generator = generator or get_content_generator()

    def _store(self, user: UserDB, generated: GeneratedContent, **overrides) -> ActivityDB:
        fields = {
            "type": (generated.activity_type or ActivityType.CUSTOM).value,
            "category": user.primary_goal,
            "title": generated.title or FALLBACK_ACTIVITY_TITLE,
            "content": generated.content,
            "description": generated.description,
            "duration": generated.duration or 5,
            "difficulty": generated.difficulty.value if generated.difficulty else "beginner",
            "tags": generated.tags or [],
            "ai_prompt": generated.prompt,
        }
        fields.update(overrides)
        return self.activity_repo.create(
            ActivityDB(
                user_id=user.id,
                is_ai_generated=True,
                likes=[],
                comments=[],
                shares=[],
                **fields,
            )
        )

    async def _generate(
        self, kind: ContentKind, user: UserDB, context: Optional[str] = None
    ) -> GeneratedContent:
        return await self.generator.generate(kind, ContentProfile.from_user(user), context)

    # ========================================================================
    # GENERATION
    # ========================================================================

    async def daily_affirmation(self, user: UserDB) -> Dict[str, Any]:
        """Today's affirmation, generating and storing one on the first call of the day"""
        today = start_of_day(utcnow())
        existing = await self.activity_repo.find_created_since(
            user.id, ActivityType.AFFIRMATION.value, today
        )
        if existing is not None:
            return {"affirmation": await self.activities.render_one(existing), "is_new": False}

        try:
            generated = await self._generate(ContentKind.AFFIRMATION, user)
        except ContentGenerationError as e:
            raise ServiceError("Error generating daily affirmation") from e

        affirmation = self._store(
            user,
            generated,
            type=ActivityType.AFFIRMATION.value,
            title="Daily Affirmation",
            description="Your personalized daily affirmation",
        )
        await self.activity_repo.commit()
        metrics.log_event("affirmation_generated", {"activity_id": str(affirmation.id)}, user_id=str(user.id))
        return {"affirmation": await self.activities.render_one(affirmation), "is_new": True}

    async def generate_activity(
        self,
        user: UserDB,
        activity_type: Optional[str] = None,
        custom_prompt: Optional[str] = None,
    ) -> Dict[str, Any]:
        kind = REQUESTED_KINDS.get(activity_type or "", ContentKind.ACTIVITY)
        try:
            generated = await self._generate(kind, user, custom_prompt)
        except ContentGenerationError as e:
            raise ServiceError("Error generating activity") from e

        activity = self._store(user, generated)
        await self.activity_repo.commit()
        logger.info(f"Generated {kind.value} activity {activity.id} for user {user.id}")
        return {
            "activity": await self.activities.render_one(activity),
            "message": "Activity generated successfully",
        }

    async def motivational_message(self, user: UserDB, context: Optional[str] = None) -> Dict[str, Any]:
        try:
            generated = await self._generate(ContentKind.MOTIVATIONAL_MESSAGE, user, context)
        except ContentGenerationError as e:
            raise ServiceError("Error generating motivational message") from e
        return {"message": generated.content, "context": context, "generated_at": utcnow()}

    # ========================================================================
    # DISCOVERY
    # ========================================================================

    async def recommendations(self, user: UserDB) -> Dict[str, Any]:
        since = utcnow() - timedelta(days=RECENT_TYPES_DAYS)
        recent = await self.activity_repo.created_since(user.id, since)
        goal_based = await self.activity_repo.shared_by_popularity(category=user.primary_goal, limit=5)
        mood_types = MOOD_ACTIVITY_TYPES.get(user.current_mood, DEFAULT_MOOD_ACTIVITY_TYPES)
        mood_based = await self.activity_repo.shared_by_popularity(types=mood_types, limit=3)

        return {
            "recommendations": {
                "trending": await self.activities.trending(5),
                "goal_based": await self.activities.render_many(goal_based),
                "mood_based": await self.activities.render_many(mood_based),
                "recent_types": [a.type for a in recent],
            }
        }

    async def _todays_tip(self, user: UserDB, todays: List[ActivityDB]) -> Optional[ActivityDB]:
        tip = next((a for a in todays if a.type == ActivityType.TIP.value), None)
        if tip is not None:
            return tip
        try:
            generated = await self._generate(ContentKind.WELLNESS_TIP, user)
        except ContentGenerationError as e:
            logger.warning(f"Skipping dashboard wellness tip for user {user.id}: {e}")
            return None
        tip = self._store(user, generated)
        await self.activity_repo.commit()
        return tip

    async def daily_dashboard(self, user: UserDB) -> Dict[str, Any]:
        """
        Everything the home screen needs for today

        A failed wellness tip generation leaves ``wellness_tip`` empty
        instead of failing the dashboard.
        """
        now = utcnow()
        todays = await self.activity_repo.created_since(user.id, start_of_day(now))
        affirmation = next((a for a in todays if a.type == ActivityType.AFFIRMATION.value), None)
        tip = await self._todays_tip(user, todays)
        if tip is not None and all(a.id != tip.id for a in todays):
            todays = [tip, *todays]
        completed_today = sum(1 for a in todays if a.is_completed)

        types = suggested_types(now, Preferences.from_stored(user.preferences))
        suggested = await self.activity_repo.shared_by_popularity(types=types, limit=5)

        return {
            "dashboard": {
                "user": {
                    "name": user.first_name or user.username,
                    "current_mood": user.current_mood,
                    "primary_goal": user.primary_goal,
                    "avatar": user.avatar,
                },
                "streak": StreakData.from_user(user),
                "todays_progress": {
                    "activities_completed": completed_today,
                    "total_activities": len(todays),
                    "completion_rate": (completed_today / len(todays) * 100) if todays else 0,
                },
                "content": {
                    "daily_affirmation": await self.activities.render_one(affirmation) if affirmation else None,
                    "wellness_tip": await self.activities.render_one(tip) if tip else None,
                    "suggested_activities": await self.activities.render_many(suggested[:DASHBOARD_SUGGESTIONS]),
                },
                "recent_activities": await self.activities.render_many(todays[:DASHBOARD_RECENT]),
            }
        }
