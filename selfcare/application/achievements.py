"""
Achievements
Unlock rules and descriptions for user achievements
"""

from typing import List, Optional

from selfcare.models.database import AchievementDB, UserDB
from selfcare.models.enums import AchievementType
from selfcare.utils.time import utcnow

DESCRIPTIONS = {
    AchievementType.FIRST_ACTIVITY: "Completed your first wellness activity",
    AchievementType.WEEK_STREAK: "Maintained a 7-day activity streak",
    AchievementType.MONTH_STREAK: "Maintained a 30-day activity streak",
    AchievementType.SOCIAL_BUTTERFLY: "Shared 10 activities with friends",
    AchievementType.GOAL_ACHIEVER: "Completed 50 activities toward your primary goal",
}

WEEK_STREAK_DAYS = 7
MONTH_STREAK_DAYS = 30


def has_achievement(user: UserDB, achievement_type: AchievementType) -> bool:
    return any(a.type == achievement_type.value for a in user.achievements)


def award(
    user: UserDB,
    achievement_type: AchievementType,
    description: Optional[str] = None,
) -> Optional[AchievementDB]:
    """Append an achievement unless already unlocked; returns the new row or None"""
    if has_achievement(user, achievement_type):
        return None
    achievement = AchievementDB(
        type=achievement_type.value,
        description=description or DESCRIPTIONS[achievement_type],
        unlocked_at=utcnow(),
    )
    user.achievements.append(achievement)
    return achievement


def auto_awards(user: UserDB) -> List[AchievementDB]:
    """Unlock the streak and first-activity achievements a completion earned"""
    earned = []
    if (user.total_activities_completed or 0) >= 1:
        earned.append(award(user, AchievementType.FIRST_ACTIVITY))
    if (user.current_streak or 0) >= WEEK_STREAK_DAYS:
        earned.append(award(user, AchievementType.WEEK_STREAK))
    if (user.current_streak or 0) >= MONTH_STREAK_DAYS:
        earned.append(award(user, AchievementType.MONTH_STREAK))
    return [a for a in earned if a is not None]
