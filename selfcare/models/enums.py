"""
SelfCare Planner Enumerations
Fixed vocabularies shared by the ORM models and API schemas
"""

from enum import Enum


class Mood(str, Enum):
    STRESSED = "stressed"
    ANXIOUS = "anxious"
    SAD = "sad"
    NEUTRAL = "neutral"
    HAPPY = "happy"
    EXCITED = "excited"
    CALM = "calm"
    ENERGETIC = "energetic"


class PrimaryGoal(str, Enum):
    STRESS_RELIEF = "stress_relief"
    CONFIDENCE_BUILDING = "confidence_building"
    RELAXATION = "relaxation"
    MINDFULNESS = "mindfulness"
    PRODUCTIVITY = "productivity"
    SLEEP_IMPROVEMENT = "sleep_improvement"


class ActivityType(str, Enum):
    AFFIRMATION = "affirmation"
    MEDITATION = "meditation"
    JOURNALING = "journaling"
    EXERCISE = "exercise"
    BREATHING = "breathing"
    STRETCHING = "stretching"
    SKINCARE = "skincare"
    READING = "reading"
    MUSIC = "music"
    TIP = "tip"
    CUSTOM = "custom"


class PreferredActivityType(str, Enum):
    """Activity types a user can list in their content preferences"""

    MEDITATION = "meditation"
    JOURNALING = "journaling"
    EXERCISE = "exercise"
    BREATHING = "breathing"
    STRETCHING = "stretching"
    SKINCARE = "skincare"
    READING = "reading"
    MUSIC = "music"


class Difficulty(str, Enum):
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class ColorScheme(str, Enum):
    PASTEL_PINK = "pastel_pink"
    LAVENDER_MINT = "lavender_mint"
    SUNSET_PEACH = "sunset_peach"
    OCEAN_BREEZE = "ocean_breeze"


class FriendStatus(str, Enum):
    PENDING = "pending"
    ACCEPTED = "accepted"
    BLOCKED = "blocked"


class ProfileVisibility(str, Enum):
    PUBLIC = "public"
    FRIENDS = "friends"
    PRIVATE = "private"


class AchievementType(str, Enum):
    FIRST_ACTIVITY = "first_activity"
    WEEK_STREAK = "week_streak"
    MONTH_STREAK = "month_streak"
    SOCIAL_BUTTERFLY = "social_butterfly"
    GOAL_ACHIEVER = "goal_achiever"


class GroupCategory(str, Enum):
    STRESS_RELIEF = "stress_relief"
    CONFIDENCE_BUILDING = "confidence_building"
    RELAXATION = "relaxation"
    MINDFULNESS = "mindfulness"
    PRODUCTIVITY = "productivity"
    SLEEP_IMPROVEMENT = "sleep_improvement"
    GENERAL = "general"


class GroupPrivacy(str, Enum):
    PUBLIC = "public"
    PRIVATE = "private"
    INVITE_ONLY = "invite_only"


class MemberRole(str, Enum):
    ADMIN = "admin"
    MODERATOR = "moderator"
    MEMBER = "member"


class ChallengeType(str, Enum):
    DAILY_ACTIVITY = "daily_activity"
    STREAK_CHALLENGE = "streak_challenge"
    GROUP_GOAL = "group_goal"
    CUSTOM = "custom"


class GoalUnit(str, Enum):
    DAYS = "days"
    ACTIVITIES = "activities"
    MINUTES = "minutes"
    POINTS = "points"


class RewardType(str, Enum):
    BADGE = "badge"
    POINTS = "points"
    TITLE = "title"
    CUSTOM = "custom"


class PostType(str, Enum):
    TEXT = "text"
    AFFIRMATION_SHARE = "affirmation_share"
    PROGRESS_UPDATE = "progress_update"
    QUESTION = "question"
    CELEBRATION = "celebration"


class ReactionType(str, Enum):
    LIKE = "like"
    LOVE = "love"
    SUPPORT = "support"
    CELEBRATE = "celebrate"
    INSPIRE = "inspire"


class AttachmentType(str, Enum):
    IMAGE = "image"
    ACTIVITY = "activity"
    ACHIEVEMENT = "achievement"
