"""
SelfCare Planner Models - User
Profile, preference, streak and achievement models
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field

from .enums import (
    AchievementType,
    ColorScheme,
    Difficulty,
    Mood,
    PreferredActivityType,
    PrimaryGoal,
    ProfileVisibility,
)


# ============================================================================
# PREFERENCES
# ============================================================================


class NotificationSettings(BaseModel):
    daily_reminders: bool = True
    affirmation_time: str = Field(default="09:00", pattern=r"^\d{2}:\d{2}$")
    activity_reminders: bool = True
    social_updates: bool = True


class ContentPreferences(BaseModel):
    preferred_activity_types: List[PreferredActivityType] = Field(default_factory=list)
    difficulty_level: Difficulty = Difficulty.BEGINNER
    session_duration: int = Field(default=10, ge=1, le=240, description="Minutes")


class ThemePreferences(BaseModel):
    color_scheme: ColorScheme = ColorScheme.PASTEL_PINK
    animations: bool = True


class Preferences(BaseModel):
    """User preferences stored as a JSON document on the user row"""

    notification_settings: NotificationSettings = Field(default_factory=NotificationSettings)
    content_preferences: ContentPreferences = Field(default_factory=ContentPreferences)
    theme_preferences: ThemePreferences = Field(default_factory=ThemePreferences)

    @classmethod
    def from_stored(cls, data: Optional[dict]) -> "Preferences":
        return cls.model_validate(data or {})


class PreferencesUpdate(BaseModel):
    """Partial preferences update; each given section replaces the stored one"""

    notification_settings: Optional[NotificationSettings] = None
    content_preferences: Optional[ContentPreferences] = None
    theme_preferences: Optional[ThemePreferences] = None


# ============================================================================
# RESPONSES
# ============================================================================


class UserSummary(BaseModel):
    """Minimal public view of a user embedded in other resources"""

    id: UUID
    username: str
    first_name: str = ""
    last_name: str = ""
    avatar: str = ""

    @classmethod
    def from_user(cls, user) -> "UserSummary":
        return cls(
            id=user.id,
            username=user.username,
            first_name=user.first_name or "",
            last_name=user.last_name or "",
            avatar=user.avatar or "",
        )


class ProfileData(BaseModel):
    first_name: str = ""
    last_name: str = ""
    avatar: str = ""
    bio: Optional[str] = None
    date_of_birth: Optional[datetime] = None
    timezone: str = "UTC"


class StreakData(BaseModel):
    current_streak: int = 0
    longest_streak: int = 0
    last_activity_date: Optional[datetime] = None
    total_activities_completed: int = 0

    @classmethod
    def from_user(cls, user) -> "StreakData":
        return cls(
            current_streak=user.current_streak,
            longest_streak=user.longest_streak,
            last_activity_date=user.last_activity_date,
            total_activities_completed=user.total_activities_completed,
        )


class PrivacySettings(BaseModel):
    profile_visibility: ProfileVisibility = ProfileVisibility.FRIENDS
    share_progress: bool = True


class PrivacyUpdate(BaseModel):
    profile_visibility: Optional[ProfileVisibility] = None
    share_progress: Optional[bool] = None


class AchievementResponse(BaseModel):
    id: UUID
    type: AchievementType
    description: Optional[str] = None
    unlocked_at: datetime

    class Config:
        from_attributes = True


class AchievementUnlock(BaseModel):
    type: AchievementType = Field(..., description="Achievement to unlock")
    description: Optional[str] = Field(None, max_length=255)


class UserResponse(BaseModel):
    """Full view of the authenticated user's own account (no secrets)"""

    id: UUID
    username: str
    email: str
    profile: ProfileData
    primary_goal: PrimaryGoal
    current_mood: Mood
    preferences: Preferences
    streak_data: StreakData
    privacy: PrivacySettings
    achievements: List[AchievementResponse] = Field(default_factory=list)
    email_verified: bool = False
    last_login: Optional[datetime] = None
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserResponse":
        return cls(
            id=user.id,
            username=user.username,
            email=user.email,
            profile=ProfileData(
                first_name=user.first_name or "",
                last_name=user.last_name or "",
                avatar=user.avatar or "",
                bio=user.bio,
                date_of_birth=user.date_of_birth,
                timezone=user.timezone or "UTC",
            ),
            primary_goal=user.primary_goal,
            current_mood=user.current_mood,
            preferences=Preferences.from_stored(user.preferences),
            streak_data=StreakData.from_user(user),
            privacy=PrivacySettings(
                profile_visibility=user.profile_visibility,
                share_progress=user.share_progress,
            ),
            achievements=[AchievementResponse.model_validate(a) for a in user.achievements],
            email_verified=user.email_verified,
            last_login=user.last_login,
            created_at=user.created_at,
        )
