"""
SelfCare Planner Models - Activity
Request and response models for wellness activities
"""

from datetime import datetime
from typing import List, Optional
from uuid import UUID

from pydantic import BaseModel, Field, field_validator

from .enums import ActivityType, Difficulty, Mood, PrimaryGoal
from .user import UserSummary


# ============================================================================
# REQUESTS
# ============================================================================


class ActivityCreate(BaseModel):
    """Create a user-authored activity"""

    type: ActivityType
    category: PrimaryGoal
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=2000)
    description: Optional[str] = Field(None, max_length=500)
    duration: int = Field(default=5, ge=1, le=480, description="Minutes")
    difficulty: Difficulty = Difficulty.BEGINNER
    tags: List[str] = Field(default_factory=list)
    scheduled_for: Optional[datetime] = None

    class Config:
        json_schema_extra = {
            "example": {
                "type": "breathing",
                "category": "stress_relief",
                "title": "Box breathing",
                "content": "Inhale 4s, hold 4s, exhale 4s, hold 4s. Repeat 6 times.",
                "duration": 5,
                "tags": ["calm", "quick"],
            }
        }


class ActivityUpdate(BaseModel):
    """Partial activity update; unset fields are left untouched"""

    title: Optional[str] = Field(None, min_length=1, max_length=200)
    content: Optional[str] = Field(None, min_length=1, max_length=2000)
    description: Optional[str] = Field(None, max_length=500)
    duration: Optional[int] = Field(None, ge=1, le=480)
    difficulty: Optional[Difficulty] = None
    tags: Optional[List[str]] = None
    scheduled_for: Optional[datetime] = None


class ActivityComplete(BaseModel):
    rating: Optional[int] = Field(None, ge=1, le=5)
    feedback: Optional[str] = Field(None, max_length=500)
    mood_before: Optional[Mood] = None
    mood_after: Optional[Mood] = None
    notes: Optional[str] = Field(None, max_length=1000)


class CommentCreate(BaseModel):
    content: str = Field(..., max_length=300)

    @field_validator("content")
    @classmethod
    def strip_content(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment content is required")
        return v


class ActivityShare(BaseModel):
    share_with: List[UUID] = Field(default_factory=list)
    make_public: bool = False


class GenerateActivityRequest(BaseModel):
    """``journaling`` and ``wellness-tip`` pick a text kind; anything else a full activity"""

    activity_type: Optional[str] = Field(None, max_length=50)
    custom_prompt: Optional[str] = Field(None, max_length=500)


class MotivationalMessageRequest(BaseModel):
    context: Optional[str] = Field(None, max_length=200)


# ============================================================================
# RESPONSES
# ============================================================================


class CompletionData(BaseModel):
    is_completed: bool = False
    completed_at: Optional[datetime] = None
    rating: Optional[int] = None
    feedback: Optional[str] = None
    mood_before: Optional[Mood] = None
    mood_after: Optional[Mood] = None
    notes: Optional[str] = None


class LikeResponse(BaseModel):
    user_id: UUID
    user: Optional[UserSummary] = None
    liked_at: datetime


class CommentResponse(BaseModel):
    id: UUID
    user_id: UUID
    user: Optional[UserSummary] = None
    content: str
    created_at: datetime


class SocialData(BaseModel):
    is_shared: bool = False
    shared_with: List[UUID] = Field(default_factory=list)
    likes: List[LikeResponse] = Field(default_factory=list)
    comments: List[CommentResponse] = Field(default_factory=list)


class ActivityResponse(BaseModel):
    id: UUID
    user_id: UUID
    user: Optional[UserSummary] = None
    type: ActivityType
    category: PrimaryGoal
    title: str
    content: str
    description: Optional[str] = None
    duration: int
    difficulty: Difficulty
    tags: List[str] = Field(default_factory=list)
    is_ai_generated: bool = False
    completion_data: CompletionData
    social_data: SocialData
    like_count: int = 0
    comment_count: int = 0
    scheduled_for: Optional[datetime] = None
    created_at: datetime
    updated_at: Optional[datetime] = None


class TrendingActivity(BaseModel):
    id: UUID
    type: ActivityType
    category: PrimaryGoal
    title: str
    content: str
    description: Optional[str] = None
    duration: int
    difficulty: Difficulty
    tags: List[str] = Field(default_factory=list)
    like_count: int
    comment_count: int
    engagement_score: int
    created_at: datetime
    user: Optional[UserSummary] = None


class Pagination(BaseModel):
    current: int
    pages: int
    total: int
    has_next: bool = False
    has_prev: bool = False
