"""
SelfCare Planner Models - Social
Friends, groups, challenges and group posts
"""

from datetime import datetime
from typing import Annotated, List, Optional, Union
from uuid import UUID

from pydantic import AllowInfNan, BaseModel, Field, StrictFloat, StrictInt, model_validator

from selfcare.utils.time import as_utc

from .enums import (
    AttachmentType,
    ChallengeType,
    FriendStatus,
    GoalUnit,
    GroupCategory,
    GroupPrivacy,
    MemberRole,
    PostType,
    ReactionType,
    RewardType,
)
from .user import UserSummary


# ============================================================================
# FRIENDS
# ============================================================================


class FriendRequestCreate(BaseModel):
    username: str = Field(..., min_length=1, max_length=30)


class FriendAccept(BaseModel):
    user_id: UUID


class FriendResponse(BaseModel):
    user: UserSummary
    current_streak: int = 0
    status: FriendStatus
    initiated_by: UUID
    added_at: datetime


# ============================================================================
# GROUPS
# ============================================================================


class GroupSettings(BaseModel):
    allow_member_posts: bool = True
    require_approval: bool = False
    allow_invites: bool = True
    max_members: int = Field(default=100, ge=1, le=10000)


class GroupStats(BaseModel):
    total_activities: int = 0
    total_challenges_completed: int = 0
    average_engagement: float = 0


class GroupCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1, max_length=500)
    category: GroupCategory = GroupCategory.GENERAL
    privacy: GroupPrivacy = GroupPrivacy.PUBLIC
    avatar: str = Field(default="", max_length=500)
    settings: GroupSettings = Field(default_factory=GroupSettings)


class GroupInvite(BaseModel):
    user_id: UUID


class MemberRoleUpdate(BaseModel):
    role: MemberRole


class GroupSummary(BaseModel):
    id: UUID
    name: str
    description: Optional[str] = None
    avatar: str = ""
    category: GroupCategory
    privacy: GroupPrivacy
    member_count: int
    active_challenges_count: int
    stats: GroupStats
    created_at: datetime
    creator: Optional[UserSummary] = None
    user_role: Optional[MemberRole] = None
    joined_at: Optional[datetime] = None


class MemberResponse(BaseModel):
    user_id: UUID
    user: Optional[UserSummary] = None
    role: MemberRole
    joined_at: datetime


# ============================================================================
# CHALLENGES
# ============================================================================


class ChallengeGoal(BaseModel):
    target: float = Field(..., gt=0)
    unit: GoalUnit


class ChallengeReward(BaseModel):
    type: RewardType
    name: str = Field(..., max_length=100)
    description: Optional[str] = Field(None, max_length=255)
    icon: Optional[str] = None


class ChallengeCreate(BaseModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: Optional[str] = Field(None, max_length=1000)
    type: ChallengeType
    goal: ChallengeGoal
    start_date: datetime
    end_date: datetime
    rewards: List[ChallengeReward] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_dates(self) -> "ChallengeCreate":
        if as_utc(self.end_date) < as_utc(self.start_date):
            raise ValueError("end_date must not be before start_date")
        return self


class ChallengeProgressUpdate(BaseModel):
    progress: Union[StrictInt, Annotated[StrictFloat, AllowInfNan(False)]] = Field(
        ..., description="New absolute progress value"
    )


class ParticipantResponse(BaseModel):
    user_id: UUID
    progress: float
    last_update: datetime
    is_completed: bool


class ChallengeResponse(BaseModel):
    id: UUID
    title: str
    description: Optional[str] = None
    type: ChallengeType
    goal: ChallengeGoal
    start_date: datetime
    end_date: datetime
    rewards: List[ChallengeReward] = Field(default_factory=list)
    is_active: bool
    created_by: UUID
    created_at: datetime
    participants: List[ParticipantResponse] = Field(default_factory=list)

    @classmethod
    def from_challenge(cls, challenge) -> "ChallengeResponse":
        return cls(
            id=challenge.id,
            title=challenge.title,
            description=challenge.description,
            type=challenge.type,
            goal=ChallengeGoal(target=challenge.goal_target, unit=challenge.goal_unit),
            start_date=challenge.start_date,
            end_date=challenge.end_date,
            rewards=challenge.rewards or [],
            is_active=challenge.is_active,
            created_by=challenge.created_by,
            created_at=challenge.created_at,
            participants=[
                ParticipantResponse(
                    user_id=p.user_id,
                    progress=p.progress,
                    last_update=p.last_update,
                    is_completed=p.is_completed,
                )
                for p in challenge.participants
            ],
        )


# ============================================================================
# POSTS
# ============================================================================


class PostAttachment(BaseModel):
    type: AttachmentType
    url: Optional[str] = Field(None, max_length=500)
    activity_id: Optional[UUID] = None


class PostCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=2000)
    type: PostType = PostType.TEXT
    attachments: List[PostAttachment] = Field(default_factory=list)


class ReactionCreate(BaseModel):
    type: ReactionType = ReactionType.LIKE


class PostCommentCreate(BaseModel):
    content: str = Field(..., min_length=1, max_length=500)


class ReactionResponse(BaseModel):
    user_id: UUID
    type: ReactionType
    created_at: datetime


class PostCommentResponse(BaseModel):
    id: UUID
    user_id: UUID
    user: Optional[UserSummary] = None
    content: str
    created_at: datetime


class PostResponse(BaseModel):
    id: UUID
    user_id: UUID
    user: Optional[UserSummary] = None
    content: str
    type: PostType
    attachments: List[PostAttachment] = Field(default_factory=list)
    is_pinned: bool = False
    reactions: List[ReactionResponse] = Field(default_factory=list)
    comments: List[PostCommentResponse] = Field(default_factory=list)
    created_at: datetime


class GroupDetail(GroupSummary):
    settings: GroupSettings
    members: List[MemberResponse] = Field(default_factory=list)
    challenges: List[ChallengeResponse] = Field(default_factory=list)
    posts: List[PostResponse] = Field(default_factory=list)
