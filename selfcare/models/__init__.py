"""
SelfCare Planner - Models Module
ORM tables, enumerations and API schemas
"""

from .activity import (
    ActivityComplete,
    ActivityCreate,
    ActivityResponse,
    ActivityShare,
    ActivityUpdate,
    CommentCreate,
    CommentResponse,
    GenerateActivityRequest,
    MotivationalMessageRequest,
    Pagination,
    TrendingActivity,
)
from .analytics import (
    FriendSuggestion,
    Insight,
    InsightsResponse,
    LeaderboardEntry,
    LeaderboardResponse,
    Recommendation,
)
from .social import (
    ChallengeCreate,
    ChallengeProgressUpdate,
    ChallengeResponse,
    FriendAccept,
    FriendRequestCreate,
    FriendResponse,
    GroupCreate,
    GroupDetail,
    GroupInvite,
    GroupSummary,
    MemberRoleUpdate,
    PostCommentCreate,
    PostCreate,
    PostResponse,
    ReactionCreate,
)
from .user import (
    AchievementResponse,
    AchievementUnlock,
    Preferences,
    PreferencesUpdate,
    PrivacySettings,
    PrivacyUpdate,
    StreakData,
    UserResponse,
    UserSummary,
)

__all__ = [
    # User
    "UserResponse",
    "UserSummary",
    "StreakData",
    "Preferences",
    "PreferencesUpdate",
    "PrivacySettings",
    "PrivacyUpdate",
    "AchievementResponse",
    "AchievementUnlock",
    # Activity
    "ActivityCreate",
    "ActivityUpdate",
    "ActivityComplete",
    "ActivityShare",
    "ActivityResponse",
    "CommentCreate",
    "CommentResponse",
    "GenerateActivityRequest",
    "MotivationalMessageRequest",
    "TrendingActivity",
    "Pagination",
    # Social
    "FriendRequestCreate",
    "FriendAccept",
    "FriendResponse",
    "GroupCreate",
    "GroupSummary",
    "GroupDetail",
    "GroupInvite",
    "MemberRoleUpdate",
    "ChallengeCreate",
    "ChallengeProgressUpdate",
    "ChallengeResponse",
    "PostCreate",
    "PostResponse",
    "ReactionCreate",
    "PostCommentCreate",
    # Analytics
    "LeaderboardEntry",
    "LeaderboardResponse",
    "Insight",
    "InsightsResponse",
    "Recommendation",
    "FriendSuggestion",
]
