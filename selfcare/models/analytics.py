"""
SelfCare Planner Models - Analytics
Leaderboard, insight and recommendation models
"""

from typing import List, Literal, Optional

from pydantic import BaseModel

from .user import UserSummary

Priority = Literal["high", "medium", "low"]


class LeaderboardEntry(BaseModel):
    rank: int
    user: UserSummary
    value: int
    label: str


class Insight(BaseModel):
    type: str
    title: str
    message: str
    icon: str
    priority: Priority


class Recommendation(BaseModel):
    type: str
    title: str
    message: str
    action: str


class FriendSuggestion(BaseModel):
    user: UserSummary
    primary_goal: str
    current_streak: int
    bio: Optional[str] = None
    similarity_score: int
    reasons: List[str]


class LeaderboardResponse(BaseModel):
    leaderboard: List[LeaderboardEntry]
    current_user_rank: Optional[int] = None
    type: str
    period: str
    total: int


class DataPoints(BaseModel):
    total_activities: int
    current_streak: int
    longest_streak: int
    mood_improvements: int
    goal_activities: int


class InsightsResponse(BaseModel):
    insights: List[Insight]
    recommendations: List[Recommendation]
    data_points: DataPoints
