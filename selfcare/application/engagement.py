"""
Engagement aggregation
Scoring, leaderboard and friend-suggestion helpers shared by the services
"""

from datetime import datetime, timedelta
from typing import Dict, List, Optional, Sequence, Set
from uuid import UUID

from selfcare.models.analytics import FriendSuggestion, LeaderboardEntry
from selfcare.models.user import Preferences, UserSummary

LEADERBOARD_TYPES = ("streak", "activities", "social")

PERIOD_DAYS: Dict[str, int] = {
    "week": 7,
    "month": 30,
    "year": 365,
}

PROGRESS_PERIOD_DAYS: Dict[str, int] = {
    "7d": 7,
    "30d": 30,
    "90d": 90,
    "1y": 365,
}

MAX_SUGGESTIONS = 5


def engagement_score(like_count: int, comment_count: int) -> int:
    """likes + 2 x comments"""
    return like_count + 2 * comment_count


def period_start(period: str, now: datetime) -> Optional[datetime]:
    """Window start for a leaderboard period; None for ``all`` or unknown periods"""
    days = PERIOD_DAYS.get(period)
    if days is None:
        return None
    return now - timedelta(days=days)


def leaderboard_label(board_type: str, value: int) -> str:
    if board_type == "streak":
        return f"{value} day{'' if value == 1 else 's'}"
    if board_type == "activities":
        return f"{value} activities"
    return f"{value} likes"


def rank_entries(board_type: str, rows: Sequence[tuple]) -> List[LeaderboardEntry]:
    """Number (user, value) rows from 1 in the order given"""
    return [
        LeaderboardEntry(
            rank=index,
            user=UserSummary.from_user(user),
            value=value,
            label=leaderboard_label(board_type, value),
        )
        for index, (user, value) in enumerate(rows, start=1)
    ]


def find_rank(entries: Sequence[LeaderboardEntry], user_id: UUID) -> Optional[int]:
    for entry in entries:
        if entry.user.id == user_id:
            return entry.rank
    return None


# ============================================================================
# FRIEND SUGGESTIONS
# ============================================================================


def preferred_types(user) -> Set[str]:
    prefs = Preferences.from_stored(user.preferences)
    return {t.value for t in prefs.content_preferences.preferred_activity_types}


def score_candidate(current_user, candidate) -> Optional[FriendSuggestion]:
    """
    Score how similar a candidate is to the current user.

    Candidates sharing neither the primary goal nor a preferred activity
    type are not suggested.
    """
    same_goal = candidate.primary_goal == current_user.primary_goal
    common = preferred_types(candidate) & preferred_types(current_user)
    if not same_goal and not common:
        return None

    streak_diff = abs((candidate.current_streak or 0) - (current_user.current_streak or 0))
    score = (3 if same_goal else 0) + len(common)
    if streak_diff <= 5:
        score += 2
    elif streak_diff <= 10:
        score += 1

    reasons = []
    if same_goal:
        reasons.append("Same wellness goal")
    if common:
        reasons.append(f"{len(common)} shared interests")
    if streak_diff <= 5:
        reasons.append("Similar activity level")

    return FriendSuggestion(
        user=UserSummary.from_user(candidate),
        primary_goal=candidate.primary_goal,
        current_streak=candidate.current_streak or 0,
        bio=candidate.bio,
        similarity_score=score,
        reasons=reasons,
    )


def suggest_friends(current_user, candidates: Sequence) -> List[FriendSuggestion]:
    """Top suggestions by similarity score; ties keep candidate order"""
    scored = [s for s in (score_candidate(current_user, c) for c in candidates) if s is not None]
    scored.sort(key=lambda s: s.similarity_score, reverse=True)
    return scored[:MAX_SUGGESTIONS]
