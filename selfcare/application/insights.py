"""
Wellness insights
Rule table evaluated over a user's recent completed activities
"""

from collections import Counter
from datetime import datetime
from typing import Dict, List, Sequence

from selfcare.models.analytics import DataPoints, Insight, InsightsResponse, Recommendation
from selfcare.utils.time import as_utc

MOOD_SCALE: Dict[str, int] = {
    "sad": 1,
    "stressed": 2,
    "anxious": 2,
    "neutral": 3,
    "calm": 4,
    "happy": 5,
    "excited": 5,
    "energetic": 5,
}

PRIORITY_ORDER = {"high": 3, "medium": 2, "low": 1}

CONSISTENCY_STREAK = 7
GOAL_FOCUS_THRESHOLD = 10
RECOMMEND_CONSISTENCY_BELOW = 3
RECOMMEND_EXPLORE_BELOW = 10


def time_of_day_bucket(moment: datetime) -> str:
    hour = as_utc(moment).hour
    if 6 <= hour < 12:
        return "morning"
    if 12 <= hour < 17:
        return "afternoon"
    if 17 <= hour < 21:
        return "evening"
    return "night"


def mood_improved(before, after) -> bool:
    if not before or not after:
        return False
    return MOOD_SCALE.get(after, 0) > MOOD_SCALE.get(before, 0)


def _activity_moment(activity) -> datetime:
    return activity.completed_at or activity.created_at


def build_insights(user, recent: Sequence) -> InsightsResponse:
    """
    Evaluate the insight and recommendation rules.

    Args:
        user: The user the insights are for
        recent: Completed activities in the insight window, newest first

    Returns:
        Insights sorted by priority (stable), recommendations and raw counts
    """
    insights: List[Insight] = []
    streak = user.current_streak or 0

    if streak >= CONSISTENCY_STREAK:
        insights.append(
            Insight(
                type="achievement",
                title="Great Consistency!",
                message=f"You're on a {streak}-day streak! Keep up the amazing work.",
                icon="🔥",
                priority="high",
            )
        )
    elif streak == 0:
        insights.append(
            Insight(
                type="motivation",
                title="Ready for a Fresh Start?",
                message="Every journey begins with a single step. Start your wellness streak today!",
                icon="🌱",
                priority="medium",
            )
        )

    type_counts = Counter(a.type for a in recent)
    if type_counts:
        favorite, count = type_counts.most_common(1)[0]
        insights.append(
            Insight(
                type="pattern",
                title="Your Favorite Activity",
                message=f"You've been loving {favorite} activities! You've completed {count} in the last 30 days.",
                icon="⭐",
                priority="low",
            )
        )

    improvements = [a for a in recent if mood_improved(a.mood_before, a.mood_after)]
    if improvements:
        rate = round(len(improvements) / len(recent) * 100)
        insights.append(
            Insight(
                type="progress",
                title="Mood Booster",
                message=f"{rate}% of your activities have improved your mood. You're doing great!",
                icon="😊",
                priority="high",
            )
        )

    goal_activities = [a for a in recent if a.category == user.primary_goal]
    if len(goal_activities) >= GOAL_FOCUS_THRESHOLD:
        goal_name = user.primary_goal.replace("_", " ")
        insights.append(
            Insight(
                type="achievement",
                title="Goal Focused",
                message=f"You've completed {len(goal_activities)} activities toward your {goal_name} goal this month!",
                icon="🎯",
                priority="high",
            )
        )

    time_counts = Counter(time_of_day_bucket(_activity_moment(a)) for a in recent)
    if time_counts:
        peak = time_counts.most_common(1)[0][0]
        insights.append(
            Insight(
                type="pattern",
                title="Your Peak Time",
                message=f"You're most active in the {peak}. Consider scheduling important activities during this time.",
                icon="⏰",
                priority="low",
            )
        )

    recommendations: List[Recommendation] = []
    if streak < RECOMMEND_CONSISTENCY_BELOW:
        recommendations.append(
            Recommendation(
                type="habit",
                title="Build Consistency",
                message="Try setting a daily reminder to complete at least one small activity.",
                action="Set Daily Reminder",
            )
        )
    if len(recent) < RECOMMEND_EXPLORE_BELOW:
        recommendations.append(
            Recommendation(
                type="engagement",
                title="Explore More Activities",
                message="Discover new types of self-care activities to keep your routine fresh.",
                action="Browse Activities",
            )
        )

    insights.sort(key=lambda i: PRIORITY_ORDER[i.priority], reverse=True)

    return InsightsResponse(
        insights=insights,
        recommendations=recommendations,
        data_points=DataPoints(
            total_activities=len(recent),
            current_streak=streak,
            longest_streak=user.longest_streak or 0,
            mood_improvements=len(improvements),
            goal_activities=len(goal_activities),
        ),
    )
