"""
Analytics Service
Streak calendar, progress aggregation, insights and data export
"""

import csv
import io
from collections import Counter, defaultdict
from datetime import timedelta
from typing import Any, Dict, Iterable, List, Optional

from sqlalchemy.ext.asyncio import AsyncSession

from selfcare.models.analytics import InsightsResponse
from selfcare.models.database import ActivityDB, UserDB
from selfcare.models.user import StreakData, UserResponse
from selfcare.repositories.activities import ActivityRepository
from selfcare.utils.logger import get_logger
from selfcare.utils.time import as_utc, start_of_day, utcnow

from .engagement import PROGRESS_PERIOD_DAYS
from .insights import build_insights
from .serializers import activity_response

logger = get_logger(__name__)

CALENDAR_DAYS = 30
INSIGHT_WINDOW_DAYS = 30
DEFAULT_PROGRESS_PERIOD = "30d"

EXPORT_HEADERS = [
    "Date",
    "Type",
    "Category",
    "Title",
    "Duration",
    "Difficulty",
    "Completed",
    "Rating",
    "Mood Before",
    "Mood After",
    "Feedback",
]


def _average(values: Iterable[Optional[float]]) -> Optional[float]:
    present = [v for v in values if v is not None]
    if not present:
        return None
    return round(sum(present) / len(present), 2)


def _day(activity: ActivityDB, completed: bool = False) -> str:
    moment = activity.completed_at if completed and activity.completed_at else activity.created_at
    return as_utc(moment).date().isoformat()


class AnalyticsService:
    """Read-only aggregations over a user's activity history"""

    def __init__(self, db_session: AsyncSession):
        self.db = db_session
        self.activity_repo = ActivityRepository(db_session)

    async def streaks(self, user: UserDB) -> Dict[str, Any]:
        """Last 30 UTC days of completions as a calendar"""
        now = utcnow()
        today = now.date()
        first_day = start_of_day(now) - timedelta(days=CALENDAR_DAYS - 1)
        completed = await self.activity_repo.completed_since(user.id, first_day)
        per_day = Counter(_day(a, completed=True) for a in completed)

        calendar = []
        for offset in range(CALENDAR_DAYS - 1, -1, -1):
            day = (today - timedelta(days=offset)).isoformat()
            count = per_day.get(day, 0)
            calendar.append({"date": day, "count": count, "has_activity": count > 0})

        active_days = len(per_day)
        total = sum(per_day.values())
        return {
            "streak_data": StreakData.from_user(user),
            "streak_calendar": calendar,
            "analytics": {
                "active_days": active_days,
                "total_activities": total,
                "average_per_day": round(total / active_days, 1) if active_days else 0,
            },
        }

    async def progress(self, user: UserDB, period: str = DEFAULT_PROGRESS_PERIOD) -> Dict[str, Any]:
        days = PROGRESS_PERIOD_DAYS.get(period)
        if days is None:
            period, days = DEFAULT_PROGRESS_PERIOD, PROGRESS_PERIOD_DAYS[DEFAULT_PROGRESS_PERIOD]

        activities = sorted(
            await self.activity_repo.created_since(user.id, utcnow() - timedelta(days=days)),
            key=lambda a: as_utc(a.created_at),
        )
        completed = [a for a in activities if a.is_completed]

        by_day: Dict[str, List[ActivityDB]] = defaultdict(list)
        for activity in activities:
            by_day[_day(activity)].append(activity)
        completion_trends = []
        for day, items in by_day.items():
            done = sum(1 for a in items if a.is_completed)
            completion_trends.append(
                {"date": day, "total": len(items), "completed": done, "completion_rate": done / len(items) * 100}
            )

        by_type: Dict[str, List[ActivityDB]] = defaultdict(list)
        by_category: Dict[str, List[ActivityDB]] = defaultdict(list)
        moods: Counter = Counter()
        for activity in completed:
            by_type[activity.type].append(activity)
            by_category[activity.category].append(activity)
            if activity.mood_before and activity.mood_after:
                moods[(activity.mood_before, activity.mood_after)] += 1

        activity_types = sorted(
            (
                {"type": t, "count": len(items), "average_rating": _average(a.rating for a in items)}
                for t, items in by_type.items()
            ),
            key=lambda row: row["count"],
            reverse=True,
        )
        goal_progress = sorted(
            (
                {
                    "category": c,
                    "count": len(items),
                    "average_rating": _average(a.rating for a in items),
                    "total_duration": sum(a.duration or 0 for a in items),
                }
                for c, items in by_category.items()
            ),
            key=lambda row: row["count"],
            reverse=True,
        )

        by_week: Dict[tuple, List[ActivityDB]] = defaultdict(list)
        for activity in activities:
            iso = as_utc(activity.created_at).isocalendar()
            by_week[(iso[0], iso[1])].append(activity)
        weekly_summary = [
            {
                "year": year,
                "week": week,
                "total": len(items),
                "completed": sum(1 for a in items if a.is_completed),
                "total_duration": sum(a.duration or 0 for a in items),
                "average_rating": _average(a.rating for a in items),
            }
            for (year, week), items in sorted(by_week.items())
        ]

        rates = [row["completion_rate"] for row in completion_trends]
        return {
            "period": period,
            "completion_trends": completion_trends,
            "activity_types": activity_types,
            "mood_progression": [
                {"before": before, "after": after, "count": count} for (before, after), count in moods.items()
            ],
            "goal_progress": goal_progress,
            "weekly_summary": weekly_summary,
            "summary": {
                "total_activities": len(activities),
                "total_completed": len(completed),
                "average_completion_rate": round(sum(rates) / len(rates), 1) if rates else 0,
                "total_time_spent": sum(row["total_duration"] for row in goal_progress),
            },
        }

    async def insights(self, user: UserDB) -> InsightsResponse:
        recent = await self.activity_repo.completed_since(
            user.id, utcnow() - timedelta(days=INSIGHT_WINDOW_DAYS)
        )
        return build_insights(user, recent)

    async def export_json(self, user: UserDB) -> Dict[str, Any]:
        activities = await self.activity_repo.list_all_for_user(user.id)
        logger.info(f"JSON export for user {user.id}: {len(activities)} activities")
        return {
            "user": UserResponse.from_user(user),
            "activities": [activity_response(a) for a in activities],
            "exported_at": utcnow(),
        }

    async def export_csv(self, user: UserDB) -> str:
        activities = await self.activity_repo.list_all_for_user(user.id)
        logger.info(f"CSV export for user {user.id}: {len(activities)} activities")

        buffer = io.StringIO()
        writer = csv.writer(buffer)
        writer.writerow(EXPORT_HEADERS)
        for a in activities:
            writer.writerow(
                [
                    _day(a),
                    a.type,
                    a.category,
                    a.title,
                    a.duration,
                    a.difficulty,
                    "Yes" if a.is_completed else "No",
                    a.rating if a.rating is not None else "",
                    a.mood_before or "",
                    a.mood_after or "",
                    a.feedback or "",
                ]
            )
        return buffer.getvalue()
