from datetime import datetime, timezone
from types import SimpleNamespace

from selfcare.application.insights import build_insights, mood_improved, time_of_day_bucket


def _user(streak=0, longest=0, goal="stress_relief"):
    return SimpleNamespace(current_streak=streak, longest_streak=longest, primary_goal=goal)


def _activity(type_="meditation", category="stress_relief", hour=8, before=None, after=None):
    moment = datetime(2024, 5, 10, hour, 0, tzinfo=timezone.utc)
    return SimpleNamespace(
        type=type_,
        category=category,
        completed_at=moment,
        created_at=moment,
        mood_before=before,
        mood_after=after,
    )


def test_time_of_day_buckets() -> None:
    def at(hour):
        return datetime(2024, 1, 1, hour, tzinfo=timezone.utc)

    assert time_of_day_bucket(at(6)) == "morning"
    assert time_of_day_bucket(at(12)) == "afternoon"
    assert time_of_day_bucket(at(17)) == "evening"
    assert time_of_day_bucket(at(21)) == "night"
    assert time_of_day_bucket(at(3)) == "night"


def test_mood_improved_uses_mood_scale() -> None:
    assert mood_improved("stressed", "calm")
    assert not mood_improved("happy", "neutral")
    assert not mood_improved(None, "happy")


def test_new_user_gets_fresh_start_and_both_recommendations() -> None:
    result = build_insights(_user(), [])

    assert [i.title for i in result.insights] == ["Ready for a Fresh Start?"]
    assert [r.title for r in result.recommendations] == ["Build Consistency", "Explore More Activities"]
    assert result.data_points.total_activities == 0


def test_consistent_user_insights_sorted_by_priority() -> None:
    recent = [_activity(hour=8, before="stressed", after="calm") for _ in range(10)]
    result = build_insights(_user(streak=8, longest=8), recent)

    titles = [i.title for i in result.insights]
    assert titles == [
        "Great Consistency!",
        "Mood Booster",
        "Goal Focused",
        "Your Favorite Activity",
        "Your Peak Time",
    ]
    assert "100%" in result.insights[1].message
    assert "stress relief" in result.insights[2].message
    assert "morning" in result.insights[4].message
    assert result.recommendations == []
    assert result.data_points.mood_improvements == 10
    assert result.data_points.goal_activities == 10


def test_mid_streak_has_no_streak_insight() -> None:
    result = build_insights(_user(streak=3), [_activity(type_="reading", hour=22)])

    titles = [i.title for i in result.insights]
    assert "Great Consistency!" not in titles
    assert "Ready for a Fresh Start?" not in titles
    assert "reading" in result.insights[0].message
    assert [r.title for r in result.recommendations] == ["Explore More Activities"]


def test_insights_are_deterministic() -> None:
    recent = [_activity(type_="music", hour=13), _activity(type_="exercise", hour=18)]
    first = build_insights(_user(streak=1), recent)
    second = build_insights(_user(streak=1), recent)
    assert first == second
