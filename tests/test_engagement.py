from datetime import datetime, timedelta, timezone
from types import SimpleNamespace
from uuid import uuid4

from selfcare.application.engagement import (
    engagement_score,
    find_rank,
    leaderboard_label,
    period_start,
    rank_entries,
    score_candidate,
    suggest_friends,
)

NOW = datetime(2024, 6, 1, tzinfo=timezone.utc)


def _user(username, goal="stress_relief", streak=0, types=()):
    return SimpleNamespace(
        id=uuid4(),
        username=username,
        first_name="",
        last_name="",
        avatar="",
        bio=None,
        primary_goal=goal,
        current_streak=streak,
        preferences={"content_preferences": {"preferred_activity_types": list(types)}},
    )


def test_engagement_score_weights_comments_double() -> None:
    assert engagement_score(5, 0) == 5
    assert engagement_score(0, 3) == 6
    assert engagement_score(2, 2) == 6


def test_period_start() -> None:
    assert period_start("week", NOW) == NOW - timedelta(days=7)
    assert period_start("year", NOW) == NOW - timedelta(days=365)
    assert period_start("all", NOW) is None
    assert period_start("fortnight", NOW) is None


def test_leaderboard_labels() -> None:
    assert leaderboard_label("streak", 1) == "1 day"
    assert leaderboard_label("streak", 12) == "12 days"
    assert leaderboard_label("activities", 4) == "4 activities"
    assert leaderboard_label("social", 9) == "9 likes"


def test_rank_entries_numbers_in_order_and_finds_rank() -> None:
    alice, bob = _user("alice"), _user("bob")
    entries = rank_entries("streak", [(alice, 9), (bob, 3)])

    assert [e.rank for e in entries] == [1, 2]
    assert entries[0].user.username == "alice"
    assert entries[1].label == "3 days"
    assert find_rank(entries, bob.id) == 2
    assert find_rank(entries, uuid4()) is None


def test_score_candidate_same_goal_similar_streak() -> None:
    me = _user("me", streak=4, types=["meditation"])
    other = _user("other", streak=6, types=["meditation", "reading"])

    suggestion = score_candidate(me, other)
    assert suggestion.similarity_score == 3 + 1 + 2
    assert suggestion.reasons == ["Same wellness goal", "1 shared interests", "Similar activity level"]


def test_score_candidate_requires_goal_or_shared_type() -> None:
    me = _user("me", goal="mindfulness", types=["music"])
    other = _user("other", goal="productivity", types=["reading"])
    assert score_candidate(me, other) is None


def test_score_candidate_distant_streak_adds_less() -> None:
    me = _user("me", streak=0)
    close = _user("close", streak=8)
    far = _user("far", streak=30)
    assert score_candidate(me, close).similarity_score == 3 + 1
    assert score_candidate(me, far).similarity_score == 3


def test_suggest_friends_orders_by_score_and_caps_at_five() -> None:
    me = _user("me", types=["breathing"])
    candidates = [_user(f"u{i}", goal="relaxation", types=["breathing"], streak=20) for i in range(6)]
    best = _user("best", types=["breathing"])
    suggestions = suggest_friends(me, candidates + [best])

    assert len(suggestions) == 5
    assert suggestions[0].user.username == "best"
