from datetime import datetime
from uuid import uuid4

import pytest

BREATHING = {
    "type": "breathing",
    "category": "stress_relief",
    "title": "Box breathing",
    "content": "Inhale 4, hold 4, exhale 4, hold 4.",
    "duration": 5,
    "tags": ["calm"],
}


@pytest.fixture
def maya(register):
    return register("maya")


def _moment(value: str) -> datetime:
    # SQLite hands timestamps back without tzinfo
    return datetime.fromisoformat(value.replace("Z", "+00:00")).replace(tzinfo=None)


def _create(client, headers, **overrides):
    response = client.post("/api/activities", headers=headers, json={**BREATHING, **overrides})
    assert response.status_code == 201, response.text
    return response.json()["activity"]


def _share_publicly(client, headers, activity_id):
    response = client.post(f"/api/activities/{activity_id}/share", headers=headers, json={"make_public": True})
    assert response.status_code == 200


def test_create_and_get_activity(client, maya) -> None:
    headers, user = maya
    activity = _create(client, headers)

    assert activity["user_id"] == user["id"]
    assert activity["type"] == "breathing"
    assert activity["completion_data"]["is_completed"] is False
    assert activity["social_data"]["is_shared"] is False
    assert activity["is_ai_generated"] is False

    fetched = client.get(f"/api/activities/{activity['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["activity"]["title"] == "Box breathing"


def test_create_rejects_unknown_type(client, maya) -> None:
    headers, _ = maya
    response = client.post("/api/activities", headers=headers, json={**BREATHING, "type": "napping"})
    assert response.status_code == 400
    assert response.json()["message"] == "Validation error"


def test_list_filters_and_paginates(client, maya) -> None:
    headers, _ = maya
    for i in range(3):
        _create(client, headers, title=f"Breathing {i}")
    _create(client, headers, type="reading", title="A chapter")

    page = client.get("/api/activities", headers=headers, params={"limit": 2}).json()
    assert len(page["activities"]) == 2
    assert page["pagination"] == {"current": 1, "pages": 2, "total": 4, "has_next": True, "has_prev": False}

    readings = client.get("/api/activities", headers=headers, params={"type": "reading"}).json()
    assert [a["title"] for a in readings["activities"]] == ["A chapter"]

    by_title = client.get("/api/activities", headers=headers, params={"sort": "title", "type": "breathing"}).json()
    assert [a["title"] for a in by_title["activities"]] == ["Breathing 0", "Breathing 1", "Breathing 2"]


def test_activities_are_private_to_their_owner(client, maya, register) -> None:
    headers, _ = maya
    other_headers, _ = register("noah")
    activity = _create(client, headers)

    response = client.get(f"/api/activities/{activity['id']}", headers=other_headers)
    assert response.status_code == 404
    assert response.json()["message"] == "Activity not found"
    assert client.get(f"/api/activities/{uuid4()}", headers=headers).status_code == 404


def test_update_and_soft_delete(client, maya) -> None:
    headers, _ = maya
    activity = _create(client, headers)

    updated = client.put(
        f"/api/activities/{activity['id']}",
        headers=headers,
        json={"title": "Square breathing", "duration": 8},
    )
    assert updated.status_code == 200
    assert updated.json()["activity"]["title"] == "Square breathing"
    assert updated.json()["activity"]["duration"] == 8

    deleted = client.delete(f"/api/activities/{activity['id']}", headers=headers)
    assert deleted.json()["message"] == "Activity deleted successfully"
    assert client.get(f"/api/activities/{activity['id']}", headers=headers).status_code == 404
    assert client.get("/api/activities", headers=headers).json()["pagination"]["total"] == 0


def test_complete_updates_streak_and_unlocks_first_activity(client, maya) -> None:
    headers, _ = maya
    activity = _create(client, headers)

    response = client.post(
        f"/api/activities/{activity['id']}/complete",
        headers=headers,
        json={"rating": 5, "mood_before": "stressed", "mood_after": "calm"},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Activity completed successfully"
    assert body["activity"]["completion_data"]["is_completed"] is True
    assert body["activity"]["completion_data"]["mood_after"] == "calm"
    assert body["streak_data"]["current_streak"] == 1
    assert body["streak_data"]["total_activities_completed"] == 1
    assert [a["type"] for a in body["achievements_unlocked"]] == ["first_activity"]

    me = client.get("/api/auth/me", headers=headers).json()["user"]
    assert me["streak_data"]["longest_streak"] == 1


def test_completing_twice_is_rejected_and_keeps_first_completion(client, maya) -> None:
    headers, _ = maya
    activity = _create(client, headers)

    first = client.post(f"/api/activities/{activity['id']}/complete", headers=headers, json={"rating": 4})
    completed_at = first.json()["activity"]["completion_data"]["completed_at"]

    second = client.post(f"/api/activities/{activity['id']}/complete", headers=headers, json={"rating": 1})
    assert second.status_code == 400
    assert second.json()["message"] == "Activity already completed"

    current = client.get(f"/api/activities/{activity['id']}", headers=headers).json()["activity"]
    assert _moment(current["completion_data"]["completed_at"]) == _moment(completed_at)
    assert current["completion_data"]["rating"] == 4

    me = client.get("/api/auth/me", headers=headers).json()["user"]
    assert me["streak_data"]["total_activities_completed"] == 1


def test_like_toggles_without_duplicates(client, maya, register) -> None:
    headers, user = maya
    noah_headers, _ = register("noah")
    activity = _create(client, headers)
    _share_publicly(client, headers, activity["id"])

    liked = client.post(f"/api/activities/{activity['id']}/like", headers=noah_headers).json()
    assert liked == {"message": "Activity liked", "like_count": 1, "is_liked": True}

    own_like = client.post(f"/api/activities/{activity['id']}/like", headers=headers).json()
    assert own_like["like_count"] == 2

    unliked = client.post(f"/api/activities/{activity['id']}/like", headers=noah_headers).json()
    assert unliked == {"message": "Activity unliked", "like_count": 1, "is_liked": False}

    likes = client.get(f"/api/activities/{activity['id']}", headers=headers).json()["activity"]["social_data"]["likes"]
    assert [like["user_id"] for like in likes] == [user["id"]]


def test_comment_on_activity(client, maya, register) -> None:
    headers, _ = maya
    noah_headers, _ = register("noah")
    activity = _create(client, headers)

    response = client.post(
        f"/api/activities/{activity['id']}/comment",
        headers=noah_headers,
        json={"content": "  Love this one  "},
    )
    assert response.status_code == 200
    body = response.json()
    assert body["comment"]["content"] == "Love this one"
    assert body["comment"]["user"]["username"] == "noah"
    assert body["comment_count"] == 1

    blank = client.post(f"/api/activities/{activity['id']}/comment", headers=noah_headers, json={"content": "   "})
    assert blank.status_code == 400


def test_share_with_users(client, maya, register) -> None:
    headers, user = maya
    _, noah = register("noah")
    activity = _create(client, headers)

    unknown = client.post(
        f"/api/activities/{activity['id']}/share",
        headers=headers,
        json={"share_with": [str(uuid4())]},
    )
    assert unknown.status_code == 400

    for _ in range(2):
        shared = client.post(
            f"/api/activities/{activity['id']}/share",
            headers=headers,
            json={"share_with": [noah["id"], user["id"]]},
        )
        assert shared.status_code == 200
    assert shared.json()["activity"]["social_data"]["shared_with"] == [noah["id"]]


def test_trending_ranks_by_engagement_then_recency(client, maya, register) -> None:
    headers, _ = maya
    fans = [register(f"fan{i}")[0] for i in range(5)]

    commented = _create(client, headers, title="Commented")
    liked = _create(client, headers, title="Liked")
    quiet = _create(client, headers, title="Quiet")
    _create(client, headers, title="Not shared")
    for activity in (commented, liked, quiet):
        _share_publicly(client, headers, activity["id"])

    # 3 comments -> score 6; 5 likes -> score 5
    for fan in fans[:3]:
        client.post(f"/api/activities/{commented['id']}/comment", headers=fan, json={"content": "nice"})
    for fan in fans[:5]:
        client.post(f"/api/activities/{liked['id']}/like", headers=fan)

    trending = client.get("/api/activities/trending", headers=headers).json()["activities"]
    assert [a["title"] for a in trending] == ["Commented", "Liked", "Quiet"]
    assert trending[0]["engagement_score"] == 6
    assert trending[1]["engagement_score"] == 5


def test_stats_summary(client, maya) -> None:
    headers, _ = maya
    first = _create(client, headers)
    _create(client, headers, type="reading", category="relaxation", title="Novel")
    client.post(f"/api/activities/{first['id']}/complete", headers=headers, json={"rating": 4, "mood_after": "calm"})

    stats = client.get("/api/activities/stats/summary", headers=headers).json()["stats"]
    assert stats["total_activities"] == 2
    assert stats["completed_activities"] == 1
    assert stats["average_rating"] == 4
    assert stats["activities_by_type"] == {"breathing": 1, "reading": 1}
    assert stats["activities_by_category"] == {"stress_relief": 1, "relaxation": 1}
    assert stats["weekly_progress"]["completion_rate"] == 50
    assert stats["mood_trends"] == [{"mood": "calm", "count": 1}]


def test_trending_breaks_score_ties_by_newest(client, maya, register) -> None:
    headers, _ = maya
    fans = [register(f"fan{i}")[0] for i in range(5)]

    five_likes = _create(client, headers, title="Five likes")
    like_two_comments = _create(client, headers, title="One like, two comments")
    three_likes_comment = _create(client, headers, title="Three likes, one comment")
    top = _create(client, headers, title="Three comments")
    for activity in (five_likes, like_two_comments, three_likes_comment, top):
        _share_publicly(client, headers, activity["id"])

    def engage(activity, likes, comments):
        for fan in fans[:likes]:
            client.post(f"/api/activities/{activity['id']}/like", headers=fan)
        for fan in fans[:comments]:
            client.post(f"/api/activities/{activity['id']}/comment", headers=fan, json={"content": "lovely"})

    engage(five_likes, likes=5, comments=0)
    engage(like_two_comments, likes=1, comments=2)
    engage(three_likes_comment, likes=3, comments=1)
    engage(top, likes=0, comments=3)

    trending = client.get("/api/activities/trending", headers=headers).json()["activities"]
    assert [(a["title"], a["engagement_score"]) for a in trending] == [
        ("Three comments", 6),
        ("Three likes, one comment", 5),
        ("One like, two comments", 5),
        ("Five likes", 5),
    ]
