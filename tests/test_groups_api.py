from datetime import timedelta
from uuid import uuid4

import pytest

from selfcare.utils.time import utcnow


@pytest.fixture
def admin(register):
    return register("maya")


def _create_group(client, headers, **overrides):
    payload = {
        "name": "Evening Unwind",
        "description": "Wind down together every evening",
        "category": "relaxation",
        **overrides,
    }
    response = client.post("/api/social/groups", headers=headers, json=payload)
    assert response.status_code == 201, response.text
    return response.json()["group"]


def _challenge_payload(**overrides):
    now = utcnow()
    return {
        "title": "Seven calm evenings",
        "type": "daily_activity",
        "goal": {"target": 7, "unit": "days"},
        "start_date": (now - timedelta(days=1)).isoformat(),
        "end_date": (now + timedelta(days=6)).isoformat(),
        **overrides,
    }


def test_creator_becomes_admin(client, admin) -> None:
    headers, user = admin
    group = _create_group(client, headers)

    assert group["member_count"] == 1
    assert group["user_role"] == "admin"
    assert group["members"][0]["user_id"] == user["id"]
    assert group["settings"]["max_members"] == 100
    assert group["creator"]["username"] == "maya"

    mine = client.get("/api/social/groups", headers=headers).json()["groups"]
    assert [g["id"] for g in mine] == [group["id"]]


def test_join_respects_max_members(client, admin, register) -> None:
    headers, _ = admin
    group = _create_group(client, headers, settings={"max_members": 2})
    noah_headers, _ = register("noah")
    zoe_headers, _ = register("zoe")

    joined = client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers)
    assert joined.json() == {"message": "Successfully joined group"}

    full = client.post(f"/api/social/groups/{group['id']}/join", headers=zoe_headers)
    assert full.status_code == 400
    assert full.json()["message"] == "Group has reached maximum member limit"

    again = client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers)
    assert again.json()["message"] == "Already a member of this group"


def test_leave_and_rejoin(client, admin, register) -> None:
    headers, _ = admin
    group = _create_group(client, headers)
    noah_headers, _ = register("noah")

    client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers)
    left = client.post(f"/api/social/groups/{group['id']}/leave", headers=noah_headers)
    assert left.json() == {"message": "Successfully left group"}
    assert client.get("/api/social/groups", headers=noah_headers).json()["groups"] == []

    rejoined = client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers)
    assert rejoined.status_code == 200
    detail = client.get(f"/api/social/groups/{group['id']}", headers=headers).json()["group"]
    assert detail["member_count"] == 2
    assert len(detail["members"]) == 2

    not_member = client.post(f"/api/social/groups/{group['id']}/leave", headers=register("zoe")[0])
    assert not_member.status_code == 400


def test_private_group_needs_invitation(client, admin, register) -> None:
    headers, _ = admin
    group = _create_group(client, headers, privacy="private")
    noah_headers, noah = register("noah")

    hidden = client.get(f"/api/social/groups/{group['id']}", headers=noah_headers)
    assert hidden.status_code == 403

    refused = client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers)
    assert refused.status_code == 403
    assert refused.json()["message"] == "Cannot join private group without invitation"

    invited = client.post(f"/api/social/groups/{group['id']}/invite", headers=headers, json={"user_id": noah["id"]})
    assert invited.json() == {"message": "Invitation sent successfully"}
    duplicate = client.post(f"/api/social/groups/{group['id']}/invite", headers=headers, json={"user_id": noah["id"]})
    assert duplicate.status_code == 400

    assert client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers).status_code == 200
    assert client.get(f"/api/social/groups/{group['id']}", headers=noah_headers).status_code == 200


def test_discover_lists_only_listed_groups(client, admin) -> None:
    headers, _ = admin
    _create_group(client, headers, name="Calm Corner")
    _create_group(client, headers, name="Secret Circle", privacy="private")
    _create_group(client, headers, name="Focus Crew", category="productivity", privacy="invite_only")

    found = client.get("/api/social/groups/discover", headers=headers).json()
    assert sorted(g["name"] for g in found["groups"]) == ["Calm Corner", "Focus Crew"]
    assert found["pagination"]["total"] == 2

    by_category = client.get("/api/social/groups/discover", headers=headers, params={"category": "productivity"}).json()
    assert [g["name"] for g in by_category["groups"]] == ["Focus Crew"]

    by_search = client.get("/api/social/groups/discover", headers=headers, params={"search": "CALM"}).json()
    assert [g["name"] for g in by_search["groups"]] == ["Calm Corner"]


def test_popular_groups_ranked_by_members(client, admin, register) -> None:
    headers, _ = admin
    _create_group(client, headers, name="Small")
    busy = _create_group(client, headers, name="Busy")
    client.post(f"/api/social/groups/{busy['id']}/join", headers=register("noah")[0])

    popular = client.get("/api/social/groups/popular", headers=headers).json()["groups"]
    assert [g["name"] for g in popular] == ["Busy", "Small"]
    assert popular[0]["member_count"] == 2


def test_only_admins_change_roles(client, admin, register) -> None:
    headers, _ = admin
    group = _create_group(client, headers)
    noah_headers, noah = register("noah")
    client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers)

    forbidden = client.put(
        f"/api/social/groups/{group['id']}/members/{noah['id']}/role",
        headers=noah_headers,
        json={"role": "admin"},
    )
    assert forbidden.status_code == 403

    promoted = client.put(
        f"/api/social/groups/{group['id']}/members/{noah['id']}/role",
        headers=headers,
        json={"role": "moderator"},
    )
    assert promoted.json() == {"message": "Member role updated successfully"}
    assert client.get("/api/social/groups", headers=noah_headers).json()["groups"][0]["user_role"] == "moderator"


def test_challenge_lifecycle(client, admin, register) -> None:
    headers, _ = admin
    group = _create_group(client, headers)
    noah_headers, noah = register("noah")
    client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers)

    denied = client.post(f"/api/social/groups/{group['id']}/challenges", headers=noah_headers, json=_challenge_payload())
    assert denied.status_code == 403

    created = client.post(f"/api/social/groups/{group['id']}/challenges", headers=headers, json=_challenge_payload())
    assert created.status_code == 201
    challenge = created.json()["challenge"]
    base = f"/api/social/groups/{group['id']}/challenges/{challenge['id']}"

    not_joined = client.post(f"{base}/progress", headers=noah_headers, json={"progress": 1})
    assert not_joined.status_code == 400

    assert client.post(f"{base}/join", headers=noah_headers).json() == {"message": "Successfully joined challenge"}
    assert client.post(f"{base}/join", headers=noah_headers).status_code == 200

    for raw in ('{"progress": Infinity}', '{"progress": NaN}'):
        rejected = client.post(
            f"{base}/progress", headers={**noah_headers, "Content-Type": "application/json"}, content=raw
        )
        assert rejected.status_code == 400
        assert rejected.json()["message"] == "Validation error"

    halfway = client.post(f"{base}/progress", headers=noah_headers, json={"progress": 4}).json()["challenge"]
    assert halfway["participants"] == [
        {**halfway["participants"][0], "user_id": noah["id"], "progress": 4, "is_completed": False}
    ]

    done = client.post(f"{base}/progress", headers=noah_headers, json={"progress": 7}).json()["challenge"]
    assert done["participants"][0]["is_completed"] is True

    lowered = client.post(f"{base}/progress", headers=noah_headers, json={"progress": 5}).json()["challenge"]
    assert lowered["participants"][0]["progress"] == 5
    assert lowered["participants"][0]["is_completed"] is True

    detail = client.get(f"/api/social/groups/{group['id']}", headers=headers).json()["group"]
    assert detail["active_challenges_count"] == 1
    assert detail["stats"]["total_challenges_completed"] == 1

    outsider = client.post(f"{base}/progress", headers=register("zoe")[0], json={"progress": 1})
    assert outsider.status_code == 403

    missing = client.post(f"/api/social/groups/{group['id']}/challenges/{uuid4()}/join", headers=noah_headers)
    assert missing.status_code == 404


def test_challenge_rejects_inverted_dates(client, admin) -> None:
    headers, _ = admin
    group = _create_group(client, headers)
    now = utcnow()
    response = client.post(
        f"/api/social/groups/{group['id']}/challenges",
        headers=headers,
        json=_challenge_payload(start_date=now.isoformat(), end_date=(now - timedelta(days=1)).isoformat()),
    )
    assert response.status_code == 400


def test_posts_reactions_and_comments(client, admin, register) -> None:
    headers, _ = admin
    group = _create_group(client, headers)
    noah_headers, noah = register("noah")

    outsider = client.post(f"/api/social/groups/{group['id']}/posts", headers=noah_headers, json={"content": "Hi"})
    assert outsider.status_code == 403

    client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers)
    created = client.post(
        f"/api/social/groups/{group['id']}/posts",
        headers=headers,
        json={"content": "How did everyone sleep?", "type": "question"},
    )
    assert created.status_code == 201
    post = created.json()["post"]
    base = f"/api/social/groups/{group['id']}/posts/{post['id']}"

    client.post(f"{base}/react", headers=noah_headers, json={"type": "like"})
    reacted = client.post(f"{base}/react", headers=noah_headers, json={"type": "support"}).json()["post"]
    assert [(r["user_id"], r["type"]) for r in reacted["reactions"]] == [(noah["id"], "support")]

    commented = client.post(f"{base}/comment", headers=noah_headers, json={"content": "Eight hours!"}).json()
    assert commented["message"] == "Comment added successfully"
    assert commented["post"]["comments"][0]["user"]["username"] == "noah"

    detail = client.get(f"/api/social/groups/{group['id']}", headers=headers).json()["group"]
    assert [p["content"] for p in detail["posts"]] == ["How did everyone sleep?"]
    assert detail["stats"]["total_activities"] == 1


def test_member_posts_can_be_restricted_to_staff(client, admin, register) -> None:
    headers, _ = admin
    group = _create_group(client, headers, settings={"allow_member_posts": False})
    noah_headers, _ = register("noah")
    client.post(f"/api/social/groups/{group['id']}/join", headers=noah_headers)

    member_post = client.post(f"/api/social/groups/{group['id']}/posts", headers=noah_headers, json={"content": "Hi"})
    assert member_post.status_code == 403
    admin_post = client.post(f"/api/social/groups/{group['id']}/posts", headers=headers, json={"content": "Welcome"})
    assert admin_post.status_code == 201
