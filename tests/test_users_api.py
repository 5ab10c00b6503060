def _complete_one(client, headers, title="Walk"):
    activity = client.post(
        "/api/activities",
        headers=headers,
        json={"type": "exercise", "category": "stress_relief", "title": title, "content": "Twenty minutes outside"},
    ).json()["activity"]
    client.post(f"/api/activities/{activity['id']}/complete", headers=headers)
    return activity


def test_search_requires_two_characters(client, register) -> None:
    headers, _ = register("maya")
    register("mayra", first_name="Mayra")
    register("noah")

    short = client.get("/api/users/search", headers=headers, params={"q": "m"})
    assert short.status_code == 400

    found = client.get("/api/users/search", headers=headers, params={"q": "MAY"}).json()["users"]
    assert [u["username"] for u in found] == ["mayra"]
    assert found[0]["current_streak"] == 0


def test_profile_visibility_rules(client, register) -> None:
    maya_headers, maya = register("maya")
    noah_headers, _ = register("noah")

    own = client.get(f"/api/users/{maya['id']}/profile", headers=maya_headers).json()["user"]
    assert own["relationship"] == {"is_friend": False, "is_own_profile": True}

    hidden = client.get(f"/api/users/{maya['id']}/profile", headers=noah_headers)
    assert hidden.status_code == 403
    assert hidden.json()["message"] == "Profile is only visible to friends"

    updated = client.put("/api/users/privacy", headers=maya_headers, json={"profile_visibility": "public"})
    assert updated.json() == {
        "message": "Privacy settings updated successfully",
        "privacy": {"profile_visibility": "public", "share_progress": True},
    }
    _complete_one(client, maya_headers)

    visible = client.get(f"/api/users/{maya['id']}/profile", headers=noah_headers).json()["user"]
    assert visible["username"] == "maya"
    assert visible["stats"]["total_completed"] == 1
    assert visible["stats"]["favorite_activity_type"] == "exercise"
    assert [a["type"] for a in visible["achievements"]] == ["first_activity"]

    client.put("/api/users/privacy", headers=maya_headers, json={"profile_visibility": "private"})
    assert client.get(f"/api/users/{maya['id']}/profile", headers=noah_headers).status_code == 403


def test_leaderboards(client, register) -> None:
    maya_headers, _ = register("maya")
    noah_headers, noah = register("noah")
    _complete_one(client, maya_headers)

    streaks = client.get("/api/users/leaderboard", headers=noah_headers).json()
    assert [e["user"]["username"] for e in streaks["leaderboard"]] == ["maya", "noah"]
    assert streaks["leaderboard"][0]["label"] == "1 day"
    assert streaks["current_user_rank"] == 2
    assert streaks["type"] == "streak"
    assert streaks["period"] == "all"

    activities = client.get("/api/users/leaderboard", headers=maya_headers, params={"type": "activities"}).json()
    assert activities["leaderboard"][0]["value"] == 1
    assert activities["leaderboard"][0]["label"] == "1 activities"
    assert activities["current_user_rank"] == 1

    shared = client.post(
        "/api/activities",
        headers=noah_headers,
        json={"type": "music", "category": "relaxation", "title": "Playlist", "content": "Lo-fi"},
    ).json()["activity"]
    client.post(f"/api/activities/{shared['id']}/share", headers=noah_headers, json={"make_public": True})
    client.post(f"/api/activities/{shared['id']}/like", headers=maya_headers)

    social = client.get("/api/users/leaderboard", headers=maya_headers, params={"type": "social"}).json()
    assert [(e["user"]["id"], e["value"]) for e in social["leaderboard"]] == [(noah["id"], 1)]
    assert social["current_user_rank"] is None

    invalid = client.get("/api/users/leaderboard", headers=maya_headers, params={"type": "karma"})
    assert invalid.status_code == 400


def test_suggestions_rank_similar_users(client, register) -> None:
    maya_headers, _ = register("maya", primary_goal="mindfulness")
    register("noah", primary_goal="mindfulness")
    register("zoe", primary_goal="productivity")
    register("liam", primary_goal="mindfulness")

    client.post("/api/social/friends/request", headers=maya_headers, json={"username": "liam"})

    suggestions = client.get("/api/users/suggestions", headers=maya_headers).json()["suggestions"]
    assert [s["user"]["username"] for s in suggestions] == ["noah"]
    assert suggestions[0]["similarity_score"] == 5
    assert suggestions[0]["reasons"] == ["Same wellness goal", "Similar activity level"]


def test_unlock_achievement_once(client, register) -> None:
    headers, _ = register("maya")

    unlocked = client.post("/api/users/achievements/unlock", headers=headers, json={"type": "social_butterfly"})
    assert unlocked.status_code == 200
    body = unlocked.json()
    assert body["message"] == "Achievement unlocked successfully"
    assert body["achievement"]["description"] == "Shared 10 activities with friends"

    again = client.post("/api/users/achievements/unlock", headers=headers, json={"type": "social_butterfly"})
    assert again.status_code == 400
    assert again.json()["message"] == "Achievement already unlocked"
