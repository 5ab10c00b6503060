from uuid import uuid4


def _befriend(client, sender, receiver_headers, receiver_name, sender_id):
    sent = client.post("/api/social/friends/request", headers=sender, json={"username": receiver_name})
    assert sent.status_code == 200, sent.text
    accepted = client.post("/api/social/friends/accept", headers=receiver_headers, json={"user_id": sender_id})
    assert accepted.status_code == 200, accepted.text


def test_friend_request_shows_up_on_both_sides(client, register) -> None:
    maya_headers, maya = register("maya")
    noah_headers, noah = register("noah")

    response = client.post("/api/social/friends/request", headers=maya_headers, json={"username": "noah"})
    assert response.json() == {"message": "Friend request sent successfully"}

    maya_requests = client.get("/api/social/friends/requests", headers=maya_headers).json()
    assert maya_requests["received"] == []
    assert [r["user"]["id"] for r in maya_requests["sent"]] == [noah["id"]]

    noah_requests = client.get("/api/social/friends/requests", headers=noah_headers).json()
    assert [r["user"]["id"] for r in noah_requests["received"]] == [maya["id"]]
    assert noah_requests["received"][0]["initiated_by"] == maya["id"]
    assert noah_requests["received"][0]["status"] == "pending"


def test_accepting_makes_friendship_symmetric(client, register) -> None:
    maya_headers, maya = register("maya")
    noah_headers, noah = register("noah")
    _befriend(client, maya_headers, noah_headers, "noah", maya["id"])

    maya_friends = client.get("/api/social/friends", headers=maya_headers).json()["friends"]
    noah_friends = client.get("/api/social/friends", headers=noah_headers).json()["friends"]
    assert [f["user"]["username"] for f in maya_friends] == ["noah"]
    assert [f["user"]["username"] for f in noah_friends] == ["maya"]
    assert maya_friends[0]["status"] == noah_friends[0]["status"] == "accepted"

    assert client.get("/api/social/friends/requests", headers=noah_headers).json()["received"] == []


def test_invalid_friend_requests(client, register) -> None:
    maya_headers, maya = register("maya")
    noah_headers, _ = register("noah")

    to_self = client.post("/api/social/friends/request", headers=maya_headers, json={"username": "maya"})
    assert to_self.status_code == 400
    assert to_self.json()["message"] == "Cannot send friend request to yourself"

    unknown = client.post("/api/social/friends/request", headers=maya_headers, json={"username": "ghost"})
    assert unknown.status_code == 404

    client.post("/api/social/friends/request", headers=maya_headers, json={"username": "noah"})
    again = client.post("/api/social/friends/request", headers=maya_headers, json={"username": "noah"})
    assert again.status_code == 400
    assert again.json()["message"] == "Friend request already sent"

    reverse = client.post("/api/social/friends/request", headers=noah_headers, json={"username": "maya"})
    assert reverse.status_code == 400

    own = client.post("/api/social/friends/accept", headers=maya_headers, json={"user_id": maya["id"]})
    assert own.status_code == 400


def test_cannot_accept_own_request_or_missing_request(client, register) -> None:
    maya_headers, _ = register("maya")
    _, noah = register("noah")
    client.post("/api/social/friends/request", headers=maya_headers, json={"username": "noah"})

    own = client.post("/api/social/friends/accept", headers=maya_headers, json={"user_id": noah["id"]})
    assert own.status_code == 400
    assert own.json()["message"] == "Cannot accept your own friend request"

    missing = client.post("/api/social/friends/accept", headers=maya_headers, json={"user_id": str(uuid4())})
    assert missing.status_code == 404


def test_remove_friend_clears_both_sides(client, register) -> None:
    maya_headers, maya = register("maya")
    noah_headers, noah = register("noah")
    _befriend(client, maya_headers, noah_headers, "noah", maya["id"])

    removed = client.delete(f"/api/social/friends/{noah['id']}", headers=maya_headers)
    assert removed.json() == {"message": "Friend removed successfully"}

    assert client.get("/api/social/friends", headers=maya_headers).json()["friends"] == []
    assert client.get("/api/social/friends", headers=noah_headers).json()["friends"] == []

    again = client.post("/api/social/friends/request", headers=noah_headers, json={"username": "maya"})
    assert again.status_code == 200


def test_feed_contains_shared_activities_of_friends_only(client, register) -> None:
    maya_headers, maya = register("maya")
    noah_headers, _ = register("noah")
    stranger_headers, _ = register("zoe")
    _befriend(client, maya_headers, noah_headers, "noah", maya["id"])

    def post_activity(headers, title, shared=True):
        created = client.post(
            "/api/activities",
            headers=headers,
            json={"type": "gratitude", "category": "mindfulness", "title": title, "content": "Three good things"},
        ).json()["activity"]
        if shared:
            client.post(
                f"/api/activities/{created['id']}/share",
                headers=headers,
                json={"make_public": True},
            )

    post_activity(maya_headers, "Maya shared")
    post_activity(noah_headers, "Noah private", shared=False)
    post_activity(noah_headers, "Noah shared")
    post_activity(stranger_headers, "Stranger shared")

    feed = client.get("/api/social/feed", headers=maya_headers).json()
    assert [a["title"] for a in feed["feed"]] == ["Noah shared", "Maya shared"]
    assert feed["feed"][0]["user"]["username"] == "noah"
    assert feed["pagination"]["total"] == 2
