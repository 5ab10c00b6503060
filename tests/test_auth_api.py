from conftest import PASSWORD, auth_headers


def test_register_returns_token_and_default_preferences(register) -> None:
    headers, user = register("maya", first_name="Maya", current_mood="calm")

    assert user["username"] == "maya"
    assert user["email"] == "maya@mail.com"
    assert user["profile"]["first_name"] == "Maya"
    assert user["current_mood"] == "calm"
    assert user["streak_data"]["current_streak"] == 0
    assert user["privacy"]["profile_visibility"] == "friends"
    assert user["preferences"]["theme_preferences"]["color_scheme"] == "pastel_pink"
    assert "password_hash" not in user


def test_register_rejects_duplicate_email_and_username(client, register) -> None:
    register("maya")

    same_email = client.post(
        "/api/auth/register",
        json={"username": "other", "email": "MAYA@mail.com", "password": PASSWORD, "primary_goal": "relaxation"},
    )
    assert same_email.status_code == 400
    assert same_email.json()["message"] == "User with this email already exists"

    same_username = client.post(
        "/api/auth/register",
        json={"username": "maya", "email": "new@mail.com", "password": PASSWORD, "primary_goal": "relaxation"},
    )
    assert same_username.status_code == 400
    assert same_username.json()["message"] == "Username is already taken"


def test_register_validation_error_shape(client) -> None:
    response = client.post(
        "/api/auth/register",
        json={"username": "x", "email": "not-an-email", "password": "1", "primary_goal": "fame"},
    )
    assert response.status_code == 400
    body = response.json()
    assert body["message"] == "Validation error"
    assert len(body["details"]) >= 3


def test_login_and_me(client, register) -> None:
    register("maya")

    response = client.post("/api/auth/login", json={"email": "maya@mail.com", "password": PASSWORD})
    assert response.status_code == 200
    body = response.json()
    assert body["message"] == "Login successful"
    assert body["user"]["last_login"] is not None

    me = client.get("/api/auth/me", headers=auth_headers(body["token"]))
    assert me.status_code == 200
    assert me.json()["user"]["username"] == "maya"


def test_login_with_wrong_password_is_rejected(client, register) -> None:
    register("maya")
    response = client.post("/api/auth/login", json={"email": "maya@mail.com", "password": "wrong-password"})
    assert response.status_code == 401
    assert response.json()["message"] == "Invalid credentials"


def test_protected_routes_require_a_valid_token(client) -> None:
    missing = client.get("/api/auth/me")
    assert missing.status_code == 401
    assert missing.json()["message"] == "No token, authorization denied"

    garbage = client.get("/api/auth/me", headers=auth_headers("not-a-jwt"))
    assert garbage.status_code == 401
    assert garbage.json()["message"] == "Token is not valid"


def test_update_profile_merges_preference_sections(client, register) -> None:
    headers, _ = register("maya")

    response = client.put(
        "/api/auth/profile",
        headers=headers,
        json={
            "bio": "Learning to slow down",
            "current_mood": "happy",
            "preferences": {"content_preferences": {"preferred_activity_types": ["reading"]}},
        },
    )
    assert response.status_code == 200
    user = response.json()["user"]
    assert user["profile"]["bio"] == "Learning to slow down"
    assert user["current_mood"] == "happy"
    assert user["preferences"]["content_preferences"]["preferred_activity_types"] == ["reading"]
    assert user["preferences"]["notification_settings"]["daily_reminders"] is True


def test_change_password(client, register) -> None:
    headers, _ = register("maya")

    wrong = client.post(
        "/api/auth/change-password",
        headers=headers,
        json={"current_password": "nope", "new_password": "newsecret"},
    )
    assert wrong.status_code == 401

    ok = client.post(
        "/api/auth/change-password",
        headers=headers,
        json={"current_password": PASSWORD, "new_password": "newsecret"},
    )
    assert ok.status_code == 200
    login = client.post("/api/auth/login", json={"email": "maya@mail.com", "password": "newsecret"})
    assert login.status_code == 200


def test_password_reset_flow(client, register) -> None:
    register("maya")

    unknown = client.post("/api/auth/forgot-password", json={"email": "ghost@mail.com"})
    assert unknown.status_code == 200
    assert "reset_token" not in unknown.json()

    issued = client.post("/api/auth/forgot-password", json={"email": "maya@mail.com"})
    assert issued.json()["message"] == unknown.json()["message"]
    token = issued.json()["reset_token"]

    reset = client.post("/api/auth/reset-password", json={"token": token, "new_password": "fresh-pass"})
    assert reset.status_code == 200

    reused = client.post("/api/auth/reset-password", json={"token": token, "new_password": "again-pass"})
    assert reused.status_code == 400
    assert reused.json()["message"] == "Invalid or expired reset token"

    login = client.post("/api/auth/login", json={"email": "maya@mail.com", "password": "fresh-pass"})
    assert login.status_code == 200


def test_deactivated_account_cannot_log_in_or_use_token(client, register) -> None:
    headers, _ = register("maya")

    response = client.request("DELETE", "/api/auth/account", headers=headers, json={"password": PASSWORD})
    assert response.status_code == 200

    assert client.get("/api/auth/me", headers=headers).status_code == 401
    login = client.post("/api/auth/login", json={"email": "maya@mail.com", "password": PASSWORD})
    assert login.status_code == 401
    assert login.json()["message"] == "Account is deactivated"


def test_verify_token(client, register) -> None:
    headers, user = register("maya")
    response = client.post("/api/auth/verify-token", headers=headers)
    assert response.json() == {
        "valid": True,
        "user_id": user["id"],
        "email": "maya@mail.com",
        "username": "maya",
    }
