"""
Shared fixtures: a throwaway SQLite database per test, a TestClient wired to
it, and a deterministic stand-in for the language-model generator.
"""

import asyncio
import os
from typing import Optional

os.environ["APP_ENV"] = "development"
os.environ["JSON_LOGS"] = "false"
os.environ["AUTO_CREATE_TABLES"] = "false"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["JWT_SECRET"] = "selfcare-test-secret-with-enough-bytes-for-hs256"
os.environ["DATABASE_URL"] = "sqlite:///./selfcare-test.db"

import pytest
from fastapi.testclient import TestClient

from selfcare.content import (
    ContentGenerationError,
    ContentGenerator,
    ContentKind,
    ContentProfile,
    GeneratedContent,
    get_content_generator,
)
from selfcare.database import db_manager
from selfcare.main import app
from selfcare.models.enums import ActivityType, Difficulty
from selfcare.realtime.hub import notification_hub

PASSWORD = "secret123"


class FakeContentGenerator(ContentGenerator):
    """Returns canned content per kind and records every call"""

    def __init__(self):
        self.calls = []
        self.failing = set()

    async def generate(
        self,
        kind: ContentKind,
        profile: ContentProfile,
        context: Optional[str] = None,
    ) -> GeneratedContent:
        kind = ContentKind(kind)
        self.calls.append((kind, profile, context))
        if kind in self.failing:
            raise ContentGenerationError(kind.value)

        if kind == ContentKind.AFFIRMATION:
            return GeneratedContent(
                kind=kind,
                content="I am calm, capable and kind to myself.",
                activity_type=ActivityType.AFFIRMATION,
                duration=1,
                prompt="affirmation prompt",
            )
        if kind == ContentKind.WELLNESS_TIP:
            return GeneratedContent(
                kind=kind,
                content="Drink a glass of water before your morning coffee.",
                title="Wellness Tip",
                activity_type=ActivityType.TIP,
                duration=2,
                prompt="tip prompt",
            )
        if kind == ContentKind.JOURNALING_PROMPT:
            return GeneratedContent(
                kind=kind,
                content="What felt lighter today than yesterday?",
                title="Reflective Journaling",
                activity_type=ActivityType.JOURNALING,
                duration=10,
                prompt="journaling prompt",
            )
        if kind == ContentKind.MOTIVATIONAL_MESSAGE:
            return GeneratedContent(kind=kind, content="One small step today counts!")
        return GeneratedContent(
            kind=kind,
            content="Stand tall.\n\n1. Reach up\n2. Fold forward",
            title="Two-Minute Stretch",
            description="Loosen up your shoulders and back",
            activity_type=ActivityType.STRETCHING,
            duration=2,
            difficulty=Difficulty.BEGINNER,
            tags=["stretching", profile.primary_goal],
            steps=["Reach up", "Fold forward"],
            prompt="activity prompt",
        )


@pytest.fixture
def database(tmp_path):
    db_manager.configure(f"sqlite+aiosqlite:///{tmp_path / 'selfcare.db'}")
    asyncio.run(db_manager.create_all())
    yield db_manager
    asyncio.run(db_manager.dispose())


@pytest.fixture
def generator():
    return FakeContentGenerator()


@pytest.fixture
def client(database, generator):
    app.dependency_overrides[get_content_generator] = lambda: generator
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()
    notification_hub._rooms.clear()


def auth_headers(token: str) -> dict:
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def register(client):
    """Register a user and return ``(headers, user)``"""

    def _register(username: str, primary_goal: str = "stress_relief", **extra):
        payload = {
            "username": username,
            "email": f"{username}@mail.com",
            "password": PASSWORD,
            "primary_goal": primary_goal,
            **extra,
        }
        response = client.post("/api/auth/register", json=payload)
        assert response.status_code == 201, response.text
        body = response.json()
        return auth_headers(body["token"]), body["user"]

    return _register
