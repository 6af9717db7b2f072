"""Shared pytest fixtures: in-memory MongoDB, fake OpenAI client, Flask app."""

from __future__ import annotations

import sys
from pathlib import Path
from types import SimpleNamespace

import mongomock
import pytest

# Ensure the application package is importable during tests.
PROJECT_ROOT = Path(__file__).resolve().parents[1]
if str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from careercoach import database  # noqa: E402
from careercoach.main import create_app  # noqa: E402
from careercoach.services import auth_service, user_service  # noqa: E402
from careercoach.services.generation import GenerationConfig, GenerationOrchestrator  # noqa: E402
from careercoach.utils.auth import generate_token, now_seconds  # noqa: E402


class FakeResponses:
    """Stands in for ``client.responses``; replays canned outputs in order."""

    def __init__(self, outputs):
        self.outputs = list(outputs)
        self.calls = []

    def create(self, **kwargs):
        self.calls.append(kwargs)
        output = self.outputs.pop(0) if self.outputs else ""
        if isinstance(output, Exception):
            raise output
        return SimpleNamespace(output_text=output, model=kwargs.get("model"))


class FakeOpenAIClient:
    def __init__(self, *outputs):
        self.responses = FakeResponses(outputs)

    @property
    def calls(self):
        return self.responses.calls


@pytest.fixture(autouse=True)
def mongo_db(monkeypatch: pytest.MonkeyPatch):
    """Provide an isolated in-memory MongoDB database for each test."""
    test_db_name = "test_career_coach"
    monkeypatch.setenv("MONGODB_DATABASE", test_db_name)
    monkeypatch.delenv("OPENAI_API_KEY", raising=False)

    client = mongomock.MongoClient()
    db = client[test_db_name]

    monkeypatch.setattr(database, "get_mongo_client", lambda: client)
    monkeypatch.setattr(database, "get_database", lambda: db)
    database.create_indexes()

    yield db

    client.drop_database(test_db_name)


@pytest.fixture
def fake_openai_client():
    return FakeOpenAIClient


@pytest.fixture
def offline_orchestrator():
    return GenerationOrchestrator(GenerationConfig())


@pytest.fixture
def ai_orchestrator():
    """Build an enabled orchestrator whose client replays the given outputs."""

    def _build(*outputs):
        client = FakeOpenAIClient(*outputs)
        orchestrator = GenerationOrchestrator(GenerationConfig(api_key="test-key"), client=client)
        return orchestrator, client

    return _build


@pytest.fixture
def user():
    user_service.upsert_user("WORK01", name="Ada Lovelace", email="ada@example.com")
    return user_service.update_profile(
        "WORK01",
        industry="Software Development",
        experience=5,
        skills=["Python", "SQL", "Docker"],
        bio="Backend engineer focused on data platforms.",
    )


@pytest.fixture
def other_user():
    user_service.upsert_user("WORK02", name="Grace Hopper")
    return user_service.update_profile("WORK02", industry="Finance", experience=10, skills=["COBOL"])


@pytest.fixture
def app(offline_orchestrator):
    flask_app = create_app(orchestrator=offline_orchestrator)
    flask_app.config["TESTING"] = True
    return flask_app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def auth_headers():
    """Issue a session for a subject and return the Authorization header."""

    def _headers(subject: str):
        token = generate_token("sess")
        auth_service.open_session(token, subject, now_seconds() + 3600)
        return {"Authorization": f"Bearer {token}"}

    return _headers
