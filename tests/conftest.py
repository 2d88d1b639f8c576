"""Pytest configuration and fixtures."""
import pytest
from fastapi.testclient import TestClient

from classroom.app import app
from classroom.dependencies import get_store
from classroom.models import EssayQuestion, MultipleChoiceQuestion
from classroom.store import MemoryBackend, RecordStore


TEACHER_PASSWORD = "admin123"


class FixedRandom:
    """Stand-in for ``random.Random`` that replays the given values."""

    def __init__(self, *values: int):
        self.values = list(values)
        self.calls = 0

    def randrange(self, stop: int) -> int:
        value = self.values[min(self.calls, len(self.values) - 1)]
        self.calls += 1
        return value


@pytest.fixture
def store():
    """Seeded in-memory store, wiped after the test."""
    store = RecordStore(MemoryBackend())
    store.init()
    yield store
    store.teardown()


@pytest.fixture
def client(store: RecordStore):
    """Create test client bound to the in-memory store."""
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def teacher_client(client: TestClient) -> TestClient:
    """Create test client logged in as the seeded teacher."""
    response = client.post("/login/teacher", data={"password": TEACHER_PASSWORD})
    assert response.status_code == 200
    return client


@pytest.fixture
def mc_question() -> MultipleChoiceQuestion:
    return MultipleChoiceQuestion(
        id="q-mc", question="Which option is right?", options=["A", "B", "C", "D"],
        correct_answer=2, points=10,
    )


@pytest.fixture
def essay_question() -> EssayQuestion:
    return EssayQuestion(id="q-essay", question="Explain your answer.", points=5)


@pytest.fixture
def activity_payload() -> dict:
    """Activity form as the teacher client sends it."""
    return {
        "title": "Fractions quiz",
        "description": "Chapter 3",
        "questions": [
            {
                "type": "multiple-choice",
                "question": "1/2 + 1/2 = ?",
                "options": ["0", "1", "2"],
                "correctAnswer": 1,
                "points": 10,
            },
            {"type": "essay", "question": "Why?", "points": 5},
        ],
    }


@pytest.fixture
def env_settings(monkeypatch):
    """Apply environment overrides to freshly loaded settings."""
    from classroom.config import get_settings

    def apply(**values):
        for name, value in values.items():
            monkeypatch.setenv(name, str(value))
        get_settings.cache_clear()
        return get_settings()

    yield apply
    get_settings.cache_clear()
