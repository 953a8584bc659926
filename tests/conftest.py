import os

# settings are read at import time
os.environ.setdefault("SUPABASE_URL", "https://test-project.supabase.co")
os.environ.setdefault("SUPABASE_SERVICE_ROLE_KEY", "service-role-key-for-tests")

import copy
import uuid

import pytest
from fastapi.testclient import TestClient

from pharmnexus.main import app
from pharmnexus.api.v1.routers import profiles as profiles_router
from pharmnexus.api.v1.routers import quizzes as quizzes_router
from pharmnexus.services.active_attempts import ActiveAttemptRegistry
from pharmnexus.services.quiz_service import QuizService


class FakeQuizRepository:
    """In-memory stand-in for the Supabase quizzes table."""

    def __init__(self) -> None:
        self.rows: dict[str, dict] = {}
        self.updates: list[tuple[str, dict]] = []
        self.fail_updates = False

    def add(self, row: dict) -> dict:
        self.rows[str(row["id"])] = copy.deepcopy(row)
        return row

    def list_quizzes(self, user_id, completed=None):
        return [
            copy.deepcopy(r)
            for r in self.rows.values()
            if r.get("user_id") == user_id
            and (completed is None or bool(r.get("completed")) == completed)
        ]

    def get_quiz(self, quiz_id):
        row = self.rows.get(quiz_id)
        return copy.deepcopy(row) if row else None

    def create_quiz(self, row):
        created = {**copy.deepcopy(row), "id": str(uuid.uuid4()), "created_at": "2026-10-18T09:00:00+00:00"}
        self.rows[created["id"]] = created
        return created

    def update_quiz_fields(self, quiz_id, fields):
        if self.fail_updates:
            raise ConnectionError("supabase unreachable")
        self.updates.append((quiz_id, copy.deepcopy(fields)))
        self.rows[quiz_id].update(copy.deepcopy(fields))


class FakeProfileRepository:
    def __init__(self) -> None:
        self.points: dict[str, int] = {}

    def get_points(self, user_id):
        return self.points.get(user_id)

    def set_points(self, user_id, points):
        self.points[user_id] = points


class FakeRedis:
    def __init__(self) -> None:
        self.data: dict[str, str] = {}
        self.ttls: dict[str, int] = {}

    async def get(self, key):
        return self.data.get(key)

    async def set(self, key, value, ex=None):
        self.data[key] = value
        if ex is not None:
            self.ttls[key] = ex
        return True

    async def delete(self, *keys):
        removed = 0
        for key in keys:
            if self.data.pop(key, None) is not None:
                removed += 1
            self.ttls.pop(key, None)
        return removed


def make_questions(correct=(0, 1, 2, 3)):
    return [
        {
            "question": f"Question {i + 1}?",
            "options": ["A", "B", "C", "D"],
            "correctAnswer": c,
            "explanation": f"Because {c}.",
            "category": "dosage",
        }
        for i, c in enumerate(correct)
    ]


def make_quiz_row(quiz_id="quiz-1", user_id="user-1", correct=(0, 1, 2, 3), **overrides):
    row = {
        "id": quiz_id,
        "user_id": user_id,
        "course_id": "course-1",
        "title": "Professional Evaluation: Pharmacology",
        "questions": make_questions(correct),
        "deadline": "2026-10-25",
        "completed": False,
        "score": None,
        "user_answers": None,
        "current_index": None,
        "created_at": "2026-10-18T08:00:00+00:00",
    }
    row.update(overrides)
    return row


@pytest.fixture
def quiz_repo():
    return FakeQuizRepository()


@pytest.fixture
def profile_repo():
    return FakeProfileRepository()


@pytest.fixture
def fake_redis():
    return FakeRedis()


@pytest.fixture
def client(quiz_repo, profile_repo, fake_redis):
    app.dependency_overrides[quizzes_router.get_service] = lambda: QuizService(quiz_repo, profile_repo)
    app.dependency_overrides[quizzes_router.get_registry] = lambda: ActiveAttemptRegistry(fake_redis, 60)
    app.dependency_overrides[profiles_router.get_profiles] = lambda: profile_repo
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def quiz_row():
    return make_quiz_row
