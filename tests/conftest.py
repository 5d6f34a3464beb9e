"""Shared test fixtures for the HabitGem analytics test suite."""

import json
from datetime import date, datetime, time, timedelta

import pytest

from habitgem.config import AIServiceConfig, AnalyticsConfig
from habitgem.models import CompletionRecord, Habit, HabitCategory


# ── Dates ───────────────────────────────────────────────────────────────

# 2025-06-02 is a Monday
MONDAY = date(2025, 6, 2)


@pytest.fixture
def monday():
    return MONDAY


# ── Records ─────────────────────────────────────────────────────────────

def make_record(day, completed=True, habit_id="h1", hour=None, difficulty=None):
    """Build a CompletionRecord; hour sets completion_time on that day."""
    completion_time = datetime.combine(day, time(hour, 0)) if hour is not None else None
    return CompletionRecord(
        habit_id=habit_id,
        date=day,
        is_completed=completed,
        completion_time=completion_time,
        difficulty=difficulty,
    )


def make_history(statuses, start=MONDAY, habit_id="h1", hour=None):
    """One record per consecutive day, statuses is an iterable of bools."""
    return [
        make_record(start + timedelta(days=i), bool(status), habit_id=habit_id, hour=hour)
        for i, status in enumerate(statuses)
    ]


@pytest.fixture
def record():
    return make_record


@pytest.fixture
def history():
    return make_history


@pytest.fixture
def weekday_history():
    """30 days from a Monday: completed on weekdays, missed at weekends."""
    return make_history(
        [(MONDAY + timedelta(days=i)).weekday() < 5 for i in range(30)]
    )


# ── Habits ──────────────────────────────────────────────────────────────

@pytest.fixture
def habit():
    return Habit(
        id="h1",
        name="Morning run",
        category=HabitCategory.FITNESS,
        difficulty=3,
        created_at=datetime(2025, 6, 2, 8, 0),
        user_id="u1",
    )


@pytest.fixture
def make_habit():
    def _make(habit_id, name=None, category=HabitCategory.OTHER, difficulty=3, user_id="u1", **kwargs):
        return Habit(
            id=habit_id,
            name=name or f"Habit {habit_id}",
            category=category,
            difficulty=difficulty,
            created_at=datetime(2025, 6, 2, 8, 0),
            user_id=user_id,
            **kwargs,
        )
    return _make


# ── Settings ────────────────────────────────────────────────────────────

@pytest.fixture
def settings():
    return AnalyticsConfig()


@pytest.fixture
def ai_settings():
    return AIServiceConfig(base_url="https://api.habitgem.com/", api_key="test-key", request_timeout=5)


@pytest.fixture
def disabled_ai_settings():
    return AIServiceConfig(base_url=None, enabled=False)


# ── Fake aiohttp session ────────────────────────────────────────────────

class FakeResponse:
    """Minimal stand-in for aiohttp.ClientResponse used as an async context manager."""

    def __init__(self, status=200, payload=None, body=None, reason="OK"):
        self.status = status
        self.reason = reason
        self._body = body if body is not None else json.dumps(payload if payload is not None else {})

    async def text(self):
        return self._body

    async def json(self, content_type="application/json"):
        return json.loads(self._body)

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc, tb):
        return False


class FakeSession:
    """Records POST calls and replays a prepared response or exception."""

    def __init__(self, response=None, error=None):
        self.response = response or FakeResponse()
        self.error = error
        self.calls = []
        self.closed = False

    def post(self, url, json=None, headers=None, timeout=None):
        self.calls.append({"url": url, "json": json, "headers": headers, "timeout": timeout})
        if self.error is not None:
            raise self.error
        return self.response

    async def close(self):
        self.closed = True


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def fake_response():
    return FakeResponse
