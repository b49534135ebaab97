"""Fixtures for intake tests: an app with a fake clock, in-memory store and notifier fakes."""

from __future__ import annotations

import itertools

import pytest

from intake import create_app
from intake.utils.rate_limit import RateLimiter


class FakeClock:
    def __init__(self, start: float = 1_700_000_000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class FakeStore:
    """Stands in for a create-record call; records what was persisted."""

    _ids = itertools.count(1)

    def __init__(self):
        self.records = []
        self.error = None

    def __call__(self, **fields):
        if self.error is not None:
            raise self.error
        record = {"id": f"rec-{next(self._ids)}", **fields, "created_at": "2026-10-19T00:00:00Z"}
        self.records.append(record)
        return record


class FakeNotifier:
    def __init__(self):
        self.calls = []
        self.error = None
        self.result = ("smtp", "<msg-1@test>")

    def __call__(self, record, *, to_email):
        self.calls.append((record, to_email))
        if self.error is not None:
            raise self.error
        return self.result


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def limiter(clock):
    return RateLimiter(max_per_window=5, window_seconds=3600, sweep_seconds=600, clock=clock)


@pytest.fixture
def app(limiter):
    app = create_app(
        {
            "TESTING": True,
            "RATE_LIMIT_ENABLED": True,
            "NOTIFICATION_EMAIL": "staff@example.com",
            "MESSENGER_HUB_URL": "https://hub.test",
            "MESSENGER_HUB_TIMEOUT": 2.0,
        },
        rate_limiter=limiter,
    )
    return app


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def inquiry_store(monkeypatch):
    store = FakeStore()
    monkeypatch.setattr("intake.services.intake_service.create_inquiry", store)
    return store


@pytest.fixture
def inquiry_notifier(monkeypatch):
    notifier = FakeNotifier()
    monkeypatch.setattr("intake.services.intake_service.send_inquiry_notification", notifier)
    return notifier


@pytest.fixture
def quotation_store(monkeypatch):
    store = FakeStore()
    monkeypatch.setattr("intake.services.intake_service.create_quotation", store)
    return store


@pytest.fixture
def quotation_notifier(monkeypatch):
    notifier = FakeNotifier()
    monkeypatch.setattr("intake.services.intake_service.send_quotation_notification", notifier)
    return notifier


@pytest.fixture
def valid_inquiry():
    return {
        "name": "  Ada Lovelace ",
        "company": " Analytical Cafe ",
        "email": "  Ada@Example.COM ",
        "message": " We need music for two floors.\nThanks ",
    }


@pytest.fixture
def valid_quotation():
    return {
        "firstName": "Grace",
        "lastName": "Hopper",
        "email": "grace@navy.example.org",
        "country": "Thailand",
        "companyName": "Compiler Hotel",
        "companyAddress": "1 Sukhumvit Rd\nBangkok",
        "preferredSolution": "beat-breeze",
        "numberOfZones": 3,
    }
