"""Shared fixtures: a throwaway SQLite store and an in-memory notifier."""

from datetime import datetime
from zoneinfo import ZoneInfo

import pytest

from dailywalk.db.migrations import run_migrations
from dailywalk.db.models import ScheduledNotification
from dailywalk.db.repository import Repository
from dailywalk.engine.completion import CompletionTracker
from dailywalk.engine.notifier import SchedulingError
from dailywalk.engine.scheduler import SchedulingEngine

TZ = "America/New_York"
TODAY = "2026-03-02"
# 10:00 EST on Monday 2026-03-02
NOW = datetime(2026, 3, 2, 15, 0, tzinfo=ZoneInfo("UTC"))


class FakeNotifier:
    """Records what the engine hands over instead of delivering it."""

    def __init__(self, granted: bool = True):
        self.granted = granted
        self.scheduled: dict[str, ScheduledNotification] = {}
        self.submitted: list[ScheduledNotification] = []
        self.fail_ids: set[str] = set()
        self.errors: dict[str, Exception] = {}
        self.cancelled: list[str] = []

    async def request_permission(self) -> bool:
        return self.granted

    async def schedule(self, notification: ScheduledNotification) -> str:
        if notification.identifier in self.fail_ids:
            raise SchedulingError(f"rejected {notification.identifier}")
        if notification.identifier in self.errors:
            raise self.errors[notification.identifier]
        self.submitted.append(notification)
        self.scheduled[notification.identifier] = notification
        return notification.identifier

    async def cancel(self, identifier: str) -> None:
        self.cancelled.append(identifier)
        self.scheduled.pop(identifier, None)

    async def list_scheduled(self) -> list[str]:
        return list(self.scheduled)


@pytest.fixture
async def repo(tmp_path):
    db_path = tmp_path / "dailywalk.db"
    await run_migrations(db_path)
    repository = Repository(db_path)
    await repository.connect()
    yield repository
    await repository.close()


@pytest.fixture
def notifier():
    return FakeNotifier()


@pytest.fixture
def engine(repo, notifier):
    return SchedulingEngine(repo, notifier, TZ)


@pytest.fixture
def tracker(engine):
    return CompletionTracker(engine)
