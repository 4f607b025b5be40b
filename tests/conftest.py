"""Pytest fixtures for the task list tests."""

from collections.abc import Callable
from datetime import UTC, datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from daily_tasks.config import Settings
from daily_tasks.main import create_app
from daily_tasks.storage import MemoryStorage
from daily_tasks.store import TaskStore

START = datetime(2024, 1, 1, 9, 0, tzinfo=UTC)


class FakeClock:
    """Deterministic clock: every call moves one minute forward."""

    def __init__(self, start: datetime = START) -> None:
        self.now = start

    def __call__(self) -> datetime:
        self.now += timedelta(minutes=1)
        return self.now


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture
def make_store(storage: MemoryStorage, clock: FakeClock) -> Callable[[], TaskStore]:
    """Build a store over the shared storage, as a fresh session would."""

    def _make() -> TaskStore:
        return TaskStore(storage, clock=clock)

    return _make


@pytest.fixture
def store(make_store: Callable[[], TaskStore]) -> TaskStore:
    return make_store()


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        data_dir=tmp_path / "data",
        storage_key="tasks",
        log_level="INFO",
        log_dir=tmp_path / "logs",
        host="127.0.0.1",
        port=8000,
        cors_origins=("http://localhost:3000",),
    )


@pytest.fixture
def client(store: TaskStore, settings: Settings) -> TestClient:
    """Create a test client for the API."""
    return TestClient(create_app(store, settings=settings))
