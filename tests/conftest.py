# tests/conftest.py
from __future__ import annotations

from datetime import datetime, timedelta

import pytest
from fastapi.testclient import TestClient

from shopfront.main import create_app
from shopfront.settings import Settings


class StepClock:
    """Hands out strictly increasing timestamps, one second apart."""

    def __init__(self, start: datetime = datetime(2025, 3, 1, 12, 0, 0)):
        self.now = start

    def __call__(self) -> datetime:
        self.now = self.now + timedelta(seconds=1)
        return self.now


def make_settings(database_url: str = "") -> Settings:
    return Settings(database_url=database_url, jwt_secret="test-secret", log_level="WARNING")


@pytest.fixture
def clock():
    return StepClock()


@pytest.fixture
def memory_client(clock):
    with TestClient(create_app(make_settings(), clock=clock)) as c:
        yield c


@pytest.fixture
def sql_client(clock):
    # in-process SQLite stands in for the external database
    with TestClient(create_app(make_settings("sqlite://"), clock=clock)) as c:
        yield c


@pytest.fixture(params=["memory", "sql"])
def client(request, clock):
    url = "sqlite://" if request.param == "sql" else ""
    with TestClient(create_app(make_settings(url), clock=clock)) as c:
        yield c