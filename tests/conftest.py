"""
Shared fixtures.

Async code is driven with asyncio.run through the `run` fixture; the
document store is the in-memory backend with a clock that ticks one
second per timestamp, so created_at ordering is deterministic.
"""

import asyncio
from datetime import datetime, timedelta, timezone

import pytest

from planner.config import AppSettings, AuthSettings, DashboardSettings
from planner.services.storage import InMemoryDocumentStore


class TickingClock:
    """Returns a strictly increasing UTC time on every call."""

    def __init__(self, start: datetime = datetime(2026, 5, 1, 12, 0, tzinfo=timezone.utc)):
        self.current = start

    def __call__(self) -> datetime:
        self.current += timedelta(seconds=1)
        return self.current


@pytest.fixture
def run():
    """Run a coroutine to completion."""
    return asyncio.run


@pytest.fixture
def clock():
    return TickingClock()


@pytest.fixture
def store(clock):
    return InMemoryDocumentStore(clock=clock)


@pytest.fixture
def app_settings():
    return AppSettings(
        default_project_name="Anna & Tom",
        default_currency="pln",
        default_owners_note="Private app - password gated",
    )


@pytest.fixture
def auth_settings():
    return AuthSettings(password="correct horse")


@pytest.fixture
def dashboard_settings():
    return DashboardSettings(load_timeout_seconds=15.0, top_categories=10)
