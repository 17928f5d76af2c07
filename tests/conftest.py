from datetime import datetime, timezone
from zoneinfo import ZoneInfo

import pytest

from services.day_records import DayRecordService
from services.fasting_session import FastingSessionEngine
from services.notifications import InMemoryNotificationDispatcher
from services.record_store import InMemoryRecordStore

UTC = ZoneInfo("UTC")


def at(year, month, day, hour=0, minute=0, second=0) -> datetime:
    return datetime(year, month, day, hour, minute, second, tzinfo=timezone.utc)


@pytest.fixture
def tz():
    return UTC


@pytest.fixture
def store():
    return InMemoryRecordStore()


@pytest.fixture
def dispatcher():
    return InMemoryNotificationDispatcher()


@pytest.fixture
def engine(store, dispatcher, tz):
    return FastingSessionEngine(store, dispatcher, tz)


@pytest.fixture
def days(store, dispatcher, tz):
    return DayRecordService(store, dispatcher, tz)
