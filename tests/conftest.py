"""Shared fixtures for officebot tests."""

import datetime
from collections.abc import Generator
from typing import Any

import pytest

from officebot.domain.models import Attendee, MonthSchedule, WorkspaceSettings
from officebot.domain.schedule import create_month_schedule

# Wednesday; week 0 runs Monday 10th to Friday 14th March 2025
FIXED_TODAY = datetime.date(2025, 3, 12)


def pytest_configure(config: Any) -> None:
    """Register custom markers."""
    config.addinivalue_line("markers", "unit: Fast unit tests")
    config.addinivalue_line("markers", "smoke: Basic smoke tests")


@pytest.fixture(autouse=True)
def clean_test_environment(monkeypatch: Any) -> Generator[None, Any, None]:
    """Keep host OFFICEBOT_* and Slack variables from leaking into tests."""
    for key in (
        "OFFICEBOT_TEST_TIME",
        "OFFICEBOT_DEBUG",
        "OFFICEBOT_LOG_LEVEL",
        "OFFICEBOT_WEB_HOST",
        "OFFICEBOT_WEB_PORT",
        "PORT",
        "OFFICEBOT_DATA_FILE",
        "OFFICEBOT_WEATHER_LATITUDE",
        "OFFICEBOT_WEATHER_LONGITUDE",
        "OFFICEBOT_FORECAST_URL",
        "OFFICEBOT_QUOTES_ENABLED",
        "OFFICEBOT_CONFIG_FILE",
        "SLACK_BOT_TOKEN",
        "SLACK_SIGNING_SECRET",
    ):
        monkeypatch.delenv(key, raising=False)
    yield


@pytest.fixture
def today() -> datetime.date:
    return FIXED_TODAY


@pytest.fixture
def settings() -> WorkspaceSettings:
    """Default categories with a named office."""
    return WorkspaceSettings(office_name="London HQ", office_address="1 King Street")


@pytest.fixture
def month_schedule(today: datetime.date) -> MonthSchedule:
    """Four-week schedule starting the week of ``today`` with a few attendees.

    Week 0:
      - Monday (past): U1 office
      - Wednesday (today): U1 office, U2 remote, U3 holiday
      - Thursday: U2 traveling
    """
    schedule = create_month_schedule(today)
    schedule[0]["Monday"].attendees = [Attendee(user_id="U1", status="office")]
    schedule[0]["Wednesday"].attendees = [
        Attendee(user_id="U1", status="office"),
        Attendee(user_id="U2", status="remote"),
        Attendee(user_id="U3", status="holiday"),
    ]
    schedule[0]["Thursday"].attendees = [Attendee(user_id="<@U2>", status="traveling")]
    return schedule
