"""Process-local time helpers for officebot.

All day-level decisions (which days are past, which day is today) use the
timezone of the running process.
"""

from __future__ import annotations

import datetime
import logging
import os

from dateutil import parser as date_parser

logger = logging.getLogger(__name__)

TEST_TIME_ENV = "OFFICEBOT_TEST_TIME"


def now_local() -> datetime.datetime:
    """Return the current process-local time as a naive datetime.

    Can be overridden for testing via the OFFICEBOT_TEST_TIME environment
    variable (ISO 8601, e.g. "2025-03-12T09:30:00" or with an offset).
    Offset-aware overrides are converted to process-local time.
    """
    test_time = os.environ.get(TEST_TIME_ENV)
    if test_time:
        try:
            dt = date_parser.isoparse(test_time)
            if dt.tzinfo is not None:
                dt = dt.astimezone().replace(tzinfo=None)
            return dt
        except ValueError as e:
            logger.warning("Failed to parse %s=%r: %s", TEST_TIME_ENV, test_time, e)

    return datetime.datetime.now()


def today_local() -> datetime.date:
    """Return the current process-local calendar date."""
    return now_local().date()


def start_of_day(value: datetime.date | datetime.datetime) -> datetime.datetime:
    """Return midnight at the start of the given day."""
    if isinstance(value, datetime.datetime):
        value = value.date()
    return datetime.datetime.combine(value, datetime.time.min)


def now_iso() -> str:
    """Return the current local time as an ISO 8601 string with offset."""
    return now_local().astimezone().isoformat(timespec="seconds")
