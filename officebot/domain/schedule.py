"""Schedule rules shared by every rendering mode.

Covers which days are visible, how attendees group into categories, the
placeholder text for empty categories, and generation and mutation of month
schedules.
"""

from __future__ import annotations

import datetime
import logging
from typing import Optional

from officebot.core.timezone_utils import start_of_day, today_local
from officebot.domain.exceptions import InvalidActionError
from officebot.domain.models import (
    Attendee,
    Category,
    DaySchedule,
    MonthSchedule,
    WeekSchedule,
    WorkspaceSettings,
)

logger = logging.getLogger(__name__)

WORK_DAYS: tuple[str, ...] = ("Monday", "Tuesday", "Wednesday", "Thursday", "Friday")
DEFAULT_WEEKS = 4

EMPTY_MESSAGES: dict[str, str] = {
    "office": "No one in the office",
    "remote": "No one working remotely",
    "traveling": "No one traveling",
    "holiday": "No one on holiday",
}
DEFAULT_EMPTY_MESSAGE = "No one in this category"


def should_show_day(schedule_date: datetime.date, today: Optional[datetime.date] = None) -> bool:
    """Return True unless ``schedule_date`` is strictly before the start of today.

    Args:
        schedule_date: Calendar date of the scheduled day
        today: Reference day; defaults to the process-local current day
    """
    reference = start_of_day(today or today_local())
    return not start_of_day(schedule_date) < reference


def get_empty_message(category_id: str) -> str:
    """Placeholder shown when nobody is assigned to ``category_id``."""
    return EMPTY_MESSAGES.get(category_id, DEFAULT_EMPTY_MESSAGE)


def normalize_user_id(user_id: str) -> str:
    """Render a user id as a Slack mention, keeping already-wrapped mentions."""
    if not user_id:
        return ""
    if user_id.startswith("<@") and user_id.endswith(">"):
        return user_id
    return f"<@{user_id}>"


def strip_mention(user_id: str) -> str:
    """Return the bare user id from either ``U123`` or ``<@U123>``."""
    return user_id.replace("<@", "").replace(">", "")


def group_attendees_by_category(
    attendees: list[Attendee], categories: list[Category]
) -> dict[str, list[Attendee]]:
    """Partition attendees by status among ``categories``.

    Attendees whose status names none of the given categories are dropped.
    Every category gets an entry, possibly empty, in ``categories`` order.
    """
    groups: dict[str, list[Attendee]] = {category.id: [] for category in categories}
    for attendee in attendees:
        if attendee.status in groups:
            groups[attendee.status].append(attendee)
    return groups


def find_user_status(schedule: DaySchedule, user_id: str) -> Optional[str]:
    """Return the status ``user_id`` recorded for the day, if any."""
    wanted = normalize_user_id(user_id)
    for attendee in schedule.attendees:
        if normalize_user_id(attendee.user_id) == wanted:
            return attendee.status
    return None


def create_month_schedule(
    start: datetime.date, weeks: int = DEFAULT_WEEKS
) -> MonthSchedule:
    """Build an empty schedule of ``weeks`` work weeks.

    Week 0 begins on the Monday of the week containing ``start``; each week
    holds Monday to Friday.
    """
    monday = start - datetime.timedelta(days=start.weekday())
    schedule: MonthSchedule = {}
    for week in range(weeks):
        week_start = monday + datetime.timedelta(weeks=week)
        schedule[week] = {
            day_name: DaySchedule.for_date(week_start + datetime.timedelta(days=offset))
            for offset, day_name in enumerate(WORK_DAYS)
        }
    return schedule


def _week_monday(week: WeekSchedule) -> Optional[datetime.date]:
    if not week:
        return None
    first = min(day.calendar_date for day in week.values())
    return first - datetime.timedelta(days=first.weekday())


def roll_schedule_forward(
    schedule: MonthSchedule,
    today: Optional[datetime.date] = None,
    weeks: int = DEFAULT_WEEKS,
) -> Optional[MonthSchedule]:
    """Re-anchor ``schedule`` so week 0 is the week containing ``today``.

    Weeks that are still current move down to their new index with their
    attendees; past weeks are dropped and fresh weeks are appended so the
    result holds ``weeks`` weeks.

    Returns:
        The rolled schedule, or None when week 0 is already the current week
    """
    today = today or today_local()
    current_monday = today - datetime.timedelta(days=today.weekday())
    first_monday = _week_monday(schedule.get(0, {}))
    if first_monday is not None and first_monday >= current_monday:
        return None

    kept: dict[datetime.date, WeekSchedule] = {}
    for week in schedule.values():
        monday = _week_monday(week)
        if monday is not None and monday >= current_monday:
            kept[monday] = week

    rolled = create_month_schedule(current_monday, weeks)
    for index in range(weeks):
        existing = kept.get(current_monday + datetime.timedelta(weeks=index))
        if existing is not None:
            rolled[index] = existing

    logger.debug(
        "Rolled schedule forward from %s to %s (%d weeks kept)",
        first_monday,
        current_monday,
        len(kept),
    )
    return rolled


def set_attendee_status(
    schedule: MonthSchedule,
    week: int,
    day: str,
    user_id: str,
    category_id: str,
    settings: WorkspaceSettings,
) -> DaySchedule:
    """Record ``user_id`` as ``category_id`` for the given day.

    Any earlier entry for the user on that day is replaced, keeping the
    user's position in the list.

    Raises:
        InvalidActionError: If the week, day or category is unknown
    """
    category = settings.get_category(category_id)
    if category is None or not category.is_enabled:
        raise InvalidActionError(f"Unknown or disabled category: {category_id!r}")

    week_schedule = schedule.get(week)
    if week_schedule is None:
        raise InvalidActionError(f"No schedule for week {week}")

    day_schedule = week_schedule.get(day)
    if day_schedule is None:
        raise InvalidActionError(f"No schedule for {day} in week {week}")

    bare_id = strip_mention(user_id)
    for attendee in day_schedule.attendees:
        if strip_mention(attendee.user_id) == bare_id:
            attendee.status = category_id
            break
    else:
        day_schedule.attendees.append(Attendee(user_id=bare_id, status=category_id))

    logger.debug("Set %s to %s on %s (week %d)", bare_id, category_id, day, week)
    return day_schedule
