"""Home tab layout: office header, one detailed block per day, admin footer.

Each day shows every enabled category with its attendees. In the home view
the final category section also carries the viewing user's status selector
for that day.
"""

from __future__ import annotations

import datetime
import logging
from typing import Any, Optional

from officebot.core.timezone_utils import today_local
from officebot.domain.models import (
    Attendee,
    Category,
    DaySchedule,
    MonthSchedule,
    WorkspaceSettings,
)
from officebot.domain.schedule import (
    find_user_status,
    get_empty_message,
    group_attendees_by_category,
    normalize_user_id,
    should_show_day,
)
from officebot.domain.weather import WeatherData, format_day_weather, format_weather_line
from officebot.slack.action_ids import (
    OPEN_SETTINGS_ACTION,
    SELECT_WEEK_ACTION,
    WEEK_LABELS,
    encode_status_value,
    status_action_id,
)
from officebot.slack.blocks import (
    button,
    context,
    divider,
    format_long_date,
    format_short_date,
    header,
    option,
    section,
    static_select,
    tiny_spacer,
)
from officebot.slack.office_blocks import NO_MORE_DAYS_TEXT, NO_SCHEDULE_TEXT
from officebot.slack.slack_types import Block, HomeView, OptionObject, StaticSelectElement

logger = logging.getLogger(__name__)


def render_user_list(attendees: list[Attendee], empty_message: str) -> str:
    if attendees:
        return " ".join(normalize_user_id(a.user_id) for a in attendees)
    return f"_{empty_message}_"


def create_category_text(category: Category, attendees: list[Attendee]) -> str:
    user_list = render_user_list(attendees, get_empty_message(category.id))
    return f"{category.emoji} {category.display_name}\n\n{user_list}"


def week_options() -> list[OptionObject]:
    return [option(label, str(index)) for index, label in enumerate(WEEK_LABELS)]


def create_week_selector(
    current_week: int, placeholder: str = "Choose a week"
) -> StaticSelectElement:
    """Week picker; preselects ``current_week`` when it has a label."""
    initial = None
    if 0 <= current_week < len(WEEK_LABELS):
        initial = option(WEEK_LABELS[current_week], str(current_week))
    return static_select(SELECT_WEEK_ACTION, placeholder, week_options(), initial)


def create_status_selector(
    day: str,
    day_date: datetime.date,
    current_week: int,
    user_status: Optional[str],
    enabled_categories: list[Category],
) -> StaticSelectElement:
    """Status picker for one day, preselecting the user's current status."""
    options = [
        option(c.label, encode_status_value(c.id, day, current_week)) for c in enabled_categories
    ]

    current = next((c for c in enabled_categories if c.id == user_status), None)
    if current is not None:
        placeholder = current.label
        initial = option(current.label, encode_status_value(current.id, day, current_week))
    else:
        placeholder = f"🔘 Set {format_short_date(day_date)} status..."
        initial = None

    return static_select(status_action_id(day, current_week), placeholder, options, initial)


def create_header_blocks(
    current_week: int,
    settings: WorkspaceSettings,
    quote_blocks: Optional[list[dict[str, Any]]] = None,
) -> list[Block]:
    """Quote, office name and the address line carrying the week picker."""
    return [
        divider(),
        *(quote_blocks or []),
        divider(),
        header(settings.office_name),
        section(f"📍 _{settings.office_address}_", create_week_selector(current_week)),
    ]


def create_day_blocks(
    day: str,
    schedule: DaySchedule,
    is_home_view: bool,
    current_week: int,
    user_id: str,
    weather: Optional[WeatherData],
    settings: WorkspaceSettings,
    today: Optional[datetime.date] = None,
) -> Optional[list[Block]]:
    """Detailed blocks for one day, or None when the day is already past.

    Order: header, optional weather context, divider, one section per
    enabled category with spacers between, then spacer, divider, spacer.
    """
    today = today or today_local()
    schedule_date = schedule.calendar_date
    if not should_show_day(schedule_date, today):
        return None

    is_current_day = schedule_date == today
    enabled = settings.enabled_categories
    groups = group_attendees_by_category(schedule.attendees, enabled)
    user_status = find_user_status(schedule, user_id)

    blocks: list[Block] = [header(format_long_date(schedule_date))]

    day_weather = format_day_weather(weather, schedule_date, is_current_day)
    if day_weather is not None:
        blocks.append(context(format_weather_line(day_weather, is_current_day)))

    blocks.append(divider())

    last_index = len(enabled) - 1
    for index, category in enumerate(enabled):
        text = create_category_text(category, groups[category.id])
        if index == last_index and is_home_view:
            selector = create_status_selector(
                day, schedule_date, current_week, user_status, enabled
            )
            blocks.append(section(text, selector))
        else:
            blocks.append(section(text))
            if index < last_index:
                blocks.append(tiny_spacer())

    blocks.extend([tiny_spacer(), divider(), tiny_spacer()])
    return blocks


def create_footer_blocks(is_home_view: bool, is_admin: bool) -> list[Block]:
    """Admin settings entry point; only admins viewing the home tab see it."""
    if not is_home_view or not is_admin:
        return []

    return [
        divider(),
        context("Admin Settings"),
        section(
            "Configure workspace settings including office location and categories.",
            button("⚙️ Workspace Settings", OPEN_SETTINGS_ACTION),
        ),
    ]


def build_home_blocks(
    month_schedule: Optional[MonthSchedule],
    current_week: int,
    user_id: str,
    settings: WorkspaceSettings,
    weather: Optional[WeatherData] = None,
    quote_blocks: Optional[list[dict[str, Any]]] = None,
    is_admin: bool = False,
    today: Optional[datetime.date] = None,
) -> list[Block]:
    blocks = create_header_blocks(current_week, settings, quote_blocks)

    week_schedule = (month_schedule or {}).get(current_week)
    if not week_schedule:
        blocks.append(section(NO_SCHEDULE_TEXT))
    else:
        has_visible_days = False
        for day, schedule in week_schedule.items():
            day_blocks = create_day_blocks(
                day, schedule, True, current_week, user_id, weather, settings, today
            )
            if day_blocks:
                has_visible_days = True
                blocks.extend(day_blocks)
        if not has_visible_days:
            blocks.append(section(NO_MORE_DAYS_TEXT))

    blocks.extend(create_footer_blocks(True, is_admin))
    logger.debug("Built home tab with %d blocks for week %d", len(blocks), current_week)
    return blocks


def build_home_view(
    month_schedule: Optional[MonthSchedule],
    current_week: int,
    user_id: str,
    settings: WorkspaceSettings,
    weather: Optional[WeatherData] = None,
    quote_blocks: Optional[list[dict[str, Any]]] = None,
    is_admin: bool = False,
    today: Optional[datetime.date] = None,
) -> HomeView:
    """Home tab view for ``user_id`` showing ``current_week``."""
    return {
        "type": "home",
        "blocks": build_home_blocks(
            month_schedule,
            current_week,
            user_id,
            settings,
            weather,
            quote_blocks,
            is_admin,
            today,
        ),
    }
