"""Compact channel message listing who is where for the rest of the week."""

from __future__ import annotations

import datetime
import logging
from typing import Optional

from officebot.domain.models import Attendee, DaySchedule, MonthSchedule, WorkspaceSettings
from officebot.domain.schedule import (
    group_attendees_by_category,
    normalize_user_id,
    should_show_day,
)
from officebot.slack.blocks import divider, format_long_date, header, section
from officebot.slack.slack_types import Block
from officebot.slack.user_directory import UserDirectory

logger = logging.getLogger(__name__)

OFFICE_HEADER = "📅 Office Schedule This Week"
NO_SCHEDULE_TEXT = "🚫 No schedule available for this week"
NO_MORE_DAYS_TEXT = "📅 No more days scheduled this week"
NO_ONE_SCHEDULED_TEXT = "_No one scheduled_"


async def active_mentions(
    attendees: list[Attendee], users: Optional[UserDirectory] = None
) -> list[str]:
    """Mentions for attendees, dropping users the directory reports inactive.

    A failing lookup omits that user rather than failing the render.
    """
    mentions = []
    for attendee in attendees:
        if users is not None:
            try:
                if not await users.is_active(attendee.user_id):
                    continue
            except Exception:
                logger.exception("User lookup failed for %s", attendee.user_id)
                continue
        mentions.append(normalize_user_id(attendee.user_id))
    return mentions


async def create_simple_day_blocks(
    schedule: DaySchedule,
    settings: WorkspaceSettings,
    users: Optional[UserDirectory] = None,
    today: Optional[datetime.date] = None,
) -> Optional[list[Block]]:
    """Blocks for one day, or None when the day is already past."""
    schedule_date = schedule.calendar_date
    if not should_show_day(schedule_date, today):
        return None

    enabled = settings.enabled_categories
    groups = group_attendees_by_category(schedule.attendees, enabled)

    blocks: list[Block] = [section(f"*{format_long_date(schedule_date)}*")]

    listed = False
    for category in enabled:
        mentions = await active_mentions(groups[category.id], users)
        if mentions:
            listed = True
            blocks.append(section(f"{category.emoji} {' '.join(mentions)}"))

    if not listed:
        blocks.append(section(NO_ONE_SCHEDULED_TEXT))

    blocks.append(divider())
    return blocks


async def generate_office_blocks(
    month_schedule: MonthSchedule,
    current_week: int,
    settings: WorkspaceSettings,
    users: Optional[UserDirectory] = None,
    today: Optional[datetime.date] = None,
) -> list[Block]:
    """Render the remaining days of ``current_week`` as a channel message.

    Args:
        month_schedule: Week index -> day name -> day record
        current_week: Week index to render
        settings: Workspace categories and office details
        users: Optional directory used to drop deactivated users
        today: Reference day for hiding past days (process-local today if None)

    Returns:
        Ordered Block Kit blocks; never ends with a divider.
    """
    blocks: list[Block] = [header(OFFICE_HEADER), divider()]

    week_schedule = month_schedule.get(current_week)
    if not week_schedule:
        blocks.append(section(NO_SCHEDULE_TEXT))
        return blocks

    has_visible_days = False
    for schedule in week_schedule.values():
        day_blocks = await create_simple_day_blocks(schedule, settings, users, today)
        if day_blocks:
            has_visible_days = True
            blocks.extend(day_blocks)

    if not has_visible_days:
        blocks.append(section(NO_MORE_DAYS_TEXT))

    if blocks and blocks[-1]["type"] == "divider":
        blocks.pop()

    return blocks
