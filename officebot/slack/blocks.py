"""Slack Block Kit primitives shared by the channel and home tab layouts."""

from __future__ import annotations

import datetime
from typing import Optional

from officebot.slack.slack_types import (
    ButtonElement,
    ContextBlock,
    DividerBlock,
    HeaderBlock,
    OptionObject,
    SectionBlock,
    StaticSelectElement,
    TextObject,
)


def divider() -> DividerBlock:
    return {"type": "divider"}


def tiny_spacer() -> ContextBlock:
    """A context block with a single space; renders as a thin vertical gap."""
    return {"type": "context", "elements": [{"type": "mrkdwn", "text": " "}]}


def plain_text(text: str, emoji: bool = True) -> TextObject:
    return {"type": "plain_text", "text": text, "emoji": emoji}


def mrkdwn(text: str) -> TextObject:
    return {"type": "mrkdwn", "text": text}


def header(text: str) -> HeaderBlock:
    return {"type": "header", "text": plain_text(text)}


def section(
    text: str, accessory: Optional[StaticSelectElement | ButtonElement] = None
) -> SectionBlock:
    block: SectionBlock = {"type": "section", "text": mrkdwn(text)}
    if accessory is not None:
        block["accessory"] = accessory
    return block


def context(text: str) -> ContextBlock:
    return {"type": "context", "elements": [mrkdwn(text)]}


def option(text: str, value: str) -> OptionObject:
    return {"text": plain_text(text), "value": value}


def static_select(
    action_id: str,
    placeholder: str,
    options: list[OptionObject],
    initial_option: Optional[OptionObject] = None,
) -> StaticSelectElement:
    """Build a static select menu.

    ``initial_option`` is only included when given; Slack rejects a null
    value for it.
    """
    element: StaticSelectElement = {
        "type": "static_select",
        "placeholder": plain_text(placeholder),
        "options": options,
        "action_id": action_id,
    }
    if initial_option is not None:
        element["initial_option"] = initial_option
    return element


def button(text: str, action_id: str) -> ButtonElement:
    return {"type": "button", "text": plain_text(text), "action_id": action_id}


def ordinal(day: int) -> str:
    """Return ``day`` with its English ordinal suffix (1st, 2nd, 11th, 23rd)."""
    if 11 <= day % 100 <= 13:
        suffix = "th"
    else:
        suffix = {1: "st", 2: "nd", 3: "rd"}.get(day % 10, "th")
    return f"{day}{suffix}"


def format_long_date(day: datetime.date) -> str:
    """Format as "Monday, 3rd March"."""
    return f"{day.strftime('%A')}, {ordinal(day.day)} {day.strftime('%B')}"


def format_short_date(day: datetime.date) -> str:
    """Format as "3rd Mar"."""
    return f"{ordinal(day.day)} {day.strftime('%b')}"
