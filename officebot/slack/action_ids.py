"""Action identifiers and option values used by interactive blocks.

Status options carry ``status:<category>:<day>:<week>`` so a selection can be
applied without any server-side view state.
"""

from __future__ import annotations

import re
from dataclasses import dataclass

from officebot.domain.exceptions import InvalidActionError

SELECT_WEEK_ACTION = "select_week"
OPEN_SETTINGS_ACTION = "open_settings"
SETTINGS_CALLBACK_ID = "workspace_settings"

SET_STATUS_ACTION_PATTERN = re.compile(r"^set_status_[a-z]+_\d+$")

WEEK_LABELS: tuple[str, ...] = ("This Week", "Next Week", "In 2 Weeks", "In 3 Weeks")

_STATUS_PREFIX = "status"


@dataclass(frozen=True)
class StatusSelection:
    """A decoded status option value."""

    category_id: str
    day: str
    week: int


def status_action_id(day: str, week: int) -> str:
    """Action id of the status selector for ``day`` in ``week``."""
    return f"set_status_{day.lower()}_{week}"


def encode_status_value(category_id: str, day: str, week: int) -> str:
    return f"{_STATUS_PREFIX}:{category_id}:{day}:{week}"


def decode_status_value(value: str) -> StatusSelection:
    """Decode a ``status:<category>:<day>:<week>`` option value.

    Raises:
        InvalidActionError: If the value does not follow the encoding
    """
    parts = value.split(":")
    if len(parts) != 4 or parts[0] != _STATUS_PREFIX:
        raise InvalidActionError(f"Malformed status value: {value!r}")

    _, category_id, day, week_text = parts
    if not category_id or not day:
        raise InvalidActionError(f"Malformed status value: {value!r}")

    try:
        week = int(week_text)
    except ValueError as e:
        raise InvalidActionError(f"Invalid week in status value: {value!r}") from e

    return StatusSelection(category_id=category_id, day=day, week=week)


def parse_week_value(value: str) -> int:
    """Decode the week selector value into a week index.

    Raises:
        InvalidActionError: If the value is not a known week index
    """
    try:
        week = int(value)
    except (TypeError, ValueError) as e:
        raise InvalidActionError(f"Invalid week value: {value!r}") from e

    if not 0 <= week < len(WEEK_LABELS):
        raise InvalidActionError(f"Week out of range: {week}")
    return week
