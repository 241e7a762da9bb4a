"""Tests for interactive action ids and option value encoding."""

import pytest

from officebot.domain.exceptions import InvalidActionError
from officebot.slack.action_ids import (
    SET_STATUS_ACTION_PATTERN,
    StatusSelection,
    decode_status_value,
    encode_status_value,
    parse_week_value,
    status_action_id,
)

pytestmark = pytest.mark.unit


def test_status_action_id_matches_listener_pattern():
    action_id = status_action_id("Thursday", 3)
    assert action_id == "set_status_thursday_3"
    assert SET_STATUS_ACTION_PATTERN.match(action_id)


def test_decode_status_value():
    value = encode_status_value("traveling", "Friday", 1)
    assert value == "status:traveling:Friday:1"
    assert decode_status_value(value) == StatusSelection(
        category_id="traveling", day="Friday", week=1
    )


@pytest.mark.parametrize(
    "value",
    [
        "",
        "office:Friday:1",
        "state:office:Friday:1",
        "status::Friday:1",
        "status:office:Friday:one",
        "status:office:Friday:1:extra",
    ],
)
def test_decode_status_value_rejects_malformed(value):
    with pytest.raises(InvalidActionError):
        decode_status_value(value)


def test_parse_week_value():
    assert parse_week_value("0") == 0
    assert parse_week_value("3") == 3


@pytest.mark.parametrize("value", ["4", "-1", "next", None])
def test_parse_week_value_rejects_unknown(value):
    with pytest.raises(InvalidActionError):
        parse_week_value(value)
