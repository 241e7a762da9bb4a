"""Tests for Slack user lookups."""

from unittest.mock import AsyncMock, Mock

import pytest
from slack_sdk.errors import SlackApiError

from officebot.slack.user_directory import SlackUserDirectory

pytestmark = pytest.mark.unit


def _client(users):
    async def users_info(user):
        if user not in users:
            raise SlackApiError("user_not_found", {"ok": False, "error": "user_not_found"})
        return {"ok": True, "user": users[user]}

    client = Mock()
    client.users_info = AsyncMock(side_effect=users_info)
    return client


@pytest.fixture
def client():
    return _client(
        {
            "U1": {"id": "U1", "deleted": False},
            "U2": {"id": "U2", "deleted": True},
            "UADMIN": {"id": "UADMIN", "is_admin": True},
            "UOWNER": {"id": "UOWNER", "is_owner": True},
        }
    )


@pytest.mark.asyncio
async def test_is_active(client):
    users = SlackUserDirectory(client)
    assert await users.is_active("U1") is True
    assert await users.is_active("<@U2>") is False
    assert await users.is_active("U404") is False


@pytest.mark.asyncio
async def test_lookups_are_cached(client):
    users = SlackUserDirectory(client)
    await users.is_active("U1")
    await users.is_active("<@U1>")
    await users.is_admin("U1")
    await users.is_active("U404")
    await users.is_active("U404")

    assert client.users_info.await_count == 2


@pytest.mark.asyncio
async def test_is_admin(client):
    users = SlackUserDirectory(client)
    assert await users.is_admin("UADMIN") is True
    assert await users.is_admin("UOWNER") is True
    assert await users.is_admin("U1") is False
    assert await users.is_admin("U404") is False


@pytest.mark.asyncio
async def test_not_ok_response_is_treated_as_missing():
    client = Mock()
    client.users_info = AsyncMock(return_value={"ok": False, "error": "ratelimited"})
    users = SlackUserDirectory(client)

    assert await users.get_user("U1") is None
