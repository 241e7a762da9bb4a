"""Tests for the Slack listeners."""

import threading
from unittest.mock import AsyncMock, Mock

import pytest
from slack_sdk.errors import SlackApiError

from officebot.domain.store import WorkspaceStore
from officebot.slack.handlers import (
    SCHEDULE_NOT_FOUND_TEXT,
    OfficeBotHandlers,
    register_listeners,
)
from officebot.slack.settings_modal import (
    CATEGORIES_ACTION,
    CATEGORIES_BLOCK,
    OFFICE_ADDRESS_ACTION,
    OFFICE_ADDRESS_BLOCK,
    OFFICE_NAME_ACTION,
    OFFICE_NAME_BLOCK,
)

pytestmark = pytest.mark.unit


@pytest.fixture(autouse=True)
def fixed_time(monkeypatch):
    monkeypatch.setenv("OFFICEBOT_TEST_TIME", "2025-03-12T09:00:00")


@pytest.fixture
def store(tmp_path):
    return WorkspaceStore(tmp_path / "workspaces.json")


@pytest.fixture
def client():
    client = Mock()
    client.users_info = AsyncMock(
        side_effect=lambda user: {
            "ok": True,
            "user": {"id": user, "is_admin": user == "UADMIN"},
        }
    )
    client.views_publish = AsyncMock()
    client.views_open = AsyncMock()
    return client


@pytest.fixture
def handlers(store):
    weather = Mock()
    weather.get_weather = AsyncMock(return_value=None)
    quotes = Mock()
    quotes.get_blocks = AsyncMock(return_value=[])
    return OfficeBotHandlers(store, weather, quotes)


def _published_view(client):
    return client.views_publish.call_args.kwargs["view"]


def _block_texts(blocks):
    texts = []
    for block in blocks:
        text = block.get("text")
        if isinstance(text, dict):
            texts.append(text["text"])
    return texts


class TestOfficeCommand:
    @pytest.mark.asyncio
    async def test_unknown_workspace(self, handlers, client):
        ack, say = AsyncMock(), AsyncMock()

        await handlers.handle_office_command(ack, {"team_id": "T1"}, say, client)

        ack.assert_awaited_once()
        say.assert_awaited_once_with(SCHEDULE_NOT_FOUND_TEXT)

    @pytest.mark.asyncio
    async def test_posts_week_zero(self, handlers, store, client):
        store.ensure_schedule("T1")
        store.set_status("T1", 0, "Thursday", "U5", "office")
        ack, say = AsyncMock(), AsyncMock()

        await handlers.handle_office_command(ack, {"team_id": "T1"}, say, client)

        kwargs = say.call_args.kwargs
        assert kwargs["text"] == "Here's who's in the office this week"
        assert "🏢 <@U5>" in _block_texts(kwargs["blocks"])
        assert "*Tuesday, 11th March*" not in _block_texts(kwargs["blocks"])

    @pytest.mark.asyncio
    async def test_shows_current_week_after_week_changes(
        self, handlers, store, client, monkeypatch
    ):
        store.ensure_schedule("T1")
        store.set_status("T1", 1, "Wednesday", "U5", "remote")
        monkeypatch.setenv("OFFICEBOT_TEST_TIME", "2025-03-19T09:00:00")
        say = AsyncMock()

        await handlers.handle_office_command(AsyncMock(), {"team_id": "T1"}, say, client)

        texts = _block_texts(say.call_args.kwargs["blocks"])
        assert "*Wednesday, 19th March*" in texts
        assert "🏠 <@U5>" in texts
        assert "📅 No more days scheduled this week" not in texts
        assert store.get_schedule("T1")[0]["Monday"].calendar_date.day == 17


class TestHomeOpened:
    @pytest.mark.asyncio
    async def test_publishes_home_and_creates_schedule(self, handlers, store, client):
        await handlers.handle_home_opened(
            {"type": "app_home_opened", "user": "U1", "tab": "home"}, {"team_id": "T1"}, client
        )

        client.views_publish.assert_awaited_once()
        assert client.views_publish.call_args.kwargs["user_id"] == "U1"
        view = _published_view(client)
        assert view["type"] == "home"
        assert store.get_schedule("T1") is not None
        # non-admin: no settings button
        assert all(
            b.get("accessory", {}).get("action_id") != "open_settings" for b in view["blocks"]
        )

    @pytest.mark.asyncio
    async def test_admin_sees_settings_button(self, handlers, client):
        await handlers.handle_home_opened({"user": "UADMIN"}, {"team_id": "T1"}, client)
        assert _published_view(client)["blocks"][-1]["accessory"]["action_id"] == "open_settings"

    @pytest.mark.asyncio
    async def test_messages_tab_is_ignored(self, handlers, client):
        await handlers.handle_home_opened(
            {"user": "U1", "tab": "messages"}, {"team_id": "T1"}, client
        )
        client.views_publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_publish_failure_is_logged(self, handlers, client):
        client.views_publish.side_effect = SlackApiError(
            "invalid_blocks", {"ok": False, "error": "invalid_blocks"}
        )
        await handlers.handle_home_opened({"user": "U1"}, {"team_id": "T1"}, client)


class TestStatusSelection:
    @pytest.mark.asyncio
    async def test_sets_status_and_republishes_week(self, handlers, store, client):
        store.ensure_schedule("T1")
        ack = AsyncMock()
        body = {"team": {"id": "T1"}, "user": {"id": "U1"}}
        action = {
            "action_id": "set_status_friday_1",
            "selected_option": {"value": "status:remote:Friday:1"},
        }

        await handlers.handle_set_status(ack, body, action, client)

        ack.assert_awaited_once()
        attendees = store.require_schedule("T1")[1]["Friday"].attendees
        assert [(a.user_id, a.status) for a in attendees] == [("U1", "remote")]
        week_selector = _published_view(client)["blocks"][3]["accessory"]
        assert week_selector["initial_option"]["value"] == "1"

    @pytest.mark.asyncio
    async def test_store_write_runs_off_event_loop(self, handlers, store, client, monkeypatch):
        store.ensure_schedule("T1")
        write_threads = []
        set_status = store.set_status

        def recording_set_status(*args):
            write_threads.append(threading.get_ident())
            return set_status(*args)

        monkeypatch.setattr(store, "set_status", recording_set_status)
        body = {"team": {"id": "T1"}, "user": {"id": "U1"}}
        action = {"selected_option": {"value": "status:office:Friday:0"}}

        await handlers.handle_set_status(AsyncMock(), body, action, client)

        assert len(write_threads) == 1
        assert write_threads[0] != threading.get_ident()

    @pytest.mark.asyncio
    async def test_invalid_value_is_ignored(self, handlers, store, client):
        store.ensure_schedule("T1")
        body = {"team": {"id": "T1"}, "user": {"id": "U1"}}
        action = {"selected_option": {"value": "status:gym:Friday:1"}}

        await handlers.handle_set_status(AsyncMock(), body, action, client)

        client.views_publish.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_schedule_is_ignored(self, handlers, client):
        body = {"team": {"id": "T1"}, "user": {"id": "U1"}}
        action = {"selected_option": {"value": "status:office:Friday:0"}}

        await handlers.handle_set_status(AsyncMock(), body, action, client)

        client.views_publish.assert_not_awaited()


class TestWeekSelection:
    @pytest.mark.asyncio
    async def test_republishes_selected_week(self, handlers, client):
        body = {"team": {"id": "T1"}, "user": {"id": "U1"}}
        action = {"action_id": "select_week", "selected_option": {"value": "2"}}

        await handlers.handle_select_week(AsyncMock(), body, action, client)

        blocks = _published_view(client)["blocks"]
        assert blocks[3]["accessory"]["initial_option"]["value"] == "2"
        assert "Monday, 24th March" in _block_texts(blocks)

    @pytest.mark.asyncio
    async def test_bad_week_is_ignored(self, handlers, client):
        body = {"team": {"id": "T1"}, "user": {"id": "U1"}}
        action = {"selected_option": {"value": "9"}}

        await handlers.handle_select_week(AsyncMock(), body, action, client)

        client.views_publish.assert_not_awaited()


class TestSettings:
    @pytest.mark.asyncio
    async def test_admin_opens_modal(self, handlers, client):
        body = {"team": {"id": "T1"}, "user": {"id": "UADMIN"}, "trigger_id": "trig"}

        await handlers.handle_open_settings(AsyncMock(), body, client)

        kwargs = client.views_open.call_args.kwargs
        assert kwargs["trigger_id"] == "trig"
        assert kwargs["view"]["callback_id"] == "workspace_settings"

    @pytest.mark.asyncio
    async def test_non_admin_cannot_open_modal(self, handlers, client):
        body = {"team": {"id": "T1"}, "user": {"id": "U1"}, "trigger_id": "trig"}

        await handlers.handle_open_settings(AsyncMock(), body, client)

        client.views_open.assert_not_awaited()

    @staticmethod
    def _view(name):
        return {
            "callback_id": "workspace_settings",
            "state": {
                "values": {
                    OFFICE_NAME_BLOCK: {OFFICE_NAME_ACTION: {"value": name}},
                    OFFICE_ADDRESS_BLOCK: {OFFICE_ADDRESS_ACTION: {"value": "5 Mill Lane"}},
                    CATEGORIES_BLOCK: {
                        CATEGORIES_ACTION: {"selected_options": [{"value": "office"}]}
                    },
                }
            },
        }

    @pytest.mark.asyncio
    async def test_admin_submission_saves_and_republishes(self, handlers, store, client):
        ack = AsyncMock()
        body = {"team": {"id": "T1"}, "user": {"id": "UADMIN"}}

        await handlers.handle_settings_submission(ack, body, self._view("Cambridge"), client)

        ack.assert_awaited_once_with()
        saved = store.get_settings("T1")
        assert saved.office_name == "Cambridge"
        assert [c.id for c in saved.enabled_categories] == ["office"]
        assert "Cambridge" in _block_texts(_published_view(client)["blocks"])

    @pytest.mark.asyncio
    async def test_empty_name_returns_field_error(self, handlers, store, client):
        ack = AsyncMock()
        body = {"team": {"id": "T1"}, "user": {"id": "UADMIN"}}

        await handlers.handle_settings_submission(ack, body, self._view(""), client)

        ack.assert_awaited_once_with(
            response_action="errors", errors={OFFICE_NAME_BLOCK: "Office name is required"}
        )
        assert store.workspace_ids() == []

    @pytest.mark.asyncio
    async def test_non_admin_submission_is_ignored(self, handlers, store, client):
        ack = AsyncMock()
        body = {"team": {"id": "T1"}, "user": {"id": "U1"}}

        await handlers.handle_settings_submission(ack, body, self._view("Nope"), client)

        ack.assert_awaited_once_with()
        assert store.get_settings("T1").office_name == "Office"
        client.views_publish.assert_not_awaited()


def test_register_listeners_binds_every_listener(handlers):
    app = Mock()
    register_listeners(app, handlers)

    app.command.assert_called_once_with("/office")
    app.event.assert_called_once_with("app_home_opened")
    assert app.action.call_count == 3
    app.view.assert_called_once_with("workspace_settings")
    app.command.return_value.assert_called_once_with(handlers.handle_office_command)
