"""Slack Bolt listeners for the office attendance app.

Listeners are methods on ``OfficeBotHandlers`` so collaborators (store,
weather and quote providers) are injected once and tests can drive each
listener with plain mocks. ``register_listeners`` binds them to an
``AsyncApp``. Store calls that may write the JSON file run in a worker
thread so the event loop keeps serving other requests.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Optional

from slack_bolt.async_app import AsyncApp
from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from officebot.domain.exceptions import (
    InvalidActionError,
    ScheduleNotFoundError,
    SettingsValidationError,
)
from officebot.domain.quotes import DailyQuoteProvider
from officebot.domain.store import WorkspaceStore
from officebot.domain.weather import WeatherProvider
from officebot.slack.action_ids import (
    OPEN_SETTINGS_ACTION,
    SELECT_WEEK_ACTION,
    SET_STATUS_ACTION_PATTERN,
    SETTINGS_CALLBACK_ID,
    decode_status_value,
    parse_week_value,
)
from officebot.slack.home_blocks import build_home_view
from officebot.slack.office_blocks import generate_office_blocks
from officebot.slack.settings_modal import build_settings_modal, parse_settings_submission
from officebot.slack.slack_types import HomeView
from officebot.slack.user_directory import SlackUserDirectory

logger = logging.getLogger(__name__)

OFFICE_COMMAND = "/office"
SCHEDULE_NOT_FOUND_TEXT = "Sorry, I couldn't find the schedule for this workspace."
OFFICE_MESSAGE_TEXT = "Here's who's in the office this week"


def _payload_team_id(body: dict[str, Any]) -> Optional[str]:
    """Team id from an interaction payload (block actions and view submissions)."""
    team = body.get("team") or {}
    return team.get("id") or body.get("team_id") or (body.get("view") or {}).get("team_id")


def _payload_user_id(body: dict[str, Any]) -> Optional[str]:
    return (body.get("user") or {}).get("id")


class OfficeBotHandlers:
    """Listener implementations shared by every workspace."""

    def __init__(
        self,
        store: WorkspaceStore,
        weather_provider: Optional[WeatherProvider] = None,
        quote_provider: Optional[DailyQuoteProvider] = None,
    ) -> None:
        self.store = store
        self.weather_provider = weather_provider
        self.quote_provider = quote_provider

    async def render_home(
        self, client: AsyncWebClient, team_id: str, user_id: str, week: int = 0
    ) -> HomeView:
        """Build the home tab for ``user_id``, creating the schedule if needed."""
        settings = self.store.get_settings(team_id)
        schedule = await asyncio.to_thread(self.store.ensure_schedule, team_id)

        weather = None
        if self.weather_provider is not None:
            weather = await self.weather_provider.get_weather()

        quote = []
        if self.quote_provider is not None:
            quote = await self.quote_provider.get_blocks()

        is_admin = await SlackUserDirectory(client).is_admin(user_id)

        return build_home_view(
            schedule,
            week,
            user_id,
            settings,
            weather=weather,
            quote_blocks=quote,
            is_admin=is_admin,
        )

    async def publish_home(
        self, client: AsyncWebClient, team_id: str, user_id: str, week: int = 0
    ) -> None:
        view = await self.render_home(client, team_id, user_id, week)
        try:
            await client.views_publish(user_id=user_id, view=view)
            logger.debug("Published home tab for %s (week %d)", user_id, week)
        except SlackApiError as e:
            logger.warning("Failed to publish home tab for %s: %s", user_id, e)

    async def handle_office_command(
        self, ack: Any, command: dict[str, Any], say: Any, client: AsyncWebClient
    ) -> None:
        """``/office``: post this week's schedule to the channel."""
        await ack()
        team_id = command.get("team_id", "")

        try:
            schedule = await asyncio.to_thread(self.store.require_schedule, team_id)
        except ScheduleNotFoundError:
            logger.info("No schedule for workspace %s on %s", team_id, OFFICE_COMMAND)
            await say(SCHEDULE_NOT_FOUND_TEXT)
            return

        settings = self.store.get_settings(team_id)
        blocks = await generate_office_blocks(
            schedule, 0, settings, users=SlackUserDirectory(client)
        )
        await say(blocks=blocks, text=OFFICE_MESSAGE_TEXT)

    async def handle_home_opened(
        self, event: dict[str, Any], context: dict[str, Any], client: AsyncWebClient
    ) -> None:
        if event.get("tab", "home") != "home":
            return

        team_id = context.get("team_id") or event.get("view", {}).get("team_id")
        user_id = event.get("user")
        if not team_id or not user_id:
            logger.warning("app_home_opened without team or user: %s", event)
            return

        await self.publish_home(client, team_id, user_id)

    async def handle_set_status(
        self, ack: Any, body: dict[str, Any], action: dict[str, Any], client: AsyncWebClient
    ) -> None:
        """Status selector: record the chosen category and refresh that week."""
        await ack()
        team_id = _payload_team_id(body)
        user_id = _payload_user_id(body)

        try:
            value = (action.get("selected_option") or {}).get("value", "")
            selection = decode_status_value(value)
            await asyncio.to_thread(
                self.store.set_status,
                team_id,
                selection.week,
                selection.day,
                user_id,
                selection.category_id,
            )
        except (InvalidActionError, ScheduleNotFoundError) as e:
            logger.warning("Ignoring status selection from %s: %s", user_id, e)
            return

        logger.info(
            "User %s set %s week %d to %s",
            user_id,
            selection.day,
            selection.week,
            selection.category_id,
        )
        await self.publish_home(client, team_id, user_id, selection.week)

    async def handle_select_week(
        self, ack: Any, body: dict[str, Any], action: dict[str, Any], client: AsyncWebClient
    ) -> None:
        await ack()
        user_id = _payload_user_id(body)

        try:
            week = parse_week_value((action.get("selected_option") or {}).get("value"))
        except InvalidActionError as e:
            logger.warning("Ignoring week selection from %s: %s", user_id, e)
            return

        await self.publish_home(client, _payload_team_id(body), user_id, week)

    async def handle_open_settings(
        self, ack: Any, body: dict[str, Any], client: AsyncWebClient
    ) -> None:
        """Open the settings modal; ignored for non-admins."""
        await ack()
        team_id = _payload_team_id(body)
        user_id = _payload_user_id(body)

        if not await SlackUserDirectory(client).is_admin(user_id):
            logger.warning("Non-admin %s tried to open workspace settings", user_id)
            return

        modal = build_settings_modal(self.store.get_settings(team_id))
        try:
            await client.views_open(trigger_id=body["trigger_id"], view=modal)
        except SlackApiError as e:
            logger.warning("Failed to open settings modal for %s: %s", user_id, e)

    async def handle_settings_submission(
        self, ack: Any, body: dict[str, Any], view: dict[str, Any], client: AsyncWebClient
    ) -> None:
        """Validate and save the settings modal.

        Field errors are returned to Slack in the ack so the modal stays open.
        """
        team_id = _payload_team_id(body)
        user_id = _payload_user_id(body)

        if not await SlackUserDirectory(client).is_admin(user_id):
            logger.warning("Ignoring settings submission from non-admin %s", user_id)
            await ack()
            return

        current = self.store.get_settings(team_id)
        try:
            updated = parse_settings_submission(
                (view.get("state") or {}).get("values") or {}, current
            )
        except SettingsValidationError as e:
            await ack(response_action="errors", errors=e.errors)
            return

        await ack()
        await asyncio.to_thread(self.store.save_settings, team_id, updated)
        logger.info("Workspace %s settings updated by %s", team_id, user_id)
        await self.publish_home(client, team_id, user_id)


def register_listeners(app: AsyncApp, handlers: OfficeBotHandlers) -> None:
    """Bind every listener to ``app``."""
    app.command(OFFICE_COMMAND)(handlers.handle_office_command)
    app.event("app_home_opened")(handlers.handle_home_opened)
    app.action(SET_STATUS_ACTION_PATTERN)(handlers.handle_set_status)
    app.action(SELECT_WEEK_ACTION)(handlers.handle_select_week)
    app.action(OPEN_SETTINGS_ACTION)(handlers.handle_open_settings)
    app.view(SETTINGS_CALLBACK_ID)(handlers.handle_settings_submission)
    logger.debug("Registered Slack listeners")
