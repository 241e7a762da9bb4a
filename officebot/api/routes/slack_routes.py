"""Slack Events API / interactivity endpoint."""

from __future__ import annotations

import logging

from aiohttp import web
from slack_bolt.adapter.aiohttp import to_aiohttp_response, to_bolt_request
from slack_bolt.async_app import AsyncApp

logger = logging.getLogger(__name__)

SLACK_EVENTS_PATH = "/slack/events"


def register_slack_routes(app: web.Application, bolt_app: AsyncApp) -> None:
    """Route Slack events, commands and interactions to ``bolt_app``.

    Bolt verifies the request signature and acknowledges within Slack's
    three second window; listeners run on the same event loop.

    Args:
        app: aiohttp web application
        bolt_app: Configured Bolt app with listeners registered
    """

    async def slack_events(request: web.Request) -> web.Response:
        bolt_request = await to_bolt_request(request)
        bolt_response = await bolt_app.async_dispatch(bolt_request)
        if bolt_response.status >= 400:
            logger.warning("Slack request rejected with status %d", bolt_response.status)
        return await to_aiohttp_response(bolt_response)

    app.router.add_post(SLACK_EVENTS_PATH, slack_events)
    logger.debug("Registered Slack route %s", SLACK_EVENTS_PATH)
