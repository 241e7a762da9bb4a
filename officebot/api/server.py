"""aiohttp server hosting the Slack Bolt app and the health endpoint."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from typing import Any

from aiohttp import web
from slack_bolt.async_app import AsyncApp

from officebot.core.config_manager import DEFAULT_DATA_FILE, DEFAULT_SERVER_PORT, get_config_value
from officebot.core.http_client import close_all_clients
from officebot.core.timezone_utils import now_iso
from officebot.domain.exceptions import OfficeBotError
from officebot.domain.quotes import DailyQuoteProvider
from officebot.domain.store import WorkspaceStore
from officebot.domain.weather import DEFAULT_FORECAST_URL, WeatherProvider
from officebot.slack.handlers import OfficeBotHandlers, register_listeners

logger = logging.getLogger(__name__)


class ServerConfigError(OfficeBotError):
    """Raised when required server configuration is missing."""


def _build_handlers(config: Any) -> OfficeBotHandlers:
    store = WorkspaceStore(
        get_config_value(config, "data_file", DEFAULT_DATA_FILE),
        get_config_value(config, "workspace_defaults"),
    )
    weather = WeatherProvider(
        get_config_value(config, "weather_location"),
        get_config_value(config, "forecast_url") or DEFAULT_FORECAST_URL,
    )
    quotes = DailyQuoteProvider(enabled=bool(get_config_value(config, "quotes_enabled", True)))
    return OfficeBotHandlers(store, weather, quotes)


def _build_bolt_app(config: Any, handlers: OfficeBotHandlers) -> AsyncApp:
    token = get_config_value(config, "slack_bot_token")
    signing_secret = get_config_value(config, "slack_signing_secret")
    if not token or not signing_secret:
        raise ServerConfigError("SLACK_BOT_TOKEN and SLACK_SIGNING_SECRET must be set")

    bolt_app = AsyncApp(token=token, signing_secret=signing_secret)
    register_listeners(bolt_app, handlers)
    return bolt_app


def _make_app(
    _config: Any, bolt_app: AsyncApp, handlers: OfficeBotHandlers
) -> web.Application:
    """Create the aiohttp application with middleware and routes registered."""
    from .middleware import correlation_id_middleware
    from .routes import register_api_routes, register_slack_routes

    app = web.Application(middlewares=[correlation_id_middleware])
    register_slack_routes(app, bolt_app)
    register_api_routes(app, handlers.store, now_iso)

    async def _close_http_clients(_app: web.Application) -> None:
        try:
            await close_all_clients()
            logger.debug("Shared HTTP clients cleaned up")
        except Exception as e:
            logger.warning("Error cleaning up shared HTTP clients: %s", e)

    app.on_shutdown.append(_close_http_clients)
    return app


async def _serve(config: Any) -> None:
    """Run the server until SIGINT/SIGTERM."""
    stop_event = asyncio.Event()

    handlers = _build_handlers(config)
    bolt_app = _build_bolt_app(config, handlers)
    app = _make_app(config, bolt_app, handlers)

    runner = web.AppRunner(app)
    await runner.setup()

    host = get_config_value(config, "server_bind", "0.0.0.0")  # nosec: B104
    port = int(get_config_value(config, "server_port", DEFAULT_SERVER_PORT))

    site = web.TCPSite(runner, host=host, port=port)
    try:
        await site.start()
    except OSError:
        logger.exception("Failed to start server on %s:%d", host, port)
        await runner.cleanup()
        raise
    logger.info("Server started on %s:%d", host, port)

    loop = asyncio.get_running_loop()

    def _on_signal() -> None:
        logger.info("Shutdown signal received")
        stop_event.set()

    for sig in (signal.SIGINT, signal.SIGTERM):
        with contextlib.suppress(NotImplementedError):
            loop.add_signal_handler(sig, _on_signal)

    await stop_event.wait()
    logger.info("Stop event received, shutting down")

    await runner.cleanup()
    logger.info("Server shutdown complete")


def start_server(config: Any) -> None:
    """Configure logging and run the server, blocking until shutdown.

    Args:
        config: dict or attribute object with keys:
            - slack_bot_token / slack_signing_secret: Slack credentials (required)
            - server_bind / server_port: listen address
            - data_file: workspace store JSON path
            - weather_location: optional (latitude, longitude)
            - forecast_url: link shown on today's weather line
            - quotes_enabled: show the daily quote in the home tab
            - workspace_defaults: settings for workspaces with none saved
            - debug_logging: enable debug logging (bool)
    """
    from officebot.core.office_logging import configure_logging

    debug_mode = get_config_value(config, "debug_logging", False)
    configure_logging(debug_mode=debug_mode)
    logger.info("Logging configuration applied: debug_mode=%s", debug_mode)

    try:
        asyncio.run(_serve(config))
    except KeyboardInterrupt:
        logger.info("Interrupted by user")
    except ServerConfigError as e:
        logger.error("Server cannot start: %s", e)
    except Exception:
        logger.exception("Server terminated unexpectedly")
