"""Tests for server wiring."""

from unittest.mock import patch

import pytest
from aiohttp import web

from officebot.api.server import (
    ServerConfigError,
    _build_bolt_app,
    _build_handlers,
    _make_app,
    start_server,
)
from officebot.core.http_client import get_shared_client

pytestmark = pytest.mark.unit


@pytest.fixture
def config(tmp_path):
    return {
        "slack_bot_token": "xoxb-test",
        "slack_signing_secret": "secret",
        "data_file": str(tmp_path / "workspaces.json"),
        "weather_location": (51.5, -0.12),
        "quotes_enabled": False,
        "workspace_defaults": {"office_name": "Leeds"},
    }


def test_build_handlers_from_config(config):
    handlers = _build_handlers(config)

    assert handlers.store.get_settings("T1").office_name == "Leeds"
    assert handlers.weather_provider.location == (51.5, -0.12)
    assert handlers.quote_provider.enabled is False


def test_missing_credentials_rejected(config):
    handlers = _build_handlers(config)
    del config["slack_signing_secret"]

    with pytest.raises(ServerConfigError):
        _build_bolt_app(config, handlers)


@pytest.mark.asyncio
async def test_make_app_registers_routes(config):
    handlers = _build_handlers(config)
    bolt_app = _build_bolt_app(config, handlers)

    app = _make_app(config, bolt_app, handlers)

    routes = {(r.method, r.resource.canonical) for r in app.router.routes()}
    assert ("POST", "/slack/events") in routes
    assert ("GET", "/api/health") in routes


def test_start_server_reports_missing_credentials(tmp_path, caplog):
    with patch("officebot.core.office_logging.configure_logging"):
        start_server({"data_file": str(tmp_path / "workspaces.json")})

    assert "Server cannot start" in caplog.text


@pytest.mark.asyncio
async def test_runner_cleanup_closes_shared_clients(config):
    handlers = _build_handlers(config)
    app = _make_app(config, _build_bolt_app(config, handlers), handlers)
    runner = web.AppRunner(app)
    await runner.setup()
    client = await get_shared_client("weather")

    await runner.cleanup()

    assert client.is_closed
