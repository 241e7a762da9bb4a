"""Operational API routes."""

from __future__ import annotations

import logging
from typing import Any, Callable

from aiohttp import web

logger = logging.getLogger(__name__)


def register_api_routes(
    app: web.Application,
    store: Any,
    time_provider: Callable[[], str],
) -> None:
    """Register the health endpoint.

    Args:
        app: aiohttp web application
        store: Workspace store; only ``workspace_ids()`` is used
        time_provider: Returns the current server time as an ISO string
    """

    async def health_check(_request: web.Request) -> web.Response:
        """Health check endpoint for monitoring."""
        try:
            workspaces = len(store.workspace_ids())
            status = "ok"
        except Exception:
            logger.exception("Health check could not read the workspace store")
            workspaces = 0
            status = "degraded"

        return web.json_response(
            {
                "status": status,
                "server_time_iso": time_provider(),
                "workspaces": workspaces,
            }
        )

    app.router.add_get("/api/health", health_check)
