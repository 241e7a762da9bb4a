"""Shared HTTP client manager.

Provides pooled ``httpx.AsyncClient`` instances so the weather and quote
fetchers reuse connections instead of creating a client per request.
"""

import asyncio
import logging
from typing import Optional

import httpx

from officebot.core.request_context import NO_REQUEST_ID, get_request_id

logger = logging.getLogger(__name__)

_shared_clients: dict[str, httpx.AsyncClient] = {}
_client_lock = asyncio.Lock()

_DEFAULT_LIMITS = httpx.Limits(
    max_connections=10,
    max_keepalive_connections=4,
)

_DEFAULT_TIMEOUT = httpx.Timeout(
    connect=5.0,
    read=10.0,
    write=5.0,
    pool=10.0,
)

DEFAULT_HEADERS: dict[str, str] = {
    "User-Agent": "officebot/0.1 (+https://api.slack.com)",
    "Accept": "application/json",
}


async def _add_correlation_header(request: httpx.Request) -> None:
    """Request hook stamping the current correlation id on each outbound call.

    Shared clients outlive the request that created them, so the id is read
    when the call is sent rather than fixed into the client headers.
    """
    request_id = get_request_id()
    if request_id != NO_REQUEST_ID:
        request.headers["X-Request-ID"] = request_id


async def get_shared_client(
    client_id: str = "default",
    limits: Optional[httpx.Limits] = None,
    timeout: Optional[httpx.Timeout] = None,
) -> httpx.AsyncClient:
    """Get or create a shared HTTP client with connection pooling.

    Args:
        client_id: Identifier for the client (allows multiple clients if needed)
        limits: Custom connection limits
        timeout: Custom timeout configuration

    Returns:
        Shared httpx.AsyncClient

    Raises:
        RuntimeError: If client creation fails
    """
    async with _client_lock:
        if client_id not in _shared_clients or _shared_clients[client_id].is_closed:
            try:
                _shared_clients[client_id] = httpx.AsyncClient(
                    limits=limits or _DEFAULT_LIMITS,
                    timeout=timeout or _DEFAULT_TIMEOUT,
                    follow_redirects=True,
                    headers=DEFAULT_HEADERS,
                    event_hooks={"request": [_add_correlation_header]},
                )
                logger.debug("Created shared HTTP client '%s'", client_id)
            except Exception as e:
                logger.exception("Failed to create shared HTTP client '%s'", client_id)
                raise RuntimeError(f"Failed to create shared HTTP client: {e}") from e

        return _shared_clients[client_id]


async def close_all_clients() -> None:
    """Close all shared HTTP clients and clean up resources.

    Called during application shutdown.
    """
    async with _client_lock:
        for client_id, client in _shared_clients.items():
            try:
                if not client.is_closed:
                    await client.aclose()
                    logger.debug("Closed shared HTTP client '%s'", client_id)
            except Exception as e:
                logger.warning("Error closing shared HTTP client '%s': %s", client_id, e)

        _shared_clients.clear()
        logger.debug("All shared HTTP clients closed")
