"""aiohttp middleware binding a correlation id to each inbound request.

Slack retries carry no id of their own, so one is generated unless the
caller sent ``X-Request-ID`` or ``X-Correlation-ID``. The id is bound for
the duration of the handler (Bolt listeners included) and reset afterwards
so nothing leaks into work scheduled on the loop later.
"""

import uuid
from collections.abc import Awaitable, Callable

from aiohttp import web

from officebot.core.request_context import request_id_var

REQUEST_ID_HEADER = "X-Request-ID"
_INBOUND_HEADERS = (REQUEST_ID_HEADER, "X-Correlation-ID")

Handler = Callable[[web.Request], Awaitable[web.StreamResponse]]


def _inbound_request_id(request: web.Request) -> str:
    for header in _INBOUND_HEADERS:
        value = request.headers.get(header, "").strip()
        if value:
            return value
    return str(uuid.uuid4())


@web.middleware
async def correlation_id_middleware(request: web.Request, handler: Handler) -> web.StreamResponse:
    """Bind the request's correlation id and echo it in the response."""
    correlation_id = _inbound_request_id(request)
    request["correlation_id"] = correlation_id

    token = request_id_var.set(correlation_id)
    try:
        response = await handler(request)
    finally:
        request_id_var.reset(token)

    response.headers[REQUEST_ID_HEADER] = correlation_id
    return response
