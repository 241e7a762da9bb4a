"""Correlation id of the request currently being handled.

The aiohttp middleware sets it; log records and outbound HTTP calls read it.
Lives in ``core`` so those readers do not depend on the web layer.
"""

from contextvars import ContextVar

NO_REQUEST_ID = "no-request-id"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def get_request_id() -> str:
    """Current request correlation ID, or "no-request-id" outside a request."""
    request_id = request_id_var.get()
    return request_id if request_id else NO_REQUEST_ID
