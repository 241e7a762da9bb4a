"""Middleware components for request processing."""

from officebot.core.request_context import get_request_id

from .correlation_id import correlation_id_middleware

__all__ = ["correlation_id_middleware", "get_request_id"]
