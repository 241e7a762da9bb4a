"""Route modules for the officebot server."""

from .api_routes import register_api_routes
from .slack_routes import register_slack_routes

__all__ = [
    "register_api_routes",
    "register_slack_routes",
]
