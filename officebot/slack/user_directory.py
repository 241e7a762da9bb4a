"""Slack user lookups used while rendering and for admin checks."""

from __future__ import annotations

import logging
from typing import Any, Optional, Protocol

from slack_sdk.errors import SlackApiError
from slack_sdk.web.async_client import AsyncWebClient

from officebot.domain.schedule import strip_mention

logger = logging.getLogger(__name__)


class UserDirectory(Protocol):
    """Protocol for anything that can say whether a user is still active."""

    async def is_active(self, user_id: str) -> bool:
        """Return True if the user exists and is not deactivated."""
        ...


class SlackUserDirectory:
    """Looks users up through ``users.info``, caching results per instance.

    Create one per interaction so deactivations show up on the next render.
    """

    def __init__(self, client: AsyncWebClient) -> None:
        self.client = client
        self._cache: dict[str, Optional[dict[str, Any]]] = {}

    async def get_user(self, user_id: str) -> Optional[dict[str, Any]]:
        """Return the ``user`` object for ``user_id``, or None if the lookup fails."""
        bare_id = strip_mention(user_id)
        if bare_id in self._cache:
            return self._cache[bare_id]

        user: Optional[dict[str, Any]] = None
        try:
            response = await self.client.users_info(user=bare_id)
            if response.get("ok"):
                user = response.get("user")
        except SlackApiError as e:
            logger.warning("Failed to fetch info for user %s: %s", bare_id, e)

        self._cache[bare_id] = user
        return user

    async def is_active(self, user_id: str) -> bool:
        user = await self.get_user(user_id)
        return bool(user) and not user.get("deleted", False)

    async def is_admin(self, user_id: str) -> bool:
        """Workspace admins and owners may edit workspace settings."""
        user = await self.get_user(user_id)
        if not user:
            return False
        return bool(user.get("is_admin") or user.get("is_owner"))
