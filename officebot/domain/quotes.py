"""Quote of the day shown at the top of the home tab."""

from __future__ import annotations

import datetime
import logging
from typing import Any, Optional

import httpx
from pydantic import BaseModel, Field, ValidationError

from officebot.core.http_client import get_shared_client
from officebot.core.timezone_utils import today_local

logger = logging.getLogger(__name__)

ZENQUOTES_TODAY_URL = "https://zenquotes.io/api/today"


class Quote(BaseModel):
    text: str = Field(..., alias="q", min_length=1)
    author: str = Field(default="Unknown", alias="a")


def quote_blocks(quote: Optional[Quote]) -> list[dict[str, Any]]:
    """Render a quote as a single mrkdwn section, or no blocks."""
    if quote is None:
        return []
    return [
        {
            "type": "section",
            "text": {"type": "mrkdwn", "text": f"> _{quote.text}_\n> — {quote.author}"},
        }
    ]


class DailyQuoteProvider:
    """Fetches the quote of the day once per local calendar day.

    Failed fetches are not cached so the next render retries.
    """

    def __init__(self, url: str = ZENQUOTES_TODAY_URL, enabled: bool = True) -> None:
        self.url = url
        self.enabled = enabled
        self._cached_day: Optional[datetime.date] = None
        self._cached_quote: Optional[Quote] = None

    async def fetch_quote(self) -> Optional[Quote]:
        try:
            client = await get_shared_client("quotes")
            response = await client.get(self.url)
            response.raise_for_status()
            payload = response.json()
            if not isinstance(payload, list) or not payload:
                raise ValueError("Quote response is empty")
            return Quote.model_validate(payload[0])
        except (httpx.HTTPError, ValueError, ValidationError) as e:
            logger.warning("Daily quote fetch failed: %s", e)
            return None

    async def get_quote(self, today: Optional[datetime.date] = None) -> Optional[Quote]:
        if not self.enabled:
            return None

        day = today or today_local()
        if self._cached_day == day and self._cached_quote is not None:
            return self._cached_quote

        quote = await self.fetch_quote()
        if quote is not None:
            self._cached_day = day
            self._cached_quote = quote
        return quote

    async def get_blocks(self, today: Optional[datetime.date] = None) -> list[dict[str, Any]]:
        return quote_blocks(await self.get_quote(today))
