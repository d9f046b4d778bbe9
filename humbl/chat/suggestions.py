"""Search-as-you-type suggestions proxied from a public completion endpoint."""
from __future__ import annotations

import logging

import httpx

from .constants import MAX_SUGGESTIONS, SUGGEST_URL

LOGGER = logging.getLogger(__name__)


class SuggestionClient:
    """Fetch query completions; every failure degrades to no suggestions."""

    def __init__(
        self,
        *,
        url: str = SUGGEST_URL,
        timeout: float = 5.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._url = url
        self._timeout = timeout
        self._transport = transport

    async def suggest(self, query: str) -> list[str]:
        query = query.strip()
        if not query:
            return []
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.get(
                    self._url,
                    params={"client": "firefox", "q": query},
                    headers={"User-Agent": "Mozilla/5.0"},
                )
            if response.is_error:
                return []
            data = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            LOGGER.warning("Suggestion lookup failed | error=%s", exc)
            return []
        if isinstance(data, list) and len(data) > 1 and isinstance(data[1], list):
            return [str(item) for item in data[1][:MAX_SUGGESTIONS]]
        return []


__all__ = ["SuggestionClient"]
