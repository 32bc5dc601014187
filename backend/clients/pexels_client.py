"""
Client for the Pexels photo search API.
Finds one landscape photo per search keyword for itinerary cards.
"""

import logging
from typing import Optional

import httpx

from clients.gemini_client import ExternalAPIError
from config.settings import settings

logger = logging.getLogger(__name__)

SEARCH_URL = "https://api.pexels.com/v1/search"


class PexelsClient:
    """Async client for looking up a photo URL by keyword."""

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[int] = None):
        self.api_key = api_key if api_key is not None else settings.PEXELS_API_KEY
        self.timeout = timeout if timeout is not None else settings.PEXELS_TIMEOUT

    def is_available(self) -> bool:
        return bool(self.api_key)

    async def find_image(self, keyword: str) -> Optional[str]:
        """
        Return a landscape photo URL for ``keyword``, or None if nothing matched.

        Raises:
            ExternalAPIError: On transport or HTTP errors.
        """
        if not self.api_key:
            logger.debug("PEXELS_API_KEY not configured — skipping photo lookup")
            return None

        params = {"query": keyword, "per_page": 1, "orientation": "landscape"}
        headers = {"Authorization": self.api_key}

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                resp = await client.get(SEARCH_URL, params=params, headers=headers)
                resp.raise_for_status()
                data = resp.json()
        except httpx.HTTPError as exc:
            raise ExternalAPIError(service="Pexels", error=str(exc)) from exc

        photos = data.get("photos") or []
        if not photos:
            return None
        return photos[0].get("src", {}).get("landscape")
