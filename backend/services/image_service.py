"""
Best-effort photo enrichment for validated itineraries.

One lookup per step runs concurrently; results are joined back by index
so the order of the itinerary is never changed.  A failed lookup only
leaves that step without an ``image_url``.
"""

import asyncio
import logging
from typing import List, Optional

from clients.pexels_client import PexelsClient
from models.itinerary import ItineraryStep

logger = logging.getLogger(__name__)


class ImageService:
    """Attaches photo URLs to itinerary steps."""

    def __init__(self, photo_client: Optional[PexelsClient] = None):
        self.photo_client = photo_client or PexelsClient()

    async def _lookup(self, step: ItineraryStep, index: int, request_id: Optional[str]) -> Optional[str]:
        try:
            return await self.photo_client.find_image(step.image_keyword)
        except Exception as exc:
            logger.warning(
                "Photo lookup failed for step %d",
                index,
                extra={
                    "request_id": request_id,
                    "keyword": step.image_keyword,
                    "error": str(exc),
                },
            )
            return None

    async def enrich(
        self,
        steps: List[ItineraryStep],
        request_id: Optional[str] = None,
    ) -> List[ItineraryStep]:
        """Return copies of ``steps`` with ``image_url`` filled where a photo was found."""
        if not self.photo_client.is_available():
            logger.info(
                "Photo lookups disabled (no PEXELS_API_KEY)",
                extra={"request_id": request_id},
            )
            return list(steps)

        urls = await asyncio.gather(
            *(self._lookup(step, i, request_id) for i, step in enumerate(steps))
        )
        found = sum(1 for url in urls if url)
        logger.info(
            "Photo enrichment complete (%d/%d)",
            found,
            len(steps),
            extra={"request_id": request_id},
        )
        return [step.with_image(url) for step, url in zip(steps, urls)]
