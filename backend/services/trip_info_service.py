"""
Destination info shown next to the itinerary: weather, currency and
emergency numbers.  Each section is best-effort; a failed lookup leaves
that section as None.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from clients.weather_client import WeatherClient
from services.currency_service import CurrencyService
from services.emergency_service import emergency_info

logger = logging.getLogger(__name__)


class TripInfoService:
    """Bundles the per-destination lookups."""

    def __init__(
        self,
        weather_client: Optional[WeatherClient] = None,
        currency_service: Optional[CurrencyService] = None,
    ):
        self.weather_client = weather_client or WeatherClient()
        self.currency_service = currency_service or CurrencyService()

    async def _run(self, label: str, func, *args) -> Optional[Dict[str, Any]]:
        # Both lookups use blocking httpx calls
        loop = asyncio.get_running_loop()
        try:
            return await loop.run_in_executor(None, func, *args)
        except Exception as exc:
            logger.warning("%s lookup failed", label, extra={"error": str(exc)})
            return None

    async def get_trip_info(self, city: str) -> Dict[str, Any]:
        """Return ``{"city", "weather", "currency", "emergency"}`` for a city."""
        if not city or not city.strip():
            raise ValueError("city is required")

        weather, currency = await asyncio.gather(
            self._run("Weather", self.weather_client.get_current_weather, city),
            self._run("Currency", self.currency_service.get_currency_info, city),
        )
        return {
            "city": city,
            "weather": weather,
            "currency": currency,
            "emergency": emergency_info(city),
        }
