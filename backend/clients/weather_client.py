"""
Client for Open-Meteo Weather API.
Fetches current conditions and a short forecast for a destination city.
No API key required.
"""

from typing import Dict, Any, Optional

import httpx

GEOCODING_URL = "https://geocoding-api.open-meteo.com/v1/search"
FORECAST_URL = "https://api.open-meteo.com/v1/forecast"

FORECAST_DAYS = 5

# WMO weather codes -> (description, frontend icon name)
WEATHER_CODES = {
    0: ("Clear sky", "sun"),
    1: ("Mainly clear", "sun"),
    2: ("Partly cloudy", "cloud-sun"),
    3: ("Overcast", "cloud"),
    45: ("Foggy", "cloud-fog"),
    48: ("Rime fog", "cloud-fog"),
    51: ("Light drizzle", "cloud-drizzle"),
    53: ("Drizzle", "cloud-drizzle"),
    55: ("Heavy drizzle", "cloud-drizzle"),
    61: ("Light rain", "cloud-rain"),
    63: ("Rain", "cloud-rain"),
    65: ("Heavy rain", "cloud-rain"),
    71: ("Light snow", "snowflake"),
    73: ("Snow", "snowflake"),
    75: ("Heavy snow", "snowflake"),
    80: ("Rain showers", "cloud-rain"),
    81: ("Rain showers", "cloud-rain"),
    82: ("Heavy showers", "cloud-rain"),
    95: ("Thunderstorm", "cloud-lightning"),
    96: ("Thunderstorm with hail", "cloud-lightning"),
    99: ("Thunderstorm with hail", "cloud-lightning"),
}
UNKNOWN_WEATHER = ("Unknown", "cloud")


class WeatherClient:
    """Client for fetching weather via Open-Meteo (free, no key)."""

    def get_current_weather(self, city: str) -> Optional[Dict[str, Any]]:
        """
        Get current conditions plus a 5-day forecast for a city.

        Args:
            city: City name (e.g. "Tokyo").

        Returns:
            Weather dict, or None when the city cannot be geocoded.
        """
        coords = self.geocode(city)
        if coords is None:
            return None

        params = {
            "latitude": coords["latitude"],
            "longitude": coords["longitude"],
            "current": "temperature_2m,relative_humidity_2m,weather_code,wind_speed_10m",
            "daily": "temperature_2m_max,temperature_2m_min,weather_code",
            "timezone": "auto",
            "forecast_days": FORECAST_DAYS,
        }

        resp = httpx.get(FORECAST_URL, params=params, timeout=15)
        resp.raise_for_status()
        data = resp.json()

        current = data["current"]
        condition, icon = WEATHER_CODES.get(current["weather_code"], UNKNOWN_WEATHER)
        daily = data["daily"]

        forecast = []
        for i, date in enumerate(daily["time"][:FORECAST_DAYS]):
            forecast.append({
                "date": date,
                "high": round(daily["temperature_2m_max"][i]),
                "low": round(daily["temperature_2m_min"][i]),
                "condition": WEATHER_CODES.get(daily["weather_code"][i], UNKNOWN_WEATHER)[0],
            })

        return {
            "city": coords["name"],
            "country": coords["country"],
            "timezone": coords["timezone"],
            "temperature": round(current["temperature_2m"]),
            "condition": condition,
            "icon": icon,
            "humidity": current["relative_humidity_2m"],
            "windSpeed": round(current["wind_speed_10m"]),
            "forecast": forecast,
        }

    def geocode(self, city: str) -> Optional[Dict[str, Any]]:
        """Convert a city name to coordinates using Open-Meteo geocoding."""
        resp = httpx.get(
            GEOCODING_URL,
            params={"name": city, "count": 1, "language": "en", "format": "json"},
            timeout=10,
        )
        resp.raise_for_status()
        results = resp.json().get("results")
        if not results:
            return None

        r = results[0]
        return {
            "name": r["name"],
            "country": r.get("country", ""),
            "latitude": r["latitude"],
            "longitude": r["longitude"],
            "timezone": r.get("timezone", ""),
        }
