"""Test destination info: weather parsing, currency, emergency numbers."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import httpx
import pytest
from unittest.mock import MagicMock, patch

from clients.gemini_client import ExternalAPIError
from clients.weather_client import WeatherClient
from services.currency_service import (
    CurrencyService,
    currency_for_city,
    format_currency,
)
from services.emergency_service import emergency_info
from services.trip_info_service import TripInfoService


def _response(payload):
    resp = MagicMock()
    resp.json.return_value = payload
    return resp


# ---------------------------------------------------------------------------
# Weather
# ---------------------------------------------------------------------------

GEOCODE = {
    "results": [{
        "name": "Tokyo", "country": "Japan",
        "latitude": 35.69, "longitude": 139.69, "timezone": "Asia/Tokyo",
    }]
}

FORECAST = {
    "current": {
        "temperature_2m": 18.6, "relative_humidity_2m": 64,
        "weather_code": 2, "wind_speed_10m": 11.4,
    },
    "daily": {
        "time": ["2026-04-01", "2026-04-02"],
        "temperature_2m_max": [20.2, 17.5],
        "temperature_2m_min": [12.8, 10.1],
        "weather_code": [61, 42],
    },
}


def test_weather_parsed_from_open_meteo():
    with patch("clients.weather_client.httpx.get", side_effect=[_response(GEOCODE), _response(FORECAST)]):
        weather = WeatherClient().get_current_weather("Tokyo")

    assert weather["city"] == "Tokyo"
    assert weather["temperature"] == 19
    assert weather["condition"] == "Partly cloudy"
    assert weather["icon"] == "cloud-sun"
    assert weather["windSpeed"] == 11
    assert weather["forecast"][0] == {
        "date": "2026-04-01", "high": 20, "low": 13, "condition": "Light rain",
    }
    assert weather["forecast"][1]["condition"] == "Unknown"


def test_weather_unknown_city():
    with patch("clients.weather_client.httpx.get", return_value=_response({})) as get:
        assert WeatherClient().get_current_weather("Atlantis") is None
    assert get.call_count == 1


# ---------------------------------------------------------------------------
# Currency
# ---------------------------------------------------------------------------

def test_currency_for_city():
    assert currency_for_city("Tokyo") == "JPY"
    assert currency_for_city("  paris ") == "EUR"
    assert currency_for_city("Atlantis") == "USD"


def test_format_currency():
    assert format_currency(1234.5, "USD") == "$1,234.50"
    assert format_currency(1234.5, "JPY") == "¥1,234"
    assert format_currency(9, "KRW") == "₩9"


def test_rates_cached_between_calls():
    rates = {"USD": 1, "JPY": 150.0, "EUR": 0.9}
    with patch("services.currency_service.httpx.get", return_value=_response({"rates": rates})) as get:
        svc = CurrencyService(api_url="https://rates.test/latest/USD")
        info = svc.get_currency_info("Tokyo")
        svc.get_rates()

    assert info == {
        "code": "JPY", "symbol": "¥", "name": "Japanese Yen",
        "rate": 150.0, "rateDisplay": "$1 = ¥150",
    }
    assert get.call_count == 1
    assert svc.convert(300, "JPY", "EUR") == pytest.approx(1.8)


def test_convert_rejects_unknown_code():
    svc = CurrencyService(api_url="https://rates.test")
    svc._rates = {"USD": 1, "EUR": 0.9}
    svc._fetched_at = float("inf")
    with pytest.raises(ValueError, match="XYZ"):
        svc.convert(10, "USD", "XYZ")


def test_rates_failure_without_cache_raises():
    with patch("services.currency_service.httpx.get", side_effect=httpx.ConnectError("down")):
        with pytest.raises(ExternalAPIError):
            CurrencyService(api_url="https://rates.test").get_rates()


def test_stale_rates_served_when_refresh_fails():
    svc = CurrencyService(api_url="https://rates.test")
    svc._rates = {"USD": 1, "EUR": 0.9}
    svc._fetched_at = -10_000.0
    with patch("services.currency_service.httpx.get", side_effect=httpx.ConnectError("down")):
        assert svc.get_rates() == {"USD": 1, "EUR": 0.9}


# ---------------------------------------------------------------------------
# Emergency
# ---------------------------------------------------------------------------

def test_emergency_by_city_and_country():
    assert emergency_info("Tokyo") == {
        "country": "Japan", "police": "110", "ambulance": "119",
        "fire": "119", "emergencyNumber": "110",
    }
    assert emergency_info("UK")["emergencyNumber"] == "999"
    assert emergency_info("France")["ambulance"] == "15"


def test_emergency_fallback():
    info = emergency_info("Atlantis")
    assert info["country"] == "Unknown"
    assert info["emergencyNumber"] == "112"


# ---------------------------------------------------------------------------
# TripInfoService
# ---------------------------------------------------------------------------

@pytest.mark.asyncio
async def test_trip_info_bundles_sections():
    weather = MagicMock()
    weather.get_current_weather.return_value = {"city": "Tokyo", "temperature": 19}
    currency = MagicMock()
    currency.get_currency_info.return_value = {"code": "JPY"}

    info = await TripInfoService(weather, currency).get_trip_info("Tokyo")

    assert info["weather"] == {"city": "Tokyo", "temperature": 19}
    assert info["currency"] == {"code": "JPY"}
    assert info["emergency"]["country"] == "Japan"


@pytest.mark.asyncio
async def test_trip_info_failed_section_is_none():
    weather = MagicMock()
    weather.get_current_weather.side_effect = httpx.ConnectError("down")
    currency = MagicMock()
    currency.get_currency_info.return_value = {"code": "EUR"}

    info = await TripInfoService(weather, currency).get_trip_info("Paris")

    assert info["weather"] is None
    assert info["currency"] == {"code": "EUR"}


@pytest.mark.asyncio
async def test_trip_info_requires_city():
    with pytest.raises(ValueError):
        await TripInfoService(MagicMock(), MagicMock()).get_trip_info("  ")
