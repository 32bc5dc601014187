"""
Currency lookup for destination cities.

Static city -> currency tables plus USD-relative exchange rates fetched
from exchangerate-api.com (free tier, no key).  Rates are cached for an
hour per service instance.
"""

import logging
import time
from typing import Any, Dict, Optional

import httpx

from clients.gemini_client import ExternalAPIError
from config.settings import settings

logger = logging.getLogger(__name__)

RATE_CACHE_SECONDS = 3600
DEFAULT_CURRENCY = "USD"
ZERO_DECIMAL_CURRENCIES = {"JPY", "KRW"}

# code -> (symbol, name)
CURRENCIES: Dict[str, tuple] = {
    "USD": ("$", "US Dollar"),
    "EUR": ("€", "Euro"),
    "GBP": ("£", "British Pound"),
    "JPY": ("¥", "Japanese Yen"),
    "AUD": ("A$", "Australian Dollar"),
    "CAD": ("C$", "Canadian Dollar"),
    "CHF": ("CHF", "Swiss Franc"),
    "CNY": ("¥", "Chinese Yuan"),
    "INR": ("₹", "Indian Rupee"),
    "MXN": ("$", "Mexican Peso"),
    "BRL": ("R$", "Brazilian Real"),
    "KRW": ("₩", "South Korean Won"),
    "SGD": ("S$", "Singapore Dollar"),
    "HKD": ("HK$", "Hong Kong Dollar"),
    "THB": ("฿", "Thai Baht"),
    "PHP": ("₱", "Philippine Peso"),
    "IDR": ("Rp", "Indonesian Rupiah"),
    "MYR": ("RM", "Malaysian Ringgit"),
    "VND": ("₫", "Vietnamese Dong"),
    "NZD": ("NZ$", "New Zealand Dollar"),
    "AED": ("د.إ", "UAE Dirham"),
    "SAR": ("﷼", "Saudi Riyal"),
    "ZAR": ("R", "South African Rand"),
    "SEK": ("kr", "Swedish Krona"),
    "NOK": ("kr", "Norwegian Krone"),
    "DKK": ("kr", "Danish Krone"),
    "PLN": ("zł", "Polish Zloty"),
    "CZK": ("Kč", "Czech Koruna"),
    "HUF": ("Ft", "Hungarian Forint"),
    "TRY": ("₺", "Turkish Lira"),
    "ILS": ("₪", "Israeli Shekel"),
    "EGP": ("£", "Egyptian Pound"),
    "MAD": ("DH", "Moroccan Dirham"),
    "ARS": ("$", "Argentine Peso"),
    "CLP": ("$", "Chilean Peso"),
    "COP": ("$", "Colombian Peso"),
    "PEN": ("S/", "Peruvian Sol"),
    "PYG": ("₲", "Paraguayan Guarani"),
    "UYU": ("$U", "Uruguayan Peso"),
}

CITY_CURRENCIES: Dict[str, str] = {
    # Americas
    "new york": "USD", "los angeles": "USD", "miami": "USD", "chicago": "USD",
    "las vegas": "USD", "san francisco": "USD", "seattle": "USD", "boston": "USD",
    "washington": "USD", "hawaii": "USD",
    "toronto": "CAD", "vancouver": "CAD", "montreal": "CAD",
    "mexico city": "MXN", "cancun": "MXN", "guadalajara": "MXN",
    "sao paulo": "BRL", "rio de janeiro": "BRL",
    "buenos aires": "ARS", "lima": "PEN", "bogota": "COP", "santiago": "CLP",
    "asuncion": "PYG", "montevideo": "UYU",
    # Europe
    "paris": "EUR", "rome": "EUR", "barcelona": "EUR", "madrid": "EUR",
    "amsterdam": "EUR", "berlin": "EUR", "munich": "EUR", "vienna": "EUR",
    "athens": "EUR", "lisbon": "EUR", "dublin": "EUR", "brussels": "EUR",
    "milan": "EUR", "florence": "EUR", "venice": "EUR", "nice": "EUR",
    "marseille": "EUR", "helsinki": "EUR",
    "prague": "CZK", "budapest": "HUF",
    "london": "GBP", "edinburgh": "GBP", "manchester": "GBP",
    "zurich": "CHF", "geneva": "CHF",
    "stockholm": "SEK", "copenhagen": "DKK", "oslo": "NOK",
    "warsaw": "PLN", "krakow": "PLN",
    "istanbul": "TRY",
    # Asia
    "tokyo": "JPY", "osaka": "JPY", "kyoto": "JPY",
    "seoul": "KRW", "busan": "KRW",
    "beijing": "CNY", "shanghai": "CNY", "hong kong": "HKD",
    "singapore": "SGD",
    "bangkok": "THB", "phuket": "THB", "chiang mai": "THB",
    "kuala lumpur": "MYR",
    "bali": "IDR", "jakarta": "IDR",
    "manila": "PHP",
    "ho chi minh": "VND", "hanoi": "VND",
    "mumbai": "INR", "delhi": "INR", "goa": "INR",
    "tel aviv": "ILS", "jerusalem": "ILS",
    "dubai": "AED", "abu dhabi": "AED",
    # Oceania
    "sydney": "AUD", "melbourne": "AUD", "brisbane": "AUD", "perth": "AUD",
    "auckland": "NZD", "queenstown": "NZD",
    # Africa
    "cape town": "ZAR", "johannesburg": "ZAR",
    "cairo": "EGP", "marrakech": "MAD",
}


def currency_for_city(city: str) -> str:
    """Return the ISO currency code for a city (USD when unknown)."""
    return CITY_CURRENCIES.get(city.lower().strip(), DEFAULT_CURRENCY)


def format_currency(amount: float, code: str) -> str:
    """Format an amount with the currency symbol; JPY/KRW have no decimals."""
    symbol = CURRENCIES.get(code, ("", ""))[0]
    decimals = 0 if code in ZERO_DECIMAL_CURRENCIES else 2
    return f"{symbol}{amount:,.{decimals}f}"


class CurrencyService:
    """USD-relative exchange rates with a one-hour cache."""

    def __init__(self, api_url: Optional[str] = None):
        self.api_url = api_url or settings.EXCHANGE_RATE_API_URL
        self._rates: Optional[Dict[str, float]] = None
        self._fetched_at = 0.0

    def get_rates(self) -> Dict[str, float]:
        """
        Return rates keyed by currency code (1 USD = rate units).

        Raises:
            ExternalAPIError: If no rates have ever been fetched and the API fails.
        """
        now = time.monotonic()
        if self._rates is not None and now - self._fetched_at < RATE_CACHE_SECONDS:
            return self._rates

        try:
            resp = httpx.get(self.api_url, timeout=10)
            resp.raise_for_status()
            self._rates = resp.json()["rates"]
            self._fetched_at = now
        except (httpx.HTTPError, KeyError, ValueError) as exc:
            logger.warning("Exchange rate fetch failed", extra={"error": str(exc)})
            if self._rates is None:
                raise ExternalAPIError(service="ExchangeRate", error=str(exc)) from exc
        return self._rates

    def get_currency_info(self, city: str) -> Optional[Dict[str, Any]]:
        """Currency code, symbol, name and USD rate for a city."""
        code = currency_for_city(city)
        if code not in CURRENCIES:
            return None
        symbol, name = CURRENCIES[code]
        rate = self.get_rates().get(code, 1)
        return {
            "code": code,
            "symbol": symbol,
            "name": name,
            "rate": rate,
            "rateDisplay": f"$1 = {format_currency(rate, code)}",
        }

    def convert(self, amount: float, from_code: str, to_code: str) -> float:
        """
        Convert ``amount`` between two currencies via USD.

        Raises:
            ValueError: If either code has no published rate.
        """
        rates = self.get_rates()
        missing = [code for code in (from_code, to_code) if code not in rates]
        if missing:
            raise ValueError(f"Unknown currency code: {', '.join(missing)}")
        return amount / rates[from_code] * rates[to_code]
