"""
Emergency phone numbers by country.

Static table; no API calls.  Lookups accept a city or a country name and
fall back to the near-universal 112.
"""

from typing import Dict

# country key -> (display name, police, ambulance, fire, general emergency)
_EMERGENCY_NUMBERS = {
    # Americas
    "united states": ("United States", "911", "911", "911", "911"),
    "canada": ("Canada", "911", "911", "911", "911"),
    "mexico": ("Mexico", "911", "911", "911", "911"),
    "brazil": ("Brazil", "190", "192", "193", "190"),
    "argentina": ("Argentina", "911", "107", "100", "911"),
    "chile": ("Chile", "133", "131", "132", "131"),
    "colombia": ("Colombia", "123", "123", "123", "123"),
    "peru": ("Peru", "105", "117", "116", "105"),
    "paraguay": ("Paraguay", "911", "911", "911", "911"),
    "uruguay": ("Uruguay", "911", "911", "911", "911"),
    # Europe
    "united kingdom": ("United Kingdom", "999", "999", "999", "999"),
    "france": ("France", "17", "15", "18", "112"),
    "germany": ("Germany", "110", "112", "112", "112"),
    "italy": ("Italy", "113", "118", "115", "112"),
    "spain": ("Spain", "091", "061", "080", "112"),
    "portugal": ("Portugal", "112", "112", "112", "112"),
    "netherlands": ("Netherlands", "112", "112", "112", "112"),
    "belgium": ("Belgium", "101", "112", "112", "112"),
    "switzerland": ("Switzerland", "117", "144", "118", "112"),
    "austria": ("Austria", "133", "144", "122", "112"),
    "greece": ("Greece", "100", "166", "199", "112"),
    "ireland": ("Ireland", "999", "999", "999", "112"),
    "sweden": ("Sweden", "112", "112", "112", "112"),
    "norway": ("Norway", "112", "113", "110", "112"),
    "denmark": ("Denmark", "112", "112", "112", "112"),
    "finland": ("Finland", "112", "112", "112", "112"),
    "poland": ("Poland", "997", "999", "998", "112"),
    "czech republic": ("Czech Republic", "158", "155", "150", "112"),
    "hungary": ("Hungary", "107", "104", "105", "112"),
    "turkey": ("Turkey", "155", "112", "110", "112"),
    "russia": ("Russia", "102", "103", "101", "112"),
    # Asia
    "japan": ("Japan", "110", "119", "119", "110"),
    "south korea": ("South Korea", "112", "119", "119", "112"),
    "china": ("China", "110", "120", "119", "110"),
    "hong kong": ("Hong Kong", "999", "999", "999", "999"),
    "taiwan": ("Taiwan", "110", "119", "119", "110"),
    "singapore": ("Singapore", "999", "995", "995", "999"),
    "thailand": ("Thailand", "191", "1669", "199", "191"),
    "vietnam": ("Vietnam", "113", "115", "114", "113"),
    "indonesia": ("Indonesia", "110", "118", "113", "112"),
    "malaysia": ("Malaysia", "999", "999", "994", "999"),
    "philippines": ("Philippines", "117", "911", "911", "911"),
    "india": ("India", "100", "102", "101", "112"),
    "israel": ("Israel", "100", "101", "102", "100"),
    "uae": ("UAE", "999", "998", "997", "999"),
    "saudi arabia": ("Saudi Arabia", "999", "997", "998", "911"),
    # Oceania
    "australia": ("Australia", "000", "000", "000", "000"),
    "new zealand": ("New Zealand", "111", "111", "111", "111"),
    # Africa
    "south africa": ("South Africa", "10111", "10177", "10111", "112"),
    "egypt": ("Egypt", "122", "123", "180", "122"),
    "morocco": ("Morocco", "19", "15", "15", "19"),
    "kenya": ("Kenya", "999", "999", "999", "999"),
}

COUNTRY_ALIASES = {
    "usa": "united states", "uk": "united kingdom", "england": "united kingdom",
    "czechia": "czech republic", "korea": "south korea", "dubai": "uae",
}

CITY_COUNTRIES = {
    # Americas
    "new york": "united states", "los angeles": "united states", "miami": "united states",
    "chicago": "united states", "las vegas": "united states", "san francisco": "united states",
    "seattle": "united states", "boston": "united states", "washington": "united states",
    "hawaii": "united states", "honolulu": "united states",
    "toronto": "canada", "vancouver": "canada", "montreal": "canada",
    "mexico city": "mexico", "cancun": "mexico", "guadalajara": "mexico",
    "sao paulo": "brazil", "rio de janeiro": "brazil",
    "buenos aires": "argentina", "lima": "peru", "bogota": "colombia", "santiago": "chile",
    "asuncion": "paraguay", "montevideo": "uruguay",
    # Europe
    "london": "united kingdom", "edinburgh": "united kingdom", "manchester": "united kingdom",
    "paris": "france", "nice": "france", "marseille": "france", "lyon": "france",
    "rome": "italy", "milan": "italy", "florence": "italy", "venice": "italy", "naples": "italy",
    "barcelona": "spain", "madrid": "spain", "seville": "spain", "valencia": "spain",
    "lisbon": "portugal", "porto": "portugal",
    "berlin": "germany", "munich": "germany", "frankfurt": "germany", "hamburg": "germany",
    "amsterdam": "netherlands", "rotterdam": "netherlands",
    "brussels": "belgium", "bruges": "belgium",
    "vienna": "austria", "salzburg": "austria",
    "zurich": "switzerland", "geneva": "switzerland", "bern": "switzerland",
    "athens": "greece", "santorini": "greece", "mykonos": "greece",
    "dublin": "ireland",
    "stockholm": "sweden", "copenhagen": "denmark", "oslo": "norway", "helsinki": "finland",
    "prague": "czech republic", "budapest": "hungary", "warsaw": "poland", "krakow": "poland",
    "istanbul": "turkey",
    "moscow": "russia", "st petersburg": "russia",
    # Asia
    "tokyo": "japan", "osaka": "japan", "kyoto": "japan",
    "seoul": "south korea", "busan": "south korea",
    "beijing": "china", "shanghai": "china", "hong kong": "hong kong",
    "taipei": "taiwan",
    "singapore": "singapore",
    "bangkok": "thailand", "phuket": "thailand", "chiang mai": "thailand",
    "kuala lumpur": "malaysia",
    "bali": "indonesia", "jakarta": "indonesia",
    "manila": "philippines", "cebu": "philippines",
    "ho chi minh": "vietnam", "hanoi": "vietnam",
    "mumbai": "india", "delhi": "india", "goa": "india", "jaipur": "india",
    "tel aviv": "israel", "jerusalem": "israel",
    "abu dhabi": "uae",
    "riyadh": "saudi arabia",
    # Oceania
    "sydney": "australia", "melbourne": "australia", "brisbane": "australia", "perth": "australia",
    "auckland": "new zealand", "queenstown": "new zealand",
    # Africa
    "cape town": "south africa", "johannesburg": "south africa",
    "cairo": "egypt", "marrakech": "morocco", "nairobi": "kenya",
}

_UNIVERSAL = ("Unknown", "112", "112", "112", "112")


def _as_dict(entry: tuple) -> Dict[str, str]:
    country, police, ambulance, fire, general = entry
    return {
        "country": country,
        "police": police,
        "ambulance": ambulance,
        "fire": fire,
        "emergencyNumber": general,
    }


def emergency_info(place: str) -> Dict[str, str]:
    """Emergency numbers for a city or country name."""
    key = place.lower().strip()
    country = CITY_COUNTRIES.get(key) or COUNTRY_ALIASES.get(key, key)
    return _as_dict(_EMERGENCY_NUMBERS.get(country, _UNIVERSAL))
