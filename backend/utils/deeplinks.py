"""
Navigation and ride-hailing deep links for an itinerary stop.

Coordinates are preferred over the street address when the step has them.
"""

from typing import Dict, Optional
from urllib.parse import urlencode

from models.itinerary import ItineraryStep


def _latlng(lat: Optional[float], lng: Optional[float]) -> Optional[str]:
    if lat is None or lng is None:
        return None
    return f"{lat},{lng}"


def uber_link(address: str, lat: Optional[float] = None, lng: Optional[float] = None) -> str:
    params = {
        "action": "setPickup",
        "pickup[latitude]": "my_location",
        "pickup[longitude]": "my_location",
        "pickup[nickname]": "Current Location",
    }
    if lat is not None and lng is not None:
        params["dropoff[latitude]"] = str(lat)
        params["dropoff[longitude]"] = str(lng)
    params["dropoff[formatted_address]"] = address
    return f"https://m.uber.com/ul/?{urlencode(params)}"


def lyft_link(lat: Optional[float] = None, lng: Optional[float] = None) -> str:
    params = {"id": "lyft"}
    if lat is not None and lng is not None:
        params["destination[latitude]"] = str(lat)
        params["destination[longitude]"] = str(lng)
    return f"https://lyft.com/ride?{urlencode(params)}"


def google_maps_link(address: str, lat: Optional[float] = None, lng: Optional[float] = None) -> str:
    params = {
        "api": "1",
        "travelmode": "driving",
        "destination": _latlng(lat, lng) or address,
    }
    return f"https://www.google.com/maps/dir/?{urlencode(params)}"


def apple_maps_link(address: str, lat: Optional[float] = None, lng: Optional[float] = None) -> str:
    params = {"dirflg": "d", "daddr": _latlng(lat, lng) or address}
    return f"https://maps.apple.com/?{urlencode(params)}"


def waze_link(address: str, lat: Optional[float] = None, lng: Optional[float] = None) -> str:
    params = {"navigate": "yes"}
    latlng = _latlng(lat, lng)
    if latlng:
        params["ll"] = latlng
    else:
        params["q"] = address
    return f"https://waze.com/ul?{urlencode(params)}"


def navigation_links(step: ItineraryStep) -> Dict[str, str]:
    """All deep links for one step, keyed by app."""
    lat = step.coordinates.lat if step.coordinates else None
    lng = step.coordinates.lng if step.coordinates else None
    return {
        "uber": uber_link(step.address, lat, lng),
        "lyft": lyft_link(lat, lng),
        "google_maps": google_maps_link(step.address, lat, lng),
        "apple_maps": apple_maps_link(step.address, lat, lng),
        "waze": waze_link(step.address, lat, lng),
    }
