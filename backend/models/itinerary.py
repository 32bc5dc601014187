"""
Itinerary data models — canonical output of the generation pipeline.

Defines the Coordinates and ItineraryStep dataclasses.  Python attribute
names are snake_case; ``to_dict`` produces the camelCase wire shape the
frontend consumes and omits absent optional fields instead of emitting
``null``.

Usage:
    step = ItineraryStep(id=1, time="9:00 AM", title="Senso-ji", ...)
    json_data = step.to_dict()
"""

from dataclasses import dataclass, field, replace
from typing import List, Optional, Dict, Any


@dataclass(frozen=True)
class Coordinates:
    """Latitude / longitude pair."""

    lat: float
    lng: float

    def to_dict(self) -> Dict[str, float]:
        return {"lat": self.lat, "lng": self.lng}


@dataclass(frozen=True)
class ItineraryStep:
    """One recommended stop in a generated trip plan."""

    id: int
    time: str                           # display string, e.g. "9:00 AM"
    title: str
    description: str
    image_keyword: str                  # photo search term, never shown
    address: str
    coordinates: Optional[Coordinates] = None
    stops: List[str] = field(default_factory=list)
    color: str = "blue"
    image_url: Optional[str] = None     # filled in by photo enrichment
    notes: Optional[str] = None         # user-entered later
    travel_time_from_previous: Optional[str] = None

    # ------------------------------------------------------------------
    # Serialization
    # ------------------------------------------------------------------

    def to_dict(self) -> Dict[str, Any]:
        """Convert to the JSON wire shape, omitting absent optional keys."""
        data: Dict[str, Any] = {
            "id": self.id,
            "time": self.time,
            "title": self.title,
            "description": self.description,
            "image_keyword": self.image_keyword,
            "address": self.address,
            "stops": list(self.stops),
            "color": self.color,
        }
        if self.coordinates is not None:
            data["coordinates"] = self.coordinates.to_dict()
        if self.image_url is not None:
            data["imageUrl"] = self.image_url
        if self.notes is not None:
            data["notes"] = self.notes
        if self.travel_time_from_previous is not None:
            data["travelTimeFromPrevious"] = self.travel_time_from_previous
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ItineraryStep":
        """Rebuild a step from its wire shape (trusted, already-validated input)."""
        coords = data.get("coordinates")
        return cls(
            id=data["id"],
            time=data.get("time", ""),
            title=data.get("title", ""),
            description=data.get("description", ""),
            image_keyword=data.get("image_keyword", ""),
            address=data.get("address", ""),
            coordinates=Coordinates(coords["lat"], coords["lng"]) if coords else None,
            stops=list(data.get("stops") or []),
            color=data.get("color") or "blue",
            image_url=data.get("imageUrl"),
            notes=data.get("notes"),
            travel_time_from_previous=data.get("travelTimeFromPrevious"),
        )

    def with_image(self, image_url: Optional[str]) -> "ItineraryStep":
        """Return a copy carrying ``image_url``."""
        return replace(self, image_url=image_url)


def itinerary_to_list(steps: List[ItineraryStep]) -> List[Dict[str, Any]]:
    """Serialise an ordered list of steps."""
    return [step.to_dict() for step in steps]
