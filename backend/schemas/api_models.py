"""
Pydantic models for FastAPI request/response validation.

These are API-boundary schemas only.  Internal business logic uses the
dataclasses in models/itinerary.py; generated itineraries are returned
as plain dicts so absent optional fields stay absent (never ``null``).
"""

from datetime import date
from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, Field

from models.itinerary import ItineraryStep


# ── Shared ─────────────────────────────────────────────────────


class CoordinatesModel(BaseModel):
    lat: float
    lng: float


class ItineraryStepModel(BaseModel):
    """An itinerary step as sent back by the frontend (possibly user-edited)."""

    id: Union[int, float]
    time: str
    title: str
    description: str
    image_keyword: str = ""
    address: str
    coordinates: Optional[CoordinatesModel] = None
    stops: List[str] = []
    color: str = "blue"
    imageUrl: Optional[str] = None
    notes: Optional[str] = None
    travelTimeFromPrevious: Optional[str] = None

    def to_step(self) -> ItineraryStep:
        return ItineraryStep.from_dict(self.model_dump(exclude_none=True))


class ChecklistItem(BaseModel):
    id: int
    text: str
    done: bool = False


# ── Request Models ─────────────────────────────────────────────


class GenerateRequest(BaseModel):
    """POST /api/generate — generate a one-day itinerary."""

    # Presence is checked by the service so the error message is consistent
    city: Optional[str] = Field(None, json_schema_extra={"examples": ["Tokyo"]})
    basecamp: Optional[str] = Field(None, json_schema_extra={"examples": ["Park Hyatt Tokyo"]})
    style: Optional[str] = Field(
        None,
        description='One of "culture", "food", "nature" or "custom"',
    )
    customStyle: Optional[str] = Field(
        None,
        description='Free-text style description, required when style is "custom"',
    )


class ChatPart(BaseModel):
    text: str = ""


class ChatTurn(BaseModel):
    """Single turn of the assistant conversation (Gemini content shape)."""

    role: str = Field(..., description='"user" or "model"')
    parts: List[ChatPart] = []


class ChatRequest(BaseModel):
    """POST /api/chat — ask the trip assistant a question."""

    city: Optional[str] = None
    basecamp: str = ""
    message: Optional[str] = None
    history: List[ChatTurn] = []
    itinerary: Optional[List[ItineraryStepModel]] = None


class ExportRequest(BaseModel):
    """POST /api/export/* — export the current itinerary."""

    city: str = Field(..., min_length=1)
    basecamp: str = ""
    itinerary: List[ItineraryStepModel]
    checklist: Optional[List[ChecklistItem]] = None
    trip_date: Optional[date] = Field(
        None, description="Date of the trip (defaults to today)"
    )


class LinksRequest(BaseModel):
    """POST /api/links — navigation and calendar links per stop."""

    city: str = Field(..., min_length=1)
    itinerary: List[ItineraryStepModel]
    trip_date: Optional[date] = None


# ── Response Models ────────────────────────────────────────────


class HealthResponse(BaseModel):
    """GET /api/health response."""

    status: str
    service: str
    strategy: str
    grounding_model: str
    json_model: str
    gemini_configured: bool
    photos_configured: bool


class GenerateResponse(BaseModel):
    """POST /api/generate response."""

    success: bool
    data: Optional[List[Dict[str, Any]]] = None
    error: Optional[str] = None


class ChatResponse(BaseModel):
    """POST /api/chat response."""

    success: bool
    message: Optional[str] = None
    error: Optional[str] = None


class TripInfoResponse(BaseModel):
    """GET /api/trip-info response."""

    success: bool
    city: Optional[str] = None
    weather: Optional[Dict[str, Any]] = None
    currency: Optional[Dict[str, Any]] = None
    emergency: Optional[Dict[str, str]] = None
    error: Optional[str] = None


class CurrencyConversionResponse(BaseModel):
    """GET /api/currency/convert response."""

    success: bool
    amount: float
    fromCurrency: str
    toCurrency: str
    result: float
    formatted: str


class ShareResponse(BaseModel):
    """POST /api/export/share response."""

    success: bool
    text: Optional[str] = None
    error: Optional[str] = None


class StepLinks(BaseModel):
    id: Union[int, float]
    navigation: Dict[str, str]
    calendar: str


class LinksResponse(BaseModel):
    """POST /api/links response."""

    success: bool
    links: List[StepLinks] = []


class ErrorResponse(BaseModel):
    """Generic error envelope returned on failure."""

    success: bool = False
    error: str
