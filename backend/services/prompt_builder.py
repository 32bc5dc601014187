"""
Prompt templates for itinerary generation and the trip assistant.

All functions are pure: same trip parameters in, same prompt text out.

Two pipeline shapes are supported:
    * single stage — one prompt that asks directly for the JSON array
    * two stage    — a grounded natural-language prompt, followed by a
                     conversion prompt that embeds the stage-1 text
"""

from typing import List, Optional

from config.settings import settings
from models.itinerary import ItineraryStep

# ---------------------------------------------------------------------------
# Shared schema description
# ---------------------------------------------------------------------------

_STEP_SCHEMA_EXAMPLE = """\
[
  {
    "id": 1,
    "time": "9:00 AM",
    "title": "Place Name",
    "description": "2-3 sentence description",
    "image_keyword": "search term for photo (e.g., 'tokyo temple', 'paris cafe')",
    "address": "Full street address",
    "coordinates": { "lat": number, "lng": number },
    "stops": ["nearby point 1", "nearby point 2"],
    "color": "blue",
    "travelTimeFromPrevious": "15 min walk"
  }
]"""


def _schema_rules() -> str:
    count = settings.STOPS_PER_ITINERARY
    colors = ", ".join(settings.STEP_COLORS)
    return (
        "Rules:\n"
        f"- id: sequential 1-{count}\n"
        "- time: spread throughout the day starting 9:00 AM\n"
        f"- color: use a different color for each stop ({colors})\n"
        "- travelTimeFromPrevious: omit for the first stop, include for the others\n"
        "- image_keyword: descriptive search term including location context\n"
        "- coordinates: omit the key entirely if you do not know them\n"
        "- Never use null values; use an empty string or empty array instead"
    )


def resolve_style(style: str, custom_style: Optional[str] = None) -> str:
    """Return the style description fed to the prompts."""
    if style == settings.CUSTOM_STYLE and custom_style:
        return custom_style.strip()
    return style


# ---------------------------------------------------------------------------
# Single stage
# ---------------------------------------------------------------------------


def build_single_stage_prompt(city: str, basecamp: str, style_description: str) -> str:
    """One prompt asking the model directly for the itinerary JSON array."""
    count = settings.STOPS_PER_ITINERARY
    return (
        f"Create a 1-day itinerary for a trip to {city}, focusing on "
        f"{style_description}, starting from \"{basecamp}\".\n\n"
        f"Recommend exactly {count} real places to visit, in a sensible order "
        f"starting near the basecamp.\n\n"
        f"Return ONLY a valid JSON array with exactly {count} objects in this format:\n"
        f"{_STEP_SCHEMA_EXAMPLE}\n\n"
        f"{_schema_rules()}"
    )


# ---------------------------------------------------------------------------
# Two stage
# ---------------------------------------------------------------------------


def build_grounding_prompt(city: str, basecamp: str, style_description: str) -> str:
    """Stage 1: natural-language recommendations grounded against Google Maps."""
    count = settings.STOPS_PER_ITINERARY
    return (
        f"Create a 1-day itinerary for a trip to {city}, focusing on "
        f"{style_description}, starting from \"{basecamp}\".\n\n"
        f"Recommend exactly {count} real places to visit. For each place, provide:\n"
        "- The exact name of the place\n"
        "- A 2-3 sentence description\n"
        "- The full street address\n"
        "- Approximate coordinates (latitude, longitude)\n"
        "- 2-3 nearby points of interest\n"
        "- Estimated travel time from the previous stop\n\n"
        "Use accurate, real information from Google Maps. "
        "Only recommend places that actually exist."
    )


def build_json_conversion_prompt(grounded_text: str) -> str:
    """Stage 2: convert the stage-1 text into the itinerary JSON array."""
    count = settings.STOPS_PER_ITINERARY
    return (
        "Convert the following trip itinerary into a JSON array.\n\n"
        "Input itinerary:\n"
        f"{grounded_text}\n\n"
        f"Output format - Return ONLY a valid JSON array with exactly {count} objects:\n"
        f"{_STEP_SCHEMA_EXAMPLE}\n\n"
        f"{_schema_rules()}"
    )


# ---------------------------------------------------------------------------
# Trip assistant
# ---------------------------------------------------------------------------


def build_chat_context(
    city: str,
    basecamp: str,
    itinerary: Optional[List[ItineraryStep]] = None,
) -> str:
    """Opening context for the assistant, listing the current stops."""
    context = (
        "You are a helpful travel assistant. The user is planning a trip to "
        f"{city} and staying at \"{basecamp}\"."
    )

    if itinerary:
        context += f"\n\nTheir current itinerary has {len(itinerary)} stops:\n"
        for index, stop in enumerate(itinerary, 1):
            context += f"\nStop {index}: {stop.title} at {stop.time}"
            context += f"\n  - {stop.description}"
            context += f"\n  - Address: {stop.address}"
            if stop.stops:
                context += f"\n  - Nearby: {', '.join(stop.stops)}"
        context += "\n\nYou can reference these stops when answering questions."

    return context
