"""
Schema validation for model-generated itineraries.

The model's output is untrusted.  ``validate_itinerary`` checks every
element against ``FIELD_RULES`` and normalises optional fields
(null and missing are treated the same way), returning canonical
``ItineraryStep`` objects.  Validation is all-or-nothing: one bad field
anywhere rejects the whole batch with a single aggregated error.

Usage:
    from services.itinerary_validator import validate_itinerary

    steps = validate_itinerary(json.loads(text))
"""

import logging
import math
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from config.settings import settings
from models.itinerary import Coordinates, ItineraryStep

logger = logging.getLogger(__name__)

Violation = Tuple[str, str]            # (field path, reason)
Checker = Callable[[Any, str], Tuple[Any, List[Violation]]]

_MISSING = object()


class ItinerarySchemaError(Exception):
    """Raised when parsed JSON does not match the itinerary schema."""

    def __init__(self, violations: List[Violation]):
        self.violations = violations
        summary = "; ".join(f"{path}: {reason}" for path, reason in violations)
        super().__init__(f"Invalid itinerary format: {summary}")


# ---------------------------------------------------------------------------
# Type checks
# ---------------------------------------------------------------------------


def _json_type(value: Any) -> str:
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "boolean"
    if isinstance(value, float) and not math.isfinite(value):
        return "non-finite number"
    if isinstance(value, (int, float)):
        return "number"
    if isinstance(value, str):
        return "string"
    if isinstance(value, list):
        return "array"
    if isinstance(value, dict):
        return "object"
    return type(value).__name__


def _is_number(value: Any) -> bool:
    # bool is an int subclass; NaN and Infinity are not valid JSON numbers
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or math.isfinite(value)


def _expected(kind: str, value: Any) -> str:
    return f"expected {kind}, got {_json_type(value)}"


def _check_number(value: Any, path: str) -> Tuple[Any, List[Violation]]:
    if _is_number(value):
        return value, []
    return None, [(path, _expected("number", value))]


def _check_string(value: Any, path: str) -> Tuple[Any, List[Violation]]:
    if isinstance(value, str):
        return value, []
    return None, [(path, _expected("string", value))]


def _check_string_list(value: Any, path: str) -> Tuple[Any, List[Violation]]:
    if not isinstance(value, list):
        return None, [(path, _expected("array of strings", value))]
    violations = [
        (f"{path}[{i}]", _expected("string", item))
        for i, item in enumerate(value)
        if not isinstance(item, str)
    ]
    return list(value), violations


def _check_coordinates(value: Any, path: str) -> Tuple[Any, List[Violation]]:
    if not isinstance(value, dict):
        return None, [(path, _expected("object with lat/lng", value))]
    violations: List[Violation] = []
    for key in ("lat", "lng"):
        if key not in value:
            violations.append((f"{path}.{key}", "required field missing"))
        elif not _is_number(value[key]):
            violations.append((f"{path}.{key}", _expected("number", value[key])))
    if violations:
        return None, violations
    return Coordinates(lat=value["lat"], lng=value["lng"]), []


# ---------------------------------------------------------------------------
# Field rule table
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class FieldRule:
    """
    How one JSON key maps onto an ItineraryStep attribute.

    Required fields must be present and non-null.  For optional fields,
    null and a missing key both resolve to ``default`` (None means the
    attribute is left absent).
    """

    key: str
    attr: str
    check: Checker
    required: bool = False
    default: Any = None

    def apply(self, raw: Dict[str, Any], path: str) -> Tuple[Any, List[Violation]]:
        value = raw.get(self.key, _MISSING)
        field_path = f"{path}.{self.key}"

        if value is _MISSING or value is None:
            if self.required:
                reason = "required field missing" if value is _MISSING else _expected(
                    "non-null value", value
                )
                return None, [(field_path, reason)]
            default = self.default() if callable(self.default) else self.default
            return default, []

        return self.check(value, field_path)


FIELD_RULES: List[FieldRule] = [
    FieldRule("id", "id", _check_number, required=True),
    FieldRule("time", "time", _check_string, required=True),
    FieldRule("title", "title", _check_string, required=True),
    FieldRule("description", "description", _check_string, required=True),
    FieldRule("image_keyword", "image_keyword", _check_string, required=True),
    FieldRule("address", "address", _check_string, required=True),
    FieldRule("coordinates", "coordinates", _check_coordinates),
    FieldRule("stops", "stops", _check_string_list, default=list),
    FieldRule("color", "color", _check_string, default=settings.DEFAULT_STEP_COLOR),
    FieldRule("imageUrl", "image_url", _check_string),
    FieldRule("notes", "notes", _check_string),
    FieldRule("travelTimeFromPrevious", "travel_time_from_previous", _check_string),
]


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------


def unwrap_itinerary(value: Any) -> Any:
    """Accept either a bare array or an ``{"itinerary": [...]}`` wrapper."""
    if isinstance(value, list):
        return value
    if isinstance(value, dict) and isinstance(value.get("itinerary"), list):
        return value["itinerary"]
    return value


def validate_step(raw: Any, path: str) -> Tuple[Optional[ItineraryStep], List[Violation]]:
    """Validate a single element; returns (step or None, violations)."""
    if not isinstance(raw, dict):
        return None, [(path, _expected("object", raw))]

    values: Dict[str, Any] = {}
    violations: List[Violation] = []
    for rule in FIELD_RULES:
        value, problems = rule.apply(raw, path)
        values[rule.attr] = value
        violations.extend(problems)

    if violations:
        return None, violations
    return ItineraryStep(**values), []


def validate_itinerary(value: Any) -> List[ItineraryStep]:
    """
    Validate and normalise parsed model output into itinerary steps.

    Raises:
        ItinerarySchemaError: listing every violated field path.
    """
    candidate = unwrap_itinerary(value)
    if not isinstance(candidate, list):
        raise ItinerarySchemaError([("", _expected("array of itinerary steps", candidate))])

    steps: List[ItineraryStep] = []
    violations: List[Violation] = []
    for index, raw in enumerate(candidate):
        step, problems = validate_step(raw, f"[{index}]")
        violations.extend(problems)
        if step is not None:
            steps.append(step)

    if violations:
        raise ItinerarySchemaError(violations)
    return steps


def check_itinerary_expectations(steps: List[ItineraryStep]) -> List[str]:
    """
    Soft checks for what the prompts ask of the model.

    These never reject an itinerary; the caller logs them.
    """
    warnings: List[str] = []

    if len(steps) != settings.STOPS_PER_ITINERARY:
        warnings.append(
            f"Expected {settings.STOPS_PER_ITINERARY} stops, got {len(steps)}"
        )

    for index, step in enumerate(steps):
        if step.color not in settings.STEP_COLORS:
            warnings.append(f"[{index}].color: unknown color '{step.color}'")

    if steps and steps[0].travel_time_from_previous is not None:
        warnings.append("[0].travelTimeFromPrevious: first stop has a travel time")

    ids = [step.id for step in steps]
    if len(set(ids)) != len(ids):
        warnings.append(f"Duplicate step ids: {ids}")

    return warnings
