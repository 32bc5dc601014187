"""Test schema validation and normalisation of model-generated itineraries."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import copy

import pytest

from models.itinerary import Coordinates
from services.itinerary_validator import (
    ItinerarySchemaError,
    check_itinerary_expectations,
    validate_itinerary,
)


def _step(step_id=1, **overrides):
    step = {
        "id": step_id,
        "time": "9:00 AM",
        "title": "Senso-ji",
        "description": "Tokyo's oldest temple.",
        "image_keyword": "tokyo temple",
        "address": "2-3-1 Asakusa, Taito City, Tokyo",
        "coordinates": {"lat": 35.7148, "lng": 139.7967},
        "stops": ["Nakamise-dori"],
        "color": "orange",
        "travelTimeFromPrevious": "10 min walk",
    }
    step.update(overrides)
    return step


def _without(step, key):
    step = copy.deepcopy(step)
    del step[key]
    return step


# ---------------------------------------------------------------------------
# Normalisation
# ---------------------------------------------------------------------------

def test_valid_step_maps_all_fields():
    [step] = validate_itinerary([_step()])
    assert step.id == 1
    assert step.coordinates == Coordinates(lat=35.7148, lng=139.7967)
    assert step.stops == ["Nakamise-dori"]
    assert step.color == "orange"
    assert step.travel_time_from_previous == "10 min walk"
    assert step.image_url is None
    assert step.notes is None


@pytest.mark.parametrize("key", ["coordinates", "stops", "color", "travelTimeFromPrevious"])
def test_null_and_missing_optional_fields_normalise_identically(key):
    from_null = validate_itinerary([_step(**{key: None})])
    from_missing = validate_itinerary([_without(_step(), key)])
    assert from_null == from_missing


def test_optional_defaults():
    raw = _step()
    for key in ("coordinates", "stops", "color", "travelTimeFromPrevious"):
        raw[key] = None
    [step] = validate_itinerary([raw])
    assert step.coordinates is None
    assert step.stops == []
    assert step.color == "blue"
    assert step.travel_time_from_previous is None

    data = step.to_dict()
    assert "coordinates" not in data
    assert "travelTimeFromPrevious" not in data
    assert None not in data.values()


def test_unknown_color_is_accepted():
    [step] = validate_itinerary([_step(color="chartreuse")])
    assert step.color == "chartreuse"


def test_image_url_and_notes_tolerated():
    [step] = validate_itinerary([_step(imageUrl="https://img/1.jpg", notes="bring cash")])
    assert step.image_url == "https://img/1.jpg"
    assert step.notes == "bring cash"


def test_wrapper_object_unwrapped():
    steps = [_step(1), _step(2)]
    assert validate_itinerary({"itinerary": steps}) == validate_itinerary(steps)


def test_step_count_not_enforced():
    """The prompts ask for 4 stops; the validator accepts whatever arrived."""
    assert len(validate_itinerary([_step(1)])) == 1
    assert validate_itinerary([]) == []


# ---------------------------------------------------------------------------
# Rejection
# ---------------------------------------------------------------------------

def test_string_id_rejects_whole_batch():
    with pytest.raises(ItinerarySchemaError) as exc_info:
        validate_itinerary([_step(1), _step("two"), _step(3)])
    assert exc_info.value.violations == [("[1].id", "expected number, got string")]


def test_numeric_string_id_not_coerced():
    with pytest.raises(ItinerarySchemaError):
        validate_itinerary([_step("1")])


def test_boolean_id_rejected():
    with pytest.raises(ItinerarySchemaError):
        validate_itinerary([_step(True)])


def test_every_violation_is_reported():
    bad = _without(_step(1, title=42, stops=["ok", 7]), "address")
    bad["coordinates"] = {"lat": "35.7"}
    with pytest.raises(ItinerarySchemaError) as exc_info:
        validate_itinerary([bad, _step(2, color=5)])

    paths = [path for path, _ in exc_info.value.violations]
    assert paths == [
        "[0].title",
        "[0].address",
        "[0].coordinates.lat",
        "[0].coordinates.lng",
        "[0].stops[1]",
        "[1].color",
    ]
    assert "[0].title" in str(exc_info.value)


def test_required_field_null_rejected():
    with pytest.raises(ItinerarySchemaError) as exc_info:
        validate_itinerary([_step(description=None)])
    assert exc_info.value.violations[0][0] == "[0].description"


@pytest.mark.parametrize("value", [
    {"title": "not an array"},
    "just text",
    42,
    {"itinerary": {"id": 1}},
])
def test_non_array_input_rejected(value):
    with pytest.raises(ItinerarySchemaError):
        validate_itinerary(value)


def test_non_object_element_rejected():
    with pytest.raises(ItinerarySchemaError) as exc_info:
        validate_itinerary([_step(1), "oops"])
    assert exc_info.value.violations == [("[1]", "expected object, got string")]


# ---------------------------------------------------------------------------
# Soft expectations
# ---------------------------------------------------------------------------

def test_expectations_flag_prompt_rules_without_rejecting():
    steps = validate_itinerary([_step(1), _step(2, color="chartreuse")])
    warnings = check_itinerary_expectations(steps)
    assert "Expected 4 stops, got 2" in warnings
    assert any("chartreuse" in w for w in warnings)
    assert any("first stop" in w for w in warnings)


def test_expectations_clean_itinerary():
    raw = [_step(i, color=c) for i, c in enumerate(["blue", "orange", "purple", "red"], 1)]
    del raw[0]["travelTimeFromPrevious"]
    assert check_itinerary_expectations(validate_itinerary(raw)) == []


@pytest.mark.parametrize("value", [float("nan"), float("inf"), float("-inf")])
def test_non_finite_coordinates_rejected(value):
    with pytest.raises(ItinerarySchemaError) as exc_info:
        validate_itinerary([_step(coordinates={"lat": value, "lng": 139.7})])
    assert exc_info.value.violations == [
        ("[0].coordinates.lat", "expected number, got non-finite number"),
    ]


def test_non_finite_id_rejected():
    with pytest.raises(ItinerarySchemaError) as exc_info:
        validate_itinerary([_step(float("nan"))])
    assert exc_info.value.violations[0][0] == "[0].id"


def test_large_integer_id_accepted():
    [step] = validate_itinerary([_step(10 ** 400)])
    assert step.id == 10 ** 400
