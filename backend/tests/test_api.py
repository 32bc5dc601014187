"""
HTTP-level tests for the FastAPI app.

Services are injected into the module globals directly; the lifespan is
not run, so no real clients are created.
"""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import json

import pytest
from fastapi.testclient import TestClient
from unittest.mock import AsyncMock, MagicMock

import app as main
from services.image_service import ImageService
from services.itinerary_service import ItineraryService


STEPS = [
    {
        "id": i,
        "time": t,
        "title": title,
        "description": f"{title} in Tokyo.",
        "image_keyword": f"tokyo {title.lower()}",
        "address": f"{i} Chome, Tokyo",
        "coordinates": {"lat": 35.6 + i / 100, "lng": 139.7} if i != 3 else None,
        "stops": [],
        "color": color,
        "travelTimeFromPrevious": None if i == 1 else "10 min walk",
    }
    for i, t, title, color in [
        (1, "9:00 AM", "Tsukiji", "blue"),
        (2, "11:30 AM", "Ginza", "orange"),
        (3, "2:00 PM", "Shibuya", "purple"),
        (4, "6:00 PM", "Shinjuku", "red"),
    ]
]


@pytest.fixture
def client(monkeypatch):
    gemini = MagicMock()
    gemini.generate_content = AsyncMock(side_effect=["grounded text", json.dumps(STEPS)])
    photos = MagicMock()
    photos.find_image = AsyncMock(return_value="https://images.pexels.com/x.jpg")
    service = ItineraryService(
        gemini_client=gemini,
        image_service=ImageService(photo_client=photos),
        strategy="two_stage",
    )
    monkeypatch.setattr(main, "itinerary_service", service)
    monkeypatch.setattr(main, "chat_service", None)
    monkeypatch.setattr(main, "trip_info_service", None)
    return TestClient(main.app)


def _contains_null(value):
    if value is None:
        return True
    if isinstance(value, dict):
        return any(_contains_null(v) for v in value.values())
    if isinstance(value, list):
        return any(_contains_null(v) for v in value)
    return False


def test_health(client):
    resp = client.get("/api/health")
    assert resp.status_code == 200
    assert resp.json()["status"] == "healthy"


def test_generate_success_has_no_nulls(client):
    resp = client.post(
        "/api/generate",
        json={"city": "Tokyo", "basecamp": "Park Hyatt Tokyo", "style": "food"},
    )

    assert resp.status_code == 200
    body = resp.json()
    assert body["success"] is True
    assert "error" not in body
    assert [s["id"] for s in body["data"]] == [1, 2, 3, 4]
    assert "coordinates" not in body["data"][2]
    assert "travelTimeFromPrevious" not in body["data"][0]
    assert body["data"][0]["imageUrl"] == "https://images.pexels.com/x.jpg"
    assert not _contains_null(body)


def test_generate_missing_fields_is_400(client):
    resp = client.post("/api/generate", json={"city": "Tokyo"})
    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Missing required fields"}


def test_generate_invalid_style_is_400(client):
    resp = client.post(
        "/api/generate",
        json={"city": "Tokyo", "basecamp": "Park Hyatt Tokyo", "style": "nightlife"},
    )
    assert resp.status_code == 400
    assert resp.json()["error"].startswith("Invalid style")


def test_generate_parse_failure_is_500_without_model_output(client):
    main.itinerary_service.gemini_client.generate_content = AsyncMock(
        side_effect=["grounded text", '[{"id": 1, "title": "Tsuki']
    )
    resp = client.post(
        "/api/generate",
        json={"city": "Tokyo", "basecamp": "Park Hyatt Tokyo", "style": "food"},
    )
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Failed to parse itinerary"}


def test_generate_validation_failure_is_500(client):
    bad = [dict(STEPS[0], id="one")]
    main.itinerary_service.gemini_client.generate_content = AsyncMock(
        side_effect=["grounded text", json.dumps(bad)]
    )
    resp = client.post(
        "/api/generate",
        json={"city": "Tokyo", "basecamp": "Park Hyatt Tokyo", "style": "food"},
    )
    assert resp.status_code == 500
    assert resp.json() == {"success": False, "error": "Generated itinerary was invalid"}


def test_generate_malformed_body_is_400(client):
    resp = client.post("/api/generate", content="not json", headers={"Content-Type": "application/json"})
    assert resp.status_code == 400
    assert resp.json()["success"] is False


def test_chat_requires_fields(client):
    resp = client.post("/api/chat", json={"city": "Tokyo"})
    assert resp.status_code == 400
    assert resp.json()["error"] == "Missing required fields"


def test_chat_without_llm_is_500(client):
    resp = client.post("/api/chat", json={"city": "Tokyo", "message": "Best ramen?"})
    assert resp.status_code == 500
    assert resp.json()["error"] == "API key not configured"


def test_chat_reply(client, monkeypatch):
    chat = MagicMock()
    chat.reply = AsyncMock(return_value="Ichiran in Shibuya.")
    monkeypatch.setattr(main, "chat_service", chat)

    resp = client.post(
        "/api/chat",
        json={
            "city": "Tokyo",
            "basecamp": "Park Hyatt Tokyo",
            "message": "Best ramen?",
            "history": [{"role": "user", "parts": [{"text": "hi"}]}],
            "itinerary": STEPS,
        },
    )

    assert resp.status_code == 200
    assert resp.json() == {"success": True, "message": "Ichiran in Shibuya."}
    kwargs = chat.reply.await_args.kwargs
    assert kwargs["history"] == [{"role": "user", "parts": [{"text": "hi"}]}]
    assert [s.title for s in kwargs["itinerary"]] == ["Tsukiji", "Ginza", "Shibuya", "Shinjuku"]


def test_trip_info(client, monkeypatch):
    trip_info = MagicMock()
    trip_info.get_trip_info = AsyncMock(return_value={
        "city": "Tokyo", "weather": None, "currency": {"code": "JPY"},
        "emergency": {"country": "Japan"},
    })
    monkeypatch.setattr(main, "trip_info_service", trip_info)

    resp = client.get("/api/trip-info", params={"city": "Tokyo"})

    assert resp.status_code == 200
    assert resp.json()["currency"] == {"code": "JPY"}


def test_trip_info_requires_city(client):
    resp = client.get("/api/trip-info")
    assert resp.status_code == 400


def test_export_ics(client):
    resp = client.post(
        "/api/export/ics",
        json={"city": "Tokyo", "itinerary": STEPS, "trip_date": "2026-05-14"},
    )

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/calendar")
    assert 'filename="tokyo-trip.ics"' in resp.headers["content-disposition"]
    assert "DTSTART:20260514T090000" in resp.text


def test_export_share(client):
    resp = client.post(
        "/api/export/share",
        json={"city": "Tokyo", "basecamp": "Park Hyatt Tokyo", "itinerary": STEPS},
    )
    assert resp.status_code == 200
    assert resp.json()["text"].startswith("✈️ Tokyo Trip Itinerary")


def test_links(client):
    resp = client.post(
        "/api/links",
        json={"city": "Tokyo", "itinerary": STEPS, "trip_date": "2026-05-14"},
    )

    assert resp.status_code == 200
    links = resp.json()["links"]
    assert [l["id"] for l in links] == [1, 2, 3, 4]
    assert "35.61" in links[0]["navigation"]["google_maps"]
    assert links[0]["calendar"].startswith("https://calendar.google.com/")


def test_export_html(client):
    resp = client.post(
        "/api/export/html",
        json={
            "city": "Tokyo",
            "basecamp": "Park Hyatt Tokyo",
            "itinerary": STEPS,
            "checklist": [{"id": 1, "text": "Suica card", "done": True}],
        },
    )

    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    assert "<title>Tokyo Trip Itinerary</title>" in resp.text
    assert "🏨 Park Hyatt Tokyo" in resp.text
    assert "Suica card" in resp.text


def test_export_html_requires_city(client):
    resp = client.post("/api/export/html", json={"itinerary": STEPS})
    assert resp.status_code == 400


def test_currency_convert(client, monkeypatch):
    trip_info = MagicMock()
    trip_info.currency_service.convert.return_value = 1.8
    monkeypatch.setattr(main, "trip_info_service", trip_info)

    resp = client.get("/api/currency/convert", params={"amount": 300, "from": "jpy", "to": "eur"})

    assert resp.status_code == 200
    assert resp.json() == {
        "success": True, "amount": 300.0, "fromCurrency": "JPY",
        "toCurrency": "EUR", "result": 1.8, "formatted": "€1.80",
    }
    trip_info.currency_service.convert.assert_called_once_with(300.0, "JPY", "EUR")


def test_currency_convert_unknown_code_is_400(client, monkeypatch):
    trip_info = MagicMock()
    trip_info.currency_service.convert.side_effect = ValueError("Unknown currency code: XYZ")
    monkeypatch.setattr(main, "trip_info_service", trip_info)

    resp = client.get("/api/currency/convert", params={"amount": 5, "from": "USD", "to": "XYZ"})

    assert resp.status_code == 400
    assert resp.json() == {"success": False, "error": "Unknown currency code: XYZ"}


def test_currency_convert_rejects_nan_amount(client, monkeypatch):
    monkeypatch.setattr(main, "trip_info_service", MagicMock())
    resp = client.get("/api/currency/convert", params={"amount": "nan", "from": "USD", "to": "EUR"})
    assert resp.status_code == 400
