"""Test the trip assistant with mocked Gemini and Groq clients."""
import sys, os
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))

import pytest
from unittest.mock import AsyncMock, MagicMock

from config.settings import settings
from models.itinerary import ItineraryStep
from services.chat_service import ChatService


ITINERARY = [
    ItineraryStep(
        id=1,
        time="9:00 AM",
        title="Pike Place Market",
        description="Historic public market.",
        image_keyword="seattle pike place",
        address="85 Pike St, Seattle",
    ),
]


def _gemini_service():
    gemini = MagicMock()
    gemini.chat = AsyncMock(return_value="Try the chowder at Pike Place.")
    return ChatService(gemini_client=gemini), gemini


@pytest.mark.asyncio
async def test_first_turn_seeds_context():
    svc, gemini = _gemini_service()

    reply = await svc.reply(
        city="Seattle",
        basecamp="Ace Hotel",
        message="Where should I eat lunch?",
        itinerary=ITINERARY,
    )

    assert reply == "Try the chowder at Pike Place."
    kwargs = gemini.chat.await_args.kwargs
    assert kwargs["model"] == settings.GEMINI_CHAT_MODEL
    assert kwargs["message"] == "Where should I eat lunch?"
    assert kwargs["grounding"] == "search"
    context, ack = kwargs["history"]
    assert context["role"] == "user"
    assert "Stop 1: Pike Place Market at 9:00 AM" in context["text"]
    assert ack["role"] == "model"
    assert "trip to Seattle" in ack["text"]


@pytest.mark.asyncio
async def test_existing_history_passed_through():
    svc, gemini = _gemini_service()
    history = [
        {"role": "user", "parts": [{"text": "Hi"}, {"text": " there"}]},
        {"role": "model", "parts": [{"text": "Hello!"}]},
    ]

    await svc.reply(city="Seattle", basecamp="Ace Hotel", message="Weather?", history=history)

    assert gemini.chat.await_args.kwargs["history"] == [
        {"role": "user", "text": "Hi there"},
        {"role": "model", "text": "Hello!"},
    ]


@pytest.mark.asyncio
@pytest.mark.parametrize("city, message", [("", "hi"), ("Seattle", "")])
async def test_missing_fields_rejected(city, message):
    svc, gemini = _gemini_service()
    with pytest.raises(ValueError):
        await svc.reply(city=city, basecamp="", message=message)
    gemini.chat.assert_not_awaited()


@pytest.mark.asyncio
async def test_groq_fallback_maps_roles(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_KEY", "")
    groq = MagicMock()
    groq.chat_with_history = MagicMock(return_value="Take the monorail.")

    svc = ChatService(groq_client=groq)
    assert svc.use_groq and not svc.use_gemini

    reply = await svc.reply(city="Seattle", basecamp="Ace Hotel", message="How do I get around?")

    assert reply == "Take the monorail."
    messages = groq.chat_with_history.call_args.args[0]
    assert [m["role"] for m in messages] == ["user", "assistant", "user"]
    assert messages[-1]["content"] == "How do I get around?"


def test_no_llm_configured(monkeypatch):
    monkeypatch.setattr(settings, "GEMINI_KEY", "")
    monkeypatch.setattr(settings, "GROQ_API_KEY", "")
    with pytest.raises(ValueError):
        ChatService()
