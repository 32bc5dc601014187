"""
Trip assistant — answers questions about the destination and the
current itinerary.

The service is stateless on the server side: the client sends the full
chat history with every ``/api/chat`` request.  History turns use the
Gemini shape ``{"role": "user"|"model", "parts": [{"text": ...}]}``.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from clients.gemini_client import GeminiClient
from clients.groq_client import GroqClient
from config.settings import settings
from models.itinerary import ItineraryStep
from services.prompt_builder import build_chat_context

logger = logging.getLogger(__name__)


def _acknowledgement(city: str) -> str:
    return (
        f"I understand! I'm here to help you with your trip to {city}. "
        "I can see your itinerary and I'm ready to answer any questions about "
        "the places you'll visit, give recommendations, or help with logistics. "
        "What would you like to know?"
    )


def _turn_text(turn: Dict[str, Any]) -> str:
    return "".join(part.get("text", "") for part in turn.get("parts", []))


class ChatService:
    """Contextual travel assistant via Gemini (primary) or Groq (fallback)."""

    def __init__(
        self,
        gemini_client: Optional[GeminiClient] = None,
        groq_client: Optional[GroqClient] = None,
    ):
        self.use_gemini = False
        self.use_groq = False

        if gemini_client or settings.GEMINI_KEY:
            self.gemini_client = gemini_client or GeminiClient()
            self.use_gemini = True
            logger.info("ChatService: Using Gemini as LLM")
        elif groq_client or settings.GROQ_API_KEY:
            self.groq_client = groq_client or GroqClient()
            self.use_groq = True
            logger.info("ChatService: Gemini not configured, using Groq")
        else:
            raise ValueError("No LLM configured — set GEMINI_KEY or GROQ_API_KEY")

    @staticmethod
    def build_history(
        city: str,
        basecamp: str,
        history: List[Dict[str, Any]],
        itinerary: Optional[List[ItineraryStep]] = None,
    ) -> List[Dict[str, str]]:
        """Flatten client history; seed it with trip context when empty."""
        if history:
            return [{"role": turn["role"], "text": _turn_text(turn)} for turn in history]
        return [
            {"role": "user", "text": build_chat_context(city, basecamp, itinerary)},
            {"role": "model", "text": _acknowledgement(city)},
        ]

    async def reply(
        self,
        city: str,
        basecamp: str,
        message: str,
        history: Optional[List[Dict[str, Any]]] = None,
        itinerary: Optional[List[ItineraryStep]] = None,
    ) -> str:
        """
        Return the assistant's answer to ``message``.

        Raises:
            ValueError: If ``city`` or ``message`` is empty.
            ExternalAPIError: If the LLM call fails.
        """
        if not city or not message:
            raise ValueError("Missing required fields")

        turns = self.build_history(city, basecamp, history or [], itinerary)

        if self.use_gemini:
            return await self.gemini_client.chat(
                model=settings.GEMINI_CHAT_MODEL,
                history=turns,
                message=message,
                grounding="search",
            )

        messages = [
            {"role": "assistant" if t["role"] == "model" else "user", "content": t["text"]}
            for t in turns
        ]
        messages.append({"role": "user", "content": message})
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            None, lambda: self.groq_client.chat_with_history(messages)
        )
