"""
Google Gemini API client wrapper with structured logging.

Uses the google-genai SDK (``from google import genai``).  Each call is a
single attempt; retry policy belongs to the caller.

Usage:
    from clients.gemini_client import GeminiClient

    client = GeminiClient()
    text = await client.generate_content(
        model="gemini-2.5-flash-lite",
        prompt="Convert this itinerary to JSON...",
        response_format="json",
        request_id="req-123",
    )
"""

import asyncio
import logging
from typing import Dict, List, Optional

from google import genai
from google.genai import types

from config.settings import settings

logger = logging.getLogger(__name__)

RESPONSE_FORMATS = ("json",)
GROUNDING_TOOLS = ("places", "search")


class ExternalAPIError(Exception):
    """Raised when an external API call fails (transport, auth, quota)."""

    def __init__(self, service: str, error: str):
        self.service = service
        self.error = error
        super().__init__(f"{service} API failed: {error}")


def _build_tools(grounding: Optional[str]) -> Optional[List[types.Tool]]:
    if grounding is None:
        return None
    if grounding == "places":
        return [types.Tool(google_maps=types.GoogleMaps())]
    if grounding == "search":
        return [types.Tool(google_search=types.GoogleSearch())]
    raise ValueError(f"grounding must be one of {GROUNDING_TOOLS}, got '{grounding}'")


class GeminiClient:
    """Async wrapper for the Google Gemini API with logging."""

    def __init__(
        self,
        api_key: Optional[str] = None,
        timeout: Optional[int] = None,
    ):
        """
        Initialise Gemini client.

        Args:
            api_key: Gemini API key (defaults to settings.GEMINI_KEY).
            timeout: Request timeout in seconds.
        """

        self.api_key = api_key or settings.GEMINI_KEY
        self.timeout = timeout if timeout is not None else settings.GEMINI_TIMEOUT

        if not self.api_key:
            raise ValueError("Gemini API key required — set GEMINI_KEY in .env")

        self.client = genai.Client(api_key=self.api_key)

    async def generate_content(
        self,
        model: str,
        prompt: str,
        response_format: Optional[str] = None,
        grounding: Optional[str] = None,
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
        request_id: Optional[str] = None,
    ) -> str:
        """
        Generate text content via Gemini API.

        Args:
            model: Model identifier.
            prompt: The user prompt text.
            response_format: ``"json"`` to request JSON-only output.
            grounding: ``"places"`` (Google Maps) or ``"search"`` (Google Search).
            temperature: Sampling temperature (0-2).
            max_tokens: Maximum output tokens.
            request_id: ID for log correlation.

        Returns:
            Generated text, or ``""`` when the model returned nothing.

        Raises:
            ExternalAPIError: If the API call fails or times out.
        """
        if response_format is not None and response_format not in RESPONSE_FORMATS:
            raise ValueError(
                f"response_format must be one of {RESPONSE_FORMATS}, got '{response_format}'"
            )

        temp = temperature if temperature is not None else settings.GEMINI_TEMPERATURE
        tokens = max_tokens or settings.GEMINI_MAX_TOKENS

        generation_config = types.GenerateContentConfig(
            temperature=temp,
            max_output_tokens=tokens,
        )
        if response_format == "json":
            generation_config.response_mime_type = "application/json"
        tools = _build_tools(grounding)
        if tools:
            generation_config.tools = tools

        logger.debug(
            "Calling Gemini API",
            extra={
                "request_id": request_id,
                "model": model,
                "prompt_length": len(prompt),
                "response_format": response_format,
                "grounding": grounding,
            },
        )

        try:
            loop = asyncio.get_running_loop()
            response = await asyncio.wait_for(
                loop.run_in_executor(
                    None,
                    lambda: self.client.models.generate_content(
                        model=model,
                        contents=prompt,
                        config=generation_config,
                    ),
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                "Gemini API timeout after %ds",
                self.timeout,
                extra={"request_id": request_id, "model": model},
            )
            raise ExternalAPIError(
                service="Gemini", error=f"timeout after {self.timeout}s"
            )
        except Exception as exc:
            logger.warning(
                "Gemini API error",
                extra={
                    "request_id": request_id,
                    "model": model,
                    "error": str(exc),
                    "error_type": type(exc).__name__,
                },
            )
            raise ExternalAPIError(service="Gemini", error=str(exc)) from exc

        if grounding:
            self._log_grounding_metadata(response, request_id)

        result_text = response.text or ""
        logger.info(
            "Gemini API success",
            extra={
                "request_id": request_id,
                "response_length": len(result_text),
                "model": model,
            },
        )
        return result_text

    async def chat(
        self,
        model: str,
        history: List[Dict[str, str]],
        message: str,
        grounding: Optional[str] = "search",
    ) -> str:
        """
        Send ``message`` on top of a conversation history.

        Args:
            model: Model identifier.
            history: Ordered ``{"role": "user"|"model", "text": ...}`` dicts.
            message: The new user message.
            grounding: Optional grounding tool for real-time place info.

        Returns:
            The model's reply text (may be empty).
        """
        contents = [
            types.Content(role=turn["role"], parts=[types.Part(text=turn["text"])])
            for turn in history
        ]
        config = types.GenerateContentConfig(tools=_build_tools(grounding))

        def _send() -> str:
            chat = self.client.chats.create(model=model, history=contents, config=config)
            return chat.send_message(message).text or ""

        try:
            loop = asyncio.get_running_loop()
            return await asyncio.wait_for(
                loop.run_in_executor(None, _send), timeout=self.timeout
            )
        except asyncio.TimeoutError:
            raise ExternalAPIError(
                service="Gemini", error=f"timeout after {self.timeout}s"
            )
        except Exception as exc:
            raise ExternalAPIError(service="Gemini", error=str(exc)) from exc

    @staticmethod
    def _log_grounding_metadata(response, request_id: Optional[str]) -> None:
        candidates = getattr(response, "candidates", None) or []
        metadata = getattr(candidates[0], "grounding_metadata", None) if candidates else None
        if metadata is None:
            return
        logger.info(
            "Grounding metadata",
            extra={
                "request_id": request_id,
                "chunks": len(metadata.grounding_chunks or []),
                "supports": len(metadata.grounding_supports or []),
                "has_widget": bool(
                    getattr(metadata, "google_maps_widget_context_token", None)
                ),
            },
        )
