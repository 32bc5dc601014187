"""
Groq chat client (OpenAI-compatible API).

Backs the trip assistant when no Gemini key is configured.  Groq has no
grounding tools, so answers come from the model's own knowledge.
"""
import logging
from typing import Dict, List, Optional

from groq import Groq

from clients.gemini_client import ExternalAPIError
from config.settings import settings

logger = logging.getLogger(__name__)


class GroqClient:
    """Synchronous Groq wrapper; callers run it in an executor."""

    def __init__(self, api_key: Optional[str] = None, timeout: Optional[int] = None):
        """
        Args:
            api_key: Defaults to settings.GROQ_API_KEY.
            timeout: Seconds; defaults to settings.GROQ_TIMEOUT.
        """
        self.api_key = api_key or settings.GROQ_API_KEY
        self.model = settings.GROQ_MODEL
        self.timeout = timeout if timeout is not None else settings.GROQ_TIMEOUT

        if not self.api_key:
            raise ValueError("Groq API key required — set GROQ_API_KEY in .env")

        self.client = Groq(api_key=self.api_key, timeout=self.timeout)
        logger.info("GroqClient ready", extra={"model": self.model})

    def chat_with_history(
        self,
        messages: List[Dict[str, str]],
        temperature: Optional[float] = None,
        max_tokens: Optional[int] = None,
    ) -> str:
        """
        Return the assistant's next turn for an OpenAI-style message list.

        Raises:
            ExternalAPIError: On any SDK failure.
        """
        try:
            completion = self.client.chat.completions.create(
                model=self.model,
                messages=messages,
                temperature=settings.GROQ_TEMPERATURE if temperature is None else temperature,
                max_tokens=max_tokens or settings.GROQ_MAX_TOKENS,
            )
        except Exception as exc:
            logger.warning(
                "Groq API error",
                extra={"model": self.model, "turns": len(messages), "error": str(exc)},
            )
            raise ExternalAPIError(service="Groq", error=str(exc)) from exc

        usage = getattr(completion, "usage", None)
        if usage is not None:
            logger.debug(
                "Groq usage",
                extra={
                    "prompt_tokens": usage.prompt_tokens,
                    "completion_tokens": usage.completion_tokens,
                },
            )
        return completion.choices[0].message.content or ""
