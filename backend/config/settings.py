"""
Centralized configuration management for the Basecamp trip planner backend.

Loads environment variables from .env file and provides typed settings
to all backend modules. Includes validation for required configuration.

Usage:
    from config.settings import settings
    api_key = settings.GEMINI_KEY
"""

import os
import logging
from typing import List
from pathlib import Path

from dotenv import load_dotenv

# Load .env from backend directory
_backend_dir = Path(__file__).resolve().parent.parent
load_dotenv(_backend_dir / ".env")

logger = logging.getLogger(__name__)


class Settings:
    """Centralized configuration singleton for all backend services."""

    # ===== FastAPI Configuration =====
    HOST: str = os.getenv("HOST", "127.0.0.1")
    PORT: int = int(os.getenv("PORT", "8000"))
    DEBUG: bool = os.getenv("DEBUG", "True").lower() == "true"

    # ===== Gemini API Configuration (Primary LLM) =====
    GEMINI_KEY: str = os.getenv("GEMINI_KEY", "") or os.getenv("GEMINI_API_KEY", "")
    # Stage 1: grounded place recommendations (Google Maps tool)
    GEMINI_GROUNDING_MODEL: str = os.getenv("GEMINI_GROUNDING_MODEL", "gemini-2.5-flash")
    # Stage 2 / single stage: cheap, fast JSON conversion
    GEMINI_JSON_MODEL: str = os.getenv("GEMINI_JSON_MODEL", "gemini-2.5-flash-lite")
    GEMINI_CHAT_MODEL: str = os.getenv("GEMINI_CHAT_MODEL", "gemini-2.0-flash")
    GEMINI_TEMPERATURE: float = float(os.getenv("GEMINI_TEMPERATURE", "0.7"))
    GEMINI_MAX_TOKENS: int = int(os.getenv("GEMINI_MAX_TOKENS", "8192"))
    GEMINI_TIMEOUT: int = int(os.getenv("GEMINI_TIMEOUT", "60"))

    # "two_stage" (grounded + JSON conversion) or "single_stage" (JSON only)
    GENERATION_STRATEGY: str = os.getenv("GENERATION_STRATEGY", "two_stage")

    # ===== Groq API Configuration (chat fallback) =====
    GROQ_API_KEY: str = os.getenv("GROQ_API_KEY", "")
    GROQ_MODEL: str = os.getenv("GROQ_MODEL", "llama-3.3-70b-versatile")
    GROQ_TEMPERATURE: float = float(os.getenv("GROQ_TEMPERATURE", "0.7"))
    GROQ_MAX_TOKENS: int = int(os.getenv("GROQ_MAX_TOKENS", "2048"))
    GROQ_TIMEOUT: int = int(os.getenv("GROQ_TIMEOUT", "30"))

    # ===== Photo / currency lookups =====
    PEXELS_API_KEY: str = os.getenv("PEXELS_API_KEY", "")
    PEXELS_TIMEOUT: int = int(os.getenv("PEXELS_TIMEOUT", "10"))
    EXCHANGE_RATE_API_URL: str = os.getenv(
        "EXCHANGE_RATE_API_URL", "https://api.exchangerate-api.com/v4/latest/USD"
    )

    # ===== Application Constants =====
    TRIP_STYLES: List[str] = ["culture", "food", "nature", "custom"]
    CUSTOM_STYLE: str = "custom"
    GENERATION_STRATEGIES: List[str] = ["single_stage", "two_stage"]
    STOPS_PER_ITINERARY: int = 4
    DEFAULT_STEP_COLOR: str = "blue"
    STEP_COLORS: List[str] = ["blue", "orange", "purple", "red", "green", "indigo"]

    # ===== Logging =====
    LOG_LEVEL: str = os.getenv("LOG_LEVEL", "INFO")

    @classmethod
    def validate(cls) -> List[str]:
        """Validate required configuration. Returns list of errors (empty = valid)."""
        errors = []

        if not cls.GEMINI_KEY:
            errors.append("GEMINI_KEY is required — set it in backend/.env")

        if cls.GENERATION_STRATEGY not in cls.GENERATION_STRATEGIES:
            errors.append(
                f"GENERATION_STRATEGY must be one of {cls.GENERATION_STRATEGIES}, "
                f"got '{cls.GENERATION_STRATEGY}'"
            )

        if not 0 <= cls.GEMINI_TEMPERATURE <= 2:
            errors.append(
                f"GEMINI_TEMPERATURE must be 0-2, got {cls.GEMINI_TEMPERATURE}"
            )

        if not 1 <= cls.PORT <= 65535:
            errors.append(f"PORT must be 1-65535, got {cls.PORT}")

        return errors


def redact_api_key(key: str) -> str:
    """Redact API key to show only last 4 characters."""
    if not key or len(key) < 8:
        return "***INVALID***"
    return f"***...{key[-4:]}"


# Singleton instance, import this everywhere
settings = Settings()
