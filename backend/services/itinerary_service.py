"""
Itinerary generation pipeline.

Takes a destination, a basecamp and a trip style, asks Gemini for a
short itinerary, pulls the JSON out of the response, validates it into
``ItineraryStep`` objects and finally attaches photos.

Two model-call strategies are supported (``settings.GENERATION_STRATEGY``):

    two_stage     stage 1: grounded recommendations (Google Maps tool)
                  stage 2: JSON conversion with a cheaper model
    single_stage  one JSON-only call

Every stage except photo enrichment can fail the request; nothing is
retried here and no partial itinerary is ever returned.

Usage:
    from services.itinerary_service import ItineraryService

    service = ItineraryService()
    steps = await service.generate_itinerary("Tokyo", "Park Hyatt Tokyo", "food")
"""

import enum
import json
import logging
from typing import Any, Dict, List, Optional

from clients.gemini_client import GeminiClient, ExternalAPIError
from config.settings import settings
from models.itinerary import ItineraryStep
from services import prompt_builder
from services.image_service import ImageService
from services.itinerary_validator import (
    ItinerarySchemaError,
    check_itinerary_expectations,
    validate_itinerary,
)
from utils.id_generator import generate_request_id
from utils.json_extraction import extract_json_array, strip_code_fences

logger = logging.getLogger(__name__)

EXCERPT_LENGTH = 500


# ---------------------------------------------------------------------------
# Errors
# ---------------------------------------------------------------------------


class ItineraryGenerationError(Exception):
    """
    Base class for fatal pipeline failures.

    ``reason`` is the short message shown to the user; ``details`` holds
    diagnostics for the logs only.
    """

    kind = "generation"

    def __init__(self, reason: str, details: Optional[Dict[str, Any]] = None):
        self.reason = reason
        self.details = details or {}
        super().__init__(f"Itinerary generation failed: {reason}")


class ConfigurationError(ItineraryGenerationError):
    """Required credentials or configuration are missing."""

    kind = "configuration"


class RequestError(ItineraryGenerationError):
    """The caller's trip parameters are missing or invalid."""

    kind = "request"


class ModelInvocationError(ItineraryGenerationError):
    """A model call failed or returned empty text."""

    kind = "model"

    def __init__(self, stage: str, error: str):
        self.stage = stage
        super().__init__(
            "Failed to generate itinerary",
            {"stage": stage, "error": error},
        )


class ItineraryParseError(ItineraryGenerationError):
    """No JSON could be recovered from the model response."""

    kind = "parse"

    def __init__(self, excerpt: str, error: str):
        self.excerpt = excerpt
        super().__init__(
            "Failed to parse itinerary",
            {"excerpt": excerpt, "error": error},
        )


class ItineraryValidationError(ItineraryGenerationError):
    """Parsed JSON did not match the itinerary schema."""

    kind = "validation"

    def __init__(self, violations: List[tuple]):
        self.violations = violations
        super().__init__(
            "Generated itinerary was invalid",
            {"violations": [f"{path}: {reason}" for path, reason in violations]},
        )


class GenerationStage(str, enum.Enum):
    """Per-request pipeline state."""

    IDLE = "idle"
    PROMPTING = "prompting"
    AWAITING_GROUNDING = "awaiting_grounding"
    AWAITING_JSON = "awaiting_json"
    PARSING = "parsing"
    VALIDATING = "validating"
    ENRICHING = "enriching"
    DONE = "done"
    FAILED = "failed"


# ---------------------------------------------------------------------------
# Request checks and parsing
# ---------------------------------------------------------------------------


def validate_trip_request(
    city: Optional[str],
    basecamp: Optional[str],
    style: Optional[str],
    custom_style: Optional[str] = None,
) -> None:
    """Raise RequestError for missing or invalid trip parameters."""
    if not city or not basecamp or not style:
        raise RequestError("Missing required fields")
    if style not in settings.TRIP_STYLES:
        raise RequestError(
            f"Invalid style '{style}'. Must be one of: {', '.join(settings.TRIP_STYLES)}"
        )
    if style == settings.CUSTOM_STYLE and not (custom_style or "").strip():
        raise RequestError("Custom style description is required")


def parse_model_response(text: str, request_id: Optional[str] = None) -> Any:
    """
    Strip code fences and parse the JSON in a model response.

    Falls back to extracting the first balanced JSON array when the
    cleaned text is not valid JSON as a whole.

    Raises:
        ItineraryParseError: If neither attempt yields valid JSON.
    """
    cleaned = strip_code_fences(text)

    try:
        return json.loads(cleaned)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.debug(
            "Direct JSON parse failed, trying array extraction",
            extra={"request_id": request_id, "error": str(exc)},
        )

    extracted = extract_json_array(cleaned)
    if extracted is None:
        logger.error(
            "Could not extract JSON array from response",
            extra={"request_id": request_id, "preview": cleaned[:EXCERPT_LENGTH]},
        )
        raise ItineraryParseError(
            excerpt=cleaned[:EXCERPT_LENGTH], error="no balanced JSON array found"
        )

    try:
        return json.loads(extracted)
    except (json.JSONDecodeError, RecursionError) as exc:
        logger.error(
            "JSON parse error after extraction",
            extra={
                "request_id": request_id,
                "error": str(exc),
                "preview": extracted[:EXCERPT_LENGTH],
            },
        )
        raise ItineraryParseError(excerpt=extracted[:EXCERPT_LENGTH], error=str(exc))


# ---------------------------------------------------------------------------
# Service
# ---------------------------------------------------------------------------


class ItineraryService:
    """Generates one-day itineraries via Gemini."""

    def __init__(
        self,
        gemini_client: Optional[GeminiClient] = None,
        image_service: Optional[ImageService] = None,
        strategy: Optional[str] = None,
    ):
        """
        Args:
            gemini_client: Injected client (useful for testing).
                           Created on first use if omitted.
            image_service: Photo enrichment; created automatically if omitted.
            strategy: ``"two_stage"`` or ``"single_stage"``
                      (defaults to settings.GENERATION_STRATEGY).
        """
        self.strategy = strategy or settings.GENERATION_STRATEGY
        if self.strategy not in settings.GENERATION_STRATEGIES:
            raise ValueError(
                f"strategy must be one of {settings.GENERATION_STRATEGIES}, "
                f"got '{self.strategy}'"
            )
        self.gemini_client = gemini_client
        self.image_service = image_service or ImageService()

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    async def generate_itinerary(
        self,
        city: str,
        basecamp: str,
        style: str,
        custom_style: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> List[ItineraryStep]:
        """
        Generate a validated, photo-enriched itinerary.

        Returns:
            Ordered list of ItineraryStep.

        Raises:
            RequestError: Invalid trip parameters.
            ConfigurationError: Gemini API key missing.
            ModelInvocationError: A model call failed or returned nothing.
            ItineraryParseError: No JSON could be recovered.
            ItineraryValidationError: JSON did not match the schema.
        """
        request_id = request_id or generate_request_id()
        stage = GenerationStage.IDLE

        try:
            validate_trip_request(city, basecamp, style, custom_style)
            client = self._get_client()

            stage = self._advance(GenerationStage.PROMPTING, request_id)
            style_description = prompt_builder.resolve_style(style, custom_style)
            logger.info(
                "Starting itinerary generation",
                extra={
                    "request_id": request_id,
                    "city": city,
                    "style": style,
                    "strategy": self.strategy,
                },
            )

            if self.strategy == "two_stage":
                stage = self._advance(GenerationStage.AWAITING_GROUNDING, request_id)
                grounded_text = await self._invoke(
                    client,
                    model=settings.GEMINI_GROUNDING_MODEL,
                    prompt=prompt_builder.build_grounding_prompt(
                        city, basecamp, style_description
                    ),
                    stage=stage,
                    request_id=request_id,
                    grounding="places",
                )
                json_prompt = prompt_builder.build_json_conversion_prompt(grounded_text)
            else:
                json_prompt = prompt_builder.build_single_stage_prompt(
                    city, basecamp, style_description
                )

            stage = self._advance(GenerationStage.AWAITING_JSON, request_id)
            response_text = await self._invoke(
                client,
                model=settings.GEMINI_JSON_MODEL,
                prompt=json_prompt,
                stage=stage,
                request_id=request_id,
                response_format="json",
            )

            stage = self._advance(GenerationStage.PARSING, request_id)
            raw_data = parse_model_response(response_text, request_id)

            stage = self._advance(GenerationStage.VALIDATING, request_id)
            steps = self._validate(raw_data, request_id)

        except ItineraryGenerationError as exc:
            self._advance(GenerationStage.FAILED, request_id)
            logger.error(
                "Itinerary generation failed during %s",
                stage.value,
                extra={"request_id": request_id, "kind": exc.kind, **exc.details},
            )
            raise

        self._advance(GenerationStage.ENRICHING, request_id)
        steps = await self._enrich(steps, request_id)

        self._advance(GenerationStage.DONE, request_id)
        logger.info(
            "Itinerary generation complete",
            extra={"request_id": request_id, "stops": len(steps)},
        )
        return steps

    # ------------------------------------------------------------------
    # Stages
    # ------------------------------------------------------------------

    @staticmethod
    def _advance(stage: GenerationStage, request_id: str) -> GenerationStage:
        logger.debug("Pipeline stage → %s", stage.value, extra={"request_id": request_id})
        return stage

    def _get_client(self) -> GeminiClient:
        if self.gemini_client is None:
            if not settings.GEMINI_KEY:
                raise ConfigurationError("API key not configured")
            self.gemini_client = GeminiClient()
        return self.gemini_client

    async def _invoke(
        self,
        client: GeminiClient,
        model: str,
        prompt: str,
        stage: GenerationStage,
        request_id: str,
        **options: Any,
    ) -> str:
        """Call the model once; failures and empty responses are fatal."""
        try:
            text = await client.generate_content(
                model=model,
                prompt=prompt,
                request_id=request_id,
                **options,
            )
        except ExternalAPIError as exc:
            raise ModelInvocationError(stage=stage.value, error=str(exc)) from exc

        if not text or not text.strip():
            raise ModelInvocationError(stage=stage.value, error="empty response")
        return text

    @staticmethod
    def _validate(raw_data: Any, request_id: str) -> List[ItineraryStep]:
        try:
            steps = validate_itinerary(raw_data)
        except ItinerarySchemaError as exc:
            logger.error(
                "Validation error",
                extra={
                    "request_id": request_id,
                    "raw_data": json.dumps(raw_data, indent=2)[:1000],
                },
            )
            raise ItineraryValidationError(exc.violations) from exc

        for warning in check_itinerary_expectations(steps):
            logger.warning(warning, extra={"request_id": request_id})
        return steps

    async def _enrich(self, steps: List[ItineraryStep], request_id: str) -> List[ItineraryStep]:
        # Photos are best-effort: never fail a validated itinerary over them
        try:
            return await self.image_service.enrich(steps, request_id)
        except Exception:
            logger.warning(
                "Photo enrichment failed — returning itinerary without photos",
                extra={"request_id": request_id},
                exc_info=True,
            )
            return steps
