"""
Basecamp Trip Planner — FastAPI application.

Generates one-day itineraries with Gemini, answers follow-up questions
about the trip, and serves destination info and export helpers under
``/api/*``.

Run:
    python backend/app.py          # starts uvicorn with reload
    uvicorn app:app --reload       # (from the backend/ directory)

Auto-generated API docs:
    http://localhost:8000/docs      (Swagger UI)
    http://localhost:8000/redoc     (ReDoc)
"""

from __future__ import annotations

import logging
import os
import sys
from contextlib import asynccontextmanager
from datetime import date
from typing import Optional

# ---------------------------------------------------------------------------
# Path setup: allow short imports like ``from config.settings import …``
# ---------------------------------------------------------------------------
sys.path.insert(0, os.path.dirname(__file__))

from fastapi import FastAPI, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import HTMLResponse, JSONResponse, Response

from clients.gemini_client import ExternalAPIError
from config.settings import settings, redact_api_key
from models.itinerary import itinerary_to_list
from services.itinerary_service import (
    ItineraryService,
    ItineraryGenerationError,
    RequestError,
)
from services.chat_service import ChatService
from services.currency_service import format_currency
from services.trip_info_service import TripInfoService
from services.export_service import (
    google_calendar_link,
    ics_calendar,
    ics_filename,
    pdf_html,
    share_text,
)
from utils.deeplinks import navigation_links
from utils.id_generator import generate_request_id
from schemas.api_models import (
    GenerateRequest,
    GenerateResponse,
    ChatRequest,
    ChatResponse,
    CurrencyConversionResponse,
    ErrorResponse,
    ExportRequest,
    HealthResponse,
    LinksRequest,
    LinksResponse,
    ShareResponse,
    StepLinks,
    TripInfoResponse,
)

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Module-level service instances (set during lifespan startup)
# ---------------------------------------------------------------------------
itinerary_service: Optional[ItineraryService] = None
chat_service: Optional[ChatService] = None
trip_info_service: Optional[TripInfoService] = None


def configure_logging() -> None:
    """Apply settings.LOG_LEVEL to the root logger."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


def _error(status_code: int, message: str) -> JSONResponse:
    return JSONResponse(
        status_code=status_code,
        content={"success": False, "error": message},
    )


# ---------------------------------------------------------------------------
# Lifespan: initialise / tear down services
# ---------------------------------------------------------------------------
@asynccontextmanager
async def lifespan(_app: FastAPI):
    """Initialise services on startup; clean up on shutdown."""
    global itinerary_service, chat_service, trip_info_service

    configure_logging()

    if settings.GEMINI_KEY:
        print(f"🔑 Gemini key loaded ({redact_api_key(settings.GEMINI_KEY)})")
    else:
        print("⚠️  GEMINI_KEY not set — /api/generate will return 500")

    try:
        itinerary_service = ItineraryService()
        print(f"✅ Itinerary Service initialized ({itinerary_service.strategy})")
    except Exception as exc:
        print(f"❌ Failed to initialize Itinerary Service: {exc}")

    try:
        chat_service = ChatService()
        print("✅ Chat Service initialized successfully")
    except Exception as exc:
        print(f"⚠️  Chat Service init failed (generation still available): {exc}")

    trip_info_service = TripInfoService()

    yield  # ── application runs here ──

    logger.info("Shutting down Basecamp Trip Planner")


# ---------------------------------------------------------------------------
# App creation
# ---------------------------------------------------------------------------
app = FastAPI(
    title="Basecamp Trip Planner",
    version="0.1.0",
    description="AI-generated one-day itineraries anchored on where you stay.",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# ---------------------------------------------------------------------------
# Global exception handlers
# ---------------------------------------------------------------------------
@app.exception_handler(RequestValidationError)
async def _request_validation_error(request: Request, exc: RequestValidationError):
    logger.info("Rejected request body", extra={"errors": exc.errors()})
    return _error(400, "Invalid request")


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------

# ── Health check ────────────────────────────────────────────────

@app.get("/api/health", response_model=HealthResponse, tags=["system"])
async def health_check():
    """Return service health and model configuration."""
    return HealthResponse(
        status="healthy",
        service="Basecamp Trip Planner",
        strategy=settings.GENERATION_STRATEGY,
        grounding_model=settings.GEMINI_GROUNDING_MODEL,
        json_model=settings.GEMINI_JSON_MODEL,
        gemini_configured=bool(settings.GEMINI_KEY),
        photos_configured=bool(settings.PEXELS_API_KEY),
    )


# ── Generate itinerary ─────────────────────────────────────────

@app.post(
    "/api/generate",
    response_model=GenerateResponse,
    response_model_exclude_none=True,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
    tags=["itinerary"],
)
async def generate_itinerary_endpoint(body: GenerateRequest):
    """
    Generate a 4-stop, one-day itinerary around the traveller's basecamp.

    Failures never expose model output or schema details; those are
    logged under the request id.
    """
    if not itinerary_service:
        return _error(500, "Itinerary service not initialized")

    request_id = generate_request_id()
    try:
        steps = await itinerary_service.generate_itinerary(
            city=body.city,
            basecamp=body.basecamp,
            style=body.style,
            custom_style=body.customStyle,
            request_id=request_id,
        )
    except RequestError as exc:
        return _error(400, exc.reason)
    except ItineraryGenerationError as exc:
        return _error(500, exc.reason)
    except Exception:
        logger.error(
            "Itinerary generation crashed",
            extra={"request_id": request_id},
            exc_info=True,
        )
        return _error(500, "Failed to generate itinerary")

    return GenerateResponse(success=True, data=itinerary_to_list(steps))


# ── Trip assistant ─────────────────────────────────────────────

@app.post(
    "/api/chat",
    response_model=ChatResponse,
    response_model_exclude_none=True,
    tags=["chat"],
)
async def chat(body: ChatRequest):
    """Answer a question about the destination or the current itinerary."""
    if not body.city or not body.message:
        return _error(400, "Missing required fields")
    if not chat_service:
        return _error(500, "API key not configured")

    itinerary = [step.to_step() for step in body.itinerary] if body.itinerary else None
    try:
        reply = await chat_service.reply(
            city=body.city,
            basecamp=body.basecamp,
            message=body.message,
            history=[turn.model_dump() for turn in body.history],
            itinerary=itinerary,
        )
    except Exception:
        logger.error("Chat turn failed", exc_info=True)
        return _error(500, "Failed to get response")

    return ChatResponse(success=True, message=reply)


# ── Destination info ───────────────────────────────────────────

@app.get(
    "/api/trip-info",
    response_model=TripInfoResponse,
    tags=["destination"],
)
async def trip_info(city: str = Query(..., min_length=1)):
    """Weather, currency and emergency numbers for a destination city."""
    if not trip_info_service:
        return _error(500, "Trip info service not initialized")

    try:
        info = await trip_info_service.get_trip_info(city)
    except ValueError as exc:
        return _error(400, str(exc))
    return TripInfoResponse(success=True, **info)


@app.get(
    "/api/currency/convert",
    response_model=CurrencyConversionResponse,
    tags=["destination"],
)
def convert_currency(
    amount: float = Query(..., ge=0, allow_inf_nan=False),
    from_code: str = Query(..., alias="from", min_length=3, max_length=3),
    to_code: str = Query(..., alias="to", min_length=3, max_length=3),
):
    """Convert an amount between currencies using the cached USD rates."""
    if not trip_info_service:
        return _error(500, "Trip info service not initialized")

    from_code, to_code = from_code.upper(), to_code.upper()
    try:
        result = trip_info_service.currency_service.convert(amount, from_code, to_code)
    except ValueError as exc:
        return _error(400, str(exc))
    except ExternalAPIError:
        logger.error("Currency conversion failed", exc_info=True)
        return _error(500, "Exchange rates unavailable")

    return CurrencyConversionResponse(
        success=True,
        amount=amount,
        fromCurrency=from_code,
        toCurrency=to_code,
        result=result,
        formatted=format_currency(result, to_code),
    )


# ── Export ─────────────────────────────────────────────────────

@app.post(
    "/api/export/share",
    response_model=ShareResponse,
    response_model_exclude_none=True,
    tags=["export"],
)
async def export_share(body: ExportRequest):
    """Plain-text itinerary for copy/paste or native sharing."""
    steps = [step.to_step() for step in body.itinerary]
    checklist = [item.model_dump() for item in body.checklist] if body.checklist else None
    return ShareResponse(
        success=True,
        text=share_text(body.city, body.basecamp, steps, checklist),
    )


@app.post("/api/export/ics", tags=["export"])
async def export_ics(body: ExportRequest):
    """Download the itinerary as an iCalendar file."""
    steps = [step.to_step() for step in body.itinerary]
    content = ics_calendar(body.city, steps, body.trip_date or date.today())
    return Response(
        content=content,
        media_type="text/calendar; charset=utf-8",
        headers={
            "Content-Disposition": f'attachment; filename="{ics_filename(body.city)}"',
        },
    )


@app.post("/api/export/html", response_class=HTMLResponse, tags=["export"])
async def export_html(body: ExportRequest):
    """Printable itinerary page; the browser's print dialog saves it as PDF."""
    steps = [step.to_step() for step in body.itinerary]
    checklist = [item.model_dump() for item in body.checklist] if body.checklist else None
    return HTMLResponse(content=pdf_html(body.city, body.basecamp, steps, checklist))


@app.post("/api/links", response_model=LinksResponse, tags=["export"])
async def links(body: LinksRequest):
    """Navigation deep links and a calendar link for every stop."""
    trip_date = body.trip_date or date.today()
    result = []
    for model in body.itinerary:
        step = model.to_step()
        result.append(
            StepLinks(
                id=step.id,
                navigation=navigation_links(step),
                calendar=google_calendar_link(step, trip_date, body.city),
            )
        )
    return LinksResponse(success=True, links=result)


# ---------------------------------------------------------------------------
# Startup
# ---------------------------------------------------------------------------
if __name__ == "__main__":
    import uvicorn

    errors = settings.validate()
    if errors:
        for err in errors:
            print(f"❌ Configuration error: {err}")
        print("\n📝 Setup Instructions:")
        print("1. Copy backend/.env.example to backend/.env")
        print("2. Add your Gemini API key from https://aistudio.google.com/apikey")
        print("3. (Optional) Add a Pexels API key from https://www.pexels.com/api/")
        print("4. Run the server again")
        sys.exit(1)

    print(f"✅ Settings validated")
    print(f"🌐 Starting server on http://{settings.HOST}:{settings.PORT}")
    print(f"📖 API docs at http://{settings.HOST}:{settings.PORT}/docs")

    uvicorn.run(
        "app:app",
        host=settings.HOST,
        port=settings.PORT,
        reload=settings.DEBUG,
    )
