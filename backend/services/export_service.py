"""
Export helpers: shareable plain text, a printable HTML page, iCalendar
(.ics) files and Google Calendar links for a generated itinerary.

Display times ("9:00 AM", "14:00") are parsed here and nowhere else; an
unparseable time falls back to 09:00.  Every stop becomes a 2-hour event
in floating local time on the trip date.
"""

import re
from datetime import date, datetime, timedelta, timezone
from html import escape
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import urlencode

from icalendar import Calendar, Event

from models.itinerary import ItineraryStep

DEFAULT_TIME = (9, 0)
EVENT_DURATION = timedelta(hours=2)
RULE = "─" * 30

_TIME_RE = re.compile(r"(\d{1,2}):?(\d{2})?\s*(AM|PM)?", re.IGNORECASE)


def parse_display_time(time_str: str) -> Tuple[int, int]:
    """Parse a free-form display time into (hour, minute)."""
    match = _TIME_RE.search(time_str or "")
    if not match:
        return DEFAULT_TIME

    hour = int(match.group(1))
    minute = int(match.group(2) or 0)
    meridiem = (match.group(3) or "").upper()
    if meridiem == "PM" and hour != 12:
        hour += 12
    elif meridiem == "AM" and hour == 12:
        hour = 0

    if hour > 23 or minute > 59:
        return DEFAULT_TIME
    return hour, minute


def _event_window(step: ItineraryStep, trip_date: date) -> Tuple[datetime, datetime]:
    hour, minute = parse_display_time(step.time)
    start = datetime(trip_date.year, trip_date.month, trip_date.day, hour, minute)
    return start, start + EVENT_DURATION


def _calendar_stamp(moment: datetime) -> str:
    return moment.strftime("%Y%m%dT%H%M%S")


# ---------------------------------------------------------------------------
# Share text
# ---------------------------------------------------------------------------


def share_text(
    city: str,
    basecamp: str,
    steps: List[ItineraryStep],
    checklist: Optional[List[Dict[str, Any]]] = None,
) -> str:
    """Plain-text version of the trip for messaging apps."""
    lines = [f"✈️ {city} Trip Itinerary", f"🏨 Base Camp: {basecamp}", RULE, ""]

    for index, stop in enumerate(steps, 1):
        lines.append(f"{index}. {stop.time} - {stop.title}")
        lines.append(f"   {stop.description}")
        lines.append(f"   📍 {stop.address}")
        if stop.stops:
            lines.append(f"   Nearby: {', '.join(stop.stops)}")
        if stop.notes:
            lines.append(f"   📝 Notes: {stop.notes}")
        lines.append("")

    if checklist:
        lines.append(RULE)
        lines.append("✅ Checklist:")
        for item in checklist:
            box = "☑️" if item.get("done") else "☐"
            lines.append(f"{box} {item.get('text', '')}")
        lines.append("")

    lines.append(RULE)
    lines.append("Generated with AI Trip Planner")
    return "\n".join(lines)


# ---------------------------------------------------------------------------
# Printable page
# ---------------------------------------------------------------------------

_PRINT_CSS = """\
* { margin: 0; padding: 0; box-sizing: border-box; }
body { font-family: -apple-system, BlinkMacSystemFont, 'Segoe UI', Roboto, sans-serif; padding: 40px; max-width: 800px; margin: 0 auto; color: #1e293b; }
h1 { font-size: 28px; margin-bottom: 8px; color: #0f172a; }
.subtitle { color: #64748b; margin-bottom: 24px; font-size: 14px; }
.basecamp { background: #f1f5f9; padding: 12px 16px; border-radius: 8px; margin-bottom: 32px; }
.basecamp-label { font-size: 10px; text-transform: uppercase; letter-spacing: 1px; color: #64748b; }
.basecamp-name { font-weight: 600; font-size: 16px; }
.stop { margin-bottom: 24px; page-break-inside: avoid; }
.stop-header { display: flex; align-items: center; gap: 12px; margin-bottom: 8px; }
.stop-number { width: 32px; height: 32px; background: #3b82f6; color: white; border-radius: 50%; display: flex; align-items: center; justify-content: center; font-weight: 700; font-size: 14px; }
.stop-time { background: #e0e7ff; color: #4338ca; padding: 4px 8px; border-radius: 4px; font-size: 12px; font-weight: 600; }
.stop-title { font-size: 18px; font-weight: 600; margin-bottom: 4px; }
.stop-desc { color: #475569; font-size: 14px; margin-bottom: 8px; line-height: 1.5; }
.stop-address { font-size: 12px; color: #64748b; background: #f8fafc; padding: 8px; border-radius: 4px; margin-bottom: 8px; }
.stop-nearby { font-size: 12px; color: #64748b; }
.stop-notes { font-size: 12px; color: #7c3aed; background: #f5f3ff; padding: 8px; border-radius: 4px; margin-top: 8px; }
.checklist { margin-top: 32px; padding-top: 24px; border-top: 2px solid #e2e8f0; }
.checklist h2 { font-size: 16px; margin-bottom: 12px; }
.checklist-item { display: flex; align-items: center; gap: 8px; padding: 6px 0; font-size: 14px; }
.checkbox { width: 16px; height: 16px; border: 2px solid #cbd5e1; border-radius: 4px; }
.checkbox.checked { background: #3b82f6; border-color: #3b82f6; }
.footer { margin-top: 40px; padding-top: 16px; border-top: 1px solid #e2e8f0; font-size: 11px; color: #94a3b8; text-align: center; }
@media print { body { padding: 20px; } }"""


def _stop_html(index: int, stop: ItineraryStep) -> str:
    parts = [
        '<div class="stop">',
        '<div class="stop-header">'
        f'<div class="stop-number">{index}</div>'
        f'<span class="stop-time">{escape(stop.time)}</span>'
        "</div>",
        f'<h3 class="stop-title">{escape(stop.title)}</h3>',
        f'<p class="stop-desc">{escape(stop.description)}</p>',
        f'<div class="stop-address">📍 {escape(stop.address)}</div>',
    ]
    if stop.stops:
        nearby = escape(", ".join(stop.stops))
        parts.append(f'<div class="stop-nearby"><strong>Nearby:</strong> {nearby}</div>')
    if stop.notes:
        parts.append(f'<div class="stop-notes">📝 {escape(stop.notes)}</div>')
    parts.append("</div>")
    return "\n".join(parts)


def pdf_html(
    city: str,
    basecamp: str,
    steps: List[ItineraryStep],
    checklist: Optional[List[Dict[str, Any]]] = None,
    generated_on: Optional[date] = None,
) -> str:
    """Standalone HTML page laid out for the browser's print-to-PDF dialog."""
    generated_on = generated_on or date.today()
    body = [
        f"<h1>✈️ {escape(city)} Trip</h1>",
        '<p class="subtitle">AI-Generated Itinerary</p>',
        '<div class="basecamp">',
        '<div class="basecamp-label">Base Camp</div>',
        f'<div class="basecamp-name">🏨 {escape(basecamp)}</div>',
        "</div>",
    ]
    body.extend(_stop_html(index, stop) for index, stop in enumerate(steps, 1))

    if checklist:
        body.append('<div class="checklist">')
        body.append("<h2>✅ Travel Checklist</h2>")
        for item in checklist:
            checked = " checked" if item.get("done") else ""
            body.append(
                '<div class="checklist-item">'
                f'<div class="checkbox{checked}"></div>'
                f"<span>{escape(item.get('text', ''))}</span>"
                "</div>"
            )
        body.append("</div>")

    body.append(
        f'<div class="footer">Generated with AI Trip Planner • {generated_on.isoformat()}</div>'
    )

    return (
        "<!DOCTYPE html>\n"
        "<html>\n<head>\n"
        '<meta charset="UTF-8">\n'
        f"<title>{escape(city)} Trip Itinerary</title>\n"
        f"<style>\n{_PRINT_CSS}\n</style>\n"
        "</head>\n<body>\n"
        + "\n".join(body)
        + "\n</body>\n</html>\n"
    )


# ---------------------------------------------------------------------------
# Calendar
# ---------------------------------------------------------------------------


def ics_calendar(city: str, steps: List[ItineraryStep], trip_date: date) -> bytes:
    """Build an iCalendar document with one event per stop."""
    cal = Calendar()
    cal.add("prodid", "-//AI Trip Planner//EN")
    cal.add("version", "2.0")
    cal.add("calscale", "GREGORIAN")
    cal.add("method", "PUBLISH")
    cal.add("x-wr-calname", f"{city} Trip")

    stamp = datetime.now(timezone.utc)
    for step in steps:
        start, end = _event_window(step, trip_date)
        event = Event()
        event.add("uid", f"{trip_date.isoformat()}-{step.id}@ai-trip-planner")
        event.add("dtstamp", stamp)
        event.add("dtstart", start)
        event.add("dtend", end)
        event.add("summary", step.title)
        event.add("description", step.description)
        event.add("location", step.address)
        cal.add_component(event)

    return cal.to_ical()


def ics_filename(city: str) -> str:
    return re.sub(r"\s+", "-", city.strip().lower()) + "-trip.ics"


def google_calendar_link(step: ItineraryStep, trip_date: date, city: str) -> str:
    """Pre-filled Google Calendar "create event" URL for one stop."""
    start, end = _event_window(step, trip_date)
    params = {
        "action": "TEMPLATE",
        "text": f"{step.title} - {city} Trip",
        "dates": f"{_calendar_stamp(start)}/{_calendar_stamp(end)}",
        "details": f"{step.description}\n\nAddress: {step.address}",
        "location": step.address,
    }
    return f"https://calendar.google.com/calendar/render?{urlencode(params)}"
