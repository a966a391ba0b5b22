"""
Printable trip itinerary: cover page, day-by-day plan, accommodations,
transportation and (optionally) emergency contacts.
"""
from exporters.pdf_common import (
    PAGE_HEIGHT,
    PRIMARY_COLOR,
    SUBTITLE_COLOR,
    TEXT_COLOR,
    FOOTER_TEXT,
    TripPDF,
    wrap_text,
)
from utils.formatting import format_clock, format_long_date, plural

PAGE_BREAK_Y = PAGE_HEIGHT - 150


class _Section:
    """Writes a titled run of entries, repeating the title as '(continued)' on new pages."""

    def __init__(self, pdf: TripPDF, title: str):
        self.pdf = pdf
        self.title = title
        self.pdf.add_page()
        self.y = 50
        self.pdf.write_at(50, self.y, title, 24, bold=True, color=PRIMARY_COLOR)
        self.y += 40

    def ensure_room(self):
        if self.y > PAGE_BREAK_Y:
            self.pdf.add_page()
            self.y = 50
            self.pdf.write_at(50, self.y, f"{self.title} (continued)", 18, bold=True, color=PRIMARY_COLOR)
            self.y += 40

    def line(self, x, text, size=10, bold=False, color=TEXT_COLOR, advance=14):
        self.pdf.write_at(x, self.y, text, size, bold=bold, color=color)
        self.y += advance

    def wrapped(self, x, text, max_chars):
        for chunk in wrap_text(text, max_chars):
            self.line(x, chunk)


def _cover_page(pdf: TripPDF, trip: dict):
    pdf.add_page()
    pdf.write_at(50, 100, trip.get("title") or "Trip Itinerary", 32, bold=True, color=PRIMARY_COLOR)
    if trip.get("city"):
        pdf.write_at(50, 140, trip["city"], 20, color=SUBTITLE_COLOR)
    pdf.write_at(50, 170, f"{format_long_date(trip.get('start_date'))} - {format_long_date(trip.get('end_date'))}", 14)
    pdf.rule(190)

    y = 230
    pdf.write_at(50, y, "Trip Summary", 18, bold=True)
    y += 30
    summary = [
        plural(len(trip.get("itinerary") or []), "Itinerary Item"),
        plural(len(trip.get("accommodation") or []), "Accommodation"),
        plural(len(trip.get("transport") or []), "Transport Booking"),
    ]
    for entry in summary:
        pdf.write_at(70, y, f"• {entry}", 12)
        y += 20

    pdf.write_at(50, PAGE_HEIGHT - 50, FOOTER_TEXT, 10, color=SUBTITLE_COLOR)


def _itinerary_pages(pdf: TripPDF, items: list, include_notes: bool):
    section = _Section(pdf, "Day-by-Day Itinerary")
    ordered = sorted(items, key=lambda i: (i.get("date") or i.get("day") or "", i.get("time") or ""))
    for item in ordered:
        section.ensure_room()
        day = item.get("date") or item.get("day")
        section.line(50, format_long_date(day, empty="Unscheduled"), size=14, bold=True, advance=20)
        section.line(70, item.get("title") or "", size=12, bold=True, advance=18)
        if item.get("time"):
            section.line(70, f"Time: {item['time']}", color=SUBTITLE_COLOR, advance=16)
        if item.get("location"):
            section.line(70, f"Location: {item['location']}", color=SUBTITLE_COLOR, advance=16)
        if include_notes and item.get("description"):
            section.wrapped(70, item["description"], 70)
        if item.get("cost"):
            section.line(70, f"Cost: ${float(item['cost']):.2f}", color=SUBTITLE_COLOR, advance=16)
        section.y += 10


def _accommodation_pages(pdf: TripPDF, stays: list, include_notes: bool):
    section = _Section(pdf, "Accommodations")
    for accom in stays:
        section.ensure_room()
        section.line(50, accom.get("name") or "", size=14, bold=True, advance=20)
        if accom.get("address"):
            section.wrapped(70, accom["address"], 65)
        if accom.get("checkIn") or accom.get("checkOut"):
            section.line(
                70,
                f"Check-in: {format_long_date(accom.get('checkIn'))} | "
                f"Check-out: {format_long_date(accom.get('checkOut'))}",
                color=SUBTITLE_COLOR,
                advance=16,
            )
        if include_notes and accom.get("notes"):
            section.wrapped(70, accom["notes"], 65)
        if accom.get("cost"):
            section.line(70, f"Cost: ${float(accom['cost']):.2f}", color=SUBTITLE_COLOR, advance=16)
        section.y += 15


def _transport_pages(pdf: TripPDF, legs: list):
    section = _Section(pdf, "Transportation")
    for leg in legs:
        section.ensure_room()
        heading = leg.get("type") or "Transport"
        if leg.get("number"):
            heading = f"{heading} - {leg['number']}"
        section.line(50, heading, size=14, bold=True, advance=20)
        section.line(70, f"From: {leg.get('from') or ''}")
        section.line(70, f"To: {leg.get('to') or ''}", advance=16)
        section.line(
            70,
            f"Departure: {format_long_date(leg.get('depart'))} {format_clock(leg.get('depart'))}".rstrip(),
            color=SUBTITLE_COLOR,
        )
        section.line(
            70,
            f"Arrival: {format_long_date(leg.get('arrive'))} {format_clock(leg.get('arrive'))}".rstrip(),
            color=SUBTITLE_COLOR,
            advance=16,
        )
        if leg.get("cost"):
            section.line(70, f"Cost: ${float(leg['cost']):.2f}", color=SUBTITLE_COLOR, advance=16)
        section.y += 15


def _emergency_page(pdf: TripPDF, documents: list):
    section = _Section(pdf, "Emergency Contacts")
    for doc in documents:
        section.ensure_room()
        section.line(50, doc.get("title") or "", size=12, bold=True, advance=18)
        content = doc.get("content") or ""
        if isinstance(content, list):
            content = "\n".join(content)
        section.wrapped(70, content, 70)
        section.y += 10


def build_itinerary_pdf(trip: dict, include_emergency_contacts: bool = True, include_notes: bool = True) -> TripPDF:
    pdf = TripPDF()
    pdf.set_title(f"{trip.get('title') or 'Trip'} - Itinerary")
    _cover_page(pdf, trip)

    if trip.get("itinerary"):
        _itinerary_pages(pdf, trip["itinerary"], include_notes)
    if trip.get("accommodation"):
        _accommodation_pages(pdf, trip["accommodation"], include_notes)
    if trip.get("transport"):
        _transport_pages(pdf, trip["transport"])

    if include_emergency_contacts:
        emergency = [d for d in trip.get("documents") or [] if d.get("type") == "emergency"]
        if emergency:
            _emergency_page(pdf, emergency)

    return pdf


def generate_itinerary_pdf(trip: dict, include_emergency_contacts: bool = True, include_notes: bool = True) -> bytes:
    return build_itinerary_pdf(trip, include_emergency_contacts, include_notes).to_bytes()
