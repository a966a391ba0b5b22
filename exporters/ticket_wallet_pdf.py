"""
Ticket wallet: one card per ticket (wallet entries plus transport bookings),
each with a Code128 barcode of its booking reference.
"""
from typing import List, Optional

import barcode
from barcode.errors import BarcodeError
from barcode.writer import ImageWriter
from PIL import Image

from exporters.pdf_common import (
    PAGE_WIDTH,
    PAGE_HEIGHT,
    PRIMARY_COLOR,
    SECONDARY_COLOR,
    SUBTITLE_COLOR,
    FOOTER_TEXT,
    TripPDF,
    wrap_text,
)
from utils.formatting import format_date, format_clock
from utils.logger import get_logger

logger = get_logger(__name__)

BARCODE_WIDTH = 300
BARCODE_HEIGHT = 70


def collect_tickets(trip: dict) -> List[dict]:
    """Wallet tickets followed by transport bookings, in a common card shape."""
    tickets = []
    for ticket in trip.get("wallet") or []:
        tickets.append({
            "type": ticket.get("type") or "Ticket",
            "provider": ticket.get("provider") or "N/A",
            "refNumber": ticket.get("refNumber") or "",
            "departure": ticket.get("departs") or "",
            "arrival": ticket.get("arrives") or "",
            "notes": ticket.get("notes"),
        })
    for leg in trip.get("transport") or []:
        tickets.append({
            "type": leg.get("type") or "Transport",
            "provider": "Transport",
            "refNumber": leg.get("number") or "",
            "departure": leg.get("depart") or "",
            "arrival": leg.get("arrive") or "",
            "from": leg.get("from"),
            "to": leg.get("to"),
            "notes": leg.get("notes"),
        })
    return tickets


def render_barcode(value: str) -> Optional[Image.Image]:
    """Code128 image of `value`, or None when it cannot be encoded."""
    try:
        code128 = barcode.get_barcode_class("code128")
        instance = code128(value, writer=ImageWriter())
        return instance.render({
            "write_text": False,
            "module_width": 0.3,
            "module_height": 15.0,
            "quiet_zone": 2.0,
            "background": "white",
            "foreground": "black",
        })
    except (BarcodeError, ValueError) as e:
        logger.warning("Barcode generation failed for %r: %s", value, e)
        return None


def _when(value) -> str:
    return f"{format_date(value)} {format_clock(value)}".strip() or "N/A"


def _ticket_page(pdf: TripPDF, ticket: dict, trip_title: str):
    pdf.add_page()

    pdf.set_draw_color(*PRIMARY_COLOR)
    pdf.set_line_width(3)
    pdf.set_fill_color(255, 255, 255)
    pdf.rect(40, 50, PAGE_WIDTH - 80, 600, style="DF")

    y = 80
    pdf.write_at(60, y, ticket["type"].upper(), 28, bold=True, color=PRIMARY_COLOR)
    y += 40
    pdf.rule(y, x1=60, color=SECONDARY_COLOR)
    y += 40

    pdf.write_at(60, y, "Provider:", 11, color=SUBTITLE_COLOR)
    pdf.write_at(180, y, ticket["provider"], 14, bold=True)
    y += 35

    pdf.write_at(60, y, "Booking Reference:", 11, color=SUBTITLE_COLOR)
    y += 25
    pdf.write_at(60, y, ticket["refNumber"] or "N/A", 22, bold=True)
    y += 50
    pdf.rule(y, x1=60, thickness=1, color=SECONDARY_COLOR)
    y += 30

    for label, place, when in (
        ("DEPARTURE", ticket.get("from"), ticket["departure"]),
        ("ARRIVAL", ticket.get("to"), ticket["arrival"]),
    ):
        pdf.write_at(60, y, label, 10, bold=True, color=SUBTITLE_COLOR)
        y += 20
        if place:
            pdf.write_at(60, y, place, 16, bold=True)
            y += 22
        pdf.write_at(60, y, _when(when), 12)
        y += 40

    y += 10
    if ticket.get("notes"):
        pdf.write_at(60, y, "Notes:", 10, bold=True, color=SUBTITLE_COLOR)
        y += 18
        for line in wrap_text(ticket["notes"], 60):
            pdf.write_at(60, y, line, 10)
            y += 14

    if ticket["refNumber"]:
        image = render_barcode(ticket["refNumber"])
        if image is not None:
            x = (PAGE_WIDTH - BARCODE_WIDTH) / 2
            pdf.image(image, x=x, y=520, w=BARCODE_WIDTH, h=BARCODE_HEIGHT)
            pdf.write_at(PAGE_WIDTH / 2 - 70, 610, "Scan for booking reference", 9, color=SUBTITLE_COLOR)

    pdf.write_at(60, PAGE_HEIGHT - 60, "Keep this ticket accessible during your journey", 9, color=SUBTITLE_COLOR)
    pdf.write_at(60, PAGE_HEIGHT - 45, f"{trip_title} | {FOOTER_TEXT}", 9, color=SUBTITLE_COLOR)


def build_ticket_wallet_pdf(trip: dict) -> TripPDF:
    pdf = TripPDF()
    title = trip.get("title") or "Trip"
    pdf.set_title(f"{title} - Ticket Wallet")

    tickets = collect_tickets(trip)
    if not tickets:
        pdf.add_page()
        pdf.write_at(50, 100, "No Tickets Available", 24, bold=True, color=PRIMARY_COLOR)
        pdf.write_at(50, 140, "Add tickets or transport bookings to generate your ticket wallet.", 12,
                     color=SUBTITLE_COLOR)
        return pdf

    for ticket in tickets:
        _ticket_page(pdf, ticket, title)
    return pdf


def generate_ticket_wallet_pdf(trip: dict) -> bytes:
    return build_ticket_wallet_pdf(trip).to_bytes()
