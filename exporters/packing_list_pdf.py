from collections import defaultdict

from exporters.pdf_common import (
    PAGE_HEIGHT,
    PAGE_WIDTH,
    PRIMARY_COLOR,
    SUBTITLE_COLOR,
    FOOTER_TEXT,
    TripPDF,
)
from utils.formatting import format_long_date

PACKING_TIPS = (
    "Roll clothes instead of folding to save space",
    "Pack heavier items at the bottom of your luggage",
    "Use packing cubes to organize items by category",
    "Keep essential items and valuables in your carry-on",
    "Check airline baggage restrictions before packing",
    "Pack a change of clothes in your carry-on",
    "Leave some space for souvenirs and purchases",
    "Keep medications in original containers",
    "Pack chargers and adapters in an easy-to-access pocket",
    "Make copies of important documents",
)

CHECKBOX_SIZE = 12


class PackingListPDF(TripPDF):
    def footer(self):
        self.write_at(PAGE_WIDTH - 100, PAGE_HEIGHT - 30, f"Page {self.page_no()} of {{nb}}", 9,
                      color=SUBTITLE_COLOR)
        self.write_at(50, PAGE_HEIGHT - 30, FOOTER_TEXT, 9, color=SUBTITLE_COLOR)

    def continuation_page(self) -> float:
        self.add_page()
        self.write_at(50, 50, "Packing List (continued)", 18, bold=True, color=PRIMARY_COLOR)
        return 90

    def checkbox(self, x: float, y: float, checked: bool):
        self.set_draw_color(128, 128, 128)
        self.set_line_width(1)
        self.rect(x, y - CHECKBOX_SIZE + 2, CHECKBOX_SIZE, CHECKBOX_SIZE)
        if checked:
            top = y - CHECKBOX_SIZE + 2
            self.set_draw_color(*PRIMARY_COLOR)
            self.set_line_width(1.5)
            self.line(x + 2.5, top + 6.5, x + 5, top + 9.5)
            self.line(x + 5, top + 9.5, x + 10, top + 2.5)


def group_by_category(items: list) -> dict:
    """Items keyed by category (missing -> 'Other'), categories in alphabetical order."""
    grouped = defaultdict(list)
    for item in items:
        grouped[item.get("category") or "Other"].append(item)
    return {category: grouped[category] for category in sorted(grouped)}


def build_packing_list_pdf(trip: dict) -> PackingListPDF:
    pdf = PackingListPDF()
    pdf.set_title(f"{trip.get('title') or 'Trip'} - Packing List")
    pdf.add_page()

    y = 50
    pdf.write_at(50, y, "Packing List", 28, bold=True, color=PRIMARY_COLOR)
    y += 30
    pdf.write_at(50, y, trip.get("title") or "Trip", 16, bold=True)
    y += 20
    if trip.get("city"):
        pdf.write_at(50, y, trip["city"], 12, color=SUBTITLE_COLOR)
        y += 16
    pdf.write_at(50, y, f"{format_long_date(trip.get('start_date'))} - {format_long_date(trip.get('end_date'))}", 12,
                 color=SUBTITLE_COLOR)
    y += 30
    pdf.rule(y)
    y += 30

    items = trip.get("packingList") or []
    for category, category_items in group_by_category(items).items():
        if y > PAGE_HEIGHT - 150:
            y = pdf.continuation_page()

        pdf.write_at(50, y, category, 14, bold=True)
        y += 25

        for item in category_items:
            if y > PAGE_HEIGHT - 100:
                y = pdf.continuation_page()
            pdf.checkbox(70, y, bool(item.get("is_packed")))
            pdf.write_at(90, y, item.get("item") or "", 11)
            y += 20

        y += 10

    if not items:
        pdf.write_at(50, y, "No packing items added yet.", 12, color=SUBTITLE_COLOR)
        y += 30
        pdf.write_at(50, y, "Add items to your packing list in the app to see them here!", 11, color=SUBTITLE_COLOR)

    pdf.add_page()
    y = 50
    pdf.write_at(50, y, "Packing Tips", 20, bold=True, color=PRIMARY_COLOR)
    y += 35
    for tip in PACKING_TIPS:
        pdf.write_at(70, y, f"• {tip}", 11)
        y += 20

    return pdf


def generate_packing_list_pdf(trip: dict) -> bytes:
    return build_packing_list_pdf(trip).to_bytes()
