"""
Shared fpdf2 plumbing for the trip PDFs: A4 pages in points, the app's
palette, and a top-down text helper.
"""
from typing import List, Optional, Tuple

from fpdf import FPDF

PAGE_WIDTH = 595.28
PAGE_HEIGHT = 841.89

PRIMARY_COLOR = (224, 82, 94)      # #e0525e
SECONDARY_COLOR = (255, 240, 230)  # #fff0e6
TEXT_COLOR = (45, 36, 56)          # #2d2438
SUBTITLE_COLOR = (107, 91, 113)    # #6b5b71

FOOTER_TEXT = "Generated with Itinerary Planner"

Color = Tuple[int, int, int]

# core PDF fonts only cover latin-1
_REPLACEMENTS = {
    "→": "->",
    "•": "-",
    "–": "-",
    "—": "-",
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "…": "...",
}


def pdf_safe(text) -> str:
    text = "" if text is None else str(text)
    for char, replacement in _REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", "replace").decode("latin-1")


def wrap_text(text: Optional[str], max_chars: int) -> List[str]:
    """Greedy word wrap at max_chars; explicit newlines start new lines."""
    lines: List[str] = []
    for paragraph in (text or "").split("\n"):
        current = ""
        for word in paragraph.split(" "):
            candidate = f"{current} {word}" if current else word
            if len(candidate) > max_chars:
                if current:
                    lines.append(current)
                current = word
            else:
                current = candidate
        if current:
            lines.append(current)
    return lines


class TripPDF(FPDF):
    """A4 document laid out in points with y measured from the top edge."""

    def __init__(self):
        super().__init__(orientation="P", unit="pt", format="A4")
        self.set_auto_page_break(False)
        self.set_margins(0, 0, 0)
        self.set_creator("Itinerary Planner")

    def write_at(self, x: float, y: float, text, size: float, bold: bool = False,
                 color: Color = TEXT_COLOR) -> None:
        self.set_font("Helvetica", "B" if bold else "", size)
        self.set_text_color(*color)
        self.text(x, y, pdf_safe(text))

    def rule(self, y: float, x1: float = 50, x2: Optional[float] = None, thickness: float = 2,
             color: Color = PRIMARY_COLOR) -> None:
        self.set_draw_color(*color)
        self.set_line_width(thickness)
        self.line(x1, y, x2 if x2 is not None else PAGE_WIDTH - x1, y)

    def to_bytes(self) -> bytes:
        return bytes(self.output())
