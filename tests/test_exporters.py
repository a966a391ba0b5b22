import json
from datetime import datetime, timezone

from exporters import (
    generate_calendar_export,
    generate_expenses_csv,
    generate_json_export,
    generate_maps_export,
    placemark_addresses,
)
from exporters.itinerary_pdf import build_itinerary_pdf, generate_itinerary_pdf
from exporters.packing_list_pdf import build_packing_list_pdf, group_by_category
from exporters.pdf_common import pdf_safe, wrap_text
from exporters.ticket_wallet_pdf import build_ticket_wallet_pdf, collect_tickets, render_barcode

NOW = datetime(2025, 6, 1, 12, 0, tzinfo=timezone.utc)


def make_trip(**overrides):
    trip = {
        "id": 7,
        "title": "Summer in Rome",
        "city": "Rome",
        "start_date": "2025-07-01",
        "end_date": "2025-07-08",
        "members": ["Me", "Ana"],
        "itinerary": [
            {"id": 1, "date": "2025-07-02", "time": "09:30", "title": "Colosseum",
             "location": "Piazza del Colosseo", "description": "Tickets, bring ID", "cost": 18},
            {"id": 2, "date": "2025-07-01", "time": None, "title": "Arrival day", "location": None,
             "description": None, "cost": None},
        ],
        "accommodation": [
            {"id": 3, "name": "Hotel Roma", "address": "Via Nazionale 1, Rome", "checkIn": "2025-07-01",
             "checkOut": "2025-07-08", "notes": "Late check-in", "cost": 900},
        ],
        "transport": [
            {"id": 4, "type": "Flight", "number": "AZ611", "from": "JFK", "to": "FCO",
             "depart": "2025-06-30T22:00:00", "arrive": "2025-07-01T12:30:00", "cost": 650},
            {"id": 5, "type": "Train", "number": None, "from": "Rome", "to": "Florence",
             "depart": "2025-07-05T08:00:00", "arrive": None},
        ],
        "wallet": [
            {"id": 6, "type": "Museum", "provider": "Vatican", "refNumber": "VAT-123",
             "departs": "2025-07-03T09:00:00", "arrives": None, "notes": "Entrance B"},
        ],
        "packingList": [
            {"id": 8, "item": "Passport", "category": "Documents", "is_packed": True},
            {"id": 9, "item": "Sunscreen", "category": None, "is_packed": False},
            {"id": 10, "item": "Adapter", "category": "Electronics", "is_packed": False},
        ],
        "documents": [
            {"id": 11, "title": "Embassy", "content": ["+39 06 4674 1"], "type": "emergency"},
            {"id": 12, "title": "Wifi", "content": ["pw: roma"], "type": "note"},
        ],
        "expenses": [
            {"id": 13, "date": "2025-07-02", "description": "Dinner, wine", "category": "Food",
             "payer": "Me", "amount": 80, "splitWith": ["Me", "Ana"]},
            {"id": 14, "date": "2025-07-03", "description": "Museum", "category": "Activities",
             "payer": "Ana", "amount": 20.5, "splitWith": ["Ana"]},
        ],
    }
    trip.update(overrides)
    return trip


# ---------- text helpers ----------
def test_wrap_text_respects_width_and_newlines():
    lines = wrap_text("one two three four five\nsix", 9)
    assert lines == ["one two", "three", "four five", "six"]
    assert wrap_text(None, 10) == []


def test_pdf_safe_replaces_non_latin1():
    assert pdf_safe("JFK → FCO • “ok”") == 'JFK -> FCO - "ok"'
    assert pdf_safe("東京") == "??"


# ---------- PDFs ----------
def test_itinerary_pdf_sections():
    pdf = build_itinerary_pdf(make_trip())
    # cover, itinerary, accommodations, transportation, emergency contacts
    assert pdf.page_no() == 5

    without_emergency = build_itinerary_pdf(make_trip(), include_emergency_contacts=False)
    assert without_emergency.page_no() == 4


def test_itinerary_pdf_continues_long_sections():
    items = [{"id": i, "date": "2025-07-02", "time": "10:00", "title": f"Stop {i}", "location": "Rome",
              "description": "A fairly long description that wraps onto a second line in the PDF output."}
             for i in range(40)]
    pdf = build_itinerary_pdf(make_trip(itinerary=items, accommodation=[], transport=[], documents=[]))
    assert pdf.page_no() > 3


def test_itinerary_pdf_bytes():
    content = generate_itinerary_pdf(make_trip(itinerary=[], accommodation=[], transport=[]))
    assert content.startswith(b"%PDF")


def test_packing_list_groups_sorted_with_other():
    groups = group_by_category(make_trip()["packingList"])
    assert list(groups) == ["Documents", "Electronics", "Other"]
    assert [i["item"] for i in groups["Other"]] == ["Sunscreen"]


def test_packing_list_pdf_has_tips_page():
    assert build_packing_list_pdf(make_trip()).page_no() == 2
    assert build_packing_list_pdf(make_trip(packingList=[])).page_no() == 2

    many = [{"item": f"Item {i}", "category": f"Cat {i % 5}", "is_packed": i % 2 == 0} for i in range(80)]
    assert build_packing_list_pdf(make_trip(packingList=many)).page_no() > 3


def test_ticket_wallet_one_page_per_ticket():
    trip = make_trip()
    tickets = collect_tickets(trip)
    assert [t["type"] for t in tickets] == ["Museum", "Flight", "Train"]
    assert tickets[1]["provider"] == "Transport"
    assert tickets[1]["from"] == "JFK"

    pdf = build_ticket_wallet_pdf(trip)
    assert pdf.page_no() == 3
    assert pdf.to_bytes().startswith(b"%PDF")


def test_ticket_wallet_empty_state():
    pdf = build_ticket_wallet_pdf(make_trip(wallet=[], transport=[]))
    assert pdf.page_no() == 1


def test_render_barcode():
    image = render_barcode("VAT-123")
    assert image is not None
    assert image.size[0] > 0


# ---------- calendar ----------
def test_calendar_events():
    ics = generate_calendar_export(make_trip(), now=NOW)
    assert ics.startswith("BEGIN:VCALENDAR\r\n")
    assert ics.endswith("END:VCALENDAR\r\n")
    assert "PRODID:-//Itinerary Planner//Trip Export//EN" in ics
    assert "DTSTAMP:20250601T120000Z" in ics

    # timed itinerary item lasts two hours
    assert "DTSTART:20250702T093000\r\nDTEND:20250702T113000" in ics
    # untimed item is all-day
    assert "DTSTART;VALUE=DATE:20250701\r\nDTEND;VALUE=DATE:20250702" in ics
    assert "SUMMARY:Check-in: Hotel Roma" in ics
    assert "SUMMARY:Check-out: Hotel Roma" in ics
    assert "SUMMARY:Flight: JFK → FCO" in ics
    # the train has no arrival time
    assert "Florence" not in ics

    assert ics.count("BEGIN:VEVENT") == 5
    assert ics.count("STATUS:CONFIRMED") == 5
    assert "UID:itinerary-1@itinerary-planner" in ics


def test_calendar_escapes_text():
    trip = make_trip(itinerary=[{"id": 1, "date": "2025-07-02", "title": "Lunch; pasta, wine",
                                 "description": "line1\nline2"}],
                     accommodation=[], transport=[])
    ics = generate_calendar_export(trip, now=NOW)
    assert "SUMMARY:Lunch\\; pasta\\, wine" in ics
    assert "DESCRIPTION:line1\\nline2" in ics


def test_calendar_folds_long_lines():
    trip = make_trip(itinerary=[{"id": 1, "date": "2025-07-02", "title": "x" * 200}],
                     accommodation=[], transport=[])
    ics = generate_calendar_export(trip, now=NOW)
    for line in ics.split("\r\n"):
        assert len(line.encode("utf-8")) <= 75
    assert "\r\n x" in ics


# ---------- KML ----------
def test_maps_export_structure():
    kml = generate_maps_export(make_trip())
    assert kml.startswith('<?xml version="1.0" encoding="UTF-8"?>')
    assert '<kml xmlns="http://www.opengis.net/kml/2.2">' in kml
    for folder in ("Itinerary", "Accommodations", "Transport"):
        assert f"<name>{folder}</name>" in kml
    assert "<coordinates>0,0,0</coordinates>" in kml
    assert "<address>Via Nazionale 1, Rome</address>" in kml


def test_maps_export_accommodation_description():
    kml = generate_maps_export(make_trip(transport=[], itinerary=[]))
    assert "Notes: Late check-in" in kml
    assert "Type:" not in kml


def test_maps_export_uses_known_coordinates_and_escapes():
    trip = make_trip(itinerary=[{"id": 1, "date": "2025-07-02", "title": "Tom & Jerry's <bar>",
                                 "location": "Trastevere"}])
    kml = generate_maps_export(trip, coordinates={"Trastevere": (41.88, 12.47)})
    assert "<coordinates>12.47,41.88,0</coordinates>" in kml
    assert "Tom &amp; Jerry&apos;s &lt;bar&gt;" in kml


def test_placemark_addresses():
    addresses = placemark_addresses(make_trip())
    assert "Piazza del Colosseo" in addresses
    assert "Via Nazionale 1, Rome" in addresses
    assert "JFK" in addresses


# ---------- CSV ----------
def test_expenses_csv():
    csv_text = generate_expenses_csv(make_trip())
    lines = csv_text.split("\n")
    assert lines[0] == "Date,Description,Category,Payer,Amount,Split With"
    assert lines[1] == '07/02/2025,"Dinner, wine",Food,Me,80.00,"Me, Ana"'
    assert lines[2] == "07/03/2025,Museum,Activities,Ana,20.50,Ana"
    assert lines[3] == ""
    assert lines[4] == "Total,,,,$100.50,"


def test_expenses_csv_empty():
    assert generate_expenses_csv(make_trip(expenses=[])) == "Date,Description,Category,Payer,Amount,Split With"


# ---------- JSON ----------
def test_json_export():
    data = json.loads(generate_json_export(make_trip(), now=NOW))
    assert data["version"] == "1.0"
    assert data["exportDate"] == "2025-06-01T12:00:00+00:00"
    assert data["trip"]["title"] == "Summer in Rome"
    assert data["metadata"]["itinerary_count"] == 2
    assert data["metadata"]["ticket_count"] == 1
    assert data["metadata"]["total_expenses"] == 100.5
