import json
from unittest import mock

import pytest

from routes.exports import export_filename


@pytest.fixture
def filled_trip(client, alice, trip):
    base = f"/trips/{trip['id']}"
    client.post(base + "/itinerary/", json={"title": "Colosseum", "date": "2025-07-02", "time": "09:30",
                                           "location": "Piazza del Colosseo"}, headers=alice)
    client.post(base + "/accommodation/", json={"name": "Hotel Roma", "address": "Via Nazionale 1",
                                               "checkIn": "2025-07-01", "checkOut": "2025-07-08"}, headers=alice)
    client.post(base + "/packing/", json={"text": "Passport", "category": "Documents"}, headers=alice)
    client.post(base + "/tickets/", json={"type": "Museum", "refNumber": "VAT-123"}, headers=alice)
    client.post(base + "/expenses/", json={"description": "Dinner", "amount": 42, "date": "2025-07-02",
                                          "category": "Food", "payer": "Me", "splitWith": ["Me"]}, headers=alice)
    return trip


def test_export_filename():
    assert export_filename("Summer in Rome!", "itinerary.pdf") == "summer_in_rome__itinerary.pdf"


@pytest.mark.parametrize("name, media_type, filename", [
    ("itinerary.pdf", "application/pdf", "summer_in_rome_itinerary.pdf"),
    ("packing-list.pdf", "application/pdf", "summer_in_rome_packing_list.pdf"),
    ("ticket-wallet.pdf", "application/pdf", "summer_in_rome_tickets.pdf"),
    ("calendar.ics", "text/calendar", "summer_in_rome_calendar.ics"),
    ("map.kml", "application/vnd.google-earth.kml+xml", "summer_in_rome_locations.kml"),
    ("expenses.csv", "text/csv", "summer_in_rome_expenses.csv"),
    ("backup.json", "application/json", "summer_in_rome_backup.json"),
])
def test_exports_are_attachments(client, alice, filled_trip, name, media_type, filename):
    res = client.get(f"/trips/{filled_trip['id']}/export/{name}", headers=alice)
    assert res.status_code == 200
    assert res.headers["content-type"].startswith(media_type)
    assert res.headers["content-disposition"] == f'attachment; filename="{filename}"'


def test_export_contents(client, alice, filled_trip):
    base = f"/trips/{filled_trip['id']}/export"
    assert client.get(base + "/itinerary.pdf", headers=alice).content.startswith(b"%PDF")
    assert "SUMMARY:Colosseum" in client.get(base + "/calendar.ics", headers=alice).text
    assert client.get(base + "/expenses.csv", headers=alice).text.endswith("Total,,,,$42.00,")

    backup = json.loads(client.get(base + "/backup.json", headers=alice).content)
    assert backup["metadata"]["expense_count"] == 1


def test_unknown_export_and_access(client, alice, bob, filled_trip):
    assert client.get(f"/trips/{filled_trip['id']}/export/trip.docx", headers=alice).status_code == 404
    assert client.get(f"/trips/{filled_trip['id']}/export/map.kml", headers=bob).status_code == 404


def test_map_export_geocodes_on_request(client, alice, filled_trip):
    geocode = mock.AsyncMock(return_value={"Piazza del Colosseo, Rome": (41.89, 12.49)})
    with mock.patch("routes.exports.geocode_many", geocode):
        res = client.get(f"/trips/{filled_trip['id']}/export/map.kml?geocode=true", headers=alice)

    assert "<coordinates>12.49,41.89,0</coordinates>" in res.text
    queries = list(geocode.await_args.args[0])
    assert "Piazza del Colosseo, Rome" in queries


def test_map_export_without_geocoding_does_not_call_out(client, alice, filled_trip):
    with mock.patch("routes.exports.geocode_many") as geocode:
        res = client.get(f"/trips/{filled_trip['id']}/export/map.kml", headers=alice)
    geocode.assert_not_called()
    assert "<coordinates>0,0,0</coordinates>" in res.text


# ---------- files ----------
def test_upload_serve_and_delete(client, alice, trip):
    res = client.post(
        f"/files/upload?trip_id={trip['id']}",
        files={"file": ("boarding.pdf", b"%PDF-1.4 test", "application/pdf")},
        headers=alice,
    )
    assert res.status_code == 200
    uploaded = res.json()
    assert uploaded["type"] == "pdf"
    assert uploaded["url"].startswith(f"/files/trips/{trip['id']}/pdfs/")
    assert uploaded["original_filename"] == "boarding.pdf"

    res = client.get(uploaded["url"])
    assert res.status_code == 200
    assert res.content == b"%PDF-1.4 test"

    assert client.delete(uploaded["url"], headers=alice).status_code == 200
    assert client.get(uploaded["url"]).status_code == 404


def test_upload_rejects_other_types(client, alice, trip):
    res = client.post(
        f"/files/upload?trip_id={trip['id']}",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=alice,
    )
    assert res.status_code == 400


def test_upload_requires_edit_access(client, bob, trip):
    res = client.post(
        f"/files/upload?trip_id={trip['id']}",
        files={"file": ("photo.png", b"\x89PNG", "image/png")},
        headers=bob,
    )
    assert res.status_code == 404


def test_file_kind_is_validated(client):
    assert client.get("/files/trips/1/secrets/passwd").status_code == 400


def test_delete_requires_edit_access(client, alice, bob, trip):
    uploaded = client.post(
        f"/files/upload?trip_id={trip['id']}",
        files={"file": ("boarding.pdf", b"%PDF-1.4 test", "application/pdf")},
        headers=alice,
    ).json()

    assert client.delete(uploaded["url"], headers=bob).status_code == 404
    assert client.get(uploaded["url"]).status_code == 200

    other = client.post("/trips/", json={"title": "Bob's trip"}, headers=bob).json()
    moved = uploaded["url"].replace(f"/trips/{trip['id']}/", f"/trips/{other['id']}/")
    assert client.delete(moved, headers=bob).status_code == 404
    assert client.get(uploaded["url"]).status_code == 200


def test_export_loads_and_renders_off_the_event_loop(client, alice, filled_trip):
    offloaded = []

    async def record(func, *args):
        offloaded.append(func.__name__)
        return func(*args)

    with mock.patch("routes.exports.run_in_threadpool", record):
        res = client.get(f"/trips/{filled_trip['id']}/export/ticket-wallet.pdf", headers=alice)

    assert res.content.startswith(b"%PDF")
    assert offloaded == ["_load_aggregate", "render_export"]
