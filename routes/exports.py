"""
Trip downloads: PDFs, calendar, map, CSV and JSON backup.

Every export is rendered from the trip aggregate and served as an attachment
named after the trip, e.g. ``summer_in_rome_itinerary.pdf``.
"""
import re

from fastapi import APIRouter, Depends, HTTPException
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response
from sqlalchemy.orm import Session

from models.Profile import Profile
from database import get_db
from exporters import (
    generate_calendar_export,
    generate_expenses_csv,
    generate_itinerary_pdf,
    generate_json_export,
    generate_maps_export,
    generate_packing_list_pdf,
    generate_ticket_wallet_pdf,
    placemark_addresses,
)
from services.auth import get_current_user
from services.permissions import require_read
from services.trip_loader import load_trip, trip_to_aggregate
from utils.geocoding_helpers import build_place_query, geocode_many
from utils.logger import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/trips/{trip_id}/export", tags=["Exports"])

# export name -> (filename suffix, media type)
EXPORT_FORMATS = {
    "itinerary.pdf": ("itinerary.pdf", "application/pdf"),
    "packing-list.pdf": ("packing_list.pdf", "application/pdf"),
    "ticket-wallet.pdf": ("tickets.pdf", "application/pdf"),
    "calendar.ics": ("calendar.ics", "text/calendar; charset=utf-8"),
    "map.kml": ("locations.kml", "application/vnd.google-earth.kml+xml"),
    "expenses.csv": ("expenses.csv", "text/csv; charset=utf-8"),
    "backup.json": ("backup.json", "application/json"),
}


def export_filename(title: str, suffix: str) -> str:
    slug = re.sub(r"[^a-z0-9]", "_", (title or "trip").lower())
    return f"{slug}_{suffix}"


async def _geocode_addresses(trip: dict) -> dict:
    """address -> (lat, lon); each address is searched together with the trip city."""
    queries = {}
    for address in placemark_addresses(trip):
        query = build_place_query(city=trip.get("city"), address=address)
        if address and trip.get("city") and trip["city"].lower() in address.lower():
            query = address
        queries[query] = address

    resolved = await geocode_many(queries.keys())
    return {queries[q]: coords for q, coords in resolved.items()}


def _load_aggregate(db: Session, trip_id: int, user_id: str) -> dict:
    require_read(db, trip_id, user_id)
    return trip_to_aggregate(load_trip(db, trip_id))


def render_export(export_name: str, trip: dict, coordinates=None,
                  include_emergency_contacts: bool = True, include_notes: bool = True):
    if export_name == "itinerary.pdf":
        return generate_itinerary_pdf(
            trip,
            include_emergency_contacts=include_emergency_contacts,
            include_notes=include_notes,
        )
    if export_name == "packing-list.pdf":
        return generate_packing_list_pdf(trip)
    if export_name == "ticket-wallet.pdf":
        return generate_ticket_wallet_pdf(trip)
    if export_name == "calendar.ics":
        return generate_calendar_export(trip)
    if export_name == "map.kml":
        return generate_maps_export(trip, coordinates=coordinates)
    if export_name == "expenses.csv":
        return generate_expenses_csv(trip)
    return generate_json_export(trip)


@router.get("/{export_name}")
async def export_trip(
    trip_id: int,
    export_name: str,
    geocode: bool = False,
    include_emergency_contacts: bool = True,
    include_notes: bool = True,
    db: Session = Depends(get_db),
    user: Profile = Depends(get_current_user),
):
    if export_name not in EXPORT_FORMATS:
        raise HTTPException(status_code=404, detail=f"Unknown export format: {export_name}")

    # database access and rendering are blocking; only geocoding runs on the loop
    trip = await run_in_threadpool(_load_aggregate, db, trip_id, user.id)
    coordinates = None
    if export_name == "map.kml" and geocode:
        coordinates = await _geocode_addresses(trip)

    content = await run_in_threadpool(
        render_export,
        export_name,
        trip,
        coordinates,
        include_emergency_contacts,
        include_notes,
    )

    suffix, media_type = EXPORT_FORMATS[export_name]
    filename = export_filename(trip.get("title"), suffix)
    logger.info("Export %s of trip %s for %s", export_name, trip_id, user.id)
    return Response(
        content=content,
        media_type=media_type,
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )
