"""
Builds the "trip aggregate": a trip row with every sub-collection attached
and the field renames the web/mobile clients expect (activity -> title,
split_with -> splitWith, ...). Used by the trip routes, share links and the
exporters so every consumer sees the same shape.
"""
from datetime import date, datetime
from typing import List, Optional

from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from models.Trip import Trip
from models.TripCollaborator import TripCollaborator, CollaboratorStatus


def _iso(value) -> Optional[str]:
    if isinstance(value, (date, datetime)):
        return value.isoformat()
    return value


def _trip_options():
    return (
        selectinload(Trip.itinerary_items),
        selectinload(Trip.packing_items),
        selectinload(Trip.documents),
        selectinload(Trip.tickets),
        selectinload(Trip.accommodation),
        selectinload(Trip.transport),
        selectinload(Trip.expenses),
    )


def load_trip(db: Session, trip_id: int) -> Optional[Trip]:
    return db.query(Trip).options(*_trip_options()).filter(Trip.id == trip_id).first()


def load_visible_trips(db: Session, user_id: str) -> List[Trip]:
    """Trips the user owns or actively collaborates on, newest first."""
    collaborating = (
        db.query(TripCollaborator.trip_id)
        .filter(
            TripCollaborator.user_id == user_id,
            TripCollaborator.status == CollaboratorStatus.ACTIVE,
        )
    )
    return (
        db.query(Trip)
        .options(*_trip_options())
        .filter(or_(Trip.user_id == user_id, Trip.id.in_(collaborating)))
        .order_by(Trip.created_at.desc(), Trip.id.desc())
        .all()
    )


def load_owned_trips(db: Session, user_id: str) -> List[Trip]:
    return (
        db.query(Trip)
        .options(*_trip_options())
        .filter(Trip.user_id == user_id)
        .order_by(Trip.created_at.desc(), Trip.id.desc())
        .all()
    )


def itinerary_to_dict(item) -> dict:
    return {
        "id": item.id,
        "trip_id": item.trip_id,
        "day": _iso(item.day),
        "date": _iso(item.day),
        "time": item.time,
        "activity": item.activity,
        "title": item.activity,
        "location": item.location,
        "notes": item.notes,
        "description": item.notes,
        "cost": item.cost,
        "created_at": _iso(item.created_at),
    }


def accommodation_to_dict(item) -> dict:
    return {
        "id": item.id,
        "trip_id": item.trip_id,
        "name": item.name,
        "address": item.address,
        "checkIn": _iso(item.check_in),
        "checkOut": _iso(item.check_out),
        "booking_reference": item.booking_reference,
        "notes": item.notes,
        "cost": item.cost,
        "created_at": _iso(item.created_at),
    }


def transport_to_dict(item) -> dict:
    return {
        "id": item.id,
        "trip_id": item.trip_id,
        "type": item.type,
        "provider": item.provider,
        "number": item.booking_reference,
        "from": item.departure_location,
        "to": item.arrival_location,
        "depart": _iso(item.departure_time),
        "arrive": _iso(item.arrival_time),
        "notes": item.notes,
        "cost": item.cost,
        "created_at": _iso(item.created_at),
    }


def ticket_to_dict(item) -> dict:
    return {
        "id": item.id,
        "trip_id": item.trip_id,
        "type": item.type,
        "provider": item.provider,
        "refNumber": item.reference_number,
        "departs": _iso(item.departure_time),
        "arrives": _iso(item.arrival_time),
        "notes": item.notes,
        "file": item.file_url,
        "created_at": _iso(item.created_at),
    }


def packing_to_dict(item) -> dict:
    return {
        "id": item.id,
        "trip_id": item.trip_id,
        "item": item.item,
        "category": item.category,
        "is_packed": bool(item.is_packed),
        "created_at": _iso(item.created_at),
    }


def document_to_dict(doc) -> dict:
    content = doc.content
    return {
        "id": doc.id,
        "trip_id": doc.trip_id,
        "title": doc.title,
        "content": content.split("\n") if isinstance(content, str) else (content or []),
        "file_url": doc.file_url,
        "type": doc.type,
        "isWarning": doc.type in ("warning", "emergency"),
        "date": _iso(doc.created_at),
    }


def expense_to_dict(exp) -> dict:
    return {
        "id": exp.id,
        "trip_id": exp.trip_id,
        "payer": exp.payer,
        "amount": exp.amount,
        "description": exp.description,
        "date": _iso(exp.date),
        "category": exp.category,
        "split_with": exp.split_with,
        "splitWith": exp.split_with or [],
        "created_at": _iso(exp.created_at),
    }


def trip_summary(trip: Trip) -> dict:
    return {
        "id": trip.id,
        "user_id": trip.user_id,
        "title": trip.title,
        "start_date": _iso(trip.start_date),
        "end_date": _iso(trip.end_date),
        "city": trip.city,
        "hero_image": trip.hero_image,
        "visa_status": trip.visa_status,
        "visa_info": trip.visa_info,
        "members": trip.members or ["Me"],
        "created_at": _iso(trip.created_at),
    }


def trip_to_aggregate(trip: Trip) -> dict:
    aggregate = trip_summary(trip)
    aggregate.update({
        "itinerary": [itinerary_to_dict(i) for i in trip.itinerary_items],
        "packingList": [packing_to_dict(i) for i in trip.packing_items],
        "documents": [document_to_dict(d) for d in trip.documents],
        "wallet": [ticket_to_dict(t) for t in trip.tickets],
        "accommodation": [accommodation_to_dict(a) for a in trip.accommodation],
        "transport": [transport_to_dict(t) for t in trip.transport],
        "expenses": [expense_to_dict(e) for e in trip.expenses],
    })
    return aggregate
