"""
iCalendar (.ics) export of a trip: itinerary items, accommodation check-in /
check-out days and transport legs.
"""
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from utils.formatting import parse_date_like, utcnow

PRODID = "-//Itinerary Planner//Trip Export//EN"
UID_DOMAIN = "itinerary-planner"
DEFAULT_EVENT_DURATION = timedelta(hours=2)


def _fold(line: str) -> str:
    """RFC 5545 folding: at most 75 octets per line, continuation lines start with a space."""
    encoded = line.encode("utf-8")
    if len(encoded) <= 75:
        return line

    parts = []
    current = ""
    for char in line:
        if len((current + char).encode("utf-8")) > 75:
            parts.append(current)
            current = " "
        current += char
    parts.append(current)
    return "\r\n".join(parts)


def _escape(text: str) -> str:
    text = text.replace("\\", "\\\\")
    text = text.replace(";", "\\;")
    text = text.replace(",", "\\,")
    text = text.replace("\r\n", "\\n").replace("\n", "\\n")
    text = text.replace("\r", "")
    return text


def _utc_stamp(dt: datetime) -> str:
    return dt.astimezone(timezone.utc).strftime("%Y%m%dT%H%M%SZ")


def _dt_value(dt: datetime) -> str:
    # aware datetimes go out as UTC, naive ones as floating local time
    if dt.tzinfo is not None:
        return _utc_stamp(dt)
    return dt.strftime("%Y%m%dT%H%M%S")


def _parse_clock(value: Optional[str]):
    if not value:
        return None
    try:
        hours, minutes = value.split(":")[:2]
        return int(hours), int(minutes)
    except ValueError:
        return None


class _Event:
    def __init__(self, uid: str, summary: str, start: datetime, end: Optional[datetime] = None,
                 all_day: bool = False, description: str = "", location: str = "",
                 categories: Optional[List[str]] = None):
        self.uid = uid
        self.summary = summary
        self.start = start
        self.end = end
        self.all_day = all_day
        self.description = description
        self.location = location
        self.categories = categories or []

    def to_lines(self, stamp: str) -> List[str]:
        lines = [
            "BEGIN:VEVENT",
            f"UID:{self.uid}@{UID_DOMAIN}",
            f"DTSTAMP:{stamp}",
        ]
        if self.all_day:
            day = self.start.date()
            lines.append(f"DTSTART;VALUE=DATE:{day.strftime('%Y%m%d')}")
            lines.append(f"DTEND;VALUE=DATE:{(day + timedelta(days=1)).strftime('%Y%m%d')}")
        else:
            lines.append(f"DTSTART:{_dt_value(self.start)}")
            if self.end is not None:
                lines.append(f"DTEND:{_dt_value(self.end)}")
        lines.append(f"SUMMARY:{_escape(self.summary)}")
        if self.description:
            lines.append(f"DESCRIPTION:{_escape(self.description)}")
        if self.location:
            lines.append(f"LOCATION:{_escape(self.location)}")
        if self.categories:
            lines.append("CATEGORIES:" + ",".join(_escape(c) for c in self.categories))
        lines.extend([
            "STATUS:CONFIRMED",
            "TRANSP:OPAQUE",
            "END:VEVENT",
        ])
        return lines


def _itinerary_events(trip: dict) -> List[_Event]:
    events = []
    trip_label = trip.get("title") or "Travel"
    for item in trip.get("itinerary") or []:
        day = parse_date_like(item.get("date") or item.get("day"))
        if day is None:
            continue

        clock = _parse_clock(item.get("time"))
        if clock:
            start = day.replace(hour=clock[0], minute=clock[1], second=0, microsecond=0)
            event = _Event(f"itinerary-{item.get('id')}", item.get("title") or "", start,
                           end=start + DEFAULT_EVENT_DURATION)
        else:
            event = _Event(f"itinerary-{item.get('id')}", item.get("title") or "", day, all_day=True)

        event.description = item.get("description") or ""
        event.location = item.get("location") or trip.get("city") or ""
        event.categories = ["Trip", trip_label]
        events.append(event)
    return events


def _accommodation_events(trip: dict) -> List[_Event]:
    events = []
    trip_label = trip.get("title") or "Travel"
    for accom in trip.get("accommodation") or []:
        name = accom.get("name") or ""
        location = accom.get("address") or name

        check_in = parse_date_like(accom.get("checkIn"))
        if check_in:
            description = f"Check-in at {name}"
            if accom.get("address"):
                description += f"\nAddress: {accom['address']}"
            if accom.get("notes"):
                description += f"\nNotes: {accom['notes']}"
            events.append(_Event(
                f"checkin-{accom.get('id')}", f"Check-in: {name}", check_in, all_day=True,
                description=description, location=location, categories=["Accommodation", trip_label],
            ))

        check_out = parse_date_like(accom.get("checkOut"))
        if check_out:
            events.append(_Event(
                f"checkout-{accom.get('id')}", f"Check-out: {name}", check_out, all_day=True,
                description=f"Check-out from {name}", location=location,
                categories=["Accommodation", trip_label],
            ))
    return events


def _transport_events(trip: dict) -> List[_Event]:
    events = []
    trip_label = trip.get("title") or "Travel"
    for leg in trip.get("transport") or []:
        depart = parse_date_like(leg.get("depart"))
        arrive = parse_date_like(leg.get("arrive"))
        if depart is None or arrive is None:
            continue

        description = (
            f"{leg.get('type')} - {leg.get('number') or 'N/A'}\n"
            f"From: {leg.get('from') or ''}\nTo: {leg.get('to') or ''}"
        )
        if leg.get("cost"):
            description += f"\nCost: ${leg['cost']}"

        events.append(_Event(
            f"transport-{leg.get('id')}",
            f"{leg.get('type')}: {leg.get('from') or ''} \u2192 {leg.get('to') or ''}",
            depart,
            end=arrive,
            description=description,
            location=leg.get("from") or "",
            categories=["Transport", trip_label],
        ))
    return events


def generate_calendar_export(trip: dict, now: Optional[datetime] = None) -> str:
    """Render the trip as an iCalendar document with CRLF line endings."""
    stamp = _utc_stamp(now or utcnow())
    lines = [
        "BEGIN:VCALENDAR",
        "VERSION:2.0",
        f"PRODID:{PRODID}",
        "CALSCALE:GREGORIAN",
        "METHOD:PUBLISH",
        f"X-WR-CALNAME:{_escape(trip.get('title') or 'Trip')}",
    ]
    for event in _itinerary_events(trip) + _accommodation_events(trip) + _transport_events(trip):
        lines.extend(event.to_lines(stamp))
    lines.append("END:VCALENDAR")

    return "\r\n".join(_fold(line) for line in lines) + "\r\n"
