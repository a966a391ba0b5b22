"""
KML 2.2 export for importing a trip into Google Maps / Google Earth.

Placemarks carry an <address> so the importing app can geocode them; when
`coordinates` maps an address to (lat, lon) the real point is written,
otherwise 0,0,0.
"""
from typing import Dict, List, Optional, Tuple
from xml.sax.saxutils import escape

from utils.formatting import format_long_date

Coordinates = Dict[str, Tuple[float, float]]

_XML_ENTITIES = {'"': "&quot;", "'": "&apos;"}

STYLES = (
    ("itineraryIcon", "ff5e52e0", "1.1", "http://maps.google.com/mapfiles/kml/pushpin/red-pushpin.png"),
    ("accommodationIcon", "ff0090ff", "1.1", "http://maps.google.com/mapfiles/kml/shapes/homegardenbusiness.png"),
    ("transportIcon", "ff00ff00", "1.0", "http://maps.google.com/mapfiles/kml/shapes/airports.png"),
)


def _x(value) -> str:
    return escape(str(value or ""), _XML_ENTITIES)


def _lines(*parts: Optional[str]) -> str:
    return "\n".join(p for p in parts if p).strip()


def _coordinates(address: Optional[str], coordinates: Optional[Coordinates]) -> str:
    if address and coordinates and address in coordinates:
        lat, lon = coordinates[address]
        return f"{lon},{lat},0"
    return "0,0,0"


def _style(style_id: str, color: str, scale: str, href: str) -> List[str]:
    return [
        f'    <Style id="{style_id}">',
        "      <IconStyle>",
        f"        <color>{color}</color>",
        f"        <scale>{scale}</scale>",
        "        <Icon>",
        f"          <href>{href}</href>",
        "        </Icon>",
        "      </IconStyle>",
        "      <LabelStyle>",
        f"        <color>{color}</color>",
        "      </LabelStyle>",
        "    </Style>",
    ]


def _placemark(name: str, description: str, style_id: str, address: Optional[str],
               coordinates: Optional[Coordinates]) -> List[str]:
    return [
        "      <Placemark>",
        f"        <name>{_x(name)}</name>",
        f"        <description>{_x(description)}</description>",
        f"        <styleUrl>#{style_id}</styleUrl>",
        "        <Point>",
        f"          <coordinates>{_coordinates(address, coordinates)}</coordinates>",
        "        </Point>",
        f"        <address>{_x(address)}</address>",
        "      </Placemark>",
    ]


def _folder(name: str, description: str, placemarks: List[List[str]]) -> List[str]:
    lines = [
        "    <Folder>",
        f"      <name>{name}</name>",
        f"      <description>{_x(description)}</description>",
    ]
    for placemark in placemarks:
        lines.extend(placemark)
    lines.append("    </Folder>")
    return lines


def _cost(value) -> Optional[str]:
    return f"Cost: ${value}" if value else None


def placemark_addresses(trip: dict) -> List[str]:
    """Every address the export will reference, for geocoding ahead of time."""
    addresses = []
    if trip.get("itinerary"):
        addresses.extend(item.get("location") or trip.get("city") for item in trip["itinerary"])
    addresses.extend(a.get("address") for a in trip.get("accommodation") or [])
    for leg in trip.get("transport") or []:
        addresses.extend([leg.get("from"), leg.get("to")])
    return [a for a in addresses if a]


def generate_maps_export(trip: dict, coordinates: Optional[Coordinates] = None) -> str:
    date_range = f"{format_long_date(trip.get('start_date'))} - {format_long_date(trip.get('end_date'))}"
    lines = [
        '<?xml version="1.0" encoding="UTF-8"?>',
        '<kml xmlns="http://www.opengis.net/kml/2.2">',
        "  <Document>",
        f"    <name>{_x(trip.get('title') or 'Trip Itinerary')}</name>",
        f"    <description>{_x((trip.get('city') or 'Trip') + ' | ' + date_range)}</description>",
    ]
    for style in STYLES:
        lines.extend(_style(*style))

    itinerary = trip.get("itinerary") or []
    if itinerary:
        placemarks = []
        for item in itinerary:
            day_text = item.get("date") or f"Day {item.get('day')}"
            description = _lines(
                item.get("description"),
                f"Time: {item['time']}" if item.get("time") else None,
                _cost(item.get("cost")),
            )
            address = item.get("location") or trip.get("city") or ""
            placemarks.append(_placemark(f"{day_text}: {item.get('title')}", description,
                                         "itineraryIcon", address, coordinates))
        lines.extend(_folder("Itinerary", "Places to visit during the trip", placemarks))

    accommodation = trip.get("accommodation") or []
    if accommodation:
        placemarks = []
        for accom in accommodation:
            description = _lines(
                accom.get("address"),
                f"Check-in: {format_long_date(accom.get('checkIn'))}",
                f"Check-out: {format_long_date(accom.get('checkOut'))}",
                f"Notes: {accom['notes']}" if accom.get("notes") else None,
                _cost(accom.get("cost")),
            )
            placemarks.append(_placemark(accom.get("name"), description, "accommodationIcon",
                                         accom.get("address"), coordinates))
        lines.extend(_folder("Accommodations", "Where you'll be staying", placemarks))

    transport = trip.get("transport") or []
    if transport:
        placemarks = []
        for leg in transport:
            description = _lines(
                f"{leg.get('type')} - {leg.get('number') or 'N/A'}",
                f"Departure: {format_long_date(leg.get('depart'))}",
                f"Arrival: {format_long_date(leg.get('arrive'))}",
                _cost(leg.get("cost")),
            )
            placemarks.append(_placemark(f"Departure: {leg.get('from')}", description, "transportIcon",
                                         leg.get("from"), coordinates))
            placemarks.append(_placemark(f"Arrival: {leg.get('to')}", description, "transportIcon",
                                         leg.get("to"), coordinates))
        lines.extend(_folder("Transport", "Departure and arrival locations", placemarks))

    lines.extend(["  </Document>", "</kml>"])
    return "\n".join(lines)
