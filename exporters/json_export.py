import json
from datetime import datetime
from typing import Optional

from utils.formatting import utcnow

EXPORT_VERSION = "1.0"


def generate_json_export(trip: dict, now: Optional[datetime] = None) -> str:
    """Pretty-printed JSON backup of the whole trip aggregate."""
    expenses = trip.get("expenses") or []
    export_data = {
        "version": EXPORT_VERSION,
        "exportDate": (now or utcnow()).isoformat(),
        "trip": {
            "id": trip.get("id"),
            "title": trip.get("title"),
            "city": trip.get("city"),
            "start_date": trip.get("start_date"),
            "end_date": trip.get("end_date"),
            "hero_image": trip.get("hero_image"),
            "visa_status": trip.get("visa_status"),
            "visa_info": trip.get("visa_info"),
            "members": trip.get("members"),
            "itinerary": trip.get("itinerary") or [],
            "accommodation": trip.get("accommodation") or [],
            "transport": trip.get("transport") or [],
            "wallet": trip.get("wallet") or [],
            "packingList": trip.get("packingList") or [],
            "documents": trip.get("documents") or [],
            "expenses": expenses,
        },
        "metadata": {
            "itinerary_count": len(trip.get("itinerary") or []),
            "accommodation_count": len(trip.get("accommodation") or []),
            "transport_count": len(trip.get("transport") or []),
            "ticket_count": len(trip.get("wallet") or []),
            "packing_items_count": len(trip.get("packingList") or []),
            "document_count": len(trip.get("documents") or []),
            "expense_count": len(expenses),
            "total_expenses": sum(float(e.get("amount") or 0) for e in expenses),
        },
    }
    return json.dumps(export_data, indent=2, default=str)
