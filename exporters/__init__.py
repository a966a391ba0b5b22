from exporters.calendar_export import generate_calendar_export
from exporters.expenses_csv import generate_expenses_csv
from exporters.itinerary_pdf import generate_itinerary_pdf
from exporters.json_export import generate_json_export
from exporters.maps_export import generate_maps_export, placemark_addresses
from exporters.packing_list_pdf import generate_packing_list_pdf
from exporters.ticket_wallet_pdf import generate_ticket_wallet_pdf

__all__ = [
    "generate_calendar_export",
    "generate_expenses_csv",
    "generate_itinerary_pdf",
    "generate_json_export",
    "generate_maps_export",
    "placemark_addresses",
    "generate_packing_list_pdf",
    "generate_ticket_wallet_pdf",
]
