from . import auth
from . import profiles
from . import account
from . import trips
from . import itinerary
from . import accommodation
from . import transport
from . import tickets
from . import packing
from . import documents
from . import expenses
from . import collaborators
from . import share
from . import exports
from . import files
from . import currency

__all__ = [
    "auth",
    "profiles",
    "account",
    "trips",
    "itinerary",
    "accommodation",
    "transport",
    "tickets",
    "packing",
    "documents",
    "expenses",
    "collaborators",
    "share",
    "exports",
    "files",
    "currency",
]
