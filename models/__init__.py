# Import every model so Base.metadata knows all tables before create_all.
from models.Profile import Profile
from models.UserPreferences import UserPreferences
from models.Trip import Trip
from models.ItineraryItem import ItineraryItem
from models.Accommodation import Accommodation
from models.Transport import Transport
from models.Ticket import Ticket
from models.PackingItem import PackingItem
from models.Document import Document
from models.Expense import Expense
from models.TripCollaborator import TripCollaborator, CollaboratorRole, CollaboratorStatus
from models.TripInvitation import TripInvitation, InvitationStatus
from models.SharedTrip import SharedTrip
from models.AccountDeletion import AccountDeletion, DeletionStatus

__all__ = [
    "Profile",
    "UserPreferences",
    "Trip",
    "ItineraryItem",
    "Accommodation",
    "Transport",
    "Ticket",
    "PackingItem",
    "Document",
    "Expense",
    "TripCollaborator",
    "CollaboratorRole",
    "CollaboratorStatus",
    "TripInvitation",
    "InvitationStatus",
    "SharedTrip",
    "AccountDeletion",
    "DeletionStatus",
]
