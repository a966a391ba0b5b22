# schemas.py (Pydantic v2)
import re
from datetime import date, datetime, timezone
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator, model_validator


SUPPORTED_CURRENCIES = (
    "USD", "EUR", "GBP", "JPY", "AUD", "CAD", "CHF", "CNY", "HKD", "NZD",
    "SEK", "KRW", "SGD", "NOK", "MXN", "INR", "RUB", "ZAR", "TRY", "BRL",
    "TWD", "DKK", "PLN", "THB", "IDR", "MYR", "PHP", "CZK", "AED", "ILS",
)


class CamelModel(BaseModel):
    """Accepts both the camelCase names sent by the web/mobile clients and snake_case."""
    model_config = ConfigDict(populate_by_name=True)


# ---------- Auth ----------
class Credentials(BaseModel):
    email: EmailStr
    password: str = Field(min_length=1)


class EmailOnly(BaseModel):
    email: EmailStr


class ChangePassword(CamelModel):
    current_password: str = Field(alias="currentPassword", min_length=1)
    new_password: str = Field(alias="newPassword", min_length=8)
    confirm_password: str = Field(alias="confirmPassword")

    @field_validator("new_password")
    @classmethod
    def check_strength(cls, value: str) -> str:
        if not re.search(r"[A-Z]", value):
            raise ValueError("Password must contain at least one uppercase letter")
        if not re.search(r"[a-z]", value):
            raise ValueError("Password must contain at least one lowercase letter")
        if not re.search(r"[0-9]", value):
            raise ValueError("Password must contain at least one number")
        if not re.search(r"[^A-Za-z0-9]", value):
            raise ValueError("Password must contain at least one special character")
        return value

    @model_validator(mode="after")
    def passwords_match(self):
        if self.new_password != self.confirm_password:
            raise ValueError("Passwords don't match")
        return self


# ---------- Profiles ----------
class ProfileRead(BaseModel):
    id: str
    email: str
    display_name: Optional[str] = None
    bio: Optional[str] = None
    avatar_url: Optional[str] = None
    created_at: datetime
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class ProfileUpdate(BaseModel):
    """Partial update for profiles"""
    display_name: Optional[str] = Field(default=None, max_length=100)
    bio: Optional[str] = Field(default=None, max_length=500)
    avatar_url: Optional[str] = None


class FCMTokenUpdate(BaseModel):
    fcm_token: str


class NotificationSettings(BaseModel):
    email_trip_reminders: Optional[bool] = None
    email_expense_updates: Optional[bool] = None
    email_marketing: Optional[bool] = None


class PreferencesRead(BaseModel):
    user_id: str
    default_currency: str
    notification_settings: dict
    updated_at: datetime

    model_config = ConfigDict(from_attributes=True)


class PreferencesUpdate(BaseModel):
    default_currency: Optional[Literal[SUPPORTED_CURRENCIES]] = None
    notification_settings: Optional[NotificationSettings] = None


# ---------- Account ----------
class AccountDeletionRequest(CamelModel):
    reason: Optional[str] = Field(default=None, max_length=1000)
    confirm_email: EmailStr = Field(alias="confirmEmail")


class AccountDeletionRead(BaseModel):
    id: str
    user_id: str
    requested_at: datetime
    scheduled_deletion_at: datetime
    reason: Optional[str] = None
    status: str

    model_config = ConfigDict(from_attributes=True)

    @field_validator("status", mode="before")
    @classmethod
    def enum_value(cls, value):
        return getattr(value, "value", value)


class ExportDataOptions(CamelModel):
    include_trips: bool = Field(default=True, alias="includeTrips")
    include_expenses: bool = Field(default=True, alias="includeExpenses")
    include_profile: bool = Field(default=True, alias="includeProfile")


# ---------- Trips ----------
class TripCreate(CamelModel):
    title: str = Field(min_length=1, max_length=150)
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    city: Optional[str] = None
    hero_image: Optional[str] = Field(default=None, alias="heroImage")

    @model_validator(mode="after")
    def check_dates(self):
        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValueError("End date cannot be before start date")
        return self


class TripUpdate(CamelModel):
    title: Optional[str] = Field(default=None, max_length=150)
    start_date: Optional[date] = Field(default=None, alias="startDate")
    end_date: Optional[date] = Field(default=None, alias="endDate")
    city: Optional[str] = None
    hero_image: Optional[str] = Field(default=None, alias="heroImage")
    visa_status: Optional[str] = None
    visa_info: Optional[str] = None


class TripMembersUpdate(BaseModel):
    members: List[str]


# ---------- Itinerary Items ----------
def _normalize_time(value):
    if value in (None, ""):
        return None
    if not re.fullmatch(r"\d{1,2}:\d{2}(:\d{2})?", value):
        raise ValueError("Time must be HH:MM")
    hours, minutes = value.split(":")[:2]
    if int(hours) > 23 or int(minutes) > 59:
        raise ValueError("Time must be HH:MM")
    return f"{int(hours):02d}:{minutes}"


class ItineraryItemWrite(CamelModel):
    # "title" is stored in `activity`, "description" in `notes`
    title: str = Field(min_length=1)
    day: Optional[date] = Field(default=None, alias="date")
    time: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    cost: Optional[float] = None

    @field_validator("time")
    @classmethod
    def check_time(cls, value):
        return _normalize_time(value)


class ItineraryItemUpdate(CamelModel):
    title: Optional[str] = None
    day: Optional[date] = Field(default=None, alias="date")
    time: Optional[str] = None
    description: Optional[str] = None
    location: Optional[str] = None
    cost: Optional[float] = None

    @field_validator("time")
    @classmethod
    def check_time(cls, value):
        return _normalize_time(value)


# ---------- Accommodation ----------
class AccommodationWrite(CamelModel):
    name: str = Field(min_length=1)
    address: Optional[str] = None
    check_in: Optional[date] = Field(default=None, alias="checkIn")
    check_out: Optional[date] = Field(default=None, alias="checkOut")
    type: Optional[str] = None
    notes: Optional[str] = None
    booking_reference: Optional[str] = Field(default=None, alias="bookingReference")
    cost: Optional[float] = None


def _naive_utc(value):
    # transport and ticket times are stored without a zone
    if value is not None and value.tzinfo is not None:
        return value.astimezone(timezone.utc).replace(tzinfo=None)
    return value


# ---------- Transport ----------
class TransportWrite(CamelModel):
    type: str = Field(min_length=1)
    number: Optional[str] = None
    provider: Optional[str] = None
    from_location: Optional[str] = Field(default=None, alias="from")
    to_location: Optional[str] = Field(default=None, alias="to")
    depart: Optional[datetime] = None
    arrive: Optional[datetime] = None
    notes: Optional[str] = None
    cost: Optional[float] = None

    @field_validator("depart", "arrive")
    @classmethod
    def strip_zone(cls, value):
        return _naive_utc(value)


# ---------- Tickets ----------
class TicketWrite(CamelModel):
    type: str = Field(min_length=1)
    provider: Optional[str] = None
    ref_number: Optional[str] = Field(default=None, alias="refNumber")
    departs: Optional[datetime] = None
    arrives: Optional[datetime] = None
    notes: Optional[str] = None
    file: Optional[str] = None

    @field_validator("departs", "arrives")
    @classmethod
    def strip_zone(cls, value):
        return _naive_utc(value)


# ---------- Packing ----------
class PackingItemWrite(CamelModel):
    # clients send {text, category, checked}
    text: str = Field(min_length=1, alias="item")
    category: Optional[str] = None
    checked: bool = Field(default=False, alias="is_packed")


class PackingItemUpdate(BaseModel):
    is_packed: Optional[bool] = None
    item: Optional[str] = None
    category: Optional[str] = None


# ---------- Documents / notes ----------
class DocumentWrite(BaseModel):
    title: str = Field(min_length=1)
    content: Optional[str | List[str]] = None
    type: str = "note"
    file_url: Optional[str] = None

    @field_validator("content")
    @classmethod
    def join_lines(cls, value):
        if isinstance(value, list):
            return "\n".join(value)
        return value


# ---------- Expenses ----------
class ExpenseWrite(CamelModel):
    description: str = Field(min_length=1)
    amount: float = Field(gt=0)
    date: date
    category: str = Field(min_length=1)
    payer: str
    split_with: List[str] = Field(alias="splitWith", min_length=1)


# ---------- Collaboration ----------
class InviteRequest(CamelModel):
    trip_id: int = Field(alias="tripId")
    email: EmailStr
    role: Literal["editor", "viewer"]


class InvitationAction(CamelModel):
    invitation_id: str = Field(alias="invitationId")


class LeaveRequest(CamelModel):
    trip_id: int = Field(alias="tripId")


class RemoveRequest(CamelModel):
    trip_id: int = Field(alias="tripId")
    user_id: str = Field(alias="userId")


class RoleUpdateRequest(CamelModel):
    trip_id: int = Field(alias="tripId")
    user_id: str = Field(alias="userId")
    role: Literal["editor", "viewer"]


# ---------- Share links ----------
class ShareCreate(CamelModel):
    trip_id: Optional[int] = Field(default=None, alias="tripId")
    password: Optional[str] = None
    expires_at: Optional[datetime] = Field(default=None, alias="expiresAt")


class SharePasswordVerify(BaseModel):
    password: Optional[str] = None
