from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel
from typing import List, Optional
from datetime import datetime

from eventhub.db.models import RoleEnum, EventStatusEnum, AvailabilityEnum, AttendanceStatusEnum


class APIModel(BaseModel):
    """Base schema: camelCase on the wire, snake_case in Python."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        from_attributes=True,
    )


class MessageOut(APIModel):
    message: str


class TokenData(APIModel):
    user_id: str
    role: Optional[str] = None


class UserCreate(APIModel):
    name: str = Field(min_length=1)
    email: EmailStr
    password: str
    role: RoleEnum


class LoginRequest(APIModel):
    """Schema for user login request."""
    # Plain str so a malformed address fails like any other bad login
    email: str
    password: str


class UserOut(APIModel):
    id: str
    name: str
    email: str
    role: RoleEnum


class AuthResponse(APIModel):
    token: str
    user: UserOut


class MeResponse(APIModel):
    user: UserOut


class UserSummary(APIModel):
    name: str
    email: str


class EventCreate(APIModel):
    title: str = Field(min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    date: datetime
    location: Optional[str] = None
    capacity: int = Field(gt=0)
    price: float = Field(default=0.0, ge=0, allow_inf_nan=False)


class EventUpdate(APIModel):
    title: Optional[str] = Field(default=None, min_length=1)
    description: Optional[str] = None
    category: Optional[str] = None
    date: Optional[datetime] = None
    location: Optional[str] = None
    capacity: Optional[int] = Field(default=None, gt=0)
    price: Optional[float] = Field(default=None, ge=0, allow_inf_nan=False)
    status: Optional[EventStatusEnum] = None


class AssignVendorRequest(APIModel):
    vendor_id: str


class AttendanceOut(APIModel):
    id: str
    event_id: str
    user_id: str
    user_name: str
    user_email: str
    registered_at: datetime
    status: AttendanceStatusEnum


class ServiceCreate(APIModel):
    name: str = Field(min_length=1)
    category: Optional[str] = None
    description: Optional[str] = None
    price: float = Field(ge=0, allow_inf_nan=False)


class ServiceOut(APIModel):
    id: str
    name: str
    category: Optional[str]
    description: Optional[str]
    price: float
    created_at: datetime


class VendorProfileIn(APIModel):
    company_name: str = Field(min_length=1)
    description: Optional[str] = None
    contact_number: Optional[str] = None
    address: Optional[str] = None


class AvailabilityUpdate(APIModel):
    availability: AvailabilityEnum


class VendorSummary(APIModel):
    """Directory view of a vendor; never carries ``services``."""
    id: str
    user_id: str
    company_name: str
    description: Optional[str]
    contact_number: Optional[str]
    address: Optional[str]
    availability: AvailabilityEnum
    rating: float
    total_reviews: int
    created_at: datetime
    user: Optional[UserSummary] = None


class VendorOut(VendorSummary):
    services: List[ServiceOut]


class EventOut(APIModel):
    id: str
    title: str
    description: Optional[str]
    category: Optional[str]
    date: datetime
    location: Optional[str]
    capacity: int
    price: float
    organizer: str
    organizer_name: Optional[str] = None
    organizer_email: Optional[str] = None
    vendor_ids: List[str]
    status: EventStatusEnum
    created_at: datetime
    attendee_count: int = 0
    available_spots: int = 0


class EventDetailOut(EventOut):
    attendees: List[AttendanceOut]
    vendors: List[VendorSummary]


class PaymentQROut(APIModel):
    event_id: str
    amount: float
    payment_uri: str
    qr_code_url: str
