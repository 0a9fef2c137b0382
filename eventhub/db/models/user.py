from dataclasses import dataclass, field
from datetime import datetime, timezone
import uuid
import enum


def new_id() -> str:
    return uuid.uuid4().hex


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class RoleEnum(str, enum.Enum):
    organizer = "organizer"
    vendor = "vendor"
    attendee = "attendee"


@dataclass
class User:
    name: str
    email: str
    hashed_password: str
    role: RoleEnum = RoleEnum.attendee
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
