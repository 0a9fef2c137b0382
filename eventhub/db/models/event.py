from dataclasses import dataclass, field
from datetime import datetime
from typing import Optional, Set
import enum

from eventhub.db.models.user import new_id, utcnow


class EventStatusEnum(str, enum.Enum):
    upcoming = "upcoming"
    ongoing = "ongoing"
    completed = "completed"
    cancelled = "cancelled"


# Statuses that still accept new attendance
OPEN_STATUSES = (EventStatusEnum.upcoming, EventStatusEnum.ongoing)


@dataclass
class Event:
    title: str
    date: datetime
    capacity: int
    price: float
    organizer: str
    description: Optional[str] = None
    category: Optional[str] = None
    location: Optional[str] = None
    vendor_ids: Set[str] = field(default_factory=set)
    status: EventStatusEnum = EventStatusEnum.upcoming
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)
