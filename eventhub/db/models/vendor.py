from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional
import enum

from eventhub.db.models.user import new_id, utcnow


class AvailabilityEnum(str, enum.Enum):
    available = "available"
    busy = "busy"
    unavailable = "unavailable"


@dataclass
class Service:
    name: str
    price: float
    category: Optional[str] = None
    description: Optional[str] = None
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)


@dataclass
class Vendor:
    user_id: str
    company_name: str
    description: Optional[str] = None
    contact_number: Optional[str] = None
    address: Optional[str] = None
    # insertion order is preserved
    services: List[Service] = field(default_factory=list)
    availability: AvailabilityEnum = AvailabilityEnum.available
    rating: float = 0.0
    total_reviews: int = 0
    id: str = field(default_factory=new_id)
    created_at: datetime = field(default_factory=utcnow)

    def find_service(self, service_id: str) -> Optional[Service]:
        for service in self.services:
            if service.id == service_id:
                return service
        return None
