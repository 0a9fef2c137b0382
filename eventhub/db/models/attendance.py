from dataclasses import dataclass, field
from datetime import datetime
import enum

from eventhub.db.models.user import new_id, utcnow


class AttendanceStatusEnum(str, enum.Enum):
    registered = "registered"
    cancelled = "cancelled"


@dataclass
class Attendance:
    event_id: str
    user_id: str
    user_name: str
    user_email: str
    status: AttendanceStatusEnum = AttendanceStatusEnum.registered
    id: str = field(default_factory=new_id)
    registered_at: datetime = field(default_factory=utcnow)

    @property
    def is_active(self) -> bool:
        return self.status == AttendanceStatusEnum.registered
