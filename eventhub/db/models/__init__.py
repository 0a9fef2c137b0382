"""Domain models package."""
from eventhub.db.models.user import User, RoleEnum
from eventhub.db.models.event import Event, EventStatusEnum
from eventhub.db.models.vendor import Vendor, Service, AvailabilityEnum
from eventhub.db.models.attendance import Attendance, AttendanceStatusEnum

__all__ = [
    "User",
    "RoleEnum",
    "Event",
    "EventStatusEnum",
    "Vendor",
    "Service",
    "AvailabilityEnum",
    "Attendance",
    "AttendanceStatusEnum",
]
