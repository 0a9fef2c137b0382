from dataclasses import asdict
from typing import List

from eventhub.db.repositories import Repository
from eventhub.db.models import Attendance, AttendanceStatusEnum, User
from eventhub.db.models.event import OPEN_STATUSES
from eventhub.core.exceptions import CapacityExceededError, ConflictError, NotFoundError, ValidationError
from eventhub.core.logging import logger


class AttendanceService:
    def __init__(self, repo: Repository):
        self.repo = repo

    async def register(self, user: User, event_id: str) -> dict:
        """
        Register ``user`` for an event.

        The duplicate and capacity checks run under the same lock as the
        insert, so concurrent registrations cannot overfill an event.
        """
        async with self.repo.transaction("events", "attendance"):
            event = self.repo.get_event(event_id)
            if event is None:
                raise NotFoundError("Event not found")
            if event.status not in OPEN_STATUSES:
                raise ValidationError(f"Event is {event.status.value} and not open for registration")
            if self.repo.active_attendance(event.id, user.id) is not None:
                raise ConflictError("Already registered for this event")
            if self.repo.active_attendee_count(event.id) >= event.capacity:
                raise CapacityExceededError(f"Event is at full capacity ({event.capacity} attendees)")

            attendance = self.repo.insert_attendance(Attendance(
                event_id=event.id,
                user_id=user.id,
                user_name=user.name,
                user_email=user.email,
            ))

        logger.info(f"User {user.id} registered for event {event_id}")
        return asdict(attendance)

    async def cancel(self, user: User, event_id: str) -> dict:
        async with self.repo.transaction("events", "attendance"):
            if self.repo.get_event(event_id) is None:
                raise NotFoundError("Event not found")
            attendance = self.repo.active_attendance(event_id, user.id)
            if attendance is None:
                raise NotFoundError("No active registration for this event")
            self.repo.update_attendance(attendance.id, status=AttendanceStatusEnum.cancelled)

        logger.info(f"User {user.id} cancelled attendance for event {event_id}")
        return asdict(attendance)

    async def list_attendees(self, event_id: str) -> List[dict]:
        if self.repo.get_event(event_id) is None:
            raise NotFoundError("Event not found")
        return [asdict(a) for a in self.repo.attendance_for_event(event_id)]
