"""
Repository layer over the in-memory store.

Holds the User, Event, Vendor and Attendance collections. Every operation is
synchronous and total: lookups return ``None`` for unknown ids instead of
raising. Check-then-act sequences in the services run inside
``Repository.transaction`` so capacity and uniqueness invariants hold while
other requests are interleaved on the event loop.
"""
import asyncio
from contextlib import asynccontextmanager
from typing import Callable, Dict, List, Optional, TypeVar

from eventhub.db.models import Attendance, Event, User, Vendor
from eventhub.core.logging import logger

T = TypeVar("T")

COLLECTIONS = ("users", "events", "vendors", "attendance")
IMMUTABLE_FIELDS = ("id", "created_at")


def _update(record, fields: dict):
    for key in IMMUTABLE_FIELDS:
        if key in fields:
            raise ValueError(f"Field '{key}' is immutable")
    for key, value in fields.items():
        if not hasattr(record, key):
            raise ValueError(f"Unknown field '{key}' for {type(record).__name__}")
        setattr(record, key, value)
    return record


class Repository:
    """In-memory collections keyed by primary id."""

    def __init__(self):
        self.users: Dict[str, User] = {}
        self.events: Dict[str, Event] = {}
        self.vendors: Dict[str, Vendor] = {}
        self.attendance: Dict[str, Attendance] = {}
        self._locks = {name: asyncio.Lock() for name in COLLECTIONS}

    @asynccontextmanager
    async def transaction(self, *collections: str):
        """
        Hold the locks of ``collections`` for the duration of the block.

        Locks are always taken in ``COLLECTIONS`` order so two transactions
        over overlapping collections cannot deadlock.
        """
        unknown = set(collections) - set(COLLECTIONS)
        if unknown:
            raise ValueError(f"Unknown collections: {sorted(unknown)}")
        ordered = [name for name in COLLECTIONS if name in collections]
        acquired = []
        try:
            for name in ordered:
                await self._locks[name].acquire()
                acquired.append(name)
            yield self
        finally:
            for name in reversed(acquired):
                self._locks[name].release()

    # Users

    def insert_user(self, user: User) -> User:
        if user.id in self.users:
            raise ValueError(f"Duplicate user id {user.id}")
        self.users[user.id] = user
        logger.debug(f"Inserted user {user.id}")
        return user

    def get_user(self, user_id: str) -> Optional[User]:
        return self.users.get(user_id)

    def get_user_by_email(self, email: str) -> Optional[User]:
        return _first(self.users.values(), lambda u: u.email == email)

    def find_users(self, predicate: Callable[[User], bool]) -> List[User]:
        return [u for u in self.users.values() if predicate(u)]

    # Events

    def insert_event(self, event: Event) -> Event:
        if event.id in self.events:
            raise ValueError(f"Duplicate event id {event.id}")
        self.events[event.id] = event
        logger.debug(f"Inserted event {event.id}")
        return event

    def get_event(self, event_id: str) -> Optional[Event]:
        return self.events.get(event_id)

    def list_events(self) -> List[Event]:
        return list(self.events.values())

    def find_events(self, predicate: Callable[[Event], bool]) -> List[Event]:
        return [e for e in self.events.values() if predicate(e)]

    def events_for_vendor(self, vendor_id: str) -> List[Event]:
        return self.find_events(lambda e: vendor_id in e.vendor_ids)

    def update_event(self, event_id: str, **fields) -> Optional[Event]:
        event = self.events.get(event_id)
        if event is None:
            return None
        return _update(event, fields)

    def delete_event(self, event_id: str) -> bool:
        """Remove an event together with all of its attendance rows."""
        if self.events.pop(event_id, None) is None:
            return False
        orphaned = [a.id for a in self.attendance.values() if a.event_id == event_id]
        for attendance_id in orphaned:
            del self.attendance[attendance_id]
        logger.debug(f"Deleted event {event_id} and {len(orphaned)} attendance records")
        return True

    # Vendors

    def insert_vendor(self, vendor: Vendor) -> Vendor:
        if vendor.id in self.vendors:
            raise ValueError(f"Duplicate vendor id {vendor.id}")
        if self.get_vendor_by_user(vendor.user_id) is not None:
            raise ValueError(f"User {vendor.user_id} already has a vendor profile")
        self.vendors[vendor.id] = vendor
        logger.debug(f"Inserted vendor {vendor.id} for user {vendor.user_id}")
        return vendor

    def get_vendor(self, vendor_id: str) -> Optional[Vendor]:
        return self.vendors.get(vendor_id)

    def get_vendor_by_user(self, user_id: str) -> Optional[Vendor]:
        return _first(self.vendors.values(), lambda v: v.user_id == user_id)

    def list_vendors(self) -> List[Vendor]:
        return list(self.vendors.values())

    def update_vendor(self, vendor_id: str, **fields) -> Optional[Vendor]:
        vendor = self.vendors.get(vendor_id)
        if vendor is None:
            return None
        return _update(vendor, fields)

    # Attendance

    def insert_attendance(self, attendance: Attendance) -> Attendance:
        if attendance.id in self.attendance:
            raise ValueError(f"Duplicate attendance id {attendance.id}")
        self.attendance[attendance.id] = attendance
        return attendance

    def get_attendance(self, attendance_id: str) -> Optional[Attendance]:
        return self.attendance.get(attendance_id)

    def attendance_for_event(self, event_id: str) -> List[Attendance]:
        return [a for a in self.attendance.values() if a.event_id == event_id]

    def active_attendance(self, event_id: str, user_id: str) -> Optional[Attendance]:
        return _first(
            self.attendance.values(),
            lambda a: a.event_id == event_id and a.user_id == user_id and a.is_active,
        )

    def active_attendee_count(self, event_id: str) -> int:
        return sum(1 for a in self.attendance.values() if a.event_id == event_id and a.is_active)

    def update_attendance(self, attendance_id: str, **fields) -> Optional[Attendance]:
        attendance = self.attendance.get(attendance_id)
        if attendance is None:
            return None
        return _update(attendance, fields)


def _first(items, predicate: Callable[[T], bool]) -> Optional[T]:
    for item in items:
        if predicate(item):
            return item
    return None
