import math
from dataclasses import asdict
from typing import List, Optional
from urllib.parse import quote, urlencode

from eventhub.schemas import EventCreate, EventUpdate
from eventhub.db.repositories import Repository
from eventhub.db.models import Event, EventStatusEnum
from eventhub.core.config import settings
from eventhub.core.exceptions import ConflictError, ForbiddenError, NotFoundError, ValidationError
from eventhub.core.logging import logger
from eventhub.services.vendor_service import vendor_to_summary

# Fields that cannot be cleared once set
REQUIRED_EVENT_FIELDS = ("title", "date", "capacity", "price", "status")


def event_to_dict(repo: Repository, ev: Event) -> dict:
    """Flatten an event and attach attendee counts."""
    attendee_count = repo.active_attendee_count(ev.id)
    organizer = repo.get_user(ev.organizer)
    return {
        "id": ev.id,
        "title": ev.title,
        "description": ev.description,
        "category": ev.category,
        "date": ev.date,
        "location": ev.location,
        "capacity": ev.capacity,
        "price": ev.price,
        "organizer": ev.organizer,
        "organizer_name": organizer.name if organizer else None,
        "organizer_email": organizer.email if organizer else None,
        "vendor_ids": sorted(ev.vendor_ids),
        "status": ev.status,
        "created_at": ev.created_at,
        "attendee_count": attendee_count,
        "available_spots": max(0, ev.capacity - attendee_count),
    }


def build_payment_uri(ev: Event) -> str:
    """UPI deep link asking the payer to transfer the event price."""
    return (
        f"upi://pay?pa={settings.PAYMENT_UPI_ID}"
        f"&pn={quote(ev.title)}"
        f"&am={ev.price:.2f}"
        f"&tn={quote(f'Payment for {ev.title}')}"
    )


class EventService:
    def __init__(self, repo: Repository):
        self.repo = repo

    def _require_event(self, event_id: str) -> Event:
        ev = self.repo.get_event(event_id)
        if ev is None:
            raise NotFoundError("Event not found")
        return ev

    def _owned_event(self, actor_id: str, event_id: str) -> Event:
        ev = self._require_event(event_id)
        if ev.organizer != actor_id:
            logger.warning(f"User {actor_id} tried to modify event {event_id} owned by {ev.organizer}")
            raise ForbiddenError("Not authorized to modify this event")
        return ev

    async def create_event(self, payload: EventCreate, organizer_id: str) -> dict:
        if payload.capacity <= 0:
            raise ValidationError("Capacity must be greater than 0")
        if not math.isfinite(payload.price) or payload.price < 0:
            raise ValidationError("Price must be a finite number of at least 0")

        async with self.repo.transaction("events"):
            ev = self.repo.insert_event(Event(organizer=organizer_id, **payload.model_dump()))
        logger.info(f"Event {ev.id} created by {organizer_id}")
        return event_to_dict(self.repo, ev)

    async def update_event(self, actor_id: str, event_id: str, payload: EventUpdate) -> dict:
        fields = payload.model_dump(exclude_unset=True)
        for name in REQUIRED_EVENT_FIELDS:
            if name in fields and fields[name] is None:
                raise ValidationError(f"Field '{name}' cannot be null")

        async with self.repo.transaction("events", "attendance"):
            ev = self._owned_event(actor_id, event_id)
            if "capacity" in fields and fields["capacity"] < self.repo.active_attendee_count(ev.id):
                raise ValidationError("Capacity cannot be lower than the number of registered attendees")
            self.repo.update_event(ev.id, **fields)

        logger.info(f"Event {event_id} updated by {actor_id}: {sorted(fields)}")
        return event_to_dict(self.repo, ev)

    async def delete_event(self, actor_id: str, event_id: str) -> None:
        async with self.repo.transaction("events", "attendance"):
            self._owned_event(actor_id, event_id)
            self.repo.delete_event(event_id)
        logger.info(f"Event {event_id} deleted by {actor_id}")

    async def assign_vendor(self, actor_id: str, event_id: str, vendor_id: str) -> dict:
        async with self.repo.transaction("events", "vendors"):
            ev = self._owned_event(actor_id, event_id)
            if self.repo.get_vendor(vendor_id) is None:
                raise NotFoundError("Vendor not found")
            if vendor_id in ev.vendor_ids:
                raise ConflictError("Vendor already assigned to this event")
            ev.vendor_ids.add(vendor_id)
        logger.info(f"Vendor {vendor_id} assigned to event {event_id}")
        return event_to_dict(self.repo, ev)

    async def unassign_vendor(self, actor_id: str, event_id: str, vendor_id: str) -> dict:
        async with self.repo.transaction("events"):
            ev = self._owned_event(actor_id, event_id)
            if vendor_id not in ev.vendor_ids:
                raise NotFoundError("Vendor is not assigned to this event")
            ev.vendor_ids.discard(vendor_id)
        logger.info(f"Vendor {vendor_id} removed from event {event_id}")
        return event_to_dict(self.repo, ev)

    async def list_events(
        self,
        category: Optional[str] = None,
        status: Optional[EventStatusEnum] = None,
        search: Optional[str] = None,
    ) -> List[dict]:
        def matches(ev: Event) -> bool:
            if category and (ev.category or "").lower() != category.lower():
                return False
            if status and ev.status != status:
                return False
            if search:
                haystack = f"{ev.title} {ev.description or ''}".lower()
                if search.lower() not in haystack:
                    return False
            return True

        events = sorted(self.repo.find_events(matches), key=lambda ev: ev.created_at)
        return [event_to_dict(self.repo, ev) for ev in events]

    async def get_event(self, event_id: str) -> dict:
        ev = self._require_event(event_id)
        data = event_to_dict(self.repo, ev)
        data["attendees"] = [asdict(a) for a in self.repo.attendance_for_event(ev.id)]
        data["vendors"] = [
            vendor_to_summary(self.repo, vendor)
            for vendor in (self.repo.get_vendor(vid) for vid in sorted(ev.vendor_ids))
            if vendor is not None
        ]
        return data

    async def payment_qr(self, event_id: str) -> dict:
        ev = self._require_event(event_id)
        payment_uri = build_payment_uri(ev)
        query = urlencode({"size": settings.QR_CODE_SIZE, "data": payment_uri})
        return {
            "event_id": ev.id,
            "amount": ev.price,
            "payment_uri": payment_uri,
            "qr_code_url": f"{settings.QR_SERVICE_URL}?{query}",
        }

    async def list_events_for_vendor(self, user_id: str) -> List[dict]:
        """Events the caller's vendor profile has been assigned to."""
        vendor = self.repo.get_vendor_by_user(user_id)
        if vendor is None:
            raise NotFoundError("Vendor profile not found")
        events = sorted(self.repo.events_for_vendor(vendor.id), key=lambda ev: ev.created_at)
        return [event_to_dict(self.repo, ev) for ev in events]
