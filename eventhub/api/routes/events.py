from fastapi import APIRouter, Depends, Query, status
from eventhub.schemas import (
    EventCreate,
    EventUpdate,
    EventOut,
    EventDetailOut,
    AttendanceOut,
    AssignVendorRequest,
    PaymentQROut,
    MessageOut,
)
from eventhub.db.session import get_repository
from eventhub.db.repositories import Repository
from eventhub.db.models import EventStatusEnum, RoleEnum
from eventhub.services.event_service import EventService
from eventhub.services.attendance_service import AttendanceService
from eventhub.auth import get_current_user, role_required
from typing import List, Optional

router = APIRouter(prefix="/events", tags=["events"])


def get_event_service(repo: Repository = Depends(get_repository)) -> EventService:
    return EventService(repo)


def get_attendance_service(repo: Repository = Depends(get_repository)) -> AttendanceService:
    return AttendanceService(repo)


@router.get("", response_model=List[EventOut])
async def get_events(
    category: Optional[str] = Query(None, description="Filter by category (case-insensitive)"),
    event_status: Optional[EventStatusEnum] = Query(None, alias="status", description="Filter by event status"),
    search: Optional[str] = Query(None, description="Substring search in title and description"),
    event_service: EventService = Depends(get_event_service)
):
    """
    List all events with attendee counts and available spots.
    - category: exact category match, case-insensitive
    - status: upcoming, ongoing, completed or cancelled
    - search: substring match on title and description
    """
    return await event_service.list_events(category=category, status=event_status, search=search)


@router.post("", response_model=EventOut, status_code=status.HTTP_201_CREATED)
async def create_event_endpoint(
    payload: EventCreate,
    user=Depends(role_required(RoleEnum.organizer)),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.create_event(payload, user.id)


@router.get("/{event_id}", response_model=EventDetailOut)
async def get_event_detail(
    event_id: str,
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.get_event(event_id)


@router.put("/{event_id}", response_model=EventOut)
async def update_event_endpoint(
    event_id: str,
    payload: EventUpdate,
    user=Depends(role_required(RoleEnum.organizer)),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.update_event(user.id, event_id, payload)


@router.delete("/{event_id}", response_model=MessageOut)
async def delete_event_endpoint(
    event_id: str,
    user=Depends(role_required(RoleEnum.organizer)),
    event_service: EventService = Depends(get_event_service)
):
    await event_service.delete_event(user.id, event_id)
    return {"message": "Event deleted successfully"}


@router.post("/{event_id}/attend", response_model=AttendanceOut, status_code=status.HTTP_201_CREATED)
async def attend_event(
    event_id: str,
    user=Depends(get_current_user),
    attendance_service: AttendanceService = Depends(get_attendance_service)
):
    return await attendance_service.register(user, event_id)


@router.delete("/{event_id}/attend", response_model=AttendanceOut)
async def cancel_attendance(
    event_id: str,
    user=Depends(get_current_user),
    attendance_service: AttendanceService = Depends(get_attendance_service)
):
    return await attendance_service.cancel(user, event_id)


@router.get("/{event_id}/attendees", response_model=List[AttendanceOut])
async def get_event_attendees(
    event_id: str,
    attendance_service: AttendanceService = Depends(get_attendance_service)
):
    return await attendance_service.list_attendees(event_id)


@router.get("/{event_id}/payment-qr", response_model=PaymentQROut)
async def get_payment_qr(
    event_id: str,
    event_service: EventService = Depends(get_event_service)
):
    """
    Payment URI for the event price and the URL of its rendered QR code.
    Nothing is charged or verified here.
    """
    return await event_service.payment_qr(event_id)


@router.post("/{event_id}/vendors", response_model=EventOut)
async def assign_vendor_endpoint(
    event_id: str,
    payload: AssignVendorRequest,
    user=Depends(role_required(RoleEnum.organizer)),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.assign_vendor(user.id, event_id, payload.vendor_id)


@router.delete("/{event_id}/vendors/{vendor_id}", response_model=EventOut)
async def unassign_vendor_endpoint(
    event_id: str,
    vendor_id: str,
    user=Depends(role_required(RoleEnum.organizer)),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.unassign_vendor(user.id, event_id, vendor_id)
