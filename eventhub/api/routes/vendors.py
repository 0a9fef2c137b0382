from fastapi import APIRouter, Depends, status
from eventhub.schemas import (
    VendorProfileIn,
    VendorOut,
    VendorSummary,
    ServiceCreate,
    ServiceOut,
    AvailabilityUpdate,
    EventOut,
    MessageOut,
)
from eventhub.db.session import get_repository
from eventhub.db.repositories import Repository
from eventhub.db.models import RoleEnum
from eventhub.services.vendor_service import VendorService
from eventhub.services.event_service import EventService
from eventhub.auth import role_required
from typing import List

router = APIRouter(prefix="/vendors", tags=["vendors"])
vendor_only = role_required(RoleEnum.vendor)


def get_vendor_service(repo: Repository = Depends(get_repository)) -> VendorService:
    return VendorService(repo)


def get_event_service(repo: Repository = Depends(get_repository)) -> EventService:
    return EventService(repo)


@router.get("", response_model=List[VendorSummary])
async def list_vendors(vendor_service: VendorService = Depends(get_vendor_service)):
    """Vendor directory. Service catalogues are left out."""
    return await vendor_service.list_vendors()


@router.post("/profile", response_model=VendorOut)
async def upsert_profile(
    payload: VendorProfileIn,
    user=Depends(vendor_only),
    vendor_service: VendorService = Depends(get_vendor_service)
):
    return await vendor_service.upsert_profile(user.id, payload)


@router.get("/profile/me", response_model=VendorOut)
async def get_my_profile(
    user=Depends(vendor_only),
    vendor_service: VendorService = Depends(get_vendor_service)
):
    return await vendor_service.get_profile(user.id)


@router.get("/events/me", response_model=List[EventOut])
async def get_my_events(
    user=Depends(vendor_only),
    event_service: EventService = Depends(get_event_service)
):
    return await event_service.list_events_for_vendor(user.id)


@router.post("/services", response_model=ServiceOut, status_code=status.HTTP_201_CREATED)
async def add_service(
    payload: ServiceCreate,
    user=Depends(vendor_only),
    vendor_service: VendorService = Depends(get_vendor_service)
):
    return await vendor_service.add_service(user.id, payload)


@router.delete("/services/{service_id}", response_model=MessageOut)
async def remove_service(
    service_id: str,
    user=Depends(vendor_only),
    vendor_service: VendorService = Depends(get_vendor_service)
):
    await vendor_service.remove_service(user.id, service_id)
    return {"message": "Service removed successfully"}


@router.put("/availability", response_model=VendorOut)
async def update_availability(
    payload: AvailabilityUpdate,
    user=Depends(vendor_only),
    vendor_service: VendorService = Depends(get_vendor_service)
):
    return await vendor_service.set_availability(user.id, payload.availability)


# Declared last so the fixed paths above take precedence
@router.get("/{vendor_id}", response_model=VendorOut)
async def get_vendor(
    vendor_id: str,
    vendor_service: VendorService = Depends(get_vendor_service)
):
    return await vendor_service.get_vendor(vendor_id)
