"""Vendor profiles, their service catalogue and availability."""
import math
from dataclasses import asdict
from typing import List

from eventhub.schemas import VendorProfileIn, ServiceCreate
from eventhub.db.repositories import Repository
from eventhub.db.models import Vendor, Service, AvailabilityEnum
from eventhub.core.exceptions import NotFoundError, ValidationError
from eventhub.core.logging import logger


def vendor_to_dict(repo: Repository, vendor: Vendor) -> dict:
    data = asdict(vendor)
    owner = repo.get_user(vendor.user_id)
    data["user"] = {"name": owner.name, "email": owner.email} if owner else None
    return data


def vendor_to_summary(repo: Repository, vendor: Vendor) -> dict:
    """Directory view: everything except the service catalogue."""
    data = vendor_to_dict(repo, vendor)
    data.pop("services")
    return data


class VendorService:
    def __init__(self, repo: Repository):
        self.repo = repo

    def _require_profile(self, user_id: str) -> Vendor:
        vendor = self.repo.get_vendor_by_user(user_id)
        if vendor is None:
            raise NotFoundError("Vendor profile not found")
        return vendor

    async def upsert_profile(self, user_id: str, payload: VendorProfileIn) -> dict:
        """
        Create the caller's profile on first submission, update it afterwards.

        A user never ends up with more than one profile; repeated calls only
        replace the descriptive fields.
        """
        fields = payload.model_dump()
        async with self.repo.transaction("vendors"):
            vendor = self.repo.get_vendor_by_user(user_id)
            if vendor is not None:
                self.repo.update_vendor(vendor.id, **fields)
                logger.info(f"Vendor profile {vendor.id} updated")
            else:
                vendor = self.repo.insert_vendor(Vendor(user_id=user_id, **fields))
                logger.info(f"Vendor profile {vendor.id} created for user {user_id}")
        return vendor_to_dict(self.repo, vendor)

    async def get_profile(self, user_id: str) -> dict:
        return vendor_to_dict(self.repo, self._require_profile(user_id))

    async def get_vendor(self, vendor_id: str) -> dict:
        vendor = self.repo.get_vendor(vendor_id)
        if vendor is None:
            raise NotFoundError("Vendor not found")
        return vendor_to_dict(self.repo, vendor)

    async def list_vendors(self) -> List[dict]:
        vendors = sorted(self.repo.list_vendors(), key=lambda v: v.created_at)
        return [vendor_to_summary(self.repo, v) for v in vendors]

    async def add_service(self, user_id: str, payload: ServiceCreate) -> dict:
        if not math.isfinite(payload.price) or payload.price < 0:
            raise ValidationError("Price must be a finite number of at least 0")
        async with self.repo.transaction("vendors"):
            vendor = self._require_profile(user_id)
            service = Service(**payload.model_dump())
            vendor.services.append(service)
        logger.info(f"Service {service.id} added to vendor {vendor.id}")
        return asdict(service)

    async def remove_service(self, user_id: str, service_id: str) -> None:
        async with self.repo.transaction("vendors"):
            vendor = self._require_profile(user_id)
            service = vendor.find_service(service_id)
            if service is None:
                raise NotFoundError("Service not found")
            vendor.services.remove(service)
        logger.info(f"Service {service_id} removed from vendor {vendor.id}")

    async def set_availability(self, user_id: str, value) -> dict:
        try:
            availability = AvailabilityEnum(value)
        except ValueError:
            allowed = ", ".join(a.value for a in AvailabilityEnum)
            raise ValidationError(f"Availability must be one of: {allowed}")

        async with self.repo.transaction("vendors"):
            vendor = self._require_profile(user_id)
            self.repo.update_vendor(vendor.id, availability=availability)
        logger.info(f"Vendor {vendor.id} is now {availability.value}")
        return vendor_to_dict(self.repo, vendor)

