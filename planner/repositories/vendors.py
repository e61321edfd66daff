"""Vendor accessor."""

from planner.models import Vendor, VendorCreate, VendorUpdate
from planner.repositories.base import CollectionRepository


class VendorRepository(CollectionRepository[Vendor, VendorCreate, VendorUpdate]):
    collection = "vendors"
    record_model = Vendor
    create_model = VendorCreate
    update_model = VendorUpdate
