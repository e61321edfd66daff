"""Guest accessor."""

from planner.models import Guest, GuestCreate, GuestUpdate
from planner.repositories.base import CollectionRepository


class GuestRepository(CollectionRepository[Guest, GuestCreate, GuestUpdate]):
    """Guests, alphabetical by first name."""

    collection = "guests"
    record_model = Guest
    create_model = GuestCreate
    update_model = GuestUpdate

    order_by = "first_name"
    descending = False
