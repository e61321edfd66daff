"""Timeline event accessor."""

from planner.models import TimelineEvent, TimelineEventCreate, TimelineEventUpdate
from planner.repositories.base import CollectionRepository


class TimelineRepository(
    CollectionRepository[TimelineEvent, TimelineEventCreate, TimelineEventUpdate]
):
    """
    Events of the day(s), earliest first.

    Updates are checked against the stored event, so a patch can't
    leave the end time before the start time.
    """

    collection = "timeline"
    record_model = TimelineEvent
    create_model = TimelineEventCreate
    update_model = TimelineEventUpdate

    order_by = "event_date"
    descending = False

    validate_merged = True

    def _sort_key(self, record: TimelineEvent) -> tuple:
        # Same-day events follow their start time; untimed ones lead the day
        return (record.event_date, record.start_time or "")
