"""Search and filter package."""

from planner.queries.filters import (
    distinct_categories,
    distinct_tags,
    filter_events,
    filter_expenses,
    filter_guests,
    filter_notes,
    filter_tasks,
    filter_vendors,
    matches_text,
)

__all__ = [
    "distinct_categories",
    "distinct_tags",
    "filter_events",
    "filter_expenses",
    "filter_guests",
    "filter_notes",
    "filter_tasks",
    "filter_vendors",
    "matches_text",
]
