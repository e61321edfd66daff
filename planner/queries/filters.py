"""
Search & Filter Functions

Every page lists its whole collection and narrows it down here.
All functions are pure: they take records and return a new list in
the same order.

Text search is a case-insensitive substring match over a fixed set of
fields per entity. An empty query matches everything. An enum filter of
None means "all".
"""

from typing import Iterable, Optional, Union

from planner.models import (
    Expense,
    ExpenseStatus,
    Guest,
    GuestSide,
    Note,
    RSVPStatus,
    Task,
    TaskPriority,
    TaskStatus,
    TimelineEvent,
    Vendor,
    VendorStatus,
)


def matches_text(query: Optional[str], *fields: Optional[str]) -> bool:
    """True if the query is empty or occurs in any of the given fields."""
    needle = (query or "").strip().lower()
    if not needle:
        return True
    return any(needle in field.lower() for field in fields if field)


def filter_tasks(
    tasks: Iterable[Task],
    query: Optional[str] = None,
    status: Optional[TaskStatus] = None,
    priority: Optional[TaskPriority] = None,
) -> list[Task]:
    return [
        task for task in tasks
        if matches_text(query, task.title)
        and (status is None or task.status == status)
        and (priority is None or task.priority == priority)
    ]


def filter_guests(
    guests: Iterable[Guest],
    query: Optional[str] = None,
    side: Optional[GuestSide] = None,
    rsvp: Optional[RSVPStatus] = None,
) -> list[Guest]:
    return [
        guest for guest in guests
        if matches_text(query, guest.full_name, guest.email)
        and (side is None or guest.side == side)
        and (rsvp is None or guest.rsvp == rsvp)
    ]


def filter_expenses(
    expenses: Iterable[Expense],
    query: Optional[str] = None,
    status: Optional[ExpenseStatus] = None,
    category: Optional[str] = None,
) -> list[Expense]:
    return [
        expense for expense in expenses
        if matches_text(query, expense.title, expense.category, expense.description)
        and (status is None or expense.status == status)
        and (category is None or expense.category == category)
    ]


def filter_vendors(
    vendors: Iterable[Vendor],
    query: Optional[str] = None,
    status: Optional[VendorStatus] = None,
    category: Optional[str] = None,
) -> list[Vendor]:
    return [
        vendor for vendor in vendors
        if matches_text(
            query,
            vendor.name,
            vendor.category,
            vendor.contact_name,
            vendor.email,
            vendor.notes,
        )
        and (status is None or vendor.status == status)
        and (category is None or vendor.category == category)
    ]


def filter_events(
    events: Iterable[TimelineEvent],
    query: Optional[str] = None,
) -> list[TimelineEvent]:
    return [
        event for event in events
        if matches_text(query, event.title, event.description, event.location)
    ]


def filter_notes(
    notes: Iterable[Note],
    query: Optional[str] = None,
    tag: Optional[str] = None,
) -> list[Note]:
    return [
        note for note in notes
        if matches_text(query, note.title, note.content, *note.tags)
        and (tag is None or tag in note.tags)
    ]


# Choices for the category / tag dropdowns

def distinct_categories(records: Iterable[Union[Expense, Vendor]]) -> list[str]:
    """Sorted distinct categories of expenses or vendors."""
    return sorted({record.category for record in records if record.category})


def distinct_tags(notes: Iterable[Note]) -> list[str]:
    return sorted({tag for note in notes for tag in note.tags})
