"""
Dashboard Statistics

Pure counting over freshly listed records. The loader that fetches
those records (and races them against the timeout) lives in
planner.orchestrator.DashboardFlow.
"""

from collections import Counter
from datetime import datetime
from typing import Iterable, Optional

from planner.models import (
    DashboardStats,
    Expense,
    Guest,
    GuestSide,
    GuestStats,
    Note,
    NoteStats,
    RSVPStatus,
    Task,
    TaskStats,
    TaskStatus,
    TimelineEvent,
    TimelineStats,
    Vendor,
    VendorStats,
    VendorStatus,
)
from planner.stats.budget import DEFAULT_TOP_CATEGORIES, summarize_expenses


class DashboardTimeoutError(Exception):
    """The dashboard's parallel load did not finish before the timeout."""

    def __init__(self, timeout_seconds: float):
        self.timeout_seconds = timeout_seconds
        super().__init__(
            f"Timeout: loading the dashboard took longer than {timeout_seconds:g}s. "
            "Check the connection to the document store."
        )


def task_stats(tasks: Iterable[Task]) -> TaskStats:
    counts = Counter(task.status for task in tasks)
    return TaskStats(
        total=sum(counts.values()),
        todo=counts[TaskStatus.TODO],
        doing=counts[TaskStatus.DOING],
        done=counts[TaskStatus.DONE],
    )


def guest_stats(guests: Iterable[Guest]) -> GuestStats:
    """
    RSVP and side counts plus the head count.

    `total` counts guest records; `head_count` counts people, so a
    guest bringing a companion adds two.
    """
    guests = list(guests)
    rsvp = Counter(guest.rsvp for guest in guests)
    sides = Counter(guest.side for guest in guests)
    return GuestStats(
        total=len(guests),
        head_count=sum(guest.head_count for guest in guests),
        confirmed=rsvp[RSVPStatus.YES],
        pending=rsvp[RSVPStatus.SENT],
        not_sent=rsvp[RSVPStatus.NOT_SENT],
        declined=rsvp[RSVPStatus.NO],
        bride_side=sides[GuestSide.BRIDE],
        groom_side=sides[GuestSide.GROOM],
    )


def vendor_stats(vendors: Iterable[Vendor]) -> VendorStats:
    counts = Counter(vendor.status for vendor in vendors)
    return VendorStats(
        total=sum(counts.values()),
        booked=counts[VendorStatus.BOOKED],
        considering=counts[VendorStatus.CONSIDERING],
        rejected=counts[VendorStatus.REJECTED],
    )


def timeline_stats(
    events: Iterable[TimelineEvent],
    now: Optional[datetime] = None,
) -> TimelineStats:
    """
    Split events into past and upcoming.

    An event is past once its start (date plus start time, midnight when
    there is none) is before `now`. Times are local, so `now` is naive
    local time too.
    """
    now = now or datetime.now()
    events = list(events)
    past = sum(1 for event in events if event.starts_at < now)
    return TimelineStats(total=len(events), upcoming=len(events) - past, past=past)


def note_stats(notes: Iterable[Note]) -> NoteStats:
    notes = list(notes)
    return NoteStats(total=len(notes), with_tags=sum(1 for note in notes if note.tags))


def compute_dashboard_stats(
    tasks: Iterable[Task],
    guests: Iterable[Guest],
    expenses: Iterable[Expense],
    vendors: Iterable[Vendor],
    events: Iterable[TimelineEvent],
    notes: Iterable[Note],
    now: Optional[datetime] = None,
    top_categories: int = DEFAULT_TOP_CATEGORIES,
) -> DashboardStats:
    """Every dashboard figure from one set of listed records."""
    return DashboardStats(
        tasks=task_stats(tasks),
        guests=guest_stats(guests),
        expenses=summarize_expenses(expenses, top_categories=top_categories),
        vendors=vendor_stats(vendors),
        events=timeline_stats(events, now=now),
        notes=note_stats(notes),
    )
