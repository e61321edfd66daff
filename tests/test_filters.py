"""
Tests for search and filtering.
"""

from datetime import date
from decimal import Decimal

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
from planner.queries import (
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


class TestMatchesText:
    """Tests for the shared text matcher."""

    def test_case_insensitive_substring(self):
        """Test that matching ignores case."""
        assert matches_text("FLOW", "Order flowers")

    def test_empty_query_matches(self):
        """Test that no query means no filtering."""
        assert matches_text("", "anything")
        assert matches_text(None, None)
        assert matches_text("   ", "x")

    def test_missing_fields_ignored(self):
        """Test that None fields never match."""
        assert not matches_text("x", None, "")


class TestEntityFilters:
    """Tests for the per-entity filters."""

    def test_tasks_by_text_status_and_priority(self):
        """Test that all task criteria combine."""
        tasks = [
            Task(id="1", title="Book venue", priority="high"),
            Task(id="2", title="Book DJ", status="done", priority="high"),
            Task(id="3", title="Buy rings"),
        ]
        assert [t.id for t in filter_tasks(tasks, query="book")] == ["1", "2"]
        assert [t.id for t in filter_tasks(tasks, status=TaskStatus.DONE)] == ["2"]
        assert [t.id for t in filter_tasks(tasks, query="book", status=TaskStatus.TODO,
                                           priority=TaskPriority.HIGH)] == ["1"]

    def test_guests_by_name_email_side_and_rsvp(self):
        """Test guest search over name and email."""
        guests = [
            Guest(id="1", first_name="Ola", last_name="Nowak", side="bride", email="ola@example.com"),
            Guest(id="2", first_name="Jan", side="groom", rsvp="yes"),
        ]
        assert [g.id for g in filter_guests(guests, query="nowak")] == ["1"]
        assert [g.id for g in filter_guests(guests, query="example.com")] == ["1"]
        assert [g.id for g in filter_guests(guests, side=GuestSide.GROOM)] == ["2"]
        assert [g.id for g in filter_guests(guests, rsvp=RSVPStatus.NOT_SENT)] == ["1"]

    def test_expenses_by_text_status_and_category(self):
        """Test expense search over title, category and description."""
        expenses = [
            Expense(id="1", title="Roses", category="Flowers", amount=Decimal("100")),
            Expense(id="2", title="Band", category="Music", amount=Decimal("900"),
                    status="paid", description="Live set"),
        ]
        assert [e.id for e in filter_expenses(expenses, query="flow")] == ["1"]
        assert [e.id for e in filter_expenses(expenses, query="live")] == ["2"]
        assert [e.id for e in filter_expenses(expenses, status=ExpenseStatus.PAID)] == ["2"]
        assert [e.id for e in filter_expenses(expenses, category="Flowers")] == ["1"]

    def test_vendors_by_contact(self):
        """Test that vendor search covers the contact person."""
        vendors = [
            Vendor(id="1", name="Foto Studio", category="Photo", contact_name="Marta"),
            Vendor(id="2", name="DJ Max", category="Music", status="booked"),
        ]
        assert [v.id for v in filter_vendors(vendors, query="marta")] == ["1"]
        assert [v.id for v in filter_vendors(vendors, status=VendorStatus.BOOKED)] == ["2"]
        assert [v.id for v in filter_vendors(vendors, category="Photo")] == ["1"]

    def test_events_by_location(self):
        """Test that event search covers the location."""
        events = [
            TimelineEvent(id="1", title="Ceremony", event_date=date(2027, 6, 12), location="St. Anne"),
            TimelineEvent(id="2", title="Party", event_date=date(2027, 6, 12)),
        ]
        assert [e.id for e in filter_events(events, query="anne")] == ["1"]

    def test_notes_by_tag(self):
        """Test note search over content and tags."""
        notes = [
            Note(id="1", title="Music", content="First dance", tags=["dj"]),
            Note(id="2", title="Food", content="No nuts"),
        ]
        assert [n.id for n in filter_notes(notes, query="DJ")] == ["1"]
        assert [n.id for n in filter_notes(notes, tag="dj")] == ["1"]
        assert [n.id for n in filter_notes(notes, query="nuts")] == ["2"]

    def test_order_preserved(self):
        """Test that filters keep the input order."""
        tasks = [Task(id=str(i), title=f"Task {i}") for i in range(5, 0, -1)]
        assert [t.id for t in filter_tasks(tasks, query="task")] == ["5", "4", "3", "2", "1"]


class TestDistinctChoices:
    """Tests for dropdown choices."""

    def test_distinct_categories_sorted(self):
        """Test that categories are deduplicated and sorted."""
        expenses = [
            Expense(id="1", title="a", category="Venue", amount=Decimal("1")),
            Expense(id="2", title="b", category="Cake", amount=Decimal("1")),
            Expense(id="3", title="c", category="Venue", amount=Decimal("1")),
        ]
        assert distinct_categories(expenses) == ["Cake", "Venue"]

    def test_distinct_tags_sorted(self):
        """Test that tags across notes are deduplicated and sorted."""
        notes = [
            Note(id="1", title="a", content="x", tags=["music", "dj"]),
            Note(id="2", title="b", content="y", tags=["dj"]),
        ]
        assert distinct_tags(notes) == ["dj", "music"]
