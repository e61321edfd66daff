"""
Tests for the Wedding Planner models

Test strategy:
1. Unit tests for individual components (models, validators, statistics)
2. Integration tests for repositories and flows against the in-memory store
3. No real Google Sheets calls in tests (fake worksheets instead)
"""

import pytest
from datetime import date, datetime
from decimal import Decimal

from pydantic import ValidationError

from planner.models import (
    BudgetScenarioCreate,
    BudgetScenarioUpdate,
    Expense,
    ExpenseCreate,
    ExpenseStatus,
    Guest,
    GuestCreate,
    GuestSide,
    NoteCreate,
    NoteUpdate,
    ProjectUpdate,
    RSVPStatus,
    StoredDocument,
    Task,
    TaskCreate,
    TaskStatus,
    TaskUpdate,
    TimelineEvent,
    TimelineEventCreate,
    VendorCreate,
)


class TestTaskModels:
    """Tests for task models."""

    def test_task_defaults(self):
        """Test a task gets the default status, priority and assignee."""
        task = TaskCreate(title="Book the venue")
        assert task.status == TaskStatus.TODO
        assert task.priority.value == "medium"
        assert task.assigned_to.value == "both"

    def test_task_title_strips_whitespace(self):
        """Test that whitespace is stripped from the title."""
        task = TaskCreate(title="  Order flowers  ")
        assert task.title == "Order flowers"

    def test_task_rejects_empty_title(self):
        """Test that a blank title is rejected."""
        with pytest.raises(ValidationError):
            TaskCreate(title="   ")

    def test_task_rejects_unknown_status(self):
        """Test that only todo/doing/done are accepted."""
        with pytest.raises(ValidationError):
            TaskCreate(title="x", status="blocked")

    def test_task_rejects_unknown_field(self):
        """Test that form models reject fields they don't know."""
        with pytest.raises(ValidationError):
            TaskCreate(title="x", colour="red")

    def test_blank_optional_text_is_absent(self):
        """Test that an empty description is not written to the store."""
        task = TaskCreate(title="Call DJ", description="   ")
        assert task.description is None
        assert "description" not in task.to_document()

    def test_update_patch_only_contains_set_fields(self):
        """Test that a partial update serializes only what was given."""
        patch = TaskUpdate(status="done").to_patch()
        assert patch == {"status": "done"}

    def test_update_patch_keeps_explicit_clear(self):
        """Test that clearing a field is written as null."""
        patch = TaskUpdate(category="").to_patch()
        assert patch == {"category": None}


class TestGuestModels:
    """Tests for guest models."""

    def test_head_count_with_companion(self):
        """Test that a guest with a companion counts as two people."""
        guest = Guest(id="g1", first_name="Ola", side=GuestSide.BRIDE, has_companion=True)
        assert guest.head_count == 2

    def test_head_count_alone(self):
        """Test that a guest without a companion counts as one."""
        guest = Guest(id="g1", first_name="Ola", side="groom")
        assert guest.head_count == 1
        assert guest.rsvp == RSVPStatus.NOT_SENT

    def test_full_name_without_last_name(self):
        """Test the full name when only a first name is known."""
        guest = Guest(id="g1", first_name="Ola", side="bride")
        assert guest.full_name == "Ola"

    def test_invalid_email_rejected(self):
        """Test that a malformed email is rejected."""
        with pytest.raises(ValidationError):
            GuestCreate(first_name="Ola", side="bride", email="not-an-email")

    def test_blank_email_allowed(self):
        """Test that an empty email input means no email."""
        guest = GuestCreate(first_name="Ola", side="bride", email="")
        assert guest.email is None

    def test_side_required(self):
        """Test that the side must be given."""
        with pytest.raises(ValidationError):
            GuestCreate(first_name="Ola")


class TestExpenseModels:
    """Tests for expense models."""

    def test_amount_parsed_as_decimal(self):
        """Test that amounts keep their exact decimal value."""
        expense = ExpenseCreate(title="Flowers", category="Decor", amount="123.45", scenario_id="s1")
        assert expense.amount == Decimal("123.45")
        assert expense.to_document()["amount"] == "123.45"

    def test_negative_amount_rejected(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValidationError):
            ExpenseCreate(title="x", category="c", amount=Decimal("-1"), scenario_id="s1")

    def test_too_many_decimal_places_rejected(self):
        """Test that amounts are limited to cents."""
        with pytest.raises(ValidationError):
            ExpenseCreate(title="x", category="c", amount="1.005", scenario_id="s1")

    def test_scenario_required_on_create(self):
        """Test that an expense must belong to a scenario."""
        with pytest.raises(ValidationError):
            ExpenseCreate(title="x", category="c", amount=Decimal("1"))

    def test_paid_amount_cannot_exceed_amount(self):
        """Test the paid-so-far rule."""
        with pytest.raises(ValidationError):
            ExpenseCreate(
                title="Venue",
                category="Venue",
                amount=Decimal("100"),
                paid_amount=Decimal("150"),
                scenario_id="s1",
            )

    def test_effective_paid_prefers_paid_amount(self):
        """Test that an explicit paid amount wins."""
        expense = Expense(
            id="e1", title="Venue", category="Venue",
            amount=Decimal("100"), status=ExpenseStatus.DEPOSIT,
            paid_amount=Decimal("30"), scenario_id="s1",
        )
        assert expense.effective_paid == Decimal("30")
        assert expense.remaining == Decimal("70")

    def test_effective_paid_for_paid_status(self):
        """Test that a paid expense without paid_amount counts in full."""
        expense = Expense(
            id="e1", title="Rings", category="Rings",
            amount=Decimal("80"), status=ExpenseStatus.PAID, scenario_id="s1",
        )
        assert expense.effective_paid == Decimal("80")
        assert expense.remaining == Decimal("0")

    def test_effective_paid_for_planned(self):
        """Test that a planned expense counts as nothing paid."""
        expense = Expense(id="e1", title="Cake", category="Food", amount=Decimal("50"))
        assert expense.effective_paid == Decimal("0")
        assert expense.scenario_id is None


class TestScenarioModels:
    """Tests for budget scenario models."""

    def test_new_scenario_inactive_by_default(self):
        """Test that scenarios start inactive."""
        assert BudgetScenarioCreate(name="Small venue").is_active is False

    def test_blank_description_not_stored(self):
        """Test that a blank description is dropped on create."""
        document = BudgetScenarioCreate(name="Plan A", description="  ").to_document()
        assert "description" not in document

    def test_blank_description_clears_on_update(self):
        """Test that a blank description clears the stored one."""
        assert BudgetScenarioUpdate(description="").to_patch() == {"description": None}


class TestTimelineModels:
    """Tests for timeline event models."""

    def test_time_format_enforced(self):
        """Test that times must be HH:MM."""
        with pytest.raises(ValidationError):
            TimelineEventCreate(title="Ceremony", event_date=date(2027, 6, 12), start_time="25:00")

    def test_end_before_start_rejected(self):
        """Test that an event cannot end before it starts."""
        with pytest.raises(ValidationError):
            TimelineEventCreate(
                title="Dinner",
                event_date=date(2027, 6, 12),
                start_time="18:00",
                end_time="17:30",
            )

    def test_starts_at_uses_start_time(self):
        """Test the event's starting moment."""
        event = TimelineEvent(id="t1", title="Ceremony", event_date=date(2027, 6, 12), start_time="15:30")
        assert event.starts_at == datetime(2027, 6, 12, 15, 30)

    def test_starts_at_defaults_to_midnight(self):
        """Test events without a start time begin at midnight."""
        event = TimelineEvent(id="t1", title="Day after", event_date=date(2027, 6, 13))
        assert event.starts_at == datetime(2027, 6, 13)


class TestNoteModels:
    """Tests for note models."""

    def test_tags_cleaned(self):
        """Test that tags are stripped, deduplicated and blanks dropped."""
        note = NoteCreate(title="Music", content="First dance", tags=[" dj ", "", "dj", "party"])
        assert note.tags == ["dj", "party"]

    def test_tags_default_empty(self):
        """Test that a note without tags has an empty list."""
        assert NoteCreate(title="x", content="y").tags == []

    def test_update_without_tags_leaves_them(self):
        """Test that an update that doesn't mention tags doesn't touch them."""
        assert "tags" not in NoteUpdate(title="New title").to_patch()


class TestProjectAndVendorModels:
    """Tests for the project and vendor models."""

    def test_currency_uppercased(self):
        """Test that the currency code is normalised."""
        assert ProjectUpdate(currency="eur").currency == "EUR"

    def test_vendor_requires_category(self):
        """Test that a vendor needs a category."""
        with pytest.raises(ValidationError):
            VendorCreate(name="Photo Studio")


class TestStoredRecords:
    """Tests for mapping raw store documents to records."""

    def test_from_document_attaches_id_and_timestamps(self):
        """Test that the id and timestamps come from the document envelope."""
        stamp = datetime(2026, 5, 1, 12, 0)
        document = StoredDocument(
            id="abc",
            data={"title": "Send invitations", "status": "doing"},
            created_at=stamp,
            updated_at=stamp,
        )
        task = Task.from_document(document)
        assert task.id == "abc"
        assert task.status == TaskStatus.DOING
        assert task.created_at == stamp

    def test_from_document_ignores_unknown_fields(self):
        """Test that stored fields the model doesn't know are ignored."""
        document = StoredDocument(id="abc", data={"title": "x", "legacyFlag": True})
        assert Task.from_document(document).title == "x"


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
