"""
Tests for budget scenarios: the single-active rule, cloning and deletion.
"""

from decimal import Decimal

import pytest

from planner.models import BudgetScenarioCreate, ExpenseDisposition, ExpenseStatus
from planner.repositories import ExpenseRepository, ScenarioRepository
from planner.services.storage import NotFoundError


@pytest.fixture
def expenses(store):
    return ExpenseRepository(store)


@pytest.fixture
def scenarios(store, expenses):
    return ScenarioRepository(store, expenses=expenses)


def add_expense(run, expenses, scenario_id, title, amount, status="planned", category="Misc"):
    return run(expenses.create({
        "title": title,
        "category": category,
        "amount": amount,
        "status": status,
        "scenario_id": scenario_id,
    }))


class TestSingleActive:
    """Tests that at most one scenario is active."""

    def test_creating_active_scenario_deactivates_previous(self, scenarios, run):
        """Test that a new active scenario switches the old one off."""
        a = run(scenarios.create({"name": "A", "is_active": True}))
        b = run(scenarios.create({"name": "B", "is_active": True}))

        assert run(scenarios.get(a)).is_active is False
        assert run(scenarios.get(b)).is_active is True
        assert run(scenarios.get_active_scenario()).id == b

    def test_inactive_create_leaves_active_alone(self, scenarios, run):
        """Test that an inactive scenario doesn't touch the active one."""
        a = run(scenarios.create({"name": "A", "is_active": True}))
        run(scenarios.create(BudgetScenarioCreate(name="B")))
        assert run(scenarios.get_active_scenario()).id == a

    def test_activate(self, scenarios, run):
        """Test that activating one scenario deactivates every other."""
        a = run(scenarios.create({"name": "A", "is_active": True}))
        b = run(scenarios.create({"name": "B"}))
        c = run(scenarios.create({"name": "C"}))

        run(scenarios.activate(c))

        active = [s.id for s in run(scenarios.list()) if s.is_active]
        assert active == [c]
        assert run(scenarios.get(a)).is_active is False
        assert run(scenarios.get(b)).is_active is False

    def test_reactivating_active_scenario_keeps_it_active(self, scenarios, run):
        """Test that activating the active scenario is a no-op."""
        a = run(scenarios.create({"name": "A", "is_active": True}))
        run(scenarios.activate(a))
        assert run(scenarios.get_active_scenario()).id == a

    def test_no_active_scenario(self, scenarios, run):
        """Test that None is returned when nothing is active."""
        run(scenarios.create({"name": "A"}))
        assert run(scenarios.get_active_scenario()) is None

    def test_newest_wins_when_several_active(self, scenarios, store, run):
        """Test that a store left with two active scenarios resolves to the newest."""
        run(store.add_document("budgetScenarios", {"name": "Old", "is_active": True}))
        newest = run(store.add_document("budgetScenarios", {"name": "New", "is_active": True}))
        assert run(scenarios.get_active_scenario()).id == newest

    def test_update_clears_description(self, scenarios, run):
        """Test that a blank description removes the stored one."""
        a = run(scenarios.create({"name": "A", "description": "Small venue"}))
        run(scenarios.update(a, {"description": ""}))
        assert run(scenarios.get(a)).description is None

    def test_update_missing_scenario_raises(self, scenarios, run):
        """Test that updating a missing scenario raises NotFoundError."""
        with pytest.raises(NotFoundError):
            run(scenarios.update("nope", {"name": "x"}))


class TestCloneScenario:
    """Tests for copying a scenario with its expenses."""

    def test_clone_copies_expenses(self, scenarios, expenses, run):
        """Test that every expense is copied into the new scenario."""
        s1 = run(scenarios.create({"name": "S1", "description": "Base plan", "is_active": True}))
        e1 = add_expense(run, expenses, s1, "E1", "100", status="planned", category="Venue")
        e2 = add_expense(run, expenses, s1, "E2", "50", status="paid", category="Music")

        s2 = run(scenarios.clone_scenario(s1, "S2"))

        clone = run(scenarios.get(s2))
        assert clone.name == "S2"
        assert clone.description == "Base plan"
        assert clone.is_active is False
        assert run(scenarios.get_active_scenario()).id == s1

        copied = {e.title: e for e in run(expenses.list(scenario_id=s2))}
        assert set(copied) == {"E1", "E2"}
        assert {copied["E1"].id, copied["E2"].id}.isdisjoint({e1, e2})
        assert copied["E1"].amount == Decimal("100")
        assert copied["E1"].status == ExpenseStatus.PLANNED
        assert copied["E1"].category == "Venue"
        assert copied["E2"].amount == Decimal("50")
        assert copied["E2"].status == ExpenseStatus.PAID

        # Source untouched
        assert len(run(expenses.list(scenario_id=s1))) == 2

    def test_clone_of_empty_scenario(self, scenarios, expenses, run):
        """Test that a scenario without expenses clones cleanly."""
        s1 = run(scenarios.create({"name": "S1"}))
        s2 = run(scenarios.clone_scenario(s1, "Copy"))
        assert run(expenses.list(scenario_id=s2)) == []

    def test_clone_missing_source_raises(self, scenarios, store, run):
        """Test that cloning a missing scenario fails without writing."""
        with pytest.raises(NotFoundError, match="Source scenario not found"):
            run(scenarios.clone_scenario("nope", "Copy"))
        assert run(store.list_documents("budgetScenarios")) == []


class TestDeleteScenario:
    """Tests for deleting a scenario and handling its expenses."""

    def test_orphan_keeps_expenses(self, scenarios, expenses, run):
        """Test that the default leaves expenses pointing at the deleted id."""
        s1 = run(scenarios.create({"name": "S1"}))
        e1 = add_expense(run, expenses, s1, "E1", "10")

        run(scenarios.delete(s1))

        assert run(scenarios.get(s1)) is None
        expense = run(expenses.get(e1))
        assert expense.scenario_id == s1
        assert list(run(expenses.list_by_scenario())) == [s1]

    def test_cascade_deletes_expenses(self, scenarios, expenses, run):
        """Test that cascade removes the scenario's expenses only."""
        s1 = run(scenarios.create({"name": "S1"}))
        s2 = run(scenarios.create({"name": "S2"}))
        add_expense(run, expenses, s1, "E1", "10")
        keep = add_expense(run, expenses, s2, "E2", "20")

        run(scenarios.delete(s1, expenses=ExpenseDisposition.CASCADE))

        assert run(scenarios.get(s1)) is None
        assert [e.id for e in run(expenses.list())] == [keep]

    def test_reassign_moves_expenses(self, scenarios, expenses, run):
        """Test that reassign moves every expense to the target scenario."""
        s1 = run(scenarios.create({"name": "S1"}))
        s2 = run(scenarios.create({"name": "S2"}))
        e1 = add_expense(run, expenses, s1, "E1", "10")

        run(scenarios.delete(s1, expenses=ExpenseDisposition.REASSIGN, reassign_to=s2))

        assert run(scenarios.get(s1)) is None
        assert run(expenses.get(e1)).scenario_id == s2

    def test_reassign_needs_target(self, scenarios, run):
        """Test that reassigning without a target is refused."""
        s1 = run(scenarios.create({"name": "S1"}))
        with pytest.raises(ValueError):
            run(scenarios.delete(s1, expenses=ExpenseDisposition.REASSIGN))
        with pytest.raises(ValueError):
            run(scenarios.delete(s1, expenses=ExpenseDisposition.REASSIGN, reassign_to=s1))
        assert run(scenarios.get(s1)) is not None

    def test_reassign_to_missing_target_raises(self, scenarios, expenses, run):
        """Test that a missing target leaves everything in place."""
        s1 = run(scenarios.create({"name": "S1"}))
        e1 = add_expense(run, expenses, s1, "E1", "10")
        with pytest.raises(NotFoundError):
            run(scenarios.delete(s1, expenses=ExpenseDisposition.REASSIGN, reassign_to="nope"))
        assert run(scenarios.get(s1)) is not None
        assert run(expenses.get(e1)).scenario_id == s1
