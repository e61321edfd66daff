"""
Expense accessor with scenario filtering.

DESIGN DECISION: list() always reads the whole collection and filters
by scenario in Python. A per-scenario query sorted by creation time
would need a compound index; at the size of one wedding budget a full
scan is cheaper than maintaining one.
"""

from __future__ import annotations

from typing import Optional

from planner.models import Expense, ExpenseCreate, ExpenseUpdate
from planner.repositories.base import CollectionRepository
from planner.stats.budget import group_by_scenario


class ExpenseRepository(CollectionRepository[Expense, ExpenseCreate, ExpenseUpdate]):
    """
    Expenses, newest first.

    Updates are checked against the stored expense, so a patch can't
    leave paid_amount above amount.
    """

    collection = "expenses"
    record_model = Expense
    create_model = ExpenseCreate
    update_model = ExpenseUpdate

    validate_merged = True

    async def list(self, scenario_id: Optional[str] = None) -> list[Expense]:
        """
        List expenses, optionally only those of one scenario.

        Args:
            scenario_id: Keep only expenses belonging to this scenario
        """
        expenses = await super().list()
        if scenario_id is None:
            return expenses
        return [e for e in expenses if e.scenario_id == scenario_id]

    async def list_by_scenario(self) -> dict[Optional[str], list[Expense]]:
        """All expenses grouped by scenario id, each group newest first."""
        return group_by_scenario(await self.list())

