"""
Budget Aggregation

DESIGN DECISION: Aggregation is DETERMINISTIC and in memory.
Every figure is recomputed from the listed expenses on each page load
and never written back. Sums stay in Decimal so totals match the
amounts the couple typed in.
"""

from collections import defaultdict
from decimal import Decimal
from typing import Iterable, Mapping, Optional

from planner.models import (
    BudgetScenario,
    CategoryTotals,
    Expense,
    ExpenseStatus,
    ExpenseSummary,
    ScenarioSummary,
)


ZERO = Decimal("0")
DEFAULT_TOP_CATEGORIES = 10


def category_breakdown(
    expenses: Iterable[Expense],
    limit: Optional[int] = DEFAULT_TOP_CATEGORIES,
) -> list[CategoryTotals]:
    """
    Group expenses by category.

    Each group sums total, effective paid and remaining (floored at zero).
    Groups are sorted by total, largest first; only the first `limit`
    are kept. Pass limit=None to keep every group.
    """
    groups: dict[str, CategoryTotals] = {}

    for expense in expenses:
        group = groups.get(expense.category)
        if group is None:
            group = groups[expense.category] = CategoryTotals(category=expense.category)
        group.total += expense.amount
        group.paid += expense.effective_paid
        group.count += 1

    for group in groups.values():
        group.remaining = max(group.total - group.paid, ZERO)

    # Stable on ties: categories keep the order they first appeared in
    ranked = sorted(groups.values(), key=lambda g: g.total, reverse=True)
    return ranked if limit is None else ranked[:limit]


def summarize_expenses(
    expenses: Iterable[Expense],
    top_categories: Optional[int] = DEFAULT_TOP_CATEGORIES,
) -> ExpenseSummary:
    """Totals, per-status sums and the category breakdown for a list of expenses."""
    expenses = list(expenses)
    summary = ExpenseSummary(count=len(expenses))

    for expense in expenses:
        summary.total += expense.amount
        summary.paid += expense.effective_paid

        if expense.status == ExpenseStatus.PLANNED:
            summary.planned += expense.amount
            summary.planned_count += 1
        elif expense.status == ExpenseStatus.DEPOSIT:
            summary.deposit += expense.amount
            summary.deposit_count += 1
        elif expense.status == ExpenseStatus.PAID:
            summary.paid_in_full += expense.amount
            summary.paid_count += 1

    summary.remaining = max(summary.total - summary.paid, ZERO)
    summary.by_category = category_breakdown(expenses, limit=top_categories)
    return summary


def group_by_scenario(expenses: Iterable[Expense]) -> dict[Optional[str], list[Expense]]:
    """Expenses keyed by scenario id, each group in input order."""
    grouped: dict[Optional[str], list[Expense]] = defaultdict(list)
    for expense in expenses:
        grouped[expense.scenario_id].append(expense)
    return dict(grouped)


def count_orphaned(
    by_scenario: Mapping[Optional[str], list[Expense]],
    scenarios: Iterable[BudgetScenario],
) -> int:
    """Expenses whose scenario id doesn't resolve to any of `scenarios`."""
    known = {scenario.id for scenario in scenarios}
    return sum(len(group) for scenario_id, group in by_scenario.items() if scenario_id not in known)


def compare_scenarios(
    scenarios: Iterable[BudgetScenario],
    by_scenario: Mapping[Optional[str], list[Expense]],
) -> list[ScenarioSummary]:
    """
    Side-by-side figures for every scenario, in the given scenario order.

    Args:
        scenarios: The scenarios to compare
        by_scenario: Expenses grouped by scenario id (see group_by_scenario)

    `paid` here is the sum of amounts with status paid, so the three
    status columns always add up to the total.
    """
    summaries = []
    for scenario in scenarios:
        own = by_scenario.get(scenario.id, [])
        summaries.append(ScenarioSummary(
            scenario_id=scenario.id,
            name=scenario.name,
            description=scenario.description,
            is_active=scenario.is_active,
            total=sum((e.amount for e in own), ZERO),
            planned=_status_total(own, ExpenseStatus.PLANNED),
            deposit=_status_total(own, ExpenseStatus.DEPOSIT),
            paid=_status_total(own, ExpenseStatus.PAID),
            count=len(own),
        ))
    return summaries


def _status_total(expenses: list[Expense], status: ExpenseStatus) -> Decimal:
    return sum((e.amount for e in expenses if e.status == status), ZERO)
