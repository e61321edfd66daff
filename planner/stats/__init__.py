"""
Statistics Package

In-memory aggregation for the dashboard and the budget page.
"""

from planner.stats.budget import (
    category_breakdown,
    compare_scenarios,
    count_orphaned,
    group_by_scenario,
    summarize_expenses,
)
from planner.stats.dashboard import (
    DashboardTimeoutError,
    compute_dashboard_stats,
    guest_stats,
    note_stats,
    task_stats,
    timeline_stats,
    vendor_stats,
)

__all__ = [
    "DashboardTimeoutError",
    "category_breakdown",
    "compare_scenarios",
    "compute_dashboard_stats",
    "count_orphaned",
    "group_by_scenario",
    "guest_stats",
    "note_stats",
    "summarize_expenses",
    "task_stats",
    "timeline_stats",
    "vendor_stats",
]
