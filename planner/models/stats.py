"""
Derived Statistics Models

Results of the in-memory aggregations behind the dashboard and the
budget page. None of these are ever persisted; they are recomputed
from freshly listed records on every load.
"""

from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field

from planner.models.planning import Project


class CategoryTotals(BaseModel):
    """One row of the per-category expense breakdown."""

    category: str
    total: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    remaining: Decimal = Field(
        default=Decimal("0"),
        ge=0,
        description="total - paid, floored at zero"
    )
    count: int = Field(default=0, ge=0)


class ExpenseSummary(BaseModel):
    """Money view over a list of expenses."""

    total: Decimal = Decimal("0")
    paid: Decimal = Field(
        default=Decimal("0"),
        description="Sum of effective paid amounts"
    )
    remaining: Decimal = Field(default=Decimal("0"), ge=0)

    # Sum of amounts per status
    planned: Decimal = Decimal("0")
    deposit: Decimal = Decimal("0")
    paid_in_full: Decimal = Decimal("0")

    count: int = 0
    planned_count: int = 0
    deposit_count: int = 0
    paid_count: int = 0

    by_category: list[CategoryTotals] = Field(default_factory=list)


class ScenarioSummary(BaseModel):
    """One scenario's column in the side-by-side comparison."""

    scenario_id: str
    name: str
    description: Optional[str] = None
    is_active: bool = False
    total: Decimal = Decimal("0")
    planned: Decimal = Decimal("0")
    deposit: Decimal = Decimal("0")
    paid: Decimal = Decimal("0")
    count: int = 0


class TaskStats(BaseModel):
    total: int = 0
    todo: int = 0
    doing: int = 0
    done: int = 0


class GuestStats(BaseModel):
    total: int = Field(default=0, description="Number of guest records")
    head_count: int = Field(
        default=0,
        description="Attendees, counting companions"
    )
    confirmed: int = 0   # rsvp == yes
    pending: int = 0     # rsvp == sent
    not_sent: int = 0
    declined: int = 0    # rsvp == no
    bride_side: int = 0
    groom_side: int = 0


class VendorStats(BaseModel):
    total: int = 0
    booked: int = 0
    considering: int = 0
    rejected: int = 0


class TimelineStats(BaseModel):
    total: int = 0
    upcoming: int = 0
    past: int = 0


class NoteStats(BaseModel):
    total: int = 0
    with_tags: int = 0


class DashboardStats(BaseModel):
    tasks: TaskStats = Field(default_factory=TaskStats)
    guests: GuestStats = Field(default_factory=GuestStats)
    expenses: ExpenseSummary = Field(default_factory=ExpenseSummary)
    vendors: VendorStats = Field(default_factory=VendorStats)
    events: TimelineStats = Field(default_factory=TimelineStats)
    notes: NoteStats = Field(default_factory=NoteStats)


class DashboardSnapshot(BaseModel):
    """Everything the dashboard page renders, from one load."""

    project: Project
    stats: DashboardStats
    loaded_at: datetime
    load_seconds: float = Field(ge=0)
