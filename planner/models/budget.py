"""
Budget Data Models

Expenses and the budget scenarios they belong to.

DESIGN DECISION: Money is Decimal end to end. Amounts are written to the
store as strings so nothing is rounded through a float on the way.

A scenario is a named variant of the whole budget ("small venue",
"big venue"). Every expense references exactly one scenario by id;
at most one scenario is active at a time.
"""

from datetime import date, datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

from pydantic import ConfigDict, Field, model_validator

from planner.models.common import FormModel, LongText, MediumText, StoredRecord


class ExpenseStatus(str, Enum):
    """How far along the payment for an expense is."""
    PLANNED = "planned"
    DEPOSIT = "deposit"   # Partly paid up front
    PAID = "paid"


class ExpenseDisposition(str, Enum):
    """
    What happens to a scenario's expenses when the scenario is deleted.

    ORPHAN keeps them in place, still pointing at the deleted scenario id.
    """
    ORPHAN = "orphan"
    CASCADE = "cascade"
    REASSIGN = "reassign"


# =============================================================================
# EXPENSES
# =============================================================================

class ExpenseCreate(FormModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: LongText = None
    category: str = Field(
        ...,
        min_length=1,
        max_length=100,
        description="Free-text category, e.g. 'Flowers'"
    )
    amount: Decimal = Field(
        ...,
        ge=0,
        decimal_places=2,
        description="Planned cost"
    )
    status: ExpenseStatus = ExpenseStatus.PLANNED
    paid_amount: Optional[Decimal] = Field(
        default=None,
        ge=0,
        decimal_places=2,
        description="Amount paid so far (partial payments)"
    )
    scenario_id: str = Field(
        ...,
        min_length=1,
        description="Budget scenario this expense belongs to"
    )
    vendor_id: Optional[str] = None
    due_date: Optional[date] = None
    paid_at: Optional[datetime] = None

    @model_validator(mode='after')
    def validate_paid_amount(self) -> 'ExpenseCreate':
        """Paid so far cannot exceed the cost."""
        if self.paid_amount is not None and self.paid_amount > self.amount:
            raise ValueError("Paid amount cannot exceed the expense amount")
        return self


class ExpenseUpdate(FormModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: LongText = None
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    amount: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    status: Optional[ExpenseStatus] = None
    paid_amount: Optional[Decimal] = Field(default=None, ge=0, decimal_places=2)
    scenario_id: Optional[str] = Field(default=None, min_length=1)
    vendor_id: Optional[str] = None
    due_date: Optional[date] = None
    paid_at: Optional[datetime] = None


class Expense(StoredRecord, ExpenseCreate):
    """
    A stored expense.

    scenario_id may point at a scenario that no longer exists
    (see ExpenseDisposition.ORPHAN).
    """
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    # Legacy documents may predate scenarios
    scenario_id: Optional[str] = None

    @property
    def effective_paid(self) -> Decimal:
        """
        What has actually been paid.

        An explicit paid_amount wins; otherwise a 'paid' expense counts
        in full and anything else counts as nothing paid.
        """
        if self.paid_amount is not None:
            return self.paid_amount
        if self.status == ExpenseStatus.PAID:
            return self.amount
        return Decimal("0")

    @property
    def remaining(self) -> Decimal:
        return max(self.amount - self.effective_paid, Decimal("0"))


# =============================================================================
# SCENARIOS
# =============================================================================

class BudgetScenarioCreate(FormModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: MediumText = None
    is_active: bool = False


class BudgetScenarioUpdate(FormModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    description: MediumText = None
    is_active: Optional[bool] = None


class BudgetScenario(StoredRecord, BudgetScenarioCreate):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")
