"""
Data Models Package

This package contains all Pydantic models used in the Wedding Planner.
All data flowing through the system must conform to these schemas.
"""

from planner.models.common import (
    FormModel,
    StoredDocument,
    StoredRecord,
)
from planner.models.planning import (
    Guest,
    GuestCreate,
    GuestSide,
    GuestUpdate,
    Note,
    NoteCreate,
    NoteUpdate,
    Project,
    ProjectUpdate,
    RSVPStatus,
    Task,
    TaskAssignee,
    TaskCreate,
    TaskPriority,
    TaskStatus,
    TaskUpdate,
    TimelineEvent,
    TimelineEventCreate,
    TimelineEventUpdate,
    Vendor,
    VendorCreate,
    VendorStatus,
    VendorUpdate,
)
from planner.models.budget import (
    BudgetScenario,
    BudgetScenarioCreate,
    BudgetScenarioUpdate,
    Expense,
    ExpenseCreate,
    ExpenseDisposition,
    ExpenseStatus,
    ExpenseUpdate,
)
from planner.models.stats import (
    CategoryTotals,
    DashboardSnapshot,
    DashboardStats,
    ExpenseSummary,
    GuestStats,
    NoteStats,
    ScenarioSummary,
    TaskStats,
    TimelineStats,
    VendorStats,
)

__all__ = [
    # Base models
    "FormModel",
    "StoredDocument",
    "StoredRecord",
    # Planning models
    "Guest",
    "GuestCreate",
    "GuestSide",
    "GuestUpdate",
    "Note",
    "NoteCreate",
    "NoteUpdate",
    "Project",
    "ProjectUpdate",
    "RSVPStatus",
    "Task",
    "TaskAssignee",
    "TaskCreate",
    "TaskPriority",
    "TaskStatus",
    "TaskUpdate",
    "TimelineEvent",
    "TimelineEventCreate",
    "TimelineEventUpdate",
    "Vendor",
    "VendorCreate",
    "VendorStatus",
    "VendorUpdate",
    # Budget models
    "BudgetScenario",
    "BudgetScenarioCreate",
    "BudgetScenarioUpdate",
    "Expense",
    "ExpenseCreate",
    "ExpenseDisposition",
    "ExpenseStatus",
    "ExpenseUpdate",
    # Derived statistics
    "CategoryTotals",
    "DashboardSnapshot",
    "DashboardStats",
    "ExpenseSummary",
    "GuestStats",
    "NoteStats",
    "ScenarioSummary",
    "TaskStats",
    "TimelineStats",
    "VendorStats",
]
