"""
Entity Accessors Package

One repository per collection, all sharing CollectionRepository's
list/get/create/update/delete contract. Scenarios add the single-active
rule and cloning; the project is a singleton document.
"""

from planner.repositories.base import CollectionRepository
from planner.repositories.expenses import ExpenseRepository
from planner.repositories.guests import GuestRepository
from planner.repositories.notes import NoteRepository
from planner.repositories.project import PROJECT_COLLECTION, PROJECT_ID, ProjectRepository
from planner.repositories.scenarios import ScenarioRepository
from planner.repositories.tasks import TaskRepository
from planner.repositories.timeline import TimelineRepository
from planner.repositories.vendors import VendorRepository

__all__ = [
    "CollectionRepository",
    "ExpenseRepository",
    "GuestRepository",
    "NoteRepository",
    "PROJECT_COLLECTION",
    "PROJECT_ID",
    "ProjectRepository",
    "ScenarioRepository",
    "TaskRepository",
    "TimelineRepository",
    "VendorRepository",
]
