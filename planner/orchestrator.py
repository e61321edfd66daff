"""
Main Orchestrator for the Wedding Planner

This module ties together all the components and defines the
end-to-end flows for:
1. Dashboard (project + six collections → statistics), raced against a timeout
2. Budget page (scenarios → selected scenario's expenses → summary + comparison)

DESIGN DECISION: Pages never talk to the store directly.
They receive a PlannerServices bundle from create_app_components() and
go through the repositories, so the Google Sheets and in-memory
backends are interchangeable.
"""

import asyncio
import time
from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field

from planner.config import DashboardSettings, get_settings
from planner.log import configure_logging, get_logger
from planner.models import (
    BudgetScenario,
    DashboardSnapshot,
    Expense,
    ExpenseSummary,
    ScenarioSummary,
)
from planner.repositories import (
    ExpenseRepository,
    GuestRepository,
    NoteRepository,
    ProjectRepository,
    ScenarioRepository,
    TaskRepository,
    TimelineRepository,
    VendorRepository,
)
from planner.services.storage import (
    DocumentStoreInterface,
    GoogleSheetsClient,
    GoogleSheetsDocumentStore,
    InMemoryDocumentStore,
    UnavailableDocumentStore,
    utc_now,
)
from planner.stats import (
    DashboardTimeoutError,
    compare_scenarios,
    compute_dashboard_stats,
    count_orphaned,
    summarize_expenses,
)


logger = get_logger(__name__)


class PlannerServices:
    """Every repository, sharing one document store."""

    def __init__(self, store: DocumentStoreInterface):
        self.store = store
        self.project = ProjectRepository(store)
        self.tasks = TaskRepository(store)
        self.guests = GuestRepository(store)
        self.expenses = ExpenseRepository(store)
        self.scenarios = ScenarioRepository(store, expenses=self.expenses)
        self.vendors = VendorRepository(store)
        self.timeline = TimelineRepository(store)
        self.notes = NoteRepository(store)

    @property
    def is_available(self) -> bool:
        return not isinstance(self.store, UnavailableDocumentStore)


class DashboardFlow:
    """
    Loads everything the dashboard shows.

    Flow:
    1. Start seven reads in parallel (ensure project + six lists)
    2. Race them against the load timeout
    3. Compute the statistics in memory

    On timeout the reads are NOT cancelled; their results are simply
    dropped when they arrive.
    """

    def __init__(
        self,
        services: PlannerServices,
        settings: Optional[DashboardSettings] = None,
    ):
        self._services = services
        self._settings = settings

    def _get_settings(self) -> DashboardSettings:
        return self._settings or get_settings().dashboard

    async def load(
        self,
        timeout: Optional[float] = None,
        now: Optional[datetime] = None,
    ) -> DashboardSnapshot:
        """
        Load and aggregate the dashboard.

        Args:
            timeout: Seconds to wait; defaults to DASHBOARD_LOAD_TIMEOUT_SECONDS
            now: Local time used to split past/upcoming events

        Raises:
            DashboardTimeoutError: If the reads don't finish in time
            StorageError: If any read fails first
        """
        settings = self._get_settings()
        timeout = settings.load_timeout_seconds if timeout is None else timeout
        services = self._services
        started = time.perf_counter()

        bundle = asyncio.gather(
            services.project.ensure_main_project(),
            services.tasks.list(),
            services.guests.list(),
            services.expenses.list(),
            services.vendors.list(),
            services.timeline.list(),
            services.notes.list(),
        )
        bundle.add_done_callback(_discard_late_result)

        try:
            project, tasks, guests, expenses, vendors, events, notes = await asyncio.wait_for(
                asyncio.shield(bundle),
                timeout=timeout,
            )
        except asyncio.TimeoutError:
            logger.warning("dashboard_load_timeout", timeout_seconds=timeout)
            raise DashboardTimeoutError(timeout)
        except Exception as e:
            logger.error(
                "dashboard_load_failed",
                error=str(e),
                error_type=type(e).__name__,
            )
            raise

        elapsed = time.perf_counter() - started
        stats = compute_dashboard_stats(
            tasks, guests, expenses, vendors, events, notes,
            now=now,
            top_categories=settings.top_categories,
        )
        logger.info(
            "dashboard_loaded",
            load_seconds=round(elapsed, 3),
            tasks=stats.tasks.total,
            guests=stats.guests.total,
            expenses=stats.expenses.count,
        )
        return DashboardSnapshot(
            project=project,
            stats=stats,
            loaded_at=utc_now(),
            load_seconds=elapsed,
        )


def _discard_late_result(future: asyncio.Future) -> None:
    # Retrieve the outcome of an abandoned load so asyncio doesn't report it as unhandled
    if not future.cancelled():
        future.exception()


class BudgetView(BaseModel):
    """Everything the budget page renders for one selected scenario."""

    scenarios: list[BudgetScenario] = Field(default_factory=list)
    active: Optional[BudgetScenario] = None
    selected: Optional[BudgetScenario] = None
    expenses: list[Expense] = Field(
        default_factory=list,
        description="Expenses of the selected scenario"
    )
    summary: ExpenseSummary = Field(default_factory=ExpenseSummary)
    comparison: list[ScenarioSummary] = Field(default_factory=list)
    orphaned_count: int = Field(
        default=0,
        description="Expenses whose scenario no longer exists"
    )


class BudgetFlow:
    """
    Loads the budget page.

    The selected scenario defaults to the active one, then to the newest.
    """

    def __init__(
        self,
        services: PlannerServices,
        settings: Optional[DashboardSettings] = None,
    ):
        self._services = services
        self._settings = settings

    async def load(self, scenario_id: Optional[str] = None) -> BudgetView:
        settings = self._settings or get_settings().dashboard
        scenarios, by_scenario = await asyncio.gather(
            self._services.scenarios.list(),
            self._services.expenses.list_by_scenario(),
        )

        active = next((s for s in scenarios if s.is_active), None)
        selected = next((s for s in scenarios if s.id == scenario_id), None)
        if selected is None:
            selected = active or (scenarios[0] if scenarios else None)

        own = by_scenario.get(selected.id, []) if selected else []

        return BudgetView(
            scenarios=scenarios,
            active=active,
            selected=selected,
            expenses=own,
            summary=summarize_expenses(own, top_categories=settings.top_categories),
            comparison=compare_scenarios(scenarios, by_scenario),
            orphaned_count=count_orphaned(by_scenario, scenarios),
        )


def create_store(backend: Optional[str] = None) -> DocumentStoreInterface:
    """
    Build the configured document store.

    A Sheets store that can't be configured or reached is replaced by an
    UnavailableDocumentStore, so every page reports the reason instead
    of the app failing to start.
    """
    backend = backend or get_settings().app.storage_backend

    if backend == "memory":
        logger.info("store_initialized", backend="memory")
        return InMemoryDocumentStore()

    try:
        client = GoogleSheetsClient()
        client.get_spreadsheet()
    except Exception as e:
        logger.error("store_unavailable", backend=backend, error=str(e))
        return UnavailableDocumentStore(str(e))

    logger.info("store_initialized", backend=backend)
    return GoogleSheetsDocumentStore(client)


def create_app_components(
    backend: Optional[str] = None,
) -> tuple[PlannerServices, DashboardFlow, BudgetFlow]:
    """
    Factory function to create all application components.

    Logging is reconfigured from AppSettings (debug mode, environment)
    before the store is built.

    Args:
        backend: "sheets" or "memory"; defaults to PLANNER_STORAGE_BACKEND

    Returns:
        (services, dashboard_flow, budget_flow)
    """
    app_settings = get_settings().app
    configure_logging(debug=app_settings.debug_mode, environment=app_settings.app_environment)

    services = PlannerServices(create_store(backend))
    return services, DashboardFlow(services), BudgetFlow(services)
