"""
Budget Scenario accessor

RULE: at most one scenario is active at any time.

Activation reads the currently active scenarios, then commits one batch
that switches them off and writes the target. There is no lock between
the read and the batch, so two activations racing each other can still
leave two scenarios active (or none). For a planner used by one couple
that is accepted; get_active_scenario() copes by picking the newest.
"""

from typing import Optional, Union

from planner.models import (
    BudgetScenario,
    BudgetScenarioCreate,
    BudgetScenarioUpdate,
    ExpenseCreate,
    ExpenseDisposition,
)
from planner.repositories.base import CollectionRepository
from planner.repositories.expenses import ExpenseRepository
from planner.services.storage import DocumentStoreInterface, NotFoundError, WriteBatch


class ScenarioRepository(
    CollectionRepository[BudgetScenario, BudgetScenarioCreate, BudgetScenarioUpdate]
):
    """Budget scenarios, newest first."""

    collection = "budgetScenarios"
    record_model = BudgetScenario
    create_model = BudgetScenarioCreate
    update_model = BudgetScenarioUpdate

    def __init__(
        self,
        store: DocumentStoreInterface,
        expenses: Optional[ExpenseRepository] = None,
    ):
        super().__init__(store)
        self._expenses = expenses or ExpenseRepository(store)

    async def get_active_scenario(self) -> Optional[BudgetScenario]:
        """
        The active scenario, or None.

        If more than one is active (see the module docstring), the most
        recently created one wins.
        """
        active = [s for s in await self.list() if s.is_active]
        if len(active) > 1:
            self._logger.warning(
                "multiple_active_scenarios",
                scenario_ids=[s.id for s in active],
            )
        return active[0] if active else None

    async def _deactivate_others(
        self,
        batch: WriteBatch,
        keep_id: Optional[str] = None,
    ) -> list[str]:
        """Queue is_active=False for every active scenario except keep_id."""
        with self._logged("read_active"):
            documents = await self._store.list_documents(self.collection)

        deactivated = []
        for document in documents:
            if document.data.get("is_active") and document.id != keep_id:
                batch.update(self.collection, document.id, {"is_active": False})
                deactivated.append(document.id)
        return deactivated

    async def create(self, data: Union[BudgetScenarioCreate, dict]) -> str:
        """Create a scenario; an active one switches every other scenario off."""
        scenario = self._coerce(BudgetScenarioCreate, data)

        batch = self._store.batch()
        deactivated = []
        if scenario.is_active:
            deactivated = await self._deactivate_others(batch)
        record_id = batch.create(self.collection, scenario.to_document())

        with self._logged("create"):
            await self._store.commit_batch(batch)
        self._logger.info(
            "record_created",
            record_id=record_id,
            is_active=scenario.is_active,
            deactivated=deactivated,
        )
        return record_id

    async def update(
        self,
        record_id: str,
        updates: Union[BudgetScenarioUpdate, dict],
    ) -> None:
        """
        Merge fields into a scenario.

        Setting is_active=True switches every other scenario off in the
        same batch. A blank or None description clears the stored one.

        Raises:
            NotFoundError: If the scenario doesn't exist
        """
        changes = self._coerce(BudgetScenarioUpdate, updates)
        patch = changes.to_patch()

        batch = self._store.batch()
        deactivated = []
        if changes.is_active:
            deactivated = await self._deactivate_others(batch, keep_id=record_id)
        batch.update(self.collection, record_id, patch)

        with self._logged("update", record_id=record_id):
            await self._store.commit_batch(batch)
        self._logger.info(
            "record_updated",
            record_id=record_id,
            fields=sorted(patch),
            deactivated=deactivated,
        )

    async def activate(self, record_id: str) -> None:
        """Make one scenario the active one."""
        await self.update(record_id, BudgetScenarioUpdate(is_active=True))

    async def clone_scenario(self, source_id: str, new_name: str) -> str:
        """
        Copy a scenario together with all of its expenses.

        The copy is always inactive and keeps the source's description.
        Every expense is duplicated with a new id and fresh timestamps;
        amounts, statuses and categories are unchanged. Scenario and
        expenses are written in a single batch.

        Returns:
            The new scenario's id

        Raises:
            NotFoundError: If the source scenario doesn't exist
        """
        source = await self.get(source_id)
        if source is None:
            raise NotFoundError(f"Source scenario not found: {source_id}")

        clone = BudgetScenarioCreate(
            name=new_name,
            description=source.description,
            is_active=False,
        )
        expenses = await self._expenses.list(scenario_id=source_id)

        batch = self._store.batch()
        new_id = batch.create(self.collection, clone.to_document())
        for expense in expenses:
            payload = expense.model_dump(
                mode="json",
                include=set(ExpenseCreate.model_fields),
                exclude_none=True,
            )
            payload["scenario_id"] = new_id
            batch.create(self._expenses.collection, payload)

        with self._logged("clone", source_id=source_id):
            await self._store.commit_batch(batch)
        self._logger.info(
            "scenario_cloned",
            source_id=source_id,
            record_id=new_id,
            expense_count=len(expenses),
        )
        return new_id

    async def delete(
        self,
        record_id: str,
        expenses: ExpenseDisposition = ExpenseDisposition.ORPHAN,
        reassign_to: Optional[str] = None,
    ) -> None:
        """
        Delete a scenario, deciding explicitly what happens to its expenses.

        Args:
            record_id: Scenario to delete
            expenses: ORPHAN leaves the expenses pointing at the deleted id,
                      CASCADE deletes them, REASSIGN moves them to reassign_to
            reassign_to: Target scenario for REASSIGN

        Raises:
            ValueError: If REASSIGN is asked for without a valid target
            NotFoundError: If the REASSIGN target doesn't exist
        """
        if expenses == ExpenseDisposition.ORPHAN:
            await super().delete(record_id)
            return

        if expenses == ExpenseDisposition.REASSIGN:
            if not reassign_to or reassign_to == record_id:
                raise ValueError("Reassigning expenses needs a different target scenario")
            if await self.get(reassign_to) is None:
                raise NotFoundError(f"Target scenario not found: {reassign_to}")

        owned = await self._expenses.list(scenario_id=record_id)

        batch = self._store.batch()
        for expense in owned:
            if expenses == ExpenseDisposition.CASCADE:
                batch.delete(self._expenses.collection, expense.id)
            else:
                batch.update(self._expenses.collection, expense.id, {"scenario_id": reassign_to})
        batch.delete(self.collection, record_id)

        with self._logged("delete", record_id=record_id):
            await self._store.commit_batch(batch)
        self._logger.info(
            "record_deleted",
            record_id=record_id,
            expenses=expenses.value,
            expense_count=len(owned),
        )
