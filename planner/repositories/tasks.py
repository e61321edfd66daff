"""Task accessor."""

from typing import Union

from planner.models import Task, TaskCreate, TaskStatus, TaskUpdate
from planner.repositories.base import CollectionRepository
from planner.services.storage import utc_now


class TaskRepository(CollectionRepository[Task, TaskCreate, TaskUpdate]):
    """
    Tasks, newest first.

    completed_at follows the status: it is stamped when a task becomes
    done and cleared when it leaves done, unless the caller sets it.
    """

    collection = "tasks"
    record_model = Task
    create_model = TaskCreate
    update_model = TaskUpdate

    async def create(self, data: Union[TaskCreate, dict]) -> str:
        task = self._coerce(TaskCreate, data)
        if task.status == TaskStatus.DONE and task.completed_at is None:
            task = task.model_copy(update={"completed_at": utc_now()})
        return await super().create(task)

    async def update(self, record_id: str, updates: Union[TaskUpdate, dict]) -> None:
        changes = self._coerce(TaskUpdate, updates)
        fields_set = changes.model_fields_set

        if "status" in fields_set and "completed_at" not in fields_set:
            if changes.status == TaskStatus.DONE:
                current = await self.get(record_id)
                # Re-saving an already finished task keeps its original date
                if current is None or current.status != TaskStatus.DONE:
                    changes = self._with_field(changes, "completed_at", utc_now())
            else:
                changes = self._with_field(changes, "completed_at", None)

        await super().update(record_id, changes)

    @staticmethod
    def _with_field(changes: TaskUpdate, name: str, value) -> TaskUpdate:
        # model_copy(update=...) doesn't mark the field as set; re-validate instead
        return TaskUpdate.model_validate({**changes.model_dump(exclude_unset=True), name: value})
