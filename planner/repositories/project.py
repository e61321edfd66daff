"""
Wedding Project accessor

There is exactly one project document, id "main". It is created with
defaults from AppSettings the first time anything asks for it.
"""

from typing import Optional, Union

from planner.config import AppSettings, get_settings
from planner.log import get_logger
from planner.models import Project, ProjectUpdate
from planner.repositories.base import logged_failure
from planner.services.storage import DocumentStoreInterface


PROJECT_COLLECTION = "weddingProjects"
PROJECT_ID = "main"

logger = get_logger(__name__)


class ProjectRepository:
    """Accessor for the singleton project document."""

    collection = PROJECT_COLLECTION

    def __init__(
        self,
        store: DocumentStoreInterface,
        settings: Optional[AppSettings] = None,
    ):
        self._store = store
        self._settings = settings

    def _defaults(self) -> dict:
        settings = self._settings or get_settings().app
        return {
            "name": settings.default_project_name,
            "wedding_date": None,
            "owners_note": settings.default_owners_note,
            "currency": settings.default_currency,
        }

    async def ensure_main_project(self) -> Project:
        """
        Return the project, creating it with defaults if it is missing.

        An existing project gets its updated_at refreshed on every call.
        """
        with logged_failure(logger, "ensure_main_project", project_id=PROJECT_ID):
            existing = await self._store.get_document(self.collection, PROJECT_ID)
            if existing is None:
                await self._store.set_document(self.collection, PROJECT_ID, self._defaults())
                logger.info("project_created", project_id=PROJECT_ID)
            else:
                # An empty merge only touches updated_at
                await self._store.set_document(self.collection, PROJECT_ID, {}, merge=True)

            document = await self._store.get_document(self.collection, PROJECT_ID)
        return Project.from_document(document)

    async def get_main_project(self) -> Optional[Project]:
        """The project, or None if it was never created."""
        with logged_failure(logger, "get_main_project", project_id=PROJECT_ID):
            document = await self._store.get_document(self.collection, PROJECT_ID)
        if document is None:
            return None
        return Project.from_document(document)

    async def update_main_project(self, updates: Union[ProjectUpdate, dict]) -> None:
        """Merge fields into the project, creating the document if needed."""
        if not isinstance(updates, ProjectUpdate):
            updates = ProjectUpdate.model_validate(updates)
        patch = updates.to_patch()
        with logged_failure(logger, "update_main_project", project_id=PROJECT_ID):
            await self._store.set_document(self.collection, PROJECT_ID, patch, merge=True)
        logger.info("project_updated", fields=sorted(patch))
