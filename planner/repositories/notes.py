"""Note accessor."""

from planner.models import Note, NoteCreate, NoteUpdate
from planner.repositories.base import CollectionRepository


class NoteRepository(CollectionRepository[Note, NoteCreate, NoteUpdate]):
    collection = "notes"
    record_model = Note
    create_model = NoteCreate
    update_model = NoteUpdate
