"""
Planning Data Models

Project, tasks, guests, vendors, timeline events and notes.
Budget-related models (expenses, scenarios) live in planner.models.budget.

DESIGN DECISION: Enums carry the exact string values that are stored,
so a document written by any client reads back into the same member.
"""

import re
from datetime import date, datetime
from enum import Enum
from typing import Annotated, Optional

from pydantic import (
    AfterValidator,
    BeforeValidator,
    ConfigDict,
    Field,
    StringConstraints,
    field_validator,
    model_validator,
)

from planner.models.common import (
    FormModel,
    LongText,
    MediumText,
    ShortText,
    StoredRecord,
    blank_to_none,
)


# =============================================================================
# ENUMS - Finite set of valid values
# =============================================================================

class TaskStatus(str, Enum):
    """Board column a task sits in."""
    TODO = "todo"
    DOING = "doing"
    DONE = "done"


class TaskPriority(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class TaskAssignee(str, Enum):
    """Who is responsible for a task."""
    ME = "me"
    PARTNER = "partner"
    BOTH = "both"


class GuestSide(str, Enum):
    BRIDE = "bride"
    GROOM = "groom"


class RSVPStatus(str, Enum):
    """Where a guest's invitation stands."""
    NOT_SENT = "not_sent"
    SENT = "sent"
    YES = "yes"
    NO = "no"


class VendorStatus(str, Enum):
    CONSIDERING = "considering"
    BOOKED = "booked"
    REJECTED = "rejected"


_EMAIL_PATTERN = re.compile(r"^[^@\s]+@[^@\s]+\.[^@\s]+$")
_TIME_PATTERN = r"^([01]\d|2[0-3]):[0-5]\d$"


def _check_email(value: str) -> str:
    if not _EMAIL_PATTERN.match(value):
        raise ValueError("Invalid email address")
    return value


OptionalEmail = Annotated[
    Optional[Annotated[str, StringConstraints(max_length=200), AfterValidator(_check_email)]],
    BeforeValidator(blank_to_none),
]
OptionalTime = Annotated[
    Optional[Annotated[str, StringConstraints(pattern=_TIME_PATTERN)]],
    BeforeValidator(blank_to_none),
]


# =============================================================================
# PROJECT (singleton)
# =============================================================================

class ProjectUpdate(FormModel):
    """Editable project fields."""

    name: Optional[str] = Field(default=None, min_length=1, max_length=120)
    wedding_date: Optional[date] = None
    owners_note: Optional[str] = Field(default=None, max_length=500)
    currency: Optional[str] = Field(
        default=None,
        min_length=3,
        max_length=3,
        description="ISO 4217 currency code"
    )

    @field_validator('currency')
    @classmethod
    def upper_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v


class Project(StoredRecord):
    """
    The one wedding this planner is about.

    Created lazily on first access; every other record implicitly
    belongs to it.
    """

    name: str
    wedding_date: Optional[date] = None
    owners_note: str = ""
    currency: str = "PLN"


# =============================================================================
# TASKS
# =============================================================================

class TaskCreate(FormModel):
    title: str = Field(..., min_length=1, max_length=200)
    description: LongText = None
    status: TaskStatus = TaskStatus.TODO
    priority: TaskPriority = TaskPriority.MEDIUM
    assigned_to: TaskAssignee = Field(
        default=TaskAssignee.BOTH,
        description="Assignee tag"
    )
    due_date: Optional[date] = None
    category: ShortText = None
    completed_at: Optional[datetime] = None


class TaskUpdate(FormModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    description: LongText = None
    status: Optional[TaskStatus] = None
    priority: Optional[TaskPriority] = None
    assigned_to: Optional[TaskAssignee] = None
    due_date: Optional[date] = None
    category: ShortText = None
    completed_at: Optional[datetime] = None


class Task(StoredRecord, TaskCreate):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @property
    def is_done(self) -> bool:
        return self.status == TaskStatus.DONE


# =============================================================================
# GUESTS
# =============================================================================

class GuestCreate(FormModel):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: ShortText = None
    email: OptionalEmail = None
    phone: ShortText = None
    side: GuestSide
    rsvp: RSVPStatus = RSVPStatus.NOT_SENT
    has_companion: bool = Field(
        default=False,
        description="Guest brings a plus-one (counts as two heads)"
    )
    dietary_restrictions: MediumText = None
    notes: MediumText = None


class GuestUpdate(FormModel):
    first_name: Optional[str] = Field(default=None, min_length=1, max_length=100)
    last_name: ShortText = None
    email: OptionalEmail = None
    phone: ShortText = None
    side: Optional[GuestSide] = None
    rsvp: Optional[RSVPStatus] = None
    has_companion: Optional[bool] = None
    dietary_restrictions: MediumText = None
    notes: MediumText = None


class Guest(StoredRecord, GuestCreate):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name or ''}".strip()

    @property
    def head_count(self) -> int:
        """Attendees this invitation covers."""
        return 2 if self.has_companion else 1


# =============================================================================
# VENDORS
# =============================================================================

class VendorCreate(FormModel):
    name: str = Field(..., min_length=1, max_length=200)
    category: str = Field(..., min_length=1, max_length=100)
    contact_name: MediumText = None
    email: OptionalEmail = None
    phone: ShortText = None
    website: MediumText = None
    status: VendorStatus = VendorStatus.CONSIDERING
    notes: LongText = None


class VendorUpdate(FormModel):
    name: Optional[str] = Field(default=None, min_length=1, max_length=200)
    category: Optional[str] = Field(default=None, min_length=1, max_length=100)
    contact_name: MediumText = None
    email: OptionalEmail = None
    phone: ShortText = None
    website: MediumText = None
    status: Optional[VendorStatus] = None
    notes: LongText = None


class Vendor(StoredRecord, VendorCreate):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")


# =============================================================================
# TIMELINE
# =============================================================================

class TimelineEventCreate(FormModel):
    title: str = Field(..., min_length=1, max_length=200)
    event_date: date
    start_time: OptionalTime = Field(
        default=None,
        description="Local start time, HH:MM"
    )
    end_time: OptionalTime = Field(
        default=None,
        description="Local end time, HH:MM"
    )
    location: MediumText = None
    description: LongText = None

    @model_validator(mode='after')
    def validate_times(self) -> 'TimelineEventCreate':
        # Zero-padded HH:MM compares correctly as a string
        if self.start_time and self.end_time and self.end_time < self.start_time:
            raise ValueError("End time cannot be before start time")
        return self


class TimelineEventUpdate(FormModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    event_date: Optional[date] = None
    start_time: OptionalTime = None
    end_time: OptionalTime = None
    location: MediumText = None
    description: LongText = None


class TimelineEvent(StoredRecord, TimelineEventCreate):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")

    @property
    def starts_at(self) -> datetime:
        """
        The moment the event begins, as a naive local datetime.

        Events without a start time begin at midnight.
        """
        if self.start_time:
            hours, minutes = (int(part) for part in self.start_time.split(":"))
            return datetime(
                self.event_date.year, self.event_date.month, self.event_date.day,
                hours, minutes,
            )
        return datetime(self.event_date.year, self.event_date.month, self.event_date.day)


# =============================================================================
# NOTES
# =============================================================================

def _clean_tags(tags: Optional[list[str]]) -> Optional[list[str]]:
    if tags is None:
        return None
    cleaned = []
    for tag in tags:
        tag = tag.strip()
        if tag and tag not in cleaned:
            cleaned.append(tag)
    return cleaned


TagList = Annotated[list[str], AfterValidator(_clean_tags)]


class NoteCreate(FormModel):
    title: str = Field(..., min_length=1, max_length=200)
    content: str = Field(..., min_length=1, max_length=20000)
    tags: TagList = Field(default_factory=list)


class NoteUpdate(FormModel):
    title: Optional[str] = Field(default=None, min_length=1, max_length=200)
    content: Optional[str] = Field(default=None, min_length=1, max_length=20000)
    tags: Optional[TagList] = None


class Note(StoredRecord, NoteCreate):
    model_config = ConfigDict(str_strip_whitespace=True, extra="ignore")
