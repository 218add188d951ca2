from datetime import date, datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Annotated, Optional
from kanban_api.database import MAX_ID
from kanban_api.models.task import TaskPriority, TaskStatus

UserRef = Annotated[int, Field(ge=1, le=MAX_ID)]


def _clean_title(v):
    if v is None:
        return v
    if not v.strip():
        raise ValueError("title cannot be empty")
    return v.strip()


class TaskCreate(BaseModel):
    title: str
    description: Optional[str] = None
    priority: TaskPriority
    assignee_id: Optional[UserRef] = None
    due_date: Optional[date] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)


class TaskUpdate(BaseModel):
    """Any subset of the mutable fields.

    Which keys the client actually sent is read from ``model_fields_set``, so
    an omitted field and an explicit ``null`` stay distinguishable.
    """

    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TaskPriority] = None
    assignee_id: Optional[UserRef] = None
    due_date: Optional[date] = None
    status: Optional[TaskStatus] = None

    @field_validator("title")
    @classmethod
    def title_not_empty(cls, v):
        return _clean_title(v)


class TaskOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: int
    title: str
    description: Optional[str] = None
    status: TaskStatus
    priority: TaskPriority
    assignee_id: Optional[int] = None
    created_by_id: int
    due_date: Optional[date] = None
    completed_at: Optional[datetime] = None
    created_at: datetime
    updated_at: datetime
    assignee_name: Optional[str] = None
    created_by_name: Optional[str] = None


class TaskEnvelope(BaseModel):
    message: str
    task: TaskOut


class Message(BaseModel):
    message: str
