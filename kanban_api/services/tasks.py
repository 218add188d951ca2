"""Task lifecycle: create, read, partial update and delete.

Every mutation is a single statement against the ``tasks`` table. Partial
updates go through two pure steps before touching the store:

* ``build_patch`` turns the request body into a mapping of only the fields the
  client supplied (an explicit ``null`` is kept, an omitted key is not);
* ``stage_update`` turns that patch into column values, adding the derived
  ``completed_at`` and the ``updated_at`` refresh.
"""
import enum
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional

from sqlalchemy import delete, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session
from kanban_api.database import MAX_ID
from kanban_api.errors import BadRequest, NotFound
from kanban_api.models.task import Task, TaskStatus
from kanban_api.models.user import User
from kanban_api.schemas.auth import CurrentUser
from kanban_api.schemas.task import TaskCreate, TaskUpdate
from kanban_api.utils.clock import utcnow

logger = logging.getLogger(__name__)

PATCHABLE_FIELDS = ("title", "description", "priority", "assignee_id", "due_date", "status")
NON_NULLABLE_FIELDS = frozenset({"title", "priority", "status"})

TaskPatch = Dict[str, Any]


def build_patch(payload: TaskUpdate) -> TaskPatch:
    patch: TaskPatch = {}
    for field in PATCHABLE_FIELDS:
        if field not in payload.model_fields_set:
            continue
        value = getattr(payload, field)
        if value is None and field in NON_NULLABLE_FIELDS:
            raise BadRequest(f"{field} cannot be null")
        if isinstance(value, enum.Enum):
            value = value.value
        patch[field] = value
    return patch


def completion_effect(new_status, now: datetime) -> Optional[datetime]:
    """Value ``completed_at`` takes when a task moves to ``new_status``.

    Entering ``done`` always stamps ``now``, even from ``done``; any other
    status clears it. The previous status plays no part.
    """
    if TaskStatus(new_status) is TaskStatus.done:
        return now
    return None


def stage_update(patch: TaskPatch, now: datetime) -> Dict[str, Any]:
    values = dict(patch)
    if "status" in patch:
        values["completed_at"] = completion_effect(patch["status"], now)
    values["updated_at"] = now
    return values


def _ensure_assignee(db: Session, assignee_id: Optional[int]) -> None:
    if assignee_id is not None and db.get(User, assignee_id) is None:
        raise BadRequest("Assignee does not exist")


def _ensure_task_id(task_id: int) -> None:
    # ids the column cannot hold cannot name a row
    if not 1 <= task_id <= MAX_ID:
        raise NotFound("Task not found")


def get_task(db: Session, task_id: int) -> Task:
    _ensure_task_id(task_id)
    task = db.query(Task).filter(Task.id == task_id).first()
    if not task:
        raise NotFound("Task not found")
    return task


def list_tasks(db: Session) -> List[Task]:
    return db.query(Task).order_by(Task.created_at.desc(), Task.id.desc()).all()


def create_task(db: Session, payload: TaskCreate, creator: CurrentUser) -> Task:
    _ensure_assignee(db, payload.assignee_id)
    now = utcnow()
    task = Task(
        title=payload.title,
        description=payload.description,
        status=TaskStatus.todo.value,
        priority=payload.priority.value,
        assignee_id=payload.assignee_id,
        created_by_id=creator.id,
        due_date=payload.due_date,
        completed_at=None,
        created_at=now,
        updated_at=now,
    )
    db.add(task)
    try:
        db.commit()
    except IntegrityError:
        db.rollback()
        logger.warning("Task insert by user %s rejected by the store", creator.id, exc_info=True)
        raise BadRequest("Task references a missing user or holds an invalid value")
    logger.info("Task %s created by user %s", task.id, creator.id)
    return get_task(db, task.id)


def update_task(db: Session, task_id: int, payload: TaskUpdate) -> Task:
    _ensure_task_id(task_id)
    patch = build_patch(payload)
    _ensure_assignee(db, patch.get("assignee_id"))
    values = stage_update(patch, utcnow())

    stmt = (
        update(Task)
        .where(Task.id == task_id)
        .values(**values)
        .execution_options(synchronize_session=False)
    )
    try:
        result = db.execute(stmt)
    except IntegrityError:
        db.rollback()
        logger.warning("Update of task %s rejected by the store", task_id, exc_info=True)
        raise BadRequest("Task references a missing user or holds an invalid value")
    if result.rowcount == 0:
        db.rollback()
        raise NotFound("Task not found")
    db.commit()
    logger.info("Task %s updated (%s)", task_id, ", ".join(sorted(patch)) or "touch")
    return get_task(db, task_id)


def delete_task(db: Session, task_id: int) -> None:
    _ensure_task_id(task_id)
    result = db.execute(delete(Task).where(Task.id == task_id))
    if result.rowcount == 0:
        db.rollback()
        raise NotFound("Task not found")
    db.commit()
    logger.info("Task %s deleted", task_id)
