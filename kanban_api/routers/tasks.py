from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from kanban_api.database import get_db
from kanban_api.dependencies import get_current_user
from kanban_api.schemas.auth import CurrentUser
from kanban_api.schemas.task import Message, TaskCreate, TaskEnvelope, TaskOut, TaskUpdate
from kanban_api.services import tasks as task_service

# any holder of a valid token may read and mutate any task
router = APIRouter(prefix="/api/tasks", tags=["tasks"], dependencies=[Depends(get_current_user)])


@router.get("", response_model=List[TaskOut])
def list_tasks(db: Session = Depends(get_db)):
    """All tasks, newest first, with assignee and creator names."""
    return task_service.list_tasks(db)


@router.get("/{task_id}", response_model=TaskOut)
def read_task(task_id: int, db: Session = Depends(get_db)):
    return task_service.get_task(db, task_id)


@router.post("", response_model=TaskEnvelope, status_code=201)
def create_task(task: TaskCreate, db: Session = Depends(get_db), current: CurrentUser = Depends(get_current_user)):
    created = task_service.create_task(db, task, current)
    return {"message": "Task created successfully", "task": TaskOut.model_validate(created)}


@router.put("/{task_id}", response_model=TaskEnvelope)
def update_task(task_id: int, changes: TaskUpdate, db: Session = Depends(get_db)):
    updated = task_service.update_task(db, task_id, changes)
    return {"message": "Task updated successfully", "task": TaskOut.model_validate(updated)}


@router.delete("/{task_id}", response_model=Message)
def delete_task(task_id: int, db: Session = Depends(get_db)):
    task_service.delete_task(db, task_id)
    return {"message": "Task deleted successfully"}
