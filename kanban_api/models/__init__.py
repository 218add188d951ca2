from kanban_api.models.business_unit import BusinessUnit
from kanban_api.models.task import Task, TaskPriority, TaskStatus
from kanban_api.models.user import User

__all__ = ["BusinessUnit", "Task", "TaskPriority", "TaskStatus", "User"]
