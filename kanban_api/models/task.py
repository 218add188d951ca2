import enum

from sqlalchemy import CheckConstraint, Column, Date, DateTime, ForeignKey, Integer, String, Text
from sqlalchemy.orm import relationship
from kanban_api.database import Base
from kanban_api.utils.clock import utcnow


class TaskStatus(str, enum.Enum):
    todo = "todo"
    inprogress = "inprogress"
    review = "review"
    done = "done"


class TaskPriority(str, enum.Enum):
    low = "low"
    medium = "medium"
    high = "high"


def _in_clause(column: str, choices) -> str:
    values = ", ".join(f"'{c.value}'" for c in choices)
    return f"{column} IN ({values})"


class Task(Base):
    __tablename__ = "tasks"
    __table_args__ = (
        CheckConstraint(_in_clause("status", TaskStatus), name="ck_tasks_status"),
        CheckConstraint(_in_clause("priority", TaskPriority), name="ck_tasks_priority"),
    )

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    status = Column(String(20), nullable=False, default=TaskStatus.todo.value, index=True)
    priority = Column(String(10), nullable=False, default=TaskPriority.medium.value)
    assignee_id = Column(Integer, ForeignKey("users.id", ondelete="SET NULL"), nullable=True, index=True)
    created_by_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    due_date = Column(Date, nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=utcnow)

    assignee = relationship("User", foreign_keys=[assignee_id], lazy="joined")
    creator = relationship("User", foreign_keys=[created_by_id], lazy="joined")

    @property
    def assignee_name(self):
        return self.assignee.name if self.assignee is not None else None

    @property
    def created_by_name(self):
        return self.creator.name if self.creator is not None else None
