import enum

from sqlalchemy import Column, String, DateTime, ForeignKey, Boolean, JSON, Enum
from sqlalchemy.orm import relationship
from task_tracker.database import Base
from task_tracker.models.user import User, new_id, utcnow


class TaskStatus(str, enum.Enum):
    PENDING = "pending"
    IN_PROGRESS = "in-progress"
    COMPLETED = "completed"


VALID_STATUSES = [s.value for s in TaskStatus]

status_type = Enum(
    TaskStatus,
    name="task_status",
    native_enum=False,
    values_callable=lambda e: [m.value for m in e],
    validate_strings=True,
)


class Task(Base):
    __tablename__ = "tasks"

    id = Column(String(36), primary_key=True, default=new_id)
    subject = Column(String(255), nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    status = Column(status_type, default=TaskStatus.PENDING, nullable=False)
    created_by = Column(String(36), ForeignKey("users.id"), index=True, nullable=False)
    # Reference list kept in step with the subtasks written through the API
    subtask_ids = Column(JSON, default=list, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    owner = relationship(User, back_populates="tasks")
    # Soft-deleted subtasks are excluded by the join itself
    subtasks = relationship(
        "Subtask",
        primaryjoin="and_(Task.id == Subtask.task_id, Subtask.is_deleted == False)",
        order_by="Subtask.created_at",
        viewonly=True,
    )


class Subtask(Base):
    __tablename__ = "subtasks"

    id = Column(String(36), primary_key=True, default=new_id)
    subject = Column(String(255), nullable=False)
    deadline = Column(DateTime(timezone=True), nullable=False)
    status = Column(status_type, default=TaskStatus.PENDING, nullable=False)
    task_id = Column(String(36), ForeignKey("tasks.id"), index=True, nullable=False)
    is_deleted = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    updated_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
