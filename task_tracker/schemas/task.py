from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from task_tracker.models.tasks import TaskStatus
from task_tracker.utils.validation import parse_date, reject_blank, require_future


# ── Subtask schemas ─────────────────────────────────────

class SubtaskCreate(BaseModel):
    subject: str = Field(..., min_length=1, max_length=255)
    deadline: datetime
    status: TaskStatus = TaskStatus.PENDING

    @field_validator("subject", mode="before")
    @classmethod
    def non_blank_subject(cls, v):
        return reject_blank(v)

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v):
        return parse_date(v)

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v):
        return TaskStatus.PENDING if v is None else v

    @field_validator("deadline")
    @classmethod
    def future_deadline(cls, v: datetime) -> datetime:
        return require_future(v)


class SubtaskReplace(BaseModel):
    subtasks: list[SubtaskCreate]


class Subtask(BaseModel):
    id: str
    subject: str
    deadline: datetime
    status: TaskStatus
    task_id: str
    is_deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True


# ── Task schemas ────────────────────────────────────────

class TaskCreate(BaseModel):
    subject: str = Field(..., min_length=1, max_length=255)
    deadline: datetime
    status: TaskStatus

    @field_validator("subject", mode="before")
    @classmethod
    def non_blank_subject(cls, v):
        return reject_blank(v)

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v):
        return parse_date(v)

    @field_validator("deadline")
    @classmethod
    def future_deadline(cls, v: datetime) -> datetime:
        return require_future(v)


class TaskUpdate(BaseModel):
    """Keys left out, or sent as null, keep their stored value."""
    subject: str | None = Field(None, min_length=1, max_length=255)
    deadline: datetime | None = None
    status: TaskStatus | None = None

    @field_validator("subject", mode="before")
    @classmethod
    def non_blank_subject(cls, v):
        return reject_blank(v)

    @field_validator("deadline", mode="before")
    @classmethod
    def parse_deadline(cls, v):
        return parse_date(v)

    @field_validator("deadline")
    @classmethod
    def future_deadline(cls, v: datetime | None) -> datetime | None:
        if v is None:
            return v
        return require_future(v)

    def changes(self) -> dict:
        return {k: v for k, v in self.model_dump(exclude_unset=True).items() if v is not None}


class Task(BaseModel):
    id: str
    subject: str
    deadline: datetime
    status: TaskStatus
    created_by: str
    subtask_ids: list[str] = []
    subtasks: list[Subtask] = []
    is_deleted: bool = False
    created_at: datetime | None = None
    updated_at: datetime | None = None

    class Config:
        from_attributes = True
