from datetime import datetime
from enum import Enum
from pydantic import BaseModel, ConfigDict, Field, field_validator

from task_api.common.current_datetime import as_utc


class TaskStatus(str, Enum):
    PENDING = "Pending"
    IN_PROGRESS = "In Progress"
    COMPLETED = "Completed"


class SortField(str, Enum):
    DUE_DATE = "due_date"
    CREATED_AT = "created_at"
    UPDATED_AT = "updated_at"
    TITLE = "title"
    STATUS = "status"


class SortDirection(str, Enum):
    ASC = "asc"
    DESC = "desc"


class Task(BaseModel):
    id: str
    title: str
    description: str | None = None
    status: TaskStatus = TaskStatus.PENDING
    due_date: datetime | None = None
    owner_id: str
    created_at: datetime
    updated_at: datetime

    @field_validator("due_date", "created_at", "updated_at")
    def normalize_to_utc(cls, v: datetime | None):
        return as_utc(v) if v is not None else None


class TaskUpdate(BaseModel):
    title: str | None = None
    description: str | None = None
    status: TaskStatus | None = None
    due_date: datetime | None = None

    @field_validator("due_date")
    def normalize_to_utc(cls, v: datetime | None):
        return as_utc(v) if v is not None else None


class TaskQuery(BaseModel):
    owner_id: str
    status: str | None = None
    due_date_after: datetime | None = None
    due_date_before: datetime | None = None
    search: str | None = None
    sort_field: SortField = SortField.CREATED_AT
    sort_direction: SortDirection = SortDirection.DESC
    page: int = Field(1, ge=1)
    limit: int = Field(10, ge=1, le=50)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.limit

    @property
    def has_due_date_range(self) -> bool:
        return self.due_date_after is not None or self.due_date_before is not None


class TaskQueryResult(BaseModel):
    tasks: list[Task]
    total: int


class CreateTaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    status: str | None = None
    due_date: datetime | None = Field(None, alias="dueDate")


class UpdateTaskRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    title: str | None = None
    description: str | None = None
    status: str | None = None
    due_date: datetime | None = Field(None, alias="dueDate")


class TaskSummary(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str = Field(alias="ID")
    title: str = Field(alias="Title")
    status: TaskStatus = Field(alias="Status")
    due_date: datetime | None = Field(alias="DueDate")
    created_at: datetime = Field(alias="CreatedAt")
    updated_at: datetime = Field(alias="UpdatedAt")


class TaskDetail(TaskSummary):
    description: str | None = Field(alias="Description")


class TaskListResponse(BaseModel):
    tasks: list[TaskSummary]
    page: int
    limit: int
    total: int


class DeleteTaskResponse(BaseModel):
    message: str
