"""Project domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import field_validator

from ...schemas import CamelModel, StaffSummary
from ...shared.validators import validate_min_length, validate_required
from ..ticket.schemas import TicketPriority

ProjectStatus = Literal["To Do", "In Progress", "Waiting for Review", "Done"]


class ProjectCreate(CamelModel):
    title: str
    description: str
    priority: TicketPriority = "Medium"
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None
    ticket_id: Optional[int] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required(v, "Title")

    @field_validator("description")
    @classmethod
    def check_description(cls, v):
        return validate_min_length(v, 10, "Description")


class ProjectListInput(CamelModel):
    status: Optional[ProjectStatus] = None
    priority: Optional[TicketPriority] = None
    assigned_to_me: bool = False


class ProjectUpdate(CamelModel):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TicketPriority] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None

    @field_validator("description")
    @classmethod
    def check_description(cls, v):
        return validate_min_length(v, 10, "Description") if v is not None else v


class ProjectStatusInput(CamelModel):
    id: int
    status: ProjectStatus


class ProjectAssignInput(CamelModel):
    id: int
    assigned_to_id: Optional[int] = None


class ConvertTicketInput(CamelModel):
    ticket_id: int
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TicketPriority] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None

    @field_validator("description")
    @classmethod
    def check_description(cls, v):
        return validate_min_length(v, 10, "Description") if v is not None else v


class ProjectBoardInput(CamelModel):
    project_id: int


class ColumnCreate(CamelModel):
    project_id: int
    name: str
    color: str = "#3b82f6"

    @field_validator("name")
    @classmethod
    def check_name(cls, v):
        return validate_required(v, "Column name")


class ColumnUpdate(CamelModel):
    id: int
    name: Optional[str] = None
    color: Optional[str] = None
    order: Optional[int] = None


class TaskCreate(CamelModel):
    project_id: int
    column_id: int
    title: str
    description: Optional[str] = None
    priority: TicketPriority = "Medium"
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required(v, "Task title")


class TaskUpdate(CamelModel):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    priority: Optional[TicketPriority] = None
    assigned_to_id: Optional[int] = None
    due_date: Optional[datetime] = None


class TaskMoveInput(CamelModel):
    task_id: int
    column_id: int
    order: Optional[int] = None


class TaskResponse(CamelModel):
    id: int
    project_id: int
    column_id: int
    title: str
    description: Optional[str] = None
    priority: str
    due_date: Optional[datetime] = None
    order: int
    assigned_to: Optional[StaffSummary] = None


class ColumnResponse(CamelModel):
    id: int
    project_id: int
    name: str
    color: str
    order: int


class BoardColumnResponse(ColumnResponse):
    tasks: list[TaskResponse] = []


class ProjectResponse(CamelModel):
    id: int
    title: str
    description: str
    status: str
    priority: str
    ticket_id: Optional[int] = None
    due_date: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[StaffSummary] = None
    assigned_to: Optional[StaffSummary] = None


class ProjectDetailResponse(ProjectResponse):
    columns: list[ColumnResponse] = []


class ProjectBoardResponse(CamelModel):
    project: ProjectResponse
    columns: list[BoardColumnResponse]
