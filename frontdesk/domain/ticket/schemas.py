"""Ticket domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import field_validator

from ...schemas import CamelModel, StaffSummary
from ...shared.validators import validate_min_length, validate_required

TicketPriority = Literal["Low", "Medium", "High", "Critical"]
TicketCategory = Literal["Hardware", "Software", "Network", "Access", "Other"]
TicketStatus = Literal["Open", "In Progress", "Resolved", "Closed"]


class TicketCreate(CamelModel):
    title: str
    description: str
    priority: TicketPriority = "Medium"
    category: Optional[TicketCategory] = None

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required(v, "Title")

    @field_validator("description")
    @classmethod
    def check_description(cls, v):
        return validate_min_length(v, 10, "Description")


class TicketListInput(CamelModel):
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    assigned_to_me: bool = False


class TicketUpdate(CamelModel):
    id: int
    status: Optional[TicketStatus] = None
    priority: Optional[TicketPriority] = None
    assigned_to_id: Optional[int] = None
    resolution: Optional[str] = None
    category: Optional[TicketCategory] = None


class AddMessageInput(CamelModel):
    ticket_id: int
    message: str
    is_internal: bool = False

    @field_validator("message")
    @classmethod
    def check_message(cls, v):
        return validate_required(v, "Message")


class TicketMessageResponse(CamelModel):
    id: int
    message: str
    is_internal: bool
    created_at: Optional[datetime] = None
    sender: Optional[StaffSummary] = None


class TicketResponse(CamelModel):
    id: int
    ticket_number: str
    title: str
    description: str
    priority: str
    category: Optional[str] = None
    status: str
    resolution: Optional[str] = None
    resolved_at: Optional[datetime] = None
    closed_at: Optional[datetime] = None
    converted_to_project: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    created_by: Optional[StaffSummary] = None
    assigned_to: Optional[StaffSummary] = None


class TicketDetailResponse(TicketResponse):
    messages: list[TicketMessageResponse] = []


class TicketMetrics(CamelModel):
    total_open: int
    total_in_progress: int
    total_resolved: int
    total_closed: int
    critical_open: int
    high_open: int
    avg_response_time_hours: int
    tickets_by_department: dict[str, int]
