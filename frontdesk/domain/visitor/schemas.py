"""Visitor domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import field_validator

from ...schemas import CamelModel
from ...shared.validators import validate_email, validate_required


class VisitorCreate(CamelModel):
    full_name: str
    company: str
    email: str
    phone: str
    photo_url: Optional[str] = None
    whom_to_see: str
    reason_for_visit: Optional[str] = None

    @field_validator("full_name", "company", "phone", "whom_to_see")
    @classmethod
    def check_required(cls, v, info):
        return validate_required(v, info.field_name.replace("_", " ").capitalize())

    @field_validator("email")
    @classmethod
    def check_email(cls, v):
        return validate_email(validate_required(v, "email"))


class VisitorListInput(CamelModel):
    filter: Literal["today", "week", "all"] = "today"


class VisitorSearchInput(CamelModel):
    query: str
    organization_id: Optional[str] = None


class VisitorExportInput(CamelModel):
    start_date: Optional[datetime] = None
    end_date: Optional[datetime] = None


class CheckInLogResponse(CamelModel):
    status: str
    timestamp: datetime


class VisitorResponse(CamelModel):
    id: int
    full_name: str
    company: str
    email: str
    phone: str
    photo_url: Optional[str] = None
    whom_to_see: str
    reason_for_visit: Optional[str] = None
    host_staff_id: Optional[int] = None
    meeting_id: Optional[int] = None
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    host_response_status: Optional[str] = None
    host_response_time: Optional[datetime] = None
    host_response_note: Optional[str] = None


class VisitorDetailResponse(VisitorResponse):
    check_in_logs: list[CheckInLogResponse] = []


class VisitorExportRow(CamelModel):
    id: int
    full_name: str
    company: str
    email: str
    phone: str
    whom_to_see: str
    reason_for_visit: Optional[str] = None
    check_in_time: datetime
    check_out_time: Optional[datetime] = None
    duration_minutes: Optional[int] = None
