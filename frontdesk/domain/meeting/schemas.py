"""Meeting domain schemas"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import field_validator, model_validator

from ...schemas import CamelModel, StaffSummary
from ...shared.validators import to_naive_utc, validate_required

MeetingStatus = Literal["scheduled", "in-progress", "completed", "cancelled"]
CalendarProvider = Literal["google", "outlook"]


class MeetingCreate(CamelModel):
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    expected_visitors: list[str] = []

    @field_validator("title")
    @classmethod
    def check_title(cls, v):
        return validate_required(v, "Title")

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, v):
        return to_naive_utc(v)

    @model_validator(mode="after")
    def check_range(self):
        if self.end_time <= self.start_time:
            raise ValueError("End time must be after start time")
        return self


class MeetingListInput(CamelModel):
    status: Optional[MeetingStatus] = None


class MeetingUpdate(CamelModel):
    id: int
    title: Optional[str] = None
    description: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None
    location: Optional[str] = None
    status: Optional[MeetingStatus] = None
    expected_visitors: Optional[list[str]] = None

    @field_validator("start_time", "end_time")
    @classmethod
    def normalize_time(cls, v):
        return to_naive_utc(v)


class LinkVisitorInput(CamelModel):
    meeting_id: int
    visitor_id: int


class CalendarAuthInput(CamelModel):
    provider: CalendarProvider


class CalendarAuthUrl(CamelModel):
    url: str


class CalendarStatus(CamelModel):
    google: bool
    outlook: bool
    custom: bool


class MeetingResponse(CamelModel):
    id: int
    title: str
    description: Optional[str] = None
    start_time: datetime
    end_time: datetime
    location: Optional[str] = None
    status: str
    expected_visitors: list[str] = []
    google_calendar_event_id: Optional[str] = None
    outlook_calendar_event_id: Optional[str] = None
    created_at: Optional[datetime] = None
    host: Optional[StaffSummary] = None
