from datetime import datetime
from typing import Optional

from pydantic import BaseModel, Field
from pydantic.alias_generators import to_camel


class CamelModel(BaseModel):
    """Snake_case in Python, camelCase on the wire"""

    class Config:
        from_attributes = True
        alias_generator = to_camel
        populate_by_name = True


class OrganizationResponse(CamelModel):
    id: int
    clerk_org_id: str
    name: str
    slug: str
    logo_url: Optional[str] = None
    primary_color: Optional[str] = None
    secondary_color: Optional[str] = None
    email: Optional[str] = None
    phone: Optional[str] = None
    address: Optional[str] = None
    website: Optional[str] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None


class StaffResponse(CamelModel):
    # Calendar tokens are never serialized
    id: int
    clerk_user_id: Optional[str] = None
    organization_id: int
    full_name: str
    email: Optional[str] = None
    department: Optional[str] = None
    title: Optional[str] = None
    role: str
    is_active: bool
    can_login: bool
    username: Optional[str] = None
    notify_email: bool
    notify_sms: bool = Field(serialization_alias="notifySMS")
    notify_on_visitor_arrival: bool
    google_calendar_connected: bool
    outlook_calendar_connected: bool
    created_at: Optional[datetime] = None


class StaffSummary(CamelModel):
    id: int
    full_name: str
    email: Optional[str] = None
    department: Optional[str] = None


class SuccessResponse(CamelModel):
    success: bool = True
    message: Optional[str] = None


class IdInput(CamelModel):
    id: int
